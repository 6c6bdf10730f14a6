from __future__ import annotations

from typing import Any, Mapping, Optional

from ..common.datetime_utils import utc_now
from ..common.validators import require_choice, require_date
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import BusinessLogicError, ValidationError
from ..resources.service import ResourceService

# set only by approve/reject
_DECISION_FIELDS = ("status", "approved_by", "approved_at", "rejection_reason")


def _date_range(payload: Mapping[str, Any]):
    start = require_date(payload, "start_date")
    end = require_date(payload, "end_date")
    if end < start:
        raise ValidationError("end_date must be on or after start_date", "end_date")
    return start, end


class LeaveService(ResourceService):
    """Leave requests: created pending, then approved or rejected exactly once.

    Edits and decisions are conditional writes on ``status = pending``, so a
    request that was decided in the meantime is never overwritten.
    """

    def create(self, payload: Mapping[str, Any]) -> dict:
        start, end = _date_range(payload)
        require_choice(payload.get("type"), "type", [t.value for t in LeaveType])

        data = dict(payload)
        data["start_date"] = start
        data["end_date"] = end
        data["days_requested"] = (end - start).days + 1
        data["status"] = LeaveStatus.PENDING.value
        return super().create(data)

    def update(self, leave_id: int, payload: Mapping[str, Any]) -> dict:
        for field_name in _DECISION_FIELDS:
            if field_name in payload:
                raise ValidationError(f"{field_name} can only be changed by approving or rejecting the request", field_name)
        data = {k: v for k, v in payload.items() if k != "days_requested"}
        if not data:
            raise ValidationError("Request body must not be empty")
        if "type" in data:
            require_choice(data["type"], "type", [t.value for t in LeaveType])

        leave = self._repo.require(leave_id)
        conditions = {"status": LeaveStatus.PENDING.value}
        if "start_date" in data or "end_date" in data:
            start, end = _date_range({**leave, **data})
            data["start_date"] = start
            data["end_date"] = end
            data["days_requested"] = (end - start).days + 1
            # the range must still be the one days_requested was computed from
            conditions["start_date"] = leave["start_date"]
            conditions["end_date"] = leave["end_date"]

        return self._write_pending(leave_id, conditions, data, "update_leave")

    def approve(self, leave_id: int, *, approver_id: int) -> dict:
        return self._write_pending(
            leave_id,
            {"status": LeaveStatus.PENDING.value},
            {
                "status": LeaveStatus.APPROVED.value,
                "approved_by": approver_id,
                "approved_at": utc_now().replace(tzinfo=None),
            },
            "approve_leave",
        )

    def reject(self, leave_id: int, *, approver_id: int, reason: Optional[str] = None) -> dict:
        return self._write_pending(
            leave_id,
            {"status": LeaveStatus.PENDING.value},
            {
                "status": LeaveStatus.REJECTED.value,
                "approved_by": approver_id,
                "approved_at": utc_now().replace(tzinfo=None),
                "rejection_reason": reason,
            },
            "reject_leave",
        )

    def _write_pending(self, leave_id: int, conditions: Mapping[str, Any], data: Mapping[str, Any], operation: str) -> dict:
        row = self._repo.update_if(leave_id, conditions, data)
        if row is not None:
            return row
        current = self._repo.require(leave_id)
        if current.get("status") != LeaveStatus.PENDING.value:
            raise BusinessLogicError(
                f"Only pending leave requests can be changed (current status: {current.get('status')})",
                operation,
            )
        raise BusinessLogicError("Leave request was modified concurrently, please retry", operation)
