from __future__ import annotations

import pytest

from talenttrack.core.exceptions import BusinessLogicError, ValidationError
from talenttrack.database.models import Leave, Notification
from talenttrack.database.repository import SqlAlchemyRepository
from talenttrack.leaves.service import LeaveService
from talenttrack.notifications.service import NotificationService


@pytest.fixture
def leaves(synced_db):
    return LeaveService(
        SqlAlchemyRepository(synced_db, Leave, name="Leave request"),
        required=("employee_id", "type", "start_date", "end_date"),
    )


def _request(**overrides):
    data = {"employee_id": 1, "type": "vacation", "start_date": "2026-07-06", "end_date": "2026-07-10"}
    data.update(overrides)
    return data


def test_create_computes_days_and_starts_pending(leaves):
    leave = leaves.create(_request(status="approved", days_requested=99))

    assert leave["days_requested"] == 5
    assert leave["status"] == "pending"


def test_single_day_leave(leaves):
    assert leaves.create(_request(end_date="2026-07-06"))["days_requested"] == 1


def test_end_before_start_is_rejected(leaves):
    with pytest.raises(ValidationError) as exc_info:
        leaves.create(_request(end_date="2026-07-01"))

    assert exc_info.value.field == "end_date"


def test_unknown_leave_type_is_rejected(leaves):
    with pytest.raises(ValidationError):
        leaves.create(_request(type="sabbatical"))


def test_approve_records_approver(leaves):
    leave = leaves.create(_request())

    approved = leaves.approve(leave["id"], approver_id=3)

    assert approved["status"] == "approved"
    assert approved["approved_by"] == 3
    assert approved["approved_at"] is not None


def test_reject_keeps_reason(leaves):
    leave = leaves.create(_request())

    rejected = leaves.reject(leave["id"], approver_id=3, reason="Peak season")

    assert rejected["status"] == "rejected"
    assert rejected["rejection_reason"] == "Peak season"


def test_decided_leave_cannot_change_again(leaves):
    leave = leaves.create(_request())
    leaves.approve(leave["id"], approver_id=3)

    with pytest.raises(BusinessLogicError) as exc_info:
        leaves.reject(leave["id"], approver_id=3)

    assert exc_info.value.operation == "reject_leave"
    assert exc_info.value.status_code == 422


def test_mark_notification_read(synced_db):
    svc = NotificationService(SqlAlchemyRepository(synced_db, Notification, name="Notification"))
    note = svc.create({"user_id": 1, "title": "Hi", "message": "Welcome", "metadata": {"k": 1}})

    read = svc.mark_read(note["id"])

    assert note["is_read"] is False
    assert note["metadata"] == {"k": 1}
    assert read["is_read"] is True
    assert read["read_at"] is not None


@pytest.mark.parametrize("field_name", ["status", "approved_by", "approved_at", "rejection_reason"])
def test_update_refuses_decision_fields(leaves, field_name):
    leave = leaves.create(_request())

    with pytest.raises(ValidationError) as exc_info:
        leaves.update(leave["id"], {field_name: "approved", "reason": "x"})

    assert exc_info.value.field == field_name
    assert leaves.get(leave["id"])["status"] == "pending"


def test_update_recomputes_days_from_new_range(leaves):
    leave = leaves.create(_request())

    updated = leaves.update(leave["id"], {"end_date": "2026-07-07", "days_requested": 40})

    assert updated["start_date"] == "2026-07-06"
    assert updated["end_date"] == "2026-07-07"
    assert updated["days_requested"] == 2


def test_update_rejects_inverted_range(leaves):
    leave = leaves.create(_request())

    with pytest.raises(ValidationError) as exc_info:
        leaves.update(leave["id"], {"end_date": "2026-07-01"})

    assert exc_info.value.field == "end_date"
    assert leaves.get(leave["id"])["end_date"] == "2026-07-10"


def test_update_of_decided_leave_is_refused(leaves):
    leave = leaves.create(_request())
    leaves.reject(leave["id"], approver_id=3, reason="Peak season")

    with pytest.raises(BusinessLogicError) as exc_info:
        leaves.update(leave["id"], {"reason": "please"})

    assert exc_info.value.operation == "update_leave"


def test_decision_loses_to_earlier_concurrent_decision(synced_db, leaves):
    leave = leaves.create(_request())
    # another request decided between our read and our write
    other = SqlAlchemyRepository(synced_db, Leave)
    assert other.update_if(leave["id"], {"status": "pending"}, {"status": "approved", "approved_by": 9}) is not None

    with pytest.raises(BusinessLogicError):
        leaves.reject(leave["id"], approver_id=3)

    final = leaves.get(leave["id"])
    assert final["status"] == "approved"
    assert final["approved_by"] == 9


def test_conditional_write_only_matches_once(synced_db, leaves):
    leave = leaves.create(_request())
    repo = SqlAlchemyRepository(synced_db, Leave)

    first = repo.update_if(leave["id"], {"status": "pending"}, {"status": "approved"})
    second = repo.update_if(leave["id"], {"status": "pending"}, {"status": "rejected"})

    assert first["status"] == "approved"
    assert second is None
