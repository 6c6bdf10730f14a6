from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.validators import require_choice
from ..core.constants import DEFAULT_PAGE_LIMIT
from ..core.exceptions import ValidationError
from ..database.repository import SqlAlchemyRepository

_PAGING_KEYS = {"limit", "offset", "order_by"}


def _int_arg(args: Mapping[str, Any], key: str, default: int) -> int:
    raw = args.get(key)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be an integer", key)


class ResourceService:
    """Plain CRUD use cases for one resource.

    ``required`` lists the fields a create payload must carry and ``choices``
    restricts enumerated fields; everything else is validated by the
    repository (unknown keys are ignored).
    """

    def __init__(
        self,
        repo: SqlAlchemyRepository,
        *,
        required: Sequence[str] = (),
        choices: Optional[Mapping[str, Iterable[Any]]] = None,
    ):
        self._repo = repo
        self._required = tuple(required)
        self._choices = {k: [getattr(c, "value", c) for c in v] for k, v in (choices or {}).items()}

    def _check_choices(self, payload: Mapping[str, Any]) -> None:
        for field_name, allowed in self._choices.items():
            if payload.get(field_name) is not None:
                require_choice(payload[field_name], field_name, allowed)

    @property
    def name(self) -> str:
        return self._repo.name

    def list(self, args: Optional[Mapping[str, Any]] = None) -> dict:
        args = dict(args or {})
        limit = _int_arg(args, "limit", DEFAULT_PAGE_LIMIT)
        offset = _int_arg(args, "offset", 0)
        order_by = args.get("order_by") or "id"
        filters = {k: v for k, v in args.items() if k not in _PAGING_KEYS}

        rows = self._repo.list(filters=filters, limit=limit, offset=offset, order_by=order_by)
        return {"items": rows, "total": self._repo.count(**filters), "limit": limit, "offset": offset}

    def get(self, record_id: int) -> dict:
        return self._repo.require(record_id)

    def create(self, payload: Mapping[str, Any]) -> dict:
        for field_name in self._required:
            value = payload.get(field_name)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(f"{field_name} is required", field_name)
        self._check_choices(payload)
        return self._repo.create(payload)

    def update(self, record_id: int, payload: Mapping[str, Any]) -> dict:
        if not payload:
            raise ValidationError("Request body must not be empty")
        self._check_choices(payload)
        return self._repo.update(record_id, payload)

    def delete(self, record_id: int) -> None:
        self._repo.delete(record_id)
