from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Mapping, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required", field_name)
    return str(value).strip()


def require_choice(value: Any, field_name: str, choices: Iterable[str]) -> str:
    allowed = [str(c) for c in choices]
    if str(value) not in allowed:
        raise ValidationError(f"{field_name} must be one of: {', '.join(allowed)}", field_name)
    return str(value)


def require_date(payload: Mapping[str, Any], field_name: str) -> date:
    raw = payload.get(field_name)
    if isinstance(raw, date):
        return raw
    try:
        return parse_iso_date(require_non_empty(raw, field_name))
    except ValueError:
        raise ValidationError(f"{field_name} must be a date in YYYY-MM-DD format", field_name)


def require_json_object(body: Any) -> dict:
    """Parsed request body as a dict; a missing body counts as empty."""
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body
