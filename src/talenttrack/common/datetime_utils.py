from __future__ import annotations

from datetime import date, datetime, timezone


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def utc_now() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def parse_duration(value: str) -> int:
    """Parse '7d', '12h', '30m', '45s' or plain seconds into seconds."""
    value = str(value).strip().lower()
    units = {"d": 86400, "h": 3600, "m": 60, "s": 1}
    if value and value[-1] in units:
        return int(value[:-1]) * units[value[-1]]
    return int(value)
