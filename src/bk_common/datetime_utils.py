"""UTC datetime utilities."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def to_iso(value: datetime | None) -> str:
    """ISO8601 string for API payloads; empty string when the DB gave no value."""
    return value.isoformat() if value is not None else ""
