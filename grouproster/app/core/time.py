"""Time utilities for timezone-aware UTC datetimes."""

from datetime import UTC, datetime, timedelta, timezone


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for defaults and onupdate hooks."""
    return datetime.now(UTC)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from backends that drop tzinfo (SQLite)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def class_start_at(class_date: str, class_time: str, utc_offset_hours: int) -> datetime | None:
    """Combine a YYYY-MM-DD date and HH:MM time in the academy's local offset into UTC."""
    try:
        local = datetime.strptime(f"{class_date}T{class_time}", "%Y-%m-%dT%H:%M")
    except ValueError:
        return None
    return local.replace(tzinfo=timezone(timedelta(hours=utc_offset_hours))).astimezone(UTC)
