"""UTC helpers. Every timestamp the engine stores or compares is timezone-aware UTC."""

from datetime import UTC, datetime, timedelta


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Normalize a datetime read from the database to aware UTC.

    Naive values are taken to be UTC already (some drivers drop tzinfo);
    aware values are converted. None passes through.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def utc_days_from_now(days: int) -> datetime:
    """Aware UTC datetime `days` whole days from now; used for task due dates."""
    return utc_now() + timedelta(days=days)
