from datetime import datetime, time, timedelta, timezone

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_timestamp(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def now_timestamp() -> str:
    return to_timestamp(utcnow())


def cutoff_timestamp(**delta) -> str:
    """Timestamp string for ``now - timedelta(**delta)``, comparable against stored columns."""
    return to_timestamp(utcnow() - timedelta(**delta))


def parse_deadline(value: str) -> datetime:
    """Parse an application deadline.

    A bare date (``2026-12-31``) is open until the end of that day, UTC.
    Naive datetimes are taken as UTC.
    """
    value = value.strip()
    if len(value) == 10:
        day = datetime.strptime(value, "%Y-%m-%d").date()
        return datetime.combine(day, time.max, tzinfo=timezone.utc)
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
