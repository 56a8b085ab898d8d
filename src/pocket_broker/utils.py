"""Shared time helpers.

Trading-domain timestamps are ISO-8601 UTC strings with millisecond precision
and a trailing ``Z`` so that string comparison matches chronological order.
Auth-side timestamps are timezone-aware UTC datetimes.
"""
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Aware UTC datetime; naive values are taken to be UTC already."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_iso(dt: datetime | None = None) -> str:
    """Format a datetime (default: now) as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    dt = as_utc(dt or utcnow())
    # %Y is not zero-padded below year 1000 on every platform.
    return (
        f"{dt.year:04d}-"
        + dt.strftime("%m-%dT%H:%M:%S.")
        + f"{dt.microsecond // 1000:03d}Z"
    )


def parse_iso_datetime(value: str) -> datetime | None:
    """Parse an ISO date or datetime string to naive UTC; None if unparseable."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
