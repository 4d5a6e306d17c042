"""
UTC handling for timestamps entering the monitoring core.

Readings, findings and reference times may arrive timezone-naive (e.g. an
ISO string without an offset). Naive values are taken to be UTC so that
every comparison inside the core is between aware datetimes.
"""

from datetime import datetime, timezone
from typing import Optional


def as_utc(value: datetime) -> datetime:
    """
    Attach UTC to a naive datetime.

    Args:
        value: Naive or aware datetime.

    Returns:
        datetime: The same instant as an aware datetime; aware input is
            returned unchanged.
    """
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def resolve_now(now: Optional[datetime] = None) -> datetime:
    """Reference time as an aware datetime (defaults to current UTC time)."""
    if now is None:
        return datetime.now(timezone.utc)
    return as_utc(now)
