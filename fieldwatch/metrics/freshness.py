"""
Freshness classification for timestamps.

Maps the age of a timestamp to one of four buckets plus a sentinel for
absent timestamps:

    fresh   [0, 5) minutes
    recent  [5, 60) minutes
    stale   [60, 1440) minutes
    old     [1440, inf) minutes
    unknown no timestamp

Used wherever an alert, reading or report needs a human-relative age label.

Example:
    >>> now = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
    >>> classify(now - timedelta(minutes=4), now).bucket
    <FreshnessBucket.FRESH: 'fresh'>
"""

from datetime import datetime
from typing import Optional

from fieldwatch.models.health import Freshness, FreshnessBucket
from fieldwatch.timeutils import as_utc, resolve_now

FRESH_BEFORE_MINUTES = 5.0
RECENT_BEFORE_MINUTES = 60.0
STALE_BEFORE_MINUTES = 1440.0


def classify(
    timestamp: Optional[datetime],
    now: Optional[datetime] = None,
    fresh_before: float = FRESH_BEFORE_MINUTES,
    recent_before: float = RECENT_BEFORE_MINUTES,
    stale_before: float = STALE_BEFORE_MINUTES,
) -> Freshness:
    """
    Classify how stale a timestamp is relative to now.

    Timestamps in the future are treated as age zero. Naive timestamps and
    reference times are taken as UTC.

    Args:
        timestamp: The timestamp to classify, or None.
        now: Reference time (defaults to current UTC time).
        fresh_before: Upper bound (exclusive) of the fresh bucket, minutes.
        recent_before: Upper bound (exclusive) of the recent bucket, minutes.
        stale_before: Upper bound (exclusive) of the stale bucket, minutes.

    Returns:
        Freshness: Bucket, age in minutes and a human-relative label.
    """
    if timestamp is None:
        return Freshness(bucket=FreshnessBucket.UNKNOWN, age_minutes=None, label="Unknown")

    now = resolve_now(now)
    age_minutes = max(0.0, (now - as_utc(timestamp)).total_seconds() / 60.0)

    if age_minutes < fresh_before:
        return Freshness(bucket=FreshnessBucket.FRESH, age_minutes=age_minutes, label="Just now")
    if age_minutes < recent_before:
        return Freshness(
            bucket=FreshnessBucket.RECENT,
            age_minutes=age_minutes,
            label=f"{int(age_minutes)}m ago",
        )
    if age_minutes < stale_before:
        return Freshness(
            bucket=FreshnessBucket.STALE,
            age_minutes=age_minutes,
            label=f"{int(age_minutes // 60)}h ago",
        )
    return Freshness(
        bucket=FreshnessBucket.OLD,
        age_minutes=age_minutes,
        label=f"{int(age_minutes // 1440)}d ago",
    )


class FreshnessClassifier:
    """
    Freshness classifier bound to configurable bucket boundaries.

    Example:
        >>> classifier = FreshnessClassifier()
        >>> classifier.classify(None).bucket
        <FreshnessBucket.UNKNOWN: 'unknown'>
    """

    def __init__(
        self,
        fresh_before: float = FRESH_BEFORE_MINUTES,
        recent_before: float = RECENT_BEFORE_MINUTES,
        stale_before: float = STALE_BEFORE_MINUTES,
    ) -> None:
        if not 0 < fresh_before <= recent_before <= stale_before:
            raise ValueError(
                "freshness boundaries must satisfy 0 < fresh <= recent <= stale, got "
                f"{fresh_before}, {recent_before}, {stale_before}"
            )
        self.fresh_before = fresh_before
        self.recent_before = recent_before
        self.stale_before = stale_before

    def classify(self, timestamp: Optional[datetime], now: Optional[datetime] = None) -> Freshness:
        """Classify a timestamp with this classifier's boundaries."""
        return classify(
            timestamp,
            now,
            fresh_before=self.fresh_before,
            recent_before=self.recent_before,
            stale_before=self.stale_before,
        )
