"""
Health and status models for zone data feeds.

This module defines feed-health structures: how available a zone's
reading feed was over the trailing window, and how fresh a timestamp is.

Models:
    ServiceStatus: Feed status enumeration
    ServiceMetrics: Availability metrics for one zone
    FreshnessBucket: Age bucket enumeration
    Freshness: Age classification of a timestamp
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class ServiceStatus(str, Enum):
    """
    Reading feed status.

    Attributes:
        ONLINE: Feed delivers at least 80% of expected readings.
        DEGRADED: Feed delivers between 50% and 80% of expected readings.
        OFFLINE: Feed delivers less than 50% of expected readings.
    """

    ONLINE = "online"
    DEGRADED = "degraded"
    OFFLINE = "offline"


class ServiceMetrics(BaseModel):
    """
    Availability metrics for a zone's reading feed.

    Recomputed from the supplied batch on every call; nothing is kept
    between calls.

    Attributes:
        zone: Zone identifier.
        availability_pct: Actual / expected readings in the window, capped at 100.
        unavailability_pct: 100 - availability_pct.
        expected_readings: Readings expected in the window.
        actual_readings: Readings received in the window.
        missed_readings: max(0, expected - actual).
        last_reading_at: Most recent reading timestamp (any age), or None.
        minutes_since_last_reading: Whole minutes since last_reading_at.
        status: Derived feed status.

    Example:
        >>> metrics = ServiceMetrics(
        ...     zone="north-ridge",
        ...     availability_pct=100.0,
        ...     unavailability_pct=0.0,
        ...     expected_readings=24,
        ...     actual_readings=24,
        ...     missed_readings=0,
        ...     last_reading_at=datetime.now(timezone.utc),
        ...     minutes_since_last_reading=12,
        ...     status=ServiceStatus.ONLINE,
        ... )
    """

    model_config = {"frozen": True, "extra": "forbid"}

    zone: str = Field(
        ...,
        description="Zone identifier",
        min_length=1,
    )
    availability_pct: float = Field(
        ...,
        description="Percent of expected readings received",
        ge=0.0,
        le=100.0,
    )
    unavailability_pct: float = Field(
        ...,
        description="Percent of expected readings missing",
        ge=0.0,
        le=100.0,
    )
    expected_readings: float = Field(
        ...,
        description="Readings expected in the window",
        gt=0.0,
    )
    actual_readings: int = Field(
        ...,
        description="Readings received in the window",
        ge=0,
    )
    missed_readings: int = Field(
        ...,
        description="Expected readings that did not arrive",
        ge=0,
    )
    last_reading_at: Optional[datetime] = Field(
        default=None,
        description="Most recent reading timestamp, regardless of age",
    )
    minutes_since_last_reading: Optional[int] = Field(
        default=None,
        description="Whole minutes since the last reading",
    )
    status: ServiceStatus = Field(
        ...,
        description="Derived feed status",
    )

    @model_validator(mode="after")
    def validate_last_reading(self) -> "ServiceMetrics":
        """Validate last-reading fields are set together."""
        if (self.last_reading_at is None) != (self.minutes_since_last_reading is None):
            raise ValueError(
                "last_reading_at and minutes_since_last_reading must both be set or both be None"
            )
        return self


class FreshnessBucket(str, Enum):
    """
    Age bucket of a timestamp, in ascending age order.

    Attributes:
        FRESH: Younger than 5 minutes.
        RECENT: 5 minutes to under 1 hour.
        STALE: 1 hour to under 1 day.
        OLD: 1 day or older.
        UNKNOWN: No timestamp available.
    """

    FRESH = "fresh"
    RECENT = "recent"
    STALE = "stale"
    OLD = "old"
    UNKNOWN = "unknown"


class Freshness(BaseModel):
    """
    Age classification of a timestamp relative to now.

    Attributes:
        bucket: Age bucket.
        age_minutes: Age in minutes, or None for an absent timestamp.
        label: Human-relative age text ("Just now", "12m ago", "3h ago").
    """

    model_config = {"frozen": True, "extra": "forbid"}

    bucket: FreshnessBucket = Field(
        ...,
        description="Age bucket",
    )
    age_minutes: Optional[float] = Field(
        default=None,
        description="Age in minutes",
        ge=0.0,
    )
    label: str = Field(
        ...,
        description="Human-relative age text",
    )
