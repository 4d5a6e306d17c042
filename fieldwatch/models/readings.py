"""
Sensor reading model for monitored zones.

A Reading is a single environmental sample produced by a zone's sensor
feed. Readings are immutable once produced; the monitoring core never
mutates them.

Models:
    Reading: Timestamped moisture / erosion / vegetation sample
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from fieldwatch.timeutils import as_utc


class Reading(BaseModel):
    """
    Environmental sensor reading for a zone.

    Attributes:
        zone: Monitored zone identifier.
        timestamp: When the reading was taken; naive values are taken as UTC.
        moisture: Soil moisture level in percent (0-100).
        erosion: Erosion index (>= 0).
        vegetation: Vegetation index (0-1).

    Example:
        >>> reading = Reading(
        ...     zone="north-ridge",
        ...     timestamp=datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc),
        ...     moisture=31.5,
        ...     erosion=0.42,
        ...     vegetation=0.67,
        ... )
    """

    model_config = {"frozen": True, "extra": "forbid"}

    zone: str = Field(
        ...,
        description="Monitored zone identifier",
        min_length=1,
        max_length=100,
    )
    timestamp: datetime = Field(
        ...,
        description="When the reading was taken",
    )
    moisture: float = Field(
        ...,
        description="Soil moisture level in percent",
        ge=0.0,
        le=100.0,
    )
    erosion: float = Field(
        ...,
        description="Erosion index",
        ge=0.0,
    )
    vegetation: float = Field(
        ...,
        description="Vegetation index",
        ge=0.0,
        le=1.0,
    )

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        """Treat a naive timestamp as UTC."""
        return as_utc(v)

    def metric(self, name: str) -> float:
        """
        Get a metric value by name.

        Args:
            name: One of "moisture", "erosion", "vegetation".

        Returns:
            float: The metric value.

        Raises:
            KeyError: If the metric name is unknown.
        """
        if name not in ("moisture", "erosion", "vegetation"):
            raise KeyError(name)
        return getattr(self, name)
