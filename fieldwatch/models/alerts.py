"""
Alert data models for zone monitoring.

This module defines alert-related structures including the threshold set,
evaluation findings, and active alert instances.

Models:
    AlertKind: Which threshold dimension was breached
    AlertSeverity: Severity levels (critical, warning)
    AlertCondition: Comparison conditions (gt, lt)
    ThresholdSet: Complete erosion / vegetation / moisture threshold set
    Finding: Result of evaluating one reading against one threshold
    Alert: Active alert instance owned by the AlertStore
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Mapping, Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from fieldwatch.timeutils import as_utc


class AlertKind(str, Enum):
    """
    Threshold dimension an alert refers to.

    Attributes:
        EROSION_CRITICAL: Erosion index above the critical threshold.
        VEGETATION_LOW: Vegetation index below the low threshold.
        MOISTURE_LOW: Moisture level below the low threshold.
    """

    EROSION_CRITICAL = "erosion_critical"
    VEGETATION_LOW = "vegetation_low"
    MOISTURE_LOW = "moisture_low"


class AlertSeverity(str, Enum):
    """
    Alert severity levels.

    Attributes:
        CRITICAL: Irreversible-damage signal requiring immediate attention.
        WARNING: Degraded condition requiring investigation.
    """

    CRITICAL = "critical"
    WARNING = "warning"

    @property
    def is_critical(self) -> bool:
        """Check if this is a critical severity."""
        return self == AlertSeverity.CRITICAL


class AlertCondition(str, Enum):
    """
    Comparison conditions for threshold evaluation.

    Attributes:
        GT: Greater than (value > boundary).
        LT: Less than (value < boundary).
    """

    GT = "gt"
    LT = "lt"

    def evaluate(self, value: float, boundary: float) -> bool:
        """
        Evaluate the condition.

        Args:
            value: The metric value to check.
            boundary: The boundary to compare against.

        Returns:
            bool: True if condition is met.
        """
        if self == AlertCondition.GT:
            return value > boundary
        elif self == AlertCondition.LT:
            return value < boundary
        return False

    @property
    def symbol(self) -> str:
        """Comparison operator as text."""
        return ">" if self == AlertCondition.GT else "<"


class ThresholdSet(BaseModel):
    """
    Complete threshold configuration for alert evaluation.

    All three fields are always present. Updates go through merge(), which
    returns a new complete set; a ThresholdSet is never partially defined.
    Only the shape is validated here (numeric fields); numeric sanity such
    as negative thresholds is left to the caller.

    Attributes:
        erosion_critical: Erosion index above which a critical alert fires.
        vegetation_low: Vegetation index below which a warning fires.
        moisture_low: Moisture percent below which a warning fires.

    Example:
        >>> thresholds = ThresholdSet()
        >>> stricter = thresholds.merge({"moisture_low": 30})
        >>> stricter.moisture_low
        30.0
    """

    model_config = {"frozen": True, "extra": "forbid", "strict": True}

    erosion_critical: float = Field(
        default=0.75,
        description="Erosion index above which a critical alert fires",
    )
    vegetation_low: float = Field(
        default=0.4,
        description="Vegetation index below which a warning fires",
    )
    moisture_low: float = Field(
        default=25.0,
        description="Moisture percent below which a warning fires",
    )

    def merge(self, partial: Mapping[str, Any]) -> "ThresholdSet":
        """
        Merge a partial update into a new complete threshold set.

        Args:
            partial: Subset of threshold fields to replace.

        Returns:
            ThresholdSet: New validated set (self is unchanged).

        Raises:
            pydantic.ValidationError: If a key is unknown or a value is not numeric.
        """
        return ThresholdSet.model_validate({**self.model_dump(), **dict(partial)})

    def for_kind(self, kind: AlertKind) -> float:
        """Get the threshold value backing an alert kind."""
        return getattr(self, kind.value)


class Finding(BaseModel):
    """
    Anomaly finding produced by threshold evaluation.

    Findings are derived and ephemeral: they are produced fresh on every
    evaluation and are never persisted by the core.

    Attributes:
        kind: Which threshold was breached.
        zone: Zone the reading came from.
        value: Metric value that breached the threshold.
        observed_at: Timestamp of the reading.
        severity: Severity of the breach.
        threshold: Threshold value that was crossed.
        condition: Comparison that fired.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    kind: AlertKind = Field(
        ...,
        description="Which threshold was breached",
    )
    zone: str = Field(
        ...,
        description="Zone the reading came from",
        min_length=1,
    )
    value: float = Field(
        ...,
        description="Metric value that breached the threshold",
    )
    observed_at: datetime = Field(
        ...,
        description="Timestamp of the reading",
    )
    severity: AlertSeverity = Field(
        ...,
        description="Severity of the breach",
    )
    threshold: Optional[float] = Field(
        default=None,
        description="Threshold value that was crossed",
    )
    condition: Optional[AlertCondition] = Field(
        default=None,
        description="Comparison that fired",
    )

    @field_validator("observed_at")
    @classmethod
    def normalize_observed_at(cls, v: datetime) -> datetime:
        """Treat a naive timestamp as UTC."""
        return as_utc(v)

    @property
    def key(self) -> Tuple[str, AlertKind]:
        """Composite (zone, kind) key used for alert deduplication."""
        return (self.zone, self.kind)


class Alert(BaseModel):
    """
    Active alert instance.

    Owned exclusively by the AlertStore. At most one active alert exists per
    (zone, kind); a new finding for the same pair refreshes value and
    created_at in place and keeps alert_id.

    Attributes:
        alert_id: Opaque identifier for external reference.
        zone: Zone the alert belongs to.
        kind: Which threshold was breached.
        severity: Alert severity.
        value: Most recent breaching value.
        threshold: Threshold that was crossed.
        created_at: Timestamp of the most recent breaching reading.
        message: Human-readable description.
        refresh_count: How many times the alert was refreshed.

    Example:
        >>> alert = Alert(
        ...     zone="north-ridge",
        ...     kind=AlertKind.EROSION_CRITICAL,
        ...     severity=AlertSeverity.CRITICAL,
        ...     value=0.91,
        ...     created_at=datetime.now(timezone.utc),
        ... )
    """

    model_config = {"frozen": True, "extra": "forbid"}

    alert_id: str = Field(
        default_factory=lambda: uuid4().hex,
        description="Opaque identifier for external reference",
    )
    zone: str = Field(
        ...,
        description="Zone the alert belongs to",
        min_length=1,
    )
    kind: AlertKind = Field(
        ...,
        description="Which threshold was breached",
    )
    severity: AlertSeverity = Field(
        ...,
        description="Alert severity",
    )
    value: float = Field(
        ...,
        description="Most recent breaching value",
    )
    threshold: Optional[float] = Field(
        default=None,
        description="Threshold that was crossed",
    )
    created_at: datetime = Field(
        ...,
        description="Timestamp of the most recent breaching reading",
    )
    message: str = Field(
        default="",
        description="Human-readable description",
    )
    refresh_count: int = Field(
        default=0,
        description="How many times the alert was refreshed",
        ge=0,
    )

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        """Treat a naive timestamp as UTC."""
        return as_utc(v)

    @property
    def key(self) -> Tuple[str, AlertKind]:
        """Composite (zone, kind) key."""
        return (self.zone, self.kind)

    def age_seconds(self, now: datetime) -> float:
        """Seconds elapsed since created_at."""
        return (as_utc(now) - self.created_at).total_seconds()

    def is_expired(self, now: datetime, retention: timedelta) -> bool:
        """Check whether the alert has aged past the retention window."""
        return as_utc(now) - self.created_at >= retention

    def refresh(self, finding: Finding, message: str = "") -> "Alert":
        """
        Refresh the alert from a newer finding of the same (zone, kind).

        Args:
            finding: The newer finding.
            message: Replacement message (keeps the current one if empty).

        Returns:
            Alert: Updated alert with the same alert_id.
        """
        return self.model_copy(
            update={
                "value": finding.value,
                "created_at": finding.observed_at,
                "severity": finding.severity,
                "threshold": finding.threshold,
                "message": message or self.message,
                "refresh_count": self.refresh_count + 1,
            }
        )
