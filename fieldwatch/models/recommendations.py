"""
Recommendation models for remediation planning.

Models:
    Urgency: Ordered urgency levels (low < medium < high < critical)
    Recommendation: Single remediation action
    RecommendationReport: Prioritized recommendations with overall urgency
    CostEstimate: Cost range for a recommended practice
    MetricChange: Current value and percent change of one metric
    ZoneSummary: Plain-text zone health summary
"""

from datetime import datetime
from enum import Enum
from typing import List, Literal

from pydantic import BaseModel, Field, field_validator


class Urgency(str, Enum):
    """
    Urgency levels for recommendations.

    Attributes:
        LOW: Monitoring and maintenance.
        MEDIUM: Action recommended within a month.
        HIGH: Action needed within two weeks.
        CRITICAL: Immediate action required.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Ordinal used to compare urgencies."""
        return _URGENCY_RANK[self]

    @property
    def phrase(self) -> str:
        """Plain-text priority phrase for summaries."""
        return _URGENCY_PHRASE[self]


_URGENCY_RANK = {
    Urgency.LOW: 0,
    Urgency.MEDIUM: 1,
    Urgency.HIGH: 2,
    Urgency.CRITICAL: 3,
}

_URGENCY_PHRASE = {
    Urgency.LOW: "monitoring and maintenance",
    Urgency.MEDIUM: "action recommended within a month",
    Urgency.HIGH: "action needed within 2 weeks",
    Urgency.CRITICAL: "immediate action required",
}


class Recommendation(BaseModel):
    """
    Single remediation action.

    Attributes:
        category: Remediation category (e.g., "Erosion Control").
        practice: Concrete practice to apply.
        urgency: How soon the practice should be applied.
        timeline_label: Human-readable timeline (e.g., "1-2 weeks").
    """

    model_config = {"frozen": True, "extra": "forbid"}

    category: str = Field(..., min_length=1)
    practice: str = Field(..., min_length=1)
    urgency: Urgency
    timeline_label: str = Field(..., min_length=1)


class RecommendationReport(BaseModel):
    """
    Prioritized recommendations for a zone.

    Attributes:
        recommendations: Fired recommendations, never empty.
        overall_urgency: Highest urgency among the recommendations.
        summary_text: Plain-text summary, safe for speech synthesis.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    recommendations: List[Recommendation] = Field(..., min_length=1)
    overall_urgency: Urgency
    summary_text: str

    @property
    def categories(self) -> List[str]:
        """Categories in report order."""
        return [rec.category for rec in self.recommendations]


class CostEstimate(BaseModel):
    """
    Cost range for a recommended practice.

    Attributes:
        recommendation: The recommendation being costed.
        min_cost: Lower bound of the cost range.
        max_cost: Upper bound of the cost range.
        unit: Cost unit (e.g., "USD per hectare").
    """

    model_config = {"frozen": True, "extra": "forbid"}

    recommendation: Recommendation
    min_cost: float = Field(..., ge=0.0)
    max_cost: float = Field(..., ge=0.0)
    unit: str

    @field_validator("max_cost")
    @classmethod
    def validate_range(cls, v: float, info) -> float:
        """Ensure max_cost is not below min_cost."""
        min_cost = info.data.get("min_cost")
        if min_cost is not None and v < min_cost:
            raise ValueError(f"max_cost ({v}) must be >= min_cost ({min_cost})")
        return v


class MetricChange(BaseModel):
    """Current value of a metric and its percent change from the previous reading."""

    model_config = {"frozen": True, "extra": "forbid"}

    current: float
    change_pct: float


class ZoneSummary(BaseModel):
    """
    Plain-text health summary for a zone.

    Attributes:
        zone: Zone identifier.
        timestamp: Timestamp of the latest reading.
        vegetation: Vegetation index change.
        erosion: Erosion index change.
        moisture: Moisture level change.
        alert_messages: Threshold breaches in the latest reading.
        interventions: Recommended practices.
        spoken_summary: Plain-text summary, safe for speech synthesis.
        overall_status: "warning" if any breach, else "healthy".
    """

    model_config = {"frozen": True, "extra": "forbid"}

    zone: str
    timestamp: datetime
    vegetation: MetricChange
    erosion: MetricChange
    moisture: MetricChange
    alert_messages: List[str] = Field(default_factory=list)
    interventions: List[str] = Field(default_factory=list)
    spoken_summary: str
    overall_status: Literal["healthy", "warning"]
