"""
Shared Pydantic data models for zone monitoring.

Modules:
    readings: Sensor readings
    alerts: Thresholds, findings and alert instances
    health: Feed availability and freshness
    recommendations: Remediation recommendations and zone summaries
    reports: Pipeline report

Example:
    >>> from fieldwatch.models import Reading, ThresholdSet, Alert
"""

# Reading models
from fieldwatch.models.readings import Reading

# Alert models
from fieldwatch.models.alerts import (
    Alert,
    AlertCondition,
    AlertKind,
    AlertSeverity,
    Finding,
    ThresholdSet,
)

# Health models
from fieldwatch.models.health import (
    Freshness,
    FreshnessBucket,
    ServiceMetrics,
    ServiceStatus,
)

# Recommendation models
from fieldwatch.models.recommendations import (
    CostEstimate,
    MetricChange,
    Recommendation,
    RecommendationReport,
    Urgency,
    ZoneSummary,
)

# Report models
from fieldwatch.models.reports import ZoneReport

__all__ = [
    # Readings
    "Reading",
    # Alerts
    "AlertKind",
    "AlertSeverity",
    "AlertCondition",
    "ThresholdSet",
    "Finding",
    "Alert",
    # Health
    "ServiceStatus",
    "ServiceMetrics",
    "FreshnessBucket",
    "Freshness",
    # Recommendations
    "Urgency",
    "Recommendation",
    "RecommendationReport",
    "CostEstimate",
    "MetricChange",
    "ZoneSummary",
    # Reports
    "ZoneReport",
]
