"""
Pipeline report model.

Models:
    ZoneReport: Everything one batch evaluation produced for a zone
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from fieldwatch.models.alerts import Alert, Finding
from fieldwatch.models.health import Freshness, ServiceMetrics
from fieldwatch.models.recommendations import RecommendationReport, ZoneSummary


class ZoneReport(BaseModel):
    """
    Result of processing one reading batch for a zone.

    Attributes:
        zone: Zone identifier.
        generated_at: Evaluation time.
        findings: Findings for the latest reading.
        alerts: Alerts created or refreshed by this batch.
        active_alerts: All active alerts for the zone after ingestion.
        service_metrics: Feed availability over the trailing window.
        freshness: Age of the latest reading.
        anomaly_ratio: Fraction of batch readings with at least one breach.
        recommendations: Prioritized recommendations, or None for an empty batch.
        summary: Zone summary, or None for an empty batch.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    zone: str = Field(..., min_length=1)
    generated_at: datetime
    findings: List[Finding] = Field(default_factory=list)
    alerts: List[Alert] = Field(default_factory=list)
    active_alerts: List[Alert] = Field(default_factory=list)
    service_metrics: ServiceMetrics
    freshness: Freshness
    anomaly_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    recommendations: Optional[RecommendationReport] = None
    summary: Optional[ZoneSummary] = None

    @property
    def has_findings(self) -> bool:
        """Check if the latest reading breached any threshold."""
        return bool(self.findings)
