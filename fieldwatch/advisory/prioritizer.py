"""
Recommendation prioritizer for zone remediation.

This module maps the latest reading of a zone (and optionally the
batch-wide anomaly ratio) to ranked remediation actions.

Rule tiers (the first matching tier per group fires; groups are independent):

    vegetation < 0.4          Vegetation Recovery      critical  1-2 weeks
    vegetation < 0.6          Vegetation Enhancement   high      2-4 weeks
    erosion    > 0.8          Erosion Control          critical  1 week
    erosion    > 0.75         Erosion Prevention       high      2-3 weeks
    moisture   < 25           Water Conservation       critical  3-5 days
    moisture   < 35           Moisture Retention       medium    1-2 weeks
    anomaly_ratio > 0.5       System Monitoring        high      1 week
    (nothing fired)           Maintenance              low       Ongoing

Comparisons come from the shared threshold domain in
fieldwatch.detection.rules, so alerting and recommendations agree on
which direction of each metric is bad.

Example:
    >>> prioritizer = RecommendationPrioritizer()
    >>> report = prioritizer.prioritize(
    ...     {"vegetation": 0.3, "erosion": 0.9, "moisture": 20}, anomaly_ratio=0.6
    ... )
    >>> report.overall_urgency
    <Urgency.CRITICAL: 'critical'>
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import structlog
from pydantic import BaseModel, Field

from fieldwatch.detection.rules import ANOMALY_RATIO_METRIC, MetricRule, dimension_rule
from fieldwatch.exceptions import InputValidationError
from fieldwatch.models.alerts import AlertCondition, AlertKind
from fieldwatch.models.readings import Reading
from fieldwatch.models.recommendations import Recommendation, RecommendationReport, Urgency
from fieldwatch.validation import validate_model

logger = structlog.get_logger(__name__)


class ReadingMetrics(BaseModel):
    """Metric values of a reading; zone and timestamp are not needed here."""

    model_config = {"frozen": True, "extra": "ignore"}

    moisture: float = Field(..., ge=0.0, le=100.0)
    erosion: float = Field(..., ge=0.0)
    vegetation: float = Field(..., ge=0.0, le=1.0)


@dataclass(frozen=True)
class RecommendationRule:
    """
    A rule tier that fires one recommendation.

    Attributes:
        rule: Metric comparison that triggers the tier.
        practice: Practice recommended when the tier fires.
        urgency: Urgency of the recommendation.
        timeline: Human-readable timeline.
    """

    rule: MetricRule
    practice: str
    urgency: Urgency
    timeline: str

    @property
    def category(self) -> str:
        """Recommendation category (the rule tag)."""
        return self.rule.tag

    def to_recommendation(self) -> Recommendation:
        """Build the recommendation this tier emits."""
        return Recommendation(
            category=self.category,
            practice=self.practice,
            urgency=self.urgency,
            timeline_label=self.timeline,
        )


# Each inner sequence is an if/elif chain: only its first match fires.
RECOMMENDATION_TIERS: Sequence[Sequence[RecommendationRule]] = (
    (
        RecommendationRule(
            rule=dimension_rule(AlertKind.VEGETATION_LOW, 0.4, "Vegetation Recovery"),
            practice="Emergency reforestation with native species",
            urgency=Urgency.CRITICAL,
            timeline="1-2 weeks",
        ),
        RecommendationRule(
            rule=dimension_rule(AlertKind.VEGETATION_LOW, 0.6, "Vegetation Enhancement"),
            practice="Apply cover crops and compost application",
            urgency=Urgency.HIGH,
            timeline="2-4 weeks",
        ),
    ),
    (
        RecommendationRule(
            rule=dimension_rule(AlertKind.EROSION_CRITICAL, 0.8, "Erosion Control"),
            practice="Install check dams and emergency terracing",
            urgency=Urgency.CRITICAL,
            timeline="1 week",
        ),
        RecommendationRule(
            rule=dimension_rule(AlertKind.EROSION_CRITICAL, 0.75, "Erosion Prevention"),
            practice="Initiate terracing and grass strip installation",
            urgency=Urgency.HIGH,
            timeline="2-3 weeks",
        ),
    ),
    (
        RecommendationRule(
            rule=dimension_rule(AlertKind.MOISTURE_LOW, 25.0, "Water Conservation"),
            practice="Emergency irrigation and mulch application",
            urgency=Urgency.CRITICAL,
            timeline="3-5 days",
        ),
        RecommendationRule(
            rule=dimension_rule(AlertKind.MOISTURE_LOW, 35.0, "Moisture Retention"),
            practice="Install drip irrigation and organic mulching",
            urgency=Urgency.MEDIUM,
            timeline="1-2 weeks",
        ),
    ),
    (
        RecommendationRule(
            rule=MetricRule(
                metric=ANOMALY_RATIO_METRIC,
                condition=AlertCondition.GT,
                boundary=0.5,
                tag="System Monitoring",
            ),
            practice="Conduct zone-wide audit and community mobilization",
            urgency=Urgency.HIGH,
            timeline="1 week",
        ),
    ),
)

MAINTENANCE = Recommendation(
    category="Maintenance",
    practice="Continue current soil management practices",
    urgency=Urgency.LOW,
    timeline_label="Ongoing",
)


class RecommendationPrioritizer:
    """
    Maps reading metrics to prioritized remediation actions.

    Stateless: the report depends only on the inputs of each call.

    Attributes:
        tiers: Rule groups evaluated independently.
        fallback: Recommendation emitted when nothing fires.

    Example:
        >>> prioritizer = RecommendationPrioritizer()
        >>> report = prioritizer.prioritize(reading)
        >>> print(report.summary_text)
    """

    def __init__(
        self,
        tiers: Sequence[Sequence[RecommendationRule]] = RECOMMENDATION_TIERS,
        fallback: Recommendation = MAINTENANCE,
    ) -> None:
        self.tiers = tiers
        self.fallback = fallback

    def prioritize(self, latest: Any, anomaly_ratio: Optional[float] = 0.0) -> RecommendationReport:
        """
        Produce prioritized recommendations for the latest reading.

        Args:
            latest: Reading, or a mapping with moisture / erosion / vegetation.
            anomaly_ratio: Fraction of anomalous readings in the batch (0-1).

        Returns:
            RecommendationReport: Never-empty recommendations, overall urgency
                and a plain-text summary.

        Raises:
            InputValidationError: If the metrics are malformed or the ratio
                lies outside [0, 1].
        """
        ratio = 0.0 if anomaly_ratio is None else anomaly_ratio
        if not isinstance(ratio, (int, float)) or isinstance(ratio, bool) or not 0.0 <= ratio <= 1.0:
            raise InputValidationError(
                f"anomaly_ratio must be a number in [0, 1], got {anomaly_ratio!r}",
                field="anomaly_ratio",
            )

        values = self._metric_values(latest)
        values[ANOMALY_RATIO_METRIC] = float(ratio)

        recommendations: List[Recommendation] = []
        for group in self.tiers:
            for tier in group:
                if tier.rule.matches(values):
                    recommendations.append(tier.to_recommendation())
                    break

        if not recommendations:
            recommendations.append(self.fallback)

        overall = max((rec.urgency for rec in recommendations), key=lambda u: u.rank)

        report = RecommendationReport(
            recommendations=recommendations,
            overall_urgency=overall,
            summary_text=build_summary_text(recommendations, overall),
        )

        logger.debug(
            "recommendations_prioritized",
            categories=report.categories,
            overall_urgency=overall.value,
            anomaly_ratio=ratio,
        )
        return report

    @staticmethod
    def _metric_values(latest: Any) -> Dict[str, float]:
        if latest is None:
            raise InputValidationError("latest reading is required", field="latest")
        if isinstance(latest, Reading):
            metrics = ReadingMetrics(
                moisture=latest.moisture,
                erosion=latest.erosion,
                vegetation=latest.vegetation,
            )
        else:
            metrics = validate_model(ReadingMetrics, latest)
        return metrics.model_dump()


def build_summary_text(recommendations: Sequence[Recommendation], urgency: Urgency) -> str:
    """
    Build the plain-text summary of a recommendation list.

    The text carries no markup and is safe to hand to a speech synthesizer.

    Args:
        recommendations: Recommendations in report order.
        urgency: Overall urgency.

    Returns:
        str: e.g. "1 regenerative practice recommended: continue current soil
            management practices. Priority level: monitoring and maintenance."
    """
    count = len(recommendations)
    practices = ", ".join(rec.practice.lower() for rec in recommendations)
    plural = "s" if count > 1 else ""
    return (
        f"{count} regenerative practice{plural} recommended: {practices}. "
        f"Priority level: {urgency.phrase}."
    )


def create_prioritizer() -> RecommendationPrioritizer:
    """
    Factory function to create a RecommendationPrioritizer.

    Returns:
        RecommendationPrioritizer: A prioritizer with the default rule tiers.
    """
    return RecommendationPrioritizer()
