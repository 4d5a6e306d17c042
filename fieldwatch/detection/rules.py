"""
Shared threshold domain for alerting and recommendations.

Both the ThresholdEvaluator and the RecommendationPrioritizer decide what
counts as an anomaly from the same table: for each alert kind, which
reading metric it watches, which comparison fires and at what severity.
Recommendation tiers are built from the same dimensions so the two never
drift apart.

Example:
    >>> rules = alert_rules(ThresholdSet())
    >>> [rule.tag for rule in rules]
    ['erosion_critical', 'vegetation_low', 'moisture_low']
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from fieldwatch.models.alerts import AlertCondition, AlertKind, AlertSeverity, ThresholdSet

ANOMALY_RATIO_METRIC = "anomaly_ratio"


@dataclass(frozen=True)
class Dimension:
    """
    One monitored threshold dimension.

    Attributes:
        kind: Alert kind raised when the dimension is breached.
        metric: Reading attribute the dimension watches.
        condition: Comparison that signals a breach.
        severity: Severity of a breach.
        label: Human-readable metric name.
        unit: Suffix appended to boundary values in messages.
    """

    kind: AlertKind
    metric: str
    condition: AlertCondition
    severity: AlertSeverity
    label: str
    unit: str = ""

    def describe(self, boundary: float) -> str:
        """Build the breach message for a boundary value."""
        verb = "exceeded" if self.condition == AlertCondition.GT else "below"
        return f"{self.label} {verb} {boundary:g}{self.unit}"


DIMENSIONS: Dict[AlertKind, Dimension] = {
    AlertKind.EROSION_CRITICAL: Dimension(
        kind=AlertKind.EROSION_CRITICAL,
        metric="erosion",
        condition=AlertCondition.GT,
        severity=AlertSeverity.CRITICAL,
        label="Erosion index",
    ),
    AlertKind.VEGETATION_LOW: Dimension(
        kind=AlertKind.VEGETATION_LOW,
        metric="vegetation",
        condition=AlertCondition.LT,
        severity=AlertSeverity.WARNING,
        label="Vegetation index",
    ),
    AlertKind.MOISTURE_LOW: Dimension(
        kind=AlertKind.MOISTURE_LOW,
        metric="moisture",
        condition=AlertCondition.LT,
        severity=AlertSeverity.WARNING,
        label="Moisture level",
        unit="%",
    ),
}


@dataclass(frozen=True)
class MetricRule:
    """
    A single comparison of a metric against a boundary.

    Attributes:
        metric: Metric name ("erosion", "vegetation", "moisture", "anomaly_ratio").
        condition: Comparison to apply.
        boundary: Value compared against.
        tag: Identifier of what the rule signals (alert kind or category).
        kind: Alert kind the rule derives from, if any.
    """

    metric: str
    condition: AlertCondition
    boundary: float
    tag: str
    kind: Optional[AlertKind] = None

    def matches(self, values: Mapping[str, float]) -> bool:
        """
        Check the rule against a set of metric values.

        Args:
            values: Metric name to value mapping.

        Returns:
            bool: True if the metric is present and the condition holds.
        """
        value = values.get(self.metric)
        if value is None:
            return False
        return self.condition.evaluate(value, self.boundary)


def dimension_rule(kind: AlertKind, boundary: float, tag: Optional[str] = None) -> MetricRule:
    """
    Build a rule on an alert dimension with an explicit boundary.

    Args:
        kind: Dimension to compare on.
        boundary: Boundary value.
        tag: Rule tag (defaults to the alert kind value).

    Returns:
        MetricRule: Rule with the dimension's metric and comparison.
    """
    dimension = DIMENSIONS[kind]
    return MetricRule(
        metric=dimension.metric,
        condition=dimension.condition,
        boundary=boundary,
        tag=tag or kind.value,
        kind=kind,
    )


def alert_rules(thresholds: ThresholdSet) -> List[MetricRule]:
    """
    Build the alerting rules for a threshold set.

    Args:
        thresholds: Current complete threshold set.

    Returns:
        List[MetricRule]: One rule per alert kind, in dimension order.
    """
    return [dimension_rule(kind, thresholds.for_kind(kind)) for kind in DIMENSIONS]
