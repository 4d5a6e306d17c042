"""
Threshold detection and alert lifecycle for zone monitoring.

Components:
    rules: Shared threshold domain (dimensions and metric rules)
    evaluator: ThresholdEvaluator for per-reading threshold checks
    store: AlertStore owning active alerts and the threshold set

Example:
    >>> from fieldwatch.detection import AlertStore, ThresholdEvaluator
    >>>
    >>> evaluator = ThresholdEvaluator()
    >>> store = AlertStore(ThresholdSet(), evaluator=evaluator)
    >>> findings = evaluator.evaluate(latest, store.thresholds)
    >>> store.ingest("north-ridge", findings)
"""

from fieldwatch.detection.evaluator import ThresholdEvaluator, create_evaluator
from fieldwatch.detection.rules import (
    DIMENSIONS,
    Dimension,
    MetricRule,
    alert_rules,
    dimension_rule,
)
from fieldwatch.detection.store import (
    DEFAULT_RETENTION_HOURS,
    AlertStore,
    create_alert_store,
)

__all__ = [
    # Rules
    "DIMENSIONS",
    "Dimension",
    "MetricRule",
    "alert_rules",
    "dimension_rule",
    # Evaluator
    "ThresholdEvaluator",
    "create_evaluator",
    # Store
    "AlertStore",
    "create_alert_store",
    "DEFAULT_RETENTION_HOURS",
]
