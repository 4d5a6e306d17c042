"""
Zone monitor: the batch evaluation pipeline.

Wires the core components together for one reading batch:

    1. ThresholdEvaluator inspects the most recent reading
    2. AlertStore merges the findings into the zone's alert state
    3. AvailabilityCalculator scores feed health from the same batch
    4. RecommendationPrioritizer ranks remediation actions from the latest
       reading and the batch anomaly ratio
    5. The zone summary composes a plain-text update

Callers fetch the batch and persist or deliver the results; the monitor
performs no I/O.

Example:
    >>> monitor = create_monitor("config")
    >>> report = monitor.process_batch("north-ridge", readings)
    >>> print(report.service_metrics.status.value, len(report.alerts))
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, List, Optional

import structlog

from fieldwatch.advisory.prioritizer import RecommendationPrioritizer
from fieldwatch.advisory.summary import summarize
from fieldwatch.config.loader import load_config
from fieldwatch.config.models import AppConfig
from fieldwatch.detection.evaluator import ThresholdEvaluator
from fieldwatch.detection.store import AlertStore
from fieldwatch.exceptions import InputValidationError
from fieldwatch.logging_setup import setup_logging
from fieldwatch.metrics.availability import AvailabilityCalculator
from fieldwatch.metrics.freshness import FreshnessClassifier
from fieldwatch.models.alerts import Alert
from fieldwatch.models.health import Freshness
from fieldwatch.models.reports import ZoneReport
from fieldwatch.timeutils import resolve_now
from fieldwatch.validation import validate_readings

logger = structlog.get_logger(__name__)


class ZoneMonitor:
    """
    Runs the monitoring pipeline for reading batches.

    Each monitor owns its own AlertStore, so several monitors can run side
    by side without sharing state.

    Attributes:
        config: Application configuration.
        evaluator: ThresholdEvaluator.
        store: AlertStore holding active alerts and thresholds.
        availability: AvailabilityCalculator.
        freshness: FreshnessClassifier.
        prioritizer: RecommendationPrioritizer.
    """

    def __init__(self, config: Optional[AppConfig] = None) -> None:
        """
        Initialize the monitor from configuration.

        Args:
            config: Application configuration (defaults to AppConfig()).
        """
        self.config = config or AppConfig()
        features = self.config.features

        self.evaluator = ThresholdEvaluator()
        self.store = AlertStore(
            thresholds=self.config.alerts.thresholds.to_threshold_set(),
            retention_hours=self.config.alerts.retention_hours,
            evaluator=self.evaluator,
        )
        self.availability = AvailabilityCalculator(
            expected_interval_minutes=features.availability.expected_interval_minutes,
            window_hours=features.availability.window_hours,
            offline_below_pct=features.availability.offline_below_pct,
            degraded_below_pct=features.availability.degraded_below_pct,
        )
        self.freshness = FreshnessClassifier(
            fresh_before=features.freshness.fresh_before_minutes,
            recent_before=features.freshness.recent_before_minutes,
            stale_before=features.freshness.stale_before_minutes,
        )
        self.prioritizer = RecommendationPrioritizer()

    def process_batch(
        self,
        zone: str,
        readings: Iterable[Any],
        now: Optional[datetime] = None,
        expected_interval_minutes: Optional[float] = None,
    ) -> ZoneReport:
        """
        Evaluate a reading batch for a zone.

        Findings on a latest reading that is already a full retention window
        older than now are reported but raise no alert.

        Args:
            zone: Zone identifier.
            readings: Reading instances or mappings; other zones are ignored.
            now: Evaluation time (defaults to current UTC time).
            expected_interval_minutes: Cadence override for availability.

        Returns:
            ZoneReport: Findings, alerts, feed health and recommendations.

        Raises:
            InputValidationError: If zone is empty or a reading is malformed.
        """
        if not isinstance(zone, str) or not zone:
            raise InputValidationError("zone must be a non-empty string", field="zone")
        now = resolve_now(now)

        batch = [r for r in validate_readings(readings) if r.zone == zone]
        thresholds = self.store.thresholds

        latest = self.evaluator.latest_reading(batch)
        findings = self.evaluator.evaluate(latest, thresholds)
        alerts = self.store.ingest(zone, findings, now=now)

        metrics = self.availability.compute(
            batch,
            zone=zone,
            expected_interval_minutes=expected_interval_minutes,
            now=now,
        )
        ratio = self.evaluator.anomaly_ratio(batch, thresholds)

        recommendations = None
        summary = None
        if latest is not None:
            recommendations = self.prioritizer.prioritize(latest, ratio)
            summary = summarize(
                batch,
                zone,
                thresholds,
                anomaly_ratio=ratio,
                evaluator=self.evaluator,
                prioritizer=self.prioritizer,
            )

        report = ZoneReport(
            zone=zone,
            generated_at=now,
            findings=findings,
            alerts=alerts,
            active_alerts=self.store.alerts_for_zone(zone, now),
            service_metrics=metrics,
            freshness=self.freshness.classify(metrics.last_reading_at, now),
            anomaly_ratio=ratio,
            recommendations=recommendations,
            summary=summary,
        )

        logger.info(
            "batch_processed",
            zone=zone,
            readings=len(batch),
            findings=len(findings),
            alerts=len(alerts),
            status=metrics.status.value,
            freshness=report.freshness.bucket.value,
        )
        return report

    def active_alerts(self, now: Optional[datetime] = None) -> List[Alert]:
        """Active alerts across all zones, most recent first."""
        return self.store.active_alerts(now)

    def dismiss(self, alert_id: str) -> bool:
        """Dismiss an alert; unknown ids are a no-op."""
        return self.store.dismiss(alert_id)

    def alert_freshness(self, alert: Alert, now: Optional[datetime] = None) -> Freshness:
        """Classify how old an alert is."""
        return self.freshness.classify(alert.created_at, now)


def create_monitor(
    config_dir: Optional[Path | str] = None,
    configure_logging: bool = False,
) -> ZoneMonitor:
    """
    Factory function to create a ZoneMonitor.

    Args:
        config_dir: Configuration directory; defaults are used when None.
        configure_logging: Whether to run setup_logging() with the loaded config.

    Returns:
        ZoneMonitor: A new monitor with its own alert state.

    Raises:
        ConfigLoadError: If the configuration cannot be loaded.
    """
    config = load_config(config_dir) if config_dir is not None else AppConfig()
    if configure_logging:
        setup_logging(config.features.logging)
    return ZoneMonitor(config)
