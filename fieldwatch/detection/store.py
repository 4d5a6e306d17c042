"""
Alert store for zone alert lifecycle management.

This module provides the AlertStore class which owns the active-alert set
for every zone and the process-wide ThresholdSet.

Key Features:
    - At most one active alert per (zone, kind)
    - Refresh in place: a repeat finding keeps alert_id, updates value/time
    - No auto-resolve: alerts leave only via expiry or explicit dismissal
    - 24 hour retention window, expired alerts purged on query
    - Idempotent dismissal
    - Atomic ingest and threshold updates under a single lock

Example:
    >>> store = AlertStore(ThresholdSet())
    >>> created = store.evaluate_and_ingest("north-ridge", readings)
    >>> for alert in store.active_alerts(now):
    ...     print(alert.zone, alert.kind.value, alert.value)
    >>> store.dismiss(created[0].alert_id)
"""

import threading
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import structlog
from pydantic import ValidationError

from fieldwatch.detection.evaluator import ThresholdEvaluator
from fieldwatch.exceptions import InputValidationError
from fieldwatch.models.alerts import Alert, AlertKind, Finding, ThresholdSet
from fieldwatch.timeutils import resolve_now
from fieldwatch.validation import validate_finding, validate_model, validate_readings

logger = structlog.get_logger(__name__)


DEFAULT_RETENTION_HOURS = 24

AlertKey = Tuple[str, AlertKind]


class AlertStore:
    """
    Owns the active alerts of every zone.

    Alerts are keyed by the composite (zone, kind); alert_id is an opaque
    identifier handed out for external reference and dismissal. A finding
    that matches an active alert refreshes it. Findings missing from a batch
    never clear alerts: an alert stays active until it ages past the
    retention window or an operator dismisses it.

    All state is guarded by one re-entrant lock, so the look-up-then-update
    of ingest and the merge of update_thresholds are atomic relative to each
    other.

    Attributes:
        retention: How long an alert stays active after its last refresh.
        evaluator: ThresholdEvaluator used by evaluate_and_ingest.

    Example:
        >>> store = AlertStore(ThresholdSet(), retention_hours=24)
        >>> store.update_thresholds({"moisture_low": 30})
        >>> alerts = store.ingest("north-ridge", findings)
    """

    def __init__(
        self,
        thresholds: Optional[ThresholdSet] = None,
        retention_hours: float = DEFAULT_RETENTION_HOURS,
        evaluator: Optional[ThresholdEvaluator] = None,
    ) -> None:
        """
        Initialize the alert store.

        Args:
            thresholds: Initial threshold set (defaults to ThresholdSet()).
            retention_hours: Alert retention window (default: 24).
            evaluator: Evaluator for evaluate_and_ingest (default: new instance).

        Raises:
            ValueError: If retention_hours is not positive.
        """
        if retention_hours <= 0:
            raise ValueError(f"retention_hours must be positive, got {retention_hours}")

        self.retention = timedelta(hours=retention_hours)
        self.evaluator = evaluator or ThresholdEvaluator()

        self._lock = threading.RLock()
        self._thresholds = validate_model(ThresholdSet, thresholds or ThresholdSet())
        self._alerts: Dict[AlertKey, Alert] = {}

        logger.info(
            "alert_store_initialized",
            retention_hours=retention_hours,
            thresholds=self._thresholds.model_dump(),
        )

    @property
    def thresholds(self) -> ThresholdSet:
        """Current complete threshold set."""
        with self._lock:
            return self._thresholds

    def ingest(
        self,
        zone: str,
        findings: Iterable[Any],
        now: Optional[datetime] = None,
    ) -> List[Alert]:
        """
        Merge findings into the zone's alert state.

        For each finding, an active alert with the same (zone, kind) is
        refreshed in place (same alert_id, new value and timestamp);
        otherwise a new alert is created. An alert that has aged past the
        retention window at the finding's timestamp is replaced by a new one.

        When now is given, findings observed a full retention window or more
        before it are skipped and logged as finding_expired.

        Args:
            zone: Zone the findings belong to.
            findings: Finding instances or mappings.
            now: Reference time for skipping stale findings (optional).

        Returns:
            List[Alert]: Alerts created or refreshed, in finding order.

        Raises:
            InputValidationError: If zone is empty, a finding is malformed,
                or a finding belongs to another zone.
        """
        if not isinstance(zone, str) or not zone:
            raise InputValidationError("zone must be a non-empty string", field="zone")

        validated = [validate_finding(f) for f in findings]
        for finding in validated:
            if finding.zone != zone:
                raise InputValidationError(
                    f"Finding for zone {finding.zone!r} ingested into zone {zone!r}",
                    field="zone",
                )

        if now is not None:
            now = resolve_now(now)
            current: List[Finding] = []
            for finding in validated:
                if now - finding.observed_at >= self.retention:
                    logger.debug(
                        "finding_expired",
                        zone=finding.zone,
                        kind=finding.kind.value,
                        observed_at=finding.observed_at.isoformat(),
                    )
                    continue
                current.append(finding)
            validated = current

        changed: List[Alert] = []
        with self._lock:
            for finding in validated:
                changed.append(self._upsert(finding))
        return changed

    def evaluate_and_ingest(self, zone: str, readings: Iterable[Any]) -> List[Alert]:
        """
        Evaluate a batch's latest reading and ingest the findings.

        Evaluation uses the store's current thresholds; the snapshot and the
        ingest happen under the same lock.

        Args:
            zone: Zone to evaluate.
            readings: Reading batch (instances or mappings); other zones are ignored.

        Returns:
            List[Alert]: Alerts created or refreshed.
        """
        zone_readings = [r for r in validate_readings(readings) if r.zone == zone]
        with self._lock:
            latest = self.evaluator.latest_reading(zone_readings)
            findings = self.evaluator.evaluate(latest, self._thresholds)
            return self.ingest(zone, findings)

    def active_alerts(self, now: Optional[datetime] = None) -> List[Alert]:
        """
        Get all active alerts across zones, most recent first.

        Alerts older than the retention window are purged.

        Args:
            now: Reference time (defaults to current UTC time).

        Returns:
            List[Alert]: Active alerts ordered by created_at, newest first.
        """
        now = resolve_now(now)
        with self._lock:
            self._purge_expired(now)
            alerts = list(self._alerts.values())

        return sorted(alerts, key=lambda a: a.created_at, reverse=True)

    def alerts_for_zone(self, zone: str, now: Optional[datetime] = None) -> List[Alert]:
        """
        Get active alerts for a single zone, most recent first.

        Args:
            zone: Zone identifier.
            now: Reference time (defaults to current UTC time).

        Returns:
            List[Alert]: Active alerts of the zone.
        """
        return [alert for alert in self.active_alerts(now) if alert.zone == zone]

    def get_alert(self, alert_id: str) -> Optional[Alert]:
        """
        Look up an alert by its opaque id.

        Args:
            alert_id: The alert identifier.

        Returns:
            Optional[Alert]: The alert, or None if unknown.
        """
        with self._lock:
            key = self._find_key(alert_id)
            return self._alerts.get(key) if key is not None else None

    def dismiss(self, alert_id: str) -> bool:
        """
        Remove an alert immediately, regardless of age.

        Dismissing an unknown id is a no-op.

        Args:
            alert_id: The alert identifier.

        Returns:
            bool: True if an alert was removed.
        """
        with self._lock:
            key = self._find_key(alert_id)
            if key is None:
                logger.debug("alert_dismiss_unknown", alert_id=alert_id)
                return False
            alert = self._alerts.pop(key)

        logger.info(
            "alert_dismissed",
            alert_id=alert_id,
            zone=alert.zone,
            kind=alert.kind.value,
        )
        return True

    def update_thresholds(self, partial: Mapping[str, Any]) -> ThresholdSet:
        """
        Merge a partial threshold update into the current set.

        Last writer wins; there is no versioning or rollback. Readers see
        either the old or the new complete set, never a half-merged one.

        Args:
            partial: Subset of erosion_critical, vegetation_low, moisture_low.

        Returns:
            ThresholdSet: The new complete threshold set.

        Raises:
            InputValidationError: If a key is unknown or a value is not numeric.
        """
        if not isinstance(partial, Mapping):
            raise InputValidationError(
                f"Threshold update must be a mapping, got {type(partial).__name__}"
            )

        with self._lock:
            try:
                merged = self._thresholds.merge(partial)
            except ValidationError as e:
                raise InputValidationError(
                    f"Invalid threshold update: {e}",
                    cause=e,
                ) from e
            previous = self._thresholds
            self._thresholds = merged

        logger.info(
            "thresholds_updated",
            previous=previous.model_dump(),
            current=merged.model_dump(),
        )
        return merged

    def _upsert(self, finding: Finding) -> Alert:
        """Refresh or create the alert for a finding. Caller holds the lock."""
        message = self.evaluator.describe(finding)
        existing = self._alerts.get(finding.key)

        if existing is not None and not existing.is_expired(finding.observed_at, self.retention):
            refreshed = existing.refresh(finding, message=message)
            self._alerts[finding.key] = refreshed
            logger.info(
                "alert_refreshed",
                alert_id=refreshed.alert_id,
                zone=finding.zone,
                kind=finding.kind.value,
                value=finding.value,
                refresh_count=refreshed.refresh_count,
            )
            return refreshed

        alert = Alert(
            zone=finding.zone,
            kind=finding.kind,
            severity=finding.severity,
            value=finding.value,
            threshold=finding.threshold,
            created_at=finding.observed_at,
            message=message,
        )
        self._alerts[finding.key] = alert
        logger.info(
            "alert_created",
            alert_id=alert.alert_id,
            zone=alert.zone,
            kind=alert.kind.value,
            severity=alert.severity.value,
            critical=alert.severity.is_critical,
            value=alert.value,
            replaced_expired=existing is not None,
        )
        return alert

    def _purge_expired(self, now: datetime) -> None:
        """Drop alerts past the retention window. Caller holds the lock."""
        expired = [
            key for key, alert in self._alerts.items() if alert.is_expired(now, self.retention)
        ]
        for key in expired:
            alert = self._alerts.pop(key)
            logger.info(
                "alert_expired",
                alert_id=alert.alert_id,
                zone=alert.zone,
                kind=alert.kind.value,
                age_seconds=alert.age_seconds(now),
            )

    def _find_key(self, alert_id: str) -> Optional[AlertKey]:
        """Find the composite key of an alert id. Caller holds the lock."""
        for key, alert in self._alerts.items():
            if alert.alert_id == alert_id:
                return key
        return None

    def __len__(self) -> int:
        """Number of alerts held, including any not yet purged."""
        with self._lock:
            return len(self._alerts)


def create_alert_store(
    thresholds: Optional[ThresholdSet] = None,
    retention_hours: float = DEFAULT_RETENTION_HOURS,
) -> AlertStore:
    """
    Factory function to create an AlertStore.

    Args:
        thresholds: Initial threshold set.
        retention_hours: Alert retention window.

    Returns:
        AlertStore: A new, isolated store instance.
    """
    return AlertStore(thresholds=thresholds, retention_hours=retention_hours)
