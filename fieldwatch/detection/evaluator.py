"""
Threshold evaluator for zone readings.

This module provides the ThresholdEvaluator class which checks the latest
reading of a zone against the current ThresholdSet.

Key Features:
    - Independent check per dimension (several findings can fire at once)
    - Strict comparisons: equality never fires
    - Severity per dimension (erosion critical, vegetation/moisture warning)
    - Batch helpers for the latest reading and the anomaly ratio

Example:
    >>> evaluator = ThresholdEvaluator()
    >>> findings = evaluator.evaluate(latest, ThresholdSet())
    >>> for finding in findings:
    ...     print(f"{finding.kind.value}: {finding.value}")
"""

from typing import Iterable, List, Optional

import structlog

from fieldwatch.detection.rules import DIMENSIONS, alert_rules
from fieldwatch.models.alerts import Finding, ThresholdSet
from fieldwatch.models.readings import Reading
from fieldwatch.validation import validate_model, validate_reading

logger = structlog.get_logger(__name__)


class ThresholdEvaluator:
    """
    Evaluates a reading against a threshold set.

    Comparison semantics:
        erosion    > erosion_critical  -> critical finding
        vegetation < vegetation_low    -> warning finding
        moisture   < moisture_low      -> warning finding

    Attributes:
        None - this is a stateless evaluator.

    Example:
        >>> evaluator = ThresholdEvaluator()
        >>> findings = evaluator.evaluate(
        ...     Reading(zone="north-ridge", timestamp=now, moisture=20.0,
        ...             erosion=0.9, vegetation=0.7),
        ...     ThresholdSet(),
        ... )
        >>> sorted(f.kind.value for f in findings)
        ['erosion_critical', 'moisture_low']
    """

    def evaluate(
        self,
        latest: Optional[Reading],
        thresholds: ThresholdSet,
    ) -> List[Finding]:
        """
        Evaluate the latest reading against every threshold dimension.

        Args:
            latest: Most recent reading, or None for an empty batch.
            thresholds: Complete threshold set.

        Returns:
            List[Finding]: Zero or more findings, in dimension order.

        Raises:
            InputValidationError: If latest or thresholds are malformed.
        """
        if latest is None:
            logger.debug("empty_batch", component="evaluator")
            return []

        latest = validate_reading(latest)
        thresholds = validate_model(ThresholdSet, thresholds)

        values = {dim.metric: latest.metric(dim.metric) for dim in DIMENSIONS.values()}

        findings: List[Finding] = []
        for rule in alert_rules(thresholds):
            if not rule.matches(values):
                continue

            dimension = DIMENSIONS[rule.kind]  # type: ignore[index]
            finding = Finding(
                kind=dimension.kind,
                zone=latest.zone,
                value=values[rule.metric],
                observed_at=latest.timestamp,
                severity=dimension.severity,
                threshold=rule.boundary,
                condition=rule.condition,
            )
            findings.append(finding)

            logger.debug(
                "threshold_breached",
                zone=latest.zone,
                kind=finding.kind.value,
                value=finding.value,
                threshold=rule.boundary,
                condition=rule.condition.symbol,
            )

        return findings

    def latest_reading(self, readings: Iterable[Reading]) -> Optional[Reading]:
        """
        Pick the most recent reading of a batch.

        Args:
            readings: Reading batch, any order.

        Returns:
            Optional[Reading]: Reading with the greatest timestamp, or None if empty.
        """
        batch = list(readings)
        if not batch:
            return None
        return max(batch, key=lambda r: r.timestamp)

    def anomaly_ratio(self, readings: Iterable[Reading], thresholds: ThresholdSet) -> float:
        """
        Fraction of readings that breach at least one threshold.

        Args:
            readings: Reading batch.
            thresholds: Complete threshold set.

        Returns:
            float: Ratio in [0, 1]; 0.0 for an empty batch.
        """
        batch = list(readings)
        if not batch:
            return 0.0
        anomalous = sum(1 for reading in batch if self.evaluate(reading, thresholds))
        return anomalous / len(batch)

    def describe(self, finding: Finding) -> str:
        """
        Build a human-readable message for a finding.

        Args:
            finding: The finding to describe.

        Returns:
            str: e.g. "Erosion index exceeded 0.75".
        """
        dimension = DIMENSIONS[finding.kind]
        boundary = finding.threshold if finding.threshold is not None else finding.value
        return dimension.describe(boundary)


def create_evaluator() -> ThresholdEvaluator:
    """
    Factory function to create a ThresholdEvaluator.

    Returns:
        ThresholdEvaluator: A new evaluator instance.
    """
    return ThresholdEvaluator()
