"""
Zone health summaries.

Builds a short plain-text update for a zone from its reading batch: how
vegetation and erosion moved since the previous reading, which thresholds
the latest reading breaches and what the prioritizer recommends. The text
is meant for on-screen display and speech synthesis alike.

Example:
    >>> summary = summarize(readings, "north-ridge", ThresholdSet())
    >>> print(summary.spoken_summary)
    north-ridge soil health update: Vegetation declined by 12.5%. ...
"""

from typing import Iterable, List, Optional

import structlog

from fieldwatch.advisory.prioritizer import RecommendationPrioritizer
from fieldwatch.detection.evaluator import ThresholdEvaluator
from fieldwatch.models.alerts import AlertKind, ThresholdSet
from fieldwatch.models.readings import Reading
from fieldwatch.models.recommendations import MetricChange, ZoneSummary

logger = structlog.get_logger(__name__)

ALERT_MESSAGES = {
    AlertKind.EROSION_CRITICAL: "Critical erosion levels detected",
    AlertKind.VEGETATION_LOW: "Vegetation stress identified",
    AlertKind.MOISTURE_LOW: "Low moisture content",
}


def percent_change(current: float, previous: float) -> float:
    """Percent change from previous to current; 0.0 when previous is zero."""
    if previous == 0:
        return 0.0
    return (current - previous) / previous * 100.0


def _trend(label: str, change: float, up: str, down: str) -> str:
    if change == 0:
        return f"{label} held steady."
    direction = up if change > 0 else down
    return f"{label} {direction} by {abs(change):.1f}%."


def summarize(
    readings: Iterable[Reading],
    zone: str,
    thresholds: ThresholdSet,
    anomaly_ratio: Optional[float] = None,
    evaluator: Optional[ThresholdEvaluator] = None,
    prioritizer: Optional[RecommendationPrioritizer] = None,
) -> Optional[ZoneSummary]:
    """
    Summarize a zone's health from its reading batch.

    Args:
        readings: Reading batch, any order; other zones are ignored.
        zone: Zone to summarize.
        thresholds: Threshold set used to flag breaches.
        anomaly_ratio: Batch anomaly ratio (computed from the batch if None).
        evaluator: Threshold evaluator (default: new instance).
        prioritizer: Recommendation prioritizer (default: new instance).

    Returns:
        Optional[ZoneSummary]: The summary, or None for an empty batch.
    """
    evaluator = evaluator or ThresholdEvaluator()
    prioritizer = prioritizer or RecommendationPrioritizer()

    batch = sorted(
        (r for r in readings if r.zone == zone),
        key=lambda r: r.timestamp,
        reverse=True,
    )
    if not batch:
        logger.debug("empty_batch", zone=zone, component="summary")
        return None

    latest = batch[0]
    previous = batch[1] if len(batch) > 1 else latest

    vegetation = MetricChange(
        current=latest.vegetation,
        change_pct=percent_change(latest.vegetation, previous.vegetation),
    )
    erosion = MetricChange(
        current=latest.erosion,
        change_pct=percent_change(latest.erosion, previous.erosion),
    )
    moisture = MetricChange(
        current=latest.moisture,
        change_pct=percent_change(latest.moisture, previous.moisture),
    )

    findings = evaluator.evaluate(latest, thresholds)
    alert_messages: List[str] = [ALERT_MESSAGES[f.kind] for f in findings]

    if anomaly_ratio is None:
        anomaly_ratio = evaluator.anomaly_ratio(batch, thresholds)
    report = prioritizer.prioritize(latest, anomaly_ratio)

    if alert_messages:
        count = len(alert_messages)
        alerts_text = f"{count} alert{'s' if count > 1 else ''} active."
    else:
        alerts_text = "No critical alerts."

    spoken = " ".join(
        [
            f"{zone} soil health update:",
            _trend("Vegetation", vegetation.change_pct, "improved", "declined"),
            _trend("Erosion levels", erosion.change_pct, "increased", "decreased"),
            alerts_text,
            report.summary_text,
        ]
    )

    return ZoneSummary(
        zone=zone,
        timestamp=latest.timestamp,
        vegetation=vegetation,
        erosion=erosion,
        moisture=moisture,
        alert_messages=alert_messages,
        interventions=[rec.practice for rec in report.recommendations],
        spoken_summary=spoken,
        overall_status="warning" if alert_messages else "healthy",
    )
