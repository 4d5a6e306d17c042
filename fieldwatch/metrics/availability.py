"""
Availability Calculator for zone reading feeds.

Scores the health of a zone's data feed from a batch of readings, as
distinct from the values those readings carry. A feed that silently stops
reporting shows up here long before any threshold alert would.

Key Formulas:
    expected_readings = window_minutes / expected_interval_minutes
    availability_pct  = min(100, actual_readings / expected_readings * 100)
    missed_readings   = max(0, expected_readings - actual_readings)

Status:
    availability_pct < 50  -> offline
    availability_pct < 80  -> degraded
    otherwise              -> online

Classes:
    AvailabilityCalculator: Feed availability scoring over a trailing window
"""

import math
from datetime import datetime, timedelta
from typing import Any, Iterable, Optional

import structlog

from fieldwatch.exceptions import InputValidationError
from fieldwatch.models.health import ServiceMetrics, ServiceStatus
from fieldwatch.timeutils import resolve_now
from fieldwatch.validation import validate_readings

logger = structlog.get_logger(__name__)

DEFAULT_EXPECTED_INTERVAL_MINUTES = 60.0
DEFAULT_WINDOW_HOURS = 24
DEFAULT_OFFLINE_BELOW_PCT = 50.0
DEFAULT_DEGRADED_BELOW_PCT = 80.0


class AvailabilityCalculator:
    """
    Calculator for feed availability metrics.

    Metrics are recomputed from the supplied batch on every call; the
    calculator keeps no history between calls.

    The trailing window only constrains the availability count.
    last_reading_at reflects the most recent reading in the whole batch,
    however old, so that a long-dead feed still surfaces its last known
    point.

    Edge Cases Handled:
        - Empty batch: availability 0, status offline, last_reading_at None
        - Readings for other zones: ignored
        - More readings than expected: availability capped at 100

    Example:
        >>> calc = AvailabilityCalculator()
        >>> metrics = calc.compute(readings, zone="north-ridge", now=now)
        >>> print(f"{metrics.availability_pct}% ({metrics.status.value})")

    Attributes:
        window: Trailing window counted for availability.
        offline_below_pct: Availability below which the feed is offline.
        degraded_below_pct: Availability below which the feed is degraded.
        expected_interval_minutes: Default reading cadence.
    """

    def __init__(
        self,
        expected_interval_minutes: float = DEFAULT_EXPECTED_INTERVAL_MINUTES,
        window_hours: int = DEFAULT_WINDOW_HOURS,
        offline_below_pct: float = DEFAULT_OFFLINE_BELOW_PCT,
        degraded_below_pct: float = DEFAULT_DEGRADED_BELOW_PCT,
    ) -> None:
        """
        Initialize the availability calculator.

        Args:
            expected_interval_minutes: Default expected reading cadence (default: 60).
            window_hours: Trailing window length (default: 24).
            offline_below_pct: Offline status threshold (default: 50).
            degraded_below_pct: Degraded status threshold (default: 80).

        Raises:
            ValueError: If window or status thresholds are inconsistent.
        """
        if window_hours <= 0:
            raise ValueError(f"window_hours must be positive, got {window_hours}")
        if not 0 <= offline_below_pct <= degraded_below_pct <= 100:
            raise ValueError(
                f"status thresholds must satisfy 0 <= offline ({offline_below_pct}) "
                f"<= degraded ({degraded_below_pct}) <= 100"
            )
        self._validate_interval(expected_interval_minutes)

        self.expected_interval_minutes = expected_interval_minutes
        self.window = timedelta(hours=window_hours)
        self.offline_below_pct = offline_below_pct
        self.degraded_below_pct = degraded_below_pct

    def compute(
        self,
        readings: Iterable[Any],
        zone: str,
        expected_interval_minutes: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> ServiceMetrics:
        """
        Compute availability metrics for a zone.

        Args:
            readings: Reading batch (instances or mappings), any order.
            zone: Zone to score; readings for other zones are ignored.
            expected_interval_minutes: Expected cadence, overrides the default.
            now: End of the trailing window (defaults to current UTC time).

        Returns:
            ServiceMetrics: Freshly computed availability metrics.

        Raises:
            InputValidationError: If zone is empty, a reading is malformed or the
                interval is not positive.
        """
        if not isinstance(zone, str) or not zone:
            raise InputValidationError("zone must be a non-empty string", field="zone")

        interval = (
            expected_interval_minutes
            if expected_interval_minutes is not None
            else self.expected_interval_minutes
        )
        self._validate_interval(interval)

        now = resolve_now(now)
        window_start = now - self.window
        window_minutes = self.window.total_seconds() / 60.0
        expected = window_minutes / interval

        zone_readings = [r for r in validate_readings(readings) if r.zone == zone]
        if not zone_readings:
            logger.debug("empty_batch", zone=zone, component="availability")

        actual = sum(1 for r in zone_readings if r.timestamp >= window_start)
        availability = min(100.0, actual / expected * 100.0)
        missed = max(0, math.ceil(expected - actual))

        last_reading_at: Optional[datetime] = None
        minutes_since: Optional[int] = None
        if zone_readings:
            last_reading_at = max(r.timestamp for r in zone_readings)
            minutes_since = max(0, math.floor((now - last_reading_at).total_seconds() / 60.0))

        status = self.status_for(availability)

        metrics = ServiceMetrics(
            zone=zone,
            availability_pct=availability,
            unavailability_pct=100.0 - availability,
            expected_readings=expected,
            actual_readings=actual,
            missed_readings=missed,
            last_reading_at=last_reading_at,
            minutes_since_last_reading=minutes_since,
            status=status,
        )

        logger.debug(
            "availability_computed",
            zone=zone,
            availability_pct=metrics.availability_pct,
            missed_readings=missed,
            status=status.value,
        )
        return metrics

    def status_for(self, availability_pct: float) -> ServiceStatus:
        """
        Derive feed status from an availability percentage.

        Args:
            availability_pct: Availability in percent.

        Returns:
            ServiceStatus: offline, degraded or online.
        """
        if availability_pct < self.offline_below_pct:
            return ServiceStatus.OFFLINE
        if availability_pct < self.degraded_below_pct:
            return ServiceStatus.DEGRADED
        return ServiceStatus.ONLINE

    @staticmethod
    def _validate_interval(interval: float) -> None:
        if interval <= 0:
            raise InputValidationError(
                f"expected_interval_minutes must be positive, got {interval}",
                field="expected_interval_minutes",
            )

    def __repr__(self) -> str:
        """String representation of the calculator."""
        return (
            f"AvailabilityCalculator(interval={self.expected_interval_minutes}m, "
            f"window={self.window})"
        )


def compute(
    readings: Iterable[Any],
    zone: str,
    expected_interval_minutes: float = DEFAULT_EXPECTED_INTERVAL_MINUTES,
    now: Optional[datetime] = None,
) -> ServiceMetrics:
    """
    Compute availability metrics with default window and status thresholds.

    Example:
        >>> compute([], "north-ridge", 60, now).status
        <ServiceStatus.OFFLINE: 'offline'>
    """
    return AvailabilityCalculator().compute(
        readings,
        zone=zone,
        expected_interval_minutes=expected_interval_minutes,
        now=now,
    )
