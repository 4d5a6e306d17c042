"""Shared fixtures for the monitoring core tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import datetime, timedelta, timezone

import pytest
import structlog

from fieldwatch.models import Reading, ThresholdSet

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)

ReadingFactory = Callable[..., Reading]


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation time for deterministic tests."""
    return NOW


@pytest.fixture
def thresholds() -> ThresholdSet:
    return ThresholdSet()


@pytest.fixture
def reading_factory(now: datetime) -> ReadingFactory:
    """Build readings relative to the fixed evaluation time."""

    def _make(
        zone: str = "north-ridge",
        minutes_ago: float = 0.0,
        moisture: float = 50.0,
        erosion: float = 0.3,
        vegetation: float = 0.7,
    ) -> Reading:
        return Reading(
            zone=zone,
            timestamp=now - timedelta(minutes=minutes_ago),
            moisture=moisture,
            erosion=erosion,
            vegetation=vegetation,
        )

    return _make


@pytest.fixture
def hourly_readings(reading_factory: ReadingFactory) -> list[Reading]:
    """24 healthy readings, one per hour over the last day."""
    return [reading_factory(minutes_ago=60 * i) for i in range(24)]


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Keep structlog configuration from leaking between tests."""
    yield
    structlog.reset_defaults()
