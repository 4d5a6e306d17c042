"""
Feed-health calculators for zone monitoring.

Components:
    freshness: FreshnessClassifier mapping timestamps to age buckets
    availability: AvailabilityCalculator scoring expected vs. actual readings
"""

from fieldwatch.metrics.availability import AvailabilityCalculator
from fieldwatch.metrics.freshness import FreshnessClassifier, classify

__all__: list[str] = [
    "AvailabilityCalculator",
    "FreshnessClassifier",
    "classify",
]
