"""
Remediation advice for monitored zones.

Components:
    prioritizer: RecommendationPrioritizer mapping readings to ranked actions
    costs: Cost range estimates per practice
    summary: Plain-text zone health summaries
"""

from fieldwatch.advisory.costs import estimate_cost, estimate_costs
from fieldwatch.advisory.prioritizer import (
    MAINTENANCE,
    RECOMMENDATION_TIERS,
    RecommendationPrioritizer,
    RecommendationRule,
    build_summary_text,
    create_prioritizer,
)
from fieldwatch.advisory.summary import percent_change, summarize

__all__: list[str] = [
    "RecommendationPrioritizer",
    "RecommendationRule",
    "RECOMMENDATION_TIERS",
    "MAINTENANCE",
    "build_summary_text",
    "create_prioritizer",
    "estimate_cost",
    "estimate_costs",
    "percent_change",
    "summarize",
]
