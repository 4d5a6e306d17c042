"""
Cost estimates for recommended practices.

Costs are looked up by the leading words of a practice; practices with no
table entry get a generic per-hectare range.
"""

from typing import Iterable, List, Tuple

from fieldwatch.models.recommendations import CostEstimate, Recommendation

PER_HECTARE = "USD per hectare"

# practice prefix -> (min, max, unit)
COST_TABLE: Tuple[Tuple[str, float, float, str], ...] = (
    ("Emergency reforestation", 500.0, 1500.0, PER_HECTARE),
    ("Apply cover crops", 100.0, 300.0, PER_HECTARE),
    ("Install check dams", 200.0, 800.0, "USD per dam"),
    ("Initiate terracing", 300.0, 1000.0, PER_HECTARE),
    ("Emergency irrigation", 150.0, 500.0, PER_HECTARE),
    ("Install drip irrigation", 400.0, 1200.0, PER_HECTARE),
)

DEFAULT_COST = (50.0, 200.0, PER_HECTARE)


def estimate_cost(recommendation: Recommendation) -> CostEstimate:
    """Estimate the cost range of one recommendation."""
    practice = recommendation.practice.lower()
    for prefix, min_cost, max_cost, unit in COST_TABLE:
        if practice.startswith(prefix.lower()):
            break
    else:
        min_cost, max_cost, unit = DEFAULT_COST

    return CostEstimate(
        recommendation=recommendation,
        min_cost=min_cost,
        max_cost=max_cost,
        unit=unit,
    )


def estimate_costs(recommendations: Iterable[Recommendation]) -> List[CostEstimate]:
    """
    Estimate cost ranges for a list of recommendations.

    Args:
        recommendations: Recommendations to cost.

    Returns:
        List[CostEstimate]: One estimate per recommendation, same order.
    """
    return [estimate_cost(rec) for rec in recommendations]
