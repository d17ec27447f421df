"""Projection and intersection engine."""

from .intersection import (
    FreedomPointOutcome,
    NoFreedomPoint,
    financial_freedom_point,
    find_all_crossings,
    first_crossing,
    segment_intersection,
)
from .projection import (
    ProjectionEngine,
    ProjectionResult,
    compute_required_capital_trajectory,
    compute_savings_trajectory,
    net_worth,
    net_worth_appreciation,
)

__all__ = [
    "FreedomPointOutcome",
    "NoFreedomPoint",
    "ProjectionEngine",
    "ProjectionResult",
    "compute_required_capital_trajectory",
    "compute_savings_trajectory",
    "financial_freedom_point",
    "find_all_crossings",
    "first_crossing",
    "net_worth",
    "net_worth_appreciation",
    "segment_intersection",
]
