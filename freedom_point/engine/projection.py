"""
Projection engine for the Financial Freedom Point.

Turns a starting balance sheet and the ordered stages of a life plan into two
age-indexed trajectories:

* savings: the starting net worth plus each stage's net flow, accrued
  linearly year by year and carried over stage boundaries;
* required capital: the inflation-grown cost of every remaining year of
  expenses, accumulated backward from the end of the plan and then put back
  in chronological order.

The point where the two curves cross is the Financial Freedom Point.

Both walks are pure folds over the stages. Nothing here validates the plan
shape; a plan whose stages do not cover the horizon still produces
trajectories, just with a misplaced final value.
"""

import logging
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from freedom_point.engine.intersection import (
    FreedomPointOutcome,
    NoFreedomPoint,
    find_all_crossings,
    first_crossing,
)
from freedom_point.models.balance_sheet import BalanceSheet
from freedom_point.models.life_plan import LifePlan
from freedom_point.models.stage import Stage, StageSummary
from freedom_point.models.trajectory import Point, Trajectory

logger = logging.getLogger(__name__)

SAVINGS_SERIES_NAME = "Saving Capital"
REQUIRED_CAPITAL_SERIES_NAME = "Consumer Capital"
CROSSINGS_SERIES_NAME = "Intersections"


def net_worth(balance_sheet: BalanceSheet) -> float:
    """Starting capital of the savings trajectory."""
    return balance_sheet.net_worth()


def net_worth_appreciation(balance_sheet: BalanceSheet) -> float:
    """Yearly appreciation of the balance sheet, for display only."""
    return balance_sheet.net_worth_appreciation()


def _accrue_stage(carried: float, stage: Stage) -> Tuple[float, List[float]]:
    """Linear accrual of one stage starting from ``carried``."""
    flow = stage.stage_of_life
    values = [carried + flow * i for i in range(1, stage.stage_length + 1)]
    if values:
        carried = values[-1]
    return carried, values


def compute_savings_trajectory(
    balance_sheet: BalanceSheet, stages: Sequence[Stage]
) -> Trajectory:
    """
    Savings trajectory of the plan.

    Args:
        balance_sheet: Starting snapshot; its net worth seeds the walk
        stages: Stages in plan order

    Returns:
        Trajectory of ``sum(stage_length) + 1`` values. The last value is
        the carried savings plus one more year of the final stage's revenue.
    """
    carried = net_worth(balance_sheet)
    if not stages:
        return Trajectory(begin=balance_sheet.begin, values=[carried])

    values: List[float] = []
    for stage in stages:
        carried, stage_values = _accrue_stage(carried, stage)
        values.extend(stage_values)

    values.append(carried + stages[-1].revenue)
    return Trajectory(begin=balance_sheet.begin, values=values)


def compute_required_capital_trajectory(
    balance_sheet: BalanceSheet, stages: Sequence[Stage]
) -> Trajectory:
    """
    Required capital trajectory of the plan.

    Walks the stages from the last to the first. For the ``i``-th year of a
    stage, with ``folded`` years already taken from later stages, the cost
    added is ``expense * (1 + inflation / 100) ** (plan_length - (i + folded) + 1)``.
    The accumulated sequence, seeded with 0, is reversed at the end so the
    first value belongs to the start of the plan and the last value is 0.

    Returns:
        Trajectory of ``sum(stage_length) + 1`` values.
    """
    growth = np.float64(1 + balance_sheet.expected_inflation / 100)
    plan_length = balance_sheet.plan_length

    carried = 0.0
    folded = 0
    backward: List[float] = [carried]
    for stage in reversed(stages):
        expense = stage.expense
        for i in range(1, stage.stage_length + 1):
            if expense:
                # overflow and 0.0 to a negative power give inf, not an error
                with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
                    grown = expense * growth ** (plan_length - (i + folded) + 1)
                    carried = float(carried + grown)
            backward.append(carried)
        folded += stage.stage_length

    backward.reverse()
    return Trajectory(begin=balance_sheet.begin, values=backward)


class ProjectionResult(BaseModel):
    """Everything one projection run produces."""

    model_config = ConfigDict(frozen=True)

    begin: int
    end: int
    net_worth: float
    net_worth_appreciation: float
    savings: Trajectory
    required_capital: Trajectory
    crossings: List[Point] = Field(default_factory=list)
    freedom_point: FreedomPointOutcome = Field(default_factory=NoFreedomPoint)
    stage_summaries: List[StageSummary] = Field(default_factory=list)

    @property
    def reached(self) -> bool:
        """Whether the plan reaches financial freedom within its horizon."""
        return isinstance(self.freedom_point, Point)

    def freedom_point_payload(self, places: int = 3) -> Dict[str, Any]:
        if isinstance(self.freedom_point, Point):
            point = self.freedom_point.rounded(places)
            return {"reached": True, "age": point.x, "value": point.y}
        return {
            "reached": False,
            "age": None,
            "value": None,
            "reason": self.freedom_point.reason,
        }

    def to_chart_payload(self, places: int = 3) -> Dict[str, Any]:
        """Series for a line chart of both trajectories plus a crossing scatter."""
        return {
            "point_start": self.begin,
            "x_label": "Age",
            "y_label": "Money",
            "series": [
                {"name": SAVINGS_SERIES_NAME, "type": "line", "data": list(self.savings)},
                {
                    "name": REQUIRED_CAPITAL_SERIES_NAME,
                    "type": "line",
                    "data": list(self.required_capital),
                },
                {
                    "name": CROSSINGS_SERIES_NAME,
                    "type": "scatter",
                    "data": [
                        list(point.rounded(places).as_tuple()) for point in self.crossings
                    ],
                },
            ],
        }


class ProjectionEngine(BaseModel):
    """Projects a life plan and locates its Financial Freedom Point."""

    model_config = ConfigDict(frozen=True)

    balance_sheet: BalanceSheet = Field(..., description="Starting snapshot")
    stages: List[Stage] = Field(default_factory=list, description="Stages in plan order")

    @classmethod
    def from_plan(cls, plan: LifePlan) -> "ProjectionEngine":
        return cls(balance_sheet=plan.balance_sheet, stages=plan.stages)

    def savings_trajectory(self) -> Trajectory:
        return compute_savings_trajectory(self.balance_sheet, self.stages)

    def required_capital_trajectory(self) -> Trajectory:
        return compute_required_capital_trajectory(self.balance_sheet, self.stages)

    def run(self) -> ProjectionResult:
        """Project both trajectories and search for their crossings."""
        savings = self.savings_trajectory()
        required_capital = self.required_capital_trajectory()
        crossings = find_all_crossings(savings, required_capital)

        logger.debug(
            f"Projected {len(savings)} savings and {len(required_capital)} "
            f"required capital points, {len(crossings)} crossings"
        )

        return ProjectionResult(
            begin=self.balance_sheet.begin,
            end=self.balance_sheet.end,
            net_worth=net_worth(self.balance_sheet),
            net_worth_appreciation=net_worth_appreciation(self.balance_sheet),
            savings=savings,
            required_capital=required_capital,
            crossings=crossings,
            freedom_point=first_crossing(crossings),
            stage_summaries=[stage.summary() for stage in self.stages],
        )
