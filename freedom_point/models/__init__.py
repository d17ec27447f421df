"""Data models for financial freedom planning."""

from .balance_sheet import BalanceSheet
from .life_plan import InvalidPlanShape, LifePlan
from .net_flow import ExpenseModel, FlowModel, NetFlowModel, RevenueModel
from .stage import Stage, StageSummary
from .trajectory import Point, Trajectory

__all__ = [
    "BalanceSheet",
    "ExpenseModel",
    "FlowModel",
    "InvalidPlanShape",
    "LifePlan",
    "NetFlowModel",
    "Point",
    "RevenueModel",
    "Stage",
    "StageSummary",
    "Trajectory",
]
