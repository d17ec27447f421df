"""
Revenue and expense models for a single life stage.

Each model groups the monetary line items of one direction of cash flow and
reduces them to a single annual figure through ``calculate()``. The two
variants are tagged by ``kind`` so a stage payload can be deserialised
without guessing which shape it holds.
"""

from typing import Annotated, Dict, Literal, Protocol, Tuple, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

REVENUE_LINE_ITEMS: Tuple[str, ...] = (
    "net_salary",
    "capital_assets",
    "passive_income",
    "occasional_income",
    "other_income",
    "dependents",
)

EXPENSE_LINE_ITEMS: Tuple[str, ...] = (
    "living_cost_per_month",
    "dependents",
    "purchase_fund",
    "occasional_cost",
    "maintenance_cost",
    "interest_and_repayment",
    "other_expenses",
)

# dependents is a head-count, so it carries no money unless a weight is given
DEFAULT_REVENUE_WEIGHTS: Dict[str, float] = {
    **{item: 1.0 for item in REVENUE_LINE_ITEMS},
    "dependents": 0.0,
}

DEFAULT_EXPENSE_WEIGHTS: Dict[str, float] = {
    **{item: 1.0 for item in EXPENSE_LINE_ITEMS},
    "living_cost_per_month": 12.0,
    "dependents": 0.0,
}


@runtime_checkable
class NetFlowModel(Protocol):
    """Anything that reduces to one annual amount for a stage."""

    def calculate(self) -> float:
        """Return the annual magnitude of the flow."""
        ...


def _weighted_sum(
    model: BaseModel, line_items: Tuple[str, ...], defaults: Dict[str, float]
) -> float:
    weights = {**defaults, **model.weights}  # type: ignore[attr-defined]
    return float(sum(getattr(model, item) * weights[item] for item in line_items))


def _check_weight_keys(weights: Dict[str, float], line_items: Tuple[str, ...]) -> None:
    unknown = sorted(set(weights) - set(line_items))
    if unknown:
        raise ValueError(f"Unknown line items in weights: {', '.join(unknown)}")


class RevenueModel(BaseModel):
    """Income side of a stage."""

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    kind: Literal["revenue"] = "revenue"
    net_salary: float = Field(default=0.0, description="Annual net salary")
    capital_assets: float = Field(default=0.0, description="Annual capital income")
    passive_income: float = Field(default=0.0, description="Annual passive income")
    occasional_income: float = Field(
        default=0.0, description="Averaged annual occasional income"
    )
    other_income: float = Field(default=0.0, description="Any other annual income")
    dependents: int = Field(default=0, ge=0, description="Number of dependents")
    weights: Dict[str, float] = Field(
        default_factory=dict, description="Per line item weight overrides"
    )

    @field_validator(*REVENUE_LINE_ITEMS, mode="before")
    @classmethod
    def absent_is_zero(cls, v):
        return 0 if v is None else v

    @model_validator(mode="after")
    def validate_weights(self) -> "RevenueModel":
        _check_weight_keys(self.weights, REVENUE_LINE_ITEMS)
        return self

    def calculate(self) -> float:
        """Total annual income of the stage."""
        return _weighted_sum(self, REVENUE_LINE_ITEMS, DEFAULT_REVENUE_WEIGHTS)


class ExpenseModel(BaseModel):
    """Cost side of a stage."""

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    kind: Literal["expense"] = "expense"
    living_cost_per_month: float = Field(default=0.0, description="Monthly living cost")
    dependents: int = Field(default=0, ge=0, description="Number of dependents")
    purchase_fund: float = Field(default=0.0, description="Annual saving for purchases")
    occasional_cost: float = Field(
        default=0.0, description="Averaged annual occasional cost"
    )
    maintenance_cost: float = Field(default=0.0, description="Annual maintenance")
    interest_and_repayment: float = Field(
        default=0.0, description="Annual interest and loan repayment"
    )
    other_expenses: float = Field(default=0.0, description="Any other annual cost")
    weights: Dict[str, float] = Field(
        default_factory=dict, description="Per line item weight overrides"
    )

    @field_validator(*EXPENSE_LINE_ITEMS, mode="before")
    @classmethod
    def absent_is_zero(cls, v):
        return 0 if v is None else v

    @model_validator(mode="after")
    def validate_weights(self) -> "ExpenseModel":
        _check_weight_keys(self.weights, EXPENSE_LINE_ITEMS)
        return self

    def calculate(self) -> float:
        """Total annual cost of the stage."""
        return _weighted_sum(self, EXPENSE_LINE_ITEMS, DEFAULT_EXPENSE_WEIGHTS)


FlowModel = Annotated[Union[RevenueModel, ExpenseModel], Field(discriminator="kind")]
