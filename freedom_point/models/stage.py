"""Life stages: contiguous age ranges with their own income and cost profile."""

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from .net_flow import ExpenseModel, RevenueModel


class StageSummary(BaseModel):
    """Income, expense and earning of one stage, as charted per stage."""

    model_config = ConfigDict(frozen=True)

    name: str
    income: float
    expense: float
    earning: float


class Stage(BaseModel):
    """One segment of the life plan."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Stage name, unique within a plan")
    description: str = Field(default="", description="Free-form description")
    from_age: int = Field(..., ge=0, le=150, description="Age the stage starts at")
    to_age: int = Field(..., ge=0, le=150, description="Age the stage ends at")
    revenue_model: RevenueModel = Field(default_factory=RevenueModel)
    expenses_model: ExpenseModel = Field(default_factory=ExpenseModel)

    @field_validator("to_age")
    @classmethod
    def validate_to_age(cls, v: int, info: ValidationInfo) -> int:
        if "from_age" in info.data and v <= info.data["from_age"]:
            raise ValueError('"To age" must be larger than "From age"')
        return v

    @property
    def stage_length(self) -> int:
        return self.to_age - self.from_age

    @property
    def revenue(self) -> float:
        return self.revenue_model.calculate()

    @property
    def expense(self) -> float:
        return self.expenses_model.calculate()

    @property
    def stage_of_life(self) -> float:
        """Net annual flow of the stage: revenue minus expense."""
        return self.revenue - self.expense

    def summary(self) -> StageSummary:
        revenue = self.revenue
        expense = self.expense
        return StageSummary(
            name=self.name, income=revenue, expense=expense, earning=revenue - expense
        )
