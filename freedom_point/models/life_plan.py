"""
Life plan: a balance sheet plus the ordered stages that cover it.

The plan is immutable. Editing operations return a new plan so a caller can
keep the previous one around (for undo, or to compare projections).

Shape validation lives here rather than in the projection engine: the engine
runs on whatever stages it is handed, and it is the caller's job to check the
plan before trusting the result.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .balance_sheet import BalanceSheet
from .stage import Stage


class InvalidPlanShape(ValueError):
    """Raised when the stages do not tile the plan horizon."""

    def __init__(self, issues: List[str]) -> None:
        self.issues = list(issues)
        super().__init__("; ".join(self.issues))


class LifePlan(BaseModel):
    """A starting balance sheet and the ordered stages of the plan."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    balance_sheet: BalanceSheet
    stages: List[Stage] = Field(default_factory=list)

    def next_from_age(self) -> int:
        """Age the next appended stage has to start at."""
        if not self.stages:
            return self.balance_sheet.begin
        return self.stages[-1].to_age

    def is_name_taken(self, name: str, ignore_index: Optional[int] = None) -> bool:
        """Case-insensitive check against existing stage names."""
        wanted = name.lower()
        return any(
            stage.name.lower() == wanted
            for index, stage in enumerate(self.stages)
            if index != ignore_index
        )

    def add_stage(self, stage: Stage) -> "LifePlan":
        if self.is_name_taken(stage.name):
            raise ValueError("This name is already used. Choose another name.")
        return self.model_copy(update={"stages": [*self.stages, stage]})

    def replace_stage(self, index: int, stage: Stage) -> "LifePlan":
        if not 0 <= index < len(self.stages):
            raise IndexError(f"No stage at index {index}")
        if self.is_name_taken(stage.name, ignore_index=index):
            raise ValueError("This name is already used. Choose another name.")
        stages = list(self.stages)
        stages[index] = stage
        return self.model_copy(update={"stages": stages})

    def cleared(self) -> "LifePlan":
        """Same balance sheet, no stages."""
        return self.model_copy(update={"stages": []})

    def validation_issues(self) -> List[str]:
        """Every reason the stages fail to cover the plan, in reading order."""
        sheet = self.balance_sheet
        if not self.stages:
            return ["Please add enough stages to cover the plan's length."]

        issues: List[str] = []
        seen = set()
        for stage in self.stages:
            key = stage.name.lower()
            if key in seen:
                issues.append(f"Stage name '{stage.name}' is used more than once")
            seen.add(key)

        if self.stages[0].from_age != sheet.begin:
            issues.append(
                f"First stage starts at {self.stages[0].from_age}, "
                f"plan begins at {sheet.begin}"
            )
        for previous, current in zip(self.stages, self.stages[1:]):
            if current.from_age != previous.to_age:
                issues.append(
                    f"Stage '{current.name}' starts at {current.from_age} "
                    f"but '{previous.name}' ends at {previous.to_age}"
                )

        covered = sum(stage.stage_length for stage in self.stages)
        if covered != sheet.plan_length:
            issues.append(
                f"Stages cover {covered} years, plan length is {sheet.plan_length}"
            )
        if self.stages[-1].to_age != sheet.end:
            issues.append(
                f"Last stage ends at {self.stages[-1].to_age}, plan ends at {sheet.end}"
            )
        return issues

    def is_valid(self) -> bool:
        return not self.validation_issues()

    def validate_shape(self) -> "LifePlan":
        """Return self, or raise InvalidPlanShape listing every problem."""
        issues = self.validation_issues()
        if issues:
            raise InvalidPlanShape(issues)
        return self
