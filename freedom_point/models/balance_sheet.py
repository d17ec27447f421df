"""Starting financial snapshot of a life plan."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

MONETARY_FIELDS = (
    "cash",
    "stock",
    "bond",
    "precious_metal",
    "other_assets",
    "property_value",
    "other_real_estate",
    "liability_value",
    "provision",
    "property_value_ir",
    "liability_value_ir",
    "expected_inflation",
)


class BalanceSheet(BaseModel):
    """Assets, liabilities and assumptions at the beginning of the plan."""

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    begin: int = Field(..., ge=0, le=150, description="Age at plan start")
    end: int = Field(..., ge=0, le=150, description="Age at plan end")

    # Liquid and financial assets
    cash: float = Field(default=0.0, description="Cash holdings")
    stock: float = Field(default=0.0, description="Stock holdings")
    bond: float = Field(default=0.0, description="Bond holdings")
    precious_metal: float = Field(default=0.0, description="Precious metal holdings")
    other_assets: float = Field(default=0.0, description="Any other assets")

    # Real estate
    property_value: float = Field(default=0.0, description="Primary property value")
    other_real_estate: float = Field(default=0.0, description="Other real estate")

    # Liabilities
    liability_value: float = Field(default=0.0, description="Outstanding liabilities")
    provision: float = Field(default=0.0, description="Provisions set aside")

    # Rates
    property_value_ir: float = Field(
        default=0.0, description="Annual property appreciation rate (fraction)"
    )
    liability_value_ir: float = Field(
        default=0.0, description="Annual liability interest rate (fraction)"
    )
    expected_inflation: float = Field(
        default=0.0, description="Expected annual inflation in percent (2 = 2%)"
    )

    @field_validator(*MONETARY_FIELDS, mode="before")
    @classmethod
    def absent_is_zero(cls, v):
        return 0.0 if v is None else v

    @field_validator("end")
    @classmethod
    def validate_end(cls, v: int, info: ValidationInfo) -> int:
        if "begin" in info.data and v <= info.data["begin"]:
            raise ValueError("End age must be greater than begin age")
        return v

    @property
    def plan_length(self) -> int:
        """Number of years covered by the plan."""
        return self.end - self.begin

    def ages(self) -> List[int]:
        """Ages from begin to end inclusive."""
        return list(range(self.begin, self.end + 1))

    def net_worth(self) -> float:
        """Assets minus liabilities and provisions."""
        return (
            (self.cash + self.stock + self.bond + self.precious_metal + self.other_assets)
            + (self.property_value + self.other_real_estate)
            - (self.liability_value + self.provision)
        )

    def net_worth_appreciation(self) -> float:
        """Yearly change of net worth from property appreciation and liability interest.

        Shown alongside the projection; it does not feed the trajectories.
        """
        appreciation = (self.property_value + self.other_real_estate) * self.property_value_ir
        return appreciation - self.liability_value * self.liability_value_ir
