"""Data models for REICalc."""

from __future__ import annotations

from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field


class CalculatorKind(str, Enum):
    FINANCING = "financing"
    LOAN = "loan"
    FLIP = "flip"
    MAO = "mao"
    COMPARISON = "comparison"


class StorageKey(str, Enum):
    """Persistence slot for each calculator's last inputs."""

    FINANCING_PROPERTY = "financing-property"
    FINANCING_TERMS = "financing-terms"
    FLIP = "flip"
    MAO = "mao"
    COMPARISON = "comparison"


class _Value(BaseModel):
    model_config = ConfigDict(frozen=True)


V = TypeVar("V", bound=BaseModel)


def revise(value: V, **fields: Any) -> V:
    """Copy of ``value`` with ``fields`` replaced, validated like a fresh model.

    Raises ``pydantic.ValidationError`` when a new field breaks a constraint.
    """
    return type(value).model_validate({**value.model_dump(), **fields})


# Rental financing


class PropertyInputs(_Value):
    """Rental property figures. Tax and insurance are annual, the rest monthly."""

    purchase_price: float = 0.0
    monthly_rent: float = Field(default=0.0, ge=0)
    property_tax: float = Field(default=0.0, ge=0)
    insurance: float = Field(default=0.0, ge=0)
    hoa_fees: float = Field(default=0.0, ge=0)
    maintenance: float = Field(default=0.0, ge=0)
    vacancy_rate_percent: float = Field(default=5.0, ge=0)
    property_management_rate_percent: float = Field(default=0.0, ge=0)


class FinancingInputs(_Value):
    down_payment_percent: float = Field(default=20.0, ge=0, le=100)
    interest_rate_percent: float = Field(default=5.0, ge=0)
    loan_term_years: int = Field(default=30, gt=0)
    closing_costs: float = Field(default=0.0, ge=0)


class FinancingResults(_Value):
    monthly_principal_and_interest: float = 0.0
    monthly_expenses: float = 0.0
    monthly_cash_flow: float = 0.0
    cap_rate_percent: float = 0.0
    cash_on_cash_return_percent: float = 0.0
    total_investment: float = 0.0

    @computed_field
    @property
    def annual_cash_flow(self) -> float:
        return self.monthly_cash_flow * 12


# Loan-cost financing


class CustomExpense(_Value):
    name: str
    amount: float = 0.0


class LoanInputs(_Value):
    """Inputs for the loan-cost calculator (a project financed with a mortgage)."""

    purchase_price: float = 0.0
    after_repair_value: float = 0.0
    repair_costs: float = 0.0
    closing_costs: float = 0.0
    holding_costs: float = 0.0
    property_taxes: float = 0.0
    insurance: float = 0.0
    custom_expenses: tuple[CustomExpense, ...] = ()
    down_payment_amount: float = 0.0
    down_payment_percent: float = Field(default=20.0, ge=0, le=100)
    down_payment_is_percent: bool = True
    interest_rate_percent: float = Field(default=0.0, ge=0)
    loan_term_years: int = Field(default=30, gt=0)
    points_percent: float = 0.0
    other_fees: float = 0.0


class LoanResults(_Value):
    loan_amount: float = 0.0
    monthly_payment: float = 0.0
    total_interest: float = 0.0
    total_cost: float = 0.0
    cash_on_cash_return_percent: float = 0.0
    return_on_investment_percent: float = 0.0


# Fix and flip


class FlipInputs(_Value):
    purchase_price: float = 0.0
    repair_costs: float = Field(default=0.0, ge=0)
    holding_costs: float = Field(default=0.0, ge=0)
    selling_price: float = Field(default=0.0, ge=0)
    selling_costs: float = Field(default=0.0, ge=0)


class FlipResults(_Value):
    total_investment: float = 0.0
    total_revenue: float = 0.0
    profit: float = 0.0
    roi_percent: float = 0.0


# Maximum allowable offer


class MAOInputs(_Value):
    after_repair_value: float = 0.0
    repair_costs: float = Field(default=0.0, ge=0)
    desired_profit: float = Field(default=0.0, ge=0)
    holding_costs: float = Field(default=0.0, ge=0)
    selling_costs: float = Field(default=0.0, ge=0)


class MAOResults(_Value):
    maximum_allowable_offer: float = 0.0
    total_costs: float = 0.0
    profit: float = 0.0


# Side-by-side comparison


class ComparedProperty(_Value):
    name: str = ""
    price: float = 0.0
    monthly_rent: float = Field(default=0.0, ge=0)
    monthly_expenses: float = Field(default=0.0, ge=0)


class ComparisonInputs(_Value):
    property1: ComparedProperty = ComparedProperty()
    property2: ComparedProperty = ComparedProperty()


class PropertyMetrics(_Value):
    monthly_cash_flow: float = 0.0
    cap_rate_percent: float = 0.0
    roi_percent: float = 0.0


class ComparisonResults(_Value):
    property1: PropertyMetrics = PropertyMetrics()
    property2: PropertyMetrics = PropertyMetrics()
