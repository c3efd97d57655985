"""Side-by-side comparison of two rental candidates."""

from __future__ import annotations

from reicalc.errors import InvalidInput
from reicalc.models import (
    ComparedProperty,
    ComparisonInputs,
    ComparisonResults,
    PropertyMetrics,
)


class ComparisonAnalyzer:
    """Compare two properties on cash flow, cap rate and cash return on price.

    Uses a simplified, unfinanced formula set: expenses are a single monthly
    figure and returns are measured against the full price. Both prices are
    validated before either property is evaluated.
    """

    def evaluate(self, inputs: ComparisonInputs) -> ComparisonResults:
        if inputs.property1.price <= 0 or inputs.property2.price <= 0:
            raise InvalidInput("Both property prices must be greater than 0")

        return ComparisonResults(
            property1=self._metrics(inputs.property1),
            property2=self._metrics(inputs.property2),
        )

    def _metrics(self, prop: ComparedProperty) -> PropertyMetrics:
        annual_noi = (prop.monthly_rent * 12) - (prop.monthly_expenses * 12)
        monthly_cash_flow = prop.monthly_rent - prop.monthly_expenses

        return PropertyMetrics(
            monthly_cash_flow=monthly_cash_flow,
            cap_rate_percent=(annual_noi / prop.price) * 100,
            roi_percent=(monthly_cash_flow * 12) / prop.price * 100,
        )

    def reset(self) -> tuple[ComparisonInputs, ComparisonResults]:
        return ComparisonInputs(), ComparisonResults()
