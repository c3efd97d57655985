"""Fix-and-flip deal analysis."""

from __future__ import annotations

from reicalc.analysis.amortization import ratio_percent
from reicalc.errors import InvalidInput
from reicalc.models import FlipInputs, FlipResults


class FlipAnalyzer:
    """Analyze a fix-and-flip: buy, renovate, hold, then resell."""

    def evaluate(self, inputs: FlipInputs) -> FlipResults:
        if inputs.purchase_price <= 0:
            raise InvalidInput("Purchase price must be greater than 0")

        total_investment = inputs.purchase_price + inputs.repair_costs + inputs.holding_costs
        total_revenue = inputs.selling_price - inputs.selling_costs
        profit = total_revenue - total_investment

        return FlipResults(
            total_investment=total_investment,
            total_revenue=total_revenue,
            profit=profit,
            roi_percent=ratio_percent(profit, total_investment),
        )

    def reset(self) -> tuple[FlipInputs, FlipResults]:
        return FlipInputs(), FlipResults()
