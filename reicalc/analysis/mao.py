"""Maximum allowable offer for wholesale and flip sourcing.

    MAO = ARV - (repairs + holding + selling + desired profit)

A negative MAO is returned as-is: it means the deal cannot reach the
desired profit at any purchase price.
"""

from __future__ import annotations

from reicalc.errors import InvalidInput
from reicalc.models import MAOInputs, MAOResults


class MAOAnalyzer:
    def evaluate(self, inputs: MAOInputs) -> MAOResults:
        if inputs.after_repair_value <= 0:
            raise InvalidInput("After repair value must be greater than 0")

        total_costs = (
            inputs.repair_costs
            + inputs.holding_costs
            + inputs.selling_costs
            + inputs.desired_profit
        )

        return MAOResults(
            maximum_allowable_offer=inputs.after_repair_value - total_costs,
            total_costs=total_costs,
            profit=inputs.desired_profit,
        )

    def reset(self) -> tuple[MAOInputs, MAOResults]:
        return MAOInputs(), MAOResults()
