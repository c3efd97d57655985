"""Loan-cost analysis for a financed renovation project.

A separate calculator from the rental financing analyzer: it totals the
full cost of carrying the loan (interest, points, fees, itemized expenses)
and measures the resale spread against it. The two share only the
amortization math.
"""

from __future__ import annotations

from reicalc.analysis.amortization import monthly_payment, ratio_percent, total_interest
from reicalc.errors import InvalidInput
from reicalc.models import LoanInputs, LoanResults


class LoanAnalyzer:
    def evaluate(self, inputs: LoanInputs) -> LoanResults:
        if inputs.down_payment_is_percent:
            down_payment = inputs.purchase_price * inputs.down_payment_percent / 100
        else:
            down_payment = inputs.down_payment_amount

        loan_amount = inputs.purchase_price - down_payment
        if loan_amount <= 0:
            raise InvalidInput("Loan amount must be greater than 0")

        monthly_rate = inputs.interest_rate_percent / 100 / 12
        number_of_payments = inputs.loan_term_years * 12
        payment = monthly_payment(loan_amount, monthly_rate, number_of_payments)
        interest = total_interest(payment, loan_amount, number_of_payments)

        # Points are charged on the loan amount
        financing_charges = loan_amount * inputs.points_percent / 100 + inputs.other_fees
        custom_total = sum(e.amount for e in inputs.custom_expenses)
        total_cost = (
            inputs.purchase_price
            + inputs.repair_costs
            + inputs.closing_costs
            + inputs.holding_costs
            + inputs.property_taxes
            + inputs.insurance
            + interest
            + custom_total
            + financing_charges
        )

        spread = inputs.after_repair_value - total_cost
        return LoanResults(
            loan_amount=loan_amount,
            monthly_payment=payment,
            total_interest=interest,
            total_cost=total_cost,
            cash_on_cash_return_percent=ratio_percent(spread, down_payment),
            return_on_investment_percent=ratio_percent(spread, total_cost),
        )

    def reset(self) -> tuple[LoanInputs, LoanResults]:
        return LoanInputs(), LoanResults()
