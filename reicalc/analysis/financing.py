"""Rental property financing analysis for buy-and-hold investors."""

from __future__ import annotations

from reicalc.analysis.amortization import monthly_payment, ratio_percent
from reicalc.errors import InvalidInput
from reicalc.models import FinancingInputs, FinancingResults, PropertyInputs


class FinancingAnalyzer:
    """Evaluate a financed rental: loan payment, expenses, cash flow and returns.

    Vacancy and management are both taken as a share of gross monthly rent,
    independently of each other.
    """

    def evaluate(self, prop: PropertyInputs, financing: FinancingInputs) -> FinancingResults:
        if prop.purchase_price <= 0:
            raise InvalidInput("Purchase price must be greater than 0")

        # Loan
        down_payment = prop.purchase_price * (financing.down_payment_percent / 100)
        loan_amount = prop.purchase_price - down_payment
        monthly_rate = financing.interest_rate_percent / (12 * 100)
        number_of_payments = financing.loan_term_years * 12
        monthly_pi = monthly_payment(loan_amount, monthly_rate, number_of_payments)

        # Operating expenses
        vacancy_amount = prop.monthly_rent * (prop.vacancy_rate_percent / 100)
        management_amount = prop.monthly_rent * (prop.property_management_rate_percent / 100)
        monthly_expenses = (
            prop.property_tax / 12
            + prop.insurance / 12
            + prop.hoa_fees
            + prop.maintenance
            + vacancy_amount
            + management_amount
        )

        monthly_cash_flow = prop.monthly_rent - monthly_pi - monthly_expenses
        total_investment = down_payment + financing.closing_costs

        # Returns; cash-on-cash is unguarded when nothing is invested
        annual_noi = (prop.monthly_rent * 12) - (monthly_expenses * 12)
        cap_rate = (annual_noi / prop.purchase_price) * 100
        cash_on_cash = ratio_percent(monthly_cash_flow * 12, total_investment)

        return FinancingResults(
            monthly_principal_and_interest=monthly_pi,
            monthly_expenses=monthly_expenses,
            monthly_cash_flow=monthly_cash_flow,
            cap_rate_percent=cap_rate,
            cash_on_cash_return_percent=cash_on_cash,
            total_investment=total_investment,
        )

    def reset(self) -> tuple[PropertyInputs, FinancingInputs, FinancingResults]:
        return PropertyInputs(), FinancingInputs(), FinancingResults()
