"""Shared financial math: loan amortization and return ratios."""

from __future__ import annotations


def monthly_payment(loan_amount: float, monthly_rate: float, number_of_payments: int) -> float:
    """Level monthly principal-and-interest payment for an amortizing loan.

    A zero rate falls back to straight-line repayment, since the compound
    formula divides by zero there. Callers guarantee ``loan_amount >= 0``
    and a positive ``number_of_payments``.
    """
    if monthly_rate == 0:
        return loan_amount / number_of_payments

    growth = (1 + monthly_rate) ** number_of_payments
    return loan_amount * (monthly_rate * growth) / (growth - 1)


def total_interest(payment: float, loan_amount: float, number_of_payments: int) -> float:
    """Interest paid over the life of the loan."""
    return payment * number_of_payments - loan_amount


def ratio_percent(numerator: float, denominator: float) -> float:
    """``numerator / denominator * 100`` with IEEE-754 results for a zero denominator.

    Returns are not guarded against an empty investment base: ``inf``/``-inf``
    for a non-zero numerator and ``nan`` for ``0 / 0``, matching plain float
    division on other platforms instead of raising ``ZeroDivisionError``.
    """
    if denominator == 0:
        if numerator == 0:
            return float("nan")
        return float("inf") if numerator > 0 else float("-inf")
    return numerator / denominator * 100
