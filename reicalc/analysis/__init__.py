"""Calculation engine for the investment calculators."""

from reicalc.analysis.amortization import monthly_payment
from reicalc.analysis.comparison import ComparisonAnalyzer
from reicalc.analysis.financing import FinancingAnalyzer
from reicalc.analysis.flip import FlipAnalyzer
from reicalc.analysis.loan import LoanAnalyzer
from reicalc.analysis.mao import MAOAnalyzer
