"""
fincast - Personal Finance Forecasting

Deterministic calculators for household finances: compare debt payoff
strategies, estimate a FIRE timeline, and project monthly cash flow.

Modules
-------
- debt         : Avalanche/snowball payoff simulation and comparison
- fire         : FIRE numbers, timeline and yearly projection
- cashflow     : Trend-based monthly cash-flow forecast
- amortization : Single-liability amortization primitives
- growth       : Compound growth formulas
- trend        : Least-squares trend fitting
- utils        : Shared utilities (validation, rates, calendar months, formatting)

"""

from .amortization import amortize
from .cashflow import CashFlowForecast, ExpenseRecord, IncomeRecord, Recurrence, project
from .debt import DebtComparison, DebtStrategy, Liability, LiabilityCategory, compare_strategies, simulate
from .exceptions import ConfigurationError, FincastError, SimulationLimitWarning, ValidationError
from .fire import FIREInputs, FIREResults, calculate, summarize_financials
from . import utils

__version__ = "0.1.0"

__all__ = [
    # Debt
    "Liability",
    "LiabilityCategory",
    "DebtStrategy",
    "DebtComparison",
    "simulate",
    "compare_strategies",
    "amortize",
    # FIRE
    "FIREInputs",
    "FIREResults",
    "calculate",
    "summarize_financials",
    # Cash flow
    "Recurrence",
    "IncomeRecord",
    "ExpenseRecord",
    "CashFlowForecast",
    "project",
    # Errors
    "FincastError",
    "ValidationError",
    "ConfigurationError",
    "SimulationLimitWarning",
    "utils",
]
