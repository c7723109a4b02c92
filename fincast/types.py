"""
Type definitions for fincast.

Purpose
-------
Provides TypedDict definitions for the dictionaries produced by the
calculators' ``to_dict`` methods and written by ``serialization``.
Using TypedDicts documents the JSON shape of every result file.

Usage
-----
>>> from fincast.types import DebtComparisonDict
>>> payload: DebtComparisonDict = comparison.to_dict()

Type Definitions
----------------
DebtPayoffItemDict, DebtStrategyDict, DebtComparisonDict
    Debt payoff simulation output.

YearlyProjectionDict, FIREResultsDict
    FIRE calculator output.

MonthlyAggregateDict, ProjectionPointDict, CashFlowInsightsDict, CashFlowForecastDict
    Cash-flow forecaster output.

ResultFileDict
    Envelope written by ``save_result``.
"""

from typing import Any, Dict, List, Optional
from typing_extensions import TypedDict, Literal

__all__ = [
    "DebtPayoffItemDict",
    "DebtStrategyDict",
    "DebtComparisonDict",
    "YearlyProjectionDict",
    "FIREResultsDict",
    "MonthlyAggregateDict",
    "ProjectionPointDict",
    "CashFlowInsightsDict",
    "CashFlowForecastDict",
    "ResultFileDict",
]


# ---------------------------------------------------------------------------
# Debt payoff
# ---------------------------------------------------------------------------

class DebtPayoffItemDict(TypedDict):
    """
    One liability inside a strategy.

    Attributes
    ----------
    months_to_payoff : int or None
        None when the liability is not retired within the ceiling.
    payoff_date : str or None
        ISO date.
    payoff_order : int
        1-based position in the retirement sequence.
    """

    id: str
    name: str
    category: str
    balance: float
    interest_rate: float
    minimum_payment: float
    months_to_payoff: Optional[int]
    payoff_date: Optional[str]
    total_interest_paid: float
    payoff_order: int
    non_amortizing: bool
    warnings: List[str]


class DebtStrategyDict(TypedDict):
    name: Literal["avalanche", "snowball"]
    description: str
    payoff_order: List[DebtPayoffItemDict]
    debt_free_date: Optional[str]
    total_months: int
    total_interest_paid: float
    monthly_budget: float
    resolved: bool
    warnings: List[str]


class DebtComparisonDict(TypedDict):
    """
    Both strategies plus portfolio figures.

    ``avalanche`` and ``snowball`` are None when there are no liabilities.
    """

    avalanche: Optional[DebtStrategyDict]
    snowball: Optional[DebtStrategyDict]
    recommended: Literal["avalanche", "snowball"]
    potential_savings: float
    total_debt: float
    total_minimum_payments: float
    average_interest_rate: float
    highest_interest_rate: float
    lowest_balance: float
    debts_count: int
    is_debt_free: bool


# ---------------------------------------------------------------------------
# FIRE
# ---------------------------------------------------------------------------

class YearlyProjectionDict(TypedDict):
    year: int
    age: float
    savings: float
    fire_number: float
    percent_complete: float


class FIREResultsDict(TypedDict):
    fire_number: float
    lean_fire_number: float
    fat_fire_number: float
    coast_fire_number: float
    coast_fire_age: Optional[float]
    inflation_adjusted_fire_number: float
    years_to_fire: Optional[float]
    months_to_fire: Optional[int]
    projected_retirement_age: Optional[float]
    monthly_savings_needed: float
    on_track: bool
    progress_percentage: float
    current_savings_rate: float
    yearly_projections: List[YearlyProjectionDict]


# ---------------------------------------------------------------------------
# Cash flow
# ---------------------------------------------------------------------------

class MonthlyAggregateDict(TypedDict):
    month: str
    income: float
    expenses: float


class ProjectionPointDict(TypedDict):
    month: str
    month_label: str
    projected_income: float
    projected_expenses: float
    net_cash_flow: float
    cumulative_balance: float
    is_projected: bool
    confidence: float


class CashFlowInsightsDict(TypedDict):
    total_projected_income: float
    total_projected_expenses: float
    avg_monthly_savings: float
    savings_rate: float
    negative_months_count: int
    lowest_balance: float
    highest_balance: float
    end_of_year_balance: float
    income_trend: Literal["up", "down", "stable"]
    expense_trend: Literal["up", "down", "stable"]


class CashFlowForecastDict(TypedDict):
    status: Literal["ok", "insufficient_data"]
    historical_months: int
    history: List[MonthlyAggregateDict]
    projection_data: List[ProjectionPointDict]
    insights: Optional[CashFlowInsightsDict]
    avg_income: float
    avg_expenses: float
    base_recurring_income: float
    income_slope: float
    expense_slope: float


# ---------------------------------------------------------------------------
# Result files
# ---------------------------------------------------------------------------

class ResultFileDict(TypedDict):
    """
    Envelope of a saved result.

    Attributes
    ----------
    schema_version : str
    kind : {"debt", "fire", "cashflow"}
    created : str
        ISO date the file was written.
    result : dict
        The calculator's ``to_dict()`` payload.
    """

    schema_version: str
    kind: Literal["debt", "fire", "cashflow"]
    created: str
    result: Dict[str, Any]
