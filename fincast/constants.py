"""
Global constants for fincast.

Purpose
-------
Centralizes default values and heuristic coefficients used by the three
calculators. The cash-flow coefficients are presentation heuristics rather
than statistical laws; they are the defaults of ``CashFlowConfig`` and can
be tuned there.

Usage
-----
>>> from fincast.constants import DEFAULT_MAX_DEBT_MONTHS, MONTHS_PER_YEAR
>>>
>>> strategy = simulate(liabilities, 100, "avalanche", max_months=DEFAULT_MAX_DEBT_MONTHS)

Categories
----------
- Time: month/year conversions
- Debt: iteration ceiling, default minimum payment
- FIRE: variant multipliers, reference age, default inputs
- Cash flow: lookback/horizon, dampening and confidence schedule
- Plotting: figure sizes, line styles
"""

from typing import Dict, Tuple

__all__ = [
    # Time
    "MONTHS_PER_YEAR",
    # Debt
    "DEFAULT_MAX_DEBT_MONTHS",
    "DEFAULT_MIN_PAYMENT_RATE",
    "DEFAULT_MIN_PAYMENT_FLOOR",
    "BALANCE_EPSILON",
    # FIRE
    "DEFAULT_COAST_REFERENCE_AGE",
    "LEAN_FIRE_MULTIPLIER",
    "FAT_FIRE_MULTIPLIER",
    "DEFAULT_MAX_FIRE_YEARS",
    "DEFAULT_FIRE_INPUTS",
    # Cash flow
    "DEFAULT_LOOKBACK_MONTHS",
    "DEFAULT_HORIZON_MONTHS",
    "DEFAULT_RECURRING_INCOME_WEIGHT",
    "DEFAULT_DAMPENING_STEP",
    "DEFAULT_DAMPENING_FLOOR",
    "DEFAULT_CONFIDENCE_START",
    "DEFAULT_CONFIDENCE_DECAY",
    "DEFAULT_CONFIDENCE_FLOOR",
    "HISTORICAL_CONFIDENCE",
    "DEFAULT_TREND_THRESHOLD",
    "MIN_VALID_MONTHS",
    "MIN_TREND_MONTHS",
    "RECURRENCE_MONTHLY_FACTORS",
    # Plotting
    "DEFAULT_FIGSIZE",
    "DEFAULT_FIGSIZE_WIDE",
    "DEFAULT_LINEWIDTH",
    "DEFAULT_LINEWIDTH_THICK",
]


# =============================================================================
# Time
# =============================================================================

MONTHS_PER_YEAR: int = 12
"""Number of months in a year (used for rate and horizon conversions)."""


# =============================================================================
# Debt Defaults
# =============================================================================

DEFAULT_MAX_DEBT_MONTHS: int = 600
"""Iteration ceiling for the debt payoff simulation (50 years)."""

DEFAULT_MIN_PAYMENT_RATE: float = 0.02
"""Fraction of balance used as minimum payment when a record has none (2%)."""

DEFAULT_MIN_PAYMENT_FLOOR: float = 25.0
"""Lowest default minimum payment when a record has none."""

BALANCE_EPSILON: float = 1e-9
"""Balances at or below this amount count as paid off."""


# =============================================================================
# FIRE Defaults
# =============================================================================

DEFAULT_COAST_REFERENCE_AGE: int = 65
"""Traditional retirement age used as the Coast FIRE reference."""

LEAN_FIRE_MULTIPLIER: float = 0.5
"""Lean FIRE target as a fraction of the regular FIRE number."""

FAT_FIRE_MULTIPLIER: float = 1.5
"""Fat FIRE target as a multiple of the regular FIRE number."""

DEFAULT_MAX_FIRE_YEARS: int = 50
"""Search ceiling (years) when locating the year the FIRE number is reached."""

DEFAULT_FIRE_INPUTS: Dict[str, float] = {
    "current_age": 30,
    "target_retirement_age": 55,
    "monthly_expenses": 4_000.0,
    "current_savings": 50_000.0,
    "expected_annual_return": 7.0,
    "inflation_rate": 2.5,
    "withdrawal_rate": 4.0,
}
"""Starting values for a new FIRE profile."""


# =============================================================================
# Cash-Flow Defaults
# =============================================================================

DEFAULT_LOOKBACK_MONTHS: int = 6
"""Trailing calendar months aggregated as history."""

DEFAULT_HORIZON_MONTHS: int = 12
"""Months projected ahead."""

DEFAULT_RECURRING_INCOME_WEIGHT: float = 0.3
"""Share of normalized recurring income added on top of the historical average."""

DEFAULT_DAMPENING_STEP: float = 0.03
"""Per-month reduction of the trend multiplier."""

DEFAULT_DAMPENING_FLOOR: float = 0.5
"""Lowest trend multiplier applied far into the horizon."""

DEFAULT_CONFIDENCE_START: float = 95.0
"""Confidence intercept: month i gets start - i * decay."""

DEFAULT_CONFIDENCE_DECAY: float = 4.0
"""Confidence points lost per projected month."""

DEFAULT_CONFIDENCE_FLOOR: float = 40.0
"""Lowest confidence reported for any projected month."""

HISTORICAL_CONFIDENCE: float = 100.0
"""Confidence of observed (historical) months."""

DEFAULT_TREND_THRESHOLD: float = 50.0
"""Slope (currency units per month) above which a trend is labelled up/down."""

MIN_VALID_MONTHS: int = 2
"""Months with activity required before any projection is produced."""

MIN_TREND_MONTHS: int = 3
"""Months with activity required before a trend slope is fitted."""

RECURRENCE_MONTHLY_FACTORS: Dict[str, float] = {
    "daily": 30.0,
    "weekly": 4.33,
    "biweekly": 2.17,
    "monthly": 1.0,
    "quarterly": 1.0 / 3.0,
    "yearly": 1.0 / 12.0,
}
"""Multipliers converting a recurring amount to its monthly equivalent."""


# =============================================================================
# Plotting Defaults
# =============================================================================

DEFAULT_FIGSIZE: Tuple[int, int] = (12, 6)
"""Default figure size (width, height) in inches."""

DEFAULT_FIGSIZE_WIDE: Tuple[int, int] = (14, 6)
"""Figure size for month-by-month timelines."""

DEFAULT_LINEWIDTH: float = 1.5
"""Default line width for standard plot lines."""

DEFAULT_LINEWIDTH_THICK: float = 2.5
"""Line width for emphasized lines (totals, targets)."""
