"""
FIRE (Financial Independence, Retire Early) projection module for fincast.

Purpose
-------
Converts a spending/savings profile into target net worth figures and a
year-by-year accumulation curve under compound growth.

Targets
-------
    fire_number  = 12 · monthly_expenses / (withdrawal_rate / 100)
    lean         = 0.5 · fire_number
    fat          = 1.5 · fire_number
    coast        = fire_number / (1 + r_m)^(12 · (reference_age - current_age))

with reference_age = max(65, target_retirement_age).

Accumulation
------------
Every formula compounds monthly at r_m = r / 12. Starting from current
savings, each month compounds once and then receives that month's savings:

    W_{t+1} = W_t · (1 + r_m) + monthly_savings

``yearly_projections`` samples the month-end path every 12 months up to
the target age. ``years_to_fire`` interpolates linearly between the two
month-ends that bracket the FIRE number, and ``on_track`` holds when that
month is no later than the target age. ``monthly_savings_needed`` solves
the same recurrence for the constant payment that lands on the FIRE number
exactly at the target age, so saving that amount is always on track.

By default r is the nominal expected return. With
``FIREConfig(use_real_returns=True)`` the real return (1+r)/(1+i) - 1
replaces it in every formula above; in both modes
``inflation_adjusted_fire_number`` reports the FIRE number in nominal
currency at the target age.

Example
-------
>>> inputs = FIREInputs(
...     current_age=30, target_retirement_age=55, monthly_expenses=4_000,
...     current_savings=50_000, expected_annual_return=7, inflation_rate=2.5,
...     withdrawal_rate=4,
... )
>>> results = calculate(inputs, current_monthly_savings=2_000)
>>> results.fire_number
1200000.0
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, TYPE_CHECKING
import logging
import math

import numpy as np

from .constants import (
    DEFAULT_COAST_REFERENCE_AGE,
    DEFAULT_FIRE_INPUTS,
    DEFAULT_MAX_FIRE_YEARS,
    FAT_FIRE_MULTIPLIER,
    LEAN_FIRE_MULTIPLIER,
    MONTHS_PER_YEAR,
)
from .exceptions import ValidationError
from .growth import growth_path, months_to_grow, present_value, required_monthly_contribution
from .types import FIREResultsDict, YearlyProjectionDict
from .utils import check_non_negative, check_positive, real_return

if TYPE_CHECKING:
    from .config import FIREConfig

__all__ = [
    "FIREInputs",
    "YearlyProjection",
    "FIREResults",
    "FinancialSnapshot",
    "calculate",
    "summarize_financials",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FIREInputs:
    """
    User-editable FIRE assumptions. All rates are annual percentages.

    Raises
    ------
    ValidationError
        Target age not after current age, non-positive expenses or
        withdrawal rate, negative savings, or rates at or below -100%.
    """
    current_age: float
    target_retirement_age: float
    monthly_expenses: float
    current_savings: float
    expected_annual_return: float
    inflation_rate: float
    withdrawal_rate: float

    def __post_init__(self) -> None:
        check_non_negative("current_age", self.current_age)
        if self.target_retirement_age <= self.current_age:
            raise ValidationError(
                f"target_retirement_age ({self.target_retirement_age}) must be "
                f"greater than current_age ({self.current_age})."
            )
        check_positive("monthly_expenses", self.monthly_expenses)
        check_non_negative("current_savings", self.current_savings)
        check_positive("withdrawal_rate", self.withdrawal_rate)
        if self.withdrawal_rate > 100:
            raise ValidationError(
                f"withdrawal_rate is a percentage and must be <= 100 (got {self.withdrawal_rate})."
            )
        for name in ("expected_annual_return", "inflation_rate"):
            if getattr(self, name) <= -100:
                raise ValidationError(f"{name} must be greater than -100% (got {getattr(self, name)}).")

    @classmethod
    def defaults(cls) -> "FIREInputs":
        """Starting profile for a new user."""
        return cls(**DEFAULT_FIRE_INPUTS)

    def update(self, **changes: Any) -> "FIREInputs":
        """Return a copy with *changes* applied (validated again)."""
        return replace(self, **changes)

    @property
    def years_to_target(self) -> float:
        return self.target_retirement_age - self.current_age


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class YearlyProjection:
    """Savings at the end of one projected year."""
    year: int
    age: float
    savings: float
    fire_number: float
    percent_complete: float

    def to_dict(self) -> YearlyProjectionDict:
        return {
            "year": self.year,
            "age": self.age,
            "savings": self.savings,
            "fire_number": self.fire_number,
            "percent_complete": self.percent_complete,
        }


@dataclass(frozen=True)
class FIREResults:
    """
    Output of ``calculate``.

    ``years_to_fire``, ``months_to_fire`` and ``projected_retirement_age``
    are None when the FIRE number is not reached within the search ceiling
    (50 years by default); ``on_track`` is then False. ``coast_fire_age``
    is None when current savings can never grow to the Coast number on
    their own.
    """
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
    yearly_projections: List[YearlyProjection] = field(default_factory=list)

    def to_dict(self) -> FIREResultsDict:
        return {
            "fire_number": self.fire_number,
            "lean_fire_number": self.lean_fire_number,
            "fat_fire_number": self.fat_fire_number,
            "coast_fire_number": self.coast_fire_number,
            "coast_fire_age": self.coast_fire_age,
            "inflation_adjusted_fire_number": self.inflation_adjusted_fire_number,
            "years_to_fire": self.years_to_fire,
            "months_to_fire": self.months_to_fire,
            "projected_retirement_age": self.projected_retirement_age,
            "monthly_savings_needed": self.monthly_savings_needed,
            "on_track": self.on_track,
            "progress_percentage": self.progress_percentage,
            "current_savings_rate": self.current_savings_rate,
            "yearly_projections": [p.to_dict() for p in self.yearly_projections],
        }


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------

def _first_crossing(path: np.ndarray, target: float) -> Optional[float]:
    """Fractional month at which *path* first reaches *target* (linear interpolation).

    Balances within a relative 1e-9 of *target* count as reaching it, so a
    path built from the exact annuity payment crosses on its final month.
    """
    threshold = target * (1.0 - 1e-9)
    if path[0] >= threshold:
        return 0.0
    hits = np.flatnonzero(path >= threshold)
    if hits.size == 0:
        return None
    k = int(hits[0])
    before, after = float(path[k - 1]), float(path[k])
    return (k - 1) + min(1.0, (target - before) / (after - before))


def calculate(
    inputs: FIREInputs,
    current_monthly_savings: float,
    *,
    monthly_income: Optional[float] = None,
    start_year: Optional[int] = None,
    config: Optional[FIREConfig] = None,
) -> FIREResults:
    """
    Compute FIRE targets and the accumulation curve.

    Parameters
    ----------
    inputs : FIREInputs
    current_monthly_savings : float
        Amount currently saved per month (>= 0).
    monthly_income : float, optional
        When given and positive, ``current_savings_rate`` is
        ``current_monthly_savings / monthly_income · 100``; otherwise 0.
    start_year : int, optional
        Calendar year of projection year 0. Defaults to the current year.
    config : FIREConfig, optional
        Multipliers, Coast reference age, search ceiling and the
        real-return switch.

    Returns
    -------
    FIREResults
        ``yearly_projections`` holds one row per year from year 1 up to
        the target retirement age. When the horizon is not a whole number
        of years the final row is the target age itself, never past it.
    """
    check_non_negative("current_monthly_savings", current_monthly_savings)
    if monthly_income is not None:
        check_non_negative("monthly_income", monthly_income)

    coast_reference_age = config.coast_reference_age if config else DEFAULT_COAST_REFERENCE_AGE
    lean_multiplier = config.lean_multiplier if config else LEAN_FIRE_MULTIPLIER
    fat_multiplier = config.fat_multiplier if config else FAT_FIRE_MULTIPLIER
    max_years = config.max_years if config else DEFAULT_MAX_FIRE_YEARS
    use_real = config.use_real_returns if config else False
    start_year = start_year if start_year is not None else date.today().year

    rate = inputs.expected_annual_return
    if use_real:
        rate = real_return(inputs.expected_annual_return, inputs.inflation_rate)

    annual_expenses = inputs.monthly_expenses * MONTHS_PER_YEAR
    fire_number = annual_expenses / (inputs.withdrawal_rate / 100.0)

    reference_age = max(coast_reference_age, inputs.target_retirement_age)
    coast_fire_number = present_value(
        fire_number, rate, (reference_age - inputs.current_age) * MONTHS_PER_YEAR
    )
    coast_months = months_to_grow(inputs.current_savings, coast_fire_number, rate)
    coast_fire_age = (
        inputs.current_age + coast_months / MONTHS_PER_YEAR if coast_months is not None else None
    )

    years_to_target = inputs.years_to_target
    target_months = int(round(years_to_target * MONTHS_PER_YEAR))
    path = growth_path(
        inputs.current_savings,
        rate,
        current_monthly_savings,
        max(target_months, max_years * MONTHS_PER_YEAR),
    )

    crossing = _first_crossing(path, fire_number)
    if crossing is not None:
        months_to_fire = int(math.ceil(crossing - 1e-9))
        years_to_fire = crossing / MONTHS_PER_YEAR
        projected_retirement_age = inputs.current_age + years_to_fire
    else:
        months_to_fire = None
        years_to_fire = None
        projected_retirement_age = None
    on_track = months_to_fire is not None and months_to_fire <= target_months

    # One row per year-end; a fractional horizon ends on a short final row
    # at the target age.
    table_years = int(math.ceil(target_months / MONTHS_PER_YEAR))
    yearly_projections = []
    for k in range(1, table_years + 1):
        t = min(k * MONTHS_PER_YEAR, target_months)
        yearly_projections.append(
            YearlyProjection(
                year=start_year + k,
                age=inputs.current_age + t / MONTHS_PER_YEAR,
                savings=float(path[t]),
                fire_number=fire_number,
                percent_complete=min(100.0, float(path[t]) / fire_number * 100.0),
            )
        )

    monthly_savings_needed = required_monthly_contribution(
        fire_number,
        inputs.current_savings,
        rate,
        target_months,
    )

    if monthly_income:
        current_savings_rate = current_monthly_savings / monthly_income * 100.0
    else:
        current_savings_rate = 0.0

    logger.debug(
        "FIRE number %.2f at rate %.3f%%; reached after %s years", fire_number, rate, years_to_fire
    )

    return FIREResults(
        fire_number=fire_number,
        lean_fire_number=fire_number * lean_multiplier,
        fat_fire_number=fire_number * fat_multiplier,
        coast_fire_number=coast_fire_number,
        coast_fire_age=coast_fire_age,
        inflation_adjusted_fire_number=(
            fire_number * (1.0 + inputs.inflation_rate / 100.0) ** years_to_target
        ),
        years_to_fire=years_to_fire,
        months_to_fire=months_to_fire,
        projected_retirement_age=projected_retirement_age,
        monthly_savings_needed=monthly_savings_needed,
        on_track=on_track,
        progress_percentage=min(100.0, inputs.current_savings / fire_number * 100.0),
        current_savings_rate=current_savings_rate,
        yearly_projections=yearly_projections,
    )


# ---------------------------------------------------------------------------
# Financial snapshot (seeding inputs from history)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FinancialSnapshot:
    """Year-to-date averages used to seed FIRE inputs from recorded history."""
    avg_monthly_income: float
    avg_monthly_expenses: float
    monthly_savings: float
    savings_rate: float
    net_worth: float

    def seed_inputs(self, inputs: FIREInputs) -> FIREInputs:
        """Replace savings and expenses in *inputs* with observed values where available."""
        changes: Dict[str, Any] = {}
        if self.net_worth > 0:
            changes["current_savings"] = self.net_worth
        if self.avg_monthly_expenses > 0:
            changes["monthly_expenses"] = round(self.avg_monthly_expenses)
        return inputs.update(**changes) if changes else inputs


def summarize_financials(
    income_records: Iterable[Any],
    expense_records: Iterable[Any],
    *,
    total_assets: float = 0.0,
    total_liabilities: float = 0.0,
    as_of: Optional[date] = None,
) -> FinancialSnapshot:
    """
    Average monthly income and expenses over the current calendar year.

    Records are any objects with ``date`` and ``amount`` attributes (the
    cash-flow ``IncomeRecord``/``ExpenseRecord`` qualify). Only records
    dated in the year of *as_of*, up to *as_of*, are counted; the divisor
    is the number of elapsed months including the current one.
    """
    as_of = as_of or date.today()
    months_elapsed = as_of.month

    def year_to_date_total(records: Iterable[Any]) -> float:
        return sum(
            float(r.amount) for r in records
            if r.date.year == as_of.year and r.date <= as_of
        )

    avg_income = year_to_date_total(income_records) / months_elapsed
    avg_expenses = year_to_date_total(expense_records) / months_elapsed
    monthly_savings = avg_income - avg_expenses
    return FinancialSnapshot(
        avg_monthly_income=avg_income,
        avg_monthly_expenses=avg_expenses,
        monthly_savings=monthly_savings,
        savings_rate=monthly_savings / avg_income * 100.0 if avg_income > 0 else 0.0,
        net_worth=total_assets - total_liabilities,
    )
