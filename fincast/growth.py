"""
Compound growth primitives for fincast.

Closed-form future-value, present-value and required-contribution formulas
under a fixed return. Rates are annual percentages, as users enter them;
every formula compounds monthly at the nominal monthly rate
r_m = annual / 100 / 12, with contributions deposited at month end:

    W_{t+1} = W_t · (1 + r_m) + PMT
    W_n     = W_0 · (1 + r_m)^n + PMT · ((1 + r_m)^n - 1) / r_m

Zero rates fall back to the linear limits of the same formulas.
"""

from __future__ import annotations

from typing import Optional
import math

import numpy as np

from .utils import check_non_negative, monthly_rate

__all__ = [
    "future_value",
    "present_value",
    "growth_path",
    "required_monthly_contribution",
    "months_to_grow",
]


def future_value(
    present: float,
    annual_rate: float,
    months: float,
    monthly_contribution: float = 0.0,
) -> float:
    """Value after *months* of monthly compounding with month-end contributions."""
    r = monthly_rate(annual_rate)
    if r == 0:
        return present + monthly_contribution * months
    growth = (1.0 + r) ** months
    return present * growth + monthly_contribution * (growth - 1.0) / r


def present_value(target: float, annual_rate: float, months: float) -> float:
    """Amount that grows to *target* after *months* with no contributions."""
    return target / (1.0 + monthly_rate(annual_rate)) ** months


def growth_path(
    present: float,
    annual_rate: float,
    monthly_contribution: float,
    months: int,
) -> np.ndarray:
    """
    Month-end balances for months 0..*months* (index 0 is *present*).

    Examples
    --------
    >>> growth_path(1_000, 12, 0, 2)
    array([1000.  , 1010.  , 1020.1])
    """
    check_non_negative("months", months)
    path = np.empty(int(months) + 1, dtype=float)
    path[0] = present
    growth = 1.0 + monthly_rate(annual_rate)
    for t in range(1, int(months) + 1):
        path[t] = path[t - 1] * growth + monthly_contribution
    return path


def required_monthly_contribution(
    target: float,
    present: float,
    annual_rate: float,
    months: int,
) -> float:
    """
    Constant monthly payment reaching *target* from *present* in *months*.

    Solves the monthly annuity equation for PMT. Returns 0 when *present*
    already grows to *target* on its own.
    """
    if months <= 0:
        return max(0.0, target - present)
    r = monthly_rate(annual_rate)
    if r == 0:
        return max(0.0, (target - present) / months)
    growth = (1.0 + r) ** months
    shortfall = target - present * growth
    if shortfall <= 0:
        return 0.0
    return shortfall * r / (growth - 1.0)


def months_to_grow(present: float, target: float, annual_rate: float) -> Optional[float]:
    """
    Months until *present* grows to *target* with no contributions.

    Returns 0 if already there, None if growth can never get there
    (nothing saved, or a non-positive return).
    """
    if present >= target:
        return 0.0
    if present <= 0 or annual_rate <= 0:
        return None
    return math.log(target / present) / math.log(1.0 + monthly_rate(annual_rate))
