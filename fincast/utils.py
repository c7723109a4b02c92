"""General utilities for fincast

Contents
--------
- Validation helpers
- Rate conversions (annual percent → monthly, nominal → real)
- Calendar-month helpers (month_start, add_months, month_key, month_range)
- Matplotlib formatters (thousands_formatter, format_currency)
"""

from __future__ import annotations

from datetime import date
from typing import Optional

import pandas as pd

from .constants import MONTHS_PER_YEAR
from .exceptions import ValidationError

__all__ = [
    # Validation
    "check_non_negative",
    "check_positive",
    # Rates
    "monthly_rate",
    "real_return",
    # Calendar months
    "month_start",
    "add_months",
    "month_key",
    "month_label",
    "month_range",
    # Formatters
    "thousands_formatter",
    "format_currency",
]

# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def check_non_negative(name: str, value: float) -> None:
    """Raise if *value* is negative (strict)."""
    if value < 0:
        raise ValidationError(f"{name} must be non-negative (got {value}).")


def check_positive(name: str, value: float) -> None:
    """Raise if *value* is zero or negative."""
    if value <= 0:
        raise ValidationError(f"{name} must be positive (got {value}).")


# ---------------------------------------------------------------------------
# Rate conversions
# ---------------------------------------------------------------------------

def monthly_rate(annual_pct: float) -> float:
    """Convert an annual percentage rate to a nominal monthly rate.

    Uses: annual_pct / 100 / 12 (the convention lenders quote APRs in).
    """
    return float(annual_pct) / 100.0 / MONTHS_PER_YEAR


def real_return(nominal_pct: float, inflation_pct: float) -> float:
    """Convert nominal annual return to a real annual return, in percent.

    Uses the Fisher relation: (1 + r) / (1 + i) - 1.
    """
    r = float(nominal_pct) / 100.0
    i = float(inflation_pct) / 100.0
    return ((1.0 + r) / (1.0 + i) - 1.0) * 100.0


# ---------------------------------------------------------------------------
# Calendar-month helpers
# ---------------------------------------------------------------------------

def month_start(d: Optional[date] = None) -> date:
    """Return the first day of the month containing *d* (today if None)."""
    if d is None:
        d = date.today()
    return date(d.year, d.month, 1)


def add_months(d: date, months: int) -> date:
    """Shift *d* by *months* calendar months, clamping the day to month end."""
    return (pd.Timestamp(d) + pd.DateOffset(months=int(months))).date()


def month_key(d: date) -> str:
    """Return the ``YYYY-MM`` key of the month containing *d*."""
    return f"{d.year:04d}-{d.month:02d}"


def month_label(d: date) -> str:
    """Short display label, e.g. ``'Mar 25'``."""
    return d.strftime("%b %y")


def month_range(end: date, months: int) -> pd.PeriodIndex:
    """Monthly PeriodIndex of *months* periods ending with the month of *end*."""
    if months <= 0:
        return pd.PeriodIndex([], freq="M")
    return pd.period_range(end=pd.Period(end, freq="M"), periods=int(months), freq="M")


# ---------------------------------------------------------------------------
# Matplotlib formatters
# ---------------------------------------------------------------------------

def thousands_formatter(x, pos):
    """
    Format axis values as thousands for matplotlib FuncFormatter.

    - 25_000 → "25k"
    - 12_500 → "12.5k"
    - 0 → "0"

    Parameters
    ----------
    x : float
        Value to format (in currency units).
    pos : int
        Tick position (unused, required by FuncFormatter signature).

    Returns
    -------
    str
        Formatted string with "k" suffix.

    Examples
    --------
    >>> from matplotlib.ticker import FuncFormatter
    >>> ax.yaxis.set_major_formatter(FuncFormatter(thousands_formatter))
    """
    if x == 0:
        return '0'
    val = x / 1e3
    return f'{val:.0f}k' if val == int(val) else f'{val:.1f}k'


def format_currency(value, decimals=0, symbol='$'):
    """
    Format currency values for text annotations, labels and CLI tables.

    Parameters
    ----------
    value : float
        Monetary value in currency units. Negative values keep their sign
        in front of the symbol.
    decimals : int, default 0
        Number of decimal places to display.
    symbol : str, default '$'
        Currency symbol prefix.

    Returns
    -------
    str
        Formatted currency string with thousands separators.

    Examples
    --------
    >>> format_currency(1_200_000)
    '$1,200,000'
    >>> format_currency(-350.5, decimals=2)
    '-$350.50'
    """
    sign = '-' if value < 0 else ''
    return f'{sign}{symbol}{abs(value):,.{decimals}f}'
