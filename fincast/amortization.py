"""
Amortization primitive for fincast.

Purpose
-------
Simulates one liability's balance decay month by month. Each month:

    interest_t = B_{t-1} · r            with r = APR / 100 / 12
    paid_t     = min(payment_t, B_{t-1} + interest_t)
    B_t        = B_{t-1} + interest_t - paid_t

The step function is shared by the single-liability schedule below and by
the multi-liability payoff simulator in ``debt.py``, so both use exactly
the same accrual and payment rule.

Example
-------
>>> schedule = amortize(balance=5_000, interest_rate=20, payment=250)
>>> months_to_payoff = len(schedule)
>>> total_interest = schedule["interest"].sum()
"""

from __future__ import annotations

from dataclasses import dataclass
import warnings

import pandas as pd

from .constants import BALANCE_EPSILON, DEFAULT_MAX_DEBT_MONTHS
from .exceptions import SimulationLimitWarning
from .utils import check_non_negative, check_positive, monthly_rate

__all__ = [
    "AmortizationStep",
    "amortization_step",
    "is_non_amortizing",
    "amortize",
]


@dataclass(frozen=True)
class AmortizationStep:
    """Outcome of one month for one liability."""
    interest: float
    payment: float
    principal: float
    balance: float

    @property
    def paid_off(self) -> bool:
        return self.balance <= 0.0


def amortization_step(balance: float, rate: float, payment: float) -> AmortizationStep:
    """
    Accrue one month of interest on *balance*, then apply *payment*.

    Parameters
    ----------
    balance : float
        Balance at the start of the month.
    rate : float
        Monthly interest rate as a fraction (e.g. 0.2 / 12).
    payment : float
        Amount available to pay this month. Only what is owed is used;
        the unused remainder is ``payment - step.payment``.

    Returns
    -------
    AmortizationStep
        Interest accrued, amount actually paid, principal reduction and
        closing balance (snapped to 0 once within BALANCE_EPSILON).
    """
    interest = balance * rate
    owed = balance + interest
    paid = min(max(payment, 0.0), owed)
    closing = owed - paid
    if closing <= BALANCE_EPSILON:
        closing = 0.0
    return AmortizationStep(
        interest=interest,
        payment=paid,
        principal=paid - interest,
        balance=closing,
    )


def is_non_amortizing(balance: float, interest_rate: float, payment: float) -> bool:
    """True when *payment* does not exceed the first month's interest.

    Such a liability never shrinks on its own payment: the balance stays
    flat (payment == interest) or grows.
    """
    return balance > 0 and payment <= balance * monthly_rate(interest_rate)


def amortize(
    balance: float,
    interest_rate: float,
    payment: float,
    *,
    max_months: int = DEFAULT_MAX_DEBT_MONTHS,
) -> pd.DataFrame:
    """
    Month-by-month schedule of a single liability under a fixed payment.

    Parameters
    ----------
    balance : float
        Opening balance (>= 0).
    interest_rate : float
        Annual interest rate in percent (>= 0).
    payment : float
        Fixed monthly payment (> 0), minimum plus any extra.
    max_months : int, default 600
        Iteration ceiling. A schedule that has not reached zero by then is
        returned truncated and a SimulationLimitWarning is emitted.

    Returns
    -------
    pd.DataFrame
        Columns ``month`` (1-indexed), ``payment``, ``interest``,
        ``principal``, ``balance``. Empty when the opening balance is 0.

    Examples
    --------
    >>> df = amortize(1_000, 0, 250)
    >>> df["balance"].tolist()
    [750.0, 500.0, 250.0, 0.0]
    """
    check_non_negative("balance", balance)
    check_non_negative("interest_rate", interest_rate)
    check_positive("payment", payment)
    check_positive("max_months", max_months)

    if is_non_amortizing(balance, interest_rate, payment):
        warnings.warn(
            f"Payment {payment:,.2f} does not cover the monthly interest on "
            f"{balance:,.2f} at {interest_rate}%; the balance will not decrease.",
            SimulationLimitWarning,
            stacklevel=2,
        )

    r = monthly_rate(interest_rate)
    rows = []
    current = float(balance)
    month = 0
    while current > 0 and month < max_months:
        month += 1
        step = amortization_step(current, r, payment)
        rows.append({
            "month": month,
            "payment": step.payment,
            "interest": step.interest,
            "principal": step.principal,
            "balance": step.balance,
        })
        current = step.balance

    if current > 0:
        warnings.warn(
            f"Balance still {current:,.2f} after {max_months} months; "
            f"schedule truncated at the iteration ceiling.",
            SimulationLimitWarning,
            stacklevel=2,
        )

    return pd.DataFrame(rows, columns=["month", "payment", "interest", "principal", "balance"])
