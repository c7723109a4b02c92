"""
Debt payoff simulation module for fincast.

Purpose
-------
Amortizes a portfolio of liabilities under two competing repayment
policies and compares their outcomes:

- avalanche: highest interest rate first (ties: larger balance first)
- snowball:  smallest balance first (ties: higher interest rate first)

Both policies share one simulation core; only the ordering differs.

Monthly dynamics
----------------
The household commits a fixed monthly budget

    budget = Σ_k minimum_payment_k + extra_monthly_payment

Each month, every unpaid liability accrues interest and receives its
minimum payment (see ``amortization.amortization_step``). Whatever is left
of the budget forms the extra-payment pool:

    pool_t = budget - Σ_k paid_t^k

which is applied to the first unpaid liability in policy order, cascading
to the next one if that liability is retired mid-month. As debts are
retired their minimum payments stop being spent, so the pool grows by
exactly that amount in every later month (the "snowball" roll-forward,
applied identically under both policies).

The pool is a local value recomputed inside each monthly step, never module
state, so ``simulate`` is a pure function of its arguments.

Termination
-----------
The loop carries an explicit ceiling (600 months by default). A liability
whose minimum payment does not cover its monthly interest is flagged as
non-amortizing with a SimulationLimitWarning; if any liability is still
outstanding at the ceiling it is marked unresolved (``months_to_payoff is
None``) instead of looping forever.

Example
-------
>>> from datetime import date
>>> debts = [
...     Liability("cc", "Visa", balance=5_000, interest_rate=20, minimum_payment=150,
...               category="credit_card"),
...     Liability("car", "Car loan", balance=10_000, interest_rate=5, minimum_payment=200,
...               category="car_loan"),
... ]
>>> avalanche = simulate(debts, 100, "avalanche", start=date(2025, 1, 1))
>>> [item.id for item in avalanche.payoff_order]
['cc', 'car']
>>> comparison = compare_strategies(debts, 100, start=date(2025, 1, 1))
>>> comparison.recommended
'avalanche'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Literal, Mapping, Optional, Sequence, Tuple, TYPE_CHECKING
import logging
import warnings

import pandas as pd

from .amortization import amortization_step, is_non_amortizing
from .constants import (
    BALANCE_EPSILON,
    DEFAULT_MAX_DEBT_MONTHS,
    DEFAULT_MIN_PAYMENT_FLOOR,
    DEFAULT_MIN_PAYMENT_RATE,
)
from .exceptions import SimulationLimitWarning, ValidationError
from .types import DebtComparisonDict, DebtPayoffItemDict, DebtStrategyDict
from .utils import add_months, check_non_negative, check_positive, monthly_rate

if TYPE_CHECKING:
    from .config import DebtSimulationConfig

__all__ = [
    "LiabilityCategory",
    "Liability",
    "DebtPayoffItem",
    "DebtStrategy",
    "DebtComparison",
    "POLICIES",
    "default_minimum_payment",
    "order_liabilities",
    "simulate",
    "compare_strategies",
]

logger = logging.getLogger(__name__)

Policy = Literal["avalanche", "snowball"]


# ---------------------------------------------------------------------------
# Liability (input snapshot)
# ---------------------------------------------------------------------------

class LiabilityCategory(str, Enum):
    """Closed set of liability categories. Unknown values map to OTHER."""
    MORTGAGE = "mortgage"
    CAR_LOAN = "car_loan"
    STUDENT_LOAN = "student_loan"
    CREDIT_CARD = "credit_card"
    PERSONAL_LOAN = "personal_loan"
    LINE_OF_CREDIT = "line_of_credit"
    BUSINESS_LOAN = "business_loan"
    OTHER = "other"

    @classmethod
    def normalize(cls, value: Any) -> "LiabilityCategory":
        """Coerce a string (any case) or member to a category, falling back to OTHER."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.OTHER
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OTHER


def default_minimum_payment(balance: float) -> float:
    """Minimum payment assumed for records that carry none: max(2% of balance, 25)."""
    return max(balance * DEFAULT_MIN_PAYMENT_RATE, DEFAULT_MIN_PAYMENT_FLOOR)


@dataclass(frozen=True)
class Liability:
    """
    Immutable snapshot of one debt.

    Parameters
    ----------
    id : str
        Stable identifier (unique within a portfolio).
    name : str
        Display name.
    balance : float
        Outstanding balance (>= 0; a zero balance counts as already retired).
    interest_rate : float
        Annual interest rate in percent (>= 0).
    minimum_payment : float
        Required monthly payment (> 0).
    category : LiabilityCategory or str, default OTHER
        Unknown strings are normalized to ``LiabilityCategory.OTHER``.
    """
    id: str
    name: str
    balance: float
    interest_rate: float
    minimum_payment: float
    category: LiabilityCategory = LiabilityCategory.OTHER

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", LiabilityCategory.normalize(self.category))
        check_non_negative(f"balance of {self.name!r}", self.balance)
        check_non_negative(f"interest_rate of {self.name!r}", self.interest_rate)
        check_positive(f"minimum_payment of {self.name!r}", self.minimum_payment)

    @property
    def monthly_interest(self) -> float:
        """Interest accrued on the current balance in one month."""
        return self.balance * monthly_rate(self.interest_rate)

    @property
    def non_amortizing(self) -> bool:
        """True when the minimum payment does not exceed the monthly interest."""
        return is_non_amortizing(self.balance, self.interest_rate, self.minimum_payment)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Liability":
        """
        Build a Liability from a persisted record.

        Accepts ``balance`` or ``current_balance``. A missing or null
        interest rate means 0%; a missing or null minimum payment defaults
        to ``default_minimum_payment(balance)``.
        """
        balance = record.get("balance", record.get("current_balance"))
        if balance is None:
            raise ValidationError(f"Liability record {record.get('id')!r} has no balance.")
        balance = float(balance)
        rate = record.get("interest_rate")
        minimum = record.get("minimum_payment")
        return cls(
            id=str(record.get("id", record.get("name", ""))),
            name=str(record.get("name", record.get("id", ""))),
            balance=balance,
            interest_rate=float(rate) if rate is not None else 0.0,
            minimum_payment=float(minimum) if minimum else default_minimum_payment(balance),
            category=record.get("category"),
        )


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DebtPayoffItem:
    """
    Payoff outcome of one liability under one policy.

    ``payoff_order`` is the 1-based priority the policy assigned to the
    liability. ``months_to_payoff`` and ``payoff_date`` are None when the
    liability was still outstanding at the iteration ceiling.
    """
    id: str
    name: str
    category: LiabilityCategory
    balance: float
    interest_rate: float
    minimum_payment: float
    months_to_payoff: Optional[int]
    payoff_date: Optional[date]
    total_interest_paid: float
    payoff_order: int
    non_amortizing: bool = False
    warnings: Tuple[str, ...] = ()

    @property
    def resolved(self) -> bool:
        return self.months_to_payoff is not None

    def to_dict(self) -> DebtPayoffItemDict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "balance": self.balance,
            "interest_rate": self.interest_rate,
            "minimum_payment": self.minimum_payment,
            "months_to_payoff": self.months_to_payoff,
            "payoff_date": self.payoff_date.isoformat() if self.payoff_date else None,
            "total_interest_paid": self.total_interest_paid,
            "payoff_order": self.payoff_order,
            "non_amortizing": self.non_amortizing,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class DebtStrategy:
    """
    Outcome of one repayment policy over the whole portfolio.

    Attributes
    ----------
    name : {"avalanche", "snowball"}
    description : str
    payoff_order : tuple of DebtPayoffItem
        Items in retirement sequence (unresolved items last, by priority).
    debt_free_date : date or None
        ``start + total_months``; None if any liability is unresolved.
    total_months : int
        Max ``months_to_payoff`` over items; the ceiling when unresolved.
    total_interest_paid : float
        Sum of the items' ``total_interest_paid``.
    monthly_budget : float
        Σ minimum payments + extra monthly payment.
    resolved : bool
        All liabilities retired within the ceiling.
    warnings : tuple of str
        Per-item warnings collected in payoff order.
    balance_history : pd.DataFrame
        Remaining balance per liability id after each simulated month
        (index ``month``, 1-indexed).
    """
    name: Policy
    description: str
    payoff_order: Tuple[DebtPayoffItem, ...]
    debt_free_date: Optional[date]
    total_months: int
    total_interest_paid: float
    monthly_budget: float
    resolved: bool = True
    warnings: Tuple[str, ...] = ()
    balance_history: pd.DataFrame = field(default_factory=pd.DataFrame, repr=False, compare=False)

    @property
    def is_debt_free(self) -> bool:
        """True for the terminal state reached with no liabilities at all."""
        return not self.payoff_order

    def to_dict(self) -> DebtStrategyDict:
        return {
            "name": self.name,
            "description": self.description,
            "payoff_order": [item.to_dict() for item in self.payoff_order],
            "debt_free_date": self.debt_free_date.isoformat() if self.debt_free_date else None,
            "total_months": self.total_months,
            "total_interest_paid": self.total_interest_paid,
            "monthly_budget": self.monthly_budget,
            "resolved": self.resolved,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class DebtComparison:
    """Both policies side by side plus portfolio summary figures."""
    avalanche: Optional[DebtStrategy]
    snowball: Optional[DebtStrategy]
    recommended: Policy
    potential_savings: float
    total_debt: float
    total_minimum_payments: float
    average_interest_rate: float
    highest_interest_rate: float
    lowest_balance: float
    debts_count: int

    @property
    def is_debt_free(self) -> bool:
        return self.debts_count == 0

    @property
    def recommended_strategy(self) -> Optional[DebtStrategy]:
        return self.avalanche if self.recommended == "avalanche" else self.snowball

    def to_dict(self) -> DebtComparisonDict:
        return {
            "avalanche": self.avalanche.to_dict() if self.avalanche else None,
            "snowball": self.snowball.to_dict() if self.snowball else None,
            "recommended": self.recommended,
            "potential_savings": self.potential_savings,
            "total_debt": self.total_debt,
            "total_minimum_payments": self.total_minimum_payments,
            "average_interest_rate": self.average_interest_rate,
            "highest_interest_rate": self.highest_interest_rate,
            "lowest_balance": self.lowest_balance,
            "debts_count": self.debts_count,
            "is_debt_free": self.is_debt_free,
        }


# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------

def _avalanche_key(liability: Liability) -> Tuple[float, float]:
    return (-liability.interest_rate, -liability.balance)


def _snowball_key(liability: Liability) -> Tuple[float, float]:
    return (liability.balance, -liability.interest_rate)


POLICIES: Dict[str, Callable[[Liability], Tuple[float, float]]] = {
    "avalanche": _avalanche_key,
    "snowball": _snowball_key,
}

STRATEGY_DESCRIPTIONS: Dict[str, str] = {
    "avalanche": (
        "Pay the highest interest rate first to minimize the total interest paid."
    ),
    "snowball": (
        "Pay the smallest balance first for quick wins and motivation."
    ),
}


def order_liabilities(liabilities: Iterable[Liability], policy: Policy) -> List[Liability]:
    """Return liabilities in the priority order of *policy* (stable for full ties)."""
    if policy not in POLICIES:
        raise ValidationError(
            f"Unknown policy {policy!r}. Available policies: {sorted(POLICIES)}"
        )
    return sorted(liabilities, key=POLICIES[policy])


# ---------------------------------------------------------------------------
# Simulation core
# ---------------------------------------------------------------------------

def _step_month(
    ordered: Sequence[Liability],
    rates: Sequence[float],
    balances: Sequence[float],
    budget: float,
) -> Tuple[Tuple[float, ...], Tuple[float, ...]]:
    """
    Advance every liability by one month.

    Returns the closing balances and the interest accrued this month, both
    aligned with *ordered*. Retired liabilities (balance 0) are skipped.
    """
    closing = list(balances)
    accrued = [0.0] * len(ordered)
    pool = budget

    for i, liability in enumerate(ordered):
        if closing[i] <= 0:
            continue
        step = amortization_step(closing[i], rates[i], liability.minimum_payment)
        accrued[i] = step.interest
        closing[i] = step.balance
        pool -= step.payment

    # Extra pool: first unpaid liability in policy order, cascading on payoff
    for i in range(len(ordered)):
        if pool <= BALANCE_EPSILON:
            break
        if closing[i] <= 0:
            continue
        paid = min(pool, closing[i])
        closing[i] -= paid
        pool -= paid
        if closing[i] <= BALANCE_EPSILON:
            closing[i] = 0.0

    return tuple(closing), tuple(accrued)


def simulate(
    liabilities: Iterable[Liability],
    extra_monthly_payment: float = 0.0,
    policy: Policy = "avalanche",
    *,
    start: Optional[date] = None,
    max_months: int = DEFAULT_MAX_DEBT_MONTHS,
    config: Optional[DebtSimulationConfig] = None,
) -> DebtStrategy:
    """
    Simulate paying off *liabilities* under *policy*.

    Parameters
    ----------
    liabilities : iterable of Liability
        Portfolio snapshot. Never mutated.
    extra_monthly_payment : float, default 0
        Amount paid on top of all minimums every month (>= 0).
    policy : {"avalanche", "snowball"}, default "avalanche"
        Ordering policy.
    start : date, optional
        Simulation start; payoff dates are ``start + months``. Defaults to
        today.
    max_months : int, default 600
        Iteration ceiling. Overridden by ``config.max_months`` when a
        config is given.
    config : DebtSimulationConfig, optional

    Returns
    -------
    DebtStrategy
        With no liabilities, the debt-free terminal state: ``total_months
        == 0``, empty ``payoff_order``, ``debt_free_date == start``.

    Raises
    ------
    ValidationError
        Unknown policy, negative extra payment, non-positive ceiling or
        duplicate liability ids.
    """
    if config is not None:
        max_months = config.max_months
    check_non_negative("extra_monthly_payment", extra_monthly_payment)
    check_positive("max_months", max_months)
    ordered = order_liabilities(list(liabilities), policy)
    start = start or date.today()

    ids = [liability.id for liability in ordered]
    if len(set(ids)) != len(ids):
        raise ValidationError(f"Liability ids must be unique, got {ids}.")

    monthly_budget = sum(l.minimum_payment for l in ordered) + extra_monthly_payment

    if not ordered:
        return DebtStrategy(
            name=policy,
            description=STRATEGY_DESCRIPTIONS[policy],
            payoff_order=(),
            debt_free_date=start,
            total_months=0,
            total_interest_paid=0.0,
            monthly_budget=monthly_budget,
        )

    logger.debug(
        "Simulating %s over %d liabilities, order=%s, budget=%.2f",
        policy, len(ordered), ids, monthly_budget,
    )

    item_warnings: List[List[str]] = [[] for _ in ordered]
    flagged = [l.non_amortizing for l in ordered]
    for i, liability in enumerate(ordered):
        if flagged[i]:
            message = (
                f"{liability.name}: minimum payment {liability.minimum_payment:,.2f} "
                f"does not cover monthly interest {liability.monthly_interest:,.2f}."
            )
            item_warnings[i].append(message)
            warnings.warn(message, SimulationLimitWarning, stacklevel=2)

    rates = tuple(monthly_rate(l.interest_rate) for l in ordered)
    balances = tuple(float(l.balance) for l in ordered)
    interest_paid = [0.0] * len(ordered)
    payoff_month: List[Optional[int]] = [0 if b <= 0 else None for b in balances]
    history: List[Tuple[float, ...]] = []

    month = 0
    while any(m is None for m in payoff_month) and month < max_months:
        month += 1
        balances, accrued = _step_month(ordered, rates, balances, monthly_budget)
        for i, amount in enumerate(accrued):
            interest_paid[i] += amount
            if payoff_month[i] is None and balances[i] <= 0:
                payoff_month[i] = month
        history.append(balances)

    resolved = all(m is not None for m in payoff_month)
    if not resolved:
        outstanding = [ordered[i].name for i, m in enumerate(payoff_month) if m is None]
        for i, m in enumerate(payoff_month):
            if m is None:
                item_warnings[i].append(
                    f"{ordered[i].name}: balance {balances[i]:,.2f} still outstanding "
                    f"after {max_months} months."
                )
        warnings.warn(
            f"Debt simulation stopped at {max_months} months with unresolved "
            f"liabilities: {outstanding}.",
            SimulationLimitWarning,
            stacklevel=2,
        )

    items = [
        DebtPayoffItem(
            id=l.id,
            name=l.name,
            category=l.category,
            balance=l.balance,
            interest_rate=l.interest_rate,
            minimum_payment=l.minimum_payment,
            months_to_payoff=payoff_month[i],
            payoff_date=add_months(start, payoff_month[i]) if payoff_month[i] is not None else None,
            total_interest_paid=interest_paid[i],
            payoff_order=i + 1,
            non_amortizing=flagged[i],
            warnings=tuple(item_warnings[i]),
        )
        for i, l in enumerate(ordered)
    ]
    items.sort(key=lambda it: (it.months_to_payoff is None, it.months_to_payoff or 0, it.payoff_order))

    total_months = max(it.months_to_payoff for it in items) if resolved else max_months
    balance_history = pd.DataFrame(
        history,
        columns=ids,
        index=pd.RangeIndex(1, len(history) + 1, name="month"),
    )

    logger.debug("%s finished after %d months (resolved=%s)", policy, month, resolved)

    return DebtStrategy(
        name=policy,
        description=STRATEGY_DESCRIPTIONS[policy],
        payoff_order=tuple(items),
        debt_free_date=add_months(start, total_months) if resolved else None,
        total_months=total_months,
        total_interest_paid=sum(it.total_interest_paid for it in items),
        monthly_budget=monthly_budget,
        resolved=resolved,
        warnings=tuple(w for it in items for w in it.warnings),
        balance_history=balance_history,
    )


# ---------------------------------------------------------------------------
# Strategy comparison
# ---------------------------------------------------------------------------

def compare_strategies(
    liabilities: Iterable[Liability],
    extra_monthly_payment: float = 0.0,
    *,
    start: Optional[date] = None,
    max_months: int = DEFAULT_MAX_DEBT_MONTHS,
    config: Optional[DebtSimulationConfig] = None,
) -> DebtComparison:
    """
    Run both policies and pick the recommended one.

    The policy with the lower total interest is recommended; ties go to
    avalanche. With no liabilities the comparison is the debt-free state
    (both strategies None, ``is_debt_free`` True) and nothing is simulated.
    """
    portfolio = list(liabilities)
    if not portfolio:
        return DebtComparison(
            avalanche=None,
            snowball=None,
            recommended="avalanche",
            potential_savings=0.0,
            total_debt=0.0,
            total_minimum_payments=0.0,
            average_interest_rate=0.0,
            highest_interest_rate=0.0,
            lowest_balance=0.0,
            debts_count=0,
        )

    avalanche = simulate(
        portfolio, extra_monthly_payment, "avalanche",
        start=start, max_months=max_months, config=config,
    )
    snowball = simulate(
        portfolio, extra_monthly_payment, "snowball",
        start=start, max_months=max_months, config=config,
    )

    potential_savings = snowball.total_interest_paid - avalanche.total_interest_paid
    recommended: Policy = "snowball" if potential_savings < -BALANCE_EPSILON else "avalanche"

    rates = [l.interest_rate for l in portfolio if l.interest_rate > 0]
    return DebtComparison(
        avalanche=avalanche,
        snowball=snowball,
        recommended=recommended,
        potential_savings=potential_savings,
        total_debt=sum(l.balance for l in portfolio),
        total_minimum_payments=sum(l.minimum_payment for l in portfolio),
        average_interest_rate=sum(rates) / len(rates) if rates else 0.0,
        highest_interest_rate=max(l.interest_rate for l in portfolio),
        lowest_balance=min(l.balance for l in portfolio),
        debts_count=len(portfolio),
    )
