"""
Cash-flow trend forecasting module for fincast.

Purpose
-------
Fits a trend to historical monthly income/expense totals and projects
cash flow month by month with a decaying confidence score.

Method
------
1. Aggregate records into the trailing ``lookback_months`` calendar months
   ending with the month of ``as_of`` (months without records are zero).
2. Months with any income or expense are "valid". Fewer than 2 valid
   months ⇒ the forecast reports ``status == "insufficient_data"`` and
   projects nothing.
3. Average income/expenses over valid months; with at least 3 valid
   months fit an OLS slope against their index 0..n-1 (else slope 0).
4. Active recurring income, normalized to a monthly equivalent, adds a
   weighted baseline (30% by default).
5. For projected month i = 1..horizon:

       dampening_i  = max(0.5, 1 - 0.03 · i)
       income_i     = max(0, avg_income + 0.3 · recurring + slope_inc · i · dampening_i)
       expenses_i   = max(0, avg_expenses + slope_exp · i · dampening_i)
       confidence_i = max(40, 95 - 4 · i)

   The cumulative balance continues from the last historical month.

All coefficients are fields of ``CashFlowConfig``.

Example
-------
>>> from datetime import date
>>> income = [IncomeRecord(date(2025, m, 1), 5_000, recurrence="monthly") for m in range(1, 7)]
>>> expenses = [ExpenseRecord(date(2025, m, 15), 3_500) for m in range(1, 7)]
>>> forecast = project(income, expenses, as_of=date(2025, 6, 20))
>>> forecast.status, len(forecast.projection_data)
('ok', 18)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import date
from enum import Enum
from typing import Any, Iterable, List, Literal, Optional, Sequence
import logging

import pandas as pd

from .config import CashFlowConfig
from .constants import HISTORICAL_CONFIDENCE, RECURRENCE_MONTHLY_FACTORS
from .trend import TrendFit, fit_linear_trend
from .types import (
    CashFlowForecastDict,
    CashFlowInsightsDict,
    MonthlyAggregateDict,
    ProjectionPointDict,
)
from .utils import (
    add_months,
    check_non_negative,
    check_positive,
    month_key,
    month_label,
    month_range,
    month_start,
)

__all__ = [
    "Recurrence",
    "IncomeRecord",
    "ExpenseRecord",
    "MonthlyAggregate",
    "ProjectionPoint",
    "CashFlowInsights",
    "CashFlowForecast",
    "aggregate_monthly",
    "trend_label",
    "project",
]

logger = logging.getLogger(__name__)

TrendLabel = Literal["up", "down", "stable"]


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class Recurrence(str, Enum):
    ONE_TIME = "one_time"
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @classmethod
    def normalize(cls, value: Any) -> "Recurrence":
        """Coerce to a member; missing or unknown values are one-time."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.ONE_TIME
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.ONE_TIME

    @property
    def monthly_factor(self) -> float:
        """Multiplier converting one occurrence to a monthly amount (0 for one-time)."""
        return RECURRENCE_MONTHLY_FACTORS.get(self.value, 0.0)


@dataclass(frozen=True)
class IncomeRecord:
    """One income transaction. Recurring income also seeds the projection baseline."""
    date: date
    amount: float
    recurrence: Recurrence = Recurrence.ONE_TIME
    recurrence_end_date: Optional[date] = None
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "recurrence", Recurrence.normalize(self.recurrence))
        check_non_negative("income amount", self.amount)

    @property
    def monthly_equivalent(self) -> float:
        return self.amount * self.recurrence.monthly_factor

    def is_active(self, as_of: date) -> bool:
        """Recurring and not ended before *as_of*."""
        if self.recurrence is Recurrence.ONE_TIME:
            return False
        return self.recurrence_end_date is None or self.recurrence_end_date >= as_of


@dataclass(frozen=True)
class ExpenseRecord:
    """One expense transaction."""
    date: date
    amount: float
    category: Optional[str] = None
    description: str = ""

    def __post_init__(self) -> None:
        check_non_negative("expense amount", self.amount)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MonthlyAggregate:
    """Income and expense totals of one calendar month (``YYYY-MM``)."""
    month: str
    income: float
    expenses: float

    @property
    def has_activity(self) -> bool:
        return self.income > 0 or self.expenses > 0

    @property
    def net(self) -> float:
        return self.income - self.expenses

    def to_dict(self) -> MonthlyAggregateDict:
        return {"month": self.month, "income": self.income, "expenses": self.expenses}


@dataclass(frozen=True)
class ProjectionPoint:
    """One month of the combined historical + projected timeline."""
    month: str
    month_label: str
    projected_income: float
    projected_expenses: float
    net_cash_flow: float
    cumulative_balance: float
    is_projected: bool
    confidence: float

    def to_dict(self) -> ProjectionPointDict:
        return {
            "month": self.month,
            "month_label": self.month_label,
            "projected_income": self.projected_income,
            "projected_expenses": self.projected_expenses,
            "net_cash_flow": self.net_cash_flow,
            "cumulative_balance": self.cumulative_balance,
            "is_projected": self.is_projected,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class CashFlowInsights:
    """Summary figures over the projected months only."""
    total_projected_income: float
    total_projected_expenses: float
    avg_monthly_savings: float
    savings_rate: float
    negative_months_count: int
    lowest_balance: float
    highest_balance: float
    end_of_year_balance: float
    income_trend: TrendLabel
    expense_trend: TrendLabel

    def to_dict(self) -> CashFlowInsightsDict:
        return {
            "total_projected_income": self.total_projected_income,
            "total_projected_expenses": self.total_projected_expenses,
            "avg_monthly_savings": self.avg_monthly_savings,
            "savings_rate": self.savings_rate,
            "negative_months_count": self.negative_months_count,
            "lowest_balance": self.lowest_balance,
            "highest_balance": self.highest_balance,
            "end_of_year_balance": self.end_of_year_balance,
            "income_trend": self.income_trend,
            "expense_trend": self.expense_trend,
        }


@dataclass(frozen=True)
class CashFlowForecast:
    """
    Output of ``project``.

    With ``status == "insufficient_data"`` only ``history`` and
    ``historical_months`` are meaningful: ``projection_data`` is empty and
    ``insights`` is None.
    """
    status: Literal["ok", "insufficient_data"]
    history: List[MonthlyAggregate]
    historical_months: int
    projection_data: List[ProjectionPoint] = field(default_factory=list)
    insights: Optional[CashFlowInsights] = None
    avg_income: float = 0.0
    avg_expenses: float = 0.0
    base_recurring_income: float = 0.0
    income_trend_fit: Optional[TrendFit] = None
    expense_trend_fit: Optional[TrendFit] = None

    @property
    def has_projection(self) -> bool:
        return self.status == "ok"

    @property
    def projected(self) -> List[ProjectionPoint]:
        return [p for p in self.projection_data if p.is_projected]

    def to_frame(self) -> pd.DataFrame:
        """Timeline as a DataFrame indexed by month key."""
        columns = [f.name for f in fields(ProjectionPoint)]
        frame = pd.DataFrame([asdict(p) for p in self.projection_data], columns=columns)
        return frame.set_index("month")

    def to_dict(self) -> CashFlowForecastDict:
        return {
            "status": self.status,
            "historical_months": self.historical_months,
            "history": [m.to_dict() for m in self.history],
            "projection_data": [p.to_dict() for p in self.projection_data],
            "insights": self.insights.to_dict() if self.insights else None,
            "avg_income": self.avg_income,
            "avg_expenses": self.avg_expenses,
            "base_recurring_income": self.base_recurring_income,
            "income_slope": self.income_trend_fit.slope if self.income_trend_fit else 0.0,
            "expense_slope": self.expense_trend_fit.slope if self.expense_trend_fit else 0.0,
        }


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def _sum_by_month(records: Sequence[Any], periods: pd.PeriodIndex) -> pd.Series:
    """Sum record amounts per calendar month, zero-filled over *periods*."""
    if not records:
        return pd.Series(0.0, index=periods)
    frame = pd.DataFrame({
        "period": pd.PeriodIndex(
            [pd.Period(year=r.date.year, month=r.date.month, freq="M") for r in records]
        ),
        "amount": [float(r.amount) for r in records],
    })
    totals = frame.groupby("period")["amount"].sum()
    return totals.reindex(periods, fill_value=0.0)


def aggregate_monthly(
    income_records: Sequence[IncomeRecord],
    expense_records: Sequence[ExpenseRecord],
    *,
    end: date,
    months: int,
) -> List[MonthlyAggregate]:
    """
    Monthly totals for the *months* calendar months ending with *end*'s month.

    Records outside the window are ignored.
    """
    periods = month_range(end, months)
    income = _sum_by_month(income_records, periods)
    expenses = _sum_by_month(expense_records, periods)
    return [
        MonthlyAggregate(
            month=str(period),
            income=float(income.loc[period]),
            expenses=float(expenses.loc[period]),
        )
        for period in periods
    ]


def trend_label(slope: float, threshold: float) -> TrendLabel:
    """'up' above +threshold, 'down' below -threshold, else 'stable'."""
    if slope > threshold:
        return "up"
    if slope < -threshold:
        return "down"
    return "stable"


# ---------------------------------------------------------------------------
# Forecaster
# ---------------------------------------------------------------------------

def project(
    income_records: Iterable[IncomeRecord],
    expense_records: Iterable[ExpenseRecord],
    lookback_months: Optional[int] = None,
    horizon_months: Optional[int] = None,
    *,
    as_of: Optional[date] = None,
    config: Optional[CashFlowConfig] = None,
) -> CashFlowForecast:
    """
    Project monthly cash flow from historical records.

    Parameters
    ----------
    income_records, expense_records : iterable
        Typed records; never mutated.
    lookback_months : int, optional
        Trailing months of history (default 6, or ``config.lookback_months``).
    horizon_months : int, optional
        Months to project (default 12, or ``config.horizon_months``).
    as_of : date, optional
        Reference date; its month is the last historical month. Defaults
        to today.
    config : CashFlowConfig, optional
        Heuristic coefficients.

    Returns
    -------
    CashFlowForecast

    Raises
    ------
    ValidationError
        Non-positive lookback or horizon, negative record amounts.
    """
    cfg = config or CashFlowConfig()
    lookback = lookback_months if lookback_months is not None else cfg.lookback_months
    horizon = horizon_months if horizon_months is not None else cfg.horizon_months
    check_positive("lookback_months", lookback)
    check_positive("horizon_months", horizon)

    incomes = list(income_records)
    expenses = list(expense_records)
    as_of = as_of or date.today()

    history = aggregate_monthly(incomes, expenses, end=as_of, months=lookback)
    valid = [m for m in history if m.has_activity]
    logger.debug("%d of %d lookback months have activity", len(valid), len(history))

    if len(valid) < cfg.min_valid_months:
        return CashFlowForecast(
            status="insufficient_data",
            history=history,
            historical_months=len(valid),
        )

    income_values = [m.income for m in valid]
    expense_values = [m.expenses for m in valid]
    avg_income = sum(income_values) / len(valid)
    avg_expenses = sum(expense_values) / len(valid)

    income_fit = fit_linear_trend(income_values, min_points=cfg.min_trend_months)
    expense_fit = fit_linear_trend(expense_values, min_points=cfg.min_trend_months)

    base_recurring_income = sum(r.monthly_equivalent for r in incomes if r.is_active(as_of))

    points: List[ProjectionPoint] = []
    cumulative = 0.0
    for m in history:
        cumulative += m.net
        month_date = date(int(m.month[:4]), int(m.month[5:7]), 1)
        points.append(ProjectionPoint(
            month=m.month,
            month_label=month_label(month_date),
            projected_income=m.income,
            projected_expenses=m.expenses,
            net_cash_flow=m.net,
            cumulative_balance=cumulative,
            is_projected=False,
            confidence=HISTORICAL_CONFIDENCE,
        ))

    current = month_start(as_of)
    for i in range(1, horizon + 1):
        future = add_months(current, i)
        dampening = max(cfg.dampening_floor, 1.0 - i * cfg.dampening_step)
        income = max(
            0.0,
            avg_income
            + base_recurring_income * cfg.recurring_income_weight
            + income_fit.slope * i * dampening,
        )
        spending = max(0.0, avg_expenses + expense_fit.slope * i * dampening)
        net = income - spending
        cumulative += net
        points.append(ProjectionPoint(
            month=month_key(future),
            month_label=month_label(future),
            projected_income=income,
            projected_expenses=spending,
            net_cash_flow=net,
            cumulative_balance=cumulative,
            is_projected=True,
            confidence=max(cfg.confidence_floor, cfg.confidence_start - i * cfg.confidence_decay),
        ))

    projected = [p for p in points if p.is_projected]
    total_income = sum(p.projected_income for p in projected)
    total_expenses = sum(p.projected_expenses for p in projected)
    end_of_year = projected[min(12, len(projected)) - 1]

    insights = CashFlowInsights(
        total_projected_income=total_income,
        total_projected_expenses=total_expenses,
        avg_monthly_savings=(total_income - total_expenses) / len(projected),
        savings_rate=(total_income - total_expenses) / total_income * 100.0 if total_income > 0 else 0.0,
        negative_months_count=sum(1 for p in projected if p.net_cash_flow < 0),
        lowest_balance=min(p.cumulative_balance for p in projected),
        highest_balance=max(p.cumulative_balance for p in projected),
        end_of_year_balance=end_of_year.cumulative_balance,
        income_trend=trend_label(income_fit.slope, cfg.trend_threshold),
        expense_trend=trend_label(expense_fit.slope, cfg.trend_threshold),
    )

    return CashFlowForecast(
        status="ok",
        history=history,
        historical_months=len(valid),
        projection_data=points,
        insights=insights,
        avg_income=avg_income,
        avg_expenses=avg_expenses,
        base_recurring_income=base_recurring_income,
        income_trend_fit=income_fit,
        expense_trend_fit=expense_fit,
    )
