"""
Plotting utilities for fincast results.

Purpose
-------
Visualizes calculator outputs without coupling them to matplotlib: each
function takes a finished result object, draws it and returns
``(fig, ax)`` so callers can restyle or embed the figure.

Functions
---------
- plot_debt_strategies: remaining total balance per month, one line per policy
- plot_fire_projection: projected savings against the FIRE number by age
- plot_cash_flow: monthly net cash flow bars plus the cumulative balance line

matplotlib is imported lazily inside each function so that importing the
calculators never pulls in a plotting backend.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Tuple, Union
from pathlib import Path

from .constants import (
    DEFAULT_FIGSIZE,
    DEFAULT_FIGSIZE_WIDE,
    DEFAULT_LINEWIDTH,
    DEFAULT_LINEWIDTH_THICK,
)
from .utils import format_currency, thousands_formatter

if TYPE_CHECKING:
    from .cashflow import CashFlowForecast
    from .debt import DebtComparison, DebtStrategy
    from .fire import FIREResults

__all__ = [
    "plot_debt_strategies",
    "plot_fire_projection",
    "plot_cash_flow",
]

_POLICY_COLORS = {"avalanche": "tab:red", "snowball": "tab:blue"}


def _finish(fig, save_path: Optional[Union[str, Path]], show: bool) -> None:
    import matplotlib.pyplot as plt

    fig.tight_layout()
    if save_path:
        Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, bbox_inches='tight', dpi=150)
    if show:
        plt.show()


def plot_debt_strategies(
    result: Union[DebtComparison, DebtStrategy],
    *,
    figsize: Tuple[float, float] = DEFAULT_FIGSIZE,
    title: Optional[str] = None,
    save_path: Optional[Union[str, Path]] = None,
    show: bool = False,
):
    """
    Plot remaining total debt per month for each simulated policy.

    Parameters
    ----------
    result : DebtComparison or DebtStrategy
        A comparison draws both policies; a single strategy draws one line.
    figsize : tuple, default (12, 6)
    title : str, optional
    save_path : str or Path, optional
        Save the figure to this path (PNG at 150 dpi).
    show : bool, default False
        Call ``plt.show()`` after drawing.

    Returns
    -------
    (fig, ax)
    """
    import matplotlib.pyplot as plt
    from matplotlib.ticker import FuncFormatter

    if hasattr(result, "avalanche"):
        strategies = [s for s in (result.avalanche, result.snowball) if s is not None]
        recommended = result.recommended
    else:
        strategies = [result]
        recommended = None

    fig, ax = plt.subplots(figsize=figsize)

    for strategy in strategies:
        history = strategy.balance_history
        if history.empty:
            continue
        total = history.sum(axis=1)
        label = f"{strategy.name.title()} ({strategy.total_months} mo, " \
                f"{format_currency(strategy.total_interest_paid)} interest)"
        lw = DEFAULT_LINEWIDTH_THICK if strategy.name == recommended else DEFAULT_LINEWIDTH
        ax.plot(total.index, total.values, lw=lw, label=label,
                color=_POLICY_COLORS.get(strategy.name))

    if not strategies:
        ax.text(0.5, 0.5, "Debt free", ha='center', va='center',
                transform=ax.transAxes, fontsize=14)

    ax.set_xlabel("Month")
    ax.set_ylabel("Remaining balance")
    ax.yaxis.set_major_formatter(FuncFormatter(thousands_formatter))
    ax.set_title(title or "Debt Payoff: Avalanche vs Snowball", fontweight='bold')
    ax.grid(True, linestyle="--", alpha=0.4)
    if ax.get_legend_handles_labels()[0]:
        ax.legend(loc='upper right', fontsize=9, framealpha=0.9)

    _finish(fig, save_path, show)
    return fig, ax


def plot_fire_projection(
    results: FIREResults,
    *,
    figsize: Tuple[float, float] = DEFAULT_FIGSIZE,
    title: Optional[str] = None,
    save_path: Optional[Union[str, Path]] = None,
    show: bool = False,
):
    """
    Plot yearly projected savings against the FIRE targets.

    The FIRE number is drawn as a solid horizontal line, the lean and fat
    variants as dotted ones.

    Returns
    -------
    (fig, ax)
    """
    import matplotlib.pyplot as plt
    from matplotlib.ticker import FuncFormatter

    fig, ax = plt.subplots(figsize=figsize)

    ages = [p.age for p in results.yearly_projections]
    savings = [p.savings for p in results.yearly_projections]
    ax.plot(ages, savings, lw=DEFAULT_LINEWIDTH_THICK, marker='o', markersize=3,
            color='tab:green', label="Projected savings")

    ax.axhline(results.fire_number, color='black', lw=DEFAULT_LINEWIDTH,
               label=f"FIRE number ({format_currency(results.fire_number)})")
    ax.axhline(results.lean_fire_number, color='gray', lw=1, linestyle=':',
               label="Lean FIRE")
    ax.axhline(results.fat_fire_number, color='gray', lw=1, linestyle=':',
               label="Fat FIRE")
    if results.projected_retirement_age is not None:
        ax.axvline(results.projected_retirement_age, color='tab:orange', lw=1,
                   linestyle='--', label=f"Projected FIRE age {results.projected_retirement_age:.1f}")

    ax.set_xlabel("Age")
    ax.set_ylabel("Savings")
    ax.yaxis.set_major_formatter(FuncFormatter(thousands_formatter))
    ax.set_title(title or "FIRE Projection", fontweight='bold')
    ax.grid(True, linestyle="--", alpha=0.4)
    ax.legend(loc='upper left', fontsize=9, framealpha=0.9)

    _finish(fig, save_path, show)
    return fig, ax


def plot_cash_flow(
    forecast: CashFlowForecast,
    *,
    figsize: Tuple[float, float] = DEFAULT_FIGSIZE_WIDE,
    title: Optional[str] = None,
    save_path: Optional[Union[str, Path]] = None,
    show: bool = False,
):
    """
    Plot monthly net cash flow and the cumulative balance.

    Historical bars are solid, projected bars are faded by their
    confidence. With insufficient data only a notice is drawn.

    Returns
    -------
    (fig, ax)
    """
    import matplotlib.pyplot as plt
    from matplotlib.ticker import FuncFormatter

    fig, ax = plt.subplots(figsize=figsize)

    if not forecast.has_projection:
        ax.text(0.5, 0.5, "Insufficient data to forecast", ha='center', va='center',
                transform=ax.transAxes, fontsize=14)
        ax.set_axis_off()
        _finish(fig, save_path, show)
        return fig, ax

    points = forecast.projection_data
    x = list(range(len(points)))
    for i, p in enumerate(points):
        color = 'tab:green' if p.net_cash_flow >= 0 else 'tab:red'
        alpha = 0.9 if not p.is_projected else max(0.2, p.confidence / 100.0 * 0.9)
        ax.bar(i, p.net_cash_flow, color=color, alpha=alpha, width=0.7)

    ax.plot(x, [p.cumulative_balance for p in points], lw=DEFAULT_LINEWIDTH_THICK,
            color='tab:blue', label="Cumulative balance")

    first_projected = next((i for i, p in enumerate(points) if p.is_projected), None)
    if first_projected is not None:
        ax.axvline(first_projected - 0.5, color='gray', lw=1, linestyle='--', label="Forecast start")

    ax.axhline(0, color='black', lw=0.8)
    ax.set_xticks(x)
    ax.set_xticklabels([p.month_label for p in points], rotation=45, ha='right', fontsize=8)
    ax.set_ylabel("Amount")
    ax.yaxis.set_major_formatter(FuncFormatter(thousands_formatter))
    ax.set_title(title or "Cash Flow Forecast", fontweight='bold')
    ax.grid(True, linestyle="--", alpha=0.4, axis='y')
    ax.legend(loc='upper left', fontsize=9, framealpha=0.9)

    _finish(fig, save_path, show)
    return fig, ax
