"""
Command-Line Interface for fincast.

Purpose
-------
Runs the three calculators on JSON input files and prints summary tables,
without writing Python code.

Commands
--------
- debt: Compare avalanche and snowball payoff of a liabilities file
- fire: FIRE numbers and timeline for a profile file
- cashflow: Project monthly cash flow from a transactions file
- config: Create starter input files and validate existing ones
- info: Show version, settings and installed dependencies

Example Usage
-------------
    # Compare payoff strategies with 300/month on top of minimums
    $ fincast debt --config debts.json --extra 300 --plot debt.png

    # FIRE timeline saving 1,500 per month
    $ fincast fire --config fire.json --monthly-savings 1500

    # Forecast the next 12 months from the last 6
    $ fincast cashflow --config transactions.json --lookback 6 --horizon 12

    # Start from a template
    $ fincast config create debts.json --template debt
"""

from __future__ import annotations

import json
import logging
import sys
import warnings
from datetime import date, datetime
from functools import partial
from importlib import metadata
from pathlib import Path
from typing import Optional

import click

from .exceptions import FincastError, SimulationLimitWarning
from .utils import format_currency

# Version
__version__ = "0.1.0"


def _get_console():
    """Lazy import Rich for better startup time."""
    from rich.console import Console
    return Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None


def _fail(message: str) -> None:
    click.echo(message, err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="fincast")
@click.option("--quiet", "-q", is_flag=True, help="Suppress tables; print key figures only")
@click.pass_context
def main(ctx: click.Context, quiet: bool) -> None:
    """
    fincast - Debt payoff, FIRE and cash-flow forecasting.

    Deterministic personal-finance calculators driven by JSON files.

    Use 'fincast COMMAND --help' for command-specific help.
    """
    from .config import AppSettings

    settings = AppSettings()
    _configure_logging(settings.effective_log_level)
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["symbol"] = settings.currency_symbol
    ctx.obj["console"] = _get_console()


# ---------------------------------------------------------------------------
# debt
# ---------------------------------------------------------------------------

@main.command()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to liabilities file (JSON)"
)
@click.option(
    "--extra", "-e",
    type=float,
    default=None,
    help="Extra monthly payment (overrides the file's extra_monthly_payment)"
)
@click.option(
    "--start",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Simulation start date YYYY-MM-DD (default: today)"
)
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Save the comparison as JSON"
)
@click.option(
    "--plot",
    type=click.Path(path_type=Path),
    default=None,
    help="Save a balance chart (PNG)"
)
@click.pass_context
def debt(
    ctx: click.Context,
    config: Path,
    extra: Optional[float],
    start: Optional[datetime],
    output: Optional[Path],
    plot: Optional[Path],
) -> None:
    """
    Compare avalanche and snowball payoff strategies.

    Example:
        fincast debt -c debts.json --extra 300
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)

    # Import here to avoid slow startup
    from .debt import compare_strategies
    from .serialization import load_debt_file, save_result
    money = partial(format_currency, symbol=ctx.obj.get("symbol", "$"))

    try:
        debt_file = load_debt_file(config)
    except (FincastError, OSError) as e:
        _fail(f"Error loading config: {e}")

    extra_payment = debt_file.extra_monthly_payment if extra is None else extra

    try:
        with warnings.catch_warnings():
            # Surfaced through the strategies' own warning lists below.
            warnings.simplefilter("ignore", SimulationLimitWarning)
            comparison = compare_strategies(
                debt_file.liabilities, extra_payment, start=_parse_date(start)
            )
    except FincastError as e:
        _fail(f"Error during simulation: {e}")

    if comparison.is_debt_free:
        click.echo("No liabilities: already debt free.")
        return

    strategies = [comparison.avalanche, comparison.snowball]

    if quiet:
        for s in strategies:
            click.echo(
                f"{s.name}: {s.total_months} months, "
                f"interest {money(s.total_interest_paid, 2)}"
            )
        click.echo(f"Recommended: {comparison.recommended}")
    else:
        from rich.table import Table

        summary = Table(title="Debt Portfolio", show_header=True)
        summary.add_column("Metric", style="cyan")
        summary.add_column("Value", style="green", justify="right")
        summary.add_row("Debts", f"{comparison.debts_count}")
        summary.add_row("Total Debt", money(comparison.total_debt, 2))
        summary.add_row("Minimum Payments", money(comparison.total_minimum_payments, 2))
        summary.add_row("Extra Payment", money(extra_payment, 2))
        summary.add_row("Average Rate", f"{comparison.average_interest_rate:.2f}%")
        console.print(summary)

        table = Table(title="Strategy Comparison", show_header=True)
        table.add_column("Strategy", style="cyan")
        table.add_column("Months", justify="right")
        table.add_column("Debt Free", justify="right")
        table.add_column("Total Interest", style="green", justify="right")
        table.add_column("Payoff Order")
        for s in strategies:
            table.add_row(
                s.name.title(),
                f"{s.total_months}",
                s.debt_free_date.isoformat() if s.debt_free_date else "never",
                money(s.total_interest_paid, 2),
                " > ".join(item.name for item in s.payoff_order),
            )
        console.print(table)

        console.print(
            f"[bold]Recommended:[/bold] {comparison.recommended.title()} "
            f"(saves {money(abs(comparison.potential_savings), 2)} in interest)"
        )

    for message in comparison.recommended_strategy.warnings:
        click.echo(f"Warning: {message}", err=True)

    if output:
        save_result(comparison, output)
        if not quiet:
            click.echo(f"Results saved to {output}")

    if plot:
        import matplotlib.pyplot as plt
        from .plotting import plot_debt_strategies

        fig, _ = plot_debt_strategies(comparison, save_path=plot)
        plt.close(fig)
        if not quiet:
            click.echo(f"Chart saved to {plot}")


# ---------------------------------------------------------------------------
# fire
# ---------------------------------------------------------------------------

@main.command()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to FIRE profile file (JSON)"
)
@click.option(
    "--monthly-savings", "-s",
    type=float,
    default=None,
    help="Current monthly savings (overrides the file's current_monthly_savings)"
)
@click.option(
    "--monthly-income",
    type=float,
    default=None,
    help="Monthly income, for the savings rate"
)
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Save the results as JSON"
)
@click.option(
    "--plot",
    type=click.Path(path_type=Path),
    default=None,
    help="Save a projection chart (PNG)"
)
@click.pass_context
def fire(
    ctx: click.Context,
    config: Path,
    monthly_savings: Optional[float],
    monthly_income: Optional[float],
    output: Optional[Path],
    plot: Optional[Path],
) -> None:
    """
    Compute FIRE targets and the projected retirement timeline.

    Example:
        fincast fire -c fire.json --monthly-savings 1500
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)

    from .fire import calculate
    from .serialization import load_fire_file, save_result
    money = partial(format_currency, symbol=ctx.obj.get("symbol", "$"))

    try:
        fire_file = load_fire_file(config)
    except (FincastError, OSError) as e:
        _fail(f"Error loading config: {e}")

    savings = monthly_savings if monthly_savings is not None else fire_file.current_monthly_savings
    if savings is None:
        _fail("Error: provide --monthly-savings or current_monthly_savings in the config file")
    income = monthly_income if monthly_income is not None else fire_file.monthly_income

    try:
        results = calculate(fire_file.inputs, savings, monthly_income=income)
    except FincastError as e:
        _fail(f"Error during calculation: {e}")

    if results.projected_retirement_age is not None:
        timeline = f"{results.years_to_fire:.1f} years (age {results.projected_retirement_age:.1f})"
    else:
        timeline = "not reached within the search horizon"

    if quiet:
        click.echo(f"FIRE number: {money(results.fire_number)}")
        click.echo(f"Years to FIRE: {timeline}")
        click.echo(f"On track: {'yes' if results.on_track else 'no'}")
    else:
        from rich.table import Table

        table = Table(title="FIRE Results", show_header=True)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green", justify="right")

        table.add_row("FIRE Number", money(results.fire_number))
        table.add_row("Lean FIRE", money(results.lean_fire_number))
        table.add_row("Fat FIRE", money(results.fat_fire_number))
        table.add_row("Coast FIRE", money(results.coast_fire_number))
        table.add_row("", "")
        table.add_row("Progress", f"{results.progress_percentage:.1f}%")
        table.add_row("Time to FIRE", timeline)
        table.add_row("On Track", "Yes" if results.on_track else "No")
        table.add_row("Savings Needed", f"{money(results.monthly_savings_needed)}/mo")
        if income:
            table.add_row("Savings Rate", f"{results.current_savings_rate:.1f}%")

        console.print(table)

    if output:
        save_result(results, output)
        if not quiet:
            click.echo(f"Results saved to {output}")

    if plot:
        import matplotlib.pyplot as plt
        from .plotting import plot_fire_projection

        fig, _ = plot_fire_projection(results, save_path=plot)
        plt.close(fig)
        if not quiet:
            click.echo(f"Chart saved to {plot}")


# ---------------------------------------------------------------------------
# cashflow
# ---------------------------------------------------------------------------

@main.command()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to transactions file (JSON)"
)
@click.option(
    "--lookback", "-l",
    type=click.IntRange(min=1),
    default=None,
    help="Months of history to use (default: 6)"
)
@click.option(
    "--horizon", "-T",
    type=click.IntRange(min=1),
    default=None,
    help="Months to project (default: 12)"
)
@click.option(
    "--as-of",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Reference date YYYY-MM-DD (default: today)"
)
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Save the forecast as JSON"
)
@click.option(
    "--plot",
    type=click.Path(path_type=Path),
    default=None,
    help="Save a cash-flow chart (PNG)"
)
@click.pass_context
def cashflow(
    ctx: click.Context,
    config: Path,
    lookback: Optional[int],
    horizon: Optional[int],
    as_of: Optional[datetime],
    output: Optional[Path],
    plot: Optional[Path],
) -> None:
    """
    Project monthly cash flow from historical transactions.

    Example:
        fincast cashflow -c transactions.json --horizon 12 --as-of 2025-06-30
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)

    from .cashflow import project
    from .serialization import load_transactions, save_result
    money = partial(format_currency, symbol=ctx.obj.get("symbol", "$"))

    try:
        transactions = load_transactions(config)
    except (FincastError, OSError) as e:
        _fail(f"Error loading config: {e}")

    try:
        forecast = project(
            transactions.income,
            transactions.expenses,
            lookback,
            horizon,
            as_of=_parse_date(as_of),
        )
    except FincastError as e:
        _fail(f"Error during forecast: {e}")

    if not forecast.has_projection:
        click.echo(
            f"Insufficient data: {forecast.historical_months} month(s) with activity "
            f"in the lookback window, at least 2 required."
        )
    else:
        insights = forecast.insights
        if quiet:
            click.echo(f"Projected savings: {money(insights.avg_monthly_savings, 2)}/mo")
            click.echo(f"End of year balance: {money(insights.end_of_year_balance, 2)}")
        else:
            from rich.table import Table

            table = Table(title="Cash Flow Forecast", show_header=True)
            table.add_column("Month", style="cyan")
            table.add_column("Income", justify="right")
            table.add_column("Expenses", justify="right")
            table.add_column("Net", justify="right")
            table.add_column("Balance", style="green", justify="right")
            table.add_column("Confidence", justify="right")
            for p in forecast.projected:
                table.add_row(
                    p.month_label,
                    money(p.projected_income),
                    money(p.projected_expenses),
                    money(p.net_cash_flow),
                    money(p.cumulative_balance),
                    f"{p.confidence:.0f}%",
                )
            console.print(table)

            summary = Table(title="Insights", show_header=True)
            summary.add_column("Metric", style="cyan")
            summary.add_column("Value", style="green", justify="right")
            summary.add_row("Avg Monthly Savings", money(insights.avg_monthly_savings, 2))
            summary.add_row("Savings Rate", f"{insights.savings_rate:.1f}%")
            summary.add_row("Negative Months", f"{insights.negative_months_count}")
            summary.add_row("Lowest Balance", money(insights.lowest_balance))
            summary.add_row("End of Year Balance", money(insights.end_of_year_balance))
            summary.add_row("Income Trend", insights.income_trend)
            summary.add_row("Expense Trend", insights.expense_trend)
            console.print(summary)

    if output:
        save_result(forecast, output)
        if not quiet:
            click.echo(f"Results saved to {output}")

    if plot:
        import matplotlib.pyplot as plt
        from .plotting import plot_cash_flow

        fig, _ = plot_cash_flow(forecast, save_path=plot)
        plt.close(fig)
        if not quiet:
            click.echo(f"Chart saved to {plot}")


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------

def _template(kind: str) -> dict:
    from .constants import DEFAULT_FIRE_INPUTS
    from .serialization import SCHEMA_VERSION
    from .utils import add_months

    if kind == "debt":
        return {
            "schema_version": SCHEMA_VERSION,
            "extra_monthly_payment": 200,
            "liabilities": [
                {
                    "id": "visa",
                    "name": "Visa",
                    "category": "credit_card",
                    "balance": 5000,
                    "interest_rate": 19.99,
                    "minimum_payment": 150
                },
                {
                    "id": "car",
                    "name": "Car Loan",
                    "category": "car_loan",
                    "balance": 12000,
                    "interest_rate": 6.5,
                    "minimum_payment": 300
                }
            ]
        }
    if kind == "fire":
        return {
            "schema_version": SCHEMA_VERSION,
            "inputs": dict(DEFAULT_FIRE_INPUTS),
            "current_monthly_savings": 1500,
            "monthly_income": 6000
        }
    today = date.today().replace(day=1)
    income, expenses = [], []
    for k in range(6, 0, -1):
        first = add_months(today, -k)
        income.append({"date": first.isoformat(), "amount": 5000, "recurrence": "monthly"})
        expenses.append({"date": first.replace(day=15).isoformat(), "amount": 3500, "category": "living"})
    return {"schema_version": SCHEMA_VERSION, "income": income, "expenses": expenses}


def _detect_kind(data: dict) -> Optional[str]:
    if "liabilities" in data:
        return "debt"
    if "inputs" in data:
        return "fire"
    if "income" in data or "expenses" in data:
        return "cashflow"
    return None


@main.group()
def config() -> None:
    """
    Configuration management commands.

    Create and validate calculator input files.
    """
    pass


@config.command("create")
@click.argument("output_file", type=click.Path(path_type=Path))
@click.option(
    "--template", "-t",
    type=click.Choice(["debt", "fire", "cashflow"]),
    default="debt",
)
@click.pass_context
def config_create(ctx: click.Context, output_file: Path, template: str) -> None:
    """
    Create a new input file from template.

    Example:
        fincast config create debts.json --template debt
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)

    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w") as f:
        json.dump(_template(template), f, indent=2)

    if not quiet:
        console.print(f"[green]Created {template} file: {output_file}[/green]")


@config.command("validate")
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def config_validate(ctx: click.Context, config_file: Path) -> None:
    """
    Validate an input file.

    The file kind (debt, fire or cashflow) is detected from its keys.

    Example:
        fincast config validate debts.json
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)

    from .serialization import load_debt_file, load_fire_file, load_transactions

    try:
        with open(config_file, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        _fail(f"Configuration validation failed: {e}")

    kind = _detect_kind(data) if isinstance(data, dict) else None
    if kind is None:
        _fail("Configuration validation failed: expected 'liabilities', 'inputs' or 'income'/'expenses'")

    try:
        if kind == "debt":
            loaded = load_debt_file(config_file)
            details = [f"Liabilities: {len(loaded.liabilities)}",
                       f"Extra payment: {loaded.extra_monthly_payment:,.2f}"]
        elif kind == "fire":
            loaded = load_fire_file(config_file)
            details = [f"Age: {loaded.inputs.current_age:g} -> {loaded.inputs.target_retirement_age:g}",
                       f"Monthly expenses: {loaded.inputs.monthly_expenses:,.2f}"]
        else:
            loaded = load_transactions(config_file)
            details = [f"Income records: {len(loaded.income)}",
                       f"Expense records: {len(loaded.expenses)}"]
    except FincastError as e:
        _fail(f"Configuration validation failed: {e}")

    if quiet:
        click.echo("Configuration is valid")
    else:
        from rich.panel import Panel

        body = f"[bold]Valid {kind} configuration[/bold]\n\n" + "\n".join(details)
        console.print(Panel(body, title="Configuration Summary", border_style="green"))


# ---------------------------------------------------------------------------
# info
# ---------------------------------------------------------------------------

@main.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """
    Display package, settings and dependency information.
    """
    console = ctx.obj.get("console")

    from .config import AppSettings

    settings = AppSettings()
    info_lines = [
        f"fincast Version: {__version__}",
        f"Python: {sys.version.split()[0]}",
        f"Log level: {settings.effective_log_level}",
        f"Currency: {settings.currency_symbol}",
    ]

    dependencies = (
        "numpy",
        "pandas",
        "pydantic",
        "pydantic-settings",
        "matplotlib",
        "rich",
        "click",
    )

    for name in dependencies:
        try:
            info_lines.append(f"{name}: {metadata.version(name)}")
        except metadata.PackageNotFoundError:
            info_lines.append(f"{name}: not installed")

    from rich.panel import Panel
    console.print(Panel("\n".join(info_lines), title="System Information"))


if __name__ == "__main__":
    main()
