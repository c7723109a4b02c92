"""
Integration tests for full fincast workflows.

Each test runs a calculator end to end: input file on disk, loading,
computation, result persistence and reloading.
"""

import json

import pytest
from click.testing import CliRunner

from fincast.cashflow import project
from fincast.cli import main
from fincast.debt import compare_strategies
from fincast.fire import calculate, summarize_financials
from fincast.serialization import (
    load_debt_file,
    load_fire_file,
    load_result,
    load_transactions,
    save_result,
)


@pytest.mark.integration
class TestFullWorkflow:
    """End-to-end runs of the three calculators."""

    def test_debt_file_to_saved_comparison(self, debt_file, start_date, tmp_path):
        loaded = load_debt_file(debt_file)
        comparison = compare_strategies(
            loaded.liabilities, loaded.extra_monthly_payment, start=start_date
        )

        assert comparison.total_debt == pytest.approx(15_000)
        for strategy in (comparison.avalanche, comparison.snowball):
            assert strategy.resolved
            assert strategy.balance_history.iloc[-1].sum() == pytest.approx(0.0, abs=1e-6)

        path = tmp_path / "results" / "debt.json"
        save_result(comparison, path)
        stored = load_result(path)["result"]

        assert stored["recommended"] == comparison.recommended
        assert stored["avalanche"]["total_interest_paid"] == pytest.approx(
            comparison.avalanche.total_interest_paid
        )
        assert [i["id"] for i in stored["snowball"]["payoff_order"]] == [
            i.id for i in comparison.snowball.payoff_order
        ]

    def test_history_seeds_fire_calculation(self, transactions_file, fire_file, debt_file, as_of,
                                            tmp_path):
        transactions = load_transactions(transactions_file)
        debts = load_debt_file(debt_file)
        total_debt = sum(l.balance for l in debts.liabilities)

        snapshot = summarize_financials(
            transactions.income, transactions.expenses,
            total_assets=80_000, total_liabilities=total_debt, as_of=as_of,
        )
        assert snapshot.monthly_savings == pytest.approx(1_500)

        inputs = snapshot.seed_inputs(load_fire_file(fire_file).inputs)
        assert inputs.current_savings == pytest.approx(65_000)
        assert inputs.monthly_expenses == 3_500

        results = calculate(
            inputs, snapshot.monthly_savings,
            monthly_income=snapshot.avg_monthly_income, start_year=as_of.year,
        )
        assert results.fire_number == pytest.approx(1_050_000)
        assert results.current_savings_rate == pytest.approx(30.0)
        assert results.yearly_projections[0].year == 2026

        path = tmp_path / "fire_result.json"
        save_result(results, path)
        stored = load_result(path)
        assert stored["kind"] == "fire"
        assert len(stored["result"]["yearly_projections"]) == len(results.yearly_projections)

    def test_transactions_to_saved_forecast(self, transactions_file, as_of, tmp_path):
        transactions = load_transactions(transactions_file)
        forecast = project(transactions.income, transactions.expenses, as_of=as_of)

        assert forecast.status == "ok"
        frame = forecast.to_frame()
        assert frame["cumulative_balance"].iloc[-1] == pytest.approx(27_000)

        path = tmp_path / "cashflow.json"
        save_result(forecast, path)
        stored = load_result(path)["result"]
        assert len(stored["projection_data"]) == 18
        assert stored["insights"]["end_of_year_balance"] == pytest.approx(27_000)

    def test_cli_template_round_trip(self, tmp_path):
        runner = CliRunner()
        input_path = tmp_path / "debts.json"
        output_path = tmp_path / "debt_result.json"

        created = runner.invoke(main, ["config", "create", str(input_path), "-t", "debt"])
        assert created.exit_code == 0, created.output

        ran = runner.invoke(main, [
            "-q", "debt", "-c", str(input_path), "--start", "2025-01-01",
            "--output", str(output_path),
        ])
        assert ran.exit_code == 0, ran.output

        stored = json.loads(output_path.read_text())
        assert stored["kind"] == "debt"
        assert stored["result"]["debts_count"] == 2
        assert f"Recommended: {stored['result']['recommended']}" in ran.output
