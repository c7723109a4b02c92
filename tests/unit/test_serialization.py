"""
Unit tests for serialization module.

Tests loading of calculator input files and persistence of results.
"""

import json
from datetime import date

import pytest

from fincast.cashflow import Recurrence, project
from fincast.debt import LiabilityCategory, compare_strategies
from fincast.exceptions import ConfigurationError
from fincast.fire import calculate
from fincast.serialization import (
    SCHEMA_VERSION,
    liability_from_dict,
    liability_to_dict,
    load_debt_file,
    load_fire_file,
    load_result,
    load_transactions,
    save_result,
)


def _write(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(json.dumps(data))
    return path


# ============================================================================
# INPUT FILES
# ============================================================================

class TestLoadDebtFile:

    def test_load(self, debt_file):
        loaded = load_debt_file(debt_file)
        assert loaded.extra_monthly_payment == 100.0
        assert [l.id for l in loaded.liabilities] == ["cc", "car"]
        assert loaded.liabilities[0].category is LiabilityCategory.CREDIT_CARD

    def test_defaults_for_missing_fields(self, tmp_path):
        path = _write(tmp_path, "debts.json", {
            "schema_version": SCHEMA_VERSION,
            "liabilities": [{"id": "x", "name": "X", "balance": 5_000}],
        })
        loaded = load_debt_file(path)
        liability = loaded.liabilities[0]
        assert loaded.extra_monthly_payment == 0.0
        assert liability.interest_rate == 0.0
        assert liability.minimum_payment == pytest.approx(100.0)

    def test_invalid_record(self, tmp_path):
        path = _write(tmp_path, "debts.json", {
            "schema_version": SCHEMA_VERSION,
            "liabilities": [{"id": "x", "name": "X", "balance": -5}],
        })
        with pytest.raises(ConfigurationError, match="Invalid liability"):
            load_debt_file(path)

    def test_negative_extra(self, tmp_path):
        path = _write(tmp_path, "debts.json", {
            "schema_version": SCHEMA_VERSION, "extra_monthly_payment": -1, "liabilities": [],
        })
        with pytest.raises(ConfigurationError, match="extra_monthly_payment"):
            load_debt_file(path)

    def test_liabilities_must_be_list(self, tmp_path):
        path = _write(tmp_path, "debts.json", {"schema_version": SCHEMA_VERSION, "liabilities": {}})
        with pytest.raises(ConfigurationError, match="must be a list"):
            load_debt_file(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_debt_file(path)

    def test_top_level_must_be_object(self, tmp_path):
        path = _write(tmp_path, "list.json", [1, 2, 3])
        with pytest.raises(ConfigurationError, match="JSON object"):
            load_debt_file(path)

    def test_schema_version_mismatch_warns(self, tmp_path):
        path = _write(tmp_path, "old.json", {"schema_version": "0.0.1", "liabilities": []})
        with pytest.warns(UserWarning, match="schema version"):
            load_debt_file(path)


class TestLiabilityDict:

    def test_round_trip(self, credit_card):
        restored = liability_from_dict(liability_to_dict(credit_card))
        assert restored == credit_card


class TestLoadFireFile:

    def test_load(self, fire_file):
        loaded = load_fire_file(fire_file)
        assert loaded.inputs.monthly_expenses == 4_000
        assert loaded.current_monthly_savings == 2_000
        assert loaded.monthly_income == 6_000

    def test_partial_inputs_take_defaults(self, tmp_path):
        path = _write(tmp_path, "fire.json", {
            "schema_version": SCHEMA_VERSION, "inputs": {"monthly_expenses": 3_000},
        })
        loaded = load_fire_file(path)
        assert loaded.inputs.monthly_expenses == 3_000
        assert loaded.inputs.withdrawal_rate == 4.0
        assert loaded.current_monthly_savings is None

    def test_invalid_inputs(self, tmp_path):
        path = _write(tmp_path, "fire.json", {
            "schema_version": SCHEMA_VERSION,
            "inputs": {"current_age": 60, "target_retirement_age": 50},
        })
        with pytest.raises(ConfigurationError, match="Invalid FIRE inputs"):
            load_fire_file(path)


class TestLoadTransactions:

    def test_load(self, transactions_file):
        loaded = load_transactions(transactions_file)
        assert len(loaded.income) == 6
        assert len(loaded.expenses) == 6
        assert loaded.income[0].date == date(2025, 1, 1)
        assert loaded.income[0].recurrence is Recurrence.ONE_TIME
        assert loaded.expenses[0].category == "rent"

    def test_recurrence_parsed(self, tmp_path):
        path = _write(tmp_path, "tx.json", {
            "schema_version": SCHEMA_VERSION,
            "income": [{"date": "2025-01-01", "amount": 100, "recurrence": "weekly"}],
        })
        loaded = load_transactions(path)
        assert loaded.income[0].recurrence is Recurrence.WEEKLY
        assert loaded.expenses == []

    def test_invalid_date(self, tmp_path):
        path = _write(tmp_path, "tx.json", {
            "schema_version": SCHEMA_VERSION,
            "expenses": [{"date": "yesterday", "amount": 100}],
        })
        with pytest.raises(ConfigurationError, match="Invalid expense record"):
            load_transactions(path)


# ============================================================================
# RESULTS
# ============================================================================

class TestResults:

    def test_save_and_load_debt(self, tmp_path, two_debts, start_date):
        comparison = compare_strategies(two_debts, 100, start=start_date)
        path = tmp_path / "out" / "debt.json"
        save_result(comparison, path)

        loaded = load_result(path)
        assert loaded["schema_version"] == SCHEMA_VERSION
        assert loaded["kind"] == "debt"
        assert loaded["result"]["recommended"] == comparison.recommended
        assert loaded["result"]["avalanche"]["total_months"] == comparison.avalanche.total_months

    def test_save_fire(self, tmp_path, fire_inputs):
        path = tmp_path / "fire.json"
        save_result(calculate(fire_inputs, 2_000), path)
        assert load_result(path)["kind"] == "fire"

    def test_save_cashflow(self, tmp_path, steady_income, steady_expenses, as_of):
        path = tmp_path / "cashflow.json"
        save_result(project(steady_income, steady_expenses, as_of=as_of), path)
        loaded = load_result(path)
        assert loaded["kind"] == "cashflow"
        assert loaded["result"]["status"] == "ok"

    def test_unsupported_result(self, tmp_path):
        with pytest.raises(TypeError):
            save_result({"not": "a result"}, tmp_path / "x.json")

    def test_load_result_requires_envelope(self, tmp_path):
        path = _write(tmp_path, "x.json", {"schema_version": SCHEMA_VERSION})
        with pytest.raises(ConfigurationError, match="not a result file"):
            load_result(path)
