"""
Pytest configuration and fixtures for the fincast test suite.

This module provides reusable fixtures for testing all fincast components.
Fixtures follow the principle of "arrange-act-assert" with clear separation.
"""

import json
from datetime import date
from typing import List

import matplotlib
import pytest

matplotlib.use("Agg")

from fincast.cashflow import ExpenseRecord, IncomeRecord
from fincast.debt import Liability
from fincast.fire import FIREInputs


# ---------------------------------------------------------------------------
# Date Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def start_date() -> date:
    """Standard simulation start date for tests."""
    return date(2025, 1, 1)


@pytest.fixture
def as_of() -> date:
    """Reference date for cash-flow tests (last historical month: June 2025)."""
    return date(2025, 6, 20)


# ---------------------------------------------------------------------------
# Debt Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def credit_card() -> Liability:
    """High-rate, small-balance card."""
    return Liability("cc", "Visa", balance=5_000, interest_rate=20,
                     minimum_payment=150, category="credit_card")


@pytest.fixture
def car_loan() -> Liability:
    """Low-rate, large-balance loan."""
    return Liability("car", "Car loan", balance=10_000, interest_rate=5,
                     minimum_payment=200, category="car_loan")


@pytest.fixture
def two_debts(credit_card, car_loan) -> List[Liability]:
    """Avalanche and snowball agree on the order (cc first)."""
    return [car_loan, credit_card]


@pytest.fixture
def conflicting_debts() -> List[Liability]:
    """
    Avalanche and snowball disagree.

    - small: 2,000 at 5%  (snowball target)
    - big:   8,000 at 22% (avalanche target)
    """
    return [
        Liability("small", "Store card", balance=2_000, interest_rate=5, minimum_payment=50),
        Liability("big", "Credit card", balance=8_000, interest_rate=22, minimum_payment=200),
    ]


@pytest.fixture
def non_amortizing_debt() -> Liability:
    """Minimum payment (50) below the monthly interest (10,000 · 12% / 12 = 100)."""
    return Liability("trap", "Payday loan", balance=10_000, interest_rate=12, minimum_payment=50)


# ---------------------------------------------------------------------------
# FIRE Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fire_inputs() -> FIREInputs:
    """Default-like profile: 30 → 55, 4,000/month, 50,000 saved, 7% return."""
    return FIREInputs(
        current_age=30,
        target_retirement_age=55,
        monthly_expenses=4_000,
        current_savings=50_000,
        expected_annual_return=7,
        inflation_rate=2.5,
        withdrawal_rate=4,
    )


# ---------------------------------------------------------------------------
# Cash-Flow Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def steady_income() -> List[IncomeRecord]:
    """One-time salary deposits of 5,000 from January to June 2025."""
    return [
        IncomeRecord(date(2025, m, 1), 5_000, description="Salary")
        for m in range(1, 7)
    ]


@pytest.fixture
def steady_expenses() -> List[ExpenseRecord]:
    """Rent-like expense of 3,500 from January to June 2025."""
    return [ExpenseRecord(date(2025, m, 15), 3_500, category="rent") for m in range(1, 7)]


# ---------------------------------------------------------------------------
# File Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def debt_file(tmp_path):
    """Liabilities file with two debts and 100/month extra."""
    data = {
        "schema_version": "0.1.0",
        "extra_monthly_payment": 100,
        "liabilities": [
            {"id": "cc", "name": "Visa", "category": "credit_card",
             "balance": 5000, "interest_rate": 20, "minimum_payment": 150},
            {"id": "car", "name": "Car loan", "category": "car_loan",
             "balance": 10000, "interest_rate": 5, "minimum_payment": 200},
        ],
    }
    path = tmp_path / "debts.json"
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def fire_file(tmp_path):
    """FIRE profile with savings and income figures."""
    data = {
        "schema_version": "0.1.0",
        "inputs": {
            "current_age": 30,
            "target_retirement_age": 55,
            "monthly_expenses": 4000,
            "current_savings": 50000,
            "expected_annual_return": 7,
            "inflation_rate": 2.5,
            "withdrawal_rate": 4,
        },
        "current_monthly_savings": 2000,
        "monthly_income": 6000,
    }
    path = tmp_path / "fire.json"
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def transactions_file(tmp_path):
    """Six months of salary and rent, January to June 2025."""
    data = {
        "schema_version": "0.1.0",
        "income": [
            {"date": f"2025-{m:02d}-01", "amount": 5000}
            for m in range(1, 7)
        ],
        "expenses": [
            {"date": f"2025-{m:02d}-15", "amount": 3500, "category": "rent"}
            for m in range(1, 7)
        ],
    }
    path = tmp_path / "transactions.json"
    path.write_text(json.dumps(data))
    return path
