"""
Tests for the exception hierarchy and where each exception surfaces.
"""

import warnings
from datetime import date

import pytest

from fincast.debt import Liability, simulate
from fincast.exceptions import (
    ConfigurationError,
    FincastError,
    SimulationLimitWarning,
    ValidationError,
)
from fincast.fire import FIREInputs


class TestHierarchy:

    def test_validation_error_is_value_error(self):
        assert issubclass(ValidationError, FincastError)
        assert issubclass(ValidationError, ValueError)

    def test_configuration_error(self):
        assert issubclass(ConfigurationError, FincastError)
        assert not issubclass(ConfigurationError, ValueError)

    def test_warning_category(self):
        assert issubclass(SimulationLimitWarning, UserWarning)


class TestBoundaries:

    def test_catch_all(self):
        with pytest.raises(FincastError):
            Liability(id="x", name="X", balance=-10, interest_rate=5, minimum_payment=50)

    def test_plain_value_error_still_catches(self):
        with pytest.raises(ValueError, match="withdrawal_rate"):
            FIREInputs(current_age=30, target_retirement_age=55, monthly_expenses=4_000,
                       current_savings=0, expected_annual_return=7, inflation_rate=2,
                       withdrawal_rate=0)

    def test_non_amortizing_warns_but_returns(self, non_amortizing_debt):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            strategy = simulate([non_amortizing_debt], 0, start=date(2025, 1, 1), max_months=24)

        assert any(issubclass(w.category, SimulationLimitWarning) for w in caught)
        assert not strategy.resolved
        assert strategy.payoff_order[0].non_amortizing
