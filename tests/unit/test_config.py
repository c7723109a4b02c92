"""
Unit tests for config module.

Tests Pydantic configuration models for validation, serialization,
and environment variable loading.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from fincast.config import (
    AppSettings,
    CashFlowConfig,
    DebtSimulationConfig,
    ExpenseRecordConfig,
    FIREConfig,
    FIREInputsConfig,
    IncomeRecordConfig,
    LiabilityConfig,
)


# ============================================================================
# RECORD CONFIGS
# ============================================================================

class TestLiabilityConfig:

    def test_valid(self):
        config = LiabilityConfig(id="cc", name="Visa", category="credit_card",
                                 balance=5_000, interest_rate=19.99, minimum_payment=150)
        assert config.balance == 5_000
        assert config.interest_rate == 19.99

    def test_optional_fields(self):
        config = LiabilityConfig(id="x", name="X", balance=100)
        assert config.interest_rate is None
        assert config.minimum_payment is None
        assert config.category == "other"

    def test_negative_balance(self):
        with pytest.raises(ValidationError):
            LiabilityConfig(id="x", name="X", balance=-1)

    def test_rate_above_100(self):
        with pytest.raises(ValidationError):
            LiabilityConfig(id="x", name="X", balance=100, interest_rate=150)

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            LiabilityConfig(id="x", name="X", balance=100, color="red")

    def test_frozen(self):
        config = LiabilityConfig(id="x", name="X", balance=100)
        with pytest.raises(ValidationError):
            config.balance = 200


class TestTransactionConfigs:

    def test_income_parses_iso_dates(self):
        config = IncomeRecordConfig.model_validate(
            {"date": "2025-03-01", "amount": 100, "recurrence": "weekly",
             "recurrence_end_date": "2025-12-31"}
        )
        assert config.date == date(2025, 3, 1)
        assert config.recurrence_end_date == date(2025, 12, 31)

    def test_expense_negative_amount(self):
        with pytest.raises(ValidationError):
            ExpenseRecordConfig(date=date(2025, 1, 1), amount=-5)


class TestFIREInputsConfig:

    def test_defaults(self):
        config = FIREInputsConfig()
        assert config.current_age == 30
        assert config.withdrawal_rate == 4.0

    def test_target_age_must_exceed_current(self):
        with pytest.raises(ValidationError, match="target_retirement_age"):
            FIREInputsConfig(current_age=50, target_retirement_age=45)

    def test_default_target_checked_against_current_age(self):
        with pytest.raises(ValidationError, match="target_retirement_age"):
            FIREInputsConfig(current_age=60)

    def test_zero_withdrawal_rate(self):
        with pytest.raises(ValidationError):
            FIREInputsConfig(withdrawal_rate=0)


# ============================================================================
# CALCULATOR CONFIGS
# ============================================================================

class TestCalculatorConfigs:

    def test_debt_defaults(self):
        assert DebtSimulationConfig().max_months == 600

    def test_debt_ceiling_bounds(self):
        with pytest.raises(ValidationError):
            DebtSimulationConfig(max_months=6)

    def test_fire_defaults(self):
        config = FIREConfig()
        assert config.coast_reference_age == 65
        assert config.lean_multiplier == 0.5
        assert config.fat_multiplier == 1.5
        assert not config.use_real_returns

    def test_cash_flow_defaults(self):
        config = CashFlowConfig()
        assert config.lookback_months == 6
        assert config.horizon_months == 12
        assert config.recurring_income_weight == 0.3
        assert config.confidence_floor == 40.0

    def test_confidence_floor_above_start(self):
        with pytest.raises(ValidationError, match="confidence_floor"):
            CashFlowConfig(confidence_start=50, confidence_floor=60)

    def test_round_trip(self):
        config = CashFlowConfig(horizon_months=24, dampening_step=0.05)
        loaded = CashFlowConfig.model_validate_json(config.model_dump_json())
        assert loaded == config


# ============================================================================
# APP SETTINGS
# ============================================================================

class TestAppSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("FINCAST_DEBUG", raising=False)
        monkeypatch.delenv("FINCAST_LOG_LEVEL", raising=False)
        settings = AppSettings(_env_file=None)
        assert settings.debug is False
        assert settings.log_level == "WARNING"
        assert settings.effective_log_level == "WARNING"

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("FINCAST_LOG_LEVEL", "INFO")
        monkeypatch.setenv("FINCAST_CURRENCY_SYMBOL", "€")
        settings = AppSettings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.currency_symbol == "€"

    def test_debug_forces_debug_level(self, monkeypatch):
        monkeypatch.setenv("FINCAST_DEBUG", "true")
        settings = AppSettings(_env_file=None)
        assert settings.effective_log_level == "DEBUG"
