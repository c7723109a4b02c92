"""
Configuration management module for fincast.

Purpose
-------
Centralized configuration using Pydantic models for type-safe parameter
management, validation, and serialization. Covers the calculators' tunable
assumptions, the record shapes accepted from JSON files, and
environment-level application settings.

Design Principles
-----------------
- Type-safe: Pydantic enforces types and validates ranges
- Immutable: Frozen models prevent accidental mutation
- Serializable: Easy conversion to/from JSON for config files
- Environment-aware: Supports .env files via pydantic-settings
- Defaults: Every default comes from ``constants.py``

Example
-------
>>> from fincast.config import CashFlowConfig, FIREConfig
>>> cf_config = CashFlowConfig(horizon_months=24, confidence_floor=30)
>>> fire_config = FIREConfig(use_real_returns=True)
>>>
>>> # Serialize to dict/JSON
>>> config_dict = cf_config.model_dump()
>>> json_str = cf_config.model_dump_json()
>>>
>>> # Load from dict/JSON
>>> loaded = CashFlowConfig.model_validate(config_dict)
"""

from __future__ import annotations
from typing import Optional, Literal
import datetime

from pydantic import BaseModel, Field, model_validator, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_COAST_REFERENCE_AGE,
    DEFAULT_CONFIDENCE_DECAY,
    DEFAULT_CONFIDENCE_FLOOR,
    DEFAULT_CONFIDENCE_START,
    DEFAULT_DAMPENING_FLOOR,
    DEFAULT_DAMPENING_STEP,
    DEFAULT_FIRE_INPUTS,
    DEFAULT_HORIZON_MONTHS,
    DEFAULT_LOOKBACK_MONTHS,
    DEFAULT_MAX_DEBT_MONTHS,
    DEFAULT_MAX_FIRE_YEARS,
    DEFAULT_RECURRING_INCOME_WEIGHT,
    DEFAULT_TREND_THRESHOLD,
    FAT_FIRE_MULTIPLIER,
    LEAN_FIRE_MULTIPLIER,
    MIN_TREND_MONTHS,
    MIN_VALID_MONTHS,
)

__all__ = [
    "LiabilityConfig",
    "IncomeRecordConfig",
    "ExpenseRecordConfig",
    "FIREInputsConfig",
    "DebtSimulationConfig",
    "FIREConfig",
    "CashFlowConfig",
    "AppSettings",
]


# ---------------------------------------------------------------------------
# Record Configuration (file-level inputs)
# ---------------------------------------------------------------------------

class LiabilityConfig(BaseModel):
    """
    Liability record as stored in a liabilities file.

    Attributes
    ----------
    id : str
        Identifier (unique within the file).
    name : str
        Display name.
    category : str
        Free-form; unknown values become "other" when simulated.
    balance : float
        Outstanding balance.
    interest_rate : float, optional
        Annual percent. Missing means 0%.
    minimum_payment : float, optional
        Missing means max(2% of balance, 25).

    Examples
    --------
    >>> LiabilityConfig(id="cc", name="Visa", category="credit_card",
    ...                 balance=5_000, interest_rate=19.99, minimum_payment=150)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1, max_length=100, description="Liability identifier")
    name: str = Field(min_length=1, max_length=200, description="Display name")
    category: str = Field(default="other", description="Liability category")
    balance: float = Field(ge=0, description="Outstanding balance")
    interest_rate: Optional[float] = Field(
        default=None,
        ge=0,
        le=100,
        description="Annual interest rate in percent"
    )
    minimum_payment: Optional[float] = Field(
        default=None,
        gt=0,
        description="Required monthly payment"
    )


class IncomeRecordConfig(BaseModel):
    """Income transaction as stored in a transactions file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    date: datetime.date = Field(description="Transaction date")
    amount: float = Field(ge=0, description="Amount received")
    recurrence: Optional[str] = Field(
        default=None,
        description="one_time, daily, weekly, biweekly, monthly, quarterly or yearly"
    )
    recurrence_end_date: Optional[datetime.date] = Field(
        default=None,
        description="Last date the recurring income is expected"
    )
    description: str = Field(default="", max_length=200)


class ExpenseRecordConfig(BaseModel):
    """Expense transaction as stored in a transactions file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    date: datetime.date = Field(description="Transaction date")
    amount: float = Field(ge=0, description="Amount spent")
    category: Optional[str] = Field(default=None, max_length=100)
    description: str = Field(default="", max_length=200)


class FIREInputsConfig(BaseModel):
    """
    FIRE profile as stored in a FIRE inputs file.

    Defaults mirror a new user's starting profile.

    Examples
    --------
    >>> config = FIREInputsConfig(current_age=35, monthly_expenses=3_500)
    >>> config.withdrawal_rate
    4.0
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    current_age: float = Field(
        default=DEFAULT_FIRE_INPUTS["current_age"], ge=0, le=120,
        description="Current age in years"
    )
    target_retirement_age: float = Field(
        default=DEFAULT_FIRE_INPUTS["target_retirement_age"], gt=0, le=120,
        description="Desired retirement age"
    )
    monthly_expenses: float = Field(
        default=DEFAULT_FIRE_INPUTS["monthly_expenses"], gt=0,
        description="Monthly living expenses"
    )
    current_savings: float = Field(
        default=DEFAULT_FIRE_INPUTS["current_savings"], ge=0,
        description="Invested savings today"
    )
    expected_annual_return: float = Field(
        default=DEFAULT_FIRE_INPUTS["expected_annual_return"], gt=-100, le=100,
        description="Expected annual return in percent"
    )
    inflation_rate: float = Field(
        default=DEFAULT_FIRE_INPUTS["inflation_rate"], gt=-100, le=100,
        description="Annual inflation in percent"
    )
    withdrawal_rate: float = Field(
        default=DEFAULT_FIRE_INPUTS["withdrawal_rate"], gt=0, le=100,
        description="Safe withdrawal rate in percent"
    )

    @model_validator(mode="after")
    def validate_target_age(self):
        """Ensure target_retirement_age > current_age (defaults included)."""
        if self.target_retirement_age <= self.current_age:
            raise ValueError(
                f"target_retirement_age ({self.target_retirement_age}) must be greater "
                f"than current_age ({self.current_age})"
            )
        return self


# ---------------------------------------------------------------------------
# Calculator Configuration
# ---------------------------------------------------------------------------

class DebtSimulationConfig(BaseModel):
    """
    Configuration for the debt payoff simulation.

    Attributes
    ----------
    max_months : int
        Iteration ceiling (12-1200 months).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_months: int = Field(
        default=DEFAULT_MAX_DEBT_MONTHS,
        ge=12,
        le=1200,
        description="Iteration ceiling (months)"
    )


class FIREConfig(BaseModel):
    """
    Assumptions of the FIRE calculator that are not user profile inputs.

    Attributes
    ----------
    coast_reference_age : int
        Age the Coast FIRE number must grow by (the target age wins if later).
    lean_multiplier, fat_multiplier : float
        Variant targets relative to the FIRE number.
    max_years : int
        Search ceiling when locating the FIRE year.
    use_real_returns : bool
        Replace the nominal return by the inflation-adjusted real return.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    coast_reference_age: int = Field(
        default=DEFAULT_COAST_REFERENCE_AGE, ge=1, le=120,
        description="Coast FIRE reference age"
    )
    lean_multiplier: float = Field(
        default=LEAN_FIRE_MULTIPLIER, gt=0, le=1,
        description="Lean FIRE fraction of the FIRE number"
    )
    fat_multiplier: float = Field(
        default=FAT_FIRE_MULTIPLIER, ge=1, le=10,
        description="Fat FIRE multiple of the FIRE number"
    )
    max_years: int = Field(
        default=DEFAULT_MAX_FIRE_YEARS, ge=1, le=100,
        description="Search ceiling for years to FIRE"
    )
    use_real_returns: bool = Field(
        default=False,
        description="Use inflation-adjusted returns"
    )


class CashFlowConfig(BaseModel):
    """
    Heuristic coefficients of the cash-flow forecaster.

    Projected month i uses:
        dampening_i  = max(dampening_floor, 1 - i · dampening_step)
        confidence_i = max(confidence_floor, confidence_start - i · confidence_decay)

    Examples
    --------
    >>> config = CashFlowConfig(horizon_months=24)
    >>> config.confidence_floor
    40.0
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    lookback_months: int = Field(
        default=DEFAULT_LOOKBACK_MONTHS, ge=1, le=120,
        description="Trailing months of history"
    )
    horizon_months: int = Field(
        default=DEFAULT_HORIZON_MONTHS, ge=1, le=120,
        description="Months projected ahead"
    )
    recurring_income_weight: float = Field(
        default=DEFAULT_RECURRING_INCOME_WEIGHT, ge=0, le=1,
        description="Share of recurring income added to the average"
    )
    dampening_step: float = Field(
        default=DEFAULT_DAMPENING_STEP, ge=0, le=1,
        description="Per-month trend dampening"
    )
    dampening_floor: float = Field(
        default=DEFAULT_DAMPENING_FLOOR, ge=0, le=1,
        description="Minimum trend multiplier"
    )
    confidence_start: float = Field(
        default=DEFAULT_CONFIDENCE_START, ge=0, le=100,
        description="Confidence intercept"
    )
    confidence_decay: float = Field(
        default=DEFAULT_CONFIDENCE_DECAY, ge=0,
        description="Confidence lost per month"
    )
    confidence_floor: float = Field(
        default=DEFAULT_CONFIDENCE_FLOOR, ge=0, le=100,
        description="Minimum confidence"
    )
    trend_threshold: float = Field(
        default=DEFAULT_TREND_THRESHOLD, ge=0,
        description="Slope (per month) separating up/down from stable"
    )
    min_valid_months: int = Field(
        default=MIN_VALID_MONTHS, ge=1,
        description="Active months required to project"
    )
    min_trend_months: int = Field(
        default=MIN_TREND_MONTHS, ge=2,
        description="Active months required to fit a trend"
    )

    @model_validator(mode="after")
    def validate_confidence_schedule(self):
        """Ensure confidence_floor <= confidence_start."""
        if self.confidence_floor > self.confidence_start:
            raise ValueError(
                f"confidence_floor ({self.confidence_floor}) must be <= "
                f"confidence_start ({self.confidence_start})"
            )
        return self


# ---------------------------------------------------------------------------
# Application Settings (Environment Variables)
# ---------------------------------------------------------------------------

class AppSettings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Supports .env files for local development. Environment variables
    should be prefixed with FINCAST_ (e.g., FINCAST_DEBUG=true).

    Attributes
    ----------
    debug : bool
        Enable debug mode (forces DEBUG logging)
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR"
    currency_symbol : str
        Symbol used when formatting amounts in the CLI and plots

    Examples
    --------
    >>> settings = AppSettings()
    >>> settings.debug
    False

    # With .env file:
    # FINCAST_LOG_LEVEL=DEBUG
    >>> settings = AppSettings(_env_file=".env")
    >>> settings.log_level
    'DEBUG'
    """

    model_config = SettingsConfigDict(
        env_prefix="FINCAST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )
    currency_symbol: str = Field(
        default="$",
        max_length=5,
        description="Currency symbol for display"
    )

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level
