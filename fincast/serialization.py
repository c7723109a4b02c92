"""
Serialization module for fincast input files and results.

Purpose
-------
Provides JSON loading of calculator inputs (liabilities, transactions,
FIRE profiles) and JSON persistence of calculator results, enabling
repeatable runs from the CLI and sharing of scenarios.

Input file layouts
------------------
Debt:
    {"schema_version": "0.1.0",
     "extra_monthly_payment": 200,
     "liabilities": [{"id": "cc", "name": "Visa", "balance": 5000,
                      "interest_rate": 19.99, "minimum_payment": 150,
                      "category": "credit_card"}]}

FIRE:
    {"schema_version": "0.1.0",
     "inputs": {"current_age": 30, "target_retirement_age": 55, ...},
     "current_monthly_savings": 1500, "monthly_income": 6000}

Cash flow:
    {"schema_version": "0.1.0",
     "income": [{"date": "2025-01-01", "amount": 5000, "recurrence": "monthly"}],
     "expenses": [{"date": "2025-01-15", "amount": 3500, "category": "rent"}]}

Design Principles
-----------------
- Type-safe: every record is validated through its Pydantic config
- Human-readable: indented JSON for easy editing
- Backward compatible: a schema version mismatch warns instead of failing

Example
-------
>>> from pathlib import Path
>>> from fincast.serialization import load_debt_file, save_result
>>> from fincast.debt import compare_strategies
>>>
>>> debt_file = load_debt_file(Path("debts.json"))
>>> comparison = compare_strategies(debt_file.liabilities, debt_file.extra_monthly_payment)
>>> save_result(comparison, Path("results/debt.json"))
"""

from __future__ import annotations
from typing import Dict, Any, List, Optional, Union, NamedTuple
from pathlib import Path
from datetime import date
import json
import logging
import warnings

from pydantic import ValidationError as PydanticValidationError

from .cashflow import CashFlowForecast, ExpenseRecord, IncomeRecord
from .config import (
    ExpenseRecordConfig,
    FIREInputsConfig,
    IncomeRecordConfig,
    LiabilityConfig,
)
from .debt import DebtComparison, DebtStrategy, Liability
from .exceptions import ConfigurationError
from .fire import FIREInputs, FIREResults
from .types import ResultFileDict

__all__ = [
    "SCHEMA_VERSION",
    "DebtFile",
    "FIREFile",
    "TransactionsFile",
    "liability_to_dict",
    "liability_from_dict",
    "income_record_from_dict",
    "expense_record_from_dict",
    "fire_inputs_from_dict",
    "load_debt_file",
    "load_fire_file",
    "load_transactions",
    "save_result",
    "load_result",
]

logger = logging.getLogger(__name__)

Result = Union[DebtComparison, DebtStrategy, FIREResults, CashFlowForecast]


# ---------------------------------------------------------------------------
# Schema Version
# ---------------------------------------------------------------------------

SCHEMA_VERSION = "0.1.0"


class DebtFile(NamedTuple):
    liabilities: List[Liability]
    extra_monthly_payment: float


class FIREFile(NamedTuple):
    inputs: FIREInputs
    current_monthly_savings: Optional[float]
    monthly_income: Optional[float]


class TransactionsFile(NamedTuple):
    income: List[IncomeRecord]
    expenses: List[ExpenseRecord]


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------

def _read_json(path: Path) -> Dict[str, Any]:
    """Read a JSON object from *path*, warning on schema version mismatch."""
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object at the top level.")

    schema_version = data.get("schema_version", "unknown")
    if schema_version != SCHEMA_VERSION:
        warnings.warn(
            f"Loading {path.name} with schema version {schema_version}, current "
            f"version {SCHEMA_VERSION}. May encounter compatibility issues.",
            UserWarning,
            stacklevel=3,
        )
    return data


def _record_list(data: Dict[str, Any], key: str, path: Path) -> List[Dict[str, Any]]:
    records = data.get(key, [])
    if not isinstance(records, list):
        raise ConfigurationError(f"'{key}' in {path} must be a list.")
    return records


# ---------------------------------------------------------------------------
# Record conversion
# ---------------------------------------------------------------------------

def liability_to_dict(liability: Liability) -> Dict[str, Any]:
    """Convert a Liability to its file representation."""
    return {
        "id": liability.id,
        "name": liability.name,
        "category": liability.category.value,
        "balance": liability.balance,
        "interest_rate": liability.interest_rate,
        "minimum_payment": liability.minimum_payment,
    }


def liability_from_dict(data: Dict[str, Any]) -> Liability:
    """
    Create a Liability from its file representation.

    Raises
    ------
    ConfigurationError
        If the record fails validation.
    """
    try:
        config = LiabilityConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid liability record: {e}") from e
    return Liability.from_record(config.model_dump())


def income_record_from_dict(data: Dict[str, Any]) -> IncomeRecord:
    try:
        config = IncomeRecordConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid income record: {e}") from e
    return IncomeRecord(
        date=config.date,
        amount=config.amount,
        recurrence=config.recurrence,
        recurrence_end_date=config.recurrence_end_date,
        description=config.description,
    )


def expense_record_from_dict(data: Dict[str, Any]) -> ExpenseRecord:
    try:
        config = ExpenseRecordConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid expense record: {e}") from e
    return ExpenseRecord(
        date=config.date,
        amount=config.amount,
        category=config.category,
        description=config.description,
    )


def fire_inputs_from_dict(data: Dict[str, Any]) -> FIREInputs:
    """Create FIREInputs from a (possibly partial) profile; gaps take defaults."""
    try:
        config = FIREInputsConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid FIRE inputs: {e}") from e
    return FIREInputs(**config.model_dump())


# ---------------------------------------------------------------------------
# Input files
# ---------------------------------------------------------------------------

def load_debt_file(path: Path) -> DebtFile:
    """
    Load liabilities and the extra monthly payment from JSON.

    Raises
    ------
    ConfigurationError
        Malformed file or invalid record.
    """
    data = _read_json(path)
    liabilities = [liability_from_dict(r) for r in _record_list(data, "liabilities", path)]
    extra = data.get("extra_monthly_payment", 0.0)
    try:
        extra = float(extra)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"extra_monthly_payment must be a number (got {extra!r}).") from e
    if extra < 0:
        raise ConfigurationError(f"extra_monthly_payment must be non-negative (got {extra}).")

    logger.debug("Loaded %d liabilities from %s", len(liabilities), path)
    return DebtFile(liabilities=liabilities, extra_monthly_payment=extra)


def load_fire_file(path: Path) -> FIREFile:
    """Load a FIRE profile plus optional savings/income figures from JSON."""
    data = _read_json(path)
    inputs_data = data.get("inputs", {})
    if not isinstance(inputs_data, dict):
        raise ConfigurationError(f"'inputs' in {path} must be an object.")

    def optional_amount(key: str) -> Optional[float]:
        value = data.get(key)
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"{key} must be a number (got {value!r}).") from e

    return FIREFile(
        inputs=fire_inputs_from_dict(inputs_data),
        current_monthly_savings=optional_amount("current_monthly_savings"),
        monthly_income=optional_amount("monthly_income"),
    )


def load_transactions(path: Path) -> TransactionsFile:
    """Load income and expense records from JSON."""
    data = _read_json(path)
    income = [income_record_from_dict(r) for r in _record_list(data, "income", path)]
    expenses = [expense_record_from_dict(r) for r in _record_list(data, "expenses", path)]
    logger.debug("Loaded %d income and %d expense records from %s", len(income), len(expenses), path)
    return TransactionsFile(income=income, expenses=expenses)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

def _result_kind(result: Result) -> str:
    if isinstance(result, (DebtComparison, DebtStrategy)):
        return "debt"
    if isinstance(result, FIREResults):
        return "fire"
    if isinstance(result, CashFlowForecast):
        return "cashflow"
    raise TypeError(f"Cannot serialize result of type {type(result).__name__}")


def save_result(result: Result, path: Path) -> None:
    """
    Save a calculator result to JSON.

    Parameters
    ----------
    result : DebtComparison, DebtStrategy, FIREResults or CashFlowForecast
        Anything exposing ``to_dict()``.
    path : Path
        Output file (parent directories are created).
    """
    path = Path(path)
    payload: ResultFileDict = {
        "schema_version": SCHEMA_VERSION,
        "kind": _result_kind(result),
        "created": date.today().isoformat(),
        "result": result.to_dict(),
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(payload, f, indent=2)


def load_result(path: Path) -> ResultFileDict:
    """
    Load a result file written by ``save_result``.

    Returns the raw envelope; results are not re-hydrated into dataclasses.
    """
    data = _read_json(path)
    for key in ("kind", "result"):
        if key not in data:
            raise ConfigurationError(f"{path} is not a result file (missing '{key}').")
    return data  # type: ignore[return-value]
