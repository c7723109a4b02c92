"""
Custom exceptions for fincast.

Purpose
-------
Provides a unified exception hierarchy for consistent error handling
across the forecasting calculators. All exceptions inherit from
FincastError, enabling catch-all handling when needed.

Exception Hierarchy
-------------------
FincastError (base)
├── ValidationError - Out-of-domain numeric inputs (also a ValueError)
└── ConfigurationError - Malformed configuration files or parameters

SimulationLimitWarning (UserWarning)
    Non-fatal numeric edge cases found mid-simulation (non-amortizing
    liabilities, iteration ceiling reached). Attached to the result as
    well, so the remaining computation can still be displayed.

Usage
-----
>>> from fincast.exceptions import ValidationError, FincastError
>>>
>>> # Raise specific exception
>>> raise ValidationError("withdrawal_rate must be positive, got 0")
>>>
>>> # Catch all fincast exceptions
>>> try:
...     results = calculate(inputs, current_monthly_savings=1_500)
... except FincastError as e:
...     print(f"fincast error: {e}")
"""


class FincastError(Exception):
    """
    Base exception for all fincast errors.

    Examples
    --------
    >>> try:
    ...     strategy = simulate(liabilities, 100, "avalanche")
    ... except FincastError as e:
    ...     logger.error(f"Simulation failed: {e}")
    """
    pass


class ValidationError(FincastError, ValueError):
    """
    Input validation failures.

    Raised at the call boundary when inputs fall outside the calculator's
    domain, such as:
    - Negative liability balances or interest rates
    - Non-positive minimum payments
    - Zero or negative withdrawal rate
    - Target retirement age not after current age

    Subclasses ValueError so callers validating with plain ``ValueError``
    keep working.

    Examples
    --------
    >>> raise ValidationError(
    ...     f"target_retirement_age ({target}) must be greater than "
    ...     f"current_age ({age})."
    ... )
    """
    pass


class ConfigurationError(FincastError):
    """
    Invalid configuration or parameters.

    Raised when a configuration file or settings object is unusable:
    - Missing required top-level sections
    - Unknown template names
    - Incompatible parameter combinations

    Examples
    --------
    >>> raise ConfigurationError(
    ...     "Liabilities file must contain a 'liabilities' list."
    ... )
    """
    pass


class SimulationLimitWarning(UserWarning):
    """
    A simulation reached a numeric limit without failing.

    Emitted when a liability's minimum payment does not cover its monthly
    interest, or when the debt simulation stops at its iteration ceiling
    with balances outstanding.
    """
    pass
