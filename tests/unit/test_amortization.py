"""
Unit tests for amortization module.

Tests:
- amortization_step: one month of accrual and payment
- is_non_amortizing: payment vs. first month's interest
- amortize: full single-liability schedule and its iteration ceiling
"""

import pytest

from fincast.amortization import amortization_step, amortize, is_non_amortizing
from fincast.exceptions import SimulationLimitWarning, ValidationError


# ---------------------------------------------------------------------------
# amortization_step
# ---------------------------------------------------------------------------

class TestAmortizationStep:

    def test_regular_month(self):
        step = amortization_step(1_000, 0.01, 100)
        assert step.interest == pytest.approx(10.0)
        assert step.payment == pytest.approx(100.0)
        assert step.principal == pytest.approx(90.0)
        assert step.balance == pytest.approx(910.0)
        assert not step.paid_off

    def test_payment_capped_at_amount_owed(self):
        """Only balance + interest is used; the rest stays with the caller."""
        step = amortization_step(50, 0.01, 100)
        assert step.payment == pytest.approx(50.5)
        assert step.balance == 0.0
        assert step.paid_off

    def test_zero_rate(self):
        step = amortization_step(300, 0.0, 100)
        assert step.interest == 0.0
        assert step.balance == pytest.approx(200.0)

    def test_negative_payment_treated_as_zero(self):
        step = amortization_step(100, 0.01, -5)
        assert step.payment == 0.0
        assert step.balance == pytest.approx(101.0)


class TestIsNonAmortizing:

    def test_payment_below_interest(self):
        # 10,000 at 12% accrues 100 per month
        assert is_non_amortizing(10_000, 12, 99)

    def test_payment_above_interest(self):
        assert not is_non_amortizing(10_000, 12, 101)

    def test_zero_balance_is_never_flagged(self):
        assert not is_non_amortizing(0, 25, 1)


# ---------------------------------------------------------------------------
# amortize
# ---------------------------------------------------------------------------

class TestAmortize:

    def test_zero_interest_schedule(self):
        df = amortize(1_000, 0, 250)
        assert df["balance"].tolist() == [750.0, 500.0, 250.0, 0.0]
        assert df["month"].tolist() == [1, 2, 3, 4]
        assert df["interest"].sum() == 0.0

    def test_last_payment_is_partial(self):
        df = amortize(1_000, 0, 300)
        assert len(df) == 4
        assert df["payment"].iloc[-1] == pytest.approx(100.0)

    def test_principal_accounts_for_opening_balance(self):
        df = amortize(5_000, 20, 250)
        assert df["balance"].iloc[-1] == 0.0
        assert df["principal"].sum() == pytest.approx(5_000)
        assert (df["payment"].sum() - df["interest"].sum()) == pytest.approx(5_000)

    def test_higher_payment_pays_off_sooner(self):
        slow = amortize(5_000, 20, 150)
        fast = amortize(5_000, 20, 250)
        assert len(fast) < len(slow)
        assert fast["interest"].sum() < slow["interest"].sum()

    def test_zero_balance_gives_empty_schedule(self):
        df = amortize(0, 10, 100)
        assert df.empty
        assert list(df.columns) == ["month", "payment", "interest", "principal", "balance"]

    def test_non_amortizing_is_truncated_with_warning(self):
        with pytest.warns(SimulationLimitWarning):
            df = amortize(10_000, 12, 50, max_months=24)
        assert len(df) == 24
        assert df["balance"].iloc[-1] > 10_000

    @pytest.mark.parametrize("kwargs", [
        {"balance": -1, "interest_rate": 5, "payment": 100},
        {"balance": 100, "interest_rate": -5, "payment": 100},
        {"balance": 100, "interest_rate": 5, "payment": 0},
    ])
    def test_invalid_inputs(self, kwargs):
        with pytest.raises(ValidationError):
            amortize(**kwargs)
