"""
Unit tests for types module.

Every ``to_dict`` payload must carry exactly the keys its TypedDict declares.
"""

from fincast.cashflow import project
from fincast.debt import compare_strategies
from fincast.fire import calculate
from fincast.types import (
    CashFlowForecastDict,
    CashFlowInsightsDict,
    DebtComparisonDict,
    DebtPayoffItemDict,
    DebtStrategyDict,
    FIREResultsDict,
    MonthlyAggregateDict,
    ProjectionPointDict,
    YearlyProjectionDict,
)


def keys(typed_dict):
    return set(typed_dict.__annotations__)


class TestDebtShapes:

    def test_comparison(self, two_debts, start_date):
        payload = compare_strategies(two_debts, 200, start=start_date).to_dict()

        assert set(payload) == keys(DebtComparisonDict)
        assert set(payload["avalanche"]) == keys(DebtStrategyDict)
        assert set(payload["snowball"]["payoff_order"][0]) == keys(DebtPayoffItemDict)

    def test_empty_portfolio(self):
        payload = compare_strategies([]).to_dict()
        assert set(payload) == keys(DebtComparisonDict)


class TestFIREShapes:

    def test_results(self, fire_inputs):
        payload = calculate(fire_inputs, 2_000).to_dict()

        assert set(payload) == keys(FIREResultsDict)
        assert set(payload["yearly_projections"][0]) == keys(YearlyProjectionDict)


class TestCashFlowShapes:

    def test_forecast(self, steady_income, steady_expenses, as_of):
        payload = project(steady_income, steady_expenses, as_of=as_of).to_dict()

        assert set(payload) == keys(CashFlowForecastDict)
        assert set(payload["history"][0]) == keys(MonthlyAggregateDict)
        assert set(payload["projection_data"][0]) == keys(ProjectionPointDict)
        assert set(payload["insights"]) == keys(CashFlowInsightsDict)

    def test_insufficient_data(self, as_of):
        payload = project([], [], as_of=as_of).to_dict()

        assert set(payload) == keys(CashFlowForecastDict)
        assert payload["insights"] is None
