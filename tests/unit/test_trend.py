"""
Unit tests for trend module.

Tests fit_linear_trend against hand-computed and numpy reference fits.
"""

import numpy as np
import pytest

from fincast.trend import TrendFit, fit_linear_trend


class TestFitLinearTrend:
    """Tests for fit_linear_trend."""

    def test_perfect_line(self):
        fit = fit_linear_trend([100, 200, 300])
        assert fit.slope == pytest.approx(100.0)
        assert fit.intercept == pytest.approx(100.0)
        assert fit.n_points == 3

    def test_matches_polyfit(self):
        values = [1.0, 3.0, 2.0, 4.0]
        fit = fit_linear_trend(values)
        slope, intercept = np.polyfit(np.arange(4), values, 1)

        assert fit.slope == pytest.approx(0.8)
        assert fit.slope == pytest.approx(slope)
        assert fit.intercept == pytest.approx(intercept)

    def test_constant_series_has_zero_slope(self):
        fit = fit_linear_trend([250.0] * 5)
        assert fit.slope == 0.0
        assert fit.intercept == pytest.approx(250.0)

    def test_single_point(self):
        fit = fit_linear_trend([42.0])
        assert fit.slope == 0.0
        assert fit.intercept == 42.0
        assert fit.n_points == 1

    def test_empty_series(self):
        fit = fit_linear_trend([])
        assert fit == TrendFit(slope=0.0, intercept=0.0, n_points=0)

    def test_min_points_threshold(self):
        """Below min_points the slope is zero and the intercept is the mean."""
        fit = fit_linear_trend([100, 200, 300], min_points=4)
        assert fit.slope == 0.0
        assert fit.intercept == pytest.approx(200.0)

    def test_predict(self):
        fit = fit_linear_trend([100, 200, 300])
        assert fit.predict(3) == pytest.approx(400.0)
        np.testing.assert_allclose(fit.predict(np.array([0, 1])), [100.0, 200.0])

    def test_rejects_2d_input(self):
        with pytest.raises(ValueError, match="1-D"):
            fit_linear_trend([[1, 2], [3, 4]])

    def test_rejects_non_finite(self):
        with pytest.raises(ValueError, match="finite"):
            fit_linear_trend([1.0, np.nan, 3.0])
