"""
Trend estimation for short monthly series.

Fits y = intercept + slope * x by ordinary least squares over the index
x = 0..n-1, using the covariance/variance estimator:

    slope = Σ (x_i - x̄)(y_i - ȳ) / Σ (x_i - x̄)²
    intercept = ȳ - slope * x̄

Series are short (a handful of months), so no robustness or weighting
is attempted. Used by the cash-flow forecaster.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

__all__ = ["TrendFit", "fit_linear_trend"]


@dataclass(frozen=True)
class TrendFit:
    """Result of a linear trend fit over an index 0..n-1."""
    slope: float
    intercept: float
    n_points: int

    def predict(self, x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """Evaluate the fitted line at index *x*."""
        return self.intercept + self.slope * x


def fit_linear_trend(values: Union[Sequence[float], np.ndarray], *, min_points: int = 2) -> TrendFit:
    """
    Ordinary least-squares slope and intercept of *values* against their index.

    Parameters
    ----------
    values : sequence of float
        Observations in time order.
    min_points : int, default 2
        Below this many points the slope is 0 and the intercept is the
        mean (or 0 for an empty series).

    Returns
    -------
    TrendFit

    Examples
    --------
    >>> fit = fit_linear_trend([100, 200, 300])
    >>> fit.slope, fit.intercept
    (100.0, 100.0)
    """
    y = np.asarray(values, dtype=float)
    if y.ndim != 1:
        raise ValueError(f"values must be 1-D, got shape {y.shape}.")
    if not np.isfinite(y).all():
        raise ValueError("values must contain only finite values.")

    n = y.shape[0]
    if n == 0:
        return TrendFit(slope=0.0, intercept=0.0, n_points=0)

    y_mean = float(y.mean())
    if n < max(min_points, 2):
        return TrendFit(slope=0.0, intercept=y_mean, n_points=n)

    x = np.arange(n, dtype=float)
    x_dev = x - x.mean()
    denominator = float(np.dot(x_dev, x_dev))
    if denominator <= 0:
        return TrendFit(slope=0.0, intercept=y_mean, n_points=n)

    slope = float(np.dot(x_dev, y - y_mean)) / denominator
    intercept = y_mean - slope * float(x.mean())
    return TrendFit(slope=slope, intercept=intercept, n_points=n)
