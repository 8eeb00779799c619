"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def simple_regression_data(rng):
    """Simple regression dataset (no intercept column) for basic tests."""
    n, p = 100, 3
    X = rng.standard_normal((n, p))
    beta_true = np.array([1.0, -2.0, 0.5])
    y = 0.75 + X @ beta_true + rng.standard_normal(n) * 0.1
    return X, y, beta_true


@pytest.fixture
def noisy_regression_data(rng):
    """Weak signal, so t-statistics are moderate and p-values don't underflow."""
    n = 50
    X = rng.standard_normal((n, 4))
    y = X @ np.array([0.5, 0.2, 0.0, -0.3]) + rng.standard_normal(n)
    return X, y


@pytest.fixture
def exact_linear_data():
    """y = 2.5 x with no noise."""
    y = [2.5, 5.0, 7.5, 10.0, 12.5]
    X = [[1], [2], [3], [4], [5]]
    return y, X


@pytest.fixture
def collinear_data(rng):
    """Dataset with perfect collinearity (should fail)."""
    n = 100
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    x3 = x1 + x2  # Perfect collinearity
    X = np.column_stack([x1, x2, x3])
    y = rng.standard_normal(n)
    return X, y


@pytest.fixture
def market_series(rng):
    """Asset returns driven by a market factor whose beta drifts over time."""
    n = 250
    market = rng.standard_normal(n) * 0.01
    beta = np.linspace(0.8, 1.4, n)
    returns = 0.0002 + beta * market + rng.standard_normal(n) * 0.002
    return returns, market
