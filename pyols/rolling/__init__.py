"""
Rolling (sliding window) ordinary least squares.

Public API:
    rolling_fit(y, X, window, ...) -> RollingSolution

Example:
    >>> from pyols.rolling import rolling_fit
    >>> result = rolling_fit(y, X, window=60)
    >>> result.coefficient_series(1)   # masked where a window failed
    >>> print(result.summary())
"""

from pyols.rolling.design import RollingDesign
from pyols.rolling.solution import (
    RollingParams,
    RollingSolution,
    RollingSummary,
    WindowResult,
)
from pyols.rolling.solvers import rolling_fit

__all__ = [
    "rolling_fit",
    "RollingDesign",
    "RollingParams",
    "RollingSolution",
    "RollingSummary",
    "WindowResult",
]
