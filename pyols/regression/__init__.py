"""
Ordinary least squares regression.

Public API:
    fit(y, X, ...) -> LinearSolution

The fit() function is the only entry point. It handles:
    - Input validation
    - Design construction (intercept injection)
    - Backend selection
    - Inference (R², standard errors, t/p-values, F-test)

Example:
    >>> from pyols.regression import fit
    >>> result = fit(y, X)
    >>> print(result.coefficients)
    >>> print(result.summary())
"""

from pyols.regression.design import Design
from pyols.regression._inference import FTest
from pyols.regression.solution import (
    LinearSolution,
    LinearParams,
    LinearSummary,
    CoefficientSummary,
)
from pyols.regression.solvers import fit

__all__ = [
    "fit",
    "Design",
    "FTest",
    "LinearSolution",
    "LinearParams",
    "LinearSummary",
    "CoefficientSummary",
]
