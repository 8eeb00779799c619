"""
Solver dispatch for regression.

This module provides the fit() function (public API) and backend selection.
"""

from typing import Literal
from numpy.typing import ArrayLike

from pyols.core.protocols import Backend
from pyols.core.result import Result
from pyols.regression.design import Design
from pyols.regression.solution import LinearSolution
from pyols.regression._inference import infer
from pyols.regression.backends.cpu import CPUQRBackend, CPUNormalEquationsBackend


# Type alias for backend selection
BackendChoice = Literal['auto', 'cpu', 'cpu_qr', 'cpu_normal']


def fit(
    y: ArrayLike,
    X: ArrayLike,
    *,
    intercept: bool = True,
    backend: BackendChoice = 'auto',
) -> LinearSolution:
    """
    Fit a linear regression model.

    Solves the ordinary least squares problem:
        min_β ||y - Xβ||²

    This is the primary public API for linear regression. All input
    validation, design construction, backend selection and inference
    happens here, eagerly: a returned LinearSolution is complete.

    Args:
        y: Response vector (n,). Can be any array-like.
        X: Predictors (n, p) or (n,) for a single predictor. Do not include
            a column of ones; use ``intercept`` instead.
        intercept: Prepend an intercept column (default True).
        backend: Computational backend to use:
            - 'auto' / 'cpu' / 'cpu_qr': QR decomposition (reference)
            - 'cpu_normal': explicit normal equations (X'X)⁻¹ X'y

    Returns:
        LinearSolution with coefficients, diagnostics, and summary methods

    Raises:
        EmptyInputError: If y or X is empty
        DimensionError: If X and y disagree on n, or rows of X are ragged
        ValidationError: If inputs are non-numeric or non-finite
        InsufficientObservationsError: If n <= k
        SingularMatrixError: If X'X is singular
        ValueError: If the backend name is unknown

    Example:
        >>> from pyols.regression import fit
        >>> result = fit([2.5, 5.0, 7.5, 10.0, 12.5], [[1], [2], [3], [4], [5]])
        >>> result.coefficients      # ≈ [0.0, 2.5]
        >>> print(result.summary())
    """
    # Resolve the backend first so a typo fails before validation work
    backend_impl = _get_backend(backend)

    # === Construct Design ===
    # This is the boundary - validate here, trust everywhere else
    design = Design.build(y, X, intercept=intercept)

    # === Solve ===
    result = backend_impl.solve(design)

    # === Inference ===
    inference, warnings = infer(result.params, design)
    if warnings:
        result = Result(
            params=result.params,
            info=result.info,
            timing=result.timing,
            backend_name=result.backend_name,
            warnings=result.warnings + warnings,
        )

    return LinearSolution(_result=result, _design=design, _inference=inference)


def _get_backend(choice: BackendChoice) -> Backend:
    """
    Select and instantiate the appropriate backend.

    Raises:
        ValueError: If unknown backend specified
    """
    if choice in ('auto', 'cpu', 'cpu_qr'):
        return CPUQRBackend()

    elif choice == 'cpu_normal':
        return CPUNormalEquationsBackend()

    else:
        raise ValueError(f"Unknown backend: {choice!r}")
