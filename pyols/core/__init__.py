"""
Core infrastructure for PyOLS.

This module provides shared abstractions and utilities used by the
regression and rolling submodules.

Key components:
    protocols: Backend protocol
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing, tolerances, linear algebra kernels
"""

from pyols.core.protocols import Backend
from pyols.core.result import Result
from pyols.core.exceptions import (
    PyOLSError,
    ValidationError,
    EmptyInputError,
    DimensionError,
    InsufficientObservationsError,
    WindowTooSmallError,
    InsufficientDataError,
    NumericalError,
    SingularMatrixError,
)

__all__ = [
    # Protocols
    "Backend",
    # Result
    "Result",
    # Exceptions
    "PyOLSError",
    "ValidationError",
    "EmptyInputError",
    "DimensionError",
    "InsufficientObservationsError",
    "WindowTooSmallError",
    "InsufficientDataError",
    "NumericalError",
    "SingularMatrixError",
]
