"""
Exception hierarchy for PyOLS.

All exceptions inherit from PyOLSError to allow catching any
library-specific error. The rolling scan relies on this: any PyOLSError
raised while fitting one window is recorded against that window, anything
else propagates.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyOLSError(Exception):
    """Base exception for all PyOLS errors."""
    pass


class ValidationError(PyOLSError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks. These are
    always raised before any numerical work is done.
    """
    pass


class EmptyInputError(ValidationError):
    """Response or design matrix has no observations."""
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when X and y disagree on the number of observations, when the
    rows of X have unequal lengths, or when prediction rows do not match
    the number of fitted parameters.
    """
    pass


class InsufficientObservationsError(ValidationError):
    """
    Not enough observations for the number of parameters.

    OLS needs strictly more observations than parameters so that the
    residual degrees of freedom are positive.

    Attributes:
        n: Number of observations
        k: Number of parameters (including the intercept)
    """

    def __init__(self, message: str, n: int | None = None, k: int | None = None):
        super().__init__(message)
        self.n = n
        self.k = k


class WindowTooSmallError(ValidationError):
    """
    Rolling window is smaller than two observations.

    Attributes:
        window: The rejected window size
    """

    def __init__(self, message: str, window: int | None = None):
        super().__init__(message)
        self.window = window


class InsufficientDataError(ValidationError):
    """
    Series is shorter than the rolling window.

    Attributes:
        n: Length of the series
        window: Requested window size
    """

    def __init__(self, message: str, n: int | None = None, window: int | None = None):
        super().__init__(message)
        self.n = n
        self.window = window


class NumericalError(PyOLSError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when X'X cannot be inverted, typically because of exact
    collinearity or duplicated columns in the design matrix.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
        rank: Numerical rank, if computed
        expected_rank: Expected rank (the number of parameters)
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank
