"""
CPU backends for linear regression.

CPUQRBackend is the reference: it factors X = QR, so X'X is never formed
and its condition number is never squared. CPUNormalEquationsBackend solves
β = (X'X)⁻¹ X'y literally, for callers who want the textbook computation.
On well-conditioned designs both agree to floating-point tolerance.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

from pyols.core.result import Result
from pyols.core.compute.timing import Timer
from pyols.core.compute.tolerances import ILL_CONDITIONED_THRESHOLD, select_tolerance
from pyols.core.compute.linalg.qr import (
    qr_cpu,
    qr_solve_cpu,
    qr_unscaled_covariance,
    normal_equations_cpu,
)
from pyols.regression.design import Design
from pyols.regression.solution import LinearParams


class CPUQRBackend:
    """
    CPU backend using QR decomposition.

    Implements the Backend protocol for Design -> LinearParams.
    """

    @property
    def name(self) -> str:
        return 'cpu_qr'

    def solve(self, design: Design) -> Result[LinearParams]:
        """
        Solve OLS via QR decomposition.

        Algorithm:
            1. Compute QR decomposition: X = QR, rank from diag(R)
            2. Solve: β = R⁻¹ Q'y
            3. (X'X)⁻¹ = R⁻¹ R⁻ᵀ
            4. Compute residuals, fitted values, and sums of squares

        Raises:
            SingularMatrixError: If X is rank-deficient
        """
        timer = Timer()
        timer.start()

        X = design.X
        y = design.y

        with timer.section('qr_decomposition'):
            qr_result = qr_cpu(X, mode='reduced')

        with timer.section('solve'):
            coefficients = qr_solve_cpu(X, y, check_rank=True, qr_result=qr_result)
            XtX_inv = qr_unscaled_covariance(qr_result.R)

        params = _linear_params(design, coefficients, XtX_inv, qr_result.rank, timer)
        timer.stop()

        info: dict[str, Any] = {
            'method': 'qr',
            'rank': qr_result.rank,
            'condition_estimate': qr_result.condition_estimate,
            'tolerance_tier': _tolerance_tier(self.name, qr_result.condition_estimate),
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )


class CPUNormalEquationsBackend:
    """
    CPU backend solving the normal equations X'X β = X'y.

    Implements the Backend protocol for Design -> LinearParams.
    """

    @property
    def name(self) -> str:
        return 'cpu_normal'

    def solve(self, design: Design) -> Result[LinearParams]:
        """
        Solve OLS via an explicit inverse of X'X.

        Raises:
            SingularMatrixError: If X'X is singular or numerically so
        """
        timer = Timer()
        timer.start()

        with timer.section('solve'):
            solved = normal_equations_cpu(design.XtX(), design.Xty())

        params = _linear_params(design, solved.coefficients, solved.XtX_inv, design.k, timer)
        timer.stop()

        info: dict[str, Any] = {
            'method': 'normal_equations',
            'rank': design.k,
            'condition_number': solved.condition_number,
            # cond(X'X) is cond(X) squared
            'tolerance_tier': _tolerance_tier(self.name, float(np.sqrt(solved.condition_number))),
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )


def _linear_params(
    design: Design,
    coefficients: NDArray[np.floating[Any]],
    XtX_inv: NDArray[np.floating[Any]],
    rank: int,
    timer: Timer,
) -> LinearParams:
    """Residuals, fitted values and sums of squares for a solved β."""
    X = design.X
    y = design.y

    with timer.section('residuals'):
        fitted_values = X @ coefficients
        residuals = y - fitted_values

    with timer.section('statistics'):
        rss = float(residuals @ residuals)
        y_mean = np.mean(y)
        tss = float(np.sum((y - y_mean) ** 2))

    for arr in (coefficients, fitted_values, residuals, XtX_inv):
        arr.flags.writeable = False

    return LinearParams(
        coefficients=coefficients,
        residuals=residuals,
        fitted_values=fitted_values,
        rss=rss,
        tss=tss,
        rank=rank,
        df_residual=design.n - rank,
        XtX_inv=XtX_inv,
    )


def _tolerance_tier(backend_name: str, condition_estimate: float) -> str:
    """Name of the tolerance tier this fit's coefficients can be held to."""
    ill_conditioned = condition_estimate > ILL_CONDITIONED_THRESHOLD
    return select_tolerance(backend_name, is_ill_conditioned=ill_conditioned).name
