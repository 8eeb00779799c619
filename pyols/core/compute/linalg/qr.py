"""
Least squares kernels.

Provides the two CPU solve paths used by the regression backends:

    QR:               X = QR, β = R⁻¹ Q'y, (X'X)⁻¹ = R⁻¹ R⁻ᵀ
    Normal equations: β = (X'X)⁻¹ X'y with an explicit inverse

Both detect rank deficiency before producing coefficients and raise
SingularMatrixError rather than returning a meaningless solution. Rank and
conditioning are judged on the column-equilibrated problem, so rescaling a
predictor (prices in cents, volumes in units of 1e12) never changes whether
a design is accepted.
"""

from dataclasses import dataclass
from typing import Literal, Any
import numpy as np
from numpy.typing import NDArray
from scipy import linalg as sla

from pyols.core.exceptions import SingularMatrixError
from pyols.core.compute.tolerances import SINGULAR_RCOND_THRESHOLD


@dataclass(frozen=True)
class QRResult:
    """
    Result of QR decomposition.

    Attributes:
        Q: Orthogonal matrix (n x k where k = min(n, p) for reduced mode)
        R: Upper triangular matrix (k x p)
        rank: Numerical rank determined from the scaled R diagonal
        scaled_diagonal: |R_ii| / ||X_i||, the R diagonal of X with unit-norm
            columns (zero for an all-zero column)
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    rank: int
    scaled_diagonal: NDArray[np.floating[Any]]

    @property
    def condition_estimate(self) -> float:
        """Ratio of largest to smallest scaled |R_ii|, a cheap estimate of cond(X)."""
        diag = self.scaled_diagonal
        if len(diag) == 0 or diag.min() == 0:
            return float('inf')
        return float(diag.max() / diag.min())


@dataclass(frozen=True)
class NormalEquationsResult:
    """
    Result of solving the normal equations.

    Attributes:
        coefficients: β (p,)
        XtX_inv: (X'X)⁻¹ (p x p)
        condition_number: 2-norm condition number of the equilibrated X'X
    """
    coefficients: NDArray[np.floating[Any]]
    XtX_inv: NDArray[np.floating[Any]]
    condition_number: float


def qr_cpu(
    X: NDArray[np.floating[Any]],
    mode: Literal['reduced', 'complete'] = 'reduced'
) -> QRResult:
    """
    QR decomposition using LAPACK (via NumPy).

    Computes X = QR where Q is orthogonal and R is upper triangular.

    Scaling column j of X by 1/||X_j|| scales column j of R by the same
    factor, so the diagonal of the equilibrated problem comes from the one
    factorization without a second QR.

    Args:
        X: Matrix to decompose (n x p)
        mode: 'reduced' for economy QR (Q is n x k, R is k x p where k = min(n,p))
              'complete' for full QR (Q is n x n, R is n x p)

    Returns:
        QRResult with Q, R, and numerical rank
    """
    Q, R = np.linalg.qr(X, mode=mode)

    k = min(R.shape)
    col_norms = np.linalg.norm(X, axis=0)[:k]
    diag_R = np.abs(np.diag(R))
    scaled = np.divide(
        diag_R,
        col_norms,
        out=np.zeros(k, dtype=np.float64),
        where=col_norms > 0,
    )

    if k > 0 and scaled.max() > 0:
        # Floor at the singular rcond threshold so a constant column in a
        # handful of rows counts as rank loss despite rounding in R
        rel_tol = max(max(X.shape) * np.finfo(X.dtype).eps, SINGULAR_RCOND_THRESHOLD)
        rank = int(np.sum(scaled > rel_tol * scaled.max()))
    else:
        rank = 0

    return QRResult(Q=Q, R=R, rank=rank, scaled_diagonal=scaled)


def qr_solve_cpu(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    check_rank: bool,
    qr_result: QRResult | None = None,
) -> NDArray[np.floating[Any]]:
    """
    Solve least squares via QR decomposition (CPU).

    Solves: min_β ||y - Xβ||² via QR decomposition of X.

    The solution is computed as:
        X = QR
        β = R⁻¹ Q'y

    Args:
        X: Design matrix (n x p), must have n >= p
        y: Response vector (n,)
        check_rank: If True, raise SingularMatrixError on rank-deficient X
        qr_result: A decomposition of X already computed by the caller

    Returns:
        Coefficient vector β (p,)

    Raises:
        SingularMatrixError: If X is rank-deficient and check_rank=True
    """
    n, p = X.shape
    if qr_result is None:
        qr_result = qr_cpu(X, mode='reduced')

    if check_rank and qr_result.rank < p:
        raise SingularMatrixError(
            f"Design matrix is rank-deficient: rank={qr_result.rank}, expected={p}. "
            f"X'X is singular, which indicates perfect multicollinearity.",
            matrix_name='X',
            condition_number=qr_result.condition_estimate,
            rank=qr_result.rank,
            expected_rank=p
        )

    # β = R⁻¹ Q'y
    Qty = qr_result.Q.T @ y

    # R is p x p upper triangular (for reduced QR with n >= p)
    beta = sla.solve_triangular(qr_result.R[:p, :p], Qty[:p], lower=False)

    return beta


def qr_unscaled_covariance(R: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """
    Compute (X'X)⁻¹ from the R factor of X.

    Since X'X = R'R, (X'X)⁻¹ = R⁻¹ R⁻ᵀ. Only the triangular inverse is
    needed, so X'X itself is never formed.

    Args:
        R: Upper triangular factor (p x p), full rank

    Returns:
        Symmetric (p x p) matrix (X'X)⁻¹
    """
    p = R.shape[1]
    R_inv = sla.solve_triangular(R[:p, :p], np.eye(p), lower=False)
    return R_inv @ R_inv.T


def normal_equations_cpu(
    XtX: NDArray[np.floating[Any]],
    Xty: NDArray[np.floating[Any]],
) -> NormalEquationsResult:
    """
    Solve least squares from the normal equations X'X β = X'y.

    X'X is equilibrated to unit diagonal, S = D⁻¹ X'X D⁻¹ with
    D = diag(sqrt(X'X_ii)), before the singularity check and the inverse:

        (X'X)⁻¹ = D⁻¹ S⁻¹ D⁻¹,   β = (X'X)⁻¹ X'y

    Args:
        XtX: Cross-product matrix X'X (p x p)
        Xty: Cross-product vector X'y (p,)

    Returns:
        NormalEquationsResult with β, (X'X)⁻¹ and cond(S)

    Raises:
        SingularMatrixError: If X'X is singular or too ill-conditioned to invert
    """
    p = XtX.shape[0]
    scale = np.sqrt(np.diag(XtX))
    if np.any(scale == 0):
        raise SingularMatrixError(
            f"X'X is singular: design has an all-zero column "
            f"(rank < {p}). This indicates perfect multicollinearity.",
            matrix_name="X'X",
            condition_number=float('inf'),
            rank=int(np.sum(scale > 0)),
            expected_rank=p,
        )
    S = XtX / np.outer(scale, scale)

    with np.errstate(divide='ignore', invalid='ignore'):
        condition_number = float(np.linalg.cond(S))
    if not np.isfinite(condition_number) or 1.0 / condition_number < SINGULAR_RCOND_THRESHOLD:
        rank = int(np.linalg.matrix_rank(S, hermitian=True))
        raise SingularMatrixError(
            f"X'X is singular: condition number {condition_number:.3g}, "
            f"rank(X'X)={rank}, expected={p}. "
            f"This indicates perfect multicollinearity.",
            matrix_name="X'X",
            condition_number=condition_number,
            rank=rank,
            expected_rank=p,
        )

    try:
        S_inv = sla.inv(S)
    except sla.LinAlgError as e:
        raise SingularMatrixError(
            f"X'X could not be inverted: {e}",
            matrix_name="X'X",
            condition_number=condition_number,
            expected_rank=p,
        ) from e

    XtX_inv = S_inv / np.outer(scale, scale)
    # Enforce exact symmetry lost to rounding in the inverse
    XtX_inv = (XtX_inv + XtX_inv.T) / 2.0

    return NormalEquationsResult(
        coefficients=XtX_inv @ Xty,
        XtX_inv=XtX_inv,
        condition_number=condition_number,
    )
