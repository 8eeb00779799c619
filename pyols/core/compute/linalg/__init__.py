"""
Linear algebra kernels for PyOLS.

All functions follow these conventions:
    - NumPy/SciPy (LAPACK under the hood)
    - Each decomposition returns a structured result dataclass
    - Rank deficiency raises SingularMatrixError immediately

Submodules:
    qr: QR decomposition, QR solve, normal equations
"""

from pyols.core.compute.linalg.qr import (
    QRResult,
    NormalEquationsResult,
    qr_cpu,
    qr_solve_cpu,
    qr_unscaled_covariance,
    normal_equations_cpu,
)

__all__ = [
    "QRResult",
    "NormalEquationsResult",
    "qr_cpu",
    "qr_solve_cpu",
    "qr_unscaled_covariance",
    "normal_equations_cpu",
]
