"""
Statistical inference for a fitted linear model.

Everything here is derived once from the backend's LinearParams:

    R² = 1 - RSS/TSS               adj. R² = 1 - (1 - R²)(n - 1)/(n - k)
    σ² = RSS/(n - k)               Var(β) = σ² (X'X)⁻¹
    t_j = β_j / SE_j               p_j = 2 P(T > |t_j|),  T ~ t(n - k)
    F = (SSR/df_reg)/(RSS/df_res)  p = P(F' > F),  F' ~ F(df_reg, df_res)

Undefined quantities (R² with a constant response, the F-test with no
slope terms or a perfect fit, up to rounding) are NaN.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import math
import numpy as np
from numpy.typing import NDArray
from scipy import stats

if TYPE_CHECKING:
    from pyols.regression.design import Design
    from pyols.regression.solution import LinearParams


@dataclass(frozen=True)
class FTest:
    """
    Overall F-test that all non-intercept coefficients are zero.

    f_statistic and p_value are NaN when the test is undefined: no slope
    terms (df_regression <= 0), no residual degrees of freedom, or a
    perfect fit (RSS at the rounding level of y'y).
    """
    f_statistic: float
    p_value: float
    df_regression: int
    df_residual: int

    @property
    def is_defined(self) -> bool:
        return not math.isnan(self.f_statistic)


@dataclass(frozen=True)
class LinearInference:
    """Derived statistics for a linear fit. Arrays are read-only."""
    r_squared: float
    adjusted_r_squared: float
    sigma_squared: float
    covariance: NDArray[np.floating[Any]]
    standard_errors: NDArray[np.floating[Any]]
    t_statistics: NDArray[np.floating[Any]]
    p_values: NDArray[np.floating[Any]]
    f_test: FTest


def infer(params: LinearParams, design: Design) -> tuple[LinearInference, tuple[str, ...]]:
    """
    Derive every inference statistic from a solved model.

    Args:
        params: Backend output (coefficients, residuals, RSS, TSS, (X'X)⁻¹)
        design: The design the params were solved from

    Returns:
        (LinearInference, warnings) where warnings describes any statistic
        that came out undefined
    """
    warnings: list[str] = []
    k = design.k
    df = params.df_residual

    r_squared, adjusted_r_squared = _r_squared(params.rss, params.tss, design.y, df)
    if math.isnan(r_squared):
        warnings.append(
            "r_squared undefined: response has zero total variance"
        )

    sigma_squared = params.rss / df
    covariance = sigma_squared * params.XtX_inv

    # Rounding in the inverse can leave tiny negative diagonals on
    # near-perfect fits; variances are non-negative.
    standard_errors = np.sqrt(np.clip(np.diag(covariance), 0.0, None))
    t_statistics = np.divide(
        params.coefficients,
        standard_errors,
        out=np.zeros(k, dtype=np.float64),
        where=standard_errors != 0,
    )
    p_values = 2.0 * stats.t.sf(np.abs(t_statistics), df)

    f_test = _f_test(params, design)
    if not f_test.is_defined:
        warnings.append(
            f"f_test undefined: df_regression={f_test.df_regression}, "
            f"df_residual={f_test.df_residual}, rss={params.rss:.6g}"
        )

    inference = LinearInference(
        r_squared=r_squared,
        adjusted_r_squared=adjusted_r_squared,
        sigma_squared=float(sigma_squared),
        covariance=_read_only(covariance),
        standard_errors=_read_only(standard_errors),
        t_statistics=_read_only(t_statistics),
        p_values=_read_only(np.asarray(p_values, dtype=np.float64)),
        f_test=f_test,
    )
    return inference, tuple(warnings)


def _r_squared(
    rss: float,
    tss: float,
    y: NDArray[np.floating[Any]],
    df: int,
) -> tuple[float, float]:
    # Constancy is decided on y itself; the mean of a constant series is
    # not always representable, leaving a rounding-level TSS
    if np.ptp(y) == 0:
        return math.nan, math.nan
    n = len(y)
    r_squared = 1.0 - rss / tss
    adjusted = 1.0 - (1.0 - r_squared) * (n - 1) / df
    return float(r_squared), float(adjusted)


def _f_test(params: LinearParams, design: Design) -> FTest:
    df_regression = design.k - int(design.has_intercept)
    df_residual = design.n - design.k

    if df_regression <= 0 or df_residual <= 0 or _is_perfect_fit(params.rss, design.y):
        return FTest(
            f_statistic=math.nan,
            p_value=math.nan,
            df_regression=df_regression,
            df_residual=df_residual,
        )

    fitted = params.fitted_values
    if design.has_intercept:
        ssr = float(np.sum((fitted - np.mean(design.y)) ** 2))
    else:
        # Without an intercept the null model is y = 0
        ssr = float(fitted @ fitted)

    f_statistic = (ssr / df_regression) / (params.rss / df_residual)
    p_value = float(stats.f.sf(f_statistic, df_regression, df_residual))

    return FTest(
        f_statistic=float(f_statistic),
        p_value=p_value,
        df_regression=df_regression,
        df_residual=df_residual,
    )


def _is_perfect_fit(rss: float, y: NDArray[np.floating[Any]]) -> bool:
    """RSS at the rounding level of y'y, i.e. an exact fit in float64."""
    return rss <= len(y) * np.finfo(np.float64).eps * float(y @ y)


def _read_only(arr: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    arr = np.array(arr, dtype=np.float64)
    arr.flags.writeable = False
    return arr
