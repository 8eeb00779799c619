"""
Regression solution types.

Contains the parameter payload, the coefficient summary types and the
user-facing solution wrapper.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TYPE_CHECKING
import math
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyols.core.result import Result
from pyols.regression._inference import FTest, LinearInference

if TYPE_CHECKING:
    from pyols.regression.design import Design


@dataclass(frozen=True)
class LinearParams:
    """
    Parameter payload for linear regression.

    This is the immutable data computed by backends.
    """
    coefficients: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    rss: float
    tss: float
    rank: int
    df_residual: int
    XtX_inv: NDArray[np.floating[Any]]


@dataclass(frozen=True)
class CoefficientSummary:
    """Inference for a single coefficient."""
    estimate: float
    std_error: float
    t_statistic: float
    p_value: float


@dataclass(frozen=True)
class LinearSummary:
    """
    Structured report of a linear fit.

    coefficients is a read-only mapping ordered 'intercept' first when
    present, then x1, x2, ...
    str() renders the report as a text table.
    """
    n_observations: int
    n_parameters: int
    degrees_of_freedom: int
    r_squared: float
    adjusted_r_squared: float
    f_test: FTest
    coefficients: Mapping[str, CoefficientSummary] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'coefficients', MappingProxyType(dict(self.coefficients)))

    def to_dict(self) -> dict[str, Any]:
        """Plain nested dict of the report."""
        return {
            'n_observations': self.n_observations,
            'n_parameters': self.n_parameters,
            'degrees_of_freedom': self.degrees_of_freedom,
            'r_squared': self.r_squared,
            'adjusted_r_squared': self.adjusted_r_squared,
            'f_statistic': self.f_test.f_statistic,
            'f_p_value': self.f_test.p_value,
            'coefficients': {
                label: {
                    'estimate': c.estimate,
                    'std_error': c.std_error,
                    't_statistic': c.t_statistic,
                    'p_value': c.p_value,
                }
                for label, c in self.coefficients.items()
            },
        }

    def __str__(self) -> str:
        f = self.f_test
        if f.is_defined:
            f_line = (
                f"F-statistic: {f.f_statistic:.4f} on {f.df_regression} and "
                f"{f.df_residual} DF, p-value: {f.p_value:.4g}"
            )
        else:
            f_line = "F-statistic: NA"

        lines = [
            "Linear Regression Results",
            "=" * 66,
            f"Observations: {self.n_observations}",
            f"Parameters: {self.n_parameters}",
            f"Degrees of freedom: {self.degrees_of_freedom}",
            f"R-squared: {_fmt(self.r_squared, '.6f')}",
            f"Adj. R-squared: {_fmt(self.adjusted_r_squared, '.6f')}",
            f_line,
            "",
            "Coefficients:",
            "-" * 66,
            f"{'':<12} {'Estimate':>14} {'Std.Error':>12} {'t value':>10} {'Pr(>|t|)':>12}",
            "-" * 66,
        ]
        for label, c in self.coefficients.items():
            lines.append(
                f"{label:<12} {c.estimate:14.6f} {c.std_error:12.6f} "
                f"{c.t_statistic:10.3f} {c.p_value:12.4g}"
            )
        lines.append("-" * 66)
        return "\n".join(lines)


@dataclass(frozen=True)
class LinearSolution:
    """
    User-facing regression results.

    Wraps the backend Result and the statistics derived from it. Every
    statistic is computed when the solution is built, so all accessors are
    plain lookups that cannot fail.
    """
    _result: Result[LinearParams]
    _design: 'Design'
    _inference: LinearInference

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def rss(self) -> float:
        return self._result.params.rss

    @property
    def tss(self) -> float:
        return self._result.params.tss

    @property
    def r_squared(self) -> float:
        """R², NaN when the response has zero total variance."""
        return self._inference.r_squared

    @property
    def adjusted_r_squared(self) -> float:
        """Adjusted R², NaN whenever R² is."""
        return self._inference.adjusted_r_squared

    @property
    def sigma_squared(self) -> float:
        """Residual variance RSS/(n - k)."""
        return self._inference.sigma_squared

    @property
    def residual_std_error(self) -> float:
        return math.sqrt(self._inference.sigma_squared)

    @property
    def sigma(self) -> float:
        """Alias of residual_std_error."""
        return self.residual_std_error

    @property
    def covariance(self) -> NDArray[np.floating[Any]]:
        """Coefficient covariance matrix σ² (X'X)⁻¹."""
        return self._inference.covariance

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        """
        Standard errors of coefficients.

        Computed as SE(β) = sqrt(diag(σ² (X'X)⁻¹))
        """
        return self._inference.standard_errors

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        """t-statistics for coefficients (0 where the standard error is 0)."""
        return self._inference.t_statistics

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """Two-sided p-values from the t distribution with n - k DF."""
        return self._inference.p_values

    @property
    def f_test(self) -> FTest:
        return self._inference.f_test

    @property
    def n(self) -> int:
        return self._design.n

    @property
    def k(self) -> int:
        return self._design.k

    @property
    def has_intercept(self) -> bool:
        return self._design.has_intercept

    @property
    def labels(self) -> tuple[str, ...]:
        return self._design.labels

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def predict(self, X: ArrayLike) -> NDArray[np.floating[Any]]:
        """
        Predict the response for new observations.

        Args:
            X: New predictor rows (m, p), without the intercept column.
               A 1-D input is a single observation.

        Returns:
            Predictions (m,)

        Raises:
            DimensionError: If a row does not have p values
        """
        X_new = self._design.augment(X)
        return X_new @ self.coefficients

    def summary(self) -> LinearSummary:
        """Structured report; print it for an R-style table."""
        coefficients = {
            label: CoefficientSummary(
                estimate=float(coef),
                std_error=float(se),
                t_statistic=float(t),
                p_value=float(pv),
            )
            for label, coef, se, t, pv in zip(
                self.labels,
                self.coefficients,
                self.standard_errors,
                self.t_statistics,
                self.p_values,
            )
        }
        return LinearSummary(
            n_observations=self.n,
            n_parameters=self.k,
            degrees_of_freedom=self.df_residual,
            r_squared=self.r_squared,
            adjusted_r_squared=self.adjusted_r_squared,
            f_test=self.f_test,
            coefficients=coefficients,
        )

    def __repr__(self) -> str:
        return (
            f"LinearSolution(n={self.n}, k={self.k}, "
            f"intercept={self.has_intercept}, "
            f"r_squared={_fmt(self.r_squared, '.4f')})"
        )


def _fmt(value: float, spec: str) -> str:
    return "NA" if math.isnan(value) else format(value, spec)
