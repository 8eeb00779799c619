"""
Rolling regression solution types.

Each window position produces a WindowResult holding either a fitted
LinearSolution or the error that prevented the fit. RollingSolution exposes
per-coefficient time series as masked arrays: failed windows are masked,
while statistics that are merely undefined in a successful window (R² of a
constant response) are unmasked NaN.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, TYPE_CHECKING
import numbers
import numpy as np
from numpy.typing import NDArray

from pyols.core.exceptions import PyOLSError
from pyols.core.result import Result
from pyols.regression.solution import LinearSolution

if TYPE_CHECKING:
    import pandas as pd
    from pyols.rolling.design import RollingDesign


@dataclass(frozen=True)
class WindowResult:
    """
    Outcome of the fit over observations start..end (inclusive).

    Exactly one of solution and error is set.
    """
    start: int
    end: int
    solution: LinearSolution | None = None
    error: PyOLSError | None = None

    @property
    def ok(self) -> bool:
        return self.solution is not None

    @property
    def reason(self) -> str | None:
        """Failure message, or None for a successful window."""
        if self.error is None:
            return None
        return str(self.error)

    @property
    def error_type(self) -> str | None:
        if self.error is None:
            return None
        return type(self.error).__name__


@dataclass(frozen=True)
class RollingParams:
    """Parameter payload for a rolling scan: one result per window, in order."""
    windows: tuple[WindowResult, ...]


@dataclass(frozen=True)
class RollingSummary:
    """Configuration and outcome of a rolling scan."""
    window_size: int
    n_windows: int
    n_failed: int
    has_intercept: bool
    n_observations: int
    results: tuple[WindowResult, ...] = field(default_factory=tuple, repr=False)

    def __str__(self) -> str:
        lines = [
            "Rolling Regression Results",
            "=" * 60,
            f"Observations: {self.n_observations}",
            f"Window size: {self.window_size}",
            f"Intercept: {'yes' if self.has_intercept else 'no'}",
            f"Windows: {self.n_windows} ({self.n_failed} failed)",
        ]
        failed = [w for w in self.results if not w.ok]
        if failed:
            lines.append("")
            lines.append("Failed windows:")
            lines.append("-" * 60)
            for w in failed[:10]:
                lines.append(f"  [{w.start}, {w.end}] {w.error_type}: {w.reason}")
            if len(failed) > 10:
                lines.append(f"  ... and {len(failed) - 10} more")
        return "\n".join(lines)


@dataclass(frozen=True)
class RollingSolution:
    """
    User-facing rolling regression results.

    All series are views derived from the ordered window results; nothing
    is refitted.
    """
    _result: Result[RollingParams]
    _design: 'RollingDesign'

    # === Window results ===

    @property
    def results(self) -> tuple[WindowResult, ...]:
        """One WindowResult per window position, ordered by start index."""
        return self._result.params.windows

    @property
    def failed(self) -> NDArray[np.bool_]:
        """True at windows whose fit failed."""
        return np.array([not w.ok for w in self.results], dtype=bool)

    @property
    def n_failed(self) -> int:
        return int(self.failed.sum())

    @property
    def start_indices(self) -> NDArray[np.int64]:
        return np.array([w.start for w in self.results], dtype=np.int64)

    @property
    def end_indices(self) -> NDArray[np.int64]:
        return np.array([w.end for w in self.results], dtype=np.int64)

    # === Configuration ===

    @property
    def window(self) -> int:
        return self._design.window

    @property
    def n(self) -> int:
        return self._design.n

    @property
    def k(self) -> int:
        return self._design.k

    @property
    def n_windows(self) -> int:
        return len(self.results)

    @property
    def has_intercept(self) -> bool:
        return self._design.has_intercept

    @property
    def labels(self) -> tuple[str, ...]:
        return self._design.labels

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

    # === Series ===

    @property
    def coefficients(self) -> np.ma.MaskedArray:
        """Coefficients of every window, (n_windows, k); failed rows masked."""
        values = np.full((self.n_windows, self.k), np.nan, dtype=np.float64)
        mask = np.zeros_like(values, dtype=bool)
        for i, w in enumerate(self.results):
            if w.ok:
                values[i] = w.solution.coefficients
            else:
                mask[i] = True
        return np.ma.MaskedArray(values, mask=mask)

    def coefficient_series(self, index: int = 0) -> np.ma.MaskedArray:
        """Coefficient ``index`` (0 = intercept when present) across windows."""
        self._check_index(index)
        return self._series(lambda s: s.coefficients[index])

    def standard_error_series(self, index: int = 0) -> np.ma.MaskedArray:
        self._check_index(index)
        return self._series(lambda s: s.standard_errors[index])

    def t_statistic_series(self, index: int = 0) -> np.ma.MaskedArray:
        self._check_index(index)
        return self._series(lambda s: s.t_statistics[index])

    def p_value_series(self, index: int = 0) -> np.ma.MaskedArray:
        self._check_index(index)
        return self._series(lambda s: s.p_values[index])

    def r_squared_series(self) -> np.ma.MaskedArray:
        return self._series(lambda s: s.r_squared)

    def adjusted_r_squared_series(self) -> np.ma.MaskedArray:
        return self._series(lambda s: s.adjusted_r_squared)

    def summary(self) -> RollingSummary:
        return RollingSummary(
            window_size=self.window,
            n_windows=self.n_windows,
            n_failed=self.n_failed,
            has_intercept=self.has_intercept,
            n_observations=self.n,
            results=self.results,
        )

    def to_frame(self) -> 'pd.DataFrame':
        """
        Coefficients and R² as a DataFrame indexed by window end index.

        Failed windows are NaN rows. Requires pandas.
        """
        try:
            import pandas as pd
        except ImportError:
            raise ImportError(
                "pandas is required for RollingSolution.to_frame(). "
                "Install with: pip install pyols[pandas]"
            )

        frame = pd.DataFrame(
            self.coefficients.filled(np.nan),
            columns=list(self.labels),
            index=pd.Index(self.end_indices, name='end_index'),
        )
        frame['r_squared'] = self.r_squared_series().filled(np.nan)
        frame['failed'] = self.failed
        return frame

    def __repr__(self) -> str:
        return (
            f"RollingSolution(n={self.n}, window={self.window}, "
            f"n_windows={self.n_windows}, n_failed={self.n_failed})"
        )

    def _series(self, getter: Callable[[LinearSolution], float]) -> np.ma.MaskedArray:
        values = np.full(self.n_windows, np.nan, dtype=np.float64)
        mask = np.zeros(self.n_windows, dtype=bool)
        for i, w in enumerate(self.results):
            if w.ok:
                values[i] = getter(w.solution)
            else:
                mask[i] = True
        return np.ma.MaskedArray(values, mask=mask)

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, numbers.Integral):
            raise TypeError(
                f"index: expected an integer, got {type(index).__name__}"
            )
        if not 0 <= index < self.k:
            raise IndexError(
                f"index: coefficient index {index} out of range for "
                f"{self.k} coefficients {self.labels}"
            )
