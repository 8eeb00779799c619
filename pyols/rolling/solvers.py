"""
Solver dispatch for rolling regression.

Public API:
    rolling_fit(): fit OLS on every window of a series
"""

from __future__ import annotations

import warnings
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from numpy.typing import ArrayLike, NDArray

from pyols.core.exceptions import PyOLSError
from pyols.core.result import Result
from pyols.core.compute.timing import Timer
from pyols.core.validation import check_positive_integer
from pyols.regression.solvers import BackendChoice, fit, _get_backend
from pyols.rolling.design import RollingDesign
from pyols.rolling.solution import RollingParams, RollingSolution, WindowResult


def rolling_fit(
    y: ArrayLike,
    X: ArrayLike,
    window: int,
    *,
    intercept: bool = True,
    backend: BackendChoice = 'auto',
    n_jobs: int = 1,
) -> RollingSolution:
    """
    Fit OLS over every contiguous window of a series.

    For each start index i = 0 .. n - window, fits y[i:i+window] on
    X[i:i+window]. Consecutive windows share window - 1 observations, so
    coefficients evolve smoothly along the series.

    A window whose fit raises a PyOLSError (most often SingularMatrixError
    when a short window has no variation in some predictor) is recorded as
    a failed WindowResult and the scan continues. Other exceptions
    propagate.

    Args:
        y: Response series (n,).
        X: Predictor series (n, p) or (n,) for a single predictor.
        window: Observations per window, 2 <= window <= n.
        intercept: Fit an intercept in every window (default True).
        backend: Backend used for each window fit (see regression.fit).
        n_jobs: Worker threads. Windows are independent; results are
            returned in window order whatever the completion order.

    Returns:
        RollingSolution with n - window + 1 window results

    Raises:
        WindowTooSmallError: If window < 2
        InsufficientDataError: If n < window
        DimensionError: If X and y disagree on n, or rows of X are ragged
        ValidationError: If window or n_jobs is not a valid integer
        ValueError: If the backend name is unknown

    Example:
        >>> from pyols.rolling import rolling_fit
        >>> result = rolling_fit(returns, market, window=60)
        >>> beta = result.coefficient_series(1)
    """
    backend_name = _get_backend(backend).name
    design = RollingDesign.build(y, X, window, intercept=intercept)
    n_jobs = check_positive_integer(n_jobs, 'n_jobs')

    timer = Timer()
    timer.start()

    def fit_window(item: tuple[int, int, NDArray, NDArray]) -> WindowResult:
        start, end, y_window, X_window = item
        try:
            solution = fit(
                y_window,
                X_window,
                intercept=design.has_intercept,
                backend=backend,
            )
        except PyOLSError as e:
            return WindowResult(start=start, end=end, error=e)
        return WindowResult(start=start, end=end, solution=solution)

    with timer.section('scan'):
        if n_jobs > 1 and design.n_windows > 1:
            with ThreadPoolExecutor(max_workers=n_jobs) as ex:
                # map() yields in submission order
                windows = tuple(ex.map(fit_window, design.windows()))
        else:
            windows = tuple(fit_window(item) for item in design.windows())

    timer.stop()

    failures = Counter(w.error_type for w in windows if not w.ok)
    n_failed = sum(failures.values())

    result_warnings: list[str] = []
    if n_failed:
        breakdown = ", ".join(f"{name}={count}" for name, count in sorted(failures.items()))
        result_warnings.append(
            f"{n_failed} of {len(windows)} windows failed ({breakdown})"
        )
    if n_failed == len(windows):
        warnings.warn(
            f"Rolling regression failed in every window "
            f"(window={design.window}, n={design.n}): {windows[0].reason}",
            RuntimeWarning,
            stacklevel=2,
        )

    info: dict[str, Any] = {
        'method': 'rolling',
        'window': design.window,
        'n_windows': len(windows),
        'n_failed': n_failed,
        'failures': dict(failures),
        'n_jobs': n_jobs,
    }

    result = Result(
        params=RollingParams(windows=windows),
        info=info,
        timing=timer.result(),
        backend_name=backend_name,
        warnings=tuple(result_warnings),
    )
    return RollingSolution(_result=result, _design=design)
