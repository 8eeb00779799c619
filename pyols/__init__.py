"""
PyOLS: ordinary and rolling least squares for Python.

Linear regression with full classical inference (standard errors,
t-statistics, p-values, F-test) and a sliding-window variant that survives
degenerate windows without aborting the scan.

Submodules:
    regression: Single OLS fit over a dataset
    rolling: OLS over every window of a series
"""

__version__ = "0.1.0"

from pyols import regression
from pyols import rolling
from pyols.regression import fit
from pyols.rolling import rolling_fit

__all__ = [
    "__version__",
    "regression",
    "rolling",
    "fit",
    "rolling_fit",
]
