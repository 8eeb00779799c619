"""
Shared compute infrastructure for PyOLS.

This module provides timing utilities, tolerance tiers and linear algebra
kernels shared by the regression backends.

IMPORTANT: This is NOT where domain-specific backends live. Those go in
{domain}/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Execution timing utilities
    tolerances: Numerical tolerance tiers
    linalg: Linear algebra kernels (QR, normal equations)
"""

from pyols.core.compute.timing import Timer

__all__ = [
    "Timer",
]
