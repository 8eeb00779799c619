"""
Regression backends.

Available backends:
    CPUQRBackend: CPU reference implementation using QR decomposition
    CPUNormalEquationsBackend: CPU explicit (X'X)⁻¹ X'y
"""

from pyols.regression.backends.cpu import CPUQRBackend, CPUNormalEquationsBackend

__all__ = [
    "CPUQRBackend",
    "CPUNormalEquationsBackend",
]
