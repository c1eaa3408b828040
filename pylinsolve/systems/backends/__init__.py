"""
Linear system backends.

Available backends:
    CPUGaussJordanBackend: Gauss-Jordan elimination with full pivoting
    CPULUBackend: LU decomposition, optional iterative refinement
    CPUQRBackend: Householder QR decomposition
    CPUSVDBackend: Singular value decomposition (any shape, any rank)
"""

from pylinsolve.systems.backends.cpu import (
    CPUGaussJordanBackend,
    CPULUBackend,
    CPUQRBackend,
    CPUSVDBackend,
)

__all__ = [
    "CPUGaussJordanBackend",
    "CPULUBackend",
    "CPUQRBackend",
    "CPUSVDBackend",
]
