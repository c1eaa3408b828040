"""
Linear algebra kernels for pylinsolve.

Low-level in-place operations on float64 ndarrays used by every
decomposition:
    - back-substitution against an upper-triangular matrix
    - Jacobi (Givens) rotations of row and column pairs
    - sign transfer with zero treated as positive

These are deliberately small and free of validation. Callers are the
decomposition classes, which validate at their own boundary.
"""

from pylinsolve.core.compute.linalg._kernels import (
    backsubstitute,
    post_jacobi_rotation,
    pre_jacobi_rotation,
    with_sign,
)

__all__ = [
    "backsubstitute",
    "post_jacobi_rotation",
    "pre_jacobi_rotation",
    "with_sign",
]
