"""
Solver dispatch for linear systems.

This module provides the solve() function (public API) and backend selection.
"""

from dataclasses import replace
from typing import Literal
from numpy.typing import ArrayLike

from pylinsolve.core.exceptions import DimensionError, SingularMatrixError
from pylinsolve.core.result import Result
from pylinsolve.systems.design import SystemDesign
from pylinsolve.systems.solution import SystemParams, SystemSolution
from pylinsolve.systems.backends.cpu import (
    CPUGaussJordanBackend,
    CPULUBackend,
    CPUQRBackend,
    CPUSVDBackend,
)


# Type alias for method selection
MethodChoice = Literal['auto', 'gauss_jordan', 'lu', 'qr', 'svd']

_SQUARE_ONLY = ('gauss_jordan', 'lu', 'qr')


def solve(
    coefficients: ArrayLike,
    values: ArrayLike,
    *,
    method: MethodChoice = 'auto',
    refine: bool = False,
) -> SystemSolution:
    """
    Solve the linear system A·x = b.

    This is the primary public API. All input validation, method selection
    and result wrapping happens here.

    Args:
        coefficients: Coefficient matrix A (n x p). Any 2-D array-like.
        values: Right-hand side b, (n,) or (n, k) for k systems at once.
        method: Solver to use:
            - 'auto': LU for square systems, falling back to SVD when A
              turns out to be singular; SVD for rectangular systems
            - 'gauss_jordan': Gauss-Jordan elimination (square A)
            - 'lu': LU decomposition (square A)
            - 'qr': Householder QR decomposition (square A)
            - 'svd': Singular value decomposition (any A; least squares)
        refine: Apply one step of iterative refinement. LU only.

    Returns:
        SystemSolution with the solution, residuals and diagnostics

    Raises:
        ValidationError: If inputs are invalid
        DimensionError: If shapes are inconsistent, or a square-only method
            is requested for a rectangular A
        SingularMatrixError: If A is singular and the method cannot handle it
        ConvergenceError: If the SVD fails to converge
        ValueError: If method is unknown, or refine is requested for a
            method other than 'lu' or 'auto'

    Example:
        >>> from pylinsolve import solve
        >>> result = solve([[2, 3, 4], [3, 4, 5], [1, -2, 2]], [20, 26, 3])
        >>> result.solution
        array([1., 2., 3.])
    """
    if method not in ('auto',) + _SQUARE_ONLY + ('svd',):
        raise ValueError(f"Unknown method: {method!r}")
    if refine and method not in ('auto', 'lu'):
        raise ValueError(f"refine=True is only supported by the 'lu' method, not {method!r}")

    # === Construct Design ===
    # This is the boundary - validate here, trust everywhere else
    design = SystemDesign.from_arrays(coefficients, values)

    if method in _SQUARE_ONLY and not design.is_square:
        raise DimensionError(
            f"method {method!r} requires a square coefficient matrix, "
            f"got {design.n_rows}x{design.n_cols}; use 'svd' for least squares"
        )

    # === Solve ===
    if method == 'auto':
        result = _solve_auto(design, refine)
    else:
        result = _get_backend(method, refine).solve(design)

    # === Wrap and Return ===
    return SystemSolution(_result=result, _design=design)


def _solve_auto(design: SystemDesign, refine: bool) -> Result[SystemParams]:
    """LU for square systems with SVD as the fallback; SVD otherwise."""
    if not design.is_square:
        return CPUSVDBackend().solve(design)

    try:
        result = CPULUBackend(refine=refine).solve(design)
    except SingularMatrixError as e:
        reason = str(e)
    else:
        if not result.info['substituted_pivots']:
            return result
        reason = result.warnings[0]

    fallback = CPUSVDBackend().solve(design)
    info = dict(fallback.info)
    info['fallback_from'] = 'lu'
    return replace(
        fallback,
        info=info,
        warnings=(f"LU decomposition failed ({reason}); fell back to SVD",) + fallback.warnings,
    )


def _get_backend(choice: str, refine: bool = False):
    """
    Instantiate the backend for an explicit method choice.

    Raises:
        ValueError: If unknown method specified
    """
    if choice == 'gauss_jordan':
        return CPUGaussJordanBackend()
    elif choice == 'lu':
        return CPULUBackend(refine=refine)
    elif choice == 'qr':
        return CPUQRBackend()
    elif choice == 'svd':
        return CPUSVDBackend()
    else:
        raise ValueError(f"Unknown method: {choice!r}")
