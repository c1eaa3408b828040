"""
QR decomposition by Householder reflections, with rank-one updates.

Factors a square matrix A into an orthogonal matrix Q and an upper
triangular matrix R with A = Q·R. Since Q is orthogonal, A·x = b becomes
R·x = Qᵗ·b, which is solved by back substitution. Qᵗ is stored explicitly
rather than Q because that is the form both solve() and update() consume.

Each reflection is applied to a column that has first been scaled by its
largest magnitude, so squaring the entries cannot overflow or underflow.

The main advantage over LU is update(): if A changes by a tensor product
u⊗v, the decomposition of A + u⊗v is obtained in O(n²) with 2(n-1) Jacobi
rotations rather than the O(n³) of a fresh decomposition. This is useful
for quasi-Newton methods and for solving sequences of slightly different
systems.

References:
    Press, W. H. et al. Numerical Recipes in C (2nd ed.), Sections 2.10
    and 11.1 (rotations).
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinsolve.core.compute.linalg import backsubstitute, pre_jacobi_rotation, with_sign
from pylinsolve.core.exceptions import SingularMatrixError, DimensionError
from pylinsolve.core.matrix import Matrix
from pylinsolve.core.vector import Vector
from pylinsolve.core.validation import (
    check_array,
    check_1d,
    check_matrix,
    check_not_empty,
    check_same_height,
    check_square,
)
from pylinsolve.decomposition._common import DecompositionState, require_initialized


class QRDecomposition:
    """
    QR decomposition solver.

    The matrix is decomposed as soon as it is supplied. A singular matrix
    raises SingularMatrixError and leaves the object uninitialized.

    Example:
        >>> qr = QRDecomposition(A)
        >>> x = qr.solve(b)
        >>> qr.update(u, v)          # now decomposes A + u⊗v
        >>> x2 = qr.solve(b)
    """

    def __init__(self, coefficients: Matrix | None = None):
        self._qt: NDArray[np.float64] | None = None
        self._r: NDArray[np.float64] | None = None
        self._state = DecompositionState.UNINITIALIZED
        if coefficients is not None:
            self.initialize(coefficients)

    @property
    def state(self) -> DecompositionState:
        return self._state

    def initialize(self, coefficients: Matrix) -> None:
        """
        Decompose a square, non-empty matrix.

        Raises:
            ValidationError: If the matrix is missing, empty or not square
            SingularMatrixError: If a column is zero below the diagonal
                during the reduction, or the last diagonal entry of R is zero
        """
        check_matrix(coefficients, 'coefficients')
        check_square(coefficients, 'coefficients')
        check_not_empty(coefficients, 'coefficients')

        # Drop any previous decomposition first so a failure leaves
        # nothing stale behind
        self._qt = None
        self._r = None
        self._state = DecompositionState.UNINITIALIZED

        r = coefficients.to_array()
        n = r.shape[0]
        c = np.zeros(n)
        d = np.zeros(n)

        for k in range(n - 1):
            scale = np.max(np.abs(r[k:, k]))
            if scale == 0:
                raise SingularMatrixError(
                    f"The coefficient matrix is singular (column {k} is zero "
                    f"on and below the diagonal).",
                    matrix_name='coefficients',
                    pivot_index=k,
                    expected_rank=n,
                )

            # Form the Householder vector u in r[k:, k], with Qk = 1 - u⊗u/c[k]
            r[k:, k] /= scale
            sigma = with_sign(np.sqrt(r[k:, k] @ r[k:, k]), r[k, k])
            r[k, k] += sigma
            c[k] = sigma * r[k, k]
            d[k] = -scale * sigma

            # Apply Qk to the remaining columns
            tau = (r[k:, k] @ r[k:, k + 1:]) / c[k]
            r[k:, k + 1:] -= np.outer(r[k:, k], tau)

        d[n - 1] = r[n - 1, n - 1]
        if d[n - 1] == 0:
            raise SingularMatrixError(
                "The coefficient matrix is singular (last diagonal entry of R is zero).",
                matrix_name='coefficients',
                pivot_index=n - 1,
                expected_rank=n,
            )

        # Qᵗ = Q(n-2)···Q(0), accumulated by applying each reflection to I
        qt = np.eye(n)
        for k in range(n - 1):
            tau = (r[k:, k] @ qt[k:, :]) / c[k]
            qt[k:, :] -= np.outer(r[k:, k], tau)

        # The Householder vectors below the diagonal are no longer needed
        r = np.triu(r, 1)
        r[np.diag_indices(n)] = d

        self._qt = qt
        self._r = r
        self._state = DecompositionState.DECOMPOSED

    def solve(self, values: Matrix, try_in_place: bool = False) -> Matrix:
        """
        Solve A·X = values.

        A new matrix is always returned; try_in_place is accepted for
        compatibility with the other solvers.

        Raises:
            DimensionError: If values has the wrong height
        """
        require_initialized(self._state, type(self).__name__)
        check_matrix(values, 'values')
        check_same_height(values, self._r.shape[0], 'values')

        solution = self._qt @ values.array
        backsubstitute(self._r, solution)
        return Matrix._wrap(solution)

    def get_inverse(self) -> Matrix:
        """Return the inverse of the coefficient matrix."""
        require_initialized(self._state, type(self).__name__)
        # A⁻¹ = R⁻¹·Qᵗ
        inverse = self._qt.copy()
        backsubstitute(self._r, inverse)
        return Matrix._wrap(inverse)

    def get_decomposition(self) -> tuple[Matrix, Matrix]:
        """Return copies of Qᵗ and R."""
        require_initialized(self._state, type(self).__name__)
        return Matrix._wrap(self._qt.copy()), Matrix._wrap(self._r.copy())

    def update(self, u: Vector | ArrayLike, v: Vector | ArrayLike) -> None:
        """
        Update the decomposition of A into that of A + u⊗v.

        The rotations are computed on private copies of Qᵗ and R, which
        replace the current decomposition only if the updated R has no zero
        on its diagonal.

        Args:
            u: Column vector of length n
            v: Row vector of length n

        Raises:
            DimensionError: If u or v has the wrong length
            SingularMatrixError: If A + u⊗v is singular. The existing
                decomposition is left unchanged.
        """
        require_initialized(self._state, type(self).__name__)
        n = self._r.shape[0]
        u_arr = _as_update_vector(u, n, 'u')
        v_arr = _as_update_vector(v, n, 'v')

        qt = self._qt.copy()
        r = self._r.copy()

        # A + u⊗v = Q·(R + (Qᵗ·u)⊗v), so work with w = Qᵗ·u
        w = qt @ u_arr

        nonzero = np.flatnonzero(w)
        k = int(nonzero[-1]) if nonzero.size else 0

        # Rotate w into a multiple of the first unit vector. R turns into
        # upper Hessenberg form along the way.
        for i in range(k - 1, -1, -1):
            _rotate(qt, r, i, w[i], -w[i + 1])
            w[i] = np.hypot(w[i], w[i + 1])
        r[0] += w[0] * v_arr

        # Restore R to upper triangular form
        for i in range(k):
            _rotate(qt, r, i, r[i, i], -r[i + 1, i])

        zeros = np.flatnonzero(np.diagonal(r) == 0)
        if zeros.size:
            raise SingularMatrixError(
                "The updated matrix is singular.",
                matrix_name='coefficients',
                pivot_index=int(zeros[0]),
                expected_rank=n,
            )

        self._qt = qt
        self._r = np.triu(r)


def _rotate(
    qt: NDArray[np.float64],
    r: NDArray[np.float64],
    i: int,
    a: float,
    b: float,
) -> None:
    """Apply the Jacobi rotation that zeroes b against a to rows i, i+1."""
    if a == 0:
        cos = 0.0
        sin = -1.0 if b < 0 else 1.0
    elif abs(a) > abs(b):
        factor = b / a
        cos = with_sign(1.0 / np.sqrt(1.0 + factor * factor), a)
        sin = factor * cos
    else:
        factor = a / b
        sin = with_sign(1.0 / np.sqrt(1.0 + factor * factor), b)
        cos = factor * sin

    # R is upper Hessenberg, so columns before i are already zero in both rows
    pre_jacobi_rotation(r, i, cos, sin, start=i)
    pre_jacobi_rotation(qt, i, cos, sin)


def _as_update_vector(values: Vector | ArrayLike, size: int, name: str) -> NDArray[np.float64]:
    """Copy an update vector into a fresh 1-D array of the given length."""
    if isinstance(values, Vector):
        arr = values.to_array()
    else:
        arr = np.array(check_array(values, name), dtype=np.float64, copy=True)
        check_1d(arr, name)
    if arr.shape[0] != size:
        raise DimensionError(
            f"{name}: expected length {size} to match the decomposed matrix, "
            f"got {arr.shape[0]}"
        )
    return arr
