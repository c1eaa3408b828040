"""
LU decomposition with scaled partial pivoting.

Factors a square matrix A into lower and upper triangular matrices L and U
with A = L·U (up to a row permutation), using Crout's ordering so the
factorization is computed in place. Both factors are packed into a single
matrix: U occupies the diagonal and everything above it, the multipliers of
L occupy everything below it, and L's unit diagonal is implicit.

Once decomposed, any number of right-hand sides can be solved with a
forward substitution (L·y = b) followed by a back substitution (U·x = y).
The determinant is the product of U's diagonal, sign-adjusted for the
number of row swaps.

Pivoting is partial (rows only) and scaled: when searching a column for a
pivot, each row is weighted by the reciprocal of its largest coefficient so
that equations that happen to be written with larger numbers are not
favoured. The result is the decomposition of a row permutation of A, so the
permutation is recorded and replayed during solve().

When several rows tie for the best scaled pivot, the first of them (lowest
index) is taken. Numerical Recipes keeps the last, so on tied rows the
pivot order and the columns reported in substituted_pivots can differ
from that reference, while the solution does not.

Zero pivots: if the best available pivot is exactly zero the matrix is
singular in exact arithmetic, but it may also be an invertible matrix that
round-off drove to zero. Following Numerical Recipes, the pivot is replaced
by LU_PIVOT_SENTINEL (1e-40) rather than failing. The answer for a truly
singular system is then inaccurate rather than an exception; a
RuntimeWarning is emitted and the column is listed in substituted_pivots so
callers can decide for themselves. A row of all zeros, on the other hand,
is detected up front and raises SingularMatrixError.

References:
    Press, W. H. et al. Numerical Recipes in C (2nd ed.), Section 2.3.
"""

from __future__ import annotations

import warnings
import numpy as np
from numpy.typing import NDArray

from pylinsolve.core.compute.linalg import backsubstitute
from pylinsolve.core.compute.tolerances import LU_PIVOT_SENTINEL
from pylinsolve.core.exceptions import SingularMatrixError
from pylinsolve.core.matrix import Matrix
from pylinsolve.core.validation import (
    check_matrix,
    check_square,
    check_same_height,
    check_same_shape,
)
from pylinsolve.decomposition._common import DecompositionState, require_initialized


class LUDecomposition:
    """
    LU decomposition solver.

    Generally faster than Gauss-Jordan elimination, and once the matrix is
    decomposed additional right-hand sides can be solved on demand. Also
    provides the determinant, its logarithm, the inverse, and one-step
    iterative refinement of a solution.

    Decomposition is deferred until the first call that needs it.

    Example:
        >>> lu = LUDecomposition(A)
        >>> x = lu.solve(b)
        >>> lu.refine_solution(b, x)   # x improved in place
        >>> lu.get_determinant()
    """

    def __init__(self, coefficients: Matrix | None = None):
        self._matrix: Matrix | None = None
        self._coefficients: Matrix | None = None
        self._row_permutation: NDArray[np.intp] | None = None
        self._odd_swap_count = False
        self._substituted_pivots: tuple[int, ...] = ()
        self._state = DecompositionState.UNINITIALIZED
        if coefficients is not None:
            self.initialize(coefficients)

    @property
    def state(self) -> DecompositionState:
        return self._state

    @property
    def substituted_pivots(self) -> tuple[int, ...]:
        """Columns whose zero pivot was replaced by LU_PIVOT_SENTINEL."""
        self.ensure_decomposition()
        return self._substituted_pivots

    def initialize(self, coefficients: Matrix) -> None:
        """
        Supply a square matrix to decompose.

        A private working copy is decomposed. A reference to the caller's
        matrix is also kept for refine_solution(), which requires that
        matrix to be left unchanged.
        """
        check_matrix(coefficients, 'coefficients')
        check_square(coefficients, 'coefficients')
        self._matrix = coefficients.clone()
        self._coefficients = coefficients
        self._row_permutation = None
        self._odd_swap_count = False
        self._substituted_pivots = ()
        self._state = DecompositionState.INITIALIZED

    def ensure_decomposition(self) -> None:
        """
        Perform the decomposition if it hasn't been done yet.

        Raises:
            NotInitializedError: If no matrix has been supplied
            SingularMatrixError: If a row of the matrix is entirely zero
        """
        require_initialized(self._state, type(self).__name__)
        if self._state is DecompositionState.DECOMPOSED:
            return

        m = self._matrix.array
        n = m.shape[0]
        permutation = np.empty(n, dtype=np.intp)
        odd_swaps = False
        substituted: list[int] = []

        # Scale factor that would make each equation's largest coefficient 1
        row_max = np.max(np.abs(m), axis=1) if n else np.empty(0)
        zero_rows = np.flatnonzero(row_max == 0)
        if zero_rows.size:
            raise SingularMatrixError(
                f"The coefficient matrix is singular (row {int(zero_rows[0])} is all zeros).",
                matrix_name='coefficients',
                pivot_index=int(zero_rows[0]),
                expected_rank=n,
            )
        scale = 1.0 / row_max

        for k in range(n):
            # Partial pivoting: only rows k.. of column k are candidates
            pivot_row = k + int(np.argmax(scale[k:] * np.abs(m[k:, k])))

            if pivot_row != k:
                m[[k, pivot_row]] = m[[pivot_row, k]]
                odd_swaps = not odd_swaps
                # Row k moved down to pivot_row and will be seen again; the
                # old row k's scale is never needed after this step
                scale[pivot_row] = scale[k]
            permutation[k] = pivot_row

            pivot = m[k, k]
            if pivot == 0:
                m[k, k] = LU_PIVOT_SENTINEL
                inverse_pivot = 1.0 / LU_PIVOT_SENTINEL
                substituted.append(k)
                warnings.warn(
                    f"Zero pivot in column {k} replaced by {LU_PIVOT_SENTINEL:g}; "
                    f"the matrix may be singular and the solution inaccurate.",
                    RuntimeWarning,
                    stacklevel=2,
                )
            else:
                inverse_pivot = 1.0 / pivot

            # Store the multipliers of L below the pivot and update the
            # trailing sub-matrix
            m[k + 1:, k] *= inverse_pivot
            m[k + 1:, k + 1:] -= np.outer(m[k + 1:, k], m[k, k + 1:])

        self._row_permutation = permutation
        self._odd_swap_count = odd_swaps
        self._substituted_pivots = tuple(substituted)
        self._state = DecompositionState.DECOMPOSED

    def solve(self, values: Matrix, try_in_place: bool = False) -> Matrix:
        """
        Solve A·X = values using the decomposition.

        Args:
            values: Right-hand side with the same height as A
            try_in_place: If True, values is overwritten with the solution
                and returned

        Raises:
            DimensionError: If values has the wrong height
        """
        check_matrix(values, 'values')
        self.ensure_decomposition()
        check_same_height(values, self._matrix.height, 'values')

        if not try_in_place:
            values = values.clone()

        lu = self._matrix.array
        b = values.array
        permutation = self._row_permutation
        n = lu.shape[0]

        for x in range(b.shape[1]):
            column = b[:, x]

            # Forward substitution, undoing the row permutation as we go.
            # Leading zeros are skipped, which helps get_inverse() since
            # identity columns are mostly zero.
            first_nonzero = -1
            for y in range(n):
                row = permutation[y]
                total = column[row]
                column[row] = column[y]
                if first_nonzero != -1:
                    total -= lu[y, first_nonzero:y] @ column[first_nonzero:y]
                elif total != 0:
                    first_nonzero = y
                column[y] = total

            backsubstitute(lu, column)

        return values

    def get_determinant(self) -> float:
        """
        Determinant of the coefficient matrix.

        For sizeable matrices the determinant can exceed the range of a
        double; use get_log_determinant() in that case.
        """
        self.ensure_decomposition()
        product = float(np.prod(np.diagonal(self._matrix.array)))
        return -product if self._odd_swap_count else product

    def get_log_determinant(self) -> tuple[float, bool]:
        """
        Natural log of |det(A)|, and whether det(A) is negative.

        Returns:
            (log_abs_determinant, negative)
        """
        self.ensure_decomposition()
        diagonal = np.diagonal(self._matrix.array)
        negative = self._odd_swap_count ^ bool(np.count_nonzero(diagonal < 0) % 2)
        with np.errstate(divide='ignore'):
            total = float(np.sum(np.log(np.abs(diagonal))))
        return total, negative

    def get_inverse(self) -> Matrix:
        """Return the inverse of the coefficient matrix."""
        require_initialized(self._state, type(self).__name__)
        return self.solve(Matrix.identity(self._matrix.height), try_in_place=True)

    def get_decomposition(self) -> tuple[Matrix, NDArray[np.intp]]:
        """
        Return copies of the packed LU matrix and the row permutation.

        permutation[k] is the row that was swapped with row k at step k.
        Because of the pivoting, L is only triangular for the permuted
        matrix, so the factors are not returned separately.
        """
        self.ensure_decomposition()
        return self._matrix.clone(), self._row_permutation.copy()

    def refine_solution(self, values: Matrix, solution: Matrix) -> None:
        """
        Improve a solution in place with one step of iterative refinement.

        The residual A·x - b is computed with the ORIGINAL coefficient
        matrix passed to initialize(), the correction is solved for with the
        decomposition and subtracted. The result is usually better than the
        original solution and never worse. The method may be called
        repeatedly, although once is usually enough.

        Precondition: the coefficient matrix given to initialize() must not
        have been modified since. This is not checked.

        Args:
            values: The right-hand side passed to solve()
            solution: The matrix returned by solve(); overwritten
        """
        check_matrix(values, 'values')
        check_matrix(solution, 'solution')
        check_same_shape(values, solution, ('values', 'solution'))
        self.ensure_decomposition()
        check_same_height(values, self._matrix.height, 'values')

        errors = Matrix._wrap(self._coefficients.array @ solution.array - values.array)
        solution.subtract(self.solve(errors, try_in_place=True))
