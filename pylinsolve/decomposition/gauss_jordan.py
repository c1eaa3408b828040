"""
Gauss-Jordan elimination with full pivoting.

Solves A·X = B and produces the inverse of A in the same pass. For each
column, the row of A is divided by its pivot and the pivot column is
eliminated from every other row, so A turns into the identity while B turns
into the solution. Rather than keeping a separate identity matrix to turn
into the inverse, the entries of A that are known to become 0 or 1 are
overwritten in place, leaving A⁻¹ behind.

Worked example:
    2x + 3y + 4z = 20
    3x + 4y + 5z = 26      →   x = 1, y = 2, z = 3
     x - 2y + 2z = 3

Pivoting: at every step the entry of largest magnitude in the whole
unprocessed sub-block (rows and columns not pivoted yet) is chosen. Row
swaps are applied immediately. Column swaps are never performed on A during
elimination; the pivot position is recorded instead and the corresponding
columns of the inverse are swapped back in reverse order at the end. This
full pivoting is slightly more stable than LU's partial pivoting, at the
cost of speed; LUDecomposition is generally the better choice unless the
inverse is needed anyway.

Singularity is detected only as an exactly zero pivot. A matrix that is
singular in exact arithmetic (a duplicated row, say) often leaves a tiny
nonzero pivot after round-off; elimination then completes and returns a
solution with huge entries instead of raising SingularMatrixError. Use
SVDecomposition when rank needs to be judged against a tolerance.

References:
    Press, W. H., Teukolsky, S. A., Vetterling, W. T., & Flannery, B. P.
    Numerical Recipes in C (2nd ed.), Section 2.1.
"""

from __future__ import annotations

import numpy as np

from pylinsolve.core.exceptions import SingularMatrixError
from pylinsolve.core.matrix import Matrix
from pylinsolve.core.validation import check_matrix, check_square, check_same_height
from pylinsolve.decomposition._common import DecompositionState, require_initialized


def solve(
    coefficients: Matrix,
    values: Matrix,
    *,
    try_in_place: bool = False,
    want_inverse: bool = True,
) -> tuple[Matrix, Matrix | None]:
    """
    Solve a system of linear equations by Gauss-Jordan elimination.

    Args:
        coefficients: Square coefficient matrix A (n x n). Never modified.
        values: Right-hand side B (n x k). k may be zero.
        try_in_place: If True, B is overwritten with the solution and
            returned. Gauss-Jordan can always honour this.
        want_inverse: If False, the inverse is not put into canonical
            column order and None is returned in its place.

    Returns:
        (solution, inverse) where inverse is None if not requested

    Raises:
        ValidationError: If an argument is missing or A is not square
        DimensionError: If B does not have the same height as A
        SingularMatrixError: If A is singular
    """
    check_matrix(coefficients, 'coefficients')
    check_matrix(values, 'values')
    check_square(coefficients, 'coefficients')
    check_same_height(values, coefficients.height, 'values')

    # The coefficients are always cloned since they turn into the inverse
    work = coefficients.clone()
    if not try_in_place:
        values = values.clone()

    _eliminate(work, values, want_inverse)
    return values, (work if want_inverse else None)


def invert(matrix: Matrix) -> Matrix:
    """
    Invert a square matrix.

    Raises:
        ValidationError: If matrix is missing or not square
        SingularMatrixError: If matrix is singular
    """
    check_matrix(matrix, 'matrix')
    _, inverse = solve(matrix, Matrix(matrix.height, 0), try_in_place=True)
    return inverse


def _eliminate(coefficients: Matrix, values: Matrix, want_inverse: bool) -> None:
    """Run the elimination in place on private buffers."""
    a = coefficients.array
    b = values.array
    n = a.shape[0]

    # processed[k] is set once column k has been pivoted; the pivot row is
    # swapped into row k at the same time, so it doubles as a row flag
    processed = np.zeros(n, dtype=bool)
    pivot_rows = np.empty(n, dtype=np.intp)
    pivot_columns = np.empty(n, dtype=np.intp)

    for step in range(n):
        # Find the pivot: largest magnitude in the unprocessed sub-block
        open_idx = np.flatnonzero(~processed)
        block = np.abs(a[np.ix_(open_idx, open_idx)])
        r, c = divmod(int(np.argmax(block)), open_idx.size)
        pivot_row = int(open_idx[r])
        pivot_col = int(open_idx[c])

        processed[pivot_col] = True
        if pivot_row != pivot_col:
            a[[pivot_row, pivot_col]] = a[[pivot_col, pivot_row]]
            b[[pivot_row, pivot_col]] = b[[pivot_col, pivot_row]]

        pivot_rows[step] = pivot_row
        pivot_columns[step] = pivot_col

        # The pivot now sits on the diagonal
        pivot = a[pivot_col, pivot_col]
        if pivot == 0:
            raise SingularMatrixError(
                "The coefficient matrix is singular.",
                matrix_name='coefficients',
                pivot_index=step,
                expected_rank=n,
            )
        inverse_pivot = 1.0 / pivot

        # The identity matrix would have had a 1 here
        a[pivot_col, pivot_col] = 1.0
        a[pivot_col] *= inverse_pivot
        b[pivot_col] *= inverse_pivot

        # Eliminate the pivot column from all other rows. The identity
        # matrix would have had zeros in this column outside the pivot row.
        factors = a[:, pivot_col].copy()
        factors[pivot_col] = 0.0
        kept = a[pivot_col, pivot_col]
        a[:, pivot_col] = 0.0
        a[pivot_col, pivot_col] = kept
        a -= np.outer(factors, a[pivot_col])
        b -= np.outer(factors, b[pivot_col])

    # Undo the implied column swaps, last first
    if want_inverse:
        for step in range(n - 1, -1, -1):
            row, col = pivot_rows[step], pivot_columns[step]
            if row != col:
                a[:, [row, col]] = a[:, [col, row]]


class GaussJordan:
    """
    Gauss-Jordan solver object.

    It is generally not necessary to create a GaussJordan object, as the
    module-level solve() and invert() perform the same operations with less
    overhead. The object form satisfies the LinearEquationSolver protocol
    and caches the inverse produced by the first solve.

    Example:
        >>> gj = GaussJordan(A)
        >>> x = gj.solve(b)
        >>> A_inv = gj.get_inverse()   # free, computed during solve()
    """

    def __init__(self, coefficients: Matrix | None = None):
        self._coefficients: Matrix | None = None
        self._inverse: Matrix | None = None
        self._state = DecompositionState.UNINITIALIZED
        if coefficients is not None:
            self.initialize(coefficients)

    invert = staticmethod(invert)

    @property
    def state(self) -> DecompositionState:
        return self._state

    def initialize(self, coefficients: Matrix) -> None:
        """Store a private copy of a square coefficient matrix."""
        check_matrix(coefficients, 'coefficients')
        check_square(coefficients, 'coefficients')
        self._coefficients = coefficients.clone()
        self._inverse = None
        self._state = DecompositionState.INITIALIZED

    def solve(self, values: Matrix, try_in_place: bool = False) -> Matrix:
        """
        Solve A·X = values.

        The inverse is generated as a by-product of the first call and
        cached for get_inverse().
        """
        require_initialized(self._state, type(self).__name__)
        want_inverse = self._inverse is None
        solution, inverse = solve(
            self._coefficients, values,
            try_in_place=try_in_place, want_inverse=want_inverse,
        )
        if want_inverse:
            self._inverse = inverse
            self._state = DecompositionState.DECOMPOSED
        return solution

    def get_inverse(self) -> Matrix:
        """Return a copy of the inverse of the coefficient matrix."""
        require_initialized(self._state, type(self).__name__)
        if self._inverse is None:
            self._inverse = invert(self._coefficients)
            self._state = DecompositionState.DECOMPOSED
        return self._inverse.clone()
