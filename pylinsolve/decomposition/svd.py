"""
Singular value decomposition.

Decomposes an M x N matrix A into A = U·W·Vᵗ, where U is M x N with
orthonormal columns, W is the diagonal matrix of non-negative singular
values (stored as a vector w), and V is an N x N orthogonal matrix.

The SVD exists for every matrix, singular or not, square or not, which
makes it the solver of last resort. Singular values at or below a threshold
are treated as exactly zero, which partitions the columns of U and V:
    - columns of U with w > threshold span the range of A
    - columns of V with w <= threshold span the null space of A
    - the number of w > threshold is the rank of A
Solving with those singular values zeroed yields the minimum-norm
least-squares solution of A·x = b, which is the best answer available for
singular, overdetermined and underdetermined systems alike.

Algorithm (Golub-Reinsch):
    1. Householder reduction of A to bidiagonal form, tracking the largest
       |w[i]| + |rv[i]| as a scale for the convergence test
    2. Accumulation of the right-hand transformations into V, then the
       left-hand transformations into U (overwriting A)
    3. Diagonalization of the bidiagonal form with implicitly shifted QR
       sweeps, at most SVD_MAX_ITERATIONS per singular value
    4. Descending sort of the singular values together with their U and V
       columns, then a sign flip of each U/V column pair that leaves more
       entries non-negative

Matrices with fewer rows than columns are padded with zero rows for steps
1-3 and the padding is dropped from U afterwards.

References:
    Press, W. H. et al. Numerical Recipes in C (2nd ed.), Section 2.6.
    Golub, G. H. & Reinsch, C. (1970). Singular value decomposition and
    least squares solutions. Numerische Mathematik, 14, 403-420.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pylinsolve.core.compute.linalg import post_jacobi_rotation, with_sign
from pylinsolve.core.compute.tolerances import DOUBLE_EPSILON, SVD_MAX_ITERATIONS
from pylinsolve.core.exceptions import ConvergenceError, ValidationError
from pylinsolve.core.matrix import Matrix
from pylinsolve.core.vector import Vector
from pylinsolve.core.validation import check_matrix, check_not_empty, check_same_height
from pylinsolve.decomposition._common import DecompositionState, require_initialized


class SVDecomposition:
    """
    Singular value decomposition solver.

    The matrix is decomposed as soon as it is supplied. All queries take an
    optional threshold; singular values less than or equal to it are
    treated as zero. The default is default_threshold.

    Example:
        >>> svd = SVDecomposition(A)
        >>> svd.get_rank()
        2
        >>> x = svd.solve(b)            # minimum-norm least-squares solution
        >>> basis = svd.get_null_space()
    """

    def __init__(self, coefficients: Matrix | None = None):
        self._u: NDArray[np.float64] | None = None
        self._w: NDArray[np.float64] | None = None
        self._v: NDArray[np.float64] | None = None
        self._default_threshold = 0.0
        self._state = DecompositionState.UNINITIALIZED
        if coefficients is not None:
            self.initialize(coefficients)

    @property
    def state(self) -> DecompositionState:
        return self._state

    @property
    def default_threshold(self) -> float:
        """
        Threshold used when none is given: 0.5·√(M+N+1)·w_max·ε.

        This is the expected rounding error of the decomposition, so
        singular values below it are indistinguishable from zero.
        """
        require_initialized(self._state, type(self).__name__)
        return self._default_threshold

    def initialize(self, coefficients: Matrix) -> None:
        """
        Decompose a non-empty matrix of any shape.

        Raises:
            ValidationError: If the matrix is missing or empty
            ConvergenceError: If a singular value fails to converge. The
                object is left uninitialized.
        """
        check_matrix(coefficients, 'coefficients')
        check_not_empty(coefficients, 'coefficients')

        self._u = self._w = self._v = None
        self._state = DecompositionState.UNINITIALIZED

        rows, cols = coefficients.shape
        if rows < cols:
            u = np.zeros((cols, cols))
            u[:rows] = coefficients.array
        else:
            u = coefficients.to_array()

        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            w, v = _decompose(u)
        u = u[:rows]

        order = np.argsort(-w, kind='stable')
        w = w[order]
        u = np.ascontiguousarray(u[:, order])
        v = np.ascontiguousarray(v[:, order])

        # Singular vectors are only defined up to a simultaneous sign change
        # of a U/V column pair; prefer the sign with fewer negative entries
        negatives = np.count_nonzero(u < 0, axis=0) + np.count_nonzero(v < 0, axis=0)
        flip = negatives > (rows + cols) // 2
        u[:, flip] *= -1
        v[:, flip] *= -1

        self._u, self._w, self._v = u, w, v
        self._default_threshold = 0.5 * np.sqrt(rows + cols + 1.0) * w[0] * DOUBLE_EPSILON
        self._state = DecompositionState.DECOMPOSED

    def solve(
        self,
        values: Matrix,
        try_in_place: bool = False,
        *,
        threshold: float | None = None,
    ) -> Matrix:
        """
        Find the minimum-norm least-squares solution of A·X = values.

        Args:
            values: Right-hand side with M rows
            try_in_place: If True, the solution is written into values when
                possible: when values already has N rows, or when it has a
                single column (values is then resized to N x 1)
            threshold: Singular values <= threshold are treated as zero

        Raises:
            DimensionError: If values does not have M rows
        """
        require_initialized(self._state, type(self).__name__)
        check_matrix(values, 'values')
        check_same_height(values, self._u.shape[0], 'values')

        solution = self._v @ (self._inverse_weights(threshold)[:, None] * (self._u.T @ values.array))

        cols = self._v.shape[0]
        if try_in_place and (values.height == cols or values.width == 1):
            if values.height != cols:
                values.resize(cols, 1)
            values.array[:] = solution
            return values
        return Matrix._wrap(solution)

    def get_inverse(self, threshold: float | None = None) -> Matrix:
        """
        Return the Moore-Penrose pseudoinverse, N x M.

        For a non-singular square matrix this is the ordinary inverse.
        """
        require_initialized(self._state, type(self).__name__)
        return Matrix._wrap((self._v * self._inverse_weights(threshold)) @ self._u.T)

    def get_rank(self, threshold: float | None = None) -> int:
        """Number of singular values greater than the threshold."""
        require_initialized(self._state, type(self).__name__)
        return int(np.count_nonzero(self._nonzero(threshold)))

    def get_nullity(self, threshold: float | None = None) -> int:
        """Dimension of the null space: N - rank."""
        require_initialized(self._state, type(self).__name__)
        return self._w.size - self.get_rank(threshold)

    def get_range(self, threshold: float | None = None) -> Matrix:
        """
        Orthonormal basis for the range of A, one column per basis vector.
        Returns an M x rank matrix.
        """
        require_initialized(self._state, type(self).__name__)
        return Matrix._wrap(self._u[:, self._nonzero(threshold)])

    def get_null_space(self, threshold: float | None = None) -> Matrix:
        """
        Orthonormal basis for the null space of A, one column per basis
        vector. Returns an N x nullity matrix.
        """
        require_initialized(self._state, type(self).__name__)
        return Matrix._wrap(self._v[:, ~self._nonzero(threshold)])

    def get_singular_values(self) -> Vector:
        """Return a copy of the singular values, largest first."""
        require_initialized(self._state, type(self).__name__)
        return Vector.from_values(self._w)

    def get_inverse_condition(self) -> float:
        """
        Reciprocal of the condition number, w_min / w_max.

        Returns 0 for a singular matrix. Values near DOUBLE_EPSILON mean the
        matrix is ill-conditioned.
        """
        require_initialized(self._state, type(self).__name__)
        if self._w[0] <= 0 or self._w[-1] <= 0:
            return 0.0
        return float(self._w[-1] / self._w[0])

    def get_decomposition(self) -> tuple[Matrix, Vector, Matrix]:
        """Return copies of (U, w, V) with A = U·diag(w)·Vᵗ."""
        require_initialized(self._state, type(self).__name__)
        return (
            Matrix._wrap(self._u.copy()),
            Vector.from_values(self._w),
            Matrix._wrap(self._v.copy()),
        )

    def _threshold(self, threshold: float | None) -> float:
        if threshold is None:
            return self._default_threshold
        if threshold < 0:
            raise ValidationError(f"threshold: must be non-negative, got {threshold}")
        return threshold

    def _nonzero(self, threshold: float | None) -> NDArray[np.bool_]:
        return self._w > self._threshold(threshold)

    def _inverse_weights(self, threshold: float | None) -> NDArray[np.float64]:
        """1/w for the singular values kept, 0 for those treated as zero."""
        keep = self._nonzero(threshold)
        weights = np.zeros_like(self._w)
        weights[keep] = 1.0 / self._w[keep]
        return weights


def _decompose(u: NDArray[np.float64]) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Golub-Reinsch SVD of an M x N array with M >= N, in place.

    On return u holds U. Returns (w, v), unsorted.

    Raises:
        ConvergenceError: If a singular value needs more than
            SVD_MAX_ITERATIONS sweeps
    """
    m, n = u.shape
    w = np.zeros(n)
    v = np.zeros((n, n))
    rv = np.zeros(n)

    # Householder reduction to bidiagonal form
    g = scale = anorm = 0.0
    for i in range(n):
        l = i + 1
        rv[i] = scale * g
        g = scale = 0.0
        if i < m:
            scale = np.sum(np.abs(u[i:, i]))
            if scale != 0:
                u[i:, i] /= scale
                s = u[i:, i] @ u[i:, i]
                f = u[i, i]
                g = -with_sign(np.sqrt(s), f)
                h = f * g - s
                u[i, i] = f - g
                factors = (u[i:, i] @ u[i:, l:]) / h
                u[i:, l:] += np.outer(u[i:, i], factors)
                u[i:, i] *= scale
        w[i] = scale * g

        g = scale = 0.0
        if i < m and i != n - 1:
            scale = np.sum(np.abs(u[i, l:]))
            if scale != 0:
                u[i, l:] /= scale
                s = u[i, l:] @ u[i, l:]
                f = u[i, l]
                g = -with_sign(np.sqrt(s), f)
                h = f * g - s
                u[i, l] = f - g
                rv[l:] = u[i, l:] / h
                sums = u[l:m, l:] @ u[i, l:]
                u[l:m, l:] += np.outer(sums, rv[l:])
                u[i, l:] *= scale
        anorm = max(anorm, abs(w[i]) + abs(rv[i]))

    # Accumulate the right-hand transformations
    l = n
    for i in range(n - 1, -1, -1):
        if i < n - 1:
            if g != 0:
                # Double division avoids a possible underflow
                v[l:, i] = (u[i, l:] / u[i, l]) / g
                sums = u[i, l:] @ v[l:, l:]
                v[l:, l:] += np.outer(v[l:, i], sums)
            v[i, l:] = 0.0
            v[l:, i] = 0.0
        v[i, i] = 1.0
        g = rv[i]
        l = i

    # Accumulate the left-hand transformations
    for i in range(min(m, n) - 1, -1, -1):
        l = i + 1
        g = w[i]
        u[i, l:] = 0.0
        if g != 0:
            g = 1.0 / g
            factors = (u[l:, i] @ u[l:, l:]) / u[i, i] * g
            u[i:, l:] += np.outer(u[i:, i], factors)
            u[i:, i] *= g
        else:
            u[i:, i] = 0.0
        u[i, i] += 1.0

    # Off-diagonal entries this small relative to the matrix are zero
    anorm *= DOUBLE_EPSILON

    # Diagonalize the bidiagonal form, one singular value at a time
    for k in range(n - 1, -1, -1):
        for iteration in range(SVD_MAX_ITERATIONS):
            # Test for splitting. rv[0] is always zero, so this terminates.
            split = True
            for l in range(k, -1, -1):
                nm = l - 1
                if abs(rv[l]) <= anorm:
                    split = False
                    break
                if abs(w[nm]) <= anorm:
                    break

            if split:
                # Cancel rv[l] since w[nm] is negligible
                c, s = 0.0, 1.0
                for i in range(l, k + 1):
                    f = s * rv[i]
                    rv[i] = c * rv[i]
                    if abs(f) <= anorm:
                        break
                    g = w[i]
                    h = np.hypot(f, g)
                    w[i] = h
                    h = 1.0 / h
                    c = g * h
                    s = -f * h
                    post_jacobi_rotation(u, i, nm, c, s)

            z = w[k]
            if l == k:
                # Converged; make the singular value non-negative
                if z < 0:
                    w[k] = -z
                    v[:, k] = -v[:, k]
                break

            if iteration == SVD_MAX_ITERATIONS - 1:
                raise ConvergenceError(
                    f"Singular value {k} did not converge in "
                    f"{SVD_MAX_ITERATIONS} iterations.",
                    iterations=SVD_MAX_ITERATIONS,
                    index=k,
                    reason='max_iterations',
                )

            # Shift from the bottom 2x2 minor
            x = w[l]
            nm = k - 1
            y = w[nm]
            g = rv[nm]
            h = rv[k]
            f = ((y - z) * (y + z) + (g - h) * (g + h)) / (2.0 * h * y)
            g = np.hypot(f, 1.0)
            f = ((x - z) * (x + z) + h * ((y / (f + with_sign(g, f))) - h)) / x

            # Next QR transformation
            c = s = 1.0
            for j in range(l, nm + 1):
                i = j + 1
                g = rv[i]
                y = w[i]
                h = s * g
                g = c * g
                z = np.hypot(f, h)
                rv[j] = z
                c = f / z
                s = h / z
                f = x * c + g * s
                g = g * c - x * s
                h = y * s
                y *= c
                post_jacobi_rotation(v, i, j, c, s)

                z = np.hypot(f, h)
                # The rotation can be arbitrary if z is zero
                w[j] = z
                if z != 0:
                    z = 1.0 / z
                    c = f * z
                    s = h * z
                f = c * g + s * y
                x = c * y - s * g
                post_jacobi_rotation(u, i, j, c, s)

            rv[l] = 0.0
            rv[k] = f
            w[k] = x

    return w, v
