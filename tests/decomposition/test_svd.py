"""
Tests for singular value decomposition.

Validates:
    - Reconstruction U·diag(w)·Vᵗ = A for square, tall and wide matrices
    - Singular values sorted descending, non-negative, matching numpy
    - Orthonormality and sign canonicalization of the singular vectors
    - Minimum-norm least-squares solutions and the pseudoinverse
    - Rank, nullity, range and null space from the threshold partition
    - Threshold boundary: values equal to the threshold count as zero
    - Convergence failure invalidates the object
"""

import numpy as np
import pytest

from pylinsolve.core.compute.tolerances import DOUBLE_EPSILON, select_tolerance
from pylinsolve.core.exceptions import (
    ConvergenceError,
    DimensionError,
    NotInitializedError,
    ValidationError,
)
from pylinsolve.core.matrix import Matrix
from pylinsolve.core.protocols import LinearEquationSolver
from pylinsolve.decomposition import DecompositionState, SVDecomposition
from pylinsolve.decomposition import svd as svd_module


SVD_TOL = select_tolerance('svd')


def column(values):
    return Matrix.from_array(np.asarray(values, dtype=float).reshape(-1, 1))


def parts(svd):
    u, w, v = svd.get_decomposition()
    return u.array, w.array, v.array


# ═══════════════════════════════════════════════════════════════════════
# Decomposition
# ═══════════════════════════════════════════════════════════════════════


class TestDecomposition:

    @pytest.mark.parametrize("shape", [(5, 5), (8, 3), (3, 7), (1, 4), (4, 1)])
    def test_reconstruction(self, rng, shape):
        A = rng.standard_normal(shape)
        u, w, v = parts(SVDecomposition(Matrix.from_array(A)))
        rows, cols = shape
        assert u.shape == (rows, cols)
        assert w.shape == (cols,)
        assert v.shape == (cols, cols)
        np.testing.assert_allclose(u @ np.diag(w) @ v.T, A, atol=1e-12)

    @pytest.mark.parametrize("shape", [(6, 6), (9, 4), (4, 9)])
    def test_singular_values_match_numpy(self, rng, shape):
        A = rng.standard_normal(shape)
        _, w, _ = parts(SVDecomposition(Matrix.from_array(A)))
        expected = np.zeros(shape[1])
        reference = np.linalg.svd(A, compute_uv=False)
        expected[:reference.size] = reference
        np.testing.assert_allclose(w, expected, rtol=SVD_TOL.rtol, atol=1e-12)

    def test_sorted_descending_and_non_negative(self, rng):
        A = rng.standard_normal((7, 5))
        _, w, _ = parts(SVDecomposition(Matrix.from_array(A)))
        assert np.all(w >= 0)
        assert np.all(np.diff(w) <= 0)

    def test_orthonormal_vectors(self, rng):
        A = rng.standard_normal((8, 5))
        u, _, v = parts(SVDecomposition(Matrix.from_array(A)))
        np.testing.assert_allclose(u.T @ u, np.eye(5), atol=1e-12)
        np.testing.assert_allclose(v.T @ v, np.eye(5), atol=1e-12)
        np.testing.assert_allclose(v @ v.T, np.eye(5), atol=1e-12)

    def test_sign_canonicalization(self, rng):
        A = rng.standard_normal((6, 4))
        u, _, v = parts(SVDecomposition(Matrix.from_array(A)))
        negatives = np.count_nonzero(u < 0, axis=0) + np.count_nonzero(v < 0, axis=0)
        assert np.all(negatives <= (6 + 4) // 2)

    def test_zero_matrix(self):
        svd = SVDecomposition(Matrix(3, 2))
        _, w, _ = parts(svd)
        np.testing.assert_array_equal(w, [0.0, 0.0])
        assert svd.get_rank() == 0
        assert svd.get_nullity() == 2
        assert svd.get_inverse_condition() == 0.0

    def test_decomposition_is_copy(self, worked_example):
        A, b, x = worked_example
        svd = SVDecomposition(Matrix.from_array(A))
        u, w, v = svd.get_decomposition()
        u.set_identity()
        w.multiply(0.0)
        np.testing.assert_allclose(svd.solve(column(b)).array.ravel(), x, rtol=1e-10)

    def test_caller_matrix_unchanged(self, rng):
        A = rng.standard_normal((3, 5))
        coefficients = Matrix.from_array(A)
        SVDecomposition(coefficients)
        np.testing.assert_array_equal(coefficients.array, A)


# ═══════════════════════════════════════════════════════════════════════
# Solving
# ═══════════════════════════════════════════════════════════════════════


class TestSolve:

    def test_worked_example(self, worked_example):
        A, b, x = worked_example
        svd = SVDecomposition(Matrix.from_array(A))
        np.testing.assert_allclose(svd.solve(column(b)).array.ravel(), x, rtol=SVD_TOL.rtol)

    def test_four_by_four(self, four_by_four):
        A, b, x = four_by_four
        svd = SVDecomposition(Matrix.from_array(A))
        np.testing.assert_allclose(svd.solve(column(b)).array.ravel(), x, rtol=SVD_TOL.rtol)

    def test_degenerate_minimum_norm(self, degenerate):
        A, b = degenerate
        svd = SVDecomposition(Matrix.from_array(A))
        assert svd.get_rank(threshold=1e-10) == 2
        assert svd.get_nullity(threshold=1e-10) == 1
        x = svd.solve(column(b), threshold=1e-10).array.ravel()
        np.testing.assert_allclose(x, [1.0, 2.0, 3.0], rtol=SVD_TOL.rtol)

    def test_overdetermined_least_squares(self, rng):
        A = rng.standard_normal((10, 3))
        b = rng.standard_normal(10)
        svd = SVDecomposition(Matrix.from_array(A))
        x = svd.solve(column(b)).array.ravel()
        expected, *_ = np.linalg.lstsq(A, b, rcond=None)
        np.testing.assert_allclose(x, expected, rtol=SVD_TOL.rtol, atol=SVD_TOL.atol)

    def test_underdetermined_minimum_norm(self, rng):
        A = rng.standard_normal((3, 6))
        b = rng.standard_normal(3)
        svd = SVDecomposition(Matrix.from_array(A))
        x = svd.solve(column(b)).array.ravel()
        np.testing.assert_allclose(A @ x, b, atol=1e-12)
        np.testing.assert_allclose(x, np.linalg.pinv(A) @ b, rtol=SVD_TOL.rtol, atol=SVD_TOL.atol)

    def test_in_place_same_height(self, worked_example):
        A, b, x = worked_example
        values = column(b)
        svd = SVDecomposition(Matrix.from_array(A))
        assert svd.solve(values, try_in_place=True) is values
        np.testing.assert_allclose(values.array.ravel(), x, rtol=SVD_TOL.rtol)

    def test_in_place_single_column_resized(self, rng):
        A = rng.standard_normal((5, 3))
        values = column(rng.standard_normal(5))
        svd = SVDecomposition(Matrix.from_array(A))
        expected = svd.solve(values).array
        assert svd.solve(values, try_in_place=True) is values
        assert values.shape == (3, 1)
        np.testing.assert_allclose(values.array, expected)

    def test_in_place_not_possible(self, rng):
        A = rng.standard_normal((5, 3))
        B = rng.standard_normal((5, 2))
        values = Matrix.from_array(B)
        svd = SVDecomposition(Matrix.from_array(A))
        result = svd.solve(values, try_in_place=True)
        assert result is not values
        assert result.shape == (3, 2)
        np.testing.assert_array_equal(values.array, B)

    def test_height_mismatch(self, rng):
        svd = SVDecomposition(Matrix.from_array(rng.standard_normal((5, 3))))
        with pytest.raises(DimensionError):
            svd.solve(Matrix(3, 1))


# ═══════════════════════════════════════════════════════════════════════
# Threshold partition
# ═══════════════════════════════════════════════════════════════════════


class TestThreshold:

    def test_default_threshold_formula(self, rng):
        A = rng.standard_normal((6, 4))
        svd = SVDecomposition(Matrix.from_array(A))
        _, w, _ = parts(svd)
        expected = 0.5 * np.sqrt(6 + 4 + 1) * w[0] * DOUBLE_EPSILON
        assert svd.default_threshold == pytest.approx(expected)

    def test_value_at_threshold_is_zero(self, rng):
        A = rng.standard_normal((5, 5))
        svd = SVDecomposition(Matrix.from_array(A))
        w = svd.get_singular_values().array
        assert svd.get_rank() == 5
        assert svd.get_rank(threshold=w[2]) == 2
        assert svd.get_nullity(threshold=w[2]) == 3
        assert svd.get_rank(threshold=np.nextafter(w[2], 0.0)) == 3

    def test_threshold_changes_solution(self, rng):
        A = rng.standard_normal((4, 4))
        b = column(rng.standard_normal(4))
        svd = SVDecomposition(Matrix.from_array(A))
        w = svd.get_singular_values().array
        x_full = svd.solve(b).array
        x_truncated = svd.solve(b, threshold=w[1]).array
        assert not np.allclose(x_full, x_truncated)

    def test_exact_zero_dropped_by_default(self):
        svd = SVDecomposition(Matrix.from_array(np.diag([5.0, 0.0, 2.0])))
        np.testing.assert_allclose(svd.get_singular_values().array, [5.0, 2.0, 0.0])
        assert svd.get_rank() == 2
        assert svd.get_nullity() == 1
        np.testing.assert_allclose(np.abs(svd.get_null_space().array.ravel()), [0.0, 1.0, 0.0])

    def test_negative_threshold(self, worked_example):
        A, _, _ = worked_example
        svd = SVDecomposition(Matrix.from_array(A))
        with pytest.raises(ValidationError, match="threshold"):
            svd.get_rank(threshold=-1.0)

    def test_range_and_null_space(self, degenerate):
        A, _ = degenerate
        svd = SVDecomposition(Matrix.from_array(A))
        basis = svd.get_range(threshold=1e-10).array
        null = svd.get_null_space(threshold=1e-10).array
        assert basis.shape == (3, 2)
        assert null.shape == (3, 1)
        np.testing.assert_allclose(A @ null, 0.0, atol=1e-12)
        np.testing.assert_allclose(np.abs(null.ravel()), np.array([1.0, 2.0, 1.0]) / np.sqrt(6.0), atol=1e-12)
        np.testing.assert_allclose(basis.T @ basis, np.eye(2), atol=1e-12)
        # Every column of A lies in the range
        projection = basis @ (basis.T @ A)
        np.testing.assert_allclose(projection, A, atol=1e-12)


# ═══════════════════════════════════════════════════════════════════════
# Inverse and condition
# ═══════════════════════════════════════════════════════════════════════


class TestInverse:

    def test_inverse_of_square(self, well_conditioned):
        A = well_conditioned
        inverse = SVDecomposition(Matrix.from_array(A)).get_inverse()
        np.testing.assert_allclose(A @ inverse.array, np.eye(6), atol=1e-10)

    @pytest.mark.parametrize("shape", [(7, 3), (3, 7)])
    def test_pseudoinverse(self, rng, shape):
        A = rng.standard_normal(shape)
        pinv = SVDecomposition(Matrix.from_array(A)).get_inverse()
        assert pinv.shape == (shape[1], shape[0])
        np.testing.assert_allclose(pinv.array, np.linalg.pinv(A), rtol=SVD_TOL.rtol, atol=1e-10)

    def test_pseudoinverse_of_degenerate(self, degenerate):
        A, _ = degenerate
        pinv = SVDecomposition(Matrix.from_array(A)).get_inverse(threshold=1e-10).array
        np.testing.assert_allclose(A @ pinv @ A, A, atol=1e-10)
        np.testing.assert_allclose(pinv, np.linalg.pinv(A), atol=1e-10)

    def test_inverse_condition(self, well_conditioned):
        A = well_conditioned
        svd = SVDecomposition(Matrix.from_array(A))
        assert svd.get_inverse_condition() == pytest.approx(1.0 / np.linalg.cond(A), rel=1e-9)


# ═══════════════════════════════════════════════════════════════════════
# Lifecycle
# ═══════════════════════════════════════════════════════════════════════


class TestLifecycle:

    def test_satisfies_protocol(self):
        assert isinstance(SVDecomposition(), LinearEquationSolver)

    def test_uninitialized(self):
        svd = SVDecomposition()
        assert svd.state is DecompositionState.UNINITIALIZED
        with pytest.raises(NotInitializedError):
            svd.get_rank()
        with pytest.raises(NotInitializedError):
            svd.default_threshold

    def test_decomposed_eagerly(self, worked_example):
        A, _, _ = worked_example
        assert SVDecomposition(Matrix.from_array(A)).state is DecompositionState.DECOMPOSED

    def test_empty_rejected(self):
        with pytest.raises(ValidationError, match="empty"):
            SVDecomposition(Matrix(0, 3))

    def test_convergence_failure_invalidates(self, rng, monkeypatch, worked_example):
        A, b, _ = worked_example
        svd = SVDecomposition(Matrix.from_array(A))
        monkeypatch.setattr(svd_module, 'SVD_MAX_ITERATIONS', 1)
        with pytest.raises(ConvergenceError) as exc_info:
            svd.initialize(Matrix.from_array(rng.standard_normal((5, 5))))
        assert exc_info.value.iterations == 1
        assert exc_info.value.reason == 'max_iterations'
        assert svd.state is DecompositionState.UNINITIALIZED
        with pytest.raises(NotInitializedError):
            svd.solve(column(b))
