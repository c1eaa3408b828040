"""
Tests for Gauss-Jordan elimination.

Validates:
    - The worked example and the 4x4 example
    - Inverse consistency: A·A⁻¹ = I
    - Singular matrices raise SingularMatrixError
    - Caller's matrices are only mutated when in-place is requested
    - Object lifecycle (uninitialized use, inverse caching)
"""

import numpy as np
import pytest

from pylinsolve.core.exceptions import (
    DimensionError,
    NotInitializedError,
    SingularMatrixError,
    ValidationError,
)
from pylinsolve.core.matrix import Matrix
from pylinsolve.core.protocols import LinearEquationSolver
from pylinsolve.decomposition import DecompositionState, GaussJordan
from pylinsolve.decomposition import gauss_jordan


def column(values):
    return Matrix.from_array(np.asarray(values, dtype=float).reshape(-1, 1))


# ═══════════════════════════════════════════════════════════════════════
# Module-level solve() and invert()
# ═══════════════════════════════════════════════════════════════════════


class TestSolve:

    def test_worked_example(self, worked_example):
        A, b, x = worked_example
        solution, inverse = gauss_jordan.solve(Matrix.from_array(A), column(b))
        np.testing.assert_allclose(solution.array.ravel(), x, rtol=1e-12)
        np.testing.assert_allclose(inverse.array @ A, np.eye(3), atol=1e-12)

    def test_four_by_four(self, four_by_four):
        A, b, x = four_by_four
        solution, _ = gauss_jordan.solve(Matrix.from_array(A), column(b), want_inverse=False)
        np.testing.assert_allclose(solution.array.ravel(), x, rtol=1e-12)

    def test_want_inverse_false_returns_none(self, worked_example):
        A, b, _ = worked_example
        _, inverse = gauss_jordan.solve(Matrix.from_array(A), column(b), want_inverse=False)
        assert inverse is None

    def test_multiple_right_hand_sides(self, well_conditioned, rng):
        A = well_conditioned
        X = rng.standard_normal((6, 3))
        solution, _ = gauss_jordan.solve(Matrix.from_array(A), Matrix.from_array(A @ X))
        np.testing.assert_allclose(solution.array, X, rtol=1e-10, atol=1e-12)

    def test_caller_matrices_unchanged(self, worked_example):
        A, b, _ = worked_example
        coefficients = Matrix.from_array(A)
        values = column(b)
        gauss_jordan.solve(coefficients, values)
        np.testing.assert_array_equal(coefficients.array, A)
        np.testing.assert_array_equal(values.array.ravel(), b)

    def test_in_place(self, worked_example):
        A, b, x = worked_example
        coefficients = Matrix.from_array(A)
        values = column(b)
        solution, _ = gauss_jordan.solve(coefficients, values, try_in_place=True)
        assert solution is values
        np.testing.assert_allclose(values.array.ravel(), x, rtol=1e-12)
        np.testing.assert_array_equal(coefficients.array, A)

    def test_invert(self, well_conditioned):
        A = well_conditioned
        inverse = gauss_jordan.invert(Matrix.from_array(A))
        np.testing.assert_allclose(A @ inverse.array, np.eye(6), atol=1e-12)
        np.testing.assert_allclose(inverse.array, np.linalg.inv(A), rtol=1e-10, atol=1e-12)

    def test_invert_needs_column_swaps(self):
        """The largest entry is off the diagonal, so columns are unscrambled."""
        A = np.array([[0.0, 1.0, 2.0], [3.0, 0.0, 1.0], [1.0, 4.0, 0.0]])
        inverse = gauss_jordan.invert(Matrix.from_array(A))
        np.testing.assert_allclose(inverse.array @ A, np.eye(3), atol=1e-12)

    def test_singular(self):
        A = np.array([[1.0, 2.0], [2.0, 4.0]])
        with pytest.raises(SingularMatrixError) as exc_info:
            gauss_jordan.solve(Matrix.from_array(A), column([1.0, 2.0]))
        assert exc_info.value.expected_rank == 2
        assert exc_info.value.pivot_index == 1

    def test_exactly_duplicated_row(self):
        A = np.array([[1.0, 2.0], [1.0, 2.0]])
        with pytest.raises(SingularMatrixError):
            gauss_jordan.invert(Matrix.from_array(A))

    def test_singular_caught_as_invalid_argument(self):
        gj = GaussJordan(Matrix.from_array([[1.0, 2.0], [2.0, 4.0]]))
        with pytest.raises(ValidationError):
            gj.solve(column([1.0, 2.0]))

    def test_zero_column_singular(self):
        A = np.array([[1.0, 2.0, 0.0], [3.0, 4.0, 0.0], [5.0, 6.0, 0.0]])
        with pytest.raises(SingularMatrixError):
            gauss_jordan.invert(Matrix.from_array(A))

    def test_zero_matrix_singular(self):
        with pytest.raises(SingularMatrixError):
            gauss_jordan.invert(Matrix(2, 2))

    def test_non_square(self):
        with pytest.raises(ValidationError, match="square"):
            gauss_jordan.solve(Matrix(2, 3), Matrix(2, 1))

    def test_height_mismatch(self):
        with pytest.raises(DimensionError):
            gauss_jordan.solve(Matrix.identity(3), Matrix(2, 1))

    def test_none_rejected(self):
        with pytest.raises(ValidationError):
            gauss_jordan.solve(None, Matrix(2, 1))


# ═══════════════════════════════════════════════════════════════════════
# GaussJordan object
# ═══════════════════════════════════════════════════════════════════════


class TestGaussJordanObject:

    def test_satisfies_protocol(self):
        assert isinstance(GaussJordan(), LinearEquationSolver)

    def test_uninitialized(self):
        gj = GaussJordan()
        assert gj.state is DecompositionState.UNINITIALIZED
        with pytest.raises(NotInitializedError):
            gj.solve(Matrix(1, 1))
        with pytest.raises(NotInitializedError):
            gj.get_inverse()

    def test_solve_then_inverse(self, worked_example):
        A, b, x = worked_example
        gj = GaussJordan(Matrix.from_array(A))
        assert gj.state is DecompositionState.INITIALIZED
        np.testing.assert_allclose(gj.solve(column(b)).array.ravel(), x, rtol=1e-12)
        assert gj.state is DecompositionState.DECOMPOSED
        np.testing.assert_allclose(gj.get_inverse().array, np.linalg.inv(A), rtol=1e-10, atol=1e-12)
        np.testing.assert_allclose(gj.get_inverse().array @ A, np.eye(3), atol=1e-12)

    def test_inverse_returned_as_copy(self, worked_example):
        A, _, _ = worked_example
        gj = GaussJordan(Matrix.from_array(A))
        first = gj.get_inverse()
        first[0, 0] = 1e6
        assert gj.get_inverse()[0, 0] != 1e6

    def test_initialize_copies(self, worked_example):
        A, b, x = worked_example
        coefficients = Matrix.from_array(A)
        gj = GaussJordan(coefficients)
        coefficients.set_identity()
        np.testing.assert_allclose(gj.solve(column(b)).array.ravel(), x, rtol=1e-12)

    def test_static_invert(self, worked_example):
        A, _, _ = worked_example
        inverse = GaussJordan.invert(Matrix.from_array(A))
        np.testing.assert_allclose(inverse.array @ A, np.eye(3), atol=1e-12)
