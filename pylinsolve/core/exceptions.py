"""
Exception hierarchy for pylinsolve.

All exceptions inherit from PyLinSolveError to allow catching any
library-specific error. Solver-specific failures inherit from the
appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - SingularMatrixError is its own class so callers can catch it and
      fall back to a rank-revealing solver (SVD); it is also a
      ValidationError, since a singular matrix is an invalid argument
"""


class PyLinSolveError(Exception):
    """Base exception for all pylinsolve errors."""
    pass


class ValidationError(PyLinSolveError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks: missing
    arguments, non-square coefficient matrices where squareness is
    required, empty matrices.
    """
    pass


class DimensionError(ValidationError):
    """
    Matrix dimensions are incorrect or inconsistent.

    Raised when a values matrix does not have the same height as the
    coefficient matrix, or when update vectors have the wrong length.
    """
    pass


class NumericalError(PyLinSolveError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError, ValidationError):
    """
    Matrix is singular.

    Both a numerical failure and a rejected argument: a caller guarding
    against invalid input with `except ValidationError` also catches it.

    Raised when elimination or decomposition cannot proceed because a
    pivot or diagonal entry is exactly zero.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        pivot_index: Row/column at which the zero pivot was found, if known
        rank: Numerical rank, if computed
        expected_rank: Expected rank (typically the matrix order)
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        pivot_index: int | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.pivot_index = pivot_index
        self.rank = rank
        self.expected_rank = expected_rank


class ConvergenceError(PyLinSolveError):
    """
    Iterative algorithm failed to converge.

    Raised when the SVD diagonalization exceeds its per-singular-value
    iteration cap. The decomposition that raised it is invalidated.

    Attributes:
        iterations: Number of iterations completed
        index: Index of the singular value that failed to converge
        reason: Why convergence failed (e.g., 'max_iterations')
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        index: int | None = None,
        reason: str | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.index = index
        self.reason = reason


class NotInitializedError(PyLinSolveError):
    """
    Operation requires a decomposed matrix but none has been supplied.

    Raised when solve(), get_inverse() and friends are called on a solver
    that was constructed without a matrix, or whose last decomposition
    failed.
    """
    pass
