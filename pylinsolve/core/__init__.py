"""
Core infrastructure for pylinsolve.

This module provides the storage types, shared abstractions and utilities
used by the decompositions and by the high-level systems API.

Key components:
    matrix / vector: Dense float64 storage
    protocols: LinearEquationSolver, Backend protocols
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing, numerical constants, linear algebra kernels
"""

from pylinsolve.core.protocols import LinearEquationSolver, Backend
from pylinsolve.core.result import Result
from pylinsolve.core.matrix import Matrix
from pylinsolve.core.vector import Vector
from pylinsolve.core.exceptions import (
    PyLinSolveError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    ConvergenceError,
    NotInitializedError,
)

__all__ = [
    # Storage
    "Matrix",
    "Vector",
    # Protocols
    "LinearEquationSolver",
    "Backend",
    # Result
    "Result",
    # Exceptions
    "PyLinSolveError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "ConvergenceError",
    "NotInitializedError",
]
