"""
Shared types and helpers for the decomposition classes.
"""

from __future__ import annotations

from enum import Enum

from pylinsolve.core.exceptions import NotInitializedError


class DecompositionState(Enum):
    """
    Lifecycle of a decomposition object.

    UNINITIALIZED: no matrix supplied yet, or the last decomposition failed
    INITIALIZED: a private copy of the matrix is held, not yet factored
    DECOMPOSED: factorization computed and cached
    """
    UNINITIALIZED = 'uninitialized'
    INITIALIZED = 'initialized'
    DECOMPOSED = 'decomposed'


def require_initialized(state: DecompositionState, solver_name: str) -> None:
    """
    Raise NotInitializedError unless a matrix has been supplied.

    Args:
        state: Current state of the solver
        solver_name: Class name for the error message
    """
    if state is DecompositionState.UNINITIALIZED:
        raise NotInitializedError(
            f"{solver_name}: no matrix has been decomposed yet; "
            f"pass one to the constructor or call initialize()"
        )
