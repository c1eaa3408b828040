"""
Solving linear systems from plain arrays.

Public API:
    solve(A, b, ...) -> SystemSolution

The solve() function is the only entry point. It handles:
    - Input validation
    - Design construction
    - Method selection, including the SVD fallback for singular systems
    - Result wrapping

Example:
    >>> from pylinsolve.systems import solve
    >>> result = solve(A, b)
    >>> print(result.solution)
    >>> print(result.summary())
"""

from pylinsolve.systems.design import SystemDesign
from pylinsolve.systems.solution import SystemSolution, SystemParams
from pylinsolve.systems.solvers import solve

__all__ = [
    "solve",
    "SystemDesign",
    "SystemSolution",
    "SystemParams",
]
