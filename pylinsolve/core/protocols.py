"""
Core protocols for pylinsolve.

These define structural interfaces that solver implementations satisfy.
We use Protocol (structural typing) rather than ABC (nominal typing) so the
four decompositions stay independent of each other and share nothing but
the Matrix/Vector storage layer.
"""

from __future__ import annotations

from typing import Protocol, TypeVar, TYPE_CHECKING, runtime_checkable

if TYPE_CHECKING:
    from pylinsolve.core.matrix import Matrix
    from pylinsolve.core.result import Result

# Type variables for generic payloads
P = TypeVar('P')  # Parameter payload type
D = TypeVar('D')  # Design type


@runtime_checkable
class LinearEquationSolver(Protocol):
    """
    A class that can solve systems of linear equations A·x = b.

    Implemented by GaussJordan, LUDecomposition, QRDecomposition and
    SVDecomposition. The coefficient matrix A is supplied once through
    initialize() (or the constructor); any number of value matrices can
    then be solved against it.
    """

    def initialize(self, coefficients: Matrix) -> None:
        """
        (Re)initialize the solver with a coefficient matrix.

        Replaces all cached state. Values previously returned by the
        solver remain valid only if they were independent copies.
        """
        ...

    def solve(self, values: Matrix, try_in_place: bool = False) -> Matrix:
        """
        Solve A·X = values, one column of X per column of values.

        Args:
            values: Right-hand side matrix with the same height as A
            try_in_place: If True, the solver may overwrite `values` with
                the solution and return it. Solvers that cannot honour the
                request return a new matrix.
        """
        ...

    def get_inverse(self) -> Matrix:
        """Return the inverse (or pseudoinverse) of the coefficient matrix."""
        ...


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for computational backends of the high-level solve() API.

    Each backend knows how to take a SystemDesign and produce a parameter
    payload. Backends are stateless; a fresh decomposition object is built
    per call.

    Type Parameters:
        D: The design type this backend accepts
        P: The parameter payload type this backend produces
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Convention: '{device}_{algorithm}'
        Examples: 'cpu_lu', 'cpu_svd', 'cpu_gauss_jordan'
        """
        ...

    def solve(self, design: D) -> Result[P]:
        """
        Execute the computation.

        Args:
            design: Validated system design

        Returns:
            Result envelope containing the payload
        """
        ...
