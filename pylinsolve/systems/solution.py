"""
Linear system solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pylinsolve.core.result import Result

if TYPE_CHECKING:
    from pylinsolve.systems.design import SystemDesign


@dataclass(frozen=True)
class SystemParams:
    """
    Parameter payload for a linear system solve.

    This is the immutable data computed by backends. solution and
    residuals are always 2-D here; SystemSolution reshapes them.
    """
    solution: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    residual_norm: float
    rank: int
    determinant: float | None = None


@dataclass
class SystemSolution:
    """
    User-facing results of solve().

    Wraps the backend Result. solution and residuals have the same
    dimensionality as the values passed in: 1-D for a single right-hand
    side given as a vector, 2-D otherwise.
    """
    _result: Result[SystemParams]
    _design: 'SystemDesign'

    def _shaped(self, array: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        return array.ravel() if self._design.is_vector else array

    @property
    def solution(self) -> NDArray[np.floating[Any]]:
        return self._shaped(self._result.params.solution)

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        """b - A·x"""
        return self._shaped(self._result.params.residuals)

    @property
    def residual_norm(self) -> float:
        """Euclidean (Frobenius, for several right-hand sides) norm of the residuals."""
        return self._result.params.residual_norm

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def determinant(self) -> float | None:
        """det(A); only available when solved by LU decomposition."""
        return self._result.params.determinant

    @property
    def method(self) -> str:
        return self._result.info['method']

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Generate a plain-text summary of the solve."""
        design = self._design
        lines = [
            "Linear System Solution",
            "=" * 60,
            f"Equations: {design.n_rows}",
            f"Unknowns: {design.n_cols}",
            f"Right-hand sides: {design.n_rhs}",
            f"Method: {self.method}",
            f"Rank: {self.rank}",
            f"Residual norm: {self.residual_norm:.6e}",
        ]
        if self.determinant is not None:
            lines.append(f"Determinant: {self.determinant:.6e}")

        lines.extend([
            "",
            "Solution:",
            "-" * 60,
        ])
        solution = self._result.params.solution
        for i, row in enumerate(solution):
            values = "  ".join(f"{x:14.6f}" for x in row)
            lines.append(f"  x[{i}]: {values}")
        lines.append("-" * 60)

        for w in self.warnings:
            lines.append(f"Warning: {w}")
        lines.append(f"Backend: {self.backend_name}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"SystemSolution(n_rows={self._design.n_rows}, n_cols={self._design.n_cols}, "
            f"method={self.method!r}, rank={self.rank}, "
            f"residual_norm={self.residual_norm:.4e})"
        )
