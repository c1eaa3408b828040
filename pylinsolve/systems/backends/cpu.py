"""
CPU backends for the high-level solve() API.

Each backend wraps one decomposition from pylinsolve.decomposition, times
its phases, computes residuals and packs everything into a Result.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

from pylinsolve.core.result import Result
from pylinsolve.core.compute.timing import Timer
from pylinsolve.decomposition import (
    GaussJordan,
    LUDecomposition,
    QRDecomposition,
    SVDecomposition,
)
from pylinsolve.systems.design import SystemDesign
from pylinsolve.systems.solution import SystemParams


def _residuals(design: SystemDesign, solution: NDArray) -> tuple[NDArray, float]:
    residuals = design.b - design.A @ solution
    return residuals, float(np.linalg.norm(residuals))


class CPUGaussJordanBackend:
    """
    CPU backend using Gauss-Jordan elimination with full pivoting.

    Raises SingularMatrixError for a singular system.
    """

    @property
    def name(self) -> str:
        return 'cpu_gauss_jordan'

    def solve(self, design: SystemDesign) -> Result[SystemParams]:
        timer = Timer()
        timer.start()

        with timer.section('solve'):
            solver = GaussJordan(design.coefficient_matrix())
            solution = solver.solve(design.value_matrix(), try_in_place=True).array

        with timer.section('residuals'):
            residuals, norm = _residuals(design, solution)

        timer.stop()

        params = SystemParams(
            solution=solution,
            residuals=residuals,
            residual_norm=norm,
            rank=design.n_cols,
        )
        return Result(
            params=params,
            info={'method': 'gauss_jordan'},
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )


class CPULUBackend:
    """
    CPU backend using LU decomposition with scaled partial pivoting.

    Reports the determinant. With refine=True, one step of iterative
    refinement is applied to the solution.

    Zero pivots replaced by the sentinel are listed in
    info['substituted_pivots'] and reported as warnings.
    """

    def __init__(self, refine: bool = False):
        self._refine = refine

    @property
    def name(self) -> str:
        return 'cpu_lu'

    def solve(self, design: SystemDesign) -> Result[SystemParams]:
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []

        with timer.section('decompose'):
            A = design.coefficient_matrix()
            solver = LUDecomposition(A)
            solver.ensure_decomposition()

        with timer.section('solve'):
            values = design.value_matrix()
            solution = solver.solve(values)

        if self._refine:
            with timer.section('refine'):
                solver.refine_solution(values, solution)

        with timer.section('residuals'):
            residuals, norm = _residuals(design, solution.array)

        timer.stop()

        substituted = solver.substituted_pivots
        if substituted:
            warnings_list.append(
                f"Zero pivot(s) in column(s) {list(substituted)} were replaced; "
                f"the matrix is singular or nearly so"
            )

        params = SystemParams(
            solution=solution.array,
            residuals=residuals,
            residual_norm=norm,
            rank=design.n_cols - len(substituted),
            determinant=solver.get_determinant(),
        )
        info: dict[str, Any] = {
            'method': 'lu',
            'refined': self._refine,
            'substituted_pivots': substituted,
        }
        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )


class CPUQRBackend:
    """
    CPU backend using Householder QR decomposition.

    Raises SingularMatrixError for a singular system.
    """

    @property
    def name(self) -> str:
        return 'cpu_qr'

    def solve(self, design: SystemDesign) -> Result[SystemParams]:
        timer = Timer()
        timer.start()

        with timer.section('decompose'):
            solver = QRDecomposition(design.coefficient_matrix())

        with timer.section('solve'):
            solution = solver.solve(design.value_matrix()).array

        with timer.section('residuals'):
            residuals, norm = _residuals(design, solution)

        timer.stop()

        params = SystemParams(
            solution=solution,
            residuals=residuals,
            residual_norm=norm,
            rank=design.n_cols,
        )
        return Result(
            params=params,
            info={'method': 'qr'},
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )


class CPUSVDBackend:
    """
    CPU backend using the singular value decomposition.

    Works for any shape and rank; returns the minimum-norm least-squares
    solution. Rank deficiency is reported as a warning, not an error.
    """

    @property
    def name(self) -> str:
        return 'cpu_svd'

    def solve(self, design: SystemDesign) -> Result[SystemParams]:
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []

        with timer.section('decompose'):
            solver = SVDecomposition(design.coefficient_matrix())

        with timer.section('solve'):
            solution = solver.solve(design.value_matrix()).array

        with timer.section('residuals'):
            residuals, norm = _residuals(design, solution)

        timer.stop()

        rank = solver.get_rank()
        if rank < min(design.n_rows, design.n_cols):
            warnings_list.append(
                f"Coefficient matrix is rank deficient (rank {rank} of "
                f"{min(design.n_rows, design.n_cols)}); returned the "
                f"minimum-norm least-squares solution"
            )

        params = SystemParams(
            solution=solution,
            residuals=residuals,
            residual_norm=norm,
            rank=rank,
        )
        info: dict[str, Any] = {
            'method': 'svd',
            'singular_values': solver.get_singular_values().to_array(),
            'threshold': solver.default_threshold,
            'inverse_condition': solver.get_inverse_condition(),
        }
        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
