"""
Linear system design.

SystemDesign holds a validated coefficient matrix A and right-hand side b
for A·x = b. It remembers whether b was given as a vector so the solution
can be returned in the same shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinsolve.core.matrix import Matrix
from pylinsolve.core.validation import (
    check_array,
    check_2d,
    check_finite,
    check_consistent_length,
)
from pylinsolve.core.exceptions import ValidationError, DimensionError


@dataclass(frozen=True)
class SystemDesign:
    """
    Validated coefficient matrix and right-hand sides.

    Immutable after construction. Values are always stored as a 2-D array
    (one column per right-hand side).

    Construction:
        SystemDesign.from_arrays(A, b)      # b may be (n,) or (n, k)
    """
    _A: NDArray[np.floating[Any]]
    _b: NDArray[np.floating[Any]]
    _is_vector: bool

    @classmethod
    def from_arrays(cls, coefficients: ArrayLike, values: ArrayLike) -> SystemDesign:
        """
        Build a design from array-likes.

        Raises:
            ValidationError: If inputs are non-numeric, non-finite or empty
            DimensionError: If A is not 2-D, b is not 1-D or 2-D, or the
                row counts differ
        """
        A = check_array(coefficients, 'coefficients')
        b = check_array(values, 'values')

        check_2d(A, 'coefficients')
        is_vector = b.ndim == 1
        if is_vector:
            b = b.reshape(-1, 1)
        elif b.ndim != 2:
            raise DimensionError(
                f"values: expected 1D or 2D array, got {b.ndim}D with shape {b.shape}"
            )

        if A.shape[0] == 0 or A.shape[1] == 0:
            raise ValidationError(f"coefficients: must not be empty, got shape {A.shape}")
        check_finite(A, 'coefficients')
        check_finite(b, 'values')
        check_consistent_length(A, b, names=('coefficients', 'values'))

        # Own the data so later mutation by the caller cannot leak in
        return cls(_A=A.copy(), _b=b.copy(), _is_vector=is_vector)

    # === Properties ===

    @property
    def A(self) -> NDArray[np.floating[Any]]:
        """Coefficient matrix (n_rows x n_cols)."""
        return self._A

    @property
    def b(self) -> NDArray[np.floating[Any]]:
        """Right-hand sides (n_rows x k)."""
        return self._b

    @property
    def n_rows(self) -> int:
        return self._A.shape[0]

    @property
    def n_cols(self) -> int:
        return self._A.shape[1]

    @property
    def n_rhs(self) -> int:
        """Number of right-hand sides solved simultaneously."""
        return self._b.shape[1]

    @property
    def is_square(self) -> bool:
        return self._A.shape[0] == self._A.shape[1]

    @property
    def is_vector(self) -> bool:
        """True if values was given as a 1-D array."""
        return self._is_vector

    def coefficient_matrix(self) -> Matrix:
        """A fresh Matrix copy of A."""
        return Matrix.from_array(self._A)

    def value_matrix(self) -> Matrix:
        """A fresh Matrix copy of b."""
        return Matrix.from_array(self._b)
