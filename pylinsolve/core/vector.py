"""
Dense vector storage.

Vector is the 1-D counterpart of Matrix: a mutable sequence of float64
values in an owned contiguous numpy array, with the same ownership,
bounds-checking and IEEE-754 rules.
"""

from __future__ import annotations

import math
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinsolve.core.exceptions import ValidationError, DimensionError
from pylinsolve.core.matrix import Matrix, _check_index
from pylinsolve.core.validation import check_array, check_1d


class Vector:
    """A dense, mutable vector of doubles."""

    __slots__ = ('_data',)

    def __init__(self, size: int = 0):
        if size < 0:
            raise ValidationError(f"Vector size must be non-negative, got {size}")
        self._data: NDArray[np.float64] = np.zeros(size, dtype=np.float64)

    @classmethod
    def from_values(cls, values: ArrayLike) -> Vector:
        """Create a vector from a 1-D array-like. The data is copied."""
        arr = check_array(values, 'values')
        check_1d(arr, 'values')
        return cls._wrap(arr.copy())

    @classmethod
    def _wrap(cls, array: NDArray[np.float64]) -> Vector:
        vector = cls.__new__(cls)
        vector._data = np.ascontiguousarray(array, dtype=np.float64)
        return vector

    @property
    def size(self) -> int:
        return self._data.shape[0]

    @property
    def array(self) -> NDArray[np.float64]:
        """The backing storage (not a copy). Stale after resize()."""
        return self._data

    def __len__(self) -> int:
        return self._data.shape[0]

    def __getitem__(self, index: int) -> float:
        return float(self._data[_check_index(index, self.size, 'vector')])

    def __setitem__(self, index: int, value: float) -> None:
        self._data[_check_index(index, self.size, 'vector')] = value

    def __iter__(self):
        return iter(self._data.tolist())

    def resize(self, size: int) -> None:
        """Reallocate the vector with the given size. All values become zero."""
        if size < 0:
            raise ValidationError(f"Vector size must be non-negative, got {size}")
        self._data = np.zeros(size, dtype=np.float64)

    def clone(self) -> Vector:
        return Vector._wrap(self._data.copy())

    def assign(self, other: Vector) -> None:
        """Overwrite this vector with a copy of another, adopting its size."""
        if other.size == self.size:
            np.copyto(self._data, other._data)
        else:
            self._data = other._data.copy()

    def swap(self, index1: int, index2: int) -> None:
        i = _check_index(index1, self.size, 'vector')
        j = _check_index(index2, self.size, 'vector')
        self._data[i], self._data[j] = self._data[j], self._data[i]

    def to_array(self) -> NDArray[np.float64]:
        return self._data.copy()

    def to_column_matrix(self) -> Matrix:
        """Return a size x 1 matrix containing the vector."""
        return Matrix._wrap(self._data.reshape(-1, 1).copy())

    def to_row_matrix(self) -> Matrix:
        """Return a 1 x size matrix containing the vector."""
        return Matrix._wrap(self._data.reshape(1, -1).copy())

    def to_diagonal_matrix(self) -> Matrix:
        """Return a square matrix with the vector along its diagonal."""
        return Matrix._wrap(np.diag(self._data))

    # === Geometry ===

    def magnitude(self) -> float:
        return math.sqrt(float(self._data @ self._data))

    def normalize(self, new_length: float = 1.0) -> None:
        """Scale the vector in place to the given length."""
        self._data *= new_length / self.magnitude()

    def dot(self, other: Vector) -> float:
        self._check_same_size(other)
        return float(self._data @ other._data)

    # === In-place arithmetic ===

    def add(self, other: Vector) -> None:
        self._check_same_size(other)
        self._data += other._data

    def subtract(self, other: Vector) -> None:
        self._check_same_size(other)
        self._data -= other._data

    def multiply(self, factor: float) -> None:
        self._data *= factor

    def negate(self) -> None:
        np.negative(self._data, out=self._data)

    # === Operators ===

    def __add__(self, other: Vector) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same_size(other)
        return Vector._wrap(self._data + other._data)

    def __sub__(self, other: Vector) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same_size(other)
        return Vector._wrap(self._data - other._data)

    def __mul__(self, factor: float) -> Vector:
        if isinstance(factor, (Vector, Matrix, np.ndarray)):
            return NotImplemented
        return Vector._wrap(self._data * factor)

    __rmul__ = __mul__

    def __truediv__(self, factor: float) -> Vector:
        if isinstance(factor, (Vector, Matrix, np.ndarray)):
            return NotImplemented
        return Vector._wrap(self._data / factor)

    def __neg__(self) -> Vector:
        return Vector._wrap(-self._data)

    def equals(self, other: Vector, tolerance: float = 0.0) -> bool:
        if other is None or self.size != other.size:
            return False
        if tolerance == 0:
            return bool(np.array_equal(self._data, other._data))
        return bool(np.all(np.abs(self._data - other._data) <= tolerance))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Vector({self._data.tolist()!r})"

    def _check_same_size(self, other: Vector) -> None:
        if self.size != other.size:
            raise DimensionError(f"Vector sizes differ: {self.size} vs {other.size}")
