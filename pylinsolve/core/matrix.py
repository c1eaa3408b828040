"""
Dense matrix storage.

Matrix is a mutable, row-major grid of float64 values backed by a single
contiguous numpy array that the Matrix owns exclusively. The decompositions
work on private clones of the matrices they are given, so a caller's matrix
is only ever mutated when an in-place operation is explicitly requested.

Indexing is bounds-checked: negative indices are NOT wrapped as they would
be for a raw ndarray, and out-of-range indices raise IndexError. Arithmetic
follows IEEE-754 semantics; NaN and infinity propagate without checks.

Usage:
    m = Matrix.from_array([[2, 3, 4], [3, 4, 5], [1, -2, 2]])
    m[0, 1]             # 3.0
    m.swap_rows(0, 2)
    inverse = GaussJordan.invert(m)
"""

from __future__ import annotations

import operator
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinsolve.core.exceptions import ValidationError, DimensionError
from pylinsolve.core.validation import check_array, check_2d

if TYPE_CHECKING:
    from pylinsolve.core.vector import Vector


def _check_index(index: Any, limit: int, what: str) -> int:
    """Convert an index to int and verify 0 <= index < limit."""
    try:
        i = operator.index(index)
    except TypeError as e:
        raise TypeError(f"{what} index must be an integer, got {type(index).__name__}") from e
    if i < 0 or i >= limit:
        raise IndexError(f"{what} index {i} out of range [0, {limit})")
    return i


class Matrix:
    """
    A dense, mutable, row-major matrix of doubles.

    Attributes:
        height: Number of rows
        width: Number of columns
        array: The backing ndarray. The reference stays valid until the
            matrix is resized.
    """

    __slots__ = ('_data',)

    def __init__(self, height: int = 0, width: int = 0):
        if height < 0 or width < 0:
            raise ValidationError(
                f"Matrix dimensions must be non-negative, got {height}x{width}"
            )
        self._data: NDArray[np.float64] = np.zeros((height, width), dtype=np.float64)

    # === Construction ===

    @classmethod
    def from_array(cls, data: ArrayLike) -> Matrix:
        """Create a matrix from a 2-D array-like. The data is copied."""
        arr = check_array(data, 'data')
        check_2d(arr, 'data')
        return cls._wrap(np.array(arr, dtype=np.float64, order='C', copy=True))

    @classmethod
    def from_values(cls, values: ArrayLike, width: int) -> Matrix:
        """
        Create a matrix from a flat, row-major sequence of values.

        Args:
            values: Flat sequence whose length is a multiple of width
            width: Number of columns
        """
        arr = check_array(values, 'values').ravel()
        if width <= 0:
            if arr.size != 0:
                raise DimensionError(f"width must be positive for {arr.size} values")
            return cls(0, 0)
        if arr.size % width != 0:
            raise DimensionError(
                f"values: length {arr.size} is not a multiple of width {width}"
            )
        return cls._wrap(np.array(arr.reshape(-1, width), dtype=np.float64, copy=True))

    @classmethod
    def identity(cls, size: int) -> Matrix:
        """Create a size x size identity matrix."""
        if size < 0:
            raise ValidationError(f"size must be non-negative, got {size}")
        return cls._wrap(np.eye(size, dtype=np.float64))

    @classmethod
    def _wrap(cls, array: NDArray[np.float64]) -> Matrix:
        """Take ownership of an ndarray without copying."""
        matrix = cls.__new__(cls)
        matrix._data = np.ascontiguousarray(array, dtype=np.float64)
        return matrix

    # === Properties ===

    @property
    def height(self) -> int:
        return self._data.shape[0]

    @property
    def width(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return (self._data.shape[0], self._data.shape[1])

    @property
    def is_square(self) -> bool:
        return self._data.shape[0] == self._data.shape[1]

    @property
    def array(self) -> NDArray[np.float64]:
        """The backing storage (not a copy)."""
        return self._data

    # === Element access ===

    def _cell(self, key: Any) -> tuple[int, int]:
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("Matrix indices must be a (row, column) pair")
        return (
            _check_index(key[0], self.height, 'row'),
            _check_index(key[1], self.width, 'column'),
        )

    def __getitem__(self, key: tuple[int, int]) -> float:
        i, j = self._cell(key)
        return float(self._data[i, j])

    def __setitem__(self, key: tuple[int, int], value: float) -> None:
        i, j = self._cell(key)
        self._data[i, j] = value

    # === Storage management ===

    def resize(self, height: int, width: int) -> None:
        """Reallocate the matrix with the given size. All values become zero."""
        if height < 0 or width < 0:
            raise ValidationError(
                f"Matrix dimensions must be non-negative, got {height}x{width}"
            )
        self._data = np.zeros((height, width), dtype=np.float64)

    def clone(self) -> Matrix:
        """Return a deep copy of the matrix."""
        return Matrix._wrap(self._data.copy())

    def assign(self, other: Matrix) -> None:
        """Overwrite this matrix with a copy of another, adopting its size."""
        if other.shape == self.shape:
            np.copyto(self._data, other._data)
        else:
            self._data = other._data.copy()

    def to_array(self) -> NDArray[np.float64]:
        """Return a copy of the data as a 2-D ndarray."""
        return self._data.copy()

    # === Row and column operations ===

    def get_row(self, row: int) -> NDArray[np.float64]:
        """Return a copy of a row."""
        row = _check_index(row, self.height, 'row')
        return self._data[row].copy()

    def get_column(self, column: int) -> NDArray[np.float64]:
        """Return a copy of a column."""
        column = _check_index(column, self.width, 'column')
        return self._data[:, column].copy()

    def set_row(self, row: int, values: ArrayLike) -> None:
        """Copy values into a row. The buffer length must equal the width."""
        row = _check_index(row, self.height, 'row')
        arr = _as_buffer(values, self.width, 'values')
        self._data[row] = arr

    def set_column(self, column: int, values: ArrayLike) -> None:
        """Copy values into a column. The buffer length must equal the height."""
        column = _check_index(column, self.width, 'column')
        arr = _as_buffer(values, self.height, 'values')
        self._data[:, column] = arr

    def swap_rows(self, row1: int, row2: int) -> None:
        row1 = _check_index(row1, self.height, 'row')
        row2 = _check_index(row2, self.height, 'row')
        if row1 != row2:
            self._data[[row1, row2]] = self._data[[row2, row1]]

    def swap_columns(self, column1: int, column2: int) -> None:
        column1 = _check_index(column1, self.width, 'column')
        column2 = _check_index(column2, self.width, 'column')
        if column1 != column2:
            self._data[:, [column1, column2]] = self._data[:, [column2, column1]]

    def swap(self, cell1: tuple[int, int], cell2: tuple[int, int]) -> None:
        """Exchange the values of two cells."""
        i1, j1 = self._cell(cell1)
        i2, j2 = self._cell(cell2)
        self._data[i1, j1], self._data[i2, j2] = self._data[i2, j2], self._data[i1, j1]

    def scale_row(self, row: int, factor: float) -> None:
        row = _check_index(row, self.height, 'row')
        self._data[row] *= factor

    def scale_column(self, column: int, factor: float) -> None:
        column = _check_index(column, self.width, 'column')
        self._data[:, column] *= factor

    def set_identity(self) -> None:
        """Overwrite a square matrix with the identity matrix."""
        if not self.is_square:
            raise ValidationError(
                f"Matrix must be square to become an identity matrix, got {self.height}x{self.width}"
            )
        self._data[:] = 0.0
        np.fill_diagonal(self._data, 1.0)

    def transpose(self) -> Matrix:
        """Return the transpose as a new matrix."""
        return Matrix._wrap(self._data.T.copy())

    # === In-place arithmetic ===

    def add(self, other: Matrix) -> None:
        self._check_same_shape(other)
        self._data += other._data

    def subtract(self, other: Matrix) -> None:
        self._check_same_shape(other)
        self._data -= other._data

    def multiply(self, factor: float) -> None:
        self._data *= factor

    # === Operators ===

    def __matmul__(self, other: Matrix | Vector) -> Matrix | Vector:
        from pylinsolve.core.vector import Vector

        if isinstance(other, Vector):
            if self.width != other.size:
                raise DimensionError(
                    f"Cannot multiply {self.height}x{self.width} matrix by vector of size {other.size}"
                )
            return Vector._wrap(self._data @ other.array)
        if isinstance(other, Matrix):
            if self.width != other.height:
                raise DimensionError(
                    f"Cannot multiply {self.height}x{self.width} matrix by "
                    f"{other.height}x{other.width} matrix"
                )
            return Matrix._wrap(self._data @ other._data)
        return NotImplemented

    def __add__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        self._check_same_shape(other)
        return Matrix._wrap(self._data + other._data)

    def __sub__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        self._check_same_shape(other)
        return Matrix._wrap(self._data - other._data)

    def __mul__(self, factor: float) -> Matrix:
        if isinstance(factor, (Matrix, np.ndarray)):
            return NotImplemented
        return Matrix._wrap(self._data * factor)

    __rmul__ = __mul__

    def __truediv__(self, factor: float) -> Matrix:
        if isinstance(factor, (Matrix, np.ndarray)):
            return NotImplemented
        return Matrix._wrap(self._data / factor)

    def __neg__(self) -> Matrix:
        return Matrix._wrap(-self._data)

    def equals(self, other: Matrix, tolerance: float = 0.0) -> bool:
        """
        Check whether two matrices have the same size and every pair of
        corresponding values differs by at most `tolerance`.
        """
        if other is None or self.shape != other.shape:
            return False
        if tolerance == 0:
            return bool(np.array_equal(self._data, other._data))
        return bool(np.all(np.abs(self._data - other._data) <= tolerance))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Matrix({self.height}x{self.width}, {self._data.tolist()!r})"

    def _check_same_shape(self, other: Matrix) -> None:
        if self.shape != other.shape:
            raise DimensionError(
                f"Matrix sizes differ: {self.height}x{self.width} vs {other.height}x{other.width}"
            )


def _as_buffer(values: ArrayLike, length: int, name: str) -> NDArray[np.float64]:
    """Convert an external buffer to a 1-D float64 array of the given length."""
    from pylinsolve.core.vector import Vector

    if isinstance(values, Vector):
        values = values.array
    arr = check_array(values, name).ravel()
    if arr.size != length:
        raise DimensionError(f"{name}: expected {length} values, got {arr.size}")
    return arr
