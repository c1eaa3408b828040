"""
Input validation utilities for pylinsolve.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent. Validation happens at the call
boundary; nothing is partially applied before a check fails.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinsolve.core.exceptions import ValidationError, DimensionError

if TYPE_CHECKING:
    from pylinsolve.core.matrix import Matrix


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.float64]:
    """
    Validate and convert input to a float64 numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with float64 dtype

    Raises:
        ValidationError: If input is None or cannot be converted to a numeric array
    """
    if array is None:
        raise ValidationError(f"{name}: must not be None")

    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    # Reject non-numeric dtypes (strings, bytes, datetime, etc.)
    if not np.issubdtype(result.dtype, np.number) or np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected real numeric data"
        )

    return result.astype(np.float64, copy=False)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_matrix(matrix: Matrix | None, name: str) -> None:
    """
    Verify an argument is a Matrix (and not None).

    Raises:
        ValidationError: If matrix is None or not a Matrix
    """
    from pylinsolve.core.matrix import Matrix

    if matrix is None:
        raise ValidationError(f"{name}: must not be None")
    if not isinstance(matrix, Matrix):
        raise ValidationError(
            f"{name}: expected Matrix, got {type(matrix).__name__}"
        )


def check_square(matrix: Matrix, name: str) -> None:
    """
    Verify a matrix is square.

    Raises:
        ValidationError: If height != width
    """
    if not matrix.is_square:
        raise ValidationError(
            f"{name}: must be square, got {matrix.height}x{matrix.width}"
        )


def check_not_empty(matrix: Matrix, name: str) -> None:
    """
    Verify a matrix has at least one row and one column.

    Raises:
        ValidationError: If either dimension is zero
    """
    if matrix.height == 0 or matrix.width == 0:
        raise ValidationError(
            f"{name}: must not be empty, got {matrix.height}x{matrix.width}"
        )


def check_same_height(values: Matrix, height: int, name: str) -> None:
    """
    Verify a values matrix has the same height as the coefficient matrix.

    Raises:
        DimensionError: If heights differ
    """
    if values.height != height:
        raise DimensionError(
            f"{name}: must have the same height as the coefficient matrix "
            f"(expected {height}, got {values.height})"
        )


def check_same_shape(first: Matrix, second: Matrix, names: tuple[str, str]) -> None:
    """
    Verify two matrices have identical dimensions.

    Raises:
        DimensionError: If shapes differ
    """
    if first.shape != second.shape:
        raise DimensionError(
            f"{names[0]} and {names[1]} must have the same size "
            f"({names[0]}={first.height}x{first.width}, "
            f"{names[1]}={second.height}x{second.width})"
        )
