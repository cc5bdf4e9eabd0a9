# array_backend/utils.py
"""
Canonicalization of parameter and observation arrays.

Every function that returns an array accepts `copy: bool = True`. When
`copy=True` the returned array is guaranteed to be a different object from the
input, so distributions never alias caller-owned parameter arrays (a caller
mutating its array afterwards must not bypass validation).

Shape problems raise :class:`~probdist.exceptions.DimensionMismatchError`, which
is a ``ValueError``.
"""

from __future__ import annotations

import numpy as np
from typing import Any, Tuple

from ..custom_types import Array, ArrayLike
from ..exceptions import DimensionMismatchError


def _as_array(x: Any, dtype: Any = None) -> Array:
    try:
        return np.asarray(x, dtype=dtype)
    except Exception as e:
        raise TypeError(
            f"Could not convert input to array.\n"
            f"Input type: {type(x).__name__}\n"
            f"Input value: {repr(x)}\n"
            f"Original error: {e}"
        ) from e


def _is_numpy_scalar(x: Any) -> bool:
    """Return true if object is a numpy generic or Python scalar"""
    return np.isscalar(x) or isinstance(x, np.generic)


def _ensure_real_scalar(x: Any) -> float:
    """
    Return a Python float for inputs that contain a single real value.

    Accepts:
      - Python scalars (int, float)
      - numpy scalar types (np.float64(...), np.int32(...))
      - 0-D numpy arrays (shape == ())

    Raises:
      DimensionMismatchError if input contains more than one element.
      TypeError if input is complex-valued.
    """
    if _is_numpy_scalar(x):
        if np.iscomplexobj(x):
            raise TypeError(f"_ensure_real_scalar: input is complex-valued: {x!r}")
        return float(x)

    arr = _as_array(x)
    if arr.size != 1 or arr.ndim > 0:
        raise DimensionMismatchError(
            f"_ensure_real_scalar: input must be a single value; got size={arr.size}, shape={arr.shape}"
        )
    if np.iscomplexobj(arr):
        raise TypeError(f"_ensure_real_scalar: input is complex-valued (shape={arr.shape}).")
    return float(arr.item())


def _ensure_integer(x: Any, name: str = "value") -> int:
    """Return a Python int for integral scalar input (``3`` or ``3.0``).

    Raises:
      TypeError if the value is not integral.
    """
    if isinstance(x, (bool, np.bool_)):
        raise TypeError(f"{name} must be an integer, got bool.")
    if isinstance(x, (int, np.integer)):
        return int(x)
    value = _ensure_real_scalar(x)
    if not np.isfinite(value) or value != np.floor(value):
        raise TypeError(f"{name} must be an integer. Got {x!r}.")
    return int(value)


def _ensure_vector(x: ArrayLike, *, as_column: bool = False,
                   length: int | None = None, copy: bool = True) -> Array:
    """
    Ensure input is returned as a 1-D float vector (canonical shape (n,)) by default.
    If as_column=True, return shape (n,1).

    Accepts:
      - 1D arrays -> (n,) (or (n,1) if as_column)
      - 2D arrays shaped (n,1) or (1,n) -> converted appropriately
      - 0D scalar -> treated as length-1 vector (1,) or (1,1) if as_column

    Raises:
      DimensionMismatchError for incompatible shapes (ndim > 2 or 2D with both dims >1)
    """
    arr = _as_array(x, dtype=float)

    if arr.ndim == 0:
        v = arr.reshape((1,))
        out = v.reshape((-1, 1)) if as_column else v
    elif arr.ndim == 1:
        out = arr.reshape((-1, 1)) if as_column else arr
    elif arr.ndim == 2:
        num_rows, num_cols = arr.shape
        if num_rows == 1 or num_cols == 1:
            v = np.ravel(arr)
            out = v.reshape((-1, 1)) if as_column else v
        else:
            raise DimensionMismatchError(
                f"_ensure_vector: 2D input has shape {arr.shape}, which is not a vector (expected (n,1) or (1,n))."
            )
    else:
        raise DimensionMismatchError(f"_ensure_vector: input has too many dimensions (ndim={arr.ndim}).")

    if length is not None and out.size != length:
        raise DimensionMismatchError(f"_ensure_vector: required length {length}. Got {out.size}.")

    return out.copy() if copy else out


def _ensure_matrix(x: ArrayLike, *, as_row_matrix: bool = False,
                   num_rows: int | None = None, num_cols: int | None = None,
                   copy: bool = True) -> Array:
    """ Ensure input is a 2D float matrix

    - Scalar inputs (0D) become arrays of shape (1, 1)
    - 1D inputs become:
        - shape (1, n) if as_row_matrix is True
        - shape (n, 1) if as_row_matrix is False
    - 2D inputs are passed through as is
    - Other shapes raise an error
    """
    arr = _as_array(x, dtype=float)

    if arr.ndim == 2:
        out = arr
    elif arr.ndim == 1:
        out = arr.reshape(1, -1) if as_row_matrix else arr.reshape(-1, 1)
    elif arr.ndim == 0:
        out = arr.reshape(1, 1)
    else:
        raise DimensionMismatchError(f"_ensure_matrix: Input cannot be converted to a 2D matrix. Shape {arr.shape}")

    if num_rows is not None and out.shape[0] != num_rows:
        raise DimensionMismatchError(f"_ensure_matrix: Required {num_rows} rows. Got {out.shape[0]}.")

    if num_cols is not None and out.shape[1] != num_cols:
        raise DimensionMismatchError(f"_ensure_matrix: Required {num_cols} columns. Got {out.shape[1]}.")

    return out.copy() if copy else out


def _ensure_square_matrix(x: ArrayLike, n: int | None = None, *, copy: bool = True) -> Array:
    """Ensure input is a 2d square matrix"""
    matrix = _ensure_matrix(x, copy=copy)
    num_rows, num_cols = matrix.shape
    if num_rows != num_cols:
        raise DimensionMismatchError(f"Array is not square. Shape {matrix.shape}")

    if n is not None and matrix.shape[0] != n:
        raise DimensionMismatchError(f"Required matrix dimension {n}. Got {matrix.shape[0]}.")

    return matrix


def _ensure_batch_array(x: ArrayLike, value_shape: Tuple[int, ...],
                        *, copy: bool = True) -> Array:
    """Ensure `x` has a leading batch axis and the given per-value shape.

    An input with exactly ``len(value_shape)`` axes is a single value and is
    expanded to a batch of one. Anything else must already be shaped
    ``(B, *value_shape)``.

    Returns:
        Array of shape (B, *value_shape).

    Raises:
        DimensionMismatchError: If the per-value shape does not match.
    """
    arr = _as_array(x, dtype=float)

    if arr.ndim == len(value_shape):
        arr = arr[np.newaxis, ...]

    if arr.shape[1:] != tuple(value_shape):
        raise DimensionMismatchError(
            f"Batch array with value shape {arr.shape[1:]} does not match required value shape {tuple(value_shape)}."
        )

    return arr.copy() if copy else arr
