from collections.abc import Callable
from typing import Any

from numpy.typing import NDArray

import numpy as np

from ..parallel import parallel_for


def _as_2d(x: NDArray) -> NDArray:
    """Converts input to a 2-D float array.

    A 0-D input becomes (1, 1) and a 1-D array of length n becomes (n, 1),
    i.e. n one-dimensional observations. 2-D arrays are kept unchanged except
    for dtype casting to float.

    Args:
        x (NDArray): Input array of shape (), (n,) or (n, d).

    Returns:
        NDArray: Float array of shape (n, d).

    Raises:
        ValueError: If the input has more than two dimensions.
    """
    x = np.asarray(x, dtype=float)
    if x.ndim == 0:
        return x.reshape(1, 1)
    if x.ndim == 1:
        return x.reshape(-1, 1)
    if x.ndim == 2:
        return x
    raise ValueError(f"expected at most 2 dimensions, got shape {x.shape}.")


def _as_float_array(values: Any) -> NDArray[np.floating]:
    """Converts scalar or array-like input to a float ndarray (0-D for scalars)."""
    return np.asarray(values, dtype=float)


def _scalar_or_array(values: Any, out: NDArray) -> Any:
    """Returns ``out`` as a Python float when ``values`` was a scalar.

    Density and CDF evaluation is vectorized over numpy arrays; callers who pass
    a plain number get a plain number back.
    """
    out = np.asarray(out, dtype=float)
    if np.ndim(values) == 0:
        return float(out.reshape(()))
    return out


def _is_integer_valued(x: NDArray) -> NDArray[np.bool_]:
    """Elementwise check that finite values carry no fractional part."""
    return np.isfinite(x) & (np.floor(x) == x)


def _clip_unit_interval(x: NDArray[np.floating]) -> NDArray[np.floating]:
    """Clips CDF values to [0, 1], absorbing round-off outside the interval."""
    return np.clip(x, 0.0, 1.0)


def _parallel_transform(values: NDArray, inputs: NDArray, transform: Callable[[NDArray], NDArray]) -> None:
    """Writes ``transform(inputs[i:j])`` into ``values[i:j]`` chunk by chunk.

    ``inputs`` holds the pre-drawn uniforms (or normals) for every element, so
    the result does not depend on how chunks are scheduled across threads.
    """

    def body(start: int, stop: int) -> None:
        with np.errstate(divide="ignore", over="ignore"):
            values[start:stop] = transform(inputs[start:stop])

    parallel_for(values.shape[0], body)
