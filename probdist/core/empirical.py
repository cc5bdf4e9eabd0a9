from __future__ import annotations

from collections.abc import Callable
from typing import Any, Optional

import numpy as np
from numpy.typing import NDArray

from ..array_backend.utils import _ensure_vector
from ..custom_types import UniformSource
from .distributions import MultivariateDistribution, Parameter
from ._utils import _as_2d, _scalar_or_array

__all__ = ["Empirical"]


class Empirical(MultivariateDistribution[NDArray]):
    """
    Container for weighted empirical samples in R^d.

    Represents a discrete distribution placing mass ``weights[i]`` on the
    point ``data[i]``. Supports weighted summary statistics, resampling and
    expectation estimation. One-dimensional sample sets also provide an
    empirical CDF.

    Attributes:
        n (int): Number of stored samples.
        d (int): Dimensionality of the sample space.
        data (NDArray): Stored draws of shape (n, d).
        weights (NDArray): Weights as given (uniform when omitted).
    """

    PARAMETER_NAMES = ("data", "weights")
    data = Parameter()
    weights = Parameter()

    def __init__(
        self,
        data: NDArray,
        weights: Optional[NDArray] = None,
        *,
        rng: UniformSource | int | None = None,
    ):
        """Initializes an Empirical distribution from weighted samples.

        Args:
            data (NDArray): Array of stored draws with shape (n, d) or (n,).
            weights (Optional[NDArray]): Optional array of nonnegative weights
                of shape (n,). If ``None``, uniform weights are assigned.
            rng: Uniform source used for resampling. ``None`` selects the
                shared default.

        Raises:
            InvalidParameterError: If there are no samples, or ``weights`` has the
                wrong shape, negative entries or a nonpositive sum.
        """
        super().__init__(rng=rng)
        self._assign(data, weights)

    @classmethod
    def _coerce_parameters(cls, data, weights=None):
        X = _as_2d(data).copy()
        if weights is None:
            n = X.shape[0]
            w = np.full(n, 1.0 / n if n else 0.0, dtype=float)
        else:
            w = _ensure_vector(weights)
        return X, w

    @staticmethod
    def is_valid_parameter_set(data: Any, weights: Any = None) -> bool:
        X = np.asarray(data, dtype=float)
        if X.ndim == 0 or X.ndim > 2 or X.shape[0] < 1 or not np.all(np.isfinite(X)):
            return False
        if weights is None:
            return True
        w = np.asarray(weights, dtype=float).reshape(-1)
        return bool(
            w.shape[0] == X.shape[0]
            and np.all(np.isfinite(w))
            and np.all(w >= 0.0)
            and w.sum() > 0.0
        )

    @classmethod
    def _derived(cls, data, weights):
        w = weights / weights.sum()
        # Precompute weighted mean & population covariance (no ddof correction)
        mean = (w[:, None] * data).sum(axis=0)
        diff = data - mean
        cov = diff.T @ (diff * w[:, None])
        # cumulative weights for inverse-transform resampling
        cw = np.cumsum(w)
        return data, w, cw, mean, cov

    @property
    def n(self) -> int:
        """int: Number of stored samples."""
        return self._params[0].shape[0]

    @property
    def d(self) -> int:
        """int: Dimensionality of the stored samples."""
        return self._params[0].shape[1]

    @property
    def normalized_weights(self) -> NDArray:
        """NDArray: Weights scaled to sum to one, shape (n,)."""
        return self._args[1].copy()

    @staticmethod
    def _index(cw: NDArray, u: Any) -> Any:
        return np.minimum(np.searchsorted(cw, u, side="right"), cw.size - 1)

    @classmethod
    def _sample_unchecked(cls, rng, data, w, cw, mean, cov):
        return data[cls._index(cw, rng.random())].copy()

    def sample(self, n_samples: int | None = None) -> NDArray:
        """Resamples stored points with probability proportional to their weight.

        Args:
            n_samples (int | None): Number of draws. ``None`` returns a single
                point of shape (d,).

        Returns:
            NDArray: Resampled points of shape (n_samples, d).
        """
        if n_samples is None:
            return super().sample()
        data, _, cw, _, _ = self._args
        u = self._rng.random(int(n_samples))
        return data[self._index(cw, u)]

    def mean(self) -> NDArray:
        """Weighted mean vector of shape (d,)."""
        return self._args[3].copy()

    def cov(self) -> NDArray:
        """Weighted population covariance of shape (d, d)."""
        return self._args[4].copy()

    def var(self) -> NDArray:
        """Weighted population variance per dimension, shape (d,)."""
        return np.diag(self._args[4]).copy()

    def std(self) -> NDArray:
        return np.sqrt(np.maximum(self.var(), 0.0))

    def skewness(self) -> NDArray:
        """Weighted population skewness per dimension, shape (d,).

        Dimensions with zero variance give NaN.
        """
        data, w, _, mean, _ = self._args
        diff = data - mean
        m2 = w @ (diff * diff)
        m3 = w @ (diff * diff * diff)
        with np.errstate(divide="ignore", invalid="ignore"):
            return m3 / m2**1.5

    def cdf(self, x: Any) -> Any:
        """Empirical CDF, the total weight of points ``<= x``.

        Raises:
            ValueError: If the samples are not one-dimensional.
        """
        if self.d != 1:
            raise ValueError(f"cdf requires one-dimensional samples, got d={self.d}.")
        data, w, _, _, _ = self._args
        order = np.argsort(data[:, 0], kind="stable")
        sorted_x = data[order, 0]
        cumulative = np.concatenate(([0.0], np.cumsum(w[order])))
        index = np.searchsorted(sorted_x, np.asarray(x, dtype=float), side="right")
        return _scalar_or_array(x, np.minimum(cumulative[index], 1.0))

    def expectation(self, func: Callable[[NDArray], NDArray]) -> NDArray:
        """Weighted average of ``func`` over the stored points.

        Args:
            func: Callable mapping an (n, d) array to an (n,) or (n, k) array.

        Returns:
            NDArray: The weighted average, shape () or (k,).
        """
        data, w, _, _, _ = self._args
        values = np.asarray(func(data), dtype=float)
        return np.tensordot(w, values, axes=(0, 0))

    def log_density(self, x: Any) -> Any:
        raise NotImplementedError("Log density not implemented for Empirical.")

    def density(self, x: Any) -> Any:
        raise NotImplementedError("Density not implemented for Empirical.")
