from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from typing import Any, ClassVar, Generic, TypeVar

import numpy as np
from numpy.typing import NDArray

from ..config import checks_enabled
from ..custom_types import UniformSource
from ..exceptions import InvalidParameterError, UnsupportedMomentError
from ..random_source import resolve_rng
from ._utils import _as_float_array, _scalar_or_array

__all__ = [
    "Parameter",
    "Distribution",
    "UnivariateDistribution",
    "ContinuousDistribution",
    "DiscreteDistribution",
    "MultivariateDistribution",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Parameter:
    """Read/write view of one named entry of a distribution's parameters.

    Assigning goes through :meth:`Distribution._replace`, so the full parameter
    set is re-validated before anything changes. Array-valued parameters are
    returned as copies; mutating the copy never touches the distribution.
    """

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Distribution | None, objtype: type | None = None) -> Any:
        if obj is None:
            return self
        value = obj._params[obj.PARAMETER_NAMES.index(self.name)]
        return value.copy() if isinstance(value, np.ndarray) else value

    def __set__(self, obj: Distribution, value: Any) -> None:
        obj._replace(**{self.name: value})


# -------------------------- Abstract Classes ----------------------------


class Distribution(Generic[T], ABC):
    """
    Abstract base class for probability distributions.

    A distribution holds a validated parameter tuple, the kernel arguments
    derived from it, and a reference to a uniform random source. Subclasses
    provide:

    - ``PARAMETER_NAMES``: parameter names in constructor order,
    - ``is_valid_parameter_set(*params)``: the validity predicate,
    - ``_sample_unchecked(rng, *args)``: one variate from the kernel arguments,

    and optionally ``_coerce_parameters`` (type conversion before validation)
    and ``_derived`` (precomputed kernel arguments such as Cholesky factors).

    Every operation exists in two forms: an instance method using the stored
    parameters and source, and a classmethod taking both explicitly. The two
    run the same kernel on the same arguments, so they produce identical output
    from the same source position.

    Type Variables:
        T: Type of a single variate (float, int, ndarray, ...).
    """

    PARAMETER_NAMES: ClassVar[tuple[str, ...]] = ()

    _params: tuple
    _args: tuple

    def __init__(self, *, rng: UniformSource | int | None = None):
        self._rng = resolve_rng(rng)

    # ---- parameters ----

    @staticmethod
    @abstractmethod
    def is_valid_parameter_set(*params: Any) -> bool:
        """Pure validity predicate over the parameters in constructor order."""
        raise NotImplementedError

    @classmethod
    def _coerce_parameters(cls, *params: Any) -> tuple:
        """Converts raw parameters to their canonical types (floats by default)."""
        return tuple(float(p) for p in params)

    @classmethod
    def _derived(cls, *params: Any) -> tuple:
        """Kernel arguments computed from valid parameters."""
        return params

    @classmethod
    def _validate(cls, *params: Any, checks: bool | None = None) -> None:
        if checks_enabled(checks) and not cls.is_valid_parameter_set(*params):
            described = ", ".join(
                f"{name}={_describe(value)}" for name, value in zip(cls.PARAMETER_NAMES, params)
            )
            raise InvalidParameterError(
                f"Invalid parametrization for the distribution: {cls.__name__}({described})",
                distribution=cls.__name__,
                details=dict(zip(cls.PARAMETER_NAMES, map(_describe, params))),
            )

    @classmethod
    def _prepare(cls, params: tuple, checks: bool | None = None) -> tuple:
        """Coerce, validate and derive kernel arguments for a static call."""
        params = cls._coerce_parameters(*params)
        cls._validate(*params, checks=checks)
        return cls._derived(*params)

    def _assign(self, *params: Any) -> None:
        params = self._coerce_parameters(*params)
        self._validate(*params)
        args = self._derived(*params)
        self._params = params
        self._args = args

    def _replace(self, **changes: Any) -> None:
        params = tuple(changes.get(name, value) for name, value in zip(self.PARAMETER_NAMES, self._params))
        self._assign(*params)
        logger.debug("%s: updated %s", type(self).__name__, ", ".join(changes))

    @property
    def parameters(self) -> dict[str, Any]:
        """Current parameters by name."""
        return {name: getattr(self, name) for name in self.PARAMETER_NAMES}

    # ---- random source ----

    @property
    def rng(self) -> UniformSource:
        """The uniform source used by ``sample``, ``fill`` and ``samples``.

        Assigning ``None`` selects the shared default source. The change takes
        effect on the next draw.
        """
        return self._rng

    @rng.setter
    def rng(self, value: UniformSource | int | None) -> None:
        self._rng = resolve_rng(value)

    # ---- sampling ----

    @staticmethod
    @abstractmethod
    def _sample_unchecked(rng: UniformSource, *args: Any) -> T:
        """One variate from the kernel arguments. Performs no parameter checks."""
        raise NotImplementedError

    @classmethod
    def _iterate(cls, rng: UniformSource, *args: Any) -> Iterator[T]:
        while True:
            yield cls._sample_unchecked(rng, *args)

    def samples(self) -> Iterator[T]:
        """Unbounded lazy sequence of variates.

        The generator captures the source and parameters at the time of the
        call. It is single-pass and stateful: to restart, call ``samples()``
        again. Do not consume one generator from several threads.
        """
        return self._iterate(self._rng, *self._args)

    @classmethod
    def draw(cls, rng: UniformSource | int | None, *params: Any, checks: bool | None = None) -> T:
        """Validates ``params`` and draws one variate from ``rng``."""
        args = cls._prepare(params, checks)
        return cls._sample_unchecked(resolve_rng(rng), *args)

    @classmethod
    def draws(cls, rng: UniformSource | int | None, *params: Any, checks: bool | None = None) -> Iterator[T]:
        """Validates ``params`` and returns an unbounded lazy sequence of variates."""
        args = cls._prepare(params, checks)
        return cls._iterate(resolve_rng(rng), *args)

    # ---- diagnostics ----

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={_describe(value)}" for name, value in zip(self.PARAMETER_NAMES, self._params))
        return f"{type(self).__name__}({fields})"

    def _unsupported(self, statistic: str, reason: str | None = None) -> UnsupportedMomentError:
        message = f"{statistic} is not supported for {self!r}"
        if reason:
            message = f"{message}: {reason}"
        return UnsupportedMomentError(message, distribution=type(self).__name__)


def _describe(value: Any) -> str:
    if isinstance(value, np.ndarray):
        if value.ndim == 2:
            return f"<{value.shape[0]}x{value.shape[1]} matrix>"
        return np.array2string(value, precision=6, separator=", ")
    return repr(value)


class UnivariateDistribution(Distribution[T]):
    """Scalar-valued distribution with density, CDF, moments and batch sampling.

    Density and CDF kernels are vectorized over numpy arrays: ``density(x)``
    returns a float for scalar ``x`` and an array of ``x``'s shape otherwise.
    Outside the support the density is 0, the log-density ``-inf`` and the CDF
    0 or 1; none of them raise.

    Batch sampling writes variates into a caller-provided buffer in index order
    (``fill``). Subclasses with an independent per-element transform override
    ``_fill_unchecked`` to draw the uniform inputs in bulk and transform them
    through :func:`probdist.parallel.parallel_for`.
    """

    _dtype: ClassVar[type] = float

    # ---- kernels (unchecked, vectorized) ----

    # Subclasses define at least one of _pdf / _log_pdf.
    @classmethod
    def _pdf(cls, x: NDArray, *args: Any) -> NDArray:
        return np.exp(cls._log_pdf(x, *args))

    @classmethod
    def _log_pdf(cls, x: NDArray, *args: Any) -> NDArray:
        return np.log(cls._pdf(x, *args))

    @staticmethod
    def _cdf(x: NDArray, *args: Any) -> NDArray:
        raise NotImplementedError

    @classmethod
    def _icdf(cls, p: NDArray, *args: Any) -> NDArray:
        raise NotImplementedError(f"{cls.__name__} has no inverse CDF.")

    @staticmethod
    def _evaluate(kernel: Callable[..., NDArray], x: Any, args: tuple) -> Any:
        arr = _as_float_array(x)
        with np.errstate(all="ignore"):
            out = kernel(arr, *args)
        return _scalar_or_array(x, out)

    @staticmethod
    def _check_probability(p: Any) -> None:
        arr = _as_float_array(p)
        if np.any(np.isnan(arr)) or np.any(arr < 0.0) or np.any(arr > 1.0):
            raise ValueError("probability must lie in [0, 1].")

    # ---- instance forms ----

    def density(self, x: Any) -> Any:
        """Probability density (or mass) at ``x``."""
        return self._evaluate(self._pdf, x, self._args)

    def log_density(self, x: Any) -> Any:
        """Log of the density at ``x``, computed directly in log space."""
        return self._evaluate(self._log_pdf, x, self._args)

    def cdf(self, x: Any) -> Any:
        """Cumulative distribution function P(X <= x)."""
        return self._evaluate(self._cdf, x, self._args)

    def inv_cdf(self, p: Any) -> Any:
        """Quantile function, the inverse of :meth:`cdf` on [0, 1].

        Raises:
            ValueError: If any ``p`` lies outside [0, 1].
        """
        self._check_probability(p)
        return self._evaluate(self._icdf, p, self._args)

    # ---- static forms ----

    @classmethod
    def pdf(cls, x: Any, *params: Any, checks: bool | None = None) -> Any:
        """Density at ``x`` for explicit parameters (validated)."""
        return cls._evaluate(cls._pdf, x, cls._prepare(params, checks))

    @classmethod
    def log_pdf(cls, x: Any, *params: Any, checks: bool | None = None) -> Any:
        """Log-density at ``x`` for explicit parameters (validated)."""
        return cls._evaluate(cls._log_pdf, x, cls._prepare(params, checks))

    @classmethod
    def cumulative(cls, x: Any, *params: Any, checks: bool | None = None) -> Any:
        """CDF at ``x`` for explicit parameters (validated)."""
        return cls._evaluate(cls._cdf, x, cls._prepare(params, checks))

    @classmethod
    def quantile(cls, p: Any, *params: Any, checks: bool | None = None) -> Any:
        """Inverse CDF at ``p`` for explicit parameters (validated)."""
        args = cls._prepare(params, checks)
        cls._check_probability(p)
        return cls._evaluate(cls._icdf, p, args)

    # ---- moments ----

    def mean(self) -> float:
        raise self._unsupported("mean")

    def var(self) -> float:
        raise self._unsupported("variance")

    def std(self) -> float:
        """Standard deviation, ``sqrt(var())``."""
        return math.sqrt(self.var())

    def skewness(self) -> float:
        raise self._unsupported("skewness")

    def entropy(self) -> float:
        raise self._unsupported("entropy")

    def mode(self) -> float:
        raise self._unsupported("mode")

    def median(self) -> float:
        raise self._unsupported("median")

    def minimum(self) -> float:
        raise self._unsupported("minimum")

    def maximum(self) -> float:
        raise self._unsupported("maximum")

    # ---- batch sampling ----

    @classmethod
    def _fill_unchecked(cls, rng: UniformSource, values: NDArray, *args: Any) -> None:
        for i in range(values.shape[0]):
            values[i] = cls._sample_unchecked(rng, *args)

    @staticmethod
    def _check_buffer(values: Any) -> NDArray:
        if not isinstance(values, np.ndarray):
            raise TypeError(f"values must be a numpy array, got {type(values).__name__}.")
        if values.ndim != 1:
            raise ValueError(f"values must be one-dimensional, got shape {values.shape}.")
        return values

    def fill(self, values: NDArray) -> NDArray:
        """Fills ``values`` in place with independent variates and returns it.

        Element ``i`` is produced from the ``i``-th (block of) draws of the
        source, independent of how the work is split across threads.
        """
        self._fill_unchecked(self._rng, self._check_buffer(values), *self._args)
        return values

    def sample(self, n_samples: int | None = None) -> Any:
        """Draws one variate, or an array of ``n_samples`` variates.

        Args:
            n_samples: ``None`` for a single scalar variate; otherwise the
                length of the returned array.
        """
        if n_samples is None:
            return self._sample_unchecked(self._rng, *self._args)
        values = np.empty(int(n_samples), dtype=self._dtype)
        return self.fill(values)

    @classmethod
    def draw_into(
        cls,
        rng: UniformSource | int | None,
        values: NDArray,
        *params: Any,
        checks: bool | None = None,
    ) -> NDArray:
        """Validates ``params`` and fills ``values`` in place from ``rng``."""
        args = cls._prepare(params, checks)
        cls._fill_unchecked(resolve_rng(rng), cls._check_buffer(values), *args)
        return values


class ContinuousDistribution(UnivariateDistribution[float]):
    """Univariate distribution with a density over the reals."""

    _dtype = float


class DiscreteDistribution(UnivariateDistribution[int]):
    """Univariate distribution over the integers.

    ``probability``/``log_probability`` (and the static ``pmf``/``log_pmf``)
    are the mass-function names of ``density``/``log_density``. Non-integer
    arguments have zero mass; the CDF is a right-continuous step function.
    """

    _dtype = np.int64

    def probability(self, k: Any) -> Any:
        """Probability mass P(X = k)."""
        return self.density(k)

    def log_probability(self, k: Any) -> Any:
        """Log of the probability mass at ``k``."""
        return self.log_density(k)

    def inv_cdf(self, p: Any) -> Any:
        """Smallest ``k`` with ``cdf(k) >= p``."""
        return _as_integral(super().inv_cdf(p))

    @classmethod
    def quantile(cls, p: Any, *params: Any, checks: bool | None = None) -> Any:
        return _as_integral(super().quantile(p, *params, checks=checks))

    @classmethod
    def pmf(cls, k: Any, *params: Any, checks: bool | None = None) -> Any:
        return cls.pdf(k, *params, checks=checks)

    @classmethod
    def log_pmf(cls, k: Any, *params: Any, checks: bool | None = None) -> Any:
        return cls.log_pdf(k, *params, checks=checks)


class MultivariateDistribution(Distribution[T]):
    """Vector- or matrix-valued distribution.

    ``sample(n)`` stacks ``n`` consecutive draws along a new leading axis.
    """

    def density(self, x: Any) -> Any:
        log_p = self.log_density(x)
        if np.ndim(log_p) == 0:
            return math.exp(log_p)
        return np.exp(log_p)

    def log_density(self, x: Any) -> Any:
        raise NotImplementedError(f"{type(self).__name__} does not implement log_density.")

    def mean(self) -> Any:
        raise self._unsupported("mean")

    def var(self) -> Any:
        raise self._unsupported("variance")

    def mode(self) -> Any:
        raise self._unsupported("mode")

    def sample(self, n_samples: int | None = None) -> Any:
        """Draws one variate, or ``n_samples`` variates stacked on axis 0."""
        if n_samples is None:
            return self._sample_unchecked(self._rng, *self._args)
        draws = [self._sample_unchecked(self._rng, *self._args) for _ in range(int(n_samples))]
        return np.stack(draws) if draws else np.empty((0,))


def _as_integral(values: Any) -> Any:
    if isinstance(values, np.ndarray):
        return values.astype(np.int64)
    return int(values)
