from __future__ import annotations

import math
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import special as sps

from ..array_backend.utils import _ensure_integer, _ensure_vector
from ..custom_types import UniformSource
from .continuous import _gamma_sample, _positive_uniform, _uniforms_without_zero
from .distributions import DiscreteDistribution, Parameter
from ._utils import _is_integer_valued, _parallel_transform

__all__ = [
    "Bernoulli",
    "Binomial",
    "NegativeBinomial",
    "Poisson",
    "Geometric",
    "DiscreteUniform",
    "Categorical",
    "Hypergeometric",
    "Zipf",
]

# Below this rate the Poisson entropy is summed exactly over the first
# _POISSON_ENTROPY_TERMS masses; the asymptotic series is only accurate above it.
_POISSON_ENTROPY_SUM_BELOW = 10.0
_POISSON_ENTROPY_TERMS = 128


def _on_support(k: NDArray, lower: float, upper: float = math.inf) -> NDArray[np.bool_]:
    """Integer-valued entries of ``k`` within [lower, upper]."""
    return _is_integer_valued(k) & (k >= lower) & (k <= upper)


# -------------------------- Shared samplers ----------------------------


def _poisson_sample(rng: UniformSource, lam: float) -> int:
    """Product method below lambda = 30, Atkinson's rejection method "PA" above."""
    if lam < 30.0:
        limit = math.exp(-lam)
        count = 0
        product = rng.random()
        while product >= limit:
            count += 1
            product *= rng.random()
        return count

    c = 0.767 - 3.36 / lam
    beta = math.pi / math.sqrt(3.0 * lam)
    alpha = beta * lam
    k = math.log(c) - lam - math.log(beta)
    log_lam = math.log(lam)
    while True:
        u = rng.random()
        if u == 0.0:
            continue
        x = (alpha - math.log((1.0 - u) / u)) / beta
        n = math.floor(x + 0.5)
        if n < 0:
            continue
        v = rng.random()
        y = alpha - beta * x
        temp = 1.0 + math.exp(y)
        lhs = y + math.log(v / (temp * temp)) if v > 0.0 else -math.inf
        rhs = k + n * log_lam - math.lgamma(n + 1.0)
        if lhs <= rhs:
            return int(n)


def _categorical_index(cdf_unnormalized: NDArray, u: NDArray) -> NDArray:
    """First index whose cumulative mass reaches ``u``.

    ``u == 0`` would select a leading zero-mass category, so for it the first
    index with strictly positive cumulative mass is returned instead.
    """
    left = np.searchsorted(cdf_unnormalized, u, side="left")
    right = np.searchsorted(cdf_unnormalized, u, side="right")
    return np.where(u == 0.0, right, left)


def _categorical_sample(rng: UniformSource, cdf_unnormalized: NDArray) -> int:
    u = rng.random() * cdf_unnormalized[-1]
    return int(_categorical_index(cdf_unnormalized, np.asarray(u)))


class Bernoulli(DiscreteDistribution):
    """Single trial with success probability ``p``; outcomes 0 and 1."""

    PARAMETER_NAMES = ("p",)
    p = Parameter()

    def __init__(self, p: float, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(p)

    @staticmethod
    def is_valid_parameter_set(p: float) -> bool:
        return 0.0 <= p <= 1.0

    @staticmethod
    def _sample_unchecked(rng, p):
        if p == 0.0:
            return 0
        if p == 1.0:
            return 1
        return int(rng.random() < p)

    @classmethod
    def _fill_unchecked(cls, rng, values, p):
        if p == 0.0 or p == 1.0:
            values[:] = int(p)
            return
        u = rng.random(values.shape[0])
        _parallel_transform(values, u, lambda ui: ui < p)

    @staticmethod
    def _pdf(k, p):
        return np.where(k == 0.0, 1.0 - p, np.where(k == 1.0, p, 0.0))

    @staticmethod
    def _log_pdf(k, p):
        return np.where(k == 0.0, math.log1p(-p) if p < 1.0 else -np.inf, np.where(k == 1.0, np.log(p), -np.inf))

    @staticmethod
    def _cdf(x, p):
        return np.where(x < 0.0, 0.0, np.where(x < 1.0, 1.0 - p, 1.0))

    @staticmethod
    def _icdf(q, p):
        return np.where(q <= 1.0 - p, 0.0, 1.0)

    def mean(self) -> float:
        return self.p

    def var(self) -> float:
        return self.p * (1.0 - self.p)

    def skewness(self) -> float:
        p = self.p
        if p == 0.0 or p == 1.0:
            raise self._unsupported("skewness", "requires 0 < p < 1")
        return (1.0 - 2.0 * p) / math.sqrt(p * (1.0 - p))

    def entropy(self) -> float:
        p = self.p
        return float(-sps.xlogy(p, p) - sps.xlog1py(1.0 - p, -p))

    def mode(self) -> int:
        return 1 if self.p > 0.5 else 0

    def median(self) -> float:
        if self.p < 0.5:
            return 0.0
        if self.p > 0.5:
            return 1.0
        return 0.5

    def minimum(self) -> int:
        return 0

    def maximum(self) -> int:
        return 1


class Binomial(DiscreteDistribution):
    """
    Number of successes in ``n`` independent Bernoulli(p) trials.

    The log-mass is evaluated with log-gamma terms, so extreme tails such as
    ``k = 500`` for ``n = 1000, p = 1e-4`` stay finite.
    """

    PARAMETER_NAMES = ("p", "n")
    p = Parameter()
    n = Parameter()

    def __init__(self, p: float, n: int, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(p, n)

    @classmethod
    def _coerce_parameters(cls, p, n):
        return float(p), _ensure_integer(n, "n")

    @staticmethod
    def is_valid_parameter_set(p: float, n: int) -> bool:
        return 0.0 <= p <= 1.0 and n >= 0

    @staticmethod
    def _sample_unchecked(rng, p, n):
        if p == 0.0:
            return 0
        if p == 1.0:
            return n
        successes = 0
        for _ in range(n):
            if rng.random() < p:
                successes += 1
        return successes

    @classmethod
    def _fill_unchecked(cls, rng, values, p, n):
        if p == 0.0 or p == 1.0:
            values[:] = 0 if p == 0.0 else n
            return
        count = values.shape[0]
        u = rng.random(count * n).reshape(count, n)
        _parallel_transform(values, u, lambda rows: np.count_nonzero(rows < p, axis=1))

    @staticmethod
    def _log_pdf(k, p, n):
        on_support = _on_support(k, 0.0, n)
        safe = np.where(on_support, k, 0.0)
        out = (
            sps.gammaln(n + 1.0)
            - sps.gammaln(safe + 1.0)
            - sps.gammaln(n - safe + 1.0)
            + sps.xlogy(safe, p)
            + sps.xlog1py(n - safe, -p)
        )
        return np.where(on_support, out, -np.inf)

    @staticmethod
    def _cdf(x, p, n):
        k = np.floor(np.clip(x, 0.0, n))
        out = sps.betainc(np.maximum(n - k, 1e-300), k + 1.0, 1.0 - p)
        return np.where(x < 0.0, 0.0, np.where(x >= n, 1.0, out))

    @classmethod
    def _icdf(cls, q, p, n):
        table = cls._cdf(np.arange(n + 1, dtype=float), p, n)
        table[-1] = 1.0
        return np.searchsorted(table, q, side="left").astype(float)

    def mean(self) -> float:
        return self.n * self.p

    def var(self) -> float:
        return self.n * self.p * (1.0 - self.p)

    def skewness(self) -> float:
        p = self.p
        if p == 0.0 or p == 1.0 or self.n == 0:
            raise self._unsupported("skewness", "requires 0 < p < 1 and n > 0")
        return (1.0 - 2.0 * p) / math.sqrt(self.n * p * (1.0 - p))

    def entropy(self) -> float:
        if self.p == 0.0 or self.p == 1.0:
            return 0.0
        pmf = self.probability(np.arange(self.n + 1, dtype=float))
        return float(-np.sum(sps.xlogy(pmf, pmf)))

    def mode(self) -> int:
        if self.p == 1.0:
            return self.n
        if self.p == 0.0:
            return 0
        return int(math.floor((self.n + 1) * self.p))

    def median(self) -> float:
        return float(math.floor(self.n * self.p))

    def minimum(self) -> int:
        return 0

    def maximum(self) -> int:
        return self.n


class Poisson(DiscreteDistribution):
    PARAMETER_NAMES = ("lam",)
    lam = Parameter()

    def __init__(self, lam: float, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(lam)

    @staticmethod
    def is_valid_parameter_set(lam: float) -> bool:
        return lam > 0.0 and math.isfinite(lam)

    _sample_unchecked = staticmethod(_poisson_sample)

    @staticmethod
    def _log_pdf(k, lam):
        on_support = _on_support(k, 0.0)
        safe = np.where(on_support, k, 0.0)
        out = sps.xlogy(safe, lam) - lam - sps.gammaln(safe + 1.0)
        return np.where(on_support, out, -np.inf)

    @staticmethod
    def _cdf(x, lam):
        k = np.floor(np.maximum(x, 0.0))
        return np.where(x < 0.0, 0.0, sps.gammaincc(k + 1.0, lam))

    def mean(self) -> float:
        return self.lam

    def var(self) -> float:
        return self.lam

    def skewness(self) -> float:
        return 1.0 / math.sqrt(self.lam)

    def entropy(self) -> float:
        lam = self.lam
        if lam < _POISSON_ENTROPY_SUM_BELOW:
            k = np.arange(_POISSON_ENTROPY_TERMS, dtype=float)
            pmf = self.probability(k)
            return float(-np.sum(sps.xlogy(pmf, pmf)))
        # asymptotic expansion in 1 / lam
        return (
            0.5 * math.log(2.0 * math.pi * math.e * lam)
            - 1.0 / (12.0 * lam)
            - 1.0 / (24.0 * lam * lam)
            - 19.0 / (360.0 * lam**3)
        )

    def mode(self) -> int:
        return int(math.floor(self.lam))

    def median(self) -> float:
        return float(math.floor(self.lam + 1.0 / 3.0 - 0.02 / self.lam))

    def minimum(self) -> int:
        return 0

    def maximum(self) -> float:
        return math.inf


class NegativeBinomial(DiscreteDistribution):
    """
    Number of failures before the ``r``-th success, success probability ``p``.

    Sampled as a Gamma-Poisson mixture: ``lambda ~ Gamma(r, rate p / (1 - p))``
    followed by a Poisson(lambda) draw. ``p == 1`` always yields 0.
    """

    PARAMETER_NAMES = ("r", "p")
    r = Parameter()
    p = Parameter()

    def __init__(self, r: float, p: float, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(r, p)

    @staticmethod
    def is_valid_parameter_set(r: float, p: float) -> bool:
        return r > 0.0 and math.isfinite(r) and 0.0 < p <= 1.0

    @staticmethod
    def _sample_unchecked(rng, r, p):
        if p == 1.0:
            return 0
        lam = _gamma_sample(rng, r, p / (1.0 - p))
        return _poisson_sample(rng, lam)

    @staticmethod
    def _log_pdf(k, r, p):
        on_support = _on_support(k, 0.0)
        safe = np.where(on_support, k, 0.0)
        out = (
            sps.gammaln(safe + r)
            - sps.gammaln(r)
            - sps.gammaln(safe + 1.0)
            + r * np.log(p)
            + sps.xlog1py(safe, -p)
        )
        return np.where(on_support, out, -np.inf)

    @staticmethod
    def _cdf(x, r, p):
        k = np.floor(np.maximum(x, 0.0))
        return np.where(x < 0.0, 0.0, sps.betainc(r, k + 1.0, p))

    def mean(self) -> float:
        return self.r * (1.0 - self.p) / self.p

    def var(self) -> float:
        return self.r * (1.0 - self.p) / (self.p * self.p)

    def skewness(self) -> float:
        return (2.0 - self.p) / math.sqrt(self.r * (1.0 - self.p))

    def mode(self) -> int:
        if self.r <= 1.0:
            return 0
        return int(math.floor((self.r - 1.0) * (1.0 - self.p) / self.p))

    def minimum(self) -> int:
        return 0

    def maximum(self) -> float:
        return math.inf


class Geometric(DiscreteDistribution):
    """Number of trials up to and including the first success (support 1, 2, ...)."""

    PARAMETER_NAMES = ("p",)
    p = Parameter()

    def __init__(self, p: float, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(p)

    @staticmethod
    def is_valid_parameter_set(p: float) -> bool:
        return 0.0 < p <= 1.0

    @staticmethod
    def _sample_unchecked(rng, p):
        if p == 1.0:
            return 1
        return max(1, math.ceil(math.log1p(-rng.random()) / math.log1p(-p)))

    @classmethod
    def _fill_unchecked(cls, rng, values, p):
        if p == 1.0:
            values[:] = 1
            return
        u = rng.random(values.shape[0])
        log_q = math.log1p(-p)
        _parallel_transform(values, u, lambda ui: np.maximum(1.0, np.ceil(np.log1p(-ui) / log_q)))

    @staticmethod
    def _log_pdf(k, p):
        on_support = _on_support(k, 1.0)
        safe = np.where(on_support, k, 1.0)
        return np.where(on_support, sps.xlog1py(safe - 1.0, -p) + np.log(p), -np.inf)

    @staticmethod
    def _cdf(x, p):
        k = np.floor(np.maximum(x, 0.0))
        return np.where(x < 1.0, 0.0, -np.expm1(k * np.log1p(-p)))

    @staticmethod
    def _icdf(q, p):
        return np.maximum(1.0, np.ceil(np.log1p(-q) / np.log1p(-p)))

    def mean(self) -> float:
        return 1.0 / self.p

    def var(self) -> float:
        return (1.0 - self.p) / (self.p * self.p)

    def skewness(self) -> float:
        return (2.0 - self.p) / math.sqrt(1.0 - self.p)

    def entropy(self) -> float:
        p = self.p
        return float(-sps.xlog1py(1.0 - p, -p) - sps.xlogy(p, p)) / p

    def mode(self) -> int:
        return 1

    def median(self) -> float:
        if self.p == 1.0:
            return 1.0
        return float(math.ceil(-math.log(2.0) / math.log1p(-self.p)))

    def minimum(self) -> int:
        return 1

    def maximum(self) -> float:
        return math.inf


class DiscreteUniform(DiscreteDistribution):
    """Uniform over the integers ``lower, ..., upper`` (both inclusive)."""

    PARAMETER_NAMES = ("lower", "upper")
    lower = Parameter()
    upper = Parameter()

    def __init__(self, lower: int, upper: int, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(lower, upper)

    @classmethod
    def _coerce_parameters(cls, lower, upper):
        return _ensure_integer(lower, "lower"), _ensure_integer(upper, "upper")

    @staticmethod
    def is_valid_parameter_set(lower: int, upper: int) -> bool:
        return lower <= upper

    @staticmethod
    def _sample_unchecked(rng, lower, upper):
        return lower + int(math.floor(rng.random() * (upper - lower + 1)))

    @classmethod
    def _fill_unchecked(cls, rng, values, lower, upper):
        u = rng.random(values.shape[0])
        width = upper - lower + 1
        _parallel_transform(values, u, lambda ui: lower + np.floor(ui * width))

    @staticmethod
    def _pdf(k, lower, upper):
        return np.where(_on_support(k, lower, upper), 1.0 / (upper - lower + 1), 0.0)

    @staticmethod
    def _cdf(x, lower, upper):
        return np.clip((np.floor(x) - lower + 1.0) / (upper - lower + 1), 0.0, 1.0)

    @staticmethod
    def _icdf(q, lower, upper):
        return np.clip(lower + np.ceil(q * (upper - lower + 1)) - 1.0, lower, upper)

    def mean(self) -> float:
        return 0.5 * (self.lower + self.upper)

    def var(self) -> float:
        width = self.upper - self.lower + 1
        return (width * width - 1.0) / 12.0

    def skewness(self) -> float:
        return 0.0

    def entropy(self) -> float:
        return math.log(self.upper - self.lower + 1)

    def mode(self) -> int:
        return (self.lower + self.upper) // 2

    def median(self) -> float:
        return 0.5 * (self.lower + self.upper)

    def minimum(self) -> int:
        return self.lower

    def maximum(self) -> int:
        return self.upper


class Categorical(DiscreteDistribution):
    """
    Draws an index ``0..K-1`` with probability proportional to ``probability_mass``.

    The mass vector need not be normalized. Zero-mass categories are never
    sampled.
    """

    PARAMETER_NAMES = ("probability_mass",)
    probability_mass = Parameter()

    def __init__(self, probability_mass: Any, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(probability_mass)

    @classmethod
    def _coerce_parameters(cls, probability_mass):
        return (_ensure_vector(probability_mass),)

    @staticmethod
    def is_valid_parameter_set(probability_mass: Any) -> bool:
        pm = np.asarray(probability_mass, dtype=float)
        return bool(
            pm.ndim == 1
            and pm.size > 0
            and np.all(np.isfinite(pm))
            and np.all(pm >= 0.0)
            and pm.sum() > 0.0
        )

    @classmethod
    def _derived(cls, probability_mass):
        cdf_unnormalized = np.cumsum(probability_mass)
        pmf = probability_mass / cdf_unnormalized[-1]
        return pmf, cdf_unnormalized

    @property
    def probabilities(self) -> NDArray:
        """Normalized probability mass."""
        return self._args[0].copy()

    @staticmethod
    def _sample_unchecked(rng, pmf, cdf_unnormalized):
        return _categorical_sample(rng, cdf_unnormalized)

    @classmethod
    def _fill_unchecked(cls, rng, values, pmf, cdf_unnormalized):
        u = rng.random(values.shape[0]) * cdf_unnormalized[-1]
        _parallel_transform(values, u, lambda ui: _categorical_index(cdf_unnormalized, ui))

    @staticmethod
    def _pdf(k, pmf, cdf_unnormalized):
        on_support = _on_support(k, 0.0, pmf.size - 1)
        index = np.where(on_support, k, 0.0).astype(np.intp)
        return np.where(on_support, pmf[index], 0.0)

    @staticmethod
    def _cdf(x, pmf, cdf_unnormalized):
        index = np.clip(np.floor(x), 0, pmf.size - 1).astype(np.intp)
        out = cdf_unnormalized[index] / cdf_unnormalized[-1]
        return np.where(x < 0.0, 0.0, np.where(x >= pmf.size - 1, 1.0, out))

    @staticmethod
    def _icdf(q, pmf, cdf_unnormalized):
        index = np.searchsorted(cdf_unnormalized / cdf_unnormalized[-1], q, side="left")
        return np.minimum(index, pmf.size - 1).astype(float)

    def mean(self) -> float:
        pmf = self._args[0]
        return float(np.dot(np.arange(pmf.size), pmf))

    def var(self) -> float:
        pmf = self._args[0]
        k = np.arange(pmf.size)
        mu = np.dot(k, pmf)
        return float(np.dot((k - mu) ** 2, pmf))

    def entropy(self) -> float:
        pmf = self._args[0]
        return float(-np.sum(sps.xlogy(pmf, pmf)))

    def mode(self) -> int:
        return int(np.argmax(self._args[0]))

    def median(self) -> float:
        return float(self.inv_cdf(0.5))

    def minimum(self) -> int:
        return 0

    def maximum(self) -> int:
        return int(self._args[0].size - 1)


def _log_binomial(n: Any, k: Any) -> Any:
    return sps.gammaln(n + 1.0) - sps.gammaln(k + 1.0) - sps.gammaln(n - k + 1.0)


def _hypergeometric_rows(u: NDArray, population: int, success: int) -> NDArray:
    """Successes in each row of ``u`` (one column per draw, without replacement)."""
    remaining = np.full(u.shape[0], float(success))
    for j in range(u.shape[1]):
        hit = u[:, j] < remaining / (population - j)
        remaining -= hit
    return success - remaining


class Hypergeometric(DiscreteDistribution):
    """
    Successes in ``draws`` draws without replacement from ``population`` items,
    ``success`` of which count as successes.

    Sampling simulates the draws one at a time, one uniform each.
    """

    PARAMETER_NAMES = ("population", "success", "draws")
    population = Parameter()
    success = Parameter()
    draws = Parameter()

    def __init__(self, population: int, success: int, draws: int, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(population, success, draws)

    @classmethod
    def _coerce_parameters(cls, population, success, draws):
        return (
            _ensure_integer(population, "population"),
            _ensure_integer(success, "success"),
            _ensure_integer(draws, "draws"),
        )

    @staticmethod
    def is_valid_parameter_set(population: int, success: int, draws: int) -> bool:
        return 0 <= success <= population and 0 <= draws <= population

    @staticmethod
    def _sample_unchecked(rng, population, success, draws):
        count = 0
        for j in range(draws):
            if rng.random() < (success - count) / (population - j):
                count += 1
        return count

    @classmethod
    def _fill_unchecked(cls, rng, values, population, success, draws):
        n = values.shape[0]
        u = rng.random(n * draws).reshape(n, draws)
        _parallel_transform(values, u, lambda rows: _hypergeometric_rows(rows, population, success))

    @staticmethod
    def _support(population, success, draws) -> tuple[int, int]:
        return max(0, draws + success - population), min(success, draws)

    @classmethod
    def _log_pdf(cls, k, population, success, draws):
        low, high = cls._support(population, success, draws)
        on_support = _on_support(k, low, high)
        safe = np.where(on_support, k, low)
        out = (
            _log_binomial(success, safe)
            + _log_binomial(population - success, draws - safe)
            - _log_binomial(population, draws)
        )
        return np.where(on_support, out, -np.inf)

    @classmethod
    def _table(cls, population, success, draws) -> NDArray:
        """CDF at ``0 .. max(support)``."""
        _, high = cls._support(population, success, draws)
        table = np.cumsum(cls._pdf(np.arange(high + 1, dtype=float), population, success, draws))
        table[-1] = 1.0
        return np.minimum(table, 1.0)

    @classmethod
    def _cdf(cls, x, population, success, draws):
        table = cls._table(population, success, draws)
        index = np.clip(np.floor(x), 0, table.size - 1).astype(np.intp)
        return np.where(x < 0.0, 0.0, table[index])

    @classmethod
    def _icdf(cls, q, population, success, draws):
        table = cls._table(population, success, draws)
        return np.searchsorted(table, q, side="left").astype(float)

    def mean(self) -> float:
        if self.population == 0:
            return 0.0
        return self.draws * self.success / self.population

    def var(self) -> float:
        N, K, n = self.population, self.success, self.draws
        if N <= 1:
            return 0.0
        return n * K * (N - n) * (N - K) / (N * N * (N - 1.0))

    def skewness(self) -> float:
        N, K, n = self.population, self.success, self.draws
        if N <= 2 or self.var() == 0.0:
            raise self._unsupported("skewness", "the distribution is degenerate")
        return (N - 2.0 * K) * math.sqrt(N - 1.0) * (N - 2.0 * n) / (
            math.sqrt(n * K * (N - K) * (N - n)) * (N - 2.0)
        )

    def entropy(self) -> float:
        low, high = self._support(*self._args)
        pmf = self.probability(np.arange(low, high + 1, dtype=float))
        return float(-np.sum(sps.xlogy(pmf, pmf)))

    def mode(self) -> int:
        return (self.draws + 1) * (self.success + 1) // (self.population + 2)

    def median(self) -> float:
        return float(self.inv_cdf(0.5))

    def minimum(self) -> int:
        return self._support(*self._args)[0]

    def maximum(self) -> int:
        return self._support(*self._args)[1]


class Zipf(DiscreteDistribution):
    """
    Zipf law over the ranks ``1..n`` with exponent ``s``: P(k) proportional to ``k ** -s``.

    The normalized CDF over all ranks is cached; sampling scans it for the
    first rank whose cumulative mass reaches a uniform in (0, 1).
    """

    PARAMETER_NAMES = ("s", "n")
    s = Parameter()
    n = Parameter()

    def __init__(self, s: float, n: int, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(s, n)

    @classmethod
    def _coerce_parameters(cls, s, n):
        return float(s), _ensure_integer(n, "n")

    @staticmethod
    def is_valid_parameter_set(s: float, n: int) -> bool:
        return s > 0.0 and math.isfinite(s) and n > 0

    @classmethod
    def _derived(cls, s, n):
        weights = np.power(np.arange(1, n + 1, dtype=float), -s)
        table = np.cumsum(weights)
        log_norm = math.log(table[-1])
        table = table / table[-1]
        table[-1] = 1.0
        return s, n, log_norm, table

    @staticmethod
    def _sample_unchecked(rng, s, n, log_norm, table):
        return int(np.searchsorted(table, _positive_uniform(rng), side="left")) + 1

    @classmethod
    def _fill_unchecked(cls, rng, values, s, n, log_norm, table):
        u = _uniforms_without_zero(rng, values.shape[0])
        _parallel_transform(values, u, lambda ui: np.searchsorted(table, ui, side="left") + 1)

    @staticmethod
    def _log_pdf(k, s, n, log_norm, table):
        on_support = _on_support(k, 1.0, n)
        safe = np.where(on_support, k, 1.0)
        return np.where(on_support, -s * np.log(safe) - log_norm, -np.inf)

    @staticmethod
    def _cdf(x, s, n, log_norm, table):
        index = np.clip(np.floor(x) - 1.0, 0, n - 1).astype(np.intp)
        return np.where(x < 1.0, 0.0, table[index])

    @staticmethod
    def _icdf(q, s, n, log_norm, table):
        return np.minimum(np.searchsorted(table, q, side="left") + 1, n).astype(float)

    def _harmonic_ratio(self, order: int) -> float:
        """``H(n, s - order) / H(n, s)``, i.e. the raw moment ``E[X ** order]``."""
        s, n, log_norm, _ = self._args
        k = np.arange(1, n + 1, dtype=float)
        return float(np.sum(np.exp((order - s) * np.log(k) - log_norm)))

    def mean(self) -> float:
        return self._harmonic_ratio(1)

    def var(self) -> float:
        mu = self.mean()
        return max(self._harmonic_ratio(2) - mu * mu, 0.0)

    def skewness(self) -> float:
        if self.n == 1:
            raise self._unsupported("skewness", "the distribution is degenerate")
        mu = self.mean()
        sigma2 = self.var()
        third = self._harmonic_ratio(3) - 3.0 * mu * sigma2 - mu**3
        return third / sigma2**1.5

    def entropy(self) -> float:
        pmf = self.probability(np.arange(1, self.n + 1, dtype=float))
        return float(-np.sum(sps.xlogy(pmf, pmf)))

    def mode(self) -> int:
        return 1

    def median(self) -> float:
        return float(self.inv_cdf(0.5))

    def minimum(self) -> int:
        return 1

    def maximum(self) -> int:
        return self.n
