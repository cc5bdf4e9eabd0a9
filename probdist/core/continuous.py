from __future__ import annotations

import math
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import special as sps

from ..array_backend.utils import _ensure_integer
from ..custom_types import UniformSource
from .distributions import ContinuousDistribution, Parameter
from ._utils import _clip_unit_interval, _parallel_transform

__all__ = [
    "Normal",
    "LogNormal",
    "Gamma",
    "InverseGamma",
    "Beta",
    "Cauchy",
    "Chi",
    "ChiSquared",
    "Exponential",
    "Pareto",
    "Weibull",
    "Rayleigh",
    "Laplace",
    "StudentT",
    "FisherSnedecor",
    "ContinuousUniform",
    "TruncatedNormal",
    "Burr",
    "Erlang",
    "Logistic",
    "Triangular",
]

_LOG_SQRT_2PI = 0.5 * math.log(2.0 * math.pi)
_SQRT_2PI = math.sqrt(2.0 * math.pi)
_EULER_GAMMA = 0.5772156649015329


# -------------------------- Shared samplers ----------------------------
# Composite distributions call these directly so that every caller consumes
# the uniform stream in exactly the same way.


def _polar_pair(rng: UniformSource) -> tuple[float, float]:
    """Two independent N(0, 1) variates by the Marsaglia polar method."""
    while True:
        v1 = 2.0 * rng.random() - 1.0
        v2 = 2.0 * rng.random() - 1.0
        r = v1 * v1 + v2 * v2
        if r >= 1.0 or r == 0.0:
            continue
        fac = math.sqrt(-2.0 * math.log(r) / r)
        return v1 * fac, v2 * fac


def _standard_normal(rng: UniformSource) -> float:
    return _polar_pair(rng)[0]


def _standard_normals(rng: UniformSource, count: int) -> NDArray:
    """``count`` standard normals, using both outputs of every accepted pair.

    About 4/pi uniforms per variate are accepted by the polar method, so
    ``ceil(4 count / pi)`` uniforms (rounded up to even) are drawn in one block
    and consumed pairwise; any shortfall is topped up one pair at a time.
    """
    out = np.empty(count, dtype=float)
    if count == 0:
        return out

    n_uniform = math.ceil(count * 4.0 / math.pi)
    n_uniform += n_uniform % 2
    v = 2.0 * rng.random(n_uniform).reshape(-1, 2) - 1.0
    r = v[:, 0] ** 2 + v[:, 1] ** 2
    accepted = (r < 1.0) & (r > 0.0)
    v, r = v[accepted], r[accepted]
    pairs = (v * np.sqrt(-2.0 * np.log(r) / r)[:, None]).ravel()

    index = min(pairs.size, count)
    out[:index] = pairs[:index]
    while index < count:
        x, y = _polar_pair(rng)
        out[index] = x
        index += 1
        if index < count:
            out[index] = y
            index += 1
    return out


def _ratio(numerator: float, denominator: float) -> float:
    """IEEE division: ``x / 0`` is ``+-inf`` (``nan`` for ``0 / 0``) rather than an error."""
    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        return float(np.divide(numerator, denominator))


def _power(base: float, exponent: float) -> float:
    """``base ** exponent`` that overflows to ``inf`` instead of raising."""
    with np.errstate(over="ignore", divide="ignore"):
        return float(np.power(np.float64(base), exponent))


def _marsaglia_tsang(rng: UniformSource, a: float) -> float:
    """Gamma(a, 1) for ``a >= 1`` by the Marsaglia-Tsang squeeze method."""
    d = a - 1.0 / 3.0
    c = 1.0 / math.sqrt(9.0 * d)
    while True:
        x = _standard_normal(rng)
        v = 1.0 + c * x
        while v <= 0.0:
            x = _standard_normal(rng)
            v = 1.0 + c * x

        v = v * v * v
        u = rng.random()
        x = x * x
        if u < 1.0 - 0.0331 * x * x:
            return d * v
        if u == 0.0 or math.log(u) < 0.5 * x + d * (1.0 - v + math.log(v)):
            return d * v


def _gamma_sample(rng: UniformSource, shape: float, rate: float) -> float:
    """Gamma(shape, rate) variate.

    For ``shape < 1`` a Gamma(shape + 1) variate is drawn and scaled by
    ``u ** (1 / shape)``; that uniform is drawn before anything else. The
    boost underflows to 0 for small shapes, so callers dividing by the
    result must expect 0.
    """
    if shape < 1.0:
        alphafix = rng.random() ** (1.0 / shape)
        return alphafix * _marsaglia_tsang(rng, shape + 1.0) / rate
    return _marsaglia_tsang(rng, shape) / rate


def _log_gamma_sample(rng: UniformSource, shape: float) -> float:
    """Logarithm of a Gamma(shape, 1) variate.

    Consumes the uniform stream exactly as :func:`_gamma_sample` does, but
    keeps the ``shape < 1`` boost in log space so it never underflows.
    """
    if shape < 1.0:
        u = rng.random()
        log_boost = math.log(u) / shape if u > 0.0 else -math.inf
        return log_boost + math.log(_marsaglia_tsang(rng, shape + 1.0))
    return math.log(_marsaglia_tsang(rng, shape))


def _chi_squared_sample(rng: UniformSource, freedom: float) -> float:
    if freedom == math.floor(freedom):
        total = 0.0
        for _ in range(int(freedom)):
            z = _standard_normal(rng)
            total += z * z
        return total
    return _gamma_sample(rng, 0.5 * freedom, 0.5)


def _positive_uniform(rng: UniformSource) -> float:
    u = rng.random()
    while u == 0.0:
        u = rng.random()
    return u


def _uniforms_without_zero(rng: UniformSource, count: int) -> NDArray:
    """Bulk uniforms in (0, 1); zeros are redrawn serially in index order."""
    u = rng.random(count)
    for i in np.flatnonzero(u == 0.0):
        u[i] = _positive_uniform(rng)
    return u


def _phi(x: float) -> float:
    """Standard normal density, 0 at +-inf."""
    return math.exp(-0.5 * x * x) / _SQRT_2PI if math.isfinite(x) else 0.0


def _x_phi(x: float) -> float:
    return x * _phi(x) if math.isfinite(x) else 0.0


# -------------------------- Normal family ----------------------------


class Normal(ContinuousDistribution):
    """
    Univariate Normal N(mu, sigma^2).

    ``sigma == 0`` is allowed and describes a point mass at ``mu``: the density
    is ``inf`` there and 0 elsewhere, and the CDF is a unit step.
    """

    PARAMETER_NAMES = ("mu", "sigma")
    mu = Parameter()
    sigma = Parameter()

    def __init__(self, mu: float = 0.0, sigma: float = 1.0, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(mu, sigma)

    @staticmethod
    def is_valid_parameter_set(mu: float, sigma: float) -> bool:
        return sigma >= 0.0 and not math.isnan(mu)

    @staticmethod
    def _sample_unchecked(rng: UniformSource, mu: float, sigma: float) -> float:
        return mu + sigma * _standard_normal(rng)

    @classmethod
    def _fill_unchecked(cls, rng: UniformSource, values: NDArray, mu: float, sigma: float) -> None:
        z = _standard_normals(rng, values.shape[0])
        _parallel_transform(values, z, lambda zi: mu + sigma * zi)

    @classmethod
    def _iterate(cls, rng: UniformSource, mu: float, sigma: float):
        while True:
            x, y = _polar_pair(rng)
            yield mu + sigma * x
            yield mu + sigma * y

    @staticmethod
    def _pdf(x, mu, sigma):
        if sigma == 0.0:
            return np.where(x == mu, np.inf, 0.0)
        z = (x - mu) / sigma
        return np.exp(-0.5 * z * z) / (sigma * _SQRT_2PI)

    @staticmethod
    def _log_pdf(x, mu, sigma):
        if sigma == 0.0:
            return np.where(x == mu, np.inf, -np.inf)
        z = (x - mu) / sigma
        return -0.5 * z * z - np.log(sigma) - _LOG_SQRT_2PI

    @staticmethod
    def _cdf(x, mu, sigma):
        if sigma == 0.0:
            return np.where(x >= mu, 1.0, 0.0)
        return sps.ndtr((x - mu) / sigma)

    @staticmethod
    def _icdf(p, mu, sigma):
        return mu + sigma * sps.ndtri(p)

    def mean(self) -> float:
        return self.mu

    def var(self) -> float:
        return self.sigma * self.sigma

    def std(self) -> float:
        return self.sigma

    def skewness(self) -> float:
        return 0.0

    def entropy(self) -> float:
        if self.sigma == 0.0:
            return -math.inf
        return math.log(self.sigma) + 0.5 * (1.0 + math.log(2.0 * math.pi))

    def mode(self) -> float:
        return self.mu

    def median(self) -> float:
        return self.mu

    def minimum(self) -> float:
        return -math.inf

    def maximum(self) -> float:
        return math.inf


class LogNormal(ContinuousDistribution):
    """X with ln(X) ~ N(mu, sigma^2)."""

    PARAMETER_NAMES = ("mu", "sigma")
    mu = Parameter()
    sigma = Parameter()

    def __init__(self, mu: float = 0.0, sigma: float = 1.0, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(mu, sigma)

    @staticmethod
    def is_valid_parameter_set(mu: float, sigma: float) -> bool:
        return sigma > 0.0 and math.isfinite(mu) and math.isfinite(sigma)

    @staticmethod
    def _sample_unchecked(rng, mu, sigma):
        with np.errstate(over="ignore"):
            return float(np.exp(mu + sigma * _standard_normal(rng)))

    @classmethod
    def _fill_unchecked(cls, rng, values, mu, sigma):
        z = _standard_normals(rng, values.shape[0])
        _parallel_transform(values, z, lambda zi: np.exp(mu + sigma * zi))

    @staticmethod
    def _log_pdf(x, mu, sigma):
        positive = x > 0.0
        safe = np.where(positive, x, 1.0)
        z = (np.log(safe) - mu) / sigma
        out = -0.5 * z * z - np.log(safe * sigma) - _LOG_SQRT_2PI
        return np.where(positive, out, -np.inf)

    @staticmethod
    def _cdf(x, mu, sigma):
        positive = x > 0.0
        safe = np.where(positive, x, 1.0)
        return np.where(positive, sps.ndtr((np.log(safe) - mu) / sigma), 0.0)

    @staticmethod
    def _icdf(p, mu, sigma):
        return np.exp(mu + sigma * sps.ndtri(p))

    def mean(self) -> float:
        return math.exp(self.mu + 0.5 * self.sigma**2)

    def var(self) -> float:
        s2 = self.sigma**2
        return math.expm1(s2) * math.exp(2.0 * self.mu + s2)

    def skewness(self) -> float:
        s2 = self.sigma**2
        return (math.exp(s2) + 2.0) * math.sqrt(math.expm1(s2))

    def entropy(self) -> float:
        return self.mu + 0.5 + math.log(self.sigma) + _LOG_SQRT_2PI

    def mode(self) -> float:
        return math.exp(self.mu - self.sigma**2)

    def median(self) -> float:
        return math.exp(self.mu)

    def minimum(self) -> float:
        return 0.0

    def maximum(self) -> float:
        return math.inf


class TruncatedNormal(ContinuousDistribution):
    """
    Normal N(mu, sigma^2) restricted to [lower, upper].

    With ``alpha = (lower - mu) / sigma``, ``beta = (upper - mu) / sigma`` and
    ``Z = Phi(beta) - Phi(alpha)``, the density is ``phi(xi) / (sigma Z)`` on the
    interval and 0 outside. Bounds may be infinite.

    Sampling inverts the truncated CDF with one uniform per variate. When the
    interval lies entirely in the upper tail (``alpha > 0``) the inversion is
    done on the mirrored lower tail, where the normal CDF keeps its precision.
    """

    PARAMETER_NAMES = ("mu", "sigma", "lower", "upper")
    mu = Parameter()
    sigma = Parameter()
    lower = Parameter()
    upper = Parameter()

    def __init__(
        self,
        mu: float = 0.0,
        sigma: float = 1.0,
        lower: float = -math.inf,
        upper: float = math.inf,
        *,
        rng: UniformSource | int | None = None,
    ):
        super().__init__(rng=rng)
        self._assign(mu, sigma, lower, upper)

    @staticmethod
    def is_valid_parameter_set(mu: float, sigma: float, lower: float, upper: float) -> bool:
        return sigma > 0.0 and math.isfinite(mu) and math.isfinite(sigma) and lower < upper

    @classmethod
    def _derived(cls, mu, sigma, lower, upper):
        alpha = (lower - mu) / sigma
        beta = (upper - mu) / sigma
        if alpha > 0.0:
            z = float(sps.ndtr(-alpha) - sps.ndtr(-beta))
        else:
            z = float(sps.ndtr(beta) - sps.ndtr(alpha))
        return mu, sigma, lower, upper, alpha, beta, z

    @property
    def untruncated(self) -> Normal:
        """The parent Normal(mu, sigma), sharing this distribution's source."""
        return Normal(self.mu, self.sigma, rng=self.rng)

    @staticmethod
    def _log_pdf(x, mu, sigma, lower, upper, alpha, beta, z):
        xi = (x - mu) / sigma
        out = -0.5 * xi * xi - _LOG_SQRT_2PI - np.log(sigma * z)
        return np.where((x >= lower) & (x <= upper), out, -np.inf)

    @staticmethod
    def _cdf(x, mu, sigma, lower, upper, alpha, beta, z):
        xi = (np.clip(x, lower, upper) - mu) / sigma
        if alpha > 0.0:
            out = (sps.ndtr(-alpha) - sps.ndtr(-xi)) / z
        else:
            out = (sps.ndtr(xi) - sps.ndtr(alpha)) / z
        out = np.where(x < lower, 0.0, np.where(x >= upper, 1.0, out))
        return _clip_unit_interval(out)

    @staticmethod
    def _icdf(p, mu, sigma, lower, upper, alpha, beta, z):
        if alpha > 0.0:
            xi = -sps.ndtri(sps.ndtr(-alpha) - p * z)
        else:
            xi = sps.ndtri(sps.ndtr(alpha) + p * z)
        return np.clip(mu + sigma * xi, lower, upper)

    @classmethod
    def _sample_unchecked(cls, rng, *args):
        return float(cls._icdf(np.asarray(rng.random()), *args))

    @classmethod
    def _fill_unchecked(cls, rng, values, *args):
        u = rng.random(values.shape[0])
        _parallel_transform(values, u, lambda ui: cls._icdf(ui, *args))

    def _standardized(self) -> tuple[float, float, float]:
        _, _, _, _, alpha, beta, z = self._args
        return alpha, beta, z

    def mean(self) -> float:
        alpha, beta, z = self._standardized()
        return self.mu + self.sigma * (_phi(alpha) - _phi(beta)) / z

    def var(self) -> float:
        alpha, beta, z = self._standardized()
        shift = (_phi(alpha) - _phi(beta)) / z
        return self.sigma**2 * (1.0 + (_x_phi(alpha) - _x_phi(beta)) / z - shift * shift)

    def entropy(self) -> float:
        alpha, beta, z = self._standardized()
        return (
            math.log(math.sqrt(2.0 * math.pi * math.e) * self.sigma * z)
            + (_x_phi(alpha) - _x_phi(beta)) / (2.0 * z)
        )

    def mode(self) -> float:
        return min(max(self.mu, self.lower), self.upper)

    def median(self) -> float:
        return self.inv_cdf(0.5)

    def minimum(self) -> float:
        return self.lower

    def maximum(self) -> float:
        return self.upper


# -------------------------- Gamma family ----------------------------


class Gamma(ContinuousDistribution):
    """Gamma distribution with shape ``k`` and rate ``beta`` (mean ``k / beta``)."""

    PARAMETER_NAMES = ("shape", "rate")
    shape = Parameter()
    rate = Parameter()

    def __init__(self, shape: float, rate: float, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(shape, rate)

    @classmethod
    def with_shape_scale(cls, shape: float, scale: float, *, rng: UniformSource | int | None = None) -> Gamma:
        """Alternative constructor taking the scale ``1 / rate``."""
        return cls(shape, 1.0 / scale, rng=rng)

    @property
    def scale(self) -> float:
        return 1.0 / self.rate

    @staticmethod
    def is_valid_parameter_set(shape: float, rate: float) -> bool:
        return shape > 0.0 and rate > 0.0 and math.isfinite(shape) and math.isfinite(rate)

    _sample_unchecked = staticmethod(_gamma_sample)

    @staticmethod
    def _log_pdf(x, shape, rate):
        out = sps.xlogy(shape - 1.0, x) + shape * np.log(rate) - rate * x - sps.gammaln(shape)
        return np.where(x >= 0.0, out, -np.inf)

    @staticmethod
    def _cdf(x, shape, rate):
        return sps.gammainc(shape, rate * np.maximum(x, 0.0))

    @staticmethod
    def _icdf(p, shape, rate):
        return sps.gammaincinv(shape, p) / rate

    def mean(self) -> float:
        return self.shape / self.rate

    def var(self) -> float:
        return self.shape / (self.rate * self.rate)

    def skewness(self) -> float:
        return 2.0 / math.sqrt(self.shape)

    def entropy(self) -> float:
        k = self.shape
        return k - math.log(self.rate) + math.lgamma(k) + (1.0 - k) * float(sps.digamma(k))

    def mode(self) -> float:
        return max(self.shape - 1.0, 0.0) / self.rate

    def median(self) -> float:
        return self.inv_cdf(0.5)

    def minimum(self) -> float:
        return 0.0

    def maximum(self) -> float:
        return math.inf


class InverseGamma(ContinuousDistribution):
    """1 / X for X ~ Gamma(shape, rate=scale)."""

    PARAMETER_NAMES = ("shape", "scale")
    shape = Parameter()
    scale = Parameter()

    def __init__(self, shape: float, scale: float, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(shape, scale)

    @staticmethod
    def is_valid_parameter_set(shape: float, scale: float) -> bool:
        return shape > 0.0 and scale > 0.0 and math.isfinite(shape) and math.isfinite(scale)

    @staticmethod
    def _sample_unchecked(rng, shape, scale):
        return _ratio(1.0, _gamma_sample(rng, shape, scale))

    @staticmethod
    def _log_pdf(x, shape, scale):
        positive = x > 0.0
        safe = np.where(positive, x, 1.0)
        out = shape * np.log(scale) - sps.gammaln(shape) - (shape + 1.0) * np.log(safe) - scale / safe
        return np.where(positive, out, -np.inf)

    @staticmethod
    def _cdf(x, shape, scale):
        positive = x > 0.0
        safe = np.where(positive, x, 1.0)
        return np.where(positive, sps.gammaincc(shape, scale / safe), 0.0)

    @staticmethod
    def _icdf(p, shape, scale):
        return scale / sps.gammainccinv(shape, p)

    def mean(self) -> float:
        if self.shape <= 1.0:
            raise self._unsupported("mean", "requires shape > 1")
        return self.scale / (self.shape - 1.0)

    def var(self) -> float:
        if self.shape <= 2.0:
            raise self._unsupported("variance", "requires shape > 2")
        a = self.shape
        return self.scale**2 / ((a - 1.0) ** 2 * (a - 2.0))

    def skewness(self) -> float:
        if self.shape <= 3.0:
            raise self._unsupported("skewness", "requires shape > 3")
        return 4.0 * math.sqrt(self.shape - 2.0) / (self.shape - 3.0)

    def entropy(self) -> float:
        a = self.shape
        return a + math.log(self.scale) + math.lgamma(a) - (1.0 + a) * float(sps.digamma(a))

    def mode(self) -> float:
        return self.scale / (self.shape + 1.0)

    def median(self) -> float:
        return self.inv_cdf(0.5)

    def minimum(self) -> float:
        return 0.0

    def maximum(self) -> float:
        return math.inf


class Erlang(ContinuousDistribution):
    """Gamma distribution restricted to an integer ``shape`` (number of exponential stages)."""

    PARAMETER_NAMES = ("shape", "rate")
    shape = Parameter()
    rate = Parameter()

    def __init__(self, shape: int, rate: float, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(shape, rate)

    @classmethod
    def with_shape_scale(cls, shape: int, scale: float, *, rng: UniformSource | int | None = None) -> Erlang:
        return cls(shape, 1.0 / scale, rng=rng)

    @classmethod
    def _coerce_parameters(cls, shape, rate):
        return _ensure_integer(shape, "shape"), float(rate)

    @property
    def scale(self) -> float:
        return 1.0 / self.rate

    @staticmethod
    def is_valid_parameter_set(shape: int, rate: float) -> bool:
        return shape > 0 and rate > 0.0 and math.isfinite(rate)

    _sample_unchecked = staticmethod(_gamma_sample)

    @staticmethod
    def _log_pdf(x, shape, rate):
        return Gamma._log_pdf(x, shape, rate)

    @staticmethod
    def _cdf(x, shape, rate):
        return Gamma._cdf(x, shape, rate)

    @staticmethod
    def _icdf(p, shape, rate):
        return Gamma._icdf(p, shape, rate)

    def mean(self) -> float:
        return self.shape / self.rate

    def var(self) -> float:
        return self.shape / (self.rate * self.rate)

    def skewness(self) -> float:
        return 2.0 / math.sqrt(self.shape)

    def entropy(self) -> float:
        k = self.shape
        return k - math.log(self.rate) + math.lgamma(k) + (1.0 - k) * float(sps.digamma(k))

    def mode(self) -> float:
        return (self.shape - 1.0) / self.rate

    def median(self) -> float:
        return self.inv_cdf(0.5)

    def minimum(self) -> float:
        return 0.0

    def maximum(self) -> float:
        return math.inf


class Beta(ContinuousDistribution):
    """Beta(a, b) on [0, 1], sampled as X / (X + Y) with X ~ Gamma(a), Y ~ Gamma(b)."""

    PARAMETER_NAMES = ("a", "b")
    a = Parameter()
    b = Parameter()

    def __init__(self, a: float, b: float, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(a, b)

    @staticmethod
    def is_valid_parameter_set(a: float, b: float) -> bool:
        return a > 0.0 and b > 0.0 and math.isfinite(a) and math.isfinite(b)

    @staticmethod
    def _sample_unchecked(rng, a, b):
        while True:
            x = _gamma_sample(rng, a, 1.0)
            y = _gamma_sample(rng, b, 1.0)
            if x != 0.0 or y != 0.0:
                return x / (x + y)

    @staticmethod
    def _log_pdf(x, a, b):
        out = sps.xlogy(a - 1.0, x) + sps.xlog1py(b - 1.0, -x) - sps.betaln(a, b)
        return np.where((x >= 0.0) & (x <= 1.0), out, -np.inf)

    @staticmethod
    def _cdf(x, a, b):
        return sps.betainc(a, b, np.clip(x, 0.0, 1.0))

    @staticmethod
    def _icdf(p, a, b):
        return sps.betaincinv(a, b, p)

    def mean(self) -> float:
        return self.a / (self.a + self.b)

    def var(self) -> float:
        a, b = self.a, self.b
        return a * b / ((a + b) ** 2 * (a + b + 1.0))

    def skewness(self) -> float:
        a, b = self.a, self.b
        return 2.0 * (b - a) * math.sqrt(a + b + 1.0) / ((a + b + 2.0) * math.sqrt(a * b))

    def entropy(self) -> float:
        a, b = self.a, self.b
        return float(
            sps.betaln(a, b)
            - (a - 1.0) * sps.digamma(a)
            - (b - 1.0) * sps.digamma(b)
            + (a + b - 2.0) * sps.digamma(a + b)
        )

    def mode(self) -> float:
        a, b = self.a, self.b
        if a > 1.0 and b > 1.0:
            return (a - 1.0) / (a + b - 2.0)
        if a == 1.0 and b == 1.0:
            return 0.5
        if a <= 1.0 and b > 1.0:
            return 0.0
        if a > 1.0 and b <= 1.0:
            return 1.0
        raise self._unsupported("mode", "the density is unbounded at both ends")

    def median(self) -> float:
        return self.inv_cdf(0.5)

    def minimum(self) -> float:
        return 0.0

    def maximum(self) -> float:
        return 1.0


class Chi(ContinuousDistribution):
    """Square root of a sum of ``freedom`` squared standard normals."""

    PARAMETER_NAMES = ("freedom",)
    freedom = Parameter()

    def __init__(self, freedom: int, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(freedom)

    @classmethod
    def _coerce_parameters(cls, freedom):
        return (_ensure_integer(freedom, "freedom"),)

    @staticmethod
    def is_valid_parameter_set(freedom: int) -> bool:
        return freedom > 0 and float(freedom).is_integer()

    @staticmethod
    def _sample_unchecked(rng, freedom):
        total = 0.0
        for _ in range(freedom):
            z = _standard_normal(rng)
            total += z * z
        return math.sqrt(total)

    @classmethod
    def _fill_unchecked(cls, rng, values, freedom):
        n = values.shape[0]
        z = _standard_normals(rng, n * freedom).reshape(n, freedom)
        _parallel_transform(values, z, lambda rows: np.sqrt(np.sum(rows * rows, axis=1)))

    @staticmethod
    def _log_pdf(x, freedom):
        k = float(freedom)
        out = sps.xlogy(k - 1.0, x) - 0.5 * x * x - (0.5 * k - 1.0) * math.log(2.0) - sps.gammaln(0.5 * k)
        return np.where(x >= 0.0, out, -np.inf)

    @staticmethod
    def _cdf(x, freedom):
        x = np.maximum(x, 0.0)
        return sps.gammainc(0.5 * freedom, 0.5 * x * x)

    @staticmethod
    def _icdf(p, freedom):
        return np.sqrt(2.0 * sps.gammaincinv(0.5 * freedom, p))

    def mean(self) -> float:
        k = self.freedom
        return math.sqrt(2.0) * math.exp(math.lgamma(0.5 * (k + 1)) - math.lgamma(0.5 * k))

    def var(self) -> float:
        mu = self.mean()
        return self.freedom - mu * mu

    def skewness(self) -> float:
        mu = self.mean()
        sigma = math.sqrt(self.var())
        return mu * (1.0 - 2.0 * sigma * sigma) / sigma**3

    def entropy(self) -> float:
        k = self.freedom
        return math.lgamma(0.5 * k) + 0.5 * (k - math.log(2.0) - (k - 1.0) * float(sps.digamma(0.5 * k)))

    def mode(self) -> float:
        return math.sqrt(self.freedom - 1.0)

    def median(self) -> float:
        return self.inv_cdf(0.5)

    def minimum(self) -> float:
        return 0.0

    def maximum(self) -> float:
        return math.inf


class ChiSquared(ContinuousDistribution):
    """Chi-squared with (possibly non-integer) ``freedom`` degrees of freedom.

    Integer freedom is sampled as a sum of squared normals, anything else as
    Gamma(freedom / 2, rate 1/2).
    """

    PARAMETER_NAMES = ("freedom",)
    freedom = Parameter()

    def __init__(self, freedom: float, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(freedom)

    @staticmethod
    def is_valid_parameter_set(freedom: float) -> bool:
        return freedom > 0.0 and math.isfinite(freedom)

    _sample_unchecked = staticmethod(_chi_squared_sample)

    @staticmethod
    def _log_pdf(x, freedom):
        half = 0.5 * freedom
        out = sps.xlogy(half - 1.0, x) - 0.5 * x - half * math.log(2.0) - sps.gammaln(half)
        return np.where(x >= 0.0, out, -np.inf)

    @staticmethod
    def _cdf(x, freedom):
        return sps.gammainc(0.5 * freedom, 0.5 * np.maximum(x, 0.0))

    @staticmethod
    def _icdf(p, freedom):
        return 2.0 * sps.gammaincinv(0.5 * freedom, p)

    def mean(self) -> float:
        return self.freedom

    def var(self) -> float:
        return 2.0 * self.freedom

    def skewness(self) -> float:
        return math.sqrt(8.0 / self.freedom)

    def entropy(self) -> float:
        half = 0.5 * self.freedom
        return half + math.log(2.0) + math.lgamma(half) + (1.0 - half) * float(sps.digamma(half))

    def mode(self) -> float:
        return max(self.freedom - 2.0, 0.0)

    def median(self) -> float:
        return self.inv_cdf(0.5)

    def minimum(self) -> float:
        return 0.0

    def maximum(self) -> float:
        return math.inf


class StudentT(ContinuousDistribution):
    """
    Location-scale Student's t.

    Sampled as a normal whose precision is drawn from Gamma(freedom / 2, rate 1/2),
    i.e. ``N(location, scale * sqrt(freedom / g))``.
    """

    PARAMETER_NAMES = ("location", "scale", "freedom")
    location = Parameter()
    scale = Parameter()
    freedom = Parameter()

    def __init__(
        self,
        location: float = 0.0,
        scale: float = 1.0,
        freedom: float = 1.0,
        *,
        rng: UniformSource | int | None = None,
    ):
        super().__init__(rng=rng)
        self._assign(location, scale, freedom)

    @staticmethod
    def is_valid_parameter_set(location: float, scale: float, freedom: float) -> bool:
        return (
            scale > 0.0
            and freedom > 0.0
            and math.isfinite(location)
            and math.isfinite(scale)
            and math.isfinite(freedom)
        )

    @staticmethod
    def _sample_unchecked(rng, location, scale, freedom):
        g = _gamma_sample(rng, 0.5 * freedom, 0.5)
        return location + scale * math.sqrt(_ratio(freedom, g)) * _standard_normal(rng)

    @classmethod
    def _fill_unchecked(cls, rng, values, location, scale, freedom):
        n = values.shape[0]
        gammas = np.empty(n, dtype=float)
        for i in range(n):
            gammas[i] = _gamma_sample(rng, 0.5 * freedom, 0.5)
        for i in range(n):
            values[i] = location + scale * math.sqrt(_ratio(freedom, gammas[i])) * _standard_normal(rng)

    @staticmethod
    def _log_pdf(x, location, scale, freedom):
        z = (x - location) / scale
        return (
            sps.gammaln(0.5 * (freedom + 1.0))
            - sps.gammaln(0.5 * freedom)
            - 0.5 * np.log(freedom * math.pi)
            - np.log(scale)
            - 0.5 * (freedom + 1.0) * np.log1p(z * z / freedom)
        )

    @staticmethod
    def _cdf(x, location, scale, freedom):
        z = (x - location) / scale
        tail = 0.5 * sps.betainc(0.5 * freedom, 0.5, freedom / (freedom + z * z))
        return np.where(z <= 0.0, tail, 1.0 - tail)

    @staticmethod
    def _icdf(p, location, scale, freedom):
        return location + scale * sps.stdtrit(freedom, p)

    def mean(self) -> float:
        if self.freedom <= 1.0:
            raise self._unsupported("mean", "requires freedom > 1")
        return self.location

    def var(self) -> float:
        nu = self.freedom
        if nu > 2.0:
            return nu * self.scale**2 / (nu - 2.0)
        if nu > 1.0:
            return math.inf
        raise self._unsupported("variance", "requires freedom > 1")

    def skewness(self) -> float:
        if self.freedom <= 3.0:
            raise self._unsupported("skewness", "requires freedom > 3")
        return 0.0

    def entropy(self) -> float:
        nu = self.freedom
        return float(
            0.5 * (nu + 1.0) * (sps.digamma(0.5 * (nu + 1.0)) - sps.digamma(0.5 * nu))
            + 0.5 * math.log(nu)
            + sps.betaln(0.5 * nu, 0.5)
            + math.log(self.scale)
        )

    def mode(self) -> float:
        return self.location

    def median(self) -> float:
        return self.location

    def minimum(self) -> float:
        return -math.inf

    def maximum(self) -> float:
        return math.inf


class FisherSnedecor(ContinuousDistribution):
    """F distribution, the ratio of two scaled chi-squared variates."""

    PARAMETER_NAMES = ("d1", "d2")
    d1 = Parameter()
    d2 = Parameter()

    def __init__(self, d1: float, d2: float, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(d1, d2)

    @staticmethod
    def is_valid_parameter_set(d1: float, d2: float) -> bool:
        return d1 > 0.0 and d2 > 0.0 and math.isfinite(d1) and math.isfinite(d2)

    @staticmethod
    def _sample_unchecked(rng, d1, d2):
        x = _chi_squared_sample(rng, d1)
        y = _chi_squared_sample(rng, d2)
        return _ratio(x * d2, y * d1)

    @classmethod
    def _fill_unchecked(cls, rng, values, d1, d2):
        n = values.shape[0]
        numerators = np.array([_chi_squared_sample(rng, d1) for _ in range(n)], dtype=float)
        denominators = np.array([_chi_squared_sample(rng, d2) for _ in range(n)], dtype=float)
        with np.errstate(divide="ignore", invalid="ignore"):
            values[:] = (numerators * d2) / (denominators * d1)

    @staticmethod
    def _log_pdf(x, d1, d2):
        h1, h2 = 0.5 * d1, 0.5 * d2
        safe = np.maximum(x, 0.0)
        out = h1 * np.log(d1 / d2) + sps.xlogy(h1 - 1.0, safe) - (h1 + h2) * np.log1p(d1 * safe / d2) - sps.betaln(h1, h2)
        return np.where(x >= 0.0, out, -np.inf)

    @staticmethod
    def _cdf(x, d1, d2):
        safe = np.maximum(x, 0.0)
        return sps.betainc(0.5 * d1, 0.5 * d2, d1 * safe / (d1 * safe + d2))

    @staticmethod
    def _icdf(p, d1, d2):
        q = sps.betaincinv(0.5 * d1, 0.5 * d2, p)
        return d2 * q / (d1 * (1.0 - q))

    def mean(self) -> float:
        if self.d2 <= 2.0:
            raise self._unsupported("mean", "requires d2 > 2")
        return self.d2 / (self.d2 - 2.0)

    def var(self) -> float:
        d1, d2 = self.d1, self.d2
        if d2 <= 4.0:
            raise self._unsupported("variance", "requires d2 > 4")
        return 2.0 * d2 * d2 * (d1 + d2 - 2.0) / (d1 * (d2 - 2.0) ** 2 * (d2 - 4.0))

    def skewness(self) -> float:
        d1, d2 = self.d1, self.d2
        if d2 <= 6.0:
            raise self._unsupported("skewness", "requires d2 > 6")
        return (2.0 * d1 + d2 - 2.0) * math.sqrt(8.0 * (d2 - 4.0)) / ((d2 - 6.0) * math.sqrt(d1 * (d1 + d2 - 2.0)))

    def mode(self) -> float:
        if self.d1 <= 2.0:
            raise self._unsupported("mode", "requires d1 > 2")
        return (self.d1 - 2.0) / self.d1 * self.d2 / (self.d2 + 2.0)

    def median(self) -> float:
        return self.inv_cdf(0.5)

    def minimum(self) -> float:
        return 0.0

    def maximum(self) -> float:
        return math.inf


# -------------------------- Closed-form inverse CDF ----------------------------
# These draw their uniforms in bulk for batch fill and transform them in parallel.


class Cauchy(ContinuousDistribution):
    """Cauchy(location, scale). Mean, variance and skewness are undefined."""

    PARAMETER_NAMES = ("location", "scale")
    location = Parameter()
    scale = Parameter()

    def __init__(self, location: float = 0.0, scale: float = 1.0, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(location, scale)

    @staticmethod
    def is_valid_parameter_set(location: float, scale: float) -> bool:
        return scale > 0.0 and math.isfinite(location) and math.isfinite(scale)

    @staticmethod
    def _transform(u, location, scale):
        return location + scale * np.tan(np.pi * (u - 0.5))

    @classmethod
    def _sample_unchecked(cls, rng, location, scale):
        return location + scale * math.tan(math.pi * (rng.random() - 0.5))

    @classmethod
    def _fill_unchecked(cls, rng, values, location, scale):
        u = rng.random(values.shape[0])
        _parallel_transform(values, u, lambda ui: cls._transform(ui, location, scale))

    @staticmethod
    def _log_pdf(x, location, scale):
        z = (x - location) / scale
        return -np.log(math.pi * scale) - np.log1p(z * z)

    @staticmethod
    def _cdf(x, location, scale):
        return 0.5 + np.arctan((x - location) / scale) / np.pi

    @classmethod
    def _icdf(cls, p, location, scale):
        return cls._transform(p, location, scale)

    def mean(self) -> float:
        raise self._unsupported("mean", "the Cauchy distribution has no finite moments")

    def var(self) -> float:
        raise self._unsupported("variance", "the Cauchy distribution has no finite moments")

    def skewness(self) -> float:
        raise self._unsupported("skewness", "the Cauchy distribution has no finite moments")

    def entropy(self) -> float:
        return math.log(4.0 * math.pi * self.scale)

    def mode(self) -> float:
        return self.location

    def median(self) -> float:
        return self.location

    def minimum(self) -> float:
        return -math.inf

    def maximum(self) -> float:
        return math.inf


class Exponential(ContinuousDistribution):
    """Exponential(rate), sampled as ``-ln(u) / rate`` with ``u`` in (0, 1)."""

    PARAMETER_NAMES = ("rate",)
    rate = Parameter()

    def __init__(self, rate: float = 1.0, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(rate)

    @staticmethod
    def is_valid_parameter_set(rate: float) -> bool:
        return rate > 0.0 and math.isfinite(rate)

    @staticmethod
    def _sample_unchecked(rng, rate):
        return -math.log(_positive_uniform(rng)) / rate

    @classmethod
    def _fill_unchecked(cls, rng, values, rate):
        u = _uniforms_without_zero(rng, values.shape[0])
        _parallel_transform(values, u, lambda ui: -np.log(ui) / rate)

    @staticmethod
    def _log_pdf(x, rate):
        return np.where(x >= 0.0, np.log(rate) - rate * x, -np.inf)

    @staticmethod
    def _cdf(x, rate):
        return np.where(x >= 0.0, -np.expm1(-rate * x), 0.0)

    @staticmethod
    def _icdf(p, rate):
        return -np.log1p(-p) / rate

    def mean(self) -> float:
        return 1.0 / self.rate

    def var(self) -> float:
        return 1.0 / (self.rate * self.rate)

    def skewness(self) -> float:
        return 2.0

    def entropy(self) -> float:
        return 1.0 - math.log(self.rate)

    def mode(self) -> float:
        return 0.0

    def median(self) -> float:
        return math.log(2.0) / self.rate

    def minimum(self) -> float:
        return 0.0

    def maximum(self) -> float:
        return math.inf


class Pareto(ContinuousDistribution):
    """Pareto(scale, shape) on [scale, inf).

    Mean is ``inf`` for ``shape <= 1`` and variance ``inf`` for ``shape <= 2``.
    """

    PARAMETER_NAMES = ("scale", "shape")
    scale = Parameter()
    shape = Parameter()

    def __init__(self, scale: float, shape: float, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(scale, shape)

    @staticmethod
    def is_valid_parameter_set(scale: float, shape: float) -> bool:
        return scale > 0.0 and shape > 0.0 and math.isfinite(scale) and math.isfinite(shape)

    @staticmethod
    def _sample_unchecked(rng, scale, shape):
        u = rng.random()
        return scale * _power(u, -1.0 / shape) if u > 0.0 else math.inf

    @classmethod
    def _fill_unchecked(cls, rng, values, scale, shape):
        u = rng.random(values.shape[0])
        _parallel_transform(values, u, lambda ui: scale * np.power(ui, -1.0 / shape))

    @staticmethod
    def _log_pdf(x, scale, shape):
        safe = np.maximum(x, scale)
        out = np.log(shape) + shape * np.log(scale) - (shape + 1.0) * np.log(safe)
        return np.where(x >= scale, out, -np.inf)

    @staticmethod
    def _cdf(x, scale, shape):
        safe = np.maximum(x, scale)
        return np.where(x >= scale, -np.expm1(shape * np.log(scale / safe)), 0.0)

    @staticmethod
    def _icdf(p, scale, shape):
        return scale * np.power(1.0 - p, -1.0 / shape)

    def mean(self) -> float:
        if self.shape <= 1.0:
            return math.inf
        return self.shape * self.scale / (self.shape - 1.0)

    def var(self) -> float:
        a = self.shape
        if a <= 2.0:
            return math.inf
        return self.scale**2 * a / ((a - 1.0) ** 2 * (a - 2.0))

    def skewness(self) -> float:
        a = self.shape
        if a <= 3.0:
            raise self._unsupported("skewness", "requires shape > 3")
        return 2.0 * (1.0 + a) / (a - 3.0) * math.sqrt((a - 2.0) / a)

    def entropy(self) -> float:
        return math.log(self.scale / self.shape) + 1.0 / self.shape + 1.0

    def mode(self) -> float:
        return self.scale

    def median(self) -> float:
        return self.scale * 2.0 ** (1.0 / self.shape)

    def minimum(self) -> float:
        return self.scale

    def maximum(self) -> float:
        return math.inf


class Weibull(ContinuousDistribution):
    """Weibull(shape k, scale lambda).

    ``lambda ** -k`` is cached alongside the parameters; it appears in every
    density and CDF evaluation.
    """

    PARAMETER_NAMES = ("shape", "scale")
    shape = Parameter()
    scale = Parameter()

    def __init__(self, shape: float, scale: float, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(shape, scale)

    @staticmethod
    def is_valid_parameter_set(shape: float, scale: float) -> bool:
        return shape > 0.0 and scale > 0.0 and math.isfinite(shape) and math.isfinite(scale)

    @classmethod
    def _derived(cls, shape, scale):
        return shape, scale, _power(scale, -shape)

    @staticmethod
    def _sample_unchecked(rng, shape, scale, scale_pow_shape_inv):
        return scale * _power(-math.log(_positive_uniform(rng)), 1.0 / shape)

    @classmethod
    def _fill_unchecked(cls, rng, values, shape, scale, scale_pow_shape_inv):
        u = _uniforms_without_zero(rng, values.shape[0])
        _parallel_transform(values, u, lambda ui: scale * np.power(-np.log(ui), 1.0 / shape))

    @staticmethod
    def _pdf(x, shape, scale, scale_pow_shape_inv):
        safe = np.maximum(x, 0.0)
        out = shape * scale_pow_shape_inv * np.power(safe, shape - 1.0) * np.exp(-np.power(safe, shape) * scale_pow_shape_inv)
        return np.where(x >= 0.0, out, 0.0)

    @staticmethod
    def _log_pdf(x, shape, scale, scale_pow_shape_inv):
        safe = np.maximum(x, 0.0)
        out = (
            np.log(shape)
            + np.log(scale_pow_shape_inv)
            + sps.xlogy(shape - 1.0, safe)
            - np.power(safe, shape) * scale_pow_shape_inv
        )
        return np.where(x >= 0.0, out, -np.inf)

    @staticmethod
    def _cdf(x, shape, scale, scale_pow_shape_inv):
        safe = np.maximum(x, 0.0)
        return -np.expm1(-np.power(safe, shape) * scale_pow_shape_inv)

    @staticmethod
    def _icdf(p, shape, scale, scale_pow_shape_inv):
        return scale * np.power(-np.log1p(-p), 1.0 / shape)

    def mean(self) -> float:
        return self.scale * float(sps.gamma(1.0 + 1.0 / self.shape))

    def var(self) -> float:
        mu = self.mean()
        second = self.scale**2 * float(sps.gamma(1.0 + 2.0 / self.shape))
        if math.isinf(second):
            return math.inf
        return second - mu * mu

    def skewness(self) -> float:
        mu = self.mean()
        sigma = math.sqrt(self.var())
        third = self.scale**3 * math.gamma(1.0 + 3.0 / self.shape)
        return (third - 3.0 * mu * sigma**2 - mu**3) / sigma**3

    def entropy(self) -> float:
        k = self.shape
        return _EULER_GAMMA * (1.0 - 1.0 / k) + math.log(self.scale / k) + 1.0

    def mode(self) -> float:
        k = self.shape
        if k <= 1.0:
            return 0.0
        return self.scale * ((k - 1.0) / k) ** (1.0 / k)

    def median(self) -> float:
        return self.scale * math.log(2.0) ** (1.0 / self.shape)

    def minimum(self) -> float:
        return 0.0

    def maximum(self) -> float:
        return math.inf


class Rayleigh(ContinuousDistribution):
    PARAMETER_NAMES = ("scale",)
    scale = Parameter()

    def __init__(self, scale: float = 1.0, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(scale)

    @staticmethod
    def is_valid_parameter_set(scale: float) -> bool:
        return scale > 0.0 and math.isfinite(scale)

    @staticmethod
    def _sample_unchecked(rng, scale):
        return scale * math.sqrt(-2.0 * math.log(_positive_uniform(rng)))

    @classmethod
    def _fill_unchecked(cls, rng, values, scale):
        u = _uniforms_without_zero(rng, values.shape[0])
        _parallel_transform(values, u, lambda ui: scale * np.sqrt(-2.0 * np.log(ui)))

    @staticmethod
    def _log_pdf(x, scale):
        safe = np.maximum(x, 0.0)
        out = np.log(safe) - 2.0 * np.log(scale) - safe * safe / (2.0 * scale * scale)
        return np.where(x >= 0.0, out, -np.inf)

    @staticmethod
    def _cdf(x, scale):
        safe = np.maximum(x, 0.0)
        return -np.expm1(-safe * safe / (2.0 * scale * scale))

    @staticmethod
    def _icdf(p, scale):
        return scale * np.sqrt(-2.0 * np.log1p(-p))

    def mean(self) -> float:
        return self.scale * math.sqrt(0.5 * math.pi)

    def var(self) -> float:
        return (2.0 - 0.5 * math.pi) * self.scale**2

    def skewness(self) -> float:
        return 2.0 * math.sqrt(math.pi) * (math.pi - 3.0) / (4.0 - math.pi) ** 1.5

    def entropy(self) -> float:
        return 1.0 + math.log(self.scale / math.sqrt(2.0)) + 0.5 * _EULER_GAMMA

    def mode(self) -> float:
        return self.scale

    def median(self) -> float:
        return self.scale * math.sqrt(math.log(4.0))

    def minimum(self) -> float:
        return 0.0

    def maximum(self) -> float:
        return math.inf


class Laplace(ContinuousDistribution):
    PARAMETER_NAMES = ("location", "scale")
    location = Parameter()
    scale = Parameter()

    def __init__(self, location: float = 0.0, scale: float = 1.0, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(location, scale)

    @staticmethod
    def is_valid_parameter_set(location: float, scale: float) -> bool:
        return scale > 0.0 and math.isfinite(location) and math.isfinite(scale)

    @staticmethod
    def _transform(u, location, scale):
        shifted = u - 0.5
        return location - scale * np.sign(shifted) * np.log1p(-2.0 * np.abs(shifted))

    @classmethod
    def _sample_unchecked(cls, rng, location, scale):
        return float(cls._transform(rng.random(), location, scale))

    @classmethod
    def _fill_unchecked(cls, rng, values, location, scale):
        u = rng.random(values.shape[0])
        _parallel_transform(values, u, lambda ui: cls._transform(ui, location, scale))

    @staticmethod
    def _log_pdf(x, location, scale):
        return -np.log(2.0 * scale) - np.abs(x - location) / scale

    @staticmethod
    def _cdf(x, location, scale):
        z = (x - location) / scale
        return np.where(z < 0.0, 0.5 * np.exp(z), 1.0 - 0.5 * np.exp(-z))

    @classmethod
    def _icdf(cls, p, location, scale):
        return cls._transform(p, location, scale)

    def mean(self) -> float:
        return self.location

    def var(self) -> float:
        return 2.0 * self.scale**2

    def skewness(self) -> float:
        return 0.0

    def entropy(self) -> float:
        return math.log(2.0 * math.e * self.scale)

    def mode(self) -> float:
        return self.location

    def median(self) -> float:
        return self.location

    def minimum(self) -> float:
        return -math.inf

    def maximum(self) -> float:
        return math.inf


class Logistic(ContinuousDistribution):
    """Logistic(location, scale), sampled through the logit of a uniform."""

    PARAMETER_NAMES = ("location", "scale")
    location = Parameter()
    scale = Parameter()

    def __init__(self, location: float = 0.0, scale: float = 1.0, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(location, scale)

    @classmethod
    def with_mean_std(cls, mean: float, std: float, *, rng: UniformSource | int | None = None) -> Logistic:
        """Logistic with the given mean and standard deviation."""
        return cls(mean, math.sqrt(3.0) * std / math.pi, rng=rng)

    @staticmethod
    def is_valid_parameter_set(location: float, scale: float) -> bool:
        return scale > 0.0 and math.isfinite(scale) and not math.isnan(location)

    @staticmethod
    def _sample_unchecked(rng, location, scale):
        return location + scale * float(sps.logit(rng.random()))

    @classmethod
    def _fill_unchecked(cls, rng, values, location, scale):
        u = rng.random(values.shape[0])
        _parallel_transform(values, u, lambda ui: location + scale * sps.logit(ui))

    @staticmethod
    def _log_pdf(x, location, scale):
        # symmetric in z; written with -|z| so exp never overflows
        z = np.abs((x - location) / scale)
        return -z - math.log(scale) - 2.0 * np.log1p(np.exp(-z))

    @staticmethod
    def _cdf(x, location, scale):
        return sps.expit((x - location) / scale)

    @staticmethod
    def _icdf(p, location, scale):
        return location + scale * sps.logit(p)

    def mean(self) -> float:
        return self.location

    def var(self) -> float:
        return (self.scale * math.pi) ** 2 / 3.0

    def skewness(self) -> float:
        return 0.0

    def entropy(self) -> float:
        return math.log(self.scale) + 2.0

    def mode(self) -> float:
        return self.location

    def median(self) -> float:
        return self.location

    def minimum(self) -> float:
        return -math.inf

    def maximum(self) -> float:
        return math.inf


class ContinuousUniform(ContinuousDistribution):
    """Uniform on [lower, upper]. ``lower == upper`` is a point mass."""

    PARAMETER_NAMES = ("lower", "upper")
    lower = Parameter()
    upper = Parameter()

    def __init__(self, lower: float = 0.0, upper: float = 1.0, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(lower, upper)

    @staticmethod
    def is_valid_parameter_set(lower: float, upper: float) -> bool:
        return lower <= upper and math.isfinite(lower) and math.isfinite(upper)

    @staticmethod
    def _sample_unchecked(rng, lower, upper):
        return lower + rng.random() * (upper - lower)

    @classmethod
    def _fill_unchecked(cls, rng, values, lower, upper):
        u = rng.random(values.shape[0])
        _parallel_transform(values, u, lambda ui: lower + ui * (upper - lower))

    @staticmethod
    def _pdf(x, lower, upper):
        return np.where((x >= lower) & (x <= upper), 1.0 / (upper - lower) if upper > lower else np.inf, 0.0)

    @staticmethod
    def _log_pdf(x, lower, upper):
        width = upper - lower
        inside = -math.log(width) if width > 0.0 else np.inf
        return np.where((x >= lower) & (x <= upper), inside, -np.inf)

    @staticmethod
    def _cdf(x, lower, upper):
        if upper == lower:
            return np.where(x >= lower, 1.0, 0.0)
        return np.clip((x - lower) / (upper - lower), 0.0, 1.0)

    @staticmethod
    def _icdf(p, lower, upper):
        return lower + p * (upper - lower)

    def mean(self) -> float:
        return 0.5 * (self.lower + self.upper)

    def var(self) -> float:
        return (self.upper - self.lower) ** 2 / 12.0

    def skewness(self) -> float:
        return 0.0

    def entropy(self) -> float:
        if self.upper == self.lower:
            return -math.inf
        return math.log(self.upper - self.lower)

    def mode(self) -> float:
        return self.mean()

    def median(self) -> float:
        return self.mean()

    def minimum(self) -> float:
        return self.lower

    def maximum(self) -> float:
        return self.upper


class Triangular(ContinuousDistribution):
    """
    Triangular distribution on [lower, upper] with its peak at ``peak``.

    Sampled by inverting the piecewise-quadratic CDF, one uniform per draw.
    """

    PARAMETER_NAMES = ("lower", "upper", "peak")
    lower = Parameter()
    upper = Parameter()
    peak = Parameter()

    def __init__(self, lower: float, upper: float, peak: float, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(lower, upper, peak)

    @staticmethod
    def is_valid_parameter_set(lower: float, upper: float, peak: float) -> bool:
        return (
            lower <= peak <= upper
            and lower < upper
            and math.isfinite(lower)
            and math.isfinite(upper)
        )

    @staticmethod
    def _icdf(p, lower, upper, peak):
        width = upper - lower
        left = lower + np.sqrt(p * width * (peak - lower))
        right = upper - np.sqrt((1.0 - p) * width * (upper - peak))
        return np.where(p < (peak - lower) / width, left, right)

    @classmethod
    def _sample_unchecked(cls, rng, lower, upper, peak):
        return float(cls._icdf(rng.random(), lower, upper, peak))

    @classmethod
    def _fill_unchecked(cls, rng, values, lower, upper, peak):
        u = rng.random(values.shape[0])
        _parallel_transform(values, u, lambda ui: cls._icdf(ui, lower, upper, peak))

    @staticmethod
    def _pdf(x, lower, upper, peak):
        width = upper - lower
        rising = 2.0 * (x - lower) / (width * (peak - lower))
        falling = 2.0 * (upper - x) / (width * (upper - peak))
        out = np.where(x < peak, rising, np.where(x > peak, falling, 2.0 / width))
        return np.where((x >= lower) & (x <= upper), out, 0.0)

    @staticmethod
    def _cdf(x, lower, upper, peak):
        width = upper - lower
        rising = (x - lower) ** 2 / (width * (peak - lower))
        falling = 1.0 - (upper - x) ** 2 / (width * (upper - peak))
        out = np.where(x < peak, rising, np.where(x > peak, falling, (peak - lower) / width))
        return np.where(x < lower, 0.0, np.where(x >= upper, 1.0, out))

    def mean(self) -> float:
        return (self.lower + self.upper + self.peak) / 3.0

    def _spread(self) -> float:
        a, b, c = self.lower, self.upper, self.peak
        return a * a + b * b + c * c - a * b - a * c - b * c

    def var(self) -> float:
        return self._spread() / 18.0

    def skewness(self) -> float:
        a, b, c = self.lower, self.upper, self.peak
        numerator = math.sqrt(2.0) * (a + b - 2.0 * c) * (2.0 * a - b - c) * (a - 2.0 * b + c)
        return numerator / (5.0 * self._spread() ** 1.5)

    def entropy(self) -> float:
        return 0.5 + math.log(0.5 * (self.upper - self.lower))

    def mode(self) -> float:
        return self.peak

    def median(self) -> float:
        a, b, c = self.lower, self.upper, self.peak
        if c >= 0.5 * (a + b):
            return a + math.sqrt(0.5 * (b - a) * (c - a))
        return b - math.sqrt(0.5 * (b - a) * (b - c))

    def minimum(self) -> float:
        return self.lower

    def maximum(self) -> float:
        return self.upper


class Burr(ContinuousDistribution):
    """
    Burr Type XII with scale ``a`` and shape parameters ``c`` and ``k``.

    Raw moments ``E[X^n] = a^n Gamma(1 + n/c) Gamma(k - n/c) / Gamma(k)`` exist
    only for ``n < c k``; :meth:`raw_moment` raises otherwise.
    """

    PARAMETER_NAMES = ("a", "c", "k")
    a = Parameter()
    c = Parameter()
    k = Parameter()

    def __init__(self, a: float, c: float, k: float, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(a, c, k)

    @staticmethod
    def is_valid_parameter_set(a: float, c: float, k: float) -> bool:
        return all(v > 0.0 and math.isfinite(v) for v in (a, c, k))

    @staticmethod
    def _transform(u, a, c, k):
        return a * np.power(np.power(1.0 - u, -1.0 / k) - 1.0, 1.0 / c)

    @classmethod
    def _sample_unchecked(cls, rng, a, c, k):
        return float(cls._transform(rng.random(), a, c, k))

    @classmethod
    def _fill_unchecked(cls, rng, values, a, c, k):
        u = rng.random(values.shape[0])
        _parallel_transform(values, u, lambda ui: cls._transform(ui, a, c, k))

    @staticmethod
    def _log_pdf(x, a, c, k):
        y = np.maximum(x, 0.0) / a
        out = np.log(k * c / a) + sps.xlogy(c - 1.0, y) - (k + 1.0) * np.log1p(np.power(y, c))
        return np.where(x > 0.0, out, -np.inf)

    @staticmethod
    def _cdf(x, a, c, k):
        y = np.maximum(x, 0.0) / a
        return -np.expm1(-k * np.log1p(np.power(y, c)))

    @classmethod
    def _icdf(cls, p, a, c, k):
        return cls._transform(p, a, c, k)

    def raw_moment(self, n: float) -> float:
        """E[X^n]; defined only for ``n < c k``."""
        a, c, k = self.a, self.c, self.k
        if n >= c * k:
            raise self._unsupported(f"moment of order {n}", "requires n < c * k")
        return a**n * math.exp(math.lgamma(1.0 + n / c) + math.lgamma(k - n / c) - math.lgamma(k))

    def mean(self) -> float:
        return self.raw_moment(1)

    def var(self) -> float:
        mu = self.mean()
        return self.raw_moment(2) - mu * mu

    def skewness(self) -> float:
        mu = self.mean()
        sigma = math.sqrt(self.var())
        return (self.raw_moment(3) - 3.0 * mu * sigma**2 - mu**3) / sigma**3

    def mode(self) -> float:
        a, c, k = self.a, self.c, self.k
        if c <= 1.0:
            return 0.0
        return a * ((c - 1.0) / (k * c + 1.0)) ** (1.0 / c)

    def median(self) -> float:
        return self.a * (2.0 ** (1.0 / self.k) - 1.0) ** (1.0 / self.c)

    def minimum(self) -> float:
        return 0.0

    def maximum(self) -> float:
        return math.inf
