from __future__ import annotations

import math
from collections.abc import Callable
from typing import Any, NamedTuple

import numpy as np
from numpy.typing import NDArray
from scipy import special as sps

from ..array_backend.utils import (
    _ensure_batch_array,
    _ensure_integer,
    _ensure_matrix,
    _ensure_square_matrix,
    _ensure_vector,
)
from ..custom_types import UniformSource
from ..linalg.utils import (
    inverse_from_factor,
    is_symmetric,
    log_det_from_cholesky,
    solve_from_cholesky,
    spd_inverse,
    try_cholesky,
)
from .continuous import (
    Gamma,
    StudentT,
    _gamma_sample,
    _log_gamma_sample,
    _ratio,
    _standard_normal,
    _standard_normals,
)
from .discrete import Categorical, _categorical_sample
from .distributions import MultivariateDistribution, Parameter

__all__ = [
    "Dirichlet",
    "Multinomial",
    "Wishart",
    "InverseWishart",
    "MatrixNormal",
    "NormalGamma",
    "MeanPrecisionPair",
]

_LOG_2PI = math.log(2.0 * math.pi)


def _is_spd(matrix: Any) -> bool:
    S = np.asarray(matrix, dtype=float)
    return bool(
        S.ndim == 2
        and S.shape[0] == S.shape[1]
        and S.shape[0] > 0
        and np.all(np.isfinite(S))
        and is_symmetric(S)
        and try_cholesky(S) is not None
    )


def _cholesky_or_nan(matrix: NDArray) -> NDArray:
    """Cholesky factor; an all-NaN matrix when the input is not positive definite.

    Only reachable with parameter checks disabled, where results are unspecified.
    """
    chol = try_cholesky(matrix)
    return np.full_like(matrix, np.nan) if chol is None else chol


def _evaluate_batch(x: Any, value_shape: tuple[int, ...], log_density: Callable[[NDArray], float]) -> Any:
    """Applies ``log_density`` to one value or to a leading batch of values."""
    batch = _ensure_batch_array(x, value_shape, copy=False)
    with np.errstate(all="ignore"):
        out = np.array([log_density(value) for value in batch], dtype=float)
    if np.ndim(x) == len(value_shape):
        return float(out[0])
    return out


# -------------------------- Simplex-valued ----------------------------


class Dirichlet(MultivariateDistribution[NDArray]):
    """
    Dirichlet distribution over the probability simplex.

    Coordinates with ``alpha_i == 0`` are degenerate: they are always 0 in
    samples and are left out of the density.
    """

    PARAMETER_NAMES = ("alpha",)
    alpha = Parameter()

    def __init__(self, alpha: Any, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(alpha)

    @classmethod
    def symmetric(cls, alpha: float, k: int, *, rng: UniformSource | int | None = None) -> Dirichlet:
        """Dirichlet with ``k`` equal concentration parameters."""
        return cls(np.full(k, float(alpha)), rng=rng)

    @classmethod
    def _coerce_parameters(cls, alpha):
        return (_ensure_vector(alpha),)

    @staticmethod
    def is_valid_parameter_set(alpha: Any) -> bool:
        a = np.asarray(alpha, dtype=float)
        return bool(
            a.ndim == 1
            and a.size > 0
            and np.all(np.isfinite(a))
            and np.all(a >= 0.0)
            and np.any(a > 0.0)
        )

    @property
    def dimension(self) -> int:
        return self._params[0].size

    @staticmethod
    def _sample_unchecked(rng, alpha):
        # Gamma variates for small alpha underflow to 0, so they are
        # normalized in log space. All of them being -inf needs a redraw.
        while True:
            logs = np.full(alpha.size, -np.inf)
            for i, a in enumerate(alpha):
                if a == 0.0:
                    continue
                logs[i] = _log_gamma_sample(rng, a)
            top = logs.max()
            if top > -np.inf:
                break
        out = np.exp(logs - top)
        return out / out.sum()

    def log_density(self, x: Any) -> Any:
        """Log-density at a point (or batch of points) on the simplex."""
        alpha = self._params[0]
        active = alpha > 0.0
        a = alpha[active]
        log_norm = math.lgamma(a.sum()) - float(np.sum(sps.gammaln(a)))

        def single(value: NDArray) -> float:
            if np.any(value < 0.0) or abs(value.sum() - 1.0) > 1e-8 * value.size:
                return -math.inf
            if np.any(value[~active] != 0.0):
                return -math.inf
            return log_norm + float(np.sum(sps.xlogy(a - 1.0, value[active])))

        return _evaluate_batch(x, (alpha.size,), single)

    def mean(self) -> NDArray:
        alpha = self._params[0]
        return alpha / alpha.sum()

    def var(self) -> NDArray:
        alpha = self._params[0]
        total = alpha.sum()
        return alpha * (total - alpha) / (total * total * (total + 1.0))

    def cov(self) -> NDArray:
        alpha = self._params[0]
        total = alpha.sum()
        p = alpha / total
        return (np.diag(p) - np.outer(p, p)) / (total + 1.0)

    def entropy(self) -> float:
        a = self._params[0]
        a = a[a > 0.0]
        total = a.sum()
        log_beta = float(np.sum(sps.gammaln(a))) - math.lgamma(total)
        return float(
            log_beta + (total - a.size) * sps.digamma(total) - np.sum((a - 1.0) * sps.digamma(a))
        )

    def mode(self) -> NDArray:
        alpha = self._params[0]
        if np.any(alpha <= 1.0):
            raise self._unsupported("mode", "requires every alpha > 1")
        return (alpha - 1.0) / (alpha.sum() - alpha.size)


class Multinomial(MultivariateDistribution[NDArray]):
    """
    Category counts from ``n`` independent Categorical(p) trials.

    ``p`` is a non-negative mass vector with positive sum; it is normalized
    internally.
    """

    PARAMETER_NAMES = ("p", "n")
    p = Parameter()
    n = Parameter()

    def __init__(self, p: Any, n: int, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(p, n)

    @classmethod
    def _coerce_parameters(cls, p, n):
        return _ensure_vector(p), _ensure_integer(n, "n")

    @staticmethod
    def is_valid_parameter_set(p: Any, n: int) -> bool:
        return Categorical.is_valid_parameter_set(p) and n >= 0

    @classmethod
    def _derived(cls, p, n):
        cdf_unnormalized = np.cumsum(p)
        return p / cdf_unnormalized[-1], cdf_unnormalized, n

    @property
    def probabilities(self) -> NDArray:
        """Normalized category probabilities."""
        return self._args[0].copy()

    @property
    def dimension(self) -> int:
        return self._params[0].size

    @staticmethod
    def _sample_unchecked(rng, pmf, cdf_unnormalized, n):
        counts = np.zeros(pmf.size, dtype=np.int64)
        for _ in range(n):
            counts[_categorical_sample(rng, cdf_unnormalized)] += 1
        return counts

    def log_density(self, x: Any) -> Any:
        """Log-probability of a count vector (or batch of them).

        Count vectors that do not sum to ``n``, or that hold negative or
        fractional entries, have probability 0.
        """
        pmf, _, n = self._args

        def single(counts: NDArray) -> float:
            if np.any(counts < 0.0) or np.any(counts != np.floor(counts)) or counts.sum() != n:
                return -math.inf
            return float(
                math.lgamma(n + 1.0) - np.sum(sps.gammaln(counts + 1.0)) + np.sum(sps.xlogy(counts, pmf))
            )

        return _evaluate_batch(x, (pmf.size,), single)

    def probability(self, x: Any) -> Any:
        return self.density(x)

    def log_probability(self, x: Any) -> Any:
        return self.log_density(x)

    def mean(self) -> NDArray:
        pmf, _, n = self._args
        return n * pmf

    def var(self) -> NDArray:
        pmf, _, n = self._args
        return n * pmf * (1.0 - pmf)

    def cov(self) -> NDArray:
        pmf, _, n = self._args
        return n * (np.diag(pmf) - np.outer(pmf, pmf))

    def skewness(self) -> NDArray:
        pmf, _, n = self._args
        with np.errstate(divide="ignore", invalid="ignore"):
            return (1.0 - 2.0 * pmf) / np.sqrt(n * pmf * (1.0 - pmf))


# -------------------------- Matrix-valued ----------------------------


def _bartlett_factor(rng: UniformSource, nu: float, chol: NDArray) -> NDArray:
    """Lower-triangular ``L A`` of the Bartlett decomposition ``W = L A A^T L^T``.

    ``L`` is the scale's Cholesky factor. The diagonal of ``A`` is drawn first,
    then the strictly lower triangle row by row. For small ``nu`` a diagonal
    entry can underflow to 0, which makes ``W`` singular.
    """
    d = chol.shape[0]
    a = np.zeros((d, d), dtype=float)
    for i in range(d):
        a[i, i] = math.sqrt(_gamma_sample(rng, 0.5 * (nu - i), 0.5))
    for i in range(1, d):
        for j in range(i):
            a[i, j] = _standard_normal(rng)
    return chol @ a


def _wishart_sample(rng: UniformSource, nu: float, chol: NDArray) -> NDArray:
    factor = _bartlett_factor(rng, nu, chol)
    return factor @ factor.T


class Wishart(MultivariateDistribution[NDArray]):
    """
    Wishart distribution over symmetric positive definite ``d x d`` matrices.

    Args:
        nu: Degrees of freedom, ``nu > d - 1``.
        scale: Symmetric positive definite scale matrix ``S``.
    """

    PARAMETER_NAMES = ("nu", "scale")
    nu = Parameter()
    scale = Parameter()

    def __init__(self, nu: float, scale: Any, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(nu, scale)

    @classmethod
    def _coerce_parameters(cls, nu, scale):
        return float(nu), _ensure_square_matrix(scale)

    @staticmethod
    def is_valid_parameter_set(nu: float, scale: Any) -> bool:
        return _is_spd(scale) and math.isfinite(nu) and nu > np.shape(scale)[0] - 1.0

    @classmethod
    def _derived(cls, nu, scale):
        return nu, _cholesky_or_nan(scale)

    @property
    def dimension(self) -> int:
        return self._params[1].shape[0]

    _sample_unchecked = staticmethod(_wishart_sample)

    def log_density(self, x: Any) -> Any:
        nu, chol = self._args
        d = chol.shape[0]
        log_norm = (
            -0.5 * nu * d * math.log(2.0)
            - 0.5 * nu * log_det_from_cholesky(chol)
            - float(sps.multigammaln(0.5 * nu, d))
        )

        def single(value: NDArray) -> float:
            chol_x = try_cholesky(value) if is_symmetric(value) else None
            if chol_x is None:
                return -math.inf
            trace = float(np.trace(solve_from_cholesky(chol, value)))
            return log_norm + 0.5 * (nu - d - 1.0) * log_det_from_cholesky(chol_x) - 0.5 * trace

        return _evaluate_batch(x, (d, d), single)

    def mean(self) -> NDArray:
        return self.nu * self._params[1]

    def mode(self) -> NDArray:
        d = self.dimension
        if self.nu < d + 1.0:
            raise self._unsupported("mode", "requires nu >= d + 1")
        return (self.nu - d - 1.0) * self._params[1]

    def var(self) -> NDArray:
        S = self._params[1]
        diag = np.diag(S)
        return self.nu * (S * S + np.outer(diag, diag))


class InverseWishart(MultivariateDistribution[NDArray]):
    """
    Inverse-Wishart distribution with ``nu`` degrees of freedom and scale ``Psi``.

    A variate is the inverse of a Wishart(nu, Psi^-1) variate.
    """

    PARAMETER_NAMES = ("nu", "scale")
    nu = Parameter()
    scale = Parameter()

    def __init__(self, nu: float, scale: Any, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(nu, scale)

    @classmethod
    def _coerce_parameters(cls, nu, scale):
        return float(nu), _ensure_square_matrix(scale)

    @staticmethod
    def is_valid_parameter_set(nu: float, scale: Any) -> bool:
        return Wishart.is_valid_parameter_set(nu, scale)

    @classmethod
    def _derived(cls, nu, scale):
        chol = try_cholesky(scale)
        if chol is None:
            nan = np.full_like(scale, np.nan)
            return nu, nan, nan
        return nu, chol, _cholesky_or_nan(spd_inverse(scale, chol))

    @property
    def dimension(self) -> int:
        return self._params[1].shape[0]

    @staticmethod
    def _sample_unchecked(rng, nu, chol, chol_inverse):
        return inverse_from_factor(_bartlett_factor(rng, nu, chol_inverse))

    def log_density(self, x: Any) -> Any:
        nu, chol, _ = self._args
        d = chol.shape[0]
        scale = self._params[1]
        log_norm = (
            0.5 * nu * log_det_from_cholesky(chol)
            - 0.5 * nu * d * math.log(2.0)
            - float(sps.multigammaln(0.5 * nu, d))
        )

        def single(value: NDArray) -> float:
            chol_x = try_cholesky(value) if is_symmetric(value) else None
            if chol_x is None:
                return -math.inf
            trace = float(np.trace(solve_from_cholesky(chol_x, scale)))
            return log_norm - 0.5 * (nu + d + 1.0) * log_det_from_cholesky(chol_x) - 0.5 * trace

        return _evaluate_batch(x, (d, d), single)

    def mean(self) -> NDArray:
        d = self.dimension
        if self.nu <= d + 1.0:
            raise self._unsupported("mean", "requires nu > d + 1")
        return self._params[1] / (self.nu - d - 1.0)

    def mode(self) -> NDArray:
        return self._params[1] / (self.nu + self.dimension + 1.0)

    def var(self) -> NDArray:
        d = self.dimension
        nu = self.nu
        if nu <= d + 3.0:
            raise self._unsupported("variance", "requires nu > d + 3")
        psi = self._params[1]
        diag = np.diag(psi)
        numerator = (nu - d + 1.0) * psi * psi + (nu - d - 1.0) * np.outer(diag, diag)
        return numerator / ((nu - d) * (nu - d - 1.0) ** 2 * (nu - d - 3.0))


class MatrixNormal(MultivariateDistribution[NDArray]):
    """
    Matrix normal distribution over ``n x p`` matrices.

    ``vec(X) ~ N(vec(M), K kron V)`` with column-major ``vec``, where ``V``
    (``n x n``) is the among-row covariance and ``K`` (``p x p``) the
    among-column covariance.

    Args:
        mean: Mean matrix ``M``, shape (n, p).
        row_cov: Row covariance ``V``, shape (n, n), SPD.
        col_cov: Column covariance ``K``, shape (p, p), SPD.
    """

    PARAMETER_NAMES = ("mean_matrix", "row_cov", "col_cov")
    mean_matrix = Parameter()
    row_cov = Parameter()
    col_cov = Parameter()

    def __init__(self, mean: Any, row_cov: Any, col_cov: Any, *, rng: UniformSource | int | None = None):
        super().__init__(rng=rng)
        self._assign(mean, row_cov, col_cov)

    @classmethod
    def _coerce_parameters(cls, mean, row_cov, col_cov):
        return _ensure_matrix(mean), _ensure_square_matrix(row_cov), _ensure_square_matrix(col_cov)

    @staticmethod
    def is_valid_parameter_set(mean: Any, row_cov: Any, col_cov: Any) -> bool:
        M = np.asarray(mean, dtype=float)
        return bool(
            M.ndim == 2
            and np.all(np.isfinite(M))
            and _is_spd(row_cov)
            and _is_spd(col_cov)
            and np.shape(row_cov)[0] == M.shape[0]
            and np.shape(col_cov)[0] == M.shape[1]
        )

    @classmethod
    def _derived(cls, mean, row_cov, col_cov):
        chol_v = _cholesky_or_nan(row_cov)
        chol_k = _cholesky_or_nan(col_cov)
        return mean, chol_v, chol_k, np.kron(chol_k, chol_v)

    @property
    def shape(self) -> tuple[int, int]:
        return self._params[0].shape

    @staticmethod
    def _sample_unchecked(rng, mean, chol_v, chol_k, chol_kron):
        n, p = mean.shape
        z = _standard_normals(rng, n * p)
        return mean + (chol_kron @ z).reshape((n, p), order="F")

    def log_density(self, x: Any) -> Any:
        mean, chol_v, chol_k, _ = self._args
        n, p = mean.shape
        log_norm = (
            -0.5 * n * p * _LOG_2PI
            - 0.5 * n * log_det_from_cholesky(chol_k)
            - 0.5 * p * log_det_from_cholesky(chol_v)
        )

        def single(value: NDArray) -> float:
            resid = value - mean
            quad = np.trace(solve_from_cholesky(chol_k, resid.T @ solve_from_cholesky(chol_v, resid)))
            return log_norm - 0.5 * float(quad)

        return _evaluate_batch(x, (n, p), single)

    def mean(self) -> NDArray:
        return self._params[0].copy()

    def mode(self) -> NDArray:
        return self._params[0].copy()

    def var(self) -> NDArray:
        """Elementwise variances ``V_ii K_jj``."""
        return np.outer(np.diag(self._params[1]), np.diag(self._params[2]))

    def cov(self) -> NDArray:
        """Covariance of ``vec(X)`` (column-major), ``K kron V``."""
        return np.kron(self._params[2], self._params[1])


# -------------------------- Normal-Gamma ----------------------------


class MeanPrecisionPair(NamedTuple):
    mean: float
    precision: float


class NormalGamma(MultivariateDistribution[MeanPrecisionPair]):
    """
    Joint prior over the mean and precision of a normal distribution.

    The precision is ``tau ~ Gamma(precision_shape, rate precision_inv_scale)``
    and, given ``tau``, the mean is ``N(mean_location, 1 / (mean_scale tau))``.
    Sampling draws the precision first.
    """

    PARAMETER_NAMES = ("mean_location", "mean_scale", "precision_shape", "precision_inv_scale")
    mean_location = Parameter()
    mean_scale = Parameter()
    precision_shape = Parameter()
    precision_inv_scale = Parameter()

    def __init__(
        self,
        mean_location: float,
        mean_scale: float,
        precision_shape: float,
        precision_inv_scale: float,
        *,
        rng: UniformSource | int | None = None,
    ):
        super().__init__(rng=rng)
        self._assign(mean_location, mean_scale, precision_shape, precision_inv_scale)

    @staticmethod
    def is_valid_parameter_set(
        mean_location: float, mean_scale: float, precision_shape: float, precision_inv_scale: float
    ) -> bool:
        return (
            math.isfinite(mean_location)
            and all(v > 0.0 and math.isfinite(v) for v in (mean_scale, precision_shape, precision_inv_scale))
        )

    @staticmethod
    def _sample_unchecked(rng, mean_location, mean_scale, precision_shape, precision_inv_scale):
        precision = _gamma_sample(rng, precision_shape, precision_inv_scale)
        mean = mean_location + math.sqrt(_ratio(1.0, mean_scale * precision)) * _standard_normal(rng)
        return MeanPrecisionPair(mean, precision)

    def log_density(self, x: Any) -> Any:
        """Joint log-density at ``(mean, precision)`` (or an array of pairs, shape (m, 2))."""
        mu, lam, alpha, beta = self._params
        log_norm = alpha * math.log(beta) - math.lgamma(alpha) + 0.5 * math.log(lam) - 0.5 * _LOG_2PI

        def single(value: NDArray) -> float:
            m, tau = value
            if tau <= 0.0:
                return -math.inf
            return (
                log_norm
                + (alpha - 0.5) * math.log(tau)
                - beta * tau
                - 0.5 * lam * tau * (m - mu) ** 2
            )

        return _evaluate_batch(np.asarray(x, dtype=float), (2,), single)

    def mean_marginal(self) -> StudentT:
        """Marginal law of the mean, a Student's t with ``2 alpha`` degrees of freedom."""
        mu, lam, alpha, beta = self._params
        return StudentT(mu, math.sqrt(beta / (lam * alpha)), 2.0 * alpha, rng=self.rng)

    def precision_marginal(self) -> Gamma:
        """Marginal law of the precision."""
        _, _, alpha, beta = self._params
        return Gamma(alpha, beta, rng=self.rng)

    def mean(self) -> MeanPrecisionPair:
        mu, _, alpha, beta = self._params
        return MeanPrecisionPair(mu, alpha / beta)

    def var(self) -> MeanPrecisionPair:
        _, lam, alpha, beta = self._params
        mean_var = beta / (lam * (alpha - 1.0)) if alpha > 1.0 else math.inf
        return MeanPrecisionPair(mean_var, alpha / (beta * beta))

    def mode(self) -> MeanPrecisionPair:
        mu, _, alpha, beta = self._params
        if alpha < 0.5:
            raise self._unsupported("mode", "requires precision_shape >= 1/2")
        return MeanPrecisionPair(mu, (alpha - 0.5) / beta)
