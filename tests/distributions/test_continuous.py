# tests/distributions/test_continuous.py
import math

import numpy as np
import pytest
import scipy.stats as st
from scipy.integrate import quad

from probdist.core.continuous import (
    Beta,
    Burr,
    Cauchy,
    Chi,
    ChiSquared,
    ContinuousUniform,
    Erlang,
    Exponential,
    FisherSnedecor,
    Gamma,
    InverseGamma,
    Laplace,
    LogNormal,
    Logistic,
    Normal,
    Pareto,
    Rayleigh,
    StudentT,
    Triangular,
    TruncatedNormal,
    Weibull,
)
from probdist.exceptions import InvalidParameterError, UnsupportedMomentError


# (distribution factory, equivalent frozen scipy distribution)
CASES = {
    "normal": (lambda rng: Normal(0.5, 2.0, rng=rng), st.norm(0.5, 2.0)),
    "lognormal": (lambda rng: LogNormal(0.2, 0.5, rng=rng), st.lognorm(0.5, scale=math.exp(0.2))),
    "gamma": (lambda rng: Gamma(2.5, 1.5, rng=rng), st.gamma(2.5, scale=1 / 1.5)),
    "gamma_small_shape": (lambda rng: Gamma(0.5, 2.0, rng=rng), st.gamma(0.5, scale=0.5)),
    "inverse_gamma": (lambda rng: InverseGamma(5.0, 2.0, rng=rng), st.invgamma(5.0, scale=2.0)),
    "beta": (lambda rng: Beta(2.0, 3.0, rng=rng), st.beta(2.0, 3.0)),
    "cauchy": (lambda rng: Cauchy(1.0, 2.0, rng=rng), st.cauchy(1.0, 2.0)),
    "chi": (lambda rng: Chi(3, rng=rng), st.chi(3)),
    "chi_squared": (lambda rng: ChiSquared(4.0, rng=rng), st.chi2(4.0)),
    "chi_squared_fractional": (lambda rng: ChiSquared(2.5, rng=rng), st.chi2(2.5)),
    "exponential": (lambda rng: Exponential(1.5, rng=rng), st.expon(scale=1 / 1.5)),
    "pareto": (lambda rng: Pareto(1.0, 5.0, rng=rng), st.pareto(5.0, scale=1.0)),
    "weibull": (lambda rng: Weibull(1.5, 2.0, rng=rng), st.weibull_min(1.5, scale=2.0)),
    "rayleigh": (lambda rng: Rayleigh(1.5, rng=rng), st.rayleigh(scale=1.5)),
    "laplace": (lambda rng: Laplace(0.5, 1.5, rng=rng), st.laplace(0.5, 1.5)),
    "student_t": (lambda rng: StudentT(0.5, 1.5, 5.0, rng=rng), st.t(5.0, 0.5, 1.5)),
    "fisher_snedecor": (lambda rng: FisherSnedecor(5.0, 12.0, rng=rng), st.f(5.0, 12.0)),
    "uniform": (lambda rng: ContinuousUniform(-1.0, 2.0, rng=rng), st.uniform(-1.0, 3.0)),
    "truncated_normal": (
        lambda rng: TruncatedNormal(0.5, 2.0, -1.0, 3.0, rng=rng),
        st.truncnorm(-0.75, 1.25, loc=0.5, scale=2.0),
    ),
    "truncated_normal_upper_tail": (
        lambda rng: TruncatedNormal(0.0, 1.0, 1.0, 3.0, rng=rng),
        st.truncnorm(1.0, 3.0),
    ),
    "burr": (lambda rng: Burr(1.5, 2.0, 3.0, rng=rng), st.burr12(2.0, 3.0, scale=1.5)),
    "erlang": (lambda rng: Erlang(3, 1.5, rng=rng), st.erlang(3, scale=1 / 1.5)),
    "logistic": (lambda rng: Logistic(0.5, 1.5, rng=rng), st.logistic(0.5, 1.5)),
    "triangular": (lambda rng: Triangular(-1.0, 3.0, 0.5, rng=rng), st.triang(0.375, loc=-1.0, scale=4.0)),
    "triangular_peak_at_lower": (lambda rng: Triangular(0.0, 2.0, 0.0, rng=rng), st.triang(0.0, scale=2.0)),
}

PROBS = np.array([0.05, 0.25, 0.5, 0.75, 0.95])


@pytest.fixture(params=sorted(CASES))
def case(request, rng):
    factory, reference = CASES[request.param]
    return factory(rng), reference


def test_density_matches_reference(case):
    dist, ref = case
    x = ref.ppf(PROBS)
    np.testing.assert_allclose(dist.density(x), ref.pdf(x), rtol=1e-7)
    np.testing.assert_allclose(dist.log_density(x), ref.logpdf(x), rtol=1e-7)


def test_cdf_and_inverse_match_reference(case):
    dist, ref = case
    x = ref.ppf(PROBS)
    np.testing.assert_allclose(dist.cdf(x), PROBS, rtol=1e-6)
    np.testing.assert_allclose(dist.inv_cdf(PROBS), x, rtol=1e-6)


def test_scalar_input_returns_float(case):
    dist, ref = case
    x = float(ref.ppf(0.3))
    assert isinstance(dist.density(x), float)
    assert isinstance(dist.log_density(x), float)
    assert isinstance(dist.cdf(x), float)
    assert isinstance(dist.inv_cdf(0.3), float)


def test_cdf_is_monotone_within_unit_interval(case):
    dist, ref = case
    lo, hi = ref.ppf(1e-4), ref.ppf(1 - 1e-4)
    x = np.linspace(lo - 1.0, hi + 1.0, 101)
    cdf = dist.cdf(x)
    assert np.all(cdf >= 0.0) and np.all(cdf <= 1.0)
    assert np.all(np.diff(cdf) >= 0.0)


def test_median_is_half_quantile(case):
    dist, _ = case
    assert dist.cdf(dist.median()) == pytest.approx(0.5, rel=1e-6)


def test_support_bounds(case):
    dist, ref = case
    lo, hi = ref.support()
    assert dist.minimum() == pytest.approx(lo)
    assert dist.maximum() == pytest.approx(hi)


@pytest.mark.parametrize("stat", ["mean", "var", "skewness", "entropy"])
def test_moments_match_reference(case, stat):
    dist, ref = case
    try:
        value = getattr(dist, stat)()
    except UnsupportedMomentError:
        pytest.skip(f"{stat} undefined for {dist!r}")
    expected = {
        "mean": lambda: ref.mean(),
        "var": lambda: ref.var(),
        "skewness": lambda: ref.stats(moments="s"),
        "entropy": lambda: ref.entropy(),
    }[stat]()
    assert value == pytest.approx(float(expected), rel=1e-5, abs=1e-9)


def test_density_integrates_to_one(case):
    dist, ref = case
    if isinstance(dist, Gamma) and dist.shape < 1:
        pytest.skip("integrable singularity at 0")
    lo, hi = dist.minimum(), dist.maximum()
    total, _ = quad(dist.density, lo, hi, limit=200)
    assert total == pytest.approx(1.0, rel=1e-4)


def test_samples_follow_distribution(case):
    dist, _ = case
    x = dist.sample(4000)
    assert x.shape == (4000,)
    assert x.dtype == np.float64
    result = st.kstest(x, dist.cdf)
    assert result.pvalue > 1e-4


def test_single_samples_follow_distribution(case):
    dist, _ = case
    x = np.array([dist.sample() for _ in range(2000)])
    result = st.kstest(x, dist.cdf)
    assert result.pvalue > 1e-4


def test_static_forms_match_instance(case):
    dist, _ = case
    params = tuple(dist.parameters.values())
    cls = type(dist)

    dist.rng = np.random.default_rng(11)
    expected = dist.sample(50)
    actual = cls.draw_into(np.random.default_rng(11), np.empty(50), *params)
    np.testing.assert_array_equal(actual, expected)

    dist.rng = np.random.default_rng(12)
    assert cls.draw(np.random.default_rng(12), *params) == dist.sample()

    x = dist.inv_cdf(PROBS)
    np.testing.assert_array_equal(cls.pdf(x, *params), dist.density(x))
    np.testing.assert_array_equal(cls.log_pdf(x, *params), dist.log_density(x))
    np.testing.assert_array_equal(cls.cumulative(x, *params), dist.cdf(x))
    np.testing.assert_array_equal(cls.quantile(PROBS, *params), dist.inv_cdf(PROBS))


# -------------------------- specific values ----------------------------


def test_normal_moments():
    d = Normal(5.0, 2.0)
    assert d.mean() == 5.0
    assert d.var() == 4.0
    assert d.std() == 2.0
    assert d.skewness() == 0.0
    assert d.mode() == d.median() == 5.0


def test_normal_point_mass():
    d = Normal(1.0, 0.0)
    assert d.density(1.0) == math.inf
    assert d.density(1.5) == 0.0
    assert d.cdf(0.999) == 0.0
    assert d.cdf(1.0) == 1.0


def test_uniform_cdf_midpoint():
    assert ContinuousUniform(0.0, 1.0).cdf(0.5) == 0.5


def test_weibull_density_at_zero():
    assert Weibull(1.0, 2.0).density(0.0) == 0.5


def test_outside_support_is_zero_and_neg_inf():
    for d, x in [(Exponential(1.0), -1.0), (Gamma(2.0, 1.0), -0.1), (Beta(2.0, 2.0), 1.5),
                 (Pareto(1.0, 2.0), 0.5), (TruncatedNormal(0.0, 1.0, -1.0, 1.0), 2.0)]:
        assert d.density(x) == 0.0
        assert d.log_density(x) == -math.inf


@pytest.mark.parametrize(
    "dist",
    [Exponential(2.0), Pareto(1.5, 2.5), Rayleigh(0.7)],
)
def test_inverse_cdf_round_trip(dist):
    p = np.linspace(0.01, 0.99, 25)
    np.testing.assert_allclose(dist.cdf(dist.inv_cdf(p)), p, rtol=1e-10)


def test_inverse_cdf_rejects_out_of_range_probability():
    with pytest.raises(ValueError):
        Exponential(1.0).inv_cdf(1.5)
    with pytest.raises(ValueError):
        Normal.quantile(-0.1, 0.0, 1.0)


def test_pareto_heavy_tail_moments():
    assert Pareto(1.0, 0.5).mean() == math.inf
    assert Pareto(1.0, 1.5).var() == math.inf
    with pytest.raises(UnsupportedMomentError):
        Pareto(1.0, 2.5).skewness()


def test_cauchy_has_no_moments():
    d = Cauchy(0.0, 1.0)
    for stat in (d.mean, d.var, d.skewness):
        with pytest.raises(UnsupportedMomentError):
            stat()
    # also a NotImplementedError
    with pytest.raises(NotImplementedError):
        d.mean()


def test_student_t_variance_ranges():
    assert StudentT(0.0, 1.0, 1.5).var() == math.inf
    with pytest.raises(UnsupportedMomentError):
        StudentT(0.0, 1.0, 1.0).var()
    with pytest.raises(UnsupportedMomentError):
        StudentT(0.0, 1.0, 0.8).mean()
    assert StudentT(0.0, 2.0, 4.0).var() == pytest.approx(8.0)


def test_fisher_snedecor_entropy_unsupported():
    with pytest.raises(UnsupportedMomentError):
        FisherSnedecor(3.0, 4.0).entropy()
    with pytest.raises(UnsupportedMomentError):
        FisherSnedecor(3.0, 4.0).var()


def test_burr_raw_moment_requires_n_below_ck():
    d = Burr(1.0, 1.0, 2.0)
    assert d.raw_moment(1) == pytest.approx(1.0)
    with pytest.raises(UnsupportedMomentError):
        d.raw_moment(2)
    with pytest.raises(UnsupportedMomentError):
        d.var()


def test_truncated_normal_far_upper_tail_samples_stay_in_bounds(rng):
    d = TruncatedNormal(0.0, 1.0, 8.0, 9.0, rng=rng)
    x = d.sample(500)
    assert np.all(np.isfinite(x))
    assert np.all((x >= 8.0) & (x <= 9.0))
    assert d.mean() == pytest.approx(st.truncnorm(8.0, 9.0).mean(), rel=1e-6)


def test_truncated_normal_skewness_unsupported():
    with pytest.raises(UnsupportedMomentError):
        TruncatedNormal(0.0, 1.0, -1.0, 1.0).skewness()


def test_truncated_normal_exposes_untruncated_parent():
    d = TruncatedNormal(1.0, 2.0, 0.0, 5.0)
    parent = d.untruncated
    assert isinstance(parent, Normal)
    assert (parent.mu, parent.sigma) == (1.0, 2.0)


def test_gamma_alternative_constructor():
    d = Gamma.with_shape_scale(2.0, 4.0)
    assert d.rate == 0.25
    assert d.scale == 4.0
    assert d.mean() == pytest.approx(8.0)


def test_chi_requires_integer_freedom():
    with pytest.raises(TypeError):
        Chi(2.5)
    assert Chi(3.0).freedom == 3


# -------------------------- exact transforms ----------------------------


def test_normal_polar_transform(scripted):
    # v1 = 0.5, v2 = 0 -> r = 0.25
    expected = 0.5 * math.sqrt(-2.0 * math.log(0.25) / 0.25)
    assert Normal(0.0, 1.0, rng=scripted([0.75, 0.5])).sample() == pytest.approx(expected)


def test_normal_polar_rejects_outside_unit_disc(scripted):
    src = scripted([0.0, 0.0, 0.5, 0.5, 0.75, 0.5])
    x = Normal(1.0, 2.0, rng=src).sample()
    assert x == pytest.approx(1.0 + 2.0 * 0.5 * math.sqrt(-2.0 * math.log(0.25) / 0.25))
    assert src.calls == 6


@pytest.mark.parametrize(
    "dist, u, expected",
    [
        (Exponential(2.0), 0.5, math.log(2.0) / 2.0),
        (Cauchy(1.0, 3.0), 0.75, 4.0),
        (Pareto(2.0, 2.0), 0.25, 4.0),
        (Rayleigh(1.5), math.exp(-2.0), 3.0),
        (Laplace(1.0, 2.0), 0.75, 1.0 + 2.0 * math.log(2.0)),
        (Weibull(2.0, 3.0), math.exp(-4.0), 6.0),
        (ContinuousUniform(2.0, 6.0), 0.25, 3.0),
        (Burr(2.0, 1.0, 1.0), 0.75, 6.0),
    ],
)
def test_inverse_transform_samplers(scripted, dist, u, expected):
    dist.rng = scripted([u])
    assert dist.sample() == pytest.approx(expected)


def test_exponential_redraws_zero(scripted):
    d = Exponential(1.0, rng=scripted([0.0, 0.5]))
    assert d.sample() == pytest.approx(math.log(2.0))


def test_exponential_fill_redraws_zeros_in_index_order(scripted):
    src = scripted([0.5, 0.0, 0.25, 0.0, 0.125, 0.0625])
    values = Exponential(1.0, rng=src).fill(np.empty(4))
    np.testing.assert_allclose(values, -np.log([0.5, 0.125, 0.25, 0.0625]))
    assert src.calls == 6


# -------------------------- extreme and degenerate parameters ----------------------------


@pytest.mark.parametrize(
    "dist",
    [
        InverseGamma(0.001, 1.0),
        StudentT(0.0, 1.0, 0.001),
        FisherSnedecor(1.0, 0.001),
        Weibull(0.001, 1.0),
        Pareto(1.0, 0.01),
    ],
    ids=["InverseGamma", "StudentT", "FisherSnedecor", "Weibull", "Pareto"],
)
def test_tiny_shape_draws_saturate_instead_of_raising(dist):
    dist.rng = np.random.default_rng(5)
    single = np.array([dist.sample() for _ in range(2000)])
    batch = dist.sample(2000)
    for x in (single, batch):
        assert not np.any(np.isnan(x))
        assert np.all(x >= dist.minimum())


def test_underflowing_gamma_gives_infinite_reciprocals():
    rng = np.random.default_rng(5)
    x = np.array([InverseGamma.draw(rng, 0.001, 1.0) for _ in range(500)])
    assert np.any(np.isinf(x))
    t = np.array([StudentT.draw(rng, 0.0, 1.0, 0.001) for _ in range(500)])
    assert np.any(np.isinf(t))


def test_power_transforms_overflow_to_inf(scripted):
    assert Pareto(1.0, 0.01, rng=scripted([1e-5])).sample() == math.inf
    assert Weibull(0.001, 1.0, rng=scripted([1e-10])).sample() == math.inf
    assert LogNormal(800.0, 1.0, rng=scripted([0.75, 0.5])).sample() == math.inf
    assert LogNormal(800.0, 1.0, rng=scripted([0.75, 0.5])).fill(np.empty(1))[0] == math.inf


def test_weibull_tiny_shape_moments():
    d = Weibull(0.001, 2.0)
    assert d.mean() == math.inf
    assert d.var() == math.inf


def test_point_mass_entropy_is_negative_infinity():
    assert Normal(1.0, 0.0).entropy() == -math.inf
    assert ContinuousUniform(2.0, 2.0).entropy() == -math.inf


# -------------------------- Erlang, Logistic, Triangular ----------------------------


def test_erlang_requires_integer_shape():
    with pytest.raises(TypeError):
        Erlang(2.5, 1.0)
    with pytest.raises(InvalidParameterError):
        Erlang(0, 1.0)
    assert Erlang(3.0, 2.0).shape == 3


def test_erlang_matches_gamma():
    e = Erlang.with_shape_scale(4, 0.5)
    g = Gamma(4.0, 2.0)
    assert e.rate == 2.0
    x = np.array([0.5, 1.0, 3.0])
    np.testing.assert_allclose(e.density(x), g.density(x))
    assert e.mode() == pytest.approx(1.5)

    e.rng = np.random.default_rng(9)
    g.rng = np.random.default_rng(9)
    np.testing.assert_array_equal(e.sample(20), g.sample(20))


def test_logistic_logit_transform(scripted):
    assert Logistic(1.0, 2.0, rng=scripted([0.75])).sample() == pytest.approx(1.0 + 2.0 * math.log(3.0))
    assert Logistic(0.0, 1.0, rng=scripted([0.0])).sample() == -math.inf


def test_logistic_far_tail_log_density_is_finite():
    d = Logistic(0.0, 1.0)
    assert d.log_density(-800.0) == pytest.approx(-800.0)
    assert d.log_density(800.0) == pytest.approx(-800.0)


def test_logistic_with_mean_std():
    d = Logistic.with_mean_std(3.0, 2.0)
    assert d.mean() == 3.0
    assert d.std() == pytest.approx(2.0)


def test_triangular_inverse_transform(scripted):
    # peak splits the mass at (peak - lower) / width = 0.25
    d = Triangular(0.0, 4.0, 1.0, rng=scripted([0.0625, 0.25, 1.0 - 0.1875]))
    assert d.sample() == pytest.approx(0.5)
    assert d.sample() == pytest.approx(1.0)
    assert d.sample() == pytest.approx(2.5)


def test_triangular_validation():
    with pytest.raises(InvalidParameterError):
        Triangular(0.0, 1.0, 1.5)
    with pytest.raises(InvalidParameterError):
        Triangular(1.0, 1.0, 1.0)
    d = Triangular(0.0, 2.0, 2.0)
    assert d.density(2.0) == pytest.approx(1.0)
    assert d.cdf(2.0) == 1.0
    assert d.mode() == 2.0
