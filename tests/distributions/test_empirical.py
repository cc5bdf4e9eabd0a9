import numpy as np
import pytest

from probdist.core.empirical import Empirical
from probdist.exceptions import InvalidParameterError


# ------------------------------- Basics --------------------------------

def test_init_rejects_bad_weights_shape_and_values():
    X = np.array([[0.0], [1.0], [2.0]], dtype=float)

    # Wrong shape
    with pytest.raises(InvalidParameterError):
        Empirical(X, weights=np.array([0.2, 0.8]))  # length 2 vs n=3

    # Negative weights
    with pytest.raises(InvalidParameterError):
        Empirical(X, weights=np.array([0.5, -0.2, 0.7]))

    # Sum to zero
    with pytest.raises(InvalidParameterError):
        Empirical(X, weights=np.array([0.0, 0.0, 0.0]))

    # No samples at all
    with pytest.raises(ValueError):
        Empirical(np.empty((0, 2)))

    # Too many dimensions
    with pytest.raises(ValueError):
        Empirical(np.zeros((2, 2, 2)))


def test_properties_and_shapes_univariate():
    X = np.array([1.0, 3.0, 5.0], dtype=float)  # 1D; will be reshaped to (n,1)
    w = np.array([0.2, 0.3, 0.5], dtype=float)
    emp = Empirical(X, weights=w, rng=np.random.default_rng(0))

    assert emp.n == 3
    assert emp.d == 1
    assert emp.data.shape == (3, 1)
    assert emp.weights.shape == (3,)

    # Weighted moments (population)
    m_expected = (w * X).sum()
    v_expected = ((w * (X - m_expected) ** 2).sum())

    assert emp.mean().shape == (1,)
    assert np.allclose(emp.mean()[0], m_expected, rtol=0, atol=1e-12)
    assert emp.cov().shape == (1, 1)
    assert np.allclose(emp.cov()[0, 0], v_expected, rtol=0, atol=1e-12)
    assert np.allclose(emp.var()[0], v_expected, rtol=0, atol=1e-12)
    assert np.allclose(emp.std()[0], np.sqrt(v_expected), rtol=0, atol=1e-12)


def test_uniform_weights_by_default(empirical):
    assert np.allclose(empirical.normalized_weights, np.full(3, 1.0 / 3.0))
    assert np.allclose(empirical.mean(), [2.0])
    assert np.allclose(empirical.var(), [2.0 / 3.0])


def test_weights_are_normalized(simple_samples, simple_weights):
    emp = Empirical(simple_samples, weights=10.0 * simple_weights)
    assert np.allclose(emp.normalized_weights, simple_weights)
    assert np.allclose(emp.weights, 10.0 * simple_weights)


def test_mean_and_cov_weighted_multivariate():
    X = np.array([[0.0, 0.0],
                  [2.0, 1.0],
                  [4.0, 3.0]], dtype=float)
    w = np.array([0.2, 0.3, 0.5], dtype=float)

    emp = Empirical(X, weights=w, rng=np.random.default_rng(1))

    m_expected = (w[:, None] * X).sum(axis=0)
    diff = X - m_expected
    cov_expected = diff.T @ (diff * w[:, None])  # weighted population covariance

    assert np.allclose(emp.mean(), m_expected, atol=1e-12)
    assert np.allclose(emp.cov(), cov_expected, atol=1e-12)
    assert np.allclose(emp.var(), np.diag(cov_expected), atol=1e-12)


def test_skewness_matches_weighted_moments():
    X = np.array([[0.0], [1.0], [5.0]])
    w = np.array([0.5, 0.3, 0.2])
    emp = Empirical(X, weights=w)

    m = (w * X[:, 0]).sum()
    m2 = (w * (X[:, 0] - m) ** 2).sum()
    m3 = (w * (X[:, 0] - m) ** 3).sum()
    assert np.allclose(emp.skewness(), [m3 / m2**1.5])


def test_updating_weights_recomputes_statistics(simple_samples):
    emp = Empirical(simple_samples)
    emp.weights = np.array([0.0, 0.0, 1.0])
    assert np.allclose(emp.mean(), [3.0])
    assert np.allclose(emp.cov(), [[0.0]])

    with pytest.raises(InvalidParameterError):
        emp.weights = np.array([-1.0, 1.0, 1.0])
    assert np.allclose(emp.mean(), [3.0])


def test_stored_data_is_not_aliased():
    X = np.array([[1.0], [2.0]])
    emp = Empirical(X)
    X[0, 0] = 100.0
    assert np.allclose(emp.mean(), [1.5])

    view = emp.data
    view[1, 0] = -50.0
    assert np.allclose(emp.data, [[1.0], [2.0]])


# ------------------------------- Sampling -------------------------------

def test_sample_shape_and_weight_bias():
    # Strongly biased weights: 0.9 on -1, 0.1 on +1
    X = np.array([[-1.0], [1.0]], dtype=float)
    w = np.array([0.9, 0.1], dtype=float)
    emp = Empirical(X, weights=w, rng=np.random.default_rng(42))

    n = 50_000
    draws = emp.sample(n)  # (n,1)
    prop_pos = (draws[:, 0] > 0).mean()  # should be ~0.1

    assert draws.shape == (n, 1)
    assert abs(prop_pos - 0.1) < 0.02  # allow sampling noise


def test_single_sample_is_a_stored_point(empirical):
    x = empirical.sample()
    assert x.shape == (1,)
    assert x[0] in (1.0, 2.0, 3.0)


def test_zero_weight_points_are_never_drawn(scripted):
    X = np.array([[0.0], [1.0], [2.0]])
    emp = Empirical(X, weights=np.array([0.0, 1.0, 1.0]), rng=scripted([0.0, 0.25, 0.5, 0.75]))
    draws = emp.sample(4)
    assert np.all(draws[:, 0] != 0.0)
    assert np.allclose(draws[:, 0], [1.0, 1.0, 2.0, 2.0])


def test_sample_matches_single_draws(scripted):
    X = np.array([[10.0], [20.0], [30.0]], dtype=float)
    u = [0.1, 0.5, 0.9]
    batch = Empirical(X, rng=scripted(u)).sample(3)
    single = Empirical(X, rng=scripted(u))
    assert np.allclose(batch, np.stack([single.sample() for _ in u]))


def test_samples_iterator_resamples(empirical):
    it = empirical.samples()
    draws = [next(it) for _ in range(20)]
    assert all(d.shape == (1,) for d in draws)


# ----------------------------- cdf / expectation -----------------------------

def test_cdf_univariate():
    emp = Empirical(np.array([3.0, 1.0, 5.0]), weights=np.array([0.3, 0.2, 0.5]))
    assert emp.cdf(0.0) == 0.0
    assert emp.cdf(1.0) == pytest.approx(0.2)
    assert emp.cdf(2.0) == pytest.approx(0.2)
    assert emp.cdf(3.0) == pytest.approx(0.5)
    assert emp.cdf(10.0) == pytest.approx(1.0)
    assert np.allclose(emp.cdf(np.array([0.5, 4.0])), [0.0, 0.5])


def test_cdf_requires_univariate_samples():
    emp = Empirical(np.zeros((3, 2)))
    with pytest.raises(ValueError):
        emp.cdf(0.0)


def test_expectation_scalar_and_vector():
    X = np.array([[0.0, 1.0],
                  [2.0, 3.0],
                  [4.0, 5.0]], dtype=float)
    w = np.array([0.2, 0.3, 0.5], dtype=float)
    emp = Empirical(X, weights=w, rng=np.random.default_rng(7))

    # f(X) = first coordinate
    out = emp.expectation(lambda xs: xs[:, 0])
    assert np.ndim(out) == 0
    assert np.isclose(out, (w * X[:, 0]).sum(), atol=1e-12)

    # f(X) = identity (vector-valued)
    out = emp.expectation(lambda xs: xs)
    assert out.shape == (2,)
    assert np.allclose(out, emp.mean(), atol=1e-12)


def test_density_not_available(empirical):
    with pytest.raises(NotImplementedError):
        empirical.density(np.array([1.0]))
    with pytest.raises(NotImplementedError):
        empirical.log_density(np.array([1.0]))
