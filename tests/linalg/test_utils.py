# tests/linalg/test_utils.py
import numpy as np
import pytest

from probdist.linalg import utils as U


SPD = np.array([[4.0, 1.0, 0.5],
                [1.0, 3.0, 0.2],
                [0.5, 0.2, 2.0]])


def test_is_symmetric():
    assert U.is_symmetric(SPD)
    assert U.is_symmetric(SPD + 1e-14 * np.triu(np.ones((3, 3)), 1))
    assert not U.is_symmetric(np.array([[1.0, 2.0], [0.0, 1.0]]))
    assert not U.is_symmetric(np.ones((2, 3)))
    assert not U.is_symmetric(np.ones(3))


def test_cholesky_lower_reconstructs_input():
    L = U.cholesky_lower(SPD)
    assert np.allclose(np.triu(L, 1), 0.0)
    assert np.allclose(L @ L.T, SPD)


def test_cholesky_lower_does_not_jitter():
    singular = np.array([[1.0, 1.0], [1.0, 1.0]])
    with pytest.raises(np.linalg.LinAlgError):
        U.cholesky_lower(singular)
    assert U.try_cholesky(singular) is None
    assert U.try_cholesky(np.array([[1.0, np.nan], [np.nan, 1.0]])) is None
    assert U.try_cholesky(SPD) is not None


def test_log_det_from_cholesky():
    L = U.cholesky_lower(SPD)
    assert U.log_det_from_cholesky(L) == pytest.approx(np.linalg.slogdet(SPD)[1])


def test_solve_from_cholesky():
    L = U.cholesky_lower(SPD)
    b = np.array([1.0, -2.0, 0.5])
    assert np.allclose(SPD @ U.solve_from_cholesky(L, b), b)
    B = np.arange(6.0).reshape(3, 2)
    assert np.allclose(SPD @ U.solve_from_cholesky(L, B), B)


def test_spd_inverse_is_symmetric_inverse():
    inv = U.spd_inverse(SPD)
    assert np.allclose(inv @ SPD, np.eye(3))
    assert np.array_equal(inv, inv.T)

    L = U.cholesky_lower(SPD)
    assert np.allclose(U.spd_inverse(SPD, chol=L), inv)


def test_inverse_from_factor():
    F = np.linalg.cholesky(SPD)
    inv = U.inverse_from_factor(F)
    np.testing.assert_allclose(inv, np.linalg.inv(SPD), rtol=1e-12)
    assert np.array_equal(inv, inv.T)


@pytest.mark.parametrize("factor", [
    np.array([[1.0, 0.0], [0.5, 0.0]]),
    np.array([[1e-200]]),
])
def test_inverse_from_factor_singular_is_all_inf(factor):
    inv = U.inverse_from_factor(factor)
    assert inv.shape == (factor.shape[0],) * 2
    assert np.all(np.isposinf(inv))
