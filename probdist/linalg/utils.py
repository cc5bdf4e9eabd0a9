# linalg/utils.py
"""Dense linear-algebra helpers for the matrix-valued distributions."""

from __future__ import annotations

import numpy as np
import scipy.linalg as sla

from ..custom_types import Array, ArrayLike
from ..array_backend.utils import _ensure_square_matrix

__all__ = [
    "is_symmetric",
    "cholesky_lower",
    "try_cholesky",
    "log_det_from_cholesky",
    "spd_inverse",
    "solve_from_cholesky",
    "inverse_from_factor",
]


def is_symmetric(matrix: ArrayLike, *, rtol: float = 1e-10, atol: float = 1e-12) -> bool:
    """Return True if a square matrix equals its transpose up to tolerance."""
    A = np.asarray(matrix, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        return False
    return bool(np.allclose(A, A.T, rtol=rtol, atol=atol))


def cholesky_lower(matrix: ArrayLike) -> Array:
    """Return the lower-triangular factor ``L`` with ``L @ L.T == matrix``.

    Unlike a jittered factorization, this never modifies the input: a matrix
    that is not numerically positive definite is an error.

    Raises:
        np.linalg.LinAlgError: If the matrix is not positive definite.
    """
    C = _ensure_square_matrix(matrix, copy=False)
    return sla.cholesky(C, lower=True, check_finite=True)


def try_cholesky(matrix: ArrayLike) -> Array | None:
    """Return the lower Cholesky factor, or None if factorization fails."""
    try:
        return cholesky_lower(matrix)
    except (np.linalg.LinAlgError, ValueError):
        return None


def log_det_from_cholesky(chol: Array) -> float:
    """log|C| from the lower Cholesky factor of C."""
    return float(2.0 * np.sum(np.log(np.diag(chol))))


def solve_from_cholesky(chol: Array, rhs: ArrayLike) -> Array:
    """Solve ``C X = rhs`` given the lower Cholesky factor of ``C``."""
    return sla.cho_solve((chol, True), np.asarray(rhs, dtype=float))


def spd_inverse(matrix: ArrayLike, chol: Array | None = None) -> Array:
    """Inverse of a symmetric positive definite matrix, symmetrized.

    Args:
        matrix: SPD matrix (d, d).
        chol: Optional precomputed lower Cholesky factor of ``matrix``.
    """
    L = cholesky_lower(matrix) if chol is None else chol
    inv = solve_from_cholesky(L, np.eye(L.shape[0]))
    return 0.5 * (inv + inv.T)


def inverse_from_factor(factor: ArrayLike) -> Array:
    """Inverse of ``F @ F.T`` for a lower-triangular ``F``, symmetrized.

    ``F F^T`` is singular when ``F`` has a zero on its diagonal, and numerically
    singular when the inverse overflows. Either way every entry of the result
    is ``inf``.
    """
    F = np.asarray(factor, dtype=float)
    d = F.shape[0]
    if np.any(np.diag(F) == 0.0):
        return np.full((d, d), np.inf)
    with np.errstate(over="ignore", invalid="ignore"):
        G = sla.solve_triangular(F, np.eye(d), lower=True, check_finite=False)
        inv = G.T @ G
    if not np.all(np.isfinite(inv)):
        return np.full((d, d), np.inf)
    return 0.5 * (inv + inv.T)
