# random_source.py
"""
The uniform random source consumed by every sampler.

Samplers only ever call ``rng.random()`` and ``rng.random(size)``, so any
object satisfying :class:`~probdist.custom_types.UniformSource` works.
``numpy.random.Generator`` is the reference source.

A single shared generator is created at import time. Distributions built with
``rng=None`` use it; it is never owned by any one distribution, so reseeding it
affects every distribution that relies on the default.
"""
from __future__ import annotations

import logging

import numpy as np

from .custom_types import UniformSource

__all__ = [
    "default_rng",
    "reseed_default",
    "resolve_rng",
]

logger = logging.getLogger(__name__)

_DEFAULT_RNG: UniformSource = np.random.default_rng()


def default_rng() -> UniformSource:
    """Return the process-wide shared generator."""
    return _DEFAULT_RNG


def reseed_default(seed: int | None = None) -> UniformSource:
    """Replace the shared generator with a freshly seeded one and return it.

    Distributions that hold the previous default keep it; only those that
    resolve the default afterwards (including via ``dist.rng = None``) see the
    new generator.
    """
    global _DEFAULT_RNG
    _DEFAULT_RNG = np.random.default_rng(seed)
    logger.debug("Shared random source reseeded (seed=%r)", seed)
    return _DEFAULT_RNG


def resolve_rng(rng: UniformSource | int | None) -> UniformSource:
    """Map the ``rng`` argument accepted throughout the API to a source.

    Args:
        rng: ``None`` selects the shared default, an ``int`` seeds a new
            private ``numpy.random.Generator``, anything else must already
            satisfy the uniform source contract.

    Raises:
        TypeError: If ``rng`` has no ``random`` method.
    """
    if rng is None:
        return _DEFAULT_RNG
    if isinstance(rng, (int, np.integer)) and not isinstance(rng, bool):
        return np.random.default_rng(int(rng))
    if not callable(getattr(rng, "random", None)):
        raise TypeError(
            f"Random source must provide random() and random(size). Got {type(rng).__name__}."
        )
    return rng
