import pytest
import numpy as np

from probdist.config import settings
from probdist.core.empirical import Empirical


class ScriptedUniforms:
    """Uniform source replaying a fixed list of values, for exact transform checks."""

    def __init__(self, values):
        self._values = list(values)
        self.calls = 0

    def _next(self):
        if self.calls >= len(self._values):
            raise AssertionError("scripted uniform source exhausted")
        value = self._values[self.calls]
        self.calls += 1
        return value

    def random(self, size=None):
        if size is None:
            return self._next()
        return np.array([self._next() for _ in range(int(size))], dtype=float)


@pytest.fixture
def rng():
    return np.random.default_rng(42)

@pytest.fixture
def scripted():
    return ScriptedUniforms

@pytest.fixture(autouse=True)
def restore_settings():
    saved = settings.model_dump()
    yield
    for key, value in saved.items():
        setattr(settings, key, value)

@pytest.fixture
def simple_samples():
    return np.array([[1.0], [2.0], [3.0]])

@pytest.fixture
def empirical(simple_samples, rng):
    return Empirical(simple_samples, rng=rng)

@pytest.fixture
def simple_weights():
    return np.array([0.2, 0.3, 0.5])

@pytest.fixture
def dim():
    return 3

@pytest.fixture
def cov_matrix(dim):
    A = np.eye(dim) * 2.0
    A[0,1] = A[1,0] = 0.3
    return A
