import threading

import numpy as np
import pytest

from probdist import settings
from probdist.parallel import chunk_bounds, parallel_for
from probdist.random_source import default_rng, reseed_default, resolve_rng


def test_chunk_bounds_cover_range_contiguously():
    assert chunk_bounds(10, 4) == [(0, 4), (4, 8), (8, 10)]
    assert chunk_bounds(4, 4) == [(0, 4)]
    assert chunk_bounds(0, 4) == []
    with pytest.raises(ValueError):
        chunk_bounds(10, 0)


def test_small_ranges_run_inline():
    calls = []
    parallel_for(5, lambda start, stop: calls.append((start, stop, threading.get_ident())))
    assert calls == [(0, 5, threading.get_ident())]


def test_parallel_for_visits_every_index_once():
    out = np.zeros(1000, dtype=np.int64)

    def body(start, stop):
        out[start:stop] += 1

    parallel_for(out.size, body, chunk_size=64, max_workers=4)
    assert np.all(out == 1)


def test_parallel_for_reads_settings():
    settings.parallel_chunk_size = 10
    seen = []
    lock = threading.Lock()

    def body(start, stop):
        with lock:
            seen.append((start, stop))

    parallel_for(25, body)
    assert sorted(seen) == [(0, 10), (10, 20), (20, 25)]


def test_single_worker_runs_inline():
    calls = []
    parallel_for(100, lambda start, stop: calls.append((start, stop)), chunk_size=10, max_workers=1)
    assert calls == [(0, 100)]


def test_worker_exception_propagates():
    def body(start, stop):
        if start >= 20:
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        parallel_for(40, body, chunk_size=10, max_workers=2)


def test_zero_count_is_a_no_op():
    parallel_for(0, lambda start, stop: pytest.fail("body should not run"))


# ----------------------------- random source -----------------------------

def test_resolve_rng():
    assert resolve_rng(None) is default_rng()

    g = resolve_rng(5)
    assert isinstance(g, np.random.Generator)
    assert g.random() == np.random.default_rng(5).random()

    custom = np.random.default_rng(1)
    assert resolve_rng(custom) is custom

    with pytest.raises(TypeError):
        resolve_rng(True)
    with pytest.raises(TypeError):
        resolve_rng(object())


def test_reseed_default_is_reproducible():
    first = reseed_default(314).random(3)
    second = reseed_default(314).random(3)
    np.testing.assert_array_equal(first, second)
