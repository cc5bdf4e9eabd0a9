"""Contiguous-chunk parallel loop used by batch sampling."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from .config import settings

__all__ = ["parallel_for", "chunk_bounds"]

logger = logging.getLogger(__name__)


def chunk_bounds(count: int, chunk_size: int) -> list[tuple[int, int]]:
    """Split ``range(count)`` into contiguous ``[start, stop)`` pieces."""
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive. Got {chunk_size}.")
    return [(start, min(start + chunk_size, count)) for start in range(0, count, chunk_size)]


def parallel_for(
    count: int,
    body: Callable[[int, int], None],
    *,
    chunk_size: int | None = None,
    max_workers: int | None = None,
) -> None:
    """Run ``body(start, stop)`` over contiguous chunks of ``range(count)``.

    ``body`` must only touch its own index range of the output and read shared
    inputs. Chunks are independent, so the result never depends on how they are
    scheduled. Ranges that fit in one chunk run inline on the calling thread.

    Args:
        count: Number of elements.
        body: Callable processing the half-open index range ``[start, stop)``.
        chunk_size: Elements per chunk. Defaults to ``settings.parallel_chunk_size``.
        max_workers: Thread count. Defaults to ``settings.max_workers`` (or the
            executor's own default).
    """
    if count <= 0:
        return
    chunk = int(chunk_size or settings.parallel_chunk_size)
    workers = max_workers if max_workers is not None else settings.max_workers

    if count <= chunk or workers == 1:
        body(0, count)
        return

    bounds = chunk_bounds(count, chunk)
    workers = workers or min(len(bounds), os.cpu_count() or 1)
    logger.debug("parallel_for: %d elements in %d chunks on %d workers", count, len(bounds), workers)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        # list() re-raises the first worker exception here
        list(executor.map(lambda b: body(*b), bounds))
