"""Runtime settings for probdist."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Library settings loaded from environment variables."""

    # Validity predicates run on construction, setters and static entry points.
    # Turning this off trades safety for speed; invalid parameters then give
    # unspecified results (NaN or silently wrong numbers).
    check_parameters: bool = True

    # Batch fill
    parallel_chunk_size: int = 4096
    max_workers: int | None = None

    model_config = SettingsConfigDict(env_prefix="PROBDIST_", extra="ignore")


settings = Settings()


def checks_enabled(checks: bool | None = None) -> bool:
    """Resolve an explicit per-call ``checks`` flag against the global setting."""
    return settings.check_parameters if checks is None else bool(checks)


def set_parameter_checks(enabled: bool) -> None:
    """Globally enable or disable parameter validation."""
    enabled = bool(enabled)
    if not enabled and settings.check_parameters:
        logger.warning("Distribution parameter checks disabled; invalid parameters will not raise.")
    settings.check_parameters = enabled


@contextmanager
def parameter_checks(enabled: bool) -> Iterator[None]:
    """Temporarily toggle parameter validation, restoring the previous value on exit.

    Not thread-safe: the flag is process-wide.
    """
    previous = settings.check_parameters
    set_parameter_checks(enabled)
    try:
        yield
    finally:
        settings.check_parameters = previous
