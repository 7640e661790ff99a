"""Runtime settings for extraction runs."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, Field, ValidationError

from .models import DEFAULT_MAX_FILE_SIZE

logger = logging.getLogger(__name__)


def _default_workers() -> int:
    return min(32, (os.cpu_count() or 1) + 4)


class Settings(BaseModel):
    """Tunables for the parallel pipeline.

    Precedence: CLI flag > environment > default.
    """

    max_workers: int = Field(default_factory=_default_workers, ge=1)
    """Worker threads used to extract files."""

    progress_every: int = Field(default=10, ge=1)
    """Report progress after this many completed files."""

    max_file_size_bytes: int = Field(default=DEFAULT_MAX_FILE_SIZE, ge=1)
    """Files larger than this are skipped."""


# Environment variable -> Settings field.
ENV_VARS: dict[str, str] = {
    "CODECHUNK_MAX_WORKERS": "max_workers",
    "CODECHUNK_PROGRESS_EVERY": "progress_every",
    "CODECHUNK_MAX_FILE_SIZE": "max_file_size_bytes",
}


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from ``CODECHUNK_*`` environment variables.

    Unparseable values are logged and ignored.
    """
    env = os.environ if environ is None else environ
    values: dict[str, int] = {}
    for var, field_name in ENV_VARS.items():
        raw = env.get(var, "").strip()
        if not raw:
            continue
        try:
            values[field_name] = int(raw)
        except ValueError:
            logger.warning("Ignoring %s=%r: not an integer", var, raw)

    try:
        return Settings(**values)
    except ValidationError as exc:
        logger.warning("Invalid settings from environment, using defaults: %s", exc)
        return Settings()
