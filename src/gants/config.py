"""
Runtime settings for gants.

Settings are read once from environment variables and then handed to the
components that need them.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from gants.directory.authority import DEFAULT_AUTHORITY

logger = logging.getLogger(__name__)

# Default timeout for network operations (can be overridden with GANTS_TIMEOUT env var)
DEFAULT_TIMEOUT = 30.0

CACHE_DIR_NAME = ".gants"


def default_cache_dir() -> Path:
    """Get the per-user cache directory."""
    return Path.home() / CACHE_DIR_NAME


@dataclass(frozen=True)
class Settings:
    """Settings resolved from the environment."""

    cache_dir: Path
    timeout: float = DEFAULT_TIMEOUT
    authority: str = DEFAULT_AUTHORITY

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """
        Build settings from environment variables.

        Recognized variables: GANTS_CACHE_DIR, GANTS_TIMEOUT, GANTS_AUTHORITY.

        Args:
            environ: Environment mapping (os.environ if None)
        """
        if environ is None:
            environ = os.environ

        cache_dir = environ.get("GANTS_CACHE_DIR")
        return cls(
            cache_dir=Path(cache_dir).expanduser() if cache_dir else default_cache_dir(),
            timeout=_parse_timeout(environ.get("GANTS_TIMEOUT")),
            authority=environ.get("GANTS_AUTHORITY") or DEFAULT_AUTHORITY,
        )


def _parse_timeout(value: str | None) -> float:
    if not value:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(value)
    except ValueError:
        logger.warning("Invalid GANTS_TIMEOUT value: %s", value)
        return DEFAULT_TIMEOUT
    if timeout <= 0:
        logger.warning("GANTS_TIMEOUT must be positive: %s", value)
        return DEFAULT_TIMEOUT
    return timeout
