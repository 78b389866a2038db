"""
Cache module for gants.

Keeps the last fetched consensus document on disk together with its
valid-until time, so the network is only contacted once it has expired.

The body and the expiry live under two fixed keys and are written one
after the other. Each file is replaced atomically, but the pair is not:
between the two writes a reader sees the new body with the previous
expiry.
"""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path

from gants.directory.errors import CacheError

logger = logging.getLogger(__name__)

CACHE_KEY_BODY = "consensus_document_body"
CACHE_KEY_VALID_UNTIL = "consensus_document_valid_until"


class ConsensusCache:
    """Filesystem store for the raw consensus document and its expiry."""

    def __init__(self, root: Path) -> None:
        """
        Initialize the cache.

        Args:
            root: Directory holding the cache files (created on first write)
        """
        self.root = Path(root)

    @property
    def body_path(self) -> Path:
        return self.root / CACHE_KEY_BODY

    @property
    def valid_until_path(self) -> Path:
        return self.root / CACHE_KEY_VALID_UNTIL

    def put(self, body: str, valid_until: datetime) -> None:
        """
        Save a consensus document to cache.

        Args:
            body: Raw consensus document
            valid_until: Time after which the document must not be used

        Raises:
            ValueError: If valid_until has no timezone
            CacheError: If the cache could not be written
        """
        if valid_until.tzinfo is None:
            raise ValueError("valid_until must be timezone-aware")

        try:
            self.root.mkdir(parents=True, exist_ok=True)
            self._write(self.body_path, body)
            self._write(self.valid_until_path, valid_until.isoformat())
        except OSError as e:
            raise CacheError(f"Failed to write consensus cache in {self.root}: {e}") from e

        logger.debug("Cached consensus (%d bytes) valid until %s", len(body), valid_until)

    def get(self, now: datetime) -> str | None:
        """
        Load the cached consensus document if it has not expired.

        Args:
            now: Current time (timezone-aware)

        Returns:
            The cached document, or None if missing, unreadable or expired

        Raises:
            ValueError: If now has no timezone
        """
        if now.tzinfo is None:
            raise ValueError("now must be timezone-aware")

        valid_until = self._read_valid_until()
        if valid_until is None:
            return None

        if valid_until < now:
            logger.debug("Cached consensus expired at %s", valid_until)
            return None

        try:
            return self.body_path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Cannot read cached consensus body: %s", e)
            return None

    def info(self) -> dict[str, str] | None:
        """
        Get information about the cached consensus.

        Returns:
            Dict with cache info or None if no cache
        """
        valid_until = self._read_valid_until()
        if valid_until is None:
            return None
        try:
            size = self.body_path.stat().st_size
        except OSError:
            return None
        return {"valid_until": valid_until.isoformat(), "size": str(size)}

    def clear(self) -> None:
        """Remove all cached files."""
        for path in (self.body_path, self.valid_until_path):
            path.unlink(missing_ok=True)

    def _read_valid_until(self) -> datetime | None:
        try:
            text = self.valid_until_path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("No usable cached expiry: %s", e)
            return None

        try:
            valid_until = datetime.fromisoformat(text)
        except ValueError:
            logger.debug("Corrupt cached expiry: %r", text)
            return None

        if valid_until.tzinfo is None:
            logger.debug("Cached expiry has no timezone: %r", text)
            return None
        return valid_until

    def _write(self, path: Path, text: str) -> None:
        """Replace path with text in one rename."""
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
