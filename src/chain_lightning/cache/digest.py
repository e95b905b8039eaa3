"""Digest-based cache oracle.

Reads cache state from a digest string of ``name:hash`` tokens, the form a
client-side caching layer typically mirrors into a cookie. The hash is
everything after the last colon, so chunk specifiers such as
``chunk:debounce`` keep their own colon.

Example:
    oracle = DigestCacheOracle.from_digest("chain-lightning:a1b2, chunk:debounce:abc123")
"""

import logging
import re
from collections.abc import Iterable

from chain_lightning.cache.base import CacheOracle

logger = logging.getLogger(__name__)

_TOKEN_SPLIT_RE = re.compile(r"[,\s]+")


class DigestCacheOracle(CacheOracle):
    """Cache oracle backed by a fixed set of ``(name, hash)`` pairs."""

    def __init__(self, entries: Iterable[tuple[str, str]] = ()) -> None:
        """Initialize the oracle.

        Args:
            entries: Cached ``(name, hash)`` pairs
        """
        self._entries: frozenset[tuple[str, str]] = frozenset(entries)

    @classmethod
    def from_digest(cls, digest: str | None) -> "DigestCacheOracle":
        """Parse a digest string.

        Malformed tokens (no colon, empty name or hash) are skipped.

        Args:
            digest: Comma or whitespace separated ``name:hash`` tokens

        Returns:
            DigestCacheOracle instance
        """
        entries: list[tuple[str, str]] = []
        for token in _TOKEN_SPLIT_RE.split(digest or ""):
            if not token:
                continue
            name, sep, hash = token.rpartition(":")
            if not sep or not name or not hash:
                logger.debug("Skipping malformed digest token: %s", token)
                continue
            entries.append((name, hash))
        return cls(entries)

    @property
    def entries(self) -> frozenset[tuple[str, str]]:
        """Cached ``(name, hash)`` pairs."""
        return self._entries

    def has_cached_entry(self, name: str, hash: str) -> bool:
        return (name, hash) in self._entries

    def to_digest(self) -> str:
        """Serialize back to a digest string (sorted for stable output)."""
        return ",".join(f"{name}:{hash}" for name, hash in sorted(self._entries))
