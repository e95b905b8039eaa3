"""Inline-versus-external caching decisions.

Every cacheable entry is identified by ``(name, hash)``. The decision only
depends on whether a cache oracle is attached and what it reports:

    oracle   cached   script result              chunk result
    ------   ------   -------------------------  ---------------------------------
    none     -        inline, no markers         URL (data URL if inline_deps)
    yes      yes      external src, no markers   URL, no markers
    yes      no       inline + markers           URL / data URL (inline_deps) + markers

Cached content is never forced inline, whatever ``inline_deps`` says.
"""

from dataclasses import dataclass
from enum import Enum

from chain_lightning.cache.base import CacheOracle


class ScriptStrategy(Enum):
    """How a cacheable script is emitted."""

    INLINE = "inline"  # body inlined, caching layer not involved
    INLINE_TRACKED = "inline_tracked"  # body inlined with cache markers
    EXTERNAL = "external"  # src reference, client already has the bytes


@dataclass(frozen=True)
class ChunkDecision:
    """How a chunk's override import map entry is emitted.

    Attributes:
        cached: Oracle reported the chunk as cached
        use_data_url: Map the specifier to the chunk's data URL
        tracked: Attach cache markers to the import map tag
    """

    cached: bool
    use_data_url: bool
    tracked: bool

    @property
    def needs_preload(self) -> bool:
        """A data URL already carries the content, so nothing to preload."""
        return not self.use_data_url


def is_cached(oracle: CacheOracle | None, name: str, hash: str) -> bool:
    """Ask the oracle about an entry; False when no oracle is attached."""
    if oracle is None:
        return False
    return oracle.has_cached_entry(name, hash)


def decide_script(oracle: CacheOracle | None, name: str, hash: str) -> ScriptStrategy:
    """Decide how to emit a cacheable script.

    Args:
        oracle: Cache oracle, or None
        name: Logical entry name
        hash: Content hash

    Returns:
        ScriptStrategy for the entry
    """
    if oracle is None:
        return ScriptStrategy.INLINE
    if oracle.has_cached_entry(name, hash):
        return ScriptStrategy.EXTERNAL
    return ScriptStrategy.INLINE_TRACKED


def decide_chunk(
    oracle: CacheOracle | None,
    specifier: str,
    hash: str,
    inline_deps: bool,
) -> ChunkDecision:
    """Decide how to emit a chunk's override import map.

    Args:
        oracle: Cache oracle, or None
        specifier: Chunk specifier, used as the entry name
        hash: Chunk content hash
        inline_deps: Caller prefers data URLs for uncached chunks

    Returns:
        ChunkDecision for the chunk
    """
    cached = is_cached(oracle, specifier, hash)
    return ChunkDecision(
        cached=cached,
        use_data_url=inline_deps and not cached,
        tracked=oracle is not None and not cached,
    )
