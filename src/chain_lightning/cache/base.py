"""Abstract interface for cache-state oracles.

A cache oracle is the bridge to an external client-side caching layer. It
answers one question, "does the client already hold entry (name, hash)?",
and may optionally render a component's script tag itself.

Oracles MUST be side-effect free from the renderer's point of view and fast
enough to call once per entry per render (typically a cookie lookup).
"""

from abc import ABC, abstractmethod


class CacheOracle(ABC):
    """Cache-state collaborator consulted by the module renderer.

    Subclasses implement ``has_cached_entry``. Overriding ``script`` is
    optional: the default returns None, meaning the oracle has no script
    rendering capability and the renderer falls back to a plain tag.
    """

    @abstractmethod
    def has_cached_entry(self, name: str, hash: str) -> bool:
        """Check whether the client holds an entry.

        Args:
            name: Logical entry name (e.g. "chain-lightning", "chunk:debounce")
            hash: Content hash of the current build

        Returns:
            True if the client has this exact entry cached
        """
        pass

    def script(self, src: str) -> str | None:
        """Render a cache-aware script tag for a component source.

        Args:
            src: Component source path from the manifest

        Returns:
            HTML for the script tag, or None if not supported
        """
        return None
