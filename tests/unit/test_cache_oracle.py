"""Unit tests for cache oracles."""

import pytest

from chain_lightning.cache import CacheOracle, DigestCacheOracle


class TestCacheOracle:
    """Tests for the CacheOracle interface."""

    def test_is_abstract(self) -> None:
        """Test that has_cached_entry must be implemented."""
        with pytest.raises(TypeError):
            CacheOracle()  # type: ignore[abstract]

    def test_script_capability_absent_by_default(self) -> None:
        """Test that script() returns None unless overridden."""

        class Minimal(CacheOracle):
            def has_cached_entry(self, name: str, hash: str) -> bool:
                return False

        assert Minimal().script("src/search.js") is None


class TestDigestCacheOracle:
    """Tests for DigestCacheOracle."""

    def test_entries(self) -> None:
        """Test lookups against explicit entries."""
        oracle = DigestCacheOracle([("chain-lightning", "c1")])

        assert oracle.has_cached_entry("chain-lightning", "c1")
        assert not oracle.has_cached_entry("chain-lightning", "c2")
        assert not oracle.has_cached_entry("cl-manifest", "c1")

    def test_from_digest(self) -> None:
        """Test parsing comma and whitespace separated tokens."""
        oracle = DigestCacheOracle.from_digest("chain-lightning:c1, cl-manifest:m1 chunk:debounce:abc123")

        assert oracle.entries == {
            ("chain-lightning", "c1"),
            ("cl-manifest", "m1"),
            ("chunk:debounce", "abc123"),
        }

    def test_specifier_keeps_colon(self) -> None:
        """Test that the hash is split off at the last colon."""
        oracle = DigestCacheOracle.from_digest("chunk:debounce:abc123")

        assert oracle.has_cached_entry("chunk:debounce", "abc123")

    @pytest.mark.parametrize("digest", [None, "", "   ", "nocolon", ":hash", "name:"])
    def test_malformed_or_empty(self, digest: str | None) -> None:
        """Test that malformed tokens are skipped."""
        assert DigestCacheOracle.from_digest(digest).entries == frozenset()

    def test_to_digest(self) -> None:
        """Test sorted serialization."""
        oracle = DigestCacheOracle([("b", "2"), ("a", "1")])

        assert oracle.to_digest() == "a:1,b:2"

    def test_no_script_capability(self) -> None:
        """Test that the digest oracle leaves script rendering to the renderer."""
        assert DigestCacheOracle().script("src/search.js") is None
