"""Cache-state oracles.

- base: CacheOracle interface consulted by the renderer
- digest: DigestCacheOracle, backed by ``name:hash`` tokens
"""

from chain_lightning.cache.base import CacheOracle
from chain_lightning.cache.digest import DigestCacheOracle

__all__ = ["CacheOracle", "DigestCacheOracle"]
