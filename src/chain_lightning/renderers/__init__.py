"""Chain Lightning renderers.

- module_renderer: ModuleRenderer, the per-page tag renderer
- caching: Inline-versus-external decisions
- html: Escaped tag builders
"""

from chain_lightning.renderers.module_renderer import ModuleRenderer

__all__ = ["ModuleRenderer"]
