"""Chain Lightning Jinja2 integration.

This module exposes the per-request ModuleRenderer to Jinja2 page templates.
"""

from chain_lightning.templates.renderer import PageRenderer

__all__ = ["PageRenderer"]
