"""Chain Lightning data models.

This module exports all core entities used throughout the package:
- Manifest: Immutable build manifest
- ScriptAsset, ComponentEntry, ChunkEntry: Manifest entries
- RenderSession: Request-scoped render state
- RenderWarning: Non-fatal render diagnostic
- PreloadHint: Early Hints record
"""

from chain_lightning.models.manifest import (
    ChunkEntry,
    ComponentEntry,
    Manifest,
    ScriptAsset,
)
from chain_lightning.models.session import (
    PreloadHint,
    RenderSession,
    RenderWarning,
    WarningCode,
    format_link_header,
)

__all__ = [
    "Manifest",
    "ScriptAsset",
    "ComponentEntry",
    "ChunkEntry",
    "RenderSession",
    "RenderWarning",
    "WarningCode",
    "PreloadHint",
    "format_link_header",
]
