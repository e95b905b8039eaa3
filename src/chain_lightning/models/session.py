"""Render session entities.

This module contains request-scoped rendering state:
- RenderWarning: Non-fatal diagnostic produced while rendering
- PreloadHint: Early Hints record for an HTTP 103 Link header
- RenderSession: One-shot flags and per-page uniqueness sets
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import quote

# URI characters left as-is inside a Link header ``<...>`` (``%`` keeps existing escapes)
LINK_HREF_SAFE = ":/?#[]@!$&'()*+;=%~"


class WarningCode(Enum):
    """Kind of non-fatal render diagnostic."""

    ALREADY_RENDERED = "already_rendered"
    UNKNOWN_COMPONENT = "unknown_component"


@dataclass(frozen=True)
class RenderWarning:
    """Non-fatal diagnostic produced while rendering.

    Attributes:
        code: Warning kind
        message: Human-readable description
        subject: Method or component the warning is about
    """

    code: WarningCode
    message: str
    subject: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "code": self.code.value,
            "message": self.message,
            "subject": self.subject,
        }


@dataclass(frozen=True)
class PreloadHint:
    """Single Early Hints entry.

    Attributes:
        href: Real URL of the chunk (hints are sent before the import map exists)
        rel: Link relation
        as_: Destination type
    """

    href: str
    rel: str = "preload"
    as_: str = "script"

    def to_dict(self) -> dict[str, str]:
        """Convert to the ``{rel, href, as}`` record shape."""
        return {"rel": self.rel, "href": self.href, "as": self.as_}

    def to_link_header(self) -> str:
        """Format as a single HTTP ``Link`` header value.

        Characters that would end the URI reference or split the header
        value (``<``, ``>``, ``,``, whitespace, quotes) are percent-encoded.
        """
        href = quote(self.href, safe=LINK_HREF_SAFE)
        return f"<{href}>; rel={self.rel}; as={self.as_}"


def format_link_header(hints: list[PreloadHint]) -> str:
    """Join hints into one comma-separated ``Link`` header value."""
    return ", ".join(hint.to_link_header() for hint in hints)


@dataclass
class RenderSession:
    """Mutable state for rendering one page.

    Created fresh for every request and discarded afterwards. Only the
    renderer that owns it mutates it.

    Attributes:
        import_map_done: Static import map already emitted
        manifest_script_done: Manifest script already emitted
        client_script_done: Client runtime already emitted
        rendered_components: Components whose script tag was emitted
        handled_chunks: Chunks whose override import map was emitted
        preloaded_urls: Chunks with a modulepreload link or early hint
        warnings: Diagnostics collected during this render
    """

    import_map_done: bool = False
    manifest_script_done: bool = False
    client_script_done: bool = False
    rendered_components: set[str] = field(default_factory=set)
    handled_chunks: set[str] = field(default_factory=set)
    preloaded_urls: set[str] = field(default_factory=set)
    warnings: list[RenderWarning] = field(default_factory=list)

    def add_warning(
        self,
        code: WarningCode,
        message: str,
        subject: str | None = None,
    ) -> RenderWarning:
        """Record a warning and return it."""
        warning = RenderWarning(code=code, message=message, subject=subject)
        self.warnings.append(warning)
        return warning
