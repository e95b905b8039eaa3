"""HTML fragment builders.

Small helpers that produce the tags Chain Lightning emits. Attribute values
are escaped with markupsafe; script bodies are trusted build output and are
emitted verbatim. Results are ``Markup`` so Jinja2 templates with
autoescaping print them as-is.
"""

import json
from typing import Any

from markupsafe import Markup, escape


def to_json(data: Any, pretty: bool = False) -> str:
    """Serialize data for a script body.

    Slashes are never escaped and key order follows the input mapping, so
    output is readable and deterministic.

    Args:
        data: JSON-serializable data
        pretty: Indent with four spaces

    Returns:
        JSON string

    Examples:
        >>> to_json({"imports": {"app": "/js/app.js"}})
        '{"imports":{"app":"/js/app.js"}}'
    """
    if pretty:
        return json.dumps(data, indent=4)
    return json.dumps(data, separators=(",", ":"))


def render_attributes(attributes: dict[str, str | None] | None) -> str:
    """Render tag attributes with escaped values.

    Attributes whose value is None are omitted.

    Examples:
        >>> render_attributes({"type": "module", "src": "/a.js?x=1&y=2"})
        ' type="module" src="/a.js?x=1&amp;y=2"'
    """
    if not attributes:
        return ""
    return "".join(
        f' {name}="{escape(value)}"'
        for name, value in attributes.items()
        if value is not None
    )


def script_tag(
    content: str = "",
    attributes: dict[str, str | None] | None = None,
) -> Markup:
    """Build a ``<script>`` tag with a verbatim body."""
    return Markup(f"<script{render_attributes(attributes)}>{content}</script>")


def link_tag(attributes: dict[str, str | None]) -> Markup:
    """Build a ``<link>`` tag."""
    return Markup(f"<link{render_attributes(attributes)}>")


def join_fragments(fragments: list[str]) -> Markup:
    """Join tags with newlines."""
    return Markup("\n").join(Markup(fragment) for fragment in fragments)
