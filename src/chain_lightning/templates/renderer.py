"""Jinja2 page rendering with Chain Lightning tags.

Pages reach the per-request ModuleRenderer as ``chain_lightning``:

    <head>
      {{ chain_lightning.render_head_scripts() }}
    </head>
    <body>
      {{ chain_lightning.render_component("search", inline_deps=True) }}
    </body>

The renderer's methods return ``Markup``, so autoescaping leaves them intact.
"""

import logging
from pathlib import Path
from typing import Any

from jinja2 import BaseLoader, Environment, FileSystemLoader, select_autoescape

from chain_lightning.cache.base import CacheOracle
from chain_lightning.models.session import format_link_header
from chain_lightning.renderers.module_renderer import KEEP_ORACLE, ModuleRenderer

logger = logging.getLogger(__name__)

CONTEXT_NAME = "chain_lightning"


class PageRenderer:
    """Renders page templates for one application.

    Holds the application-wide ModuleRenderer (and thereby the manifest) and
    hands every request its own copy with fresh render state.

    Usage:
        pages = PageRenderer(ModuleRenderer.from_file(manifest_path), "templates")
        request_renderer = pages.new_request(oracle)
        hints = request_renderer.get_early_hints(["search"])
        html = pages.render("index.html.j2", request_renderer, title="Home")
    """

    def __init__(
        self,
        module_renderer: ModuleRenderer,
        template_dir: Path | str | None = None,
        loader: BaseLoader | None = None,
    ) -> None:
        """Initialize the page renderer.

        Args:
            module_renderer: Application-wide renderer holding the manifest
            template_dir: Directory to load templates from
            loader: Explicit Jinja2 loader (takes precedence over template_dir)
        """
        self.module_renderer = module_renderer

        if loader is None and template_dir is not None:
            loader = FileSystemLoader(str(template_dir))

        self._env = Environment(
            loader=loader,
            autoescape=select_autoescape(["html", "xml", "j2"], default_for_string=True),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        self._env.filters["link_header"] = format_link_header

    @property
    def environment(self) -> Environment:
        """The Jinja2 environment used for pages."""
        return self._env

    def new_request(self, oracle: CacheOracle | None = KEEP_ORACLE) -> ModuleRenderer:
        """Create the ModuleRenderer for one request."""
        return self.module_renderer.for_request(oracle)

    def render(
        self,
        template_name: str,
        renderer: ModuleRenderer | None = None,
        **context: Any,
    ) -> str:
        """Render a page template.

        Args:
            template_name: Template file to use
            renderer: Request renderer (a fresh one if omitted)
            **context: Template context

        Returns:
            Rendered HTML

        Raises:
            ValueError: If the template cannot be loaded
        """
        try:
            template = self._env.get_template(template_name)
        except Exception as e:
            logger.error("Failed to load template %s: %s", template_name, e)
            raise ValueError(f"Template not found: {template_name}") from e

        renderer = renderer or self.new_request()
        rendered = template.render({**context, CONTEXT_NAME: renderer})
        logger.debug(
            "Rendered %s (%d characters, %d warnings)",
            template_name,
            len(rendered),
            len(renderer.warnings),
        )
        return rendered

    def render_string(
        self,
        source: str,
        renderer: ModuleRenderer | None = None,
        **context: Any,
    ) -> str:
        """Render a template given as a string."""
        renderer = renderer or self.new_request()
        return self._env.from_string(source).render({**context, CONTEXT_NAME: renderer})
