"""Module renderer: import maps, scripts and preload hints for one page.

This is the main entry point for rendering. A ModuleRenderer pairs the
immutable manifest with one RenderSession, so create one per request
(``ModuleRenderer.for_request``) and call its methods from the page template.

Usage:
    renderer = ModuleRenderer.from_file("dist/chain-lightning.json", oracle)
    head = renderer.render_head_scripts()
    search = renderer.render_component("search", inline_deps=True)

Ordering precondition: the client runtime must come after the manifest
script. ``render_head_scripts`` respects this; callers emitting the scripts
individually are responsible for it.
"""

import logging
from pathlib import Path
from typing import Any

from markupsafe import Markup

from chain_lightning.cache.base import CacheOracle
from chain_lightning.loader import load_manifest
from chain_lightning.models.manifest import ChunkEntry, Manifest, ScriptAsset
from chain_lightning.models.session import (
    PreloadHint,
    RenderSession,
    RenderWarning,
    WarningCode,
)
from chain_lightning.renderers.caching import (
    ChunkDecision,
    ScriptStrategy,
    decide_chunk,
    decide_script,
    is_cached,
)
from chain_lightning.renderers.html import (
    join_fragments,
    link_tag,
    script_tag,
    to_json,
)
from chain_lightning.utils.logging import log_structured

logger = logging.getLogger(__name__)

# Cache entry names for the head scripts
MANIFEST_ENTRY = "cl-manifest"
CLIENT_ENTRY = "chain-lightning"

# Cache marker attributes read by the client-side caching layer
ASSET_ATTRIBUTE = "sb-asset"
URL_ATTRIBUTE = "sb-url"

LEGACY_READY_EVENT = "chain-lightning:ready"
EMPTY = Markup("")

# Default for for_request(): reuse the current oracle
KEEP_ORACLE: Any = object()


class ModuleRenderer:
    """Renders Chain Lightning tags for a single page.

    Attributes:
        manifest: Immutable build manifest
        oracle: Optional cache-state oracle
        session: Render state for this page
    """

    def __init__(
        self,
        manifest: Manifest,
        oracle: CacheOracle | None = None,
        session: RenderSession | None = None,
        asset_attribute: str = ASSET_ATTRIBUTE,
        url_attribute: str = URL_ATTRIBUTE,
    ) -> None:
        """Initialize the renderer.

        Args:
            manifest: Parsed manifest
            oracle: Cache oracle, or None when no caching layer is integrated
            session: Render state (a fresh one by default)
            asset_attribute: Attribute carrying the ``name:hash`` cache marker
            url_attribute: Attribute carrying the real URL cache marker
        """
        self.manifest = manifest
        self.oracle = oracle
        self.session = session or RenderSession()
        self.asset_attribute = asset_attribute
        self.url_attribute = url_attribute

    @classmethod
    def from_file(
        cls,
        manifest_path: Path | str,
        oracle: CacheOracle | None = None,
        **kwargs: Any,
    ) -> "ModuleRenderer":
        """Create a renderer from a manifest file.

        Raises:
            ManifestUnreadableError: If the file cannot be read
            ManifestMalformedError: If the file is not a valid manifest
        """
        return cls(load_manifest(manifest_path), oracle, **kwargs)

    def for_request(self, oracle: CacheOracle | None = KEEP_ORACLE) -> "ModuleRenderer":
        """Create a renderer for another page sharing this manifest.

        The manifest is shared read-only; render state is fresh.

        Args:
            oracle: Cache oracle for the new request. Defaults to this
                renderer's oracle; pass None to render without one.
        """
        return type(self)(
            self.manifest,
            self.oracle if oracle is KEEP_ORACLE else oracle,
            asset_attribute=self.asset_attribute,
            url_attribute=self.url_attribute,
        )

    @property
    def warnings(self) -> list[RenderWarning]:
        """Warnings collected during this render."""
        return self.session.warnings

    # =========================================================================
    # Head scripts
    # =========================================================================

    def render_import_map(self) -> Markup:
        """Render the global import map.

        Call once in ``<head>`` before any module script.
        """
        if self.session.import_map_done:
            self._warn_already_rendered("render_import_map")
            return EMPTY
        self.session.import_map_done = True

        return script_tag(
            to_json(self.manifest.import_map, pretty=True),
            {"type": "importmap"},
        )

    def render_manifest_script(self) -> Markup:
        """Render the manifest data script.

        Sets ``window.__CL_MANIFEST__`` before components execute, so the tag
        is always render-blocking (never deferred or async). Call in
        ``<head>`` after the import map.
        """
        if self.session.manifest_script_done:
            self._warn_already_rendered("render_manifest_script")
            return EMPTY
        self.session.manifest_script_done = True

        asset = self.manifest.manifest_script
        if asset is None:
            # Older builds: inline data, never cached
            data = {"components": self.manifest.raw_components()}
            return script_tag(
                f"window.__CL_MANIFEST__={to_json(data)};"
                f"dispatchEvent(new Event('{LEGACY_READY_EVENT}'))"
            )

        return self._render_cacheable_script(MANIFEST_ENTRY, asset, module=False)

    def render_client_script(self) -> Markup:
        """Render the client runtime as a module script.

        Call in ``<head>`` after ``render_manifest_script``.
        """
        if self.session.client_script_done:
            self._warn_already_rendered("render_client_script")
            return EMPTY
        self.session.client_script_done = True

        return self._render_cacheable_script(CLIENT_ENTRY, self.manifest.client, module=True)

    def render_head_scripts(self) -> Markup:
        """Render import map, manifest script and client runtime, in that order."""
        return join_fragments([
            self.render_import_map(),
            self.render_manifest_script(),
            self.render_client_script(),
        ])

    def _render_cacheable_script(
        self,
        entry_name: str,
        asset: ScriptAsset,
        module: bool,
    ) -> Markup:
        strategy = decide_script(self.oracle, entry_name, asset.hash)
        type_attr = "module" if module else None

        if strategy is ScriptStrategy.EXTERNAL:
            return script_tag(attributes={"type": type_attr, "src": asset.url})

        if strategy is ScriptStrategy.INLINE_TRACKED:
            return script_tag(asset.content, {
                "type": type_attr,
                **self._cache_markers(entry_name, asset.hash, asset.url),
            })

        return script_tag(asset.content, {"type": type_attr})

    # =========================================================================
    # Components
    # =========================================================================

    def render_component(self, name: str, inline_deps: bool = False) -> Markup:
        """Render a component with its chunk dependencies.

        Safe to call several times: later calls return an empty string.
        Each chunk gets one override import map per page; a modulepreload
        link follows unless the chunk was inlined as a data URL.

        Args:
            name: Component name
            inline_deps: Inline uncached chunks as data URLs (first visit optimization)

        Returns:
            Chunk import maps, then preloads, then the component script

        Raises:
            ValueError: If name is empty
        """
        if not name:
            raise ValueError("Component name must not be empty")

        component = self.manifest.components.get(name)
        if component is None:
            self._warn(
                WarningCode.UNKNOWN_COMPONENT,
                f'Component "{name}" not found in manifest',
                name,
            )
            return EMPTY

        # ES modules must only be included once per page
        if name in self.session.rendered_components:
            return EMPTY
        self.session.rendered_components.add(name)

        import_maps: list[str] = []
        preloads: list[str] = []

        for specifier in component.deps:
            if specifier in self.session.handled_chunks:
                continue

            chunk = self.manifest.chunks.get(specifier)
            if chunk is None:
                continue  # external dep, covered by the static import map

            decision = decide_chunk(self.oracle, specifier, chunk.hash, inline_deps)
            import_maps.append(self._render_chunk_import_map(chunk, decision))

            if decision.needs_preload and specifier not in self.session.preloaded_urls:
                preloads.append(link_tag({"rel": "modulepreload", "href": chunk.url}))
                self.session.preloaded_urls.add(specifier)

            self.session.handled_chunks.add(specifier)

        parts = import_maps + preloads
        parts.append(self._render_component_script(component.src, component.url))

        logger.debug(
            "Rendered component %s (%d chunk import maps, %d preloads)",
            name,
            len(import_maps),
            len(preloads),
        )
        return join_fragments(parts)

    def _render_chunk_import_map(self, chunk: ChunkEntry, decision: ChunkDecision) -> Markup:
        """Render the override import map for one chunk.

        Chunks are excluded from the static import map, so the browser can
        only resolve them through this mapping.
        """
        target = chunk.data_url if decision.use_data_url else chunk.url
        body = to_json({"imports": {chunk.specifier: target}})

        attributes: dict[str, str | None] = {"type": "importmap"}
        if decision.tracked:
            attributes.update(self._cache_markers(chunk.specifier, chunk.hash, chunk.url))

        return script_tag(body, attributes)

    def _render_component_script(self, src: str, url: str) -> Markup:
        if self.oracle is not None:
            html = self.oracle.script(src)
            if html is not None:
                return Markup(html)
        return script_tag(attributes={"type": "module", "src": url})

    # =========================================================================
    # Early Hints
    # =========================================================================

    def get_early_hints(self, component_names: list[str]) -> list[PreloadHint]:
        """Get HTTP 103 Early Hints for the components on this page.

        Call before the response body starts. Hints use real URLs because
        they are sent before any import map exists. Chunks already preloaded
        in this session, or cached on the client, are skipped; unknown
        components are ignored.

        Args:
            component_names: Components that will be on the page

        Returns:
            Preload hints in component and dependency order
        """
        hints: list[PreloadHint] = []

        for name in component_names:
            component = self.manifest.components.get(name)
            if component is None:
                logger.debug("No early hints for unknown component %s", name)
                continue

            for specifier in component.deps:
                chunk = self.manifest.chunks.get(specifier)
                if chunk is None or specifier in self.session.preloaded_urls:
                    continue
                if is_cached(self.oracle, specifier, chunk.hash):
                    continue

                hints.append(PreloadHint(href=chunk.url))
                self.session.preloaded_urls.add(specifier)

        return hints

    # =========================================================================
    # Accessors
    # =========================================================================

    def get_component_url(self, name: str) -> str | None:
        """Get the built URL of a component."""
        component = self.manifest.components.get(name)
        return component.url if component else None

    def get_module_url(self, specifier: str) -> str | None:
        """Get the URL a specifier maps to in the static import map.

        Args:
            specifier: Bare specifier, e.g. "lodash-es@4"
        """
        url = self.manifest.imports.get(specifier)
        return url if isinstance(url, str) else None

    def get_manifest(self) -> dict[str, Any]:
        """Get a copy of the raw manifest document."""
        return self.manifest.to_dict()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _cache_markers(self, name: str, hash: str, url: str) -> dict[str, str | None]:
        return {
            self.asset_attribute: f"{name}:{hash}",
            self.url_attribute: url,
        }

    def _warn_already_rendered(self, method: str) -> None:
        self._warn(
            WarningCode.ALREADY_RENDERED,
            f"{method}() already rendered. Only call {method}() once.",
            method,
        )

    def _warn(self, code: WarningCode, message: str, subject: str) -> None:
        warning = self.session.add_warning(code, message, subject)
        log_structured(logger, logging.WARNING, f"Chain Lightning: {message}", **warning.to_dict())
