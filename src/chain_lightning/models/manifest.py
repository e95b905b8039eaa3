"""Manifest entities.

This module contains the immutable view of a Chain Lightning manifest:
- ScriptAsset: Cacheable script (manifest data script, client runtime)
- ComponentEntry: ES module component and its declared dependencies
- ChunkEntry: Shared chunk that needs a per-page import map override
- Manifest: The whole build output, parsed once

The ``from_dict`` constructors raise ValueError on missing or ill-typed
fields; the loader turns that into ManifestMalformedError.
"""

import copy
from dataclasses import dataclass, field
from typing import Any


def _require_str(data: dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"{where}: field '{key}' must be a string")
    return value


def _require_object(data: Any, where: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"{where}: expected an object, got {type(data).__name__}")
    return data


@dataclass(frozen=True)
class ScriptAsset:
    """Script with a content hash that may be inlined or referenced.

    Attributes:
        url: Public URL of the built script
        hash: Content hash used as cache key
        content: Full script source for inlining
    """

    url: str
    hash: str
    content: str

    @classmethod
    def from_dict(cls, data: Any, where: str) -> "ScriptAsset":
        data = _require_object(data, where)
        return cls(
            url=_require_str(data, "url", where),
            hash=_require_str(data, "hash", where),
            content=_require_str(data, "content", where),
        )


@dataclass(frozen=True)
class ComponentEntry:
    """ES module component.

    Attributes:
        name: Component name used in templates
        src: Source path, handed to the cache oracle's script renderer
        url: Public URL of the built component module
        deps: Dependency specifiers in declaration order
    """

    name: str
    src: str
    url: str
    deps: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, name: str, data: Any) -> "ComponentEntry":
        where = f"components.{name}"
        data = _require_object(data, where)
        deps = data.get("deps", [])
        if not isinstance(deps, list) or not all(isinstance(d, str) for d in deps):
            raise ValueError(f"{where}: field 'deps' must be a list of strings")
        return cls(
            name=name,
            src=_require_str(data, "src", where),
            url=_require_str(data, "url", where),
            deps=tuple(deps),
        )


@dataclass(frozen=True)
class ChunkEntry:
    """Shared code chunk excluded from the static import map.

    Attributes:
        specifier: Bare specifier the chunk is imported by (e.g. "chunk:debounce")
        url: Public URL of the chunk
        data_url: ``data:`` URL holding the chunk source
        hash: Content hash used as cache key
    """

    specifier: str
    url: str
    data_url: str
    hash: str

    @classmethod
    def from_dict(cls, specifier: str, data: Any) -> "ChunkEntry":
        where = f"chunks.{specifier}"
        data = _require_object(data, where)
        return cls(
            specifier=specifier,
            url=_require_str(data, "url", where),
            data_url=_require_str(data, "dataUrl", where),
            hash=_require_str(data, "hash", where),
        )


@dataclass(frozen=True)
class Manifest:
    """Build-time dependency manifest.

    Loaded once and never mutated. A manifest without ``manifestScript``
    comes from an older build and uses the legacy manifest script.

    Attributes:
        import_map: Static browser import map (``{"imports": {...}}``)
        client: Client runtime script
        manifest_script: Cacheable manifest data script, None for legacy builds
        components: Component name to entry
        chunks: Chunk specifier to entry
    """

    import_map: dict[str, Any]
    client: ScriptAsset
    manifest_script: ScriptAsset | None = None
    components: dict[str, ComponentEntry] = field(default_factory=dict)
    chunks: dict[str, ChunkEntry] = field(default_factory=dict)
    _raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def is_legacy(self) -> bool:
        """Return True if the manifest predates the cacheable manifest script."""
        return self.manifest_script is None

    @property
    def imports(self) -> dict[str, str]:
        """Specifier to URL mapping from the static import map."""
        imports = self.import_map.get("imports")
        return imports if isinstance(imports, dict) else {}

    def raw_components(self) -> dict[str, Any]:
        """Return the ``components`` object exactly as the build wrote it."""
        return copy.deepcopy(self._raw.get("components", {}))

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the parsed manifest document."""
        return copy.deepcopy(self._raw)

    @classmethod
    def from_dict(cls, data: Any) -> "Manifest":
        """Build a manifest from a parsed JSON document.

        Args:
            data: Parsed manifest document

        Returns:
            Manifest instance

        Raises:
            ValueError: If required fields are missing or have the wrong type
        """
        data = _require_object(data, "manifest")

        if "importMap" not in data:
            raise ValueError("manifest: missing required field 'importMap'")
        import_map = _require_object(data["importMap"], "importMap")

        if "client" not in data:
            raise ValueError("manifest: missing required field 'client'")
        client = ScriptAsset.from_dict(data["client"], "client")

        manifest_script = None
        if data.get("manifestScript") is not None:
            manifest_script = ScriptAsset.from_dict(data["manifestScript"], "manifestScript")

        components = {
            name: ComponentEntry.from_dict(name, entry)
            for name, entry in _require_object(data.get("components", {}), "components").items()
        }
        chunks = {
            specifier: ChunkEntry.from_dict(specifier, entry)
            for specifier, entry in _require_object(data.get("chunks", {}), "chunks").items()
        }

        return cls(
            import_map=copy.deepcopy(import_map),
            client=client,
            manifest_script=manifest_script,
            components=components,
            chunks=chunks,
            _raw=copy.deepcopy(data),
        )
