"""Unit tests for manifest models and loading."""

import json
from pathlib import Path
from typing import Any

import pytest

from chain_lightning.loader import (
    ManifestError,
    ManifestMalformedError,
    ManifestUnreadableError,
    load_manifest,
    manifest_from_dict,
    parse_manifest,
    validate_manifest,
)
from chain_lightning.models.manifest import ChunkEntry, ComponentEntry, Manifest
from tests.fixtures import (
    CURRENT_MANIFEST_PATH,
    INCONSISTENT_MANIFEST_PATH,
    LEGACY_MANIFEST_PATH,
    MALFORMED_MANIFEST_PATH,
)


class TestLoadManifest:
    """Tests for load_manifest."""

    def test_load_current_manifest(self) -> None:
        """Test loading a current-format manifest."""
        manifest = load_manifest(CURRENT_MANIFEST_PATH)

        assert not manifest.is_legacy
        assert manifest.manifest_script is not None
        assert manifest.manifest_script.hash == "9d8e7f"
        assert manifest.client.url == "/assets/chain-lightning-1a2b3c.js"
        assert set(manifest.components) == {"search", "filters", "badge"}
        assert set(manifest.chunks) == {"chunk:debounce", "chunk:format"}

    def test_load_legacy_manifest(self) -> None:
        """Test that a missing manifestScript selects the legacy format."""
        manifest = load_manifest(LEGACY_MANIFEST_PATH)

        assert manifest.is_legacy
        assert manifest.manifest_script is None

    def test_accepts_string_path(self) -> None:
        """Test that string paths are accepted."""
        manifest = load_manifest(str(CURRENT_MANIFEST_PATH))

        assert "search" in manifest.components

    def test_missing_file_is_unreadable(self, tmp_path: Path) -> None:
        """Test that a missing file raises ManifestUnreadableError."""
        path = tmp_path / "missing.json"

        with pytest.raises(ManifestUnreadableError, match="Cannot read Chain Lightning manifest") as exc:
            load_manifest(path)

        assert exc.value.path == path

    def test_directory_is_unreadable(self, tmp_path: Path) -> None:
        """Test that a directory raises ManifestUnreadableError."""
        with pytest.raises(ManifestUnreadableError):
            load_manifest(tmp_path)

    def test_invalid_json_is_malformed(self) -> None:
        """Test that invalid JSON raises ManifestMalformedError."""
        with pytest.raises(ManifestMalformedError, match="invalid JSON") as exc:
            load_manifest(MALFORMED_MANIFEST_PATH)

        assert exc.value.path == MALFORMED_MANIFEST_PATH

    def test_errors_share_base_class(self, tmp_path: Path) -> None:
        """Test that both failures can be caught as ManifestError."""
        with pytest.raises(ManifestError):
            load_manifest(tmp_path / "missing.json")
        with pytest.raises(ManifestError):
            load_manifest(MALFORMED_MANIFEST_PATH)


class TestParseManifest:
    """Tests for parse_manifest and manifest_from_dict."""

    def test_parse_text(self, search_manifest_data: dict[str, Any]) -> None:
        """Test parsing manifest JSON text."""
        manifest = parse_manifest(json.dumps(search_manifest_data))

        assert manifest.components["search"].deps == ("chunk:debounce",)

    def test_non_object_document(self) -> None:
        """Test that a JSON array is rejected."""
        with pytest.raises(ManifestMalformedError, match="expected an object"):
            parse_manifest("[]")

    def test_missing_import_map(self, search_manifest_data: dict[str, Any]) -> None:
        """Test that importMap is required."""
        del search_manifest_data["importMap"]

        with pytest.raises(ManifestMalformedError, match="importMap"):
            manifest_from_dict(search_manifest_data)

    def test_missing_client(self, search_manifest_data: dict[str, Any]) -> None:
        """Test that client is required."""
        del search_manifest_data["client"]

        with pytest.raises(ManifestMalformedError, match="client"):
            manifest_from_dict(search_manifest_data)

    def test_client_field_type(self, search_manifest_data: dict[str, Any]) -> None:
        """Test that client fields must be strings."""
        search_manifest_data["client"]["hash"] = 42

        with pytest.raises(ManifestMalformedError, match="'hash'"):
            manifest_from_dict(search_manifest_data)

    def test_component_deps_type(self, search_manifest_data: dict[str, Any]) -> None:
        """Test that component deps must be a list of strings."""
        search_manifest_data["components"]["search"]["deps"] = "chunk:debounce"

        with pytest.raises(ManifestMalformedError, match="components.search"):
            manifest_from_dict(search_manifest_data)

    def test_chunk_requires_data_url(self, search_manifest_data: dict[str, Any]) -> None:
        """Test that chunks need a dataUrl."""
        del search_manifest_data["chunks"]["chunk:debounce"]["dataUrl"]

        with pytest.raises(ManifestMalformedError, match="dataUrl"):
            manifest_from_dict(search_manifest_data)

    def test_components_and_chunks_optional(self, search_manifest_data: dict[str, Any]) -> None:
        """Test that components and chunks default to empty."""
        del search_manifest_data["components"]
        del search_manifest_data["chunks"]

        manifest = manifest_from_dict(search_manifest_data)

        assert manifest.components == {}
        assert manifest.chunks == {}

    def test_null_manifest_script_is_legacy(self, search_manifest_data: dict[str, Any]) -> None:
        """Test that an explicit null manifestScript means legacy."""
        search_manifest_data["manifestScript"] = None

        assert manifest_from_dict(search_manifest_data).is_legacy

    def test_deps_default_empty(self, search_manifest_data: dict[str, Any]) -> None:
        """Test that a component without deps has none."""
        del search_manifest_data["components"]["search"]["deps"]

        manifest = manifest_from_dict(search_manifest_data)

        assert manifest.components["search"].deps == ()


class TestManifestModel:
    """Tests for the Manifest dataclass."""

    def test_entries(self, search_manifest: Manifest) -> None:
        """Test parsed entry values."""
        assert search_manifest.components["search"] == ComponentEntry(
            name="search",
            src="src/search.js",
            url="/search.js",
            deps=("chunk:debounce",),
        )
        assert search_manifest.chunks["chunk:debounce"] == ChunkEntry(
            specifier="chunk:debounce",
            url="/chunk.js",
            data_url="data:text/javascript;base64,ZXhwb3J0IHt9",
            hash="abc123",
        )

    def test_imports(self, search_manifest: Manifest) -> None:
        """Test static import lookup."""
        assert search_manifest.imports == {"lit": "/lit.js"}

    def test_imports_missing(self, search_manifest_data: dict[str, Any]) -> None:
        """Test an import map without an imports object."""
        search_manifest_data["importMap"] = {"scopes": {}}

        assert manifest_from_dict(search_manifest_data).imports == {}

    def test_is_frozen(self, search_manifest: Manifest) -> None:
        """Test that the manifest cannot be reassigned."""
        with pytest.raises(AttributeError):
            search_manifest.client = search_manifest.client  # type: ignore[misc]

    def test_to_dict_is_a_copy(
        self,
        search_manifest: Manifest,
        search_manifest_data: dict[str, Any],
    ) -> None:
        """Test that the raw document cannot be mutated through to_dict."""
        raw = search_manifest.to_dict()
        raw["components"]["search"]["url"] = "/changed.js"

        assert raw != search_manifest.to_dict()
        assert search_manifest.to_dict() == search_manifest_data

    def test_source_document_not_shared(self, search_manifest_data: dict[str, Any]) -> None:
        """Test that mutating the source document does not leak into the manifest."""
        manifest = manifest_from_dict(search_manifest_data)
        search_manifest_data["importMap"]["imports"]["lit"] = "/other.js"

        assert manifest.imports["lit"] == "/lit.js"


class TestValidateManifest:
    """Tests for validate_manifest."""

    def test_consistent_manifest(self) -> None:
        """Test that the current fixture has no warnings."""
        assert validate_manifest(load_manifest(CURRENT_MANIFEST_PATH)) == []

    def test_inconsistent_manifest(self) -> None:
        """Test unresolvable deps and chunk/import map overlap."""
        warnings = validate_manifest(load_manifest(INCONSISTENT_MANIFEST_PATH))

        assert len(warnings) == 2
        assert any("'chart' depends on 'd3'" in w for w in warnings)
        assert any("'chunk:shared' is also in the static import map" in w for w in warnings)

    def test_empty_import_map(self, search_manifest_data: dict[str, Any]) -> None:
        """Test warning for an import map without entries."""
        search_manifest_data["importMap"] = {"imports": {}}

        warnings = validate_manifest(manifest_from_dict(search_manifest_data))

        assert warnings == ["Static import map has no 'imports' entries"]
