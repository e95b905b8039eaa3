"""Shared pytest fixtures for Chain Lightning tests.

Fixtures are organized by category:
- Manifest fixtures: Parsed manifests and raw manifest documents
- Oracle fixtures: Cache oracles in the states the renderer distinguishes
- Logging fixtures: Reset of the package logger between tests
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any

import pytest

from chain_lightning.loader import load_manifest, manifest_from_dict
from chain_lightning.models.manifest import Manifest
from tests.fixtures import CURRENT_MANIFEST_PATH, LEGACY_MANIFEST_PATH
from tests.fixtures.oracles import RecordingOracle, ScriptRenderingOracle

# =============================================================================
# Manifest Fixtures
# =============================================================================


@pytest.fixture
def current_manifest() -> Manifest:
    """Return the current-format fixture manifest."""
    return load_manifest(CURRENT_MANIFEST_PATH)


@pytest.fixture
def legacy_manifest() -> Manifest:
    """Return the legacy-format fixture manifest (no manifestScript)."""
    return load_manifest(LEGACY_MANIFEST_PATH)


@pytest.fixture
def search_manifest_data() -> dict[str, Any]:
    """Return a minimal manifest: one component "search" with one chunk."""
    return {
        "importMap": {"imports": {"lit": "/lit.js"}},
        "manifestScript": {
            "url": "/manifest.js",
            "hash": "m1",
            "content": "window.__CL_MANIFEST__={}",
        },
        "client": {
            "url": "/client.js",
            "hash": "c1",
            "content": "boot()",
        },
        "components": {
            "search": {
                "src": "src/search.js",
                "url": "/search.js",
                "deps": ["chunk:debounce"],
            },
        },
        "chunks": {
            "chunk:debounce": {
                "url": "/chunk.js",
                "dataUrl": "data:text/javascript;base64,ZXhwb3J0IHt9",
                "hash": "abc123",
            },
        },
    }


@pytest.fixture
def search_manifest(search_manifest_data: dict[str, Any]) -> Manifest:
    """Return the parsed minimal "search" manifest."""
    return manifest_from_dict(copy.deepcopy(search_manifest_data))


@pytest.fixture
def manifest_file(tmp_path: Path, search_manifest_data: dict[str, Any]) -> Path:
    """Write the minimal manifest to a temporary file."""
    path = tmp_path / "chain-lightning.json"
    path.write_text(json.dumps(search_manifest_data), encoding="utf-8")
    return path


# =============================================================================
# Oracle Fixtures
# =============================================================================


@pytest.fixture
def empty_oracle() -> RecordingOracle:
    """Return an oracle that reports nothing as cached (first visit)."""
    return RecordingOracle()


@pytest.fixture
def warm_oracle() -> RecordingOracle:
    """Return an oracle that reports every current-build entry as cached."""
    return RecordingOracle({
        ("cl-manifest", "m1"),
        ("chain-lightning", "c1"),
        ("chunk:debounce", "abc123"),
        ("cl-manifest", "9d8e7f"),
        ("chain-lightning", "1a2b3c"),
        ("chunk:format", "def456"),
    })


@pytest.fixture
def script_oracle() -> ScriptRenderingOracle:
    """Return an oracle with the script rendering capability."""
    return ScriptRenderingOracle()


# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_package_logger() -> None:
    """Drop handlers installed by CLI invocations in earlier tests."""
    logger = logging.getLogger("chain_lightning")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
