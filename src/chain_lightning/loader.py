"""Manifest loading and validation.

The manifest is the JSON file written by the build plugin. Loading it is the
only fatal step in Chain Lightning: a renderer cannot exist without one.

- ManifestUnreadableError: The file cannot be read
- ManifestMalformedError: The file is not a valid manifest document
"""

import json
import logging
from pathlib import Path
from typing import Any

from chain_lightning.models.manifest import Manifest

logger = logging.getLogger(__name__)


class ManifestError(Exception):
    """Base class for manifest loading failures."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        self.message = message
        super().__init__(message)


class ManifestUnreadableError(ManifestError):
    """Raised when the manifest source cannot be read."""

    def __init__(self, path: Path, reason: str | None = None) -> None:
        self.reason = reason
        message = f"Cannot read Chain Lightning manifest: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, path)


class ManifestMalformedError(ManifestError):
    """Raised when the manifest source is not a valid manifest document."""

    def __init__(self, reason: str, path: Path | None = None) -> None:
        self.reason = reason
        where = f": {path}" if path is not None else ""
        super().__init__(f"Malformed Chain Lightning manifest{where} - {reason}", path)


def parse_manifest(text: str, path: Path | None = None) -> Manifest:
    """Parse manifest JSON text.

    Args:
        text: JSON document
        path: Source path, used only in error messages

    Returns:
        Parsed Manifest

    Raises:
        ManifestMalformedError: If the text is not JSON or misses required fields
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestMalformedError(f"invalid JSON: {e}", path) from e

    return manifest_from_dict(data, path)


def manifest_from_dict(data: Any, path: Path | None = None) -> Manifest:
    """Build a Manifest from an already parsed document.

    Raises:
        ManifestMalformedError: If required fields are missing or ill-typed
    """
    try:
        manifest = Manifest.from_dict(data)
    except ValueError as e:
        raise ManifestMalformedError(str(e), path) from e

    logger.debug(
        "Loaded manifest with %d components and %d chunks",
        len(manifest.components),
        len(manifest.chunks),
    )
    return manifest


def load_manifest(path: Path | str) -> Manifest:
    """Read and parse a manifest file.

    Args:
        path: Path to the manifest JSON file

    Returns:
        Parsed Manifest

    Raises:
        ManifestUnreadableError: If the file cannot be read
        ManifestMalformedError: If the file content is not a valid manifest
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestUnreadableError(path, str(e)) from e

    return parse_manifest(text, path)


def validate_manifest(manifest: Manifest) -> list[str]:
    """Check manifest consistency.

    A component dependency must resolve either to a chunk or to an entry of
    the static import map; anything else fails in the browser.

    Args:
        manifest: Manifest to check

    Returns:
        List of warning messages (empty if consistent)
    """
    warnings: list[str] = []
    imports = manifest.imports

    if not imports:
        warnings.append("Static import map has no 'imports' entries")

    for name, component in manifest.components.items():
        for dep in component.deps:
            if dep not in manifest.chunks and dep not in imports:
                warnings.append(
                    f"Component '{name}' depends on '{dep}', "
                    "which is neither a chunk nor in the import map"
                )

    for specifier in manifest.chunks:
        if specifier in imports:
            warnings.append(
                f"Chunk '{specifier}' is also in the static import map; "
                "the override import map will conflict"
            )

    return warnings
