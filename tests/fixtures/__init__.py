"""Test fixtures for Chain Lightning.

Manifests:
- current.json: Current build output with cacheable manifest script and chunks
- legacy.json: Older build output without ``manifestScript``
- inconsistent.json: Loads, but fails the consistency check
- malformed.json: Not valid JSON

Pages:
- index.html.j2: Page template rendering head scripts and one component
"""

from pathlib import Path

# Path to fixtures directory
FIXTURES_DIR = Path(__file__).parent

MANIFESTS_DIR = FIXTURES_DIR / "manifests"
PAGES_DIR = FIXTURES_DIR / "pages"

CURRENT_MANIFEST_PATH = MANIFESTS_DIR / "current.json"
LEGACY_MANIFEST_PATH = MANIFESTS_DIR / "legacy.json"
INCONSISTENT_MANIFEST_PATH = MANIFESTS_DIR / "inconsistent.json"
MALFORMED_MANIFEST_PATH = MANIFESTS_DIR / "malformed.json"


def get_manifest_path(name: str) -> Path:
    """Get path to a fixture manifest.

    Args:
        name: Manifest name without extension

    Returns:
        Path to the manifest file

    Raises:
        ValueError: If the manifest doesn't exist
    """
    path = MANIFESTS_DIR / f"{name}.json"
    if not path.exists():
        raise ValueError(f"Fixture manifest not found: {name}")
    return path
