"""Chain Lightning configuration system.

Configuration is YAML-based with minimal CLI overrides (--inline-deps, --ci).
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.chain-lightning/config.yaml
3. ./chain-lightning.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from chain_lightning.renderers.module_renderer import ASSET_ATTRIBUTE, URL_ATTRIBUTE

_ATTRIBUTE_NAME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9_.:-]*$")

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class ManifestConfig:
    """Manifest location.

    Attributes:
        path: Path to the manifest JSON written by the build plugin
    """

    path: str = "dist/chain-lightning.json"


@dataclass
class RenderConfig:
    """Rendering defaults.

    Attributes:
        inline_deps: Inline uncached chunks as data URLs by default
        early_hints: Emit HTTP 103 Early Hints for page components
    """

    inline_deps: bool = False
    early_hints: bool = True


@dataclass
class CacheConfig:
    """Cache marker attributes consumed by the client-side caching layer.

    Attributes:
        asset_attribute: Attribute holding the ``name:hash`` token
        url_attribute: Attribute holding the real URL
    """

    asset_attribute: str = ASSET_ATTRIBUTE
    url_attribute: str = URL_ATTRIBUTE

    def __post_init__(self) -> None:
        """Validate attribute names."""
        for value in (self.asset_attribute, self.url_attribute):
            if not _ATTRIBUTE_NAME_RE.match(value):
                raise ValueError(f"Invalid cache marker attribute name: {value!r}")
        if self.asset_attribute == self.url_attribute:
            raise ValueError("Cache marker attributes must differ")


@dataclass
class ChainLightningConfig:
    """Top-level Chain Lightning configuration.

    Attributes:
        manifest: Manifest location
        render: Rendering defaults
        cache: Cache marker attributes
    """

    manifest: ManifestConfig = field(default_factory=ManifestConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)

    # Set by load_config
    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path

    @property
    def manifest_path(self) -> Path:
        """Manifest path, relative paths resolved against the config file."""
        path = Path(self.manifest.path)
        if not path.is_absolute() and self._config_path is not None:
            base = self._config_path.parent
            if base.name == ".chain-lightning":
                base = base.parent
            path = base / path
        return path


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax for environment variable substitution.
    Example: ${ASSET_DIR}/manifest.json -> /srv/assets/manifest.json

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted

    Raises:
        ValueError: If a referenced variable is not set
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.chain-lightning/config.yaml
    2. ./chain-lightning.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".chain-lightning" / "config.yaml",
        start_path / "chain-lightning.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def load_config_from_dict(data: dict[str, Any]) -> ChainLightningConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        ChainLightningConfig instance
    """
    data = substitute_env_vars(data)

    config = ChainLightningConfig()

    if "manifest" in data:
        manifest_data = data["manifest"] or {}
        config.manifest = ManifestConfig(
            path=str(manifest_data.get("path", config.manifest.path)),
        )

    if "render" in data:
        render_data = data["render"] or {}
        config.render = RenderConfig(
            inline_deps=bool(render_data.get("inline_deps", config.render.inline_deps)),
            early_hints=bool(render_data.get("early_hints", config.render.early_hints)),
        )

    if "cache" in data:
        cache_data = data["cache"] or {}
        config.cache = CacheConfig(
            asset_attribute=cache_data.get("asset_attribute", ASSET_ATTRIBUTE),
            url_attribute=cache_data.get("url_attribute", URL_ATTRIBUTE),
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> ChainLightningConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        ChainLightningConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        config = ChainLightningConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return f'''# Chain Lightning Configuration

# Manifest written by the build plugin
manifest:
  path: "dist/chain-lightning.json"  # relative to the project root

# Rendering defaults
render:
  inline_deps: false   # inline uncached chunks as data URLs (first visit optimization)
  early_hints: true    # send HTTP 103 Early Hints for page components

# Cache marker attributes read by the client-side caching layer
cache:
  asset_attribute: "{ASSET_ATTRIBUTE}"
  url_attribute: "{URL_ATTRIBUTE}"
'''
