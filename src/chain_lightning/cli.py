"""Chain Lightning CLI interface.

Commands:
- inspect: Summarize a manifest
- check: Validate manifest consistency
- render: Render head scripts and component tags
- hints: Print Early Hints for components
- page: Render a Jinja2 page template
- init: Initialize Chain Lightning configuration

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log output
- --version: Show version and exit

Rendered HTML goes to stdout, logs to stderr.
"""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer

from chain_lightning import __version__
from chain_lightning.cache.digest import DigestCacheOracle
from chain_lightning.config import ChainLightningConfig, create_default_config, load_config
from chain_lightning.loader import ManifestError, load_manifest, validate_manifest
from chain_lightning.models.manifest import Manifest
from chain_lightning.models.session import format_link_header
from chain_lightning.renderers.module_renderer import ModuleRenderer
from chain_lightning.utils.logging import configure_from_cli, get_logger, log_structured

app = typer.Typer(
    name="chain-lightning",
    help="Parallel dependency loading for ES module components",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: ChainLightningConfig = ChainLightningConfig()
_logger = get_logger()

ManifestArgument = Annotated[
    Path | None,
    typer.Option(
        "--manifest",
        "-m",
        help="Path to manifest JSON (overrides config)",
        dir_okay=False,
    ),
]

CachedOption = Annotated[
    list[str] | None,
    typer.Option(
        "--cached",
        help="Entry cached on the client as name:hash (repeatable)",
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"chain-lightning {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode with JSON log output",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Chain Lightning - parallel dependency loading for ES modules.

    Render import maps, module scripts and preload hints from a build manifest.
    """
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug("Loaded config from: %s", _config.config_path)
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except ValueError as e:
        _logger.error("Failed to load config: %s", e)
        raise typer.Exit(1)


def _load(manifest: Path | None) -> Manifest:
    """Load the manifest given on the command line or in the config."""
    path = manifest or _config.manifest_path
    try:
        return load_manifest(path)
    except ManifestError as e:
        _logger.error(e.message)
        raise typer.Exit(1)


def _build_renderer(manifest: Manifest, cached: list[str] | None) -> ModuleRenderer:
    oracle = DigestCacheOracle.from_digest(",".join(cached)) if cached else None
    return ModuleRenderer(
        manifest,
        oracle,
        asset_attribute=_config.cache.asset_attribute,
        url_attribute=_config.cache.url_attribute,
    )


# =============================================================================
# inspect command
# =============================================================================


@app.command()
def inspect(
    manifest: ManifestArgument = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output summary as JSON",
        ),
    ] = False,
) -> None:
    """Summarize a manifest: static imports, components and chunks."""
    data = _load(manifest)

    summary = {
        "legacy": data.is_legacy,
        "imports": data.imports,
        "components": {
            name: {"url": component.url, "deps": list(component.deps)}
            for name, component in data.components.items()
        },
        "chunks": {
            specifier: {"url": chunk.url, "hash": chunk.hash}
            for specifier, chunk in data.chunks.items()
        },
    }

    if json_output:
        typer.echo(json.dumps(summary, indent=2))
        return

    typer.echo(f"\nManifest ({'legacy' if data.is_legacy else 'current'} format)\n")
    typer.echo(f"  Imports: {len(data.imports)}")
    for specifier, url in data.imports.items():
        typer.echo(f"    {specifier} -> {url}")
    typer.echo(f"  Components: {len(data.components)}")
    for name, component in data.components.items():
        deps = ", ".join(component.deps) or "-"
        typer.echo(f"    {name} ({component.url}) deps: {deps}")
    typer.echo(f"  Chunks: {len(data.chunks)}")
    for specifier, chunk in data.chunks.items():
        typer.echo(f"    {specifier} -> {chunk.url} [{chunk.hash}]")


# =============================================================================
# check command
# =============================================================================


@app.command()
def check(manifest: ManifestArgument = None) -> None:
    """Validate manifest consistency.

    Exit codes:
        0: Manifest is consistent
        1: Manifest cannot be loaded
        2: Manifest loaded with warnings
    """
    data = _load(manifest)
    warnings = validate_manifest(data)

    if warnings:
        for warning in warnings:
            log_structured(_logger, logging.WARNING, warning, check="manifest")
        typer.echo(f"Manifest check passed with {len(warnings)} warning(s)")
        raise typer.Exit(2)

    typer.echo("Manifest check passed")


# =============================================================================
# render command
# =============================================================================


@app.command()
def render(
    components: Annotated[
        list[str] | None,
        typer.Argument(help="Components to render, in page order"),
    ] = None,
    manifest: ManifestArgument = None,
    inline_deps: Annotated[
        bool,
        typer.Option(
            "--inline-deps",
            help="Inline uncached chunks as data URLs (also enabled by config)",
        ),
    ] = False,
    cached: CachedOption = None,
    head: Annotated[
        bool,
        typer.Option(
            "--head/--no-head",
            help="Include import map, manifest script and client runtime",
        ),
    ] = True,
) -> None:
    """Render head scripts and component tags to stdout.

    Exit codes:
        0: Rendered without warnings
        1: Manifest cannot be loaded
        2: Rendered with warnings (e.g. unknown component)
    """
    renderer = _build_renderer(_load(manifest), cached)
    inline = inline_deps or _config.render.inline_deps

    parts: list[str] = []
    if head:
        parts.append(renderer.render_head_scripts())
    try:
        for name in components or []:
            html = renderer.render_component(name, inline_deps=inline)
            if html:
                parts.append(html)
    except ValueError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    typer.echo("\n".join(parts))

    if renderer.warnings:
        raise typer.Exit(2)


# =============================================================================
# hints command
# =============================================================================


@app.command()
def hints(
    components: Annotated[
        list[str],
        typer.Argument(help="Components that will be on the page"),
    ],
    manifest: ManifestArgument = None,
    cached: CachedOption = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output hints as JSON records",
        ),
    ] = False,
) -> None:
    """Print HTTP 103 Early Hints for components."""
    renderer = _build_renderer(_load(manifest), cached)
    early_hints = renderer.get_early_hints(components)

    if json_output:
        typer.echo(json.dumps([hint.to_dict() for hint in early_hints], indent=2))
    elif early_hints:
        typer.echo(f"Link: {format_link_header(early_hints)}")
    else:
        _logger.info("No early hints for: %s", ", ".join(components))


# =============================================================================
# page command
# =============================================================================


@app.command()
def page(
    template: Annotated[
        Path,
        typer.Argument(
            help="Path to Jinja2 page template",
            exists=True,
            dir_okay=False,
        ),
    ],
    manifest: ManifestArgument = None,
    cached: CachedOption = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write the page to a file instead of stdout",
        ),
    ] = None,
) -> None:
    """Render a Jinja2 page template with ``chain_lightning`` in its context."""
    from chain_lightning.templates import PageRenderer

    renderer = _build_renderer(_load(manifest), cached)
    pages = PageRenderer(renderer, template_dir=template.parent)

    try:
        html = pages.render(template.name, renderer)
    except ValueError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    if output is None:
        typer.echo(html, nl=False)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(html, encoding="utf-8")
        _logger.info("Wrote page to %s", output)

    if renderer.warnings:
        raise typer.Exit(2)


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    directory: Annotated[
        Path,
        typer.Option(
            "--dir",
            "-d",
            help="Project directory",
            file_okay=False,
        ),
    ] = Path("."),
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing configuration",
        ),
    ] = False,
) -> None:
    """Initialize Chain Lightning configuration."""
    config_dir = directory / ".chain-lightning"
    config_file = config_dir / "config.yaml"

    if config_file.exists() and not force:
        _logger.error("Config already exists: %s (use --force to overwrite)", config_file)
        raise typer.Exit(1)

    config_dir.mkdir(parents=True, exist_ok=True)
    config_file.write_text(create_default_config(), encoding="utf-8")
    _logger.info("Created config: %s", config_file)

    typer.echo(f"Chain Lightning configuration initialized: {config_file}")


if __name__ == "__main__":
    app()
