"""
Command-line interface for Uplift.

    uplift enrich -m LightningComponentBundle:myCard -m LightningComponentBundle:*
    uplift version
"""

from __future__ import annotations

import asyncio
import importlib.metadata
from pathlib import Path
from typing import List, Optional

import typer

from .core.config import UpliftConfig
from .core.exceptions import ConfigurationError, UpliftError
from .pipeline import EnrichmentPipeline, PipelineResult
from .providers.http import HttpConnection
from .registry import StaticRegistry, discover_components, expand_wildcards
from .schemas.components import DiscoveredComponent
from .utils.formatting import log_metrics
from .utils.logger import get_logger, setup_logging

app = typer.Typer(
    help="Uplift: enrich component descriptions with a remote metadata service",
    no_args_is_help=True,
)
logger = get_logger(__name__)


def _split_identifiers(values: List[str]) -> List[str]:
    """``-m a,b -m c`` -> ``["a", "b", "c"]``."""
    identifiers = []
    for value in values:
        identifiers.extend(part.strip() for part in value.split(",") if part.strip())
    return identifiers


async def _enrich(
    config: UpliftConfig,
    discovered: List[DiscoveredComponent],
    identifiers: List[str],
    registry: StaticRegistry,
) -> PipelineResult:
    async with HttpConnection.from_config(config) as connection:
        pipeline = EnrichmentPipeline(connection, registry=registry, config=config)
        return await pipeline.run_async(discovered, identifiers)


# ---------------------------------------------------------
# Enrich
# ---------------------------------------------------------
@app.command()
def enrich(
    metadata: List[str] = typer.Option(
        ..., "--metadata", "-m",
        help="Component identifier Kind:Name (repeatable, comma-separated allowed)",
    ),
    project_dir: Path = typer.Option(Path("."), "--project-dir", "-d", help="Project root to scan"),
    instance_url: Optional[str] = typer.Option(None, "--instance-url", help="Org base URL"),
    access_token: Optional[str] = typer.Option(None, "--access-token", help="Bearer access token"),
    api_version: Optional[str] = typer.Option(None, "--api-version", help="REST API version"),
    as_json: bool = typer.Option(False, "--json", help="Print metrics as JSON"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
    no_progress: bool = typer.Option(False, "--no-progress", help="Disable the progress bar"),
):
    """Enrich the requested components and update their configuration files."""
    try:
        config = UpliftConfig.from_env(
            instance_url=instance_url,
            access_token=access_token,
            api_version=api_version,
            log_level=log_level,
            enable_progress_bar=False if no_progress else None,
        )
    except ValueError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=2)

    setup_logging(config.log_level, config.log_dir)

    identifiers = _split_identifiers(metadata)
    if not identifiers:
        typer.echo("No component identifiers given.", err=True)
        raise typer.Exit(code=2)

    # the directory scan is blocking; keep it off the event loop
    registry = StaticRegistry()
    try:
        discovered = discover_components(project_dir, identifiers, registry)
    except FileNotFoundError as e:
        typer.echo(f"Project directory not found: {e}", err=True)
        raise typer.Exit(code=2)
    identifiers = expand_wildcards(identifiers, discovered, registry)
    logger.info("Discovered %d components for %d identifiers", len(discovered), len(identifiers))

    try:
        result = asyncio.run(_enrich(config, discovered, identifiers, registry))
    except ConfigurationError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=2)
    except UpliftError as e:
        logger.error("Enrichment aborted: %s", e)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(result.metrics.model_dump_json(indent=2))
    else:
        log_metrics(typer.echo, result.metrics)

    if result.has_failures:
        raise typer.Exit(code=1)


# ---------------------------------------------------------
# Version
# ---------------------------------------------------------
@app.command()
def version():
    """Show current Uplift version."""
    try:
        v = importlib.metadata.version("uplift")
    except importlib.metadata.PackageNotFoundError:
        from . import __version__ as v
    typer.echo(f"uplift version {v}")


if __name__ == "__main__":
    app()
