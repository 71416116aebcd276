"""page-loader CLI: save a web page and its local resources.

Usage:
    page-loader https://example.com/courses -o /tmp/pages
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Optional

import typer

from page_loader import __version__
from page_loader.core.controller import RunConfig, load_page
from page_loader.core.errors import PageLoaderError
from page_loader.core.logger import debug_requested, initialize_logging

app = typer.Typer(
    name="page-loader",
    help="Download a web page and its local resources.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"page-loader {__version__}")
        raise typer.Exit()


def _render_progress(event: Dict[str, object]) -> None:
    """Print one line per settled resource download to stderr."""
    name = os.path.basename(str(event["url"]).rstrip("/")) or str(event["url"])
    if event.get("stage") == "completed":
        typer.echo(f"✓ Downloaded {event['resource_type']}: {name}", err=True)
    else:
        typer.echo(f"✗ Failed {event['resource_type']}: {name}", err=True)


@app.command()
def main(
    url: str = typer.Argument(..., help="URL of the page to download."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o",
        envvar="PAGE_LOADER_OUTPUT",
        help="Output directory (default: current working directory).",
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging."),
    log_dir: Optional[Path] = typer.Option(
        None, "--log-dir", help="Also write a rotating log file to this directory.",
    ),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Save URL as an HTML file and download its local resources."""
    level = logging.DEBUG if debug or debug_requested() else logging.WARNING
    initialize_logging(level, str(log_dir) if log_dir else None)

    config = RunConfig(output_dir=str(output) if output else os.getcwd())
    try:
        page_path = load_page(url, config=config, progress=_render_progress)
    except PageLoaderError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(page_path)


if __name__ == "__main__":
    app()
