"""Cache management commands."""

from pathlib import Path
from typing import Optional

import typer

from ..cache import LengthCache
from . import app
from ._common import console, handle_errors, resolve_config


def _open_cache(config: Optional[Path]) -> LengthCache:
    settings = resolve_config(config=config)
    return LengthCache(cache_dir=settings.cache_dir, ttl_hours=settings.cache_ttl_hours)


@app.command()
def cache_info(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file path (TOML format)", exists=True
    ),
):
    """Show length cache location and statistics."""
    with handle_errors():
        cache = _open_cache(config)
        try:
            stats = cache.stats()
        finally:
            cache.close()

    console.print("[bold cyan]langsqueeze Cache Info[/bold cyan]")
    console.print()
    console.print(f"Directory: [blue]{stats.get('directory', 'N/A')}[/blue]")
    console.print(f"Entries: [yellow]{stats.get('size', 0)}[/yellow]")
    console.print(f"Size: [yellow]{stats.get('volume', 0)} bytes[/yellow]")


@app.command()
def cache_clear(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file path (TOML format)", exists=True
    ),
):
    """Clear the length cache."""
    with handle_errors():
        cache = _open_cache(config)
        try:
            cache.clear()
        finally:
            cache.close()
    console.print("[green]Cache cleared successfully[/green]")
