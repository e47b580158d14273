"""Rank command -- show the most likely languages for each stdin line."""

import json
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..engine import Detector
from ..exceptions import EmptyInputError
from ..logging_config import setup_logging
from ..ranking import ScoredCandidate
from ..serializers import summarize
from . import app
from ._common import console, handle_errors, resolve_config, open_store

_FORMATS = ("plain", "table", "json")


def format_plain(ranking: list[ScoredCandidate]) -> str:
    """One `name = confidence` line per candidate."""
    return "\n".join(f"{c.display_name} = {c.confidence}" for c in ranking)


def _render_table(sample: str, ranking: list[ScoredCandidate]) -> Table:
    title = sample if len(sample) <= 60 else sample[:57] + "..."
    table = Table(title=title, show_lines=False)
    table.add_column("#", justify="right", style="cyan", no_wrap=True)
    table.add_column("Language", style="magenta")
    table.add_column("Confidence", justify="right")
    table.add_column("Ratio", justify="right", style="dim")
    for i, candidate in enumerate(ranking, 1):
        table.add_row(
            str(i),
            candidate.display_name,
            f"{candidate.confidence:.3f}",
            f"{candidate.raw_ratio:.4f}",
        )
    return table


@app.command()
def rank(
    references: Optional[Path] = typer.Option(
        None,
        "--references",
        "-r",
        help="Directory with one reference file per language",
        file_okay=False,
        dir_okay=True,
    ),
    also_include: Optional[str] = typer.Option(
        None,
        "--also-include",
        help="Comma-separated reference names never dropped by --sparsity",
    ),
    top_n: Optional[int] = typer.Option(
        None,
        "--top-n",
        "-n",
        help="Number of candidates to show per line (default: 5)",
        min=1,
    ),
    sparsity: Optional[int] = typer.Option(
        None,
        "--sparsity",
        "-s",
        help="Load every Nth reference file (default: 1)",
        min=1,
    ),
    algorithm: Optional[str] = typer.Option(
        None,
        "--algorithm",
        "-a",
        help="Compressor: zlib, gzip, bzip2 or zstd",
    ),
    fmt: str = typer.Option(
        "plain",
        "--format",
        "-f",
        help="Output format: plain (default), table, json",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Number of parallel workers (default: auto-detect)",
        min=1,
        max=32,
    ),
    cache: Optional[bool] = typer.Option(
        None,
        "--cache/--no-cache",
        help="Cache reference compressed lengths on disk",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML format)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress all but ERROR logging"),
):
    """
    Rank candidate languages for every line read from stdin.

    [bold cyan]Examples:[/bold cyan]

      echo "Tout le monde a droit" | langsqueeze rank -r languages/

      langsqueeze rank -r languages/ -n 3 --format json < samples.txt
    """
    if fmt not in _FORMATS:
        raise typer.BadParameter(f"expected one of {', '.join(_FORMATS)}", param_hint="--format")

    with handle_errors(verbose):
        settings = resolve_config(
            config=config,
            references=str(references) if references is not None else None,
            also_include=also_include,
            top_n=top_n,
            sparsity=sparsity,
            algorithm=algorithm,
            workers=workers,
            cache_enabled=cache,
            verbose=verbose,
            quiet=quiet,
        )
        setup_logging(
            verbose=settings.verbosity == "verbose", quiet=settings.verbosity == "quiet"
        )
        store = open_store(settings, interactive=True)

        stdin = sys.stdin.buffer
        with Detector(store, workers=settings.workers) as detector:
            for raw in stdin:
                sample = raw.rstrip(b"\r\n")
                try:
                    ranking = detector.rank(sample, settings.top_n)
                except EmptyInputError:
                    continue

                if fmt == "json":
                    typer.echo(
                        json.dumps(
                            {
                                "sample": sample.decode("utf-8", errors="replace"),
                                "candidates": summarize(ranking),
                            },
                            ensure_ascii=False,
                        )
                    )
                elif fmt == "table":
                    console.print(_render_table(sample.decode("utf-8", errors="replace"), ranking))
                else:
                    typer.echo(format_plain(ranking))
