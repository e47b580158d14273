"""Filter command -- keep only the stdin lines written in one language."""

import sys
from pathlib import Path
from typing import Optional

import typer

from ..engine import Detector
from ..exceptions import InvalidConfigError
from ..logging_config import setup_logging
from ..policy import AcceptPolicy
from . import app
from ._common import handle_errors, language_id_from_arg, open_store, resolve_config


@app.command("filter")
def filter_lines(
    lang: str = typer.Option(
        ...,
        "--lang",
        "-l",
        help="Language to keep: a reference file name (or its path)",
    ),
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
        help="Accept if the language ranks within the top N (threshold policy)",
        min=1,
    ),
    sparsity: Optional[int] = typer.Option(
        None,
        "--sparsity",
        "-s",
        help="Load every Nth reference file (default: 30)",
        min=1,
    ),
    min_confidence: Optional[float] = typer.Option(
        None,
        "--min-confidence",
        help="Minimum confidence of the accepted language (default: 2.0)",
    ),
    confidence_ratio: Optional[float] = typer.Option(
        None,
        "--confidence-ratio",
        help="Require best/second-best confidence above this (ratio policy)",
    ),
    algorithm: Optional[str] = typer.Option(
        None,
        "--algorithm",
        "-a",
        help="Compressor: zlib, gzip, bzip2 or zstd",
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
    Copy stdin to stdout, keeping only lines in the given language.

    [bold cyan]Examples:[/bold cyan]

      cat corpus.txt | langsqueeze filter -l english -r languages/

      langsqueeze filter -l french -r languages/ --confidence-ratio 1.2 < in.txt
    """
    with handle_errors(verbose):
        settings = resolve_config(
            config=config,
            references=str(references) if references is not None else None,
            also_include=also_include,
            top_n=top_n,
            sparsity=sparsity,
            min_confidence=min_confidence,
            confidence_ratio=confidence_ratio,
            algorithm=algorithm,
            workers=workers,
            cache_enabled=cache,
            verbose=verbose,
            quiet=quiet,
        )
        setup_logging(
            verbose=settings.verbosity == "verbose", quiet=settings.verbosity == "quiet"
        )
        desired = language_id_from_arg(lang)
        store = open_store(settings, interactive=False, desired_language=desired)
        if desired not in store:
            raise InvalidConfigError(
                "lang", lang, f"no reference file named {desired!r} in {settings.references}"
            )
        policy = AcceptPolicy.from_config(settings)

        stdin = sys.stdin.buffer
        stdout = sys.stdout.buffer
        with Detector(store, workers=settings.workers) as detector:
            for line in detector.filter_lines(stdin, desired, policy):
                stdout.write(line)
        stdout.flush()
