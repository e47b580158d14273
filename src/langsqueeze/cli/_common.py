"""Shared CLI helpers."""

import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console

from ..cache import LengthCache
from ..config import DetectorConfig, load_config
from ..corpus.store import ReferenceCorpusStore, load_store
from ..exceptions import InvalidConfigError, LangSqueezeError
from ..logging_config import get_logger
from ..math.compression import Compressor

console = Console()
err_console = Console(stderr=True)

logger = get_logger(__name__)


def resolve_config(config: Optional[Path] = None, **overrides) -> DetectorConfig:
    """Build configuration from a config file plus CLI options."""
    return load_config(config_file=config, **overrides)


def language_id_from_arg(value: str) -> str:
    """Reference ids are file names; accept a full path too."""
    return Path(value).name or value


def open_store(
    config: DetectorConfig, interactive: bool, desired_language: Optional[str] = None
) -> ReferenceCorpusStore:
    """Load the reference store described by ``config``."""
    if not config.references:
        raise InvalidConfigError(
            "references", None, "pass --references or set it in langsqueeze.toml"
        )
    cache = LengthCache(
        cache_dir=config.cache_dir,
        ttl_hours=config.cache_ttl_hours,
        enabled=config.cache_enabled,
    )
    try:
        return load_store(
            config.references,
            sparsity=config.resolved_sparsity(interactive),
            desired_language=desired_language,
            also_include=config.also_include,
            compressor=Compressor(config.algorithm, config.level),
            workers=config.workers,
            cache=cache,
        )
    finally:
        cache.close()


@contextmanager
def handle_errors(verbose: bool = False) -> Iterator[None]:
    """Map library errors to exit codes: 1 for errors, 130 for Ctrl-C, 141 for a closed pipe."""
    try:
        yield
    except typer.Exit:
        raise
    except LangSqueezeError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)
    except BrokenPipeError:
        # Reader went away (e.g. `| head`); stop writing and exit like SIGPIPE
        _silence_stdout()
        raise typer.Exit(141)
    except Exception as e:
        logger.exception("Unexpected error")
        err_console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            err_console.print_exception()
        raise typer.Exit(1)


def _silence_stdout() -> None:
    """Point stdout at devnull so the interpreter's final flush cannot fail."""
    try:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
    except (OSError, ValueError):
        pass
