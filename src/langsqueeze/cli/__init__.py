"""CLI entry point: registers all subcommands."""

import typer

app = typer.Typer(
    name="langsqueeze",
    help="langsqueeze - language identification by compression distance",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .filter import filter_lines as _filter_lines  # noqa: F401, E402
from .rank import rank as _rank  # noqa: F401, E402
from .cache import cache_info as _cache_info, cache_clear as _cache_clear  # noqa: F401, E402


def main() -> None:
    app()
