"""Main Typer application — imports and registers all CLI commands.

Entry point: ``paperforge`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from paperforge import __version__
from paperforge.cli.commands.build import build_cmd
from paperforge.config import settings

app = typer.Typer(
    name="paperforge",
    help="paperforge: build a LaTeX commit into a PDF and a reproducible source archive.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="build", help="Build HEAD into a document, an archive and a message.")(build_cmd)


def configure_logging(level: str) -> None:
    """Send log records to stderr through Rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (defaults to PAPERFORGE_LOG_LEVEL)."
    ),
) -> None:
    """Configure logging before any command runs."""
    configure_logging(log_level or settings.log_level)


@app.command(name="version", help="Show the paperforge version.")
def version_cmd() -> None:
    typer.echo(__version__)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
