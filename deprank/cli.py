"""CLI entry point for deprank."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

from deprank.errors import DeprankError
from deprank.languages import LANGUAGES
from deprank.models import DiscoveryOptions, Options
from deprank.ranking import select_candidates
from deprank.runner import rank_paths
from deprank.table import format_table


def _normalize_extensions(extensions: list[str] | None) -> list[str] | None:
    """Add the leading dot to bare extensions like ``js``."""
    if not extensions:
        return None
    return [ext if ext.startswith(".") else f".{ext}" for ext in extensions]


app = typer.Typer(
    name="deprank",
    help="Rank source files by PageRank over their dependency graph.",
    no_args_is_help=False,
)


@app.command()
def main(
    paths: Annotated[
        list[str] | None,
        typer.Argument(help="Directories or files to analyze (default: .)."),
    ] = None,
    deps_first: Annotated[
        bool,
        typer.Option(
            "--deps-first",
            help="List each file after the files it depends on.",
        ),
    ] = False,
    ext: Annotated[
        list[str] | None,
        typer.Option(
            "--ext",
            "-e",
            help="File extension to include (repeatable; default: all supported).",
        ),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option(
            "--exclude",
            "-x",
            help="Gitignore-style pattern to exclude (repeatable).",
        ),
    ] = None,
    language: Annotated[
        str | None,
        typer.Option(
            "--language",
            "-l",
            help="Restrict to a specific language (e.g., python).",
        ),
    ] = None,
    max_files: Annotated[
        int | None,
        typer.Option(
            "--max-files",
            "-n",
            min=1,
            help="Maximum number of files to include in output.",
        ),
    ] = None,
    fast: Annotated[
        bool,
        typer.Option(
            "--fast",
            help="Count lines in parallel worker processes.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log progress to stderr."),
    ] = False,
) -> None:
    """Rank files and print the table to stdout."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if language and language not in LANGUAGES:
        typer.echo(
            f"Error: unsupported language '{language}'. "
            f"Supported: {', '.join(LANGUAGES)}",
            err=True,
        )
        raise typer.Exit(1)

    options = Options(
        paths=paths or ["."],
        extensions=_normalize_extensions(ext),
        deps_first=deps_first,
        provider_options=DiscoveryOptions(
            extra_ignores=tuple(exclude or ()),
            language=language,
        ),
        fast=fast,
    )

    try:
        candidates = rank_paths(options)
    except DeprankError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    if not candidates:
        typer.echo("No source files found.", err=True)
        raise typer.Exit(1)

    typer.echo(format_table(select_candidates(candidates, max_files=max_files)))
