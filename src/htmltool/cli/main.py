"""
html-tool CLI - Main entry point.

Accepts URLs or filenames for HTML documents on stdin and extracts parts
of them:

    cat urls.txt | html-tool tags title a strong
    find . -type f -name "*.html" | html-tool attribs src href
    cat urls.txt | html-tool comments
    cat urls.txt | html-tool query "div.content > p"
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

from htmltool import __app_name__, __version__
from htmltool.core.backends.base import RequestBuildError
from htmltool.core.config import (
    AppConfig,
    ConfigError,
    ExtractionConfig,
    ExtractionMode,
    load_app_config,
)
from htmltool.core.extract import build_extractor
from htmltool.core.logging import setup_logging
from htmltool.core.orchestrator import ExtractionRunner

# Load environment variables from .env (if present) for ${VAR} expansion
load_dotenv()

console = Console()
err_console = Console(stderr=True, highlight=False)

app = typer.Typer(
    name=__app_name__,
    help="Accept URLs or filenames for HTML documents on stdin and extract parts of them.",
    rich_markup_mode="rich",
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]{__app_name__}[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    headers: Optional[List[str]] = typer.Option(
        None,
        "-H",
        "--header",
        help="Header to send with every request, as 'name:value' (repeatable)",
    ),
    concurrency: Optional[int] = typer.Option(
        None,
        "-c",
        "--concurrency",
        min=1,
        help="Max concurrent fetches [default: 40]",
    ),
    delay: Optional[int] = typer.Option(
        None,
        "-d",
        "--delay",
        min=0,
        help="Minimum delay between fetches in milliseconds [default: 100]",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Per-request timeout in seconds [default: 30]",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        help="YAML configuration file",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Don't print errors",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Print progress and debug information",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write logs as JSON lines to this file",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Accept URLs or filenames for HTML documents on stdin and extract parts of them."""
    try:
        app_config = load_app_config(config)
    except ConfigError as e:
        err_console.print(f"[red]Error loading configuration:[/red] {e}")
        if e.details:
            err_console.print(f"[dim]{e.details}[/dim]")
        raise typer.Exit(1)

    app_config = _apply_overrides(
        app_config,
        headers=headers,
        concurrency=concurrency,
        delay=delay,
        timeout=timeout,
        quiet=quiet,
        verbose=verbose,
        log_file=log_file,
    )

    setup_logging(
        level=app_config.logging.level,
        log_file=app_config.logging.file,
        json_format=app_config.logging.json_format,
        rich_console=app_config.logging.rich_console,
    )

    ctx.obj = app_config


def _apply_overrides(
    app_config: AppConfig,
    *,
    headers: Optional[List[str]],
    concurrency: Optional[int],
    delay: Optional[int],
    timeout: Optional[float],
    quiet: bool,
    verbose: bool,
    log_file: Optional[Path],
) -> AppConfig:
    """Merge command line flags over file configuration."""
    fetch_updates: dict = {}
    if headers:
        fetch_updates["headers"] = [*app_config.fetch.headers, *headers]
    if concurrency is not None:
        fetch_updates["concurrency"] = concurrency
    if delay is not None:
        fetch_updates["delay_ms"] = delay
    if timeout is not None:
        fetch_updates["timeout"] = timeout

    logging_updates: dict = {}
    if quiet:
        logging_updates["level"] = "CRITICAL"
    elif verbose:
        logging_updates["level"] = "DEBUG"
    if log_file is not None:
        logging_updates["file"] = log_file

    return app_config.model_copy(
        update={
            "fetch": app_config.fetch.model_copy(update=fetch_updates),
            "logging": app_config.logging.model_copy(update=logging_updates),
        }
    )


def _run(ctx: typer.Context, extraction: ExtractionConfig) -> None:
    """Run an extraction over stdin with the configured fetch settings."""
    app_config: AppConfig = ctx.obj or AppConfig()
    runner = ExtractionRunner(build_extractor(extraction), app_config.fetch)

    try:
        asyncio.run(runner.run(sys.stdin))
    except RequestBuildError as e:
        err_console.print(str(e), style="red", markup=False)
        raise typer.Exit(1)
    except KeyboardInterrupt:
        raise typer.Exit(130)
    except BrokenPipeError:
        # Downstream closed (e.g. `| head`); nothing more to write
        raise typer.Exit(0)


# =============================================================================
# Extraction Modes
# =============================================================================


@app.command()
def tags(
    ctx: typer.Context,
    names: Optional[List[str]] = typer.Argument(None, help="Tag names"),
) -> None:
    """Extract text contained in tags."""
    _run(ctx, ExtractionConfig(mode=ExtractionMode.TAGS, tags=names or []))


@app.command()
def attribs(
    ctx: typer.Context,
    names: Optional[List[str]] = typer.Argument(None, help="Attribute names"),
) -> None:
    """Extract attribute values."""
    _run(ctx, ExtractionConfig(mode=ExtractionMode.ATTRIBS, attribs=names or []))


@app.command()
def comments(ctx: typer.Context) -> None:
    """Extract comments."""
    _run(ctx, ExtractionConfig(mode=ExtractionMode.COMMENTS))


@app.command()
def query(
    ctx: typer.Context,
    selector: str = typer.Argument(..., help="CSS selector"),
) -> None:
    """Extract the first child of elements matching a CSS selector."""
    _run(ctx, ExtractionConfig(mode=ExtractionMode.QUERY, selector=selector))


# =============================================================================
# Entry Point
# =============================================================================


def run() -> None:
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    run()
