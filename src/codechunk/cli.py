"""CLI entry point for codechunk."""

from __future__ import annotations

import json
import logging
import os
from collections import Counter
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from .config import load_settings
from .errors import CodeChunkError, NoSupportedFiles, UnsupportedLanguage
from .extractors.languages import ALL_CAPABILITIES
from .models import ExtractionOptions
from .pipeline import extract_repository, sort_chunks
from .tracker import StepType

app = typer.Typer(
    name="codechunk",
    help="Extract typing-challenge code chunks from any source repository.",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _parse_dotenv(text: str) -> dict[str, str]:
    values: dict[str, str] = {}
    for raw in text.splitlines():
        entry = raw.strip()
        if entry.startswith("#") or "=" not in entry:
            continue
        key, value = (part.strip() for part in entry.split("=", 1))
        if key:
            values[key] = value.strip("\"'")
    return values


def _load_dotenv(start_dir: Path) -> None:
    """Apply the nearest ``.env`` at or above *start_dir* to the environment.

    Variables already exported keep their value.
    """
    here = start_dir.resolve()
    dotenv = next((d / ".env" for d in (here, *here.parents) if (d / ".env").is_file()), None)
    if dotenv is None:
        return
    try:
        values = _parse_dotenv(dotenv.read_text(encoding="utf-8"))
    except OSError as exc:
        logging.getLogger(__name__).debug("Could not read %s: %s", dotenv, exc)
        return
    for key, value in values.items():
        os.environ.setdefault(key, value)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
            force=True,
        )
    else:
        logging.basicConfig(
            level=logging.WARNING,
            format="%(levelname)s: %(message)s",
            force=True,
        )


class _RichProgress:
    """Progress reporter that drives a rich progress bar."""

    def __init__(self, progress: Progress) -> None:
        self._progress = progress
        self._task = progress.add_task("Scanning", total=None)

    def set_step(self, step: StepType) -> None:
        self._progress.update(self._task, description=step.value.capitalize())

    def set_current_file(self, file: str | None) -> None:
        pass

    def set_file_counts(
        self, step: StepType, processed: int, total: int, current_file: str | None = None
    ) -> None:
        self._progress.update(
            self._task,
            description=step.value.capitalize(),
            completed=processed,
            total=total,
        )


def _print_summary(chunks, root: Path) -> None:
    by_language = Counter(c.language for c in chunks)
    by_type = Counter(c.chunk_type.value for c in chunks)

    table = Table(title=f"Chunks in {root}")
    table.add_column("Chunk type", style="cyan")
    table.add_column("Count", justify="right", style="bold")
    for chunk_type, count in sorted(by_type.items()):
        table.add_row(chunk_type, str(count))
    console.print(table)

    files = len({c.file_path for c in chunks})
    langs = ", ".join(f"{lang} ({n})" for lang, n in sorted(by_language.items()))
    console.print(f"[bold]Files:[/bold]     {files}")
    console.print(f"[bold]Chunks:[/bold]    {len(chunks)}")
    console.print(f"[bold]Languages:[/bold] {langs}")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def extract(
    path: Optional[Path] = typer.Argument(None, help="Repository path (default: current directory)."),
    include: Optional[list[str]] = typer.Option(None, "--include", "-i", help="Glob of files to include (repeatable)."),
    exclude: Optional[list[str]] = typer.Option(None, "--exclude", "-x", help="Glob of files to exclude (repeatable)."),
    lang: Optional[list[str]] = typer.Option(None, "--lang", "-l", help="Only extract these languages (repeatable)."),
    as_json: bool = typer.Option(False, "--json", help="Print chunks as JSON instead of a summary."),
    workers: Optional[int] = typer.Option(None, "--workers", "-j", min=1, help="Parallel extraction workers."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Extract code chunks from every supported file in a repository."""
    root = (path or Path.cwd()).resolve()
    if not root.is_dir():
        err_console.print(f"[red]Error:[/red] {root} is not a directory.")
        raise typer.Exit(code=1)

    _load_dotenv(root)
    _configure_logging(verbose)
    settings = load_settings()

    options = ExtractionOptions(max_file_size_bytes=settings.max_file_size_bytes)
    if include:
        options.include_patterns = list(include)
    if exclude:
        options.exclude_patterns = list(exclude)
    if lang:
        options.languages = list(lang)
        try:
            options.apply_language_filter()
        except UnsupportedLanguage as exc:
            err_console.print(f"[red]Error:[/red] {exc}")
            raise typer.Exit(code=1)

    try:
        if as_json:
            chunks = extract_repository(root, options, settings=settings, max_workers=workers)
        else:
            with Progress(
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                console=err_console,
                transient=True,
            ) as bar:
                chunks = extract_repository(
                    root, options, _RichProgress(bar), settings=settings, max_workers=workers
                )
    except NoSupportedFiles:
        err_console.print("[red]Error:[/red] No supported files found")
        raise typer.Exit(code=1)
    except CodeChunkError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1)

    chunks = sort_chunks(chunks)
    if as_json:
        typer.echo(json.dumps([c.model_dump(mode="json") for c in chunks], indent=2))
        return
    _print_summary(chunks, root)


@app.command()
def languages() -> None:
    """List the supported languages and their file extensions."""
    table = Table(title="Supported languages")
    table.add_column("Language", style="cyan")
    table.add_column("Name")
    table.add_column("Extensions")
    table.add_column("Aliases", style="dim")
    for cap in sorted(ALL_CAPABILITIES, key=lambda c: c.name):
        table.add_row(
            cap.name,
            cap.display_name,
            ", ".join(f".{ext}" for ext in cap.extensions),
            ", ".join(cap.aliases),
        )
    console.print(table)


if __name__ == "__main__":
    app()
