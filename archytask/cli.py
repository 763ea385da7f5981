"""Command line entry point for ArchyTask outline files.

  archytask stats archytask.md
  archytask normalize archytask.md --check

Without a PATH both commands use storage.file_path from settings.yml,
resolved against the current directory.
"""

from pathlib import Path
from typing import Optional
import logging

import typer

from archytask.config import ConfigManager
from archytask.core.document_store import load_document, resolve_document_path, save_document
from archytask.core.generators.markdown_writer import stringify_items
from archytask.core.models.settings import SidebarSettings
from archytask.core.outline_store import is_child, is_heading
from archytask.logging_config import setup_logging
from archytask.version import get_app_version

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="ArchyTask: Markdown outline files for the editor sidebar.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(get_app_version())
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True,
                                 help="Show the version and exit."),
):
    """ArchyTask CLI."""
    setup_logging()


def _existing(path: Optional[Path]) -> Path:
    if path is None:
        settings = SidebarSettings.from_config(ConfigManager().get_settings())
        path = resolve_document_path(Path.cwd(), settings.file_path)
    if not path.is_file():
        typer.echo(f"File not found: {path}", err=True)
        raise typer.Exit(code=1)
    return path


@app.command()
def stats(path: Optional[Path] = typer.Argument(None, help="Outline file to inspect. Defaults to the configured file.")):
    """Print heading, task and archive counts."""
    result = load_document(_existing(path))
    headings = sum(1 for i in result.items if is_heading(i))
    todos = [i for i in result.items if not is_heading(i)]
    children = sum(1 for i in todos if is_child(i))
    done = sum(1 for i in todos if i.is_checked)
    typer.echo(f"headings: {headings}")
    typer.echo(f"tasks: {len(todos) - children}")
    typer.echo(f"subtasks: {children}")
    typer.echo(f"checked: {done}")
    typer.echo(f"archived: {len(result.archived_items)}")


@app.command()
def normalize(
    path: Optional[Path] = typer.Argument(None, help="Outline file to rewrite. Defaults to the configured file."),
    check: bool = typer.Option(False, "--check", help="Only report whether the file would change."),
):
    """Rewrite a file in canonical form (tabs, fenced notes, trailing archive)."""
    target = _existing(path)
    original = target.read_text(encoding="utf-8")
    result = load_document(target)
    normalized = stringify_items(result.items, result.archived_items)
    if normalized == original:
        typer.echo(f"{target}: already normalized")
        return
    if check:
        typer.echo(f"{target}: would be rewritten")
        raise typer.Exit(code=1)
    save_document(target, result.items, result.archived_items)
    logger.info("Normalized %s", target)
    typer.echo(f"{target}: rewritten")
