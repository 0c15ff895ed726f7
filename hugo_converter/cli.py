"""CLI entry point for Hugo Converter."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from hugo_converter.config import CONFIG_FILENAME, DEFAULT_CONFIG_TEMPLATE, load_settings
from hugo_converter.core.models import ConversionError, Note, ProgressEvent
from hugo_converter.core.orchestrator import STAGE_CONVERT, STAGE_REWRITE, STAGE_WRITE, create_orchestrator
from hugo_converter.images.uploader import STAGE_UPLOAD, STAGE_UPLOADED

app = typer.Typer(
    name="hugo-converter",
    help="Convert Obsidian notes into Hugo blog posts.",
)

config_app = typer.Typer(help="Manage Hugo Converter configuration.")
app.add_typer(config_app, name="config")

# progress and diagnostics go to stderr, downloaded posts to stdout
console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def find_vault_root(note_path: Path) -> Path:
    """Closest parent directory holding an .obsidian folder, else the note's folder."""
    note_path = note_path.resolve()
    for parent in note_path.parents:
        if (parent / ".obsidian").is_dir():
            return parent
    return note_path.parent


def _render_progress(event: ProgressEvent) -> None:
    if event.stage == STAGE_UPLOAD:
        console.print(f"[cyan]Uploading[/cyan] {event.completed}/{event.total} {event.message}")
    elif event.stage == STAGE_UPLOADED:
        console.print(f"[green]Uploaded[/green] {event.completed} of {event.total} images")
    elif event.stage == STAGE_REWRITE:
        console.print("[cyan]Updating image URLs in the note...[/cyan]")
    elif event.stage == STAGE_CONVERT:
        console.print("[cyan]Converting to Hugo format...[/cyan]")
    elif event.stage == STAGE_WRITE:
        console.print(f"[cyan]Writing[/cyan] {event.message}")


def _download(filename: str, content: str) -> None:
    typer.echo(content, nl=False)


@app.command()
def convert(
    note: Path = typer.Argument(..., exists=True, dir_okay=False, help="Note to convert"),
    vault: Optional[Path] = typer.Option(
        None, "--vault", file_okay=False, help="Vault root (default: detected from the note)"
    ),
    config: Optional[str] = typer.Option(None, "--config", "-c", help=f"Path to {CONFIG_FILENAME}"),
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", "-o", help="Write the post to this directory"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
) -> None:
    """Convert a note into a Hugo post."""
    _configure_logging(verbose)

    vault_path = vault.resolve() if vault else find_vault_root(note)

    try:
        settings = load_settings(config, vault_path)
        if output_dir is not None:
            settings.output_dir = output_dir

        orchestrator = create_orchestrator(
            settings,
            vault_path,
            channel=_download,
            progress=_render_progress,
        )
        result = orchestrator.convert(Note(path=note.resolve()))
    except ConversionError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")
    if result.rewritten:
        console.print(f"[green]Updated[/green] {len(result.uploaded)} image URLs in {note.name}")
    console.print(f"[green]Converted:[/green] {result.filename} ({result.location})")


@config_app.command("init")
def config_init(
    path: Path = typer.Option(Path(CONFIG_FILENAME), "--path", "-p", help="Where to write the config"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a default config file."""
    if path.exists() and not force:
        console.print(f"[red]Error:[/red] {path} already exists (use --force to overwrite)")
        raise typer.Exit(1)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG_TEMPLATE, encoding='utf-8')
    console.print(f"[green]Created[/green] {path}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
