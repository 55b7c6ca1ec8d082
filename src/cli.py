"""CLI interface for Meridian."""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from meridian.config import MeridianConfig, load_config, merge_cli_overrides
from meridian.entries.dates import format_date
from meridian.entries.store import EntryStore
from meridian.render.blocks import segment_body
from meridian.render.inline import format_inline
from meridian.render.models import BlockKind, SegmentKind
from meridian.render.speech import compose_speech_text
from meridian.site.pages import MISSING_ENTRY_MESSAGE

app = typer.Typer(
    name="meridian",
    help="Meridian: a daily diary of the AI mind.",
)

console = Console()

_state: dict[str, object] = {"config_path": None}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from meridian import __version__

        console.print(f"meridian {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .meridian.toml file."),
    ] = None,
) -> None:
    """Meridian - render, read aloud, and write the daily diary."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    _state["config_path"] = config_path


def _config(**overrides: object) -> MeridianConfig:
    path = _state.get("config_path")
    config = load_config(path if isinstance(path, Path) else None)
    return merge_cli_overrides(config, **overrides)


_SEGMENT_STYLES = {SegmentKind.BOLD: "bold", SegmentKind.ITALIC: "italic"}


def _inline_text(text: str) -> Text:
    """Render inline emphasis as rich styles."""
    rendered = Text()
    for segment in format_inline(text):
        rendered.append(segment.text, style=_SEGMENT_STYLES.get(segment.kind))
    return rendered


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid date format: {value}")
        console.print("Use YYYY-MM-DD format (e.g., 2024-01-15)")
        raise typer.Exit(1) from None


@app.command()
def generate(
    target_date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Write the entry for this date (YYYY-MM-DD)."),
    ] = None,
    model: Annotated[
        Optional[str],
        typer.Option("--model", "-m", help="Model override (sonnet, haiku, opus, or a full ID)."),
    ] = None,
    entries_dir: Annotated[
        Optional[Path],
        typer.Option("--entries", help="Directory holding the entry JSON files."),
    ] = None,
) -> None:
    """Generate today's entry with Claude, unless it already exists."""
    from meridian.generate.services import GenerationError, generate_entry
    from meridian.shared.llm import LLMError

    config = _config(model=model, entries_dir=entries_dir)
    day = _parse_date(target_date) if target_date else None

    try:
        path = generate_entry(config, day)
    except (GenerationError, LLMError) as exc:
        logging.getLogger(__name__).error("FAILED: %s", exc)
        raise typer.Exit(1) from exc

    if path is None:
        console.print("[yellow]Entry already exists. Nothing to do.[/yellow]")
    else:
        console.print(f"[green]Entry written:[/green] {path}")


@app.command()
def build(
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output directory for the site."),
    ] = None,
    entries_dir: Annotated[
        Optional[Path],
        typer.Option("--entries", help="Directory holding the entry JSON files."),
    ] = None,
) -> None:
    """Build the static site from the entry files."""
    from meridian.site.builder import SiteBuilder

    config = _config(output_dir=output, entries_dir=entries_dir)
    store = EntryStore.load(config.entries_path)
    written = SiteBuilder(store, config.site).build(config.output_path)

    console.print("[bold green]Site built![/bold green]")
    console.print(f"  Entries: {len(store)}")
    console.print(f"  Files: {len(written)}")
    console.print(f"  Output: {config.output_path}")


@app.command("list")
def list_entries(
    entries_dir: Annotated[
        Optional[Path],
        typer.Option("--entries", help="Directory holding the entry JSON files."),
    ] = None,
) -> None:
    """List entries, most recent first."""
    config = _config(entries_dir=entries_dir)
    store = EntryStore.load(config.entries_path)

    if not len(store):
        console.print("[yellow]No entries found.[/yellow]")
        console.print(f"Searched in: {config.entries_path}")
        raise typer.Exit(0)

    table = Table(title=config.site.name)
    table.add_column("Date")
    table.add_column("Title")
    table.add_column("Mood")
    table.add_column("Words", justify="right")
    for entry in store.entries():
        table.add_row(entry.date, entry.title, entry.mood, str(entry.word_count))
    console.print(table)


@app.command()
def show(
    target_date: Annotated[str, typer.Argument(help="Entry date (YYYY-MM-DD).")],
    speech: Annotated[
        bool,
        typer.Option("--speech", help="Print the spoken script instead of the page text."),
    ] = False,
    entries_dir: Annotated[
        Optional[Path],
        typer.Option("--entries", help="Directory holding the entry JSON files."),
    ] = None,
) -> None:
    """Print one entry as rendered blocks, or as its spoken script."""
    config = _config(entries_dir=entries_dir)
    store = EntryStore.load(config.entries_path)
    entry = store.get_entry(target_date)

    if entry is None:
        console.print(MISSING_ENTRY_MESSAGE)
        raise typer.Exit(1)

    if speech:
        console.print(compose_speech_text(entry), markup=False, soft_wrap=True)
        return

    console.print(format_date(entry.date).upper(), style="dim")
    console.print(entry.title, style="bold", markup=False)
    if entry.subtitle:
        console.print(entry.subtitle, style="italic", markup=False)
    console.print()
    for block in segment_body(entry.body):
        if block.kind == BlockKind.RULE:
            console.rule()
        elif block.kind == BlockKind.BLOCKQUOTE:
            console.print(Text("  > ").append_text(_inline_text(block.text)), style="italic")
        else:
            console.print(_inline_text(block.text))
        console.print()


@app.command()
def listen(
    target_date: Annotated[str, typer.Argument(help="Entry date (YYYY-MM-DD).")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Where to save the audio (default: meridian-DATE.mp3)."),
    ] = None,
    speech_url: Annotated[
        Optional[str],
        typer.Option("--url", help="Speech endpoint to call (default: the configured endpoint_url)."),
    ] = None,
    entries_dir: Annotated[
        Optional[Path],
        typer.Option("--entries", help="Directory holding the entry JSON files."),
    ] = None,
) -> None:
    """Fetch an entry's spoken audio from the speech endpoint and save it."""
    from meridian.playback import FileAudioPlayer, PlaybackController, PlaybackState, SpeechClient

    config = _config(entries_dir=entries_dir, speech_url=speech_url)
    store = EntryStore.load(config.entries_path)
    entry = store.get_entry(target_date)

    if entry is None:
        console.print(MISSING_ENTRY_MESSAGE)
        raise typer.Exit(1)

    path = output or Path(f"meridian-{target_date}.mp3")
    client = SpeechClient(config.speech.endpoint_url, timeout=config.speech.timeout)
    controller = PlaybackController(
        lambda: compose_speech_text(entry), client.fetch, FileAudioPlayer(path)
    )

    asyncio.run(controller.activate())
    succeeded = controller.state == PlaybackState.PLAYING
    controller.close()

    if not succeeded:
        logging.getLogger(__name__).error(
            "FAILED: no audio from %s", config.speech.endpoint_url
        )
        raise typer.Exit(1)

    console.print(f"[green]Audio written:[/green] {path}")


@app.command()
def serve(
    host: Annotated[Optional[str], typer.Option("--host", help="Bind address.")] = None,
    port: Annotated[Optional[int], typer.Option("--port", "-p", help="Bind port.")] = None,
) -> None:
    """Serve the built site and the /api/tts speech proxy."""
    import uvicorn

    from meridian.server import create_app

    config = _config(host=host, port=port)
    uvicorn.run(create_app(config), host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    app()
