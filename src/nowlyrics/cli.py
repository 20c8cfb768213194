#!/usr/bin/env python3
"""Command-line interface for nowlyrics.

This CLI is primarily for debugging and development.
For production use, embed nowlyrics as a library.
"""

import asyncio
import json
import logging
import sys
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from nowlyrics import create_engine
from nowlyrics.config import get_settings
from nowlyrics.exceptions import LyricsError
from nowlyrics.lib.signature import (
    ALBUM_FIELD,
    ARTIST_FIELD,
    TITLE_FIELD,
    build_signature,
    build_track_key,
)
from nowlyrics.models.device import DeviceInfo
from nowlyrics.models.lyrics import LyricsPayload
from nowlyrics.types import RawMetadata

logger = logging.getLogger("nowlyrics")

# Synced lines shown in the lookup card
PREVIEW_LINES = 6


class EventRecorder:
    """Collects emitted events so commands can print them afterwards."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        self.events.append((event, payload))


def setup_logging(
    verbose: bool = False, level: str = "WARNING", console: Console | None = None
) -> None:
    """Configure logging with Rich handler.

    Args:
        verbose: If True, log at DEBUG regardless of ``level``.
        level: Log level name used when not verbose.
        console: Optional Console instance to use for RichHandler.
    """
    log_level = logging.DEBUG if verbose else logging.getLevelName(level)

    # Clear existing handlers to allow reconfiguration
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = RichHandler(
        rich_tracebacks=True,
        show_path=False,
        console=console,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)


def build_metadata(
    title: str, artist: str, album: str, duration: str | int, source: str
) -> RawMetadata:
    """Shape command arguments like metadata reported by a renderer."""
    return {
        "trackMetaData": {
            TITLE_FIELD: title,
            ARTIST_FIELD: artist,
            ALBUM_FIELD: album,
        },
        "TrackDuration": duration,
        "TrackSource": source,
    }


def _duration_value(
    ctx: click.Context, param: click.Parameter, value: str
) -> str | int:
    # Plain seconds arrive as text; "M:SS" / "H:MM:SS" stay strings.
    value = value.strip()
    if value.isdigit():
        return int(value)
    if ":" not in value:
        raise click.BadParameter("expected seconds, M:SS or H:MM:SS")
    return value


def track_arguments(func: Any) -> Any:
    """Shared TITLE ARTIST ALBUM DURATION arguments."""
    func = click.argument("duration", callback=_duration_value)(func)
    func = click.argument("album")(func)
    func = click.argument("artist")(func)
    func = click.argument("title")(func)
    return func


def print_payload_card(console: Console, payload: LyricsPayload) -> None:
    """Print a lyrics payload as a vertical card."""
    status_style = "green" if payload.status == "ok" else "yellow"
    table = Table(
        show_header=False,
        padding=(0, 1),
        title=f"[bold {status_style}]{payload.status}[/bold {status_style}]",
        title_justify="left",
    )
    table.add_column("Field", style="bold cyan", width=12)
    table.add_column("Value", overflow="fold")

    table.add_row("Track key", payload.track_key or "")
    if payload.provider:
        table.add_row("Provider", payload.provider)
    if payload.id is not None:
        table.add_row("LRCLIB ID", str(payload.id))
    if payload.track_name:
        table.add_row("Title", payload.track_name)
    if payload.artist_name:
        table.add_row("Artist", payload.artist_name)
    if payload.album_name:
        table.add_row("Album", payload.album_name)
    if payload.duration is not None:
        table.add_row("Duration", f"{payload.duration:g}s")

    diagnostics = payload.diagnostics
    if diagnostics is not None:
        table.add_row("Cache", diagnostics.cache or "")
        if diagnostics.total_ms is not None:
            table.add_row("Total", f"{diagnostics.total_ms} ms")
        for record in diagnostics.requests:
            detail = f"{record.result} ({record.duration_ms} ms)"
            if record.error:
                detail += f" {record.error}"
            table.add_row(record.endpoint, detail)

    console.print(table)

    if payload.synced_lyrics:
        lines = payload.synced_lyrics.splitlines()
        for line in lines[:PREVIEW_LINES]:
            console.print(f"  [dim]{escape(line)}[/dim]")
        if len(lines) > PREVIEW_LINES:
            console.print(f"  [dim]... {len(lines) - PREVIEW_LINES} more lines[/dim]")


async def _lookup(metadata: RawMetadata) -> LyricsPayload | None:
    engine = create_engine(events=EventRecorder())
    try:
        device = DeviceInfo(metadata=metadata)
        await engine.update_now_playing(device)
        return device.lyrics
    finally:
        await engine.aclose()


async def _prefetch(metadata: RawMetadata, recorder: EventRecorder) -> None:
    engine = create_engine(events=recorder)
    try:
        await engine.prefetch(metadata)
    finally:
        await engine.aclose()


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Resolve time-synced lyrics from lrclib.net."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose=verbose, level=get_settings().log_level)


@main.command(name="lookup")
@track_arguments
@click.option("--source", default="tidal", show_default=True, help="TrackSource.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def lookup_cmd(
    title: str,
    artist: str,
    album: str,
    duration: str | int,
    source: str,
    as_json: bool,
) -> None:
    """Run the now-playing pipeline once and show the published state.

    \b
    Examples:
      nowlyrics lookup "Midnight City" M83 "Hurry Up, We're Dreaming" 4:03
      nowlyrics lookup "Song" Artist Album 215 --source spotify
    """
    console = Console()
    metadata = build_metadata(title, artist, album, duration, source)

    try:
        payload = asyncio.run(_lookup(metadata))
    except LyricsError as e:
        logger.error(str(e))
        raise click.ClickException(str(e)) from e
    except Exception as e:
        logger.exception("Unexpected error")
        raise click.ClickException(f"Unexpected error: {e}") from e

    if payload is None:
        raise click.ClickException("No lyrics state was published")

    if as_json:
        json.dump(payload.to_event(), sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")
    else:
        print_payload_card(console, payload)


@main.command(name="prefetch")
@track_arguments
@click.option("--source", default="tidal", show_default=True, help="TrackSource.")
def prefetch_cmd(
    title: str, artist: str, album: str, duration: str | int, source: str
) -> None:
    """Prefetch lyrics for a track and print the progress events.

    Each event is printed as one JSON line.
    """
    metadata = build_metadata(title, artist, album, duration, source)
    recorder = EventRecorder()

    try:
        asyncio.run(_prefetch(metadata, recorder))
    except Exception as e:
        logger.exception("Unexpected error")
        raise click.ClickException(f"Unexpected error: {e}") from e

    for event, payload in recorder.events:
        click.echo(json.dumps({"event": event, "data": payload}, ensure_ascii=False))


@main.command(name="key")
@track_arguments
def key_cmd(title: str, artist: str, album: str, duration: str | int) -> None:
    """Print the cache key computed for a track."""
    signature = build_signature(build_metadata(title, artist, album, duration, ""))
    if signature is None:
        raise click.ClickException("Title, artist, album and duration are required")
    click.echo(build_track_key(signature))


if __name__ == "__main__":
    main()
