"""Command-line interface using Click."""

import sys
from pathlib import Path
from typing import Optional, Sequence

import click

from . import __version__
from .config import (
    GENIUS_TOKEN_ENV,
    LOOKAHEAD_LINES,
    MUSIXMATCH_KEY_ENV,
    get_credentials,
)
from .exceptions import LyricsError, LyricSyncError
from .core.cursor import active_window
from .core.lrc import parse_timed_text
from .core.models import ActiveWindow, Credentials, LyricSegment
from .core.providers import PROVIDER_ORDER
from .core.resolver import LyricsResolver
from .core.text_utils import format_lyrics, strip_timestamps, truncate_lyrics
from .utils.logging import setup_logging
from .utils.validation import (
    validate_lookahead,
    validate_lrc_path,
    validate_position,
    validate_track_field,
)


def _format_time(seconds: float) -> str:
    minutes, secs = divmod(max(seconds, 0.0), 60)
    return f"{int(minutes):02d}:{secs:05.2f}"


def _echo_timeline(timeline: Sequence[LyricSegment], limit: Optional[int] = None) -> None:
    shown = timeline[:limit] if limit else timeline
    for segment in shown:
        marker = "~" if segment.is_gap else ("*" if segment.words else " ")
        click.echo(
            f"[{_format_time(segment.start_time)} - {_format_time(segment.end_time)}]"
            f" {marker} {segment.text}"
        )
    if limit and len(timeline) > limit:
        click.echo(f"... {len(timeline) - limit} more")


def _echo_window(window: ActiveWindow) -> None:
    for offset, segment in enumerate(window.segments):
        prefix = ">" if offset == 0 else " "
        click.echo(f"{prefix} {window.active_index + offset:3d} {segment.text}")
    if window.words:
        sung = "".join(w.text for w in window.words if w.sung).strip()
        pending = "".join(w.text for w in window.words if not w.sung).strip()
        click.echo(f"  sung: {sung or '-'} | next: {pending or '-'}")


def _read_timeline(lrc_file: str):
    path = validate_lrc_path(lrc_file)
    try:
        raw = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise LyricsError(f"Cannot read {path}: {e}")
    timeline = parse_timed_text(raw)
    if not timeline:
        raise LyricsError(f"No timed lyric lines in {path}")
    return timeline


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', type=click.Path(), help='Log to file')
@click.pass_context
def cli(ctx, verbose, log_file):
    """lyricsync - Find synced lyrics and follow them during playback."""
    ctx.ensure_object(dict)
    logger = setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=Path(log_file) if log_file else None,
        verbose=verbose
    )
    ctx.obj['logger'] = logger
    ctx.obj['verbose'] = verbose


@cli.command()
@click.argument('artist')
@click.argument('title')
@click.option('--musixmatch-key', envvar=MUSIXMATCH_KEY_ENV,
              help='Musixmatch API key (enables the Musixmatch provider)')
@click.option('--genius-token', envvar=GENIUS_TOKEN_ENV,
              help='Genius access token (enables the Genius provider)')
@click.option('--plain', is_flag=True, help='Print lyric text without timings')
@click.option('--limit', type=int, default=None, help='Show at most N lines')
@click.pass_context
def fetch(ctx, artist, title, musixmatch_key, genius_token, plain, limit):
    """Search the providers for ARTIST - TITLE and print the timeline."""
    logger = ctx.obj['logger']

    try:
        artist = validate_track_field(artist, "Artist")
        title = validate_track_field(title, "Title")
        credentials = Credentials(
            musixmatch_key=musixmatch_key, genius_token=genius_token
        )

        resolver = LyricsResolver()
        resolved = resolver.resolve(artist, title, credentials)
        if resolved is None:
            tried = ", ".join(
                f"{a.source_name} ({a.outcome.value})" for a in resolver.last_attempts
            )
            raise LyricsError(f'No lyrics found for "{artist} - {title}". Tried: {tried}')

        click.echo(
            f"Source: {resolved.source_name} "
            f"({resolved.granularity.value}, {len(resolved.timeline)} segments)"
        )
        if plain:
            text = format_lyrics(strip_timestamps(resolved.raw_payload or ""))
            click.echo(truncate_lyrics(text, limit) if limit else text)
        else:
            _echo_timeline(resolved.timeline, limit)

    except LyricSyncError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)


@cli.command()
@click.argument('lrc_file', type=click.Path())
@click.option('--limit', type=int, default=None, help='Show at most N lines')
@click.pass_context
def parse(ctx, lrc_file, limit):
    """Parse a local LRC file and print its timeline."""
    logger = ctx.obj['logger']

    try:
        timeline = _read_timeline(lrc_file)
        _echo_timeline(timeline, limit)
    except LyricSyncError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)


@cli.command()
@click.argument('lrc_file', type=click.Path())
@click.argument('position', type=float)
@click.option('--lookahead', type=int, default=LOOKAHEAD_LINES,
              help='Number of upcoming lines to show')
@click.pass_context
def window(ctx, lrc_file, position, lookahead):
    """Show the active line of LRC_FILE at POSITION seconds."""
    logger = ctx.obj['logger']

    try:
        position = validate_position(position)
        lookahead = validate_lookahead(lookahead)
        timeline = _read_timeline(lrc_file)
        _echo_window(active_window(timeline, position, lookahead=lookahead))
    except LyricSyncError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)


@cli.command()
def providers():
    """List the provider fallback chain."""
    credentials = get_credentials()
    for priority, provider_cls in enumerate(PROVIDER_ORDER, start=1):
        provider = provider_cls()
        if not provider.requires_credential():
            status = "no key needed"
        elif provider.credential_from(credentials):
            status = "configured"
        else:
            status = "disabled (no key)"
        click.echo(
            f"{priority}. {provider.name:<14} {provider.granularity.value:<9} "
            f"timeout {provider.timeout:g}s  {status}"
        )


if __name__ == '__main__':
    cli()
