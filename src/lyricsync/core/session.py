"""Lyrics session: ties track changes, provider resolution and the cursor together.

The host drives two streams: frequent position updates and rare track
changes. Position updates are synchronous and never wait on the network.
A track change starts a fetch that runs in a worker thread; its result is
committed only if no newer track change happened in the meantime.
"""

import asyncio
import json
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional, Tuple, Union

from ..config import FETCH_DELAY, LOOKAHEAD_LINES, get_credentials
from ..exceptions import ValidationError
from ..utils.logging import get_logger
from .cursor import SyncCursor
from .models import (
    ActiveWindow,
    Credentials,
    LyricsStatus,
    ResolvedLyrics,
    SyncState,
    TrackRef,
)
from .resolver import LyricsResolver

logger = get_logger(__name__)

ResolveFn = Callable[[str, str, Optional[Credentials]], Optional[ResolvedLyrics]]

# Host property names mapped to Credentials fields
CREDENTIAL_PROPERTIES = {
    "musixmatchKey": "musixmatch_key",
    "geniusKey": "genius_token",
}


@dataclass(frozen=True)
class TrackPayload:
    """Decoded "now playing" update from the host player."""

    artist: str
    title: str
    position: Optional[float] = None  # seconds


def parse_track_payload(data: Union[str, Dict[str, Any], None]) -> Optional[TrackPayload]:
    """Decode a host update.

    The host sends JSON with ``Artist``, ``Title`` and a playback position in
    milliseconds under ``Position`` (or ``Progress``). ``null`` means nothing
    is playing and yields None.
    """
    if data is None:
        return None
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except ValueError as e:
            raise ValidationError(f"Track payload is not valid JSON: {e}")
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValidationError("Track payload must be a JSON object")

    position = None
    for key in ("Position", "Progress"):
        value = data.get(key)
        if value is not None:
            try:
                position = float(value) / 1000.0
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid {key} value: {value!r}")
            break

    return TrackPayload(
        artist=str(data.get("Artist") or ""),
        title=str(data.get("Title") or ""),
        position=position,
    )


class LyricsSession:
    """Owns the shared SyncState; the only writer to it."""

    def __init__(
        self,
        resolve_fn: Optional[ResolveFn] = None,
        *,
        credentials: Optional[Credentials] = None,
        fetch_delay: float = FETCH_DELAY,
        lookahead: int = LOOKAHEAD_LINES,
        state: Optional[SyncState] = None,
    ):
        self.resolve_fn: ResolveFn = resolve_fn or LyricsResolver().resolve
        self.credentials = credentials if credentials is not None else get_credentials()
        self.fetch_delay = fetch_delay
        self.state = state or SyncState()
        self.cursor = SyncCursor(lookahead)
        self._generation = 0
        # Identity of the track most recently handed to on_track_change
        self._track_key: Optional[Tuple[str, str]] = None

    @property
    def generation(self) -> int:
        return self._generation

    # ------------------------------------------------------------------
    # Track changes
    # ------------------------------------------------------------------
    async def on_track_change(self, artist: str, title: str) -> bool:
        """Fetch lyrics for a new track.

        Returns True if this call's result (found or not found) was
        installed, False if a newer track change superseded it.
        """
        self._generation += 1
        generation = self._generation
        track = TrackRef(artist or "", title or "")
        self._track_key = track.key

        self.state.track = track
        self.state.clear_lyrics()
        self.cursor.reset()

        if not track.is_searchable:
            self.state.status = LyricsStatus.IDLE
            return True

        self.state.status = LyricsStatus.SEARCHING
        logger.debug(f"Track changed (generation {generation}): {artist} - {title}")

        if self.fetch_delay > 0:
            await asyncio.sleep(self.fetch_delay)
            if generation != self._generation:
                logger.debug(f"Skipping search for superseded track: {artist} - {title}")
                return False

        try:
            resolved = await asyncio.to_thread(
                self.resolve_fn, track.artist, track.title, self.credentials
            )
        except Exception as e:
            if generation != self._generation:
                return False
            logger.error(f"Error loading lyrics for {artist} - {title}: {e}")
            self.state.status = LyricsStatus.ERROR
            return True

        if generation != self._generation:
            logger.debug(f"Discarding stale lyrics for {artist} - {title}")
            return False

        self._commit(resolved)
        return True

    def _commit(self, resolved: Optional[ResolvedLyrics]) -> None:
        self.cursor.reset()
        if resolved is None or not resolved.timeline:
            self.state.clear_lyrics()
            self.state.status = LyricsStatus.NOT_FOUND
            return

        self.state.current_lyrics = resolved.timeline
        self.state.lyrics_source = resolved.source_name
        self.state.lyrics_granularity = resolved.granularity
        self.state.status = LyricsStatus.FOUND

    def clear(self) -> None:
        """Forget the current track; any in-flight fetch becomes stale."""
        self._generation += 1
        self._track_key = None
        self.state.track = None
        self.state.clear_lyrics()
        self.state.status = LyricsStatus.IDLE
        self.cursor.reset()

    # ------------------------------------------------------------------
    # Position updates
    # ------------------------------------------------------------------
    def update_position(self, position: float) -> Optional[ActiveWindow]:
        """Record the playback position and project the installed timeline."""
        self.state.current_position = position
        timeline = self.state.current_lyrics
        if not timeline:
            return None
        return self.cursor.active_window(
            timeline, position, self.state.lyrics_granularity
        )

    # ------------------------------------------------------------------
    # Host integration
    # ------------------------------------------------------------------
    def on_track_payload(
        self, data: Union[str, Dict[str, Any], None]
    ) -> Optional["asyncio.Task[bool]"]:
        """Handle one host update.

        Updates the position right away; when the track identity changed,
        schedules a fetch on the running event loop and returns its task.
        """
        try:
            payload = parse_track_payload(data)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed track payload: {e}")
            return None

        if payload is None:
            if self._track_key is not None:
                self.clear()
            return None

        if payload.position is not None:
            self.update_position(payload.position)

        track = TrackRef(payload.artist, payload.title)
        if track.key == self._track_key:
            return None

        # Claimed before the task runs so repeated payloads do not refetch
        self._track_key = track.key
        loop = asyncio.get_running_loop()
        return loop.create_task(self.on_track_change(track.artist, track.title))

    def set_property(self, name: str, value: Any) -> bool:
        """Apply a runtime setting; returns False for names it does not handle."""
        field_name = CREDENTIAL_PROPERTIES.get(name)
        if field_name is None:
            return False
        self.credentials = replace(
            self.credentials, **{field_name: str(value) if value else None}
        )
        logger.debug(f"{name} {'set' if value else 'cleared'}")
        return True
