"""Core functionality: parsing, providers, fallback resolution and the cursor."""

from .models import (
    ActiveWindow,
    Credentials,
    Granularity,
    LyricSegment,
    LyricsStatus,
    ProviderResult,
    ResolvedLyrics,
    SyncState,
    WordTiming,
)
from .lrc import parse_timed_text
from .cursor import SyncCursor, active_window
from .resolver import LyricsResolver, resolve_lyrics
from .session import LyricsSession

__all__ = [
    "ActiveWindow",
    "Credentials",
    "Granularity",
    "LyricSegment",
    "LyricsStatus",
    "ProviderResult",
    "ResolvedLyrics",
    "SyncState",
    "WordTiming",
    "parse_timed_text",
    "SyncCursor",
    "active_window",
    "LyricsResolver",
    "resolve_lyrics",
    "LyricsSession",
]
