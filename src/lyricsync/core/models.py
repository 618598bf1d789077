"""Data models for lyric timelines, provider results and playback state."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .text_utils import normalize_search_text


class Granularity(str, Enum):
    """Finest unit of timing a provider supplies."""

    LINE = "line"
    WORD = "word"
    SYLLABLE = "syllable"

    @property
    def has_sub_line_timing(self) -> bool:
        return self is not Granularity.LINE


class LyricsStatus(str, Enum):
    """What the renderer should show for the current track."""

    IDLE = "idle"
    SEARCHING = "searching"
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


class AttemptOutcome(str, Enum):
    """Result of asking one provider for lyrics."""

    NO_RESULT = "no_result"
    EMPTY_TIMELINE = "empty_timeline"
    ACCEPTED = "accepted"
    ERROR = "error"


@dataclass(frozen=True)
class WordTiming:
    """A word or syllable that becomes active at ``time``."""

    text: str
    time: float


@dataclass(frozen=True)
class LyricSegment:
    """One entry of the canonical lyric timeline."""

    text: str
    start_time: float
    end_time: float
    words: Optional[Tuple[WordTiming, ...]] = None
    is_gap: bool = False

    @property
    def duration(self) -> float:
        return max(self.end_time - self.start_time, 0.0)

    def contains(self, position: float) -> bool:
        return self.start_time <= position < self.end_time

    def validate(self) -> None:
        if self.start_time < 0 or self.end_time < 0:
            raise ValueError("Segment timing must be non-negative")
        if self.end_time < self.start_time:
            raise ValueError("Segment end_time must be >= start_time")
        if self.is_gap and self.words:
            raise ValueError("Gap segments cannot carry word timings")


Timeline = Tuple[LyricSegment, ...]


@dataclass(frozen=True)
class Credentials:
    """Optional API credentials for key-gated providers."""

    musixmatch_key: Optional[str] = None
    genius_token: Optional[str] = None

    def __post_init__(self):
        # Blank strings from settings UIs or env vars mean "not configured"
        for name in ("musixmatch_key", "genius_token"):
            value = getattr(self, name)
            if value is not None and not value.strip():
                object.__setattr__(self, name, None)


@dataclass(frozen=True)
class ProviderResult:
    """Raw output of a single provider attempt."""

    raw_payload: Optional[str]
    source_name: str
    synced: bool
    granularity: Granularity
    url: Optional[str] = None


@dataclass(frozen=True)
class ProviderAttempt:
    """Diagnostics for one provider call made while resolving a track."""

    source_name: str
    outcome: AttemptOutcome
    segment_count: int = 0
    elapsed: float = 0.0


@dataclass(frozen=True)
class ResolvedLyrics:
    """Timeline produced by the first provider that returned usable lyrics."""

    timeline: Timeline
    source_name: str
    granularity: Granularity
    synced: bool = True
    attempts: Tuple[ProviderAttempt, ...] = ()
    raw_payload: Optional[str] = None


@dataclass(frozen=True)
class TrackRef:
    """Artist/title pair as reported by the host player."""

    artist: str
    title: str

    @property
    def key(self) -> Tuple[str, str]:
        return (normalize_search_text(self.artist), normalize_search_text(self.title))

    @property
    def is_searchable(self) -> bool:
        return bool(self.key[0] and self.key[1])


@dataclass
class SyncState:
    """Shared lyrics state: written by the session, read by renderers."""

    current_lyrics: Optional[Timeline] = None
    lyrics_source: str = ""
    lyrics_granularity: Optional[Granularity] = None
    current_position: float = 0.0
    status: LyricsStatus = LyricsStatus.IDLE
    track: Optional[TrackRef] = None

    def clear_lyrics(self) -> None:
        self.current_lyrics = None
        self.lyrics_source = ""
        self.lyrics_granularity = None


@dataclass(frozen=True)
class WordProgress:
    """Highlight state of one word of the active segment."""

    text: str
    time: float
    sung: bool


@dataclass(frozen=True)
class ActiveWindow:
    """Renderable projection of the timeline at one playback position."""

    active_index: int
    segments: Timeline
    words: Optional[Tuple[WordProgress, ...]] = None

    @property
    def active(self) -> LyricSegment:
        return self.segments[0]

    @property
    def upcoming(self) -> Timeline:
        return self.segments[1:]
