"""Timed-text (LRC / enhanced LRC) parsing into a lyric timeline.

This module handles:
- LRC timestamp parsing (two- and three-digit fractions)
- Line tags, repeated line tags and embedded word/syllable tags
- End times and durations for each line
- Gap segments covering silence
"""

import re
from dataclasses import replace
from typing import List, Optional, Tuple

from ..config import (
    CAPPED_LINE_DURATION,
    FALLBACK_LINE_DURATION,
    GAP_PLACEHOLDER,
    GAP_THRESHOLD,
    MAX_LINE_DURATION,
)
from .models import LyricSegment, Timeline, WordTiming

# ----------------------
# Timestamp regexes
# ----------------------
_TS_BODY = r"""
    (?P<min>\d+)            # minutes
    :
    (?P<sec>\d{2})          # seconds
    \.
    (?P<frac>\d{2,3})       # hundredths or thousandths
"""

_LINE_TS_RE = re.compile(r"\[" + _TS_BODY + r"\]", re.VERBOSE)
_WORD_TS_RE = re.compile(r"<" + _TS_BODY + r">", re.VERBOSE)
_TAG_RE = re.compile(r"^[\[<]" + _TS_BODY + r"[\]>]$", re.VERBOSE)
_TIMED_LINE_RE = re.compile(r"^\s*\[" + _TS_BODY + r"\]", re.VERBOSE | re.MULTILINE)
_WHITESPACE_RE = re.compile(r"\s+")

_Entry = Tuple[float, str, Optional[Tuple[WordTiming, ...]]]


def _match_to_seconds(match: "re.Match[str]") -> Optional[float]:
    seconds = int(match.group("sec"))
    if seconds >= 60:
        return None
    frac = match.group("frac")
    # The tag width decides the unit: "45" is hundredths, "450" thousandths
    return int(match.group("min")) * 60 + seconds + int(frac) / (10 ** len(frac))


# ----------------------
# Public helpers
# ----------------------
def parse_timestamp(tag: str) -> Optional[float]:
    """Parse a single tag like ``[01:23.45]`` or ``<01:23.456>`` to seconds."""
    if not tag:
        return None
    match = _TAG_RE.match(tag.strip())
    if not match:
        return None
    return _match_to_seconds(match)


def has_timestamps(raw_text: str) -> bool:
    """Check whether any line of the text starts with a timestamp tag."""
    if not raw_text:
        return False
    return bool(_TIMED_LINE_RE.search(raw_text))


# ----------------------
# Line splitting
# ----------------------
def _split_line_tags(line: str) -> Tuple[List[float], str]:
    """Consume all leading ``[mm:ss.xx]`` tags; return their times and the body."""
    times: List[float] = []
    pos = 0
    while True:
        match = _LINE_TS_RE.match(line, pos)
        if not match:
            break
        seconds = _match_to_seconds(match)
        if seconds is not None:
            times.append(seconds)
        pos = match.end()
    return times, line[pos:].strip()


def _split_words(
    body: str, line_start: float
) -> Tuple[str, Optional[Tuple[WordTiming, ...]]]:
    """Split a body on embedded ``<mm:ss.xx>`` tags.

    Each fragment takes the time of the tag before it; text ahead of the
    first tag is timed at the line start.
    """
    if not _WORD_TS_RE.search(body):
        return body, None

    words: List[WordTiming] = []
    current = line_start
    pos = 0
    for match in _WORD_TS_RE.finditer(body):
        fragment = body[pos : match.start()]
        if fragment.strip():
            words.append(WordTiming(text=fragment, time=current))
        seconds = _match_to_seconds(match)
        if seconds is not None:
            current = seconds
        pos = match.end()
    fragment = body[pos:]
    if fragment.strip():
        words.append(WordTiming(text=fragment, time=current))

    clean_text = _WHITESPACE_RE.sub(" ", _WORD_TS_RE.sub("", body)).strip()
    return clean_text, tuple(words) if words else None


def _parse_entries(raw_text: str) -> List[_Entry]:
    entries: List[_Entry] = []
    for raw_line in raw_text.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        times, body = _split_line_tags(line)
        if not times:
            continue

        text, words = _split_words(body, times[0])
        for start in times:
            if words and start != times[0]:
                # Repeated line tags reuse the body; move its word times along
                shift = start - times[0]
                entries.append(
                    (start, text, tuple(replace(w, time=w.time + shift) for w in words))
                )
            else:
                entries.append((start, text, words))
    return entries


# ----------------------
# Timeline building
# ----------------------
def _hold_until(
    start: float, words: Optional[Tuple[WordTiming, ...]], hold: float
) -> float:
    end = start + hold
    if words:
        end = max(end, words[-1].time + hold)
    return end


def _build_segments(entries: List[_Entry]) -> List[LyricSegment]:
    """Chain end times: each line lasts until the next one starts."""
    entries = sorted(entries, key=lambda entry: entry[0])
    segments: List[LyricSegment] = []

    for i, (start, text, words) in enumerate(entries):
        if i + 1 < len(entries):
            end = entries[i + 1][0]
            if end - start > MAX_LINE_DURATION:
                end = min(end, _hold_until(start, words, CAPPED_LINE_DURATION))
        else:
            end = _hold_until(start, words, FALLBACK_LINE_DURATION)

        if text:
            segments.append(LyricSegment(text=text, start_time=start, end_time=end, words=words))
        else:
            # A timestamp with no text marks an instrumental passage
            segments.append(
                LyricSegment(text=GAP_PLACEHOLDER, start_time=start, end_time=end, is_gap=True)
            )

    return segments


def fill_gaps(segments: List[LyricSegment]) -> Timeline:
    """Insert gap segments wherever silence exceeds ``GAP_THRESHOLD``.

    Silence is measured from t=0 to the first segment and between
    consecutive segments. Adjacent gaps are merged into one.
    """
    filled: List[LyricSegment] = []
    covered_until = 0.0

    for segment in segments:
        silence = segment.start_time - covered_until
        if silence > GAP_THRESHOLD:
            if filled and filled[-1].is_gap:
                filled[-1] = replace(filled[-1], end_time=segment.start_time)
            else:
                filled.append(
                    LyricSegment(
                        text=GAP_PLACEHOLDER,
                        start_time=covered_until,
                        end_time=segment.start_time,
                        is_gap=True,
                    )
                )

        if (
            segment.is_gap
            and filled
            and filled[-1].is_gap
            and filled[-1].end_time >= segment.start_time
        ):
            filled[-1] = replace(
                filled[-1], end_time=max(filled[-1].end_time, segment.end_time)
            )
        else:
            filled.append(segment)

        covered_until = max(covered_until, segment.end_time)

    return tuple(filled)


def parse_timed_text(raw_text: str) -> Timeline:
    """Parse LRC or enhanced LRC text into an ordered lyric timeline.

    Lines without a leading timestamp are discarded. An empty result means
    the payload had no usable synced lyrics.
    """
    if not raw_text or not raw_text.strip():
        return ()

    entries = _parse_entries(raw_text)
    if not entries:
        return ()

    return fill_gaps(_build_segments(entries))
