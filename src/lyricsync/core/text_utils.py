"""Text helpers for provider queries and plain-text lyric display."""

import re

_WHITESPACE_RE = re.compile(r"\s+")
_LINE_TAG_RE = re.compile(r"^(?:\s*\[\d+:\d{2}(?:[.:]\d{1,3})?\])+\s*")
_WORD_TAG_RE = re.compile(r"<\d+:\d{2}(?:[.:]\d{1,3})?>")
_METADATA_TAG_RE = re.compile(r"^\s*\[[A-Za-z#]+:[^\]]*\]\s*$")
_EXCESS_BLANK_LINES_RE = re.compile(r"\n{3,}")


def normalize_search_text(value: str) -> str:
    """Trim, case-fold and collapse whitespace for use in provider queries."""
    return _WHITESPACE_RE.sub(" ", (value or "").strip().casefold())


def strip_timestamps(lrc_text: str) -> str:
    """Remove line and word timestamps, keeping non-empty lyric lines.

    Header tags such as ``[ar:Artist]`` are dropped as well.
    """
    if not lrc_text:
        return ""

    lines = []
    for line in lrc_text.splitlines():
        if _METADATA_TAG_RE.match(line):
            continue
        text = _WORD_TAG_RE.sub("", _LINE_TAG_RE.sub("", line)).strip()
        if text:
            lines.append(text)
    return "\n".join(lines)


def format_lyrics(lyrics: str) -> str:
    """Clean up plain lyrics for display."""
    if not lyrics:
        return ""

    collapsed = _EXCESS_BLANK_LINES_RE.sub("\n\n", lyrics)
    return "\n".join(line.strip() for line in collapsed.split("\n")).strip()


def truncate_lyrics(lyrics: str, max_lines: int = 20) -> str:
    """Keep the first ``max_lines`` lines, marking the cut with ``[...]``."""
    if not lyrics:
        return ""

    lines = lyrics.split("\n")
    if len(lines) <= max_lines:
        return lyrics
    return "\n".join(lines[:max_lines]) + "\n\n[...]"
