"""Lyrics provider adapters and the default fallback chain."""

from typing import List, Optional

import requests  # type: ignore[import-untyped]

from .base import LyricsProvider
from .better_lyrics import BetterLyricsProvider
from .genius import GeniusProvider
from .lrclib import LRCLibProvider
from .musixmatch import MusixmatchProvider

# Richest timing first:
# Better Lyrics: syllable-level enhanced LRC
# Musixmatch: word-level, needs an API key
# LRClib: line-level, no key, most dependable
# Genius: needs a token, link only (kept for attribution)
PROVIDER_ORDER = [
    BetterLyricsProvider,
    MusixmatchProvider,
    LRCLibProvider,
    GeniusProvider,
]


def build_default_providers(
    session: Optional[requests.Session] = None,
) -> List[LyricsProvider]:
    """Instantiate the fallback chain in priority order."""
    return [provider_cls(session=session) for provider_cls in PROVIDER_ORDER]


__all__ = [
    "LyricsProvider",
    "BetterLyricsProvider",
    "MusixmatchProvider",
    "LRCLibProvider",
    "GeniusProvider",
    "PROVIDER_ORDER",
    "build_default_providers",
]
