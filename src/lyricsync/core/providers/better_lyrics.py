"""Better Lyrics search API (syllable-timed enhanced LRC)."""

from typing import Optional

from ... import config
from ..fetch import DIRECT_THEN_RELAY, Deadline, build_url
from ..models import Granularity, ProviderResult
from .base import LyricsProvider, dig, require_mapping


class BetterLyricsProvider(LyricsProvider):
    name = "Better Lyrics"
    granularity = Granularity.SYLLABLE
    transports = DIRECT_THEN_RELAY

    def _fetch(
        self,
        artist: str,
        title: str,
        deadline: Deadline,
        credential: Optional[str],
    ) -> Optional[ProviderResult]:
        url = build_url(
            config.BETTER_LYRICS_SEARCH_URL, {"q": f"{artist} {title}".strip()}
        )
        data = self._get_json(url, deadline)
        if data is None:
            return None

        synced = dig(require_mapping(data, self.name), "tracks", 0, "syncedLyrics")
        if not isinstance(synced, str) or not synced.strip():
            return None
        return self._result(synced, synced=True)
