"""LRCLib search API: no authentication, line-synced lyrics."""

from typing import List, Optional

from ... import config
from ...utils.logging import get_logger
from ..fetch import DIRECT_THEN_RELAY, Deadline, build_url
from ..models import Granularity, ProviderResult
from .base import LyricsProvider

logger = get_logger(__name__)


class LRCLibProvider(LyricsProvider):
    name = "LRClib"
    granularity = Granularity.LINE
    transports = DIRECT_THEN_RELAY

    def default_timeout(self) -> float:
        return config.LRCLIB_TIMEOUT

    def _query_urls(self, artist: str, title: str) -> List[str]:
        urls = [build_url(config.LRCLIB_SEARCH_URL, {"q": f"{artist} {title}".strip()})]
        if artist:
            urls.insert(
                0,
                build_url(
                    config.LRCLIB_SEARCH_URL,
                    {"artist_name": artist, "track_name": title},
                ),
            )
        return urls

    def _fetch(
        self,
        artist: str,
        title: str,
        deadline: Deadline,
        credential: Optional[str],
    ) -> Optional[ProviderResult]:
        for url in self._query_urls(artist, title):
            if deadline.expired:
                logger.debug("LRClib: deadline reached, giving up")
                break

            results = self._get_json(url, deadline)
            if not isinstance(results, list) or not results:
                continue

            tracks = [r for r in results if isinstance(r, dict)]
            if not tracks:
                continue
            track = next((t for t in tracks if t.get("syncedLyrics")), tracks[0])
            lyrics = track.get("syncedLyrics") or track.get("plainLyrics")
            if not isinstance(lyrics, str) or not lyrics.strip():
                continue

            logger.debug(f"LRClib: found {len(results)} result(s)")
            return self._result(lyrics, synced=bool(track.get("syncedLyrics")))

        return None
