"""Genius search API (requires an access token)."""

from typing import Optional

from ... import config
from ..fetch import Deadline, build_url
from ..models import Granularity, ProviderResult
from .base import LyricsProvider, dig, require_mapping


class GeniusProvider(LyricsProvider):
    """Genius exposes no lyric text through its API, only the song page.

    The payload is an attribution block pointing at that page. It carries no
    timestamps, so it never becomes a timeline on its own.
    """

    name = "Genius"
    granularity = Granularity.LINE
    credential_field = "genius_token"

    def _fetch(
        self,
        artist: str,
        title: str,
        deadline: Deadline,
        credential: Optional[str],
    ) -> Optional[ProviderResult]:
        url = build_url(config.GENIUS_SEARCH_URL, {"q": f"{title} {artist}".strip()})
        data = self._get_json(
            url, deadline, headers={"Authorization": f"Bearer {credential}"}
        )
        if data is None:
            return None

        hits = dig(require_mapping(data, self.name), "response", "hits")
        if not hits:
            return None

        result = dig(hits, 0, "result")
        song_url = dig(result, "url")
        if not song_url:
            return None

        song_title = dig(result, "title") or title
        artist_name = dig(result, "primary_artist", "name") or artist
        payload = f'"{song_title}" by {artist_name}\n\nView full lyrics: {song_url}'
        return self._result(payload, synced=False, url=song_url)
