"""Musixmatch matcher API (requires an API key)."""

from typing import Optional

from ... import config
from ...utils.logging import get_logger
from ..fetch import Deadline, build_url
from ..lrc import has_timestamps
from ..models import Granularity, ProviderResult
from .base import LyricsProvider, dig, require_mapping

logger = get_logger(__name__)


class MusixmatchProvider(LyricsProvider):
    name = "Musixmatch"
    granularity = Granularity.WORD
    credential_field = "musixmatch_key"

    def _fetch(
        self,
        artist: str,
        title: str,
        deadline: Deadline,
        credential: Optional[str],
    ) -> Optional[ProviderResult]:
        url = build_url(
            config.MUSIXMATCH_MATCHER_URL,
            {"q_artist": artist, "q_track": title, "apikey": credential or ""},
        )
        data = self._get_json(url, deadline)
        if data is None:
            return None

        message = require_mapping(data, self.name).get("message")
        status = dig(message, "header", "status_code") or dig(message, "status")
        if status != 200:
            logger.debug(f"Musixmatch: status {status}")
            return None

        body = dig(message, "body", "lyrics", "lyrics_body")
        if not isinstance(body, str) or not body.strip():
            return None
        return self._result(body, synced=has_timestamps(body))
