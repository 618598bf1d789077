"""Common contract for lyrics provider adapters."""

import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence

import requests  # type: ignore[import-untyped]

from ... import config
from ...exceptions import ProviderError
from ...utils.logging import get_logger
from ..fetch import DIRECT_ONLY, Deadline, Transport, fetch_json
from ..models import Credentials, Granularity, ProviderResult
from ..text_utils import normalize_search_text

logger = get_logger(__name__)


def dig(data: Any, *path: Any) -> Any:
    """Walk nested dicts/lists, returning None on any missing or mistyped step."""
    current = data
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or not -len(current) <= key < len(current):
                return None
            current = current[key]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(key)
        if current is None:
            return None
    return current


class LyricsProvider(ABC):
    """A single external lyrics source.

    ``fetch`` never raises: network errors, timeouts and malformed responses
    all come back as None. Subclasses implement ``_fetch`` and may raise
    ``ProviderError`` for responses they cannot make sense of.
    """

    name: str = ""
    granularity: Granularity = Granularity.LINE
    transports: Sequence[Transport] = DIRECT_ONLY
    credential_field: Optional[str] = None

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.session = session
        self.timeout = timeout if timeout is not None else self.default_timeout()
        self._clock = clock

    def default_timeout(self) -> float:
        return config.PROVIDER_TIMEOUT

    def requires_credential(self) -> bool:
        return self.credential_field is not None

    def credential_from(self, credentials: Optional[Credentials]) -> Optional[str]:
        if self.credential_field is None or credentials is None:
            return None
        return getattr(credentials, self.credential_field, None)

    def fetch(
        self, artist: str, title: str, credentials: Optional[Credentials] = None
    ) -> Optional[ProviderResult]:
        """Search this provider; return its raw payload or None."""
        credential = self.credential_from(credentials)
        if self.requires_credential() and not credential:
            logger.debug(f"{self.name}: no credential configured, skipping")
            return None

        artist_query = normalize_search_text(artist)
        title_query = normalize_search_text(title)
        if not title_query:
            return None

        deadline = Deadline(self.timeout, self._clock)
        try:
            result = self._fetch(artist_query, title_query, deadline, credential)
        except ProviderError as e:
            logger.debug(f"{self.name}: unusable response: {e}")
            return None
        except Exception as e:
            logger.debug(f"{self.name} failed: {e.__class__.__name__}: {e}")
            return None

        if result is None:
            logger.debug(f"{self.name}: no lyrics for {artist_query} - {title_query}")
        return result

    @abstractmethod
    def _fetch(
        self,
        artist: str,
        title: str,
        deadline: Deadline,
        credential: Optional[str],
    ) -> Optional[ProviderResult]:
        """Provider-specific search; ``artist``/``title`` are already normalized."""

    def _get_json(
        self, url: str, deadline: Deadline, headers: Optional[dict] = None
    ) -> Any:
        return fetch_json(
            url,
            deadline=deadline,
            headers=headers,
            transports=self.transports,
            session=self.session,
        )

    def _result(
        self, payload: str, *, synced: bool, url: Optional[str] = None
    ) -> ProviderResult:
        return ProviderResult(
            raw_payload=payload,
            source_name=self.name,
            synced=synced,
            granularity=self.granularity,
            url=url,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(timeout={self.timeout})"


def require_mapping(data: Any, provider: str) -> dict:
    """Ensure a decoded response is a JSON object."""
    if not isinstance(data, dict):
        raise ProviderError(
            f"{provider} returned {type(data).__name__} instead of an object"
        )
    return data
