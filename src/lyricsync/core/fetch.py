"""
HTTP fetching for lyrics provider APIs.

This module intentionally contains only network logic:
- requests
- transport strategies (direct, relay)
- one deadline shared by every strategy

No provider-specific semantics.
"""

import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence
from urllib.parse import urlencode

import requests  # type: ignore[import-untyped]

from .. import config
from ..utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": config.USER_AGENT,
    "Accept": "application/json",
}


@dataclass(frozen=True)
class Transport:
    """One way of reaching a URL: where to send the request and how to read the decoded body."""

    name: str
    build_url: Callable[[str], str]
    unwrap: Callable[[Any], Any]
    forward_headers: bool = True


def _direct_url(url: str) -> str:
    return url


def _relay_url(url: str) -> str:
    return f"{config.RELAY_URL}?{urlencode({'url': url})}"


def _unwrap_direct(data: Any) -> Any:
    return data


def _unwrap_relay(data: Any) -> Any:
    """The relay wraps the upstream body as a string in ``contents``."""
    contents = data.get("contents") if isinstance(data, dict) else None
    if not contents:
        return None
    return json.loads(contents)


DIRECT = Transport("direct", _direct_url, _unwrap_direct)
# Credentials are never forwarded through the third-party relay
RELAY = Transport("relay", _relay_url, _unwrap_relay, forward_headers=False)

DIRECT_ONLY: Sequence[Transport] = (DIRECT,)
DIRECT_THEN_RELAY: Sequence[Transport] = (DIRECT, RELAY)


def build_url(base_url: str, params: Optional[Dict[str, str]] = None) -> str:
    """Append URL-encoded query parameters to ``base_url``."""
    if not params:
        return base_url
    return f"{base_url}?{urlencode(params)}"


def _describe_error(error: Exception) -> str:
    # Request URLs may carry API keys, so they are kept out of the logs
    if isinstance(error, requests.exceptions.HTTPError) and error.response is not None:
        return f"HTTP {error.response.status_code}"
    if isinstance(error, requests.exceptions.Timeout):
        return "timed out"
    return error.__class__.__name__


class Deadline:
    """Time budget shared by all requests of one provider call."""

    def __init__(self, timeout: float, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._expires_at = clock() + timeout

    def remaining(self) -> float:
        return max(self._expires_at - self._clock(), 0.0)

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0


READ_CHUNK_SIZE = 8192


def _read_body(resp: Any, deadline: Deadline) -> bytes:
    """Read a streamed response body, giving up once the deadline passes.

    ``timeout`` bounds each socket read, not the whole body.
    """
    chunks = []
    for chunk in resp.iter_content(chunk_size=READ_CHUNK_SIZE):
        if deadline.expired:
            raise requests.exceptions.Timeout("deadline exceeded while reading body")
        chunks.append(chunk)
    return b"".join(chunks)


def fetch_json(
    url: str,
    *,
    deadline: Deadline,
    headers: Optional[dict] = None,
    transports: Sequence[Transport] = DIRECT_ONLY,
    session: Optional[requests.Session] = None,
) -> Optional[Any]:
    """
    Fetch JSON from ``url``, trying each transport in order.

    Every request is bounded by what is left of ``deadline``. Returns the
    decoded JSON of the first transport that succeeds, or None.
    """
    sess = session or requests
    request_headers = {**DEFAULT_HEADERS, **(headers or {})}

    for transport in transports:
        remaining = deadline.remaining()
        if remaining <= 0:
            logger.debug(f"Deadline exhausted before {transport.name} request")
            return None

        try:
            resp = sess.get(
                transport.build_url(url),
                headers=request_headers if transport.forward_headers else dict(DEFAULT_HEADERS),
                timeout=remaining,
                stream=True,
            )
            try:
                resp.raise_for_status()
                body = _read_body(resp, deadline)
            finally:
                resp.close()
            return transport.unwrap(json.loads(body))
        except (requests.exceptions.RequestException, ValueError) as e:
            # ValueError covers JSON decoding failures of both the body and
            # the relay's nested ``contents``
            logger.debug(f"{transport.name} request failed: {_describe_error(e)}")

    return None
