"""Test configuration and fixtures.

Provides reusable fixtures for:
- LRC / enhanced LRC payloads
- Fake HTTP sessions and responses for provider adapters
- Stub providers for the fallback chain
- A manual clock for deadline tests
"""

import json
import os
from typing import Any, List, Optional

import pytest
import requests

from lyricsync.core.models import Credentials, Granularity, ProviderResult


def pytest_addoption(parser):
    parser.addoption(
        "--run-network",
        action="store_true",
        default=False,
        help="Run tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    run_network = config.getoption("--run-network") or os.getenv(
        "RUN_INTEGRATION_TESTS"
    ) == "1"
    if run_network:
        return

    skip_network = pytest.mark.skip(
        reason="requires network access (use --run-network or RUN_INTEGRATION_TESTS=1)"
    )
    for item in items:
        if "network" in item.keywords or "integration" in item.keywords:
            item.add_marker(skip_network)


# =============================================================================
# Fake HTTP
# =============================================================================


class FakeResponse:
    def __init__(self, json_data=None, status_code=200, chunk_size=None):
        self._json_data = json_data
        self.status_code = status_code
        self.chunk_size = chunk_size
        self.closed = False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(
                f"{self.status_code} error", response=self
            )

    @property
    def content(self):
        if isinstance(self._json_data, Exception):
            return b"<not json>"
        return json.dumps(self._json_data).encode("utf-8")

    def iter_content(self, chunk_size=1):
        size = self.chunk_size or chunk_size
        body = self.content
        for start in range(0, len(body), size):
            yield body[start : start + size]

    def close(self):
        self.closed = True


class FakeSession:
    """Returns queued responses in order; exceptions in the queue are raised."""

    def __init__(self, responses: Optional[List[Any]] = None):
        self._responses = list(responses or [])
        self.calls = []

    def get(self, url, headers=None, timeout=None, stream=False):
        self.calls.append(
            {"url": url, "headers": headers or {}, "timeout": timeout, "stream": stream}
        )
        if not self._responses:
            raise requests.exceptions.ConnectionError("no response queued")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class ManualClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubProvider:
    """Provider double recording how often it was asked."""

    def __init__(self, name, payload=None, granularity=Granularity.LINE, error=None):
        self.name = name
        self.payload = payload
        self.granularity = granularity
        self.error = error
        self.calls = []

    def fetch(self, artist, title, credentials=None):
        self.calls.append((artist, title, credentials))
        if self.error is not None:
            raise self.error
        if self.payload is None:
            return None
        return ProviderResult(
            raw_payload=self.payload,
            source_name=self.name,
            synced=True,
            granularity=self.granularity,
        )


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def manual_clock():
    return ManualClock()


@pytest.fixture
def stub_provider():
    return StubProvider


@pytest.fixture
def credentials():
    return Credentials(musixmatch_key="mxm-key", genius_token="genius-token")


# =============================================================================
# LRC (Synced Lyrics) Fixtures
# =============================================================================


@pytest.fixture
def lrc_yesterday():
    """Synced LRC lyrics for Yesterday (simplified)."""
    return """[ar:The Beatles]
[ti:Yesterday]
[al:Help!]
[length:02:05]

[00:00.00]Yesterday
[00:04.00]All my troubles seemed so far away
[00:10.00]Now it looks as though they're here to stay
[00:16.00]Oh, I believe in yesterday
[00:40.00]Suddenly"""


@pytest.fixture
def lrc_enhanced():
    """Enhanced LRC with word-level tags."""
    return """[00:00.00] <00:00.01>Testing <00:00.50>the <00:01.00>syllable
[00:02.00] <00:02.00>Second <00:02.40>line <00:03.10>here"""


@pytest.fixture
def lrc_late_start():
    """LRC whose first line starts after an intro."""
    return """[00:02.00]First line
[00:04.50]Second line"""
