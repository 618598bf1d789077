"""Live provider checks; skipped unless --run-network or RUN_INTEGRATION_TESTS=1."""

import pytest

from lyricsync.core.providers import LRCLibProvider
from lyricsync.core.resolver import LyricsResolver

pytestmark = [pytest.mark.network, pytest.mark.integration]


def test_lrclib_finds_well_known_song():
    result = LRCLibProvider().fetch("The Beatles", "Yesterday")
    assert result is not None
    assert result.raw_payload


def test_default_chain_resolves_a_timeline():
    resolved = LyricsResolver().resolve("Adele", "Hello")
    assert resolved is not None
    assert resolved.timeline
    assert resolved.attempts[-1].segment_count == len(resolved.timeline)
