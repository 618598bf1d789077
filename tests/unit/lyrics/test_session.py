import asyncio
import threading

import pytest

from lyricsync.core.lrc import parse_timed_text
from lyricsync.core.models import (
    Credentials,
    Granularity,
    LyricsStatus,
    ResolvedLyrics,
)
from lyricsync.core.session import LyricsSession, parse_track_payload
from lyricsync.exceptions import ValidationError


def _resolved(source, raw="[00:00.00]One\n[00:02.00]Two"):
    return ResolvedLyrics(
        timeline=parse_timed_text(raw),
        source_name=source,
        granularity=Granularity.LINE,
    )


class RecordingResolver:
    def __init__(self, results=None):
        self.results = results or {}
        self.calls = []

    def __call__(self, artist, title, credentials=None):
        self.calls.append((artist, title))
        return self.results.get(title)


class TestParseTrackPayload:
    def test_json_string(self):
        payload = parse_track_payload('{"Artist": "Adele", "Title": "Hello", "Position": 1500}')
        assert payload.artist == "Adele"
        assert payload.title == "Hello"
        assert payload.position == pytest.approx(1.5)

    def test_progress_key_and_dict(self):
        payload = parse_track_payload({"Artist": "A", "Title": "T", "Progress": 250})
        assert payload.position == pytest.approx(0.25)

    def test_missing_position(self):
        assert parse_track_payload({"Artist": "A", "Title": "T"}).position is None

    def test_null_means_nothing_playing(self):
        assert parse_track_payload(None) is None
        assert parse_track_payload("null") is None

    @pytest.mark.parametrize("data", ["{not json", "[1, 2]", {"Title": "T", "Position": "abc"}])
    def test_malformed(self, data):
        with pytest.raises(ValidationError):
            parse_track_payload(data)


def test_track_change_installs_lyrics():
    resolver = RecordingResolver({"Hello": _resolved("LRClib")})
    session = LyricsSession(resolver, credentials=Credentials(), fetch_delay=0)

    installed = asyncio.run(session.on_track_change("Adele", "Hello"))

    assert installed
    assert session.state.status == LyricsStatus.FOUND
    assert session.state.lyrics_source == "LRClib"
    assert session.state.lyrics_granularity == Granularity.LINE
    assert len(session.state.current_lyrics) == 2


def test_not_found_clears_state():
    session = LyricsSession(RecordingResolver(), credentials=Credentials(), fetch_delay=0)

    assert asyncio.run(session.on_track_change("Adele", "Unknown"))
    assert session.state.status == LyricsStatus.NOT_FOUND
    assert session.state.current_lyrics is None
    assert session.state.lyrics_source == ""


def test_resolver_error_sets_error_status():
    def failing(artist, title, credentials=None):
        raise RuntimeError("network down")

    session = LyricsSession(failing, credentials=Credentials(), fetch_delay=0)
    assert asyncio.run(session.on_track_change("A", "T"))
    assert session.state.status == LyricsStatus.ERROR
    assert session.state.current_lyrics is None


def test_blank_track_is_idle_without_search():
    resolver = RecordingResolver()
    session = LyricsSession(resolver, credentials=Credentials(), fetch_delay=0)

    assert asyncio.run(session.on_track_change("Artist", "  "))
    assert session.state.status == LyricsStatus.IDLE
    assert resolver.calls == []


def test_latest_track_change_wins():
    a_started = threading.Event()
    release_a = threading.Event()

    def resolve(artist, title, credentials=None):
        if title == "A":
            a_started.set()
            release_a.wait(5)
            return _resolved("Source A")
        return _resolved("Source B")

    session = LyricsSession(resolve, credentials=Credentials(), fetch_delay=0)

    async def scenario():
        task_a = asyncio.ensure_future(session.on_track_change("Artist", "A"))
        await asyncio.to_thread(a_started.wait, 5)
        b_installed = await session.on_track_change("Artist", "B")
        release_a.set()
        a_installed = await task_a
        return a_installed, b_installed

    a_installed, b_installed = asyncio.run(scenario())

    assert b_installed
    assert not a_installed
    assert session.state.lyrics_source == "Source B"
    assert session.state.status == LyricsStatus.FOUND


def test_fetch_delay_skips_superseded_search():
    resolver = RecordingResolver({"B": _resolved("Source B")})
    session = LyricsSession(resolver, credentials=Credentials(), fetch_delay=0.05)

    async def scenario():
        task_a = asyncio.ensure_future(session.on_track_change("Artist", "A"))
        await asyncio.sleep(0)
        await session.on_track_change("Artist", "B")
        return await task_a

    assert asyncio.run(scenario()) is False
    assert resolver.calls == [("Artist", "B")]
    assert session.state.lyrics_source == "Source B"


def test_update_position_projects_timeline():
    resolver = RecordingResolver({"T": _resolved("S")})
    session = LyricsSession(resolver, credentials=Credentials(), fetch_delay=0)

    assert session.update_position(1.0) is None

    asyncio.run(session.on_track_change("A", "T"))
    window = session.update_position(2.5)
    assert window.active.text == "Two"
    assert session.state.current_position == 2.5


def test_host_payload_flow():
    resolver = RecordingResolver({"Hello": _resolved("LRClib")})
    session = LyricsSession(resolver, credentials=Credentials(), fetch_delay=0)

    async def scenario():
        task = session.on_track_payload('{"Artist": "Adele", "Title": "Hello", "Position": 0}')
        assert task is not None
        await task

        repeat = session.on_track_payload({"Artist": "adele ", "Title": "HELLO", "Position": 2500})
        assert repeat is None
        assert session.state.current_position == pytest.approx(2.5)

        assert session.on_track_payload("{broken") is None
        assert session.state.status == LyricsStatus.FOUND

        session.on_track_payload("null")

    asyncio.run(scenario())

    assert resolver.calls == [("Adele", "Hello")]
    assert session.state.status == LyricsStatus.IDLE
    assert session.state.current_lyrics is None


def test_clear_makes_inflight_fetch_stale():
    started = threading.Event()
    release = threading.Event()

    def resolve(artist, title, credentials=None):
        started.set()
        release.wait(5)
        return _resolved("Late")

    session = LyricsSession(resolve, credentials=Credentials(), fetch_delay=0)

    async def scenario():
        task = asyncio.ensure_future(session.on_track_change("A", "T"))
        await asyncio.to_thread(started.wait, 5)
        session.clear()
        release.set()
        return await task

    assert asyncio.run(scenario()) is False
    assert session.state.status == LyricsStatus.IDLE
    assert session.state.current_lyrics is None


def test_set_property_updates_credentials():
    session = LyricsSession(RecordingResolver(), credentials=Credentials(), fetch_delay=0)

    assert session.set_property("musixmatchKey", "abc")
    assert session.credentials.musixmatch_key == "abc"
    assert session.set_property("geniusKey", "tok")
    assert session.credentials.genius_token == "tok"
    assert session.set_property("musixmatchKey", "")
    assert session.credentials.musixmatch_key is None
    assert not session.set_property("unknown", "x")


def test_credentials_reach_resolver():
    seen = []

    def resolve(artist, title, credentials=None):
        seen.append(credentials)
        return None

    session = LyricsSession(resolve, credentials=Credentials(), fetch_delay=0)
    session.set_property("musixmatchKey", "abc")
    asyncio.run(session.on_track_change("A", "T"))

    assert seen[0].musixmatch_key == "abc"


def test_repeated_payloads_before_fetch_starts_resolve_once():
    resolver = RecordingResolver({"T": _resolved("S")})
    session = LyricsSession(resolver, credentials=Credentials(), fetch_delay=0)

    async def scenario():
        first = session.on_track_payload({"Artist": "A", "Title": "T", "Position": 0})
        second = session.on_track_payload({"Artist": "A", "Title": "T", "Position": 250})
        assert second is None
        return await first

    assert asyncio.run(scenario()) is True
    assert resolver.calls == [("A", "T")]
    assert session.state.current_position == pytest.approx(0.25)
    assert session.state.status == LyricsStatus.FOUND


def test_new_track_payload_after_pending_one_supersedes_it():
    resolver = RecordingResolver({"T1": _resolved("One"), "T2": _resolved("Two")})
    session = LyricsSession(resolver, credentials=Credentials(), fetch_delay=0.05)

    async def scenario():
        first = session.on_track_payload({"Artist": "A", "Title": "T1"})
        second = session.on_track_payload({"Artist": "A", "Title": "T2"})
        return await asyncio.gather(first, second)

    assert asyncio.run(scenario()) == [False, True]
    assert resolver.calls == [("A", "T2")]
    assert session.state.lyrics_source == "Two"
