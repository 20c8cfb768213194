"""Test fixtures and configuration for nowlyrics tests.

This module provides shared fixtures organized into:
- Time utilities: Deterministic clock
- Fakes: In-memory lrclib.net client and event recorder
- Factory fixtures: Builders for metadata and lrclib.net records
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
import pytest
from nowlyrics.config import Settings
from nowlyrics.models.lyrics import LyricsCandidate
from nowlyrics.models.track import TrackSignature

# =============================================================================
# Time Utilities
# =============================================================================


class MockClock:
    """Mock clock for deterministic time-based testing.

    Usage:
        clock = MockClock()
        clock.advance(60)  # Advance by 60 seconds
        clock.set(datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC))
    """

    def __init__(self, initial: datetime | None = None) -> None:
        self._time = initial or datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self._time

    def advance(self, seconds: float) -> None:
        """Advance the clock by the specified seconds."""
        self._time += timedelta(seconds=seconds)

    def set(self, time: datetime) -> None:
        """Set the clock to a specific time."""
        self._time = time


@pytest.fixture
def clock() -> MockClock:
    """Provide a mock clock."""
    return MockClock()


# =============================================================================
# Fakes
# =============================================================================


class EventRecorder:
    """Records emitted events, implementing the EventPublisher protocol."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        self.events.append((event, payload))

    def named(self, event: str) -> list[dict[str, Any]]:
        return [payload for name, payload in self.events if name == event]


class FakeLrcLibClient:
    """In-memory lrclib.net client implementing LrcLibProtocol.

    Each endpoint returns its configured result or raises its configured
    exception. Setting a gate makes that endpoint wait on an asyncio.Event
    before answering.
    """

    def __init__(
        self,
        cached: LyricsCandidate | None = None,
        get: LyricsCandidate | None = None,
        search: list[LyricsCandidate] | None = None,
    ) -> None:
        self.results: dict[str, Any] = {
            "get-cached": cached,
            "get": get,
            "search": search or [],
        }
        self.errors: dict[str, Exception] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[str] = []

    async def _answer(self, endpoint: str) -> Any:
        self.calls.append(endpoint)
        if (gate := self.gates.get(endpoint)) is not None:
            await gate.wait()
        else:
            await asyncio.sleep(0)
        if (error := self.errors.get(endpoint)) is not None:
            raise error
        return self.results[endpoint]

    async def get_cached(self, signature: TrackSignature) -> LyricsCandidate | None:
        return await self._answer("get-cached")

    async def get(self, signature: TrackSignature) -> LyricsCandidate | None:
        return await self._answer("get")

    async def search(self, signature: TrackSignature) -> list[LyricsCandidate]:
        return await self._answer("search")


@pytest.fixture
def recorder() -> EventRecorder:
    """Provide an event recorder."""
    return EventRecorder()


@pytest.fixture
def fake_client() -> FakeLrcLibClient:
    """Provide a fake lrclib.net client that finds nothing."""
    return FakeLrcLibClient()


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults and a fixed server version."""
    return Settings(version={"server": "9.9.9"})


# =============================================================================
# Factory Fixtures
# =============================================================================

SYNCED = "[00:01.00] First line\n[00:05.00] Second line"


@pytest.fixture
def signature() -> TrackSignature:
    """A complete track signature."""
    return TrackSignature(
        track_name="Midnight City",
        artist_name="M83",
        album_name="Hurry Up, We're Dreaming",
        duration=243,
    )


@pytest.fixture
def make_metadata() -> Callable[..., dict[str, Any]]:
    """Factory for raw device metadata dicts."""

    def _make_metadata(
        title: str | None = "Midnight City",
        artist: str | None = "M83",
        album: str | None = "Hurry Up, We're Dreaming",
        duration: Any = "0:04:03",
        source: str | None = "TIDAL",
        **extra: Any,
    ) -> dict[str, Any]:
        track_meta = {
            key: value
            for key, value in (
                ("dc:title", title),
                ("upnp:artist", artist),
                ("upnp:album", album),
            )
            if value is not None
        }
        metadata: dict[str, Any] = {"trackMetaData": track_meta, **extra}
        if duration is not None:
            metadata["TrackDuration"] = duration
        if source is not None:
            metadata["TrackSource"] = source
        return metadata

    return _make_metadata


@pytest.fixture
def make_record() -> Callable[..., dict[str, Any]]:
    """Factory for lrclib.net record dicts (wire format)."""

    def _make_record(
        id: int = 1,
        track: str = "Midnight City",
        artist: str = "M83",
        album: str = "Hurry Up, We're Dreaming",
        duration: float | None = 243.0,
        instrumental: bool = False,
        synced: str | None = SYNCED,
    ) -> dict[str, Any]:
        return {
            "id": id,
            "trackName": track,
            "artistName": artist,
            "albumName": album,
            "duration": duration,
            "instrumental": instrumental,
            "plainLyrics": "First line\nSecond line",
            "syncedLyrics": synced,
        }

    return _make_record


@pytest.fixture
def make_candidate(
    make_record: Callable[..., dict[str, Any]],
) -> Callable[..., LyricsCandidate]:
    """Factory for parsed lrclib.net candidates."""

    def _make_candidate(**kwargs: Any) -> LyricsCandidate:
        return LyricsCandidate.model_validate(make_record(**kwargs))

    return _make_candidate


def json_transport(
    routes: dict[str, Any], requests: list[httpx.Request] | None = None
) -> httpx.MockTransport:
    """MockTransport answering each path with a JSON body (or status code).

    A route value that is an int is returned as a bare status code;
    anything else is returned as a 200 JSON body. Unknown paths get 404.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        route = routes.get(request.url.path)
        if route is None:
            return httpx.Response(404)
        if isinstance(route, int):
            return httpx.Response(route)
        return httpx.Response(200, json=route)

    return httpx.MockTransport(handler)
