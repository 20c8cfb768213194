"""nowlyrics - Time-synced lyrics for the track a renderer is playing.

This library resolves synced lyrics from lrclib.net for now-playing
metadata reported by a network audio renderer. It races several lookup
strategies, scores loose search results, caches outcomes (hits and
misses) in memory and coalesces concurrent lookups for the same track.
Results are pushed to viewers through a small publish interface.

Designed for use as a library inside a now-playing server, with a CLI
for debugging and development.

Examples:
    Keep a device's lyrics up to date:
    ```python
    from nowlyrics import DeviceInfo, LyricsEventBus, create_engine

    bus = LyricsEventBus()
    engine = create_engine(events=bus)
    device = DeviceInfo(metadata=metadata)
    await engine.update_now_playing(device)
    print(device.lyrics.status)
    ```

    Warm the cache for the next track:
    ```python
    event = await engine.prefetch(next_metadata)
    print(event.status)
    ```
"""

from datetime import timedelta

import httpx

# Internal imports (not exported)
from nowlyrics.client import LrcLibClient as _LrcLibClient
from nowlyrics.config import Settings, get_settings
from nowlyrics.exceptions import (
    LyricsError,
    MalformedResponseError,
    UpstreamAPIError,
    UpstreamConnectionError,
)
from nowlyrics.lib.signature import build_signature, build_track_key
from nowlyrics.models import (
    DeviceInfo,
    Diagnostics,
    LyricsPayload,
    LyricsStatus,
    PrefetchEvent,
    PrefetchStatus,
    TrackSignature,
)
from nowlyrics.services import (
    EventPublisher,
    LyricsEngine,
    LyricsEventBus,
    LyricsResolutionService,
    StatePublisher,
)
from nowlyrics.services.cache import LyricsCache as _LyricsCache
from nowlyrics.services.resolver import MultiSourceResolver as _MultiSourceResolver
from nowlyrics.types import Clock, utc_now


def create_engine(
    settings: Settings | None = None,
    events: EventPublisher | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    clock: Clock = utc_now,
) -> LyricsEngine:
    """Create a fully wired lyrics engine.

    This is the recommended way to create an engine for library usage.
    It builds the lrclib.net client, cache and resolution service once;
    keep the returned engine for the lifetime of the process so the
    cache is shared.

    Args:
        settings: Optional settings. Uses get_settings() if not provided.
        events: Where ``lyrics`` / ``lyrics-prefetch`` events go.
            Defaults to a fresh LyricsEventBus.
        transport: Optional httpx transport (e.g. httpx.MockTransport).
        clock: Function returning the current time (enables testing).

    Returns:
        A configured LyricsEngine. Call ``aclose()`` on shutdown.

    Examples:
        With a socket server as the event sink:
        ```python
        engine = create_engine(events=socket_emitter)
        ```

        Against a self-hosted lrclib instance:
        ```python
        settings = Settings(lyrics={"base_url": "http://lrclib.local"})
        engine = create_engine(settings)
        ```
    """
    settings = settings or get_settings()
    client = _LrcLibClient(settings, transport=transport)
    cache = _LyricsCache(
        clock,
        ttl=timedelta(seconds=settings.lyrics.cache_ttl_seconds),
        negative_ttl=timedelta(seconds=settings.lyrics.negative_cache_ttl_seconds),
    )
    service = LyricsResolutionService(_MultiSourceResolver(client, clock), cache, clock)
    publisher = StatePublisher(events if events is not None else LyricsEventBus())
    return LyricsEngine(settings, service, publisher, clock, client=client)


__all__ = [
    "DeviceInfo",
    "Diagnostics",
    "EventPublisher",
    "LyricsEngine",
    "LyricsError",
    "LyricsEventBus",
    "LyricsPayload",
    "LyricsStatus",
    "MalformedResponseError",
    "PrefetchEvent",
    "PrefetchStatus",
    "Settings",
    "TrackSignature",
    "UpstreamAPIError",
    "UpstreamConnectionError",
    "build_signature",
    "build_track_key",
    "create_engine",
    "get_settings",
]
