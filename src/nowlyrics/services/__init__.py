"""Lyrics resolution services.

Public API:
    LyricsEngine - Now-playing pipeline and prefetch entry point
    LyricsResolutionService - Cache-first resolution with request coalescing
    PrefetchCoordinator - Next-track cache warming
    StatePublisher - Idempotent lyrics state publishing
    LyricsEventBus - In-process event fan-out

Protocols (for dependency injection):
    EventPublisher - Event delivery abstraction

Internal (not exported):
    MultiSourceResolver - Races the lrclib.net query strategies
    LyricsCache - TTL store behind LyricsResolutionService
"""

from nowlyrics.services.cache import LyricsResolutionService, PrefetchRequest
from nowlyrics.services.engine import LyricsEngine
from nowlyrics.services.event_bus import EventPublisher, LyricsEventBus
from nowlyrics.services.prefetch import PrefetchCoordinator
from nowlyrics.services.publisher import StatePublisher

__all__ = [
    "EventPublisher",
    "LyricsEngine",
    "LyricsEventBus",
    "LyricsResolutionService",
    "PrefetchCoordinator",
    "PrefetchRequest",
    "StatePublisher",
]
