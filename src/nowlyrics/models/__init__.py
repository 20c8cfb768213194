"""Data models for nowlyrics.

Public API:
    TrackSignature - Comparable song identity
    LyricsCandidate - Raw lrclib.net record
    LyricsPayload - Cached / published lyrics state
    PrefetchEvent - Next-track prefetch progress
    Diagnostics - Timing record for one resolution attempt
    DeviceInfo - Active device state
"""

from nowlyrics.models.device import DeviceInfo
from nowlyrics.models.diagnostics import Diagnostics, RequestRecord
from nowlyrics.models.enums import (
    CacheState,
    Endpoint,
    LyricsStatus,
    PrefetchStatus,
    RequestResult,
    SkipReason,
)
from nowlyrics.models.events import (
    LYRICS_EVENT,
    LYRICS_PREFETCH_EVENT,
    EventMessage,
    PrefetchEvent,
)
from nowlyrics.models.lyrics import (
    PROVIDER,
    LyricsCandidate,
    LyricsPayload,
    PrefetchInfo,
)
from nowlyrics.models.track import TrackSignature

__all__ = [
    "LYRICS_EVENT",
    "LYRICS_PREFETCH_EVENT",
    "PROVIDER",
    "CacheState",
    "DeviceInfo",
    "Diagnostics",
    "Endpoint",
    "EventMessage",
    "LyricsCandidate",
    "LyricsPayload",
    "LyricsStatus",
    "PrefetchEvent",
    "PrefetchInfo",
    "PrefetchStatus",
    "RequestRecord",
    "RequestResult",
    "SkipReason",
    "TrackSignature",
]
