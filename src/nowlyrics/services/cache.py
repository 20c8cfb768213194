"""In-memory lyrics cache with request coalescing."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from nowlyrics.models.diagnostics import Diagnostics
from nowlyrics.models.enums import LyricsStatus
from nowlyrics.models.lyrics import LyricsPayload, PrefetchInfo
from nowlyrics.models.track import TrackSignature
from nowlyrics.services.resolver import MultiSourceResolver
from nowlyrics.types import Clock, elapsed_ms, to_epoch_ms, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A cached resolution outcome and its expiry."""

    payload: LyricsPayload
    expires_at: datetime

    def is_fresh(self, now: datetime) -> bool:
        return self.expires_at > now


@dataclass(frozen=True)
class PrefetchRequest:
    """Marks a resolve() call as coming from a prefetch.

    Attributes:
        source: What triggered the prefetch (e.g. "next-track-metadata").
        started_at: When the prefetch started.
    """

    source: str
    started_at: datetime


class LyricsCache:
    """In-memory TTL cache of lyrics payloads keyed by track key.

    Positive (``ok``) and negative (``not-found``) outcomes expire on
    different schedules: a confirmed match is durable, while a miss is
    retried sooner because lrclib.net may gain lyrics for the track.

    Expired entries are dropped lazily when read; nothing sweeps the map.
    Contents do not survive a restart.
    """

    def __init__(
        self,
        clock: Clock = utc_now,
        ttl: timedelta = timedelta(hours=6),
        negative_ttl: timedelta = timedelta(minutes=10),
    ) -> None:
        """Initialize an empty cache.

        Args:
            clock: Function returning the current time (enables testing).
            ttl: Lifetime of ``ok`` entries.
            negative_ttl: Lifetime of ``not-found`` entries.
        """
        self._clock = clock
        self._ttl = ttl
        self._negative_ttl = negative_ttl
        self._entries: dict[str, CacheEntry] = {}

    def get(self, track_key: str) -> LyricsPayload | None:
        """Return the cached payload if its entry has not expired."""
        entry = self._entries.get(track_key)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock()):
            logger.debug("Lyrics cache entry expired: %s", track_key)
            del self._entries[track_key]
            return None
        return entry.payload

    def put(self, payload: LyricsPayload) -> CacheEntry:
        """Store a resolution outcome under its track key."""
        if not payload.track_key:
            raise ValueError("Cannot cache a payload without a track key")
        if not payload.status.is_resolved:
            raise ValueError(f"Cannot cache a {payload.status} payload")
        ttl = self._ttl if payload.status == LyricsStatus.OK else self._negative_ttl
        entry = CacheEntry(payload=payload, expires_at=self._clock() + ttl)
        self._entries[payload.track_key] = entry
        logger.debug(
            "Cached %s lyrics for %s (%ds)",
            payload.status,
            payload.track_key,
            ttl.total_seconds(),
        )
        return entry

    def __len__(self) -> int:
        return len(self._entries)


class LyricsResolutionService:
    """Cache-first lyrics resolution with at most one lookup per track key.

    Concurrency:
        Runs on a single event loop. The cache check, the in-flight check
        and the registration of a new lookup happen without an await in
        between, so two callers can never both start a lookup for the
        same key. Late joiners await the same task through
        ``asyncio.shield`` so a cancelled caller cannot abort it for the
        others.
    """

    def __init__(
        self,
        resolver: MultiSourceResolver,
        cache: LyricsCache,
        clock: Clock = utc_now,
    ) -> None:
        self._resolver = resolver
        self._cache = cache
        self._clock = clock
        self._in_flight: dict[str, asyncio.Task[LyricsPayload]] = {}

    def cached(self, track_key: str) -> LyricsPayload | None:
        """Fresh cached payload for a key, without starting a lookup."""
        return self._cache.get(track_key)

    def is_in_flight(self, track_key: str) -> bool:
        return track_key in self._in_flight

    async def resolve(
        self,
        signature: TrackSignature,
        track_key: str,
        diagnostics: Diagnostics | None = None,
        prefetch: PrefetchRequest | None = None,
    ) -> LyricsPayload:
        """Resolve lyrics for a track, using the cache and in-flight table.

        Args:
            signature: Track to resolve.
            track_key: Key derived from ``signature``.
            diagnostics: Optional diagnostics for the lookup, used only if
                this call starts it.
            prefetch: Set when called for a prefetch; the returned payload
                then carries prefetch timing.

        Returns:
            An ``ok`` or ``not-found`` payload.
        """
        if (payload := self._cache.get(track_key)) is not None:
            return self._annotate(payload, prefetch)

        task = self._in_flight.get(track_key)
        if task is None:
            task = asyncio.create_task(
                self._resolve_and_store(signature, track_key, diagnostics),
                name=f"lyrics:{track_key}",
            )
            self._in_flight[track_key] = task
        else:
            logger.debug("Joining in-flight lyrics lookup: %s", track_key)

        payload = await asyncio.shield(task)
        return self._annotate(payload, prefetch)

    async def _resolve_and_store(
        self,
        signature: TrackSignature,
        track_key: str,
        diagnostics: Diagnostics | None,
    ) -> LyricsPayload:
        try:
            candidate = await self._resolver.resolve_by_signature(
                signature, diagnostics
            )
            if candidate is not None and candidate.synced_lyrics:
                payload = LyricsPayload.found(candidate, signature, track_key)
            else:
                payload = LyricsPayload.not_found(signature, track_key)
            self._cache.put(payload)
            return payload
        finally:
            self._in_flight.pop(track_key, None)

    def _annotate(
        self, payload: LyricsPayload, prefetch: PrefetchRequest | None
    ) -> LyricsPayload:
        if prefetch is None:
            return payload
        return payload.with_prefetch(
            PrefetchInfo(
                source=prefetch.source,
                started_at=to_epoch_ms(prefetch.started_at),
                total_ms=elapsed_ms(prefetch.started_at, self._clock()),
            )
        )
