"""Speculative lyrics lookup for the track expected to play next."""

import logging

from nowlyrics.config import Settings
from nowlyrics.lib.signature import (
    build_signature,
    build_track_key,
    has_track_metadata,
    track_source,
)
from nowlyrics.models.enums import PrefetchStatus, SkipReason
from nowlyrics.models.events import PrefetchEvent
from nowlyrics.services.cache import LyricsResolutionService, PrefetchRequest
from nowlyrics.services.publisher import StatePublisher
from nowlyrics.types import Clock, RawMetadata, elapsed_ms, to_epoch_ms, utc_now

logger = logging.getLogger(__name__)

PREFETCH_SOURCE = "next-track-metadata"


class PrefetchCoordinator:
    """Warms the lyrics cache for an upcoming track.

    Shares the resolution service (and so the cache and in-flight table)
    with the now-playing pipeline, but reports only through
    ``lyrics-prefetch`` events. It never writes ``DeviceInfo.lyrics``:
    when the track starts playing, the now-playing pipeline picks the
    result up from the cache.
    """

    def __init__(
        self,
        service: LyricsResolutionService,
        publisher: StatePublisher,
        settings: Settings,
        clock: Clock = utc_now,
    ) -> None:
        self._service = service
        self._publisher = publisher
        self._settings = settings
        self._clock = clock

    async def prefetch(
        self, metadata: RawMetadata | None, reason: str | None = None
    ) -> PrefetchEvent:
        """Resolve lyrics for upcoming-track metadata ahead of time.

        Never raises: lookup failures are reported as an ``error`` event.

        Args:
            metadata: Raw metadata of the upcoming track.
            reason: Overrides the skip reason when the feature is disabled
                or metadata is missing.

        Returns:
            The last event published.
        """
        enabled = self._settings.lyrics_enabled
        if not enabled or metadata is None or not has_track_metadata(metadata):
            default = (
                SkipReason.MISSING_METADATA if enabled else SkipReason.DISABLED
            )
            return self._emit(
                PrefetchEvent(status=PrefetchStatus.SKIPPED, reason=reason or default)
            )

        source = track_source(metadata)
        if source not in self._settings.lyrics.supported_sources:
            return self._emit(
                PrefetchEvent(
                    status=PrefetchStatus.SKIPPED,
                    reason=SkipReason.NOT_SUPPORTED_SOURCE,
                    track_source=source,
                )
            )

        signature = build_signature(metadata)
        if signature is None:
            return self._emit(
                PrefetchEvent(
                    status=PrefetchStatus.SKIPPED, reason=SkipReason.MISSING_SIGNATURE
                )
            )

        track_key = build_track_key(signature)
        if self._service.cached(track_key) is not None:
            return self._emit(
                PrefetchEvent(
                    status=PrefetchStatus.CACHED,
                    track_key=track_key,
                    signature=signature,
                )
            )

        started = self._clock()
        try:
            self._emit(
                PrefetchEvent(
                    status=PrefetchStatus.START,
                    track_key=track_key,
                    signature=signature,
                    started_at=to_epoch_ms(started),
                )
            )
            await self._service.resolve(
                signature,
                track_key,
                prefetch=PrefetchRequest(source=PREFETCH_SOURCE, started_at=started),
            )
        except Exception as e:
            logger.warning("lrclib.net prefetch failed for %s: %s", signature, e)
            return self._emit(
                PrefetchEvent(
                    status=PrefetchStatus.ERROR,
                    track_key=track_key,
                    signature=signature,
                    error=str(e) or type(e).__name__,
                )
            )

        return self._emit(
            PrefetchEvent(
                status=PrefetchStatus.DONE,
                track_key=track_key,
                signature=signature,
                started_at=to_epoch_ms(started),
                total_ms=elapsed_ms(started, self._clock()),
            )
        )

    def _emit(self, event: PrefetchEvent) -> PrefetchEvent:
        self._publisher.publish_prefetch(event)
        return event
