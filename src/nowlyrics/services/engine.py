"""Now-playing lyrics pipeline."""

import logging

from nowlyrics.client import LrcLibClient
from nowlyrics.config import Settings
from nowlyrics.lib.signature import (
    build_signature,
    build_track_key,
    has_track_metadata,
    track_source,
)
from nowlyrics.models.device import DeviceInfo
from nowlyrics.models.diagnostics import Diagnostics
from nowlyrics.models.enums import CacheState, LyricsStatus
from nowlyrics.models.events import PrefetchEvent
from nowlyrics.models.track import TrackSignature
from nowlyrics.services.cache import LyricsResolutionService
from nowlyrics.services.prefetch import PrefetchCoordinator
from nowlyrics.services.publisher import StatePublisher
from nowlyrics.types import Clock, RawMetadata, utc_now

logger = logging.getLogger(__name__)


class LyricsEngine:
    """Keeps a device's lyrics state in step with what it is playing.

    The device polling layer calls update_now_playing() whenever the
    metadata changes and prefetch() when it learns the next track.
    Neither call raises.
    """

    def __init__(
        self,
        settings: Settings,
        service: LyricsResolutionService,
        publisher: StatePublisher,
        clock: Clock = utc_now,
        client: LrcLibClient | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            settings: Engine settings.
            service: Shared resolution service (cache + in-flight table).
            publisher: Publisher for lyrics events.
            clock: Function returning the current time (enables testing).
            client: HTTP client to close on aclose(), if the engine owns it.
        """
        self._settings = settings
        self._service = service
        self._publisher = publisher
        self._clock = clock
        self._client = client
        self._prefetcher = PrefetchCoordinator(service, publisher, settings, clock)

    @property
    def service(self) -> LyricsResolutionService:
        return self._service

    async def update_now_playing(self, device: DeviceInfo) -> None:
        """Resolve and publish lyrics for the device's current track."""
        try:
            await self._update(device)
        except Exception:
            logger.exception("Lyrics update failed")
            self._publisher.clear(device, LyricsStatus.ERROR)

    async def prefetch(
        self, metadata: RawMetadata | None, reason: str | None = None
    ) -> PrefetchEvent:
        """Warm the cache for the next track. See PrefetchCoordinator."""
        return await self._prefetcher.prefetch(metadata, reason)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    async def _update(self, device: DeviceInfo) -> None:
        diagnostics = Diagnostics.build(
            self._clock(),
            device.metadata,
            device.state,
            self._settings.timeouts.metadata,
        )

        if not self._settings.lyrics_enabled:
            self._publisher.clear(
                device, LyricsStatus.DISABLED, diagnostics=diagnostics
            )
            return

        metadata = device.metadata
        if metadata is None or not has_track_metadata(metadata):
            self._publisher.clear(
                device, LyricsStatus.NO_METADATA, diagnostics=diagnostics
            )
            return

        if track_source(metadata) not in self._settings.lyrics.supported_sources:
            self._publisher.clear(
                device, LyricsStatus.NOT_SUPPORTED_SOURCE, diagnostics=diagnostics
            )
            return

        signature = build_signature(metadata)
        if signature is None:
            self._publisher.clear(
                device, LyricsStatus.MISSING_SIGNATURE, diagnostics=diagnostics
            )
            return

        track_key = build_track_key(signature)
        current = device.lyrics
        if (
            current is not None
            and current.track_key == track_key
            and current.status == LyricsStatus.OK
        ):
            return

        if (cached := self._service.cached(track_key)) is not None:
            diagnostics.cache = CacheState.MEMORY
            diagnostics.finish(self._clock())
            self._publisher.publish(device, cached.with_diagnostics(diagnostics))
            return

        diagnostics.cache = CacheState.MISS
        await self._resolve(device, signature, track_key, diagnostics)

    async def _resolve(
        self,
        device: DeviceInfo,
        signature: TrackSignature,
        track_key: str,
        diagnostics: Diagnostics,
    ) -> None:
        try:
            payload = await self._service.resolve(signature, track_key, diagnostics)
        except Exception:
            if self._track_changed(device, track_key):
                return
            logger.exception("Lyrics lookup failed for %s", signature)
            diagnostics.finish(self._clock())
            self._publisher.clear(
                device,
                LyricsStatus.ERROR,
                signature=signature,
                track_key=track_key,
                diagnostics=diagnostics.snapshot(),
            )
            return

        if self._track_changed(device, track_key):
            return

        diagnostics.finish(self._clock())
        # Requests discarded by the race may still record into the live
        # object after this point.
        snapshot = diagnostics.snapshot()
        self._publisher.publish(device, payload.with_diagnostics(snapshot))

    def _track_changed(self, device: DeviceInfo, track_key: str) -> bool:
        """Whether the device moved on while a lookup was awaited.

        The outcome stays cached either way; only the publish is dropped.
        """
        signature = build_signature(device.metadata)
        if signature is not None and build_track_key(signature) == track_key:
            return False
        logger.debug("Track changed during lookup, not publishing %s", track_key)
        return True
