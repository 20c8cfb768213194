"""Publishing of now-playing and prefetch lyrics state."""

import logging

from nowlyrics.models.device import DeviceInfo
from nowlyrics.models.diagnostics import Diagnostics
from nowlyrics.models.enums import LyricsStatus
from nowlyrics.models.events import LYRICS_EVENT, LYRICS_PREFETCH_EVENT, PrefetchEvent
from nowlyrics.models.lyrics import LyricsPayload
from nowlyrics.models.track import TrackSignature
from nowlyrics.services.event_bus import EventPublisher

logger = logging.getLogger(__name__)


class StatePublisher:
    """Owns writes to ``DeviceInfo.lyrics`` and the events that follow them.

    A payload whose track key and status match what the device already
    shows is dropped, so polling that keeps hitting the same state (e.g.
    a non-tidal source) does not rebroadcast it every cycle.
    """

    def __init__(self, events: EventPublisher) -> None:
        self._events = events

    def publish(self, device: DeviceInfo, payload: LyricsPayload) -> bool:
        """Store and broadcast a now-playing payload.

        Returns:
            True if the payload was published, False if it was a repeat.
        """
        current = device.lyrics
        if (
            current is not None
            and current.track_key == payload.track_key
            and current.status == payload.status
        ):
            logger.debug(
                "Lyrics state unchanged (%s, %s)", payload.status, payload.track_key
            )
            return False

        device.lyrics = payload
        self._events.emit(LYRICS_EVENT, payload.to_event())
        logger.info("Lyrics: %s %s", payload.status, payload.track_key or "-")
        return True

    def clear(
        self,
        device: DeviceInfo,
        reason: LyricsStatus,
        signature: TrackSignature | None = None,
        track_key: str | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> bool:
        """Publish a lyrics-less state carrying ``reason`` as its status."""
        payload = LyricsPayload(
            status=reason,
            track_key=track_key,
            signature=signature,
            diagnostics=diagnostics,
        )
        return self.publish(device, payload)

    def publish_prefetch(self, event: PrefetchEvent) -> None:
        """Broadcast prefetch progress. Never touches device state."""
        self._events.emit(LYRICS_PREFETCH_EVENT, event.to_event())
        logger.info(
            "Lyrics prefetch: %s %s",
            event.status,
            event.track_key or event.reason or "-",
        )
