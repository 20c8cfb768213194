"""Event bus fanning lyrics events out to real-time subscribers."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Protocol

from nowlyrics.models.events import EventMessage


class EventPublisher(Protocol):
    """Anything that can deliver a named event to viewers.

    The state publisher and prefetch coordinator only depend on this, so
    they can be driven by a socket server, the in-process event bus, or
    a recording fake in tests.
    """

    def emit(self, event: str, payload: dict[str, Any]) -> None: ...


class LyricsEventBus:
    """In-process event bus for ``lyrics`` and ``lyrics-prefetch`` events.

    Not thread-safe: subscribe() and emit() must run on the event loop
    thread. Each subscriber gets its own bounded queue of JSON messages
    shaped ``{"event", "data"}``.

    Backpressure is handled by drop-oldest: if a subscriber's queue is full,
    the oldest event is dropped to make room for the new one.
    """

    SUBSCRIBER_QUEUE_SIZE = 100

    def __init__(self) -> None:
        self._subscribers: list[asyncio.Queue[str]] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @asynccontextmanager
    async def subscribe(self) -> AsyncIterator[asyncio.Queue[str]]:
        """Subscribe to lyrics events via context manager."""
        queue: asyncio.Queue[str] = asyncio.Queue(maxsize=self.SUBSCRIBER_QUEUE_SIZE)
        self._subscribers.append(queue)
        try:
            yield queue
        finally:
            self._subscribers.remove(queue)

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        """Emit an event to all subscribers."""
        data = EventMessage(event=event, data=payload).model_dump_json()
        for queue in list(self._subscribers):
            self._safe_put(queue, data)

    def _safe_put(self, queue: asyncio.Queue[str], data: str) -> None:
        """Put data with drop-oldest backpressure."""
        try:
            queue.put_nowait(data)
        except asyncio.QueueFull:
            try:
                queue.get_nowait()  # Drop oldest
                queue.put_nowait(data)
            except asyncio.QueueEmpty:
                pass
