"""Tests for LyricsEventBus."""

import json

import pytest
from nowlyrics.services.event_bus import LyricsEventBus


class TestLyricsEventBus:
    """Tests for subscription and delivery."""

    @pytest.mark.asyncio
    async def test_subscriber_receives_json_envelope(self) -> None:
        bus = LyricsEventBus()

        async with bus.subscribe() as queue:
            bus.emit("lyrics", {"status": "ok", "trackKey": "k"})
            message = json.loads(queue.get_nowait())

        assert message == {"event": "lyrics", "data": {"status": "ok", "trackKey": "k"}}

    @pytest.mark.asyncio
    async def test_unsubscribe_on_exit(self) -> None:
        bus = LyricsEventBus()

        async with bus.subscribe():
            assert bus.subscriber_count == 1

        assert bus.subscriber_count == 0
        bus.emit("lyrics", {})  # No subscribers, no error

    @pytest.mark.asyncio
    async def test_fan_out(self) -> None:
        bus = LyricsEventBus()

        async with bus.subscribe() as first, bus.subscribe() as second:
            bus.emit("lyrics-prefetch", {"status": "start"})

            assert first.qsize() == 1
            assert second.qsize() == 1

    @pytest.mark.asyncio
    async def test_drop_oldest_when_full(self) -> None:
        bus = LyricsEventBus()

        async with bus.subscribe() as queue:
            for i in range(bus.SUBSCRIBER_QUEUE_SIZE + 5):
                bus.emit("lyrics", {"n": i})

            assert queue.qsize() == bus.SUBSCRIBER_QUEUE_SIZE
            oldest = json.loads(queue.get_nowait())

        assert oldest["data"]["n"] == 5
