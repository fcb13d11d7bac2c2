"""Unit tests for EventChannel."""

from __future__ import annotations

import asyncio

import pytest

from sse_streamer.channel import ChannelClosedError, EventChannel
from sse_streamer.events import Event


class TestEventChannel:
    """Tests for the closable channel."""

    @pytest.mark.asyncio
    async def test_delivers_in_order_then_stops(self) -> None:
        channel: EventChannel[Event] = EventChannel()
        for i in range(3):
            await channel.send(Event(data=i))
        await channel.close()

        received = [event.data async for event in channel]

        assert received == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self) -> None:
        channel: EventChannel[Event] = EventChannel()
        await channel.close()
        await channel.close()

        assert channel.closed
        assert [e async for e in channel] == []

    @pytest.mark.asyncio
    async def test_exhausted_channel_stays_exhausted(self) -> None:
        channel: EventChannel[Event] = EventChannel()
        await channel.close()
        assert [e async for e in channel] == []

        with pytest.raises(StopAsyncIteration):
            await channel.__anext__()

    @pytest.mark.asyncio
    async def test_send_after_close_fails(self) -> None:
        channel: EventChannel[Event] = EventChannel()
        await channel.close()

        with pytest.raises(ChannelClosedError):
            await channel.send(Event(data=1))
        with pytest.raises(ChannelClosedError):
            channel.send_nowait(Event(data=1))

    @pytest.mark.asyncio
    async def test_reader_waits_for_producer(self) -> None:
        channel: EventChannel[Event] = EventChannel()

        async def produce() -> None:
            await asyncio.sleep(0.01)
            await channel.send(Event(data="late"))
            await channel.close()

        producer = asyncio.create_task(produce())
        received = [event.data async for event in channel]
        await producer

        assert received == ["late"]

    @pytest.mark.asyncio
    async def test_bounded_channel_applies_backpressure(self) -> None:
        channel: EventChannel[Event] = EventChannel(maxsize=1)
        await channel.send(Event(data=1))

        blocked = asyncio.create_task(channel.send(Event(data=2)))
        await asyncio.sleep(0)
        assert not blocked.done()

        assert (await channel.__anext__()).data == 1
        await asyncio.wait_for(blocked, timeout=1)
