"""Closable event channel.

Lets a producer push events from its own task while a Streamer reads them.
Closing the channel is the graceful end-of-data signal: the reader drains
what was sent and then stops.

Usage:
    channel = EventChannel()
    asyncio.create_task(produce(channel))   # send(...) then close()
    await Streamer(channel).serve(conn)
"""

from __future__ import annotations

import asyncio
from typing import Generic, TypeVar

from .events import Eventable

T = TypeVar("T", bound=Eventable)

_CLOSED = object()


class ChannelClosedError(Exception):
    """Raised when sending on a closed channel."""


class EventChannel(Generic[T]):
    """An asyncio.Queue backed async iterator with an explicit close."""

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize)
        self._closed = False
        self._drained = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, item: T) -> None:
        """Queue an item, waiting for room if the channel is bounded."""
        if self._closed:
            raise ChannelClosedError("send on closed channel")
        await self._queue.put(item)

    def send_nowait(self, item: T) -> None:
        if self._closed:
            raise ChannelClosedError("send on closed channel")
        self._queue.put_nowait(item)

    async def close(self) -> None:
        """Mark end of data. Items already sent are still delivered."""
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_CLOSED)

    def __aiter__(self) -> EventChannel[T]:
        return self

    async def __anext__(self) -> T:
        if self._drained:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            self._drained = True
            raise StopAsyncIteration
        return item  # type: ignore[return-value]
