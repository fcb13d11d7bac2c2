"""Stream driver.

Owns one client connection: negotiates the stream, then forwards events
from the source until the source runs dry or the connection is cancelled.

    NEGOTIATING -> STREAMING -> CLOSED
    NEGOTIATING -> CLOSED                (negotiation failed)
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import TransportError
from .events import GOODBYE_EVENT, Event, Eventable
from .preamble import write_preamble
from .transport import ResponseWriter
from .writer import write_event

logger = logging.getLogger(__name__)

_EXHAUSTED = object()


class StreamState(str, Enum):
    """Lifecycle of a single stream."""

    NEGOTIATING = "negotiating"
    STREAMING = "streaming"
    CLOSED = "closed"


@dataclass
class Connection:
    """A client connection: the response plus its cancellation signal."""

    writer: ResponseWriter
    cancelled: asyncio.Event = field(default_factory=asyncio.Event)

    def cancel(self) -> None:
        """Signal that no more output should be produced."""
        self.cancelled.set()

    @property
    def is_cancelled(self) -> bool:
        return self.cancelled.is_set()


async def _next_item(iterator: AsyncIterator[Eventable]) -> Any:
    return await anext(iterator, _EXHAUSTED)


class Streamer:
    """Turns an async source of Eventable objects into an SSE response.

    Usage:
        streamer = Streamer(source)
        await streamer.serve(Connection(writer))

    A Streamer serves one connection; there is no re-entry once CLOSED.
    """

    def __init__(self, source: AsyncIterable[Eventable]) -> None:
        self._source = source
        self.state = StreamState.NEGOTIATING
        self.events_sent = 0

    async def serve(self, conn: Connection) -> None:
        """Run the stream until the source is exhausted or conn is cancelled."""
        if self.state is not StreamState.NEGOTIATING:
            raise RuntimeError(f"Streamer already {self.state.value}")

        iterator = aiter(self._source)
        try:
            if not await write_preamble(conn):
                return
            self.state = StreamState.STREAMING
            await self._stream(conn, iterator)
        except TransportError as e:
            logger.warning(f"Closing stream after transport failure: {e}")
        finally:
            self.state = StreamState.CLOSED
            await self._close_source(iterator)
            logger.debug(f"Stream closed after {self.events_sent} events")

    async def _stream(self, conn: Connection, iterator: AsyncIterator[Eventable]) -> None:
        cancel_waiter = asyncio.ensure_future(conn.cancelled.wait())
        pending: asyncio.Task[Any] | None = None
        try:
            while not conn.is_cancelled:
                pending = asyncio.ensure_future(_next_item(iterator))
                done, _ = await asyncio.wait(
                    {pending, cancel_waiter}, return_when=asyncio.FIRST_COMPLETED
                )
                if pending not in done:
                    break

                read, pending = pending, None
                try:
                    item = read.result()
                except Exception as e:
                    logger.warning(f"Event source failed, closing stream: {e!r}")
                    await write_event(conn, Event.from_error(e))
                    return

                if item is _EXHAUSTED:
                    await write_event(conn, GOODBYE_EVENT)
                    return

                await write_event(conn, item.sse_event())
                self.events_sent += 1

            logger.debug("Stream cancelled")
        finally:
            for task in (pending, cancel_waiter):
                if task is not None and not task.done():
                    task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await task

    async def _close_source(self, iterator: AsyncIterator[Eventable]) -> None:
        aclose = getattr(iterator, "aclose", None)
        if aclose is None:
            return
        try:
            await aclose()
        except Exception:
            logger.exception("Error closing event source")
