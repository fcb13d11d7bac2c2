"""Starlette integration.

SSEResponse runs a Streamer inside an ASGI app. The client going away
(``http.disconnect``) is the connection's cancellation signal.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterable, Callable, Mapping

from starlette.background import BackgroundTask
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from .errors import TransportError
from .events import Eventable
from .streamer import Connection, Streamer
from .transport import ASGIResponseWriter, BufferedResponseWriter

logger = logging.getLogger(__name__)

WriterFactory = Callable[[Send], BufferedResponseWriter]


class SSEResponse(Response):
    """Stream an async source of Eventable objects as Server-Sent Events.

    Args:
        source: Async iterable of Eventable objects
        headers: Extra response headers, sent alongside the SSE headers
        writer_factory: Builds the response writer from the ASGI send
            callable. Defaults to a flushing ASGIResponseWriter.
        background: Task to run after the stream closes
    """

    def __init__(
        self,
        source: AsyncIterable[Eventable],
        headers: Mapping[str, str] | None = None,
        writer_factory: WriterFactory = ASGIResponseWriter,
        background: BackgroundTask | None = None,
    ) -> None:
        self.source = source
        self.status_code = 200
        self.writer_factory = writer_factory
        self.background = background
        self.init_headers(headers)

    async def listen_for_disconnect(self, receive: Receive, conn: Connection) -> None:
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                logger.debug("Client disconnected")
                conn.cancel()
                break

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        writer = self.writer_factory(send)
        for key, value in self.raw_headers:
            writer.headers[key.decode("latin-1")] = value.decode("latin-1")

        conn = Connection(writer)
        listener = asyncio.ensure_future(self.listen_for_disconnect(receive, conn))
        try:
            await Streamer(self.source).serve(conn)
            if not conn.is_cancelled:
                try:
                    await writer.close()
                except TransportError as e:
                    logger.debug(f"Could not finish response: {e}")
        finally:
            listener.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await listener
            if self.background is not None:
                await self.background()
