"""Host response abstraction.

The stream core only talks to a ResponseWriter: it sets headers, writes a
status and writes body bytes. Streaming additionally needs the Flusher
capability to push bytes to the client immediately.

Two ASGI implementations are provided:
- BufferedResponseWriter: holds the whole response until close()
- ASGIResponseWriter: flushes each chunk as its own body message
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from starlette.datastructures import MutableHeaders
from starlette.types import Send

from .errors import TransportError, TransportUnsupportedError

logger = logging.getLogger(__name__)


@runtime_checkable
class ResponseWriter(Protocol):
    """Protocol for the HTTP response a stream is written to."""

    headers: MutableHeaders

    def write_header(self, status_code: int) -> None:
        """Set the response status. Only the first call has an effect."""
        ...

    async def write(self, data: bytes) -> None:
        """Write body bytes."""
        ...


@runtime_checkable
class Flusher(Protocol):
    """Protocol for responses that can push buffered bytes immediately."""

    async def flush(self) -> None:
        """Send everything written so far to the client."""
        ...


def require_flusher(writer: ResponseWriter) -> Flusher:
    """Return the writer as a Flusher or raise TransportUnsupportedError."""
    if not isinstance(writer, Flusher):
        raise TransportUnsupportedError(f"{type(writer).__name__} cannot flush")
    return writer


async def write_error(writer: ResponseWriter, message: str, status_code: int) -> None:
    """Reply with a plain-text error message and the given status."""
    writer.headers["Content-Type"] = "text/plain; charset=utf-8"
    writer.headers["X-Content-Type-Options"] = "nosniff"
    writer.write_header(status_code)
    await writer.write(message.encode("utf-8"))


class BufferedResponseWriter:
    """ASGI response writer without flush support.

    Everything written is held in memory and sent as a single response when
    close() is called.
    """

    def __init__(self, send: Send) -> None:
        self._send = send
        self.headers = MutableHeaders()
        self.status_code: int | None = None
        self._buffer: list[bytes] = []
        self._started = False
        self._closed = False

    def write_header(self, status_code: int) -> None:
        if self.status_code is not None:
            logger.debug(f"Ignoring superfluous status {status_code}")
            return
        self.status_code = status_code

    async def write(self, data: bytes) -> None:
        if self._closed:
            raise TransportError("Write after close")
        if self.status_code is None:
            self.write_header(200)
        self._buffer.append(data)

    async def close(self) -> None:
        """Send whatever is left and end the response."""
        if self._closed:
            return
        self._closed = True
        await self._send_chunk(more_body=False)

    async def _start(self) -> None:
        if self._started:
            return
        if self.status_code is None:
            self.write_header(200)
        await self._safe_send(
            {
                "type": "http.response.start",
                "status": self.status_code,
                "headers": self.headers.raw,
            }
        )
        self._started = True

    async def _send_chunk(self, *, more_body: bool) -> None:
        await self._start()
        body = b"".join(self._buffer)
        self._buffer.clear()
        if not body and more_body:
            return
        await self._safe_send({"type": "http.response.body", "body": body, "more_body": more_body})

    async def _safe_send(self, message: dict) -> None:
        try:
            await self._send(message)
        except OSError as e:
            raise TransportError(f"Failed to send {message['type']}: {e}") from e


class ASGIResponseWriter(BufferedResponseWriter):
    """ASGI response writer that can flush, so it can carry a stream."""

    async def flush(self) -> None:
        if self._closed:
            raise TransportError("Flush after close")
        await self._send_chunk(more_body=True)
