"""Stream negotiation: headers, status and the hello event."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .errors import TransportUnsupportedError
from .events import HELLO_EVENT
from .transport import require_flusher, write_error
from .writer import write_event

if TYPE_CHECKING:
    from .streamer import Connection

logger = logging.getLogger(__name__)

STREAMING_NOT_SUPPORTED = "Streaming Not Supported"

SSE_HEADERS = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "Access-Control-Allow-Origin": "*",
}


async def write_preamble(conn: Connection) -> bool:
    """Open the stream on the connection.

    Returns:
        True if the stream is open and the hello event was sent. False if
        the transport cannot stream; a 400 response was written instead and
        the caller must stop.
    """
    writer = conn.writer
    try:
        require_flusher(writer)
    except TransportUnsupportedError as e:
        logger.warning(f"Refusing stream: {e}")
        await write_error(writer, STREAMING_NOT_SUPPORTED, 400)
        return False

    for name, value in SSE_HEADERS.items():
        writer.headers[name] = value
    writer.write_header(200)

    await write_event(conn, HELLO_EVENT)
    return True
