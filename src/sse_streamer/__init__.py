"""SSE Streamer.

Turns an async source of domain events into a Server-Sent Events response.
"""

from .channel import EventChannel
from .errors import (
    SerializationError,
    StreamError,
    StreamErrorEvent,
    TransportError,
    TransportUnsupportedError,
)
from .events import GOODBYE_EVENT, HELLO_EVENT, Event, Eventable
from .preamble import write_preamble
from .response import SSEResponse
from .streamer import Connection, Streamer, StreamState
from .transport import ASGIResponseWriter, BufferedResponseWriter, Flusher, ResponseWriter
from .writer import encode_event, write_event

__version__ = "0.1.0"

__all__ = [
    "ASGIResponseWriter",
    "BufferedResponseWriter",
    "Connection",
    "Event",
    "EventChannel",
    "Eventable",
    "Flusher",
    "GOODBYE_EVENT",
    "HELLO_EVENT",
    "ResponseWriter",
    "SSEResponse",
    "SerializationError",
    "StreamError",
    "StreamErrorEvent",
    "StreamState",
    "Streamer",
    "TransportError",
    "TransportUnsupportedError",
    "encode_event",
    "write_event",
    "write_preamble",
]
