"""Frame writer.

Renders one Event into the SSE wire grammar and pushes it to the client:

    retry: <integer>      (omitted if zero)
    id: <string>          (omitted if empty)
    event: <string>       (omitted if empty)
    data: <json>          (always present)
    <blank line>

Error events render as ``event: err`` followed by the plain error text.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any

import pydantic_core

from .errors import SerializationError
from .events import Event
from .transport import require_flusher

if TYPE_CHECKING:
    from .streamer import Connection

logger = logging.getLogger(__name__)

ERROR_EVENT_TYPE = "err"

# SSE ends a line at CRLF, a lone CR or a lone LF.
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def to_json(value: Any) -> str:
    """Encode a payload as compact JSON.

    Raises:
        SerializationError: If the value cannot be encoded
    """
    try:
        # NaN and Infinity are not valid JSON.
        return json.dumps(
            pydantic_core.to_jsonable_python(value),
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (pydantic_core.PydanticSerializationError, TypeError, ValueError) as e:
        raise SerializationError(f"Cannot encode {type(value).__name__} payload: {e}") from e


def _encode_error(error: BaseException) -> str:
    # Each line of a multi-line message gets its own data field, which the
    # client joins back together with newlines.
    lines = [f"event: {ERROR_EVENT_TYPE}\n"]
    lines.extend(f"data: {line}\n" for line in _LINE_BREAK.split(str(error)))
    lines.append("\n")
    return "".join(lines)


def encode_event(event: Event) -> str:
    """Render an event as one SSE message.

    Raises:
        SerializationError: If the payload cannot be encoded
    """
    if event.error is not None:
        return _encode_error(event.error)

    lines = []
    if event.retry != 0:
        lines.append(f"retry: {event.retry}\n")
    if event.id != "":
        lines.append(f"id: {event.id}\n")
    if event.event != "":
        lines.append(f"event: {event.event}\n")
    lines.append(f"data: {to_json(event.data)}\n\n")
    return "".join(lines)


async def write_event(conn: Connection, event: Event) -> None:
    """Send an SSE compliant message over the connection and flush it.

    A payload that cannot be encoded is replaced by an error frame for that
    event only.

    Raises:
        TransportError: If writing or flushing fails
    """
    try:
        frame = encode_event(event)
    except SerializationError as e:
        event = Event.from_error(e)
        frame = encode_event(event)

    writer = conn.writer
    await writer.write(frame.encode("utf-8"))
    await require_flusher(writer).flush()

    if event.error is not None:
        logger.error(f"Stream error event: {event.error}", exc_info=event.error)
