"""Event model.

An Event is one SSE message, independent of the wire. Anything that
implements ``sse_event()`` (the Eventable protocol) can be streamed.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Event(BaseModel):
    """The packet of data sent over the wire to a connected client.

    When ``error`` is set it takes precedence over everything else: the frame
    carries only the error text, and ``data``, ``id``, ``event`` and ``retry``
    are ignored.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    data: Any = None
    error: BaseException | None = None
    id: str = ""
    event: str = ""
    retry: int = Field(default=0, ge=0)  # milliseconds, 0 = omit

    @field_validator("id", "event")
    @classmethod
    def single_line(cls, value: str) -> str:
        # A line break would end the field early and split the frame.
        if "\r" in value or "\n" in value:
            raise ValueError("must not contain line breaks")
        return value

    def sse_event(self) -> Event:
        """Return the SSE form of this event, which is itself."""
        return self

    @classmethod
    def from_error(cls, error: BaseException) -> Event:
        """Build an error event."""
        return cls(error=error)


@runtime_checkable
class Eventable(Protocol):
    """An object that can be converted to an SSE event."""

    def sse_event(self) -> Event:
        """Return the SSE compatible form of the implementer."""
        ...


# Sent right after the preamble so the client knows to retry a dropped
# connection after one second.
HELLO_EVENT = Event(data="hello", event="open", retry=1000)

# Sent when the source is exhausted without cancellation. The short retry
# makes the client reconnect at once and ask for the next page, so paged
# results look like one endless stream.
GOODBYE_EVENT = Event(data="byebye", event="close", retry=10)
