"""Client-side SSE consumer.

Reads one stream over HTTP and yields the events it carries. Used by the
``tail`` command to inspect a running server. Reconnection is left to the
caller.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field

import httpx

from .errors import StreamErrorEvent
from .events import Event
from .writer import ERROR_EVENT_TYPE

logger = logging.getLogger(__name__)


@dataclass
class ClientConfig:
    """Client connection settings."""

    timeout: float = 30.0
    headers: dict[str, str] = field(default_factory=dict)


class FrameParser:
    """Incremental parser for the SSE line grammar.

    Feed it lines without their terminators; it returns an Event each time a
    blank line completes a message.
    """

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self._data: list[str] = []
        self._event = ""
        self._id = ""
        self._retry = 0

    def feed(self, line: str) -> Event | None:
        if line == "":
            return self._dispatch()
        if line.startswith(":"):
            return None  # comment

        name, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]

        if name == "data":
            self._data.append(value)
        elif name == "event":
            self._event = value
        elif name == "id":
            if "\0" not in value:
                self._id = value
        elif name == "retry":
            if value.isascii() and value.isdigit():
                self._retry = int(value)
        else:
            logger.debug(f"Ignoring unknown SSE field: {name!r}")
        return None

    def _dispatch(self) -> Event | None:
        if not self._data:
            self._reset()
            return None

        text = "\n".join(self._data)
        if self._event == ERROR_EVENT_TYPE:
            event = Event(error=StreamErrorEvent(text))
        else:
            try:
                data = json.loads(text)
            except json.JSONDecodeError:
                logger.warning(f"Failed to parse SSE data: {text}")
                data = text
            event = Event(data=data, id=self._id, event=self._event, retry=self._retry)

        self._reset()
        return event


def parse_frames(lines: list[str]) -> list[Event]:
    """Parse complete SSE text, split into lines, into events."""
    parser = FrameParser()
    events = []
    for line in lines:
        event = parser.feed(line)
        if event is not None:
            events.append(event)
    return events


class SSEEventStream:
    """Async iterator over the events of one SSE response.

    Usage:
        async with SSEEventStream("http://localhost:4097/stream/ticks") as stream:
            async for event in stream:
                ...
    """

    def __init__(
        self,
        url: str,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.config = config or ClientConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._response: httpx.Response | None = None

    async def __aenter__(self) -> SSEEventStream:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _connect(self) -> httpx.Response:
        """Open the stream and check it is really SSE."""
        self._client = httpx.AsyncClient(
            transport=self._transport,
            timeout=httpx.Timeout(self.config.timeout, read=None),  # No read timeout for SSE
        )
        response = await self._client.send(
            self._client.build_request(
                "GET",
                self.url,
                headers={"Accept": "text/event-stream", **self.config.headers},
            ),
            stream=True,
        )
        if response.status_code != 200:
            body = (await response.aread()).decode("utf-8", errors="replace")
            await response.aclose()
            raise httpx.HTTPStatusError(
                f"{response.status_code} from {self.url}: {body}",
                request=response.request,
                response=response,
            )
        return response

    async def __aiter__(self) -> AsyncIterator[Event]:
        self._response = await self._connect()
        parser = FrameParser()
        async for line in self._response.aiter_lines():
            event = parser.feed(line)
            if event is not None:
                yield event

    async def close(self) -> None:
        """Close the response and the underlying client."""
        if self._response is not None:
            await self._response.aclose()
        if self._client is not None:
            await self._client.aclose()
