"""Paged demo stream.

Each request streams one page of ticks starting after ``cursor`` and then
says goodbye. The goodbye's short retry makes an EventSource reconnect at
once, so a client that advances its cursor sees one endless stream.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime

from pydantic import BaseModel
from starlette.background import BackgroundTask
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from ..channel import EventChannel
from ..config import StreamerConfig
from ..events import Event
from ..response import SSEResponse

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 200


class Tick(BaseModel):
    """One demo event."""

    sequence: int
    at: datetime

    def sse_event(self) -> Event:
        return Event(data=self.model_dump(mode="json"), id=str(self.sequence), event="tick")


async def produce_ticks(
    channel: EventChannel[Tick], cursor: int, limit: int, interval: float
) -> None:
    """Send ``limit`` ticks after ``cursor``, then close the channel."""
    try:
        for sequence in range(cursor + 1, cursor + limit + 1):
            if interval:
                await asyncio.sleep(interval)
            await channel.send(Tick(sequence=sequence, at=datetime.now(UTC)))
    finally:
        await channel.close()


async def stop_producer(producer: asyncio.Task[None]) -> None:
    """Stop a producer whose stream has closed."""
    if not producer.done():
        producer.cancel()


def _int_param(request: Request, name: str, default: int) -> int:
    raw = request.query_params.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative")
    return value


async def tick_stream(request: Request) -> Response:
    """GET /stream/ticks?cursor=N&limit=M"""
    config: StreamerConfig = request.app.state.config
    try:
        cursor = _int_param(request, "cursor", 0)
        limit = _int_param(request, "limit", config.page_size)
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    limit = min(limit, MAX_PAGE_SIZE)

    channel: EventChannel[Tick] = EventChannel()
    producer = asyncio.create_task(
        produce_ticks(channel, cursor, limit, config.tick_interval)
    )
    logger.info(f"Streaming ticks {cursor + 1}..{cursor + limit}")

    return SSEResponse(
        channel,
        headers={"X-Accel-Buffering": "no"},  # Disable nginx buffering
        background=BackgroundTask(stop_producer, producer),
    )


tick_routes = [
    Route("/stream/ticks", tick_stream, methods=["GET"]),
]
