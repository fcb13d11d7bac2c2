"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest
from starlette.datastructures import MutableHeaders

from sse_streamer.streamer import Connection


@pytest.fixture(scope="module")
def anyio_backend():
    """Configure anyio to use asyncio backend."""
    return "asyncio"


class PlainWriter:
    """In-memory ResponseWriter without flush support."""

    def __init__(self) -> None:
        self.headers = MutableHeaders()
        self.status_code: int | None = None
        self.headers_at_status: dict[str, str] | None = None
        self.ops: list[str] = []
        self._pending: list[bytes] = []
        self.chunks: list[bytes] = []

    def write_header(self, status_code: int) -> None:
        if self.status_code is not None:
            return
        self.status_code = status_code
        self.headers_at_status = dict(self.headers)
        self.ops.append(f"status:{status_code}")

    async def write(self, data: bytes) -> None:
        if self.status_code is None:
            self.write_header(200)
        self._pending.append(data)
        self.ops.append("write")

    @property
    def body(self) -> str:
        return b"".join(self.chunks + self._pending).decode("utf-8")


class RecordingWriter(PlainWriter):
    """In-memory ResponseWriter that records each flushed chunk."""

    async def flush(self) -> None:
        self.chunks.append(b"".join(self._pending))
        self._pending.clear()
        self.ops.append("flush")

    @property
    def frames(self) -> list[str]:
        """Flushed chunks as text, one per flush."""
        return [chunk.decode("utf-8") for chunk in self.chunks]


@pytest.fixture
def writer() -> RecordingWriter:
    return RecordingWriter()


@pytest.fixture
def plain_writer() -> PlainWriter:
    return PlainWriter()


@pytest.fixture
def conn(writer: RecordingWriter) -> Connection:
    return Connection(writer)
