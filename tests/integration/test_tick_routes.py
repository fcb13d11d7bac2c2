"""Integration tests for the demo application routes."""

from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from sse_streamer import __version__
from sse_streamer.app import create_app
from sse_streamer.client import parse_frames
from sse_streamer.config import StreamerConfig
from sse_streamer.events import GOODBYE_EVENT, HELLO_EVENT


@pytest.fixture
def client() -> TestClient:
    """Test client with instant ticks and small pages."""
    app = create_app(StreamerConfig(page_size=3, tick_interval=0))
    return TestClient(app)


def stream_events(client: TestClient, url: str):
    response = client.get(url)
    assert response.status_code == 200
    return parse_frames(response.text.split("\n"))


class TestHealthEndpoint:
    """Test health check endpoint."""

    def test_health_returns_ok(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["version"] == __version__


class TestTickStream:
    """Test the paged tick stream."""

    def test_default_page(self, client: TestClient):
        events = stream_events(client, "/stream/ticks")

        assert events[0] == HELLO_EVENT
        assert events[-1] == GOODBYE_EVENT
        ticks = events[1:-1]
        assert [e.id for e in ticks] == ["1", "2", "3"]
        assert all(e.event == "tick" for e in ticks)
        assert [e.data["sequence"] for e in ticks] == [1, 2, 3]

    def test_cursor_and_limit(self, client: TestClient):
        events = stream_events(client, "/stream/ticks?cursor=5&limit=2")

        assert [e.id for e in events[1:-1]] == ["6", "7"]

    def test_next_page_continues(self, client: TestClient):
        first = stream_events(client, "/stream/ticks")
        last_id = first[-2].id

        second = stream_events(client, f"/stream/ticks?cursor={last_id}")

        assert [e.id for e in second[1:-1]] == ["4", "5", "6"]

    def test_zero_limit_is_hello_then_goodbye(self, client: TestClient):
        events = stream_events(client, "/stream/ticks?limit=0")

        assert events == [HELLO_EVENT, GOODBYE_EVENT]

    def test_nginx_buffering_disabled(self, client: TestClient):
        response = client.get("/stream/ticks?limit=1")

        assert response.headers["x-accel-buffering"] == "no"

    @pytest.mark.parametrize("query", ["cursor=abc", "limit=-1", "cursor=1.5"])
    def test_invalid_parameters(self, client: TestClient, query: str):
        response = client.get(f"/stream/ticks?{query}")

        assert response.status_code == 400
        assert "error" in response.json()
