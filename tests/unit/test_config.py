"""Tests for environment-driven configuration."""

import pytest

from sse_streamer.config import StreamerConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("HOST", "PORT", "LOG_LEVEL", "PAGE_SIZE", "TICK_INTERVAL"):
        monkeypatch.delenv(f"SSE_STREAMER_{name}", raising=False)


class TestStreamerConfig:
    """Test configuration defaults and overrides."""

    def test_defaults(self):
        config = StreamerConfig.from_env()
        assert config.host == "127.0.0.1"
        assert config.port == 4097
        assert config.log_level == "WARNING"
        assert config.page_size == 10
        assert config.tick_interval == 0.5

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("SSE_STREAMER_HOST", "0.0.0.0")
        monkeypatch.setenv("SSE_STREAMER_PORT", "8080")
        monkeypatch.setenv("SSE_STREAMER_LOG_LEVEL", "debug")
        monkeypatch.setenv("SSE_STREAMER_PAGE_SIZE", "3")
        monkeypatch.setenv("SSE_STREAMER_TICK_INTERVAL", "0")

        config = StreamerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.log_level == "DEBUG"
        assert config.page_size == 3
        assert config.tick_interval == 0.0

    @pytest.mark.parametrize(
        "name,value",
        [
            ("PORT", "not-a-port"),
            ("PORT", "70000"),
            ("PAGE_SIZE", "0"),
            ("TICK_INTERVAL", "-1"),
            ("LOG_LEVEL", "chatty"),
        ],
    )
    def test_invalid_values(self, monkeypatch, name, value):
        monkeypatch.setenv(f"SSE_STREAMER_{name}", value)

        with pytest.raises(ValueError):
            StreamerConfig.from_env()
