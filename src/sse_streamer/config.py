"""Runtime configuration.

Defaults can be overridden with environment variables:
    SSE_STREAMER_HOST           Host to bind to (default 127.0.0.1)
    SSE_STREAMER_PORT           Port to bind to (default 4097)
    SSE_STREAMER_LOG_LEVEL      Logging level name (default WARNING)
    SSE_STREAMER_PAGE_SIZE      Events per demo stream page (default 10)
    SSE_STREAMER_TICK_INTERVAL  Seconds between demo ticks (default 0.5)
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

ENV_PREFIX = "SSE_STREAMER_"


@dataclass
class StreamerConfig:
    """Server and demo stream settings."""

    host: str = "127.0.0.1"
    port: int = 4097
    log_level: str = "WARNING"

    # Demo stream
    page_size: int = 10
    tick_interval: float = 0.5

    @classmethod
    def from_env(cls) -> StreamerConfig:
        """Build config from SSE_STREAMER_* environment variables."""
        config = cls()

        def env(name: str) -> str | None:
            return os.environ.get(ENV_PREFIX + name)

        if (host := env("HOST")) is not None:
            config.host = host
        if (port := env("PORT")) is not None:
            config.port = int(port)
        if (log_level := env("LOG_LEVEL")) is not None:
            config.log_level = log_level.upper()
        if (page_size := env("PAGE_SIZE")) is not None:
            config.page_size = int(page_size)
        if (tick_interval := env("TICK_INTERVAL")) is not None:
            config.tick_interval = float(tick_interval)

        config.validate()
        return config

    def validate(self) -> None:
        """Raise ValueError on settings that cannot work."""
        if not 0 < self.port < 65536:
            raise ValueError(f"port out of range: {self.port}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be positive: {self.page_size}")
        if self.tick_interval < 0:
            raise ValueError(f"tick_interval must not be negative: {self.tick_interval}")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"unknown log level: {self.log_level}")


def configure_logging(level: str) -> None:
    """Send logs to stderr; stdout is left for command output."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
