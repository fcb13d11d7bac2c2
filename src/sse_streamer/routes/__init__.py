"""HTTP routes."""

from .health import health_routes
from .ticks import tick_routes

__all__ = ["health_routes", "tick_routes"]
