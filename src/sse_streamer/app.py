"""SSE Streamer application.

Creates the Starlette ASGI application with all routes.

Routes:
- /health - Health check
- /stream/ticks - Paged demo event stream
"""

from __future__ import annotations

from starlette.applications import Starlette
from starlette.routing import Route

from .config import StreamerConfig
from .routes import health_routes, tick_routes


def create_app(config: StreamerConfig | None = None) -> Starlette:
    """Create the application.

    Args:
        config: Settings; read from the environment when omitted

    Returns:
        Configured Starlette application
    """
    routes: list[Route] = []
    routes.extend(health_routes)
    routes.extend(tick_routes)

    app = Starlette(routes=routes)
    app.state.config = config or StreamerConfig.from_env()
    return app
