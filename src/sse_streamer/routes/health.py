"""Health check endpoint."""

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from .. import __version__


async def health_check(request: Request) -> JSONResponse:
    """Report liveness along with the service version."""
    return JSONResponse({"status": "ok", "service": "sse-streamer", "version": __version__})


health_routes = [
    Route("/health", health_check, methods=["GET"]),
]
