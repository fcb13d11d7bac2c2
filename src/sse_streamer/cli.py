"""SSE Streamer CLI.

Usage:
    sse-streamer serve                        # Run the demo server
    sse-streamer serve --port 8080            # Custom port
    sse-streamer tail URL                     # Print events from a stream
    sse-streamer tail URL --limit 5 --json    # First 5 events as JSON lines
    sse-streamer --health                     # Check server health
"""

from __future__ import annotations

import asyncio
import json
import sys

import click
import httpx

from .client import SSEEventStream
from .config import StreamerConfig, configure_logging
from .events import Event
from .writer import to_json


@click.group(invoke_without_command=True)
@click.option("--health", "health_check", is_flag=True, help="Check server health and exit")
@click.option("--health-url", default="http://localhost:4097", help="Server URL for health check")
@click.option("--log-level", default=None, help="Logging level (overrides SSE_STREAMER_LOG_LEVEL)")
@click.pass_context
def main(
    ctx: click.Context, health_check: bool, health_url: str, log_level: str | None
) -> None:
    """SSE Streamer - stream events to EventSource clients."""
    try:
        config = StreamerConfig.from_env()
        if log_level:
            config.log_level = log_level.upper()
            config.validate()
    except ValueError as e:
        raise click.UsageError(f"Invalid configuration: {e}") from e

    configure_logging(config.log_level)
    ctx.obj = config

    if ctx.invoked_subcommand is not None:
        return

    if health_check:
        _do_health_check(health_url)
        return

    click.echo(ctx.get_help())


def _do_health_check(url: str) -> None:
    """Check server health."""

    async def check() -> None:
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(f"{url}/health")
                if response.status_code == 200:
                    data = response.json()
                    click.echo(f"Server is healthy: {data}")
                else:
                    click.echo(f"Server returned {response.status_code}", err=True)
                    sys.exit(1)
        except httpx.ConnectError:
            click.echo(f"Cannot connect to server at {url}", err=True)
            sys.exit(1)

    asyncio.run(check())


@main.command()
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.pass_obj
def serve(config: StreamerConfig, host: str | None, port: int | None, reload: bool) -> None:
    """Run the HTTP server."""
    import uvicorn

    host = host or config.host
    port = port or config.port

    click.echo(f"Starting SSE streamer on http://{host}:{port}", err=True)
    click.echo(f"  Demo stream: http://{host}:{port}/stream/ticks", err=True)
    click.echo("Press Ctrl+C to stop", err=True)

    uvicorn.run(
        "sse_streamer.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=config.log_level.lower(),
    )


def format_event(event: Event) -> str:
    """Format an event for display."""
    if event.error is not None:
        return f"[err] {event.error}"
    label = event.event or "message"
    prefix = f"[{label}]" if not event.id else f"[{label} #{event.id}]"
    return f"{prefix} {to_json(event.data)}"


def event_to_dict(event: Event) -> dict:
    """Event as a JSON friendly dict."""
    if event.error is not None:
        return {"event": "err", "error": str(event.error)}
    result: dict = {"data": event.data}
    if event.id:
        result["id"] = event.id
    if event.event:
        result["event"] = event.event
    if event.retry:
        result["retry"] = event.retry
    return result


@main.command()
@click.argument("url")
@click.option("--limit", default=None, type=int, help="Stop after this many events")
@click.option("--json", "as_json", is_flag=True, help="Print events as JSON lines")
def tail(url: str, limit: int | None, as_json: bool) -> None:
    """Print events from an SSE endpoint until it closes."""

    async def run() -> None:
        count = 0
        async with SSEEventStream(url) as stream:
            async for event in stream:
                if as_json:
                    click.echo(json.dumps(event_to_dict(event)))
                else:
                    click.echo(format_event(event))
                count += 1
                if limit is not None and count >= limit:
                    break

    try:
        asyncio.run(run())
    except httpx.HTTPStatusError as e:
        click.echo(f"Stream refused: {e}", err=True)
        sys.exit(1)
    except httpx.RequestError as e:
        click.echo(f"Cannot connect to {url}: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nStopped", err=True)


if __name__ == "__main__":
    main()
