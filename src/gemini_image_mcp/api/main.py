"""Gemini Image MCP server entry point.

This module starts the two halves of the server and ties their lifetimes
together:

- **MCP over stdio**: the ``generate_image`` / ``edit_image`` tools and the
  image resources (see :mod:`gemini_image_mcp.api.server`).
- **Static HTTP**: the content-serving directory at ``/images`` (see
  :mod:`gemini_image_mcp.api.static`).

Process state (configuration, provider, bound socket, uvicorn server) lives
in an :class:`AppContext` that is passed to the startup and shutdown
routines.

Lifecycle
---------
1. ``GEMINI_API_KEY`` is checked first; without it the process exits with
   status 1 before any port is bound.
2. The HTTP socket is bound (moving to the next port while busy) and the
   provider is created. Failures here exit with status 1.
3. The MCP session and the HTTP server run in one task group.
4. When the MCP client disconnects, the HTTP server is stopped and the
   process exits with status 0. SIGINT/SIGTERM close the HTTP listener and
   exit with status 0 as well.

Usage
-----
CLI (installed entry point)::

    gemini-image-mcp

Direct invocation::

    python -m gemini_image_mcp.api.main
"""

from __future__ import annotations

import logging
import os
import signal
import socket
import sys
from dataclasses import dataclass

import anyio
from mcp.server.stdio import stdio_server

from gemini_image_mcp import __version__
from gemini_image_mcp.api.operations import ImageOperations
from gemini_image_mcp.api.server import ImageToolHandlers, build_mcp_server
from gemini_image_mcp.api.static import (
    StaticFileServer,
    bind_socket,
    create_static_app,
    create_static_server,
)
from gemini_image_mcp.core.config import GeminiImageConfig, config
from gemini_image_mcp.core.provider import ImageProviderBase
from gemini_image_mcp.core.publisher import ImagePublisher

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Mutable process state shared by startup and shutdown.

    Attributes:
        config: Loaded configuration.
        provider: Image provider, created during startup.
        operations: Generate/edit pipelines, created during startup.
        http_socket: Listening socket of the static server.
        http_server: uvicorn server serving ``/images``.
        port: Port actually bound (may differ from ``config.port``).
    """

    config: GeminiImageConfig
    provider: ImageProviderBase | None = None
    operations: ImageOperations | None = None
    http_socket: socket.socket | None = None
    http_server: StaticFileServer | None = None
    port: int | None = None

    @property
    def base_url(self) -> str:
        return f"http://{self.config.host}:{self.port or self.config.port}"


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr; stdout carries the MCP stream."""
    logging.basicConfig(
        level=level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def startup(ctx: AppContext, provider: ImageProviderBase | None = None) -> None:
    """Bind the HTTP socket and build the provider and operations.

    Args:
        ctx: Application context to populate.
        provider: Provider to use instead of the Gemini one (tests).

    Raises:
        OSError: If no port could be bound.
    """
    cfg = ctx.config
    cfg.images_dir.mkdir(parents=True, exist_ok=True)

    ctx.http_socket = bind_socket(cfg.host, cfg.port, cfg.port_retry_limit)
    ctx.port = ctx.http_socket.getsockname()[1]
    if ctx.port != cfg.port:
        logger.warning(f"Port {cfg.port} unavailable, using {ctx.port}")

    ctx.http_server = create_static_server(create_static_app(cfg.images_dir))

    if provider is None:
        from gemini_image_mcp.core.adapters.gemini import GeminiImageProvider

        provider = GeminiImageProvider(cfg)
    ctx.provider = provider
    ctx.operations = ImageOperations(provider, ImagePublisher(cfg.images_dir, ctx.base_url))

    logger.info(f"Static server listening on {ctx.base_url}/images")


def shutdown(ctx: AppContext) -> None:
    """Ask the HTTP server to stop and close its listening socket."""
    if ctx.http_server is not None:
        ctx.http_server.should_exit = True
    if ctx.http_socket is not None:
        ctx.http_socket.close()
        ctx.http_socket = None
        logger.info("Static server closed")


async def _stop_on_signal(ctx: AppContext, http_stopped: anyio.Event) -> None:
    with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:
        async for signum in signals:
            logger.info(f"Received {signal.Signals(signum).name}, shutting down...")
            if ctx.http_server is not None:
                ctx.http_server.should_exit = True
            with anyio.move_on_after(5):
                await http_stopped.wait()
            shutdown(ctx)
            # The stdio reader blocks in a worker thread that cannot be
            # cancelled, so leave without unwinding the event loop.
            logging.shutdown()
            os._exit(0)


async def serve(ctx: AppContext) -> None:
    """Run the MCP stdio session and the static server until the client leaves."""
    handlers = ImageToolHandlers(ctx.operations, ctx.config.images_dir)
    mcp_server = build_mcp_server(handlers)
    http_stopped = anyio.Event()

    async def serve_http() -> None:
        try:
            await ctx.http_server.serve(sockets=[ctx.http_socket])
        finally:
            http_stopped.set()

    async with anyio.create_task_group() as tg:
        tg.start_soon(serve_http)
        tg.start_soon(_stop_on_signal, ctx, http_stopped)

        async with stdio_server() as (read_stream, write_stream):
            logger.info(f"Gemini Image MCP server {__version__} running on stdio")
            await mcp_server.run(
                read_stream, write_stream, mcp_server.create_initialization_options()
            )

        logger.info("MCP client disconnected, shutting down...")
        ctx.http_server.should_exit = True
        await http_stopped.wait()
        tg.cancel_scope.cancel()


def run(cfg: GeminiImageConfig, provider: ImageProviderBase | None = None) -> int:
    """Start the server and return the process exit status.

    Returns:
        ``1`` when the API key is missing or startup fails, ``0`` after a
        clean shutdown.
    """
    if not cfg.gemini_api_key:
        logger.error("Error: GEMINI_API_KEY environment variable is required")
        return 1

    ctx = AppContext(config=cfg)
    try:
        startup(ctx, provider)
        anyio.run(serve, ctx)
    except Exception as exc:
        logger.error(f"Fatal error: {exc}", exc_info=True)
        return 1
    finally:
        shutdown(ctx)
    return 0


def main() -> None:
    """Console script entry point (``gemini-image-mcp``)."""
    configure_logging(config.log_level)
    sys.exit(run(config))


if __name__ == "__main__":
    main()
