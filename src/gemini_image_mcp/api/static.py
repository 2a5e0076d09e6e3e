"""Static HTTP serving of the content-serving directory.

Generated images are served by a small FastAPI application that mounts the
directory at ``/images`` with ``StaticFiles``. The application runs under
uvicorn inside the MCP server's event loop.

The listening socket is bound here rather than by uvicorn so that a taken
port can be detected up front: binding starts at the configured port and
moves to ``port + 1``, ``port + 2``, ... until one is free or the retry limit
is reached. Serving URLs are built from the port that was actually bound.
"""

from __future__ import annotations

import contextlib
import errno
import logging
import socket
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from gemini_image_mcp import __version__

logger = logging.getLogger(__name__)


def create_static_app(images_dir: Path) -> FastAPI:
    """Build the FastAPI app serving *images_dir* at ``/images``."""
    app = FastAPI(
        title="Gemini Image MCP",
        description="Static serving of generated images.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.mount("/images", StaticFiles(directory=str(images_dir)), name="images")
    return app


def bind_socket(host: str, port: int, retry_limit: int = 10) -> socket.socket:
    """Bind a listening TCP socket, moving to the next port while busy.

    Args:
        host: Bind address.
        port: First port to try.
        retry_limit: Total number of ports tried.

    Returns:
        A bound, listening socket.

    Raises:
        OSError: If every candidate port is taken or binding fails for any
            reason other than the address being in use.
    """
    last_error: OSError | None = None
    last_port = min(port + retry_limit, 65536) - 1
    for candidate in range(port, last_port + 1):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, candidate))
        except OSError as exc:
            sock.close()
            if exc.errno != errno.EADDRINUSE:
                raise
            logger.warning(f"Port {candidate} is in use, trying {candidate + 1}")
            last_error = exc
            continue
        sock.listen(128)
        sock.setblocking(False)
        return sock

    raise OSError(
        errno.EADDRINUSE,
        f"No free port in range {port}-{last_port}",
    ) from last_error


class StaticFileServer(uvicorn.Server):
    """uvicorn server that leaves signal handling to the MCP process."""

    def install_signal_handlers(self) -> None:
        pass

    @contextlib.contextmanager
    def capture_signals(self):
        yield


def create_static_server(app: FastAPI, log_level: str = "warning") -> StaticFileServer:
    """Wrap *app* in a :class:`StaticFileServer` (serve with ``sockets=[...]``)."""
    server_config = uvicorn.Config(app, log_level=log_level.lower(), lifespan="off")
    return StaticFileServer(server_config)
