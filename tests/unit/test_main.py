"""Tests for gemini_image_mcp.api.main: startup, shutdown and exit codes.

The stdio transport is replaced by in-memory streams where a session runs.
"""

import logging
import socket
from contextlib import asynccontextmanager

import anyio
import pytest

import gemini_image_mcp.api.main as main_module
from gemini_image_mcp.api.main import AppContext, run, serve, shutdown, startup
from gemini_image_mcp.api.operations import ImageOperations
from gemini_image_mcp.core.adapters.gemini import GeminiImageProvider
from gemini_image_mcp.core.config import GeminiImageConfig


@pytest.fixture
def keyless_config(temp_dir, images_dir, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    return GeminiImageConfig(_env_file=None, gemini_api_key=None, images_dir=images_dir)


@pytest.fixture
def ephemeral_bind(monkeypatch):
    """Replace bind_socket with one binding an OS-assigned port."""
    opened = []

    def bind(host, port, retry_limit=10):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.bind(("127.0.0.1", 0))
        sock.listen(8)
        opened.append(sock)
        return sock

    monkeypatch.setattr(main_module, "bind_socket", bind)
    yield opened
    for sock in opened:
        sock.close()


class TestRunWithoutKey:
    """A missing API key stops the process before anything is bound."""

    def test_returns_1(self, keyless_config, monkeypatch, caplog):
        def fail_bind(*args, **kwargs):
            raise AssertionError("bind_socket must not be called")

        monkeypatch.setattr(main_module, "bind_socket", fail_bind)

        with caplog.at_level(logging.ERROR):
            assert run(keyless_config) == 1
        assert "GEMINI_API_KEY environment variable is required" in caplog.text

    def test_main_exits_with_status_1(self, keyless_config, monkeypatch):
        monkeypatch.setattr(main_module, "config", keyless_config)

        with pytest.raises(SystemExit) as exc_info:
            main_module.main()
        assert exc_info.value.code == 1


class TestStartup:
    def test_populates_context(self, test_config, fake_provider, ephemeral_bind):
        ctx = AppContext(config=test_config)
        startup(ctx, fake_provider)

        try:
            assert ctx.http_socket is ephemeral_bind[0]
            assert ctx.port == ephemeral_bind[0].getsockname()[1]
            assert ctx.base_url == f"http://127.0.0.1:{ctx.port}"
            assert ctx.provider is fake_provider
            assert isinstance(ctx.operations, ImageOperations)
            assert ctx.operations.publisher.base_url == ctx.base_url
            assert ctx.http_server is not None
        finally:
            shutdown(ctx)

    def test_builds_gemini_provider_by_default(self, test_config, ephemeral_bind):
        ctx = AppContext(config=test_config)
        startup(ctx)
        try:
            assert isinstance(ctx.provider, GeminiImageProvider)
        finally:
            shutdown(ctx)

    def test_base_url_before_binding(self, test_config):
        assert AppContext(config=test_config).base_url == "http://127.0.0.1:3001"

    def test_bind_failure_exits_with_1(self, test_config, fake_provider, monkeypatch):
        def no_port(*args, **kwargs):
            raise OSError(98, "No free port in range 3001-3010")

        monkeypatch.setattr(main_module, "bind_socket", no_port)
        assert run(test_config, provider=fake_provider) == 1


class TestShutdown:
    def test_closes_socket_and_flags_server(self, test_config, fake_provider, ephemeral_bind):
        ctx = AppContext(config=test_config)
        startup(ctx, fake_provider)
        sock = ctx.http_socket

        shutdown(ctx)

        assert ctx.http_socket is None
        assert ctx.http_server.should_exit is True
        assert sock.fileno() == -1

    def test_idempotent(self, test_config):
        ctx = AppContext(config=test_config)
        shutdown(ctx)
        shutdown(ctx)
        assert ctx.http_socket is None


@asynccontextmanager
async def disconnected_stdio():
    """Stdio streams whose client has already gone away (stdin at EOF)."""
    read_send, read_receive = anyio.create_memory_object_stream(0)
    write_send, write_receive = anyio.create_memory_object_stream(10)
    await read_send.aclose()
    try:
        yield read_receive, write_send
    finally:
        await write_receive.aclose()


class TestServe:
    """Test serve() ending when the MCP client disconnects."""

    @pytest.mark.anyio
    async def test_returns_after_stdin_eof(
        self, test_config, fake_provider, ephemeral_bind, monkeypatch
    ):
        monkeypatch.setattr(main_module, "stdio_server", disconnected_stdio)
        ctx = AppContext(config=test_config)
        startup(ctx, fake_provider)

        try:
            # serve() only returns once the HTTP server has stopped.
            with anyio.fail_after(10):
                await serve(ctx)
            assert ctx.http_server.should_exit is True
        finally:
            shutdown(ctx)

        assert ctx.http_socket is None
