"""Shared pytest fixtures for Gemini Image MCP tests."""

import base64
import shutil
import tempfile
from pathlib import Path
from typing import Any, Generator

import pytest

from gemini_image_mcp.api.operations import ImageOperations
from gemini_image_mcp.core.config import GeminiImageConfig
from gemini_image_mcp.core.provider import ImageProviderBase
from gemini_image_mcp.core.publisher import ImagePublisher

# Not a decodable image; nothing in the pipeline inspects the bytes.
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"gemini-test-image"
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"gemini-test-jpeg"

BASE_URL = "http://localhost:3001"


def make_response(data: bytes = PNG_BYTES, mime_type: str | None = "image/png") -> dict:
    """Build a REST-shaped Gemini response carrying one text and one image part.

    Args:
        data: Raw image bytes to embed (base64-encoded in the response).
        mime_type: Declared MIME type, or ``None`` to omit it.

    Returns:
        Response dict as decoded from the Gemini JSON API.
    """
    inline: dict[str, Any] = {"data": base64.b64encode(data).decode("ascii")}
    if mime_type is not None:
        inline["mimeType"] = mime_type
    return {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"text": "Here is your image."},
                        {"inlineData": inline},
                    ]
                }
            }
        ]
    }


class FakeImageProvider(ImageProviderBase):
    """Provider that records calls and returns a canned response.

    Attributes:
        response: Value returned by every call.
        error: Exception raised by every call instead, when set.
        calls: One dict per call with ``contents``, ``aspect_ratio`` and
            ``resolution``.
    """

    name = "Fake"
    description = "In-memory provider for tests"

    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.response = make_response() if response is None else response
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def generate_content(self, contents, *, aspect_ratio=None, resolution=None):
        self.calls.append(
            {"contents": list(contents), "aspect_ratio": aspect_ratio, "resolution": resolution}
        )
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def anyio_backend() -> str:
    """Run ``@pytest.mark.anyio`` tests on asyncio only."""
    return "asyncio"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def images_dir(temp_dir: Path) -> Path:
    """Content-serving directory inside the temporary directory."""
    return temp_dir / "images"


@pytest.fixture
def test_config(temp_dir: Path, images_dir: Path) -> GeminiImageConfig:
    """Create a test configuration with temporary directories.

    Args:
        temp_dir: Temporary directory from fixture
        images_dir: Content-serving directory from fixture

    Returns:
        GeminiImageConfig instance for testing
    """
    return GeminiImageConfig(
        _env_file=None,
        gemini_api_key="test-key",
        gemini_model="mock-image-model",
        images_dir=images_dir,
        host="127.0.0.1",
        port=3001,
    )


@pytest.fixture
def publisher(images_dir: Path) -> ImagePublisher:
    return ImagePublisher(images_dir, BASE_URL)


@pytest.fixture
def fake_provider() -> FakeImageProvider:
    return FakeImageProvider()


@pytest.fixture
def operations(fake_provider: FakeImageProvider, publisher: ImagePublisher) -> ImageOperations:
    return ImageOperations(fake_provider, publisher)


@pytest.fixture
def source_png(temp_dir: Path) -> Path:
    """A PNG file on disk usable as a reference or source image."""
    path = temp_dir / "inputs" / "source.png"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(PNG_BYTES)
    return path


@pytest.fixture
def source_jpeg(temp_dir: Path) -> Path:
    """A JPEG file on disk usable as a reference image."""
    path = temp_dir / "inputs" / "style.jpg"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(JPEG_BYTES)
    return path


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def jpeg_bytes() -> bytes:
    return JPEG_BYTES


@pytest.fixture
def response_factory():
    """Return :func:`make_response` for tests that need custom responses."""
    return make_response


@pytest.fixture
def provider_factory():
    """Return :class:`FakeImageProvider` for tests that need a custom provider."""
    return FakeImageProvider
