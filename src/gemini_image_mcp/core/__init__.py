"""Core image pipeline for the Gemini Image MCP server.

This package holds the pieces every image operation is built from:

- **Parameters** (parameters.py): aspect ratio and resolution normalization
- **Codec** (codec.py): base64 encoding and extension-based MIME types
- **Extraction** (extraction.py): first inline image in a provider response
- **Publisher** (publisher.py): dual write to the destination and the
  content-serving directory
- **Providers** (provider.py, adapters/): backend abstraction and the
  google-genai implementation
- **GeminiImageConfig** (config.py): Pydantic Settings configuration

Architecture Overview
---------------------
The MCP tools in :mod:`gemini_image_mcp.api` call into this package in a
fixed order: resolve parameters, encode input images, call the provider,
extract the image, publish it. None of the modules here know about MCP or
HTTP.
"""

from gemini_image_mcp.core.codec import EncodedImage, read_image_as_base64
from gemini_image_mcp.core.config import GeminiImageConfig, config
from gemini_image_mcp.core.errors import ImageOperationError, NoImageGeneratedError
from gemini_image_mcp.core.extraction import extract_image
from gemini_image_mcp.core.parameters import resolve_aspect_ratio, resolve_resolution
from gemini_image_mcp.core.provider import ImageProviderBase
from gemini_image_mcp.core.publisher import ImagePublisher, PublishedArtifact

__all__ = [
    "EncodedImage",
    "GeminiImageConfig",
    "ImageOperationError",
    "ImageProviderBase",
    "ImagePublisher",
    "NoImageGeneratedError",
    "PublishedArtifact",
    "config",
    "extract_image",
    "read_image_as_base64",
    "resolve_aspect_ratio",
    "resolve_resolution",
]
