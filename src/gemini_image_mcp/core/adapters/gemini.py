"""Google Gemini image provider.

This module provides the provider for Gemini's native image models, which
return generated images inline in an ordinary ``generate_content`` response.
Both text-to-image generation and instruction-based editing go through the
same call: editing is generation with the source image placed ahead of the
instruction.

Gemini Specifics
----------------
- **Response modalities**: TEXT and IMAGE must both be requested; the model
  may answer with commentary parts alongside the image part.
- **Image config**: ``aspect_ratio`` (e.g. ``16:9``) and ``image_size``
  (``1K``, ``2K``, ``4K``). Fields left unset are omitted so the model can
  keep a source image's proportions during edits.
- **Inline data**: reference images are sent as raw bytes with their MIME
  type; the SDK handles the base64 transport encoding.

Usage Example
-------------
    >>> from gemini_image_mcp.core.adapters.gemini import GeminiImageProvider
    >>> from gemini_image_mcp.core.config import config
    >>>
    >>> provider = GeminiImageProvider(config)
    >>> response = await provider.generate_content(
    ...     ["a watercolor fox"], aspect_ratio="1:1", resolution="1K"
    ... )
"""

from __future__ import annotations

import logging
from typing import Any

from google import genai
from google.genai import types

from gemini_image_mcp.core.codec import EncodedImage
from gemini_image_mcp.core.config import GeminiImageConfig
from gemini_image_mcp.core.provider import ContentItem, ImageProviderBase

logger = logging.getLogger(__name__)

RESPONSE_MODALITIES = ["TEXT", "IMAGE"]


class GeminiImageProvider(ImageProviderBase):
    """Provider backed by the google-genai async client.

    Attributes
    ----------
    config : GeminiImageConfig
        Configuration holding the API key and model name
    model : str
        Gemini model used for every call
    client : genai.Client
        SDK client; calls go through ``client.aio``
    """

    name = "Gemini"
    description = "Google Gemini native image generation and editing"

    def __init__(self, config: GeminiImageConfig, client: genai.Client | None = None) -> None:
        """Initialize the Gemini provider.

        Args:
            config: Configuration object; ``gemini_api_key`` must be set
                unless *client* is supplied.
            client: Pre-built SDK client, mainly for tests.

        Raises:
            ValueError: If no client is given and the API key is missing.
        """
        self.config = config
        self.model = config.gemini_model

        if client is None:
            if not config.gemini_api_key:
                raise ValueError("GEMINI_API_KEY environment variable is required")
            client = genai.Client(api_key=config.gemini_api_key)
        self.client = client

        logger.info(f"Initialized {self.name} provider with model: {self.model}")

    @staticmethod
    def build_parts(contents: list[ContentItem]) -> list[types.Part]:
        """Convert content items to SDK parts, preserving order."""
        parts: list[types.Part] = []
        for item in contents:
            if isinstance(item, EncodedImage):
                parts.append(types.Part.from_bytes(data=item.to_bytes(), mime_type=item.mime_type))
            else:
                parts.append(types.Part.from_text(text=item))
        return parts

    @staticmethod
    def build_config(
        aspect_ratio: str | None = None, resolution: str | None = None
    ) -> types.GenerateContentConfig:
        """Build the request config, omitting image settings that are unset."""
        image_settings: dict[str, str] = {}
        if aspect_ratio:
            image_settings["aspect_ratio"] = aspect_ratio
        if resolution:
            image_settings["image_size"] = resolution

        return types.GenerateContentConfig(
            response_modalities=RESPONSE_MODALITIES,
            image_config=types.ImageConfig(**image_settings) if image_settings else None,
        )

    async def generate_content(
        self,
        contents: list[ContentItem],
        *,
        aspect_ratio: str | None = None,
        resolution: str | None = None,
    ) -> Any:
        logger.info(
            f"Calling {self.model} with {len(contents)} content item(s) "
            f"(aspect_ratio={aspect_ratio or 'source'}, resolution={resolution or 'default'})"
        )
        return await self.client.aio.models.generate_content(
            model=self.model,
            contents=self.build_parts(contents),
            config=self.build_config(aspect_ratio, resolution),
        )
