"""Image provider implementations."""

from gemini_image_mcp.core.adapters.gemini import GeminiImageProvider

__all__ = ["GeminiImageProvider"]
