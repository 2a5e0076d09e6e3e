"""Gemini Image MCP - AI image generation and editing for MCP clients."""

__version__ = "1.0.0"
