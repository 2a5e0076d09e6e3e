"""Configuration management for the Gemini Image MCP server.

This module provides centralized configuration management using Pydantic Settings.
Configuration is loaded from plain environment variables (no prefix) so the
server can be dropped into an MCP client configuration with nothing more than
``GEMINI_API_KEY`` set.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (``GEMINI_API_KEY``, ``PORT``, ``IMAGES_DIR``, ...)
2. .env file in the working directory
3. Default values defined in GeminiImageConfig

Example .env file:
    GEMINI_API_KEY=your-key
    PORT=3001
    IMAGES_DIR=/var/lib/gemini-image-mcp/images

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time and
is what the ``gemini-image-mcp`` entry point uses. The API key is optional at
this level; the entry point refuses to start without it.

Directory Management
--------------------
The configuration creates the content-serving directory (``images_dir``) on
initialization. Generated images are mirrored there and served over HTTP at
``/images`` and as MCP resources.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiImageConfig(BaseSettings):
    """Main configuration for the Gemini Image MCP server.

    Attributes
    ----------
    Provider Settings:
        gemini_api_key : str | None
            Google Gemini API key (required to start the server)
        gemini_model : str
            Gemini model used for both generation and editing

    HTTP Settings:
        host : str
            Bind address for the static server, also used in serving URLs
        port : int
            Preferred port for the static server (1-65535)
        port_retry_limit : int
            How many consecutive ports to try when the preferred one is taken

    Paths:
        images_dir : Path
            Content-serving directory mirrored by every publish

    Logging:
        log_level : str
            Root log level for the stderr handler

    Examples
    --------
        >>> from gemini_image_mcp.core.config import config
        >>> config.port
        3001

        >>> custom = GeminiImageConfig(images_dir="/tmp/images", port=4000)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Provider settings
    gemini_api_key: str | None = Field(
        default=None,
        description="Google Gemini API key (GEMINI_API_KEY)",
    )
    gemini_model: str = Field(
        default="gemini-3-pro-image-preview",
        description="Gemini image model used for generate and edit",
    )

    # HTTP settings
    host: str = Field(
        default="localhost",
        description="Static server bind address and serving URL host",
    )
    port: int = Field(
        default=3001,
        description="Preferred static server port",
        ge=1,
        le=65535,
    )
    port_retry_limit: int = Field(
        default=10,
        description="Number of consecutive ports tried on bind conflict",
        ge=1,
        le=100,
    )

    # Paths
    images_dir: Path = Field(
        default=Path("images"),
        description="Content-serving directory for generated images",
    )

    log_level: str = Field(
        default="INFO",
        description="Log level for the stderr handler",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the content-serving directory.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        # parents=True / exist_ok=True keeps this safe to call repeatedly
        self.images_dir.mkdir(parents=True, exist_ok=True)


# Global configuration instance
# Loaded from environment variables and .env on import; the entry point
# validates that GEMINI_API_KEY is present before starting anything.
config = GeminiImageConfig()
