"""Base class for generative image providers.

Operations talk to the image backend through :class:`ImageProviderBase`.
A provider receives an ordered list of content items (encoded images and
prompt text, in the order the model should read them) plus the resolved
generation parameters, and returns the backend's raw response. Pulling the
image out of that response is left to
:func:`gemini_image_mcp.core.extraction.extract_image`, so providers stay
thin and fakes used in tests can return plain dicts.

Usage Example
-------------
    >>> provider = GeminiImageProvider(config)
    >>> response = await provider.generate_content(
    ...     [read_image_as_base64("/tmp/style.png"), "a lighthouse at dusk"],
    ...     aspect_ratio="16:9",
    ...     resolution="2K",
    ... )

See Also
--------
- GeminiImageProvider: google-genai implementation
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Union

from gemini_image_mcp.core.codec import EncodedImage

logger = logging.getLogger(__name__)

ContentItem = Union[EncodedImage, str]


class ImageProviderBase(ABC):
    """Abstract base class for image providers.

    Attributes
    ----------
    name : str
        Human-readable provider name
    description : str
        Brief description of the backend
    """

    name: str = "Base Image Provider"
    description: str = "Base class for image providers"

    @abstractmethod
    async def generate_content(
        self,
        contents: list[ContentItem],
        *,
        aspect_ratio: str | None = None,
        resolution: str | None = None,
    ) -> Any:
        """Send *contents* to the backend and return its raw response.

        Args:
            contents: Encoded images and prompt text, in model reading order.
            aspect_ratio: Resolved aspect ratio, or ``None`` to let the
                backend keep the source proportions.
            resolution: Resolved resolution, or ``None`` for the backend default.

        Returns
        -------
        Any
            Provider response tree (see ``extract_image``)

        Raises
        ------
        Exception
            Whatever the backend client raises; callers wrap it.
        """

    def get_provider_info(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description}
