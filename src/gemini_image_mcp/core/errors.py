"""Exceptions raised by image operations."""

from __future__ import annotations

GENERATE_ERROR_PREFIX = "Failed to generate image"
EDIT_ERROR_PREFIX = "Failed to edit image"


class NoImageGeneratedError(RuntimeError):
    """The provider answered, but its response carried no image data."""

    def __init__(self, message: str = "No image was generated in the response") -> None:
        super().__init__(message)


class ImageOperationError(Exception):
    """An image operation failed.

    The message is the operation prefix followed by the underlying cause,
    e.g. ``Failed to edit image: Source image not found: /tmp/a.png``.

    Attributes:
        prefix: Operation-specific prefix.
        detail: Message of the underlying failure.
    """

    def __init__(self, prefix: str, detail: str) -> None:
        self.prefix = prefix
        self.detail = detail
        super().__init__(f"{prefix}: {detail}")
