"""Base64 image encoding helpers.

Reference and source images are sent to the provider as inline base64
payloads, and provider payloads come back the same way. The MIME type of a
file on disk is taken from its extension alone; file contents are never
inspected, so a mislabelled file is passed through with the wrong type.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from pathlib import Path

DEFAULT_MIME_TYPE = "image/png"

MIME_TYPES_BY_EXTENSION: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


@dataclass(frozen=True)
class EncodedImage:
    """A base64 image payload paired with its MIME type.

    Attributes:
        data: Base64-encoded image bytes.
        mime_type: Declared MIME type of the payload.
    """

    data: str
    mime_type: str = DEFAULT_MIME_TYPE

    def to_bytes(self) -> bytes:
        """Decode the payload back to raw image bytes."""
        return decode_base64(self.data)


def guess_mime_type(path: str | Path) -> str:
    """Return the image MIME type for *path* based on its extension."""
    return MIME_TYPES_BY_EXTENSION.get(Path(path).suffix.lower(), DEFAULT_MIME_TYPE)


def read_image_as_base64(path: str | Path) -> EncodedImage:
    """Read an image file and return it base64-encoded.

    Args:
        path: Path of the image to read.

    Returns:
        :class:`EncodedImage` with the file contents and the MIME type
        inferred from the extension (``image/png`` when unrecognized).

    Raises:
        FileNotFoundError: If *path* does not exist.
    """
    image_path = Path(path)
    if not image_path.exists():
        raise FileNotFoundError(f"Image not found: {image_path}")

    return EncodedImage(
        data=encode_base64(image_path.read_bytes()),
        mime_type=guess_mime_type(image_path),
    )


def encode_base64(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def decode_base64(data: str) -> bytes:
    return base64.b64decode(data)
