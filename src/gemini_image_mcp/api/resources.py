"""Content-serving directory helpers for the MCP resource handlers.

This module keeps the file-system side of resource listing and reading out
of ``gemini_image_mcp.api.server`` so the MCP handlers only deal with protocol
types while the directory logic stays testable as a small unit.

The directory is the mirror written by every publish; users may also drop
files into it by hand. Listing simply reflects what is on disk:

- only files with an image extension (png, jpg, jpeg, gif, webp) are listed
- each file is exposed as ``images/{filename}``
- every entry is declared as ``image/png``, whatever its real format
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote

RESOURCE_SCHEME = "gemini-image"
RESOURCE_PREFIX = "images/"
RESOURCE_MIME_TYPE = "image/png"

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp")

# Accepts both the bare form and the scheme-qualified form the MCP SDK needs:
#   images/cat.png
#   gemini-image://images/cat.png
_RESOURCE_URI = re.compile(
    rf"^(?:{re.escape(RESOURCE_SCHEME)}://)?images/([^/\\]+\.(?:png|jpg|jpeg|gif|webp))$",
    re.IGNORECASE,
)


class ResourceError(Exception):
    """A resource URI could not be resolved to a readable image."""


@dataclass(frozen=True)
class ImageResource:
    """One listed image.

    Attributes:
        uri: Scheme-qualified resource URI.
        name: Filename inside the content-serving directory.
        mime_type: Declared MIME type (always ``image/png``).
        description: Human-readable description.
    """

    uri: str
    name: str
    mime_type: str = RESOURCE_MIME_TYPE
    description: str = ""


def resource_uri(filename: str) -> str:
    return f"{RESOURCE_SCHEME}://{RESOURCE_PREFIX}{filename}"


def list_image_resources(images_dir: Path) -> list[ImageResource]:
    """List image files in *images_dir*, sorted by filename.

    Args:
        images_dir: Content-serving directory.

    Returns:
        One :class:`ImageResource` per image file; an empty list when the
        directory does not exist.
    """
    if not images_dir.is_dir():
        return []

    resources = []
    for path in sorted(images_dir.iterdir()):
        if not path.is_file() or path.suffix.lower() not in IMAGE_EXTENSIONS:
            continue
        resources.append(
            ImageResource(
                uri=resource_uri(path.name),
                name=path.name,
                description=f"Generated image: {path.name}",
            )
        )
    return resources


def resolve_resource_path(images_dir: Path, uri: str) -> Path:
    """Map a resource URI onto a file inside *images_dir*.

    Raises:
        ResourceError: If the URI does not match ``images/<name>.<ext>`` or
            the file does not exist.
    """
    match = _RESOURCE_URI.match(uri)
    if not match:
        raise ResourceError(f"Invalid resource URI: {uri}")

    filename = unquote(match.group(1))
    if "/" in filename or "\\" in filename:
        raise ResourceError(f"Invalid resource URI: {uri}")

    path = images_dir / filename
    if not path.is_file():
        raise ResourceError(f"Resource not found: {uri}")
    return path


def read_image_resource(images_dir: Path, uri: str) -> bytes:
    """Return the raw bytes of the image behind *uri*.

    The MCP SDK base64-encodes binary resource contents into a blob.
    """
    return resolve_resource_path(images_dir, uri).read_bytes()
