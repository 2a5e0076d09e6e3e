"""Locate the generated image inside a provider response.

A Gemini response is a loosely-typed tree::

    candidates[0].content.parts[i].inline_data.{data, mime_type}

Every level may be missing. The google-genai SDK returns pydantic objects
with snake_case attributes and raw ``bytes`` payloads, while the REST API (and
recorded fixtures) use plain dicts with camelCase keys and base64 text. The
helpers here read both shapes through a single accessor so the walk itself
stays flat.

Only the first candidate is inspected, and within it the first part that
carries non-empty inline data wins.
"""

from __future__ import annotations

import logging
from typing import Any

from gemini_image_mcp.core.codec import DEFAULT_MIME_TYPE, EncodedImage, encode_base64

logger = logging.getLogger(__name__)


def _field(node: Any, *names: str) -> Any:
    """Return the first present field of *node* among *names*.

    Mappings are read by key and everything else by attribute, so SDK
    objects and decoded JSON can be walked the same way.
    """
    if node is None:
        return None
    for name in names:
        if isinstance(node, dict):
            value = node.get(name)
        else:
            value = getattr(node, name, None)
        if value is not None:
            return value
    return None


def _as_base64(data: Any) -> str | None:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return encode_base64(bytes(data)) if len(data) else None
    if isinstance(data, str):
        return data or None
    return None


def extract_image(response: Any) -> EncodedImage | None:
    """Return the first inline image in the first candidate of *response*.

    Args:
        response: SDK response object or REST-shaped dict.

    Returns:
        :class:`EncodedImage` with base64 data and the declared MIME type
        (``image/png`` when the part declares none), or ``None`` when the
        response holds no image data. Absence is not an error here; the
        caller decides how to report it.
    """
    candidates = _field(response, "candidates") or []
    if not candidates:
        logger.debug("Provider response has no candidates")
        return None

    content = _field(candidates[0], "content")
    parts = _field(content, "parts") or []

    for index, part in enumerate(parts):
        inline = _field(part, "inline_data", "inlineData")
        data = _as_base64(_field(inline, "data"))
        if data is None:
            continue
        mime_type = _field(inline, "mime_type", "mimeType") or DEFAULT_MIME_TYPE
        logger.debug(f"Found inline image in part[{index}] (mime={mime_type})")
        return EncodedImage(data=data, mime_type=mime_type)

    logger.debug(f"No inline image data in {len(parts)} part(s) of first candidate")
    return None
