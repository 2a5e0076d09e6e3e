"""Aspect ratio and resolution normalization.

Callers pass loosely-typed strings: a friendly preset name (``"hero"``), an
explicit ratio (``"16:9"``) or a resolution in any case (``"2k"``). These
helpers map them onto the values the Gemini image API accepts and fall back
to safe defaults instead of failing the operation. Fallbacks are logged as
warnings so the caller's mistake remains visible in the server log.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

DEFAULT_ASPECT_RATIO = "1:1"
DEFAULT_RESOLUTION = "1K"

ASPECT_RATIO_PRESETS: dict[str, str] = {
    "hero": "16:9",
    "square": "1:1",
    "portrait": "3:4",
    "landscape": "4:3",
    "banner": "21:9",
    "mobile": "9:16",
}

VALID_ASPECT_RATIOS: tuple[str, ...] = (
    "1:1",
    "2:3",
    "3:2",
    "3:4",
    "4:3",
    "4:5",
    "5:4",
    "9:16",
    "16:9",
    "21:9",
)

VALID_RESOLUTIONS: tuple[str, ...] = ("1K", "2K", "4K")


def resolve_aspect_ratio(value: str | None = None) -> str:
    """Resolve a preset name or explicit ratio to a supported aspect ratio.

    Args:
        value: Preset name (case-insensitive), explicit ratio, or ``None``.

    Returns:
        One of :data:`VALID_ASPECT_RATIOS`. Absent or unrecognized input
        yields :data:`DEFAULT_ASPECT_RATIO`.
    """
    if not value:
        return DEFAULT_ASPECT_RATIO

    preset = ASPECT_RATIO_PRESETS.get(value.lower())
    if preset:
        return preset

    if value in VALID_ASPECT_RATIOS:
        return value

    logger.warning(
        f"Invalid aspect ratio {value!r}, using {DEFAULT_ASPECT_RATIO} "
        f"(valid: {', '.join(VALID_ASPECT_RATIOS)}; presets: {', '.join(ASPECT_RATIO_PRESETS)})"
    )
    return DEFAULT_ASPECT_RATIO


def resolve_edit_aspect_ratio(value: str | None = None) -> str | None:
    """Resolve an aspect ratio for an edit, keeping absence as ``None``.

    Edits without an explicit ratio let the provider keep the source image's
    proportions, so nothing is defaulted here.
    """
    if not value:
        return None
    return resolve_aspect_ratio(value)


def resolve_resolution(value: str | None = None) -> str:
    """Resolve a resolution string (case-insensitive) to 1K, 2K or 4K.

    Args:
        value: Resolution such as ``"2k"`` or ``"4K"``, or ``None``.

    Returns:
        One of :data:`VALID_RESOLUTIONS`; :data:`DEFAULT_RESOLUTION` when the
        input is absent or unrecognized.
    """
    if not value:
        return DEFAULT_RESOLUTION

    normalized = value.upper()
    if normalized in VALID_RESOLUTIONS:
        return normalized

    logger.warning(
        f"Invalid resolution {value!r}, using {DEFAULT_RESOLUTION} "
        f"(valid: {', '.join(VALID_RESOLUTIONS)})"
    )
    return DEFAULT_RESOLUTION
