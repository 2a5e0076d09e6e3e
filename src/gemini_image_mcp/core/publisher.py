"""Dual-write persistence for generated images.

Every produced image is written twice:

- to the destination path the caller asked for, and
- to the content-serving directory as ``{id}.png``, where the static HTTP
  server and the MCP resource handlers can find it.

The id is derived from the destination filename so that repeated writes to
the same destination replace the same mirror file. The mirror always carries
a ``.png`` extension even when the provider returned JPEG or WEBP bytes;
clients that rely on the existing URLs depend on that naming.

Both writes overwrite in place. They are not transactional: if the mirror
write fails after the primary write succeeded, the primary file stays on
disk and the error propagates to the caller.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from gemini_image_mcp.core.codec import EncodedImage

logger = logging.getLogger(__name__)

_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9_-]")

MIRROR_EXTENSION = ".png"
SERVING_PREFIX = "/images"


def sanitize_id(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_-]`` with ``_``."""
    return _UNSAFE_ID_CHARS.sub("_", name)


def derive_id(destination: str | Path) -> str:
    """Return the artifact id for a destination path.

    Example:
        >>> derive_id("/a/b/my file!.png")
        'my_file_'
    """
    return sanitize_id(Path(destination).stem)


@dataclass(frozen=True)
class PublishedArtifact:
    """Where a published image ended up.

    Attributes:
        id: Sanitized identifier derived from the destination filename.
        primary_path: The caller-specified destination.
        mirror_path: Copy inside the content-serving directory.
        serving_url: HTTP URL of the mirror.
    """

    id: str
    primary_path: Path
    mirror_path: Path
    serving_url: str


class ImagePublisher:
    """Write images to their destination and the content-serving directory.

    Args:
        images_dir: Content-serving directory.
        base_url: HTTP origin of the static server, e.g.
            ``http://localhost:3001``.
    """

    def __init__(self, images_dir: Path, base_url: str) -> None:
        self.images_dir = Path(images_dir)
        self.base_url = base_url.rstrip("/")

    def mirror_path_for(self, artifact_id: str) -> Path:
        return self.images_dir / f"{artifact_id}{MIRROR_EXTENSION}"

    def url_for(self, artifact_id: str) -> str:
        return f"{self.base_url}{SERVING_PREFIX}/{artifact_id}{MIRROR_EXTENSION}"

    def publish(self, image: EncodedImage, destination: str | Path) -> PublishedArtifact:
        """Decode *image* and write it to *destination* and the mirror.

        Args:
            image: Base64 payload returned by the provider.
            destination: Caller-chosen output path.

        Returns:
            The resulting :class:`PublishedArtifact`.

        Raises:
            OSError: If a directory cannot be created or a write fails.
        """
        primary_path = Path(destination)
        artifact_id = derive_id(primary_path)
        raw = image.to_bytes()

        primary_path.parent.mkdir(parents=True, exist_ok=True)
        primary_path.write_bytes(raw)
        logger.info(f"Saved image to: {primary_path} ({len(raw)} bytes, {image.mime_type})")

        # Normally created at startup; the directory may have been removed since.
        self.images_dir.mkdir(parents=True, exist_ok=True)
        mirror_path = self.mirror_path_for(artifact_id)
        mirror_path.write_bytes(raw)
        logger.info(f"Mirrored image to: {mirror_path}")

        return PublishedArtifact(
            id=artifact_id,
            primary_path=primary_path,
            mirror_path=mirror_path,
            serving_url=self.url_for(artifact_id),
        )
