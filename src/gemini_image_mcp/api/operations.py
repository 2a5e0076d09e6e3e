"""Generate and edit operations behind the MCP tools.

Each operation runs the same pipeline:

1. Validate the raw tool arguments with the request model.
2. Resolve aspect ratio and resolution.
3. Encode reference/source images and assemble the content list, images
   first and prompt text last.
4. Call the provider.
5. Extract the first inline image from the response.
6. Publish it to the destination and the content-serving directory.
7. Shape the result payload.

Any failure along the way, validation included, is re-raised as an
:class:`~gemini_image_mcp.core.errors.ImageOperationError` carrying the
operation prefix. Nothing is retried.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

from pydantic import ValidationError

from gemini_image_mcp.api.models import (
    EditImageRequest,
    EditImageResult,
    GenerateImageRequest,
    GenerateImageResult,
    describe_validation_error,
)
from gemini_image_mcp.core.codec import EncodedImage, read_image_as_base64
from gemini_image_mcp.core.errors import (
    EDIT_ERROR_PREFIX,
    GENERATE_ERROR_PREFIX,
    ImageOperationError,
    NoImageGeneratedError,
)
from gemini_image_mcp.core.extraction import extract_image
from gemini_image_mcp.core.parameters import (
    resolve_aspect_ratio,
    resolve_edit_aspect_ratio,
    resolve_resolution,
)
from gemini_image_mcp.core.provider import ContentItem, ImageProviderBase
from gemini_image_mcp.core.publisher import ImagePublisher, PublishedArtifact

logger = logging.getLogger(__name__)

PRESERVED_ASPECT_RATIO = "preserved"

T = TypeVar("T")


async def _wrap_failures(prefix: str, run: Callable[[], Awaitable[T]]) -> T:
    """Await *run* and re-raise any failure with the operation prefix."""
    try:
        return await run()
    except ImageOperationError:
        raise
    except ValidationError as exc:
        raise ImageOperationError(prefix, describe_validation_error(exc)) from exc
    except Exception as exc:
        logger.error(f"{prefix}: {exc}", exc_info=True)
        raise ImageOperationError(prefix, str(exc) or exc.__class__.__name__) from exc


class ImageOperations:
    """Run image tools against a provider and publish the results.

    Args:
        provider: Backend that turns content into a response tree.
        publisher: Writes images to their destinations and the mirror.
    """

    def __init__(self, provider: ImageProviderBase, publisher: ImagePublisher) -> None:
        self.provider = provider
        self.publisher = publisher

    async def _render(
        self,
        contents: list[ContentItem],
        destination: str,
        *,
        aspect_ratio: str | None,
        resolution: str,
    ) -> PublishedArtifact:
        response = await self.provider.generate_content(
            contents, aspect_ratio=aspect_ratio, resolution=resolution
        )
        image = extract_image(response)
        if image is None:
            raise NoImageGeneratedError()
        return self.publisher.publish(image, destination)

    async def generate(self, arguments: dict[str, Any]) -> GenerateImageResult:
        """Generate a new image from a prompt and optional reference images.

        Args:
            arguments: Raw ``generate_image`` tool arguments.

        Returns:
            :class:`GenerateImageResult` for the published image.

        Raises:
            ImageOperationError: ``Failed to generate image: ...`` on any failure.
        """

        async def run() -> GenerateImageResult:
            request = GenerateImageRequest.model_validate(arguments)
            aspect_ratio = resolve_aspect_ratio(request.aspect_ratio)
            resolution = resolve_resolution(request.resolution)

            # Reference images lead so the model reads them as anchors for the prompt.
            contents: list[ContentItem] = [
                read_image_as_base64(path) for path in request.reference_images
            ]
            contents.append(request.prompt)

            logger.info(
                f"Generating image -> {request.output_path} "
                f"({aspect_ratio}, {resolution}, {len(request.reference_images)} reference(s))"
            )
            artifact = await self._render(
                contents,
                request.output_path,
                aspect_ratio=aspect_ratio,
                resolution=resolution,
            )
            return GenerateImageResult(
                path=str(artifact.primary_path),
                url=artifact.serving_url,
                aspect_ratio=aspect_ratio,
                resolution=resolution,
            )

        return await _wrap_failures(GENERATE_ERROR_PREFIX, run)

    async def edit(self, arguments: dict[str, Any]) -> EditImageResult:
        """Edit an existing image according to a prompt.

        Without an explicit aspect ratio the provider keeps the source
        proportions and the result reports ``"preserved"``.

        Args:
            arguments: Raw ``edit_image`` tool arguments.

        Returns:
            :class:`EditImageResult` for the published image.

        Raises:
            ImageOperationError: ``Failed to edit image: ...`` on any failure.
        """

        async def run() -> EditImageResult:
            request = EditImageRequest.model_validate(arguments)
            if not Path(request.source_image).exists():
                raise FileNotFoundError(f"Source image not found: {request.source_image}")

            aspect_ratio = resolve_edit_aspect_ratio(request.aspect_ratio)
            resolution = resolve_resolution(request.resolution)

            source: EncodedImage = read_image_as_base64(request.source_image)
            logger.info(
                f"Editing {request.source_image} -> {request.output_path} "
                f"({aspect_ratio or PRESERVED_ASPECT_RATIO}, {resolution})"
            )
            artifact = await self._render(
                [source, request.prompt],
                request.output_path,
                aspect_ratio=aspect_ratio,
                resolution=resolution,
            )
            return EditImageResult(
                path=str(artifact.primary_path),
                source_image=request.source_image,
                aspect_ratio=aspect_ratio or PRESERVED_ASPECT_RATIO,
                resolution=resolution,
            )

        return await _wrap_failures(EDIT_ERROR_PREFIX, run)
