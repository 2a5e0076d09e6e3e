"""Pydantic request and result models for the image tools.

These models define the argument schema of every MCP tool. The server
publishes their JSON schema as the tool ``inputSchema`` and validates
incoming arguments with them before any provider call is made.

Field names follow the camelCase wire format (``outputPath``,
``referenceImages``) through aliases; Python code uses the snake_case
attribute names.

Models
------
GenerateImageRequest
    Arguments of the ``generate_image`` tool.
EditImageRequest
    Arguments of the ``edit_image`` tool.
GenerateImageResult
    JSON payload returned by ``generate_image``.
EditImageResult
    JSON payload returned by ``edit_image``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must be a non-empty string")
    return value


def _require_absolute(value: str) -> str:
    _require_text(value)
    if not Path(value).is_absolute():
        raise ValueError(f"must be an absolute path, got {value!r}")
    return value


class _ToolModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class GenerateImageRequest(_ToolModel):
    """Arguments for the ``generate_image`` tool.

    Attributes:
        prompt: Description of the image to generate.
        output_path: Absolute path the image is written to.
        reference_images: Absolute paths of style/content reference images,
            sent to the model ahead of the prompt in the given order.
        aspect_ratio: Explicit ratio (``16:9``) or preset name (``hero``).
            Defaults to ``1:1``.
        resolution: ``1K``, ``2K`` or ``4K`` (case-insensitive). Defaults to
            ``1K``.
    """

    prompt: str = Field(
        ...,
        description="The text prompt describing the image to generate.",
    )
    output_path: str = Field(
        ...,
        alias="outputPath",
        description="Absolute file path where the generated image is saved.",
    )
    reference_images: list[str] = Field(
        default_factory=list,
        alias="referenceImages",
        description="Optional absolute paths of reference images for style or content.",
    )
    aspect_ratio: str | None = Field(
        default=None,
        alias="aspectRatio",
        description=(
            "Aspect ratio (1:1, 2:3, 3:2, 3:4, 4:3, 4:5, 5:4, 9:16, 16:9, 21:9) or preset "
            "(hero, square, portrait, landscape, banner, mobile). Defaults to 1:1."
        ),
    )
    resolution: str | None = Field(
        default=None,
        description="Output resolution: 1K, 2K or 4K. Defaults to 1K.",
    )

    @field_validator("prompt")
    @classmethod
    def check_prompt(cls, value: str) -> str:
        return _require_text(value)

    @field_validator("output_path")
    @classmethod
    def check_output_path(cls, value: str) -> str:
        return _require_absolute(value)


class EditImageRequest(_ToolModel):
    """Arguments for the ``edit_image`` tool.

    Attributes:
        prompt: Editing instruction.
        source_image: Absolute path of the image to edit; must exist.
        output_path: Absolute path the edited image is written to.
        aspect_ratio: Optional ratio or preset. When omitted the source
            image's proportions are kept.
        resolution: ``1K``, ``2K`` or ``4K``. Defaults to ``1K``.
    """

    prompt: str = Field(
        ...,
        description="Instructions describing how to edit the image.",
    )
    source_image: str = Field(
        ...,
        alias="sourceImage",
        description="Absolute path of the image to edit.",
    )
    output_path: str = Field(
        ...,
        alias="outputPath",
        description="Absolute file path where the edited image is saved.",
    )
    aspect_ratio: str | None = Field(
        default=None,
        alias="aspectRatio",
        description="Optional aspect ratio or preset. Omit to preserve the source aspect ratio.",
    )
    resolution: str | None = Field(
        default=None,
        description="Output resolution: 1K, 2K or 4K. Defaults to 1K.",
    )

    @field_validator("prompt")
    @classmethod
    def check_prompt(cls, value: str) -> str:
        return _require_text(value)

    @field_validator("source_image", "output_path")
    @classmethod
    def check_paths(cls, value: str) -> str:
        return _require_absolute(value)


class GenerateImageResult(_ToolModel):
    """Result of ``generate_image``, serialised as ``{path, url, aspectRatio, resolution}``."""

    path: str
    url: str
    aspect_ratio: str = Field(..., alias="aspectRatio")
    resolution: str


class EditImageResult(_ToolModel):
    """Result of ``edit_image``, serialised as ``{path, sourceImage, aspectRatio, resolution}``.

    ``aspectRatio`` is the literal ``"preserved"`` when the caller did not
    ask for one.
    """

    path: str
    source_image: str = Field(..., alias="sourceImage")
    aspect_ratio: str = Field(..., alias="aspectRatio")
    resolution: str


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic error into ``field: message`` pairs.

    Example:
        ``outputPath: Field required; prompt: Value error, must be a non-empty string``
    """
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "arguments"
        problems.append(f"{location}: {error['msg']}")
    return "; ".join(problems)


def tool_input_schema(model: type[BaseModel]) -> dict:
    """JSON schema for a request model, using the camelCase wire names."""
    return model.model_json_schema(by_alias=True)
