"""MCP protocol handlers for the image tools and resources.

This module wires :class:`~gemini_image_mcp.api.operations.ImageOperations`
and the content-serving directory into a low-level MCP ``Server``.

Handlers
--------
============================  ==========================================
MCP request                   Behaviour
============================  ==========================================
``tools/list``                ``generate_image`` and ``edit_image``
``tools/call``                Run the tool, return one JSON text block
``resources/list``            Images in the content-serving directory
``resources/read``            Base64 blob of one image
============================  ==========================================

Errors raised by a tool handler are turned into an error tool result by the
SDK, so the caller sees ``Failed to generate image: ...`` and friends
verbatim. Unknown tool names fail with ``Unknown tool: <name>``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents

from gemini_image_mcp import __version__
from gemini_image_mcp.api.models import EditImageRequest, GenerateImageRequest, tool_input_schema
from gemini_image_mcp.api.operations import ImageOperations
from gemini_image_mcp.api.resources import (
    RESOURCE_MIME_TYPE,
    list_image_resources,
    read_image_resource,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "gemini-image-mcp"

GENERATE_TOOL = "generate_image"
EDIT_TOOL = "edit_image"


class ImageToolHandlers:
    """Protocol-level handlers bound to one operations instance.

    Args:
        operations: Runs the generate/edit pipelines.
        images_dir: Content-serving directory exposed as resources.
    """

    def __init__(self, operations: ImageOperations, images_dir: Path) -> None:
        self.operations = operations
        self.images_dir = Path(images_dir)

    async def list_tools(self) -> list[types.Tool]:
        return [
            types.Tool(
                name=GENERATE_TOOL,
                description=(
                    "Generate an image with Google Gemini from a text prompt, optionally "
                    "guided by reference images. Saves to outputPath and returns a URL."
                ),
                inputSchema=tool_input_schema(GenerateImageRequest),
            ),
            types.Tool(
                name=EDIT_TOOL,
                description=(
                    "Edit an existing image with Google Gemini according to a prompt. "
                    "Keeps the source aspect ratio unless aspectRatio is given."
                ),
                inputSchema=tool_input_schema(EditImageRequest),
            ),
        ]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        """Dispatch a tool call and return the result as a JSON text block.

        Raises:
            ValueError: For an unknown tool name.
            ImageOperationError: When the operation fails.
        """
        arguments = arguments or {}
        if name == GENERATE_TOOL:
            result = await self.operations.generate(arguments)
        elif name == EDIT_TOOL:
            result = await self.operations.edit(arguments)
        else:
            raise ValueError(f"Unknown tool: {name}")

        return [types.TextContent(type="text", text=result.model_dump_json(by_alias=True, indent=2))]

    async def list_resources(self) -> list[types.Resource]:
        return [
            types.Resource(
                uri=resource.uri,
                name=resource.name,
                mimeType=resource.mime_type,
                description=resource.description,
            )
            for resource in list_image_resources(self.images_dir)
        ]

    async def read_resource(self, uri: Any) -> list[ReadResourceContents]:
        """Read one image resource.

        Raises:
            ResourceError: For a malformed URI or a missing file.
        """
        uri = str(uri)
        logger.debug(f"Reading resource {uri}")
        return [
            ReadResourceContents(
                content=read_image_resource(self.images_dir, uri),
                mime_type=RESOURCE_MIME_TYPE,
            )
        ]


def build_mcp_server(handlers: ImageToolHandlers) -> Server:
    """Create the MCP ``Server`` and register *handlers* on it."""
    server: Server = Server(SERVER_NAME, version=__version__)
    server.list_tools()(handlers.list_tools)
    # Arguments are validated by the request models, not the SDK.
    server.call_tool(validate_input=False)(handlers.call_tool)
    server.list_resources()(handlers.list_resources)
    server.read_resource()(handlers.read_resource)
    return server
