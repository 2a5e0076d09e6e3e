"""Gemini Image MCP - protocol and HTTP layer.

This package contains the MCP server, the static HTTP server, the Pydantic
tool argument models and the generate/edit operations.

Modules
-------
main
    Process entry point: startup, shutdown and the ``main()`` CLI function.
server
    MCP handlers for tools and resources.
operations
    Generate and edit pipelines.
models
    Pydantic models for tool arguments and results.
resources
    Listing and reading of the content-serving directory.
static
    FastAPI static file app and port binding.
"""
