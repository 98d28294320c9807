#!/usr/bin/env python3
"""
Postmark MCP Server

Exposes Postmark email operations and a local template library as MCP tools
over stdio.

Tools (13): send, send with template, template CRUD, delivery stats,
template push between servers, and local template library discovery.
Documentation is provided via MCP Resources, not a tool.

Architecture:
- template_library/: Read-only template file tree (envelopes, never raises)
- adapters/: Thin Postmark API wrapper
- tools/: Tool handlers, renderers and the registry (business logic)
- schemas.py: One argument model per tool
- server.py: MCP wiring and process bootstrap (this file)

Tools are served through the low-level MCP server: tool arguments are
camelCase and include `from`, which cannot be a Python parameter name, so
schemas come from the argument models instead of function signatures.
"""

import asyncio
import os
import signal
import sys
from collections.abc import Iterable
from typing import Any

import mcp.types as types
from dotenv import load_dotenv
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from pydantic import AnyUrl

from adapters.postmark import PostmarkClient
from config import Settings, load_settings
from logging_config import configure_logging, logger
from models import PostmarkMcpError
from resources.tools import RESOURCE_PREFIX, get_tool_registry
from tools import ToolContext, ToolRegistry

SERVER_NAME = "postmark-mcp"
SERVER_VERSION = "1.0.0"

OVERVIEW_URI = "postmark://docs/overview"


# ============================================================================
# TOOLS — single dispatch surface
# ============================================================================

def list_tool_specs(registry: ToolRegistry) -> list[types.Tool]:
    """MCP tool listing built from the registry's argument models."""
    return [
        types.Tool(
            name=name,
            description=registry.get(name).description,
            inputSchema=registry.get(name).input_schema(),
        )
        for name in registry.names()
    ]


async def call_tool(
    registry: ToolRegistry,
    name: str,
    arguments: dict[str, Any] | None,
) -> list[types.TextContent]:
    """
    Run one tool and wrap its rendered text.

    PostmarkMcpError propagates; the MCP server reports it as a failed call
    carrying the error message.
    """
    text = await registry.dispatch(name, arguments or {})
    return [types.TextContent(type="text", text=text)]


# ============================================================================
# RESOURCES — Self-documenting MCP capabilities
# ============================================================================

def docs_overview(registry: ToolRegistry) -> str:
    """Overview of the server: tool catalogue and template library layout."""
    rows = "\n".join(
        f"| `{name}` | {registry.get(name).description} |" for name in registry.names()
    )
    return f"""# postmark-mcp

Postmark email operations plus a local template library, as MCP tools.

## Tools

| Tool | Purpose |
|------|---------|
{rows}

## Defaults

- `from` defaults to the configured sender; the message stream is always the configured stream.
- Open tracking and link tracking (HTML and text) are always on.
- Template push needs `POSTMARK_ACCOUNT_TOKEN`.

## Local Template Library

```
<base>/<category>/<template>/content.html
<base>/<category>/<template>/content.txt
```

Base path: `POSTMARK_TEMPLATES_PATH`, else `TEMPLATES_BASE_PATH`, else
`./postmark-templates/templates-inlined`. Every call re-reads the tree.

## Resources

- `{OVERVIEW_URI}` — This overview
- `{RESOURCE_PREFIX}{{tool_name}}` — Arguments of one tool
"""


def read_resource_text(registry: ToolRegistry, uri: str) -> str:
    """Resolve a resource URI to markdown. Unknown URIs raise KeyError."""
    if uri == OVERVIEW_URI:
        return docs_overview(registry)
    return get_tool_registry().get_resource(uri)["text"]


# ============================================================================
# SERVER
# ============================================================================

def create_server(registry: ToolRegistry) -> Server:
    """Build the MCP server. Tools are fixed here for the life of the process."""
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION)
    tool_docs = get_tool_registry()
    tool_docs.register_definitions(registry.get(name) for name in registry.names())

    @server.list_tools()
    async def _list_tools() -> list[types.Tool]:
        return list_tool_specs(registry)

    @server.call_tool()
    async def _call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        return await call_tool(registry, name, arguments)

    @server.list_resources()
    async def _list_resources() -> list[types.Resource]:
        resources = [
            types.Resource(
                uri=AnyUrl(OVERVIEW_URI), name="overview",
                description="Overview of postmark-mcp", mimeType="text/markdown",
            )
        ]
        resources.extend(
            types.Resource(
                uri=AnyUrl(f"{RESOURCE_PREFIX}{name}"), name=name,
                description=f"Arguments of {name}", mimeType="text/markdown",
            )
            for name in sorted(tool_docs.get_tool_names())
        )
        return resources

    @server.read_resource()
    async def _read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
        try:
            text = read_resource_text(registry, str(uri))
        except KeyError:
            raise ValueError(f"Unknown resource: {uri}") from None
        return [ReadResourceContents(content=text, mime_type="text/markdown")]

    return server


async def verify_server_token(settings: Settings) -> None:
    """One GET /server call so a bad token fails at startup, not on first use."""
    async with PostmarkClient.from_settings(settings) as client:
        await client.get_server()


async def serve(settings: Settings) -> None:
    """Run the MCP server over stdio. The Postmark client is closed on the way out."""
    async with PostmarkClient.from_settings(settings) as client:
        server = create_server(ToolRegistry(ToolContext(settings=settings, client=client)))
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())


# ============================================================================
# SERVER ENTRY POINT
# ============================================================================

def _shutdown_handler(signum: int, frame: object) -> None:
    """Handle termination signals by exiting immediately.

    os._exit() is required because sys.exit() raises SystemExit,
    which the event loop catches and ignores. The server would survive
    SIGTERM until stdin closes.
    """
    os._exit(0)


def main() -> None:
    load_dotenv(override=False)

    try:
        settings = load_settings()
    except PostmarkMcpError as e:
        configure_logging()
        logger.error(f"Server initialization failed: {e.message}")
        sys.exit(1)

    configure_logging(settings.log_level)
    logger.info(
        "Initializing Postmark MCP server...",
        extra={"meta": {
            "sender": settings.default_sender,
            "stream": settings.default_message_stream,
            "templates": str(settings.templates_base_path),
        }},
    )

    try:
        asyncio.run(verify_server_token(settings))
    except PostmarkMcpError as e:
        logger.error(f"Initialization failed: {e.message}")
        sys.exit(1)

    signal.signal(signal.SIGTERM, _shutdown_handler)
    signal.signal(signal.SIGINT, _shutdown_handler)

    logger.info("Postmark MCP server is running on stdio")
    asyncio.run(serve(settings))


if __name__ == "__main__":
    main()
