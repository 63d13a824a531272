"""MCP dispatcher for the libSQL context server.

This module is a thin **presentation layer**. It routes each MCP request
kind to the resource handler, prompt engine or tool invoker and converts
their plain results into MCP types. Business errors are logged and
re-raised; the SDK turns them into failed responses.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

import mcp.types as types
from loguru import logger
from mcp.server import NotificationOptions, Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from pydantic import AnyUrl

from mcp_server_libsql import __version__
from mcp_server_libsql.application.exceptions import LibsqlServerError
from mcp_server_libsql.application.prompt_engine import PromptEngine
from mcp_server_libsql.application.resource_handler import ResourceHandler
from mcp_server_libsql.application.tool_invoker import ToolInvoker
from mcp_server_libsql.domain.models import ConnectionTarget
from mcp_server_libsql.presentation.schemas import PROMPTS, SERVER_NAME, TOOLS
from mcp_server_libsql.services.pagination import PageFetcher
from mcp_server_libsql.services.sql_gateway import SQLGateway
from mcp_server_libsql.services.table_registry import TableRegistry

# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


@dataclass
class ServerComponents:
    """Everything the dispatcher routes to."""

    resources: ResourceHandler
    prompts: PromptEngine
    tools: ToolInvoker


def build_components(target: ConnectionTarget) -> ServerComponents:
    """Wire the gateway, registry and handlers for one connection target."""
    gateway = SQLGateway(target)
    registry = TableRegistry(gateway)
    pages = PageFetcher(gateway, registry)
    return ServerComponents(
        resources=ResourceHandler(registry, base_url=target.url),
        prompts=PromptEngine(registry, pages),
        tools=ToolInvoker(gateway),
    )


@contextmanager
def _failure_logged(kind: str) -> Iterator[None]:
    try:
        yield
    except LibsqlServerError as exc:
        logger.warning("{} failed | {}: {}", kind, type(exc).__name__, exc)
        raise


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


def create_server(components: ServerComponents) -> Server:
    """Build a low-level MCP ``Server`` with every handler registered."""
    server: Server = Server(SERVER_NAME, version=__version__)

    # ---- Resources --------------------------------------------------------

    @server.list_resources()
    async def list_resources() -> list[types.Resource]:
        logger.debug("ListResourcesRequest")
        with _failure_logged("resources/list"):
            entries = await components.resources.list_resources()
        return [
            types.Resource(uri=AnyUrl(e.uri), name=e.name, mimeType=e.mime_type)
            for e in entries
        ]

    @server.read_resource()
    async def read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
        logger.debug("ReadResourceRequest | uri={}", uri)
        with _failure_logged("resources/read"):
            content = await components.resources.read_resource(str(uri))
        return [ReadResourceContents(content=content.text, mime_type=content.mime_type)]

    # ---- Prompts ----------------------------------------------------------

    @server.list_prompts()
    async def list_prompts() -> list[types.Prompt]:
        logger.debug("ListPromptsRequest")
        return PROMPTS

    @server.get_prompt()
    async def get_prompt(name: str, arguments: dict[str, str] | None) -> types.GetPromptResult:
        logger.debug("GetPromptRequest | name={} arguments={}", name, arguments)
        with _failure_logged("prompts/get"):
            prompt = await components.prompts.get_prompt(name, arguments)
        return types.GetPromptResult(
            description=prompt.description,
            messages=[
                types.PromptMessage(
                    role="user",
                    content=types.TextContent(type="text", text=prompt.text),
                )
            ],
        )

    @server.completion()
    async def complete(
        ref: types.PromptReference | types.ResourceTemplateReference,
        argument: types.CompletionArgument,
        context: types.CompletionContext | None,
    ) -> types.Completion:
        logger.debug("CompleteRequest | ref={} argument={}", ref, argument)
        prompt_name = ref.name if isinstance(ref, types.PromptReference) else None
        with _failure_logged("completion/complete"):
            values = await components.prompts.complete(prompt_name, argument.value)
        return types.Completion(values=values, total=len(values), hasMore=False)

    # ---- Tools ------------------------------------------------------------

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        logger.debug("ListToolsRequest")
        return TOOLS

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        logger.debug("CallToolRequest | name={}", name)
        with _failure_logged("tools/call"):
            text = await components.tools.call_tool(name, arguments)
        return [types.TextContent(type="text", text=text)]

    return server


async def serve(target: ConnectionTarget) -> None:
    """Run the server over stdio until the client disconnects."""
    server = create_server(build_components(target))
    logger.info("Starting {} {} for {}", SERVER_NAME, __version__, target)

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name=SERVER_NAME,
                server_version=__version__,
                capabilities=server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )
