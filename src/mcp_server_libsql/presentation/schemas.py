"""Static MCP definitions: the prompts and tools this server advertises."""

from __future__ import annotations

import mcp.types as types

from mcp_server_libsql.application.prompt_engine import (
    QUERY_PROMPT_NAME,
    SCHEMA_PROMPT_NAME,
    TABLE_NAME_ARGUMENT,
)
from mcp_server_libsql.application.tool_invoker import QUERY_TOOL_NAME

SERVER_NAME = "context-server/libsql"

PROMPTS: list[types.Prompt] = [
    types.Prompt(
        name=SCHEMA_PROMPT_NAME,
        description="Retrieve the schema for a given table in the libSQL database",
        arguments=[
            types.PromptArgument(
                name=TABLE_NAME_ARGUMENT,
                description="the table to describe",
                required=True,
            )
        ],
    ),
    types.Prompt(
        name=QUERY_PROMPT_NAME,
        description="Query all rows from a table",
        arguments=[
            types.PromptArgument(
                name=TABLE_NAME_ARGUMENT,
                description="the table to query",
                required=True,
            )
        ],
    ),
]

QUERY_TOOL = types.Tool(
    name=QUERY_TOOL_NAME,
    description="Run a read-only SQL query",
    inputSchema={
        "type": "object",
        "properties": {
            "sql": {"type": "string"},
        },
        "required": ["sql"],
    },
)

TOOLS: list[types.Tool] = [QUERY_TOOL]
