"""The ``query`` tool: run caller-supplied SQL and return the rows as JSON.

The statement is executed verbatim. Although the tool is advertised for
read-only querying, no statement-kind restriction is applied.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from mcp_server_libsql.application.exceptions import InvalidArgumentError, NotFoundError
from mcp_server_libsql.domain.protocols import ISQLGateway
from mcp_server_libsql.services.pagination import rows_to_json

QUERY_TOOL_NAME = "query"


class ToolInvoker:
    def __init__(self, gateway: ISQLGateway):
        self.gateway = gateway

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> str:
        """Dispatch a tool call and return its text output.

        Raises:
            NotFoundError: If ``name`` is not a known tool.
            InvalidArgumentError: If ``sql`` is missing or not a string.
        """
        if name != QUERY_TOOL_NAME:
            raise NotFoundError(f"Tool '{name}' not found")
        return await self.query((arguments or {}).get("sql"))

    async def query(self, sql: Any) -> str:
        if not isinstance(sql, str) or not sql.strip():
            raise InvalidArgumentError(f"Invalid sql: {sql!r}")

        rs = await self.gateway.execute(sql)
        logger.info("query tool | rows={}", len(rs.rows))
        return rows_to_json(rs.rows)
