"""Tests for ToolInvoker: the ``query`` tool."""

from __future__ import annotations

import json

import pytest

from mcp_server_libsql.application.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    QueryError,
)
from mcp_server_libsql.application.tool_invoker import ToolInvoker


class TestQueryTool:
    async def test_returns_rows_as_json_array(self, tool_invoker: ToolInvoker):
        result = await tool_invoker.call_tool(
            "query", {"sql": "SELECT name FROM users WHERE email LIKE '%northwind.com'"}
        )
        assert json.loads(result) == [{"name": "Alice Smith"}, {"name": "Bob Jones"}]

    async def test_empty_result_is_empty_array(self, tool_invoker: ToolInvoker):
        result = await tool_invoker.call_tool("query", {"sql": "SELECT * FROM users WHERE 0"})
        assert result == "[]"

    async def test_statement_kind_is_not_restricted(self, tool_invoker: ToolInvoker):
        """The tool is advertised as read-only but executes any statement."""
        await tool_invoker.call_tool(
            "query", {"sql": "INSERT INTO usage (user_id, tokens) VALUES (3, 50)"}
        )
        result = await tool_invoker.call_tool("query", {"sql": "SELECT COUNT(*) AS n FROM usage"})
        assert json.loads(result) == [{"n": 3}]

    async def test_sql_is_executed_verbatim(self, gateway, tool_invoker: ToolInvoker):
        sql = "SELECT 1 AS one"
        await tool_invoker.call_tool("query", {"sql": sql})
        assert gateway.executed[-1] == (sql, [])

    async def test_malformed_sql_raises_query_error(self, tool_invoker: ToolInvoker):
        with pytest.raises(QueryError, match="SQL error"):
            await tool_invoker.call_tool("query", {"sql": "SELEC * FROM users"})

    @pytest.mark.parametrize("arguments", [None, {}, {"sql": ""}, {"sql": 42}])
    async def test_missing_sql(self, tool_invoker: ToolInvoker, arguments: dict | None):
        with pytest.raises(InvalidArgumentError, match="Invalid sql"):
            await tool_invoker.call_tool("query", arguments)

    async def test_unknown_tool(self, tool_invoker: ToolInvoker):
        with pytest.raises(NotFoundError, match="Tool 'drop_all' not found"):
            await tool_invoker.call_tool("drop_all", {"sql": "SELECT 1"})
