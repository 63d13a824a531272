"""SQL execution gateway backed by libsql-client.

Every call opens its own client, runs exactly one statement and closes the
client again. There is no pooling and no retry: the caller sees the first
failure, translated into the application's error taxonomy.
"""

from __future__ import annotations

import asyncio
import sqlite3
from collections.abc import Sequence
from typing import Any

import aiohttp
import libsql_client
from loguru import logger

from mcp_server_libsql.application.exceptions import DatabaseConnectionError, QueryError
from mcp_server_libsql.domain.models import ConnectionTarget, ResultSet, Statement

# libSQL error codes that describe the transport or the URL rather than the SQL.
_CONNECTION_ERROR_CODES = frozenset(
    [
        "URL_INVALID",
        "URL_SCHEME_NOT_SUPPORTED",
        "URL_PARAM_NOT_SUPPORTED",
        "HTTP_ERROR",
        "HRANA_WEBSOCKET_ERROR",
        "HRANA_PROTO_ERROR",
        "WEBSOCKET_ERROR",
        "CLIENT_CLOSED",
        "UNAUTHORIZED",
    ]
)


class SQLGateway:
    """Executes single statements against the configured libSQL database."""

    def __init__(self, target: ConnectionTarget):
        self.target = target

    async def execute(
        self, statement: str | Statement, args: Sequence[Any] | None = None
    ) -> ResultSet:
        """Run one statement and return its columns and rows.

        Args:
            statement: Literal SQL text, or a ``Statement`` carrying its own args.
            args: Positional arguments for a literal SQL text.

        Raises:
            DatabaseConnectionError: The database is unreachable or rejected
                the credentials.
            QueryError: The engine rejected the statement.
        """
        if isinstance(statement, Statement):
            sql, bound = statement.sql, list(statement.args)
        else:
            sql, bound = statement, list(args or [])

        logger.debug("executeSql | sql={} args={}", sql, bound)

        try:
            async with libsql_client.create_client(
                self.target.url, auth_token=self.target.auth_token
            ) as client:
                rs = await client.execute(sql, bound)
        except libsql_client.LibsqlError as exc:
            if _is_connection_code(exc.code):
                raise DatabaseConnectionError(
                    f"Cannot reach database at {self.target.url}: {exc}"
                ) from exc
            raise QueryError(f"SQL error: {exc}") from exc
        except sqlite3.Error as exc:
            raise QueryError(f"SQL error: {exc}") from exc
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as exc:
            raise DatabaseConnectionError(
                f"Cannot reach database at {self.target.url}: {exc}"
            ) from exc

        columns = tuple(rs.columns)
        rows = [{col: row[i] for i, col in enumerate(columns)} for row in rs.rows]
        return ResultSet(columns=columns, rows=rows)


def _is_connection_code(code: str | None) -> bool:
    if not code:
        return False
    return code in _CONNECTION_ERROR_CODES or code.startswith(("HTTP_", "HRANA_"))
