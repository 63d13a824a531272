"""Shared fixtures for the libSQL context server tests."""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from mcp_server_libsql.application.exceptions import QueryError
from mcp_server_libsql.application.prompt_engine import PromptEngine
from mcp_server_libsql.application.resource_handler import ResourceHandler
from mcp_server_libsql.application.tool_invoker import ToolInvoker
from mcp_server_libsql.domain.models import ResultSet, Statement
from mcp_server_libsql.services.pagination import PageFetcher
from mcp_server_libsql.services.table_registry import TableRegistry

BASE_URL = "libsql://northwind-test.turso.io"

USERS_DDL = "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT NOT NULL, email TEXT)"
USAGE_DDL = "CREATE TABLE usage (id INTEGER PRIMARY KEY, user_id INTEGER, tokens INTEGER)"


class SqliteGateway:
    """ISQLGateway that runs each statement on a fresh local SQLite connection.

    Every executed ``(sql, args)`` pair is recorded in ``executed``.
    """

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.executed: list[tuple[str, list[Any]]] = []

    async def execute(
        self, statement: str | Statement, args: Sequence[Any] | None = None
    ) -> ResultSet:
        if isinstance(statement, Statement):
            sql, bound = statement.sql, list(statement.args)
        else:
            sql, bound = statement, list(args or [])
        self.executed.append((sql, bound))

        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            cursor = conn.execute(sql, bound)
            fetched = cursor.fetchall()
            columns = tuple(d[0] for d in cursor.description) if cursor.description else ()
            conn.commit()
        except sqlite3.Error as exc:
            raise QueryError(f"SQL error: {exc}") from exc
        finally:
            conn.close()

        return ResultSet(columns=columns, rows=[dict(r) for r in fetched])

    def row_queries(self) -> list[str]:
        """Executed statements that did not target ``sqlite_master``."""
        return [sql for sql, _ in self.executed if "sqlite_master" not in sql]


@pytest.fixture()
def tmp_db(tmp_path: Path) -> Path:
    """Create a temporary SQLite database with ``users`` and ``usage`` tables populated."""
    db_path = tmp_path / "test.sqlite"
    conn = sqlite3.connect(str(db_path))
    cursor = conn.cursor()

    cursor.execute(USERS_DDL)
    cursor.execute(USAGE_DDL)

    cursor.executemany(
        "INSERT INTO users (name, email) VALUES (?, ?)",
        [
            ("Alice Smith", "alice@northwind.com"),
            ("Bob Jones", "bob@northwind.com"),
            ("Carol Lee", None),
        ],
    )
    cursor.executemany(
        "INSERT INTO usage (user_id, tokens) VALUES (?, ?)",
        [(1, 1200), (2, 800)],
    )

    conn.commit()
    conn.close()
    return db_path


@pytest.fixture()
def gateway(tmp_db: Path) -> SqliteGateway:
    return SqliteGateway(tmp_db)


@pytest.fixture()
def registry(gateway: SqliteGateway) -> TableRegistry:
    return TableRegistry(gateway)


@pytest.fixture()
def pages(gateway: SqliteGateway, registry: TableRegistry) -> PageFetcher:
    return PageFetcher(gateway, registry)


@pytest.fixture()
def resource_handler(registry: TableRegistry) -> ResourceHandler:
    return ResourceHandler(registry, base_url=BASE_URL)


@pytest.fixture()
def prompt_engine(registry: TableRegistry, pages: PageFetcher) -> PromptEngine:
    return PromptEngine(registry, pages)


@pytest.fixture()
def tool_invoker(gateway: SqliteGateway) -> ToolInvoker:
    return ToolInvoker(gateway)
