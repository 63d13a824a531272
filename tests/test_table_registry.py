"""Tests for TableRegistry: enumeration, description and allow-list validation."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from conftest import USAGE_DDL, USERS_DDL, SqliteGateway
from mcp_server_libsql.application.exceptions import (
    InvalidIdentifierError,
    MetadataShapeError,
    NotFoundError,
)
from mcp_server_libsql.domain.models import ResultSet
from mcp_server_libsql.services.table_registry import TableRegistry


class TestListTables:
    async def test_lists_tables_in_creation_order(self, registry: TableRegistry):
        assert await registry.list_tables() == ["users", "usage"]

    async def test_descriptors_carry_definition(self, registry: TableRegistry):
        descriptors = await registry.list_descriptors()
        assert [d.sql for d in descriptors] == [USERS_DDL, USAGE_DDL]
        assert all(d.type == "table" for d in descriptors)

    async def test_excludes_indexes_and_views(self, tmp_db: Path, registry: TableRegistry):
        conn = sqlite3.connect(str(tmp_db))
        conn.execute("CREATE INDEX idx_users_email ON users (email)")
        conn.execute("CREATE VIEW heavy_usage AS SELECT * FROM usage WHERE tokens > 1000")
        conn.commit()
        conn.close()

        assert await registry.list_tables() == ["users", "usage"]

    async def test_metadata_is_queried_with_bound_parameters(
        self, gateway: SqliteGateway, registry: TableRegistry
    ):
        await registry.list_tables()
        sql, args = gateway.executed[-1]
        assert "type = ?" in sql
        assert "'table'" not in sql
        assert args == ["table"]

    async def test_reflects_live_schema(self, tmp_db: Path, registry: TableRegistry):
        assert "invoices" not in await registry.list_tables()

        conn = sqlite3.connect(str(tmp_db))
        conn.execute("CREATE TABLE invoices (id INTEGER PRIMARY KEY)")
        conn.commit()
        conn.close()

        assert await registry.list_tables() == ["users", "usage", "invoices"]

    async def test_malformed_metadata_row_fails_cleanly(self):
        gateway = AsyncMock()
        gateway.execute.return_value = ResultSet(
            columns=("type", "name"), rows=[{"type": "table", "name": "users"}]
        )
        with pytest.raises(MetadataShapeError, match="tbl_name"):
            await TableRegistry(gateway).list_tables()


class TestDescribeTable:
    async def test_every_listed_table_has_a_definition(self, registry: TableRegistry):
        for name in await registry.list_tables():
            definition = await registry.describe_table(name)
            assert definition.strip()
            assert name in definition

    async def test_returns_create_statement(self, registry: TableRegistry):
        assert await registry.describe_table("users") == USERS_DDL

    async def test_unknown_table_raises_not_found(self, registry: TableRegistry):
        with pytest.raises(NotFoundError, match="Table 'invoices' not found"):
            await registry.describe_table("invoices")

    async def test_name_is_bound_not_interpolated(
        self, gateway: SqliteGateway, registry: TableRegistry
    ):
        hostile = "users' OR '1'='1"
        with pytest.raises(NotFoundError):
            await registry.describe_table(hostile)
        sql, args = gateway.executed[-1]
        assert hostile not in sql
        assert args == ["table", hostile]


class TestValidate:
    async def test_known_table_passes(self, registry: TableRegistry):
        assert await registry.validate("usage") is None

    @pytest.mark.parametrize(
        "name",
        ["invoices", "users; DROP TABLE users", "USERS", "", "all-tables", "sqlite_master"],
    )
    async def test_unknown_name_is_rejected(self, registry: TableRegistry, name: str):
        with pytest.raises(InvalidIdentifierError, match="Invalid table name"):
            await registry.validate(name)

    async def test_invalid_identifier_error_is_value_error(self):
        assert issubclass(InvalidIdentifierError, ValueError)
