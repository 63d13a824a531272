"""Table registry: enumerate, describe and allow-list tables via ``sqlite_master``.

Nothing is cached. Each call re-queries the metadata table, so results follow
the live schema at call time.
"""

from __future__ import annotations

from loguru import logger

from mcp_server_libsql.application.exceptions import InvalidIdentifierError, NotFoundError
from mcp_server_libsql.domain.models import Statement, TableDescriptor
from mcp_server_libsql.domain.protocols import ISQLGateway

LIST_TABLES_SQL = "SELECT type, name, tbl_name, rootpage, sql FROM sqlite_master WHERE type = ?"
DESCRIBE_TABLE_SQL = (
    "SELECT type, name, tbl_name, rootpage, sql FROM sqlite_master WHERE type = ? AND tbl_name = ?"
)


class TableRegistry:
    """Source of truth for which table names may be interpolated into SQL."""

    def __init__(self, gateway: ISQLGateway):
        self.gateway = gateway

    async def list_descriptors(self) -> list[TableDescriptor]:
        """Return one descriptor per table, in the engine's order."""
        rs = await self.gateway.execute(Statement(LIST_TABLES_SQL, ["table"]))
        return [TableDescriptor.from_row(row) for row in rs.rows]

    async def list_tables(self) -> list[str]:
        return [d.tbl_name for d in await self.list_descriptors()]

    async def describe_table(self, name: str) -> str:
        """Return the CREATE statement of ``name``.

        Raises:
            NotFoundError: If no table with that name exists.
        """
        rs = await self.gateway.execute(Statement(DESCRIBE_TABLE_SQL, ["table", name]))
        if not rs.rows:
            raise NotFoundError(f"Table '{name}' not found")
        return TableDescriptor.from_row(rs.rows[0]).sql

    async def validate(self, name: str) -> None:
        """Reject ``name`` unless it is one of the current tables.

        Must be called before ``name`` is spliced into SQL text.
        """
        if name not in await self.list_tables():
            logger.warning("Rejected table name {!r}: not in registry", name)
            raise InvalidIdentifierError(f"Invalid table name: {name}")
