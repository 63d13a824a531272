"""Table-schema resources: one resource per table, readable as its CREATE text."""

from __future__ import annotations

from mcp_server_libsql.domain.models import ResourceText, SchemaResource
from mcp_server_libsql.domain.protocols import ITableRegistry
from mcp_server_libsql.domain.resource_uri import SchemaResourceUri


class ResourceHandler:
    def __init__(self, registry: ITableRegistry, base_url: str):
        self.registry = registry
        self.base_url = base_url

    async def list_resources(self) -> list[SchemaResource]:
        tables = await self.registry.list_tables()
        return [
            SchemaResource(
                uri=SchemaResourceUri(self.base_url, table).format(),
                name=f"{table} table schema",
            )
            for table in tables
        ]

    async def read_resource(self, uri: str) -> ResourceText:
        """Return the CREATE statement addressed by ``uri``.

        Raises:
            InvalidURIError: If ``uri`` is not ``<base>/<table>/schema``.
            NotFoundError: If the table does not exist.
        """
        ref = SchemaResourceUri.parse(uri)
        sql = await self.registry.describe_table(ref.table_name)
        return ResourceText(uri=str(uri), text=sql)
