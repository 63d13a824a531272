"""Fetch one page of rows from a table and render it as CSV or JSON."""

from __future__ import annotations

import base64
import csv
import io
import json
from typing import Any

from mcp_server_libsql.domain.models import OutputFormat, PageRequest, ResultSet, Statement
from mcp_server_libsql.domain.protocols import ISQLGateway, ITableRegistry


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return str(value)


def rows_to_json(rows: list[dict[str, Any]]) -> str:
    """Serialize rows as a JSON array of objects (BLOBs become base64 strings)."""
    return json.dumps(rows, default=_json_default)


def rows_to_csv(rs: ResultSet) -> str:
    """Serialize a result set as CSV: a header row, then one line per row."""
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=list(rs.columns), extrasaction="ignore")
    writer.writeheader()
    writer.writerows(rs.rows)
    return buf.getvalue()


def quote_identifier(name: str) -> str:
    """Wrap an already allow-listed table name in double quotes."""
    return '"' + name.replace('"', '""') + '"'


class PageFetcher:
    """Reads bounded pages from allow-listed tables."""

    def __init__(self, gateway: ISQLGateway, registry: ITableRegistry):
        self.gateway = gateway
        self.registry = registry

    async def fetch_page(
        self,
        table_name: str,
        page: int = 1,
        limit: int = 25,
        output_format: OutputFormat = "csv",
    ) -> str:
        """Return one page of ``table_name`` rows.

        An empty page is not an error: it yields
        ``"No rows found in table <table_name>"``.

        Raises:
            InvalidIdentifierError: If ``table_name`` is not a known table,
                whatever the other arguments. No row query is issued.
            InvalidArgumentError: If page, limit or format is out of range.
        """
        await self.registry.validate(table_name)
        request = PageRequest.build(
            table_name=table_name, page=page, limit=limit, output_format=output_format
        )

        rs = await self.gateway.execute(
            Statement(
                f"SELECT * FROM {quote_identifier(request.table_name)} LIMIT ? OFFSET ?",
                [request.limit, request.offset],
            )
        )

        if not rs.rows:
            return f"No rows found in table {request.table_name}"

        if request.output_format == "csv":
            return rows_to_csv(rs)
        return rows_to_json(rs.rows)
