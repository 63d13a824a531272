"""Domain service interfaces (ports).

These protocols define the contracts that infrastructure implementations
must satisfy. The application layer depends on these abstractions,
not on concrete classes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from mcp_server_libsql.domain.models import OutputFormat, ResultSet, Statement, TableDescriptor

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------


@runtime_checkable
class ISQLGateway(Protocol):
    """Interface for executing one statement against the database.

    Implementations: SQLGateway (libsql-client, one client per call).
    """

    async def execute(
        self, statement: str | Statement, args: Sequence[Any] | None = None
    ) -> ResultSet: ...


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


@runtime_checkable
class ITableRegistry(Protocol):
    """Interface for enumerating and validating tables.

    Implementations: TableRegistry (queries ``sqlite_master`` on every call).
    """

    async def list_descriptors(self) -> list[TableDescriptor]: ...

    async def list_tables(self) -> list[str]: ...

    async def describe_table(self, name: str) -> str: ...

    async def validate(self, name: str) -> None: ...


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


@runtime_checkable
class IPageFetcher(Protocol):
    """Interface for fetching one formatted page of rows from a table.

    Implementations: PageFetcher.
    """

    async def fetch_page(
        self,
        table_name: str,
        page: int = 1,
        limit: int = 25,
        output_format: OutputFormat = "csv",
    ) -> str: ...
