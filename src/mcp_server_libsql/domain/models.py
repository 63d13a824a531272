"""Domain entities and value objects.

These are the core data structures of the libSQL context server,
independent of the MCP SDK and of the database client.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from mcp_server_libsql.application.exceptions import InvalidArgumentError, MetadataShapeError

ALL_TABLES = "all-tables"

OutputFormat = Literal["csv", "json"]

# ---------------------------------------------------------------------------
# Connection
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConnectionTarget:
    """Where the database lives. Built once at startup and never mutated."""

    url: str
    auth_token: str | None = None

    def __repr__(self) -> str:
        token = "***" if self.auth_token else None
        return f"ConnectionTarget(url={self.url!r}, auth_token={token!r})"


# ---------------------------------------------------------------------------
# Statements and results
# ---------------------------------------------------------------------------


class Statement(NamedTuple):
    """A SQL text plus its positional arguments."""

    sql: str
    args: Sequence[Any] = ()


@dataclass
class ResultSet:
    """Columnar result of a single statement.

    ``rows`` keeps the engine's order; each row maps column name to value.
    """

    columns: tuple[str, ...] = ()
    rows: list[dict[str, Any]] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


class TableDescriptor(BaseModel):
    """One ``sqlite_master`` row describing a table."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str
    name: str
    tbl_name: str
    rootpage: int
    sql: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> TableDescriptor:
        """Parse a metadata row, failing cleanly when its shape is unexpected."""
        try:
            return cls.model_validate(row)
        except ValidationError as exc:
            problems = ", ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            raise MetadataShapeError(f"Unexpected sqlite_master row shape ({problems})") from exc


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


class PageRequest(BaseModel):
    """A bounded, offset-based row fetch from one table."""

    table_name: str
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=25, ge=1)
    output_format: OutputFormat = "csv"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def build(cls, **values: Any) -> PageRequest:
        try:
            return cls(**values)
        except ValidationError as exc:
            raise InvalidArgumentError(f"Invalid page request: {exc.errors()[0]['msg']}") from exc


# ---------------------------------------------------------------------------
# Handler outputs (framework-agnostic)
# ---------------------------------------------------------------------------


@dataclass
class SchemaResource:
    uri: str
    name: str
    mime_type: str = "text/plain"


@dataclass
class ResourceText:
    uri: str
    text: str
    mime_type: str = "text/plain"


@dataclass
class PromptText:
    """Rendered prompt: an optional description plus one user message."""

    text: str
    description: str | None = None
