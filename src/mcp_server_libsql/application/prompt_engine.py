"""Prompt templates over the database and completion of their arguments.

Two prompts are served, each taking a single ``tableName`` argument:

- ``libsql-schema`` renders a table's CREATE statement;
- ``libsql-query`` renders the first page of a table's rows as CSV.

The argument may also be ``all-tables``, which applies the prompt to every
table. For the query prompt the per-table fetches then run concurrently and
the whole request fails if any single fetch fails.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Mapping
from typing import Any

from loguru import logger

from mcp_server_libsql.application.exceptions import InvalidArgumentError, NotFoundError
from mcp_server_libsql.domain.models import ALL_TABLES, PromptText
from mcp_server_libsql.domain.protocols import IPageFetcher, ITableRegistry

SCHEMA_PROMPT_NAME = "libsql-schema"
QUERY_PROMPT_NAME = "libsql-query"
TABLE_NAME_ARGUMENT = "tableName"

PROMPT_NAMES = (SCHEMA_PROMPT_NAME, QUERY_PROMPT_NAME)

# A value that already contains whitespace has been typed in full.
_ALREADY_HAS_ARG = re.compile(r"\S*\s")


def _require_table_name(arguments: Mapping[str, Any] | None) -> str:
    table_name = (arguments or {}).get(TABLE_NAME_ARGUMENT)
    if not isinstance(table_name, str) or len(table_name) == 0:
        raise InvalidArgumentError(f"Invalid tableName: {table_name}")
    return table_name


class PromptEngine:
    """Renders the schema and query prompts and completes their arguments."""

    def __init__(self, registry: ITableRegistry, pages: IPageFetcher):
        self.registry = registry
        self.pages = pages

    # ------------------------------------------------------------------
    # Prompts
    # ------------------------------------------------------------------

    async def get_prompt(self, name: str, arguments: Mapping[str, Any] | None) -> PromptText:
        """Render prompt ``name``.

        Raises:
            InvalidArgumentError: If ``tableName`` is missing or empty.
            NotFoundError: If the prompt or the named table does not exist.
        """
        if name == SCHEMA_PROMPT_NAME:
            return await self.schema_prompt(_require_table_name(arguments))
        if name == QUERY_PROMPT_NAME:
            return await self.query_prompt(_require_table_name(arguments))
        raise NotFoundError(f"Prompt '{name}' not implemented")

    async def schema_prompt(self, table_name: str) -> PromptText:
        if table_name == ALL_TABLES:
            descriptors = await self.registry.list_descriptors()
            schema = "\n\n".join(d.sql for d in descriptors)
            description = "all table schemas"
        else:
            schema = await self.registry.describe_table(table_name)
            description = f"{table_name} schema"

        return PromptText(text=f"```sql\n{schema}\n```", description=description)

    async def query_prompt(self, table_name: str) -> PromptText:
        if table_name != ALL_TABLES:
            return PromptText(text=await self.pages.fetch_page(table_name))

        tables = [t for t in await self.registry.list_tables() if t and t.strip()]
        logger.debug("Fetching first page of {} tables", len(tables))

        # gather keeps argument order and raises the first failure
        pages = await asyncio.gather(*(self.pages.fetch_page(t) for t in tables))
        return PromptText(text="\n\n".join(pages))

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    async def complete(self, prompt_name: str | None, value: str) -> list[str]:
        """Suggest values for the ``tableName`` argument of a known prompt.

        No prefix filtering is done: every table is suggested, after the
        ``all-tables`` sentinel, unless ``value`` already contains whitespace.

        Raises:
            InvalidArgumentError: If ``prompt_name`` is not one of our prompts.
        """
        if prompt_name not in PROMPT_NAMES:
            raise InvalidArgumentError("unknown prompt")

        if _ALREADY_HAS_ARG.search(value):
            return []

        return [ALL_TABLES, *await self.registry.list_tables()]
