"""Addressing for table-schema resources.

A schema resource URI is ``<base-url>/<table>/schema``. ``format`` and
``parse`` are inverses of each other; parsing only looks at the last two path
segments, so it does not care what the base URL looks like.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote, unquote, urlsplit

from mcp_server_libsql.application.exceptions import InvalidURIError

SCHEMA_SEGMENT = "schema"


@dataclass(frozen=True)
class SchemaResourceUri:
    base_url: str
    table_name: str

    def format(self) -> str:
        """Render the URI, percent-encoding the table name as one path segment.

        Only scheme, host and path of the base URL are kept; its query string
        and fragment are dropped.
        """
        base = urlsplit(self.base_url)
        base_url = f"{base.scheme}://{base.netloc}{base.path.rstrip('/')}"
        return f"{base_url}/{quote(self.table_name, safe='')}/{SCHEMA_SEGMENT}"

    def __str__(self) -> str:
        return self.format()

    @classmethod
    def parse(cls, uri: str) -> SchemaResourceUri:
        """Split ``uri`` back into its base URL and table name.

        Raises:
            InvalidURIError: If the URI has no path, its final segment is not
                ``schema``, or the table segment is missing or blank.
        """
        try:
            parts = urlsplit(str(uri))
        except ValueError as exc:
            raise InvalidURIError(f"Invalid resource URI: {uri}") from exc

        if not parts.scheme:
            raise InvalidURIError(f"Invalid resource URI: {uri}")

        segments = parts.path.split("/")
        if segments.pop() != SCHEMA_SEGMENT:
            raise InvalidURIError(f"Invalid resource URI: {uri}")

        table_name = unquote(segments.pop()).strip() if segments else ""
        if not table_name:
            raise InvalidURIError(f"No table name provided in resource URI: {uri}")

        base_path = "/".join(segments)
        base_url = f"{parts.scheme}://{parts.netloc}{base_path}"
        return cls(base_url=base_url, table_name=table_name)
