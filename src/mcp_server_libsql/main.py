"""Command-line entrypoint: ``mcp-server-libsql DATABASE_URL``."""

from __future__ import annotations

from pathlib import Path

import anyio
import click
from loguru import logger
from pydantic import ValidationError

from mcp_server_libsql import __version__
from mcp_server_libsql.config import Settings
from mcp_server_libsql.logging_config import setup_logging
from mcp_server_libsql.presentation.server import serve


def load_settings(
    database_url: str, auth_token: str | None, debug: bool, log_file: Path | None
) -> Settings:
    """Build ``Settings`` from CLI values, reporting bad input as a usage error."""
    values: dict = {"database_url": database_url, "debug": debug}
    if auth_token is not None:
        values["auth_token"] = auth_token
    if log_file is not None:
        values["log_file"] = log_file
    try:
        return Settings(**values)
    except ValidationError as exc:
        raise click.BadParameter(exc.errors()[0]["msg"], param_hint="DATABASE_URL") from exc


@click.command()
@click.argument("database_url")
@click.option(
    "--auth-token",
    envvar="LIBSQL_AUTH_TOKEN",
    default=None,
    help="Bearer token used to authenticate against the database.",
)
@click.option("--debug", is_flag=True, help="Log at DEBUG level instead of WARNING.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write logs here instead of the per-OS application-data directory.",
)
@click.version_option(__version__)
def cli(database_url: str, auth_token: str | None, debug: bool, log_file: Path | None):
    """Serve a libSQL database's schema and rows over MCP (stdio)."""
    settings = load_settings(database_url, auth_token, debug, log_file)
    setup_logging(log_file=settings.resolve_log_file(), level=settings.log_level)
    logger.debug("Settings loaded | url={} debug={}", settings.database_url, settings.debug)

    anyio.run(serve, settings.connection_target())


if __name__ == "__main__":
    cli()
