"""Configuration for the server using pydantic-settings."""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mcp_server_libsql.domain.models import ConnectionTarget

APP_DIR_NAME = "mcp-server-libsql"
LOG_FILE_NAME = "mcp-server-libsql.log"

_DATABASE_URL_RE = re.compile(r"^(https?|libsql)://")


def default_log_dir(platform: str | None = None, env: dict[str, str] | None = None) -> Path:
    """Return the per-OS application-data directory used for log files.

    Raises:
        RuntimeError: If neither ``HOME`` nor ``USERPROFILE`` is set, or the
            platform is not Linux, macOS or Windows.
    """
    platform = platform or sys.platform
    env = os.environ if env is None else env

    home = env.get("HOME") or env.get("USERPROFILE")
    if not home:
        raise RuntimeError("HOME or USERPROFILE environment variable not set")

    if platform.startswith("win"):
        return Path(home) / "AppData" / "Local" / APP_DIR_NAME
    if platform == "darwin" or platform.startswith("linux"):
        return Path(home) / ".local" / "share" / APP_DIR_NAME
    raise RuntimeError(f"Unsupported OS: {platform}")


class Settings(BaseSettings):
    """Server settings: CLI values first, then ``LIBSQL_*`` env vars and .env."""

    model_config = SettingsConfigDict(
        env_prefix="LIBSQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Database
    # ------------------------------------------------------------------
    database_url: str
    auth_token: str | None = None

    # ------------------------------------------------------------------
    # Logging (DEBUG when debug is set, WARNING otherwise)
    # ------------------------------------------------------------------
    debug: bool = False
    log_file: Path | None = None

    @field_validator("database_url")
    @classmethod
    def _check_scheme(cls, value: str) -> str:
        if not _DATABASE_URL_RE.match(value):
            raise ValueError("database URL must start with http://, https:// or libsql://")
        return value

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.debug else "WARNING"

    def connection_target(self) -> ConnectionTarget:
        return ConnectionTarget(url=self.database_url, auth_token=self.auth_token)

    def resolve_log_file(self) -> Path:
        """Return the log file path, creating its directory if needed."""
        path = self.log_file or default_log_dir() / LOG_FILE_NAME
        path.parent.mkdir(parents=True, exist_ok=True)
        return path
