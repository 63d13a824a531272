"""MCP server exposing a libSQL database's schema and rows."""

__version__ = "0.4.0"
