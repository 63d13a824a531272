from mcp_server_libsql.main import cli

cli()
