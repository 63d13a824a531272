"""Application-level exceptions.

These are business-logic errors, not protocol errors. The presentation layer
(the MCP dispatcher) lets them propagate so the SDK reports a failed response.
"""


class LibsqlServerError(Exception):
    """Base class for every error raised by the server's own code."""


class DatabaseConnectionError(LibsqlServerError):
    """Raised when the database is unreachable or rejects the credentials."""


class QueryError(LibsqlServerError):
    """Raised when the engine rejects a statement (syntax, constraint, ...)."""


class MetadataShapeError(QueryError):
    """Raised when a ``sqlite_master`` row does not have the expected shape."""


class InvalidIdentifierError(LibsqlServerError, ValueError):
    """Raised when a caller-supplied table name is not a known table."""


class InvalidURIError(LibsqlServerError, ValueError):
    """Raised when a resource URI cannot be mapped to a table schema."""


class InvalidArgumentError(LibsqlServerError, ValueError):
    """Raised when a prompt, page or completion argument is missing or malformed."""


class NotFoundError(LibsqlServerError, LookupError):
    """Raised when a referenced table, prompt or tool does not exist."""
