"""Typed errors raised by the database layer and the driver-error classifier."""

from __future__ import annotations

from enum import Enum
import socket
from typing import Optional

from mysql.connector import Error as MySQLError
from mysql.connector import errorcode
from psycopg2 import errorcodes as pg_errorcodes
from sqlalchemy.exc import ArgumentError, DBAPIError

from ..core.exceptions import DomainError


class ErrorKind(str, Enum):
    CONNECTION = "connection"
    CONNECTION_REFUSED = "connection_refused"
    HOST_NOT_FOUND = "host_not_found"
    ACCESS_DENIED = "access_denied"
    INVALID_PARAMETERS = "invalid_parameters"
    UNKNOWN_CONNECTION = "unknown_connection"
    SYNC = "sync"
    QUERY = "query"
    TRANSACTION = "transaction"


class DatabaseError(DomainError):
    """Base class for every classified database failure.

    ``original_error`` keeps the driver/ORM exception that was classified.
    """

    status_code = 500
    error_code = "DATABASE_ERROR"
    kind: ErrorKind = ErrorKind.UNKNOWN_CONNECTION

    def __init__(self, message: str = "Database operation failed", original_error: Optional[BaseException] = None):
        super().__init__(message)
        self.original_error = original_error


class DatabaseConnectionError(DatabaseError):
    """Generic failure to connect; parent of the connection-specific kinds."""

    kind = ErrorKind.CONNECTION


class DatabaseConnectionRefusedError(DatabaseConnectionError):
    kind = ErrorKind.CONNECTION_REFUSED


class DatabaseHostNotFoundError(DatabaseConnectionError):
    kind = ErrorKind.HOST_NOT_FOUND


class DatabaseAccessDeniedError(DatabaseConnectionError):
    kind = ErrorKind.ACCESS_DENIED


class InvalidConnectionParametersError(DatabaseConnectionError):
    kind = ErrorKind.INVALID_PARAMETERS


class UnknownConnectionError(DatabaseConnectionError):
    kind = ErrorKind.UNKNOWN_CONNECTION


class SyncError(DatabaseError):
    kind = ErrorKind.SYNC


class QueryError(DatabaseError):
    kind = ErrorKind.QUERY


class TransactionError(DatabaseError):
    kind = ErrorKind.TRANSACTION


_MYSQL_ERRNO_KINDS = {
    errorcode.CR_CONNECTION_ERROR: ErrorKind.CONNECTION_REFUSED,
    errorcode.CR_CONN_HOST_ERROR: ErrorKind.CONNECTION_REFUSED,
    errorcode.CR_UNKNOWN_HOST: ErrorKind.HOST_NOT_FOUND,
    errorcode.ER_ACCESS_DENIED_ERROR: ErrorKind.ACCESS_DENIED,
    errorcode.ER_DBACCESS_DENIED_ERROR: ErrorKind.ACCESS_DENIED,
    errorcode.ER_BAD_DB_ERROR: ErrorKind.INVALID_PARAMETERS,
}

_PG_CODE_KINDS = {
    pg_errorcodes.INVALID_PASSWORD: ErrorKind.ACCESS_DENIED,
    pg_errorcodes.INVALID_AUTHORIZATION_SPECIFICATION: ErrorKind.ACCESS_DENIED,
    pg_errorcodes.INVALID_CATALOG_NAME: ErrorKind.INVALID_PARAMETERS,
}

# libpq reports most connect failures as plain OperationalError text.
_MESSAGE_MARKERS: tuple[tuple[tuple[str, ...], ErrorKind], ...] = (
    (("connection refused", "connectionrefused", "econnrefused"), ErrorKind.CONNECTION_REFUSED),
    (
        ("could not translate host name", "name or service not known", "unknown host", "hostnotfound", "nodename nor servname"),
        ErrorKind.HOST_NOT_FOUND,
    ),
    (("password authentication failed", "access denied", "accessdenied"), ErrorKind.ACCESS_DENIED),
    (("invalid connection", "invalidconnection", "invalid dsn"), ErrorKind.INVALID_PARAMETERS),
)

_CONNECTION_MESSAGES = {
    ErrorKind.CONNECTION_REFUSED: "Database connection refused. Please check if the database server is running.",
    ErrorKind.HOST_NOT_FOUND: "Database host not found. Please check your database configuration.",
    ErrorKind.ACCESS_DENIED: "Database access denied. Please check your credentials.",
    ErrorKind.INVALID_PARAMETERS: "Invalid database connection parameters.",
    ErrorKind.UNKNOWN_CONNECTION: "Unknown database connection error occurred.",
}

_CONNECTION_CLASSES = {
    ErrorKind.CONNECTION: DatabaseConnectionError,
    ErrorKind.CONNECTION_REFUSED: DatabaseConnectionRefusedError,
    ErrorKind.HOST_NOT_FOUND: DatabaseHostNotFoundError,
    ErrorKind.ACCESS_DENIED: DatabaseAccessDeniedError,
    ErrorKind.INVALID_PARAMETERS: InvalidConnectionParametersError,
    ErrorKind.UNKNOWN_CONNECTION: UnknownConnectionError,
}


def _driver_error(error: BaseException) -> BaseException:
    # SQLAlchemy wraps the DBAPI exception in ``.orig``.
    orig = getattr(error, "orig", None)
    return orig if isinstance(orig, BaseException) else error


def classify_connection_error(error: BaseException) -> ErrorKind:
    """Map a driver/ORM connection failure onto one of the six connection kinds."""

    orig = _driver_error(error)

    if isinstance(orig, ConnectionRefusedError):
        return ErrorKind.CONNECTION_REFUSED
    if isinstance(orig, socket.gaierror):
        return ErrorKind.HOST_NOT_FOUND

    if isinstance(orig, MySQLError) and orig.errno in _MYSQL_ERRNO_KINDS:
        return _MYSQL_ERRNO_KINDS[orig.errno]

    pgcode = getattr(orig, "pgcode", None)
    if pgcode in _PG_CODE_KINDS:
        return _PG_CODE_KINDS[pgcode]

    text = f"{type(orig).__name__} {orig}".lower()
    for markers, kind in _MESSAGE_MARKERS:
        if any(marker in text for marker in markers):
            return kind

    if isinstance(error, (ArgumentError, ValueError, TypeError)):
        return ErrorKind.INVALID_PARAMETERS

    if isinstance(error, DBAPIError) or isinstance(orig, (MySQLError, ConnectionError, TimeoutError, OSError)):
        return ErrorKind.CONNECTION

    return ErrorKind.UNKNOWN_CONNECTION


def connection_error_for(error: BaseException) -> DatabaseConnectionError:
    """Build the typed connection error for a raw driver failure."""

    kind = classify_connection_error(error)
    if kind == ErrorKind.CONNECTION:
        message = f"Failed to connect to database: {_driver_error(error)}"
    else:
        message = _CONNECTION_MESSAGES[kind]
    return _CONNECTION_CLASSES[kind](message, error)


def is_statement_error(error: BaseException) -> bool:
    """True when the driver rejected a statement (not a lost connection)."""

    return isinstance(error, DBAPIError) and not error.connection_invalidated
