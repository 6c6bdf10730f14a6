"""
Connection management for the TalentTrack database.

``ConnectionManager`` owns one SQLAlchemy engine (and therefore one pool) and
is the only way the rest of the application reaches the database:
authenticate, sync, query, transaction, close and get_status. Driver failures
are classified into the typed errors of ``database.errors`` and reported to
the error sink exactly once before being raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import threading
import time
from typing import Any, Callable, Mapping, Optional, TypeVar

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..common.error_logger import ErrorSink
from ..common.logger import get_logger
from ..core.constants import BACKOFF_BASE_MS, BACKOFF_MAX_MS, DEFAULT_MAX_RETRIES
from ..core.enums import QueryType
from .errors import (
    DatabaseConnectionError,
    QueryError,
    SyncError,
    TransactionError,
    connection_error_for,
    is_statement_error,
)
from .models import Base
from .schema import sync_schema

logger = get_logger(__name__)

T = TypeVar("T")

_DRIVERS = {
    "postgres": "postgresql+psycopg2",
    "postgresql": "postgresql+psycopg2",
    "mysql": "mysql+mysqlconnector",
    "sqlite": "sqlite",
}


@dataclass(frozen=True)
class ConnectionConfig:
    """Immutable snapshot of the database settings taken at process start."""

    database: str = "talenttrack"
    user: str = "postgres"
    password: str = field(default="password", repr=False)
    host: str = "localhost"
    port: int = 5432
    dialect: str = "postgres"
    pool_max: int = 20
    pool_min: int = 5
    pool_acquire_ms: int = 30000
    pool_idle_ms: int = 10000
    connect_timeout_ms: int = 60000
    acquire_timeout_ms: int = 60000
    query_timeout_ms: int = 60000
    development: bool = False

    @classmethod
    def from_settings(cls, settings) -> "ConnectionConfig":
        db_config: Mapping[str, Any] = getattr(settings, "DB_CONFIG")
        defaults = cls()
        return cls(
            database=str(db_config.get("database", defaults.database)),
            user=str(db_config.get("user", defaults.user)),
            password=str(db_config.get("password", defaults.password)),
            host=str(db_config.get("host", defaults.host)),
            port=int(db_config.get("port", defaults.port)),
            dialect=str(db_config.get("dialect", defaults.dialect)).lower(),
            pool_max=int(db_config.get("pool_max", defaults.pool_max)),
            pool_min=int(db_config.get("pool_min", defaults.pool_min)),
            pool_acquire_ms=int(db_config.get("pool_acquire_ms", defaults.pool_acquire_ms)),
            pool_idle_ms=int(db_config.get("pool_idle_ms", defaults.pool_idle_ms)),
            connect_timeout_ms=int(db_config.get("connect_timeout_ms", defaults.connect_timeout_ms)),
            acquire_timeout_ms=int(db_config.get("acquire_timeout_ms", defaults.acquire_timeout_ms)),
            query_timeout_ms=int(db_config.get("query_timeout_ms", defaults.query_timeout_ms)),
            development=bool(getattr(settings, "DEVELOPMENT", False)),
        )

    @property
    def is_sqlite(self) -> bool:
        return self.dialect == "sqlite"

    def driver_name(self) -> str:
        try:
            return _DRIVERS[self.dialect]
        except KeyError:
            raise ValueError(f"Unsupported database dialect: {self.dialect!r}") from None

    def url(self) -> URL:
        driver = self.driver_name()
        if self.is_sqlite:
            return URL.create(driver, database=None if self.database == ":memory:" else self.database)
        return URL.create(
            driver,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )

    def engine_options(self) -> dict[str, Any]:
        if self.is_sqlite:
            options: dict[str, Any] = {"connect_args": {"check_same_thread": False}, "echo": self.development}
            if self.database == ":memory:":
                # one shared in-memory database for every checkout
                options["poolclass"] = StaticPool
            return options

        if self.dialect == "mysql":
            connect_args: dict[str, Any] = {"connection_timeout": self.connect_timeout_ms // 1000}
        else:
            connect_args = {
                "connect_timeout": self.connect_timeout_ms // 1000,
                "options": f"-c statement_timeout={self.query_timeout_ms}",
            }

        return {
            "pool_size": self.pool_min,
            "max_overflow": max(self.pool_max - self.pool_min, 0),
            "pool_timeout": min(self.pool_acquire_ms, self.acquire_timeout_ms) / 1000,
            # recycles by connection age, not idle time; closest pool knob to the idle timeout
            "pool_recycle": max(self.pool_idle_ms // 1000, 1),
            "pool_pre_ping": True,
            "echo": self.development,
            "connect_args": connect_args,
        }

    def snapshot(self) -> dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "dialect": self.dialect,
        }


def create_engine_for(config: ConnectionConfig) -> Engine:
    engine = create_engine(config.url(), **config.engine_options())

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn, connection_record):
        logger.debug("Database connection established")

    @event.listens_for(engine, "close")
    def _on_close(dbapi_conn, connection_record):
        logger.debug("Database connection closed")

    return engine


def backoff_delay_ms(retry_count: int) -> int:
    """Delay before retry number ``retry_count`` (1-based): 1s, 2s, 4s, 8s, then 10s."""
    return min(BACKOFF_BASE_MS * 2 ** (retry_count - 1), BACKOFF_MAX_MS)


@dataclass
class ConnectionState:
    max_retries: int = DEFAULT_MAX_RETRIES
    is_connected: bool = False
    retry_count: int = 0


@dataclass(frozen=True)
class ConnectionStatus:
    is_connected: bool
    retry_count: int
    max_retries: int
    config: dict

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_connected": self.is_connected,
            "retry_count": self.retry_count,
            "max_retries": self.max_retries,
            "config": dict(self.config),
        }


class ConnectionManager:
    """Resilient facade over the shared engine.

    Only ``authenticate`` retries (bounded exponential backoff). ``sync``,
    ``query`` and ``transaction`` surface failures immediately as typed errors.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        *,
        engine: Optional[Engine] = None,
        engine_factory: Callable[[ConnectionConfig], Engine] = create_engine_for,
        metadata=None,
        error_logger: Optional[ErrorSink] = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        sleep: Callable[[float], None] = time.sleep,
        schema_sync: Callable[..., Any] = sync_schema,
    ):
        self._config = config
        self._engine = engine
        self._engine_factory = engine_factory
        self._session_factory: Optional[sessionmaker] = None
        self._metadata = metadata if metadata is not None else Base.metadata
        self._error_logger = error_logger
        self._sleep = sleep
        self._schema_sync = schema_sync
        self._state = ConnectionState(max_retries=int(max_retries))
        self._auth_lock = threading.RLock()

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    def _get_engine(self) -> Engine:
        if self._engine is None:
            self._engine = self._engine_factory(self._config)
        return self._engine

    @property
    def engine(self) -> Engine:
        return self._get_engine()

    def _sessions(self) -> sessionmaker:
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._get_engine(), expire_on_commit=False)
        return self._session_factory

    def _report(self, error: BaseException) -> None:
        if self._error_logger is None:
            return
        try:
            self._error_logger.log(error)
        except Exception:
            logger.exception("Error logger failed while reporting %s", type(error).__name__)

    def _ping(self) -> None:
        with self._get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))

    def _ensure_connected(self) -> None:
        if not self._state.is_connected:
            self.authenticate()

    def authenticate(self) -> bool:
        with self._auth_lock:
            # each call gets the full retry budget
            self._state.retry_count = 0
            while True:
                try:
                    self._ping()
                except Exception as exc:
                    self._state.is_connected = False
                    error = connection_error_for(exc)
                    self._report(error)

                    if self._state.retry_count >= self._state.max_retries:
                        logger.error(
                            "Max database connection retries exceeded (%s/%s): %s",
                            self._state.retry_count,
                            self._state.max_retries,
                            error.message,
                        )
                        raise error from exc

                    self._state.retry_count += 1
                    delay_ms = backoff_delay_ms(self._state.retry_count)
                    logger.warning(
                        "Database connection failed: %s Retrying in %sms... (%s/%s)",
                        error.message,
                        delay_ms,
                        self._state.retry_count,
                        self._state.max_retries,
                    )
                    self._sleep(delay_ms / 1000)
                    continue

                self._state.is_connected = True
                self._state.retry_count = 0
                logger.info("Database authentication successful")
                return True

    def sync(self, options: Optional[Mapping[str, Any]] = None) -> bool:
        self._ensure_connected()

        sync_options = {"force": False, "alter": self._config.development}
        sync_options.update(options or {})

        try:
            self._schema_sync(self._get_engine(), self._metadata, **sync_options)
        except Exception as exc:
            if is_statement_error(exc):
                error = SyncError(f"Database synchronization failed: {getattr(exc, 'orig', exc)}", exc)
            else:
                error = SyncError("Failed to synchronize database schema", exc)
            self._report(error)
            raise error from exc

        logger.info("Database synchronized successfully (force=%s, alter=%s)", sync_options["force"], sync_options["alter"])
        return True

    def query(self, sql, options: Optional[Mapping[str, Any]] = None):
        """Run ``sql`` and return row dicts (SELECT) or the affected row count."""
        self._ensure_connected()

        query_options: dict[str, Any] = {"type": QueryType.SELECT}
        query_options.update(options or {})

        try:
            query_type = QueryType(query_options["type"])
            params = query_options.get("params") or {}
            statement = text(sql) if isinstance(sql, str) else sql

            if query_type == QueryType.SELECT:
                with self._get_engine().connect() as conn:
                    return [dict(row) for row in conn.execute(statement, params).mappings()]

            with self._get_engine().begin() as conn:
                result = conn.execute(statement, params)
                if query_type == QueryType.RAW and result.returns_rows:
                    return [dict(row) for row in result.mappings()]
                return result.rowcount
        except Exception as exc:
            if isinstance(exc, DBAPIError) and exc.connection_invalidated:
                self._state.is_connected = False
            if is_statement_error(exc):
                error = QueryError(f"Query execution failed: {getattr(exc, 'orig', exc)}", exc)
            else:
                error = QueryError("Database query failed", exc)
            self._report(error)
            raise error from exc

    def transaction(self, work: Callable[[Session], T]) -> T:
        """Run ``work(session)`` atomically: commit on return, roll back on any exception."""
        session = self._sessions()()
        try:
            session.begin()
            result = work(session)
            session.commit()
            return result
        except Exception as exc:
            try:
                session.rollback()
            except Exception:
                logger.exception("Rollback failed")
            error = TransactionError(f"Transaction failed: {exc}", exc)
            self._report(error)
            raise error from exc
        finally:
            session.close()

    def close(self) -> None:
        try:
            if self._engine is not None:
                self._engine.dispose()
        except Exception as exc:
            error = DatabaseConnectionError("Failed to close database connection", exc)
            self._report(error)
            raise error from exc

        self._state.is_connected = False
        logger.info("Database connection closed successfully")

    def get_status(self) -> ConnectionStatus:
        return ConnectionStatus(
            is_connected=self._state.is_connected,
            retry_count=self._state.retry_count,
            max_retries=self._state.max_retries,
            config=self._config.snapshot(),
        )
