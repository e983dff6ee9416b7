"""
db/connection.py
----------------
Builds the PostgreSQL client from configuration.
Uses psycopg2's ThreadedConnectionPool so concurrent reads from several
threads can share it.

A deployment without database credentials is a valid mode: the result is
an ``Unconfigured`` state rather than an exception.
"""

import threading
from dataclasses import dataclass
from typing import Union
from urllib.parse import urlsplit

import psycopg2
from psycopg2 import extensions, extras, pool

from db.errors import ConfigurationError
from utils.logger import get_logger

logger = get_logger(__name__)

EXPECTED_URL_FORMAT = "postgresql://<host>:<port>/<db>?sslmode=require"
_ACCEPTED_SCHEMES = ("postgresql://", "postgres://")

# Returned connections are kept only while the pool holds fewer than this.
MIN_POOL_CONNECTIONS = 1

# text[] (oid 1009) -> list[str]
TEXT_ARRAY = extensions.new_array_type((1009,), "TEXT[]", psycopg2.STRING)


@dataclass(frozen=True)
class DatabaseConfig:
    """
    Connection settings.

    Attributes:
        url: libpq connection URL; credentials may be embedded.
        user: Database user, used when the URL carries none.
        password: Database password, used when the URL carries none.
        max_connections: Upper bound of the pool.
        connect_timeout: Seconds to wait for a new connection.
        statement_timeout_ms: Server-side limit for every statement.
    """
    url: str
    user: str = ""
    password: str = ""
    max_connections: int = 5
    connect_timeout: int = 10
    statement_timeout_ms: int = 15000

    def __repr__(self) -> str:
        return f"DatabaseConfig(url=<redacted>, user={self.user!r}, max_connections={self.max_connections})"


class DatabaseClient:
    """
    Thin wrapper around the connection pool.

    The pool is built on the first ``getconn`` so that startup never
    touches the network. It keeps one idle connection warm between
    operations and grows up to ``max_connections`` under load.
    """

    def __init__(self, config: DatabaseConfig):
        self._dsn = config.url.strip()
        self._max_connections = config.max_connections
        self._connect_kwargs = {
            "connect_timeout": config.connect_timeout,
            "options": f"-c statement_timeout={config.statement_timeout_ms}",
            "cursor_factory": extras.RealDictCursor,
        }
        if config.user.strip():
            self._connect_kwargs["user"] = config.user.strip()
        if config.password.strip():
            self._connect_kwargs["password"] = config.password.strip()

        self._pool = None
        self._lock = threading.Lock()
        extensions.register_type(TEXT_ARRAY)

    def _get_pool(self) -> pool.ThreadedConnectionPool:
        with self._lock:
            if self._pool is None:
                self._pool = pool.ThreadedConnectionPool(
                    MIN_POOL_CONNECTIONS, self._max_connections, self._dsn, **self._connect_kwargs
                )
                logger.info("Database connection pool opened.")
            return self._pool

    def getconn(self):
        return self._get_pool().getconn()

    def putconn(self, conn) -> None:
        self._get_pool().putconn(conn)

    def close(self) -> None:
        """Close all pooled connections."""
        with self._lock:
            if self._pool is None:
                return
            self._pool.closeall()
            self._pool = None
        logger.info("Database connection pool closed.")


@dataclass(frozen=True)
class Configured:
    client: DatabaseClient


@dataclass(frozen=True)
class Unconfigured:
    reason: str


ConnectionState = Union[Configured, Unconfigured]


def _url_has_userinfo(url: str) -> bool:
    return bool(urlsplit(url).username)


def _validate_url(url: str) -> None:
    """Fail fast on a URL libpq would reject later."""
    lowered = url.lower()
    if lowered.startswith("jdbc:"):
        raise ConfigurationError(
            "Invalid SUPABASE_DB_URL: remove the 'jdbc:' prefix. "
            f"Use '{EXPECTED_URL_FORMAT}'"
        )
    if not lowered.startswith(_ACCEPTED_SCHEMES):
        raise ConfigurationError(
            f"Invalid SUPABASE_DB_URL: expected format '{EXPECTED_URL_FORMAT}'"
        )
    try:
        extensions.parse_dsn(url)
    except psycopg2.ProgrammingError as e:
        raise ConfigurationError(
            f"Invalid SUPABASE_DB_URL ({e}): expected format '{EXPECTED_URL_FORMAT}'"
        ) from e


def create_connection_state(config: DatabaseConfig) -> ConnectionState:
    """
    Build the connection state for the handler.

    Args:
        config: Database settings; blank values mean "not provisioned".

    Returns:
        ``Configured`` with a ready client, or ``Unconfigured``.

    Raises:
        ConfigurationError: If a URL is present but malformed.
    """
    url = config.url.strip()
    if not url:
        logger.warning("SUPABASE_DB_URL is blank; database access is disabled.")
        return Unconfigured("SUPABASE_DB_URL is not set")

    _validate_url(url)

    if not _url_has_userinfo(url) and not (config.user.strip() and config.password.strip()):
        logger.warning("Database credentials are blank; database access is disabled.")
        return Unconfigured("SUPABASE_DB_USER and SUPABASE_DB_PASSWORD are not set")

    logger.info("Database client configured; connections open on first use.")
    return Configured(DatabaseClient(config))
