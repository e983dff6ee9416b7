"""
db/handler.py
-------------
Access coordinator: the single place where connections are acquired,
transactions are opened and closed, and raw failures are classified.

    handler.read(action, lambda h: ...)           # pooled connection, no transaction
    handler.write(action, lambda h: ...)          # one transaction, commit or rollback
    handler.transaction(action, lambda r, w: ...) # read + write handles, same transaction
"""

from typing import Any, Callable, Optional, TypeVar

from db.connection import Configured, ConnectionState, DatabaseClient
from db.errors import DatabaseError, NotConfiguredError, OperationError
from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ReadHandle:
    """Query access bound to one cursor for the lifetime of one operation."""

    def __init__(self, cursor):
        self._cursor = cursor

    def fetch_one(self, sql, params: Any = None) -> Optional[dict]:
        self._cursor.execute(sql, params)
        return self._cursor.fetchone()

    def fetch_all(self, sql, params: Any = None) -> list[dict]:
        self._cursor.execute(sql, params)
        return list(self._cursor.fetchall())

    def fetch_value(self, sql, params: Any = None) -> Any:
        """Return the first column of the first row, or None."""
        row = self.fetch_one(sql, params)
        if row is None:
            return None
        return next(iter(row.values()))


class WriteHandle(ReadHandle):
    """Adds statements that modify data. Only handed out inside a transaction."""

    def execute(self, sql, params: Any = None) -> int:
        """Run a statement and return the affected row count."""
        self._cursor.execute(sql, params)
        return self._cursor.rowcount


class DatabaseHandler:
    """
    Runs operations against the configured client.

    Every exception leaving ``read``/``write``/``transaction`` is a
    DatabaseError subclass with a sanitized message.
    """

    def __init__(self, state: ConnectionState):
        self._state = state

    @property
    def is_configured(self) -> bool:
        return isinstance(self._state, Configured)

    # ── OPERATIONS ────────────────────────────────────────

    def read(self, action: str, operation: Callable[[ReadHandle], T]) -> T:
        """
        Execute a read-only operation outside any explicit transaction.

        Args:
            action: Human-readable description used in error messages.
            operation: Receives a ReadHandle.

        Returns:
            Whatever ``operation`` returns.
        """
        client = self._require_client()
        try:
            conn = client.getconn()
            try:
                conn.set_session(readonly=True, autocommit=True)
                with conn.cursor() as cur:
                    return operation(ReadHandle(cur))
            finally:
                client.putconn(conn)
        except DatabaseError:
            raise
        except Exception as e:
            raise self._operation_error(action, e) from e

    def write(self, action: str, operation: Callable[[WriteHandle], T]) -> T:
        """Execute ``operation`` in one transaction; commit on success, rollback on failure."""
        return self._in_transaction(action, lambda cur: operation(WriteHandle(cur)))

    def transaction(
        self, action: str, operation: Callable[[ReadHandle, WriteHandle], T]
    ) -> T:
        """
        Execute a multi-statement sequence in one transaction.
        Both handles share the transaction, so reads observe earlier writes.
        """
        return self._in_transaction(
            action, lambda cur: operation(ReadHandle(cur), WriteHandle(cur))
        )

    def check_connection(self) -> bool:
        """Liveness check. Never raises: any failure is reported as False."""
        try:
            return self.read("check connection", lambda h: h.fetch_value("SELECT 1 AS ok")) == 1
        except Exception as e:
            logger.warning(f"Database connection check failed: {e}")
            return False

    # ── HELPERS ───────────────────────────────────────────

    def _in_transaction(self, action: str, operation: Callable[[Any], T]) -> T:
        client = self._require_client()
        try:
            conn = client.getconn()
            try:
                conn.set_session(readonly=False, autocommit=False)
                try:
                    with conn.cursor() as cur:
                        result = operation(cur)
                    conn.commit()
                    return result
                except Exception:
                    conn.rollback()
                    raise
            finally:
                client.putconn(conn)
        except DatabaseError:
            raise
        except Exception as e:
            raise self._operation_error(action, e) from e

    def _require_client(self) -> DatabaseClient:
        if isinstance(self._state, Configured):
            return self._state.client
        raise NotConfiguredError()

    @staticmethod
    def _operation_error(action: str, error: Exception) -> OperationError:
        classified = OperationError(action, str(error))
        logger.error(classified.message)
        return classified
