"""Tests for the access coordinator: handles, transactions and classification."""

from __future__ import annotations

import psycopg2
import pytest
from psycopg2.pool import PoolError

from db.errors import NotConfiguredError, OperationError, ValidationError
from db.handler import ReadHandle, WriteHandle


class TestRead:
    def test_returns_operation_result_and_releases(self, handler, client, connection, cursor):
        cursor.fetchone.return_value = {"id": 1}

        result = handler.read("get thing", lambda h: h.fetch_one("SELECT 1", None))

        assert result == {"id": 1}
        connection.set_session.assert_called_once_with(readonly=True, autocommit=True)
        connection.commit.assert_not_called()
        client.putconn.assert_called_once_with(connection)

    def test_handle_is_read_only(self, handler):
        handle = handler.read("inspect", lambda h: h)
        assert isinstance(handle, ReadHandle)
        assert not hasattr(handle, "execute")

    def test_driver_error_is_classified_and_sanitized(self, handler, client, connection, cursor):
        raw = psycopg2.OperationalError('could not connect to "postgresql://app:secret@db:5432/x"')
        cursor.execute.side_effect = raw

        with pytest.raises(OperationError) as exc_info:
            handler.read("list stocks", lambda h: h.fetch_all("SELECT 1"))

        error = exc_info.value
        assert "list stocks" in error.message
        assert "secret" not in error.message
        assert error.__cause__ is raw
        client.putconn.assert_called_once_with(connection)

    def test_pool_failure_is_classified(self, handler, client):
        client.getconn.side_effect = PoolError("connection pool exhausted")
        with pytest.raises(OperationError, match="connection pool exhausted"):
            handler.read("get stock by id '1'", lambda h: None)

    def test_fetch_value_of_empty_result(self, handler):
        assert handler.read("value", lambda h: h.fetch_value("SELECT 1 WHERE false")) is None


class TestWrite:
    def test_commits_on_success(self, handler, client, connection, cursor):
        cursor.rowcount = 3

        affected = handler.write("delete rows", lambda h: h.execute("DELETE FROM t"))

        assert affected == 3
        connection.set_session.assert_called_once_with(readonly=False, autocommit=False)
        connection.commit.assert_called_once()
        connection.rollback.assert_not_called()
        client.putconn.assert_called_once_with(connection)

    def test_rolls_back_on_failure(self, handler, client, connection, cursor):
        cursor.execute.side_effect = psycopg2.IntegrityError("duplicate key value")

        with pytest.raises(OperationError, match="create stock"):
            handler.write("create stock", lambda h: h.execute("INSERT"))

        connection.rollback.assert_called_once()
        connection.commit.assert_not_called()
        client.putconn.assert_called_once_with(connection)

    def test_classified_errors_pass_through(self, handler, connection):
        def op(h):
            raise ValidationError("name cannot be null")

        with pytest.raises(ValidationError, match="name cannot be null"):
            handler.write("update watchlist '1'", op)
        connection.rollback.assert_called_once()


class TestTransaction:
    def test_both_handles_share_one_transaction(self, handler, connection, cursor):
        cursor.fetchone.return_value = {"count": 2}

        def op(read: ReadHandle, write: WriteHandle):
            write.execute("INSERT INTO t VALUES (1)")
            return read.fetch_value("SELECT COUNT(*) AS count FROM t")

        assert handler.transaction("insert then count", op) == 2
        assert cursor.execute.call_count == 2
        connection.commit.assert_called_once()

    def test_failure_rolls_back_everything(self, handler, connection, cursor):
        cursor.execute.side_effect = [None, psycopg2.DataError("value too long")]

        def op(read, write):
            write.execute("INSERT 1")
            write.execute("INSERT 2")

        with pytest.raises(OperationError):
            handler.transaction("two inserts", op)
        connection.rollback.assert_called_once()
        connection.commit.assert_not_called()


class TestNotConfigured:
    @pytest.mark.parametrize(
        "call",
        [
            lambda h: h.read("r", lambda _: None),
            lambda h: h.write("w", lambda _: None),
            lambda h: h.transaction("t", lambda _r, _w: None),
        ],
    )
    def test_every_shape_raises(self, unconfigured_handler, call):
        with pytest.raises(NotConfiguredError):
            call(unconfigured_handler)

    def test_is_configured_flag(self, handler, unconfigured_handler):
        assert handler.is_configured
        assert not unconfigured_handler.is_configured


class TestCheckConnection:
    def test_true_when_select_succeeds(self, handler, cursor):
        cursor.fetchone.return_value = {"ok": 1}
        assert handler.check_connection() is True

    def test_false_when_connect_fails(self, handler, client):
        client.getconn.side_effect = psycopg2.OperationalError("timeout expired")
        assert handler.check_connection() is False

    def test_false_when_unconfigured(self, unconfigured_handler):
        assert unconfigured_handler.check_connection() is False
