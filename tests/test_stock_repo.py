"""Tests for the stock repository."""

from __future__ import annotations

import psycopg2
import pytest

from db.errors import NotConfiguredError, OperationError, ValidationError
from models.stock import CreateStockInput, StockUpdateField, UpdateStockInput
from repositories.stock_repo import StockRepository


def _last_statement(cursor):
    sql, params = cursor.execute.call_args[0]
    return sql, params


class TestCreate:
    def test_insert_returning_row(self, handler, connection, cursor, make_stock_row):
        cursor.fetchone.return_value = make_stock_row(id=11, tags=[])
        repo = StockRepository(handler)

        stock = repo.create(CreateStockInput(nse_symbol="RELIANCE", company_name="Reliance Industries"))

        sql, params = _last_statement(cursor)
        assert sql.strip().startswith("INSERT INTO stocks")
        assert "RETURNING" in sql
        assert params["nse_symbol"] == "RELIANCE"
        assert params["tags"] == []
        assert params["rating"] is None
        assert stock.id == 11
        assert stock.tags == []
        connection.commit.assert_called_once()

    def test_duplicate_symbol_is_operation_error(self, handler, connection, cursor):
        cursor.execute.side_effect = psycopg2.IntegrityError(
            'duplicate key value violates unique constraint "stocks_nse_symbol_key"'
        )
        repo = StockRepository(handler)

        with pytest.raises(OperationError, match="create stock"):
            repo.create(CreateStockInput(nse_symbol="RELIANCE", company_name="Reliance"))
        connection.rollback.assert_called_once()


class TestRead:
    def test_get_by_id_found(self, handler, cursor, make_stock_row):
        cursor.fetchone.return_value = make_stock_row(id=42)
        stock = StockRepository(handler).get_by_id(42)
        assert stock.id == 42
        assert _last_statement(cursor)[1] == {"stock_id": 42}

    def test_get_by_id_missing_returns_none(self, handler):
        assert StockRepository(handler).get_by_id(999) is None

    def test_get_by_nse_symbol(self, handler, cursor, make_stock_row):
        cursor.fetchone.return_value = make_stock_row()
        stock = StockRepository(handler).get_by_nse_symbol("RELIANCE")
        assert stock.nse_symbol == "RELIANCE"
        assert "WHERE nse_symbol = %(nse_symbol)s" in _last_statement(cursor)[0]

    def test_list_defaults_to_200_ordered_by_id(self, handler, cursor, make_stock_row):
        cursor.fetchall.return_value = [make_stock_row(id=1), make_stock_row(id=2)]

        stocks = StockRepository(handler).list_stocks()

        sql, params = _last_statement(cursor)
        assert "ORDER BY id" in sql
        assert params == {"limit": 200}
        assert [s.id for s in stocks] == [1, 2]

    def test_corrupt_timestamp_is_classified(self, handler, cursor, make_stock_row):
        cursor.fetchone.return_value = make_stock_row(created_at=None)
        with pytest.raises(OperationError, match="get stock by id '7'"):
            StockRepository(handler).get_by_id(7)


class TestCreateThenRead:
    def test_get_by_id_returns_the_created_stock(self, handler, cursor, make_stock_row):
        stored = {}

        def _fetchone():
            sql, params = cursor.execute.call_args[0]
            if "INSERT INTO stocks" in sql:
                stored[11] = make_stock_row(id=11, **params)
                return stored[11]
            return stored.get(params["stock_id"])

        cursor.fetchone.side_effect = _fetchone
        repo = StockRepository(handler)
        data = CreateStockInput(
            nse_symbol="HDFCBANK",
            company_name="HDFC Bank",
            groww_symbol="hdfc-bank-ltd",
            kite_symbol="NSE:HDFCBANK",
            description="Private sector lender",
            rating=4,
            tags=["banking", "nifty50", "largecap"],
        )

        created = repo.create(data)
        fetched = repo.get_by_id(created.id)

        assert fetched == created
        for field in (
            "nse_symbol",
            "company_name",
            "groww_symbol",
            "kite_symbol",
            "description",
            "rating",
            "tags",
        ):
            assert getattr(fetched, field) == getattr(data, field)


class TestUpdate:
    def test_empty_field_set_rejected_before_io(self, handler, client):
        with pytest.raises(ValidationError, match="no fields to update"):
            StockRepository(handler).update(1, UpdateStockInput())
        client.getconn.assert_not_called()

    def test_null_company_name_rejected(self, handler, client):
        intent = UpdateStockInput(fields_to_update=frozenset({StockUpdateField.COMPANY_NAME}))
        with pytest.raises(ValidationError, match="company_name cannot be null"):
            StockRepository(handler).update(1, intent)
        client.getconn.assert_not_called()

    def test_partial_update_flags(self, handler, cursor, make_stock_row):
        cursor.fetchone.return_value = make_stock_row(id=42, description=None)
        intent = UpdateStockInput(
            fields_to_update=frozenset({StockUpdateField.DESCRIPTION, StockUpdateField.TAGS}),
            description=None,
            tags=["banking"],
            company_name="ignored because not in set",
        )

        stock = StockRepository(handler).update(42, intent)

        sql, params = _last_statement(cursor)
        assert params["stock_id"] == 42
        assert params["set_description"] is True
        assert params["description"] is None
        assert params["set_tags"] is True
        assert params["tags"] == ["banking"]
        for column in ("company_name", "groww_symbol", "kite_symbol", "rating"):
            assert params[f"set_{column}"] is False
            assert f"{column} = CASE WHEN %(set_{column})s" in sql
        assert stock.id == 42

    def test_update_missing_id_returns_none(self, handler):
        intent = UpdateStockInput(
            fields_to_update=frozenset({StockUpdateField.RATING}), rating=3
        )
        assert StockRepository(handler).update(404, intent) is None


class TestDelete:
    def test_delete_existing(self, handler, cursor):
        cursor.rowcount = 1
        assert StockRepository(handler).delete(42) is True

    def test_delete_missing(self, handler, cursor):
        cursor.rowcount = 0
        assert StockRepository(handler).delete(42) is False


class TestUnconfigured:
    @pytest.mark.parametrize(
        "call",
        [
            lambda r: r.create(CreateStockInput(nse_symbol="TCS", company_name="TCS")),
            lambda r: r.get_by_id(1),
            lambda r: r.get_by_nse_symbol("TCS"),
            lambda r: r.list_stocks(10),
            lambda r: r.update(1, UpdateStockInput.from_payload({"rating": 1})),
            lambda r: r.delete(1),
        ],
    )
    def test_raises_not_configured(self, unconfigured_handler, call):
        with pytest.raises(NotConfiguredError):
            call(StockRepository(unconfigured_handler))
