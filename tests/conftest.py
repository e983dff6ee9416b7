"""Shared fixtures: a fake psycopg2 pool/connection/cursor and row factories."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from db.connection import Configured, Unconfigured
from db.handler import DatabaseHandler

IST = timezone(timedelta(hours=5, minutes=30))
CREATED = datetime(2024, 1, 15, 9, 30, tzinfo=IST)
UPDATED = datetime(2024, 1, 16, 15, 0, tzinfo=IST)


@pytest.fixture()
def cursor() -> MagicMock:
    cur = MagicMock(name="cursor")
    cur.fetchone.return_value = None
    cur.fetchall.return_value = []
    cur.rowcount = 0
    return cur


@pytest.fixture()
def connection(cursor: MagicMock) -> MagicMock:
    conn = MagicMock(name="connection")
    conn.cursor.return_value.__enter__.return_value = cursor
    conn.cursor.return_value.__exit__.return_value = False
    return conn


@pytest.fixture()
def client(connection: MagicMock) -> MagicMock:
    pool_client = MagicMock(name="client")
    pool_client.getconn.return_value = connection
    return pool_client


@pytest.fixture()
def handler(client: MagicMock) -> DatabaseHandler:
    return DatabaseHandler(Configured(client))


@pytest.fixture()
def unconfigured_handler() -> DatabaseHandler:
    return DatabaseHandler(Unconfigured("SUPABASE_DB_URL is not set"))


@pytest.fixture()
def make_stock_row():
    def _make(**overrides) -> dict:
        row = {
            "id": 7,
            "nse_symbol": "RELIANCE",
            "company_name": "Reliance Industries",
            "groww_symbol": None,
            "kite_symbol": None,
            "description": None,
            "rating": None,
            "tags": [],
            "created_at": CREATED,
            "updated_at": UPDATED,
        }
        row.update(overrides)
        return row

    return _make


@pytest.fixture()
def make_watchlist_row():
    def _make(**overrides) -> dict:
        row = {
            "id": 1,
            "name": "NIFTY50",
            "description": None,
            "created_at": CREATED,
            "updated_at": CREATED,
        }
        row.update(overrides)
        return row

    return _make


@pytest.fixture()
def make_membership_row():
    def _make(**overrides) -> dict:
        row = {
            "watchlist_id": 1,
            "stock_id": 7,
            "notes": None,
            "created_at": CREATED,
        }
        row.update(overrides)
        return row

    return _make
