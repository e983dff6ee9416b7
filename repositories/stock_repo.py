"""
repositories/stock_repo.py
--------------------------
Data access layer for stocks.
All SQL queries related to the `stocks` table live here.
"""

from typing import Optional

from config import DEFAULT_LIST_LIMIT
from db.errors import ValidationError
from db.handler import DatabaseHandler
from models.stock import CreateStockInput, Stock, StockUpdateField, UpdateStockInput
from repositories.mappers import map_optional, map_stock
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = """
    id, nse_symbol, company_name, groww_symbol, kite_symbol,
    description, rating, tags, created_at, updated_at
"""

_INSERT_SQL = f"""
    INSERT INTO stocks (
        nse_symbol, company_name, groww_symbol, kite_symbol, description, rating, tags
    ) VALUES (
        %(nse_symbol)s, %(company_name)s, %(groww_symbol)s, %(kite_symbol)s, %(description)s,
        CAST(%(rating)s AS smallint), CAST(%(tags)s AS text[])
    )
    RETURNING {_COLUMNS};
"""

_SELECT_BY_ID_SQL = f"SELECT {_COLUMNS} FROM stocks WHERE id = %(stock_id)s LIMIT 1;"

_SELECT_BY_SYMBOL_SQL = f"SELECT {_COLUMNS} FROM stocks WHERE nse_symbol = %(nse_symbol)s LIMIT 1;"

_LIST_SQL = f"SELECT {_COLUMNS} FROM stocks ORDER BY id LIMIT %(limit)s;"

_UPDATE_SQL = f"""
    UPDATE stocks
    SET
        company_name = CASE WHEN %(set_company_name)s THEN CAST(%(company_name)s AS text) ELSE company_name END,
        groww_symbol = CASE WHEN %(set_groww_symbol)s THEN CAST(%(groww_symbol)s AS text) ELSE groww_symbol END,
        kite_symbol = CASE WHEN %(set_kite_symbol)s THEN CAST(%(kite_symbol)s AS text) ELSE kite_symbol END,
        description = CASE WHEN %(set_description)s THEN CAST(%(description)s AS text) ELSE description END,
        rating = CASE WHEN %(set_rating)s THEN CAST(%(rating)s AS smallint) ELSE rating END,
        tags = CASE WHEN %(set_tags)s THEN CAST(%(tags)s AS text[]) ELSE tags END,
        updated_at = NOW()
    WHERE id = %(stock_id)s
    RETURNING {_COLUMNS};
"""

_DELETE_SQL = "DELETE FROM stocks WHERE id = %(stock_id)s;"


class StockRepository:
    """Repository for CRUD operations on the stocks table."""

    def __init__(self, handler: DatabaseHandler):
        self.handler = handler

    # ── CREATE ────────────────────────────────────────────

    def create(self, data: CreateStockInput) -> Stock:
        """
        Insert a new stock.

        Args:
            data: Stock fields; NOT NULL and uniqueness are enforced by the database.

        Returns:
            The stored Stock with its server-assigned id and timestamps.
        """
        params = {
            "nse_symbol": data.nse_symbol,
            "company_name": data.company_name,
            "groww_symbol": data.groww_symbol,
            "kite_symbol": data.kite_symbol,
            "description": data.description,
            "rating": data.rating,
            "tags": list(data.tags or []),
        }
        stock = self.handler.write(
            "create stock", lambda h: map_stock(h.fetch_one(_INSERT_SQL, params))
        )
        logger.info(f"Created stock #{stock.id} ({stock.nse_symbol})")
        return stock

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, stock_id: int) -> Optional[Stock]:
        """Fetch a single stock, or None if no row has this id."""
        return self.handler.read(
            f"get stock by id '{stock_id}'",
            lambda h: map_optional(
                map_stock, h.fetch_one(_SELECT_BY_ID_SQL, {"stock_id": stock_id})
            ),
        )

    def get_by_nse_symbol(self, nse_symbol: str) -> Optional[Stock]:
        """Fetch a single stock by its NSE symbol, or None."""
        return self.handler.read(
            f"get stock by symbol '{nse_symbol}'",
            lambda h: map_optional(
                map_stock, h.fetch_one(_SELECT_BY_SYMBOL_SQL, {"nse_symbol": nse_symbol})
            ),
        )

    def list_stocks(self, limit: int = DEFAULT_LIST_LIMIT) -> list[Stock]:
        """Return up to `limit` stocks ordered by id."""
        return self.handler.read(
            "list stocks",
            lambda h: [map_stock(r) for r in h.fetch_all(_LIST_SQL, {"limit": limit})],
        )

    # ── UPDATE ────────────────────────────────────────────

    def update(self, stock_id: int, data: UpdateStockInput) -> Optional[Stock]:
        """
        Apply a partial update in one statement.

        Args:
            stock_id: Primary key.
            data: Intent; only fields in `fields_to_update` are written.

        Returns:
            The updated Stock, or None if the id does not exist.

        Raises:
            ValidationError: Empty field set, or company_name explicitly null.
        """
        fields = data.fields_to_update
        if not fields:
            raise ValidationError("update stock called with no fields to update")
        if StockUpdateField.COMPANY_NAME in fields and data.company_name is None:
            raise ValidationError("company_name cannot be null")

        params = {
            "stock_id": stock_id,
            "set_company_name": StockUpdateField.COMPANY_NAME in fields,
            "company_name": data.company_name,
            "set_groww_symbol": StockUpdateField.GROWW_SYMBOL in fields,
            "groww_symbol": data.groww_symbol,
            "set_kite_symbol": StockUpdateField.KITE_SYMBOL in fields,
            "kite_symbol": data.kite_symbol,
            "set_description": StockUpdateField.DESCRIPTION in fields,
            "description": data.description,
            "set_rating": StockUpdateField.RATING in fields,
            "rating": data.rating,
            "set_tags": StockUpdateField.TAGS in fields,
            "tags": list(data.tags) if data.tags is not None else None,
        }
        return self.handler.write(
            f"update stock '{stock_id}'",
            lambda h: map_optional(map_stock, h.fetch_one(_UPDATE_SQL, params)),
        )

    # ── DELETE ────────────────────────────────────────────

    def delete(self, stock_id: int) -> bool:
        """
        Delete a stock by id.

        Returns:
            True if a row was deleted, False otherwise.
        """
        deleted = self.handler.write(
            f"delete stock '{stock_id}'",
            lambda h: h.execute(_DELETE_SQL, {"stock_id": stock_id}) > 0,
        )
        if deleted:
            logger.info(f"Deleted stock #{stock_id}")
        return deleted
