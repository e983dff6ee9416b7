"""
repositories/watchlist_stock_repo.py
------------------------------------
Data access layer for watchlist memberships (`watchlist_stocks`).
Rows are keyed by (watchlist_id, stock_id); there is no surrogate id.
"""

from typing import Optional

from db.errors import ValidationError
from db.handler import DatabaseHandler
from models.watchlist_stock import (
    CreateWatchlistStockInput,
    UpdateWatchlistStockInput,
    WatchlistStock,
    WatchlistStockUpdateField,
)
from repositories.mappers import map_optional, map_watchlist_stock
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = "watchlist_id, stock_id, notes, created_at"

# Plain INSERT: a duplicate pair must fail on the unique constraint.
_INSERT_SQL = f"""
    INSERT INTO watchlist_stocks (watchlist_id, stock_id, notes)
    VALUES (%(watchlist_id)s, %(stock_id)s, %(notes)s)
    RETURNING {_COLUMNS};
"""

_SELECT_SQL = f"""
    SELECT {_COLUMNS} FROM watchlist_stocks
    WHERE watchlist_id = %(watchlist_id)s AND stock_id = %(stock_id)s
    LIMIT 1;
"""

_LIST_FOR_WATCHLIST_SQL = f"""
    SELECT {_COLUMNS} FROM watchlist_stocks
    WHERE watchlist_id = %(watchlist_id)s
    ORDER BY created_at DESC;
"""

_UPDATE_SQL = f"""
    UPDATE watchlist_stocks
    SET
        notes = CASE WHEN %(set_notes)s THEN CAST(%(notes)s AS text) ELSE notes END
    WHERE watchlist_id = %(watchlist_id)s AND stock_id = %(stock_id)s
    RETURNING {_COLUMNS};
"""

_DELETE_SQL = """
    DELETE FROM watchlist_stocks
    WHERE watchlist_id = %(watchlist_id)s AND stock_id = %(stock_id)s;
"""


class WatchlistStockRepository:
    """Repository for membership rows linking stocks to watchlists."""

    def __init__(self, handler: DatabaseHandler):
        self.handler = handler

    # ── CREATE ────────────────────────────────────────────

    def create(self, data: CreateWatchlistStockInput) -> WatchlistStock:
        """
        Add a stock to a watchlist.

        Raises:
            OperationError: If the pair already exists or either id is unknown.
        """
        params = {
            "watchlist_id": data.watchlist_id,
            "stock_id": data.stock_id,
            "notes": data.notes,
        }
        membership = self.handler.write(
            "create watchlist stock mapping",
            lambda h: map_watchlist_stock(h.fetch_one(_INSERT_SQL, params)),
        )
        logger.info(f"Added stock #{data.stock_id} to watchlist #{data.watchlist_id}")
        return membership

    # ── READ ──────────────────────────────────────────────

    def get(self, watchlist_id: int, stock_id: int) -> Optional[WatchlistStock]:
        params = {"watchlist_id": watchlist_id, "stock_id": stock_id}
        return self.handler.read(
            f"get watchlist stock mapping '{watchlist_id}:{stock_id}'",
            lambda h: map_optional(map_watchlist_stock, h.fetch_one(_SELECT_SQL, params)),
        )

    def list_for_watchlist(self, watchlist_id: int) -> list[WatchlistStock]:
        """Memberships of one watchlist, most recently added first."""
        return self.handler.read(
            f"list stocks for watchlist '{watchlist_id}'",
            lambda h: [
                map_watchlist_stock(r)
                for r in h.fetch_all(_LIST_FOR_WATCHLIST_SQL, {"watchlist_id": watchlist_id})
            ],
        )

    # ── UPDATE ────────────────────────────────────────────

    def update(
        self, watchlist_id: int, stock_id: int, data: UpdateWatchlistStockInput
    ) -> Optional[WatchlistStock]:
        if not data.fields_to_update:
            raise ValidationError("update watchlist stock called with no fields to update")

        params = {
            "watchlist_id": watchlist_id,
            "stock_id": stock_id,
            "set_notes": WatchlistStockUpdateField.NOTES in data.fields_to_update,
            "notes": data.notes,
        }
        return self.handler.write(
            f"update watchlist stock mapping '{watchlist_id}:{stock_id}'",
            lambda h: map_optional(map_watchlist_stock, h.fetch_one(_UPDATE_SQL, params)),
        )

    # ── DELETE ────────────────────────────────────────────

    def delete(self, watchlist_id: int, stock_id: int) -> bool:
        """Remove a stock from a watchlist. Returns True if a row was deleted."""
        params = {"watchlist_id": watchlist_id, "stock_id": stock_id}
        deleted = self.handler.write(
            f"delete watchlist stock mapping '{watchlist_id}:{stock_id}'",
            lambda h: h.execute(_DELETE_SQL, params) > 0,
        )
        if deleted:
            logger.info(f"Removed stock #{stock_id} from watchlist #{watchlist_id}")
        return deleted
