"""
repositories/watchlist_repo.py
------------------------------
Data access layer for watchlists.
"""

from typing import Optional

from config import DEFAULT_LIST_LIMIT
from db.errors import ValidationError
from db.handler import DatabaseHandler
from models.watchlist import (
    CreateWatchlistInput,
    UpdateWatchlistInput,
    Watchlist,
    WatchlistUpdateField,
)
from repositories.mappers import map_optional, map_watchlist
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = "id, name, description, created_at, updated_at"

_INSERT_SQL = f"""
    INSERT INTO watchlists (name, description)
    VALUES (%(name)s, %(description)s)
    RETURNING {_COLUMNS};
"""

_SELECT_BY_ID_SQL = f"SELECT {_COLUMNS} FROM watchlists WHERE id = %(watchlist_id)s LIMIT 1;"

_SELECT_BY_NAME_SQL = f"SELECT {_COLUMNS} FROM watchlists WHERE name = %(name)s LIMIT 1;"

_LIST_SQL = f"SELECT {_COLUMNS} FROM watchlists ORDER BY id LIMIT %(limit)s;"

_UPDATE_SQL = f"""
    UPDATE watchlists
    SET
        name = CASE WHEN %(set_name)s THEN CAST(%(name)s AS text) ELSE name END,
        description = CASE WHEN %(set_description)s THEN CAST(%(description)s AS text) ELSE description END,
        updated_at = NOW()
    WHERE id = %(watchlist_id)s
    RETURNING {_COLUMNS};
"""

_DELETE_SQL = "DELETE FROM watchlists WHERE id = %(watchlist_id)s;"


class WatchlistRepository:
    """Repository for CRUD operations on the watchlists table."""

    def __init__(self, handler: DatabaseHandler):
        self.handler = handler

    # ── CREATE ────────────────────────────────────────────

    def create(self, data: CreateWatchlistInput) -> Watchlist:
        """Insert a watchlist. A duplicate name fails in the database."""
        params = {"name": data.name, "description": data.description}
        watchlist = self.handler.write(
            "create watchlist", lambda h: map_watchlist(h.fetch_one(_INSERT_SQL, params))
        )
        logger.info(f"Created watchlist #{watchlist.id} ({watchlist.name})")
        return watchlist

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, watchlist_id: int) -> Optional[Watchlist]:
        return self.handler.read(
            f"get watchlist by id '{watchlist_id}'",
            lambda h: map_optional(
                map_watchlist, h.fetch_one(_SELECT_BY_ID_SQL, {"watchlist_id": watchlist_id})
            ),
        )

    def get_by_name(self, name: str) -> Optional[Watchlist]:
        return self.handler.read(
            f"get watchlist by name '{name}'",
            lambda h: map_optional(map_watchlist, h.fetch_one(_SELECT_BY_NAME_SQL, {"name": name})),
        )

    def list_watchlists(self, limit: int = DEFAULT_LIST_LIMIT) -> list[Watchlist]:
        return self.handler.read(
            "list watchlists",
            lambda h: [map_watchlist(r) for r in h.fetch_all(_LIST_SQL, {"limit": limit})],
        )

    # ── UPDATE ────────────────────────────────────────────

    def update(self, watchlist_id: int, data: UpdateWatchlistInput) -> Optional[Watchlist]:
        """
        Apply a partial update.

        Returns:
            The updated Watchlist, or None if the id does not exist.

        Raises:
            ValidationError: Empty field set, or name explicitly null.
        """
        fields = data.fields_to_update
        if not fields:
            raise ValidationError("update watchlist called with no fields to update")
        if WatchlistUpdateField.NAME in fields and data.name is None:
            raise ValidationError("name cannot be null")

        params = {
            "watchlist_id": watchlist_id,
            "set_name": WatchlistUpdateField.NAME in fields,
            "name": data.name,
            "set_description": WatchlistUpdateField.DESCRIPTION in fields,
            "description": data.description,
        }
        return self.handler.write(
            f"update watchlist '{watchlist_id}'",
            lambda h: map_optional(map_watchlist, h.fetch_one(_UPDATE_SQL, params)),
        )

    # ── DELETE ────────────────────────────────────────────

    def delete(self, watchlist_id: int) -> bool:
        """Delete a watchlist. Membership rows follow the table's FK rules."""
        deleted = self.handler.write(
            f"delete watchlist '{watchlist_id}'",
            lambda h: h.execute(_DELETE_SQL, {"watchlist_id": watchlist_id}) > 0,
        )
        if deleted:
            logger.info(f"Deleted watchlist #{watchlist_id}")
        return deleted
