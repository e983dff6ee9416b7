"""
repositories/mappers.py
-----------------------
Row mappers: convert RealDictCursor rows into domain objects.
Timestamps are normalized to UTC; a NULL in a NOT NULL timestamp column
is treated as corrupt data and raises.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from models.stock import Stock
from models.watchlist import Watchlist
from models.watchlist_stock import WatchlistStock


def _to_utc(row: dict, column: str) -> datetime:
    value = row.get(column)
    if value is None:
        raise ValueError(f"Unexpected null timestamp in column '{column}'")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def _string_list(value: Any) -> list[str]:
    """Copy a text[] value into a fresh list; NULL array -> [], NULL items dropped."""
    if value is None:
        return []
    return [str(item) for item in value if item is not None]


def map_stock(row: dict) -> Stock:
    return Stock(
        id=int(row["id"]),
        nse_symbol=row["nse_symbol"],
        company_name=row["company_name"],
        groww_symbol=row.get("groww_symbol"),
        kite_symbol=row.get("kite_symbol"),
        description=row.get("description"),
        rating=_optional_int(row.get("rating")),
        tags=_string_list(row.get("tags")),
        created_at=_to_utc(row, "created_at"),
        updated_at=_to_utc(row, "updated_at"),
    )


def map_watchlist(row: dict) -> Watchlist:
    return Watchlist(
        id=int(row["id"]),
        name=row["name"],
        description=row.get("description"),
        created_at=_to_utc(row, "created_at"),
        updated_at=_to_utc(row, "updated_at"),
    )


def map_watchlist_stock(row: dict) -> WatchlistStock:
    return WatchlistStock(
        watchlist_id=int(row["watchlist_id"]),
        stock_id=int(row["stock_id"]),
        notes=row.get("notes"),
        created_at=_to_utc(row, "created_at"),
    )


def map_optional(mapper, row: Optional[dict]):
    """Apply `mapper` to a row, passing absence (None) through."""
    return mapper(row) if row else None
