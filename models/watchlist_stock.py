"""
models/watchlist_stock.py
-------------------------
Membership of a stock in a watchlist, keyed by the (watchlist_id, stock_id) pair.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass
class WatchlistStock:
    watchlist_id: int
    stock_id: int
    created_at: datetime
    notes: Optional[str] = None

    @property
    def key(self) -> str:
        return f"{self.watchlist_id}:{self.stock_id}"

    def to_dict(self) -> dict:
        return {
            "watchlistId": self.watchlist_id,
            "stockId": self.stock_id,
            "notes": self.notes,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass
class CreateWatchlistStockInput:
    watchlist_id: int
    stock_id: int
    notes: Optional[str] = None


class WatchlistStockUpdateField(Enum):
    NOTES = "notes"


@dataclass
class UpdateWatchlistStockInput:
    fields_to_update: frozenset[WatchlistStockUpdateField] = frozenset()
    notes: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "UpdateWatchlistStockInput":
        fields = frozenset(f for f in WatchlistStockUpdateField if f.value in payload)
        return cls(fields_to_update=fields, notes=payload.get("notes"))
