"""
models/watchlist.py
-------------------
Domain model for named watchlists.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass
class Watchlist:
    """
    A named list of stocks.

    Attributes:
        id: Database primary key.
        name: Unique display name (e.g., 'NIFTY50').
        description: Optional note.
        created_at: Creation instant (UTC).
        updated_at: Last update instant (UTC).
    """
    id: int
    name: str
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    def __str__(self) -> str:
        return f"📋 {self.name}"


@dataclass
class CreateWatchlistInput:
    name: str
    description: Optional[str] = None


class WatchlistUpdateField(Enum):
    NAME = "name"
    DESCRIPTION = "description"


@dataclass
class UpdateWatchlistInput:
    fields_to_update: frozenset[WatchlistUpdateField] = frozenset()
    name: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "UpdateWatchlistInput":
        fields = frozenset(f for f in WatchlistUpdateField if f.value in payload)
        return cls(
            fields_to_update=fields,
            name=payload.get("name"),
            description=payload.get("description"),
        )
