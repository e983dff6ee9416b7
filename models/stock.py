"""
models/stock.py
---------------
Domain model for stocks tracked in watchlists, plus the create input and
the partial-update intent.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass
class Stock:
    """
    A stock listed on the NSE.

    Attributes:
        id: Database primary key.
        nse_symbol: NSE trading symbol, unique (e.g., 'RELIANCE').
        company_name: Full company name.
        groww_symbol: Symbol used by the Groww app, if known.
        kite_symbol: Symbol used by Kite Connect, if known.
        description: Free-form note.
        rating: Personal rating (smallint).
        tags: Ordered list of labels.
        created_at: Creation instant (UTC).
        updated_at: Last update instant (UTC).
    """
    id: int
    nse_symbol: str
    company_name: str
    created_at: datetime
    updated_at: datetime
    groww_symbol: Optional[str] = None
    kite_symbol: Optional[str] = None
    description: Optional[str] = None
    rating: Optional[int] = None
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nseSymbol": self.nse_symbol,
            "companyName": self.company_name,
            "growwSymbol": self.groww_symbol,
            "kiteSymbol": self.kite_symbol,
            "description": self.description,
            "rating": self.rating,
            "tags": list(self.tags),
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    def __str__(self) -> str:
        return f"{self.nse_symbol} | {self.company_name}"


@dataclass
class CreateStockInput:
    nse_symbol: str
    company_name: str
    groww_symbol: Optional[str] = None
    kite_symbol: Optional[str] = None
    description: Optional[str] = None
    rating: Optional[int] = None
    tags: list[str] = field(default_factory=list)


class StockUpdateField(Enum):
    """Mutable stock columns. Values match the PATCH payload keys."""
    COMPANY_NAME = "company_name"
    GROWW_SYMBOL = "groww_symbol"
    KITE_SYMBOL = "kite_symbol"
    DESCRIPTION = "description"
    RATING = "rating"
    TAGS = "tags"


@dataclass
class UpdateStockInput:
    """
    Partial update. Only fields listed in ``fields_to_update`` are written;
    a listed field with value None sets the column to NULL.
    """
    fields_to_update: frozenset[StockUpdateField] = frozenset()
    company_name: Optional[str] = None
    groww_symbol: Optional[str] = None
    kite_symbol: Optional[str] = None
    description: Optional[str] = None
    rating: Optional[int] = None
    tags: Optional[list[str]] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "UpdateStockInput":
        """Build an intent from a PATCH body: key presence marks the field."""
        fields = frozenset(f for f in StockUpdateField if f.value in payload)
        return cls(
            fields_to_update=fields,
            company_name=payload.get("company_name"),
            groww_symbol=payload.get("groww_symbol"),
            kite_symbol=payload.get("kite_symbol"),
            description=payload.get("description"),
            rating=payload.get("rating"),
            tags=payload.get("tags"),
        )
