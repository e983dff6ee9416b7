"""
services/watchlist_service.py
-----------------------------
Business-facing facade over the stock, watchlist and membership
repositories. Performs the light input checks that belong above the
persistence layer and exposes the health summary used by the app.
"""

from dataclasses import replace
from typing import Optional

from config import DEFAULT_LIST_LIMIT
from db.errors import (
    DatabaseError,
    NotConfiguredError,
    OperationError,
    ValidationError,
)
from db.handler import DatabaseHandler
from db.health import DEFAULT_TABLES, TableAccessStatus, check_tables_access
from models.stock import CreateStockInput, Stock, StockUpdateField, UpdateStockInput
from models.watchlist import (
    CreateWatchlistInput,
    UpdateWatchlistInput,
    Watchlist,
    WatchlistUpdateField,
)
from models.watchlist_stock import (
    CreateWatchlistStockInput,
    UpdateWatchlistStockInput,
    WatchlistStock,
)
from repositories.stock_repo import StockRepository
from repositories.watchlist_repo import WatchlistRepository
from repositories.watchlist_stock_repo import WatchlistStockRepository
from utils.logger import get_logger

logger = get_logger(__name__)

_HTTP_STATUS = {
    ValidationError: 400,
    NotConfiguredError: 503,
    OperationError: 500,
}


def http_status_for(error: DatabaseError) -> int:
    """Map a persistence error to the HTTP status the API layer should return."""
    for error_type, status in _HTTP_STATUS.items():
        if isinstance(error, error_type):
            return status
    return 500


def _required_text(value: Optional[str], field_name: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def _non_blank(value: Optional[str], field_name: str) -> Optional[str]:
    """Trim a value being set on update. None is left for the repository to reject."""
    if value is None:
        return None
    if not value.strip():
        raise ValidationError(f"{field_name} cannot be blank")
    return value.strip()


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def _validate_limit(limit: int) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValidationError(f"limit must be a positive integer, got {limit!r}")
    return limit


class WatchlistService:
    """Entry point for the API layer: validates input, then delegates."""

    def __init__(self, handler: DatabaseHandler):
        self.handler = handler
        self.stock_repo = StockRepository(handler)
        self.watchlist_repo = WatchlistRepository(handler)
        self.watchlist_stock_repo = WatchlistStockRepository(handler)

    # ── STOCKS ────────────────────────────────────────────

    def create_stock(self, data: CreateStockInput) -> Stock:
        cleaned = CreateStockInput(
            nse_symbol=_required_text(data.nse_symbol, "nse_symbol"),
            company_name=_required_text(data.company_name, "company_name"),
            groww_symbol=_optional_text(data.groww_symbol),
            kite_symbol=_optional_text(data.kite_symbol),
            description=data.description,
            rating=data.rating,
            tags=[t.strip() for t in (data.tags or []) if t and t.strip()],
        )
        return self.stock_repo.create(cleaned)

    def get_stock_by_id(self, stock_id: int) -> Optional[Stock]:
        return self.stock_repo.get_by_id(stock_id)

    def get_stock_by_nse_symbol(self, nse_symbol: str) -> Optional[Stock]:
        return self.stock_repo.get_by_nse_symbol(_required_text(nse_symbol, "nse_symbol"))

    def list_stocks(self, limit: int = DEFAULT_LIST_LIMIT) -> list[Stock]:
        return self.stock_repo.list_stocks(_validate_limit(limit))

    def update_stock(self, stock_id: int, data: UpdateStockInput) -> Optional[Stock]:
        if StockUpdateField.COMPANY_NAME in data.fields_to_update:
            data = replace(data, company_name=_non_blank(data.company_name, "company_name"))
        return self.stock_repo.update(stock_id, data)

    def delete_stock(self, stock_id: int) -> bool:
        return self.stock_repo.delete(stock_id)

    # ── WATCHLISTS ────────────────────────────────────────

    def create_watchlist(self, data: CreateWatchlistInput) -> Watchlist:
        cleaned = CreateWatchlistInput(
            name=_required_text(data.name, "name"),
            description=data.description,
        )
        return self.watchlist_repo.create(cleaned)

    def get_watchlist_by_id(self, watchlist_id: int) -> Optional[Watchlist]:
        return self.watchlist_repo.get_by_id(watchlist_id)

    def get_watchlist_by_name(self, name: str) -> Optional[Watchlist]:
        return self.watchlist_repo.get_by_name(_required_text(name, "name"))

    def list_watchlists(self, limit: int = DEFAULT_LIST_LIMIT) -> list[Watchlist]:
        return self.watchlist_repo.list_watchlists(_validate_limit(limit))

    def update_watchlist(
        self, watchlist_id: int, data: UpdateWatchlistInput
    ) -> Optional[Watchlist]:
        if WatchlistUpdateField.NAME in data.fields_to_update:
            data = replace(data, name=_non_blank(data.name, "name"))
        return self.watchlist_repo.update(watchlist_id, data)

    def delete_watchlist(self, watchlist_id: int) -> bool:
        return self.watchlist_repo.delete(watchlist_id)

    # ── MEMBERSHIP ────────────────────────────────────────

    def add_stock_to_watchlist(self, data: CreateWatchlistStockInput) -> WatchlistStock:
        return self.watchlist_stock_repo.create(data)

    def get_watchlist_stock(self, watchlist_id: int, stock_id: int) -> Optional[WatchlistStock]:
        return self.watchlist_stock_repo.get(watchlist_id, stock_id)

    def list_stocks_for_watchlist(self, watchlist_id: int) -> list[WatchlistStock]:
        return self.watchlist_stock_repo.list_for_watchlist(watchlist_id)

    def update_watchlist_stock(
        self, watchlist_id: int, stock_id: int, data: UpdateWatchlistStockInput
    ) -> Optional[WatchlistStock]:
        return self.watchlist_stock_repo.update(watchlist_id, stock_id, data)

    def remove_stock_from_watchlist(self, watchlist_id: int, stock_id: int) -> bool:
        return self.watchlist_stock_repo.delete(watchlist_id, stock_id)

    # ── HEALTH ────────────────────────────────────────────

    def check_tables_access(self, table_names=DEFAULT_TABLES) -> list[TableAccessStatus]:
        return check_tables_access(self.handler, table_names)

    def database_health(self) -> tuple[bool, str]:
        """
        Summarize table access for a health endpoint.

        Returns:
            (healthy, message) where healthy means every owned table is readable.
        """
        statuses = self.check_tables_access()
        failed = [s.table_name for s in statuses if not s.accessible]
        if not failed:
            return True, "All database tables accessible"
        return False, f"Tables not accessible: {', '.join(failed)}"
