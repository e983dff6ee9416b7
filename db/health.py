"""
db/health.py
------------
Per-table read-access probe. Reports one TableAccessStatus per table;
callers decide what counts as healthy overall.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from psycopg2 import sql

from db.errors import DatabaseError, ValidationError
from db.handler import DatabaseHandler
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TABLES = ("stocks", "watchlists", "watchlist_stocks")
IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_SAMPLE_QUERY = sql.SQL(
    "SELECT COUNT(*) AS sample_count FROM (SELECT 1 FROM {table} LIMIT 1) AS sample"
)


@dataclass(frozen=True)
class TableAccessStatus:
    """Result of probing one table. Not persisted."""
    table_name: str
    accessible: bool
    sample_row_count: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "tableName": self.table_name,
            "accessible": self.accessible,
            "sampleRowCount": self.sample_row_count,
            "error": self.error,
        }

    def __str__(self) -> str:
        if self.accessible:
            return f"✅ {self.table_name}: accessible (sample rows: {self.sample_row_count})"
        return f"❌ {self.table_name}: {self.error}"


def sanitize_identifier(identifier: str) -> str:
    """Reject anything that is not a plain SQL identifier."""
    if not isinstance(identifier, str) or not IDENTIFIER_PATTERN.match(identifier):
        raise ValidationError(f"Invalid table name '{identifier}'")
    return identifier


def check_tables_access(
    handler: DatabaseHandler, table_names: Iterable[str] = DEFAULT_TABLES
) -> list[TableAccessStatus]:
    """
    Verify each table can be read, independently of the others.

    Args:
        handler: Access coordinator to run the sample queries on.
        table_names: Tables to probe; validated here, callers need not sanitize.

    Returns:
        One status per requested table, in the order given.
    """
    statuses = []
    for table_name in table_names:
        try:
            safe_name = sanitize_identifier(table_name)
            query = _SAMPLE_QUERY.format(table=sql.Identifier(safe_name))
            count = handler.read(
                f"check table access for '{safe_name}'",
                lambda h: h.fetch_value(query),
            )
            statuses.append(
                TableAccessStatus(table_name=table_name, accessible=True, sample_row_count=int(count))
            )
        except DatabaseError as e:
            logger.warning(f"Table '{table_name}' is not accessible: {e.message}")
            statuses.append(
                TableAccessStatus(table_name=str(table_name), accessible=False, error=e.message)
            )
    return statuses
