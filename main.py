"""
main.py
-------
Diagnostic entry point for the watchlist database.

Responsibilities:
    - Build the connection state from the environment (.env).
    - Check connectivity and read access to every owned table.
    - Exit non-zero if anything is unreachable, so it can gate deploys.

    python main.py [table ...]
"""

import sys

import config
from db.connection import Configured, create_connection_state
from db.errors import ConfigurationError
from db.handler import DatabaseHandler
from db.health import DEFAULT_TABLES, check_tables_access
from utils.logger import get_logger

logger = get_logger(__name__)


def main(argv: list[str]) -> int:
    """Run the checks and return the process exit code."""
    try:
        state = create_connection_state(config.database_config())
    except ConfigurationError as e:
        logger.error(e.message)
        return 2

    handler = DatabaseHandler(state)
    if not handler.is_configured:
        logger.warning(f"Database not configured: {state.reason}")
        return 3

    try:
        if not handler.check_connection():
            logger.error("Database is unreachable.")
            return 1

        statuses = check_tables_access(handler, argv or DEFAULT_TABLES)
        for status in statuses:
            print(status)
        if all(s.accessible for s in statuses):
            logger.info("All database tables accessible.")
            return 0
        return 1
    finally:
        if isinstance(state, Configured):
            state.client.close()


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
