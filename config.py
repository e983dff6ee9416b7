"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
Blank database values are valid: the persistence layer then runs unconfigured.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── PostgreSQL (Supabase) ─────────────────────────────────
SUPABASE_DB_URL: str = os.getenv("SUPABASE_DB_URL", "").strip()
SUPABASE_DB_USER: str = os.getenv("SUPABASE_DB_USER", "").strip()
SUPABASE_DB_PASSWORD: str = os.getenv("SUPABASE_DB_PASSWORD", "").strip()

# ── Connection pool & timeouts ────────────────────────────
DB_MAX_CONNECTIONS: int = int(os.getenv("DB_MAX_CONNECTIONS", "5"))
DB_CONNECT_TIMEOUT_SECONDS: int = int(os.getenv("DB_CONNECT_TIMEOUT_SECONDS", "10"))
DB_STATEMENT_TIMEOUT_MS: int = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "15000"))

# ── Queries ───────────────────────────────────────────────
DEFAULT_LIST_LIMIT: int = 200

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


def database_config():
    """Build the DatabaseConfig for the connection manager from the env values."""
    from db.connection import DatabaseConfig

    return DatabaseConfig(
        url=SUPABASE_DB_URL,
        user=SUPABASE_DB_USER,
        password=SUPABASE_DB_PASSWORD,
        max_connections=DB_MAX_CONNECTIONS,
        connect_timeout=DB_CONNECT_TIMEOUT_SECONDS,
        statement_timeout_ms=DB_STATEMENT_TIMEOUT_MS,
    )
