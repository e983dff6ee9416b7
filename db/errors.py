"""
db/errors.py
------------
Exception taxonomy for the persistence layer.

Callers handle exactly these categories:
    NotConfiguredError -> database not provisioned (service unavailable)
    ValidationError    -> caller-fixable input problem (bad request)
    OperationError     -> any failure while talking to the database
A missing row is not an error: lookups return None.
"""

from typing import Optional

from utils.sanitize import sanitize_error_message


class DatabaseError(Exception):
    """Base class. The message is always sanitized on construction."""

    fallback_message = "Database error"

    def __init__(self, message: Optional[str] = None):
        self.message = sanitize_error_message(message, fallback=self.fallback_message)
        super().__init__(self.message)


class NotConfiguredError(DatabaseError):
    fallback_message = (
        "Database is not configured. Set SUPABASE_DB_URL, SUPABASE_DB_USER "
        "and SUPABASE_DB_PASSWORD."
    )


class ConfigurationError(DatabaseError):
    fallback_message = "Invalid database configuration"


class ValidationError(DatabaseError):
    fallback_message = "Validation failed"


class OperationError(DatabaseError):
    """
    A database call failed.

    The original exception is kept as ``__cause__`` for diagnostics only;
    its text reaches the message solely through the sanitizer.
    """

    def __init__(self, action: str, message: Optional[str] = None):
        self.action = action
        detail = sanitize_error_message(message, fallback="no details")
        super().__init__(f"Unexpected database error while '{action}': {detail}")
