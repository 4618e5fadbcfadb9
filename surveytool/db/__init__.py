"""Database bootstrap utilities for the survey tool.

Exposes engine construction and the SQL migrations runner. The DB layer does
not leak ORM models into route handlers; repositories use SQL text queries.
"""

from surveytool.db.base import configure_engine, get_engine, reset_engine
from surveytool.db.migrations_runner import apply_migrations

__all__ = [
    "configure_engine",
    "get_engine",
    "reset_engine",
    "apply_migrations",
]
