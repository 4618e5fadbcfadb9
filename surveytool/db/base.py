"""SQLAlchemy engine construction.

The service targets PostgreSQL in production but defaults to SQLite for local
development and tests. No declarative models are defined here; repositories
issue SQL through `sqlalchemy.text` against the shared engine.

The database URL is resolved once per process: `create_app` binds the DSN
from its `AppConfig` through `configure_engine`. Code running outside an app
falls back to `TEST_DATABASE_URL` or the loaded configuration, read on first
use only.
"""

from __future__ import annotations

import logging
import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from surveytool.config import load_config

logger = logging.getLogger(__name__)

# Module-level cached Engine so repositories share the same connection pool
_ENGINE: Engine | None = None
_ENGINE_URL: str | None = None
_DEFAULT_URL: str | None = None


def _db_url() -> str:
    global _DEFAULT_URL
    if _DEFAULT_URL is None:
        _DEFAULT_URL = os.getenv("TEST_DATABASE_URL") or load_config().database.dsn
    return _DEFAULT_URL


def get_engine(url: str | None = None) -> Engine:
    """Return a singleton SQLAlchemy Engine for the given URL.

    For SQLite in-memory URLs, use a StaticPool to keep a single connection
    alive across sessions and threads. Switching URLs disposes the previous
    engine.
    """
    global _ENGINE, _ENGINE_URL
    resolved_url = url or _db_url()

    if _ENGINE is None or _ENGINE_URL != resolved_url:
        if _ENGINE is not None:
            logger.info("engine_switch from=%s", _ENGINE.url.render_as_string(hide_password=True))
            _ENGINE.dispose()
        kwargs: dict = {"future": True, "pool_pre_ping": True}
        if resolved_url.startswith("sqlite") and ":memory:" in resolved_url:
            kwargs.update({
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            })
        _ENGINE = create_engine(resolved_url, **kwargs)
        _ENGINE_URL = resolved_url

    return _ENGINE


def configure_engine(url: str) -> Engine:
    """Make `url` the process-wide database and return its engine."""
    global _DEFAULT_URL
    _DEFAULT_URL = url
    return get_engine(url)


def reset_engine() -> None:
    """Dispose of the cached Engine and forget the bound URL."""
    global _ENGINE, _ENGINE_URL, _DEFAULT_URL
    if _ENGINE is not None:
        _ENGINE.dispose()
    _ENGINE = None
    _ENGINE_URL = None
    _DEFAULT_URL = None
