"""Lightweight SQL migrations runner.

Applies .sql files in lexical order from a migrations directory chosen by
dialect. Scripts ship inside the package under `surveytool/db/sql/<dialect>/`.
Applied filenames are journaled in a `schema_migrations` table inside the
target database so a fresh database always receives the full schema and an
existing one is never migrated twice.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

SQL_ROOT = Path(__file__).resolve().parent / "sql"

_JOURNAL_DDL = (
    "CREATE TABLE IF NOT EXISTS schema_migrations ("
    "filename TEXT PRIMARY KEY, applied_at TEXT NOT NULL)"
)


def default_migrations_dir(engine: Engine) -> Path:
    name = (getattr(engine.dialect, "name", "") or "").lower()
    if "sqlite" in name:
        return SQL_ROOT / "sqlite"
    return SQL_ROOT / "postgres"


def _iter_sql_files(root: Path) -> Iterable[Path]:
    for p in sorted(root.glob("*.sql")):
        # Skip rollback scripts in forward runs
        if "rollback" in p.name.lower():
            continue
        yield p


def _exec_sql_script(conn: Connection, sql: str) -> None:
    """Execute a multi-statement SQL script one statement at a time.

    DB-API drivers such as pysqlite refuse several statements per execute(),
    so scripts are split on ';'. Comment-only and empty segments are skipped.
    """
    for stmt in sql.split(";"):
        lines = [ln for ln in stmt.splitlines() if not ln.strip().startswith("--")]
        s = "\n".join(lines).strip()
        if not s:
            continue
        conn.exec_driver_sql(s)


def apply_migrations(engine: Engine, migrations_dir: str | os.PathLike[str] | None = None) -> list[str]:
    """Apply pending migrations and return the filenames applied in this run."""
    root = Path(migrations_dir) if migrations_dir is not None else default_migrations_dir(engine)
    if not root.exists():
        logger.warning("migrations_dir_missing path=%s", root)
        return []

    applied_now: list[str] = []
    with engine.begin() as conn:
        conn.exec_driver_sql(_JOURNAL_DDL)
        applied = {row[0] for row in conn.execute(sql_text("SELECT filename FROM schema_migrations"))}
        for sql_path in _iter_sql_files(root):
            fname = sql_path.name
            if fname in applied:
                continue
            sql = sql_path.read_text(encoding="utf-8")
            if not sql.strip():
                continue
            try:
                _exec_sql_script(conn, sql)
            except Exception:
                logger.error("migration_failed file=%s", fname, exc_info=True)
                raise
            conn.execute(
                sql_text("INSERT INTO schema_migrations (filename, applied_at) VALUES (:f, :at)"),
                {
                    "f": fname,
                    # ISO-8601 UTC without fractional seconds
                    "at": datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
                },
            )
            applied_now.append(fname)
            logger.info("migration_applied file=%s", fname)
    return applied_now
