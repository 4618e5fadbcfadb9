"""Configuration utilities for the survey tool service.

This module loads application configuration with the following rules:
- Primary source: `surveytool_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("surveytool_config.json")
DEFAULT_DSN = "sqlite+pysqlite:///:memory:"
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


def _flag(text: Optional[str]) -> bool:
    return str(text).strip().lower() in {"1", "true", "yes", "on"}


class DatabaseConfig(BaseModel):
    dsn: str

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v


class RuntimeConfig(BaseModel):
    auto_apply_migrations: bool = Field(default=True)
    seed_demo_data: bool = Field(default=False)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")

    @field_validator("level")
    @classmethod
    def level_must_be_allowed(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        v = v.strip().upper()
        if v not in allowed:
            raise ValueError(f"logging.level must be one of {sorted(allowed)}")
        return v


class AppConfig(BaseModel):
    database: DatabaseConfig
    app: RuntimeConfig
    logging: LoggingConfig


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) surveytool_config.json at project root
    4) Defaults suitable for local development
    """

    base = _read_json_file(ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    dsn = _env("DATABASE_URL") or _read_config_file("database.url") or _base("database.dsn") or DEFAULT_DSN
    auto_migrate = _env("AUTO_APPLY_MIGRATIONS") or _read_config_file("app.auto_apply_migrations") or _base("app.auto_apply_migrations", "true")
    seed_demo = _env("SEED_DEMO_DATA") or _read_config_file("app.seed_demo_data") or _base("app.seed_demo_data", "false")
    log_level = _env("LOG_LEVEL") or _read_config_file("logging.level") or _base("logging.level", "INFO")

    try:
        return AppConfig(
            database=DatabaseConfig(dsn=dsn),
            app=RuntimeConfig(auto_apply_migrations=_flag(auto_migrate), seed_demo_data=_flag(seed_demo)),
            logging=LoggingConfig(level=log_level),
        )
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "RuntimeConfig",
    "LoggingConfig",
    "load_config",
]
