"""Behave environment hooks for survey tool integration tests.

By default every scenario runs against an in-process app bound to a private
in-memory SQLite database, driven through FastAPI's TestClient. When
`TEST_BASE_URL` is set the steps talk to that live API over httpx instead;
the target must be reachable or the run fails fast.
"""

from __future__ import annotations

import os
from typing import Any

import httpx

os.environ.setdefault("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("AUTO_APPLY_MIGRATIONS", "1")
os.environ.setdefault("SEED_DEMO_DATA", "0")


def before_all(context: Any) -> None:  # pragma: no cover - executed by Behave
    base_url = os.environ.get("TEST_BASE_URL", "").strip().rstrip("/")
    context.base_url = base_url or None
    context.api_prefix = os.environ.get("TEST_API_PREFIX", "/api")
    if context.base_url:
        try:
            with httpx.Client(timeout=5.0) as client:
                client.get(context.base_url + "/health")
        except httpx.HTTPError as exc:
            raise AssertionError(f"API not reachable at {context.base_url}: {exc}") from exc


def before_scenario(context: Any, scenario: Any) -> None:  # pragma: no cover - executed by Behave
    context.vars = {}
    context.last_response = None
    if context.base_url:
        context.client = httpx.Client(base_url=context.base_url, timeout=10.0)
        return

    from fastapi.testclient import TestClient

    from surveytool.db.base import reset_engine
    from surveytool.main import create_app

    reset_engine()
    context.client = TestClient(create_app())
    context.client.__enter__()


def after_scenario(context: Any, scenario: Any) -> None:  # pragma: no cover - executed by Behave
    client = getattr(context, "client", None)
    if client is None:
        return
    if context.base_url:
        client.close()
    else:
        client.__exit__(None, None, None)
        from surveytool.db.base import reset_engine

        reset_engine()
    context.client = None
