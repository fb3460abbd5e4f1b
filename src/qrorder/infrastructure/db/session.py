from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


def _statement_timeout_ms() -> int:
    return int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "5000"))


def _engine_options(database_url: str, connect_timeout: int) -> dict[str, Any]:
    if make_url(database_url).get_backend_name() != "postgresql":
        return {}
    return {
        "pool_pre_ping": True,
        "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
        "max_overflow": int(os.getenv("DB_MAX_OVERFLOW", "10")),
        # Reporting aggregates assume UTC day boundaries.
        "connect_args": {
            "connect_timeout": connect_timeout,
            "options": f"-c timezone=UTC -c statement_timeout={_statement_timeout_ms()}",
        },
    }


@lru_cache(maxsize=8)
def _build_engine(database_url: str, connect_timeout: int) -> Engine:
    return create_engine(database_url, **_engine_options(database_url, connect_timeout))


def get_engine(timeout_seconds: float = 2.0) -> Engine:
    return _build_engine(_database_url(), max(1, int(timeout_seconds)))


def ping_database(engine: Engine | None = None, timeout_seconds: float = 1.0) -> bool:
    try:
        with (engine or get_engine(timeout_seconds)).connect() as connection:
            connection.execute(text("SELECT 1"))
    except (SQLAlchemyError, RuntimeError) as exc:
        logger.warning("database_ping_failed", extra={"reason": type(exc).__name__})
        return False
    return True
