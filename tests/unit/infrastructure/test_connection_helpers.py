from __future__ import annotations

import sys
from pathlib import Path

from sqlalchemy import create_engine

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

import qrorder.infrastructure.cache.cache_store as cache_store_module
from qrorder.infrastructure.cache.cache_store import RedisCacheStore
from qrorder.infrastructure.db import session as db_session


class RecordingRedis:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.expiries: dict[str, int] = {}

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str, ex: int) -> None:
        self.values[key] = value
        self.expiries[key] = ex


def test_cache_store_namespaces_keys_and_sets_expiry(monkeypatch) -> None:
    client = RecordingRedis()
    monkeypatch.setattr(cache_store_module, "get_redis_client", lambda timeout_seconds: client)
    store = RedisCacheStore(key_prefix="staging:")

    store.set("menu:rst_001:all", '{"items": []}', ttl_seconds=60)

    assert client.expiries == {"staging:menu:rst_001:all": 60}
    assert store.get("menu:rst_001:all") == '{"items": []}'
    assert store.get("menu:rst_002:all") is None


def test_cache_store_skips_writes_without_ttl(monkeypatch) -> None:
    client = RecordingRedis()
    monkeypatch.setattr(cache_store_module, "get_redis_client", lambda timeout_seconds: client)

    RedisCacheStore(key_prefix="").set("menu:rst_001:all", "{}", ttl_seconds=0)

    assert client.values == {}


def test_postgres_engines_pin_utc_and_statement_timeout(monkeypatch) -> None:
    monkeypatch.setenv("DB_STATEMENT_TIMEOUT_MS", "2500")

    options = db_session._engine_options("postgresql+psycopg://app@db:5432/qrorder", 3)

    assert options["pool_pre_ping"] is True
    assert options["connect_args"] == {
        "connect_timeout": 3,
        "options": "-c timezone=UTC -c statement_timeout=2500",
    }


def test_sqlite_engines_take_no_pool_options() -> None:
    assert db_session._engine_options("sqlite+pysqlite:///:memory:", 1) == {}


def test_ping_database_reports_reachability(monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)

    assert db_session.ping_database(create_engine("sqlite+pysqlite:///:memory:")) is True
    assert db_session.ping_database() is False
