from __future__ import annotations

import os

from qrorder.application.ports.cache import CacheStore
from qrorder.infrastructure.cache.redis_client import get_redis_client


def _key_prefix() -> str:
    return os.getenv("CACHE_KEY_PREFIX", "qrorder:")


class RedisCacheStore(CacheStore):
    """Short-lived payload cache. Keys are namespaced so several deployments can share a redis."""

    def __init__(self, timeout_seconds: float = 0.5, key_prefix: str | None = None) -> None:
        self._timeout_seconds = timeout_seconds
        self._key_prefix = _key_prefix() if key_prefix is None else key_prefix

    def _namespaced(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    def get(self, key: str) -> str | None:
        client = get_redis_client(timeout_seconds=self._timeout_seconds)
        return client.get(self._namespaced(key))

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        client = get_redis_client(timeout_seconds=self._timeout_seconds)
        client.set(self._namespaced(key), value, ex=ttl_seconds)
