"""Short-lived key/value cache used to park wizard drafts across sign-in."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import Any, Protocol

from app.core.config import Settings, get_settings


class CacheBackend(Protocol):
    """Protocol for cache providers (Redis, memory)."""

    async def get(self, key: str) -> str | None:
        """Get cached value by key."""

    async def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Set cached value with optional TTL."""

    async def delete(self, key: str) -> None:
        """Delete cached value by key."""

    async def pop(self, key: str) -> str | None:
        """Atomically read and delete a value."""


class InMemoryCacheBackend:
    """Process-local cache; expired entries are swept on every write."""

    def __init__(self, now_provider: Callable[[], float] | None = None) -> None:
        self._items: dict[str, tuple[str, float | None]] = {}
        self._lock = asyncio.Lock()
        self._now = now_provider or time.monotonic

    def _is_live(self, item: tuple[str, float | None], now: float) -> bool:
        expires_at = item[1]
        return expires_at is None or expires_at > now

    def _sweep(self, now: float) -> None:
        expired = [key for key, item in self._items.items() if not self._is_live(item, now)]
        for key in expired:
            del self._items[key]

    def __len__(self) -> int:
        return len(self._items)

    async def get(self, key: str) -> str | None:
        async with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            if not self._is_live(item, self._now()):
                del self._items[key]
                return None
            return item[0]

    async def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        now = self._now()
        expires_at = now + ttl_seconds if ttl_seconds is not None else None
        async with self._lock:
            self._sweep(now)
            self._items[key] = (value, expires_at)

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._items.pop(key, None)

    async def pop(self, key: str) -> str | None:
        async with self._lock:
            item = self._items.pop(key, None)
            if item is None or not self._is_live(item, self._now()):
                return None
            return item[0]


class RedisCacheBackend:
    """Redis-backed cache shared across app instances."""

    def __init__(self, *, redis_url: str, namespace: str) -> None:
        self._redis_url = redis_url
        self._namespace = namespace
        self._init_lock = asyncio.Lock()
        self._client: Any | None = None

    def _build_storage_key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    async def _ensure_initialized(self) -> Any:
        if self._client is not None:
            return self._client

        async with self._init_lock:
            if self._client is None:
                from redis.asyncio import from_url

                self._client = from_url(
                    self._redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
        return self._client

    async def get(self, key: str) -> str | None:
        client = await self._ensure_initialized()
        return await client.get(self._build_storage_key(key))

    async def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        client = await self._ensure_initialized()
        await client.set(self._build_storage_key(key), value, ex=ttl_seconds)

    async def delete(self, key: str) -> None:
        client = await self._ensure_initialized()
        await client.delete(self._build_storage_key(key))

    async def pop(self, key: str) -> str | None:
        client = await self._ensure_initialized()
        return await client.getdel(self._build_storage_key(key))


_cache_backend: CacheBackend | None = None
_cache_backend_signature: tuple[str, str | None, str] | None = None


def _build_cache_backend(settings: Settings) -> CacheBackend:
    if settings.cache_backend == "redis":
        return RedisCacheBackend(
            redis_url=settings.redis_url or "",
            namespace=settings.cache_redis_namespace,
        )
    return InMemoryCacheBackend()


def get_cache_backend() -> CacheBackend:
    """Return shared cache backend for configured settings."""
    global _cache_backend, _cache_backend_signature
    settings = get_settings()
    signature = (settings.cache_backend, settings.redis_url, settings.cache_redis_namespace)
    if _cache_backend is None or _cache_backend_signature != signature:
        _cache_backend = _build_cache_backend(settings)
        _cache_backend_signature = signature
    return _cache_backend
