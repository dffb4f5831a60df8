"""Sliding-window rate limiter for public form endpoints."""

from __future__ import annotations

import asyncio
import math
from collections import defaultdict, deque
from collections.abc import Callable, Collection
from typing import Protocol

from fastapi import Request


class RateLimiter(Protocol):
    """Common contract for limiter backends."""

    async def acquire(
        self,
        key: str,
        *,
        max_requests: int,
        window_seconds: int,
    ) -> tuple[bool, int]:
        """Try to reserve one request in the time window."""

    async def clear(self) -> None:
        """Drop tracked counters (used in tests)."""


class InMemorySlidingWindowRateLimiter:
    """Per-process limiter keeping event timestamps per key."""

    def __init__(self, now_provider: Callable[[], float] | None = None) -> None:
        self._events: dict[str, deque[float]] = defaultdict(deque)
        self._lock = asyncio.Lock()
        self._now = now_provider

    def _current_time(self) -> float:
        if self._now is not None:
            return self._now()
        return asyncio.get_running_loop().time()

    async def acquire(
        self,
        key: str,
        *,
        max_requests: int,
        window_seconds: int,
    ) -> tuple[bool, int]:
        """Return (allowed, retry_after_seconds)."""
        now = self._current_time()
        window_start = now - window_seconds

        async with self._lock:
            events = self._events[key]
            while events and events[0] <= window_start:
                events.popleft()

            if len(events) >= max_requests:
                retry_after = max(1, math.ceil((events[0] + window_seconds) - now))
                return False, retry_after

            events.append(now)
            return True, 0

    async def clear(self) -> None:
        async with self._lock:
            self._events.clear()


_rate_limiter: RateLimiter | None = None


def get_rate_limiter() -> RateLimiter:
    """Return the shared limiter instance."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = InMemorySlidingWindowRateLimiter()
    return _rate_limiter


def resolve_client_ip(request: Request, *, trusted_proxy_ips: Collection[str] = ()) -> str:
    """Socket peer, or the first X-Forwarded-For hop when the peer is a trusted proxy."""
    client_ip = "unknown"
    if request.client and request.client.host:
        client_ip = request.client.host

    forwarded_for = request.headers.get("x-forwarded-for")
    if not forwarded_for:
        return client_ip
    if client_ip not in trusted_proxy_ips:
        return client_ip

    forwarded_client = forwarded_for.split(",")[0].strip()
    return forwarded_client or client_ip
