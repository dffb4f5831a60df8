"""Rate-limit dependency for parking apply drafts."""

from __future__ import annotations

import logging

from fastapi import Request

from app.core.config import get_settings
from app.core.rate_limit import get_rate_limiter, resolve_client_ip
from app.shared.exceptions import RateLimitException

logger = logging.getLogger(__name__)


async def enforce_draft_rate_limit(request: Request) -> None:
    """Apply per-IP rate limit for draft creation."""
    settings = get_settings()
    client_ip = resolve_client_ip(request, trusted_proxy_ips=settings.contact_rate_limit_trusted_proxy_ips)
    allowed, retry_after = await get_rate_limiter().acquire(
        f"apply:draft:{client_ip}",
        max_requests=settings.apply_draft_rate_limit_requests,
        window_seconds=settings.apply_draft_rate_limit_window_seconds,
    )
    if not allowed:
        logger.warning("Apply draft rate limit hit for %s", client_ip)
        raise RateLimitException(
            f"リクエストが多すぎます。{retry_after}秒後に再度お試しください。",
        )
