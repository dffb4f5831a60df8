"""Rate-limit dependency for the contact form."""

from __future__ import annotations

import logging

from fastapi import Request

from app.core.config import get_settings
from app.core.metrics import CONTACT_SUBMISSIONS_TOTAL
from app.core.rate_limit import get_rate_limiter, resolve_client_ip
from app.shared.exceptions import RateLimitException

logger = logging.getLogger(__name__)


async def enforce_contact_rate_limit(request: Request) -> None:
    """Apply per-IP rate limit for contact submissions."""
    settings = get_settings()
    client_ip = resolve_client_ip(request, trusted_proxy_ips=settings.contact_rate_limit_trusted_proxy_ips)
    allowed, retry_after = await get_rate_limiter().acquire(
        f"contact:submit:{client_ip}",
        max_requests=settings.contact_rate_limit_requests,
        window_seconds=settings.contact_rate_limit_window_seconds,
    )
    if not allowed:
        CONTACT_SUBMISSIONS_TOTAL.labels(outcome="rate_limited").inc()
        logger.warning("Contact rate limit hit for %s", client_ip)
        raise RateLimitException(
            f"送信回数が上限に達しました。{retry_after}秒後に再度お試しください。",
        )
