"""One-shot storage for wizard state parked across the sign-in redirect."""

from __future__ import annotations

import json
import logging
from uuid import uuid4

from app.core.cache import CacheBackend

logger = logging.getLogger(__name__)

DRAFT_KEY_PREFIX = "apply:individual:draft:"


class ApplyDraftStore:
    """Drafts live in the cache with a TTL and are deleted when read."""

    def __init__(self, cache: CacheBackend, ttl_seconds: int) -> None:
        self.cache = cache
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def _key(draft_id: str) -> str:
        return f"{DRAFT_KEY_PREFIX}{draft_id}"

    async def save(self, snapshot: dict[str, object]) -> str:
        draft_id = uuid4().hex
        payload = json.dumps(snapshot, ensure_ascii=False)
        await self.cache.set(self._key(draft_id), payload, ttl_seconds=self.ttl_seconds)
        return draft_id

    async def pop(self, draft_id: str) -> dict[str, object] | None:
        """Return the draft and forget it; None when expired or unknown."""
        raw = await self.cache.pop(self._key(draft_id))
        if raw is None:
            return None
        try:
            snapshot = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable apply draft %s", draft_id)
            return None
        return snapshot if isinstance(snapshot, dict) else None
