"""Per-user content history stored in Redis.

Each user has one list:
  history:{user_id} → JSON-encoded SavedContent items, newest at index 0

LPUSH keeps the list most-recent-first without a read-modify-write cycle,
so concurrent saves from several tabs cannot drop each other's items.
"""

import logging

import redis.asyncio as aioredis
from pydantic import ValidationError

from studio_core.models.content import GeneratedContent, SavedContent

logger = logging.getLogger(__name__)


def history_key(user_id: str) -> str:
    return f"history:{user_id}"


class HistoryStore:
    def __init__(self, redis: aioredis.Redis) -> None:
        self._redis = redis

    async def _load(self, user_id: str) -> list[tuple[str, SavedContent]]:
        raw_items = await self._redis.lrange(history_key(user_id), 0, -1)
        items: list[tuple[str, SavedContent]] = []
        for raw in raw_items:
            try:
                items.append((raw, SavedContent.model_validate_json(raw)))
            except ValidationError:
                logger.warning("Skipping corrupt history entry for user %s", user_id)
        return items

    async def get_history(self, user_id: str) -> list[SavedContent]:
        """All saved items, most recent first."""
        return [item for _, item in await self._load(user_id)]

    async def get_content(self, user_id: str, item_id: str) -> SavedContent | None:
        for _, item in await self._load(user_id):
            if item.id == item_id:
                return item
        return None

    async def save_content(self, user_id: str, content: GeneratedContent) -> SavedContent:
        """Snapshot `content` with a fresh id and timestamp at the head of history."""
        saved = SavedContent.from_generated(content)
        await self._redis.lpush(history_key(user_id), saved.model_dump_json(by_alias=True))
        logger.info("Saved content %s for user %s", saved.id, user_id)
        return saved

    async def delete_content(self, user_id: str, item_id: str) -> bool:
        """Remove one item. Returns False if it was not in the user's history."""
        for raw, item in await self._load(user_id):
            if item.id == item_id:
                removed = await self._redis.lrem(history_key(user_id), 1, raw)
                return removed > 0
        return False

    async def clear(self, user_id: str) -> None:
        await self._redis.delete(history_key(user_id))
