"""
Persisted set of favorite topic ids.

The ids are stored as one JSON-encoded list under a single key. Toggling is a
read-modify-write of the whole list with no locking: two concurrent toggles
can lose one of the updates.
"""
from __future__ import annotations

import json
import logging
from typing import Iterable, List

from docshelf.domain.catalog_views import enrich_favorites
from docshelf.domain.models import EnrichedTopic, LanguagePack
from docshelf.storage.errors import StorageError
from docshelf.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

FAVORITES_KEY = "@favorites"


class FavoritesStore:
    def __init__(self, store: KeyValueStore):
        self.store = store

    async def favorite_ids(self) -> List[str]:
        """
        Return the stored ids. An absent, unreadable or malformed value reads as empty.
        """
        try:
            raw = await self.store.get(FAVORITES_KEY)
        except StorageError as e:
            logger.warning(f"Could not read favorites: {e}")
            return []
        if raw is None:
            return []
        try:
            ids = json.loads(raw)
        except (json.JSONDecodeError, RecursionError):
            logger.warning("Ignoring malformed favorites value")
            return []
        if not isinstance(ids, list):
            logger.warning("Ignoring favorites value that is not a list")
            return []
        return [str(i) for i in ids]

    async def is_favorite(self, topic_id: str) -> bool:
        return topic_id in await self.favorite_ids()

    async def toggle(self, topic_id: str) -> List[str]:
        """
        Add the id if absent, remove it if present, and return the new list.

        If the new list cannot be written, the list as it was before is returned.
        """
        favorites = await self.favorite_ids()
        if topic_id in favorites:
            updated = [i for i in favorites if i != topic_id]
        else:
            updated = favorites + [topic_id]

        try:
            await self.store.set(FAVORITES_KEY, json.dumps(updated))
        except StorageError as e:
            logger.error(f"Could not save favorites: {e}")
            return favorites
        return updated

    async def list_favorites(self, catalog: Iterable[LanguagePack]) -> List[EnrichedTopic]:
        """
        Favorites resolved against the catalog. Ids whose topic is gone are dropped.
        """
        return enrich_favorites(catalog, await self.favorite_ids())
