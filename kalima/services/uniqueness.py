"""
Slug uniqueness for collections keyed by a generated document id.

Firestore has no unique indexes, so a create first looks for a document with
the same slug. The look-up and the write run under a lock keyed by
(collection, slug); this closes the race between requests served by the same
process only.
"""

import asyncio
import logging
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator

from kalima.exceptions import ConflictError

logger = logging.getLogger(__name__)


class SlugGuard:

    def __init__(self, store):
        self.store = store
        self._locks: "weakref.WeakValueDictionary[tuple, asyncio.Lock]" = (
            weakref.WeakValueDictionary())

    def _lock_for(self, collection: str, slug: str) -> asyncio.Lock:
        key = (collection, slug)
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    async def ensure_available(self, collection: str, slug: str, message: str) -> None:
        existing = await self.store.find_one(collection, "slug", slug)
        if existing is not None:
            logger.info(f"Slug '{slug}' already used in {collection} by {existing[0]}")
            raise ConflictError(message)

    @asynccontextmanager
    async def reserve(self, collection: str, slug: str, message: str) -> AsyncIterator[None]:
        """Hold the slug while the caller writes the new document"""
        lock = self._lock_for(collection, slug)
        async with lock:
            await self.ensure_available(collection, slug, message)
            yield
