"""
Per-collection advisory locks.

The natural-key check in the import writer is a scan followed by an
insert.  Holding the collection's lock for the whole write loop keeps
two imports in this process from interleaving between scan and insert.
Writers in other processes are not covered.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator

from heartsmiles.core.logging import get_logger

logger = get_logger(__name__)


class CollectionLockManager:
    """Hands out one asyncio.Lock per collection name."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    @asynccontextmanager
    async def hold(self, collection: str) -> AsyncIterator[None]:
        lock = self._locks[collection]
        if lock.locked():
            logger.info("Waiting for collection lock", collection=collection)
        async with lock:
            yield


collection_locks = CollectionLockManager()
