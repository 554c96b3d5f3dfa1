from __future__ import annotations

import asyncio
import logging
import time
import uuid

from search_proxy.models import StoredEntry

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex[:8]


def _now_ms() -> int:
    return int(time.time() * 1000)


class ListStore:
    """In-memory, newest-first list of saved pages.

    All mutations go through one lock so concurrent requests cannot
    interleave an insert with a trim or a delete. Nothing is persisted.
    """

    def __init__(self, name: str, limit: int | None = None) -> None:
        self.name = name
        self._limit = limit
        self._entries: list[StoredEntry] = []
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    async def items(self) -> list[StoredEntry]:
        async with self._lock:
            return list(self._entries)

    async def add(self, url: str, title: str | None = None) -> StoredEntry:
        entry = StoredEntry(id=_new_id(), title=title or url, url=url, ts=_now_ms())
        async with self._lock:
            self._entries.insert(0, entry)
            if self._limit is not None and len(self._entries) > self._limit:
                dropped = len(self._entries) - self._limit
                del self._entries[self._limit :]
                logger.debug("Trimmed %d oldest %s entries", dropped, self.name)
        return entry

    async def remove(self, entry_id: str) -> bool:
        async with self._lock:
            for i, entry in enumerate(self._entries):
                if entry.id == entry_id:
                    del self._entries[i]
                    return True
        return False
