"""Keyed asyncio locks.

Used to serialize booking creation per (post_id, date_time) and status
writes per booking id within one process. Entries are dropped once nobody
holds or waits on them.
"""

import asyncio
from collections.abc import Hashable
from contextlib import asynccontextmanager


class KeyedLock:
    def __init__(self):
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._waiters: dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable):
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


slot_locks = KeyedLock()
booking_locks = KeyedLock()
