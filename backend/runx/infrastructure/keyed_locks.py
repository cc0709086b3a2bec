"""Keyed Locks: per-key asyncio mutual exclusion for store-mutating sequences.

Invariants:
    - At most one holder per key at a time within this process
    - A key's lock is dropped once no task holds or waits for it

Design Decisions:
    - Process-local only; cross-process exclusion comes from the store
      (row lock inside the order transaction, conditional secret write)
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Hashable


class KeyedLocks:
    """Registry of asyncio.Lock objects created on demand per key."""

    def __init__(self):
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._holders: dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if not self._holders[key]:
                del self._holders[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


order_locks = KeyedLocks()
enrollment_locks = KeyedLocks()
