"""Per-endpoint exclusive locks.

Configuration changes against one Redfish endpoint must not interleave, while
changes against different endpoints run freely. Create one KeyedLock at
startup and pass it to every component that mutates device state.

Usage:
    locks = KeyedLock()

    async with locks.hold("https://idrac-1.example.net"):
        await client.patch(...)
"""
import asyncio
import logging
import threading
from contextlib import asynccontextmanager
from typing import AsyncIterator, Hashable

from ..exceptions import LockNotHeld

logger = logging.getLogger(__name__)


class KeyedLock:
    """Lazily populated table of per-key locks.

    Entries are never removed, so the same key always maps to the same lock.
    """

    def __init__(self):
        self._table_lock = threading.Lock()
        self._locks: dict[Hashable, asyncio.Lock] = {}

    def _get(self, key: Hashable) -> asyncio.Lock:
        # Table lock covers create-or-fetch only, never the caller's section
        with self._table_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = asyncio.Lock()
                self._locks[key] = lock
            return lock

    async def acquire(self, key: Hashable) -> None:
        """Wait until the lock for ``key`` is free and take it."""
        logger.debug(f"Locking {key}")
        await self._get(key).acquire()
        logger.debug(f"Locked {key}")

    def release(self, key: Hashable) -> None:
        """Release the lock for ``key``.

        Raises:
            LockNotHeld: If ``key`` was never acquired or is not held
        """
        with self._table_lock:
            lock = self._locks.get(key)
        if lock is None or not lock.locked():
            raise LockNotHeld(key)
        logger.debug(f"Unlocking {key}")
        lock.release()
        logger.debug(f"Unlocked {key}")

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        await self.acquire(key)
        try:
            yield
        finally:
            self.release(key)

    def keys(self) -> list[Hashable]:
        with self._table_lock:
            return list(self._locks)
