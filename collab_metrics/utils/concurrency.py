import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Optional, TypeVar

T = TypeVar("T")


class ConcurrencyCoordinator:
    """Cap in-flight store calls and serialise work on the same logical resource.

    - A global semaphore bounds concurrent calls against the document store.
    - Per-key asyncio.Lock instances keep writes to one task (e.g. a submission
      that also moves the task to Review) from interleaving.
    """

    def __init__(self, max_concurrency: int = 8):
        if max_concurrency <= 0:
            raise ValueError("max_concurrency must be greater than zero")
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    def _acquire_lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        return lock

    def _release_lock_for(self, key: str) -> None:
        """Drop the key's lock once nobody holds or waits on it."""
        remaining = self._lock_users[key] - 1
        if remaining:
            self._lock_users[key] = remaining
            return
        del self._lock_users[key]
        del self._locks[key]

    @asynccontextmanager
    async def guard(self, key: Optional[str] = None) -> AsyncIterator[None]:
        async with self._semaphore:
            if not key:
                yield
                return
            lock = self._acquire_lock_for(key)
            try:
                async with lock:
                    yield
            finally:
                self._release_lock_for(key)

    async def gather(self, *awaitables: Awaitable[T]) -> list:
        """Run independent fetches concurrently, each under the global semaphore."""

        async def _bounded(awaitable: Awaitable[T]) -> T:
            async with self._semaphore:
                return await awaitable

        return list(await asyncio.gather(*(_bounded(item) for item in awaitables)))
