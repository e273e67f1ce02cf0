"""Resolution locks: per-key asyncio locks with LRU eviction, or one global lock."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections import OrderedDict
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager


class ResolutionLockManager(ABC):
    """Abstract base for the gate around non-group contact resolution.

    Implement this to plug in any locking backend (Redis, Postgres
    advisory locks, etc.).  The library ships with ``InMemoryLockManager``
    (one lock per key) and ``GlobalLockManager`` (one lock for the whole
    process), both for single-process deployments.

    The resolver acquires exactly one lock per resolution and never
    nests acquisitions, so implementations need not be reentrant.  The
    lock must be released on every exit path, including exceptions.
    """

    @abstractmethod
    @asynccontextmanager
    async def locked(self, key: Hashable) -> AsyncIterator[None]:
        """Acquire an exclusive lock for *key*."""
        yield  # pragma: no cover


class InMemoryLockManager(ResolutionLockManager):
    """In-process per-key asyncio locks with LRU eviction.

    The resolver keys locks by tenant id, not by address.  One person
    reaches the resolver under two addresses (``5511999@s.whatsapp.net``
    and ``abc123@lid``), and until the oracle has linked them, no
    address-derived key is shared by both.  Two concurrent first contacts
    from the same person would each take their own lock and each create
    a contact.  The tenant is the narrowest key both references agree on;
    other tenants still resolve in parallel.

    Idle locks beyond ``max_locks`` are evicted least-recently-used
    first; a lock that is held or awaited is never evicted.
    """

    def __init__(self, max_locks: int = 1024) -> None:
        self._locks: OrderedDict[Hashable, asyncio.Lock] = OrderedDict()
        # Callers holding or waiting on each key's lock
        self._users: dict[Hashable, int] = {}
        self._max_locks = max_locks

    def _checkout(self, key: Hashable) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        else:
            self._locks.move_to_end(key)
        self._users[key] = self._users.get(key, 0) + 1
        self._evict()
        return lock

    def _checkin(self, key: Hashable) -> None:
        remaining = self._users.pop(key, 0) - 1
        if remaining > 0:
            self._users[key] = remaining

    def _evict(self) -> None:
        idle = [key for key in self._locks if key not in self._users]
        for key in idle[: max(0, len(self._locks) - self._max_locks)]:
            del self._locks[key]

    @asynccontextmanager
    async def locked(self, key: Hashable) -> AsyncIterator[None]:
        """Hold the lock for *key* (a tenant id, as the resolver calls it)."""
        lock = self._checkout(key)
        try:
            async with lock:
                yield
        finally:
            self._checkin(key)

    @property
    def size(self) -> int:
        """Number of locks currently tracked."""
        return len(self._locks)


class GlobalLockManager(ResolutionLockManager):
    """A single process-wide lock; every key shares it.

    Serializes unrelated tenants too.  Use it when resolutions must be
    totally ordered across the whole process.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def locked(self, key: Hashable) -> AsyncIterator[None]:
        async with self._lock:
            yield

    @property
    def is_locked(self) -> bool:
        return self._lock.locked()
