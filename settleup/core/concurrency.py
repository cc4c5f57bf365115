"""Per-group critical sections and conflict retries.

Every read-modify-write of a group's document runs while holding that group's
lock, so concurrent mutations in one process never interleave. Separate
processes are kept apart by the version check on commit; a lost race surfaces
as ``ConcurrencyConflict`` and the whole operation is retried from a fresh
read.
"""

import asyncio
import functools
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from settleup.core.config import settings
from settleup.core.exceptions import ConcurrencyConflict

logger = logging.getLogger(__name__)


class _GroupLock:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = asyncio.Lock()
        self.users = 0


class GroupLockRegistry:
    """
    One ``asyncio.Lock`` per group id.

    An entry only lives while some task holds or waits for it, so ids that
    are never seen again (including unknown ones) do not accumulate.
    """

    def __init__(self):
        self._locks: Dict[str, _GroupLock] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def lock_for(self, group_id: str) -> AsyncIterator[None]:
        entry = self._locks.get(group_id)
        if entry is None:
            entry = self._locks[group_id] = _GroupLock()
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[group_id]


group_locks = GroupLockRegistry()


def retry_on_conflict(func):
    """Re-run an async group operation when its commit loses a version race."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        attempts = max(1, settings.CONFLICT_RETRY_LIMIT)
        for attempt in range(1, attempts + 1):
            try:
                return await func(*args, **kwargs)
            except ConcurrencyConflict as exc:
                if attempt == attempts:
                    logger.warning(f"{exc}; giving up after {attempts} attempts")
                    raise
                logger.warning(f"{exc}; retrying ({attempt}/{attempts})")

    return wrapper
