"""Named lock abstraction - Redis or in-process fallback."""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
import logging

from coinledger.utils.exceptions import LockTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_HOLD_SECONDS = 60


class LockClient:
    """Abstraction for named locks - uses Redis if available, else asyncio locks.

    In-process locks only serialize callers inside one worker; set
    ``REDIS_URL`` when running more than one worker process.
    """

    def __init__(self, redis_url: Optional[str] = None):
        self.backend = "memory"
        # name -> [lock, holders and waiters]
        self._memory_locks: dict[str, list] = {}

        if redis_url:
            try:
                import redis.asyncio as aioredis
                self.redis = aioredis.from_url(redis_url)
                self.backend = "redis"
                logger.info("Using Redis for ledger locks")
            except Exception as e:
                logger.warning(f"Redis not available, using in-process locks: {e}")
        else:
            logger.info("Using in-process ledger locks (Redis URL not provided)")

    @asynccontextmanager
    async def lock(
        self,
        name: str,
        timeout: float = 10,
        hold_timeout: Optional[float] = None,
    ) -> AsyncIterator[None]:
        """Hold the named lock for the duration of the block.

        Args:
            name: Lock name.
            timeout: Seconds to wait for the lock.
            hold_timeout: Seconds after which a Redis lock expires if never released.
                Defaults to DEFAULT_HOLD_SECONDS and is never shorter than ``timeout``.

        Raises:
            LockTimeoutError: If the lock is not acquired within ``timeout`` seconds.
        """
        if self.backend == "redis":
            from redis.exceptions import LockError

            hold = max(hold_timeout or DEFAULT_HOLD_SECONDS, timeout)
            redis_lock = self.redis.lock(name, timeout=hold, blocking_timeout=timeout)
            try:
                acquired = await redis_lock.acquire()
            except LockError as exc:
                raise LockTimeoutError(name, timeout) from exc
            if not acquired:
                raise LockTimeoutError(name, timeout)
            try:
                yield
            finally:
                try:
                    await redis_lock.release()
                except LockError:
                    logger.warning(f"Lock {name!r} expired before release")
            return

        entry = self._memory_locks.setdefault(name, [asyncio.Lock(), 0])
        entry[1] += 1
        try:
            try:
                await asyncio.wait_for(entry[0].acquire(), timeout)
            except asyncio.TimeoutError as exc:
                raise LockTimeoutError(name, timeout) from exc
            try:
                yield
            finally:
                entry[0].release()
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                self._memory_locks.pop(name, None)

    def is_locked(self, name: str) -> bool:
        """Return True if an in-process lock with this name is currently held."""
        entry = self._memory_locks.get(name)
        return bool(entry and entry[0].locked())
