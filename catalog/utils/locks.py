# catalog/utils/locks.py
from __future__ import annotations
from typing import Optional
from redis.asyncio import Redis
import uuid

# Compare-and-delete so a worker never releases a lock that expired and was re-taken
_RELEASE_SCRIPT = """
if redis.call('get', KEYS[1]) == ARGV[1] then
    return redis.call('del', KEYS[1])
end
return 0
"""


class RedisLock:
    """
    Single-instance lock using SET NX EX, shared by every API worker.
    Usable as an async context manager; `acquired` tells whether it was won.
    """
    def __init__(self, redis: Redis, key: str, ttl: int = 30):
        self.redis = redis
        self.key = f"lock:{key}"
        self.ttl = ttl
        self._token: Optional[str] = None

    @property
    def acquired(self) -> bool:
        return self._token is not None

    async def acquire(self) -> bool:
        token = uuid.uuid4().hex
        ok = await self.redis.set(self.key, token, nx=True, ex=self.ttl)
        if ok:
            self._token = token
            return True
        return False

    async def release(self) -> None:
        if self._token is None:
            return
        await self.redis.eval(_RELEASE_SCRIPT, 1, self.key, self._token)
        self._token = None

    async def __aenter__(self) -> "RedisLock":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.release()
