import logging
from typing import List, Optional

import redis

from .base import CounterStore

logger = logging.getLogger(__name__)


class RedisStore(CounterStore):
    """ Counters kept in Redis hashes, one hash per metric """

    def __init__(self, client: redis.Redis = None, url: str = "redis://localhost:6379/0", prefix: str = "bucketsum") -> None:
        self._r = client if client is not None else redis.Redis.from_url(url)
        self._prefix = prefix

    def _k(self, hashName: str) -> str:
        return ":".join((self._prefix, hashName)) if self._prefix else hashName

    def Increment(self, hashName: str, field: str, delta: int) -> None:
        self._r.hincrby(self._k(hashName), field, delta)

    def ReadOne(self, hashName: str, field: str) -> Optional[int]:
        value = self._r.hget(self._k(hashName), field)
        return None if value is None else int(value)

    def ReadMany(self, hashName: str, fields: List[str]) -> List[Optional[int]]:
        if not fields:
            return []
        logger.debug("HMGET %s with %d fields", self._k(hashName), len(fields))
        values = self._r.hmget(self._k(hashName), fields)
        return [None if value is None else int(value) for value in values]
