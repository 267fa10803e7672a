"""
Read-through caching for user lookups.

The cache is populated lazily: a lookup that misses falls through to the
backing store, and a found record is written back with a fixed TTL. Entries
are never invalidated on write, so a cached record may be stale for up to
``ttl_seconds``. A hit does not extend the entry's lifetime.
"""

import json
from typing import Any, Awaitable, Callable, Dict, Optional

from shared.logging import get_logger
from shared.metrics import MetricsCollector
from shared.errors import CacheReadError, CacheWriteError

from ..models import CacheResult
from .redis_cache import RedisCache


DEFAULT_TTL_SECONDS = 3600

# Cache-read error policies
RAISE = "raise"
TREAT_AS_MISS = "miss"

Record = Dict[str, Any]
FetchRecord = Callable[[str], Awaitable[Optional[Record]]]


class ReadThroughCache:
    """Lookup / populate pair plus the composed get-or-fetch step."""

    def __init__(
        self,
        cache: RedisCache,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        read_error_policy: str = RAISE,
        metrics: Optional[MetricsCollector] = None,
    ):
        if read_error_policy not in (RAISE, TREAT_AS_MISS):
            raise ValueError(f"Unknown cache read error policy: {read_error_policy}")

        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.read_error_policy = read_error_policy
        self.metrics = metrics
        self.logger = get_logger("users.cache.read_through")

    async def lookup(self, key: str) -> Optional[Record]:
        """Return the cached record for key, or None on a miss.

        Raises CacheReadError when the cache cannot be read and the policy
        is ``raise``.
        """
        try:
            cached = await self.cache.get(key)
        except CacheReadError as e:
            self._count("cache_read_errors_total")
            if self.read_error_policy == RAISE:
                self.logger.error("Cache lookup failed", key=key, error=e.message)
                raise
            self.logger.warning("Cache lookup failed, treating as miss", key=key, error=e.message)
            cached = None

        if cached is None:
            self._count("cache_misses_total")
            self.logger.debug("Cache miss", key=key)
            return None

        self._count("cache_hits_total")
        self.logger.debug("Cache hit", key=key)
        return json.loads(cached)

    async def populate(self, key: str, record: Record, ttl_seconds: Optional[int] = None) -> bool:
        """Write record under key, overwriting any existing entry.

        Failures never propagate: they are logged and counted, and False is
        returned.
        """
        ttl = ttl_seconds if ttl_seconds is not None else self.ttl_seconds
        try:
            await self.cache.setex(key, ttl, json.dumps(record))
        except CacheWriteError as e:
            self._count("cache_write_failures_total")
            self.logger.error("Cache population failed", key=key, error=e.message)
            return False

        self.logger.debug("Cache populated", key=key, ttl=ttl)
        return True

    async def get_or_fetch(
        self,
        key: str,
        call_next: FetchRecord,
    ) -> CacheResult:
        """Serve key from the cache, falling through to call_next on a miss.

        ``call_next`` is the backing-store lookup. A found record is written
        back through ``populate`` before it is returned, so the next lookup
        for the same key is a hit. Not-found results and store errors leave
        the cache untouched.
        """
        cached = await self.lookup(key)
        if cached is not None:
            return CacheResult(record=cached, hit=True)

        record = await call_next(key)
        if record is None:
            return CacheResult(record=None, hit=False)

        await self.populate(key, record)

        return CacheResult(record=record, hit=False)

    def _count(self, metric_name: str):
        if self.metrics:
            self.metrics.increment_counter(metric_name, cache_type="redis")
