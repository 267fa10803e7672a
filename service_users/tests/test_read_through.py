"""
Unit tests for the read-through cache.
"""

import json
import pytest
from unittest.mock import AsyncMock

from shared.errors import CacheReadError, StoreReadError
from shared.metrics import MetricsCollector
from shared.test_helpers import FakeClock, FakeRedisClient
from service_users.app.cache.redis_cache import RedisCache
from service_users.app.cache.read_through import ReadThroughCache


RECORD = {"_id": "65f0c0ffee0000000000beef", "name": "Ann", "email": "ann@x.com"}


class TestReadThroughCache:
    """Test cases for ReadThroughCache."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def redis_client(self, clock):
        return FakeRedisClient(clock)

    @pytest.fixture
    def metrics(self):
        return MetricsCollector("users")

    @pytest.fixture
    def read_through(self, redis_client, metrics):
        return ReadThroughCache(RedisCache("redis://localhost:6379/0", client=redis_client), metrics=metrics)

    @pytest.mark.asyncio
    async def test_lookup_miss(self, read_through, metrics):
        assert await read_through.lookup("ann@x.com") is None
        assert metrics.get_sample_value("cache_misses_total", cache_type="redis") == 1

    @pytest.mark.asyncio
    async def test_lookup_hit(self, read_through, redis_client, metrics):
        await redis_client.setex("ann@x.com", 3600, json.dumps(RECORD))

        assert await read_through.lookup("ann@x.com") == RECORD
        assert metrics.get_sample_value("cache_hits_total", cache_type="redis") == 1

    @pytest.mark.asyncio
    async def test_key_is_raw_email(self, read_through, redis_client):
        await read_through.populate("Ann.Smith+tag@x.com", RECORD)
        assert redis_client.keys() == ["Ann.Smith+tag@x.com"]

    @pytest.mark.asyncio
    async def test_hit_skips_store(self, read_through, redis_client):
        """Test a cached record is returned without calling the store."""
        await redis_client.setex("ann@x.com", 3600, json.dumps(RECORD))
        call_next = AsyncMock()

        result = await read_through.get_or_fetch("ann@x.com", call_next)

        assert result.hit is True
        assert result.record == RECORD
        call_next.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_miss_populates_with_default_ttl(self, read_through, redis_client):
        call_next = AsyncMock(return_value=RECORD)

        result = await read_through.get_or_fetch("ann@x.com", call_next)

        assert result.hit is False
        assert result.record == RECORD
        call_next.assert_awaited_once_with("ann@x.com")
        assert await redis_client.ttl("ann@x.com") == 3600
        assert json.loads(await redis_client.get("ann@x.com")) == RECORD

    @pytest.mark.asyncio
    async def test_populate_overwrites(self, read_through, redis_client):
        await redis_client.setex("ann@x.com", 10, json.dumps({"email": "old"}))

        assert await read_through.populate("ann@x.com", RECORD, ttl_seconds=60) is True

        assert json.loads(await redis_client.get("ann@x.com")) == RECORD
        assert await redis_client.ttl("ann@x.com") == 60

    @pytest.mark.asyncio
    async def test_not_found_is_not_cached(self, read_through, redis_client):
        """Test no negative entry is written."""
        result = await read_through.get_or_fetch("nobody@x.com", AsyncMock(return_value=None))

        assert result.found is False
        assert redis_client.setex_calls == 0

    @pytest.mark.asyncio
    async def test_store_error_propagates_without_caching(self, read_through, redis_client):
        call_next = AsyncMock(side_effect=StoreReadError("connection closed"))

        with pytest.raises(StoreReadError):
            await read_through.get_or_fetch("ann@x.com", call_next)

        assert redis_client.setex_calls == 0

    @pytest.mark.asyncio
    async def test_entry_written_before_record_returned(self, read_through, redis_client):
        """Test a found record is cached by the time get_or_fetch returns."""
        call_next = AsyncMock(return_value=RECORD)

        result = await read_through.get_or_fetch("ann@x.com", call_next)

        assert result.record == RECORD
        assert result.hit is False
        assert redis_client.setex_calls == 1
        assert redis_client.keys() == ["ann@x.com"]

        again = await read_through.get_or_fetch("ann@x.com", call_next)
        assert again.hit is True
        call_next.assert_awaited_once_with("ann@x.com")

    @pytest.mark.asyncio
    async def test_hit_does_not_refresh_ttl(self, read_through, redis_client, clock):
        await read_through.populate("ann@x.com", RECORD)

        clock.advance(1000)
        assert await read_through.lookup("ann@x.com") == RECORD
        assert await redis_client.ttl("ann@x.com") == 2600

    @pytest.mark.asyncio
    async def test_expired_entry_is_a_miss(self, read_through, clock):
        await read_through.populate("ann@x.com", RECORD)
        clock.advance(3600)

        call_next = AsyncMock(return_value=RECORD)
        result = await read_through.get_or_fetch("ann@x.com", call_next)

        assert result.hit is False
        call_next.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_read_error_raises_by_default(self, read_through, redis_client, metrics):
        redis_client.fail_reads = True
        call_next = AsyncMock(return_value=RECORD)

        with pytest.raises(CacheReadError):
            await read_through.get_or_fetch("ann@x.com", call_next)

        call_next.assert_not_awaited()
        assert metrics.get_sample_value("cache_read_errors_total", cache_type="redis") == 1

    @pytest.mark.asyncio
    async def test_read_error_as_miss(self, redis_client, metrics):
        read_through = ReadThroughCache(
            RedisCache("redis://localhost:6379/0", client=redis_client),
            read_error_policy="miss",
            metrics=metrics,
        )
        redis_client.fail_reads = True

        result = await read_through.get_or_fetch("ann@x.com", AsyncMock(return_value=RECORD))

        assert result.record == RECORD
        assert metrics.get_sample_value("cache_read_errors_total", cache_type="redis") == 1
        assert metrics.get_sample_value("cache_misses_total", cache_type="redis") == 1

    @pytest.mark.asyncio
    async def test_write_failure_is_reported_not_raised(self, read_through, redis_client, metrics):
        redis_client.fail_writes = True

        result = await read_through.get_or_fetch("ann@x.com", AsyncMock(return_value=RECORD))

        assert result.record == RECORD
        assert metrics.get_sample_value("cache_write_failures_total", cache_type="redis") == 1

    @pytest.mark.asyncio
    async def test_works_without_metrics(self, redis_client):
        read_through = ReadThroughCache(RedisCache("redis://localhost:6379/0", client=redis_client))

        assert await read_through.populate("ann@x.com", RECORD) is True
        assert await read_through.lookup("ann@x.com") == RECORD

    def test_unknown_policy_rejected(self, redis_client):
        with pytest.raises(ValueError):
            ReadThroughCache(RedisCache("redis://localhost:6379/0", client=redis_client), read_error_policy="retry")
