"""
Tests for the rate limiter backends.
"""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from utils.rate_limiter import (
    InMemoryRateLimiter,
    RedisRateLimiter,
    create_rate_limiter
)

START = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class Clock:
    def __init__(self, now=START):
        self.now = now

    def __call__(self):
        return self.now


class StubRedis:
    """Just enough of the redis client API for the limiter."""

    def __init__(self):
        self.counts = {}
        self.ttls = {}

    def incr(self, key):
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    def pexpire(self, key, ms):
        self.ttls[key] = ms

    def pttl(self, key):
        return self.ttls.get(key, -1)


class TestInMemoryRateLimiter:

    def test_allows_up_to_quota(self):
        limiter = InMemoryRateLimiter(max_requests=5, window_minutes=60, clock=Clock())

        results = [limiter.check("1.2.3.4") for _ in range(6)]

        assert [r.allowed for r in results] == [True] * 5 + [False]
        assert [r.remaining for r in results] == [4, 3, 2, 1, 0, 0]
        assert results[-1].reset_time == START + timedelta(minutes=60)

    def test_identifiers_are_independent(self):
        limiter = InMemoryRateLimiter(max_requests=1, clock=Clock())

        assert limiter.check("a").allowed is True
        assert limiter.check("a").allowed is False
        assert limiter.check("b").allowed is True

    def test_window_resets(self):
        clock = Clock()
        limiter = InMemoryRateLimiter(max_requests=1, window_minutes=60, clock=clock)

        assert limiter.check("a").allowed is True
        assert limiter.check("a").allowed is False

        clock.now = START + timedelta(minutes=61)

        result = limiter.check("a")
        assert result.allowed is True
        assert result.reset_time == clock.now + timedelta(minutes=60)

    def test_concurrent_checks_never_exceed_quota(self):
        limiter = InMemoryRateLimiter(max_requests=50, clock=Clock())
        allowed = []

        def worker():
            for _ in range(20):
                allowed.append(limiter.check("shared").allowed)

        threads = [threading.Thread(target=worker) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sum(allowed) == 50


class TestRedisRateLimiter:

    def test_counts_in_redis(self):
        redis_client = StubRedis()
        limiter = RedisRateLimiter(lambda: redis_client, max_requests=2, window_minutes=60, clock=Clock())

        results = [limiter.check("1.2.3.4") for _ in range(3)]

        assert [r.allowed for r in results] == [True, True, False]
        assert redis_client.counts == {"rate_limit:analyze:1.2.3.4": 3}
        assert redis_client.ttls["rate_limit:analyze:1.2.3.4"] == 60 * 60 * 1000
        assert results[0].reset_time == START + timedelta(minutes=60)

    def test_allows_when_redis_is_down(self):
        def broken_client():
            raise ConnectionError("Redis connection failed")

        limiter = RedisRateLimiter(broken_client, max_requests=1, clock=Clock())

        assert limiter.check("a").allowed is True
        assert limiter.check("a").allowed is True


class TestFactory:

    def test_memory_backend(self):
        assert isinstance(create_rate_limiter("memory", 5, 60), InMemoryRateLimiter)

    def test_redis_backend(self):
        limiter = create_rate_limiter("redis", 5, 60, client_factory=StubRedis)

        assert isinstance(limiter, RedisRateLimiter)
        assert limiter.max_requests == 5

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_rate_limiter("memcached")
