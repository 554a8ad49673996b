"""
Fixed-window request rate limiting.

The limiter is an injected collaborator: the app factory builds one and
stores it on ``app.state``; routes resolve it through a FastAPI dependency.
Two backends are provided, an in-process dictionary guarded by a lock and a
Redis counter shared across workers.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_time: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RateLimiter(ABC):
    """Counts requests per identifier in fixed windows."""

    def __init__(self, max_requests: int = 10, window_minutes: int = 60):
        self.max_requests = max_requests
        self.window = timedelta(minutes=window_minutes)

    @abstractmethod
    def check(self, identifier: str) -> RateLimitResult:
        """Record one request for ``identifier`` and report whether it is allowed."""


@dataclass
class _Window:
    count: int
    reset_time: datetime


class InMemoryRateLimiter(RateLimiter):
    """Process-local limiter. Only correct for a single worker process."""

    def __init__(
        self,
        max_requests: int = 10,
        window_minutes: int = 60,
        clock: Callable[[], datetime] = _utcnow
    ):
        super().__init__(max_requests, window_minutes)
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: Dict[str, _Window] = {}

    def check(self, identifier: str) -> RateLimitResult:
        now = self._clock()

        with self._lock:
            current = self._windows.get(identifier)

            if current is None or current.reset_time < now:
                reset_time = now + self.window
                self._windows[identifier] = _Window(count=1, reset_time=reset_time)
                return RateLimitResult(
                    allowed=True,
                    remaining=self.max_requests - 1,
                    reset_time=reset_time
                )

            if current.count >= self.max_requests:
                return RateLimitResult(allowed=False, remaining=0, reset_time=current.reset_time)

            current.count += 1
            return RateLimitResult(
                allowed=True,
                remaining=self.max_requests - current.count,
                reset_time=current.reset_time
            )

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


class RedisRateLimiter(RateLimiter):
    """Limiter backed by Redis INCR/EXPIRE, shared across worker processes."""

    KEY_PREFIX = "rate_limit"

    def __init__(
        self,
        client_factory: Callable,
        max_requests: int = 10,
        window_minutes: int = 60,
        clock: Callable[[], datetime] = _utcnow
    ):
        super().__init__(max_requests, window_minutes)
        self._client_factory = client_factory
        self._clock = clock

    def _key(self, identifier: str) -> str:
        return f"{self.KEY_PREFIX}:analyze:{identifier}"

    def check(self, identifier: str) -> RateLimitResult:
        now = self._clock()
        window_ms = int(self.window.total_seconds() * 1000)

        try:
            redis_client = self._client_factory()
            key = self._key(identifier)

            current = redis_client.incr(key)
            if current == 1:
                redis_client.pexpire(key, window_ms)
                ttl_ms = window_ms
            else:
                ttl_ms = redis_client.pttl(key)
                if ttl_ms is None or ttl_ms < 0:
                    # Key lost its expiry; start a fresh window
                    redis_client.pexpire(key, window_ms)
                    ttl_ms = window_ms

            reset_time = now + timedelta(milliseconds=ttl_ms)
            allowed = current <= self.max_requests

            if not allowed:
                logger.warning(f"Rate limit exceeded for {identifier}: {current}/{self.max_requests}")

            return RateLimitResult(
                allowed=allowed,
                remaining=max(0, self.max_requests - current),
                reset_time=reset_time
            )

        except Exception as e:
            logger.error(f"Error checking rate limit: {e}")
            # Allow on error to avoid blocking
            return RateLimitResult(
                allowed=True,
                remaining=self.max_requests,
                reset_time=now + self.window
            )


def create_rate_limiter(
    backend: str = "memory",
    max_requests: int = 5,
    window_minutes: int = 60,
    client_factory: Optional[Callable] = None
) -> RateLimiter:
    """
    Build a rate limiter for the configured backend.

    Args:
        backend: "memory" or "redis"
        max_requests: Requests allowed per window
        window_minutes: Window length in minutes
        client_factory: Callable returning a Redis client (redis backend only)

    Returns:
        RateLimiter instance
    """
    backend = (backend or "memory").lower()

    if backend == "redis":
        if client_factory is None:
            from config.database import get_redis_client
            client_factory = get_redis_client
        logger.info(f"Using Redis rate limiter ({max_requests} requests / {window_minutes} min)")
        return RedisRateLimiter(client_factory, max_requests, window_minutes)

    if backend != "memory":
        raise ValueError(f"Unknown rate limit backend: {backend}")

    logger.info(f"Using in-memory rate limiter ({max_requests} requests / {window_minutes} min)")
    return InMemoryRateLimiter(max_requests, window_minutes)
