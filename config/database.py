"""
Redis connection for the shared rate limiter.

One pooled client per process, created on first use. Nothing else in the
service talks to Redis; the analysis pipeline stores no state.
"""

import logging
from typing import Optional

import redis

from config.settings import Settings, settings

logger = logging.getLogger(__name__)

# Singleton instances
_redis_client: Optional[redis.Redis] = None
_redis_pool: Optional[redis.ConnectionPool] = None

SOCKET_TIMEOUT_SECONDS = 5


def _pool_options(config: Settings) -> dict:
    return {
        "host": config.REDIS_HOST,
        "port": config.REDIS_PORT,
        "db": config.REDIS_DB,
        "max_connections": config.REDIS_MAX_CONNECTIONS,
        "decode_responses": True,
        "socket_connect_timeout": SOCKET_TIMEOUT_SECONDS,
        "socket_timeout": SOCKET_TIMEOUT_SECONDS,
    }


def get_redis_client() -> redis.Redis:
    """
    Return the shared Redis client, connecting on first call.

    Raises:
        ConnectionError: If Redis does not answer PING
    """
    global _redis_client, _redis_pool

    if _redis_client is not None:
        return _redis_client

    pool = redis.ConnectionPool(**_pool_options(settings))
    client = redis.Redis(connection_pool=pool)

    try:
        client.ping()
    except Exception as e:
        pool.disconnect()
        logger.error(f"Rate limit store unreachable at {settings.REDIS_HOST}:{settings.REDIS_PORT}: {e}")
        raise ConnectionError(f"Redis connection failed: {e}") from e

    _redis_pool, _redis_client = pool, client
    logger.info(f"Rate limit store connected at {settings.REDIS_HOST}:{settings.REDIS_PORT}")
    return client


def check_redis() -> dict:
    """Report whether the rate limit store answers, for startup logs."""
    try:
        get_redis_client().ping()
        return {"connected": True, "error": None}
    except Exception as e:
        return {"connected": False, "error": str(e)}


def close_redis() -> None:
    """Drop the shared client and its pool. Called on application shutdown."""
    global _redis_client, _redis_pool

    client, pool = _redis_client, _redis_pool
    _redis_client = _redis_pool = None

    if client is not None:
        try:
            client.close()
        except Exception as e:
            logger.error(f"Error closing Redis client: {e}")

    if pool is not None:
        try:
            pool.disconnect()
        except Exception as e:
            logger.error(f"Error closing Redis pool: {e}")
        else:
            logger.info("Closed Redis connection pool")
