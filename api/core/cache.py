"""
Process-wide Redis client.

The client is created once in the app lifespan and closed on shutdown.
No route reads from it yet; it is held so features can share one
connection pool.
"""

from __future__ import annotations

import logging

import redis.asyncio as aioredis

from .config import CacheConfig

_client: aioredis.Redis | None = None

logger = logging.getLogger(__name__)


def init_client(settings: CacheConfig | None) -> aioredis.Redis:
    global _client
    if _client is not None:
        return _client

    settings = settings or CacheConfig()
    # Lazy: no connection is opened until the first command.
    _client = aioredis.Redis(
        host=settings.host,
        port=settings.port,
        password=settings.password,
        db=settings.db,
        decode_responses=True,
        socket_connect_timeout=5,
    )
    logger.info("cache_client_ready host=%s port=%s", settings.host, settings.port)
    return _client


async def close_client() -> None:
    global _client
    if _client is None:
        return None
    await _client.aclose()
    _client = None
    logger.info("cache_client_closed")


def client() -> aioredis.Redis:
    if _client is None:
        raise RuntimeError("Cache client is not initialized. Call init_client() on startup.")
    return _client
