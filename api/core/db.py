"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Driver and connection failures surface as `StoreError`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from .config import DatabaseConfig
from .errors import StoreError

_pool: asyncpg.Pool | None = None
_settings: DatabaseConfig | None = None

_DRIVER_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    asyncpg.exceptions.InternalClientError,
    asyncio.TimeoutError,
    OSError,
)

logger = logging.getLogger(__name__)


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def connect_kwargs(settings: DatabaseConfig) -> dict[str, Any]:
    url = (settings.url or "").strip()
    if url:
        return {"dsn": _sanitize_database_url(url)}
    return {
        "host": settings.host,
        "port": settings.port,
        "user": settings.user,
        "password": settings.password,
        "database": settings.name,
    }


async def init_pool(settings: DatabaseConfig) -> None:
    """
    Create the pool without opening a connection. The first query connects,
    so the process starts even while Postgres is down.
    """
    global _pool, _settings
    _settings = settings
    if _pool is not None:
        return None
    try:
        _pool = await asyncpg.create_pool(
            **connect_kwargs(settings),
            min_size=0,
            max_size=10,
            command_timeout=30,
        )
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
        raise StoreError(f"Could not create database pool: {exc}") from exc
    logger.info("db_pool_ready host=%s database=%s", settings.host, settings.name)


async def close_pool() -> None:
    global _pool, _settings
    _settings = None
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise StoreError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


async def _ready_pool() -> asyncpg.Pool:
    # Startup may have failed to build the pool; retry with the same settings.
    if _pool is None and _settings is not None:
        await init_pool(_settings)
    return pool()


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    try:
        row = await (await _ready_pool()).fetchrow(sql, *args)
    except _DRIVER_ERRORS as exc:
        raise StoreError(f"Database query failed: {exc}") from exc
    return _record_to_dict(row) if row is not None else None
