"""Redis-backed string and JSON cache."""

from __future__ import annotations

import inspect
import json
from collections.abc import Callable
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from xuul import config
from xuul.config import ConfigError

DEFAULT_EXPIRATION = 60 * 60 * 12

_REDIS_ENV_KEYS = ("REDIS_HOST", "REDIS_PASSWORD", "REDIS_db")


def _env(key: str) -> str:
    value = config.get(key)
    if value is None:
        raise ConfigError(f"environment variable {key} is not set")
    return value


def redis_url() -> str:
    """Build the Redis URL from REDIS_HOST, REDIS_PASSWORD and REDIS_db."""
    host, auth, db = (_env(key) for key in _REDIS_ENV_KEYS)
    return f"redis://:{auth}@{host}/{db}"


class RedisCache:
    """Thin cache layer over an async Redis client."""

    def __init__(self, client: Any) -> None:
        self.client = client

    @classmethod
    def from_env(cls) -> RedisCache:
        return cls(aioredis.from_url(redis_url(), decode_responses=True))

    async def get(self, key: str) -> str | None:
        value = await self.client.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        await self.client.set(key, value)

    async def set_ex(self, key: str, value: str, expiration: int | None = None) -> None:
        """Store ``value`` expiring after ``expiration`` seconds (12 hours by default)."""
        ttl = DEFAULT_EXPIRATION if expiration is None else expiration
        await self.client.set(key, value, ex=ttl)

    async def get_json(self, key: str) -> Any:
        raw = await self.get(key)
        return None if raw is None else json.loads(raw)

    async def set_json(self, key: str, value: Any, expiration: int | None = None) -> None:
        await self.set_ex(key, json.dumps(value, ensure_ascii=False), expiration)

    async def get_or_set_json(
        self, key: str, expire_secs: int | None, load_fn: Callable[[], Any]
    ) -> Any:
        """Return the cached value for ``key``, loading and caching it on a miss.

        ``load_fn`` may be sync or async; a None result is returned without
        being cached. Cache read failures count as a miss.
        """
        try:
            cached = await self.get_json(key)
        except RedisError:
            cached = None
        if cached is not None:
            return cached

        loaded = load_fn()
        if inspect.isawaitable(loaded):
            loaded = await loaded
        if loaded is None:
            return None
        await self.set_json(key, loaded, expire_secs)
        return loaded