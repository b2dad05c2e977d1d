"""Shared application state: database, HTTP client and cache."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from xuul.cache import RedisCache
from xuul.database import Database, database_url
from xuul.http_client import HttpClient

log = logging.getLogger(__name__)


@dataclass
class AppState:
    """Resources shared by all request handlers."""

    db: Database
    http: HttpClient
    redis: RedisCache

    async def aclose(self) -> None:
        """Release the HTTP client, the cache connection and the database pool."""
        await self.http.aclose()
        await self.redis.client.aclose()
        self.db.engine.dispose()


def create_state() -> AppState:
    """Build the state from environment configuration."""
    log.info("building application state")
    db = Database(database_url())
    http = HttpClient()
    redis = RedisCache.from_env()
    return AppState(db=db, http=http, redis=redis)