"""Redis implementation of SessionStore.

Sessions are stored as ``taskmanager:session:<token>`` → user id, with an
optional TTL, so they survive restarts and are shared by every API instance.
"""

import logging
import os
from typing import Optional

import redis
from redis.exceptions import RedisError

from domain.model.errors import StoreError

logger = logging.getLogger(__name__)

REDIS_URL = os.getenv('REDIS_URL', '')
SESSION_TTL_SECONDS = int(os.getenv('SESSION_TTL_SECONDS', '0'))
KEY_PREFIX = 'taskmanager:session:'


class RedisSessionStore:
    def __init__(self, url: str = REDIS_URL, ttl_seconds: int = SESSION_TTL_SECONDS):
        self.url = url
        self.ttl_seconds = ttl_seconds
        self._client_cache: Optional[redis.Redis] = None

    def _get_client(self) -> redis.Redis:
        """Get Redis client with caching and reconnection logic."""
        if self._client_cache:
            try:
                self._client_cache.ping()
                return self._client_cache
            except RedisError:
                self._client_cache = None
                logger.debug("[REDIS] Cached client failed ping, attempting reconnection...")

        if not self.url:
            raise StoreError("REDIS_URL not configured")

        try:
            client = redis.from_url(
                self.url,
                decode_responses=True,
                socket_connect_timeout=5,
            )
            client.ping()
        except (RedisError, ValueError, OSError) as e:
            logger.error(f"[REDIS] Connection failed: {str(e)[:200]}")
            raise StoreError(f"Session store unavailable: {e}") from e

        self._client_cache = client
        logger.info("[REDIS] Connected successfully")
        return client

    # ── SessionStore implementation ──────────────────────────

    def get(self, token: str) -> str | None:
        client = self._get_client()
        try:
            return client.get(f'{KEY_PREFIX}{token}')
        except RedisError as e:
            logger.error("Failed to read session", extra={"error": str(e)})
            raise StoreError(str(e)) from e

    def put(self, token: str, user_id: str) -> None:
        client = self._get_client()
        key = f'{KEY_PREFIX}{token}'
        try:
            if self.ttl_seconds > 0:
                client.setex(key, self.ttl_seconds, user_id)
            else:
                client.set(key, user_id)
        except RedisError as e:
            logger.error("Failed to store session", extra={"userId": user_id, "error": str(e)})
            raise StoreError(str(e)) from e

    def delete(self, token: str) -> None:
        client = self._get_client()
        try:
            client.delete(f'{KEY_PREFIX}{token}')
        except RedisError as e:
            logger.error("Failed to delete session", extra={"error": str(e)})
            raise StoreError(str(e)) from e

    def ping(self) -> bool:
        try:
            self._get_client()
            return True
        except StoreError:
            return False
