"""Best-effort key/value cache in front of the entity store.

Backends raise CacheDegradedError on any failure. Services only ever talk to
a ResilientCache, which logs and absorbs those failures so that a broken
cache degrades to plain store reads.
"""

import json
import logging
import threading
import time
from typing import Any, Dict, Optional, Tuple

import redis

from i18n_center_api.errors import CacheDegradedError

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600
MEMORY_URL = "memory://"


def translation_key(component_id: Any, locale: str, stage: str) -> str:
    return f"translation:{component_id}:{locale}:{stage}"


def component_key(component_id: Any) -> str:
    return f"component:{component_id}"


class Cache:
    """Interface: JSON-compatible values, `None` means miss."""

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class NullCache(Cache):
    """Cache for environments without one: every read misses."""

    def get(self, key: str) -> Optional[Any]:
        return None

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        return None

    def delete(self, key: str) -> None:
        return None


class MemoryCache(Cache):
    """Process-local TTL cache for single-process runs (`REDIS_URL=memory://`) and tests."""

    def __init__(self, clock=time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._items: Dict[str, Tuple[float, str]] = {}

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            expires_at, raw = item
            if expires_at <= self._clock():
                del self._items[key]
                return None
        return json.loads(raw)

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        raw = json.dumps(value)
        with self._lock:
            self._items[key] = (self._clock() + ttl_seconds, raw)

    def delete(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class RedisCache(Cache):
    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCache":
        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=5,
            socket_connect_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30,
        )
        return cls(client)

    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self._client.get(key)
        except redis.RedisError as exc:
            raise CacheDegradedError(f"redis get failed for {key}: {exc}") from exc
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CacheDegradedError(f"undecodable cache entry for {key}") from exc

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            self._client.setex(key, ttl_seconds, json.dumps(value))
        except (redis.RedisError, TypeError, ValueError) as exc:
            raise CacheDegradedError(f"redis set failed for {key}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._client.delete(key)
        except redis.RedisError as exc:
            raise CacheDegradedError(f"redis delete failed for {key}: {exc}") from exc


class ResilientCache:
    """Wraps a backend so cache failures never fail an operation."""

    def __init__(self, backend: Optional[Cache] = None, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> None:
        self.backend = backend if backend is not None else NullCache()
        self.ttl_seconds = ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        try:
            return self.backend.get(key)
        except CacheDegradedError as exc:
            logger.warning("Cache degraded on get", extra={"cache_key": key, "error": str(exc)})
            return None

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        try:
            self.backend.set(key, value, ttl_seconds or self.ttl_seconds)
        except CacheDegradedError as exc:
            logger.warning("Cache degraded on set", extra={"cache_key": key, "error": str(exc)})

    def delete(self, *keys: str) -> None:
        for key in keys:
            try:
                self.backend.delete(key)
            except CacheDegradedError as exc:
                logger.warning("Cache degraded on delete", extra={"cache_key": key, "error": str(exc)})


def build_cache(redis_url: Optional[str], ttl_seconds: int = DEFAULT_TTL_SECONDS) -> ResilientCache:
    if not redis_url:
        logger.info("No REDIS_URL configured, translation cache disabled")
        return ResilientCache(NullCache(), ttl_seconds)
    if redis_url == MEMORY_URL:
        logger.info("Using process-local translation cache")
        return ResilientCache(MemoryCache(), ttl_seconds)
    return ResilientCache(RedisCache.from_url(redis_url), ttl_seconds)
