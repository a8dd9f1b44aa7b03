"""Key-value storage for the serialized current-user session record."""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import Any, Optional, Protocol

import redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    def save(self, session_id: str, record: dict[str, Any]) -> None: ...

    def load(self, session_id: str) -> Optional[dict[str, Any]]: ...

    def clear(self, session_id: str) -> None: ...


class MemorySessionStore:
    """Process-local sessions; lost on restart like the browser demo's storage."""

    def __init__(self, *, key_prefix: str = "lab2dent_user", ttl_seconds: int = 8 * 3600) -> None:
        self._key_prefix = key_prefix
        self._ttl_seconds = ttl_seconds
        self._items: dict[str, tuple[float, str]] = {}
        self._lock = threading.Lock()

    def key_for(self, session_id: str) -> str:
        return f"{self._key_prefix}:{session_id}"

    def save(self, session_id: str, record: dict[str, Any]) -> None:
        expires_at = time.monotonic() + self._ttl_seconds
        with self._lock:
            self._items[self.key_for(session_id)] = (expires_at, json.dumps(record))

    def load(self, session_id: str) -> Optional[dict[str, Any]]:
        key = self.key_for(session_id)
        with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            expires_at, payload = item
            if expires_at <= time.monotonic():
                del self._items[key]
                return None
        return json.loads(payload)

    def clear(self, session_id: str) -> None:
        with self._lock:
            self._items.pop(self.key_for(session_id), None)


class RedisSessionStore:
    def __init__(self, client: "redis.Redis", *, key_prefix: str = "lab2dent_user", ttl_seconds: int = 8 * 3600) -> None:
        self._client = client
        self._key_prefix = key_prefix
        self._ttl_seconds = ttl_seconds

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> "RedisSessionStore":
        return cls(redis.from_url(url, decode_responses=True), **kwargs)

    def key_for(self, session_id: str) -> str:
        return f"{self._key_prefix}:{session_id}"

    def save(self, session_id: str, record: dict[str, Any]) -> None:
        self._client.set(self.key_for(session_id), json.dumps(record), ex=self._ttl_seconds)

    def load(self, session_id: str) -> Optional[dict[str, Any]]:
        payload = self._client.get(self.key_for(session_id))
        if payload is None:
            return None
        return json.loads(payload)

    def clear(self, session_id: str) -> None:
        try:
            self._client.delete(self.key_for(session_id))
        except RedisError:
            # Token expiry still ends the session.
            logger.exception("Redis error while clearing session (ignored)")


def build_session_store(*, backend: str, redis_url: str, key_prefix: str, ttl_seconds: int) -> SessionStore:
    backend_name = (backend or "memory").strip().lower()
    if backend_name == "redis":
        return RedisSessionStore.from_url(redis_url, key_prefix=key_prefix, ttl_seconds=ttl_seconds)
    if backend_name == "memory":
        return MemorySessionStore(key_prefix=key_prefix, ttl_seconds=ttl_seconds)
    raise ValueError(f"Unknown SESSION_BACKEND: {backend}")
