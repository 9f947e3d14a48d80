"""Cache tier stores.

Every store exposes ``read``/``write``/``delete``/``clear``. Values written
with ``raw=True`` are kept exactly as given (strings), which is how the
resolver writes translations; non-raw values are JSON-encoded where the
backend needs serialization.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from functools import lru_cache
from itertools import islice
from typing import Any, Protocol, runtime_checkable

import redis

from i18n_backend.app.core.config import settings
from i18n_backend.app.core.exceptions import UnknownCacheStore

logger = logging.getLogger(__name__)


@runtime_checkable
class CacheStore(Protocol):
    def read(self, key: str, *, raw: bool = False) -> Any: ...

    def write(
        self, key: str, value: Any, *, raw: bool = False, expires_in: int | None = None
    ) -> None: ...

    def delete(self, key: str) -> None: ...

    def clear(self) -> None: ...


class MemoryCacheStore:
    """Thread-safe in-process store with optional per-entry TTL.

    Holds at most *max_size* entries. A write into a full store first drops
    expired entries, then the oldest tenth if it is still full.
    """

    def __init__(self, expires_in: int | None = None, max_size: int | None = None) -> None:
        self._expires_in = expires_in
        self._max_size = max_size if max_size is not None else settings.CACHE_MAX_ENTRIES
        self._data: dict[str, tuple[Any, float | None]] = {}
        self._lock = threading.Lock()

    def read(self, key: str, *, raw: bool = False) -> Any:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at is not None and time.monotonic() >= expires_at:
                del self._data[key]
                return None
            return value

    def write(
        self, key: str, value: Any, *, raw: bool = False, expires_in: int | None = None
    ) -> None:
        ttl = expires_in if expires_in is not None else self._expires_in
        expires_at = time.monotonic() + ttl if ttl else None
        with self._lock:
            # re-insert so the entry counts as the newest
            self._data.pop(key, None)
            if len(self._data) >= self._max_size:
                self._evict()
            self._data[key] = (str(value) if raw else value, expires_at)

    def _evict(self) -> None:
        now = time.monotonic()
        expired = [
            key
            for key, (_, expires_at) in self._data.items()
            if expires_at is not None and now >= expires_at
        ]
        for key in expired:
            del self._data[key]
        if expired:
            logger.debug("Dropped %d expired cache entries", len(expired))

        if len(self._data) >= self._max_size:
            # dicts keep insertion order, oldest first; drop a tenth at once
            to_delete = max(self._max_size // 10, 1)
            for key in list(islice(self._data, to_delete)):
                del self._data[key]
            logger.info("Evicted %d cache entries (limit %d)", to_delete, self._max_size)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        return len(self._data)


class RedisCacheStore:
    """Store backed by a Redis server, optionally under a key namespace."""

    def __init__(
        self,
        url: str | None = None,
        *,
        client: redis.Redis | None = None,
        namespace: str | None = None,
        expires_in: int | None = None,
    ) -> None:
        self._client = client or redis.Redis.from_url(
            url or settings.REDIS_URL, decode_responses=True
        )
        self._namespace = namespace
        self._expires_in = expires_in

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}" if self._namespace else key

    def read(self, key: str, *, raw: bool = False) -> Any:
        data = self._client.get(self._key(key))
        if data is None:
            return None
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return data if raw else json.loads(data)

    def write(
        self, key: str, value: Any, *, raw: bool = False, expires_in: int | None = None
    ) -> None:
        payload = str(value) if raw else json.dumps(value)
        ttl = expires_in if expires_in is not None else self._expires_in
        self._client.set(self._key(key), payload, ex=ttl or None)

    def delete(self, key: str) -> None:
        self._client.delete(self._key(key))

    def clear(self) -> None:
        if not self._namespace:
            self._client.flushdb()
            return
        keys = list(self._client.scan_iter(match=f"{self._namespace}:*"))
        if keys:
            self._client.delete(*keys)


class NullCacheStore:
    """Never stores anything; every read misses."""

    def __init__(self, expires_in: int | None = None) -> None:
        pass

    def read(self, key: str, *, raw: bool = False) -> Any:
        return None

    def write(
        self, key: str, value: Any, *, raw: bool = False, expires_in: int | None = None
    ) -> None:
        return None

    def delete(self, key: str) -> None:
        return None

    def clear(self) -> None:
        return None


_STORES: dict[str, type] = {
    "memory": MemoryCacheStore,
    "redis": RedisCacheStore,
    "null": NullCacheStore,
}


def _build_store(name: str, *args: Any, **options: Any) -> CacheStore:
    try:
        store_cls = _STORES[name]
    except KeyError:
        raise UnknownCacheStore(name) from None
    if store_cls is RedisCacheStore:
        options.setdefault("namespace", settings.CACHE_NAMESPACE)
    return store_cls(*args, **options)


@lru_cache(maxsize=1)
def default_cache_store() -> CacheStore:
    """The process-wide store named by ``settings.CACHE_STORE``."""
    return _build_store(settings.CACHE_STORE, expires_in=settings.CACHE_TTL_SECONDS)


def lookup_store(store: Any = None, **options: Any) -> CacheStore:
    """Resolve a store identifier to a store instance.

    Accepts ``None`` (the shared default store), a store name such as
    ``"redis"``, a ``(name, *args)`` sequence such as
    ``("redis", "redis://cache:6379/2")``, or an existing store instance.
    """
    if store is None:
        return default_cache_store()
    if isinstance(store, str):
        return _build_store(store, **options)
    if isinstance(store, (list, tuple)) and store and isinstance(store[0], str):
        name, *args = store
        return _build_store(name, *args, **options)
    if isinstance(store, CacheStore):
        return store
    raise UnknownCacheStore(store)
