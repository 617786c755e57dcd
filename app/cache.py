"""
app/cache.py — In-memory TTL cache for advice lists.

Two layers:
  - TTLStore            — key → (serialized value, expiry_timestamp) storage.
                          Expiry is lazy: an entry is dropped when a read finds
                          it stale. One instance is built at startup and
                          injected; there is no module-level store.
  - InMemoryAdviceCache — topic → list[str] on top of a TTLStore, values kept
                          as JSON. Read problems count as a miss, write
                          problems raise CacheError.
"""
import json
import logging
import threading
import time
from typing import Callable, Optional, Protocol

from app.errors import CacheError

logger = logging.getLogger(__name__)


class TTLStore:
    """
    Lock-guarded key → value store with a per-entry time-to-live.

    There is no sweep: a stale key only leaves memory when a later get()
    finds it expired or a set() overwrites it.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._store: dict[str, tuple[str, float]] = {}   # key → (value, expiry_timestamp)
        self._lock = threading.Lock()
        self._clock = clock

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            value, expiry = entry
            if self._clock() > expiry:
                del self._store[key]
                return None
            return value

    def set(self, key: str, value: str, ttl_seconds: float) -> None:
        with self._lock:
            self._store[key] = (value, self._clock() + ttl_seconds)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


class AdviceCache(Protocol):
    def get(self, key: str) -> Optional[list[str]]: ...

    def put(self, key: str, advices: list[str]) -> list[str]: ...


class InMemoryAdviceCache:
    """Advice cache backed by a TTLStore with a fixed time-to-live per entry."""

    def __init__(self, store: TTLStore, ttl_seconds: float):
        self._store = store
        self._ttl = ttl_seconds

    def get(self, key: str) -> Optional[list[str]]:
        try:
            raw = self._store.get(key)
            if raw is None:
                return None
            cached = json.loads(raw)
        except Exception as exc:
            logger.debug("Cache read for %r treated as miss: %s", key, exc)
            return None

        if not isinstance(cached, list):
            logger.debug("Cache entry for %r is not a list; treated as miss.", key)
            return None
        return cached

    def put(self, key: str, advices: list[str]) -> list[str]:
        try:
            value = json.dumps(advices)
        except (TypeError, ValueError) as exc:
            raise CacheError(f"Cannot serialize advices for {key!r}: {exc}") from exc

        try:
            self._store.set(key, value, self._ttl)
        except Exception as exc:
            raise CacheError(f"Cannot store advices for {key!r}: {exc}") from exc

        return advices
