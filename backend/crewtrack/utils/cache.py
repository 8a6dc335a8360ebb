# backend/crewtrack/utils/cache.py
"""
Response cache for the hosted REST backend.

GET responses are cached per key for a short TTL; writes invalidate every
key under a path prefix. The cache is an object built by
`create_response_cache()` and handed to whoever issues requests, so two
clients never share entries by accident.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_GET_CACHE_SECONDS = float(os.getenv("CREWTRACK_GET_CACHE_SECONDS", "30") or "30")

TAG_SEP = "::"

# Record paths whose contents depend on the active location.
LOCATION_SCOPED_CACHE_KEYS = (
    "/rest/v1/crew_roster",
    "/rest/v1/track_definitions",
    "/rest/v1/training_definitions",
    "/rest/v1/training_groups",
    "/rest/v1/track_training_requirements",
    "/rest/v1/crew_track_signoffs",
    "/rest/v1/crew_training_records",
    "/rest/v1/v_training_dashboard_with_signer",
    "/rest/v1/crew_training_record_history",
)


@dataclass
class CacheEntry:
    ts: float
    data: Any


class ResponseCache:
    """
    Thread-safe keyed cache with a TTL.

    The entry map is only touched under `_lock`; `get_or_load` runs its
    loader outside it.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_GET_CACHE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @staticmethod
    def key_for(path: str, tag: str = "") -> str:
        return f"{tag}{TAG_SEP}{path}" if tag else path

    @staticmethod
    def path_of(key: str) -> str:
        return key.split(TAG_SEP, 1)[-1]

    def _fresh(self, entry: CacheEntry, max_age: Optional[float]) -> bool:
        age = self._clock() - entry.ts
        return age < (self._ttl if max_age is None else max_age)

    def get(self, key: str, max_age: Optional[float] = None) -> Optional[Any]:
        """
        Cached data for `key`, or None when missing or older than the TTL
        (or `max_age` seconds when given).
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or not self._fresh(entry, max_age):
                return None
            return entry.data

    def set(self, key: str, data: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(ts=self._clock(), data=data)

    def get_or_load(
        self,
        key: str,
        loader: Callable[[], Any],
        *,
        max_age: Optional[float] = None,
        bypass: bool = False,
    ) -> Any:
        """
        Serve `key` from cache when fresh; otherwise call `loader()`, store
        and return its result. `bypass=True` always reloads.

        Loader exceptions propagate and leave the previous entry in place.
        """
        if not bypass:
            with self._lock:
                entry = self._entries.get(key)
                if entry is not None and self._fresh(entry, max_age):
                    return entry.data

        data = loader()
        self.set(key, data)
        return data

    def invalidate_prefix(self, prefix: str) -> int:
        """
        Drop every entry whose path starts with `prefix`, whatever its tag.
        """
        with self._lock:
            doomed = [k for k in self._entries if self.path_of(k).startswith(prefix)]
            for k in doomed:
                del self._entries[k]
        if doomed:
            logger.debug("Response cache invalidated", extra={"prefix": prefix, "removed": len(doomed)})
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries


def create_response_cache(
    ttl_seconds: float = DEFAULT_GET_CACHE_SECONDS,
    clock: Callable[[], float] = time.monotonic,
) -> ResponseCache:
    return ResponseCache(ttl_seconds=ttl_seconds, clock=clock)


def invalidate_location_scope(cache: ResponseCache) -> int:
    """
    Drop every cached response that depends on the active location.
    """
    return sum(cache.invalidate_prefix(path) for path in LOCATION_SCOPED_CACHE_KEYS)
