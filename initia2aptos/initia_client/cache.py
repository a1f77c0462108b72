"""
In-memory read-through cache for upstream GET responses.

Keys are "METHOD path?query" of the upstream request; values are the parsed
JSON bodies. Entries expire after a fixed TTL. Hit/miss counters back the
cache admin endpoints.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from typing import Any, Callable

from initia2aptos.bridge_logging import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_ENTRIES = 10_000


def cache_key(method: str, path: str, params: dict[str, Any] | None = None) -> str:
    """Stable key: method, path and sorted query string."""
    key = f"{method.upper()} {path}"
    if params:
        query = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] is not None)
        if query:
            key += "?" + query
    return key


class ResponseCache:
    """
    TTL cache with LRU eviction once max_entries is reached.

    Not thread-safe; the API server uses it from a single event loop.
    """

    def __init__(
        self,
        ttl_ms: int,
        *,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_ms <= 0:
            raise ValueError("ttl_ms must be positive")
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._ttl_sec = ttl_ms / 1000.0
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, Any]] = OrderedDict()
        self._hits = 0
        self._misses = 0

    @property
    def ttl_ms(self) -> int:
        return int(self._ttl_sec * 1000)

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is not None and entry[0] > self._clock():
            self._entries.move_to_end(key)
            self._hits += 1
            logger.debug("cache_hit", key=key)
            return entry[1]
        if entry is not None:
            del self._entries[key]
        self._misses += 1
        return None

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (self._clock() + self._ttl_sec, value)
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("cache_evicted", key=evicted)

    def _purge_expired(self) -> None:
        now = self._clock()
        for key in [k for k, (expires, _) in self._entries.items() if expires <= now]:
            del self._entries[key]

    def index(self) -> list[str]:
        """Keys of live entries, least recently used first."""
        self._purge_expired()
        return list(self._entries)

    def clear(self, target: str | None = None) -> int:
        """
        Drop every entry, or only those whose key or path starts with `target`.
        Returns the number of entries removed.
        """
        if not target:
            removed = len(self._entries)
            self._entries.clear()
        else:
            matches = [k for k in self._entries if k.startswith(target) or k.partition(" ")[2].startswith(target)]
            for key in matches:
                del self._entries[key]
            removed = len(matches)
        logger.info("cache_cleared", target=target, removed=removed)
        return removed

    def performance(self) -> dict[str, Any]:
        self._purge_expired()
        lookups = self._hits + self._misses
        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / lookups, 4) if lookups else 0.0,
            "entries": len(self._entries),
            "ttl_ms": self.ttl_ms,
        }
