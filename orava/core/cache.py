"""Caller-owned LRU cache of prepared queries.

Nothing here is process-wide: a :class:`PreparedQueryCache` is created by the
caller around one :class:`~orava.base.NamedQueryAPI` and discarded at will.

Components:
- CacheStats: hit, miss and eviction counters
- PreparedQueryCache: thread-safe LRU keyed by raw query text
"""

import threading
from collections import OrderedDict
from typing import TYPE_CHECKING, Any, Final, Optional

from mypy_extensions import mypyc_attr

from orava.utils.logging import get_logger

if TYPE_CHECKING:
    from orava.base import NamedQueryAPI
    from orava.parameters.prepared import PreparedQuery

__all__ = ("DEFAULT_MAX_SIZE", "CacheStats", "PreparedQueryCache")

DEFAULT_MAX_SIZE: Final = 1024

logger = get_logger("core.cache")


@mypyc_attr(allow_interpreted_subclasses=False)
class CacheStats:
    """Hit, miss and eviction counters of one :class:`PreparedQueryCache`."""

    __slots__ = ("evictions", "hits", "misses")

    def __init__(self) -> None:
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    @property
    def lookups(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Share of lookups answered from the cache, between 0 and 1."""
        lookups = self.lookups
        return self.hits / lookups if lookups else 0.0

    def as_dict(self) -> "dict[str, int]":
        return {"hits": self.hits, "misses": self.misses, "evictions": self.evictions}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(hits={self.hits}, misses={self.misses}, evictions={self.evictions})"


@mypyc_attr(allow_interpreted_subclasses=False)
class PreparedQueryCache:
    """LRU cache mapping raw query text to prepared queries for one API.

    Args:
        api: The API whose configuration every cached query is compiled with.
        max_size: Maximum number of prepared queries kept; the least recently
            used entry is evicted beyond that.
    """

    __slots__ = ("_api", "_cache", "_lock", "_max_size", "_stats")

    def __init__(self, api: "NamedQueryAPI", max_size: int = DEFAULT_MAX_SIZE) -> None:
        if max_size < 1:
            msg = f"max_size must be at least 1, got {max_size}"
            raise ValueError(msg)
        self._api = api
        self._cache: "OrderedDict[str, PreparedQuery]" = OrderedDict()
        self._lock = threading.RLock()
        self._max_size = max_size
        self._stats = CacheStats()

    @property
    def api(self) -> "NamedQueryAPI":
        return self._api

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def get(self, sql: str) -> "Optional[PreparedQuery]":
        """Return the cached prepared query for ``sql`` or ``None``."""
        with self._lock:
            prepared = self._cache.get(sql)
            if prepared is None:
                self._stats.misses += 1
                return None
            self._cache.move_to_end(sql)
            self._stats.hits += 1
            return prepared

    def get_or_prepare(self, sql: str, *assertable: Any) -> "PreparedQuery":
        """Return the prepared query for ``sql``, compiling it on a miss.

        Compilation happens outside the lock. Two threads missing on the same
        text may both compile; the first stored instance wins and both are
        equivalent.

        Args:
            sql: Raw query text, used verbatim as the cache key.
            *assertable: Example sources checked only when the query is compiled.

        Returns:
            The prepared query.
        """
        prepared = self.get(sql)
        if prepared is not None:
            return prepared
        prepared = self._api.prepare_named(sql, *assertable)
        with self._lock:
            existing = self._cache.get(sql)
            if existing is not None:
                return existing
            self._cache[sql] = prepared
            if len(self._cache) > self._max_size:
                evicted, _ = self._cache.popitem(last=False)
                self._stats.evictions += 1
                logger.debug("evicted prepared query from cache", extra={"extra_fields": {"sql": evicted}})
        return prepared

    def delete(self, sql: str) -> bool:
        with self._lock:
            return self._cache.pop(sql, None) is not None

    def clear(self) -> None:
        """Drop every entry and start new statistics."""
        with self._lock:
            self._cache.clear()
            self._stats = CacheStats()

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, sql: object) -> bool:
        with self._lock:
            return sql in self._cache
