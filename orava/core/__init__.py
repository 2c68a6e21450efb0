"""Caching support for prepared queries."""

from orava.core.cache import CacheStats, PreparedQueryCache

__all__ = ("CacheStats", "PreparedQueryCache")
