"""Tests for the caller-owned prepared query cache."""

import threading

import pytest

from orava import NamedQueryAPI, PreparedQueryCache
from orava.core.cache import CacheStats
from orava.exceptions import UnknownParameterError


@pytest.fixture
def cache() -> PreparedQueryCache:
    return PreparedQueryCache(NamedQueryAPI(parameter_style="qmark"), max_size=2)


def test_get_or_prepare_returns_cached_instance(cache: PreparedQueryCache) -> None:
    first = cache.get_or_prepare("SELECT :a")
    second = cache.get_or_prepare("SELECT :a")

    assert first is second
    assert first.sql == "SELECT ?"
    assert cache.stats.misses == 1
    assert cache.stats.hits == 1
    assert len(cache) == 1


def test_get_miss(cache: PreparedQueryCache) -> None:
    assert cache.get("SELECT 1") is None
    assert cache.stats.misses == 1


def test_least_recently_used_is_evicted(cache: PreparedQueryCache) -> None:
    cache.get_or_prepare("SELECT :a")
    cache.get_or_prepare("SELECT :b")
    cache.get_or_prepare("SELECT :a")
    cache.get_or_prepare("SELECT :c")

    assert "SELECT :a" in cache
    assert "SELECT :b" not in cache
    assert "SELECT :c" in cache
    assert cache.stats.evictions == 1
    assert len(cache) == 2


def test_assertable_failure_is_not_cached(cache: PreparedQueryCache) -> None:
    with pytest.raises(UnknownParameterError):
        cache.get_or_prepare("SELECT :a", {"b": 1})

    assert "SELECT :a" not in cache


def test_delete_and_clear(cache: PreparedQueryCache) -> None:
    cache.get_or_prepare("SELECT :a")
    cache.get_or_prepare("SELECT :b")

    assert cache.delete("SELECT :a") is True
    assert cache.delete("SELECT :a") is False

    cache.clear()

    assert len(cache) == 0
    assert cache.stats.lookups == 0


def test_invalid_max_size() -> None:
    with pytest.raises(ValueError, match="max_size"):
        PreparedQueryCache(NamedQueryAPI(), max_size=0)


def test_separate_caches_do_not_share_entries() -> None:
    api = NamedQueryAPI()
    first = PreparedQueryCache(api)
    second = PreparedQueryCache(api)

    first.get_or_prepare("SELECT :a")

    assert "SELECT :a" not in second


def test_concurrent_get_or_prepare() -> None:
    cache = PreparedQueryCache(NamedQueryAPI())
    barrier = threading.Barrier(8)
    results = []
    lock = threading.Lock()

    def worker() -> None:
        barrier.wait()
        prepared = cache.get_or_prepare("SELECT * FROM t WHERE id = :id")
        with lock:
            results.append(prepared)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(cache) == 1
    assert len(results) == 8
    assert {prepared.sql for prepared in results} == {"SELECT * FROM t WHERE id = $1"}
    assert cache.get("SELECT * FROM t WHERE id = :id") in results


class TestCacheStats:
    def test_hit_rate(self) -> None:
        stats = CacheStats()
        stats.hits = 3
        stats.misses = 1

        assert stats.lookups == 4
        assert stats.hit_rate == 0.75
        assert stats.as_dict() == {"hits": 3, "misses": 1, "evictions": 0}

    def test_empty_hit_rate(self) -> None:
        assert CacheStats().hit_rate == 0.0
