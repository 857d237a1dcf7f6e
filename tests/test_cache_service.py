"""
Tests for AnalysisCacheService and the expiry sweeper.
"""

import asyncio

import pytest

from compliance_scanner.repositories import InMemoryAnalysisCacheRepository
from compliance_scanner.services import AnalysisCacheService, CacheSweeper


@pytest.fixture
def cache(timer):
    return AnalysisCacheService(InMemoryAnalysisCacheRepository(timer=timer), default_ttl=600)


def test_set_then_get_within_ttl(cache, timer):
    key = cache.key_for("some text", marketing=True)
    cache.set(key, {"complianceScore": 80})
    timer.advance(599)
    assert cache.get(key) == {"complianceScore": 80}


def test_value_is_absent_after_default_ttl(cache, timer):
    cache.set("k", "v")
    timer.advance(601)
    assert cache.get("k") is None


def test_explicit_ttl(cache, timer):
    cache.set("k", "v", ttl=30)
    timer.advance(31)
    assert cache.get("k") is None


def test_non_positive_ttl_rejected(cache):
    with pytest.raises(ValueError):
        cache.set("k", "v", ttl=0)


def test_delete_twice(cache):
    cache.set("k", "v")
    assert cache.delete("k") is True
    assert cache.delete("k") is False


def test_clear_then_miss(cache):
    cache.set("a", 1)
    cache.set("b", 2)
    assert cache.clear() == 2
    assert cache.get("a") is None
    assert cache.get("b") is None


def test_stats_include_default_ttl(cache):
    cache.set("k", 1)
    cache.get("k")
    cache.get("nope")
    stats = cache.stats()
    assert stats["count"] == 1
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["default_ttl"] == 600


def test_sweep(cache, timer):
    cache.set("a", 1, ttl=10)
    cache.set("b", 2, ttl=1000)
    timer.advance(20)
    assert cache.sweep() == 1


def test_default_ttl_from_settings():
    service = AnalysisCacheService.create(repository=InMemoryAnalysisCacheRepository())
    assert service.default_ttl == 600


def test_sweeper_runs_periodically(cache, timer):
    cache.set("a", 1, ttl=10)
    timer.advance(20)

    async def scenario():
        sweeper = CacheSweeper(cache, interval=0.01)
        sweeper.start()
        assert sweeper.running
        await asyncio.sleep(0.05)
        await sweeper.stop()
        return sweeper.running

    assert asyncio.run(scenario()) is False
    assert cache.repository.count() == 0
