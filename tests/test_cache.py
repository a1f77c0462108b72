"""
Tests for the upstream response cache: keys, TTL expiry, LRU eviction,
targeted clearing and the performance counters.
"""

from __future__ import annotations

import pytest

from initia2aptos.initia_client.cache import ResponseCache, cache_key


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def test_cache_key_is_stable():
    assert cache_key("get", "/cosmos/base/tendermint/v1beta1/blocks/5") == "GET /cosmos/base/tendermint/v1beta1/blocks/5"
    assert (
        cache_key("GET", "/cosmos/tx/v1beta1/txs", {"query": "tx.height=5", "page": 1})
        == "GET /cosmos/tx/v1beta1/txs?page=1&query=tx.height=5"
    )
    assert cache_key("GET", "/r", {"b": "2", "a": "1"}) == cache_key("GET", "/r", {"a": "1", "b": "2"})
    assert cache_key("GET", "/r", {"b": "2", "a": "1"}) == "GET /r?a=1&b=2"
    assert cache_key("GET", "/r", {"a": None}) == "GET /r"


def test_hit_then_expiry(clock):
    cache = ResponseCache(5_000, clock=clock)
    cache.set("GET /a", {"v": 1})
    assert cache.get("GET /a") == {"v": 1}
    clock.advance(4.9)
    assert cache.get("GET /a") == {"v": 1}
    clock.advance(0.2)
    assert cache.get("GET /a") is None
    assert cache.index() == []


def test_lru_eviction(clock):
    cache = ResponseCache(60_000, max_entries=2, clock=clock)
    cache.set("GET /a", 1)
    cache.set("GET /b", 2)
    assert cache.get("GET /a") == 1  # /a becomes most recently used
    cache.set("GET /c", 3)
    assert cache.index() == ["GET /a", "GET /c"]
    assert cache.get("GET /b") is None


def test_clear_all_and_by_target(clock):
    cache = ResponseCache(60_000, clock=clock)
    cache.set("GET /cosmos/base/tendermint/v1beta1/blocks/5", {})
    cache.set("GET /cosmos/tx/v1beta1/txs?page=1&query=tx.height=5", {})
    cache.set("GET /initia/move/v1/accounts/0x1/modules", {})

    assert cache.clear("/cosmos/tx") == 1
    assert cache.clear("GET /initia") == 1
    assert cache.clear("/nothing") == 0
    assert cache.index() == ["GET /cosmos/base/tendermint/v1beta1/blocks/5"]
    assert cache.clear() == 1
    assert cache.index() == []


def test_performance_counters(clock):
    cache = ResponseCache(60_000, clock=clock)
    assert cache.performance() == {"hits": 0, "misses": 0, "hit_rate": 0.0, "entries": 0, "ttl_ms": 60_000}
    cache.get("GET /a")
    cache.set("GET /a", "x")
    cache.get("GET /a")
    cache.get("GET /a")
    perf = cache.performance()
    assert perf["hits"] == 2
    assert perf["misses"] == 1
    assert perf["hit_rate"] == 0.6667
    assert perf["entries"] == 1


@pytest.mark.parametrize("ttl_ms", [0, -1])
def test_non_positive_ttl_rejected(ttl_ms):
    with pytest.raises(ValueError):
        ResponseCache(ttl_ms)
