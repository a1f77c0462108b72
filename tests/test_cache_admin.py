"""
Cache admin routes, with a real InitiaRestClient (and ResponseCache) over
an httpx.MockTransport upstream.
"""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from initia2aptos.api_server.server import create_app
from initia2aptos.config import AppConfig
from initia2aptos.initia_client import InitiaRestClient, ResponseCache


@pytest.fixture
def upstream_paths() -> list[str]:
    return []


@pytest.fixture
def cached_client(upstream_paths):
    def handler(request: httpx.Request) -> httpx.Response:
        upstream_paths.append(request.url.path)
        if request.url.path.startswith("/cosmos/base/tendermint/v1beta1/blocks/"):
            height = request.url.path.rsplit("/", 1)[1]
            height = "8" if height == "latest" else height
            return httpx.Response(200, json={
                "block_id": {"hash": f"HASH{height}"},
                "block": {"header": {"height": height, "time": "2023-01-01T12:00:00Z"}},
            })
        if request.url.path == "/cosmos/tx/v1beta1/txs":
            return httpx.Response(200, json={"txs": [], "tx_responses": [], "pagination": None, "total": "0"})
        return httpx.Response(404, json={"code": 5, "message": "not found"})

    config = AppConfig(endpoint="http://initia.test", cache_enabled=True, cache_duration="1 minute")
    upstream = InitiaRestClient(
        config.endpoint,
        cache=ResponseCache(config.cache_ttl_ms),
        transport=httpx.MockTransport(handler),
    )
    return TestClient(create_app(config, client=upstream))


def test_repeated_block_reads_hit_cache(cached_client, upstream_paths):
    assert cached_client.get("/v1/blocks/by_height/5").status_code == 200
    assert cached_client.get("/v1/blocks/by_height/5").status_code == 200
    assert len(upstream_paths) == 2

    perf = cached_client.get("/api/cache/performance").json()
    assert perf["hits"] == 2
    assert perf["misses"] == 2
    assert perf["entries"] == 2
    assert perf["ttl_ms"] == 60_000

    index = cached_client.get("/api/cache/index").json()
    assert index["count"] == 2
    tx_keys = [k for k in index["entries"] if k.startswith("GET /cosmos/tx/v1beta1/txs?")]
    assert len(tx_keys) == 1
    assert "query=tx.height=5" in tx_keys[0]


def test_ledger_info_never_cached(cached_client, upstream_paths):
    assert cached_client.get("/v1").json()["block_height"] == "8"
    cached_client.get("/v1")
    assert upstream_paths.count("/cosmos/base/tendermint/v1beta1/blocks/latest") == 2
    assert cached_client.get("/api/cache/index").json()["count"] == 0


def test_clear_by_target_and_all(cached_client):
    cached_client.get("/v1/blocks/by_height/5")
    r = cached_client.delete("/api/cache/clear/cosmos/tx")
    assert r.json() == {"target": "/cosmos/tx", "removed": 1}
    assert cached_client.get("/api/cache/clear").json() == {"removed": 1}
    assert cached_client.get("/api/cache/index").json() == {"count": 0, "entries": []}


def test_root_reports_cache_enabled(cached_client):
    assert cached_client.get("/").json()["config"]["cache_enabled"] is True
