"""
Pytest fixtures for bridge tests.

The upstream Initia REST API is replaced by StubInitiaClient, which serves
records built from REST-shaped JSON (so from_rest parsing is exercised too)
and records every call. The FastAPI app is built with create_app() and the
stub injected, as the real server injects its InitiaRestClient.
"""

from __future__ import annotations

from typing import Any

import bech32
import pytest

from initia2aptos.config import AppConfig
from initia2aptos.core.exceptions import UpstreamFetchError
from initia2aptos.initia_client import BlockHeader, MoveModule, MoveResource, TxInfo

SENDER_BYTES = bytes.fromhex("8f3a1c0de5b7a2946c1d0e4f5a6b7c8d9e0f1a2b")
SENDER_BECH32 = bech32.bech32_encode("init", bech32.convertbits(SENDER_BYTES, 8, 5))
SENDER_HEX = "0x" + SENDER_BYTES.hex()

BLOCK_TIME = "2023-01-01T12:00:00.000Z"
BLOCK_TIME_US = "1672574400000000"


def block_payload(height: int, block_hash: str, time: str = BLOCK_TIME, data_hash: str = "") -> dict[str, Any]:
    """Tendermint GetBlockByHeight response (trimmed to the fields read)."""
    return {
        "block_id": {"hash": block_hash},
        "block": {
            "header": {
                "height": str(height),
                "time": time,
                "data_hash": data_hash,
                "proposer_address": "F2C1A0D1E5B7",
            },
            "data": {"txs": []},
        },
    }


def tx_payload(
    height: int,
    txhash: str,
    *,
    messages: list[dict[str, Any]] | None = None,
    events: list[dict[str, Any]] | None = None,
    gas_used: int = 1000,
    gas_wanted: int = 2000,
    timestamp: str = BLOCK_TIME,
) -> dict[str, Any]:
    """One tx_responses item of /cosmos/tx/v1beta1/txs?query=tx.height=H."""
    return {
        "height": str(height),
        "txhash": txhash,
        "code": 0,
        "gas_used": str(gas_used),
        "gas_wanted": str(gas_wanted),
        "timestamp": timestamp,
        "tx": {"@type": "/cosmos.tx.v1beta1.Tx", "body": {"messages": messages or []}},
        "events": events or [],
    }


def move_event(type_tag: str, data: str) -> dict[str, Any]:
    return {
        "type": "move",
        "attributes": [
            {"key": "type_tag", "value": type_tag, "index": True},
            {"key": "data", "value": data, "index": True},
        ],
    }


class StubInitiaClient:
    """In-memory stand-in for InitiaRestClient."""

    def __init__(self, latest_height: int = 1000) -> None:
        self.latest_height = latest_height
        self.cache = None
        self.headers: dict[int, BlockHeader] = {}
        self.txs: dict[int, list[TxInfo]] = {}
        self.modules_by_address: dict[str, list[MoveModule]] = {}
        self.resources_by_address: dict[str, list[MoveResource]] = {}
        self.view_result: Any = None
        self.fail_with: UpstreamFetchError | None = None
        self.calls: list[tuple[Any, ...]] = []
        self.uncached_calls = 0

    def add_block(self, height: int, block_hash: str, txs: list[dict[str, Any]] | None = None, **kw: Any) -> None:
        self.headers[height] = BlockHeader.from_rest(block_payload(height, block_hash, **kw))
        self.txs[height] = [TxInfo.from_rest(t) for t in txs or []]

    def _check(self, *call: Any) -> None:
        self.calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with

    def uncached(self) -> "StubInitiaClient":
        self.uncached_calls += 1
        return self

    async def aclose(self) -> None:
        return None

    async def block_info(self, height: int | None = None) -> BlockHeader:
        self._check("block_info", height)
        key = self.latest_height if height is None else height
        if key not in self.headers:
            raise UpstreamFetchError(
                f"Upstream returned HTTP 404 for GET /cosmos/base/tendermint/v1beta1/blocks/{key}",
                vm_error_code={"code": 3, "message": f"requested block height {key} is bigger then the chain length"},
                status=404,
            )
        return self.headers[key]

    async def tx_infos_by_height(self, height: int) -> list[TxInfo]:
        self._check("tx_infos_by_height", height)
        return list(self.txs.get(height, []))

    async def modules(self, address: str) -> list[MoveModule]:
        self._check("modules", address)
        return list(self.modules_by_address.get(address, []))

    async def module(self, address: str, module_name: str) -> MoveModule:
        self._check("module", address, module_name)
        for m in self.modules_by_address.get(address, []):
            if m.module_name == module_name:
                return m
        raise UpstreamFetchError("Upstream returned HTTP 404", vm_error_code="module not found", status=404)

    async def resources(self, address: str) -> list[MoveResource]:
        self._check("resources", address)
        return list(self.resources_by_address.get(address, []))

    async def resource(self, address: str, struct_tag: str) -> MoveResource:
        self._check("resource", address, struct_tag)
        for r in self.resources_by_address.get(address, []):
            if r.struct_tag == struct_tag:
                return r
        raise UpstreamFetchError("Upstream returned HTTP 404", vm_error_code="resource not found", status=404)

    async def view_json(self, address, module_name, function_name, type_args, args, *, height=None) -> Any:
        self._check("view_json", address, module_name, function_name, list(type_args), list(args), height)
        return self.view_result


@pytest.fixture
def sender_address() -> tuple[str, str]:
    """(bech32 sender used by the stub's block 123, its Aptos hex form)."""
    return SENDER_BECH32, SENDER_HEX


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        port=3000,
        chain_id="test-chain",
        endpoint="http://test-endpoint",
        cache_enabled=False,
    )


@pytest.fixture
def stub_client() -> StubInitiaClient:
    """Stub upstream: block 123 with one user tx, latest block 1000 with none."""
    stub = StubInitiaClient(latest_height=1000)
    stub.add_block(
        123,
        "mock-block-hash-123",
        data_hash="mock-data-hash-123",
        txs=[
            tx_payload(
                123,
                "mock-tx-hash-1",
                messages=[{"@type": "/cosmos.bank.v1beta1.MsgSend", "sender": SENDER_BECH32}],
                events=[move_event("0x1::coin::Transfer", '{"amount":"100"}')],
            )
        ],
    )
    stub.add_block(1000, "mock-block-hash")
    return stub


@pytest.fixture
def client(app_config, stub_client):
    """FastAPI TestClient over an app wired to the stub upstream."""
    from fastapi.testclient import TestClient

    from initia2aptos.api_server.server import create_app

    return TestClient(create_app(app_config, client=stub_client))
