"""
Initia REST client — async access to tendermint, tx and Move endpoints.

Responsibilities:
- Fetch block headers, per-height transactions, Move modules/resources and
  JSON view-function results from one Initia REST endpoint.
- Follow pagination.next_key sequentially until the upstream stops returning one
  (Move listings); page through tx search by page/limit until `total` is reached.
- Serve GET requests through an optional ResponseCache; uncached() gives a
  sibling client on the same connection pool that always goes upstream.
- Surface every transport, HTTP status or payload failure as UpstreamFetchError.
  No retries.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Iterator

import httpx

from initia2aptos.bridge_logging import get_logger
from initia2aptos.core.exceptions import UpstreamFetchError
from initia2aptos.initia_client.cache import ResponseCache, cache_key
from initia2aptos.initia_client.models import BlockHeader, MoveModule, MoveResource, TxInfo

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SEC = 30.0
BLOCK_HEIGHT_HEADER = "x-cosmos-block-height"

_BLOCKS_PATH = "/cosmos/base/tendermint/v1beta1/blocks/{height}"
_TXS_SEARCH_PATH = "/cosmos/tx/v1beta1/txs"
_MODULES_PATH = "/initia/move/v1/accounts/{address}/modules"
_MODULE_PATH = "/initia/move/v1/accounts/{address}/modules/{module_name}"
_RESOURCES_PATH = "/initia/move/v1/accounts/{address}/resources"
_RESOURCE_PATH = "/initia/move/v1/accounts/{address}/resources/by_struct_tag"
_VIEW_JSON_PATH = "/initia/move/v1/view/json"

_ERROR_TEXT_LIMIT = 500
TX_SEARCH_PAGE_LIMIT = 100


def _error_detail(response: httpx.Response) -> Any:
    """Upstream error body: parsed JSON when possible, else truncated text."""
    try:
        return response.json()
    except ValueError:
        return response.text[:_ERROR_TEXT_LIMIT]


@contextmanager
def _decoding(path: str) -> Iterator[None]:
    """Turn malformed upstream payloads into UpstreamFetchError."""
    try:
        yield
    except (KeyError, TypeError, ValueError) as e:
        raise UpstreamFetchError(
            f"Malformed upstream response from {path}",
            vm_error_code=f"{type(e).__name__}: {e}",
        ) from e


class InitiaRestClient:
    """
    Async client for one Initia REST endpoint.

    Construct once per upstream configuration and share across requests;
    call aclose() on shutdown.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        chain_id: str = "",
        cache: ResponseCache | None = None,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        http: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            endpoint: Initia REST base URL (e.g. https://rest.testnet.initia.xyz).
            chain_id: Initia chain id; informational, echoed by the API.
            cache: Optional read-through cache for GET requests.
            timeout_sec: Per-call HTTP timeout.
            http: Existing AsyncClient to share (not closed by aclose()).
            transport: Custom transport for a newly created AsyncClient (tests).
        """
        if not endpoint.strip():
            raise ValueError("endpoint must be non-empty")
        self.endpoint = endpoint.rstrip("/")
        self.chain_id = chain_id
        self.cache = cache
        self._timeout_sec = timeout_sec
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            base_url=self.endpoint,
            timeout=httpx.Timeout(timeout_sec),
            transport=transport,
        )

    def uncached(self) -> "InitiaRestClient":
        """Client on the same connection pool that bypasses the cache."""
        if self.cache is None:
            return self
        return InitiaRestClient(
            self.endpoint,
            chain_id=self.chain_id,
            cache=None,
            timeout_sec=self._timeout_sec,
            http=self._http,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        try:
            response = await self._http.request(
                method, path, params=params, json=body, headers=headers
            )
        except httpx.HTTPError as e:
            logger.error("upstream_request_error", method=method, path=path, error=str(e))
            raise UpstreamFetchError(
                f"Upstream request failed: {method} {path}",
                vm_error_code=f"{type(e).__name__}: {e}",
            ) from e
        if response.status_code >= 400:
            detail = _error_detail(response)
            logger.warning(
                "upstream_error_status",
                method=method,
                path=path,
                status=response.status_code,
            )
            raise UpstreamFetchError(
                f"Upstream returned HTTP {response.status_code} for {method} {path}",
                vm_error_code=detail,
                status=response.status_code,
            )
        with _decoding(path):
            return response.json()

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        if self.cache is None:
            return await self._request("GET", path, params=params)
        key = cache_key("GET", path, params)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        payload = await self._request("GET", path, params=params)
        self.cache.set(key, payload)
        return payload

    async def _paginate(self, path: str, items_key: str) -> list[dict[str, Any]]:
        """Collect `items_key` across all pages, following pagination.next_key."""
        items: list[dict[str, Any]] = []
        next_key: str | None = None
        pages = 0
        while True:
            params = {"pagination.key": next_key} if next_key else None
            payload = await self._get_json(path, params)
            pages += 1
            with _decoding(path):
                items.extend(payload.get(items_key) or [])
                next_key = (payload.get("pagination") or {}).get("next_key") or None
            if not next_key:
                break
        logger.debug("upstream_paginated", path=path, pages=pages, items=len(items))
        return items

    async def _search_pages(self, path: str, items_key: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        """
        Collect `items_key` from a page/limit search endpoint.

        Stops once `total` items are collected, or on a short page when the
        upstream omits the total.
        """
        items: list[dict[str, Any]] = []
        page = 1
        while True:
            payload = await self._get_json(
                path, {**params, "page": page, "limit": TX_SEARCH_PAGE_LIMIT}
            )
            with _decoding(path):
                batch = payload.get(items_key) or []
                raw_total = payload.get("total") or (payload.get("pagination") or {}).get("total")
                total = int(raw_total) if raw_total else None
            items.extend(batch)
            if not batch:
                break
            if total is not None and len(items) >= total:
                break
            if total is None and len(batch) < TX_SEARCH_PAGE_LIMIT:
                break
            page += 1
        logger.debug("upstream_searched", path=path, pages=page, items=len(items))
        return items

    # -------------------------------------------------------------------------
    # Tendermint / tx
    # -------------------------------------------------------------------------

    async def block_info(self, height: int | None = None) -> BlockHeader:
        """Header of block `height`, or of the latest block when height is None."""
        path = _BLOCKS_PATH.format(height="latest" if height is None else height)
        payload = await self._get_json(path)
        with _decoding(path):
            return BlockHeader.from_rest(payload)

    async def tx_infos_by_height(self, height: int) -> list[TxInfo]:
        """
        All transactions of block `height`, in block order.

        Uses the tx search endpoint (`query=tx.height=H`), which returns full
        tx_responses with hash, gas and events. The block-with-txs endpoint
        only carries the raw txs.
        """
        params = {"query": f"tx.height={height}", "order_by": "ORDER_BY_ASC"}
        items = await self._search_pages(_TXS_SEARCH_PATH, "tx_responses", params)
        with _decoding(_TXS_SEARCH_PATH):
            return [TxInfo.from_rest(item) for item in items]

    # -------------------------------------------------------------------------
    # Move
    # -------------------------------------------------------------------------

    async def modules(self, address: str) -> list[MoveModule]:
        path = _MODULES_PATH.format(address=address)
        items = await self._paginate(path, "modules")
        with _decoding(path):
            return [MoveModule.from_rest(item) for item in items]

    async def module(self, address: str, module_name: str) -> MoveModule:
        path = _MODULE_PATH.format(address=address, module_name=module_name)
        payload = await self._get_json(path)
        with _decoding(path):
            return MoveModule.from_rest(payload["module"])

    async def resources(self, address: str) -> list[MoveResource]:
        path = _RESOURCES_PATH.format(address=address)
        items = await self._paginate(path, "resources")
        with _decoding(path):
            return [MoveResource.from_rest(item) for item in items]

    async def resource(self, address: str, struct_tag: str) -> MoveResource:
        path = _RESOURCE_PATH.format(address=address)
        payload = await self._get_json(path, {"struct_tag": struct_tag})
        with _decoding(path):
            return MoveResource.from_rest(payload["resource"])

    async def view_json(
        self,
        address: str,
        module_name: str,
        function_name: str,
        type_args: list[str],
        args: list[Any],
        *,
        height: int | None = None,
    ) -> Any:
        """
        Call a Move view function with JSON arguments and return its decoded result.

        Each argument is sent JSON-encoded, as the Initia view/json endpoint
        expects. `height` pins the call to a historical block. Never cached.
        """
        body = {
            "address": address,
            "module_name": module_name,
            "function_name": function_name,
            "type_args": list(type_args),
            "args": [json.dumps(a) for a in args],
        }
        headers = {BLOCK_HEIGHT_HEADER: str(height)} if height is not None else None
        payload = await self._request("POST", _VIEW_JSON_PATH, body=body, headers=headers)
        with _decoding(_VIEW_JSON_PATH):
            return json.loads(payload["data"])
