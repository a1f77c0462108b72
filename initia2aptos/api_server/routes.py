"""
Aptos v1 API routes served from Initia data.

Each handler validates its path parameters before any upstream call,
fetches through the injected InitiaRestClient, and hands the records to
the pure translation layer. Failures are re-labelled with an
endpoint-specific message by handler_errors() and rendered by the
exception handlers in server.py.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

import pydantic
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from initia2aptos.bridge_logging import get_logger
from initia2aptos.config import AppConfig
from initia2aptos.core.exceptions import (
    GatewayError,
    InternalGatewayError,
    InvalidInputError,
    UnsupportedContentTypeError,
    UnsupportedInputError,
    UpstreamFetchError,
)
from initia2aptos.initia_client import InitiaRestClient
from initia2aptos.translation import (
    block_version_range,
    decode_version,
    encode_version,
    parse_height,
    parse_version,
    to_aptos_block,
    to_block_epilogue_transaction,
    to_block_metadata_transaction,
    to_microseconds,
    to_module_bytecode,
    to_resource_response,
    to_user_transaction,
)
from initia2aptos.translation.models import (
    Block,
    LedgerInfo,
    MoveModuleBytecode,
    MoveResourceResponse,
    TargetTransaction,
)
from initia2aptos.translation.versions import METADATA_OFFSET

logger = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["aptos"])

BCS_VIEW_CONTENT_TYPE = "application/x.aptos.view_function+bcs"
JSON_CONTENT_TYPE = "application/json"

LEDGER_EPOCH = "1"
NODE_ROLE_FULL_NODE = "full_node"
OLDEST_BLOCK_HEIGHT = 1


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------


def get_client(request: Request) -> InitiaRestClient:
    """Dependency: the upstream client created with the app."""
    return request.app.state.client


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


@contextmanager
def handler_errors(message: str, config: AppConfig, **context: Any) -> Iterator[None]:
    """
    Re-raise failures inside a handler with `message`.

    Upstream failures keep their raw cause as vm_error_code; other gateway
    errors pass through unchanged; anything else becomes a 500 internal_error.
    """
    try:
        yield
    except UpstreamFetchError as e:
        if config.log_errors:
            logger.error(
                "upstream_fetch_failed",
                description=message,
                error=e.message,
                upstream_status=e.upstream_status,
                **context,
            )
        raise UpstreamFetchError(message, vm_error_code=e.vm_error_code, status=e.upstream_status) from e
    except GatewayError:
        raise
    except Exception as e:
        if config.log_errors:
            logger.exception("request_failed", description=message, error=str(e), **context)
        raise InternalGatewayError(message, vm_error_code=f"{type(e).__name__}: {e}") from e


# -----------------------------------------------------------------------------
# Request models
# -----------------------------------------------------------------------------


class ViewRequest(BaseModel):
    """POST /v1/view JSON body."""

    function: str = Field(..., description="Function id: <address>::<module>::<function>")
    type_arguments: list[str] = Field(default_factory=list)
    arguments: list[Any] = Field(default_factory=list)

    def function_parts(self) -> tuple[str, str, str]:
        parts = self.function.split("::")
        if len(parts) != 3 or not all(p.strip() for p in parts):
            raise InvalidInputError(
                f"Invalid function id {self.function!r}; expected <address>::<module>::<function>"
            )
        address, module, func = (p.strip() for p in parts)
        return address, module, func


# -----------------------------------------------------------------------------
# Ledger and blocks
# -----------------------------------------------------------------------------


@router.get("", response_model=LedgerInfo)
async def ledger_info(
    client: InitiaRestClient = Depends(get_client),
    config: AppConfig = Depends(get_config),
) -> LedgerInfo:
    """
    Current ledger head. Always read live: the cache is bypassed so the head
    never goes stale.
    """
    live = client.uncached()
    with handler_errors("Failed to fetch latest transaction information", config):
        header = await live.block_info()
        txs = await live.tx_infos_by_height(header.height)
        _, ledger_version = block_version_range(header.height, len(txs))
        return LedgerInfo(
            chain_id=config.aptos_chain_id,
            epoch=LEDGER_EPOCH,
            ledger_version=str(ledger_version),
            oldest_ledger_version=str(encode_version(OLDEST_BLOCK_HEIGHT, METADATA_OFFSET)),
            ledger_timestamp=to_microseconds(header.time),
            node_role=NODE_ROLE_FULL_NODE,
            oldest_block_height=str(OLDEST_BLOCK_HEIGHT),
            block_height=str(header.height),
        )


async def _load_block(client: InitiaRestClient, height: int) -> Block:
    txs = await client.tx_infos_by_height(height)
    header = await client.block_info(height)
    block = to_aptos_block(header, txs)
    logger.debug("block_translated", height=height, tx_count=len(txs))
    return block


@router.get("/blocks/by_height/{height}", response_model=Block)
async def block_by_height(
    height: str,
    client: InitiaRestClient = Depends(get_client),
    config: AppConfig = Depends(get_config),
) -> Block:
    block_height = parse_height(height)
    with handler_errors(f"Failed to fetch block data at height {height}", config, height=height):
        return await _load_block(client, block_height)


@router.get("/blocks/by_version/{version}", response_model=Block)
async def block_by_version(
    version: str,
    client: InitiaRestClient = Depends(get_client),
    config: AppConfig = Depends(get_config),
) -> Block:
    block_height, _ = decode_version(parse_version(version))
    with handler_errors(f"Failed to fetch block data for version {version}", config, version=version):
        return await _load_block(client, block_height)


@router.get("/transactions/by_version/{version}", response_model=TargetTransaction)
async def transaction_by_version(
    version: str,
    client: InitiaRestClient = Depends(get_client),
    config: AppConfig = Depends(get_config),
) -> TargetTransaction:
    """
    offset 0 -> block metadata; offset past the block's transactions ->
    block epilogue sentinel; otherwise the user transaction at offset - 1.
    """
    ledger_version = parse_version(version)
    height, offset = decode_version(ledger_version)
    with handler_errors(f"Failed to fetch transaction by version {version}", config, version=version):
        if offset == METADATA_OFFSET:
            return to_block_metadata_transaction(await client.block_info(height))
        txs = await client.tx_infos_by_height(height)
        if offset > len(txs):
            header = await client.block_info(height)
            return to_block_epilogue_transaction(header, version.strip())
        return to_user_transaction(txs[offset - 1], ledger_version, offset - 1)


# -----------------------------------------------------------------------------
# Accounts: Move modules and resources
# -----------------------------------------------------------------------------


@router.get("/accounts/{address}/modules", response_model=list[MoveModuleBytecode])
async def account_modules(
    address: str,
    client: InitiaRestClient = Depends(get_client),
    config: AppConfig = Depends(get_config),
) -> list[MoveModuleBytecode]:
    with handler_errors(f"Failed to fetch modules for account {address}", config, address=address):
        modules = await client.modules(address)
        return [to_module_bytecode(m) for m in modules]


@router.get("/accounts/{address}/module/{module_name}", response_model=MoveModuleBytecode)
async def account_module(
    address: str,
    module_name: str,
    client: InitiaRestClient = Depends(get_client),
    config: AppConfig = Depends(get_config),
) -> MoveModuleBytecode:
    with handler_errors(
        f"Failed to fetch module {module_name} for account {address}", config, address=address
    ):
        return to_module_bytecode(await client.module(address, module_name))


@router.get("/accounts/{address}/resources", response_model=list[MoveResourceResponse])
async def account_resources(
    address: str,
    client: InitiaRestClient = Depends(get_client),
    config: AppConfig = Depends(get_config),
) -> list[MoveResourceResponse]:
    with handler_errors(f"Failed to fetch resources for account {address}", config, address=address):
        resources = await client.resources(address)
        return [to_resource_response(r) for r in resources]


@router.get("/accounts/{address}/resource/{resource_type}", response_model=MoveResourceResponse)
async def account_resource(
    address: str,
    resource_type: str,
    client: InitiaRestClient = Depends(get_client),
    config: AppConfig = Depends(get_config),
) -> MoveResourceResponse:
    with handler_errors(f"Failed to fetch resource for account {address}", config, address=address):
        return to_resource_response(await client.resource(address, resource_type))


# -----------------------------------------------------------------------------
# View functions
# -----------------------------------------------------------------------------


@router.post("/view")
async def view_function(
    request: Request,
    ledger_version: str | None = None,
    client: InitiaRestClient = Depends(get_client),
    config: AppConfig = Depends(get_config),
) -> JSONResponse:
    """
    Execute a Move view function. JSON bodies only; BCS-encoded bodies are
    answered with 501. `ledger_version` pins the call to that version's block.
    """
    content_type = (request.headers.get("content-type") or "").split(";")[0].strip().lower()
    if content_type == BCS_VIEW_CONTENT_TYPE:
        raise UnsupportedInputError(f"Unsupported content type {content_type}: BCS view requests are not implemented")
    if content_type != JSON_CONTENT_TYPE:
        raise UnsupportedContentTypeError(f"Unsupported content type {content_type or '(none)'}")

    try:
        view = ViewRequest.model_validate(await request.json())
    except ValueError as e:
        # pydantic.ValidationError and json.JSONDecodeError are both ValueErrors
        detail = e.errors()[0]["msg"] if isinstance(e, pydantic.ValidationError) else str(e)
        raise InvalidInputError(f"Invalid view request body: {detail}") from e
    address, module, func = view.function_parts()

    height = None
    if ledger_version is not None:
        height, _ = decode_version(parse_version(ledger_version))

    with handler_errors("Failed to call view function", config, function=view.function):
        result = await client.view_json(
            address,
            module,
            func,
            view.type_arguments,
            view.arguments,
            height=height,
        )
    return JSONResponse(content=result)
