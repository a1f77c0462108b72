"""
FastAPI server — Aptos-compatible REST API over an Initia chain.

create_app() builds one application per upstream configuration: it owns
the InitiaRestClient (and its optional ResponseCache), mounts the Aptos v1
routes, the cache admin routes when caching is on, and the JSON error
handlers. Handlers receive the client through a dependency, never through
module globals.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from initia2aptos import __version__
from initia2aptos.api_server import cache_admin, routes
from initia2aptos.api_server.middleware import RequestLoggingMiddleware
from initia2aptos.bridge_logging import get_logger
from initia2aptos.config import AppConfig, get_settings
from initia2aptos.core.exceptions import GatewayError
from initia2aptos.initia_client import InitiaRestClient, ResponseCache

logger = get_logger(__name__)

WELCOME_MESSAGE = "Welcome to Initia2Aptos Bridge API"

ENDPOINTS = {
    "nodeInfo": "/v1",
    "blockByHeight": "/v1/blocks/by_height/:height",
    "blockByVersion": "/v1/blocks/by_version/:version",
    "transactionByVersion": "/v1/transactions/by_version/:version",
    "accountModules": "/v1/accounts/:address/modules",
    "accountModule": "/v1/accounts/:address/module/:module",
    "accountResources": "/v1/accounts/:address/resources",
    "accountResource": "/v1/accounts/:address/resource/:resource",
    "viewFunction": "/v1/view",
}

NOT_SUPPORTED_BODY = {
    "status": "error",
    "error_code": "not_supported",
    "message": "Not supported",
}


# -----------------------------------------------------------------------------
# Error handlers
# -----------------------------------------------------------------------------


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_body()))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unmatched routes and methods are reported as not_supported."""
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content=NOT_SUPPORTED_BODY)
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "error_code": "http_error", "message": str(exc.detail)},
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error_code": "invalid_input",
            "message": "Invalid request",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", error=str(exc))
    return JSONResponse(
        status_code=500,
        content={
            "message": "Internal server error",
            "error_code": "internal_error",
            "vm_error_code": f"{type(exc).__name__}: {exc}",
        },
    )


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------


def create_app(
    config: AppConfig | None = None,
    client: InitiaRestClient | None = None,
) -> FastAPI:
    """
    Build the bridge application.

    Args:
        config: Settings; read from env (and .env) when omitted.
        client: Upstream client to use instead of building one from config.
            The app closes only clients it created itself.
    """
    config = config or get_settings()
    if config.cache_enabled and not config.caching:
        logger.warning("cache_disabled_invalid_duration", cache_duration=config.cache_duration)
    owns_client = client is None
    if client is None:
        cache = ResponseCache(config.cache_ttl_ms) if config.caching else None
        client = InitiaRestClient(
            config.endpoint,
            chain_id=config.chain_id,
            cache=cache,
            timeout_sec=config.request_timeout_sec,
        )
    cache = client.cache

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "bridge_started",
            endpoint=config.endpoint,
            chain_id=config.chain_id,
            cache_enabled=cache is not None,
            cache_ttl_ms=cache.ttl_ms if cache is not None else 0,
        )
        yield
        if owns_client:
            await client.aclose()
        logger.info("bridge_stopped")

    app = FastAPI(
        title="Initia2Aptos Bridge API",
        description="Aptos-compatible REST API backed by an Initia chain.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.client = client
    app.state.cache = cache

    app.add_middleware(RequestLoggingMiddleware, debug=config.debug)

    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/")
    def root() -> dict[str, Any]:
        """Capability listing: known endpoints and the active configuration."""
        return {
            "message": WELCOME_MESSAGE,
            "endpoints": ENDPOINTS,
            "config": {
                "endpoint": config.endpoint,
                "chain_id": config.chain_id,
                "cache_enabled": cache is not None,
            },
            "version": __version__,
        }

    app.include_router(routes.router)
    if cache is not None:
        app.include_router(cache_admin.router)

    return app
