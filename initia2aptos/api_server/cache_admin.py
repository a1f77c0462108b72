"""
Cache admin routes, mounted only when the response cache is enabled.

GET  /api/cache/performance       hit/miss counters and entry count
GET  /api/cache/index             keys of live entries
GET|DELETE /api/cache/clear       drop everything
GET|DELETE /api/cache/clear/{target}  drop entries whose key or path starts with target
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from initia2aptos.bridge_logging import get_logger
from initia2aptos.initia_client import ResponseCache

logger = get_logger(__name__)

router = APIRouter(prefix="/api/cache", tags=["cache"])


def get_cache(request: Request) -> ResponseCache:
    return request.app.state.cache


@router.get("/performance")
def cache_performance(cache: ResponseCache = Depends(get_cache)) -> dict[str, Any]:
    return cache.performance()


@router.get("/index")
def cache_index(cache: ResponseCache = Depends(get_cache)) -> dict[str, Any]:
    keys = cache.index()
    return {"count": len(keys), "entries": keys}


@router.api_route("/clear", methods=["GET", "DELETE"])
def cache_clear(cache: ResponseCache = Depends(get_cache)) -> dict[str, Any]:
    removed = cache.clear()
    return {"removed": removed}


@router.api_route("/clear/{target:path}", methods=["GET", "DELETE"])
def cache_clear_target(target: str, cache: ResponseCache = Depends(get_cache)) -> dict[str, Any]:
    # Path converters drop the leading slash of upstream paths
    if not target.startswith(("/", "GET ")):
        target = "/" + target
    removed = cache.clear(target)
    return {"target": target, "removed": removed}
