import asyncio
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from loguru import logger

from embedder.app.core import SERVICE_NAME
from embedder.app.routers.utils import readiness_ping_timeout_seconds

health_router = APIRouter(prefix="/health", tags=["Health"])


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).warning("")


def _not_ready(reason: str) -> JSONResponse:
    _log("readiness_failed", reason=reason)
    return JSONResponse(status_code=503, content={"status": "not_ready", "reason": reason})


@health_router.get(
    "/live",
    summary="Liveness probe",
    responses={200: {"description": "Process is up."}},
)
async def live() -> dict:
    return {"status": "ok"}


@health_router.get(
    "/ready",
    summary="Readiness probe",
    description="200 once the oEmbed service is wired and the cache backend answers a ping in time.",
    responses={
        200: {"description": "Ready to resolve URLs."},
        503: {"description": "Service not wired or cache backend unreachable."},
    },
)
async def ready(request: Request) -> JSONResponse:
    state = request.app.state
    if getattr(state, "oembed_service", None) is None:
        return _not_ready("service_not_initialized")
    cache_manager = getattr(state, "cache_manager", None)
    if cache_manager is None:
        return _not_ready("cache_not_initialized")

    try:
        reachable = await asyncio.wait_for(cache_manager.ping(), timeout=readiness_ping_timeout_seconds(request))
    except asyncio.TimeoutError:
        return _not_ready("cache_ping_timeout")
    if not reachable:
        return _not_ready("cache_unreachable")
    return JSONResponse(status_code=200, content={"status": "ready"})
