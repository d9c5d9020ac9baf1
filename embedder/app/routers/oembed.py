from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request, Response
from loguru import logger

from embedder.app.core import SERVICE_NAME
from embedder.app.routers.utils import is_embeddable_url
from embedder.app.schemas.oembed import EmbedRequest, EmbedResponse, OembedNotFound


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


oembed_router = APIRouter(tags=["oEmbed"])


@oembed_router.get(
    "/oembed",
    summary="Lookup oEmbed metadata for a URL",
    description="Resolves the URL against configured endpoints (or autodiscovery) and returns the cached or freshly fetched oEmbed response.",
    responses={
        200: {"description": "oEmbed response (wire fields only)."},
        400: {"description": "Missing or invalid URL query parameter."},
        404: {"description": "No endpoint, or the endpoint gave no usable response."},
        503: {"description": "Service not initialized."},
    },
)
async def get_oembed(request: Request, url: str | None = None) -> Response:
    if not url:
        return Response(status_code=400, content="Missing required query parameter: url")
    if not is_embeddable_url(url):
        return Response(status_code=400, content="Invalid URL")

    service = getattr(request.app.state, "oembed_service", None)
    if service is None:
        return Response(status_code=503, content="Service not available")

    response = await service.get_oembed_response_for(url)
    if response is None:
        _log("oembed_not_found", url=url)
        return Response(
            status_code=404,
            media_type="application/json",
            content=OembedNotFound(url=url).model_dump_json(),
        )
    return Response(
        status_code=200,
        media_type="application/json",
        content=response.model_dump_json(exclude_none=True),
    )


@oembed_router.post(
    "/embed",
    summary="Embed URLs in an HTML fragment",
    description="Replaces every embeddable anchor in `text` with rendered oEmbed markup. Anchors that cannot be embedded are returned unchanged.",
    responses={
        200: {"description": "Rewritten fragment."},
        422: {"description": "Invalid request body."},
        503: {"description": "Service not initialized."},
    },
)
async def post_embed(request: Request, body: EmbedRequest) -> Response:
    rewriter = getattr(request.app.state, "rewriter", None)
    if rewriter is None:
        return Response(status_code=503, content="Service not available")

    html = await rewriter.embed_urls(body.text, body.base_url)
    return Response(
        status_code=200,
        media_type="application/json",
        content=EmbedResponse(html=html or "").model_dump_json(),
    )
