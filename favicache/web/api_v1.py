"""Favicon lookup API endpoints."""

import logging

from fastapi import APIRouter, Depends, Query
from starlette.requests import Request
from starlette.responses import Response

from favicache.providers.icons import Provider, get_provider
from favicache.web.icon_response import ICON_MEDIA_TYPE, serve_icon

logger = logging.getLogger(__name__)

router = APIRouter()

URL_MAX_LENGTH = 2048


@router.get(
    "/icon",
    tags=["icon"],
    summary="Favicon of a domain",
    response_class=Response,
    responses={
        200: {"content": {ICON_MEDIA_TYPE: {}}, "description": "The icon."},
        304: {"description": "The client copy is current."},
        404: {"description": "No icon, not even the default one, is available."},
    },
)
async def icon(
    request: Request,
    url: str = Query("", max_length=URL_MAX_LENGTH),
    provider: Provider = Depends(get_provider),
) -> Response:
    """Return the 32x32 favicon of the domain in `url`.

    **Args:**

    - `url`: A bare domain (`example.com`) or a URL (`https://www.example.com/path`).
      An empty or missing value returns the default icon.

    **Response Headers:**

    Responses carry `ETag` and `Last-Modified` headers. Requests sending a matching
    `If-None-Match`, or an `If-Modified-Since` not older than the icon, get a `304`.
    """
    source = await provider.get_icon(url)
    return serve_icon(source, request.headers)


# Clients of the legacy `get.php` script keep their URLs.
legacy_router = APIRouter()
legacy_router.add_api_route(
    "/get.php", icon, methods=["GET"], response_class=Response, include_in_schema=False
)
