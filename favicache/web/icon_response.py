"""Build icon responses honoring HTTP conditional requests."""

from email.utils import format_datetime, parsedate_to_datetime
from typing import Mapping

from starlette.responses import Response

from favicache.configs import settings
from favicache.providers.icons.provider import IconSource

ICON_MEDIA_TYPE = "image/x-icon"


def etag_for(source: IconSource) -> str:
    """Return the strong ETag of an icon, its quoted content fingerprint."""
    return f'"{source.fingerprint}"'


def _matches_etag(if_none_match: str, etag: str) -> bool:
    """Whether an `If-None-Match` value lists `etag`, using weak comparison."""
    if if_none_match.strip() == "*":
        return True
    tags = (tag.strip() for tag in if_none_match.split(","))
    opaque = etag.strip('"')
    return any(tag.removeprefix("W/").strip('"') == opaque for tag in tags if tag)


def _not_modified_since(if_modified_since: str, source: IconSource) -> bool:
    """Whether the `If-Modified-Since` date is not older than the icon."""
    try:
        since = parsedate_to_datetime(if_modified_since)
    except (TypeError, ValueError, IndexError):
        return False
    if since.tzinfo is None:
        return False
    # HTTP dates have a one-second resolution.
    return since >= source.last_modified.replace(microsecond=0)


def is_not_modified(source: IconSource, request_headers: Mapping[str, str]) -> bool:
    """Whether the client already holds the current representation of `source`.

    `If-None-Match` takes precedence over `If-Modified-Since` when both are sent.
    """
    if_none_match = request_headers.get("if-none-match")
    if if_none_match is not None:
        return _matches_etag(if_none_match, etag_for(source))

    if_modified_since = request_headers.get("if-modified-since")
    if if_modified_since is not None:
        return _not_modified_since(if_modified_since, source)

    return False


def serve_icon(source: IconSource | None, request_headers: Mapping[str, str]) -> Response:
    """Return a 200 response with the icon, 304 for a fresh client copy, or 404 without icon."""
    if source is None:
        return Response(status_code=404, media_type=ICON_MEDIA_TYPE)

    headers = {
        "ETag": etag_for(source),
        "Last-Modified": format_datetime(source.last_modified, usegmt=True),
        "Cache-Control": f"public, max-age={settings.runtime.icon_response_ttl_sec}",
    }

    if is_not_modified(source, request_headers):
        return Response(status_code=304, headers=headers, media_type=ICON_MEDIA_TYPE)

    return Response(
        content=source.content, status_code=200, headers=headers, media_type=ICON_MEDIA_TYPE
    )
