"""The middleware that records request metrics."""

import logging
from functools import cache
from http import HTTPStatus
from time import monotonic

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from favicache.middleware import ScopeKey
from favicache.utils.metrics import get_metrics_client

logger = logging.getLogger(__name__)


@cache
def build_metric_name(method: str, path: str) -> str:
    """Turn `GET /api/v1/icon` into `get.api.v1.icon`."""
    return "{}.{}".format(method, path.lower().lstrip("/").replace("/", ".")).lower()


class MetricsMiddleware:
    """An ASGI middleware for instrumenting request level metrics. Timing and status codes
    are collected for known paths, status codes for all paths.
    """

    def __init__(self, app: ASGIApp) -> None:
        """Initialize the middleware and store the ASGI app instance."""
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Capture request metrics including timing and status codes."""
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        metrics_client = get_metrics_client()
        # Store the client in the request scope, so that it can be used by endpoints.
        scope[ScopeKey.METRICS_CLIENT] = metrics_client
        metric_name = build_metric_name(scope["method"], scope["path"])
        started_at = monotonic()

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                duration = (monotonic() - started_at) * 1000
                status_code = message["status"]
                # Unknown paths are only tracked by the general status code metric.
                if status_code != HTTPStatus.NOT_FOUND:
                    metrics_client.timing(f"{metric_name}.timing", value=duration)
                    metrics_client.increment(f"{metric_name}.status_codes.{status_code}")
                metrics_client.increment(f"response.status_codes.{status_code}")

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
            metrics_client.timing(
                f"{metric_name}.timing", value=(monotonic() - started_at) * 1000
            )
            metrics_client.increment(f"{metric_name}.status_codes.{status_code}")
            metrics_client.increment(f"response.status_codes.{status_code}")
            raise
