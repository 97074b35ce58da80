"""App startup point"""

import logging
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.responses import Response

from favicache.configs.app_configs.config_logging import configure_logging
from favicache.configs.app_configs.config_sentry import configure_sentry
from favicache.exceptions import CacheStorageError
from favicache.middleware import logging as mw_logging
from favicache.middleware import metrics
from favicache.providers import icons
from favicache.utils.metrics import configure_metrics, get_metrics_client
from favicache.web import api_v1, dockerflow

tags_metadata = [
    {
        "name": "icon",
        "description": "Look up the favicon of a domain.",
    },
]

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Set up various configurations at startup and handle shutdown clean up.
    See lifespan events in fastAPI docs https://fastapi.tiangolo.com/advanced/events/

    An unusable cache directory aborts the startup.
    """
    configure_logging()
    configure_sentry()
    await configure_metrics()
    await icons.init_provider()
    yield
    await icons.shutdown_provider()
    await get_metrics_client().close()


app = FastAPI(openapi_tags=tags_metadata, lifespan=lifespan, default_response_class=ORJSONResponse)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> ORJSONResponse:
    """Use HTTP status code: 400 for all invalid requests."""
    logger.warning(f"HTTP 400: request validation error for path: {request.url.path}")
    return ORJSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"detail": exc.errors()}),
    )


@app.exception_handler(CacheStorageError)
async def cache_storage_exception_handler(request: Request, exc: CacheStorageError) -> Response:
    """Use HTTP status code: 500 when the icon cache is unusable, without error details."""
    logger.error(f"HTTP 500: icon cache failure for path: {request.url.path}: {exc}")
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


# Note: the order of the following middleware registration matters.
# `LoggingMiddleware` should be added after `CorrelationIdMiddleware`.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "OPTIONS", "HEAD"],
)
app.add_middleware(metrics.MetricsMiddleware)
app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(mw_logging.LoggingMiddleware)

app.include_router(dockerflow.router)
app.include_router(api_v1.router, prefix="/api/v1")
app.include_router(api_v1.legacy_router)


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, proxy_headers=True)
