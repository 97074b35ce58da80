"""Initialize the icons provider"""

import logging
from datetime import timedelta
from timeit import default_timer as timer

from httpx import AsyncClient

from favicache.cache.filesystem import FilesystemIconCache
from favicache.configs import settings
from favicache.providers.icons.backends.favicon_service import FaviconServiceBackend
from favicache.providers.icons.backends.protocol import ProviderDescriptor
from favicache.providers.icons.provider import DefaultIcon, IconSource, Provider
from favicache.providers.icons.resolver import ExhaustionPolicy, FallbackResolver
from favicache.utils.http_client import create_http_client

__all__ = [
    "IconSource",
    "Provider",
    "get_provider",
    "init_provider",
    "shutdown_provider",
]

logger = logging.getLogger(__name__)

provider: Provider | None = None
http_client: AsyncClient | None = None


async def init_provider() -> None:
    """Initialize the icons provider.

    This should only be called once at the startup of application.

    Raises:
        CacheStorageError: If the cache directory is unusable.
    """
    global provider, http_client
    start = timer()

    cache = FilesystemIconCache(
        cache_dir=settings.icons.cache_dir,
        ttl=timedelta(days=settings.icons.cache_ttl_days),
    )
    cache.ensure_storage()

    http_client = create_http_client(
        connect_timeout=settings.icons.http.connect_timeout_sec,
        request_timeout=settings.icons.http.request_timeout_sec,
        user_agent=settings.icons.http.user_agent,
        # Public favicon CDNs are fetched without certificate validation.
        verify=False,
    )
    backends = [
        FaviconServiceBackend(ProviderDescriptor(**descriptor), http_client)
        for descriptor in settings.icons.providers
    ]

    provider = Provider(
        cache=cache,
        resolver=FallbackResolver(
            backends, ExhaustionPolicy(settings.icons.exhaustion_policy)
        ),
        default_icon=DefaultIcon(settings.icons.default_icon_path),
    )

    logger.info(
        "Icons provider initialization completed",
        extra={
            "provider": provider.name,
            "services": [backend.name for backend in backends],
            "elapsed": timer() - start,
        },
    )


async def shutdown_provider() -> None:
    """Release the HTTP client of the icons provider."""
    global provider, http_client
    if http_client is not None:
        await http_client.aclose()
    http_client = None
    provider = None


def get_provider() -> Provider:
    """Return the icons provider"""
    if provider is None:
        raise ValueError("Icons provider has not been initialized.")
    return provider
