"""A backend for third-party favicon services reachable over HTTP."""

import logging
from urllib.parse import quote

from httpx import AsyncClient, HTTPError

from favicache.exceptions import InvalidProviderError
from favicache.providers.icons.backends.protocol import (
    IconBlob,
    ProviderDescriptor,
    ProviderResult,
    ProviderResultCode,
)

logger = logging.getLogger(__name__)


class FaviconServiceBackend:
    """Fetch icons from one favicon service and classify its answers."""

    descriptor: ProviderDescriptor
    http_client: AsyncClient

    def __init__(self, descriptor: ProviderDescriptor, http_client: AsyncClient) -> None:
        """Initialize the backend.

        Raises:
            InvalidProviderError: If the URL template has no `{domain}` field.
        """
        if "{domain}" not in descriptor.url_template:
            raise InvalidProviderError(
                f"URL template of favicon service '{descriptor.name}' lacks a {{domain}} field"
            )
        self.descriptor = descriptor
        self.http_client = http_client

    @property
    def name(self) -> str:
        """Name of the favicon service."""
        return self.descriptor.name

    def build_url(self, domain: str) -> str:
        """Return the lookup URL of `domain` on this service."""
        return self.descriptor.url_template.format(domain=quote(domain, safe=""))

    async def fetch(self, domain: str) -> ProviderResult:
        """Fetch the favicon of `domain`.

        Returns:
            SUCCESS with the icon, PLACEHOLDER with the service's generic icon, or
            FAILURE for errors, non-200 statuses and empty bodies.
        """
        url = self.build_url(domain)
        try:
            response = await self.http_client.get(url)
        except HTTPError as e:
            logger.info(f"Favicon service {self.name} failed for {domain}: {e!r}")
            return ProviderResult(code=ProviderResultCode.FAILURE)

        if response.status_code != 200 or not response.content:
            logger.info(
                f"Favicon service {self.name} answered {response.status_code} "
                f"with {len(response.content)} bytes for {domain}"
            )
            return ProviderResult(code=ProviderResultCode.FAILURE)

        blob = IconBlob(content=response.content)
        placeholder_sha1 = self.descriptor.placeholder_sha1
        if placeholder_sha1 and blob.fingerprint == placeholder_sha1:
            logger.debug(f"Favicon service {self.name} has no icon for {domain}")
            return ProviderResult(code=ProviderResultCode.PLACEHOLDER, blob=blob)

        return ProviderResult(code=ProviderResultCode.SUCCESS, blob=blob)
