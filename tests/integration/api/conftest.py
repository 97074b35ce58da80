# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Module for test configurations for the API integration test directory."""

import pathlib
from typing import Iterator

import httpx
import pytest
from starlette.testclient import TestClient

from favicache.cache.filesystem import FilesystemIconCache
from favicache.main import app
from favicache.providers.icons import Provider, get_provider
from favicache.providers.icons.backends.favicon_service import FaviconServiceBackend
from favicache.providers.icons.backends.protocol import ProviderDescriptor, fingerprint
from favicache.providers.icons.provider import DefaultIcon
from favicache.providers.icons.resolver import FallbackResolver
from tests.integration.api.fake_services import (
    DEFAULT_ICON_BYTES,
    DUCKDUCKGO_HOST,
    PLACEHOLDER_BYTES,
    YANDEX_HOST,
    FaviconServiceStub,
)


@pytest.fixture(name="favicon_services")
def fixture_favicon_services() -> FaviconServiceStub:
    """Return the stub answering the favicon service requests."""
    return FaviconServiceStub()


@pytest.fixture(name="default_icon_path")
def fixture_default_icon_path(tmp_path: pathlib.Path) -> pathlib.Path:
    """Return the path of a default icon in a temporary directory."""
    path = tmp_path / "default.ico"
    path.write_bytes(DEFAULT_ICON_BYTES)
    return path


@pytest.fixture(name="cache_dir")
def fixture_cache_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    """Return the cache directory used by the provider."""
    return tmp_path / "cache"


@pytest.fixture(name="icons_provider")
def fixture_icons_provider(
    favicon_services: FaviconServiceStub,
    default_icon_path: pathlib.Path,
    cache_dir: pathlib.Path,
) -> Provider:
    """Return an icons provider whose favicon services are stubbed."""
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(favicon_services.handler), follow_redirects=True
    )
    descriptors = [
        ProviderDescriptor(
            name="yandex",
            url_template=f"https://{YANDEX_HOST}/favicon/v2/{{domain}}?size=32",
            placeholder_sha1=fingerprint(PLACEHOLDER_BYTES),
        ),
        ProviderDescriptor(
            name="duckduckgo",
            url_template=f"https://{DUCKDUCKGO_HOST}/ip3/{{domain}}.ico",
        ),
    ]
    cache = FilesystemIconCache(cache_dir)
    cache.ensure_storage()
    return Provider(
        cache=cache,
        resolver=FallbackResolver(
            [FaviconServiceBackend(descriptor, http_client) for descriptor in descriptors]
        ),
        default_icon=DefaultIcon(default_icon_path),
    )


@pytest.fixture(name="client")
def fixture_test_client(icons_provider: Provider) -> Iterator[TestClient]:
    """Return a FastAPI TestClient instance serving the stubbed icons provider.

    Note that this will NOT trigger event handlers (i.e. `startup` and `shutdown`) for
    the app, see: https://fastapi.tiangolo.com/advanced/testing-events/
    """
    app.dependency_overrides[get_provider] = lambda: icons_provider
    yield TestClient(app)
    del app.dependency_overrides[get_provider]
