# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Unit tests for the http_client.py utility module."""

import pytest
from httpx import AsyncClient

from favicache.utils.http_client import create_http_client


@pytest.mark.asyncio
async def test_create_http_client() -> None:
    """Test that the client carries the timeouts, redirects and user agent."""
    client = create_http_client(
        connect_timeout=3.0, request_timeout=5.0, user_agent="Favicon Fetcher"
    )

    try:
        assert isinstance(client, AsyncClient)
        assert client.timeout.connect == 3.0
        assert client.timeout.read == 5.0
        assert client.follow_redirects is True
        assert client.headers["User-Agent"] == "Favicon Fetcher"
    finally:
        await client.aclose()


@pytest.mark.asyncio
async def test_create_http_client_default_user_agent() -> None:
    """Test that httpx's user agent is kept when none is given."""
    client = create_http_client()

    try:
        assert client.headers["User-Agent"].startswith("python-httpx/")
    finally:
        await client.aclose()
