# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Module for test fixtures for the middleware unit test directory."""

from typing import Any

import pytest
from pytest_mock import MockerFixture
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from tests.unit.types import AppFactory


@pytest.fixture(name="scope")
def fixture_scope() -> Scope:
    """Create an HTTP Scope for an icon request."""
    scope: Scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/v1/icon",
        "query_string": b"url=example.com",
        "headers": [
            (b"user-agent", b"Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:120.0)"),
            (b"accept-language", b"en-US"),
        ],
    }
    return scope


@pytest.fixture(name="receive_mock")
def fixture_receive_mock(mocker: MockerFixture) -> Any:
    """Create a Receive mock object for test"""
    return mocker.AsyncMock(spec=Receive)


@pytest.fixture(name="send_mock")
def fixture_send_mock(mocker: MockerFixture) -> Any:
    """Create a Send mock object for test"""
    return mocker.AsyncMock(spec=Send)


@pytest.fixture(name="app_factory")
def fixture_app_factory() -> AppFactory:
    """Return a function that builds an ASGI app answering with the given status code."""

    def app_factory(status_code: int) -> ASGIApp:
        async def app(scope: Scope, receive: Receive, send: Send) -> None:
            start: Message = {"type": "http.response.start", "status": status_code, "headers": []}
            await send(start)
            await send({"type": "http.response.body", "body": b""})

        return app

    return app_factory
