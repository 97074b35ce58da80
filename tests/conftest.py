# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Module for test configurations shared by all the test directories."""

import os
from contextlib import nullcontext
from logging import LogRecord
from typing import Any

# Settings are loaded lazily, select the testing environment before any access.
os.environ.setdefault("FAVICACHE_ENV", "testing")

import pytest  # noqa: E402
from aiodogstatsd import Client  # noqa: E402
from pytest_mock import MockerFixture  # noqa: E402

from tests.types import FilterCaplogFixture  # noqa: E402


@pytest.fixture(scope="session", name="filter_caplog")
def fixture_filter_caplog() -> FilterCaplogFixture:
    """
    Return a function that will filter pytest captured log records for a given logger
    name
    """

    def filter_caplog(records: list[LogRecord], logger_name: str) -> list[LogRecord]:
        """
        Filter pytest captured log records for a given logger name
        """
        return [record for record in records if record.name == logger_name]

    return filter_caplog


@pytest.fixture(name="metrics_client", autouse=True)
def fixture_metrics_client(mocker: MockerFixture) -> Any:
    """Replace the StatsD client with a mock everywhere it's looked up."""
    metrics_client = mocker.Mock(spec=Client)
    metrics_client.timeit.return_value = nullcontext()
    for module in (
        "favicache.providers.icons.provider",
        "favicache.providers.icons.resolver",
        "favicache.middleware.metrics",
    ):
        mocker.patch(f"{module}.get_metrics_client", return_value=metrics_client)
    return metrics_client
