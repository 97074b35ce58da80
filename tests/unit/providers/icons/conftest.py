# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Module for test configurations for the icons provider unit test directory."""

import pathlib

import pytest

from favicache.cache.filesystem import FilesystemIconCache
from favicache.providers.icons.provider import DefaultIcon
from tests.unit.providers.icons.fake_backends import DEFAULT_ICON_BYTES


@pytest.fixture(name="default_icon")
def fixture_default_icon(tmp_path: pathlib.Path) -> DefaultIcon:
    """Return a default icon backed by a temporary file."""
    path = tmp_path / "default.ico"
    path.write_bytes(DEFAULT_ICON_BYTES)
    return DefaultIcon(path)


@pytest.fixture(name="cache")
def fixture_cache(tmp_path: pathlib.Path) -> FilesystemIconCache:
    """Return a filesystem cache in a temporary directory."""
    cache = FilesystemIconCache(tmp_path / "cache")
    cache.ensure_storage()
    return cache
