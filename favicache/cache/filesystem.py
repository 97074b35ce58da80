"""Icon cache adapter storing one file per domain in a local directory."""

import contextlib
import hashlib
import logging
import os
import pathlib
import tempfile
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from favicache.cache.protocol import CacheEntry
from favicache.exceptions import CacheStorageError

if TYPE_CHECKING:
    from favicache.providers.icons.backends.protocol import IconBlob

logger = logging.getLogger(__name__)

ICON_SUFFIX = ".ico"
DEFAULT_MARKER_SUFFIX = ".default"
# Content of marker files. The default icon itself is never copied.
DEFAULT_MARKER_TOKEN = b"default-icon\n"
DEFAULT_TTL = timedelta(days=30)
TEMP_PREFIX = ".tmp_"
TEMP_FILE_MAX_AGE = timedelta(hours=1)


class FilesystemIconCache:
    """Store icons as `<md5(domain)>.ico` and default markers as `<md5(domain)>.default`.

    The file modification time is the freshness clock of an entry.
    """

    cache_dir: pathlib.Path
    ttl: timedelta

    def __init__(self, cache_dir: str | pathlib.Path, ttl: timedelta = DEFAULT_TTL) -> None:
        self.cache_dir = pathlib.Path(cache_dir)
        self.ttl = ttl

    def ensure_storage(self) -> None:
        """Create the cache directory and check that it's writable.

        Raises:
            CacheStorageError: If the directory can't be created or written to.
        """
        try:
            self.cache_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as e:
            raise CacheStorageError(f"Failed to create cache directory {self.cache_dir}") from e

        if not self.is_writable():
            raise CacheStorageError(f"Cache directory {self.cache_dir} is not writable")

    def is_writable(self) -> bool:
        """Whether the cache directory exists and accepts new files."""
        return self.cache_dir.is_dir() and os.access(self.cache_dir, os.W_OK | os.X_OK)

    def key(self, domain: str) -> str:
        """Return the MD5 hex digest of `domain`, the storage identifier of its entry."""
        return hashlib.md5(domain.encode("utf-8"), usedforsecurity=False).hexdigest()

    def _icon_path(self, key: str) -> pathlib.Path:
        return self.cache_dir / f"{key}{ICON_SUFFIX}"

    def _marker_path(self, key: str) -> pathlib.Path:
        return self.cache_dir / f"{key}{DEFAULT_MARKER_SUFFIX}"

    def get(self, domain: str) -> CacheEntry | None:
        """Return the cached entry of `domain`, or `None` if there is none.

        A real icon wins over a marker in case both exist after a concurrent write.

        Raises:
            CacheStorageError: If an existing entry can't be read.
        """
        key = self.key(domain)
        icon_path = self._icon_path(key)
        try:
            content = icon_path.read_bytes()
            mtime = icon_path.stat().st_mtime
        except FileNotFoundError:
            pass
        except OSError as e:
            raise CacheStorageError(f"Failed to read cache entry {icon_path}") from e
        else:
            if content:
                return CacheEntry(key=key, last_modified=_from_timestamp(mtime), content=content)

        marker_path = self._marker_path(key)
        try:
            mtime = marker_path.stat().st_mtime
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheStorageError(f"Failed to read cache entry {marker_path}") from e
        return CacheEntry(key=key, last_modified=_from_timestamp(mtime))

    def is_fresh(self, entry: CacheEntry, now: datetime | None = None) -> bool:
        """Whether `entry` was written less than `ttl` ago."""
        now = now or datetime.now(timezone.utc)
        return now - entry.last_modified < self.ttl

    def put(self, domain: str, blob: "IconBlob") -> CacheEntry:
        """Atomically store the icon of `domain` and drop a marker it may have had."""
        if not blob.content:
            raise ValueError("Refusing to cache an empty icon")
        key = self.key(domain)
        path = self._icon_path(key)
        self._write_atomic(path, blob.content)
        self._remove(self._marker_path(key))
        return CacheEntry(key=key, last_modified=self._mtime(path), content=blob.content)

    def put_default_marker(self, domain: str) -> CacheEntry:
        """Atomically record that `domain` uses the default icon, dropping a cached icon."""
        key = self.key(domain)
        path = self._marker_path(key)
        self._write_atomic(path, DEFAULT_MARKER_TOKEN)
        self._remove(self._icon_path(key))
        return CacheEntry(key=key, last_modified=self._mtime(path))

    def evict(self, domain: str) -> None:
        """Remove both the icon and the marker of `domain`."""
        key = self.key(domain)
        self._remove(self._icon_path(key))
        self._remove(self._marker_path(key))

    def prune(self, now: datetime | None = None) -> int:
        """Remove stale entries and temporary files left behind by interrupted writes.

        Returns the number of removed files.

        Raises:
            CacheStorageError: If the cache directory can't be listed.
        """
        now = now or datetime.now(timezone.utc)
        try:
            paths = list(self.cache_dir.iterdir())
        except OSError as e:
            raise CacheStorageError(f"Failed to list cache directory {self.cache_dir}") from e

        removed = 0
        for path in paths:
            if path.name.startswith(TEMP_PREFIX):
                max_age = TEMP_FILE_MAX_AGE
            elif path.suffix in (ICON_SUFFIX, DEFAULT_MARKER_SUFFIX):
                max_age = self.ttl
            else:
                continue
            try:
                last_modified = _from_timestamp(path.stat().st_mtime)
            except FileNotFoundError:
                # Replaced or evicted by a request meanwhile.
                continue
            except OSError as e:
                raise CacheStorageError(f"Failed to stat cache entry {path}") from e
            if now - last_modified >= max_age:
                self._remove(path)
                removed += 1

        logger.info(f"Pruned {removed} files from {self.cache_dir}")
        return removed

    def _write_atomic(self, path: pathlib.Path, content: bytes) -> None:
        """Write to a temporary file in the cache directory, then rename it over `path`.

        Readers see either the previous file or the complete new one.
        """
        try:
            fd, temp_path = tempfile.mkstemp(dir=self.cache_dir, prefix=TEMP_PREFIX)
        except OSError as e:
            raise CacheStorageError(f"Failed to write cache entry {path}") from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(temp_path, 0o644)
            os.replace(temp_path, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                os.unlink(temp_path)
            raise CacheStorageError(f"Failed to write cache entry {path}") from e

    def _remove(self, path: pathlib.Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise CacheStorageError(f"Failed to remove cache entry {path}") from e

    def _mtime(self, path: pathlib.Path) -> datetime:
        try:
            return _from_timestamp(path.stat().st_mtime)
        except OSError as e:
            raise CacheStorageError(f"Failed to stat cache entry {path}") from e


def _from_timestamp(timestamp: float) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)
