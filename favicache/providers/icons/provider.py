"""Provider serving favicons from the local cache, resolving misses upstream."""

import logging
import pathlib
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, unique

import aiodogstatsd

from favicache.cache.protocol import IconCache
from favicache.exceptions import CacheStorageError
from favicache.providers.icons.backends.protocol import IconBlob, fingerprint
from favicache.providers.icons.resolver import DefaultMarker, FallbackResolver
from favicache.utils.domain import normalize_domain
from favicache.utils.metrics import get_metrics_client

logger = logging.getLogger(__name__)


@unique
class IconOrigin(str, Enum):
    """Where the bytes of a served icon come from."""

    CACHE = "cache"
    DEFAULT_MARKER = "default_marker"
    RESOLVED = "resolved"
    DEFAULT_ICON = "default_icon"


@dataclass(frozen=True)
class IconSource:
    """Icon bytes ready to be served, with their modification time."""

    content: bytes
    last_modified: datetime
    origin: IconOrigin

    @property
    def fingerprint(self) -> str:
        """SHA-1 of the content, used as the ETag."""
        return fingerprint(self.content)


class DefaultIcon:
    """The read-only icon served when a domain has no favicon of its own."""

    path: pathlib.Path

    def __init__(self, path: str | pathlib.Path) -> None:
        self.path = pathlib.Path(path)

    def exists(self) -> bool:
        """Whether the default icon file is present."""
        return self.path.is_file()

    def load(self, origin: IconOrigin = IconOrigin.DEFAULT_ICON) -> IconSource | None:
        """Read the default icon. Returns `None` if the file is missing."""
        try:
            content = self.path.read_bytes()
            mtime = self.path.stat().st_mtime
        except FileNotFoundError:
            logger.error(f"Default icon {self.path} does not exist")
            return None
        except OSError as e:
            logger.error(f"Failed to read default icon {self.path}: {e}")
            return None
        return IconSource(
            content=content,
            last_modified=datetime.fromtimestamp(mtime, tz=timezone.utc),
            origin=origin,
        )


class Provider:
    """Look up favicons by domain, caching upstream results on disk."""

    cache: IconCache
    resolver: FallbackResolver
    default_icon: DefaultIcon
    name: str
    metrics_client: aiodogstatsd.Client

    def __init__(
        self,
        cache: IconCache,
        resolver: FallbackResolver,
        default_icon: DefaultIcon,
        name: str = "icons",
    ) -> None:
        self.cache = cache
        self.resolver = resolver
        self.default_icon = default_icon
        self.name = name
        self.metrics_client = get_metrics_client()

    async def get_icon(self, raw: str) -> IconSource | None:
        """Return the icon of the domain in `raw`, a URL or a bare domain.

        Falls back to the default icon whenever no real icon is available.
        Returns `None` only if the default icon is needed but missing.

        Raises:
            CacheStorageError: If the cache can't be read.
        """
        domain = normalize_domain(raw)
        if not domain:
            return self.default_icon.load()

        entry = self.cache.get(domain)
        if entry is not None:
            if self.cache.is_fresh(entry):
                self.metrics_client.increment("icons.cache.hit")
                if entry.is_default_marker:
                    return self.default_icon.load(IconOrigin.DEFAULT_MARKER)
                return IconSource(
                    content=entry.content or b"",
                    last_modified=entry.last_modified,
                    origin=IconOrigin.CACHE,
                )
            self.metrics_client.increment("icons.cache.stale")
            logger.debug(f"Evicting stale cache entry of {domain}")
            self.cache.evict(domain)
        else:
            self.metrics_client.increment("icons.cache.miss")

        with self.metrics_client.timeit("icons.resolve.timing"):
            resolved = await self.resolver.resolve(domain)

        match resolved:
            case IconBlob():
                self.metrics_client.increment("icons.resolve.success")
                return self._store(domain, resolved)
            case DefaultMarker():
                self.metrics_client.increment("icons.resolve.default")
                if self.default_icon.exists():
                    try:
                        self.cache.put_default_marker(domain)
                    except CacheStorageError as e:
                        logger.error(f"Failed to cache default marker of {domain}: {e}")
                return self.default_icon.load()
            case _:
                self.metrics_client.increment("icons.resolve.failed")
                return self.default_icon.load()

    def _store(self, domain: str, blob: IconBlob) -> IconSource:
        try:
            entry = self.cache.put(domain, blob)
        except CacheStorageError as e:
            logger.error(f"Failed to cache icon of {domain}: {e}")
            last_modified = datetime.now(timezone.utc)
        else:
            last_modified = entry.last_modified
        return IconSource(
            content=blob.content, last_modified=last_modified, origin=IconOrigin.RESOLVED
        )
