"""Protocol for icon cache adapters."""

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from favicache.providers.icons.backends.protocol import IconBlob


@dataclass(frozen=True)
class CacheEntry:
    """A cached icon, or a marker that the domain uses the default icon."""

    key: str
    last_modified: datetime
    content: bytes | None = None

    @property
    def is_default_marker(self) -> bool:
        """Whether the entry points at the shared default icon."""
        return self.content is None


class IconCache(Protocol):
    """A protocol describing an icon cache keyed by normalized domain."""

    def key(self, domain: str) -> str:  # pragma: no cover
        """Return the storage identifier of `domain`."""
        ...

    def is_writable(self) -> bool:  # pragma: no cover
        """Whether new entries can be stored."""
        ...

    def get(self, domain: str) -> CacheEntry | None:  # pragma: no cover
        """Get the entry of `domain`. Returns `None` on a cache miss.

        Raises:
            - `CacheStorageError` if the storage can't be read.
        """
        ...

    def is_fresh(self, entry: CacheEntry, now: datetime | None = None) -> bool:  # pragma: no cover
        """Whether `entry` is younger than the freshness window."""
        ...

    def put(self, domain: str, blob: "IconBlob") -> CacheEntry:  # pragma: no cover
        """Store icon bytes for `domain`, replacing any prior entry.

        Raises:
            - `CacheStorageError` if the entry can't be written.
        """
        ...

    def put_default_marker(self, domain: str) -> CacheEntry:  # pragma: no cover
        """Record that `domain` resolves to the default icon.

        Raises:
            - `CacheStorageError` if the entry can't be written.
        """
        ...

    def evict(self, domain: str) -> None:  # pragma: no cover
        """Remove the entry of `domain`, if any."""
        ...
