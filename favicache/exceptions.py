"""favicache specific exceptions."""


class CacheStorageError(Exception):
    """Raised when the icon cache directory can't be created, read or written."""

    pass


class InvalidProviderError(Exception):
    """Raised when a favicon service is misconfigured."""

    pass
