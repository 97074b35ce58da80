"""Protocol and models for the favicon service backends."""

import hashlib
from enum import Enum
from typing import Protocol

from pydantic import BaseModel, computed_field


class ProviderResultCode(Enum):
    """Enum to capture the outcome of a single favicon service lookup."""

    SUCCESS = 0
    PLACEHOLDER = 1
    FAILURE = 2


def fingerprint(content: bytes) -> str:
    """Return the content fingerprint (SHA-1 hex digest) of icon bytes."""
    return hashlib.sha1(content, usedforsecurity=False).hexdigest()


class IconBlob(BaseModel):
    """Raw icon bytes as returned by a favicon service."""

    content: bytes

    @computed_field  # type: ignore[prop-decorator]
    @property
    def fingerprint(self) -> str:
        """SHA-1 of the content, used to compare icons."""
        return fingerprint(self.content)


class ProviderResult(BaseModel):
    """Result of a favicon service lookup. `blob` is set for SUCCESS and PLACEHOLDER."""

    code: ProviderResultCode
    blob: IconBlob | None = None


class ProviderDescriptor(BaseModel):
    """Configuration of one favicon service."""

    name: str
    url_template: str
    placeholder_sha1: str | None = None


class IconBackend(Protocol):
    """Protocol for a favicon service backend that the resolver depends on."""

    name: str

    async def fetch(self, domain: str) -> ProviderResult:  # pragma: no cover
        """Look up the favicon of `domain`.

        Returns:
            A `ProviderResult`. Network errors, timeouts and unexpected responses
            are reported as `ProviderResultCode.FAILURE` and never raised.
        """
        ...
