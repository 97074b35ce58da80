"""Resolve a domain to an icon by falling back across favicon services."""

import logging
from enum import Enum, unique
from typing import Sequence

from favicache.providers.icons.backends.protocol import (
    IconBackend,
    IconBlob,
    ProviderResultCode,
)
from favicache.utils.metrics import get_metrics_client

logger = logging.getLogger(__name__)

WWW_PREFIX = "www."


class DefaultMarker(Enum):
    """Resolution outcome for domains that have no real favicon."""

    DEFAULT_MARKER = "default"


DEFAULT_MARKER = DefaultMarker.DEFAULT_MARKER


@unique
class ExhaustionPolicy(str, Enum):
    """What to resolve to when services answered with placeholders and failures only.

    STRICT: any confirmed placeholder means the domain has no icon.
    DEGRADED: serve the first placeholder icon seen.
    """

    STRICT = "strict"
    DEGRADED = "degraded"


class FallbackResolver:
    """Query favicon services in priority order until one returns a real icon."""

    backends: list[IconBackend]
    exhaustion_policy: ExhaustionPolicy

    def __init__(
        self,
        backends: Sequence[IconBackend],
        exhaustion_policy: ExhaustionPolicy = ExhaustionPolicy.STRICT,
    ) -> None:
        self.backends = list(backends)
        self.exhaustion_policy = exhaustion_policy
        self.metrics_client = get_metrics_client()

    async def resolve(self, domain: str) -> IconBlob | DefaultMarker | None:
        """Resolve the icon of a normalized domain.

        A service answering with its placeholder is asked once more for the
        `www.` host before moving on to the next service.

        Returns:
            - the first real icon found;
            - `DEFAULT_MARKER` when the services confirmed there is no icon;
            - `None` when every service failed.
        """
        first_placeholder: IconBlob | None = None
        outcomes: list[ProviderResultCode] = []

        for backend in self.backends:
            result = await backend.fetch(domain)
            self._record(backend.name, result.code)

            if result.code is ProviderResultCode.SUCCESS:
                logger.debug(f"{backend.name} has an icon for {domain}")
                return result.blob

            if result.code is ProviderResultCode.PLACEHOLDER:
                if first_placeholder is None:
                    first_placeholder = result.blob
                if not domain.startswith(WWW_PREFIX):
                    retry = await backend.fetch(WWW_PREFIX + domain)
                    self._record(backend.name, retry.code, "www_retry")
                    if retry.code is ProviderResultCode.SUCCESS:
                        logger.debug(f"{backend.name} has an icon for {WWW_PREFIX}{domain}")
                        return retry.blob

            outcomes.append(result.code)

        if ProviderResultCode.PLACEHOLDER not in outcomes:
            logger.info(f"Every favicon service failed for {domain}")
            return None

        if ProviderResultCode.FAILURE not in outcomes:
            return DEFAULT_MARKER

        match self.exhaustion_policy:
            case ExhaustionPolicy.DEGRADED:
                logger.info(f"Serving a placeholder icon for {domain}, some services failed")
                return first_placeholder
            case _:
                return DEFAULT_MARKER

    def _record(self, name: str, code: ProviderResultCode, stage: str = "fetch") -> None:
        self.metrics_client.increment(f"icons.provider.{name}.{stage}.{code.name.lower()}")
