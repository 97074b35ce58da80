"""Normalize user supplied URLs and domains into cache lookup keys."""

import re

_SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
_WWW_PATTERN = re.compile(r"^www\.", re.IGNORECASE)
_PATH_PATTERN = re.compile(r"[/?#].*$", re.DOTALL)


def _strip_once(value: str) -> str:
    domain = _SCHEME_PATTERN.sub("", value.strip(), count=1)
    domain = _WWW_PATTERN.sub("", domain, count=1)
    domain = _PATH_PATTERN.sub("", domain, count=1)
    return domain.strip().lower()


def normalize_domain(raw: str) -> str:
    """Reduce a URL or a bare domain to its lowercase host, without `www.`.

    Examples:
    - https://WWW.Example.com/path?x=1 -> example.com
    - http://news.bbc.co.uk#top -> news.bbc.co.uk
    - "  " -> ""

    Each pass strips one scheme and one `www.` prefix. Passes repeat until the
    value is stable so that normalizing a normalized domain is a no-op, e.g.
    `www.www.example.com` ends up as `example.com`.

    An empty result means there is nothing to look up.
    """
    domain = _strip_once(raw)
    while (stripped := _strip_once(domain)) != domain:
        domain = stripped
    return domain
