# site_crawler/crawler/urls.py
"""
URL canonicalization and same-domain scoping for SiteCrawler.

A normalized URL is ``scheme://host[:port]<path>``: runs of ``/`` in the
path are collapsed, one trailing ``/`` is removed unless the path is the
root, and credentials, query and fragment are dropped. A port is kept
unless it is the scheme default (80 for http, 443 for https). Two URLs
with the same normalized form are the same crawl unit.
"""
from __future__ import annotations

import re
from typing import Optional
from urllib.parse import SplitResult, urlsplit

from site_crawler.logger import logger

__all__ = ("InvalidSeedError", "normalize_url", "domain_of", "in_scope", "validate_seed")

_SLASH_RUN_RE = re.compile(r"/{2,}")
_DEFAULT_PORTS = {"http": 80, "https": 443}


class InvalidSeedError(ValueError):
    """The seed URL cannot start a crawl (unparseable, no host or not http(s))."""


def _split(url: str) -> Optional[SplitResult]:
    try:
        parts = urlsplit(url)
        # .hostname and .port parse the netloc and raise on broken input
        if not parts.scheme or not parts.hostname:
            return None
        parts.port
    except ValueError:
        return None
    return parts


def normalize_url(url: str) -> str:
    """
    Canonicalize *url*; malformed input is returned unchanged.

    >>> normalize_url("https://example.com//a///b/")
    'https://example.com/a/b'
    """
    parts = _split(url)
    if parts is None:
        logger.warning("Malformed URL: %s", url)
        return url
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    if parts.port is not None and parts.port != _DEFAULT_PORTS.get(parts.scheme):
        host = f"{host}:{parts.port}"
    path = _SLASH_RUN_RE.sub("/", parts.path)
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]
    return f"{parts.scheme}://{host}{path}"


def domain_of(url: str) -> str:
    """Return the host of *url*, or ``""`` when it cannot be parsed."""
    parts = _split(url)
    if parts is None:
        return ""
    return parts.hostname or ""


def in_scope(url: str, seed_domain: str) -> bool:
    """Exact host equality: no subdomain, port or ``www.`` equivalence."""
    return domain_of(url) == seed_domain


def validate_seed(url: str) -> str:
    """Return the normalized seed or raise :class:`InvalidSeedError`."""
    candidate = url.strip() if isinstance(url, str) else ""
    parts = _split(candidate)
    if parts is None or parts.scheme not in ("http", "https"):
        raise InvalidSeedError(f"Invalid seed URL: {url!r}")
    return normalize_url(candidate)
