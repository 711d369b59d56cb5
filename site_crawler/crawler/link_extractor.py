# site_crawler/crawler/link_extractor.py
"""
Link extraction for SiteCrawler: turns raw page text into same-domain,
normalized, not-yet-visited candidate URLs.
"""
from __future__ import annotations

import re
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag
from site_crawler.crawler.registry import VisitedRegistry
from site_crawler.crawler.urls import domain_of, in_scope, normalize_url
from site_crawler.logger import logger

__all__ = ("LinkResolver", "find_hrefs", "split_protocols")

_PROTOCOL_RE = re.compile(r"(?=https?://)")
_SKIP_SCHEMES = ("mailto:", "tel:", "javascript:")


def find_hrefs(content: str) -> List[str]:
    """
    Return raw ``href`` values of ``<a>`` tags in document order.

    ``html.parser`` lower-cases tag and attribute names and tolerates broken
    markup, so ``<A HREF=...>`` and unclosed tags are found as well.
    """
    if not content:
        return []
    soup = BeautifulSoup(content, "html.parser")
    hrefs: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if isinstance(href_val, str):
            hrefs.append(href_val)
    return hrefs


def split_protocols(href: str) -> List[str]:
    """Split glued hrefs like ``https://a/xhttps://a/y`` at every protocol."""
    if "http://" not in href and "https://" not in href:
        return [href]
    return [part for part in _PROTOCOL_RE.split(href) if part]


def _skip(href: str) -> bool:
    lowered = href.lower()
    return (
        not href
        or href.startswith("#")
        or "{{" in href
        or lowered.startswith(_SKIP_SCHEMES)
        or " " in href
    )


def _is_absolute(link: str) -> bool:
    return bool(domain_of(link))


class LinkResolver:
    """Resolves hrefs of a fetched page against the crawl's seed domain."""

    def __init__(self, seed_domain: str, registry: Optional[VisitedRegistry] = None) -> None:
        self.seed_domain = seed_domain
        self.registry = registry if registry is not None else VisitedRegistry()

    def extract_links(self, content: str, base_url: str) -> List[str]:
        """
        Return accepted candidate URLs from *content* in discovery order.

        The registry check here is only a filter; the coordinator's
        admission gate decides whether a unit is created.
        """
        links: List[str] = []
        for raw in find_hrefs(content):
            href = raw.strip()
            if _skip(href):
                continue
            for segment in split_protocols(href):
                candidate = self.resolve(segment, base_url)
                if candidate is not None and self._accept(candidate):
                    links.append(candidate)
        return links

    def resolve(self, link: str, base_url: str) -> Optional[str]:
        """Normalize an absolute link or glue a relative one onto *base_url*."""
        if _is_absolute(link):
            return normalize_url(link)
        if link.startswith("http"):
            logger.warning("Skipping malformed URL: %s", link)
            return None
        return normalize_url(f"{base_url.rstrip('/')}/{link.lstrip('/')}")

    def _accept(self, url: str) -> bool:
        return in_scope(url, self.seed_domain) and not self.registry.contains(url)
