# site_crawler/crawler/fetcher.py
"""
Fetcher module: performs the HTTP GET for one crawl unit.

HTTP errors (status >= 400) are not failures: they yield empty content and
therefore no links. Network problems raise :class:`FetchError`, which the
coordinator treats as "stop expanding from this URL".
"""
from __future__ import annotations

import asyncio
from typing import Optional, Protocol, runtime_checkable

from aiohttp import ClientError, ClientSession, ClientTimeout
from site_crawler.config import CrawlerConfig
from site_crawler.logger import get_logger

__all__ = ("ContentFetcher", "FetchError", "HttpFetcher")

_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
_ACCEPT_LANGUAGE = "en-US,en;q=0.5"


class FetchError(Exception):
    """Network-level failure (timeout, DNS, reset) while fetching *url*."""

    def __init__(self, url: str, reason: object) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


@runtime_checkable
class ContentFetcher(Protocol):
    """Anything that turns a URL into page text or raises FetchError."""

    async def fetch(self, url: str) -> str:
        ...


class HttpFetcher:
    """aiohttp-backed fetcher with connect/read timeouts and redirect following."""

    def __init__(
        self,
        config: Optional[CrawlerConfig] = None,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.config = config or CrawlerConfig()
        self.session = session
        self._own_session = session is None
        self.logger = get_logger()

    async def __aenter__(self) -> HttpFetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=self.timeout,
                headers=self.headers,
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def timeout(self) -> ClientTimeout:
        return ClientTimeout(
            total=None,
            sock_connect=self.config.connect_timeout,
            sock_read=self.config.read_timeout,
        )

    @property
    def headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.config.user_agent,
            "Accept": _ACCEPT,
            "Accept-Language": _ACCEPT_LANGUAGE,
        }

    async def close(self) -> None:
        if self._own_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, url: str) -> str:
        """
        GET *url* and return its body as text.

        Returns ``""`` for HTTP status >= 400, raises FetchError on
        timeouts and connection errors.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        try:
            async with self.session.get(
                url,
                allow_redirects=True,
                timeout=self.timeout,
                headers=self.headers,
            ) as resp:
                if resp.status >= 400:
                    self.logger.error("Failed with HTTP code %d: %s", resp.status, url)
                    return ""
                return await resp.text(errors="replace")
        except (ClientError, asyncio.TimeoutError) as e:
            raise FetchError(url, e) from e
