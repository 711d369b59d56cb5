# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections import Counter
from collections.abc import AsyncIterator
from typing import Dict, Iterable, Optional

import pytest
from aiohttp import web

from site_crawler.crawler.fetcher import FetchError
from site_crawler.logger import configure

SEED = "https://example.com"


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI tests reconfigure the project logger; restore the default after each test."""
    yield
    configure(level="INFO")


class FakeFetcher:
    """
    In-memory ContentFetcher: ``pages`` maps normalized URL → HTML.

    Counts calls per URL, optionally sleeps to widen race windows, raises
    FetchError for ``errors`` and blocks forever on ``hang``.
    """

    def __init__(
        self,
        pages: Dict[str, str],
        delay: float = 0.0,
        errors: Iterable[str] = (),
        hang: Iterable[str] = (),
    ) -> None:
        self.pages = pages
        self.delay = delay
        self.errors = set(errors)
        self.hang = set(hang)
        self.calls: Counter[str] = Counter()
        self.in_flight = 0
        self.max_in_flight = 0
        self._never = asyncio.Event()

    async def fetch(self, url: str) -> str:
        self.calls[url] += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if url in self.hang:
                await self._never.wait()
            if self.delay:
                await asyncio.sleep(self.delay)
            if url in self.errors:
                raise FetchError(url, "connection reset")
            return self.pages.get(url, "")
        finally:
            self.in_flight -= 1


def links_page(*hrefs: str) -> str:
    """Build a small HTML page with one anchor per href."""
    anchors = "".join(f'<a href="{h}">{h}</a>' for h in hrefs)
    return f"<html><body>{anchors}</body></html>"


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


def example_site(extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """The reference site: seed links to /about, /contact/, an external page and a mailto."""
    pages = {
        SEED: links_page(
            "/about",
            "https://example.com/contact/",
            "https://other.com/x",
            "mailto:a@b.com",
        ),
        f"{SEED}/about": links_page("/"),
        f"{SEED}/contact": "<html><body>contact</body></html>",
    }
    pages.update(extra or {})
    return pages
