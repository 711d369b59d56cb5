# === FILE: site_crawler/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from typing import Dict, List, Optional

from site_crawler.config import CrawlerConfig
from site_crawler.crawler.fetcher import ContentFetcher, FetchError
from site_crawler.crawler.link_extractor import LinkResolver
from site_crawler.crawler.models import CrawlResult, CrawlStats, UnitState
from site_crawler.crawler.pool import WorkerPool
from site_crawler.crawler.registry import VisitedRegistry
from site_crawler.crawler.shutdown import DEFAULT_GRACE_PERIOD, ShutdownController
from site_crawler.crawler.urls import domain_of, normalize_url, validate_seed
from site_crawler.logger import get_logger

__all__ = ("SiteCrawler", "DEFAULT_POOL_SIZE")

DEFAULT_POOL_SIZE = 10


class SiteCrawler:
    """
    Crawl coordinator for one site.

    Every URL passes the registry's admission gate exactly once; admitted
    URLs are handed to the worker pool, whose units fetch the page, resolve
    its links and offer them back through :meth:`offer`. The crawl ends when
    the pool runs dry.
    """

    def __init__(
        self,
        seed_url: str,
        fetcher: ContentFetcher,
        *,
        pool_size: int = DEFAULT_POOL_SIZE,
        grace_period: float = DEFAULT_GRACE_PERIOD,
        registry: Optional[VisitedRegistry] = None,
    ) -> None:
        self.seed = validate_seed(seed_url)
        self.domain = domain_of(self.seed)
        self.fetcher = fetcher
        self.registry = registry if registry is not None else VisitedRegistry()
        self.resolver = LinkResolver(self.domain, self.registry)
        self.pool = WorkerPool(pool_size, self._crawl_unit)
        self.controller = ShutdownController(self.pool, grace_period)
        self.stats = CrawlStats()
        self.logger = get_logger()
        self._states: Dict[str, UnitState] = {}
        self._started = False

    @classmethod
    def from_config(cls, seed_url: str, fetcher: ContentFetcher, config: CrawlerConfig) -> SiteCrawler:
        return cls(
            seed_url,
            fetcher,
            pool_size=config.pool_size,
            grace_period=config.grace_period,
        )

    async def __aenter__(self) -> SiteCrawler:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.controller.cancel()
        await self.shutdown()

    # -- admission & dispatch ------------------------------------------------

    def offer(self, url: str) -> bool:
        """Admit *url* and dispatch it; False for duplicates and dropped units."""
        normalized = normalize_url(url)
        if not self.registry.add_if_absent(normalized):
            self.stats.duplicates += 1
            return False
        self.stats.admitted += 1
        self._states[normalized] = UnitState.ADMITTED
        if not self.pool.submit(normalized):
            # stays in the registry: a dropped URL is still "seen"
            self.stats.dropped += 1
            self._states[normalized] = UnitState.DROPPED
            self.logger.debug("Pool closed, dropping %s", normalized)
            return False
        self.stats.dispatched += 1
        self._states[normalized] = UnitState.DISPATCHED
        return True

    async def _crawl_unit(self, url: str) -> None:
        self.logger.info("Crawling: %s", url)
        try:
            content = await self.fetcher.fetch(url)
            links = self.resolver.extract_links(content, url)
        except FetchError as e:
            self._fail(url)
            self.logger.error("Failed to crawl %s: %s", url, e.reason)
            return
        except Exception:
            self._fail(url)
            self.logger.exception("Failed to crawl %s", url)
            return
        for link in links:
            self.offer(link)
        self.stats.completed += 1
        self._states[url] = UnitState.COMPLETED

    def _fail(self, url: str) -> None:
        self.stats.failed += 1
        self._states[url] = UnitState.FAILED

    # -- lifecycle -----------------------------------------------------------

    def start(self) -> None:
        """Start the workers and dispatch the seed without waiting."""
        if self._started:
            return
        self._started = True
        self.logger.info("Start crawl: %s (domain %s)", self.seed, self.domain)
        self.stats.started_at = time.monotonic()
        self.pool.start()
        self.offer(self.seed)

    async def wait(self, timeout: Optional[float] = None) -> None:
        """
        Wait for quiescence: no queued or running units left.

        Raises ``asyncio.TimeoutError`` after *timeout* seconds with the pool
        still running; cancelling the waiter cancels the pool.
        """
        try:
            await asyncio.wait_for(self.pool.join(), timeout=timeout)
        except asyncio.CancelledError:
            self.controller.cancel()
            raise

    async def run(self, deadline: Optional[float] = None) -> CrawlResult:
        """
        Crawl until the in-domain link graph is exhausted and return the report.

        With a *deadline* the crawl is stopped after that many seconds: the pool
        is shut down (grace period, then forced cancel) and the report holds
        whatever was visited so far.
        """
        self.start()
        try:
            await self.wait(deadline)
        except asyncio.TimeoutError:
            self.logger.warning("Crawl deadline of %.1f s reached, stopping", deadline)
        await self.shutdown()
        return self.result()

    async def shutdown(self) -> bool:
        """Drain the pool within the grace period; False if it was force-cancelled."""
        drained = await self.controller.shutdown()
        if self.stats.finished_at is None:
            self.stats.finished_at = time.monotonic()
            self._log_summary(drained)
        return drained

    # -- reporting -----------------------------------------------------------

    @property
    def forced(self) -> bool:
        return self.controller.forced

    def state_of(self, url: str) -> UnitState:
        return self._states.get(normalize_url(url), UnitState.UNSEEN)

    def sorted_links(self) -> List[str]:
        return self.registry.sorted_snapshot()

    def result(self) -> CrawlResult:
        return CrawlResult(
            seed=self.seed,
            urls=self.sorted_links(),
            stats=self.stats,
            drained=not self.forced,
        )

    def _log_summary(self, drained: bool) -> None:
        duration = self.stats.duration
        self.logger.info(
            "Finished: %d URL(s) in %.2f s (%.2f URL/s), %d failed, %d dropped",
            len(self.registry),
            duration,
            self.stats.completed / duration if duration else 0,
            self.stats.failed,
            self.stats.dropped,
        )
        if not drained:
            self.logger.warning("Crawl was cut short after the grace period")
