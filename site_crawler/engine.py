# File: site_crawler/engine.py
"""site_crawler.engine: слой оркестрации, запуск обхода одного сайта."""

from __future__ import annotations

from typing import Optional

from site_crawler.config import CrawlerConfig
from site_crawler.crawler.crawler import SiteCrawler
from site_crawler.crawler.fetcher import HttpFetcher
from site_crawler.crawler.models import CrawlResult
from site_crawler.crawler.urls import validate_seed
from site_crawler.logger import logger

__all__ = ["start_crawl"]


async def start_crawl(
    seed_url: str,
    cfg: Optional[CrawlerConfig] = None,
    deadline: Optional[float] = None,
) -> CrawlResult:
    """
    Обходит сайт от seed_url до исчерпания ссылок своего домена.

    Parameters
    ----------
    seed_url : str
        Стартовый URL; невалидный URL вызывает InvalidSeedError до начала работы.
    cfg : CrawlerConfig, optional
        Размер пула, таймауты и User-Agent; по умолчанию встроенные константы.
    deadline : float, optional
        Ограничение времени обхода (секунд). По истечении пул останавливается
        с grace-периодом, а отчёт содержит уже посещённые URL (drained=False
        при принудительной отмене).

    Returns
    -------
    CrawlResult
        Отсортированный список посещённых URL и статистика.
    """
    validate_seed(seed_url)
    cfg = cfg or CrawlerConfig()
    logger.info("Starting crawl of %s with %d worker(s)", seed_url, cfg.pool_size)
    async with HttpFetcher(cfg) as fetcher:
        crawler = SiteCrawler.from_config(seed_url, fetcher, cfg)
        async with crawler:
            return await crawler.run(deadline)

