# site_crawler/crawler/__init__.py
"""Crawl core: URL rules, link resolution, fetching, registry, pool and coordinator."""
from site_crawler.crawler.crawler import SiteCrawler
from site_crawler.crawler.fetcher import ContentFetcher, FetchError, HttpFetcher
from site_crawler.crawler.link_extractor import LinkResolver
from site_crawler.crawler.models import CrawlResult, CrawlStats, UnitState
from site_crawler.crawler.registry import VisitedRegistry
from site_crawler.crawler.urls import InvalidSeedError, domain_of, in_scope, normalize_url

__all__ = [
    "SiteCrawler",
    "ContentFetcher",
    "FetchError",
    "HttpFetcher",
    "LinkResolver",
    "CrawlResult",
    "CrawlStats",
    "UnitState",
    "VisitedRegistry",
    "InvalidSeedError",
    "domain_of",
    "in_scope",
    "normalize_url",
]
