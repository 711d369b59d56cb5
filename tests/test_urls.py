# File: tests/test_urls.py
import logging

import pytest

from site_crawler.crawler.urls import (
    InvalidSeedError,
    domain_of,
    in_scope,
    normalize_url,
    validate_seed,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("https://example.com//a///b/", "https://example.com/a/b"),
        ("https://example.com", "https://example.com"),
        ("https://example.com/", "https://example.com/"),
        ("https://example.com///", "https://example.com/"),
        ("https://example.com/about/", "https://example.com/about"),
        ("https://example.com/a?x=1#frag", "https://example.com/a"),
        ("HTTPS://Example.COM/Path", "https://example.com/Path"),
        ("http://user:pw@example.com/a", "http://example.com/a"),
        ("http://localhost:8080//x/", "http://localhost:8080/x"),
        ("http://[::1]:8000/a/", "http://[::1]:8000/a"),
        ("http://example.com:80/a", "http://example.com/a"),
        ("https://example.com:443/", "https://example.com/"),
        ("https://example.com:80/a", "https://example.com:80/a"),
    ],
)
def test_normalize_url(raw, expected):
    assert normalize_url(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "https://example.com//a///b/",
        "https://example.com",
        "https://example.com/",
        "http://localhost:8080/x//y/",
        "https://example.com/a/b/c?q=1",
        "not a url",
        "/relative/path",
    ],
)
def test_normalize_is_idempotent(raw):
    once = normalize_url(raw)
    assert normalize_url(once) == once


@pytest.mark.parametrize(
    "malformed",
    ["example.com/page", "/about", "http://", "http://[::1/x", "http://host:99999/", ""],
)
def test_malformed_url_returned_unchanged(malformed):
    assert normalize_url(malformed) == malformed


def test_malformed_url_is_logged(caplog):
    caplog.set_level(logging.WARNING, logger="SiteCrawler")
    logger = logging.getLogger("SiteCrawler")
    logger.addHandler(caplog.handler)
    try:
        normalize_url("no-scheme-here")
    finally:
        logger.removeHandler(caplog.handler)
    assert any("Malformed URL" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://example.com/a", "example.com"),
        ("https://EXAMPLE.com:8443/a", "example.com"),
        ("https://www.example.com/", "www.example.com"),
        ("http://[::1]:8000/", "::1"),
        ("garbage", ""),
        ("http://[::1/broken", ""),
        ("", ""),
    ],
)
def test_domain_of(url, expected):
    assert domain_of(url) == expected


def test_in_scope_is_exact_host_equality():
    assert in_scope("https://example.com/x", "example.com")
    assert in_scope("http://example.com:8080/x", "example.com")
    assert not in_scope("https://www.example.com/x", "example.com")
    assert not in_scope("https://sub.example.com/x", "example.com")
    assert not in_scope("https://other.com/x", "example.com")
    assert not in_scope("mailto:a@example.com", "example.com")


def test_validate_seed_returns_normalized():
    assert validate_seed("  https://example.com//docs/ ") == "https://example.com/docs"


@pytest.mark.parametrize("seed", ["", "example.com", "ftp://example.com/", "http://", "mailto:a@b.com"])
def test_validate_seed_rejects_unusable_urls(seed):
    with pytest.raises(InvalidSeedError):
        validate_seed(seed)


def test_invalid_seed_error_is_value_error():
    assert issubclass(InvalidSeedError, ValueError)


def test_default_port_is_one_identity():
    assert normalize_url("http://example.com:80/a/") == normalize_url("http://example.com/a")
    assert normalize_url("https://example.com:443//b") == normalize_url("https://example.com/b")
