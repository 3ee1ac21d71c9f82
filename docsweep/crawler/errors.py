# docsweep/crawler/errors.py
"""
Exceptions raised while crawling a single page.
"""
from __future__ import annotations


class CrawlerError(Exception):
    """Base class for page-level crawl failures."""


class PageTimeoutError(CrawlerError):
    """The render did not finish within the page-load timeout."""

    def __init__(self, url: str, timeout: float) -> None:
        super().__init__(f"Page load timeout after {timeout:.1f}s: {url}")
        self.url = url
        self.timeout = timeout


class RenderError(CrawlerError):
    """The renderer could not produce page text."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to render {url}: {reason}")
        self.url = url
        self.reason = reason


class InvalidContentError(CrawlerError):
    """The renderer returned something that is not page text."""


__all__ = ["CrawlerError", "PageTimeoutError", "RenderError", "InvalidContentError"]
