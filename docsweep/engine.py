# File: docsweep/engine.py
"""docsweep.engine: orchestration layer that runs a crawl and builds its report."""

from __future__ import annotations

import asyncio
from typing import Optional

from docsweep.aggregator import CrawlReport, aggregate_results
from docsweep.config import CrawlerConfig, load_config
from docsweep.crawler.change_detector import Stabilizer
from docsweep.crawler.crawler import DocCrawler, ProgressCallback
from docsweep.crawler.fetcher import PageRenderer
from docsweep.crawler.metadata import MetadataStore
from docsweep.crawler.models import CrawlStatistics
from docsweep.logger import logger

__all__ = ["Engine", "start_crawl"]


async def start_crawl(
    cfg: CrawlerConfig,
    on_progress: Optional[ProgressCallback] = None,
    *,
    renderer: Optional[PageRenderer] = None,
    stabilizer: Optional[Stabilizer] = None,
) -> CrawlStatistics:
    """
    Run the crawler inside its context and return the final statistics.

    Parameters
    ----------
    cfg : CrawlerConfig
        Crawl configuration.
    on_progress : callable, optional
        Called with a ``CrawlProgress`` after every page.
    renderer : PageRenderer, optional
        Page renderer; an aiohttp-based one is created when omitted.
    """
    async with DocCrawler(cfg, renderer=renderer, stabilizer=stabilizer) as crawler:
        return await crawler.crawl(on_progress)


class Engine:
    """Facade for the CLI and tests: config loading, crawl run and report."""

    @staticmethod
    def load_config(path: Optional[str]) -> CrawlerConfig:
        """Load the configuration from YAML/JSON (``configs/default.yaml`` when None)."""
        return load_config(path)

    def __init__(self, config: CrawlerConfig) -> None:
        self.config = config

    def run(self, on_progress: Optional[ProgressCallback] = None) -> CrawlReport:
        """Run the crawl to completion and return the aggregated report."""
        logger.info("Starting crawl of %s", self.config.start)
        try:
            stats = asyncio.run(start_crawl(self.config, on_progress))
        except Exception as exc:
            logger.error("Crawl failed: %s", exc)
            raise
        return self.report(stats)

    def report(self, stats: Optional[CrawlStatistics] = None, *, include_pages: bool = False) -> CrawlReport:
        """Build a report from the metadata file on disk."""
        store = MetadataStore.open(self.config.metadata_path)
        return aggregate_results(store, stats, include_pages=include_pages)
