# === FILE: docsweep/crawler/crawler.py ===
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

from aiohttp import ClientSession

from docsweep.config import CrawlerConfig
from docsweep.crawler.change_detector import ChangeDetector, Stabilizer
from docsweep.crawler.checkpoint import CheckpointManager
from docsweep.crawler.fetcher import HttpRenderer, PageRenderer, render_with_timeout
from docsweep.crawler.frontier import Frontier
from docsweep.crawler.link_extractor import extract_links
from docsweep.crawler.metadata import MetadataStore
from docsweep.crawler.models import CrawlProgress, CrawlStatistics, utc_now
from docsweep.logger import get_logger
from docsweep.parser.html_parser import html_to_markdown
from docsweep.report.summary import summary_lines
from docsweep.utils import artifact_path, extract_category, format_duration, write_text_atomic

__all__ = ("DocCrawler", "ProgressCallback")

ProgressCallback = Callable[[CrawlProgress], None]
Converter = Callable[[str, str], str]
LinkExtractor = Callable[[str, str], List[str]]


class DocCrawler:
    """Sequential, resumable documentation crawler.

    One page at a time is taken from the frontier, rendered under a
    timeout, hashed, compared with its stored fingerprint and, when
    changed, converted and written to disk. Children are enqueued only for
    written pages below the depth limit. A fixed delay separates pages.
    """

    def __init__(
        self,
        config: CrawlerConfig,
        *,
        renderer: Optional[PageRenderer] = None,
        converter: Converter = html_to_markdown,
        link_extractor: LinkExtractor = extract_links,
        stabilizer: Optional[Stabilizer] = None,
        store: Optional[MetadataStore] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config
        self.logger = get_logger("crawler")
        self.renderer = renderer
        self.converter = converter
        self.link_extractor = link_extractor
        self.session: Optional[ClientSession] = None
        self._sleep = sleep

        self.store = store if store is not None else MetadataStore.open(config.metadata_path)
        self.frontier = Frontier(config.allowed_prefixes, config.max_depth)
        self.detector = ChangeDetector(
            self.store.fingerprints,
            force_recrawl=config.force_recrawl,
            enabled=config.change_detection,
            stabilizer=stabilizer,
        )
        self.checkpoints = CheckpointManager(
            self.store,
            start_url=config.start,
            output_directory=config.output_directory,
            interval=config.checkpoint_interval,
        )
        self.resumed = self.checkpoints.restore(self.frontier)
        if not self.resumed:
            self.store.reset_stats()
            self.frontier.seed(config.start)

    async def __aenter__(self) -> DocCrawler:
        if self.renderer is None:
            self.session = ClientSession(
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
            self.renderer = HttpRenderer(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    # ------------------------------------------------------------------ #
    # Main loop
    # ------------------------------------------------------------------ #

    async def crawl(self, on_progress: Optional[ProgressCallback] = None) -> CrawlStatistics:
        """Run until the frontier is empty or ``max_pages`` pages were visited."""
        renderer = self.renderer
        if renderer is None:
            raise RuntimeError("Renderer not initialized")
        cfg = self.config
        Path(cfg.output_directory).mkdir(parents=True, exist_ok=True)

        if self.resumed:
            self.logger.info("Found resumable session")
        else:
            self.logger.info("Starting new crawl")
            self.checkpoints.save(self.frontier)
        self.logger.info("   Start URL: %s", cfg.start)
        self.logger.info("   Max pages: %d, max depth: %d", cfg.max_pages, cfg.max_depth)
        self.logger.info(
            "   Current: %d visited, %d queued", self.frontier.visited_count, len(self.frontier)
        )
        self.logger.info("   Output: %s", cfg.output_directory)

        while self.frontier and self.frontier.visited_count < cfg.max_pages:
            item = self.frontier.next()
            if item is None:
                break
            url, depth = item
            if not self.frontier.mark_visited(url):
                continue

            try:
                await self._crawl_page(renderer, url, depth)
            except Exception as exc:
                self.store.update_stats(_record_error)
                self.logger.error("Error crawling %s: %s", url, exc)

            self.checkpoints.save_if_due(self.frontier)
            self._notify(url, on_progress)
            if self.frontier.visited_count % cfg.progress_log_every == 0:
                self._log_progress()
            await self._sleep(cfg.request_delay)

        stats = self.store.finalize()
        self.checkpoints.complete()
        self.logger.info("Crawl completed!")
        self._log_statistics()
        return stats.model_copy()

    async def _crawl_page(self, renderer: PageRenderer, url: str, depth: int) -> None:
        cfg = self.config
        category = extract_category(url)
        self.logger.info(
            "[%d/%d] depth=%d [%s] %s",
            self.frontier.visited_count,
            cfg.max_pages,
            depth,
            category,
            url,
        )

        html = await render_with_timeout(renderer, url, cfg.page_load_timeout)
        content_hash = self.detector.digest(html)
        path = artifact_path(cfg.output_directory, url, cfg.artifact_extension)

        if not self.detector.should_recrawl(url, content_hash, path):
            self.logger.info("   No changes detected, skipping")
            self.store.update_stats(_record_skip)
            return

        artifact = self.converter(html, url)
        # new means no stored fingerprint, which survives a crash together with the stats
        is_new = self.store.get_fingerprint(url) is None
        write_text_atomic(path, artifact)
        self.store.update_fingerprint(
            url,
            category=category,
            storage_path=path,
            content_hash=content_hash,
            depth=depth,
        )

        if depth < cfg.max_depth:
            links = self.link_extractor(html, url)
            added = self.frontier.push_many(links, depth + 1)
            self.logger.debug("   %d links found, %d enqueued", len(links), added)

        if is_new:
            self.store.update_stats(_record_new)
            self.logger.info("   Saved new page: %s", path.name)
        else:
            self.store.update_stats(_record_update)
            self.logger.info("   Updated page: %s", path.name)

    # ------------------------------------------------------------------ #
    # Reporting
    # ------------------------------------------------------------------ #

    def _notify(self, url: str, on_progress: Optional[ProgressCallback]) -> None:
        if on_progress is None:
            return
        progress = CrawlProgress(
            current_url=url,
            visited_count=self.frontier.visited_count,
            total_pages=self.config.max_pages,
            stats=self.store.snapshot_stats(),
        )
        try:
            on_progress(progress)
        except Exception as exc:
            self.logger.warning("Progress callback failed: %s", exc)

    def _log_progress(self) -> None:
        stats = self.store.stats
        visited = self.frontier.visited_count
        elapsed = (utc_now() - stats.started_at).total_seconds() if stats.started_at else 0.0
        speed = visited / elapsed if elapsed > 0 else 0.0
        remaining = max(self.config.max_pages - visited, 0)
        eta = remaining / speed if speed > 0 else 0.0
        self.logger.info("Progress update [%d/%d]:", visited, self.config.max_pages)
        self.logger.info("   Queue: %d pending URLs", len(self.frontier))
        self.logger.info(
            "   New: %d | Updated: %d | Skipped: %d | Errors: %d",
            stats.new_pages,
            stats.updated_pages,
            stats.skipped_pages,
            stats.errors,
        )
        self.logger.info(
            "   Speed: %.2f pages/sec, elapsed %s, ETA %s",
            speed,
            format_duration(elapsed),
            format_duration(eta),
        )

    def _log_statistics(self) -> None:
        for line in summary_lines(self.store.stats, self.config.output_directory):
            self.logger.info(line)


def _record_error(stats: CrawlStatistics) -> None:
    stats.errors += 1
    stats.total_pages += 1


def _record_skip(stats: CrawlStatistics) -> None:
    stats.skipped_pages += 1
    stats.total_pages += 1


def _record_new(stats: CrawlStatistics) -> None:
    stats.new_pages += 1
    stats.total_pages += 1


def _record_update(stats: CrawlStatistics) -> None:
    stats.updated_pages += 1
    stats.total_pages += 1
