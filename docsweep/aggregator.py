# File: docsweep/aggregator.py
"""docsweep.aggregator: builds the crawl report from statistics and stored metadata."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, TypedDict

from docsweep.crawler.metadata import MetadataStore
from docsweep.crawler.models import CrawlStatistics


class SessionInfo(TypedDict, total=False):
    """State of an unfinished crawl found in the metadata file."""

    active: bool
    start_url: str
    visited: int
    queued: int
    session_started_at: str
    last_saved_at: str


class PageInfo(TypedDict, total=False):
    """One stored page."""

    url: str
    category: str
    storage_path: str
    depth: int
    last_crawled_at: str


def _iso(value: Any) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(slots=True)
class CrawlReport:
    """Summary of a crawl: counters, timings, pages per category, pending session."""

    stats: Dict[str, Any] = field(default_factory=dict)
    categories: Dict[str, int] = field(default_factory=dict)
    page_count: int = 0
    last_crawl_at: Optional[str] = None
    session: Optional[SessionInfo] = None
    pages: List[PageInfo] = field(default_factory=list)

    def json(self, *, pretty: bool = False) -> str:
        """JSON representation of the report."""
        return json.dumps(asdict(self), ensure_ascii=False, indent=2 if pretty else None)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _stats_dict(stats: CrawlStatistics) -> Dict[str, Any]:
    data: Dict[str, Any] = dict(stats.counters())
    data["started_at"] = _iso(stats.started_at)
    data["finished_at"] = _iso(stats.finished_at)
    data["duration"] = stats.duration
    return data


def aggregate_results(
    store: MetadataStore,
    stats: Optional[CrawlStatistics] = None,
    *,
    include_pages: bool = False,
) -> CrawlReport:
    """Collect every part of the report from *store* (and optional live *stats*)."""
    report = CrawlReport(
        stats=_stats_dict(stats if stats is not None else store.stats),
        categories=store.categories(),
        page_count=len(store.fingerprints),
        last_crawl_at=_iso(store.data.last_crawl_at),
    )
    checkpoint = store.checkpoint
    if checkpoint is not None:
        report.session = {
            "active": checkpoint.active,
            "start_url": checkpoint.start_url,
            "visited": len(checkpoint.visited),
            "queued": len(checkpoint.pending_queue),
            "session_started_at": checkpoint.session_started_at.isoformat(),
            "last_saved_at": checkpoint.last_saved_at.isoformat(),
        }
    if include_pages:
        report.pages = [
            {
                "url": fp.url,
                "category": fp.category,
                "storage_path": fp.storage_path,
                "depth": fp.depth,
                "last_crawled_at": fp.last_crawled_at.isoformat(),
            }
            for fp in sorted(store.fingerprints.values(), key=lambda fp: (fp.depth, fp.url))
        ]
    return report


__all__ = ["CrawlReport", "PageInfo", "SessionInfo", "aggregate_results"]
