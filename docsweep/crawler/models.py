# docsweep/crawler/models.py
"""
Data models for the DocSweep crawler.

Everything persisted in the metadata file is a pydantic model so that the
whole structure round-trips through JSON in one call.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_serializer


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PageFingerprint(BaseModel):
    """Stored summary of a crawled page used for change detection."""
    model_config = ConfigDict(frozen=True)

    url: str
    category: str
    storage_path: str
    content_hash: str
    depth: int = Field(ge=0)
    last_crawled_at: datetime = Field(default_factory=utc_now)


class CrawlStatistics(BaseModel):
    """Aggregate counters of a crawl run."""

    total_pages: int = 0
    new_pages: int = 0
    updated_pages: int = 0
    skipped_pages: int = 0
    errors: int = 0
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def duration(self) -> Optional[float]:
        """Run length in seconds, once both timestamps are known."""
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    def counters(self) -> Dict[str, int]:
        return {
            "total_pages": self.total_pages,
            "new_pages": self.new_pages,
            "updated_pages": self.updated_pages,
            "skipped_pages": self.skipped_pages,
            "errors": self.errors,
        }


class QueuedURL(BaseModel):
    """A pending frontier entry."""
    model_config = ConfigDict(frozen=True)

    url: str
    depth: int = Field(ge=0)


class SessionCheckpoint(BaseModel):
    """Snapshot of an in-flight crawl, present only while a crawl runs."""

    visited: Set[str] = Field(default_factory=set)
    pending_queue: List[QueuedURL] = Field(default_factory=list)
    start_url: str
    output_directory: str
    session_started_at: datetime = Field(default_factory=utc_now)
    last_saved_at: datetime = Field(default_factory=utc_now)
    active: bool = True

    @field_serializer("visited")
    def _sorted_visited(self, visited: Set[str]) -> List[str]:
        return sorted(visited)


class CrawlMetadata(BaseModel):
    """On-disk aggregate: fingerprints, statistics and the optional checkpoint."""
    model_config = ConfigDict(extra="ignore")

    fingerprints: Dict[str, PageFingerprint] = Field(default_factory=dict)
    stats: CrawlStatistics = Field(default_factory=CrawlStatistics)
    last_crawl_at: Optional[datetime] = None
    checkpoint: Optional[SessionCheckpoint] = None


@dataclass(slots=True)
class CrawlProgress:
    """Observational snapshot handed to the progress callback after each page."""

    current_url: str
    visited_count: int
    total_pages: int
    stats: CrawlStatistics

    @property
    def percentage(self) -> float:
        if self.total_pages <= 0:
            return 0.0
        return self.visited_count / self.total_pages * 100


__all__ = [
    "PageFingerprint",
    "CrawlStatistics",
    "QueuedURL",
    "SessionCheckpoint",
    "CrawlMetadata",
    "CrawlProgress",
    "utc_now",
]
