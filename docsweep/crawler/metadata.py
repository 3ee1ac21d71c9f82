# docsweep/crawler/metadata.py
"""
Metadata store: per-URL fingerprints, statistics and the session checkpoint.

Mutation helpers only touch the in-memory copy; nothing reaches the disk
until :meth:`MetadataStore.save` is called. Saves always rewrite the whole
file through a temporary sibling and an atomic rename.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from docsweep.crawler.models import (
    CrawlMetadata,
    CrawlStatistics,
    PageFingerprint,
    SessionCheckpoint,
    utc_now,
)
from docsweep.logger import get_logger
from docsweep.utils import write_text_atomic

log = get_logger("metadata")


class MetadataStore:
    """Owns the :class:`CrawlMetadata` aggregate for one metadata file."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self.data = CrawlMetadata()

    @classmethod
    def open(cls, path: Union[str, Path]) -> "MetadataStore":
        """Create a store for *path* and load it."""
        store = cls(path)
        store.load()
        return store

    # ------------------------------------------------------------------ #
    # Persistence
    # ------------------------------------------------------------------ #

    def load(self) -> CrawlMetadata:
        """Read the file, falling back to empty metadata when absent or corrupt."""
        if not self.path.exists():
            self.data = CrawlMetadata()
            return self.data
        try:
            self.data = CrawlMetadata.model_validate_json(self.path.read_bytes())
        except (OSError, ValidationError, ValueError) as exc:
            log.warning("Failed to load metadata from %s, starting fresh: %s", self.path, exc)
            self.data = CrawlMetadata()
        else:
            log.info("Loaded existing metadata: %d pages", len(self.data.fingerprints))
        return self.data

    def save(self) -> Path:
        """Serialize the whole structure atomically to :attr:`path`."""
        return write_text_atomic(self.path, self.data.model_dump_json(indent=2))

    # ------------------------------------------------------------------ #
    # Fingerprints
    # ------------------------------------------------------------------ #

    @property
    def fingerprints(self) -> Mapping[str, PageFingerprint]:
        return self.data.fingerprints

    def get_fingerprint(self, url: str) -> Optional[PageFingerprint]:
        return self.data.fingerprints.get(url)

    def update_fingerprint(
        self,
        url: str,
        *,
        category: str,
        storage_path: Union[str, Path],
        content_hash: str,
        depth: int,
        crawled_at: Optional[datetime] = None,
    ) -> PageFingerprint:
        """Insert or overwrite the fingerprint for *url*."""
        fingerprint = PageFingerprint(
            url=url,
            category=category,
            storage_path=str(storage_path),
            content_hash=content_hash,
            depth=depth,
            last_crawled_at=crawled_at or utc_now(),
        )
        self.data.fingerprints[url] = fingerprint
        return fingerprint

    def categories(self) -> Dict[str, int]:
        """Number of stored pages per category."""
        counts: Dict[str, int] = {}
        for fp in self.data.fingerprints.values():
            counts[fp.category] = counts.get(fp.category, 0) + 1
        return dict(sorted(counts.items()))

    # ------------------------------------------------------------------ #
    # Statistics
    # ------------------------------------------------------------------ #

    @property
    def stats(self) -> CrawlStatistics:
        return self.data.stats

    def snapshot_stats(self) -> CrawlStatistics:
        """Detached copy for observers."""
        return self.data.stats.model_copy()

    def update_stats(self, update: Callable[[CrawlStatistics], None]) -> CrawlStatistics:
        """Single writer for statistics: apply *update* to the live object."""
        update(self.data.stats)
        return self.data.stats

    def reset_stats(self, started_at: Optional[datetime] = None) -> CrawlStatistics:
        self.data.stats = CrawlStatistics(started_at=started_at or utc_now())
        return self.data.stats

    def finalize(self, finished_at: Optional[datetime] = None) -> CrawlStatistics:
        """Stamp the end of a run on the statistics and the metadata."""
        now = finished_at or utc_now()
        self.data.stats.finished_at = now
        self.data.last_crawl_at = now
        return self.data.stats

    # ------------------------------------------------------------------ #
    # Session checkpoint
    # ------------------------------------------------------------------ #

    @property
    def checkpoint(self) -> Optional[SessionCheckpoint]:
        return self.data.checkpoint

    def has_active_session(self) -> bool:
        return self.data.checkpoint is not None and self.data.checkpoint.active

    def set_checkpoint(self, checkpoint: SessionCheckpoint) -> None:
        self.data.checkpoint = checkpoint

    def clear_checkpoint(self) -> None:
        self.data.checkpoint = None


__all__ = ["MetadataStore"]
