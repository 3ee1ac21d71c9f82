# docsweep/crawler/checkpoint.py
"""
Session checkpoints: periodic persistence of the frontier so that an
interrupted crawl resumes where it stopped.

The manager copies frontier state into a :class:`SessionCheckpoint` and
asks the metadata store to save. Saving is best-effort: I/O and
serialization failures are logged and reported as ``False``.
"""
from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Union

from docsweep.crawler.frontier import Frontier
from docsweep.crawler.metadata import MetadataStore
from docsweep.crawler.models import SessionCheckpoint, utc_now
from docsweep.logger import get_logger

log = get_logger("checkpoint")


class CheckpointManager:
    """Observes a :class:`Frontier` and persists snapshots of it."""

    def __init__(
        self,
        store: MetadataStore,
        *,
        start_url: str,
        output_directory: Union[str, Path],
        interval: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.store = store
        self.start_url = start_url
        self.output_directory = str(output_directory)
        self.interval = interval
        self._clock = clock
        self._last_save = clock()
        self.failures = 0

    # ------------------------------------------------------------------ #
    # Resume
    # ------------------------------------------------------------------ #

    def restore(self, frontier: Frontier) -> bool:
        """Seed *frontier* from an active checkpoint; False if there is none."""
        saved = self.store.checkpoint
        if saved is None or not saved.active:
            return False
        frontier.restore(saved.visited, saved.pending_queue)

        def _keep_start(stats) -> None:
            if stats.started_at is None:
                stats.started_at = saved.session_started_at

        self.store.update_stats(_keep_start)
        log.info(
            "Resuming session: %d visited, %d queued", len(saved.visited), len(saved.pending_queue)
        )
        return True

    # ------------------------------------------------------------------ #
    # Snapshots
    # ------------------------------------------------------------------ #

    def snapshot(self, frontier: Frontier) -> SessionCheckpoint:
        """Copy frontier state into the store's in-memory checkpoint."""
        previous = self.store.checkpoint
        started = (
            previous.session_started_at
            if previous is not None and previous.active
            else self.store.stats.started_at or utc_now()
        )
        checkpoint = SessionCheckpoint(
            visited=set(frontier.visited),
            pending_queue=frontier.pending(),
            start_url=self.start_url,
            output_directory=self.output_directory,
            session_started_at=started,
            last_saved_at=utc_now(),
            active=True,
        )
        self.store.set_checkpoint(checkpoint)
        return checkpoint

    def save(self, frontier: Frontier) -> bool:
        """Snapshot and persist now."""
        checkpoint = self.snapshot(frontier)
        if not self._persist():
            return False
        log.info(
            "Saved session state: %d visited, %d queued",
            len(checkpoint.visited),
            len(checkpoint.pending_queue),
        )
        return True

    def save_if_due(self, frontier: Frontier) -> bool:
        """Refresh the in-memory snapshot; persist when the interval elapsed."""
        if self._clock() - self._last_save >= self.interval:
            return self.save(frontier)
        self.snapshot(frontier)
        return False

    def complete(self) -> bool:
        """Clear the checkpoint and persist the final metadata."""
        self.store.clear_checkpoint()
        return self._persist()

    def _persist(self) -> bool:
        try:
            self.store.save()
        except (OSError, ValueError, TypeError) as exc:
            self.failures += 1
            log.warning("Checkpoint save to %s failed: %s", self.store.path, exc)
            return False
        finally:
            self._last_save = self._clock()
        return True


__all__ = ["CheckpointManager"]
