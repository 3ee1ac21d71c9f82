# docsweep/crawler/frontier.py
"""
Breadth-first crawl frontier with depth bound and deduplication.

A URL is keyed by its normalized form. The pending queue never holds two
entries with the same key and never holds a key that was already visited:
``_enqueued`` mirrors the keys currently in the queue.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, List, Optional, Sequence, Set, Tuple

from docsweep.crawler.models import QueuedURL
from docsweep.logger import get_logger
from docsweep.utils import is_allowed, normalize_url

log = get_logger("frontier")

QueueItem = Tuple[str, int]


class Frontier:
    """FIFO queue of ``(url, depth)`` plus the visited set."""

    def __init__(self, allowed_prefixes: Sequence[str], max_depth: int) -> None:
        self.allowed_prefixes: Tuple[str, ...] = tuple(allowed_prefixes)
        self.max_depth = max_depth
        self._queue: Deque[QueueItem] = deque()
        self._enqueued: Set[str] = set()
        self._visited: Set[str] = set()

    # ------------------------------------------------------------------ #
    # Queue operations
    # ------------------------------------------------------------------ #

    def seed(self, url: str, depth: int = 0) -> bool:
        """Enqueue the start URL; the allow-list does not apply to it."""
        return self._append(normalize_url(url), depth)

    def push(self, url: str, depth: int) -> bool:
        """Enqueue *url* if it is allowed, within depth and not seen yet."""
        if depth > self.max_depth:
            log.debug("Depth %d over limit, dropping %s", depth, url)
            return False
        if not is_allowed(url, self.allowed_prefixes):
            log.debug("Not allow-listed: %s", url)
            return False
        return self._append(normalize_url(url), depth)

    def push_many(self, urls: Iterable[str], depth: int) -> int:
        """Push every URL at *depth*; return how many were accepted."""
        return sum(1 for url in urls if self.push(url, depth))

    def next(self) -> Optional[QueueItem]:
        """Remove and return the head of the queue, or None when empty."""
        if not self._queue:
            return None
        url, depth = self._queue.popleft()
        self._enqueued.discard(url)
        return url, depth

    def _append(self, key: str, depth: int) -> bool:
        if key in self._visited or key in self._enqueued:
            return False
        self._queue.append((key, depth))
        self._enqueued.add(key)
        return True

    # ------------------------------------------------------------------ #
    # Visited set
    # ------------------------------------------------------------------ #

    def mark_visited(self, url: str) -> bool:
        """Record *url* as visited; False if it already was."""
        key = normalize_url(url)
        if key in self._visited:
            return False
        self._visited.add(key)
        self._enqueued.discard(key)
        return True

    def is_visited(self, url: str) -> bool:
        return normalize_url(url) in self._visited

    # ------------------------------------------------------------------ #
    # Introspection / checkpoint support
    # ------------------------------------------------------------------ #

    @property
    def visited(self) -> frozenset[str]:
        return frozenset(self._visited)

    @property
    def visited_count(self) -> int:
        return len(self._visited)

    def pending(self) -> List[QueuedURL]:
        """Copy of the queue in FIFO order."""
        return [QueuedURL(url=url, depth=depth) for url, depth in self._queue]

    def restore(self, visited: Iterable[str], pending: Iterable[QueuedURL]) -> None:
        """Replace the state with a saved session (visited first, then queue)."""
        self._visited = set(visited)
        self._queue.clear()
        self._enqueued.clear()
        for item in pending:
            self._append(item.url, item.depth)

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and normalize_url(url) in self._enqueued


__all__ = ["Frontier", "QueueItem"]
