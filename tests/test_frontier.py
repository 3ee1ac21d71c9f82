# File: tests/test_frontier.py
from __future__ import annotations

import pytest

from docsweep.crawler.frontier import Frontier
from docsweep.crawler.models import QueuedURL
from helpers import BASE

PREFIXES = ("https://docs.example.com",)


@pytest.fixture()
def frontier() -> Frontier:
    f = Frontier(PREFIXES, max_depth=2)
    f.seed(f"{BASE}/kit")
    return f


def test_seed_ignores_allow_list():
    f = Frontier(PREFIXES, max_depth=2)
    assert f.seed("https://elsewhere.org/start")
    assert len(f) == 1


def test_variants_of_one_page_enqueue_once(frontier):
    variants = [
        f"{BASE}/kit/views",
        f"{BASE}/kit/views/",
        f"{BASE}/kit/views#overview",
        f"{BASE}/kit/views?lang=en",
        f"{BASE}/kit/views/?lang=en#top",
    ]
    assert frontier.push_many(variants, 1) == 1
    assert [q.url for q in frontier.pending()] == [f"{BASE}/kit", f"{BASE}/kit/views"]


def test_visited_url_is_not_enqueued_again(frontier):
    url, depth = frontier.next()
    assert frontier.mark_visited(url)
    assert not frontier.push(url + "/", 1)
    assert not frontier.push(url + "#x", 1)
    assert len(frontier) == 0


def test_mark_visited_twice(frontier):
    assert frontier.mark_visited(f"{BASE}/kit")
    assert not frontier.mark_visited(f"{BASE}/kit/")
    assert frontier.is_visited(f"{BASE}/kit#top")
    assert frontier.visited_count == 1


@pytest.mark.parametrize(
    "url",
    [
        "https://elsewhere.org/documentation/kit",
        "http://docs.example.com/documentation/kit/x",
        "ftp://docs.example.com/file",
        "https://docs.example.com.evil.net/page",
    ],
)
def test_push_rejects_urls_outside_prefixes(frontier, url):
    assert not frontier.push(url, 1)
    assert len(frontier) == 1


def test_push_respects_depth_limit(frontier):
    assert frontier.push(f"{BASE}/a", 2)
    assert not frontier.push(f"{BASE}/b", 3)
    assert f"{BASE}/a" in frontier
    assert f"{BASE}/b" not in frontier


def test_fifo_order_gives_non_decreasing_depths(frontier):
    frontier.push_many([f"{BASE}/a", f"{BASE}/b"], 1)
    order = []
    while frontier:
        url, depth = frontier.next()
        frontier.mark_visited(url)
        order.append(depth)
        if url.endswith("/a"):
            frontier.push_many([f"{BASE}/a/1", f"{BASE}/a/2"], depth + 1)
    assert order == [0, 1, 1, 2, 2]
    assert frontier.next() is None


def test_next_releases_enqueued_key(frontier):
    url, _ = frontier.next()
    assert url not in frontier
    # dequeued but not yet visited: it may be queued again
    assert frontier.push(url, 1)


def test_restore_replaces_state(frontier):
    frontier.restore(
        {f"{BASE}/kit", f"{BASE}/kit/views"},
        [QueuedURL(url=f"{BASE}/kit/text", depth=2), QueuedURL(url=f"{BASE}/kit/text", depth=2)],
    )
    assert frontier.visited == {f"{BASE}/kit", f"{BASE}/kit/views"}
    assert frontier.pending() == [QueuedURL(url=f"{BASE}/kit/text", depth=2)]
    assert not frontier.push(f"{BASE}/kit/views", 1)


def test_restore_drops_queued_urls_already_visited():
    f = Frontier(PREFIXES, max_depth=3)
    f.restore({f"{BASE}/a"}, [QueuedURL(url=f"{BASE}/a", depth=1), QueuedURL(url=f"{BASE}/b", depth=1)])
    assert [q.url for q in f.pending()] == [f"{BASE}/b"]
