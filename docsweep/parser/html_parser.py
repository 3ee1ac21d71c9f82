# === FILE: docsweep/parser/html_parser.py ===
"""HTML parsing and Markdown conversion for DocSweep.

The crawler stores every page as a Markdown artifact. Conversion keeps the
main documentation body and drops navigation chrome:

* title: first ``<h1>`` text, else ``<title>``, else ``""``.
* main: ``<main>``, ``<article>``, ``div[role=main]``, ``div[role=document]`` or ``<body>``,
  whichever matches first with visible text.

The Markdown starts with a small front matter block (``source`` and
``crawled``) so the artifact can be traced back to its URL.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from bs4 import BeautifulSoup
from markdownify import markdownify

__all__: Sequence[str] = ("ParsedPage", "parse_html", "html_to_markdown")

_MAIN_SELECTORS = ("main", "article", "div[role='main']", "div[role='document']")
_NOISE_TAGS = ("script", "style", "noscript", "template")


@dataclass(slots=True)
class ParsedPage:
    """Lightweight representation of an HTML page."""

    title: str
    main_html: str


def _title(soup: BeautifulSoup) -> str:
    h1 = soup.find("h1")
    if h1 and h1.get_text(strip=True):
        return h1.get_text(" ", strip=True)
    if soup.title and soup.title.get_text(strip=True):
        return soup.title.get_text(" ", strip=True)
    return ""


def parse_html(html: str) -> ParsedPage:
    """Parse raw HTML into title and main-content markup."""
    soup = BeautifulSoup(html, "html.parser")
    for element in soup(list(_NOISE_TAGS)):
        element.decompose()

    title = _title(soup)
    main = None
    for selector in _MAIN_SELECTORS:
        node = soup.select_one(selector)
        if node is not None and node.get_text(strip=True):
            main = node
            break
    if main is None:
        main = soup.body or soup

    return ParsedPage(title=title, main_html=str(main))


def html_to_markdown(html: str, url: str, *, crawled_at: Optional[datetime] = None) -> str:
    """Convert a rendered page to the Markdown artifact stored on disk."""
    page = parse_html(html)
    stamp = (crawled_at or datetime.now(timezone.utc)).isoformat()

    parts = ["---", f"source: {url}", f"crawled: {stamp}", "---", ""]
    body = markdownify(page.main_html, heading_style="ATX").strip()
    # the main block usually repeats the <h1>; only add it when missing
    if page.title and not body.startswith(f"# {page.title}"):
        parts.extend([f"# {page.title}", ""])
    if body:
        parts.append(body)
    return "\n".join(parts).rstrip() + "\n"
