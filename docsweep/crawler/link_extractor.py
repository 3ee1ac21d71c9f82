# docsweep/crawler/link_extractor.py
"""
Link extraction for DocSweep: outbound links of a rendered page.
"""
from __future__ import annotations

from typing import List
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from docsweep.utils import remove_duplicates

_SKIPPED_SCHEMES = ("mailto:", "javascript:", "tel:", "data:")


def extract_links(html: str, base_url: str) -> List[str]:
    """
    Return absolute HTTP(S) links found in ``<a href>`` tags of *html*.

    Relative links are resolved against *base_url*; order of first
    appearance is kept and duplicates are dropped. Filtering by prefix is
    left to the frontier.
    """
    soup = BeautifulSoup(html, "html.parser")
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        raw = href_val.strip()
        if not raw or raw.startswith("#") or raw.lower().startswith(_SKIPPED_SCHEMES):
            continue
        absolute = urljoin(base_url, raw)
        if urlparse(absolute).scheme in ("http", "https"):
            links.append(absolute)
    return remove_duplicates(links)


__all__ = ["extract_links"]
