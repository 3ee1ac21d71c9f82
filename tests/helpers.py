# File: tests/helpers.py
"""Shared test doubles: a scripted in-memory renderer and a tiny page builder."""
from __future__ import annotations

import asyncio
from typing import Dict, Iterable, List

from docsweep.crawler.errors import RenderError
from docsweep.utils import normalize_url

BASE = "https://docs.example.com/documentation"


def page(title: str, *links: str, extra: str = "") -> str:
    """Small documentation page with a heading and one anchor per link."""
    anchors = "".join(f'<li><a href="{href}">{href}</a></li>' for href in links)
    return (
        f"<html><head><title>{title}</title></head>"
        f"<body><nav>menu</nav><main><h1>{title}</h1><p>About {title}.</p>{extra}"
        f"<ul>{anchors}</ul></main></body></html>"
    )


class ScriptedRenderer:
    """In-memory renderer serving a fixed site map."""

    def __init__(
        self,
        pages: Dict[str, str],
        *,
        fail: Iterable[str] = (),
        hang: Iterable[str] = (),
    ) -> None:
        self.pages = {normalize_url(url): html for url, html in pages.items()}
        self.fail = {normalize_url(u) for u in fail}
        self.hang = {normalize_url(u) for u in hang}
        self.calls: List[str] = []
        self.cancelled: List[str] = []

    async def render(self, url: str) -> str:
        self.calls.append(url)
        if url in self.hang:
            try:
                await asyncio.sleep(3600)
            except asyncio.CancelledError:
                self.cancelled.append(url)
                raise
        if url in self.fail:
            raise RenderError(url, "scripted failure")
        return self.pages[url]
