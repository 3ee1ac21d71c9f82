# docsweep/crawler/fetcher.py
"""
Fetcher module: page renderers and the timeout-vs-render race.
"""
from __future__ import annotations

import asyncio
from typing import Protocol, runtime_checkable

from aiohttp import ClientSession

from docsweep.crawler.errors import InvalidContentError, PageTimeoutError, RenderError
from docsweep.logger import get_logger

log = get_logger("fetcher")

_TEXT_TYPES = ("html", "json", "text/plain", "xml")


@runtime_checkable
class PageRenderer(Protocol):
    """Turns a URL into raw page text; may fail or hang."""

    async def render(self, url: str) -> str:
        ...


class HttpRenderer:
    """Plain HTTP renderer: GET the URL and return the decoded body."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def render(self, url: str) -> str:
        async with self.session.get(url, raise_for_status=False) as resp:
            if resp.status >= 400:
                raise RenderError(url, f"HTTP {resp.status}")
            ctype = resp.headers.get("Content-Type", "").split(";", 1)[0].lower()
            if ctype and not any(t in ctype for t in _TEXT_TYPES):
                raise RenderError(url, f"unsupported content type {ctype!r}")
            return await resp.text()


async def render_with_timeout(renderer: PageRenderer, url: str, timeout: float) -> str:
    """
    Race ``renderer.render(url)`` against a timer of *timeout* seconds.

    Whichever task finishes first wins and the other one is cancelled.
    Raises PageTimeoutError when the timer wins; renderer exceptions
    propagate unchanged.
    """
    timer = asyncio.create_task(asyncio.sleep(timeout), name=f"timeout:{url}")
    render = asyncio.create_task(renderer.render(url), name=f"render:{url}")
    try:
        done, _ = await asyncio.wait({timer, render}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (timer, render):
            if not task.done():
                task.cancel()
        await asyncio.gather(timer, render, return_exceptions=True)

    if render in done:
        text = render.result()
        if not isinstance(text, str):
            raise InvalidContentError(f"Renderer returned {type(text).__name__} for {url}")
        return text
    log.debug("Timer won the race for %s", url)
    raise PageTimeoutError(url, timeout)


__all__ = ["PageRenderer", "HttpRenderer", "render_with_timeout"]
