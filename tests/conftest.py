# File: tests/conftest.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict

import pytest

from docsweep.config import CrawlerConfig
from docsweep.logger import LOGGER_NAME
from helpers import BASE, page


@pytest.fixture(autouse=True)
def propagate_project_logs():
    """Let caplog see records of the project logger."""
    lg = logging.getLogger(LOGGER_NAME)
    previous = lg.propagate
    lg.propagate = True
    yield
    lg.propagate = previous


@pytest.fixture()
def make_config(tmp_path: Path) -> Callable[..., CrawlerConfig]:
    """Factory for configs writing into *tmp_path* with no delays."""

    def _make(**overrides) -> CrawlerConfig:
        values = dict(
            start_url=f"{BASE}/kit",
            max_pages=100,
            max_depth=3,
            request_delay=0,
            page_load_timeout=1.0,
            checkpoint_interval=0,
            output_directory=tmp_path / "docs",
        )
        values.update(overrides)
        return CrawlerConfig(**values)

    return _make


@pytest.fixture()
def small_site() -> Dict[str, str]:
    """kit -> (views, buttons); views -> (layout, text); buttons -> (text)."""
    return {
        f"{BASE}/kit": page("Kit", f"{BASE}/kit/views", f"{BASE}/kit/buttons"),
        f"{BASE}/kit/views": page("Views", f"{BASE}/kit/layout", f"{BASE}/kit/text"),
        f"{BASE}/kit/buttons": page("Buttons", f"{BASE}/kit/text"),
        f"{BASE}/kit/layout": page("Layout"),
        f"{BASE}/kit/text": page("Text", f"{BASE}/kit"),
    }
