# File: docsweep/report/summary.py
"""docsweep.report.summary: plain-text final statistics block."""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

from docsweep.crawler.models import CrawlStatistics
from docsweep.utils import format_duration


def summary_lines(stats: CrawlStatistics, output_directory: Union[Path, str]) -> List[str]:
    """Lines printed at the end of every crawl, failed pages included."""
    lines = [
        "Statistics:",
        f"   Total pages processed: {stats.total_pages}",
        f"   New pages: {stats.new_pages}",
        f"   Updated pages: {stats.updated_pages}",
        f"   Skipped (unchanged): {stats.skipped_pages}",
        f"   Errors: {stats.errors}",
    ]
    if stats.duration is not None:
        lines.append(f"   Duration: {format_duration(stats.duration)}")
    lines.append(f"Output: {output_directory}")
    return lines
