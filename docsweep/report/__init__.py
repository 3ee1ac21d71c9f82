# File: docsweep/report/__init__.py
"""docsweep.report: JSON, HTML and plain-text renderings of a crawl, used by the CLI and tests."""

from docsweep.report.html_report import render_html
from docsweep.report.json_report import render_json
from docsweep.report.summary import summary_lines

__all__ = ["render_json", "render_html", "summary_lines"]
