# docsweep/report/json_report.py

"""
JSON report for DocSweep.

Serializes a CrawlReport to a file.
"""
from pathlib import Path

from docsweep.aggregator import CrawlReport


def render_json(report: CrawlReport, output_path: Path | str) -> Path:
    """
    Save *report* as JSON at *output_path*.

    :param report: CrawlReport built by ``aggregate_results``
    :param output_path: path of the JSON file
    :return: Path of the saved file

    Example:
    ```python
    from docsweep.report.json_report import render_json
    report_path = render_json(report, 'reports/crawl.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(report.json(pretty=True) + "\n", encoding="utf-8")
    return output
