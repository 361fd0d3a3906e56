# url_hasher/report/json_report.py

"""
JSON report for url_hasher.

Serialises a BatchReport into a file.
"""
import json
from pathlib import Path

from url_hasher.collector import BatchReport


def render_json(report: BatchReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Save *report* as JSON at *output_path*.

    :param report: BatchReport of one run
    :param output_path: path of the JSON file
    :param pretty: indent the output by two spaces
    :return: Path of the written file

    Example:
    ```python
    from url_hasher.report.json_report import render_json
    report_path = render_json(report, 'reports/digests.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(report.as_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
