"""url_hasher.report: report writers used by the CLI."""

from url_hasher.report.json_report import render_json

__all__ = ["render_json"]
