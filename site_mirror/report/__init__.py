"""site_mirror.report: сохранение отчётов об обходе."""

from site_mirror.report.json_report import render_json

__all__ = ["render_json"]
