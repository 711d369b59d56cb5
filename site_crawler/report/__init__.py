# File: site_crawler/report/__init__.py
"""site_crawler.report: сериализация результатов обхода для CLI и тестов."""

from site_crawler.report.json_report import render_json, result_to_dict

__all__ = ["render_json", "result_to_dict"]
