# site_crawler/report/json_report.py

"""
Генерация JSON-отчёта для проекта SiteCrawler.

Сериализация объекта CrawlResult в файл.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from site_crawler.crawler.models import CrawlResult


def result_to_dict(result: CrawlResult) -> Dict[str, Any]:
    """Преобразует CrawlResult в словарь: seed, отсортированные urls, статистика."""
    return {
        "seed": result.seed,
        "urls": list(result.urls),
        "drained": result.drained,
        "stats": result.stats.as_dict(),
    }


def render_json(result: CrawlResult, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет результат обхода в формате JSON по указанному пути.

    :param result: объект CrawlResult
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 вместо однострочного вывода
    :return: Path сохранённого файла

    Пример:
    ```python
    from site_crawler.report.json_report import render_json
    report_path = render_json(result, 'reports/crawl.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(result_to_dict(result), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
