# site_mirror/report/json_report.py

"""
Генерация JSON-отчёта для проекта SiteMirror.

Сериализация объекта CrawlReport в файл.
"""
import json
from pathlib import Path

from site_mirror.aggregator import CrawlReport


def render_json(report: CrawlReport, output_path: Path | str) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: объект CrawlReport с результатами обхода
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(report.as_dict(), f, ensure_ascii=False, indent=2)

    return output
