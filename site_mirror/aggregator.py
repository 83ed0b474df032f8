# File: site_mirror/aggregator.py
"""site_mirror.aggregator: сводный отчёт о результатах зеркалирования."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, TypedDict, Union

FailureKind = Literal["fetch", "persist", "internal"]


class SavedPage(TypedDict):
    """Страница, успешно сохранённая на диск."""

    url: str
    path: str
    depth: int
    size: int


class Failure(TypedDict, total=False):
    """URL, обработка которого завершилась ошибкой."""

    url: str
    kind: FailureKind
    status: Optional[int]
    message: str


@dataclass(slots=True)
class CrawlReport:
    """Результаты одного обхода: сохранённые страницы и ошибки."""

    seed_url: str
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    fetched: List[str] = field(default_factory=list)
    pages: List[SavedPage] = field(default_factory=list)
    failures: List[Failure] = field(default_factory=list)

    def add_page(self, url: str, path: Union[str, Path], depth: int, size: int) -> None:
        self.pages.append({"url": url, "path": str(path), "depth": depth, "size": size})

    def move_page(self, old: Union[str, Path], new: Union[str, Path]) -> None:
        """Переписывает путь страницы, перемещённой в ``<dir>/index.html``."""
        for page in self.pages:
            if page["path"] == str(old):
                page["path"] = str(new)

    def add_failure(
        self, url: str, kind: FailureKind, message: str, status: Optional[int] = None
    ) -> None:
        self.failures.append({"url": url, "kind": kind, "status": status, "message": message})

    def failures_of(self, kind: FailureKind) -> List[Failure]:
        return [f for f in self.failures if f.get("kind") == kind]

    @property
    def duration(self) -> float:
        if self.started_at is None or self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("started_at", "finished_at"):
            value = data[key]
            data[key] = value.isoformat() if value is not None else None
        data["duration"] = self.duration
        return data

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление отчёта."""
        return json.dumps(self.as_dict(), ensure_ascii=False, indent=2 if pretty else None)
