"""
Модуль для загрузки и валидации конфигурации SiteMirror.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from site_mirror.crawler.models import CrawlJob
from site_mirror.crawler.urls import normalize_url


class MirrorConfig(BaseModel):
    """Конфигурация для одного запуска зеркалирования."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    seed_url: str = Field(..., min_length=1, description="Стартовый URL сайта.")
    destination: Path = Field(Path("downloads"), description="Корневая папка для сохранения.")
    max_depth: int = Field(-1, description="Максимальная глубина обхода; <= 0 – без ограничения.")
    concurrency: int = Field(4, ge=1, description="Число параллельных воркеров.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    crawl_timeout: Optional[float] = Field(None, gt=0, description="Таймаут всего обхода (секунд).")
    retry_times: int = Field(0, ge=0, description="Число повторных попыток при 5xx/429.")
    retry_backoff: float = Field(1.0, ge=0, description="Базовая пауза между попытками (секунд).")
    user_agent: str = Field("SiteMirrorBot/1.0", min_length=1, description="Заголовок User-Agent.")
    max_pages: Optional[int] = Field(None, ge=1, description="Жесткий лимит по числу страниц.")
    strict_host: bool = Field(False, description="Сравнивать хосты по компонентам, а не префиксом строки.")
    merge_schemes: bool = Field(False, description="Считать http:// и https:// одним URL во frontier.")
    resolver: Literal["flat", "rfc3986"] = Field("flat", description="Способ разрешения относительных ссылок.")

    @field_validator("seed_url", mode="before")
    def _strip_trailing_slash(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    def job(self) -> CrawlJob:
        """Неизменяемое описание задания обхода."""
        return CrawlJob(
            seed_url=normalize_url(self.seed_url),
            max_depth=self.max_depth,
            destination=self.destination,
        )


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def read_config_file(path: Union[str, Path]) -> dict[str, Any]:
    """Читает YAML или JSON файл конфигурации в словарь."""
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> MirrorConfig:
    """
    Собирает MirrorConfig из файла (если указан) и явных переопределений.
    Переопределения со значением None игнорируются. Ошибки валидации
    пробрасываются как pydantic.ValidationError.
    """
    data: dict[str, Any] = read_config_file(path) if path is not None else {}
    data.update({key: value for key, value in overrides.items() if value is not None})
    return MirrorConfig(**data)


__all__ = ["MirrorConfig", "load_config", "read_config_file"]
