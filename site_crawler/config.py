# === FILE: site_crawler/config.py ===
"""
Модуль для загрузки и валидации конфигурации краулера SiteCrawler.
Используется Pydantic для описания схемы и проверки данных.

Значения по умолчанию совпадают с фиксированными константами ядра:
10 воркеров, 5 секунд на соединение и чтение, 10 минут на остановку пула.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = ["CrawlerConfig", "load_config", "DEFAULT_USER_AGENT"]

DEFAULT_USER_AGENT = "SiteCrawler/0.1 (+https://github.com/site-crawler)"


class CrawlerConfig(BaseModel):
    """Конфигурация одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    pool_size: int = Field(10, ge=1, description="Число параллельных воркеров.")
    connect_timeout: float = Field(5.0, gt=0, description="Таймаут установки соединения (секунд).")
    read_timeout: float = Field(5.0, gt=0, description="Таймаут чтения ответа (секунд).")
    grace_period: float = Field(600.0, gt=0, description="Сколько ждать завершения пула при остановке (секунд).")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    log_level: str = Field("INFO", description="Уровень логирования по умолчанию.")

    @field_validator("log_level", mode="before")
    def _upper_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().upper()
            if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
                raise ValueError(f"неизвестный уровень логирования: {v}")
        return v

    @field_validator("user_agent", mode="before")
    def _strip_user_agent(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


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


def load_config(path: Union[str, Path, None] = None) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    Без пути берёт configs/default.yaml, а если его нет, то значения по умолчанию.
    Явно указанный, но отсутствующий файл вызывает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return CrawlerConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    try:
        return CrawlerConfig(**data)
    except ValidationError:
        raise
