"""
Config - настройки загрузчика локалей.

Источники (по возрастанию приоритета):
    1. значения по умолчанию LoaderConfig
    2. YAML-файл (секция i18n: или верхний уровень)
    3. переменные окружения LOCALE_INDEX_* (в том числе из .env)

Путь к YAML передаётся явно, поиск конфигов не выполняется.
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from .paths import DEFAULT_EXTENSION, DEFAULT_IGNORE_PREFIX

logger = logging.getLogger(__name__)

ENV_PREFIX = "LOCALE_INDEX_"


@dataclass
class LoaderConfig:
    """Конфигурация загрузчика."""
    root_path: str = "."
    locales_paths: List[str] = field(default_factory=lambda: ["locales"])
    source_language: str = "en"
    display_language: str = "en"
    extension: str = DEFAULT_EXTENSION
    ignore_prefix: str = DEFAULT_IGNORE_PREFIX
    watch_interval: float = 1.0     # Пауза между опросами файлов (секунды)

    def locale_dirs(self) -> List[str]:
        """Абсолютные пути директорий локалей."""
        root = Path(self.root_path)
        return [str((root / p).resolve()) for p in self.locales_paths]


def _coerce(name: str, raw: Any) -> Any:
    if name == "locales_paths":
        if isinstance(raw, str):
            return [p.strip() for p in raw.split(",") if p.strip()]
        return list(raw)
    if name == "watch_interval":
        return float(raw)
    return str(raw)


def load_config(path: Optional[str] = None, root: Optional[str] = None,
                env_file: Optional[str] = None) -> LoaderConfig:
    """
    Собирает LoaderConfig.

    Args:
        path: YAML-файл конфигурации (опционально)
        root: Корень проекта; по умолчанию - папка YAML-файла или cwd
        env_file: .env для переменных окружения (по умолчанию .env в cwd)
    """
    values: Dict[str, Any] = {}
    known = {f.name for f in fields(LoaderConfig)}

    if path:
        config_path = Path(path)
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            section = data.get("i18n", data) if isinstance(data, dict) else {}
            for key, raw in section.items():
                key = key.replace("-", "_")
                if key in known:
                    values[key] = _coerce(key, raw)
                else:
                    logger.debug("Неизвестный параметр конфига: %s", key)
            logger.info("Конфигурация загружена из %s", config_path)
            values.setdefault("root_path", str(config_path.parent))
        else:
            logger.debug("Конфиг %s не найден, используются значения по умолчанию", config_path)

    load_dotenv(env_file or os.path.join(os.getcwd(), ".env"))
    for name in known:
        raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if raw:
            values[name] = _coerce(name, raw)

    if root:
        values["root_path"] = root
    return LoaderConfig(**values)
