#!/usr/bin/env python3
"""
Catalog - хранилище загруженных файлов локалей.

Хранит разобранные JSON-файлы: {filepath: LocaleFile}
Для каждого файла держит вложенное значение и плоский вид.

Поддерживает:
- Загрузка/перезагрузка отдельного файла
- Обход директорий локалей (один уровень подпапок)
- Выборки по локали
- Изоляция ошибок: битый файл выкидывается из каталога и не мешает остальным
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import ParseError
from .flatten import flatten
from .paths import (
    DEFAULT_EXTENSION,
    DEFAULT_IGNORE_PREFIX,
    get_file_info,
    is_within,
    iter_locale_files,
    resolve_path,
)

logger = logging.getLogger(__name__)


@dataclass
class LocaleFile:
    """Разобранный файл локали."""
    filepath: str
    locale: str
    value: Dict[str, Any]
    nested: bool = False
    flatten: Dict[str, Any] = field(default_factory=dict)


def parse_locale_file(filepath: str, raw: str, root: Optional[str] = None) -> LocaleFile:
    """
    Разбирает содержимое файла.

    Args:
        root: Директория локалей, в которой лежит файл (определяет раскладку)

    Raises:
        ParseError: невалидный JSON, корень не объект или локаль не определяется
    """
    try:
        info = get_file_info(filepath, root)
        value = json.loads(raw)
    except (ValueError, json.JSONDecodeError) as exc:
        raise ParseError(filepath, exc) from exc
    if not isinstance(value, dict):
        raise ParseError(filepath, TypeError("корень документа должен быть объектом"))
    return LocaleFile(
        filepath=filepath,
        locale=info.locale,
        value=value,
        nested=info.nested,
        flatten=flatten(value),
    )


def _read_text(filepath: str) -> str:
    with open(filepath, "r", encoding="utf-8") as f:
        return f.read()


class LocaleCatalog:
    """
    Каталог файлов локалей, ключ - абсолютный путь файла.

    Порядок файлов - порядок загрузки; от него зависит, какой файл
    побеждает при конфликте ключей внутри одной локали.
    """

    def __init__(self, extension: str = DEFAULT_EXTENSION,
                 ignore_prefix: str = DEFAULT_IGNORE_PREFIX,
                 roots: Optional[List[str]] = None):
        self.extension = extension
        self.ignore_prefix = ignore_prefix
        self.roots: List[str] = [resolve_path(root) for root in roots or []]
        self.files: Dict[str, LocaleFile] = {}
        self.errors: Dict[str, ParseError] = {}

    def _add_root(self, root: str) -> None:
        root = resolve_path(root)
        if root not in self.roots:
            self.roots.append(root)

    def root_for(self, filepath: str) -> Optional[str]:
        """Директория локалей, которой принадлежит файл."""
        for root in self.roots:
            if is_within(filepath, root):
                return root
        return None

    # ── Загрузка ──

    def load(self, filepath: str) -> Optional[LocaleFile]:
        """Загружает файл синхронно. При ошибке файл выкидывается, возвращается None."""
        try:
            raw = _read_text(filepath)
        except (OSError, UnicodeDecodeError) as exc:
            return self._fail(ParseError(filepath, exc))
        return self._store(filepath, raw)

    async def aload(self, filepath: str) -> Optional[LocaleFile]:
        """То же, что load(), но чтение файла не блокирует event loop."""
        try:
            raw = await asyncio.to_thread(_read_text, filepath)
        except (OSError, UnicodeDecodeError) as exc:
            return self._fail(ParseError(filepath, exc))
        return self._store(filepath, raw)

    def _store(self, filepath: str, raw: str) -> Optional[LocaleFile]:
        logger.debug("Загрузка %s", filepath)
        try:
            parsed = parse_locale_file(filepath, raw, self.root_for(filepath))
        except ParseError as exc:
            return self._fail(exc)
        self.errors.pop(filepath, None)
        self.files[filepath] = parsed
        return parsed

    def _fail(self, error: ParseError) -> None:
        self.unload(error.filepath)
        self.errors[error.filepath] = error
        logger.warning("Файл исключён из индекса: %s", error)
        return None

    def unload(self, filepath: str) -> None:
        self.files.pop(filepath, None)

    def load_directory(self, root: str) -> List[LocaleFile]:
        """Загружает все файлы локалей из директории."""
        loaded = []
        self._add_root(root)
        for filepath in iter_locale_files(root, self.extension, self.ignore_prefix):
            parsed = self.load(filepath)
            if parsed:
                loaded.append(parsed)
        return loaded

    async def aload_directory(self, root: str) -> List[LocaleFile]:
        loaded = []
        self._add_root(root)
        for filepath in iter_locale_files(root, self.extension, self.ignore_prefix):
            parsed = await self.aload(filepath)
            if parsed:
                loaded.append(parsed)
        return loaded

    # ── Выборки ──

    def get(self, filepath: str) -> Optional[LocaleFile]:
        return self.files.get(filepath)

    def all_files(self) -> List[LocaleFile]:
        return list(self.files.values())

    def locales(self) -> List[str]:
        """Список локалей без повторов, в порядке появления."""
        return list(dict.fromkeys(f.locale for f in self.files.values()))

    def files_for_locale(self, locale: str) -> List[str]:
        return [f.filepath for f in self.files.values() if f.locale == locale]

    def __contains__(self, filepath: str) -> bool:
        return filepath in self.files

    def __len__(self) -> int:
        return len(self.files)
