#!/usr/bin/env python3
"""
Writer - запись принятых значений обратно в файлы локалей.

Каждая PendingWrite проходит полный цикл чтение -> изменение -> запись,
поэтому две записи в один файл видят результат друг друга. Остальные
ключи документа не затрагиваются.

Формат вывода: JSON, indent=2, ensure_ascii=False, перевод строки в конце.
"""

import asyncio
import json
import logging
import os
from typing import Any, Callable, Dict, List, Optional, Protocol, Union

from .errors import FilepathNotSpecifiedError, ParseError
from .flatten import set_by_path
from .paths import resolve_path
from .translator import PendingWrite

logger = logging.getLogger(__name__)


class FilepathPrompt(Protocol):
    """Внешний интерфейс выбора файла для записи. None - отмена."""

    async def ask_path(self, locale: str, keypath: str) -> Optional[str]:
        ...

    async def pick_path(self, paths: List[str], keypath: str) -> Optional[str]:
        ...


def dump_document(document: Dict[str, Any]) -> str:
    return json.dumps(document, ensure_ascii=False, indent=2) + "\n"


def read_document(filepath: str) -> Dict[str, Any]:
    """
    Читает документ для записи; отсутствующий файл - пустой документ.

    Raises:
        ParseError: файл существует, но не разбирается (не перезаписываем его)
    """
    if not os.path.exists(filepath):
        return {}
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, ValueError) as exc:
        raise ParseError(filepath, exc) from exc
    if not isinstance(document, dict):
        raise ParseError(filepath, TypeError("корень документа должен быть объектом"))
    return document


def write_value(filepath: str, keypath: str, value: Any) -> None:
    """Синхронный цикл чтение -> set_by_path -> запись для одного значения."""
    document = read_document(filepath)
    set_by_path(document, keypath, value)
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(dump_document(document))


class LocaleWriter:
    """
    Применяет PendingWrite к файлам.

    Args:
        files_for_locale: Известные файлы локали (для разрешения пути)
        prompt: Внешний интерфейс выбора файла
        root_path: База для относительных путей, введённых пользователем
    """

    def __init__(self, files_for_locale: Callable[[str], List[str]],
                 prompt: Optional[FilepathPrompt] = None,
                 root_path: Optional[str] = None):
        self._files_for_locale = files_for_locale
        self.prompt = prompt
        self.root_path = root_path
        self._lock = asyncio.Lock()

    async def resolve_filepath(self, pending: PendingWrite) -> str:
        """
        Определяет файл для записи.

        Один известный файл локали - он; ни одного - спросить новый путь;
        несколько - предложить выбор.

        Raises:
            FilepathNotSpecifiedError: путь так и не получен
        """
        filepath = pending.filepath
        if not filepath:
            paths = self._files_for_locale(pending.locale)
            if len(paths) == 1:
                filepath = paths[0]
            elif self.prompt is not None:
                if not paths:
                    filepath = await self.prompt.ask_path(pending.locale, pending.keypath)
                else:
                    filepath = await self.prompt.pick_path(paths, pending.keypath)

        if not filepath:
            raise FilepathNotSpecifiedError(
                f"Не указан файл для ключа '{pending.keypath}' ({pending.locale})")
        if self.root_path and not os.path.isabs(filepath):
            filepath = os.path.join(self.root_path, filepath)
        return resolve_path(filepath)

    async def write(self, pendings: Union[PendingWrite, List[PendingWrite]],
                    written: Optional[List[str]] = None) -> List[str]:
        """
        Записывает одно или несколько значений последовательно.

        Args:
            written: Список, в который пути добавляются по мере записи;
                при ошибке в середине пакета в нём остаются уже записанные

        Returns:
            Пути записанных файлов в порядке записи
        """
        if isinstance(pendings, PendingWrite):
            pendings = [pendings]
        if written is None:
            written = []

        async with self._lock:
            for pending in pendings:
                if pending is None:
                    continue
                filepath = await self.resolve_filepath(pending)
                await asyncio.to_thread(write_value, filepath, pending.keypath, pending.value)
                logger.info("Записан ключ %s [%s] -> %s",
                            pending.keypath, pending.locale, filepath)
                written.append(filepath)
        return written
