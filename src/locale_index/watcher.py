"""
Watcher - цикл отслеживания изменений файлов локалей.

Директории опрашиваются с интервалом; для каждого файла хранится
сигнатура (mtime_ns, size). Разница между опросами превращается в
события create / change / delete, которые передаются в обработчик.
Набор отслеживаемых файлов совпадает с тем, что загружает каталог.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Tuple

from .paths import DEFAULT_EXTENSION, DEFAULT_IGNORE_PREFIX, iter_locale_files

logger = logging.getLogger(__name__)

Signature = Tuple[int, int]


@dataclass(frozen=True)
class FileEvent:
    type: str       # create | change | delete
    filepath: str


EventCallback = Callable[[List[FileEvent]], Awaitable[None]]


def _signature(filepath: str) -> Optional[Signature]:
    try:
        stat = os.stat(filepath)
    except OSError:
        return None
    return stat.st_mtime_ns, stat.st_size


def build_signatures(roots: Iterable[str], extension: str = DEFAULT_EXTENSION,
                     ignore_prefix: str = DEFAULT_IGNORE_PREFIX) -> Dict[str, Signature]:
    signatures: Dict[str, Signature] = {}
    for root in roots:
        for filepath in iter_locale_files(root, extension, ignore_prefix):
            signature = _signature(filepath)
            if signature is not None:
                signatures[filepath] = signature
    return signatures


def diff_signatures(before: Dict[str, Signature],
                    after: Dict[str, Signature]) -> List[FileEvent]:
    events = []
    for filepath, signature in after.items():
        if filepath not in before:
            events.append(FileEvent("create", filepath))
        elif before[filepath] != signature:
            events.append(FileEvent("change", filepath))
    for filepath in before:
        if filepath not in after:
            events.append(FileEvent("delete", filepath))
    return events


class LocaleWatcher:
    """
    Опрашивает директории локалей и сообщает об изменениях.

    Первый опрос только запоминает состояние (файлы уже загружены
    при инициализации) и событий не порождает.
    """

    def __init__(self, roots: Iterable[str], on_events: EventCallback,
                 interval: float = 1.0, extension: str = DEFAULT_EXTENSION,
                 ignore_prefix: str = DEFAULT_IGNORE_PREFIX):
        self.roots = list(roots)
        self.on_events = on_events
        self.interval = interval
        self.extension = extension
        self.ignore_prefix = ignore_prefix
        self._signatures: Optional[Dict[str, Signature]] = None
        self._task: Optional[asyncio.Task] = None

    def _scan(self) -> Dict[str, Signature]:
        return build_signatures(self.roots, self.extension, self.ignore_prefix)

    def prime(self) -> None:
        """Запоминает текущее состояние без событий."""
        self._signatures = self._scan()

    async def poll_once(self) -> List[FileEvent]:
        signatures = await asyncio.to_thread(self._scan)
        if self._signatures is None:
            self._signatures = signatures
            return []
        events = diff_signatures(self._signatures, signatures)
        self._signatures = signatures
        if events:
            logger.debug("Изменения файлов локалей: %s", events)
            await self.on_events(events)
        return events

    async def run(self) -> None:
        """Цикл опроса; ошибка одного опроса не останавливает цикл."""
        while True:
            try:
                await self.poll_once()
            except Exception:
                logger.exception("Ошибка обработки изменений файлов локалей")
            await asyncio.sleep(self.interval)

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
