#!/usr/bin/env python3
"""
Loader - контекст индексатора локалей.

Владеет каталогом файлов и текущим снимком (дерево + плоский индекс).
Любое изменение набора файлов приводит к полной пересборке снимка и
событию "changed". Пересборка не содержит await, а снимок заменяется
одним присваиванием: операция, прочитавшая loader.snapshot, работает
с согласованной версией до конца.

Использование:
    loader = LocaleLoader(load_config("i18n.yml"), translate=my_translate)
    await loader.init()
    loader.on("changed", lambda _: print(loader.get_coverage("fr")))
    await loader.watch()
"""

import logging
import os
from typing import Dict, Iterable, List, Optional, Union

from .catalog import LocaleCatalog
from .config import LoaderConfig
from .coverage import (
    Coverage,
    get_closest_node,
    get_coverage,
    get_tree_node,
    shadow_filepath,
    shadow_locales,
)
from .events import EventHandler
from .paths import is_within, resolve_path
from .translator import PendingWrite, TranslateFunc, TranslationOrchestrator
from .tree import (
    LocaleEntry,
    LocaleGroup,
    LocaleNode,
    LocaleRecord,
    LocaleSnapshot,
    build_snapshot,
)
from .watcher import FileEvent, LocaleWatcher
from .writer import FilepathPrompt, LocaleWriter

logger = logging.getLogger(__name__)

CHANGED = "changed"


class LocaleLoader(EventHandler):
    """Загрузчик локалей: каталог, снимок индексов, перевод и запись."""

    def __init__(self, config: Optional[LoaderConfig] = None,
                 translate: Optional[TranslateFunc] = None,
                 prompt: Optional[FilepathPrompt] = None):
        super().__init__()
        self.config = config or LoaderConfig()
        self.catalog = LocaleCatalog(self.config.extension, self.config.ignore_prefix,
                                     roots=self.config.locale_dirs())
        self.snapshot = build_snapshot([], version=0)
        self.writer = LocaleWriter(self.get_filepaths_of_locale, prompt,
                                   root_path=self.config.root_path)
        self._translate = translate
        self._watcher: Optional[LocaleWatcher] = None

    # ── Жизненный цикл ──

    async def init(self) -> None:
        """Загружает все директории локалей и строит индексы."""
        for root in self.config.locale_dirs():
            if not os.path.isdir(root):
                logger.warning("Директория локалей не найдена: %s", root)
                continue
            await self.catalog.aload_directory(root)
        self.update()

    def update(self) -> LocaleSnapshot:
        """Полная пересборка дерева и индекса из текущего набора файлов."""
        self.snapshot = build_snapshot(self.catalog.all_files(),
                                       version=self.snapshot.version + 1)
        logger.info("Индекс пересобран (v%d): %d файлов, %d ключей, локали: %s",
                    self.snapshot.version, len(self.catalog),
                    len(self.snapshot.index), ", ".join(self.locales))
        self.dispatch_event(CHANGED)
        return self.snapshot

    async def handle_file_events(self, events: Iterable[FileEvent]) -> None:
        """Применяет события файловой системы и пересобирает индекс один раз."""
        touched = False
        for event in events:
            filepath = resolve_path(event.filepath)
            if os.path.splitext(filepath)[1] != self.config.extension:
                continue
            if event.type == "delete":
                self.catalog.unload(filepath)
            elif event.type in ("create", "change"):
                await self.catalog.aload(filepath)
            else:
                continue
            touched = True
        if touched:
            self.update()

    async def watch(self) -> LocaleWatcher:
        """Запускает цикл отслеживания изменений."""
        if self._watcher is None:
            self._watcher = LocaleWatcher(
                self.config.locale_dirs(),
                self.handle_file_events,
                interval=self.config.watch_interval,
                extension=self.config.extension,
                ignore_prefix=self.config.ignore_prefix,
            )
            self._watcher.prime()
        self._watcher.start()
        return self._watcher

    async def stop_watching(self) -> None:
        if self._watcher is not None:
            await self._watcher.stop()
            self._watcher = None

    # ── Выборки ──

    @property
    def tree(self) -> LocaleGroup:
        return self.snapshot.tree

    @property
    def index(self) -> Dict[str, LocaleEntry]:
        return self.snapshot.index

    @property
    def locales(self) -> List[str]:
        return self.catalog.locales()

    def get_filepaths_of_locale(self, locale: str) -> List[str]:
        return self.catalog.files_for_locale(locale)

    def get_coverage(self, locale: str, keys: Optional[Iterable[str]] = None) -> Coverage:
        return get_coverage(self.index, locale, keys)

    def get_node_by_key(self, keypath: str) -> Optional[LocaleEntry]:
        return self.index.get(keypath)

    def get_tree_node_by_key(self, keypath: str) -> Optional[LocaleNode]:
        return get_tree_node(self.tree, keypath)

    def get_closest_node_by_key(self, keypath: str) -> Optional[LocaleNode]:
        return get_closest_node(self.tree, keypath)

    def get_shadow_locales(self, entry: LocaleEntry) -> Dict[str, LocaleRecord]:
        return shadow_locales(entry, self.locales, self.config.source_language)

    def get_shadow_filepath(self, keypath: str, locale: str) -> Optional[str]:
        entry = self.get_node_by_key(keypath)
        if entry is None:
            return None
        return shadow_filepath(entry, locale, self.config.source_language)

    def get_translations_by_key(self, keypath: str,
                                shadow: bool = True) -> Dict[str, LocaleRecord]:
        """Записи ключа по локалям; с shadow=True недостающие дополняются теневыми."""
        entry = self.get_node_by_key(keypath)
        if entry is None:
            return {}
        if shadow:
            return self.get_shadow_locales(entry)
        return dict(entry.locales)

    def get_displaying_translate_by_key(self, keypath: str) -> Optional[LocaleRecord]:
        entry = self.get_node_by_key(keypath)
        return entry.locales.get(self.config.display_language) if entry else None

    # ── Перевод и запись ──

    def translator(self) -> TranslationOrchestrator:
        if self._translate is None:
            raise RuntimeError("Функция перевода не настроена")
        return TranslationOrchestrator(
            self._translate,
            get_index=lambda: self.index,
            get_locales=lambda: self.locales,
            source_language=self.config.source_language,
        )

    async def machine_translate(self, target: Union[LocaleEntry, LocaleRecord],
                                source_language: Optional[str] = None) -> List[PendingWrite]:
        return await self.translator().translate(target, source_language)

    async def write_to_file(self, pendings: Union[PendingWrite, List[PendingWrite]]) -> List[str]:
        """
        Записывает значения в файлы.

        Записанные файлы из директорий локалей сразу перечитываются,
        после чего индекс пересобирается один раз. Если запись пакета
        прервалась ошибкой, уже записанные файлы всё равно перечитываются.
        """
        written: List[str] = []
        try:
            await self.writer.write(pendings, written)
        finally:
            roots = self.config.locale_dirs()
            events = [
                FileEvent("change", filepath) for filepath in dict.fromkeys(written)
                if any(is_within(filepath, root) for root in roots)
            ]
            await self.handle_file_events(events)
        return written
