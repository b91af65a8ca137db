"""
Coverage - покрытие переводами и теневые записи.

Теневая запись (shadow=True) представляет отсутствующий перевод:
она создаётся только в результатах запросов и никогда не попадает
в дерево или индекс.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .flatten import split_keypath
from .paths import replace_locale_path
from .tree import (
    FlattenIndex,
    LocaleEntry,
    LocaleGroup,
    LocaleNode,
    LocaleRecord,
    is_filled,
)


@dataclass
class Coverage:
    """Снимок покрытия локали."""
    locale: str
    total: int
    translated: int
    keys: List[str] = field(default_factory=list)

    @property
    def missing(self) -> int:
        return self.total - self.translated

    @property
    def percent(self) -> float:
        return round(self.translated / self.total * 100, 1) if self.total else 0.0


def get_coverage(index: FlattenIndex, locale: str,
                 keys: Optional[Iterable[str]] = None) -> Coverage:
    """
    Считает покрытие локали.

    Args:
        index: Плоский индекс
        locale: Код локали
        keys: Набор ключей (по умолчанию - все ключи индекса)
    """
    keys = list(index.keys()) if keys is None else list(keys)
    translated = [
        key for key in keys
        if key in index and is_filled(index[key].get_value(locale))
    ]
    return Coverage(locale=locale, total=len(keys),
                    translated=len(translated), keys=keys)


def shadow_filepath(entry: LocaleEntry, locale: str,
                    source_language: str) -> Optional[str]:
    """Путь, куда записался бы перевод ключа для locale."""
    source = entry.locales.get(source_language) or next(iter(entry.locales.values()), None)
    if source and source.filepath:
        return replace_locale_path(source.filepath, locale, source.locale)
    return None


def shadow_locales(entry: LocaleEntry, locales: Iterable[str],
                   source_language: str) -> Dict[str, LocaleRecord]:
    """Записи ключа для всех локалей; недостающие дополняются теневыми."""
    result: Dict[str, LocaleRecord] = {}
    for locale in locales:
        record = entry.locales.get(locale)
        if record is None:
            record = LocaleRecord(
                locale=locale,
                keypath=entry.keypath,
                keyname=entry.keyname,
                value="",
                filepath=shadow_filepath(entry, locale, source_language),
                shadow=True,
            )
        result[locale] = record
    return result


def get_tree_node(tree: LocaleGroup, keypath: str) -> Optional[LocaleNode]:
    """Точный поиск узла по пути."""
    node: LocaleNode = tree
    for key in split_keypath(keypath):
        if not isinstance(node, LocaleGroup):
            return None
        node = node.children.get(key)
        if node is None:
            return None
    return node


def get_closest_node(tree: LocaleGroup, keypath: str) -> Optional[LocaleNode]:
    """
    Ближайший существующий узел на пути.

    Запись - если путь разрешился до неё; иначе последняя найденная
    группа; None - если не нашёлся даже первый сегмент.
    """
    group = tree
    for key in split_keypath(keypath):
        node = group.children.get(key)
        if node is None:
            return None if group is tree else group
        if isinstance(node, LocaleEntry):
            return node
        group = node
    return group
