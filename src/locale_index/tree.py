"""
Tree - дерево пространств имён и плоский индекс ключей.

Узел дерева - один из двух видов:
    LocaleGroup  (kind="group") - промежуточная группа с children
    LocaleEntry  (kind="entry") - ключ перевода с записью на каждую локаль

Плоский индекс {keypath: LocaleEntry} является ареной: листья дерева
ссылаются на те же объекты, поэтому правка записи видна из обоих мест.
Оба представления строятся из одного списка файлов и публикуются
вместе в LocaleSnapshot.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Literal, Optional, Union

from .catalog import LocaleFile
from .flatten import get_keyname, is_mapping, join_keypath

logger = logging.getLogger(__name__)


@dataclass
class LocaleRecord:
    """Значение ключа в одной локали."""
    locale: str
    keypath: str
    keyname: str
    value: Any = ""
    filepath: Optional[str] = None
    shadow: bool = False

    @property
    def is_filled(self) -> bool:
        return is_filled(self.value)


@dataclass(eq=False)
class LocaleEntry:
    keypath: str
    keyname: str = ""
    locales: Dict[str, LocaleRecord] = field(default_factory=dict)
    kind: Literal["entry"] = "entry"

    def __post_init__(self):
        if not self.keyname:
            self.keyname = get_keyname(self.keypath)

    def get_value(self, locale: str) -> Any:
        record = self.locales.get(locale)
        return record.value if record else None


@dataclass(eq=False)
class LocaleGroup:
    keypath: str = ""
    keyname: str = ""
    children: Dict[str, "LocaleNode"] = field(default_factory=dict)
    kind: Literal["group"] = "group"

    def __post_init__(self):
        if not self.keyname and self.keypath:
            self.keyname = get_keyname(self.keypath)


LocaleNode = Union[LocaleGroup, LocaleEntry]
FlattenIndex = Dict[str, LocaleEntry]


@dataclass(frozen=True)
class LocaleSnapshot:
    """Согласованная пара дерево + индекс, построенная из одного набора файлов."""
    version: int
    tree: LocaleGroup
    index: FlattenIndex


def is_filled(value: Any) -> bool:
    """None и "" считаются пустыми, любой другой скаляр - переводом."""
    return value is not None and value != ""


def build_index(files: Iterable[LocaleFile]) -> FlattenIndex:
    """
    Строит плоский индекс из плоских значений файлов.

    Для одной локали более поздний файл перезаписывает более ранний.
    """
    index: FlattenIndex = {}
    for file in files:
        for keypath, value in file.flatten.items():
            if is_mapping(value):
                # пустая группа, не ключ перевода
                continue
            entry = index.get(keypath)
            if entry is None:
                entry = index[keypath] = LocaleEntry(keypath)
            entry.locales[file.locale] = LocaleRecord(
                locale=file.locale,
                keypath=keypath,
                keyname=entry.keyname,
                value=value,
                filepath=file.filepath,
            )
    return index


def build_tree(files: Iterable[LocaleFile], index: FlattenIndex) -> LocaleGroup:
    """
    Строит дерево, подвешивая в листья объекты из индекса.

    Вид узла фиксируется первым встреченным значением по этому пути;
    конфликтующая форма в другом файле в дереве игнорируется.
    """
    root = LocaleGroup()
    for file in files:
        _attach(root, file.value, "", file, index)
    return root


def _attach(group: LocaleGroup, value, keypath: str, file: LocaleFile,
            index: FlattenIndex) -> None:
    items = ((str(i), v) for i, v in enumerate(value)) if isinstance(value, list) else value.items()
    for key, child in items:
        child_path = join_keypath(keypath, key)
        existing = group.children.get(key)

        if is_mapping(child):
            if existing is None:
                existing = group.children[key] = LocaleGroup(child_path, key)
            if isinstance(existing, LocaleGroup):
                _attach(existing, child, child_path, file, index)
            else:
                logger.warning(
                    "Конфликт формы ключа %s в %s: ключ уже является записью, группа пропущена",
                    child_path, file.filepath)
            continue

        entry = index.get(child_path)
        if entry is None:
            continue
        if existing is None:
            group.children[key] = entry
        elif isinstance(existing, LocaleGroup):
            logger.warning(
                "Конфликт формы ключа %s в %s: ключ уже является группой, значение пропущено",
                child_path, file.filepath)


def build_snapshot(files: Iterable[LocaleFile], version: int = 0) -> LocaleSnapshot:
    files = list(files)
    index = build_index(files)
    tree = build_tree(files, index)
    return LocaleSnapshot(version=version, tree=tree, index=index)


def iter_entries(node: LocaleNode):
    """Обходит все записи поддерева в порядке children."""
    if isinstance(node, LocaleEntry):
        yield node
        return
    for child in node.children.values():
        yield from iter_entries(child)
