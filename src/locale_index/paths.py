"""
Paths - правила путей к файлам локалей.

Поддерживаются две раскладки:
    locales/en.json           - локаль в имени файла (nested=False)
    locales/en/common.json    - локаль в имени папки (nested=True)
"""

import os
import re
from pathlib import Path
from typing import Iterator, NamedTuple, Optional

DEFAULT_EXTENSION = ".json"
DEFAULT_IGNORE_PREFIX = "_"

_LOCALE_RE = re.compile(r"^[a-z]{2,3}([-_][a-z0-9]{2,8})*$", re.IGNORECASE)


class FileInfo(NamedTuple):
    locale: str
    nested: bool


def normalize_locale(name: str) -> Optional[str]:
    """Возвращает код локали или None, если имя на него не похоже."""
    if name and _LOCALE_RE.match(name):
        return name
    return None


def resolve_path(filepath: str) -> str:
    """Канонический путь файла: абсолютный, с раскрытыми симлинками."""
    return str(Path(filepath).resolve())


def is_within(filepath: str, root: str) -> bool:
    root = resolve_path(root)
    try:
        return os.path.commonpath([resolve_path(filepath), root]) == root
    except ValueError:
        return False


def get_file_info(filepath: str, root: Optional[str] = None) -> FileInfo:
    """
    Определяет локаль и режим вложенности по пути.

    Если известна директория локалей root, раскладка определяется по
    положению файла: файл прямо в root - локаль в имени файла, файл в
    подпапке root - локаль в имени подпапки. Без root сначала проверяется
    имя файла, затем имя папки.

    Raises:
        ValueError: если ни имя файла, ни имя папки не являются кодом локали
    """
    path = Path(filepath)
    candidates = [(path.stem, False), (path.parent.name, True)]
    if root is not None:
        base = Path(root)
        if path.parent == base:
            candidates = candidates[:1]
        elif path.parent.parent == base:
            candidates = candidates[1:]
    for name, nested in candidates:
        locale = normalize_locale(name)
        if locale:
            return FileInfo(locale, nested)
    raise ValueError(f"Не удалось определить локаль по пути: {filepath}")


def replace_locale_path(filepath: str, locale: str,
                        current: Optional[str] = None) -> Optional[str]:
    """
    Подставляет другую локаль в путь файла.

    locales/en.json -> locales/fr.json
    locales/en/common.json -> locales/fr/common.json

    current - локаль, которой принадлежит filepath; с ней папка локали
    проверяется раньше имени файла (locales/en/app.json).
    """
    path = Path(filepath)
    if current is not None:
        if path.parent.name == current:
            return str(path.parent.parent / locale / path.name)
        if path.stem == current:
            return str(path.with_name(f"{locale}{path.suffix}"))
    if normalize_locale(path.stem):
        return str(path.with_name(f"{locale}{path.suffix}"))
    if normalize_locale(path.parent.name):
        return str(path.parent.parent / locale / path.name)
    return None


def is_document(filepath: str, extension: str = DEFAULT_EXTENSION) -> bool:
    return os.path.splitext(filepath)[1] == extension


def iter_locale_files(root: str, extension: str = DEFAULT_EXTENSION,
                      ignore_prefix: str = DEFAULT_IGNORE_PREFIX) -> Iterator[str]:
    """
    Обходит директорию локалей.

    Имена с ignore_prefix пропускаются, подпапки читаются ровно на
    один уровень (их содержимое - файлы, глубже не спускаемся).
    """
    root_path = Path(root)
    if not root_path.is_dir():
        return
    for entry in sorted(root_path.iterdir()):
        if ignore_prefix and entry.name.startswith(ignore_prefix):
            continue
        if entry.is_dir():
            for child in sorted(entry.iterdir()):
                if child.is_file() and is_document(child.name, extension):
                    yield str(child.resolve())
        elif is_document(entry.name, extension):
            yield str(entry.resolve())
