"""
locale_index - индексатор файлов локалей.

Модули:
- catalog: Загрузка и разбор JSON-файлов локалей
- flatten: Плоский вид документов и запись по пути
- paths: Правила путей (локаль из пути, подстановка локали)
- tree: Дерево пространств имён и плоский индекс ключей
- coverage: Покрытие переводами и теневые записи
- translator: Машинный перевод через внешнюю функцию
- writer: Запись значений обратно в файлы
- watcher: Отслеживание изменений файлов
- loader: Контекст, связывающий всё вместе
- manager: CLI
"""

from .catalog import LocaleCatalog, LocaleFile
from .config import LoaderConfig, load_config
from .coverage import Coverage
from .errors import (
    EmptySourceError,
    ErrorType,
    FilepathNotSpecifiedError,
    LocaleIndexError,
    ParseError,
    SameLocaleError,
    UnknownTranslationError,
)
from .loader import LocaleLoader
from .translator import PendingWrite, TranslationOrchestrator
from .tree import LocaleEntry, LocaleGroup, LocaleRecord, LocaleSnapshot

__all__ = [
    "Coverage",
    "EmptySourceError",
    "ErrorType",
    "FilepathNotSpecifiedError",
    "LoaderConfig",
    "LocaleCatalog",
    "LocaleEntry",
    "LocaleFile",
    "LocaleGroup",
    "LocaleIndexError",
    "LocaleLoader",
    "LocaleRecord",
    "LocaleSnapshot",
    "ParseError",
    "PendingWrite",
    "SameLocaleError",
    "TranslationOrchestrator",
    "UnknownTranslationError",
    "load_config",
]
