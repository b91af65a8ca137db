"""
Errors - таксономия ошибок индексатора локалей.

Ошибки загрузки файлов остаются внутри каталога (логируются и
складываются в catalog.errors). Ошибки перевода и записи одной
записи пробрасываются непосредственному вызывающему.
"""

from enum import Enum
from typing import Optional


class ErrorType(Enum):
    PARSE = "parse_error"
    SAME_LOCALE = "translating_same_locale"
    EMPTY_SOURCE = "translating_empty_source_value"
    UNKNOWN_TRANSLATION = "translating_unknown_error"
    FILEPATH_NOT_SPECIFIED = "filepath_not_specified"


class LocaleIndexError(Exception):
    """Базовая ошибка индексатора."""

    error_type: ErrorType = ErrorType.PARSE
    default_message = "Ошибка индексатора локалей"

    def __init__(self, message: Optional[str] = None,
                 cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message or self.default_message)


class ParseError(LocaleIndexError):
    error_type = ErrorType.PARSE
    default_message = "Не удалось разобрать файл локали"

    def __init__(self, filepath: str, cause: Optional[BaseException] = None):
        self.filepath = filepath
        detail = f": {cause}" if cause else ""
        super().__init__(f"Не удалось разобрать {filepath}{detail}", cause)


class SameLocaleError(LocaleIndexError):
    error_type = ErrorType.SAME_LOCALE
    default_message = "Нельзя переводить локаль саму в себя"


class EmptySourceError(LocaleIndexError):
    error_type = ErrorType.EMPTY_SOURCE
    default_message = "Исходное значение для перевода отсутствует или пустое"


class UnknownTranslationError(LocaleIndexError):
    error_type = ErrorType.UNKNOWN_TRANSLATION
    default_message = "Неизвестная ошибка при переводе"


class FilepathNotSpecifiedError(LocaleIndexError):
    error_type = ErrorType.FILEPATH_NOT_SPECIFIED
    default_message = "Не указан файл для записи"
