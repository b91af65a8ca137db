#!/usr/bin/env python3
"""
Translator - машинный перевод ключей через внешнюю функцию.

Сам протокол сервиса перевода здесь не реализуется: оркестратор
получает асинхронную функцию translate(text, source, target) -> text.

Жизненный цикл запроса:
    requested -> validating -> in_flight -> succeeded | failed

Перевод одной записи бросает ошибку вызывающему. Перевод всего ключа
запускает запросы по всем локалям одновременно и возвращает только
успешные результаты; упавшие локали логируются и пропускаются.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Union

from .coverage import shadow_locales
from .errors import EmptySourceError, SameLocaleError, UnknownTranslationError
from .tree import FlattenIndex, LocaleEntry, LocaleRecord, is_filled

logger = logging.getLogger(__name__)

TranslateFunc = Callable[[str, str, str], Awaitable[str]]


class TranslationState(Enum):
    REQUESTED = "requested"
    VALIDATING = "validating"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class PendingWrite:
    """Принятое, но ещё не записанное значение."""
    locale: str
    keypath: str
    value: Any
    filepath: Optional[str] = None


class TranslationOrchestrator:
    """
    Переводит записи и ключи целиком.

    Индекс и список локалей берутся через провайдеры при каждом
    запросе, чтобы работать с актуальным снимком загрузчика.
    """

    def __init__(self, translate: TranslateFunc,
                 get_index: Callable[[], FlattenIndex],
                 get_locales: Callable[[], Iterable[str]],
                 source_language: str = "en"):
        self._translate = translate
        self._get_index = get_index
        self._get_locales = get_locales
        self.source_language = source_language

    def _state(self, record: LocaleRecord, state: TranslationState) -> None:
        logger.debug("Перевод %s [%s]: %s", record.keypath, record.locale, state.value)

    async def translate_record(self, record: LocaleRecord,
                               source_language: Optional[str] = None) -> PendingWrite:
        """
        Переводит одну запись.

        Raises:
            SameLocaleError: локаль записи совпадает с исходной
            EmptySourceError: нет ключа, нет исходной записи или она пустая
            UnknownTranslationError: функция перевода упала
        """
        source_language = source_language or self.source_language
        self._state(record, TranslationState.REQUESTED)
        self._state(record, TranslationState.VALIDATING)

        if record.locale == source_language:
            self._state(record, TranslationState.FAILED)
            raise SameLocaleError()

        entry = self._get_index().get(record.keypath)
        source = entry.locales.get(source_language) if entry else None
        if source is None or not is_filled(source.value):
            self._state(record, TranslationState.FAILED)
            raise EmptySourceError(
                f"Нет исходного значения '{record.keypath}' для локали {source_language}")

        self._state(record, TranslationState.IN_FLIGHT)
        try:
            result = await self._translate(str(source.value), source_language, record.locale)
        except Exception as exc:
            self._state(record, TranslationState.FAILED)
            raise UnknownTranslationError(
                f"Ошибка перевода '{record.keypath}' на {record.locale}: {exc}",
                cause=exc) from exc

        self._state(record, TranslationState.SUCCEEDED)
        return PendingWrite(
            locale=record.locale,
            keypath=record.keypath,
            value=result,
            filepath=record.filepath,
        )

    async def translate_entry(self, entry: LocaleEntry,
                              source_language: Optional[str] = None) -> List[PendingWrite]:
        """Переводит ключ на все локали, кроме исходной, параллельно."""
        source_language = source_language or self.source_language
        records: Dict[str, LocaleRecord] = shadow_locales(
            entry, self._get_locales(), source_language)
        targets = [r for r in records.values() if r.locale != source_language]

        results = await asyncio.gather(
            *(self.translate_record(r, source_language) for r in targets),
            return_exceptions=True,
        )

        pendings = []
        for record, result in zip(targets, results):
            if isinstance(result, Exception):
                logger.warning("Перевод %s на %s пропущен: %s",
                               record.keypath, record.locale, result)
                continue
            if isinstance(result, BaseException):
                raise result
            pendings.append(result)
        logger.info("Перевод %s: %d из %d локалей",
                    entry.keypath, len(pendings), len(targets))
        return pendings

    async def translate(self, target: Union[LocaleEntry, LocaleRecord],
                        source_language: Optional[str] = None) -> List[PendingWrite]:
        """Единая точка входа: ключ целиком или одна запись."""
        if isinstance(target, LocaleEntry):
            return await self.translate_entry(target, source_language)
        return [await self.translate_record(target, source_language)]
