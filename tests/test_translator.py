"""Tests for TranslationOrchestrator: error taxonomy and concurrent fan-out."""

import asyncio

import pytest

from locale_index.catalog import LocaleFile
from locale_index.errors import (
    EmptySourceError,
    SameLocaleError,
    UnknownTranslationError,
)
from locale_index.flatten import flatten
from locale_index.translator import PendingWrite, TranslationOrchestrator
from locale_index.tree import LocaleRecord, build_snapshot


def make_file(filepath, locale, value):
    return LocaleFile(filepath=filepath, locale=locale, value=value, flatten=flatten(value))


@pytest.fixture
def snapshot():
    return build_snapshot([
        make_file("/l/en.json", "en", {"a": {"b": "hello", "empty": ""}}),
        make_file("/l/fr.json", "fr", {"a": {"b": ""}}),
        make_file("/l/de.json", "de", {"other": "x"}),
    ])


@pytest.fixture
def calls():
    return []


@pytest.fixture
def orchestrator(snapshot, calls):
    async def translate(text, source, target):
        calls.append((text, source, target))
        await asyncio.sleep(0)
        return f"{text}@{target}"

    return TranslationOrchestrator(
        translate,
        get_index=lambda: snapshot.index,
        get_locales=lambda: ["en", "fr", "de"],
        source_language="en",
    )


class TestTranslateRecord:
    @pytest.mark.asyncio
    async def test_success(self, orchestrator, snapshot, calls):
        record = snapshot.index["a.b"].locales["fr"]
        pending = await orchestrator.translate_record(record)
        assert pending == PendingWrite(locale="fr", keypath="a.b",
                                       value="hello@fr", filepath="/l/fr.json")
        assert calls == [("hello", "en", "fr")]

    @pytest.mark.asyncio
    async def test_same_locale(self, orchestrator, snapshot, calls):
        record = snapshot.index["a.b"].locales["en"]
        with pytest.raises(SameLocaleError):
            await orchestrator.translate_record(record, "en")
        assert calls == []

    @pytest.mark.asyncio
    async def test_missing_key(self, orchestrator, calls):
        record = LocaleRecord(locale="fr", keypath="no.such", keyname="such")
        with pytest.raises(EmptySourceError):
            await orchestrator.translate_record(record)
        assert calls == []

    @pytest.mark.asyncio
    async def test_missing_source_record(self, orchestrator, snapshot):
        record = LocaleRecord(locale="fr", keypath="other", keyname="other")
        with pytest.raises(EmptySourceError):
            await orchestrator.translate_record(record)

    @pytest.mark.asyncio
    async def test_empty_source_value(self, orchestrator):
        record = LocaleRecord(locale="fr", keypath="a.empty", keyname="empty")
        with pytest.raises(EmptySourceError):
            await orchestrator.translate_record(record)

    @pytest.mark.asyncio
    async def test_backend_failure_is_wrapped(self, snapshot):
        boom = ConnectionError("down")

        async def translate(text, source, target):
            raise boom

        orch = TranslationOrchestrator(translate, lambda: snapshot.index, lambda: ["en", "fr"])
        with pytest.raises(UnknownTranslationError) as info:
            await orch.translate_record(snapshot.index["a.b"].locales["fr"])
        assert info.value.cause is boom


class TestTranslateEntry:
    @pytest.mark.asyncio
    async def test_all_locales_except_source(self, orchestrator, snapshot, calls):
        pendings = await orchestrator.translate_entry(snapshot.index["a.b"])
        by_locale = {p.locale: p for p in pendings}
        assert set(by_locale) == {"fr", "de"}
        assert by_locale["fr"].filepath == "/l/fr.json"
        # shadow record supplies the inferred target file
        assert by_locale["de"].filepath.endswith("de.json")
        assert all(c[1] == "en" for c in calls)

    @pytest.mark.asyncio
    async def test_requests_run_concurrently(self, snapshot):
        started = []
        release = asyncio.Event()

        async def translate(text, source, target):
            started.append(target)
            if len(started) == 2:
                release.set()
            await release.wait()
            return text.upper()

        orch = TranslationOrchestrator(translate, lambda: snapshot.index,
                                       lambda: ["en", "fr", "de"])
        pendings = await asyncio.wait_for(orch.translate_entry(snapshot.index["a.b"]), 1)
        assert sorted(p.locale for p in pendings) == ["de", "fr"]

    @pytest.mark.asyncio
    async def test_partial_failure(self, snapshot):
        async def translate(text, source, target):
            if target == "de":
                raise RuntimeError("quota")
            return "bonjour"

        orch = TranslationOrchestrator(translate, lambda: snapshot.index,
                                       lambda: ["en", "fr", "de"])
        pendings = await orch.translate_entry(snapshot.index["a.b"])
        assert [(p.locale, p.value) for p in pendings] == [("fr", "bonjour")]

    @pytest.mark.asyncio
    async def test_translate_dispatch(self, orchestrator, snapshot):
        entry = snapshot.index["a.b"]
        assert len(await orchestrator.translate(entry)) == 2
        single = await orchestrator.translate(entry.locales["fr"])
        assert [p.locale for p in single] == ["fr"]
