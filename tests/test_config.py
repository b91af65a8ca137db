"""Tests for load_config: YAML + environment overrides."""

from pathlib import Path

import pytest

from locale_index.config import LoaderConfig, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ("SOURCE_LANGUAGE", "DISPLAY_LANGUAGE", "LOCALES_PATHS", "ROOT_PATH",
                 "WATCH_INTERVAL", "EXTENSION", "IGNORE_PREFIX"):
        monkeypatch.delenv(f"LOCALE_INDEX_{name}", raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults():
    config = load_config()
    assert config == LoaderConfig()


def test_yaml_section(tmp_path):
    path = tmp_path / "i18n.yml"
    path.write_text(
        "i18n:\n"
        "  source-language: ru\n"
        "  locales_paths: [src/locales, extra]\n"
        "  watch_interval: 0.5\n"
        "  unknown: 1\n",
        encoding="utf-8",
    )
    config = load_config(str(path))
    assert config.source_language == "ru"
    assert config.locales_paths == ["src/locales", "extra"]
    assert config.watch_interval == 0.5
    assert config.root_path == str(tmp_path)
    assert config.locale_dirs() == [
        str((tmp_path / "src/locales").resolve()),
        str((tmp_path / "extra").resolve()),
    ]


def test_top_level_yaml(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("display_language: fr\n", encoding="utf-8")
    assert load_config(str(path)).display_language == "fr"


def test_missing_yaml_uses_defaults(tmp_path):
    assert load_config(str(tmp_path / "absent.yml")).source_language == "en"


def test_env_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "i18n.yml"
    path.write_text("source_language: ru\n", encoding="utf-8")
    monkeypatch.setenv("LOCALE_INDEX_SOURCE_LANGUAGE", "de")
    monkeypatch.setenv("LOCALE_INDEX_LOCALES_PATHS", "a, b")
    config = load_config(str(path))
    assert config.source_language == "de"
    assert config.locales_paths == ["a", "b"]


def test_dotenv_file(tmp_path):
    env = tmp_path / ".env"
    env.write_text("LOCALE_INDEX_DISPLAY_LANGUAGE=ja\n", encoding="utf-8")
    try:
        assert load_config(env_file=str(env)).display_language == "ja"
    finally:
        import os
        os.environ.pop("LOCALE_INDEX_DISPLAY_LANGUAGE", None)


def test_explicit_root_wins(tmp_path):
    assert load_config(root=str(tmp_path / "proj")).root_path == str(Path(tmp_path / "proj"))
