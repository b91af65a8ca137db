import json
import sys
from pathlib import Path

import pytest

SRC = Path(__file__).resolve().parent.parent / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from locale_index.config import LoaderConfig  # noqa: E402
from locale_index.loader import LocaleLoader  # noqa: E402


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    return path


def read_json(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def locales_dir(tmp_path):
    """Директория locales/ с en.json и fr.json."""
    root = tmp_path / "locales"
    write_json(root / "en.json", {"a": {"b": "hello"}})
    write_json(root / "fr.json", {"a": {"b": ""}})
    return root


@pytest.fixture
def config(tmp_path):
    return LoaderConfig(root_path=str(tmp_path), locales_paths=["locales"],
                        source_language="en", display_language="en")


@pytest.fixture
def make_loader(config):
    def _make(**kwargs):
        return LocaleLoader(config, **kwargs)
    return _make
