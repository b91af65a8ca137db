#!/usr/bin/env python3
"""
Manager - CLI для индекса локалей.

Команды:
  stats     Покрытие переводами по локалям
  show      Значения ключа во всех локалях (с теневыми записями)
  missing   Ключи без перевода для локали
  set       Записать значение ключа в файл локали
  watch     Отслеживать изменения и печатать покрытие

Использование:
  locale-index stats --root . --locales-path locales
  locale-index show common.title
  locale-index set common.title fr "Bonjour"
  locale-index watch --config i18n.yml
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from .config import load_config
from .errors import LocaleIndexError
from .loader import CHANGED, LocaleLoader
from .translator import PendingWrite
from .tree import LocaleEntry, is_filled

logger = logging.getLogger(__name__)

console = Console()


class RichPrompt:
    """Выбор файла для записи через rich.prompt. Пустой ввод - отмена."""

    def __init__(self, console: Console):
        self.console = console

    async def ask_path(self, locale: str, keypath: str) -> Optional[str]:
        answer = await asyncio.to_thread(
            Prompt.ask,
            f'Путь к файлу для ключа "{keypath}" (например path/to/{locale}.json)',
            console=self.console,
            default="",
            show_default=False,
        )
        return answer.strip() or None

    async def pick_path(self, paths: List[str], keypath: str) -> Optional[str]:
        for i, path in enumerate(paths, 1):
            self.console.print(f"  [cyan]{i}[/cyan]. {path}")
        answer = await asyncio.to_thread(
            Prompt.ask,
            f'В какой файл записать ключ "{keypath}"',
            console=self.console,
            choices=[str(i) for i in range(1, len(paths) + 1)] + [""],
            default="",
            show_choices=False,
            show_default=False,
        )
        return paths[int(answer) - 1] if answer else None


async def _open_loader(args) -> LocaleLoader:
    config = load_config(args.config, root=args.root)
    if args.locales_path:
        config.locales_paths = args.locales_path
    if args.source:
        config.source_language = args.source
    loader = LocaleLoader(config, prompt=RichPrompt(console))
    await loader.init()
    for filepath, error in loader.catalog.errors.items():
        console.print(f"[yellow]⚠️  Пропущен {filepath}: {error}[/yellow]")
    return loader


def _coverage_table(loader: LocaleLoader) -> Table:
    table = Table(title="Покрытие переводами")
    table.add_column("Локаль", style="bold")
    table.add_column("Всего", justify="right")
    table.add_column("Переведено", justify="right")
    table.add_column("Ожидают", justify="right")
    table.add_column("Покрытие", justify="right")
    for locale in sorted(loader.locales):
        cov = loader.get_coverage(locale)
        color = "green" if cov.missing == 0 else "yellow"
        table.add_row(locale, str(cov.total), str(cov.translated),
                      str(cov.missing), f"[{color}]{cov.percent}%[/{color}]")
    return table


async def cmd_stats(args) -> int:
    """Команда: покрытие по локалям."""
    loader = await _open_loader(args)
    if not loader.locales:
        console.print("\n  Файлы локалей не найдены.")
        console.print(f"  Директории: {', '.join(loader.config.locale_dirs())}")
        return 1
    console.print(_coverage_table(loader))
    return 0


async def cmd_show(args) -> int:
    """Команда: значения ключа во всех локалях."""
    loader = await _open_loader(args)
    records = loader.get_translations_by_key(args.key)
    if not records:
        closest = loader.get_closest_node_by_key(args.key)
        console.print(f"[red]Ключ '{args.key}' не найден[/red]")
        if closest is not None:
            kind = "запись" if isinstance(closest, LocaleEntry) else "группа"
            console.print(f"  Ближайший существующий узел: {closest.keypath} ({kind})")
        return 1

    table = Table(title=args.key)
    table.add_column("Локаль", style="bold")
    table.add_column("Значение")
    table.add_column("Файл", style="dim")
    for locale, record in sorted(records.items()):
        value = "[dim](нет перевода)[/dim]" if record.shadow else str(record.value)
        table.add_row(locale, value, record.filepath or "?")
    console.print(table)
    return 0


async def cmd_missing(args) -> int:
    """Команда: ключи без перевода."""
    loader = await _open_loader(args)
    cov = loader.get_coverage(args.locale)
    missing = [k for k in cov.keys if not is_filled(loader.index[k].get_value(args.locale))]
    for key in missing:
        console.print(f"  {key}")
    console.print(f"\n  [{args.locale}] Не переведено: {len(missing)} из {cov.total}")
    return 0 if not missing else 2


async def cmd_set(args) -> int:
    """Команда: записать значение ключа."""
    loader = await _open_loader(args)
    filepath = args.file
    if not filepath:
        filepath = loader.get_shadow_filepath(args.key, args.locale)
        record = loader.get_translations_by_key(args.key, shadow=False).get(args.locale)
        if record is not None:
            filepath = record.filepath
    pending = PendingWrite(locale=args.locale, keypath=args.key,
                           value=args.value, filepath=filepath)
    written = await loader.write_to_file(pending)
    console.print(f"[green]✅ {args.key} [{args.locale}] -> {written[0]}[/green]")
    return 0


async def cmd_watch(args) -> int:
    """Команда: отслеживание изменений."""
    loader = await _open_loader(args)
    console.print(_coverage_table(loader))
    loader.on(CHANGED, lambda _: console.print(_coverage_table(loader)))
    watcher = await loader.watch()
    console.print(f"👀 Отслеживание: {', '.join(watcher.roots)} (Ctrl+C - выход)")
    try:
        await asyncio.Event().wait()
    finally:
        await loader.stop_watching()
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Строит парсер аргументов."""
    parser = argparse.ArgumentParser(
        prog="locale-index",
        description="Индекс файлов локалей: покрытие, просмотр и запись ключей",
    )
    parser.add_argument("--config", default="", help="YAML-файл конфигурации")
    parser.add_argument("--root", default=None, help="Корень проекта")
    parser.add_argument("--locales-path", action="append", default=[],
                        help="Директория локалей относительно корня (можно несколько)")
    parser.add_argument("--source", default="", help="Исходный язык")
    parser.add_argument("-v", "--verbose", action="store_true", help="Подробный лог")

    subparsers = parser.add_subparsers(dest="command", help="Команда")

    subparsers.add_parser("stats", help="Покрытие переводами")

    p_show = subparsers.add_parser("show", help="Значения ключа")
    p_show.add_argument("key", help="Ключ (a.b.c)")

    p_missing = subparsers.add_parser("missing", help="Непереведённые ключи")
    p_missing.add_argument("locale", help="Локаль")

    p_set = subparsers.add_parser("set", help="Записать значение")
    p_set.add_argument("key", help="Ключ (a.b.c)")
    p_set.add_argument("locale", help="Локаль")
    p_set.add_argument("value", help="Значение")
    p_set.add_argument("--file", default="", help="Файл для записи")

    subparsers.add_parser("watch", help="Отслеживать изменения")

    return parser


COMMANDS = {
    "stats": cmd_stats,
    "show": cmd_show,
    "missing": cmd_missing,
    "set": cmd_set,
    "watch": cmd_watch,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Точка входа CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return asyncio.run(handler(args))
    except LocaleIndexError as exc:
        logger.error("%s", exc)
        console.print(f"[red]❌ Ошибка: {exc}[/red]")
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
