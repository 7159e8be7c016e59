"""Operator CLI for finding, syncing and auto-translating translation keys."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from translation_manager.core.config import AppSettings, get_settings
from translation_manager.core.database import get_session_factory
from translation_manager.core.errors import TranslationManagerError
from translation_manager.core.migrations import migrate_database
from translation_manager.integrations.db_storage import DatabaseTranslationStore
from translation_manager.integrations.storage import FileTranslationStore, TranslationStore
from translation_manager.services.translation import TranslationService
from translation_manager.utils.translation_maps import TranslationMap, iter_entries

_DRIVERS = ("file", "database")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="translation-manager",
        description="Find missing translation keys and fill them with machine translations.",
    )
    parser.add_argument(
        "--driver",
        choices=_DRIVERS,
        default=None,
        help="Translation store to use (default: TRANSLATION_DRIVER).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list-languages", help="List every known language.")

    add_language = subparsers.add_parser("add-language", help="Register a new language.")
    add_language.add_argument("language", help="Language code, e.g. fr or pt_BR.")
    add_language.add_argument("--name", help="Optional display name.")

    add_key = subparsers.add_parser("add-key", help="Add or update one translation key.")
    add_key.add_argument("language", help="Language to write to.")
    add_key.add_argument("key", help="Translation key.")
    add_key.add_argument("--value", default="", help="Translated value (default: empty).")
    add_key.add_argument("--group", help="Group file for group translations.")
    add_key.add_argument("--namespace", help="Vendor namespace for the group.")
    add_key.add_argument(
        "--single",
        action="store_true",
        help="Store as a single (JSON) translation instead of a group translation.",
    )

    list_missing = subparsers.add_parser(
        "list-missing",
        help="Show scanned keys missing from one or every language.",
    )
    list_missing.add_argument("language", nargs="?", help="Language to check (default: all).")
    list_missing.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format (default: table).",
    )

    sync_missing = subparsers.add_parser(
        "sync-missing",
        help="Persist scanned keys missing from one or every language with empty values.",
    )
    sync_missing.add_argument("language", nargs="?", help="Language to sync (default: all).")

    auto_translate = subparsers.add_parser(
        "auto-translate",
        help="Sync missing keys, then fill empty values via Google Translate.",
    )
    auto_translate.add_argument(
        "language", nargs="?", help="Language to translate (default: all)."
    )

    sync = subparsers.add_parser(
        "sync",
        help="Copy every translation from one driver into another.",
    )
    sync.add_argument("--from", dest="source", choices=_DRIVERS, required=True)
    sync.add_argument("--to", dest="destination", choices=_DRIVERS, required=True)
    sync.add_argument("--language", help="Only copy this language.")

    return parser


@asynccontextmanager
async def open_store(driver: str, settings: AppSettings) -> AsyncIterator[TranslationStore]:
    if driver == "database":
        await migrate_database(database_url=settings.database_url)
        async with get_session_factory()() as session:
            yield DatabaseTranslationStore(session)
    else:
        yield FileTranslationStore(settings.lang_path)


def render_missing_table(missing: dict[str, TranslationMap]) -> str:
    """Return a plain-text table of missing keys per language."""
    lines: list[str] = []
    for language, translations in missing.items():
        entries = list(iter_entries(translations))
        if not entries:
            lines.append(f"[{language}] no missing keys")
            continue
        lines.append(f"[{language}] {len(entries)} missing key(s)")
        lines.append(f"  {'Type':<8} {'Group':<24} Key")
        for kind, group, key, _ in entries:
            lines.append(f"  {kind.value:<8} {group:<24} {key}")
    return "\n".join(lines)


async def handle_list_languages(service: TranslationService, args: argparse.Namespace) -> int:
    languages = await service.all_languages()
    if not languages:
        print("No languages found.")
        return 0
    for code, name in languages.items():
        marker = " (source)" if code == service.source_language else ""
        label = f" - {name}" if name and name != code else ""
        print(f"{code}{label}{marker}")
    return 0


async def handle_add_language(service: TranslationService, args: argparse.Namespace) -> int:
    await service.add_language(args.language, args.name)
    print(f"Added language {args.language}.")
    return 0


async def handle_add_key(service: TranslationService, args: argparse.Namespace) -> int:
    is_group = not args.single
    if is_group and not args.group:
        raise ValueError("--group is required unless --single is given.")
    event = await service.add(
        args.language,
        args.group,
        args.key,
        args.value,
        is_group_translation=is_group,
        namespace=args.namespace,
    )
    print(f"Stored {event.language}: {event.group} / {event.key}")
    return 0


async def handle_list_missing(service: TranslationService, args: argparse.Namespace) -> int:
    languages = [args.language] if args.language else list(await service.all_languages())
    missing = {
        language: await service.find_missing_translations(language) for language in languages
    }
    if args.format == "json":
        print(json.dumps(missing, indent=2, ensure_ascii=False))
    else:
        print(render_missing_table(missing))
    return 0


async def handle_sync_missing(service: TranslationService, args: argparse.Namespace) -> int:
    saved = await service.save_missing_translations(args.language)
    print(f"Saved {saved} missing key(s).")
    return 0


async def handle_auto_translate(service: TranslationService, args: argparse.Namespace) -> int:
    result = await service.auto_translate(args.language)
    print(f"Saved {result.saved} missing key(s), translated {result.translated} key(s).")
    return 0


async def copy_translations(
    source: TranslationStore,
    destination: TranslationStore,
    *,
    language: str | None = None,
) -> int:
    """Copy every translation of ``source`` into ``destination``; return the key count."""
    languages = [language] if language else list(await source.all_languages())
    copied = 0
    for code in languages:
        for kind, group, key, value in iter_entries(await source.all_translations_for(code)):
            await destination.add_translation(code, kind, group, key, value)
            copied += 1
    return copied


async def handle_sync(settings: AppSettings, args: argparse.Namespace) -> int:
    if args.source == args.destination:
        raise ValueError("--from and --to must name different drivers.")
    async with open_store(args.source, settings) as source:
        async with open_store(args.destination, settings) as destination:
            copied = await copy_translations(source, destination, language=args.language)
    print(f"Copied {copied} translation(s) from {args.source} to {args.destination}.")
    return 0


_HANDLERS = {
    "list-languages": handle_list_languages,
    "add-language": handle_add_language,
    "add-key": handle_add_key,
    "list-missing": handle_list_missing,
    "sync-missing": handle_sync_missing,
    "auto-translate": handle_auto_translate,
}


async def dispatch(args: argparse.Namespace, settings: AppSettings | None = None) -> int:
    settings = settings or get_settings()
    if args.command == "sync":
        return await handle_sync(settings, args)

    handler = _HANDLERS.get(args.command)
    if handler is None:
        raise ValueError(f"Unsupported command {args.command}")

    async with open_store(args.driver or settings.translation_driver, settings) as store:
        service = TranslationService.from_settings(settings, store)
        return await handler(service, args)


def cli() -> int:
    parser = build_parser()
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    try:
        return asyncio.run(dispatch(args))
    except (TranslationManagerError, ValueError) as exc:
        logging.getLogger("translation_manager.cli").error("%s", exc)
        return 1
    except KeyboardInterrupt:  # pragma: no cover - interactive use
        return 130


if __name__ == "__main__":
    raise SystemExit(cli())
