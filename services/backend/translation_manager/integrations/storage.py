from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

from translation_manager.core.errors import LanguageExistsError, StoreError
from translation_manager.utils.translation_maps import (
    LANGUAGE_CODE_PATTERN,
    SINGLE_GROUP,
    TranslationKind,
    TranslationMap,
    empty_translation_map,
    flatten,
    split_namespace,
    unflatten,
)


logger = logging.getLogger(__name__)

_LANGUAGE_CODE = re.compile(LANGUAGE_CODE_PATTERN)


class TranslationStore:
    """Abstract per-language translation storage."""

    async def all_languages(self) -> dict[str, str]:
        """Return every known language code mapped to its display name."""
        raise NotImplementedError

    async def language_exists(self, language: str) -> bool:
        return language in await self.all_languages()

    async def add_language(self, language: str, name: str | None = None) -> None:
        raise NotImplementedError

    async def all_translations_for(self, language: str) -> TranslationMap:
        """Return ``kind -> group -> key -> value`` for ``language``."""
        raise NotImplementedError

    async def get_groups_for(self, language: str) -> list[str]:
        translations = await self.all_translations_for(language)
        return sorted(translations.get(TranslationKind.GROUP.value, {}))

    async def add_group_translation(
        self,
        language: str,
        group: str,
        key: str,
        value: str = "",
    ) -> None:
        raise NotImplementedError

    async def add_single_translation(
        self,
        language: str,
        vendor: str,
        key: str,
        value: str = "",
    ) -> None:
        raise NotImplementedError

    async def add_translation(
        self,
        language: str,
        kind: TranslationKind,
        group: str,
        key: str,
        value: str = "",
    ) -> None:
        """Write through the group or single path selected by ``kind``."""
        if kind is TranslationKind.SINGLE:
            await self.add_single_translation(language, group, key, value)
        else:
            await self.add_group_translation(language, group, key, value)


class FileTranslationStore(TranslationStore):
    """JSON translation files on disk.

    Layout under ``root``::

        <lang>.json                          single translations
        <lang>/<group>.json                  group translations
        vendor/<ns>/<lang>.json              namespaced single translations
        vendor/<ns>/<lang>/<group>.json      namespaced group translations
    """

    _VENDOR_DIR = "vendor"

    def __init__(self, root: Path | str):
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    async def all_languages(self) -> dict[str, str]:
        if not self._root.is_dir():
            return {}
        codes: set[str] = set()
        try:
            for entry in self._root.iterdir():
                if entry.is_dir():
                    codes.add(entry.name)
                elif entry.is_file() and entry.suffix == ".json":
                    codes.add(entry.stem)
        except OSError as exc:
            raise StoreError(f"Unable to list languages in {self._root}") from exc
        codes.discard(self._VENDOR_DIR)
        return {code: code for code in sorted(codes) if _LANGUAGE_CODE.fullmatch(code)}

    async def add_language(self, language: str, name: str | None = None) -> None:
        self._check_language(language)
        if await self.language_exists(language):
            raise LanguageExistsError(language)
        try:
            (self._root / language).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreError(f"Unable to create language directory for '{language}'") from exc
        self._write_json(self._root / f"{language}.json", {})
        logger.info("Created language %s in %s", language, self._root)

    async def all_translations_for(self, language: str) -> TranslationMap:
        self._check_language(language)
        translations = empty_translation_map()
        group_translations = translations[TranslationKind.GROUP.value]
        single_translations = translations[TranslationKind.SINGLE.value]

        for group, path in self._group_files(self._root / language):
            group_translations[group] = flatten(self._read_json(path))

        single_path = self._root / f"{language}.json"
        if single_path.is_file():
            single_translations[SINGLE_GROUP] = self._read_single(single_path)

        vendor_root = self._root / self._VENDOR_DIR
        if vendor_root.is_dir():
            for namespace_dir in sorted(p for p in vendor_root.iterdir() if p.is_dir()):
                namespace = namespace_dir.name
                for group, path in self._group_files(namespace_dir / language):
                    group_translations[f"{namespace}::{group}"] = flatten(self._read_json(path))
                vendor_single = namespace_dir / f"{language}.json"
                if vendor_single.is_file():
                    single_translations[f"{namespace}::{SINGLE_GROUP}"] = self._read_single(
                        vendor_single
                    )

        return translations

    async def add_group_translation(
        self,
        language: str,
        group: str,
        key: str,
        value: str = "",
    ) -> None:
        await self._ensure_language(language)
        path = self._group_path(language, group)
        current = flatten(self._read_json(path)) if path.is_file() else {}
        current[key] = value or ""
        try:
            document: dict[str, Any] = unflatten(dict(sorted(current.items())))
        except ValueError:
            logger.warning("Keys in %s collide when nested; writing dotted keys instead.", path)
            document = dict(sorted(current.items()))
        self._write_json(path, document)
        logger.debug("Stored group translation %s/%s.%s", language, group, key)

    async def add_single_translation(
        self,
        language: str,
        vendor: str,
        key: str,
        value: str = "",
    ) -> None:
        await self._ensure_language(language)
        path = self._single_path(language, vendor)
        current = self._read_single(path) if path.is_file() else {}
        current[key] = value or ""
        self._write_json(path, dict(sorted(current.items())))
        logger.debug("Stored single translation %s/%s", language, key)

    async def _ensure_language(self, language: str) -> None:
        self._check_language(language)
        if not await self.language_exists(language):
            await self.add_language(language)

    def _group_path(self, language: str, group: str) -> Path:
        namespace, name = split_namespace(group)
        self._check_segment(name, allow_nested=True)
        if namespace:
            self._check_segment(namespace)
            base = self._root / self._VENDOR_DIR / namespace / language
        else:
            base = self._root / language
        return base / f"{name}.json"

    def _single_path(self, language: str, vendor: str) -> Path:
        namespace, _ = split_namespace(vendor)
        if namespace:
            self._check_segment(namespace)
            return self._root / self._VENDOR_DIR / namespace / f"{language}.json"
        return self._root / f"{language}.json"

    @classmethod
    def _check_language(cls, language: str) -> None:
        if not _LANGUAGE_CODE.fullmatch(language) or language == cls._VENDOR_DIR:
            raise StoreError(f"Invalid language code '{language}'.")

    @staticmethod
    def _check_segment(segment: str, *, allow_nested: bool = False) -> None:
        parts = segment.split("/") if allow_nested else [segment]
        if not segment or any(part in {"", ".", ".."} or "\\" in part for part in parts):
            raise StoreError(f"Invalid translation group or namespace '{segment}'.")

    @staticmethod
    def _group_files(directory: Path) -> list[tuple[str, Path]]:
        if not directory.is_dir():
            return []
        return [
            (path.relative_to(directory).with_suffix("").as_posix(), path)
            for path in sorted(directory.rglob("*.json"))
        ]

    def _read_single(self, path: Path) -> dict[str, str]:
        return {
            str(key): "" if value is None else str(value)
            for key, value in self._read_json(path).items()
        }

    @staticmethod
    def _read_json(path: Path) -> dict[str, Any]:
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Unable to read translations from {path}") from exc
        if not isinstance(payload, dict):
            raise StoreError(f"Translation file {path} must contain a JSON object.")
        return payload

    @staticmethod
    def _write_json(path: Path, payload: dict[str, Any]) -> None:
        temp_path = path.with_name(f"{path.name}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with temp_path.open("w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=False, indent=4)
                handle.write("\n")
            os.replace(temp_path, path)
        except OSError as exc:
            raise StoreError(f"Unable to write translations to {path}") from exc
