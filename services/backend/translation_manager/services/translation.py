from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from translation_manager.core.config import AppSettings
from translation_manager.core.errors import TranslationApiError, TranslationBatchError
from translation_manager.integrations.google import GoogleTranslator, MachineTranslator
from translation_manager.integrations.storage import TranslationStore
from translation_manager.services.events import TranslationAdded, TranslationEvents
from translation_manager.services.scanner import TranslationScanner
from translation_manager.utils.translation_maps import (
    SINGLE_GROUP,
    MergedMap,
    TranslationKind,
    TranslationMap,
    contains_key,
    filter_text_contains,
    iter_entries,
    merge_with_target,
    namespaced_group,
    recursive_diff,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AutoTranslateResult:
    saved: int = 0
    translated: int = 0


class TranslationScannerProtocol(Protocol):
    def find_translations(self) -> TranslationMap: ...


class TranslationService:
    """Find, persist and machine-translate missing translation keys.

    Every operation reads fresh maps from the scanner and the store; nothing
    is cached between calls.
    """

    def __init__(
        self,
        store: TranslationStore,
        scanner: TranslationScannerProtocol,
        *,
        source_language: str,
        translator: MachineTranslator | None = None,
        events: TranslationEvents | None = None,
        continue_on_error: bool = False,
    ) -> None:
        self._store = store
        self._scanner = scanner
        self._source_language = source_language
        self._translator = translator
        self._events = events or TranslationEvents()
        self._continue_on_error = continue_on_error

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        store: TranslationStore,
        *,
        translator: MachineTranslator | None = None,
        events: TranslationEvents | None = None,
    ) -> TranslationService:
        return cls(
            store,
            TranslationScanner.from_settings(settings),
            source_language=settings.source_language,
            translator=translator or GoogleTranslator.from_settings(settings),
            events=events,
            continue_on_error=settings.auto_translate_continue_on_error,
        )

    @property
    def source_language(self) -> str:
        return self._source_language

    @property
    def events(self) -> TranslationEvents:
        return self._events

    async def all_languages(self) -> dict[str, str]:
        return await self._store.all_languages()

    async def add_language(self, language: str, name: str | None = None) -> None:
        await self._store.add_language(language, name)

    async def find_missing_translations(self, language: str) -> TranslationMap:
        """Return scanned keys that are absent from, or differ in, ``language``."""
        return recursive_diff(
            self._scanner.find_translations(),
            await self._store.all_translations_for(language),
        )

    async def save_missing_translations(self, language: str | None = None) -> int:
        """Persist every missing key with an empty value and return how many were written.

        Keys already stored with a different value are left alone; only the
        key's existence is persisted, never the scanner's placeholder value.
        """
        saved = 0
        for code in await self._languages(language):
            scanned = self._scanner.find_translations()
            stored = await self._store.all_translations_for(code)
            missing = recursive_diff(scanned, stored)
            for kind, group, key, _ in iter_entries(missing):
                if contains_key(stored, kind.value, group, key):
                    continue
                await self._store.add_translation(code, kind, group, key, "")
                saved += 1
            logger.info("Saved missing translation keys for %s", code)
        return saved

    async def auto_translate(self, language: str | None = None) -> AutoTranslateResult:
        """Save missing keys and machine-translate them, one language at a time."""
        saved = translated = 0
        for code in await self._languages(language):
            saved += await self.save_missing_translations(code)
            translated += await self.translate_language(code)
        return AutoTranslateResult(saved=saved, translated=translated)

    async def translate_language(self, language: str) -> int:
        """Fill every empty target value from the source language; return the count."""
        if language == self._source_language:
            return 0
        if self._translator is None:
            raise TranslationApiError("No machine translator is configured.")

        merged = await self.get_source_language_translations_with(language)
        translated = 0
        failures: list[tuple[str, str, str]] = []
        for kind, group, key, entry in iter_entries(merged):
            if entry.target:
                continue
            text = entry.source or key
            try:
                value = await self._translator.translate(language, text)
            except TranslationApiError as exc:
                if not self._continue_on_error:
                    raise
                logger.warning(
                    "Translation of %s.%s into %s failed: %s", group, key, language, exc
                )
                failures.append((kind.value, group, key))
                continue
            await self._store.add_translation(language, kind, group, key, value)
            translated += 1

        logger.info("Translated %d key(s) into %s", translated, language)
        if failures:
            raise TranslationBatchError(language, failures)
        return translated

    async def get_source_language_translations_with(self, language: str) -> MergedMap:
        return merge_with_target(
            await self._store.all_translations_for(self._source_language),
            await self._store.all_translations_for(language),
        )

    async def filter_translations_for(
        self,
        language: str,
        filter: str | None,
        *,
        group: str | None = None,
    ) -> MergedMap:
        translations = await self.get_source_language_translations_with(language)
        if group:
            translations = {
                kind: {name: keys for name, keys in groups.items() if name == group}
                for kind, groups in translations.items()
            }
        if not filter:
            return translations
        return filter_text_contains(translations, filter)

    async def add(
        self,
        language: str,
        group: str | None,
        key: str,
        value: str | None = "",
        *,
        is_group_translation: bool,
        namespace: str | None = None,
    ) -> TranslationAdded:
        """Store one translation and notify subscribers."""
        effective_group = namespaced_group(group, namespace) if group else ""
        value = value or ""

        if is_group_translation:
            await self._store.add_translation(
                language, TranslationKind.GROUP, effective_group, key, value
            )
        else:
            await self._store.add_translation(
                language, TranslationKind.SINGLE, SINGLE_GROUP, key, value
            )

        event = TranslationAdded(
            language=language,
            group=effective_group or SINGLE_GROUP,
            key=key,
            value=value,
        )
        self._events.dispatch(event)
        return event

    async def _languages(self, language: str | None) -> list[str]:
        if language:
            return [language]
        return list(await self._store.all_languages())
