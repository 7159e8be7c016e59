from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from translation_manager.core.errors import LanguageExistsError, StoreError
from translation_manager.integrations.storage import TranslationStore
from translation_manager.models import Language, Translation
from translation_manager.utils.translation_maps import (
    TranslationKind,
    TranslationMap,
    empty_translation_map,
)


logger = logging.getLogger(__name__)


class DatabaseTranslationStore(TranslationStore):
    """Translations persisted in the ``languages`` and ``translations`` tables.

    Every write is committed on its own so a batch that fails halfway keeps
    the keys written before the failure.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def all_languages(self) -> dict[str, str]:
        try:
            result = await self._session.execute(select(Language).order_by(Language.language))
        except SQLAlchemyError as exc:
            raise StoreError("Unable to list languages.") from exc
        return {record.language: record.name or record.language for record in result.scalars()}

    async def language_exists(self, language: str) -> bool:
        return await self._get_language(language) is not None

    async def add_language(self, language: str, name: str | None = None) -> None:
        if await self._get_language(language) is not None:
            raise LanguageExistsError(language)
        await self._create_language(language, name)
        await self._commit()
        logger.info("Created language %s", language)

    async def all_translations_for(self, language: str) -> TranslationMap:
        translations = empty_translation_map()
        stmt = (
            select(Translation)
            .join(Language, Translation.language_id == Language.id)
            .where(Language.language == language)
            .order_by(Translation.id)
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StoreError(f"Unable to load translations for '{language}'.") from exc

        for record in result.scalars():
            groups = translations.setdefault(record.kind, {})
            groups.setdefault(record.group, {})[record.key] = record.value or ""
        return translations

    async def add_group_translation(
        self,
        language: str,
        group: str,
        key: str,
        value: str = "",
    ) -> None:
        await self._upsert(language, TranslationKind.GROUP, group, key, value)

    async def add_single_translation(
        self,
        language: str,
        vendor: str,
        key: str,
        value: str = "",
    ) -> None:
        await self._upsert(language, TranslationKind.SINGLE, vendor, key, value)

    async def _upsert(
        self,
        language: str,
        kind: TranslationKind,
        group: str,
        key: str,
        value: str,
    ) -> None:
        record = await self._get_language(language)
        if record is None:
            record = await self._create_language(language, None)

        stmt = select(Translation).where(
            Translation.language_id == record.id,
            Translation.kind == kind.value,
            Translation.group == group,
            Translation.key == key,
        )
        try:
            result = await self._session.execute(stmt)
            translation = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError(f"Unable to look up translation {group}.{key}.") from exc

        if translation is None:
            self._session.add(
                Translation(
                    language_id=record.id,
                    kind=kind.value,
                    group=group,
                    key=key,
                    value=value or "",
                )
            )
        else:
            translation.value = value or ""
        await self._commit()
        logger.debug("Stored %s translation %s/%s.%s", kind.value, language, group, key)

    async def _get_language(self, language: str) -> Language | None:
        try:
            result = await self._session.execute(
                select(Language).where(Language.language == language)
            )
        except SQLAlchemyError as exc:
            raise StoreError(f"Unable to look up language '{language}'.") from exc
        return result.scalar_one_or_none()

    async def _create_language(self, language: str, name: str | None) -> Language:
        record = Language(language=language, name=name)
        self._session.add(record)
        try:
            await self._session.flush()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise StoreError(f"Unable to create language '{language}'.") from exc
        return record

    async def _commit(self) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise StoreError("Unable to persist translation changes.") from exc
