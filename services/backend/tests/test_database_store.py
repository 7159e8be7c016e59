from __future__ import annotations

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from translation_manager.core.errors import LanguageExistsError
from translation_manager.integrations.db_storage import DatabaseTranslationStore
from translation_manager.models import Base, Translation
from translation_manager.utils.translation_maps import TranslationKind


@pytest_asyncio.fixture()
async def translation_session() -> AsyncSession:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.mark.asyncio
async def test_add_language_and_list(translation_session: AsyncSession) -> None:
    store = DatabaseTranslationStore(translation_session)

    await store.add_language("fr", "Français")
    await store.add_language("en")

    assert await store.all_languages() == {"en": "en", "fr": "Français"}
    assert await store.language_exists("fr")
    assert not await store.language_exists("de")


@pytest.mark.asyncio
async def test_add_language_rejects_duplicates(translation_session: AsyncSession) -> None:
    store = DatabaseTranslationStore(translation_session)
    await store.add_language("fr")

    with pytest.raises(LanguageExistsError):
        await store.add_language("fr")


@pytest.mark.asyncio
async def test_translations_are_grouped_by_kind(translation_session: AsyncSession) -> None:
    store = DatabaseTranslationStore(translation_session)

    await store.add_group_translation("en", "auth", "failed", "These credentials do not match.")
    await store.add_group_translation("en", "billing::invoices", "paid", "Paid")
    await store.add_single_translation("en", "single", "Sign in", "Sign in")

    translations = await store.all_translations_for("en")

    assert translations == {
        "group": {
            "auth": {"failed": "These credentials do not match."},
            "billing::invoices": {"paid": "Paid"},
        },
        "single": {"single": {"Sign in": "Sign in"}},
    }
    assert await store.get_groups_for("en") == ["auth", "billing::invoices"]
    assert await store.all_translations_for("fr") == {"group": {}, "single": {}}


@pytest.mark.asyncio
async def test_writes_upsert_existing_rows(translation_session: AsyncSession) -> None:
    store = DatabaseTranslationStore(translation_session)

    await store.add_translation("fr", TranslationKind.GROUP, "messages", "hello", "")
    await store.add_translation("fr", TranslationKind.GROUP, "messages", "hello", "Bonjour")

    rows = (await translation_session.execute(select(Translation))).scalars().all()
    assert len(rows) == 1
    assert rows[0].value == "Bonjour"
    assert await store.all_languages() == {"fr": "fr"}


@pytest.mark.asyncio
async def test_same_key_in_group_and_single_paths_is_kept_apart(
    translation_session: AsyncSession,
) -> None:
    store = DatabaseTranslationStore(translation_session)

    await store.add_translation("fr", TranslationKind.GROUP, "single", "Sign in", "groupe")
    await store.add_translation("fr", TranslationKind.SINGLE, "single", "Sign in", "Se connecter")

    translations = await store.all_translations_for("fr")

    assert translations["group"] == {"single": {"Sign in": "groupe"}}
    assert translations["single"] == {"single": {"Sign in": "Se connecter"}}
