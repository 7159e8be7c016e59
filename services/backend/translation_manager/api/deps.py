from collections.abc import AsyncGenerator

from fastapi import Depends

from translation_manager.core.config import get_settings
from translation_manager.core.database import session_scope
from translation_manager.integrations.db_storage import DatabaseTranslationStore
from translation_manager.integrations.google import GoogleTranslator, MachineTranslator
from translation_manager.integrations.storage import FileTranslationStore, TranslationStore
from translation_manager.services.events import TranslationEvents
from translation_manager.services.scanner import TranslationScanner
from translation_manager.services.translation import TranslationService

_translator: MachineTranslator | None = None
_translation_events: TranslationEvents | None = None


async def get_translation_store() -> AsyncGenerator[TranslationStore, None]:
    """Yield the store selected by TRANSLATION_DRIVER."""
    settings = get_settings()
    if settings.translation_driver == "database":
        async with session_scope() as session:
            yield DatabaseTranslationStore(session)
    else:
        yield FileTranslationStore(settings.lang_path)


def get_translation_scanner() -> TranslationScanner:
    return TranslationScanner.from_settings(get_settings())


def get_translator() -> MachineTranslator:
    global _translator
    if _translator is None:
        _translator = GoogleTranslator.from_settings(get_settings())
    return _translator


def get_translation_events() -> TranslationEvents:
    """Process-wide observer list for translation added notifications."""
    global _translation_events
    if _translation_events is None:
        _translation_events = TranslationEvents()
    return _translation_events


async def get_translation_service(
    store: TranslationStore = Depends(get_translation_store),
    scanner: TranslationScanner = Depends(get_translation_scanner),
    translator: MachineTranslator = Depends(get_translator),
    events: TranslationEvents = Depends(get_translation_events),
) -> TranslationService:
    """Provide TranslationService instance."""
    settings = get_settings()
    return TranslationService(
        store,
        scanner,
        source_language=settings.source_language,
        translator=translator,
        events=events,
        continue_on_error=settings.auto_translate_continue_on_error,
    )
