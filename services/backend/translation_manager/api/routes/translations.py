from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from translation_manager.api.deps import get_translation_service
from translation_manager.core.errors import (
    ScannerError,
    StoreError,
    TranslationApiError,
    TranslationManagerError,
)
from translation_manager.schemas.translation import (
    AutoTranslateResponse,
    MissingTranslationsResponse,
    TranslationAddedResponse,
    TranslationCreate,
    TranslationListResponse,
)
from translation_manager.services.translation import TranslationService
from translation_manager.utils.translation_maps import LANGUAGE_CODE_PATTERN, MergedMap, iter_entries

router = APIRouter()


def _error_status(exc: TranslationManagerError) -> int:
    if isinstance(exc, TranslationApiError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _serialize(
    merged: MergedMap, source_language: str, language: str
) -> dict[str, dict[str, dict[str, dict[str, str | None]]]]:
    return {
        kind: {
            group: {key: entry.as_dict(source_language, language) for key, entry in keys.items()}
            for group, keys in groups.items()
        }
        for kind, groups in merged.items()
    }


@router.get(
    "/{language}/translations",
    response_model=TranslationListResponse,
    summary="List source-language keys merged with the target language.",
)
async def list_translations(
    language: str = Path(
        ..., max_length=32, pattern=LANGUAGE_CODE_PATTERN, description="Target language code."
    ),
    filter: str | None = Query(
        default=None, description="Case-insensitive text matched against groups, keys and values."
    ),
    group: str | None = Query(default=None, description="Only return this group."),
    service: TranslationService = Depends(get_translation_service),
) -> TranslationListResponse:
    try:
        merged = await service.filter_translations_for(language, filter, group=group)
    except StoreError as exc:
        raise HTTPException(status_code=_error_status(exc), detail=str(exc)) from exc
    return TranslationListResponse(
        source_language=service.source_language,
        language=language,
        filter=filter,
        group=group,
        translations=_serialize(merged, service.source_language, language),
    )


@router.post(
    "/{language}/translations",
    response_model=TranslationAddedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add or update a single translation.",
)
async def add_translation(
    payload: TranslationCreate,
    language: str = Path(
        ..., max_length=32, pattern=LANGUAGE_CODE_PATTERN, description="Target language code."
    ),
    service: TranslationService = Depends(get_translation_service),
) -> TranslationAddedResponse:
    try:
        event = await service.add(
            language,
            payload.group,
            payload.key,
            payload.value,
            is_group_translation=payload.is_group_translation,
            namespace=payload.namespace,
        )
    except StoreError as exc:
        raise HTTPException(status_code=_error_status(exc), detail=str(exc)) from exc
    return TranslationAddedResponse(
        language=event.language,
        group=event.group,
        key=event.key,
        value=event.value,
    )


@router.get(
    "/{language}/missing",
    response_model=MissingTranslationsResponse,
    summary="List scanned keys that the language has not stored yet.",
)
async def list_missing_translations(
    language: str = Path(
        ..., max_length=32, pattern=LANGUAGE_CODE_PATTERN, description="Target language code."
    ),
    service: TranslationService = Depends(get_translation_service),
) -> MissingTranslationsResponse:
    try:
        missing = await service.find_missing_translations(language)
    except (ScannerError, StoreError) as exc:
        raise HTTPException(status_code=_error_status(exc), detail=str(exc)) from exc
    return MissingTranslationsResponse(
        language=language,
        total=sum(1 for _ in iter_entries(missing)),
        translations=missing,
    )


@router.post(
    "/{language}/auto-translate",
    response_model=AutoTranslateResponse,
    summary="Persist missing keys and fill empty values with machine translations.",
)
async def auto_translate_language(
    language: str = Path(
        ..., max_length=32, pattern=LANGUAGE_CODE_PATTERN, description="Target language code."
    ),
    service: TranslationService = Depends(get_translation_service),
) -> AutoTranslateResponse:
    try:
        result = await service.auto_translate(language)
    except TranslationManagerError as exc:
        raise HTTPException(status_code=_error_status(exc), detail=str(exc)) from exc
    return AutoTranslateResponse(
        language=language, saved=result.saved, translated=result.translated
    )
