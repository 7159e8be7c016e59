from fastapi import APIRouter, Depends, HTTPException, status

from translation_manager.api.deps import get_translation_service
from translation_manager.core.errors import LanguageExistsError, StoreError
from translation_manager.schemas.translation import LanguageCreate, LanguageListResponse
from translation_manager.services.translation import TranslationService

router = APIRouter()


@router.get(
    "",
    response_model=LanguageListResponse,
    summary="List every language known to the translation store.",
)
async def list_languages(
    service: TranslationService = Depends(get_translation_service),
) -> LanguageListResponse:
    try:
        languages = await service.all_languages()
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return LanguageListResponse(source_language=service.source_language, languages=languages)


@router.post(
    "",
    response_model=LanguageCreate,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new language.",
)
async def create_language(
    payload: LanguageCreate,
    service: TranslationService = Depends(get_translation_service),
) -> LanguageCreate:
    try:
        await service.add_language(payload.language, payload.name)
    except LanguageExistsError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return payload
