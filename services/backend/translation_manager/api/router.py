from fastapi import APIRouter

from translation_manager.api.routes import health, languages, translations

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(languages.router, prefix="/languages", tags=["languages"])
api_router.include_router(translations.router, prefix="/languages", tags=["translations"])
