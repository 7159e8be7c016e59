from datetime import datetime, timezone

from fastapi import APIRouter

from translation_manager.core.config import get_settings

router = APIRouter()


@router.get("/healthz")
async def healthcheck() -> dict[str, str]:
    """Liveness check; also reports which translation store is active."""
    settings = get_settings()
    return {
        "status": "ok",
        "driver": settings.translation_driver,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
