import uvicorn

from translation_manager.core.app import create_app
from translation_manager.core.config import get_settings

app = create_app()


def run() -> None:
    """Serve the translation API (`translation-manager-api`)."""
    settings = get_settings()
    uvicorn.run(
        "translation_manager.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
