from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

from translation_manager.core.config import get_settings

logger = logging.getLogger(__name__)

BACKEND_ROOT = Path(__file__).resolve().parents[2]


def alembic_config(database_url: str | None = None) -> Config:
    """Build the Alembic config for the translation tables.

    ``database_url`` defaults to ``DATABASE_URL``; percent signs are escaped
    because Alembic interpolates ini values.
    """
    ini_path = BACKEND_ROOT / "alembic.ini"
    if not ini_path.exists():
        raise RuntimeError(f"Alembic configuration not found at {ini_path}")

    url = database_url or get_settings().database_url
    if not url:
        raise RuntimeError("DATABASE_URL must be configured to run migrations.")

    config = Config(str(ini_path))
    config.set_main_option("script_location", str(BACKEND_ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    return config


async def migrate_database(revision: str = "head", *, database_url: str | None = None) -> None:
    """Upgrade the translation schema without blocking the event loop."""
    config = alembic_config(database_url)
    logger.info("Upgrading translation schema to %s", revision)
    await asyncio.to_thread(command.upgrade, config, revision)
