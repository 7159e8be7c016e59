from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application configuration loaded from environment or .env."""

    app_name: str = Field(default="Translation Manager")
    app_env: str = Field(default="dev", alias="APP_ENV")
    debug: bool = Field(default=False, alias="APP_DEBUG")
    api_host: str = Field(default="127.0.0.1", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")
    translation_driver: Literal["file", "database"] = Field(
        default="file", alias="TRANSLATION_DRIVER"
    )
    source_language: str = Field(default="en", alias="SOURCE_LANGUAGE")
    lang_path: Path = Field(default=Path("lang"), alias="LANG_PATH")

    scan_paths: list[str] = Field(default_factory=lambda: ["."], alias="SCAN_PATHS")
    scan_extensions: list[str] = Field(
        default_factory=lambda: [".py", ".html", ".jinja", ".jinja2", ".js", ".vue"],
        alias="SCAN_EXTENSIONS",
    )
    scan_exclude_dirs: list[str] = Field(
        default_factory=lambda: [
            ".git",
            ".venv",
            "venv",
            "node_modules",
            "__pycache__",
            "build",
            "dist",
        ],
        alias="SCAN_EXCLUDE_DIRS",
    )
    translation_methods: list[str] = Field(
        default_factory=lambda: [
            "trans",
            "trans_choice",
            "__",
            "_",
            "gettext",
            "ngettext",
            "lazy_gettext",
        ],
        alias="TRANSLATION_METHODS",
    )

    google_translate_api_key: Optional[SecretStr] = Field(
        default=None, alias="GOOGLE_TRANSLATE_API_KEY"
    )
    google_translate_endpoint: Optional[str] = Field(
        default=None, alias="GOOGLE_TRANSLATE_ENDPOINT"
    )
    translator_timeout_seconds: float = Field(
        default=10.0, alias="TRANSLATOR_TIMEOUT_SECONDS"
    )
    auto_translate_continue_on_error: bool = Field(
        default=False, alias="AUTO_TRANSLATE_CONTINUE_ON_ERROR"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )


@lru_cache
def get_settings() -> AppSettings:
    """Return cached application settings."""
    return AppSettings()  # type: ignore[call-arg]
