"""SQLAlchemy models and declarative base."""

from translation_manager.models.base import Base  # noqa: F401
from translation_manager.models.entities import Language, Translation  # noqa: F401

__all__ = [
    "Base",
    "Language",
    "Translation",
]
