from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from translation_manager.models.base import Base, TimestampMixin


class Language(TimestampMixin, Base):
    """Language that translations can be stored for."""

    __tablename__ = "languages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    language: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(120), nullable=True)

    translations: Mapped[list["Translation"]] = relationship(
        back_populates="language", cascade="all, delete-orphan"
    )


class Translation(TimestampMixin, Base):
    """Stored translation value keyed by kind, group and key."""

    __tablename__ = "translations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    language_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("languages.id", ondelete="cascade"), nullable=False
    )
    kind: Mapped[str] = mapped_column(String(16), nullable=False, default="group")
    group: Mapped[str] = mapped_column(String(255), nullable=False)
    key: Mapped[str] = mapped_column(Text, nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")

    language: Mapped[Language] = relationship(back_populates="translations")

    __table_args__ = (
        UniqueConstraint("language_id", "kind", "group", "key", name="uq_translations_entry"),
        Index("ix_translations_language_group", "language_id", "group"),
    )
