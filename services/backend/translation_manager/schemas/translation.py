from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from translation_manager.utils.translation_maps import LANGUAGE_CODE_PATTERN


class LanguageCreate(BaseModel):
    language: str = Field(
        ...,
        min_length=1,
        max_length=32,
        pattern=LANGUAGE_CODE_PATTERN,
        description="Language code, e.g. 'fr' or 'pt_BR'.",
    )
    name: str | None = Field(default=None, description="Optional display name.")


class LanguageListResponse(BaseModel):
    source_language: str = Field(..., description="Language every other language is translated from.")
    languages: dict[str, str] = Field(
        default_factory=dict,
        description="Mapping of language codes to display names.",
    )


class TranslationCreate(BaseModel):
    """Payload of the "add translation" request."""

    namespace: str | None = Field(
        default=None,
        description="Optional vendor namespace; the stored group becomes 'namespace::group'.",
    )
    group: str | None = Field(
        default=None,
        description="Group file for group translations; ignored for single translations.",
    )
    key: str = Field(..., min_length=1, description="Translation key.")
    value: str | None = Field(default="", description="Translated text.")
    is_group_translation: bool = Field(
        default=True,
        description="Write through the group path (true) or the single path (false).",
    )

    @model_validator(mode="after")
    def _require_group_for_group_translations(self) -> TranslationCreate:
        if self.is_group_translation and not (self.group or "").strip():
            raise ValueError("group is required for group translations.")
        return self


class TranslationAddedResponse(BaseModel):
    language: str
    group: str
    key: str
    value: str


class TranslationListResponse(BaseModel):
    source_language: str
    language: str
    filter: str | None = None
    group: str | None = None
    translations: dict[str, dict[str, dict[str, dict[str, str | None]]]] = Field(
        default_factory=dict,
        description="kind -> group -> key -> {language code: value}.",
    )


class MissingTranslationsResponse(BaseModel):
    language: str
    total: int = 0
    translations: dict[str, dict[str, dict[str, str]]] = Field(default_factory=dict)


class AutoTranslateResponse(BaseModel):
    language: str
    saved: int = Field(0, description="Keys newly persisted with an empty value.")
    translated: int = Field(0, description="Keys filled in by the machine translator.")
