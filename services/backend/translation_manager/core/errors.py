from __future__ import annotations


class TranslationManagerError(Exception):
    """Base class for errors raised by the translation manager."""


class ScannerError(TranslationManagerError):
    """Raised when application sources could not be scanned."""


class StoreError(TranslationManagerError):
    """Raised when persisted translations could not be read or written."""


class LanguageExistsError(StoreError):
    """Raised when adding a language that is already present in the store."""

    def __init__(self, language: str):
        super().__init__(f"Language '{language}' already exists.")
        self.language = language


class TranslationApiError(TranslationManagerError):
    """Raised when the machine-translation provider rejects or fails a request."""


class TranslationBatchError(TranslationApiError):
    """Aggregated per-key translation failures for a single language."""

    def __init__(self, language: str, failures: list[tuple[str, str, str]]):
        self.language = language
        self.failures = failures
        keys = ", ".join(f"{group}.{key}" for _, group, key in failures[:5])
        more = f" (+{len(failures) - 5} more)" if len(failures) > 5 else ""
        super().__init__(
            f"Failed to translate {len(failures)} key(s) for '{language}': {keys}{more}"
        )
