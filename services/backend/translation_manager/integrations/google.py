from __future__ import annotations

import logging
from typing import Any, Callable

import httpx

from translation_manager.core.config import AppSettings
from translation_manager.core.errors import TranslationApiError


logger = logging.getLogger(__name__)

_KEYLESS_ENDPOINT = "https://translate.googleapis.com/translate_a/single"
_CLOUD_ENDPOINT = "https://translation.googleapis.com/language/translate/v2"


class MachineTranslator:
    """Abstract machine-translation provider."""

    async def translate(self, language: str, text: str) -> str:
        raise NotImplementedError


class GoogleTranslator(MachineTranslator):
    """Google Translate client.

    Uses the Cloud Translation v2 API when an API key is configured and the
    public ``translate_a/single`` endpoint otherwise.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        source_language: str | None = None,
        endpoint: str | None = None,
        timeout: float = 10.0,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ):
        self._api_key = api_key
        self._source_language = source_language
        self._endpoint = endpoint or (_CLOUD_ENDPOINT if api_key else _KEYLESS_ENDPOINT)
        self._client_factory = client_factory or (
            lambda: httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        )

    @classmethod
    def from_settings(cls, settings: AppSettings) -> GoogleTranslator:
        api_key = settings.google_translate_api_key
        return cls(
            api_key=api_key.get_secret_value() if api_key else None,
            source_language=settings.source_language,
            endpoint=settings.google_translate_endpoint,
            timeout=settings.translator_timeout_seconds,
        )

    async def translate(self, language: str, text: str) -> str:
        if not text:
            raise TranslationApiError("Refusing to translate an empty string.")

        target = normalize_language_code(language)
        source = normalize_language_code(self._source_language) if self._source_language else None

        try:
            async with self._client_factory() as client:
                if self._api_key:
                    response = await client.post(
                        self._endpoint,
                        params={"key": self._api_key},
                        data=self._cloud_payload(text, target=target, source=source),
                    )
                else:
                    response = await client.get(
                        self._endpoint,
                        params={
                            "client": "gtx",
                            "sl": source or "auto",
                            "tl": target,
                            "dt": "t",
                            "q": text,
                        },
                    )
        except httpx.HTTPError as exc:
            raise TranslationApiError(
                f"Google Translate request failed for '{language}': {exc}"
            ) from exc

        if response.status_code < 200 or response.status_code >= 300:
            raise TranslationApiError(self._extract_error(response))

        try:
            payload = response.json()
        except ValueError as exc:
            raise TranslationApiError("Google Translate returned a non-JSON response.") from exc

        if self._api_key:
            translated = self._parse_cloud_payload(payload)
        else:
            translated = self._parse_keyless_payload(payload)
        if not translated:
            raise TranslationApiError(
                f"Google Translate returned an empty translation for '{language}'."
            )
        logger.debug("Translated %d character(s) into %s", len(text), target)
        return translated

    @staticmethod
    def _cloud_payload(text: str, *, target: str, source: str | None) -> dict[str, str]:
        payload = {"q": text, "target": target, "format": "text"}
        if source:
            payload["source"] = source
        return payload

    @staticmethod
    def _parse_keyless_payload(payload: Any) -> str:
        try:
            segments = payload[0]
            return "".join(segment[0] for segment in segments if segment and segment[0])
        except (IndexError, KeyError, TypeError) as exc:
            raise TranslationApiError("Unexpected Google Translate response payload.") from exc

    @staticmethod
    def _parse_cloud_payload(payload: Any) -> str:
        try:
            return payload["data"]["translations"][0]["translatedText"]
        except (IndexError, KeyError, TypeError) as exc:
            raise TranslationApiError("Unexpected Cloud Translation response payload.") from exc

    @staticmethod
    def _extract_error(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict):
            error = payload.get("error")
            if isinstance(error, dict) and error.get("message"):
                return f"Google Translate error {error.get('code', response.status_code)}: {error['message']}"

        return f"Google Translate request failed with status {response.status_code}."


def normalize_language_code(value: str) -> str:
    """Convert ``pt_BR`` style codes into the ``pt-BR`` form Google expects."""
    return value.replace("_", "-")
