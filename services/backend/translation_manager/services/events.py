from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TranslationAdded:
    """Notification emitted after a translation has been written."""

    language: str
    group: str
    key: str
    value: str


TranslationListener = Callable[[TranslationAdded], None]


class TranslationEvents:
    """Observer list owned by whoever wires up the translation service."""

    def __init__(self, listeners: list[TranslationListener] | None = None) -> None:
        self._listeners: list[TranslationListener] = list(listeners or [])

    @property
    def listeners(self) -> tuple[TranslationListener, ...]:
        return tuple(self._listeners)

    def subscribe(self, listener: TranslationListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: TranslationListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def dispatch(self, event: TranslationAdded) -> None:
        logger.debug(
            "Dispatching translation added (language=%s group=%s key=%s) to %d listener(s)",
            event.language,
            event.group,
            event.key,
            len(self._listeners),
        )
        for listener in list(self._listeners):
            listener(event)
