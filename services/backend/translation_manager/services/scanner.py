from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from translation_manager.core.config import AppSettings
from translation_manager.core.errors import ScannerError
from translation_manager.utils.translation_maps import (
    SINGLE_GROUP,
    TranslationKind,
    TranslationMap,
    empty_translation_map,
)


logger = logging.getLogger(__name__)

DEFAULT_TRANSLATION_METHODS: tuple[str, ...] = (
    "trans",
    "trans_choice",
    "__",
    "_",
    "gettext",
    "ngettext",
    "lazy_gettext",
)

# ``messages.welcome`` or ``package::messages.welcome``; anything with
# whitespace or a trailing dot is treated as a literal single translation.
_GROUP_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]+(?:::[A-Za-z0-9_-]+)?(?:\.[^\s.]+)+$")
_ESCAPED_QUOTE_PATTERN = re.compile(r"\\(['\"])")


class TranslationScanner:
    """Extract translation keys from calls such as ``_("Hello")`` or ``trans("auth.failed")``."""

    def __init__(
        self,
        paths: Sequence[Path | str],
        *,
        translation_methods: Iterable[str] = DEFAULT_TRANSLATION_METHODS,
        extensions: Iterable[str] | None = None,
        exclude_dirs: Iterable[str] | None = None,
    ):
        self._paths = [Path(path) for path in paths]
        self._extensions = {
            ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions or ()
        }
        self._exclude_dirs = set(exclude_dirs or ())
        methods = sorted(
            {method for method in translation_methods if method}, key=len, reverse=True
        )
        if not methods:
            raise ValueError("At least one translation method is required.")
        self._pattern = re.compile(
            r"(?<![\w$])(?:"
            + "|".join(re.escape(method) for method in methods)
            + r")\(\s*(?P<quote>['\"])(?P<string>(?:\\.|(?!(?P=quote)).)*)(?P=quote)\s*[),]",
            re.DOTALL,
        )

    @classmethod
    def from_settings(cls, settings: AppSettings) -> TranslationScanner:
        return cls(
            settings.scan_paths,
            translation_methods=settings.translation_methods,
            extensions=settings.scan_extensions,
            exclude_dirs=settings.scan_exclude_dirs,
        )

    def find_translations(self) -> TranslationMap:
        """Scan every configured path and return the discovered keys with empty values."""
        translations = empty_translation_map()
        scanned = 0
        for path in self._iter_files():
            try:
                text = path.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                raise ScannerError(f"Unable to read {path}") from exc
            self.extract(text, into=translations)
            scanned += 1

        logger.debug(
            "Scanned %d file(s): %d group key(s), %d single key(s)",
            scanned,
            sum(len(keys) for keys in translations[TranslationKind.GROUP.value].values()),
            sum(len(keys) for keys in translations[TranslationKind.SINGLE.value].values()),
        )
        return translations

    def extract(self, text: str, *, into: TranslationMap | None = None) -> TranslationMap:
        """Collect translation keys found in ``text``."""
        translations = into if into is not None else empty_translation_map()
        groups = translations.setdefault(TranslationKind.GROUP.value, {})
        singles = translations.setdefault(TranslationKind.SINGLE.value, {})

        for match in self._pattern.finditer(text):
            literal = _ESCAPED_QUOTE_PATTERN.sub(r"\1", match.group("string"))
            if not literal.strip():
                continue
            if _GROUP_KEY_PATTERN.match(literal):
                group, key = literal.split(".", 1)
                groups.setdefault(group, {}).setdefault(key, "")
            else:
                singles.setdefault(SINGLE_GROUP, {}).setdefault(literal, "")
        return translations

    def _iter_files(self) -> Iterator[Path]:
        for root in self._paths:
            if not root.exists():
                raise ScannerError(f"Scan path does not exist: {root}")
            if root.is_file():
                if self._accepts(root):
                    yield root
                continue
            try:
                for directory, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
                    dirnames[:] = sorted(name for name in dirnames if name not in self._exclude_dirs)
                    for filename in sorted(filenames):
                        candidate = Path(directory) / filename
                        if self._accepts(candidate):
                            yield candidate
            except OSError as exc:
                raise ScannerError(f"Unable to scan {root}") from exc

    def _accepts(self, path: Path) -> bool:
        return not self._extensions or path.suffix.lower() in self._extensions


def _raise_walk_error(error: OSError) -> None:
    raise error
