from __future__ import annotations

from pathlib import Path

import pytest

from translation_manager.core.config import AppSettings
from translation_manager.core.errors import ScannerError
from translation_manager.services.scanner import TranslationScanner


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_extract_splits_group_keys_from_single_strings() -> None:
    scanner = TranslationScanner(["."])
    source = """
    title = trans('messages.welcome')
    error = __("auth.failed")
    vendor = trans("billing::invoices.paid")
    label = _("Sign in")
    sentence = gettext("Are you sure? This cannot be undone.")
    """

    translations = scanner.extract(source)

    assert translations == {
        "group": {
            "messages": {"welcome": ""},
            "auth": {"failed": ""},
            "billing::invoices": {"paid": ""},
        },
        "single": {
            "single": {
                "Sign in": "",
                "Are you sure? This cannot be undone.": "",
            }
        },
    }


def test_extract_keeps_nested_group_keys_dotted() -> None:
    scanner = TranslationScanner(["."])

    translations = scanner.extract("trans('validation.custom.email.unique')")

    assert translations["group"] == {"validation": {"custom.email.unique": ""}}


def test_extract_handles_escaped_quotes_and_arguments() -> None:
    scanner = TranslationScanner(["."])
    source = r"""
    _('It\'s done')
    trans_choice("messages.apples", count)
    trans("messages.greeting", {"name": user})
    """

    translations = scanner.extract(source)

    assert translations["single"] == {"single": {"It's done": ""}}
    assert translations["group"] == {"messages": {"apples": "", "greeting": ""}}


def test_extract_ignores_other_calls_and_dynamic_keys() -> None:
    scanner = TranslationScanner(["."], translation_methods=["trans"])
    source = """
    translate("messages.skip")
    self.trans("messages.kept")
    trans(variable)
    trans("")
    mytrans("messages.nope")
    """

    translations = scanner.extract(source)

    assert translations == {"group": {"messages": {"kept": ""}}, "single": {}}


def test_find_translations_walks_paths_with_filters(tmp_path: Path) -> None:
    _write(tmp_path / "app" / "views.py", "_('Dashboard')\ntrans('nav.home')\n")
    _write(tmp_path / "app" / "templates" / "base.html", "{{ _('Log out') }}")
    _write(tmp_path / "app" / "notes.txt", "_('Not scanned')")
    _write(tmp_path / "node_modules" / "lib.js", "_('Vendored')")

    scanner = TranslationScanner(
        [tmp_path],
        extensions=["py", ".HTML"],
        exclude_dirs=["node_modules"],
    )

    translations = scanner.find_translations()

    assert translations == {
        "group": {"nav": {"home": ""}},
        "single": {"single": {"Dashboard": "", "Log out": ""}},
    }


def test_find_translations_accepts_single_file(tmp_path: Path) -> None:
    path = _write(tmp_path / "cli.py", "print(_('Done'))")

    translations = TranslationScanner([path], extensions=[".py"]).find_translations()

    assert translations["single"] == {"single": {"Done": ""}}


def test_find_translations_missing_path_raises(tmp_path: Path) -> None:
    scanner = TranslationScanner([tmp_path / "missing"])

    with pytest.raises(ScannerError):
        scanner.find_translations()


def test_scanner_requires_translation_methods() -> None:
    with pytest.raises(ValueError):
        TranslationScanner(["."], translation_methods=[])


def test_from_settings_uses_configured_paths(tmp_path: Path) -> None:
    _write(tmp_path / "src" / "page.vue", "{{ trans('pages.title') }}")
    settings = AppSettings(
        SCAN_PATHS=[str(tmp_path / "src")],
        SCAN_EXTENSIONS=[".vue"],
        TRANSLATION_METHODS=["trans"],
    )

    translations = TranslationScanner.from_settings(settings).find_translations()

    assert translations["group"] == {"pages": {"title": ""}}
