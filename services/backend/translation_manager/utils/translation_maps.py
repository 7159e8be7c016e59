"""Diff, merge and filter helpers over nested translation maps.

Every map handled here has three levels: ``kind -> group -> key -> value``.
The ``kind`` level is one of :class:`TranslationKind`; groups of namespaced
translations are written ``namespace::group``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class TranslationKind(str, Enum):
    """Storage path a translation belongs to."""

    GROUP = "group"
    SINGLE = "single"


SINGLE_GROUP = "single"
NAMESPACE_SEPARATOR = "::"
LANGUAGE_CODE_PATTERN = r"^[A-Za-z0-9_-]+$"

TranslationMap = dict[str, dict[str, dict[str, str]]]


@dataclass(frozen=True, slots=True)
class MergedEntry:
    """Source-language value paired with the target-language value, if any."""

    source: str | None
    target: str | None

    def as_dict(self, source_language: str, target_language: str) -> dict[str, str | None]:
        return {source_language: self.source, target_language: self.target}


MergedMap = dict[str, dict[str, dict[str, MergedEntry]]]


def empty_translation_map() -> TranslationMap:
    return {kind.value: {} for kind in TranslationKind}


def namespaced_group(group: str, namespace: str | None) -> str:
    """Return ``namespace::group`` when a namespace is supplied."""
    if namespace:
        return f"{namespace}{NAMESPACE_SEPARATOR}{group}"
    return group


def split_namespace(group: str) -> tuple[str | None, str]:
    """Split ``namespace::group`` into its parts."""
    if NAMESPACE_SEPARATOR in group:
        namespace, _, name = group.partition(NAMESPACE_SEPARATOR)
        return namespace, name
    return None, group


def recursive_diff(first: Mapping[str, Any], second: Mapping[str, Any]) -> dict[str, Any]:
    """Return the entries of ``first`` that are absent from or differ in ``second``.

    Comparison is by key path, never by position. Nested mappings are diffed
    recursively and dropped when nothing under them differs, so the result
    only contains paths leading to a missing or changed leaf.
    """
    difference: dict[str, Any] = {}
    for key, value in first.items():
        if isinstance(value, Mapping):
            other = second.get(key)
            if not isinstance(other, Mapping):
                if value:
                    difference[key] = _copy_nested(value)
                continue
            nested = recursive_diff(value, other)
            if nested:
                difference[key] = nested
        elif key not in second or second[key] != value:
            difference[key] = value
    return difference


def merge_with_target(source: TranslationMap, target: TranslationMap) -> MergedMap:
    """Pair every source-language entry with the matching target-language value.

    The source map decides which keys exist; keys only present in ``target``
    are ignored.
    """
    merged: MergedMap = {}
    for kind, groups in source.items():
        target_groups = target.get(kind, {})
        merged_groups: dict[str, dict[str, MergedEntry]] = {}
        for group, translations in groups.items():
            target_translations = target_groups.get(group, {})
            merged_groups[group] = {
                key: MergedEntry(source=value, target=target_translations.get(key))
                for key, value in translations.items()
            }
        merged[kind] = merged_groups
    return merged


def filter_text_contains(entries: MergedMap, needle: str | None) -> MergedMap:
    """Keep entries whose group, key or values contain ``needle`` (case-insensitive)."""
    if not needle:
        return entries

    lowered = needle.lower()
    filtered: MergedMap = {}
    for kind, groups in entries.items():
        kept_groups: dict[str, dict[str, MergedEntry]] = {}
        for group, keys in groups.items():
            kept = {
                key: entry
                for key, entry in keys.items()
                if _contains(lowered, group, key, entry.source, entry.target)
            }
            if kept:
                kept_groups[group] = kept
        filtered[kind] = kept_groups
    return filtered


def iter_entries(
    translations: Mapping[str, Mapping[str, Mapping[str, Any]]],
) -> Iterator[tuple[TranslationKind, str, str, Any]]:
    """Yield ``(kind, group, key, value)`` for every leaf of a translation map."""
    for kind, groups in translations.items():
        translation_kind = TranslationKind(kind)
        for group, keys in groups.items():
            for key, value in keys.items():
                yield translation_kind, group, key, value


def contains_key(translations: TranslationMap, kind: str, group: str, key: str) -> bool:
    return key in translations.get(kind, {}).get(group, {})


def flatten(mapping: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    """Collapse nested dictionaries into dotted keys."""
    flat: dict[str, str] = {}
    for key, value in mapping.items():
        dotted = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            if value:
                flat.update(flatten(value, dotted))
            else:
                flat[dotted] = ""
        else:
            flat[dotted] = "" if value is None else str(value)
    return flat


def unflatten(flat: Mapping[str, str]) -> dict[str, Any]:
    """Expand dotted keys back into nested dictionaries.

    Raises ``ValueError`` when a key is both a leaf and a parent
    (``a`` and ``a.b``), since no nested document can hold both.
    """
    nested: dict[str, Any] = {}
    for dotted, value in flat.items():
        parts = dotted.split(".")
        cursor = nested
        for part in parts[:-1]:
            child = cursor.setdefault(part, {})
            if not isinstance(child, dict):
                raise ValueError(f"Key '{dotted}' nests under the leaf '{part}'.")
            cursor = child
        if isinstance(cursor.get(parts[-1]), dict):
            raise ValueError(f"Key '{dotted}' is already a parent of nested keys.")
        cursor[parts[-1]] = value
    return nested


def _contains(needle: str, *haystacks: str | None) -> bool:
    return any(needle in haystack.lower() for haystack in haystacks if haystack)


def _copy_nested(value: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: _copy_nested(item) if isinstance(item, Mapping) else item
        for key, item in value.items()
    }
