"""Utility helpers for the translation manager."""

from .translation_maps import (
    MergedEntry,
    MergedMap,
    TranslationKind,
    TranslationMap,
    filter_text_contains,
    merge_with_target,
    recursive_diff,
)

__all__ = [
    "MergedEntry",
    "MergedMap",
    "TranslationKind",
    "TranslationMap",
    "filter_text_contains",
    "merge_with_target",
    "recursive_diff",
]
