from __future__ import annotations

import pytest

from translation_manager.utils.translation_maps import (
    MergedEntry,
    filter_text_contains,
    flatten,
    iter_entries,
    merge_with_target,
    namespaced_group,
    recursive_diff,
    split_namespace,
    unflatten,
)


def test_recursive_diff_returns_missing_and_changed_leaves() -> None:
    scanned = {
        "group": {"auth": {"failed": "", "throttle": ""}},
        "single": {"single": {"Hello": "", "Bye": ""}},
    }
    stored = {
        "group": {"auth": {"failed": ""}},
        "single": {"single": {"Hello": "Bonjour"}},
    }

    diff = recursive_diff(scanned, stored)

    assert diff == {
        "group": {"auth": {"throttle": ""}},
        "single": {"single": {"Hello": "", "Bye": ""}},
    }


def test_recursive_diff_drops_branches_without_differences() -> None:
    scanned = {"group": {"auth": {"failed": ""}}, "single": {}}
    stored = {"group": {"auth": {"failed": ""}}, "single": {"single": {"Hi": "Salut"}}}

    assert recursive_diff(scanned, stored) == {}


def test_recursive_diff_ignores_keys_only_in_second_map() -> None:
    assert recursive_diff({"a": "1"}, {"a": "1", "b": "2"}) == {}


def test_recursive_diff_copies_whole_branch_missing_from_second_map() -> None:
    scanned = {"group": {"validation": {"required": "", "email": ""}}}

    diff = recursive_diff(scanned, {"group": {}})

    assert diff == scanned
    diff["group"]["validation"]["required"] = "changed"
    assert scanned["group"]["validation"]["required"] == ""


def test_recursive_diff_treats_leaf_replaced_by_mapping_as_missing() -> None:
    assert recursive_diff({"a": {"b": "x"}}, {"a": "flat"}) == {"a": {"b": "x"}}


def test_merge_with_target_pairs_values_and_skips_target_only_keys() -> None:
    source = {
        "group": {"messages": {"hello": "Hello", "bye": "Goodbye"}},
        "single": {"single": {"Welcome": "Welcome"}},
    }
    target = {
        "group": {"messages": {"hello": "Bonjour", "extra": "Seulement ici"}, "other": {"x": "y"}},
        "single": {},
    }

    merged = merge_with_target(source, target)

    assert merged == {
        "group": {
            "messages": {
                "hello": MergedEntry(source="Hello", target="Bonjour"),
                "bye": MergedEntry(source="Goodbye", target=None),
            }
        },
        "single": {"single": {"Welcome": MergedEntry(source="Welcome", target=None)}},
    }


def test_merged_entry_as_dict_uses_language_codes() -> None:
    entry = MergedEntry(source="Hello", target="Hallo")

    assert entry.as_dict("en", "de") == {"en": "Hello", "de": "Hallo"}


def _merged_fixture() -> dict[str, dict[str, dict[str, MergedEntry]]]:
    return {
        "group": {
            "auth": {
                "failed": MergedEntry(source="These credentials do not match.", target=None),
                "password": MergedEntry(source="The password is incorrect.", target="Falsch"),
            },
            "messages": {"hello": MergedEntry(source="Hello", target="Bonjour")},
        },
        "single": {"single": {"Log out": MergedEntry(source="Log out", target=None)}},
    }


def test_filter_text_contains_matches_values_case_insensitively() -> None:
    filtered = filter_text_contains(_merged_fixture(), "BONJOUR")

    assert filtered == {
        "group": {"messages": {"hello": MergedEntry(source="Hello", target="Bonjour")}},
        "single": {},
    }


def test_filter_text_contains_matches_group_and_key_names() -> None:
    by_group = filter_text_contains(_merged_fixture(), "auth")
    by_key = filter_text_contains(_merged_fixture(), "log out")

    assert set(by_group["group"]) == {"auth"}
    assert set(by_group["group"]["auth"]) == {"failed", "password"}
    assert by_key["single"] == {"single": {"Log out": MergedEntry(source="Log out", target=None)}}
    assert by_key["group"] == {}


@pytest.mark.parametrize("needle", [None, ""])
def test_filter_text_contains_without_needle_returns_input(needle: str | None) -> None:
    merged = _merged_fixture()

    assert filter_text_contains(merged, needle) is merged


def test_iter_entries_yields_kind_group_key_and_value() -> None:
    entries = list(
        iter_entries({"group": {"auth": {"failed": ""}}, "single": {"single": {"Hi": "Salut"}}})
    )

    assert [(kind.value, group, key, value) for kind, group, key, value in entries] == [
        ("group", "auth", "failed", ""),
        ("single", "single", "Hi", "Salut"),
    ]


def test_namespace_helpers_round_trip_vendor_groups() -> None:
    assert namespaced_group("messages", "billing") == "billing::messages"
    assert namespaced_group("messages", None) == "messages"
    assert split_namespace("billing::messages") == ("billing", "messages")
    assert split_namespace("messages") == (None, "messages")


def test_flatten_collapses_nested_documents() -> None:
    document = {"required": "Required", "custom": {"email": {"unique": "Taken"}}, "empty": {}}

    assert flatten(document) == {
        "required": "Required",
        "custom.email.unique": "Taken",
        "empty": "",
    }


def test_unflatten_nests_dotted_keys() -> None:
    assert unflatten({"custom.email.unique": "Taken", "required": "Required"}) == {
        "custom": {"email": {"unique": "Taken"}},
        "required": "Required",
    }


def test_unflatten_rejects_leaf_and_parent_collision() -> None:
    with pytest.raises(ValueError):
        unflatten({"a": "leaf", "a.b": "child"})
    with pytest.raises(ValueError):
        unflatten({"a.b": "child", "a": "leaf"})


_CATALOGUE = {
    "group": {
        "auth": {"failed": "These credentials do not match.", "throttle": "Too many attempts."},
        "validation": {"custom.email.unique": "Taken", "required": "Required"},
        "billing::invoices": {"paid": "Paid"},
    },
    "single": {
        "single": {"Sign in": "Sign in", "Log out": ""},
        "billing::single": {"Pay now": "Pay now"},
    },
}

_DIFF_PAIRS = [
    (_CATALOGUE, {"group": {}, "single": {}}),
    (
        _CATALOGUE,
        {
            "group": {
                "auth": {"failed": "Ces identifiants ne correspondent pas."},
                "validation": {"custom.email.unique": "Taken", "extra": "only here"},
            },
            "single": {"single": {"Sign in": "Sign in", "Log out": ""}},
        },
    ),
    (
        {"group": {"messages": {"hello": "", "bye": ""}}, "single": {"single": {"Hi": ""}}},
        {"group": {"messages": {"hello": "Bonjour"}}, "single": {"single": {"Hi": ""}}},
    ),
    ({"group": {}, "single": {}}, _CATALOGUE),
]


@pytest.mark.parametrize("translations", [_CATALOGUE, *(second for _, second in _DIFF_PAIRS)])
def test_recursive_diff_of_a_map_with_itself_is_empty(translations) -> None:
    assert recursive_diff(translations, translations) == {}


@pytest.mark.parametrize(("first", "second"), _DIFF_PAIRS)
def test_recursive_diff_only_reports_absent_or_changed_entries_of_first(first, second) -> None:
    diff = recursive_diff(first, second)
    reported = {(kind.value, group, key) for kind, group, key, _ in iter_entries(diff)}

    for kind, group, key, value in iter_entries(diff):
        assert first[kind.value][group][key] == value
        stored = second.get(kind.value, {}).get(group, {})
        assert key not in stored or stored[key] != value

    for kind, group, key, value in iter_entries(first):
        stored = second.get(kind.value, {}).get(group, {})
        changed = key not in stored or stored[key] != value
        assert ((kind.value, group, key) in reported) == changed
