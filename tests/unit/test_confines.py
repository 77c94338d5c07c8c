"""Tests for core/confines.py."""

from __future__ import annotations

from scelint.core.confines import (
    apply_confinement,
    collect_confines,
    describe_context,
    expand_confines,
    should_delete,
)
from scelint.models.diagnostics import Diagnostics


class TestCollectConfines:
    def test_collects_from_all_sections(self):
        merged = {
            "profiles": {"p": {"confine": {"os": ["RedHat", "CentOS"]}}},
            "ce": {"ce-1": {"confine": {"release": "8"}}},
            "checks": {"c": {"confine": {"arch": "x86_64"}}, "d": {"type": "x"}},
        }
        assert collect_confines(merged) == {
            "os": ["RedHat", "CentOS"],
            "release": "8",
            "arch": "x86_64",
        }

    def test_later_entries_win(self):
        merged = {
            "checks": {
                "a": {"confine": {"os": "RedHat"}},
                "b": {"confine": {"os": "Debian"}},
            },
        }
        assert collect_confines(merged) == {"os": "Debian"}

    def test_ignores_malformed(self):
        merged = {"checks": {"a": {"confine": "RedHat"}, "b": None}, "ce": ["x"]}
        assert collect_confines(merged) == {}

    def test_not_a_mapping(self):
        assert collect_confines(None) == {}


class TestExpandConfines:
    def test_empty(self):
        assert expand_confines({}) == []

    def test_scalar_values(self):
        assert expand_confines({"os": "RedHat", "arch": "x86_64"}) == [
            {"os": "RedHat", "arch": "x86_64"},
        ]

    def test_single_setting(self):
        assert expand_confines({"os": ["RedHat", "CentOS"]}) == [
            {"os": "RedHat"},
            {"os": "CentOS"},
        ]

    def test_cycles_shorter_lists(self):
        contexts = expand_confines({"a": [1, 2], "b": ["w", "x", "y", "z"]})
        assert len(contexts) == 8
        assert contexts[:4] == [
            {"a": 1, "b": "w"},
            {"a": 2, "b": "x"},
            {"a": 1, "b": "y"},
            {"a": 2, "b": "z"},
        ]
        # not a cartesian product: the second half repeats the first
        assert contexts[4:] == contexts[:4]
        assert {"a": 2, "b": "w"} not in contexts

    def test_empty_list_yields_nothing(self):
        assert expand_confines({"os": [], "arch": "x86_64"}) == []


class TestShouldDelete:
    def test_unconfined_entry_kept(self):
        assert should_delete(Diagnostics(), "f", "k", {"type": "x"}, {"os": "RedHat"}) is False

    def test_malformed_confine_kept_with_warning(self):
        d = Diagnostics()
        assert should_delete(d, "f", "k", {"confine": ["RedHat"]}, {"os": "RedHat"}) is False
        assert d.warnings == ["f: 'confine' is not a Hash in key k"]

    def test_no_match_deleted(self):
        spec = {"confine": {"os": ["RedHat", "CentOS"]}}
        assert should_delete(Diagnostics(), "f", "k", spec, {"os": "Debian"}) is True

    def test_match_kept(self):
        spec = {"confine": {"os": ["RedHat", "CentOS"]}}
        assert should_delete(Diagnostics(), "f", "k", spec, {"os": "CentOS"}) is False

    def test_any_setting_match_keeps(self):
        spec = {"confine": {"os": "RedHat", "arch": "x86_64"}}
        assert should_delete(Diagnostics(), "f", "k", spec, {"os": "Debian", "arch": "x86_64"}) is False

    def test_missing_setting_deletes_immediately(self):
        spec = {"confine": {"arch": "x86_64", "os": "RedHat"}}
        assert should_delete(Diagnostics(), "f", "k", spec, {"os": "RedHat"}) is True

    def test_match_before_missing_setting_keeps(self):
        spec = {"confine": {"os": "RedHat", "arch": "x86_64"}}
        assert should_delete(Diagnostics(), "f", "k", spec, {"os": "RedHat"}) is False

    def test_list_valued_context(self):
        spec = {"confine": {"os": "RedHat"}}
        assert should_delete(Diagnostics(), "f", "k", spec, {"os": ["Debian", "RedHat"]}) is False

    def test_empty_confine_deleted(self):
        assert should_delete(Diagnostics(), "f", "k", {"confine": {}}, {"os": "RedHat"}) is True


class TestApplyConfinement:
    def test_filters_entries(self):
        section = {
            "a": {"confine": {"os": "RedHat"}},
            "b": {"confine": {"os": "Debian"}},
            "c": {"type": "x"},
        }
        result = apply_confinement(Diagnostics(), "f", section, {"os": "RedHat"})
        assert list(result) == ["a", "c"]
        assert list(section) == ["a", "b", "c"]

    def test_no_context_no_filtering(self):
        section = {"b": {"confine": {"os": "Debian"}}}
        assert apply_confinement(Diagnostics(), "f", section, None) == section

    def test_scalar_passthrough(self):
        assert apply_confinement(Diagnostics(), "f", "2.0.0", {"os": "RedHat"}) == "2.0.0"


class TestDescribeContext:
    def test_none(self):
        assert describe_context(None) == "(no confinement data)"

    def test_context(self):
        assert describe_context({"os": "RedHat"}) == '(confined: {os: "RedHat"})'
