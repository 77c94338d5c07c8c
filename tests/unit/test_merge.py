"""Tests for core/merge.py."""

from __future__ import annotations

from scelint.core.merge import deep_merge, unique


class TestDeepMerge:
    def test_simple_merge(self):
        result = deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})
        assert result == {"a": 1, "b": 3, "c": 4}

    def test_nested_merge(self):
        base = {"checks": {"chk-1": {"type": "puppet-class-parameter", "controls": {"a": True}}}}
        override = {"checks": {"chk-1": {"controls": {"b": True}}}}
        result = deep_merge(base, override)
        assert result["checks"]["chk-1"]["type"] == "puppet-class-parameter"
        assert result["checks"]["chk-1"]["controls"] == {"a": True, "b": True}

    def test_arrays_replaced_by_default(self):
        result = deep_merge({"ces": ["a", "b"]}, {"ces": ["c"]})
        assert result["ces"] == ["c"]

    def test_base_not_mutated(self):
        base = {"a": {"b": 1}, "l": [1]}
        deep_merge(base, {"a": {"b": 2}, "l": [2]}, merge_lists=True)
        assert base == {"a": {"b": 1}, "l": [1]}

    def test_hash_replaces_scalar(self):
        result = deep_merge({"a": "x"}, {"a": {"b": 1}})
        assert result == {"a": {"b": 1}}


class TestListMerge:
    def test_union_preserves_order(self):
        result = deep_merge({"l": ["a", "b"]}, {"l": ["b", "c"]}, merge_lists=True)
        assert result["l"] == ["a", "b", "c"]

    def test_nil_does_not_clobber(self):
        result = deep_merge({"a": 1}, {"a": None}, merge_lists=True)
        assert result["a"] == 1

    def test_nil_kept_for_new_key(self):
        result = deep_merge({}, {"a": None}, merge_lists=True)
        assert result == {"a": None}


class TestKnockout:
    def test_knocks_out_list_element(self):
        result = deep_merge(
            {"pkgs": ["telnet", "rsh"]},
            {"pkgs": ["--telnet", "ftp"]},
            merge_lists=True,
            knockout_prefix="--",
        )
        assert result["pkgs"] == ["rsh", "ftp"]

    def test_knockout_of_missing_element_is_dropped(self):
        result = deep_merge({"pkgs": ["rsh"]}, {"pkgs": ["--telnet"]}, merge_lists=True, knockout_prefix="--")
        assert result["pkgs"] == ["rsh"]

    def test_bare_prefix_removes_key(self):
        result = deep_merge({"a": 1, "b": 2}, {"a": "--"}, merge_lists=True, knockout_prefix="--")
        assert result == {"b": 2}

    def test_nested_knockout(self):
        base = {"chk": {"settings": {"value": ["a", "b"]}}}
        override = {"chk": {"settings": {"value": ["--a"]}}}
        result = deep_merge(base, override, merge_lists=True, knockout_prefix="--")
        assert result["chk"]["settings"]["value"] == ["b"]

    def test_no_prefix_keeps_literal(self):
        result = deep_merge({"l": ["a"]}, {"l": ["--a"]}, merge_lists=True)
        assert result["l"] == ["a", "--a"]


class TestUnique:
    def test_unhashable_items(self):
        assert unique([{"a": 1}, {"a": 1}, [1], [1]]) == [{"a": 1}, [1]]

    def test_bool_and_int_distinct(self):
        assert unique([1, True, 1, True]) == [1, True]

    def test_first_seen_order(self):
        assert unique(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
