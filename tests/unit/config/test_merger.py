"""ディープマージのテスト。

deep_merge — マッピング再帰マージ, 配列置換, 型不一致, 入力非破壊
merge_all / merge_values — 列のマージ, 結合則
merge_fragments — メタデータ除外
"""

from __future__ import annotations

import copy

from layerconf.config._merger import (
    deep_merge,
    merge_all,
    merge_fragments,
    merge_values,
    strip_metadata,
)
from layerconf.models.fragment import Fragment

# =============================================================================
# deep_merge
# =============================================================================


class TestDeepMergeMappings:
    """マッピング同士の再帰マージ。"""

    def test_keys_from_both_sides_present(self) -> None:
        """両側のキーが結果に含まれる。"""
        result = deep_merge({"a": 1}, {"b": 2})
        assert result == {"a": 1, "b": 2}

    def test_later_side_wins_on_conflict(self) -> None:
        """同一キーは後の値が優先される。"""
        result = deep_merge({"a": 1, "b": 1}, {"a": 2})
        assert result == {"a": 2, "b": 1}

    def test_nested_mappings_merged(self) -> None:
        """ネストしたマッピングも再帰的にマージされる。"""
        base = {"obj": {"key": "val", "deep": {"x": 1}}}
        override = {"obj": {"other": "key", "deep": {"y": 2}}}
        result = deep_merge(base, override)
        assert result == {
            "obj": {"key": "val", "other": "key", "deep": {"x": 1, "y": 2}},
        }


class TestDeepMergeArrays:
    """配列は連結されず丸ごと置き換えられる。"""

    def test_array_replaced(self) -> None:
        result = deep_merge({"techs": ["a"]}, {"techs": ["b"]})
        assert result == {"techs": ["b"]}

    def test_array_of_objects_not_merged_elementwise(self) -> None:
        """配列内のオブジェクトも要素単位ではマージされない。"""
        base = {"templates": [{"css": "path/to/css.js"}]}
        override = {"templates": [{"bemhtml": "path/to/bemhtml.js"}]}
        result = deep_merge(base, override)
        assert result == {"templates": [{"bemhtml": "path/to/bemhtml.js"}]}


class TestDeepMergeTypeMismatch:
    """型の不一致は例外にならず、後の値で上書きされる。"""

    def test_scalar_replaces_mapping(self) -> None:
        assert deep_merge({"a": {"x": 1}}, {"a": "flat"}) == {"a": "flat"}

    def test_mapping_replaces_scalar(self) -> None:
        assert deep_merge({"a": "flat"}, {"a": {"x": 1}}) == {"a": {"x": 1}}

    def test_none_overrides_explicitly(self) -> None:
        """明示的な None（JSON の null）は上書きとして扱う。"""
        assert deep_merge({"a": 1}, {"a": None}) == {"a": None}

    def test_non_mapping_top_level(self) -> None:
        assert deep_merge({"a": 1}, ["x"]) == ["x"]


class TestDeepMergeDoesNotMutateInput:
    """入力は変更されず、結果は入力とコンテナを共有しない。"""

    def test_inputs_unchanged(self) -> None:
        base = {"obj": {"key": "val"}, "list": [1]}
        override = {"obj": {"other": "key"}, "list": [2]}
        base_copy = copy.deepcopy(base)
        override_copy = copy.deepcopy(override)
        deep_merge(base, override)
        assert base == base_copy
        assert override == override_copy

    def test_result_does_not_alias_override(self) -> None:
        override: dict[str, object] = {"list": [1, 2], "obj": {"k": "v"}}
        result = deep_merge({}, override)
        assert isinstance(result, dict)
        result["list"].append(3)  # type: ignore[attr-defined]
        result["obj"]["k"] = "changed"  # type: ignore[index]
        assert override == {"list": [1, 2], "obj": {"k": "v"}}


# =============================================================================
# merge_all / merge_values
# =============================================================================


class TestMergeAll:
    """値の列の左からのマージ。"""

    def test_empty_returns_empty_dict(self) -> None:
        assert merge_all([]) == {}

    def test_three_layers_priority(self) -> None:
        result = merge_all([{"test": 1}, {"test": 2}, {"other": "field"}])
        assert result == {"test": 2, "other": "field"}

    def test_associative_under_append(self) -> None:
        """merge([a, b, c]) == merge([merge([a, b]), c])。"""
        a = {"x": {"p": 1}, "arr": [1]}
        b = {"x": {"q": 2}, "arr": [2], "s": "b"}
        c = {"x": {"p": 3}, "s": "c"}
        assert merge_all([a, b, c]) == merge_all([merge_all([a, b]), c])


class TestMergeValues:
    """任意の型の値のマージ。"""

    def test_empty_returns_none(self) -> None:
        assert merge_values([]) is None

    def test_scalar_result_kept(self) -> None:
        assert merge_values([{"a": 1}, "flat"]) == "flat"

    def test_mapping_result(self) -> None:
        assert merge_values([{"a": 1}, {"b": 2}]) == {"a": 1, "b": 2}


# =============================================================================
# merge_fragments / strip_metadata
# =============================================================================


class TestStripMetadata:
    def test_removes_source_and_root(self) -> None:
        data = {"__source": "/a/b", "root": True, "keep": 1}
        assert strip_metadata(data) == {"keep": 1}

    def test_nested_root_kept(self) -> None:
        """トップレベル以外の root キーは通常のデータとして扱う。"""
        data = {"libs": {"lib1": {"root": True}}}
        assert strip_metadata(data) == data


class TestMergeFragments:
    def test_root_marker_not_in_result(self) -> None:
        chain = [
            Fragment(data={"a": 1}, source="/x/.layerconfrc"),
            Fragment(data={"root": True, "b": 2}, source="/x/y/.layerconfrc"),
        ]
        assert merge_fragments(chain) == {"a": 1, "b": 2}
