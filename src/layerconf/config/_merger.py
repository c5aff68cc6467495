"""ディープマージ。

全ての上位コンポーネントが再利用する単一のマージプリミティブ。
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping

from layerconf.models.fragment import METADATA_KEYS, Fragment


def clone_value(value: object) -> object:
    """入力と参照を共有しない値を返す。"""
    if isinstance(value, Mapping):
        return {k: clone_value(v) for k, v in value.items()}
    return copy.deepcopy(value)


def deep_merge(base: object, override: object) -> object:
    """2つの値を右優先でディープマージする。

    両方がマッピングなら再帰的にマージし、それ以外（配列を含む）は
    override が base を丸ごと置き換える。型の不一致は例外にせず上書きで解決する。
    入力は変更されず、戻り値は入力とコンテナを共有しない。

    Args:
        base: 先の（一般的な）値。
        override: 後の（具体的な）値。

    Returns:
        マージ済みの新しい値。
    """
    if not (isinstance(base, Mapping) and isinstance(override, Mapping)):
        return clone_value(override)
    merged: dict[str, object] = {k: clone_value(v) for k, v in base.items()}
    for key, value in override.items():
        if key in merged:
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = clone_value(value)
    return merged


def merge_all(values: Iterable[object]) -> dict[str, object]:
    """値の列を左から順にディープマージする。

    空の列、あるいはマッピングで終わらない結果は空辞書として扱う。

    Args:
        values: 一般的→具体的の順に並んだ値。

    Returns:
        マージ済みの辞書。
    """
    result: object = {}
    for value in values:
        result = deep_merge(result, value)
    if not isinstance(result, dict):
        return {}
    return result


def merge_values(values: Iterable[object]) -> object | None:
    """値の列をマージし、任意の型の結果を返す。空の列なら None。

    merge_all と異なり、結果がマッピングでなくてもそのまま返す（モジュール値用）。
    """
    result: object | None = None
    first = True
    for value in values:
        result = clone_value(value) if first else deep_merge(result, value)
        first = False
    return result


def strip_metadata(data: Mapping[str, object]) -> dict[str, object]:
    """トップレベルから __source と root を除いた浅いコピーを返す。"""
    return {k: v for k, v in data.items() if k not in METADATA_KEYS}


def merge_fragments(fragments: Iterable[Fragment]) -> dict[str, object]:
    """フラグメント列をマージし、メタデータキーを含まない MergedConfig を返す。"""
    return merge_all(strip_metadata(fragment.data) for fragment in fragments)
