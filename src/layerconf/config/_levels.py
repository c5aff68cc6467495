"""レベル解決。

各フラグメントの levels マップを絶対パスへ解決し、共通フィールドとマージした
LevelMap を構築する。ワイルドカードを含むキーは GlobMatcher で展開する。

I/O（glob 展開）と純粋な構築処理を分離しているため、同期版と非同期版は
展開結果を得た後は同一のコードで LevelMap を構築する:

1. collect_glob_requests() で展開が必要なパターンを列挙
2. 呼び出し側が同期または非同期で展開
3. build_level_map() で LevelMap を構築
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from typing import Final

from layerconf.config._merger import clone_value, deep_merge, merge_all, strip_metadata
from layerconf.models._base import LayerconfBaseModel
from layerconf.models.fragment import Fragment

LEVELS_KEY: Final[str] = "levels"
LIBS_KEY: Final[str] = "libs"
MODULES_KEY: Final[str] = "modules"

_SCOPED_KEYS: Final[frozenset[str]] = frozenset({LEVELS_KEY, LIBS_KEY, MODULES_KEY})
"""共通フィールドから除外されるキー集合。"""

_GLOB_SPECIAL_CHARS: Final[frozenset[str]] = frozenset("*?[")


class GlobRequest(LayerconfBaseModel):
    """glob 展開要求。

    Attributes:
        pattern: levels マップに書かれたワイルドカード付きキー。
        base_dir: 相対パターンの解決基準となる絶対ディレクトリ。
    """

    pattern: str
    base_dir: str


def is_glob_pattern(key: str) -> bool:
    """キーがワイルドカード文字（*, ?, [）を含むかどうか。"""
    return bool(key) and bool(set(key) & _GLOB_SPECIAL_CHARS)


def absolutize(path: str, base_dir: str) -> str:
    """path を base_dir 基準の正規化済み絶対パスに変換する。

    字句的な正規化のみを行い、シンボリックリンクは追従しない。
    """
    return os.path.normpath(os.path.join(base_dir, os.path.expanduser(path)))


def fragment_base_dir(fragment: Fragment, cwd: str) -> str:
    """フラグメントの相対レベルキーの解決基準ディレクトリを返す。

    出自を持たないフラグメントは cwd を基準とする。
    """
    source_dir = fragment.source_dir
    if source_dir is None:
        return cwd
    return absolutize(source_dir, cwd)


def _levels_of(fragment: Fragment) -> Mapping[str, object]:
    levels = fragment.data.get(LEVELS_KEY)
    if isinstance(levels, Mapping):
        return levels
    return {}


def _common_fields_of(fragment: Fragment) -> dict[str, object]:
    """levels / libs / modules とメタデータを除くトップレベルフィールド。"""
    return {
        k: v for k, v in strip_metadata(fragment.data).items() if k not in _SCOPED_KEYS
    }


def collect_glob_requests(
    chain: Sequence[Fragment],
    cwd: str,
) -> tuple[GlobRequest, ...]:
    """チェーン全体から glob 展開が必要なキーを出現順・重複なしで列挙する。

    Args:
        chain: 切り詰め済みのフラグメントチェーン。
        cwd: 出自を持たないフラグメントの解決基準。

    Returns:
        展開要求のタプル。
    """
    requests: dict[GlobRequest, None] = {}
    for fragment in chain:
        base_dir = fragment_base_dir(fragment, cwd)
        for key in _levels_of(fragment):
            if is_glob_pattern(key):
                requests.setdefault(GlobRequest(pattern=key, base_dir=base_dir), None)
    return tuple(requests)


def build_level_map(
    chain: Sequence[Fragment],
    cwd: str,
    expansions: Mapping[GlobRequest, Sequence[str]],
) -> dict[str, object]:
    """展開済みの glob 結果を用いて LevelMap を構築する。

    レベル値は解決された絶対パスごとにチェーン順で累積マージする
    （後のフラグメントが優先）。各エントリはチェーン全体の共通フィールド
    （levels / libs / modules とメタデータを除くトップレベルフィールド）を
    土台とし、その上にレベル値をマージしたものになる。レベルを宣言しない
    フラグメントの共通フィールドも全てのレベルに届く。

    Args:
        chain: 切り詰め済みのフラグメントチェーン。
        cwd: 出自を持たないフラグメントの解決基準。
        expansions: collect_glob_requests() の各要求に対する展開結果。

    Returns:
        絶対ディレクトリパス → マージ済みレベル設定 の辞書。

    Raises:
        KeyError: glob キーに対応する展開結果が expansions に無い場合。
    """
    accumulated: dict[str, object] = {}
    for fragment in chain:
        levels = _levels_of(fragment)
        if not levels:
            continue
        base_dir = fragment_base_dir(fragment, cwd)
        for key, value in levels.items():
            if is_glob_pattern(key):
                paths = [
                    absolutize(match, base_dir)
                    for match in expansions[GlobRequest(pattern=key, base_dir=base_dir)]
                ]
            else:
                paths = [absolutize(key, base_dir)]
            for path in paths:
                if path in accumulated:
                    accumulated[path] = deep_merge(accumulated[path], value)
                else:
                    accumulated[path] = clone_value(value)

    common = merge_all(_common_fields_of(fragment) for fragment in chain)
    return {path: deep_merge(common, value) for path, value in accumulated.items()}


def lookup_level(
    level_map: Mapping[str, object],
    name: str | os.PathLike[str],
    cwd: str,
) -> object | None:
    """name を cwd 基準で絶対パスに解決し LevelMap から取り出す。見つからなければ None。"""
    return level_map.get(absolutize(os.fspath(name), cwd))
