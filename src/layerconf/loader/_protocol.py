"""外部コラボレーターのインターフェース。

Config ファサードはフラグメントの探索と glob 展開を自身では行わず、
以下のプロトコルを満たすオブジェクトに委譲する。
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from layerconf.models.fragment import Fragment
from layerconf.models.options import ConfigOptions


@runtime_checkable
class FragmentLoader(Protocol):
    """フラグメントチェーンを生成するローダー。

    返却するチェーンは一般的→具体的の順でなければならない。
    ファイル由来のフラグメントは source に絶対パスを持つ。
    """

    def load(self, options: ConfigOptions) -> Sequence[Fragment]:
        """チェーンを同期的に読み込む。

        Raises:
            FragmentLoadError: チェーンを生成できない場合。
        """
        ...

    async def load_async(self, options: ConfigOptions) -> Sequence[Fragment]:
        """チェーンを非同期に読み込む。結果は load() と同一でなければならない。

        Raises:
            FragmentLoadError: チェーンを生成できない場合。
        """
        ...


@runtime_checkable
class GlobMatcher(Protocol):
    """ディレクトリ glob マッチャー。

    固定されたファイルシステムのスナップショットに対して決定的でなければならない。
    """

    def match(self, pattern: str, base_dir: str) -> Sequence[str]:
        """pattern を base_dir 基準で展開し、一致したディレクトリの絶対パスを返す。

        Raises:
            GlobExpansionError: 展開に失敗した場合。
        """
        ...

    async def match_async(self, pattern: str, base_dir: str) -> Sequence[str]:
        """match() の非同期版。"""
        ...
