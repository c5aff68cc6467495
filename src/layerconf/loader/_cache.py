"""フラグメントキャッシュ。

ローダーに明示的に注入するキャッシュ。グローバルなシングルトンは持たない。
"""

from __future__ import annotations

from layerconf.models.fragment import Fragment
from layerconf.models.options import ConfigOptions


class FragmentCache:
    """ConfigOptions をキーにフラグメントチェーンを保持するキャッシュ。

    フラグメントは不変モデルのため、チェーンはそのまま共有して返す。
    生存期間は所有者（通常はプロセスまたは1回の実行）が管理し、
    clear() で無効化する。
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[Fragment, ...]] = {}

    def get(self, options: ConfigOptions) -> tuple[Fragment, ...] | None:
        """キャッシュ済みのチェーンを返す。未登録なら None。"""
        return self._entries.get(options.cache_key())

    def put(self, options: ConfigOptions, chain: tuple[Fragment, ...]) -> None:
        """チェーンを登録する。"""
        self._entries[options.cache_key()] = chain

    def clear(self) -> None:
        """全エントリを破棄する。"""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
