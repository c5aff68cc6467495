"""設定フラグメントモデル。

ローダーが生成する生の設定オブジェクトと、その出自（ソースファイルパス）を保持する。
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from pydantic import Field

from layerconf.models._base import LayerconfBaseModel

SOURCE_KEY: Final[str] = "__source"
"""生フラグメント中で出自パスを表すメタデータキー。"""

ROOT_KEY: Final[str] = "root"
"""プロジェクトルートを示すマーカーキー。値が厳密に True の場合のみ有効。"""

METADATA_KEYS: Final[frozenset[str]] = frozenset({SOURCE_KEY, ROOT_KEY})
"""マージ結果から除外されるメタデータキー集合。"""


class Fragment(LayerconfBaseModel):
    """出自付きの設定フラグメント。

    data は __source を含まない生の設定辞書（root マーカーは含み得る）。
    エンジンは data を破壊的に変更しない。マージは常に新しいオブジェクトを生成する。

    Attributes:
        data: 設定キーから任意の JSON 互換値への辞書。
        source: フラグメントの読み込み元の絶対パス。メモリ上のフラグメントでは None。
    """

    data: dict[str, object] = Field(default_factory=dict)
    source: str | None = None

    @classmethod
    def from_raw(cls, raw: Mapping[str, object]) -> Fragment:
        """__source キーを含み得る生の辞書から Fragment を構築する。

        Args:
            raw: 生の設定辞書。

        Returns:
            __source を source フィールドに移した Fragment。

        Raises:
            TypeError: __source が文字列でない場合。
        """
        source = raw.get(SOURCE_KEY)
        if source is not None and not isinstance(source, (str, os.PathLike)):
            msg = f"'{SOURCE_KEY}' must be a path string, got {type(source).__name__}"
            raise TypeError(msg)
        data = {k: v for k, v in raw.items() if k != SOURCE_KEY}
        return cls(data=data, source=os.fspath(source) if source is not None else None)

    def to_raw(self) -> dict[str, object]:
        """出自を __source キーとして埋め戻した生の辞書を返す（浅いコピー）。"""
        raw = dict(self.data)
        if self.source is not None:
            raw[SOURCE_KEY] = self.source
        return raw

    @property
    def is_root(self) -> bool:
        """root マーカーが厳密に True かどうか。"""
        return self.data.get(ROOT_KEY) is True

    @property
    def source_dir(self) -> str | None:
        """出自ファイルのディレクトリ。source が無ければ None。"""
        if self.source is None:
            return None
        return os.path.dirname(self.source)
