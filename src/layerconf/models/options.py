"""構築オプションモデル。"""

from __future__ import annotations

from pathlib import Path
from typing import Final

from pydantic import Field

from layerconf.models._base import LayerconfBaseModel

DEFAULT_NAME: Final[str] = "layerconf"
"""rc ファイル名のデフォルト語幹（.layerconfrc 等）。"""


class ConfigOptions(LayerconfBaseModel):
    """Config ファサードの構築オプション。

    全フィールドは任意。ファサード自体は探索を行わず、ローダーにそのまま渡す。

    Attributes:
        defaults: 最も一般的なフラグメントとしてチェーン先頭にマージされる設定。
        extend_by: 探索済みフラグメントの後、明示指定ファイルの直前に積まれる上書き設定。
        path_to_config: 最も具体的なフラグメントとして読み込む明示的な設定ファイル。
        fs_root: 探索の上限ディレクトリ。None ならファイルシステムのルート。
        fs_home: ユーザーホームとして扱うディレクトリ。None なら Path.home()。
        cwd: 探索開始ディレクトリ兼レベル解決の基準。None なら Path.cwd()。
        name: rc ファイル名の語幹。
    """

    defaults: dict[str, object] | None = None
    extend_by: dict[str, object] | None = None
    path_to_config: Path | None = None
    fs_root: Path | None = None
    fs_home: Path | None = None
    cwd: Path | None = None
    name: str = Field(default=DEFAULT_NAME, min_length=1, pattern=r"^[A-Za-z0-9_.-]+$")

    def effective_cwd(self) -> Path:
        """cwd が未指定ならプロセスのカレントディレクトリを返す。"""
        return self.cwd if self.cwd is not None else Path.cwd()

    def cache_key(self) -> str:
        """キャッシュキーとして使う JSON 文字列表現。

        cwd が未指定でも、解決時点のカレントディレクトリでキーを区別する。
        """
        return self.model_copy(update={"cwd": self.effective_cwd()}).model_dump_json()
