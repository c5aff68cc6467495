"""メモリ上のフラグメントローダー。"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from layerconf.loader._layering import layer_fragments
from layerconf.models.fragment import Fragment
from layerconf.models.options import ConfigOptions


class StaticFragmentLoader:
    """固定のフラグメント列を返すローダー。

    ライブラリビューの仮想チェーンや、ファイルシステムを介さない利用に使う。
    path_to_config 等の探索オプションは無視し、defaults / extend_by のみ適用する。
    """

    def __init__(self, fragments: Iterable[Fragment | Mapping[str, object]] = ()) -> None:
        self._fragments: tuple[Fragment, ...] = tuple(
            f if isinstance(f, Fragment) else Fragment.from_raw(f) for f in fragments
        )

    @property
    def fragments(self) -> tuple[Fragment, ...]:
        return self._fragments

    def load(self, options: ConfigOptions) -> tuple[Fragment, ...]:
        return layer_fragments(options, self._fragments)

    async def load_async(self, options: ConfigOptions) -> tuple[Fragment, ...]:
        return self.load(options)
