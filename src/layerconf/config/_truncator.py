"""ルート切り詰め。

root: true を持つ最初のフラグメントをチェーンの先頭とし、それ以前を除外する。
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from layerconf.models.fragment import Fragment

logger = logging.getLogger(__name__)


def find_root_index(chain: Sequence[Fragment]) -> int | None:
    """root マーカーが厳密に True である最初のフラグメントの位置を返す。

    Args:
        chain: 一般的→具体的の順のフラグメントチェーン。

    Returns:
        ルートフラグメントのインデックス。見つからなければ None。
    """
    for index, fragment in enumerate(chain):
        if fragment.is_root:
            return index
    return None


def truncate_chain(chain: Sequence[Fragment]) -> tuple[Fragment, ...]:
    """ルートフラグメントより前のフラグメントを除外したチェーンを返す。

    除外は上書きではなく削除であり、除外されたフラグメントにのみ存在するキーは
    結果に現れない。ルートが無い場合はチェーン全体をそのまま使う。

    Args:
        chain: 一般的→具体的の順のフラグメントチェーン。

    Returns:
        ルート以降のフラグメント列。
    """
    index = find_root_index(chain)
    if index is None:
        return tuple(chain)
    if index > 0:
        logger.debug(
            "Truncating %d fragment(s) above project root %s",
            index,
            chain[index].source,
        )
    return tuple(chain[index:])
