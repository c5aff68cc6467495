"""ライブラリ・モジュールスコープの抽出。

libs.<name> と modules.<name> をチェーン全体からチェーン順にマージする。
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from layerconf.config._levels import LIBS_KEY, MODULES_KEY
from layerconf.config._merger import merge_values
from layerconf.models.fragment import SOURCE_KEY, Fragment

logger = logging.getLogger(__name__)


def _declarations(
    chain: Sequence[Fragment],
    section: str,
    name: str,
) -> list[tuple[Fragment, object]]:
    """section[name] を宣言しているフラグメントとその値をチェーン順に返す。"""
    found: list[tuple[Fragment, object]] = []
    for fragment in chain:
        block = fragment.data.get(section)
        if isinstance(block, Mapping) and name in block:
            found.append((fragment, block[name]))
    return found


def library_fragment(chain: Sequence[Fragment], name: str) -> Fragment | None:
    """libs.<name> をマージした単一の合成フラグメントを返す。

    合成フラグメントの source は最後に libs.<name> を宣言したフラグメントの
    source を引き継ぎ、相対レベルキーはそのディレクトリ基準で解決される。

    Args:
        chain: 切り詰め済みのフラグメントチェーン。
        name: ライブラリ名。

    Returns:
        合成フラグメント。どのフラグメントも宣言していない、または
        マージ結果がマッピングでない場合は None。
    """
    declarations = _declarations(chain, LIBS_KEY, name)
    if not declarations:
        return None
    merged = merge_values(value for _, value in declarations)
    if not isinstance(merged, dict):
        logger.warning(
            "Ignoring library '%s': configuration must be a mapping, got %s",
            name,
            type(merged).__name__,
        )
        return None
    source = declarations[-1][0].source
    data = {k: v for k, v in merged.items() if k != SOURCE_KEY}
    return Fragment(data=data, source=source)


def module_value(chain: Sequence[Fragment], name: str) -> object | None:
    """modules.<name> をマージした値を返す。どのフラグメントも宣言していなければ None。"""
    declarations = _declarations(chain, MODULES_KEY, name)
    if not declarations:
        return None
    return merge_values(value for _, value in declarations)
