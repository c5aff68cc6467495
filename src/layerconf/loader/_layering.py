"""構築オプションのレイヤリング。

全てのローダーは探索結果を以下の順に並べたチェーンを返す:

    [defaults] + discovered + [extend_by] + [explicit]

存在しないレイヤーはスキップされる。
"""

from __future__ import annotations

from collections.abc import Iterable

from layerconf.models.fragment import Fragment
from layerconf.models.options import ConfigOptions


def layer_fragments(
    options: ConfigOptions,
    discovered: Iterable[Fragment],
    explicit: Fragment | None = None,
) -> tuple[Fragment, ...]:
    """defaults / extend_by / 明示指定フラグメントを探索結果の前後に積む。

    Args:
        options: 構築オプション。
        discovered: 探索で得たフラグメント（一般的→具体的）。
        explicit: path_to_config から読み込んだフラグメント。

    Returns:
        一般的→具体的の順のフラグメントチェーン。
    """
    chain: list[Fragment] = []
    if options.defaults is not None:
        chain.append(Fragment.from_raw(options.defaults))
    chain.extend(discovered)
    if options.extend_by is not None:
        chain.append(Fragment.from_raw(options.extend_by))
    if explicit is not None:
        chain.append(explicit)
    return tuple(chain)
