"""設定解決エンジン。

フラグメントチェーンを以下の順で処理する:

1. ルート切り詰め（truncate_chain）
2. ディープマージ（deep_merge / merge_fragments）
3. レベル解決（build_level_map）
4. ライブラリ・モジュールスコープ抽出（library_fragment / module_value）
"""

from layerconf.config._facade import Config, create_config
from layerconf.config._levels import build_level_map, collect_glob_requests
from layerconf.config._merger import deep_merge, merge_all, merge_fragments
from layerconf.config._truncator import find_root_index, truncate_chain

__all__ = [
    "Config",
    "build_level_map",
    "collect_glob_requests",
    "create_config",
    "deep_merge",
    "find_root_index",
    "merge_all",
    "merge_fragments",
    "truncate_chain",
]
