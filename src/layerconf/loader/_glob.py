"""DirectoryGlobMatcher — levels キーのワイルドカード展開。"""

from __future__ import annotations

import glob as glob_module
import logging
import os

import anyio.to_thread

logger = logging.getLogger(__name__)


class GlobExpansionError(Exception):
    """glob パターンの展開失敗。

    展開中のアクセスエラー等を表す。元の例外は __cause__ に保持される。
    """


def expand_directories(pattern: str, base_dir: str) -> tuple[str, ...]:
    """pattern を base_dir 基準で展開し、ディレクトリのみを返す。

    基準ディレクトリ自体に含まれる特殊文字はエスケープされる。
    絶対パスのパターンは base_dir を無視する。`**` は再帰的に一致する。

    Args:
        pattern: glob パターン。
        base_dir: 相対パターンの解決基準となる絶対ディレクトリ。

    Returns:
        正規化済み絶対パスのタプル（ソート済み・重複排除済み）。

    Raises:
        GlobExpansionError: 展開中に OS エラーが発生した場合。
    """
    full_pattern = os.path.join(
        glob_module.escape(base_dir), os.path.expanduser(pattern)
    )
    try:
        matched = glob_module.glob(full_pattern, recursive=True)
        directories = {
            os.path.normpath(os.path.abspath(path))
            for path in matched
            if os.path.isdir(path)
        }
    except OSError as e:
        raise GlobExpansionError(
            f"Cannot expand level pattern '{pattern}' in '{base_dir}': {e}"
        ) from e
    result = tuple(sorted(directories))
    logger.debug("Expanded %s in %s to %d directories", pattern, base_dir, len(result))
    return result


class DirectoryGlobMatcher:
    """glob モジュールによるデフォルトの GlobMatcher 実装。"""

    def match(self, pattern: str, base_dir: str) -> tuple[str, ...]:
        return expand_directories(pattern, base_dir)

    async def match_async(self, pattern: str, base_dir: str) -> tuple[str, ...]:
        """match() と同じ展開をワーカースレッドで実行する。"""
        return await anyio.to_thread.run_sync(expand_directories, pattern, base_dir)
