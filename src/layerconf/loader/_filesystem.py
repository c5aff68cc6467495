"""ファイルシステムフラグメントローダー。

システム・ユーザーホーム・祖先ディレクトリの rc ファイルを探索し、
構築オプションのレイヤリングを適用したチェーンを返す。
存在しない探索候補はスキップし、明示指定ファイルの不在はエラーとする。
"""

from __future__ import annotations

import logging
from pathlib import Path

import anyio

from layerconf.loader._cache import FragmentCache
from layerconf.loader._layering import layer_fragments
from layerconf.loader._locator import candidate_paths, explicit_config_path
from layerconf.loader._reader import (
    FragmentLoadError,
    read_fragment,
    read_fragment_async,
)
from layerconf.models.fragment import Fragment
from layerconf.models.options import ConfigOptions

logger = logging.getLogger(__name__)


def _discovery_plan(options: ConfigOptions) -> tuple[list[Path], Path | None]:
    """探索候補と明示指定パスを返す。明示指定パスは探索候補から除外する。

    Raises:
        FragmentLoadError: ホームディレクトリを特定できない場合。
    """
    explicit = explicit_config_path(options)
    try:
        candidates = candidate_paths(options)
    except RuntimeError as e:
        raise FragmentLoadError(f"Cannot determine home directory: {e}") from e
    return [p for p in candidates if p != explicit], explicit


class FilesystemFragmentLoader:
    """rc ファイルを探索するデフォルトのローダー。

    Args:
        cache: 注入するキャッシュ。None の場合は毎回ファイルシステムを読む。
    """

    def __init__(self, cache: FragmentCache | None = None) -> None:
        self._cache = cache

    def load(self, options: ConfigOptions) -> tuple[Fragment, ...]:
        """チェーンを同期的に読み込む。

        Raises:
            FragmentLoadError: 構文エラー、アクセスエラー、明示指定ファイルの不在。
        """
        if self._cache is not None:
            cached = self._cache.get(options)
            if cached is not None:
                return cached

        candidates, explicit_path = _discovery_plan(options)
        discovered: list[Fragment] = []
        for path in candidates:
            if not path.is_file():
                continue
            logger.debug("Loading configuration fragment %s", path)
            try:
                discovered.append(read_fragment(path))
            except FileNotFoundError:
                # is_file() の確認後に削除された探索候補
                logger.debug("Configuration fragment %s disappeared, skipping", path)

        explicit: Fragment | None = None
        if explicit_path is not None:
            try:
                explicit = read_fragment(explicit_path)
            except FileNotFoundError as e:
                raise FragmentLoadError(
                    f"Configuration file not found: '{explicit_path}'"
                ) from e

        chain = layer_fragments(options, discovered, explicit)
        if self._cache is not None:
            self._cache.put(options, chain)
        return chain

    async def load_async(self, options: ConfigOptions) -> tuple[Fragment, ...]:
        """load() の非同期版。anyio.Path 経由でファイルシステムにアクセスする。

        Raises:
            FragmentLoadError: 構文エラー、アクセスエラー、明示指定ファイルの不在。
        """
        if self._cache is not None:
            cached = self._cache.get(options)
            if cached is not None:
                return cached

        candidates, explicit_path = _discovery_plan(options)
        discovered: list[Fragment] = []
        for path in candidates:
            if not await anyio.Path(path).is_file():
                continue
            logger.debug("Loading configuration fragment %s", path)
            try:
                discovered.append(await read_fragment_async(path))
            except FileNotFoundError:
                logger.debug("Configuration fragment %s disappeared, skipping", path)

        explicit: Fragment | None = None
        if explicit_path is not None:
            try:
                explicit = await read_fragment_async(explicit_path)
            except FileNotFoundError as e:
                raise FragmentLoadError(
                    f"Configuration file not found: '{explicit_path}'"
                ) from e

        chain = layer_fragments(options, discovered, explicit)
        if self._cache is not None:
            self._cache.put(options, chain)
        return chain
