"""Config — 設定クエリ API。

ローダーが生成したフラグメントチェーンに対して、ルート切り詰め・ディープマージ・
レベル解決・スコープ抽出を適用する。各クエリは同期版と非同期版（*_async）を持ち、
非同期版はローダーと glob マッチャーの呼び出しでのみ中断する。
チェーン取得後の解決処理は両者で共通であり、同一の結果を返す。
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path

from layerconf.config._levels import (
    GlobRequest,
    build_level_map,
    collect_glob_requests,
    lookup_level,
)
from layerconf.config._merger import merge_fragments
from layerconf.config._scope import library_fragment, module_value
from layerconf.config._truncator import find_root_index, truncate_chain
from layerconf.loader import (
    DirectoryGlobMatcher,
    FilesystemFragmentLoader,
    FragmentLoader,
    GlobMatcher,
    StaticFragmentLoader,
)
from layerconf.models.fragment import Fragment
from layerconf.models.options import ConfigOptions

logger = logging.getLogger(__name__)


def _detached(chain: tuple[Fragment, ...]) -> tuple[Fragment, ...]:
    """data を複製したフラグメント列を返す。"""
    return tuple(
        fragment.model_copy(update={"data": copy.deepcopy(fragment.data)})
        for fragment in chain
    )


class Config:
    """有効な設定を解決するファサード。

    フラグメントチェーンはインスタンスごとに初回クエリでメモ化される。
    読み込みに失敗した場合はキャッシュされず、次のクエリで再度ローダーを呼ぶ。

    Args:
        options: 構築オプション。cwd 未指定時は構築時のカレントディレクトリに固定する。
        loader: フラグメントローダー。None なら FilesystemFragmentLoader。
        glob_matcher: glob マッチャー。None なら DirectoryGlobMatcher。
    """

    def __init__(
        self,
        options: ConfigOptions | None = None,
        *,
        loader: FragmentLoader | None = None,
        glob_matcher: GlobMatcher | None = None,
    ) -> None:
        opts = options if options is not None else ConfigOptions()
        cwd = Path(os.path.abspath(opts.effective_cwd()))
        self._options = opts.model_copy(update={"cwd": cwd})
        self._cwd = str(cwd)
        self._loader: FragmentLoader = (
            loader if loader is not None else FilesystemFragmentLoader()
        )
        self._glob_matcher: GlobMatcher = (
            glob_matcher if glob_matcher is not None else DirectoryGlobMatcher()
        )
        self._chain: tuple[Fragment, ...] | None = None

    @property
    def options(self) -> ConfigOptions:
        return self._options

    @property
    def cwd(self) -> str:
        return self._cwd

    # -----------------------------------------------------------------
    # チェーン取得（I/O 境界）
    # -----------------------------------------------------------------

    def _load_chain(self) -> tuple[Fragment, ...]:
        if self._chain is None:
            self._chain = tuple(self._loader.load(self._options))
        return self._chain

    async def _load_chain_async(self) -> tuple[Fragment, ...]:
        if self._chain is None:
            self._chain = tuple(await self._loader.load_async(self._options))
        return self._chain

    def _expand(self, chain: tuple[Fragment, ...]) -> dict[GlobRequest, tuple[str, ...]]:
        return {
            request: tuple(self._glob_matcher.match(request.pattern, request.base_dir))
            for request in collect_glob_requests(chain, self._cwd)
        }

    async def _expand_async(
        self, chain: tuple[Fragment, ...]
    ) -> dict[GlobRequest, tuple[str, ...]]:
        expansions: dict[GlobRequest, tuple[str, ...]] = {}
        for request in collect_glob_requests(chain, self._cwd):
            expansions[request] = tuple(
                await self._glob_matcher.match_async(request.pattern, request.base_dir)
            )
        return expansions

    # -----------------------------------------------------------------
    # 純粋な解決処理（同期・非同期で共通）
    # -----------------------------------------------------------------

    def _root_of(self, chain: tuple[Fragment, ...]) -> str | None:
        index = find_root_index(chain)
        if index is None:
            return None
        source_dir = chain[index].source_dir
        if source_dir is None:
            logger.warning("Root fragment has no source; project root is unknown")
            return None
        return source_dir

    def _library_of(self, chain: tuple[Fragment, ...], name: str) -> Config | None:
        fragment = library_fragment(truncate_chain(chain), name)
        if fragment is None:
            return None
        return Config(
            ConfigOptions(cwd=Path(self._cwd), name=self._options.name),
            loader=StaticFragmentLoader([fragment]),
            glob_matcher=self._glob_matcher,
        )

    # -----------------------------------------------------------------
    # 公開クエリ
    # -----------------------------------------------------------------

    def configs(self) -> tuple[Fragment, ...]:
        """切り詰め前のチェーンを出自付きで返す。

        返すフラグメントの data はメモ化されたチェーンとは別のコピーであり、
        変更しても以降のクエリやローダーのキャッシュに影響しない。

        Raises:
            FragmentLoadError: チェーンを読み込めない場合。
        """
        return _detached(self._load_chain())

    async def configs_async(self) -> tuple[Fragment, ...]:
        """configs() の非同期版。"""
        return _detached(await self._load_chain_async())

    def root(self) -> str | None:
        """root: true を持つフラグメントのディレクトリを返す。無ければ None。"""
        return self._root_of(self._load_chain())

    async def root_async(self) -> str | None:
        """root() の非同期版。"""
        return self._root_of(await self._load_chain_async())

    def get(self) -> dict[str, object]:
        """切り詰め済みチェーンをマージした設定を返す。"""
        return merge_fragments(truncate_chain(self._load_chain()))

    async def get_async(self) -> dict[str, object]:
        """get() の非同期版。"""
        return merge_fragments(truncate_chain(await self._load_chain_async()))

    def level_map(self) -> dict[str, object]:
        """絶対ディレクトリパス → マージ済みレベル設定 の辞書を返す。

        Raises:
            FragmentLoadError: チェーンを読み込めない場合。
            GlobExpansionError: ワイルドカードキーを展開できない場合。
        """
        chain = truncate_chain(self._load_chain())
        return build_level_map(chain, self._cwd, self._expand(chain))

    async def level_map_async(self) -> dict[str, object]:
        """level_map() の非同期版。"""
        chain = truncate_chain(await self._load_chain_async())
        return build_level_map(chain, self._cwd, await self._expand_async(chain))

    def level(self, name: str | os.PathLike[str]) -> object | None:
        """name を cwd 基準で解決したレベルの設定を返す。見つからなければ None。"""
        return lookup_level(self.level_map(), name, self._cwd)

    async def level_async(self, name: str | os.PathLike[str]) -> object | None:
        """level() の非同期版。"""
        return lookup_level(await self.level_map_async(), name, self._cwd)

    def library(self, name: str) -> Config | None:
        """libs.<name> を単一フラグメントとする再帰的な Config を返す。

        どのフラグメントも libs.<name> を宣言していなければ None。
        """
        return self._library_of(self._load_chain(), name)

    async def library_async(self, name: str) -> Config | None:
        """library() の非同期版。"""
        return self._library_of(await self._load_chain_async(), name)

    def module(self, name: str) -> object | None:
        """modules.<name> のマージ済みの値を返す。見つからなければ None。"""
        return module_value(truncate_chain(self._load_chain()), name)

    async def module_async(self, name: str) -> object | None:
        """module() の非同期版。"""
        return module_value(truncate_chain(await self._load_chain_async()), name)


def create_config(
    options: ConfigOptions | None = None,
    *,
    loader: FragmentLoader | None = None,
    glob_matcher: GlobMatcher | None = None,
) -> Config:
    """Config ファサードを構築する。

    Args:
        options: 構築オプション。
        loader: フラグメントローダー。None ならファイルシステムを探索する。
        glob_matcher: glob マッチャー。None なら glob モジュールで展開する。

    Returns:
        Config インスタンス。
    """
    return Config(options, loader=loader, glob_matcher=glob_matcher)
