"""layerconf — ビルドツール向け階層設定リゾルバー。

公開 API:
    create_config: Config ファサードを構築するファクトリ。
    Config: 設定クエリ API（同期版と非同期版）。
    ConfigOptions: 構築オプション。
    Fragment: 出自付きの設定フラグメント。
"""

from layerconf.config import Config, create_config
from layerconf.loader import (
    DirectoryGlobMatcher,
    FilesystemFragmentLoader,
    FragmentCache,
    FragmentLoadError,
    FragmentLoader,
    GlobExpansionError,
    GlobMatcher,
    StaticFragmentLoader,
)
from layerconf.models import ConfigOptions, Fragment


def main() -> None:
    """パッケージエントリポイント。cli.main() に委譲する。

    pyproject.toml の [project.scripts] は layerconf.cli:main を直接参照するため、
    この関数はプログラムから layerconf.main() として呼び出す場合の互換用。
    """
    from layerconf.cli import main as cli_main

    cli_main()


__all__ = [
    "Config",
    "ConfigOptions",
    "DirectoryGlobMatcher",
    "FilesystemFragmentLoader",
    "Fragment",
    "FragmentCache",
    "FragmentLoadError",
    "FragmentLoader",
    "GlobExpansionError",
    "GlobMatcher",
    "StaticFragmentLoader",
    "create_config",
    "main",
]
