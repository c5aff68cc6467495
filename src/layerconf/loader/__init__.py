"""フラグメントローダーと glob マッチャー。

Config ファサードが利用する外部コラボレーターのプロトコルと、
そのデフォルト実装を提供する。
"""

from layerconf.loader._cache import FragmentCache
from layerconf.loader._filesystem import FilesystemFragmentLoader
from layerconf.loader._glob import (
    DirectoryGlobMatcher,
    GlobExpansionError,
    expand_directories,
)
from layerconf.loader._layering import layer_fragments
from layerconf.loader._protocol import FragmentLoader, GlobMatcher
from layerconf.loader._reader import FragmentLoadError
from layerconf.loader._static import StaticFragmentLoader

__all__ = [
    "DirectoryGlobMatcher",
    "FilesystemFragmentLoader",
    "FragmentCache",
    "FragmentLoadError",
    "FragmentLoader",
    "GlobExpansionError",
    "GlobMatcher",
    "StaticFragmentLoader",
    "expand_directories",
    "layer_fragments",
]
