"""設定ファイル探索。

探索順序（一般的→具体的）:
1. システム: {fs_root}/etc/
2. ユーザーホーム: {fs_home}
3. 祖先ディレクトリ: fs_root 内の最も外側の祖先から cwd まで
"""

from __future__ import annotations

import os
from pathlib import Path

from layerconf.models.options import ConfigOptions

_SYSTEM_DIR_NAME: str = "etc"


def _normalize(path: Path) -> Path:
    """シンボリックリンクを追従せずに絶対パスへ正規化する。"""
    return Path(os.path.abspath(os.path.expanduser(path)))


def candidate_names(name: str) -> tuple[str, ...]:
    """1ディレクトリ内で探索する設定ファイル名を優先度の低い順に返す。"""
    return (f".{name}rc", f".{name}rc.json", f".{name}rc.toml")


def effective_fs_root(options: ConfigOptions) -> Path:
    """fs_root が未指定なら cwd のファイルシステムルートを返す。"""
    if options.fs_root is not None:
        return _normalize(options.fs_root)
    cwd = _normalize(options.effective_cwd())
    return Path(cwd.anchor)


def effective_fs_home(options: ConfigOptions) -> Path:
    """fs_home が未指定なら Path.home() を返す。

    Raises:
        RuntimeError: ホームディレクトリを特定できない場合。
    """
    if options.fs_home is not None:
        return _normalize(options.fs_home)
    return Path.home()


def ancestor_dirs(cwd: Path, fs_root: Path) -> list[Path]:
    """fs_root 内にある cwd の祖先を外側から順に返す（cwd 自身を含む）。

    cwd が fs_root の外にある場合は cwd のみを返す。
    """
    current = _normalize(cwd)
    root = _normalize(fs_root)
    if current != root and root not in current.parents:
        return [current]
    chain = [current]
    while current != root:
        current = current.parent
        chain.append(current)
    chain.reverse()
    return chain


def discovery_dirs(options: ConfigOptions) -> list[Path]:
    """探索対象ディレクトリを一般的→具体的の順に、重複なしで返す。

    Raises:
        RuntimeError: ホームディレクトリを特定できない場合。
    """
    fs_root = effective_fs_root(options)
    dirs = [
        fs_root / _SYSTEM_DIR_NAME,
        effective_fs_home(options),
        *ancestor_dirs(options.effective_cwd(), fs_root),
    ]
    seen: set[Path] = set()
    ordered: list[Path] = []
    for directory in dirs:
        if directory in seen:
            continue
        seen.add(directory)
        ordered.append(directory)
    return ordered


def candidate_paths(options: ConfigOptions) -> list[Path]:
    """探索する設定ファイルの候補パスを一般的→具体的の順に返す。

    存在チェックは行わない（パスのみ構築）。
    """
    names = candidate_names(options.name)
    return [directory / name for directory in discovery_dirs(options) for name in names]


def explicit_config_path(options: ConfigOptions) -> Path | None:
    """path_to_config を cwd 基準の絶対パスにして返す。未指定なら None。"""
    if options.path_to_config is None:
        return None
    return _normalize(options.effective_cwd() / options.path_to_config.expanduser())
