"""設定ファイルリーダー。

.{name}rc / .{name}rc.json は JSON、.{name}rc.toml は TOML としてパースする。
パース処理はバイト列に対して行い、同期・非同期の読み込み経路で共有する。
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path

import anyio

from layerconf.models.fragment import SOURCE_KEY, Fragment

_TOML_SUFFIX: str = ".toml"


class FragmentLoadError(Exception):
    """フラグメントの読み込み失敗。

    構文エラー、アクセスエラー、明示指定ファイルの不在など、
    チェーンを生成できないあらゆる失敗を表す。元の例外は __cause__ に保持される。
    """


def parse_fragment(path: Path, content: bytes) -> Fragment:
    """ファイル内容をパースし、出自付きの Fragment を構築する。

    Args:
        path: 読み込み元の絶対パス。
        content: ファイルのバイト列。

    Returns:
        source に path を持つ Fragment。

    Raises:
        FragmentLoadError: 構文エラーまたはトップレベルがオブジェクトでない場合。
    """
    try:
        if path.suffix == _TOML_SUFFIX:
            data: object = tomllib.loads(content.decode("utf-8"))
        else:
            data = json.loads(content) if content.strip() else {}
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FragmentLoadError(f"Invalid configuration file '{path}': {e}") from e
    if not isinstance(data, dict):
        raise FragmentLoadError(
            f"Configuration file '{path}' must contain an object, "
            f"got {type(data).__name__}"
        )
    # ファイル内に書かれた __source は実際の出自で上書きする
    data.pop(SOURCE_KEY, None)
    return Fragment(data=data, source=str(path))


def read_fragment(path: Path) -> Fragment:
    """設定ファイルを読み込む。

    Raises:
        FileNotFoundError: ファイルが存在しない場合。
        FragmentLoadError: アクセスエラーまたは構文エラーの場合。
    """
    try:
        content = path.read_bytes()
    except FileNotFoundError:
        raise
    except OSError as e:
        raise FragmentLoadError(f"Cannot read configuration file '{path}': {e}") from e
    return parse_fragment(path, content)


async def read_fragment_async(path: Path) -> Fragment:
    """read_fragment() の非同期版。anyio.Path 経由でファイルを読み込む。

    Raises:
        FileNotFoundError: ファイルが存在しない場合。
        FragmentLoadError: アクセスエラーまたは構文エラーの場合。
    """
    try:
        content = await anyio.Path(path).read_bytes()
    except FileNotFoundError:
        raise
    except OSError as e:
        raise FragmentLoadError(f"Cannot read configuration file '{path}': {e}") from e
    return parse_fragment(path, content)
