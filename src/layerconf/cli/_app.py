"""CliApp — 解決済み設定を調べる Typer アプリケーション。

全サブコマンドは結果を JSON として stdout に出力し、エラーは stderr に出力する。
終了コード:
    0: 成功
    1: 要求されたレベル・ライブラリ・モジュール・ルートが存在しない
    2: 設定フラグメントの読み込みまたは glob 展開の失敗
    3: 不正なオプション
"""

from __future__ import annotations

import importlib.metadata
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Annotated, TypeVar

import typer
from pydantic import ValidationError
from rich.console import Console

from layerconf.config import Config, create_config
from layerconf.loader import FragmentLoadError, GlobExpansionError
from layerconf.models.exit_code import ExitCode
from layerconf.models.options import DEFAULT_NAME, ConfigOptions

_CONFIG_KEY = "config"

T = TypeVar("T")

app = typer.Typer(
    name="layerconf",
    help="Inspect the effective configuration resolved from layered rc files.",
    add_completion=False,
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    """--version 指定時にバージョン番号を出力して終了する。"""
    if value:
        print(importlib.metadata.version("layerconf"))
        raise typer.Exit()


def main() -> None:
    """CLI エントリポイント。pyproject.toml の [project.scripts] から呼び出される。"""
    app()


def _emit(data: object) -> None:
    """data を JSON として stdout に出力する。"""
    Console().print_json(data=data)


def _query(ctx: typer.Context, query: Callable[[Config], T]) -> T:
    """Config に対してクエリを実行し、失敗時は解決方法付きのエラーで終了する。"""
    config: Config = ctx.ensure_object(dict)[_CONFIG_KEY]
    try:
        return query(config)
    except FragmentLoadError as e:
        print(
            f"Error: Cannot load configuration: {e}\n"
            "Check the rc files for syntax errors or pass --config with a valid path.",
            file=sys.stderr,
        )
        raise typer.Exit(code=ExitCode.LOAD_ERROR) from None
    except GlobExpansionError as e:
        print(
            f"Error: Cannot expand level pattern: {e}\n"
            "Check directory permissions under the configured levels.",
            file=sys.stderr,
        )
        raise typer.Exit(code=ExitCode.LOAD_ERROR) from None


def _not_found(what: str) -> typer.Exit:
    print(f"Error: {what} not found in the resolved configuration.", file=sys.stderr)
    return typer.Exit(code=ExitCode.NOT_FOUND)


@app.callback()
def layerconf_callback(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
    cwd: Annotated[
        Path | None,
        typer.Option("--cwd", help="Directory to resolve the configuration from."),
    ] = None,
    path_to_config: Annotated[
        Path | None,
        typer.Option("--config", help="Explicit configuration file (most specific)."),
    ] = None,
    fs_root: Annotated[
        Path | None,
        typer.Option("--fs-root", help="Topmost directory searched for rc files."),
    ] = None,
    fs_home: Annotated[
        Path | None,
        typer.Option("--fs-home", help="Directory treated as the user home."),
    ] = None,
    name: Annotated[
        str, typer.Option("--name", help="Stem of the rc file names (.<name>rc).")
    ] = DEFAULT_NAME,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log resolution details to stderr.")
    ] = False,
) -> None:
    """Resolve layered configuration fragments and query the result."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )
    try:
        options = ConfigOptions(
            cwd=cwd,
            path_to_config=path_to_config,
            fs_root=fs_root,
            fs_home=fs_home,
            name=name,
        )
    except ValidationError as e:
        print(f"Error: Invalid options: {e}", file=sys.stderr)
        raise typer.Exit(code=ExitCode.INPUT_ERROR) from None
    ctx.ensure_object(dict)[_CONFIG_KEY] = create_config(options)


@app.command()
def configs(ctx: typer.Context) -> None:
    """Print every discovered fragment with its source, before root truncation."""
    chain = _query(ctx, lambda config: config.configs())
    _emit([fragment.to_raw() for fragment in chain])


@app.command()
def root(ctx: typer.Context) -> None:
    """Print the project root directory (the fragment marked root: true)."""
    result = _query(ctx, lambda config: config.root())
    if result is None:
        raise _not_found("Project root")
    _emit(result)


@app.command()
def get(ctx: typer.Context) -> None:
    """Print the merged configuration."""
    _emit(_query(ctx, lambda config: config.get()))


@app.command()
def level(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Level directory, relative to --cwd.")],
) -> None:
    """Print the merged configuration of a level directory."""
    result = _query(ctx, lambda config: config.level(path))
    if result is None:
        raise _not_found(f"Level '{path}'")
    _emit(result)


@app.command()
def levels(ctx: typer.Context) -> None:
    """Print the map of resolved level directories to their configuration."""
    _emit(_query(ctx, lambda config: config.level_map()))


@app.command()
def library(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Library name (libs.<name>).")],
) -> None:
    """Print the merged configuration of a library."""
    view = _query(ctx, lambda config: config.library(name))
    if view is None:
        raise _not_found(f"Library '{name}'")
    _emit(view.get())


@app.command()
def module(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Module name (modules.<name>).")],
) -> None:
    """Print the merged configuration of a module."""
    result = _query(ctx, lambda config: config.module(name))
    if result is None:
        raise _not_found(f"Module '{name}'")
    _emit(result)
