"""ExitCode — CLI 終了コードの定義。"""

from enum import IntEnum


class ExitCode(IntEnum):
    """プロセス終了コード。

    NOT_FOUND は要求されたレベル・ライブラリ・モジュール・ルートが存在しない場合。
    LOAD_ERROR は設定フラグメントの読み込みまたは glob 展開の失敗。
    INPUT_ERROR は CLI オプションの検証エラー。
    """

    SUCCESS = 0
    NOT_FOUND = 1
    LOAD_ERROR = 2
    INPUT_ERROR = 3
