"""layerconf ドメインモデルパッケージ。"""

from layerconf.models._base import LayerconfBaseModel
from layerconf.models.exit_code import ExitCode
from layerconf.models.fragment import (
    METADATA_KEYS,
    ROOT_KEY,
    SOURCE_KEY,
    Fragment,
)
from layerconf.models.options import DEFAULT_NAME, ConfigOptions

__all__ = [
    "ConfigOptions",
    "DEFAULT_NAME",
    "ExitCode",
    "Fragment",
    "LayerconfBaseModel",
    "METADATA_KEYS",
    "ROOT_KEY",
    "SOURCE_KEY",
]
