"""utility modules for idea-lsp"""

from idea_lsp.utils.singleton_utils import SingletonInstance
from idea_lsp.utils.logging_utils import Logger, logging_func
from idea_lsp.utils.config_utils import (
    load_config_ini,
    get_config_value,
    get_config_int,
    get_config_float,
    get_config_bool,
    get_default_jdk_root,
)

__all__ = [
    "SingletonInstance",
    "Logger",
    "logging_func",
    "load_config_ini",
    "get_config_value",
    "get_config_int",
    "get_config_float",
    "get_config_bool",
    "get_default_jdk_root",
]
