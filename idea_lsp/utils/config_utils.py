"""configuration management utilities

settings live in an ini file (./config.ini by default, or the path in the
IDEA_LSP_CONFIG environment variable):

    [lsp]
    host = 127.0.0.1
    port = 8080
    request_timeout = 30

    [jdk]
    default_root = /usr/lib/jvm/java-17
    default_kind = JDK

    [log]
    log_dir = ./logs
"""

import os
import configparser

global_config = configparser.ConfigParser()

DEFAULT_CONFIG_PATH = "./config.ini"


def load_config_ini(config_path: str = None) -> None:
    """load configuration file

    Args:
        config_path: path to config.ini file
    """
    config_path = config_path or os.environ.get("IDEA_LSP_CONFIG", DEFAULT_CONFIG_PATH)
    if os.path.exists(config_path):
        global_config.read(config_path, encoding="utf-8")


def get_config_value(section: str, key: str, default=None):
    """get configuration value

    Args:
        section: config section name
        key: config key name
        default: default value if not found

    Returns:
        config value or default
    """
    try:
        return global_config.get(section, key)
    except (configparser.NoSectionError, configparser.NoOptionError):
        return default


def get_config_int(section: str, key: str, default: int = 0) -> int:
    """get configuration value as integer"""
    value = get_config_value(section, key)
    if value is None:
        return default
    return int(value)


def get_config_float(section: str, key: str, default: float = 0.0) -> float:
    """get configuration value as float"""
    value = get_config_value(section, key)
    if value is None:
        return default
    return float(value)


def get_config_bool(section: str, key: str, default: bool = False) -> bool:
    """get configuration value as boolean"""
    value = get_config_value(section, key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def get_default_jdk_root():
    """JDK root used when the caller does not pass one

    JAVA_HOME wins over [jdk] default_root.
    """
    return os.environ.get("JAVA_HOME") or get_config_value("jdk", "default_root")


# auto-load on import
load_config_ini()
