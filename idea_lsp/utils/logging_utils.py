"""logging utilities with rich support

stdout belongs to the MCP stdio transport, so the console writes to stderr.
"""

import os
import functools
import inspect
from datetime import datetime
from rich.console import Console
from rich.theme import Theme
from idea_lsp.utils.config_utils import get_config_value
from idea_lsp.utils.singleton_utils import SingletonInstance


# custom theme for log levels
custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "debug": "dim white",
})


class Logger(SingletonInstance):
    """singleton logger printing to a rich console and appending to a log file"""

    def __init__(self, prefix: str = "idea-lsp", log_dir: str = None):
        """initialize logger

        Args:
            prefix: log message prefix
            log_dir: directory for log files ([log] log_dir, or ./logs)
        """
        self.prefix = prefix
        self.log_dir = log_dir or get_config_value("log", "log_dir", "./logs")
        self.log_file = os.path.join(self.log_dir, f"{prefix}.log")
        self.console = Console(theme=custom_theme, stderr=True)
        self._file = None
        self._ensure_log_dir()

    def _ensure_log_dir(self):
        """create log directory if not exists"""
        if not os.path.exists(self.log_dir):
            os.makedirs(self.log_dir)

    def _format(self, level: str, message: str) -> str:
        """format log message"""
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        return f"[{timestamp}] [{self.prefix}] {level}: {message}"

    def _emit(self, level: str, message: str, style: str):
        line = self._format(level, message)
        # markup off: messages carry paths and payloads with square brackets
        self.console.print(line, style=style, markup=False, highlight=False)
        if self._file is None:
            # line buffered: each record reaches the file as it is written
            self._file = open(self.log_file, "a", encoding="utf-8", buffering=1)
        self._file.write(line + "\n")

    def close(self):
        """close the log file; it is reopened on the next message"""
        if self._file is not None:
            self._file.close()
            self._file = None

    def info(self, message: str):
        """log info level message"""
        self._emit("INFO", message, "info")

    def error(self, message: str):
        """log error level message"""
        self._emit("ERROR", message, "error")

    def warning(self, message: str):
        """log warning level message"""
        self._emit("WARNING", message, "warning")

    def debug(self, message: str):
        """log debug level message"""
        self._emit("DEBUG", message, "debug")


def logging_func(desc: str = ""):
    """decorator for function logging, works on plain and async functions

    Args:
        desc: description of the function
    """
    def decorator(function):
        if inspect.iscoroutinefunction(function):
            @functools.wraps(function)
            async def async_wrapper(*args, **kwargs):
                Logger.instance().info(f"[start] {function.__name__} - {desc}")
                result = await function(*args, **kwargs)
                Logger.instance().info(f"[end] {function.__name__}")
                return result
            return async_wrapper

        @functools.wraps(function)
        def wrapper(*args, **kwargs):
            Logger.instance().info(f"[start] {function.__name__} - {desc}")
            result = function(*args, **kwargs)
            Logger.instance().info(f"[end] {function.__name__}")
            return result
        return wrapper
    return decorator
