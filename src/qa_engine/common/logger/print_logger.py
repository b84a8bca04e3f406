# qa_engine/common/logger/print_logger.py

import sys
from typing import Any, Dict
from datetime import datetime

from qa_engine.common.logger.logger_interface import LoggerInterface, LogLevel


class PrintLogger(LoggerInterface):
    """Plain print-based logger, used by the CLI when loguru output is unwanted"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
        "RESET": "\033[0m",
        "BOLD": "\033[1m",
        "DIM": "\033[2m",
    }

    LEVEL_ORDER = {
        LogLevel.DEBUG: 0,
        LogLevel.INFO: 1,
        LogLevel.WARNING: 2,
        LogLevel.ERROR: 3,
        LogLevel.CRITICAL: 4,
    }

    def __init__(
        self,
        name: str = "qa-engine",
        level: LogLevel = LogLevel.INFO,
        use_colors: bool = True,
    ):
        self.name = name
        self.level = level
        self.context: Dict[str, Any] = {}
        self.use_colors = use_colors and sys.stderr.isatty()

    def _format_message(self, level: LogLevel, message: str) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())

        if not self.use_colors:
            line = f"{timestamp} [{level.value:8}] {self.name}: {message}"
            return f"{line} | Context: {context_str}" if context_str else line

        reset, bold, dim = self.COLORS["RESET"], self.COLORS["BOLD"], self.COLORS["DIM"]
        line = (
            f"{dim}{timestamp}{reset} "
            f"{self.COLORS[level.value]}{bold}[{level.value:8}]{reset} "
            f"{bold}{self.name}{reset}: {message}"
        )
        if context_str:
            line += f" {dim}| Context: {context_str}{reset}"
        return line

    def log(self, level: LogLevel, message: str, *args, **kwargs) -> None:
        """Log message with specified level"""
        if self.LEVEL_ORDER[level] < self.LEVEL_ORDER[self.level]:
            return
        if args:
            message = message.format(*args)
        # stdout is reserved for command output (reports, JSON)
        print(self._format_message(level, message), file=sys.stderr)

    def debug(self, message: str, *args, **kwargs) -> None:
        self.log(LogLevel.DEBUG, message, *args)

    def info(self, message: str, *args, **kwargs) -> None:
        self.log(LogLevel.INFO, message, *args)

    def warning(self, message: str, *args, **kwargs) -> None:
        self.log(LogLevel.WARNING, message, *args)

    def error(self, message: str, *args, **kwargs) -> None:
        self.log(LogLevel.ERROR, message, *args)

    def critical(self, message: str, *args, **kwargs) -> None:
        self.log(LogLevel.CRITICAL, message, *args)

    def exception(self, message: str, *args, **kwargs) -> None:
        exc_type, exc, _ = sys.exc_info()
        if exc is not None:
            message = f"{message}: {exc_type.__name__}: {exc}"
        self.log(LogLevel.ERROR, message, *args)

    def get_level(self) -> LogLevel:
        return self.level

    def add_context(self, **context: Any) -> None:
        self.context.update(context)

    def clear_context(self) -> None:
        self.context.clear()
