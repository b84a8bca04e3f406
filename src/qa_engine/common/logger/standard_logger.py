# qa_engine/common/logger/standard_logger.py

import sys
from typing import Any, Optional, Dict
from pathlib import Path
from loguru import logger as loguru_logger

from qa_engine.common.logger.logger_interface import LoggerInterface, LogLevel


class StandardLogger(LoggerInterface):
    """Loguru-backed logger; each instance owns sinks filtered on its name"""

    # Loguru level mapping
    LEVEL_MAP = {
        LogLevel.DEBUG: "DEBUG",
        LogLevel.INFO: "INFO",
        LogLevel.WARNING: "WARNING",
        LogLevel.ERROR: "ERROR",
        LogLevel.CRITICAL: "CRITICAL",
    }

    # Loguru ships with a stderr sink that would print every record twice
    _default_handler_removed = False

    def __init__(
        self,
        name: str = "qa-engine",
        level: LogLevel = LogLevel.INFO,
        use_colors: bool = True,
        log_file: Optional[str] = None,
    ):
        self.name = name
        self.context: Dict[str, Any] = {}
        self.use_colors = use_colors
        self.log_file = log_file
        self._level = level
        self._sink_ids = []

        if not StandardLogger._default_handler_removed:
            loguru_logger.remove()
            StandardLogger._default_handler_removed = True

        self._sink_ids.append(
            loguru_logger.add(
                sys.stderr,
                format=self._get_console_format(use_colors),
                level=self.LEVEL_MAP[level],
                colorize=use_colors,
                backtrace=True,
                diagnose=False,
                filter=lambda record: record["extra"].get("logger_name") == name,
            )
        )

        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            self._sink_ids.append(
                loguru_logger.add(
                    log_file,
                    format=self._get_file_format(),
                    level=self.LEVEL_MAP[level],
                    rotation="10 MB",
                    retention="30 days",
                    compression="zip",
                    backtrace=True,
                    diagnose=False,
                    enqueue=True,
                    filter=lambda record: record["extra"].get("logger_name") == name,
                )
            )

        self.logger = loguru_logger.bind(logger_name=name)

    def _get_console_format(self, use_colors: bool) -> str:
        """Get console log format"""
        if use_colors:
            return (
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{extra[logger_name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<level>{message}</level>"
            )
        return (
            "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
            "{level: <8} | "
            "{extra[logger_name]}:{function}:{line} | "
            "{message}"
        )

    def _get_file_format(self) -> str:
        """Get file log format"""
        return (
            "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
            "{level: <8} | "
            "{extra[logger_name]}:{name}:{function}:{line} | "
            "{message} | {extra}"
        )

    def _bound(self, **kwargs):
        return self.logger.bind(**{**self.context, **kwargs.get("extra", {})})

    def _log_with_context(self, level: str, message: str, *args, **kwargs) -> None:
        if args:
            message = message.format(*args)
        # depth=2 reports the caller of debug()/info() rather than this helper
        self._bound(**kwargs).opt(depth=2).log(level, message)

    def debug(self, message: str, *args, **kwargs) -> None:
        """Log debug message"""
        self._log_with_context("DEBUG", message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs) -> None:
        """Log info message"""
        self._log_with_context("INFO", message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs) -> None:
        """Log warning message"""
        self._log_with_context("WARNING", message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs) -> None:
        """Log error message"""
        self._log_with_context("ERROR", message, *args, **kwargs)

    def critical(self, message: str, *args, **kwargs) -> None:
        """Log critical message"""
        self._log_with_context("CRITICAL", message, *args, **kwargs)

    def exception(self, message: str, *args, **kwargs) -> None:
        """Log exception with traceback"""
        if args:
            message = message.format(*args)
        self._bound(**kwargs).opt(depth=1).exception(message)

    def log(self, level: LogLevel, message: str, *args, **kwargs) -> None:
        """Log message with specified level"""
        self._log_with_context(self.LEVEL_MAP[level], message, *args, **kwargs)

    def get_level(self) -> LogLevel:
        return self._level

    def add_context(self, **kwargs) -> None:
        """Add context to all subsequent log messages"""
        self.context.update(kwargs)

    def remove_context(self, *keys) -> None:
        for key in keys:
            self.context.pop(key, None)

    def clear_context(self) -> None:
        self.context.clear()

    def close(self) -> None:
        """Detach this logger's sinks from loguru"""
        for sink_id in self._sink_ids:
            loguru_logger.remove(sink_id)
        self._sink_ids = []
