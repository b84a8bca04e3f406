# qa_engine/common/logger/logger_interface.py

from abc import ABC, abstractmethod
from typing import Any
from enum import Enum


class LogLevel(Enum):
    """Log level enumeration"""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @classmethod
    def parse(cls, value: str) -> "LogLevel":
        """Parse a level name such as "info" or "WARNING"."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown log level: {value}") from None


class LoggerInterface(ABC):
    """Abstract base interface for engine loggers"""

    @abstractmethod
    def debug(self, message: str, *args, **kwargs) -> None:
        """Log debug message"""
        pass

    @abstractmethod
    def info(self, message: str, *args, **kwargs) -> None:
        """Log info message"""
        pass

    @abstractmethod
    def warning(self, message: str, *args, **kwargs) -> None:
        """Log warning message"""
        pass

    @abstractmethod
    def error(self, message: str, *args, **kwargs) -> None:
        """Log error message"""
        pass

    @abstractmethod
    def exception(self, message: str, *args, **kwargs) -> None:
        """Log an error together with the active traceback"""
        pass

    @abstractmethod
    def log(self, level: LogLevel, message: str, *args, **kwargs) -> None:
        """Log message with specified level"""
        pass

    @abstractmethod
    def add_context(self, **context: Any) -> None:
        """Add contextual information to logs"""
        pass

    @abstractmethod
    def clear_context(self) -> None:
        """Clear contextual information"""
        pass

    @abstractmethod
    def get_level(self) -> LogLevel:
        """Get the minimum level this logger emits"""
        pass
