# qa_engine/common/logger/logger_factory.py

from typing import Optional, Dict
from enum import Enum

from qa_engine.common.logger.logger_interface import LoggerInterface, LogLevel
from qa_engine.common.logger.standard_logger import StandardLogger
from qa_engine.common.logger.print_logger import PrintLogger


class LoggerType(Enum):
    """Available logger types"""

    STANDARD = "standard"
    PRINT = "print"


class LoggerFactory:
    """Factory for creating logger instances, cached per name and type"""

    _instances: Dict[str, LoggerInterface] = {}

    @classmethod
    def get_logger(
        cls,
        name: str = "qa-engine",
        logger_type: LoggerType = LoggerType.STANDARD,
        level: LogLevel = LogLevel.INFO,
        use_colors: bool = True,
        log_file: Optional[str] = None,
    ) -> LoggerInterface:
        """
        Get or create a logger instance

        Args:
            name: Logger name, e.g. "tool.api_probe"
            logger_type: Type of logger to create
            level: Minimum level for emitted records
            use_colors: Whether to use colored output
            log_file: Optional rotating log file (StandardLogger only)

        Returns:
            Logger instance
        """
        cache_key = f"{name}_{logger_type.value}"

        if cache_key not in cls._instances:
            if logger_type == LoggerType.STANDARD:
                logger = StandardLogger(
                    name=name, level=level, use_colors=use_colors, log_file=log_file
                )
            elif logger_type == LoggerType.PRINT:
                logger = PrintLogger(name=name, level=level, use_colors=use_colors)
            else:
                raise ValueError(f"Unknown logger type: {logger_type}")

            cls._instances[cache_key] = logger

        return cls._instances[cache_key]

    @classmethod
    def clear_cache(cls) -> None:
        """Drop cached loggers, detaching loguru sinks where they exist"""
        for logger in cls._instances.values():
            if isinstance(logger, StandardLogger):
                logger.close()
        cls._instances.clear()
