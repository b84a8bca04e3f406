from qa_engine.common.logger.logger_interface import LoggerInterface, LogLevel
from qa_engine.common.logger.standard_logger import StandardLogger
from qa_engine.common.logger.print_logger import PrintLogger
from qa_engine.common.logger.logger_factory import LoggerFactory, LoggerType

__all__ = [
    "LoggerInterface",
    "LogLevel",
    "StandardLogger",
    "PrintLogger",
    "LoggerFactory",
    "LoggerType",
]
