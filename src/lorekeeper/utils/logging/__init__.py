# ABOUTME: Logging configuration and structured logger helpers
# ABOUTME: loguru owns the sinks, structlog provides bound loggers to modules

from .config import LoggingMode, configure_logging, detect_logging_mode, get_logging_status
from .utils import LogContext, get_logger, with_async_operation_context, with_store_context

__all__ = [
    # Configuration
    "LoggingMode",
    "configure_logging",
    "detect_logging_mode",
    "get_logging_status",
    # Utilities
    "LogContext",
    "get_logger",
    "with_async_operation_context",
    "with_store_context",
]
