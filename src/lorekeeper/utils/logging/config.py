# ABOUTME: Simplified logging configuration using loguru
# ABOUTME: Dual-mode operation: interactive CLI vs production JSON logging

import logging
import os
import sys
from pathlib import Path
from typing import Any

import structlog
from loguru import logger


class LoggingMode:
    """Logging mode constants."""

    INTERACTIVE = "interactive"
    PRODUCTION = "production"


LOG_DIR = Path("logs")


def detect_logging_mode() -> str:
    """Detect whether we're running in interactive or production mode."""
    mode = os.getenv("LOREKEEPER_LOG_MODE")
    if mode and mode.lower() in [LoggingMode.INTERACTIVE, LoggingMode.PRODUCTION]:
        return mode.lower()

    return LoggingMode.INTERACTIVE if sys.stdout.isatty() else LoggingMode.PRODUCTION


def setup_third_party_logging() -> None:
    """Keep driver and ORM chatter out of the CLI output."""
    warning_loggers = ["sqlalchemy", "sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "asyncio"]

    for logger_name in warning_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
    logging.getLogger("py.warnings").setLevel(logging.ERROR)


def route_structlog_to_loguru(level: int) -> None:
    """Send structlog events through loguru so both end up in the same sinks."""
    structlog.configure(
        processors=[structlog.processors.KeyValueRenderer(key_order=["event"], drop_missing=True)],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=lambda *args: logger,
        cache_logger_on_first_use=False,
    )


def configure_logging(mode: str | None = None, log_level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging using loguru.

    Args:
        mode: Logging mode (interactive/production), auto-detected if None
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Custom log file path, uses default if None
    """
    if mode is None:
        mode = detect_logging_mode()

    setup_third_party_logging()

    # Set standard library logging level for compatibility with tests
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(numeric_level)

    route_structlog_to_loguru(numeric_level)

    # Remove default loguru handler
    logger.remove()

    if mode == LoggingMode.INTERACTIVE:
        # Interactive mode: logs to files, no console interference
        try:
            LOG_DIR.mkdir(exist_ok=True)
        except OSError:
            mode = LoggingMode.PRODUCTION

    if mode == LoggingMode.PRODUCTION:
        logger.add(sys.stdout, level=log_level, format="{time} | {level} | {name} | {message}", serialize=True)
        return

    log_file_path = log_file or str(LOG_DIR / "lorekeeper.log")

    # Human-readable logs
    logger.add(
        log_file_path,
        level=log_level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        rotation="10 MB",
        retention="7 days",
    )

    # JSON logs for machine processing
    logger.add(
        LOG_DIR / "lorekeeper.json",
        level=log_level,
        format="{time} | {level} | {name} | {message}",
        serialize=True,
        rotation="10 MB",
        retention="7 days",
    )

    # Errors only
    logger.add(
        LOG_DIR / "errors.log",
        level="ERROR",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        backtrace=True,
        diagnose=True,
    )


def get_logging_status() -> dict[str, Any]:
    """Get current logging configuration status."""
    mode = detect_logging_mode()
    interactive = mode == LoggingMode.INTERACTIVE

    return {
        "mode": mode,
        "log_directory": str(LOG_DIR.absolute()) if LOG_DIR.exists() else None,
        "log_files": {
            "main": str(LOG_DIR / "lorekeeper.log") if interactive else None,
            "json": str(LOG_DIR / "lorekeeper.json") if interactive else None,
            "errors": str(LOG_DIR / "errors.log") if interactive else None,
        },
        "third_party_suppressed": ["sqlalchemy", "aiosqlite", "asyncio", "py.warnings"],
    }
