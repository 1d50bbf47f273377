# ABOUTME: Tests for loguru logging configuration and structlog routing
# ABOUTME: Mode detection, third-party suppression, status reporting, and the operation decorator

import io
import logging

import pytest
from loguru import logger

from lorekeeper.persistence import ConnectionSource, DialogueLineStore, ErrorKind, StoreResult
from lorekeeper.utils.logging import (
    LoggingMode,
    configure_logging,
    detect_logging_mode,
    get_logger,
    get_logging_status,
    with_async_operation_context,
)


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger.remove()
    logging.getLogger().setLevel(logging.NOTSET)
    logging.captureWarnings(False)


class TestLoggingModeDetection:
    def test_explicit_environment_override(self, monkeypatch):
        monkeypatch.setenv("LOREKEEPER_LOG_MODE", "production")
        assert detect_logging_mode() == LoggingMode.PRODUCTION

        monkeypatch.setenv("LOREKEEPER_LOG_MODE", "INTERACTIVE")
        assert detect_logging_mode() == LoggingMode.INTERACTIVE

    def test_falls_back_to_tty_detection(self, monkeypatch):
        monkeypatch.setenv("LOREKEEPER_LOG_MODE", "sideways")
        monkeypatch.setattr("sys.stdout", io.StringIO())

        assert detect_logging_mode() == LoggingMode.PRODUCTION


class TestConfigureLogging:
    def test_interactive_mode_writes_log_files(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        configure_logging(mode=LoggingMode.INTERACTIVE, log_level="INFO")
        get_logger("lorekeeper.tests").info("Cache reloaded", entries=3)
        logger.complete()

        main_log = tmp_path / "logs" / "lorekeeper.log"
        assert main_log.exists()
        assert "Cache reloaded" in main_log.read_text()
        assert "entries=3" in main_log.read_text()

    def test_third_party_loggers_are_quieted(self):
        configure_logging(mode=LoggingMode.PRODUCTION, log_level="DEBUG")

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("aiosqlite").level == logging.WARNING
        assert logging.getLogger().level == logging.DEBUG

    def test_custom_log_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        custom = tmp_path / "custom.log"

        configure_logging(mode=LoggingMode.INTERACTIVE, log_level="WARNING", log_file=str(custom))
        get_logger("lorekeeper.tests").info("filtered out")
        get_logger("lorekeeper.tests").warning("kept")
        logger.complete()

        contents = custom.read_text()
        assert "kept" in contents
        assert "filtered out" not in contents


def test_logging_status_reports_files_in_interactive_mode(monkeypatch):
    monkeypatch.setenv("LOREKEEPER_LOG_MODE", "interactive")

    status = get_logging_status()

    assert status["mode"] == LoggingMode.INTERACTIVE
    assert status["log_files"]["main"].endswith("lorekeeper.log")
    assert "sqlalchemy" in status["third_party_suppressed"]


def test_logging_status_has_no_files_in_production(monkeypatch):
    monkeypatch.setenv("LOREKEEPER_LOG_MODE", "production")

    status = get_logging_status()

    assert status["log_files"] == {"main": None, "json": None, "errors": None}


class TestOperationDecorator:
    @pytest.mark.asyncio
    async def test_failed_results_are_logged_with_their_kind(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        configure_logging(mode=LoggingMode.INTERACTIVE, log_level="DEBUG")

        @with_async_operation_context("fetch_line")
        async def fetch() -> StoreResult[str]:
            return StoreResult.failure(ErrorKind.NOT_FOUND, "No dialogue line exists for the line ID '7'!")

        result = await fetch()
        logger.complete()

        assert result.kind is ErrorKind.NOT_FOUND
        contents = (tmp_path / "logs" / "lorekeeper.log").read_text()
        assert "Starting fetch_line" in contents
        assert "error_kind='not_found'" in contents

    @pytest.mark.asyncio
    async def test_line_snapshot_reads_are_logged(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        configure_logging(mode=LoggingMode.INTERACTIVE, log_level="DEBUG")
        connections = ConnectionSource(":memory:")
        await connections.create_tables()
        try:
            result = await DialogueLineStore(connections).fetch(3)
        finally:
            await connections.close()
        logger.complete()

        assert result.kind is ErrorKind.NOT_FOUND
        contents = (tmp_path / "logs" / "lorekeeper.log").read_text()
        assert "Starting fetch_dialogue_line" in contents
        assert "Failed fetch_dialogue_line" in contents

    @pytest.mark.asyncio
    async def test_exceptions_propagate(self):
        @with_async_operation_context("explode")
        async def explode() -> None:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await explode()
