"""Tests for the lorekeeper command line interface."""

import pytest
from asyncclick.testing import CliRunner

from lorekeeper.main import app as main


@pytest.fixture
def database(tmp_path, monkeypatch) -> str:
    """Run every command from a scratch directory against a scratch database."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LOREKEEPER_LOG_MODE", raising=False)
    return str(tmp_path / "data" / "dialogue.db")


def test_main_function_exists():
    """Test that the main function exists and is callable."""
    assert callable(main)


@pytest.mark.asyncio
async def test_main_command_help(database):
    """Test that main command can show help."""
    runner = CliRunner()
    result = await runner.invoke(main, ["--help"])

    assert result.exit_code == 0
    assert "Lorekeeper" in result.output


@pytest.mark.asyncio
async def test_main_with_logging_status(database):
    """Test that logging-status command works."""
    runner = CliRunner()
    result = await runner.invoke(main, ["logging-status"])

    assert result.exit_code == 0
    assert "Logging Configuration" in result.output


@pytest.mark.asyncio
async def test_init_db_creates_database(database):
    runner = CliRunner()
    result = await runner.invoke(main, ["-d", database, "init-db"])

    assert result.exit_code == 0, result.output
    assert "Dialogue Database" in result.output


@pytest.mark.asyncio
async def test_line_workflow(database):
    runner = CliRunner()

    added = await runner.invoke(main, ["-d", database, "line", "add", "Hello"])
    assert added.exit_code == 0, added.output
    assert "Added dialogue line 1" in added.output

    shown = await runner.invoke(main, ["-d", database, "line", "show", "1"])
    assert shown.exit_code == 0
    assert "Hello" in shown.output

    edited = await runner.invoke(main, ["-d", database, "line", "edit", "1", "Hi"])
    assert edited.exit_code == 0
    uncached = await runner.invoke(main, ["-d", database, "line", "show", "1", "--no-cache"])
    assert "Hi" in uncached.output

    listed = await runner.invoke(main, ["-d", database, "line", "list"])
    assert "Dialogue Lines" in listed.output

    deleted = await runner.invoke(main, ["-d", database, "line", "delete", "1"])
    assert deleted.exit_code == 0
    missing = await runner.invoke(main, ["-d", database, "line", "show", "1"])
    assert missing.exit_code == 1
    assert "not_found" in missing.output


@pytest.mark.asyncio
async def test_missing_line_reports_error_kind_as_json(database):
    runner = CliRunner()
    result = await runner.invoke(main, ["--json", "-d", database, "line", "show", "7"])

    assert result.exit_code == 1
    assert '"error_kind": "not_found"' in result.output


@pytest.mark.asyncio
async def test_group_workflow(database):
    runner = CliRunner()

    assert (await runner.invoke(main, ["-d", database, "group", "add", "intro"])).exit_code == 0
    duplicate = await runner.invoke(main, ["-d", database, "group", "add", "intro"])
    assert duplicate.exit_code == 1

    appended = await runner.invoke(main, ["-d", database, "group", "append", "intro", "Hi"])
    assert appended.exit_code == 0
    assert "1 elements" in appended.output

    shown = await runner.invoke(main, ["-d", database, "group", "show", "intro"])
    assert "Hi" in shown.output

    listed = await runner.invoke(main, ["-d", database, "group", "list"])
    assert "intro" in listed.output

    out_of_range = await runner.invoke(main, ["-d", database, "group", "remove", "intro", "3"])
    assert out_of_range.exit_code == 1

    removed = await runner.invoke(main, ["-d", database, "group", "remove", "intro", "0"])
    assert removed.exit_code == 0
    assert "0 elements" in removed.output

    assert (await runner.invoke(main, ["-d", database, "group", "delete", "intro"])).exit_code == 0
    gone = await runner.invoke(main, ["-d", database, "group", "show", "intro", "--no-cache"])
    assert gone.exit_code == 1


@pytest.mark.asyncio
async def test_test_connection_command(database, tmp_path):
    runner = CliRunner()

    valid = await runner.invoke(main, ["test-connection", ":memory:"])
    assert valid.exit_code == 0
    assert "Database Valid" in valid.output

    invalid = await runner.invoke(main, ["test-connection", str(tmp_path / "missing" / "x.db")])
    assert invalid.exit_code == 1
    assert "Database Invalid" in invalid.output
