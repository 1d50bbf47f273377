# ABOUTME: Main CLI application entry point using asyncclick for native async support
# ABOUTME: Provides commands for browsing and editing dialogue lines and dialogue groups

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncclick as click
from rich.console import Console

from lorekeeper.config import Config, load_config
from lorekeeper.core.service import DialogueAuthoringService
from lorekeeper.persistence import StoreFailure, StoreResult, test_connection
from lorekeeper.utils.logging import LoggingMode, configure_logging, get_logging_status, with_store_context
from lorekeeper.utils.rich_tables import (
    create_database_status_table,
    create_group_table,
    create_groups_table,
    create_lines_table,
    create_logging_status_table,
    print_rich_table,
)

console = Console()


def _fail(ctx: click.Context, failure: StoreFailure) -> None:
    """Report a store failure and exit with status 1."""
    if ctx.obj["json_output"]:
        click.echo(json.dumps({"error_kind": str(failure.kind), "message": failure.message}))
    else:
        console.print(f"[red]❌ {failure.kind}: {failure.message}[/red]")
    ctx.exit(1)


def _check[T](ctx: click.Context, result: StoreResult[T]) -> T:
    if not result.ok:
        _fail(ctx, result.error)  # type: ignore[arg-type]
    return result.value  # type: ignore[return-value]


@asynccontextmanager
async def _authoring(ctx: click.Context) -> AsyncIterator[DialogueAuthoringService]:
    """Open the configured database, load both caches, and close it afterwards."""
    config: Config = ctx.obj["config"]
    service = DialogueAuthoringService.from_config(config)
    try:
        _check(ctx, await service.open())
        yield service
    finally:
        await service.close()


def _initialize_logging(json_output: bool, log_level: str | None, log_file: str | None, config: Config) -> None:
    """Initialize logging configuration."""
    mode = LoggingMode.PRODUCTION if json_output else LoggingMode.INTERACTIVE

    # Use config defaults when CLI parameters are not provided
    final_log_level = log_level or config.log_level
    final_log_file = log_file or (str(config.log_file) if config.log_file else None)

    configure_logging(mode=mode, log_level=final_log_level, log_file=final_log_file)


# --------------------------
# Database commands
# --------------------------


@click.command(name="init-db")
@click.pass_context
async def init_db(ctx):
    """
    🗄️ Create the dialogue tables and show what the database holds.
    """
    location = ctx.obj["config"].database_location
    async with _authoring(ctx) as service:
        lines, groups = service.lines.cache_size, service.groups.cache_size

    if ctx.obj["json_output"]:
        click.echo(json.dumps({"location": location, "lines": lines, "groups": groups}))
        return

    print_rich_table(console, create_database_status_table(location, lines, groups))


@click.command(name="test-connection")
@click.argument("location")
async def test_connection_command(location: str):
    """
    🔌 Check whether a dialogue database can be opened.
    """
    with with_store_context(location) as logger:
        valid = await test_connection(location)
        logger.info("Connection test finished", valid=valid)

    if valid:
        console.print(f"[green]✅ Database Valid[/green] {location}")
    else:
        console.print(f"[red]❌ Database Invalid[/red] {location}")
        raise click.exceptions.Exit(1)


@click.command(name="logging-status")
def logging_status():
    """
    📊 Show current logging configuration and status.
    """
    status = get_logging_status()
    logging_table = create_logging_status_table(status)
    print_rich_table(console, logging_table)


# --------------------------
# Dialogue line commands
# --------------------------


@click.group()
def line():
    """💬 Browse and edit dialogue lines."""


@line.command(name="show")
@click.argument("line_id", type=int)
@click.option("--no-cache", is_flag=True, help="Read the line straight from the database")
@click.pass_context
async def show_line(ctx, line_id: int, no_cache: bool):
    """Show one dialogue line."""
    async with _authoring(ctx) as service:
        dialogue_line = _check(ctx, await service.lines.fetch(line_id, use_cache=not no_cache))

    if ctx.obj["json_output"]:
        click.echo(dialogue_line.model_dump_json())
    else:
        console.print(f"[bold blue]{dialogue_line.id}[/bold blue] {dialogue_line.text}")


@line.command(name="list")
@click.pass_context
async def list_lines(ctx):
    """List every dialogue line."""
    async with _authoring(ctx) as service:
        lines = service.lines.cached_lines()

    if not lines:
        console.print("[yellow]No dialogue lines yet.[/yellow]")
        return

    print_rich_table(console, create_lines_table(lines))


@line.command(name="add")
@click.argument("text")
@click.pass_context
async def add_line(ctx, text: str):
    """Add a dialogue line."""
    async with _authoring(ctx) as service:
        line_id = _check(ctx, await service.lines.insert_line(text, refresh_cache=True))
    console.print(f"[green]Added dialogue line {line_id}.[/green]")


@line.command(name="edit")
@click.argument("line_id", type=int)
@click.argument("text")
@click.pass_context
async def edit_line(ctx, line_id: int, text: str):
    """Replace the text of a dialogue line."""
    async with _authoring(ctx) as service:
        _check(ctx, await service.lines.update_line(text, line_id, refresh_cache=True))
    console.print(f"[green]Updated dialogue line {line_id}.[/green]")


@line.command(name="delete")
@click.argument("line_id", type=int)
@click.pass_context
async def delete_line(ctx, line_id: int):
    """Delete a dialogue line."""
    async with _authoring(ctx) as service:
        _check(ctx, await service.lines.delete_line(line_id, refresh_cache=True))
    console.print(f"[green]Deleted dialogue line {line_id}.[/green]")


# --------------------------
# Dialogue group commands
# --------------------------


@click.group()
def group():
    """📚 Browse and edit dialogue groups."""


@group.command(name="show")
@click.argument("group_id")
@click.option("--no-cache", is_flag=True, help="Read the group straight from the database")
@click.pass_context
async def show_group(ctx, group_id: str, no_cache: bool):
    """Show a dialogue group and its elements."""
    async with _authoring(ctx) as service:
        if no_cache:
            result = await service.groups.fetch_group_from_store(group_id)
        else:
            result = service.groups.fetch_group_from_cache(group_id)
        dialogue_group = _check(ctx, result)

    if ctx.obj["json_output"]:
        click.echo(dialogue_group.model_dump_json())
    else:
        print_rich_table(console, create_group_table(dialogue_group))


@group.command(name="list")
@click.pass_context
async def list_groups(ctx):
    """List every dialogue group."""
    async with _authoring(ctx) as service:
        cached = service.groups.cache.snapshot()

    if not cached:
        console.print("[yellow]No dialogue groups yet.[/yellow]")
        return

    print_rich_table(console, create_groups_table([cached[group_id] for group_id in sorted(cached)]))


@group.command(name="add")
@click.argument("group_id")
@click.pass_context
async def add_group(ctx, group_id: str):
    """Add an empty dialogue group."""
    async with _authoring(ctx) as service:
        added = await service.try_add_group(group_id)

    if not added:
        console.print(f"[red]❌ Could not add dialogue group '{group_id}'. Is the ID blank or already used?[/red]")
        ctx.exit(1)
    console.print(f"[green]Added dialogue group '{group_id}'.[/green]")


@group.command(name="delete")
@click.argument("group_id")
@click.pass_context
async def delete_group(ctx, group_id: str):
    """Delete a dialogue group."""
    async with _authoring(ctx) as service:
        _check(ctx, await service.groups.delete(group_id, refresh_cache=True))
    console.print(f"[green]Deleted dialogue group '{group_id}'.[/green]")


@group.command(name="append")
@click.argument("group_id")
@click.argument("text")
@click.pass_context
async def append_element(ctx, group_id: str, text: str):
    """Append an element to a dialogue group."""
    async with _authoring(ctx) as service:
        updated = _check(ctx, await service.append_element(group_id, text))
    console.print(f"[green]'{group_id}' now has {len(updated)} elements.[/green]")


@group.command(name="remove")
@click.argument("group_id")
@click.argument("index", type=int)
@click.pass_context
async def remove_element(ctx, group_id: str, index: int):
    """Remove the element at INDEX from a dialogue group."""
    async with _authoring(ctx) as service:
        updated = _check(ctx, await service.remove_element(group_id, index))
    console.print(f"[green]'{group_id}' now has {len(updated)} elements.[/green]")


@click.group(invoke_without_command=True)
@click.option("--json", is_flag=True, help="Output structured JSON logs instead of rich interface")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level",
)
@click.option("--log-file", help="Custom log file path")
@click.option("--database", "-d", help="Dialogue database location (file path, :memory:, or async SQLAlchemy URL)")
@click.pass_context
def app(ctx, json: bool, log_level: str | None, log_file: str | None, database: str | None):
    """
    📜 Lorekeeper - Dialogue authoring for game narrative content

    Keep dialogue lines and dialogue groups in a SQLite database with an
    in-memory cache for fast lookups while authoring.
    """
    config = load_config(database_location=database, log_level=log_level.upper() if log_level else None)

    # Store global options in context for commands to access
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json
    ctx.obj["config"] = config

    # Initialize logging once here instead of in each command
    _initialize_logging(json, log_level, log_file, config)

    # Show help if no command provided
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Add commands to the main group
app.add_command(init_db)
app.add_command(test_connection_command)
app.add_command(logging_status)
app.add_command(line)
app.add_command(group)


if __name__ == "__main__":
    app()
