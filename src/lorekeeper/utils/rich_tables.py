# ABOUTME: Rich table utilities for showing dialogue lines, groups, and logging status
# ABOUTME: Provides pre-configured table generators for the CLI

from typing import Any

from rich.box import ROUNDED, SIMPLE
from rich.console import Console
from rich.table import Table

from lorekeeper.core.models import DialogueGroup, DialogueLine


def create_key_value_table(
    title: str,
    data: dict[str, str],
    title_style: str = "bold cyan",
    key_style: str = "bold blue",
    value_style: str = "green",
    box_style=ROUNDED,
) -> Table:
    """Create a two-column field/value table.

    Args:
        title: Table title with emoji/styling
        data: Dictionary of key-value pairs to display
        title_style: Style for the table title
        key_style: Style for the key column
        value_style: Style for the value column
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style="bold magenta",
        border_style="cyan",
        title_justify="left",
        expand=False,
    )

    table.add_column("Field", style=key_style, no_wrap=False)
    table.add_column("Value", style=value_style, no_wrap=False)

    for key, value in data.items():
        table.add_row(key, str(value))

    return table


def create_multi_column_table(
    title: str,
    columns: list[tuple[str, str]],
    rows: list[list[str]],
    title_style: str = "bold cyan",
    header_style: str = "bold magenta",
    alternate_row_styles: list[str] | None = None,
    box_style=ROUNDED,
) -> Table:
    """Create a multi-column table with zebra striping.

    Args:
        title: Table title with emoji/styling
        columns: List of (column_name, column_style) tuples
        rows: List of row data
        title_style: Style for the table title
        header_style: Style for column headers
        alternate_row_styles: Alternating row styles for zebra striping
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style=header_style,
        border_style="cyan",
        title_justify="left",
        row_styles=alternate_row_styles or ["", "dim"],
        expand=True,
    )

    for name, style in columns:
        table.add_column(name, style=style)

    for row in rows:
        table.add_row(*row)

    return table


def create_lines_table(lines: list[DialogueLine]) -> Table:
    """Table of cached dialogue lines ordered by ID."""
    return create_multi_column_table(
        title="💬 Dialogue Lines",
        columns=[("ID", "bold blue"), ("Text", "white")],
        rows=[[str(line.id), line.text] for line in lines],
    )


def create_group_table(group: DialogueGroup) -> Table:
    """Table of one group's elements in order."""
    return create_multi_column_table(
        title=f"📚 Dialogue Group: {group.id}",
        columns=[("#", "bold blue"), ("Element", "white")],
        rows=[[str(index), element] for index, element in enumerate(group.elements)],
        title_style="bold green",
    )


def create_groups_table(groups: list[DialogueGroup]) -> Table:
    """Summary table of cached groups."""
    return create_multi_column_table(
        title="📚 Dialogue Groups",
        columns=[("ID", "bold blue"), ("Elements", "green"), ("First Element", "white")],
        rows=[[group.id, str(len(group)), group.elements[0] if group.elements else "-"] for group in groups],
    )


def create_logging_status_table(status: dict[str, Any]) -> Table:
    """Create a logging configuration status table.

    Args:
        status: Logging status dictionary

    Returns:
        Styled logging configuration table
    """
    logging_data = {
        "🔧 Mode": status["mode"].title(),
        "📁 Log Directory": status["log_directory"] or "N/A (production mode)",
        "🔇 Suppressed Libraries": ", ".join(status["third_party_suppressed"]),
    }

    if status["log_files"]["main"]:
        logging_data["📝 Main Log"] = status["log_files"]["main"]
    if status["log_files"]["json"]:
        logging_data["📊 JSON Log"] = status["log_files"]["json"]
    if status["log_files"]["errors"]:
        logging_data["🚨 Error Log"] = status["log_files"]["errors"]

    return create_key_value_table(
        title="🔍 Logging Configuration",
        data=logging_data,
        title_style="bold green",
        key_style="blue",
        value_style="white",
    )


def create_database_status_table(location: str, lines: int, groups: int) -> Table:
    """Summary of an opened dialogue database."""
    return create_key_value_table(
        title="🗄️ Dialogue Database",
        data={"📍 Location": location, "💬 Lines": str(lines), "📚 Groups": str(groups)},
        title_style="bold green",
        key_style="cyan",
        value_style="white",
        box_style=SIMPLE,
    )


def print_rich_table(console: Console, table: Table) -> None:
    """Print a rich table with consistent spacing and style.

    Args:
        console: Rich console instance
        table: Configured table to print
    """
    console.print()  # Add spacing before
    console.print(table)
    console.print()  # Add spacing after
