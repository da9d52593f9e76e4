"""Output formatting utilities using Rich."""

import json
from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from onetimeinit.cli.output.styles import ONETIMEINIT_THEME

console = Console(theme=ONETIMEINIT_THEME)
err_console = Console(theme=ONETIMEINIT_THEME, stderr=True)

# Columns whose non-zero counts get a dedicated style
_COUNT_STYLES = {"updated": "count.updated", "failed": "count.failed"}


def format_count(column: str, value: int) -> str:
    """
    Style a per-launcher counter.

    Examples:
        >>> format_count("Failed", 2)
        '[count.failed]2[/count.failed]'
    """
    if value == 0:
        return "[count.zero]0[/count.zero]"
    style = _COUNT_STYLES.get(column.lower())
    return f"[{style}]{value}[/{style}]" if style else str(value)


def _cell(column: str, value: Any) -> str:
    if isinstance(value, bool):
        return "yes" if value else "[unavailable]no[/unavailable]"
    if isinstance(value, int):
        return format_count(column, value)
    if value is None:
        return "[dim]-[/dim]"
    return str(value)


def format_table(
    data: List[Dict[str, Any]],
    columns: List[str],
    title: Optional[str] = None,
) -> None:
    """
    Print rows as a Rich table.

    Booleans render as yes/no and integer counters are styled by column
    name (see format_count).

    Args:
        data: Rows keyed by column name
        columns: Columns to display, in order
        title: Optional table title

    Examples:
        format_table(
            [{"Locator": "launcher3", "Updated": 1, "Failed": 0}],
            ["Locator", "Updated", "Failed"],
            title="Launcher shortcuts",
        )
    """
    if not data:
        console.print("[dim]No data to display[/dim]")
        return

    table = Table(title=title, show_header=True, header_style="bold magenta", box=box.ROUNDED)
    for col in columns:
        table.add_column(col, style="locator" if col == "Locator" else None, overflow="fold")

    for row in data:
        table.add_row(*(_cell(col, row.get(col)) for col in columns))

    console.print(table)


def format_json(data: Any, indent: int = 2) -> None:
    """
    Print data as JSON.

    Lines are never wrapped so the output stays machine-readable.
    """
    console.print(json.dumps(data, indent=indent, default=str), markup=False, highlight=False, soft_wrap=True)


def format_plain(data: List[str]) -> None:
    """Print one unstyled item per line (intent URIs, version numbers)."""
    for item in data:
        console.print(item, markup=False, highlight=False, soft_wrap=True)


def format_key_value(data: Dict[str, Any], title: Optional[str] = None) -> None:
    """
    Print a mapping as indented "key: value" lines.

    Nested mappings are printed one entry per line beneath their key and
    sequences are joined with commas.
    """
    if title:
        console.print(f"\n[version]{title}[/version]")

    for key, value in data.items():
        if isinstance(value, dict):
            console.print(f"  [field]{key}:[/field]" + ("" if value else " [dim]-[/dim]"))
            for sub_key, sub_value in value.items():
                console.print(f"    {sub_key} = {sub_value}", markup=False, highlight=False, soft_wrap=True)
            continue

        if isinstance(value, (list, tuple)):
            value_str = ", ".join(str(v) for v in value) if value else "[dim]-[/dim]"
        elif value is None:
            value_str = "[dim]None[/dim]"
        else:
            value_str = str(value)

        console.print(f"  [field]{key}:[/field] {value_str}", soft_wrap=True)


def print_success(message: str) -> None:
    console.print(f"[success]✓[/success] {message}")


def print_error(message: str) -> None:
    err_console.print(f"[error]✗[/error] {message}")


def print_warning(message: str) -> None:
    err_console.print(f"[warning]⚠[/warning] {message}")


def print_info(message: str) -> None:
    console.print(f"[info]ℹ[/info] {message}")
