"""Rich output for the form-builder CLI.

Status lines go to stderr; results go to stdout as JSON with ``--json`` or
as Rich tables and panels otherwise.
"""

import json
import sys
from typing import Any, List, Mapping, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console(stderr=True)
stdout_console = Console(file=sys.stdout)


def print_ok(msg: str) -> None:
    console.print(f"[green]✓[/green] {msg}")


def print_err(msg: str) -> None:
    console.print(f"[red]✗[/red] {msg}")


def print_warn(msg: str) -> None:
    console.print(f"[yellow]![/yellow] {msg}")


def print_field_errors(errors: Mapping[str, str]) -> None:
    """One ``field: message`` line per invalid field."""
    for name, message in errors.items():
        print_err(f"{name}: {message}")


def format_cell(value: Any) -> str:
    """Render a field value or flag for a table cell."""
    if value is None or value == "":
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def output_result(data: dict, *, ctx: typer.Context, title: str = "") -> None:
    """Print a mapping as JSON (stdout) or a Rich panel (stderr)."""
    if ctx.obj.get("json"):
        stdout_console.print_json(data=data, default=str)
        return
    formatted = json.dumps(data, indent=2, ensure_ascii=False, default=str)
    console.print(Panel(formatted, title=title, border_style="blue") if title else formatted)


def output_table(rows: List[dict], *, ctx: typer.Context, title: str = "", columns: Optional[List[str]] = None) -> None:
    """Print rows as a JSON array or a Rich table."""
    if ctx.obj.get("json"):
        stdout_console.print_json(data=rows, default=str)
        return
    if not rows:
        console.print(f"[dim]No {title.lower() or 'rows'}[/dim]")
        return

    columns = columns or list(rows[0])
    table = Table(title=title, caption=f"{len(rows)} total")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*[format_cell(row.get(column)) for column in columns])
    console.print(table)


def output_submission(record: Mapping[str, Any], *, ctx: typer.Context) -> None:
    """Print one submission: header line plus a field/value table."""
    if ctx.obj.get("json"):
        stdout_console.print_json(data=dict(record), default=str)
        return
    console.print(f"[bold]{record['formTitle']}[/bold] #{record['id']}  [dim]{record['created_at']}[/dim]")
    table = Table(show_header=True)
    table.add_column("field")
    table.add_column("value")
    for name, value in record["data"].items():
        table.add_row(name, format_cell(value))
    console.print(table)
