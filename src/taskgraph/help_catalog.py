"""Listing of documented tasks."""

from __future__ import annotations

from rich.table import Table

from taskgraph.registry import TaskRegistry

# Minimum width of the name column
NAME_COLUMN_WIDTH = 30
SEPARATOR = "  "


def documented_tasks(registry: TaskRegistry) -> list[tuple[str, str]]:
    """Return ``(name, doc)`` for every documented task, sorted by name.

    Tasks without a doc string are left out, which keeps helper tasks out of
    the listing while they stay invocable by name.
    """
    return sorted((task.name, task.doc) for task in registry.all() if task.doc)


def _name_width(rows: list[tuple[str, str]]) -> int:
    return max([NAME_COLUMN_WIDTH] + [len(name) for name, _ in rows])


def format_help_lines(registry: TaskRegistry) -> list[str]:
    """Format the documented tasks as two aligned plain-text columns."""
    rows = documented_tasks(registry)
    width = _name_width(rows)
    return [f"{name:<{width}}{SEPARATOR}{doc}" for name, doc in rows]


def render_help(registry: TaskRegistry) -> Table:
    """Build the styled catalog table printed by the CLI."""
    rows = documented_tasks(registry)

    table = Table(show_edge=False, show_header=False, box=None, padding=(0, 0))
    table.add_column("Task", style="cyan", no_wrap=True, width=_name_width(rows) + len(SEPARATOR))
    table.add_column("Description", style="white", max_width=80)

    for name, doc in rows:
        table.add_row(name, doc)

    return table
