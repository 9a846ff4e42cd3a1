from __future__ import annotations

from taskgraph.help_catalog import documented_tasks, render_help
from taskgraph.logging import Logger
from taskgraph.registry import TaskRegistry


def list_tasks(logger: Logger, registry: TaskRegistry) -> None:
    """
    List all documented tasks with their descriptions.
    """
    if not documented_tasks(registry):
        logger.warn("[yellow]No documented tasks[/yellow]")
        return

    logger.info(render_help(registry))
