"""Run a target and its prerequisites."""

from __future__ import annotations

import typer
from rich.markup import escape

from taskgraph.cli_commands import failure_marker, success_marker
from taskgraph.executor import ActionFailure, Executor
from taskgraph.graph import CycleError, UnknownPrerequisiteError
from taskgraph.logging import Logger


def run_target(logger: Logger, executor: Executor, task_name: str) -> None:
    """
    Execute a target, translating failures into the process exit code.

    Resolution errors exit with 1 before any action runs. An action failure
    exits with the failing action's own exit code.
    """
    try:
        statuses = executor.execute_task(task_name)
    except (CycleError, UnknownPrerequisiteError) as e:
        logger.error(f"[red]{failure_marker()} {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except ActionFailure as e:
        logger.error(f"[red]{failure_marker()} {escape(str(e))}[/red]")
        # Signals are reported as 128 + signal number, as shells do
        raise typer.Exit(e.exit_code if e.exit_code > 0 else 128 - e.exit_code)

    ran = [
        name
        for name, status in statuses.items()
        if status.will_run and executor.registry.lookup(name).action is not None
    ]
    if not ran:
        logger.info(f"[green]{success_marker()} '{task_name}' is up to date[/green]")
    else:
        logger.info(
            f"[green]{success_marker()} Task '{task_name}' completed successfully[/green]"
        )
