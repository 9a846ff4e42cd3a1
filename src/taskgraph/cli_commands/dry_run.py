"""Show what a target would execute without running anything."""

from __future__ import annotations

from taskgraph.executor import Executor
from taskgraph.logging import Logger


def dry_run(logger: Logger, executor: Executor, task_name: str) -> None:
    """
    Display the execution plan for a target.

    Raises:
        CycleError, UnknownPrerequisiteError: If the plan can't be resolved
    """
    statuses = executor.execute_task(task_name, dry_run=True)

    will_run = [
        name
        for name, status in statuses.items()
        if status.will_run and executor.registry.lookup(name).action is not None
    ]
    will_skip = [name for name in statuses if name not in will_run]

    logger.info(f"[bold]Execution plan for '{task_name}':[/bold]\n")

    if will_run:
        logger.info(f"[yellow]Will execute ({len(will_run)} tasks):[/yellow]")
        for i, name in enumerate(will_run, 1):
            status = statuses[name]
            logger.info(f"  {i}. [cyan]{name}[/cyan]")
            logger.info(f"     - {status.reason}")
            if status.changed_files:
                logger.info(f"     - files: {', '.join(status.changed_files)}")
        logger.info()

    if will_skip:
        logger.info(f"[green]Will skip ({len(will_skip)} tasks):[/green]")
        for name in will_skip:
            logger.info(f"  - {name} ({statuses[name].reason})")

    if not statuses:
        logger.info("[green]Nothing to do[/green]")
