from __future__ import annotations

import typer
from rich.markup import escape
from rich.tree import Tree

from taskgraph.executor import Executor
from taskgraph.graph import CycleError, UnknownPrerequisiteError, build_dependency_tree
from taskgraph.logging import Logger
from taskgraph.staleness import TaskStatus


def show_tree(logger: Logger, executor: Executor, task_name: str) -> None:
    """
    Show the dependency tree of a task with freshness indicators.
    """
    try:
        dep_tree = build_dependency_tree(executor.registry, task_name)
        statuses = executor.execute_task(task_name, dry_run=True)
    except (CycleError, UnknownPrerequisiteError) as e:
        logger.error(f"[red]Error building dependency tree: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    logger.info(_build_rich_tree(dep_tree, statuses))


def _label(node: dict, statuses: dict[str, TaskStatus]) -> str:
    name = node["name"]
    if node.get("file"):
        return f"[dim]{name}[/dim]"

    status = statuses.get(name)
    if status is None:
        return name
    if status.reason == "phony":
        return f"[magenta]{name} (phony)[/magenta]"
    if status.reason == "dependency_triggered":
        return f"[yellow]{name} (triggered by dependency)[/yellow]"
    if status.will_run:
        return f"[red]{name} (stale: {status.reason})[/red]"
    return f"[green]{name} ({status.reason})[/green]"


def _build_rich_tree(dep_tree: dict, statuses: dict[str, TaskStatus]) -> Tree:
    """
    Build a Rich Tree from a dependency tree and the planned statuses.
    """
    label = _label(dep_tree, statuses)
    if dep_tree.get("cycle"):
        label += " [red](cycle)[/red]"

    tree = Tree(label)
    for dep in dep_tree.get("deps", []):
        tree.add(_build_rich_tree(dep, statuses))

    return tree
