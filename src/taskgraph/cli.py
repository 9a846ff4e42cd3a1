"""Command-line interface for taskgraph."""

from __future__ import annotations

from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from taskgraph import __version__
from taskgraph.cli_commands.dry_run import dry_run as _dry_run
from taskgraph.cli_commands.init_recipe import init_recipe
from taskgraph.cli_commands.list_tasks import list_tasks
from taskgraph.cli_commands.run_target import run_target
from taskgraph.cli_commands.show_tree import show_tree
from taskgraph.config import ConfigError, load_config
from taskgraph.console_logger import ConsoleLogger
from taskgraph.executor import Executor
from taskgraph.graph import CycleError, UnknownPrerequisiteError
from taskgraph.help_catalog import documented_tasks
from taskgraph.logging import LogLevel, Logger, parse_log_level
from taskgraph.parser import get_recipe
from taskgraph.process_runner import TaskOutputTypes, make_process_runner
from taskgraph.registry import TaskRegistry

app = typer.Typer(
    help="taskgraph - run tasks whose inputs are newer than their outputs",
    add_completion=False,
    no_args_is_help=False,
)

HELP_TARGET = "help"


def _parse_log_level_option(value: Optional[str]) -> Optional[LogLevel]:
    if value is None:
        return None
    try:
        return parse_log_level(value)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level")


def _parse_output_option(value: Optional[str]) -> Optional[TaskOutputTypes]:
    if value is None:
        return None
    try:
        return TaskOutputTypes(value.lower())
    except ValueError:
        valid = ", ".join(t.value for t in TaskOutputTypes)
        raise typer.BadParameter(f"must be one of: {valid}", param_hint="--output")


def _parse_env_options(values: Optional[List[str]]) -> dict[str, str]:
    """Parse repeated KEY=VALUE options into a dict."""
    env = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected KEY=VALUE, got '{item}'", param_hint="--env")
        env[key] = value
    return env


@app.command()
def main(
    target: Optional[str] = typer.Argument(
        None, help="Task to run (defaults to the recipe's default target)"
    ),
    version: bool = typer.Option(False, "--version", "-v", help="Show version"),
    list_opt: bool = typer.Option(False, "--list", "-l", help="List documented tasks"),
    tree: bool = typer.Option(False, "--tree", help="Show the target's dependency tree"),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Show the execution plan without running it"
    ),
    init: bool = typer.Option(False, "--init", help="Create a starter taskgraph.yaml"),
    tasks_file: Optional[str] = typer.Option(
        None, "--file", "-f", help="Path to the recipe file"
    ),
    env: Optional[List[str]] = typer.Option(
        None, "--env", "-e", help="Environment override KEY=VALUE for every action"
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-O", help="Task output to show: all, out, err or none"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", "-L", help="fatal, error, warn, info, debug or trace"
    ),
):
    """Run a task and whichever of its prerequisites are out of date."""
    cli_level = _parse_log_level_option(log_level)
    cli_output = _parse_output_option(output)
    cli_env = _parse_env_options(env)

    logger = ConsoleLogger(
        Console(), cli_level or LogLevel.INFO, error_console=Console(stderr=True)
    )

    if version:
        logger.info(f"taskgraph version {__version__}")
        return

    if init:
        init_recipe(logger)
        return

    registry = get_recipe(logger, tasks_file)
    if registry is None:
        logger.error("[red]No recipe file found (taskgraph.yaml, taskgraph.yml or tg.yaml)[/red]")
        logger.info("Run [cyan]tg --init[/cyan] to create a starter recipe")
        raise typer.Exit(1)

    try:
        config = load_config(registry.project_root)
    except ConfigError as e:
        logger.error(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    if cli_level is None and config.log_level is not None:
        logger.push_level(config.log_level)

    if list_opt or (target == HELP_TARGET and HELP_TARGET not in registry):
        list_tasks(logger, registry)
        return

    task_name = target or registry.default()
    if task_name is None:
        logger.error("[red]No tasks defined[/red]")
        raise typer.Exit(1)

    if task_name not in registry:
        _report_unknown_task(logger, registry, task_name)
        raise typer.Exit(1)

    executor = Executor(
        registry,
        logger,
        make_process_runner,
        output_type=cli_output or config.output or TaskOutputTypes.ALL,
        base_env=config.env,
        override_env=cli_env,
    )

    if tree:
        show_tree(logger, executor, task_name)
        return

    if dry_run:
        try:
            _dry_run(logger, executor, task_name)
        except (CycleError, UnknownPrerequisiteError) as e:
            logger.error(f"[red]{escape(str(e))}[/red]")
            raise typer.Exit(1)
        return

    run_target(logger, executor, task_name)


def _report_unknown_task(logger: Logger, registry: TaskRegistry, task_name: str) -> None:
    logger.error(f"[red]Task not found: {task_name}[/red]")
    logger.info("\nAvailable tasks:")
    for name, _ in documented_tasks(registry):
        logger.info(f"  - {name}")


if __name__ == "__main__":
    app()
