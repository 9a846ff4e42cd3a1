"""Task execution: plan, evaluate staleness, run actions in order."""

from __future__ import annotations

import subprocess
from typing import Callable, Mapping

from taskgraph.graph import classify_prerequisites, resolve_execution_order
from taskgraph.logging import Logger
from taskgraph.process_runner import ProcessRunner, TaskOutputTypes
from taskgraph.registry import Task, TaskRegistry
from taskgraph.staleness import StalenessEvaluator, TaskStatus

ProcessRunnerFactory = Callable[[TaskOutputTypes, Logger], ProcessRunner]


class ActionFailure(Exception):
    """Raised when a task's action exits with a non-zero status."""

    def __init__(self, task_name: str, exit_code: int, command: list[str]):
        self.task_name = task_name
        self.exit_code = exit_code
        self.command = command
        super().__init__(
            f"Task '{task_name}' failed with exit code {exit_code}: "
            f"{subprocess.list2cmdline(command)}"
        )


class Executor:
    """Executes a target's resolution plan, skipping tasks that are up to date."""

    def __init__(
        self,
        registry: TaskRegistry,
        logger: Logger,
        process_runner_factory: ProcessRunnerFactory,
        output_type: TaskOutputTypes = TaskOutputTypes.ALL,
        base_env: Mapping[str, str] | None = None,
        override_env: Mapping[str, str] | None = None,
    ):
        """Initialize executor.

        Args:
            registry: Registry containing all tasks
            logger: Logger for progress output
            process_runner_factory: Creates the runner used for actions
            output_type: Which child streams to forward
            base_env: Overrides applied under each task's own env (from config)
            override_env: Overrides applied over each task's own env (from CLI)
        """
        self.registry = registry
        self.logger = logger
        self.evaluator = StalenessEvaluator(registry)
        self._process_runner = process_runner_factory(output_type, logger)
        self._base_env = dict(base_env or {})
        self._override_env = dict(override_env or {})

    def plan(self, task_name: str) -> dict[str, TaskStatus]:
        """Resolve a target and decide run/skip for every planned task.

        Raises:
            TaskNotFoundError: If the target doesn't exist
            UnknownPrerequisiteError: If a prerequisite can't be resolved
            CycleError: If the graph reachable from the target has a cycle
        """
        execution_order = resolve_execution_order(self.registry, task_name)
        self.logger.debug(f"Plan for '{task_name}': {', '.join(execution_order) or '(empty)'}")

        statuses: dict[str, TaskStatus] = {}
        for name in execution_order:
            task = self.registry.lookup(name)
            upstream = [
                statuses[dep]
                for dep in classify_prerequisites(self.registry, task).tasks
                if dep in statuses
            ]
            statuses[name] = self.evaluator.evaluate(task, upstream)

        return statuses

    def execute_task(self, task_name: str, dry_run: bool = False) -> dict[str, TaskStatus]:
        """Execute a task and its prerequisites.

        Actions run one at a time in plan order. The first failing action
        stops the plan; actions that already completed are not undone.

        Args:
            task_name: Name of the target task
            dry_run: If True, only compute the plan

        Returns:
            Dictionary of task names to their execution status, in plan order

        Raises:
            ActionFailure: If a task's action exits non-zero
        """
        statuses = self.plan(task_name)
        if dry_run:
            return statuses

        for name, status in statuses.items():
            task = self.registry.lookup(name)
            if not status.will_run or task.action is None:
                self.logger.debug(f"[dim]Skipping '{name}' ({status.reason})[/dim]")
                continue
            self._run_task(task)

        return statuses

    def task_environment(self, task: Task) -> dict[str, str]:
        """Environment overrides for a task's action, lowest precedence first."""
        env = dict(self._base_env)
        env.update(task.env)
        env.update(self._override_env)
        return env

    def _run_task(self, task: Task) -> None:
        """Execute a single task's action.

        Raises:
            ActionFailure: If the action exits non-zero
        """
        self.logger.info(f"[bold]Running:[/bold] [cyan]{task.name}[/cyan]")

        working_dir = self.registry.resolve_path(task.working_dir)
        exit_code = self._process_runner.run(
            task.action, working_dir, self.task_environment(task)
        )
        if exit_code != 0:
            raise ActionFailure(task.name, exit_code, task.action)
