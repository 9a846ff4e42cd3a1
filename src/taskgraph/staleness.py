"""Staleness detection from file timestamps and upstream results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from taskgraph.graph import classify_prerequisites
from taskgraph.registry import FileRef, Task, TaskRegistry


@dataclass
class TaskStatus:
    """Status of a task for execution planning."""

    task_name: str
    will_run: bool
    reason: str  # "phony", "no_action", "dependency_triggered", "output_missing",
    # "input_missing", "inputs_changed", "fresh"
    changed_files: list[str] = field(default_factory=list)
    upstream_changed: bool = False

    @property
    def changed(self) -> bool:
        """Whether downstream tasks should treat this task as updated."""
        return self.will_run or self.upstream_changed


class StalenessEvaluator:
    """Decides whether a task's action must run."""

    def __init__(self, registry: TaskRegistry):
        self.registry = registry

    def evaluate(self, task: Task, upstream: Iterable[TaskStatus] = ()) -> TaskStatus:
        """Check if a task needs to run.

        Checks are applied in order: phony, no action, upstream rerun,
        missing output, missing input, newer input.

        Args:
            task: Task to check
            upstream: Statuses already determined for the task's prerequisite
                tasks in this invocation

        Returns:
            TaskStatus indicating whether the task will run and why
        """
        upstream_changed = any(status.changed for status in upstream)

        if task.phony:
            return TaskStatus(task.name, True, "phony", upstream_changed=upstream_changed)

        if task.action is None:
            return TaskStatus(
                task.name, False, "no_action", upstream_changed=upstream_changed
            )

        if upstream_changed:
            return TaskStatus(
                task.name, True, "dependency_triggered", upstream_changed=True
            )

        output = self.registry.resolve_path(task.output_path)
        if not output.exists():
            return TaskStatus(task.name, True, "output_missing", [task.output_path])
        output_mtime = output.stat().st_mtime

        missing, inputs = self._expand_inputs(task)
        if missing:
            return TaskStatus(task.name, True, "input_missing", missing)

        changed = [
            self._relative(path) for path in inputs if path.stat().st_mtime > output_mtime
        ]
        if changed:
            return TaskStatus(task.name, True, "inputs_changed", changed)

        return TaskStatus(task.name, False, "fresh")

    def _expand_inputs(self, task: Task):
        """Return (missing declarations, existing input paths) for a task.

        File prerequisites of actionless, non-phony prerequisite tasks count
        as inputs of this task, recursively.
        """
        missing = []
        inputs = []
        for ref in self._file_prerequisites(task, set()):
            if ref.is_glob:
                matches = self.registry.glob(ref.path)
                if not matches:
                    missing.append(ref.path)
                inputs.extend(matches)
            else:
                path = self.registry.resolve_path(ref.path)
                if path.exists():
                    inputs.append(path)
                else:
                    missing.append(ref.path)
        return missing, inputs

    def _file_prerequisites(self, task: Task, seen: set[str]) -> list[FileRef]:
        prereqs = classify_prerequisites(self.registry, task)
        refs = list(prereqs.files)
        for name in prereqs.tasks:
            dep = self.registry.lookup(name)
            if dep.action is None and not dep.phony and name not in seen:
                seen.add(name)
                refs.extend(self._file_prerequisites(dep, seen))
        return refs

    def _relative(self, path) -> str:
        try:
            return str(path.relative_to(self.registry.project_root))
        except ValueError:
            return str(path)
