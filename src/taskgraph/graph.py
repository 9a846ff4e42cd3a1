"""Dependency resolution by depth-first post-order traversal."""

from __future__ import annotations

from dataclasses import dataclass, field

from taskgraph.registry import FileRef, Task, TaskRegistry


class CycleError(Exception):
    """Raised when a dependency cycle is detected."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(f"Dependency cycle detected: {' -> '.join(cycle)}")


class UnknownPrerequisiteError(Exception):
    """Raised when a prerequisite is neither a known task nor an existing file."""

    def __init__(self, reference: str, required_by: str | None = None):
        self.reference = reference
        self.required_by = required_by
        if required_by:
            message = f"Unknown prerequisite '{reference}' required by task '{required_by}'"
        else:
            message = f"Task not found: {reference}"
        super().__init__(message)


class TaskNotFoundError(UnknownPrerequisiteError):
    """Raised when the requested target task doesn't exist."""

    def __init__(self, name: str):
        super().__init__(name)


@dataclass
class Prerequisites:
    """A task's prerequisites split into task names and file references."""

    tasks: list[str] = field(default_factory=list)
    files: list[FileRef] = field(default_factory=list)


def classify_prerequisites(registry: TaskRegistry, task: Task) -> Prerequisites:
    """Resolve each of a task's prerequisite references.

    A bare string names a registered task if one exists, otherwise an existing
    file (or a glob matching at least one file) under the project root.
    Explicit FileRef entries are always files, whether or not they exist.

    Raises:
        UnknownPrerequisiteError: If a bare reference resolves to nothing
    """
    result = Prerequisites()
    for ref in task.prerequisites:
        if isinstance(ref, FileRef):
            result.files.append(ref)
        elif ref in registry:
            result.tasks.append(ref)
        elif _file_exists(registry, ref):
            result.files.append(FileRef(ref))
        else:
            raise UnknownPrerequisiteError(ref, required_by=task.name)
    return result


def _file_exists(registry: TaskRegistry, ref: str) -> bool:
    if FileRef(ref).is_glob:
        return bool(registry.glob(ref))
    return registry.resolve_path(ref).exists()


def _contributes_entry(task: Task, prereqs: Prerequisites) -> bool:
    # A grouping task over files only is satisfied by the files themselves
    return task.action is not None or task.phony or bool(prereqs.tasks)


def resolve_execution_order(registry: TaskRegistry, target_task: str) -> list[str]:
    """Resolve execution order for a task and its prerequisites.

    Args:
        registry: Registry containing all tasks
        target_task: Name of the task to execute

    Returns:
        List of task names in execution order (prerequisites first), each
        name appearing at most once

    Raises:
        TaskNotFoundError: If the target task doesn't exist
        UnknownPrerequisiteError: If any prerequisite can't be resolved
        CycleError: If a dependency cycle is detected
    """
    if target_task not in registry:
        raise TaskNotFoundError(target_task)

    order: list[str] = []
    completed: set[str] = set()
    in_progress: list[str] = []

    def visit(task_name: str) -> None:
        if task_name in completed:
            return
        if task_name in in_progress:
            start = in_progress.index(task_name)
            raise CycleError(in_progress[start:] + [task_name])

        task = registry.lookup(task_name)
        prereqs = classify_prerequisites(registry, task)

        in_progress.append(task_name)
        for dep in prereqs.tasks:
            visit(dep)
        in_progress.pop()

        completed.add(task_name)
        if _contributes_entry(task, prereqs):
            order.append(task_name)

    visit(target_task)
    return order


def build_dependency_tree(registry: TaskRegistry, target_task: str) -> dict:
    """Build a tree structure representing dependencies for visualization.

    File prerequisites appear as leaves with ``"file": True``.

    Returns:
        Nested dictionary representing the dependency tree
    """
    if target_task not in registry:
        raise TaskNotFoundError(target_task)

    visited = set()

    def build_tree(task_name: str) -> dict:
        """Recursively build dependency tree."""
        # Prevent infinite recursion on cycles
        if task_name in visited:
            return {"name": task_name, "deps": [], "cycle": True}

        visited.add(task_name)
        prereqs = classify_prerequisites(registry, registry.lookup(task_name))
        tree = {
            "name": task_name,
            "deps": [build_tree(dep) for dep in prereqs.tasks]
            + [{"name": f.path, "deps": [], "file": True} for f in prereqs.files],
        }
        visited.remove(task_name)

        return tree

    return build_tree(target_task)
