"""In-memory task registry."""

from __future__ import annotations

import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Union

GLOB_CHARS = "*?["


@dataclass(frozen=True)
class FileRef:
    """An explicitly declared file input, possibly a glob pattern."""

    path: str

    @property
    def is_glob(self) -> bool:
        return any(c in self.path for c in GLOB_CHARS)


Prerequisite = Union[str, FileRef]


def shell_command(cmd: str) -> list[str]:
    """Wrap a command line in the platform default shell."""
    if platform.system() == "Windows":
        return ["cmd", "/c", cmd]
    return ["bash", "-c", cmd]


@dataclass
class Task:
    """Represents a task definition."""

    name: str
    prerequisites: list[Prerequisite] = field(default_factory=list)
    action: list[str] | None = None
    phony: bool = False
    doc: str | None = None
    output: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    working_dir: str = "."

    def __post_init__(self):
        """Ensure lists are always lists. A string action is a shell command line."""
        if isinstance(self.prerequisites, (str, FileRef)):
            self.prerequisites = [self.prerequisites]
        if isinstance(self.action, str):
            self.action = shell_command(self.action)

    @property
    def output_path(self) -> str:
        """Path of the designated output artifact (the task name if undeclared)."""
        return self.output if self.output else self.name


class TaskRegistry:
    """Holds every declared task, keyed by name, in declaration order."""

    def __init__(
        self,
        project_root: Path | None = None,
        default_target: str | None = None,
    ) -> None:
        self.project_root = Path(project_root) if project_root is not None else Path.cwd()
        self.default_target = default_target
        self._tasks: dict[str, Task] = {}

    def define(self, task: Task) -> None:
        """Insert a task, replacing any existing task with the same name."""
        self._tasks[task.name] = task

    def lookup(self, name: str) -> Task | None:
        return self._tasks.get(name)

    def all(self) -> Iterator[Task]:
        """Yield every registered task in declaration order."""
        return iter(list(self._tasks.values()))

    def names(self) -> list[str]:
        return list(self._tasks.keys())

    def resolve_path(self, path: str | Path) -> Path:
        """Resolve a recipe-relative path against the project root."""
        return self.project_root / path

    def glob(self, pattern: str) -> list[Path]:
        """Expand a glob pattern relative to the project root to existing files."""
        return sorted(p for p in self.project_root.glob(pattern) if p.is_file())

    def default(self) -> str | None:
        """Name of the target run when none is given on the command line.

        The explicit default wins; otherwise the first declared task is used.
        """
        if self.default_target:
            return self.default_target
        return next(iter(self._tasks), None)

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)
