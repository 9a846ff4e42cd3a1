"""taskgraph - a Make-style task runner with timestamp-based incremental execution."""

__version__ = "0.1.0"

from taskgraph.executor import ActionFailure, Executor
from taskgraph.graph import (
    CycleError,
    TaskNotFoundError,
    UnknownPrerequisiteError,
    build_dependency_tree,
    classify_prerequisites,
    resolve_execution_order,
)
from taskgraph.help_catalog import documented_tasks, format_help_lines, render_help
from taskgraph.parser import RecipeError, find_recipe_file, parse_recipe
from taskgraph.registry import FileRef, Task, TaskRegistry
from taskgraph.staleness import StalenessEvaluator, TaskStatus

__all__ = [
    "__version__",
    "ActionFailure",
    "Executor",
    "CycleError",
    "TaskNotFoundError",
    "UnknownPrerequisiteError",
    "build_dependency_tree",
    "classify_prerequisites",
    "resolve_execution_order",
    "documented_tasks",
    "format_help_lines",
    "render_help",
    "RecipeError",
    "find_recipe_file",
    "parse_recipe",
    "FileRef",
    "Task",
    "TaskRegistry",
    "StalenessEvaluator",
    "TaskStatus",
]
