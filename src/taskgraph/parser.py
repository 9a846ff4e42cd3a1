"""Parse recipe YAML files into a task registry."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer
import yaml
from rich.markup import escape

from taskgraph.logging import Logger
from taskgraph.registry import FileRef, Task, TaskRegistry, shell_command

RECIPE_FILENAMES = ["taskgraph.yaml", "taskgraph.yml", "tg.yaml"]

TASK_KEYS = {"doc", "deps", "cmd", "phony", "output", "env", "working_dir"}


class RecipeError(Exception):
    """Raised when a recipe file is malformed."""

    pass


def find_recipe_file(start_dir: Path | None = None) -> Path | None:
    """Find a recipe file in the current or parent directories.

    Args:
        start_dir: Directory to start searching from (defaults to cwd)

    Returns:
        Path to recipe file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    # Search up the directory tree
    while True:
        for filename in RECIPE_FILENAMES:
            recipe_path = current / filename
            if recipe_path.exists():
                return recipe_path

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def parse_recipe(recipe_path: Path) -> TaskRegistry:
    """Parse a recipe file.

    Args:
        recipe_path: Path to the recipe file

    Returns:
        Registry holding every task, rooted at the recipe's directory

    Raises:
        FileNotFoundError: If recipe file doesn't exist
        yaml.YAMLError: If YAML is invalid
        RecipeError: If recipe structure is invalid
    """
    if not recipe_path.exists():
        raise FileNotFoundError(f"Recipe file not found: {recipe_path}")

    with open(recipe_path, "r") as f:
        data = yaml.safe_load(f)

    return parse_recipe_data(data, recipe_path.resolve().parent)


def parse_recipe_data(data: Any, project_root: Path) -> TaskRegistry:
    """Build a registry from already-loaded recipe data."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise RecipeError("Recipe must be a mapping of task names to definitions")

    default_target = data.get("default")
    if default_target is not None and not isinstance(default_target, str):
        raise RecipeError("'default' must be a task name")

    # Tasks can be either at root level OR inside a "tasks:" key
    if "tasks" in data:
        tasks_data = data["tasks"] or {}
        if not isinstance(tasks_data, dict):
            raise RecipeError("'tasks' must be a mapping of task names to definitions")
    else:
        tasks_data = {k: v for k, v in data.items() if k != "default"}

    registry = TaskRegistry(project_root=project_root, default_target=default_target)
    for task_name, task_data in tasks_data.items():
        registry.define(_parse_task(str(task_name), task_data))

    if default_target is not None and default_target not in registry:
        raise RecipeError(f"Default target '{default_target}' is not a defined task")

    return registry


def _parse_task(name: str, task_data: Any) -> Task:
    if task_data is None:
        task_data = {}
    if not isinstance(task_data, dict):
        raise RecipeError(f"Task '{name}' must be a dictionary")

    unknown = set(task_data) - TASK_KEYS
    if unknown:
        raise RecipeError(
            f"Task '{name}' has unknown field(s): {', '.join(sorted(unknown))}"
        )

    return Task(
        name=name,
        prerequisites=_parse_deps(name, task_data.get("deps", [])),
        action=_parse_cmd(name, task_data.get("cmd")),
        phony=_parse_bool(name, "phony", task_data.get("phony", False)),
        doc=_parse_optional_str(name, "doc", task_data.get("doc")),
        output=_parse_optional_str(name, "output", task_data.get("output")),
        env=_parse_env(name, task_data.get("env", {})),
        working_dir=_parse_optional_str(name, "working_dir", task_data.get("working_dir")) or ".",
    )


def _parse_deps(name: str, deps: Any) -> list[str | FileRef]:
    if isinstance(deps, str):
        deps = [deps]
    if not isinstance(deps, list):
        raise RecipeError(f"Task '{name}': 'deps' must be a list")

    result: list[str | FileRef] = []
    for dep in deps:
        if isinstance(dep, str):
            result.append(dep)
        elif isinstance(dep, dict) and set(dep) == {"file"} and isinstance(dep["file"], str):
            result.append(FileRef(dep["file"]))
        else:
            raise RecipeError(
                f"Task '{name}': dependency {dep!r} must be a name or {{file: path}}"
            )
    return result


def _parse_cmd(name: str, cmd: Any) -> list[str] | None:
    if cmd is None:
        return None
    if isinstance(cmd, str):
        return shell_command(cmd)
    if isinstance(cmd, list) and cmd and all(isinstance(a, (str, int, float)) for a in cmd):
        return [str(a) for a in cmd]
    raise RecipeError(f"Task '{name}': 'cmd' must be a string or a non-empty list of arguments")


def _parse_bool(name: str, key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise RecipeError(f"Task '{name}': '{key}' must be true or false")
    return value


def _parse_optional_str(name: str, key: str, value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise RecipeError(f"Task '{name}': '{key}' must be a string")
    return value


def _parse_env(name: str, env: Any) -> dict[str, str]:
    if not isinstance(env, dict):
        raise RecipeError(f"Task '{name}': 'env' must be a mapping")
    return {str(k): "" if v is None else str(v) for k, v in env.items()}


def get_recipe(logger: Logger, tasks_file: str | None = None) -> TaskRegistry | None:
    """Locate and parse the recipe, or None if there is none.

    Raises:
        typer.Exit: If the recipe exists but can't be parsed
    """
    if tasks_file:
        recipe_path = Path(tasks_file)
        if not recipe_path.exists():
            logger.error(f"[red]Recipe file not found: {tasks_file}[/red]")
            raise typer.Exit(1)
    else:
        recipe_path = find_recipe_file()
        if recipe_path is None:
            return None

    try:
        return parse_recipe(recipe_path)
    except (OSError, yaml.YAMLError, RecipeError) as e:
        logger.error(f"[red]Error parsing recipe: {escape(str(e))}[/red]")
        raise typer.Exit(1)
