"""
Configuration file parsing for taskgraph defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import platformdirs
import yaml

from taskgraph.logging import LogLevel, parse_log_level
from taskgraph.process_runner import TaskOutputTypes

__all__ = [
    "Config",
    "ConfigError",
    "PROJECT_CONFIG_FILENAME",
    "find_project_config",
    "get_machine_config_path",
    "get_user_config_path",
    "load_config",
    "parse_config_file",
]

PROJECT_CONFIG_FILENAME = ".taskgraph-config.yml"


class ConfigError(Exception):
    """
    Raised when a configuration file is invalid.
    """

    pass


@dataclass
class Config:
    """Settings read from configuration files. ``None`` means unset."""

    log_level: Optional[LogLevel] = None
    output: Optional[TaskOutputTypes] = None
    env: dict[str, str] = field(default_factory=dict)

    def merged_with(self, other: "Config") -> "Config":
        """Return a config where set values from ``other`` win; env maps merge."""
        env = dict(self.env)
        env.update(other.env)
        return Config(
            log_level=other.log_level if other.log_level is not None else self.log_level,
            output=other.output if other.output is not None else self.output,
            env=env,
        )


def get_machine_config_path() -> Path:
    """
    Get the path to the machine-level (system-wide) configuration file.

    Uses platformdirs to determine the site config directory for the current
    platform, then appends 'taskgraph/config.yml'.
    """
    config_dir = Path(platformdirs.site_config_dir("taskgraph"))
    return config_dir / "config.yml"


def get_user_config_path() -> Path:
    """
    Get the path to the user-level configuration file.
    """
    config_dir: Path = Path(platformdirs.user_config_dir("taskgraph"))
    return config_dir / "config.yml"


def find_project_config(start_dir: Path) -> Optional[Path]:
    """
    Walk up the directory tree from start_dir to find .taskgraph-config.yml.

    Args:
        start_dir: Directory to start searching from

    Returns:
        Path to the project config if found, None otherwise
    """
    try:
        current = start_dir.resolve()
    except (OSError, RuntimeError):
        # resolve() can raise OSError on invalid paths or RuntimeError on symlink loops
        return None

    # Maximum depth guards against pathological directory structures
    max_depth = 100
    for _ in range(max_depth):
        config_path = current / PROJECT_CONFIG_FILENAME
        try:
            if config_path.exists():
                return config_path
        except OSError:
            # Can't check this directory; continue up the tree
            pass

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def parse_config_file(path: Path) -> Config:
    """
    Parse a taskgraph configuration file.

    Missing or empty files are valid and yield an empty Config.

    Config file example:

        ```yaml
        log_level: debug
        output: all
        env:
          RUST_BACKTRACE: "1"
        ```

    Raises:
        ConfigError: If the config file is invalid (malformed YAML, unknown
                     keys, wrong value types)
    """
    if not path.exists():
        return Config()

    try:
        with open(path, "r") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(f"Error reading config file '{path}': {e}") from e

    if not content.strip():
        return Config()

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML in config file '{path}': {e}") from e

    if data is None:
        return Config()

    if not isinstance(data, dict):
        raise ConfigError(f"Error in config file '{path}': top level must be a dictionary")

    unknown = set(data) - {"log_level", "output", "env"}
    if unknown:
        raise ConfigError(
            f"Error in config file '{path}': unknown key(s): {', '.join(sorted(unknown))}"
        )

    config = Config()

    if "log_level" in data:
        if not isinstance(data["log_level"], str):
            raise ConfigError(f"Error in config file '{path}': Field 'log_level' must be a string")
        try:
            config.log_level = parse_log_level(data["log_level"])
        except ValueError as e:
            raise ConfigError(f"Error in config file '{path}': {e}") from e

    if "output" in data:
        try:
            config.output = TaskOutputTypes(str(data["output"]).lower())
        except ValueError as e:
            valid = ", ".join(t.value for t in TaskOutputTypes)
            raise ConfigError(
                f"Error in config file '{path}': Field 'output' must be one of: {valid}"
            ) from e

    env = data.get("env", {})
    if not isinstance(env, dict):
        raise ConfigError(f"Error in config file '{path}': Field 'env' must be a dictionary")
    config.env = {str(k): "" if v is None else str(v) for k, v in env.items()}

    return config


def load_config(project_dir: Path) -> Config:
    """
    Load and merge machine, user and project configuration, in that order.

    Raises:
        ConfigError: If any of the files is invalid
    """
    config = Config()
    paths = [get_machine_config_path(), get_user_config_path()]
    project_config = find_project_config(project_dir)
    if project_config is not None:
        paths.append(project_config)

    for path in paths:
        config = config.merged_with(parse_config_file(path))

    return config
