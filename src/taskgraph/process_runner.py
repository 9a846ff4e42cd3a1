"""Process execution abstraction layer.

This module provides the interface used to run task actions as child
processes, allowing for better testability and dependency injection.
"""

from __future__ import annotations

import os
import subprocess
import sys
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from threading import Thread
from typing import Any, Mapping

from taskgraph.logging import Logger

__all__ = [
    "COMMAND_NOT_EXECUTABLE_EXIT_CODE",
    "COMMAND_NOT_FOUND_EXIT_CODE",
    "ProcessRunner",
    "PassthroughProcessRunner",
    "SilentProcessRunner",
    "StdoutOnlyProcessRunner",
    "StderrOnlyProcessRunner",
    "TaskOutputTypes",
    "build_environment",
    "make_process_runner",
    "stream_output",
]

# Exit status reported when the action's executable can't be launched
COMMAND_NOT_FOUND_EXIT_CODE = 127
COMMAND_NOT_EXECUTABLE_EXIT_CODE = 126


class TaskOutputTypes(Enum):
    """Enum defining task output control modes."""

    ALL = "all"
    NONE = "none"
    OUT = "out"
    ERR = "err"


def build_environment(overrides: Mapping[str, str] | None = None) -> dict[str, str]:
    """Merge environment overrides over a copy of the ambient environment.

    Overrides win on key collision. The ambient ``os.environ`` is not modified.
    """
    env = dict(os.environ)
    if overrides:
        env.update({str(k): str(v) for k, v in overrides.items()})
    return env


def stream_output(pipe: Any, target: Any) -> None:
    """
    Stream output from a pipe to a target stream, line by line.

    If the pipe is closed or an error occurs during reading/writing,
    the function returns without raising an exception.

    Args:
        pipe: Input pipe to read from
        target: Output stream to write to
    """
    if pipe:
        try:
            for line in pipe:
                target.write(line)
                target.flush()
        except (OSError, ValueError):
            # Pipe closed; expected when the child exits or stdout is closed
            pass


class ProcessRunner(ABC):
    """Abstract interface for running task actions."""

    def __init__(self, logger: Logger) -> None:
        self._logger = logger

    @abstractmethod
    def run(
        self,
        cmd: list[str],
        cwd: Path,
        env: Mapping[str, str] | None = None,
    ) -> int:
        """
        Run a command to completion.

        Args:
            cmd: Command and arguments
            cwd: Working directory for the child
            env: Environment overrides merged over the ambient environment

        Returns:
            The child's exit status
        """
        ...


class _StreamingProcessRunner(ProcessRunner):
    """Runs a child with its selected streams forwarded live by reader threads."""

    forward_stdout = True
    forward_stderr = True

    def run(
        self,
        cmd: list[str],
        cwd: Path,
        env: Mapping[str, str] | None = None,
    ) -> int:
        self._logger.debug(f"[dim]$ {subprocess.list2cmdline(cmd)}[/dim]")
        if env:
            for key, value in env.items():
                self._logger.trace(f"[dim]  {key}={value}[/dim]")

        try:
            process = subprocess.Popen(
                cmd,
                cwd=cwd,
                env=build_environment(env),
                stdout=subprocess.PIPE if self.forward_stdout else subprocess.DEVNULL,
                stderr=subprocess.PIPE if self.forward_stderr else subprocess.DEVNULL,
                text=True,
                errors="replace",
                bufsize=1,
            )
        except FileNotFoundError:
            self._logger.error(f"[red]Command not found: {cmd[0]}[/red]")
            return COMMAND_NOT_FOUND_EXIT_CODE
        except PermissionError:
            self._logger.error(f"[red]Command not executable: {cmd[0]}[/red]")
            return COMMAND_NOT_EXECUTABLE_EXIT_CODE

        threads = []
        if self.forward_stdout:
            threads.append(
                Thread(target=stream_output, args=(process.stdout, sys.stdout), name="stdout-streamer")
            )
        if self.forward_stderr:
            threads.append(
                Thread(target=stream_output, args=(process.stderr, sys.stderr), name="stderr-streamer")
            )

        # The context manager closes the pipes and reaps the child on every exit path
        with process:
            for thread in threads:
                thread.start()
            try:
                return_code = process.wait()
            finally:
                for thread in threads:
                    thread.join()

        return return_code


class PassthroughProcessRunner(_StreamingProcessRunner):
    """Process runner that forwards both stdout and stderr."""


class StdoutOnlyProcessRunner(_StreamingProcessRunner):
    """Process runner that streams stdout while suppressing stderr."""

    forward_stderr = False


class StderrOnlyProcessRunner(_StreamingProcessRunner):
    """Process runner that streams stderr while suppressing stdout."""

    forward_stdout = False


class SilentProcessRunner(_StreamingProcessRunner):
    """Process runner that suppresses all child output."""

    forward_stdout = False
    forward_stderr = False


def make_process_runner(output_type: TaskOutputTypes, logger: Logger) -> ProcessRunner:
    """
    Factory function for creating ProcessRunner instances.

    Raises:
        ValueError: If an invalid TaskOutputTypes value is provided
    """
    match output_type:
        case TaskOutputTypes.ALL:
            return PassthroughProcessRunner(logger)
        case TaskOutputTypes.NONE:
            return SilentProcessRunner(logger)
        case TaskOutputTypes.OUT:
            return StdoutOnlyProcessRunner(logger)
        case TaskOutputTypes.ERR:
            return StderrOnlyProcessRunner(logger)
        case _:
            raise ValueError(f"Invalid TaskOutputTypes: {output_type}")
