"""Test helpers for ProcessRunner mocking."""

from pathlib import Path
from typing import Callable, Mapping

from taskgraph.process_runner import ProcessRunner


class MockProcessRunner(ProcessRunner):
    """
    Mock ProcessRunner for testing.

    Records all run() calls and returns configurable exit codes, keyed by the
    command joined with spaces. An optional side effect runs before returning,
    e.g. to create a task's output file.
    """

    def __init__(
        self,
        exit_codes: Mapping[str, int] | None = None,
        side_effect: Callable[[list[str], Path], None] | None = None,
    ):
        super().__init__(logger=None)
        self.exit_codes = dict(exit_codes or {})
        self.side_effect = side_effect
        self.calls = []

    def run(self, cmd, cwd, env=None) -> int:
        self.calls.append({"cmd": list(cmd), "cwd": cwd, "env": dict(env or {})})
        if self.side_effect is not None:
            self.side_effect(cmd, cwd)
        return self.exit_codes.get(" ".join(cmd), 0)

    @property
    def commands(self) -> list[str]:
        return [" ".join(call["cmd"]) for call in self.calls]

    def factory(self, _output_type, _logger) -> "MockProcessRunner":
        """Use as the Executor's process runner factory."""
        return self
