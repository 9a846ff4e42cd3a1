from rich.console import Console

from taskgraph.logging import Logger, LogLevel

# Levels written to the error console when one is configured
ERROR_LEVELS = (LogLevel.FATAL, LogLevel.ERROR)


class ConsoleLogger(Logger):
    """Rich-backed logger for the taskgraph CLI.

    Messages more verbose than the current level are dropped. Fatal and
    error messages go to ``error_console`` when one is given.
    """

    def __init__(
        self,
        console: Console,
        level: LogLevel = LogLevel.INFO,
        error_console: Console | None = None,
    ) -> None:
        self._console = console
        self._error_console = error_console or console
        self._levels = [level]

    def log(self, level: LogLevel = LogLevel.INFO, *args, **kwargs) -> None:
        """Print ``args`` with ``Console.print`` if ``level`` is enabled."""
        if self._levels[-1].value < level.value:
            return
        console = self._error_console if level in ERROR_LEVELS else self._console
        console.print(*args, **kwargs)

    def push_level(self, level: LogLevel) -> None:
        """Temporarily switch to ``level`` until the matching ``pop_level``."""
        self._levels.append(level)

    def pop_level(self) -> LogLevel:
        """Restore the previous level.

        Raises:
            RuntimeError: If only the level given at construction remains
        """
        if len(self._levels) <= 1:
            raise RuntimeError("Cannot pop the base log level")
        return self._levels.pop()
