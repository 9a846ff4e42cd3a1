"""Logging infrastructure for taskgraph.

Provides the Logger interface used for dependency injection of console output.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod


class LogLevel(enum.Enum):
    """Log verbosity levels for taskgraph diagnostic messages.

    Lower numeric values represent higher severity / less verbosity.
    """
    FATAL = 0  # Only unrecoverable errors (malformed recipes, cycles)
    ERROR = 1  # Fatal errors plus task action failures
    WARN = 2   # Errors plus warnings about configuration issues
    INFO = 3   # Warnings plus normal execution progress (default)
    DEBUG = 4  # Info plus skipped tasks, resolved plans and commands
    TRACE = 5  # Debug plus environment overrides passed to actions


def parse_log_level(value: str) -> LogLevel:
    """Parse a case-insensitive log level name.

    Raises:
        ValueError: If the name is not a known level
    """
    try:
        return LogLevel[value.strip().upper()]
    except KeyError:
        valid = ", ".join(level.name.lower() for level in LogLevel)
        raise ValueError(f"Invalid log level '{value}' (expected one of: {valid})") from None


class Logger(ABC):
    """Abstract logger with level filtering and a stack of active levels."""

    @abstractmethod
    def log(self, level: LogLevel = LogLevel.INFO, *args, **kwargs) -> None:
        ...

    @abstractmethod
    def push_level(self, level: LogLevel) -> None:
        ...

    @abstractmethod
    def pop_level(self) -> LogLevel:
        ...

    def fatal(self, *args, **kwargs) -> None:
        self.log(LogLevel.FATAL, *args, **kwargs)

    def error(self, *args, **kwargs) -> None:
        self.log(LogLevel.ERROR, *args, **kwargs)

    def warn(self, *args, **kwargs) -> None:
        self.log(LogLevel.WARN, *args, **kwargs)

    def info(self, *args, **kwargs) -> None:
        self.log(LogLevel.INFO, *args, **kwargs)

    def debug(self, *args, **kwargs) -> None:
        self.log(LogLevel.DEBUG, *args, **kwargs)

    def trace(self, *args, **kwargs) -> None:
        self.log(LogLevel.TRACE, *args, **kwargs)
