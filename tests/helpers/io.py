"""I/O helper functions for tests."""

import os
import re
from pathlib import Path


def strip_ansi_codes(text: str) -> str:
    """
    Remove ANSI escape sequences from text.
    """
    ansi_escape = re.compile(r"\x1b\[[0-9;]*m")
    return ansi_escape.sub("", text)


def write_file(path: Path, content: str = "", mtime: float | None = None) -> Path:
    """Create a file (and its parents), optionally pinning its modification time."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    if mtime is not None:
        set_mtime(path, mtime)
    return path


def set_mtime(path: Path, mtime: float) -> None:
    os.utime(path, (mtime, mtime))
