"""CLI command implementations and shared utilities."""

from __future__ import annotations

import os
import sys


def _supports_unicode() -> bool:
    """Check whether stdout can encode the status symbols."""
    # Classic Windows console (conhost) renders them as garbage
    if os.name == "nt" and "WT_SESSION" not in os.environ:
        return False

    encoding = sys.stdout.encoding
    if not encoding:
        return False

    try:
        "✓✗".encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def success_marker() -> str:
    return "✓" if _supports_unicode() else "[ OK ]"


def failure_marker() -> str:
    return "✗" if _supports_unicode() else "[ FAIL ]"

