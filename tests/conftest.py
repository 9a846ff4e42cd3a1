"""Pytest fixtures for taskgraph tests."""

from pathlib import Path

import pytest

from helpers.logging import LoggerStub
from taskgraph.registry import TaskRegistry


@pytest.fixture
def logger() -> LoggerStub:
    """Provide a logger that records messages instead of printing them."""
    return LoggerStub()


@pytest.fixture
def registry(tmp_path: Path) -> TaskRegistry:
    """Provide an empty registry rooted at a temporary project directory."""
    return TaskRegistry(project_root=tmp_path)
