"""Initialize a new taskgraph recipe file."""

from __future__ import annotations

from pathlib import Path

import typer

from taskgraph.logging import Logger

TEMPLATE = """# taskgraph recipe
#
# Each task lists its prerequisites (task names or files), an optional
# action, and an optional doc string. Documented tasks appear in `tg help`.

default: all

tasks:
  all:
    doc: run test, doc and build target
    deps: []  # e.g. [build, test]

  # Environment bootstrap is an ordinary file task: it reruns only when the
  # requirements manifest is newer than the environment.
  # .venv/bin/activate:
  #   doc: prepare the python environment.
  #   deps: [requirements.txt]
  #   cmd: python -m venv .venv && .venv/bin/pip install -r requirements.txt

  # build:
  #   doc: build the code.
  #   deps: ["src/**/*.c"]
  #   output: build/app
  #   cmd: [make, -C, build]

  # test:
  #   doc: run all the test cases.
  #   phony: true
  #   deps: [build]
  #   env: {LOG_LEVEL: debug}
  #   cmd: ./build/app --self-test

  # clean:
  #   doc: remove all build files.
  #   phony: true
  #   cmd: rm -rf build
"""


def init_recipe(logger: Logger) -> None:
    """
    Create a starter recipe file with commented examples.
    """
    recipe_path = Path("taskgraph.yaml")
    if recipe_path.exists():
        logger.error("[red]taskgraph.yaml already exists[/red]")
        raise typer.Exit(1)

    recipe_path.write_text(TEMPLATE)
    logger.info(f"[green]Created {recipe_path}[/green]")
    logger.info("Edit the file to define your tasks")
