"""Integration tests for the non-executing CLI commands."""

import os
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from typer.testing import CliRunner

from helpers.io import strip_ansi_codes
from taskgraph import __version__
from taskgraph.cli import app
from taskgraph.config import PROJECT_CONFIG_FILENAME

RECIPE = """
default: all
tasks:
  all:
    doc: run test, doc and build target
    deps: [build, test]
  build:
    doc: build the code.
    deps: [src.txt]
    output: out.txt
    cmd: [build-tool-that-does-not-exist]
  test:
    doc: run all the test cases.
    phony: true
    cmd: [test-tool-that-does-not-exist]
  internal-helper:
    phony: true
    cmd: [helper-tool-that-does-not-exist]
"""


class TestCliCommands(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()
        self.env = {"NO_COLOR": "1", "COLUMNS": "200"}
        self._tmpdir = TemporaryDirectory()
        self.root = Path(self._tmpdir.name).resolve()
        self._original_cwd = os.getcwd()
        os.chdir(self.root)

    def tearDown(self):
        os.chdir(self._original_cwd)
        self._tmpdir.cleanup()

    def write_recipe(self, text: str = RECIPE) -> None:
        (self.root / "taskgraph.yaml").write_text(text)
        (self.root / "src.txt").write_text("source")

    def invoke(self, *args):
        result = self.runner.invoke(app, list(args), env=self.env)
        return result, strip_ansi_codes(result.output)

    def test_help_pseudo_target_lists_documented_tasks(self):
        self.write_recipe()

        result, output = self.invoke("help")

        self.assertEqual(result.exit_code, 0, output)
        self.assertIn("run test, doc and build target", output)
        self.assertIn("run all the test cases.", output)
        self.assertNotIn("internal-helper", output)
        names = [line.split()[0] for line in output.splitlines() if line.strip()]
        self.assertEqual(names, ["all", "build", "test"])

    def test_list_option_matches_help(self):
        self.write_recipe()

        _, help_output = self.invoke("help")
        result, list_output = self.invoke("--list")

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(help_output, list_output)

    def test_task_named_help_takes_precedence(self):
        self.write_recipe(
            """
tasks:
  help:
    phony: true
    cmd: [help-tool-that-does-not-exist]
"""
        )

        result, _ = self.invoke("help")
        self.assertEqual(result.exit_code, 127)

    def test_dry_run_runs_nothing(self):
        self.write_recipe()

        result, output = self.invoke("--dry-run", "all")

        self.assertEqual(result.exit_code, 0, output)
        self.assertIn("Execution plan for 'all'", output)
        self.assertIn("output_missing", output)
        self.assertIn("phony", output)
        self.assertNotIn("Command not found", output)

    def test_dry_run_uses_default_target(self):
        self.write_recipe()

        result, output = self.invoke("-n")
        self.assertEqual(result.exit_code, 0, output)
        self.assertIn("Execution plan for 'all'", output)

    def test_tree(self):
        self.write_recipe()

        result, output = self.invoke("--tree", "all")

        self.assertEqual(result.exit_code, 0, output)
        self.assertIn("build (stale: output_missing)", output)
        self.assertIn("test (phony)", output)
        self.assertIn("src.txt", output)

    def test_missing_executable_exits_127(self):
        self.write_recipe()

        result, output = self.invoke("test")
        self.assertEqual(result.exit_code, 127)
        self.assertIn("Command not found", output)

    def test_no_recipe(self):
        result, output = self.invoke("build")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("No recipe file found", output)

    def test_recipe_file_option(self):
        other = self.root / "elsewhere"
        other.mkdir()
        (other / "custom.yaml").write_text("tasks:\n  x:\n    doc: the x task\n")

        result, output = self.invoke("--file", str(other / "custom.yaml"), "--list")
        self.assertEqual(result.exit_code, 0, output)
        self.assertIn("the x task", output)

    def test_malformed_recipe(self):
        (self.root / "taskgraph.yaml").write_text("tasks:\n  x: [not, a, mapping]\n")

        result, output = self.invoke("x")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error parsing recipe", output)

    def test_init_creates_recipe(self):
        result, output = self.invoke("--init")

        self.assertEqual(result.exit_code, 0, output)
        self.assertTrue((self.root / "taskgraph.yaml").exists())

        result, _ = self.invoke("--init")
        self.assertEqual(result.exit_code, 1)

    def test_init_template_is_runnable(self):
        self.invoke("--init")

        result, output = self.invoke()
        self.assertEqual(result.exit_code, 0, output)

    def test_version(self):
        result, output = self.invoke("--version")
        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, output)

    def test_log_level_accepts_all_levels(self):
        self.write_recipe()
        for level in ["fatal", "error", "warn", "info", "debug", "trace", "DEBUG"]:
            result, output = self.invoke("--log-level", level, "--dry-run")
            self.assertEqual(result.exit_code, 0, f"{level}: {output}")

    def test_invalid_log_level(self):
        self.write_recipe()
        result, _ = self.invoke("--log-level", "loud", "all")
        self.assertNotEqual(result.exit_code, 0)

    def test_invalid_env_option(self):
        self.write_recipe()
        result, _ = self.invoke("--env", "NOEQUALS", "all")
        self.assertNotEqual(result.exit_code, 0)

    def test_debug_level_shows_skips(self):
        self.write_recipe()
        (self.root / "out.txt").write_text("built")
        os.utime(self.root / "src.txt", (1_000_000, 1_000_000))

        result, output = self.invoke("--log-level", "debug", "build")

        self.assertEqual(result.exit_code, 0, output)
        self.assertIn("Skipping 'build' (fresh)", output)

    def test_project_config_sets_log_level(self):
        self.write_recipe()
        (self.root / PROJECT_CONFIG_FILENAME).write_text("log_level: error\n")

        result, output = self.invoke("--version")
        self.assertEqual(result.exit_code, 0)

        result, output = self.invoke("--list")
        self.assertEqual(result.exit_code, 0)
        self.assertNotIn("run all the test cases.", output)

    def test_invalid_project_config(self):
        self.write_recipe()
        (self.root / PROJECT_CONFIG_FILENAME).write_text("bogus: 1\n")

        result, output = self.invoke("--list")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("unknown key", output)


if __name__ == "__main__":
    unittest.main()
