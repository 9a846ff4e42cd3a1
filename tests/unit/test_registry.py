"""Tests for registry module."""

import unittest
from pathlib import Path

from taskgraph.registry import FileRef, Task, TaskRegistry, shell_command


class TestTask(unittest.TestCase):
    def test_output_defaults_to_task_name(self):
        """A task without a declared output uses its own name as the output path."""
        task = Task(name="build/app", action=["make"])
        self.assertEqual(task.output_path, "build/app")

    def test_declared_output_wins(self):
        task = Task(name="build", action=["make"], output="out/app")
        self.assertEqual(task.output_path, "out/app")

    def test_single_prerequisite_is_wrapped_in_list(self):
        task = Task(name="build", prerequisites="lint")
        self.assertEqual(task.prerequisites, ["lint"])

    def test_string_action_runs_through_shell(self):
        task = Task(name="all", action="make all")
        self.assertEqual(task.action, shell_command("make all"))
        self.assertEqual(task.action[-1], "make all")

    def test_defaults(self):
        task = Task(name="group")
        self.assertIsNone(task.action)
        self.assertFalse(task.phony)
        self.assertIsNone(task.doc)
        self.assertEqual(task.env, {})
        self.assertEqual(task.working_dir, ".")


class TestFileRef(unittest.TestCase):
    def test_plain_path_is_not_glob(self):
        self.assertFalse(FileRef("src/main.rs").is_glob)

    def test_glob_pattern(self):
        self.assertTrue(FileRef("src/**/*.rs").is_glob)
        self.assertTrue(FileRef("file?.txt").is_glob)
        self.assertTrue(FileRef("file[0-9].txt").is_glob)


class TestTaskRegistry(unittest.TestCase):
    def setUp(self):
        self.registry = TaskRegistry(project_root=Path("/project"))

    def test_define_and_lookup(self):
        task = Task(name="build", action=["make"])
        self.registry.define(task)
        self.assertIs(self.registry.lookup("build"), task)

    def test_lookup_missing_returns_none(self):
        self.assertIsNone(self.registry.lookup("missing"))

    def test_redefinition_replaces_without_duplicating(self):
        self.registry.define(Task(name="build", action=["make"]))
        replacement = Task(name="build", action=["ninja"])
        self.registry.define(replacement)

        self.assertEqual(len(self.registry), 1)
        self.assertIs(self.registry.lookup("build"), replacement)

    def test_all_preserves_declaration_order(self):
        for name in ["zeta", "alpha", "mid"]:
            self.registry.define(Task(name=name))

        self.assertEqual([t.name for t in self.registry.all()], ["zeta", "alpha", "mid"])

    def test_redefinition_keeps_original_position(self):
        for name in ["a", "b", "c"]:
            self.registry.define(Task(name=name))
        self.registry.define(Task(name="a", doc="again"))

        self.assertEqual(self.registry.names(), ["a", "b", "c"])
        self.assertEqual(self.registry.lookup("a").doc, "again")

    def test_contains(self):
        self.registry.define(Task(name="build"))
        self.assertIn("build", self.registry)
        self.assertNotIn("test", self.registry)

    def test_default_is_first_declared_task(self):
        self.registry.define(Task(name="all"))
        self.registry.define(Task(name="build"))
        self.assertEqual(self.registry.default(), "all")

    def test_explicit_default_wins(self):
        registry = TaskRegistry(project_root=Path("/project"), default_target="build")
        registry.define(Task(name="all"))
        registry.define(Task(name="build"))
        self.assertEqual(registry.default(), "build")

    def test_default_of_empty_registry_is_none(self):
        self.assertIsNone(self.registry.default())

    def test_resolve_path_is_relative_to_project_root(self):
        self.assertEqual(self.registry.resolve_path("src/a.c"), Path("/project/src/a.c"))


if __name__ == "__main__":
    unittest.main()
