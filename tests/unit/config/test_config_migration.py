"""Tests for ordered config schema upgrades."""

from __future__ import annotations

import unittest

from gptree.config import CONFIG_VERSION, Config, ConfigScope, migrate_config


class MigrationTests(unittest.TestCase):
    def test_version_zero_project_clears_selection_and_toggles(self) -> None:
        old = Config(
            version=0,
            previous_files=("a.py",),
            show_ignored_in_tree=True,
            show_default_ignored_in_tree=True,
            safe_mode=False,
        )

        migrated = migrate_config(old, ConfigScope.PROJECT)

        self.assertEqual(migrated.version, CONFIG_VERSION)
        self.assertEqual(migrated.previous_files, ())
        self.assertFalse(migrated.show_ignored_in_tree)
        self.assertFalse(migrated.show_default_ignored_in_tree)
        self.assertFalse(migrated.safe_mode)

    def test_version_zero_global_keeps_last_directory(self) -> None:
        migrated = migrate_config(Config(version=0, last_directory="/x"), ConfigScope.GLOBAL)

        self.assertEqual(migrated.version, CONFIG_VERSION)
        self.assertEqual(migrated.last_directory, "/x")

    def test_version_one_resets_tree_toggles_only(self) -> None:
        old = Config(
            version=1,
            previous_files=("a.py",),
            show_ignored_in_tree=True,
            show_default_ignored_in_tree=True,
        )

        migrated = migrate_config(old, ConfigScope.PROJECT)

        self.assertEqual(migrated.version, 2)
        self.assertEqual(migrated.previous_files, ("a.py",))
        self.assertFalse(migrated.show_ignored_in_tree)
        self.assertFalse(migrated.show_default_ignored_in_tree)

    def test_current_version_is_unchanged(self) -> None:
        config = Config(show_ignored_in_tree=True, previous_files=("a.py",))

        self.assertIs(migrate_config(config, ConfigScope.PROJECT), config)

    def test_newer_version_is_left_alone(self) -> None:
        config = Config(version=CONFIG_VERSION + 5, show_ignored_in_tree=True)

        self.assertEqual(migrate_config(config, ConfigScope.GLOBAL), config)

    def test_migration_is_idempotent_and_never_lowers_version(self) -> None:
        for version in range(0, CONFIG_VERSION + 2):
            for scope in ConfigScope:
                with self.subTest(version=version, scope=scope):
                    config = Config(version=version, show_ignored_in_tree=True, previous_files=("x",))
                    once = migrate_config(config, scope)
                    self.assertGreaterEqual(once.version, version)
                    self.assertEqual(migrate_config(once, scope), once)


if __name__ == "__main__":
    unittest.main()
