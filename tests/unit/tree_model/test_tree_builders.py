"""Tests for the flat text tree and the selectable directory tree."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from gptree.errors import FileAccessError
from gptree.tree_model import (
    DirectoryNode,
    build_directory_tree,
    build_ignore_policy,
    generate_tree_structure,
)


def _write(path: Path, text: str = "x\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _file_names_in_tree_text(tree_text: str) -> list[str]:
    names: list[str] = []
    for line in tree_text.splitlines()[1:]:
        name = line.split("── ", 1)[1]
        if not name.endswith("/"):
            names.append(name)
    return names


class TreeFixtureMixin:
    def make_project(self, root: Path) -> None:
        _write(root / "b_dir" / "z.py")
        _write(root / "b_dir" / "a.py")
        _write(root / "A_dir" / "inner.txt")
        _write(root / "c.txt")
        _write(root / "B.txt")
        (root / "empty").mkdir()


class TextTreeTests(TreeFixtureMixin, unittest.TestCase):
    def test_default_ignored_directory_never_appears(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _write(root / "a.txt", "0123456789")
            _write(root / ".git" / "x")

            tree = generate_tree_structure(root, build_ignore_policy(root, use_gitignore=False))

            self.assertEqual(tree.tree_text, ".\n└── a.txt")
            self.assertEqual(tree.file_list, (root / "a.txt",))

    def test_directories_first_then_case_sensitive_names_with_connectors(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self.make_project(root)

            tree = generate_tree_structure(root, build_ignore_policy(root, use_gitignore=False))

            self.assertEqual(
                tree.tree_text.splitlines(),
                [
                    ".",
                    "├── A_dir/",
                    "│   └── inner.txt",
                    "├── b_dir/",
                    "│   ├── a.py",
                    "│   └── z.py",
                    "├── empty/",
                    "├── B.txt",
                    "└── c.txt",
                ],
            )
            self.assertEqual(
                tree.file_list,
                (
                    root / "A_dir" / "inner.txt",
                    root / "b_dir" / "a.py",
                    root / "b_dir" / "z.py",
                    root / "B.txt",
                    root / "c.txt",
                ),
            )

    def test_last_directory_children_use_blank_padding(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _write(root / "only" / "deeper" / "leaf.md")

            tree = generate_tree_structure(root, build_ignore_policy(root, use_gitignore=False))

            self.assertEqual(
                tree.tree_text.splitlines(),
                [".", "└── only/", "    └── deeper/", "        └── leaf.md"],
            )

    def test_file_list_order_matches_tree_text_order(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self.make_project(root)
            _write(root / "A_dir" / "sub" / "deep.txt")

            tree = generate_tree_structure(root, build_ignore_policy(root, use_gitignore=False))

            self.assertEqual(_file_names_in_tree_text(tree.tree_text), [path.name for path in tree.file_list])

    def test_extension_filter_excludes_and_includes(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _write(root / "app.log")
            _write(root / "app.txt")

            tree = generate_tree_structure(
                root,
                build_ignore_policy(root, use_gitignore=False, include_file_types="*", exclude_file_types=[".log"]),
            )

            self.assertEqual(tree.file_list, (root / "app.txt",))
            self.assertNotIn("app.log", tree.tree_text)

    def test_gitignore_rules_hide_entries_when_enabled(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _write(root / ".gitignore", "build/\n*.log\n")
            _write(root / "build" / "out.txt")
            _write(root / "debug.log")
            _write(root / "main.py")

            tree = generate_tree_structure(root, build_ignore_policy(root, use_gitignore=True))
            self.assertEqual(tree.tree_text, ".\n└── main.py")

            shown = generate_tree_structure(root, build_ignore_policy(root, use_gitignore=True, show_ignored=True))
            self.assertIn("├── build/", shown.tree_text)
            self.assertIn(root / "debug.log", shown.file_list)
            self.assertIn(root / ".gitignore", shown.file_list)

    def test_show_default_ignored_reveals_vcs_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _write(root / ".git" / "HEAD")
            _write(root / "a.txt")

            tree = generate_tree_structure(
                root,
                build_ignore_policy(root, use_gitignore=False, show_default_ignored=True),
            )

            self.assertEqual(tree.tree_text.splitlines(), [".", "├── .git/", "│   └── HEAD", "└── a.txt"])

    def test_explicitly_excluded_directory_is_dropped_with_subtree(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self.make_project(root)

            tree = generate_tree_structure(
                root,
                build_ignore_policy(root, use_gitignore=False, excluded_dirs=["b_dir"]),
            )

            self.assertNotIn("b_dir", tree.tree_text)
            self.assertNotIn(root / "b_dir" / "a.py", tree.file_list)

    def test_unreadable_subdirectory_is_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self.make_project(root)
            locked = root / "b_dir"
            real_scandir = os.scandir

            def fake_scandir(path):
                if Path(path) == locked:
                    raise PermissionError(13, "Permission denied", str(path))
                return real_scandir(path)

            with mock.patch("gptree.tree_model.build.os.scandir", side_effect=fake_scandir):
                tree = generate_tree_structure(root, build_ignore_policy(root, use_gitignore=False))

            self.assertIn("├── b_dir/", tree.tree_text)
            self.assertNotIn(root / "b_dir" / "a.py", tree.file_list)
            self.assertIn(root / "c.txt", tree.file_list)

    def test_directory_symlink_back_to_root_is_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _write(root / "a.txt")
            os.symlink(root, root / "loop", target_is_directory=True)
            policy = build_ignore_policy(root, use_gitignore=False)

            tree = generate_tree_structure(root, policy)
            nested = build_directory_tree(root, policy)

            self.assertEqual(tree.tree_text, ".\n└── a.txt")
            self.assertEqual([child.name for child in nested.children], ["a.txt"])

    def test_unreadable_root_is_fatal(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp).resolve() / "missing"
            with self.assertRaises(FileAccessError):
                generate_tree_structure(missing, build_ignore_policy(missing, use_gitignore=False))


class DirectoryTreeTests(TreeFixtureMixin, unittest.TestCase):
    def test_empty_directories_are_pruned(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self.make_project(root)
            (root / "A_dir" / "hollow" / "inner").mkdir(parents=True)

            tree = build_directory_tree(root, build_ignore_policy(root, use_gitignore=False))

            self.assertEqual(tree.path, root)
            self.assertTrue(tree.is_dir)
            self.assertEqual([child.name for child in tree.children], ["A_dir", "b_dir", "B.txt", "c.txt"])
            a_dir = tree.children[0]
            self.assertEqual([child.name for child in a_dir.children], ["inner.txt"])

    def test_leaf_order_matches_text_tree(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self.make_project(root)
            _write(root / "A_dir" / "sub" / "deep.txt")
            policy = build_ignore_policy(root, use_gitignore=False)

            flat = generate_tree_structure(root, policy)
            nested = build_directory_tree(root, policy)

            self.assertEqual(tuple(node.path for node in nested.iter_files()), flat.file_list)

    def test_explicitly_excluded_directories_are_kept_and_flagged(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self.make_project(root)

            tree = build_directory_tree(
                root,
                build_ignore_policy(root, use_gitignore=False, excluded_dirs=["b_dir", "empty"]),
            )

            by_name = {child.name: child for child in tree.children}
            self.assertTrue(by_name["b_dir"].is_excluded_by_config)
            self.assertEqual([child.name for child in by_name["b_dir"].children], ["a.py", "z.py"])
            self.assertTrue(by_name["empty"].is_excluded_by_config)
            self.assertEqual(by_name["empty"].children, ())
            self.assertFalse(by_name["A_dir"].is_excluded_by_config)

    def test_as_dict_is_json_ready(self) -> None:
        node = DirectoryNode(
            name="root",
            path=Path("/root"),
            is_dir=True,
            children=(DirectoryNode(name="a.txt", path=Path("/root/a.txt"), is_dir=False),),
        )

        self.assertEqual(
            node.as_dict(),
            {
                "name": "root",
                "path": "/root",
                "is_dir": True,
                "is_excluded_by_config": False,
                "children": [
                    {
                        "name": "a.txt",
                        "path": "/root/a.txt",
                        "is_dir": False,
                        "is_excluded_by_config": False,
                        "children": [],
                    }
                ],
            },
        )

    def test_unreadable_root_is_fatal(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp).resolve() / "missing"
            with self.assertRaises(FileAccessError):
                build_directory_tree(missing, build_ignore_policy(missing, use_gitignore=False))


if __name__ == "__main__":
    unittest.main()
