"""Directory filtering and tree construction.

Provides the ignore policy, the flat text tree with its ordered file list,
and the selectable ``DirectoryNode`` tree. Both builders share one scanner so
they visit entries in the same order.
"""

from __future__ import annotations

from .build import build_directory_tree, child_sort_key, scan_directory, scan_root
from .policy import (
    DEFAULT_IGNORES,
    INCLUDE_ALL,
    IgnorePolicy,
    build_ignore_policy,
    is_default_ignored,
    normalize_relative_dir,
    parse_file_types,
)
from .rendering import generate_tree_structure
from .types import DirectoryChild, DirectoryNode, TreeStructure

__all__ = [
    "DEFAULT_IGNORES",
    "INCLUDE_ALL",
    "DirectoryChild",
    "DirectoryNode",
    "IgnorePolicy",
    "TreeStructure",
    "build_directory_tree",
    "build_ignore_policy",
    "child_sort_key",
    "generate_tree_structure",
    "is_default_ignored",
    "normalize_relative_dir",
    "parse_file_types",
    "scan_directory",
    "scan_root",
]
