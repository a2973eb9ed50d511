"""Flat ASCII tree rendering with the matching file list."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .build import scan_directory, scan_root
from .policy import IgnorePolicy
from .types import DirectoryChild, TreeStructure

logger = logging.getLogger(__name__)

ROOT_LINE = "."
TEE = "├── "
CORNER = "└── "
PIPE_INDENT = "│   "
BLANK_INDENT = "    "


@dataclass
class _RenderedBranch:
    """Lines and files produced by one directory's subtree."""

    lines: list[str] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)

    def extend(self, other: _RenderedBranch) -> None:
        self.lines.extend(other.lines)
        self.files.extend(other.files)


def _render_children(
    children: list[DirectoryChild],
    policy: IgnorePolicy,
    prefix: str,
) -> _RenderedBranch:
    branch = _RenderedBranch()
    last_index = len(children) - 1
    for index, child in enumerate(children):
        is_last = index == last_index
        name = f"{child.name}/" if child.is_dir else child.name
        branch.lines.append(f"{prefix}{CORNER if is_last else TEE}{name}")
        if not child.is_dir:
            branch.files.append(child.path)
            continue

        grandchildren, scan_error = scan_directory(child.path, policy, drop_excluded=True)
        if scan_error is not None:
            logger.debug("Skipping unreadable directory %s: %s", child.path, scan_error)
        child_prefix = prefix + (BLANK_INDENT if is_last else PIPE_INDENT)
        branch.extend(_render_children(grandchildren, policy, child_prefix))
    return branch


def generate_tree_structure(root: Path, policy: IgnorePolicy) -> TreeStructure:
    """Render the text tree for ``root`` and collect visible files in order.

    Explicitly excluded directories are dropped with their whole subtree.
    Raises ``FileAccessError`` when ``root`` cannot be listed.
    """
    root = root.resolve()
    branch = _render_children(scan_root(root, policy, drop_excluded=True), policy, "")
    return TreeStructure(
        tree_text="\n".join([ROOT_LINE, *branch.lines]),
        file_list=tuple(branch.files),
    )


__all__ = [
    "BLANK_INDENT",
    "CORNER",
    "PIPE_INDENT",
    "ROOT_LINE",
    "TEE",
    "generate_tree_structure",
]
