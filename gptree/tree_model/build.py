"""Directory scanning and selectable-tree construction."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..errors import FileAccessError
from .policy import IgnorePolicy
from .types import DirectoryChild, DirectoryNode

logger = logging.getLogger(__name__)


def child_sort_key(child: DirectoryChild) -> tuple[bool, str]:
    """Sort directories before files, then by case-sensitive name."""
    return (not child.is_dir, child.name)


def scan_directory(
    directory: Path,
    policy: IgnorePolicy,
    drop_excluded: bool = False,
) -> tuple[list[DirectoryChild], OSError | None]:
    """List visible children of ``directory`` in display order.

    Returns ``(children, scan_error)``. ``scan_error`` is set when the
    directory itself cannot be listed. Entries that are neither regular files
    nor real directories are skipped. Directory symlinks are skipped rather
    than followed so a link back to an ancestor cannot make the walk cycle.
    With ``drop_excluded`` set, explicitly excluded directories are left out.
    """
    children: list[DirectoryChild] = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                child_path = directory / entry.name
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                    is_file = not is_dir and entry.is_file()
                except OSError as exc:
                    logger.debug("Skipping unreadable entry %s: %s", child_path, exc)
                    continue
                if not is_dir and not is_file:
                    continue
                if is_dir and drop_excluded and policy.is_explicitly_excluded(child_path):
                    continue
                if not policy.is_visible(child_path, is_dir):
                    continue
                children.append(DirectoryChild(name=entry.name, path=child_path, is_dir=is_dir))
    except OSError as exc:
        return [], exc

    children.sort(key=child_sort_key)
    return children, None


def scan_root(root: Path, policy: IgnorePolicy, drop_excluded: bool = False) -> list[DirectoryChild]:
    """Scan the traversal root, raising ``FileAccessError`` when unreadable."""
    children, scan_error = scan_directory(root, policy, drop_excluded=drop_excluded)
    if scan_error is not None:
        raise FileAccessError(f"Failed to read directory {root}: {scan_error}") from scan_error
    return children


def _build_children(
    children: list[DirectoryChild],
    policy: IgnorePolicy,
) -> tuple[DirectoryNode, ...]:
    nodes: list[DirectoryNode] = []
    for child in children:
        if not child.is_dir:
            nodes.append(DirectoryNode(name=child.name, path=child.path, is_dir=False))
            continue

        grandchildren, scan_error = scan_directory(child.path, policy)
        if scan_error is not None:
            logger.debug("Skipping unreadable directory %s: %s", child.path, scan_error)
        node = DirectoryNode(
            name=child.name,
            path=child.path,
            is_dir=True,
            is_excluded_by_config=policy.is_explicitly_excluded(child.path),
            children=_build_children(grandchildren, policy),
        )
        # Keep only non-empty or explicitly excluded directories.
        if node.children or node.is_excluded_by_config:
            nodes.append(node)
    return tuple(nodes)


def build_directory_tree(root: Path, policy: IgnorePolicy) -> DirectoryNode:
    """Build the selectable tree rooted at ``root``.

    Explicitly excluded directories are kept and flagged instead of dropped.
    Raises ``FileAccessError`` when ``root`` cannot be listed.
    """
    root = root.resolve()
    return DirectoryNode(
        name=root.name or ".",
        path=root,
        is_dir=True,
        children=_build_children(scan_root(root, policy), policy),
    )


__all__ = [
    "build_directory_tree",
    "child_sort_key",
    "scan_directory",
    "scan_root",
]
