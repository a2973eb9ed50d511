"""Tree datatypes shared by the text and hierarchical builders."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DirectoryChild:
    """One visible entry of a single directory listing."""

    name: str
    path: Path
    is_dir: bool


@dataclass(frozen=True)
class TreeStructure:
    """Rendered ASCII tree plus the files it shows, in render order."""

    tree_text: str
    file_list: tuple[Path, ...]


@dataclass(frozen=True)
class DirectoryNode:
    """Selectable tree node; files and directories share this shape.

    ``is_excluded_by_config`` is only ever set on directories listed in the
    explicit exclusion set, which stay in the tree so they can be re-included.
    """

    name: str
    path: Path
    is_dir: bool
    is_excluded_by_config: bool = False
    children: tuple["DirectoryNode", ...] = ()

    def iter_files(self) -> Iterator[DirectoryNode]:
        """Yield file nodes depth-first in child order."""
        for child in self.children:
            if child.is_dir:
                yield from child.iter_files()
            else:
                yield child

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-ready nested mapping."""
        return {
            "name": self.name,
            "path": str(self.path),
            "is_dir": self.is_dir,
            "is_excluded_by_config": self.is_excluded_by_config,
            "children": [child.as_dict() for child in self.children],
        }


__all__ = [
    "DirectoryChild",
    "DirectoryNode",
    "TreeStructure",
]
