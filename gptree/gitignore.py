"""Gitignore-aware path filtering utilities.

Finds the nearest ``.gitignore`` at or above a project root and wraps the
``gitignore_parser`` matcher for it, scoped to the directory holding the
file. Tree builders use the resulting matcher to optionally hide ignored
content.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import gitignore_parser

GITIGNORE_FILENAME = ".gitignore"

logger = logging.getLogger(__name__)


def _is_within(path: Path, root: Path) -> bool:
    """Return whether ``path`` is at or under ``root`` (no resolution)."""
    try:
        path.relative_to(root)
        return True
    except ValueError:
        return False


@dataclass(frozen=True)
class GitIgnoreMatcher:
    """Parsed gitignore rules for the directory that holds the file.

    ``base`` is the directory containing the pattern file. Paths outside it,
    and ``base`` itself, are never ignored.
    """

    base: Path
    source: Path
    match: Callable[[str], bool]

    def is_ignored(self, path: Path) -> bool:
        """Return whether ``path`` is ignored under this matcher base."""
        if path == self.base or not _is_within(path, self.base):
            return False
        return bool(self.match(str(path)))


def find_gitignore_file(root: Path) -> Path | None:
    """Return the first ``.gitignore`` found in ``root`` or any ancestor."""
    for directory in (root, *root.parents):
        candidate = directory / GITIGNORE_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_gitignore_matcher(root: Path) -> GitIgnoreMatcher | None:
    """Build a matcher from the nearest pattern file at or above ``root``.

    Returns ``None`` when no pattern file exists or the one found cannot be
    read; in both cases nothing is filtered by gitignore rules.
    """
    root = root.resolve()
    gitignore_path = find_gitignore_file(root)
    if gitignore_path is None:
        return None
    base = gitignore_path.parent
    try:
        match = gitignore_parser.parse_gitignore(str(gitignore_path), base_dir=str(base))
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read %s: %s", gitignore_path, exc)
        return None
    logger.debug("Using gitignore rules from %s", gitignore_path)
    return GitIgnoreMatcher(base=base, source=gitignore_path, match=match)


__all__ = [
    "GITIGNORE_FILENAME",
    "GitIgnoreMatcher",
    "find_gitignore_file",
    "load_gitignore_matcher",
]
