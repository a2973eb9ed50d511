"""Ignore policy resolution and per-entry visibility decisions.

An ``IgnorePolicy`` is built once per traversal call and combines:
- built-in default-ignore names (VCS metadata, editor state, OS files)
- the nearest ``.gitignore`` at or above the root, when enabled
- extension include/exclude sets (files only)
- explicitly excluded directories, keyed by POSIX path relative to the root
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ..gitignore import GitIgnoreMatcher, load_gitignore_matcher

if TYPE_CHECKING:
    from ..config import Config

DEFAULT_IGNORES: frozenset[str] = frozenset(
    {
        ".git",
        ".vscode",
        "__pycache__",
        ".DS_Store",
        ".idea",
        ".gitignore",
    }
)

INCLUDE_ALL = "*"


def parse_file_types(value: str | Iterable[str]) -> frozenset[str]:
    """Normalize a comma list (or iterable) of extensions.

    Items are trimmed and lowercased, empty items dropped, and a leading dot
    added when missing: ``"PY, .Js"`` -> ``{".py", ".js"}``.
    """
    items = value.split(",") if isinstance(value, str) else value
    extensions: set[str] = set()
    for item in items:
        ext = item.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        extensions.add(ext)
    return frozenset(extensions)


def normalize_relative_dir(value: str) -> str:
    """Normalize an excluded-directory key to POSIX form without edge slashes."""
    return value.replace("\\", "/").strip("/")


def is_default_ignored(path: Path, names: frozenset[str] = DEFAULT_IGNORES) -> bool:
    """Return whether ``path`` or any of its components is a default-ignore name."""
    if path.name in names:
        return True
    return any(part in names for part in path.parts)


@dataclass(frozen=True)
class IgnorePolicy:
    """Resolved, immutable filtering rules for one traversal."""

    root: Path
    gitignore: GitIgnoreMatcher | None = None
    include_all: bool = True
    included_extensions: frozenset[str] = frozenset()
    excluded_extensions: frozenset[str] = frozenset()
    excluded_dirs: frozenset[str] = frozenset()
    show_ignored: bool = False
    show_default_ignored: bool = False
    default_names: frozenset[str] = DEFAULT_IGNORES

    @classmethod
    def from_config(
        cls,
        root: Path,
        config: Config,
        excluded_dirs: Iterable[str] = (),
    ) -> IgnorePolicy:
        """Build a policy from a config's filtering and display toggles."""
        return build_ignore_policy(
            root,
            use_gitignore=config.use_gitignore,
            include_file_types=config.include_file_types,
            exclude_file_types=config.exclude_file_types,
            excluded_dirs=excluded_dirs,
            show_ignored=config.show_ignored_in_tree,
            show_default_ignored=config.show_default_ignored_in_tree,
        )

    def relative_key(self, path: Path) -> str:
        """Return ``path`` relative to the root as a POSIX string."""
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()

    def passes_extension_filter(self, path: Path, is_dir: bool) -> bool:
        """Apply include/exclude extension sets; directories always pass."""
        if is_dir:
            return True
        suffix = path.suffix.lower()
        if not suffix:
            return self.include_all
        if self.include_all:
            return suffix not in self.excluded_extensions
        return suffix in self.included_extensions

    def is_visible(self, path: Path, is_dir: bool) -> bool:
        """Combined gitignore/default-ignore/extension decision for one entry."""
        if not self.show_ignored:
            pattern_ignored = self.gitignore is not None and self.gitignore.is_ignored(path)
            if pattern_ignored:
                return False
            if not self.show_default_ignored and is_default_ignored(path, self.default_names):
                return False
        return self.passes_extension_filter(path, is_dir)

    def is_explicitly_excluded(self, path: Path) -> bool:
        """Return whether ``path`` is a directory listed in the exclusion set."""
        if not self.excluded_dirs:
            return False
        return self.relative_key(path) in self.excluded_dirs


def build_ignore_policy(
    root: Path,
    use_gitignore: bool = True,
    include_file_types: str = INCLUDE_ALL,
    exclude_file_types: str | Iterable[str] = (),
    excluded_dirs: Iterable[str] = (),
    show_ignored: bool = False,
    show_default_ignored: bool = False,
) -> IgnorePolicy:
    """Resolve filtering inputs into an ``IgnorePolicy`` rooted at ``root``.

    The upward ``.gitignore`` search runs here, once, and only when
    ``use_gitignore`` is set.
    """
    root = root.resolve()
    include_all = include_file_types.strip() == INCLUDE_ALL
    return IgnorePolicy(
        root=root,
        gitignore=load_gitignore_matcher(root) if use_gitignore else None,
        include_all=include_all,
        included_extensions=frozenset() if include_all else parse_file_types(include_file_types),
        excluded_extensions=parse_file_types(exclude_file_types),
        excluded_dirs=frozenset(
            key for key in (normalize_relative_dir(raw) for raw in excluded_dirs) if key
        ),
        show_ignored=show_ignored,
        show_default_ignored=show_default_ignored,
    )


__all__ = [
    "DEFAULT_IGNORES",
    "INCLUDE_ALL",
    "IgnorePolicy",
    "build_ignore_policy",
    "is_default_ignored",
    "normalize_relative_dir",
    "parse_file_types",
]
