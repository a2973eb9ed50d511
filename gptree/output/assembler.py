"""Combine selected files with the project tree into one text artifact."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from ..config import Config
from ..errors import SafeModeError
from ..tree_model import IgnorePolicy, generate_tree_structure

SAFE_MODE_MAX_FILES = 30
SAFE_MODE_MAX_BYTES = 100_000
STRUCTURE_HEADER = "# Project Directory Structure:"
CONTENTS_MARKER = "\n# BEGIN FILE CONTENTS"
LINE_NUMBER_SEPARATOR = " | "

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileDetail:
    """Token estimate for one included file, keyed by its root-relative path."""

    path: str
    tokens: int


@dataclass(frozen=True)
class OutputArtifact:
    tree_text: str
    combined_content: str
    file_details: tuple[FileDetail, ...]
    token_estimate: int
    saved_path: Path | None = None


def read_source_text(path: Path) -> str:
    """Return the UTF-8 text of ``path`` with any BOM dropped and line endings kept.

    Raises ``UnicodeDecodeError`` for content that is not UTF-8, such as
    images or other binary files.
    """
    return path.read_bytes().decode("utf-8-sig")


def split_lines(content: str) -> list[str]:
    """Split on ``\\n`` dropping one trailing empty line and ``\\r`` endings."""
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def estimate_tokens(text: str) -> int:
    """Approximate tokens as UTF-8 byte length divided by four."""
    return len(text.encode("utf-8")) // 4


def add_line_numbers(content: str) -> str:
    """Prefix each line with a right-aligned 1-based number.

    The number column is as wide as the largest line number in ``content``.
    """
    lines = split_lines(content)
    if not lines:
        return ""
    width = len(str(len(lines)))
    return "\n".join(
        f"{number:>{width}}{LINE_NUMBER_SEPARATOR}{line}" for number, line in enumerate(lines, start=1)
    )


def display_path(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` (POSIX), or as-is when outside it."""
    if not path.is_relative_to(root):
        path = path.resolve()
    if not path.is_relative_to(root):
        return str(path)
    return path.relative_to(root).as_posix()


def check_safe_mode(selected_files: list[Path]) -> None:
    """Raise ``SafeModeError`` when the selection exceeds either cap.

    Sizes accumulate in selection order and the check fails as soon as the
    running total crosses ``SAFE_MODE_MAX_BYTES``. Missing files count as 0.
    """
    if len(selected_files) > SAFE_MODE_MAX_FILES:
        raise SafeModeError(
            f"Safe mode: Too many files selected ({len(selected_files)} > {SAFE_MODE_MAX_FILES})"
        )

    total_size = 0
    for path in selected_files:
        try:
            total_size += path.stat().st_size
        except OSError:
            continue
        if total_size > SAFE_MODE_MAX_BYTES:
            raise SafeModeError(f"Safe mode: Combined file size too large (> {SAFE_MODE_MAX_BYTES} bytes)")


def combine_files_with_structure(
    root: Path,
    config: Config,
    selected_files: Iterable[str | Path],
    excluded_dirs: Iterable[str] = (),
) -> OutputArtifact:
    """Build the combined artifact for ``selected_files`` in the given order.

    The tree header is rendered with the config's ignore and display toggles.
    Missing or unreadable selections, including files that are not valid
    UTF-8, are logged and skipped. Safe-mode violations and an unreadable
    root raise.
    """
    root = root.resolve()
    paths = [Path(raw) if Path(raw).is_absolute() else root / raw for raw in selected_files]

    tree = generate_tree_structure(root, IgnorePolicy.from_config(root, config, excluded_dirs))
    if config.safe_mode:
        check_safe_mode(paths)

    parts = [STRUCTURE_HEADER, tree.tree_text, CONTENTS_MARKER]
    details: list[FileDetail] = []
    for path in paths:
        if not path.is_file():
            logger.warning("Skipping non-existent or non-file path: %s", path)
            continue
        try:
            content = read_source_text(path)
        except OSError as exc:
            logger.warning("Could not read file %s: %s", path, exc)
            continue
        except UnicodeDecodeError:
            logger.warning("Skipping file that is not valid UTF-8: %s", path)
            continue

        if config.line_numbers:
            content = add_line_numbers(content)
        relative = display_path(path, root)
        details.append(FileDetail(path=relative, tokens=estimate_tokens(content)))
        parts.append(f"\n# File: {relative}\n")
        parts.append(content)

    return OutputArtifact(
        tree_text=tree.tree_text,
        combined_content="\n".join(parts),
        file_details=tuple(details),
        token_estimate=sum(detail.tokens for detail in details),
    )


__all__ = [
    "CONTENTS_MARKER",
    "LINE_NUMBER_SEPARATOR",
    "SAFE_MODE_MAX_BYTES",
    "SAFE_MODE_MAX_FILES",
    "STRUCTURE_HEADER",
    "FileDetail",
    "OutputArtifact",
    "add_line_numbers",
    "check_safe_mode",
    "combine_files_with_structure",
    "display_path",
    "estimate_tokens",
    "read_source_text",
    "split_lines",
]
