"""Output assembly: tree header, file blocks, token estimates, and saving."""

from __future__ import annotations

from .assembler import (
    CONTENTS_MARKER,
    SAFE_MODE_MAX_BYTES,
    SAFE_MODE_MAX_FILES,
    STRUCTURE_HEADER,
    FileDetail,
    OutputArtifact,
    add_line_numbers,
    check_safe_mode,
    combine_files_with_structure,
    estimate_tokens,
)
from .persist import documents_dir, resolve_output_path, save_output

__all__ = [
    "CONTENTS_MARKER",
    "SAFE_MODE_MAX_BYTES",
    "SAFE_MODE_MAX_FILES",
    "STRUCTURE_HEADER",
    "FileDetail",
    "OutputArtifact",
    "add_line_numbers",
    "check_safe_mode",
    "combine_files_with_structure",
    "documents_dir",
    "estimate_tokens",
    "resolve_output_path",
    "save_output",
]
