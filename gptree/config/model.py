"""Versioned config record and its ``key: value`` text format.

The file format is line based: ``#`` lines are comments (regenerated on every
save and never parsed), other lines are ``key: value`` split on the first
colon. Unknown keys are ignored and malformed values keep their defaults, so
parsing never fails.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum

CONFIG_VERSION = 2
COMMENT_MARKER = "#"
DEFAULT_OUTPUT_FILE = "gptree_output.txt"


class ConfigScope(str, Enum):
    """Storage scope; each persists a slightly different key set."""

    PROJECT = "project"
    GLOBAL = "global"


@dataclass(frozen=True)
class Config:
    """One persisted settings record."""

    version: int = CONFIG_VERSION
    use_gitignore: bool = True
    include_file_types: str = "*"
    exclude_file_types: tuple[str, ...] = ()
    output_file: str = DEFAULT_OUTPUT_FILE
    save_output_file: bool = True
    output_file_locally: bool = True
    copy_to_clipboard: bool = False
    safe_mode: bool = True
    store_files_chosen: bool = True
    line_numbers: bool = False
    show_ignored_in_tree: bool = False
    show_default_ignored_in_tree: bool = False
    previous_files: tuple[str, ...] = ()
    last_directory: str | None = None

    def for_scope(self, scope: ConfigScope) -> Config:
        """Drop the fields ``scope`` does not persist."""
        if scope is ConfigScope.GLOBAL:
            return replace(self, previous_files=())
        return replace(self, last_directory=None)

    def as_dict(self) -> dict[str, object]:
        out: dict[str, object] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            out[item.name] = list(value) if isinstance(value, tuple) else value
        return out


@dataclass(frozen=True)
class ConfigKey:
    """File key, the attribute it maps to, and its value kind."""

    key: str
    attr: str
    kind: str
    comment: str
    scope: ConfigScope | None = None


CONFIG_KEYS: tuple[ConfigKey, ...] = (
    ConfigKey("version", "version", "int", "Config format version"),
    ConfigKey("useGitIgnore", "use_gitignore", "bool", "Whether to use .gitignore"),
    ConfigKey("includeFileTypes", "include_file_types", "str", "File types to include (e.g., .py,.js)"),
    ConfigKey(
        "excludeFileTypes",
        "exclude_file_types",
        "list",
        "File types to exclude when includeFileTypes is '*'",
    ),
    ConfigKey("outputFile", "output_file", "str", "Output file name"),
    ConfigKey("saveOutputFile", "save_output_file", "bool", "Whether to save the output file at all"),
    ConfigKey(
        "outputFileLocally",
        "output_file_locally",
        "bool",
        "Whether to output the file locally or relative to the project directory",
    ),
    ConfigKey("copyToClipboard", "copy_to_clipboard", "bool", "Whether to copy the output to the clipboard"),
    ConfigKey(
        "safeMode",
        "safe_mode",
        "bool",
        "Whether to use safe mode (prevent overly large files from being combined)",
    ),
    ConfigKey(
        "storeFilesChosen",
        "store_files_chosen",
        "bool",
        "Whether to store the files chosen in the config file (--save, -s)",
    ),
    ConfigKey(
        "lineNumbers",
        "line_numbers",
        "bool",
        "Whether to include line numbers in the output (--line-numbers, -n)",
    ),
    ConfigKey("showIgnoredInTree", "show_ignored_in_tree", "bool", "Whether to show ignored files in the directory tree"),
    ConfigKey(
        "showDefaultIgnoredInTree",
        "show_default_ignored_in_tree",
        "bool",
        "Whether to show only default ignored files in the directory tree while still respecting gitignore",
    ),
    ConfigKey(
        "previousFiles",
        "previous_files",
        "list",
        "Previously selected files (when using the -s or --save flag previously)",
        scope=ConfigScope.PROJECT,
    ),
    ConfigKey(
        "lastDirectory",
        "last_directory",
        "optional_str",
        "Last project directory opened",
        scope=ConfigScope.GLOBAL,
    ),
)

_KEYS_BY_NAME = {item.key: item for item in CONFIG_KEYS}


def parse_list(value: str) -> tuple[str, ...]:
    """Split a comma list, trimming items; an empty string is an empty list."""
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(","))


def _parse_value(kind: str, value: str) -> object | None:
    """Return the parsed value, or ``None`` to keep the default."""
    if kind == "int":
        return int(value) if value.isascii() and value.isdigit() else None
    if kind == "bool":
        return value == "true"
    if kind == "list":
        return parse_list(value)
    if kind == "optional_str":
        return value or None
    return value


def parse_config(text: str) -> Config:
    """Parse config file text; missing or malformed keys keep their defaults."""
    updates: dict[str, object] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(COMMENT_MARKER):
            continue
        key, sep, value = line.partition(":")
        if not sep:
            continue
        entry = _KEYS_BY_NAME.get(key.strip())
        if entry is None:
            continue
        parsed = _parse_value(entry.kind, value.strip())
        if parsed is None and entry.kind != "optional_str":
            continue
        updates[entry.attr] = parsed
    return replace(Config(), **updates)


def _format_value(kind: str, value: object) -> str:
    if kind == "bool":
        return "true" if value else "false"
    if kind == "list":
        return ",".join(value)  # type: ignore[arg-type]
    if value is None:
        return ""
    return str(value)


def serialize_config(config: Config, scope: ConfigScope) -> str:
    """Render ``config`` in canonical key order with one comment per key."""
    title = "Global" if scope is ConfigScope.GLOBAL else "Local"
    lines = [f"{COMMENT_MARKER} GPTree {title} Config"]
    for entry in CONFIG_KEYS:
        if entry.scope is not None and entry.scope is not scope:
            continue
        lines.append(f"{COMMENT_MARKER} {entry.comment}")
        lines.append(f"{entry.key}: {_format_value(entry.kind, getattr(config, entry.attr))}")
    return "\n".join(lines) + "\n"


__all__ = [
    "CONFIG_KEYS",
    "CONFIG_VERSION",
    "COMMENT_MARKER",
    "DEFAULT_OUTPUT_FILE",
    "Config",
    "ConfigKey",
    "ConfigScope",
    "parse_config",
    "parse_list",
    "serialize_config",
]
