"""Project and global config persistence.

Project configs live in the project root. The global config lives in the
platform config directory, falling back to the legacy home-directory file
when only that one exists. Every load re-reads the file and every save
rewrites it completely.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import replace
from pathlib import Path

from platformdirs import user_config_dir

from ..errors import ConfigError
from .migration import migrate_config
from .model import Config, ConfigScope, parse_config, serialize_config

APP_NAME = "gptree"
PROJECT_CONFIG_FILE = ".gptree_config"
GLOBAL_CONFIG_FILENAME = "gptreerc"
LEGACY_GLOBAL_CONFIG_FILENAME = ".gptreerc"
# Explicit override for the global config location.
GLOBAL_CONFIG_PATH: Path | None = None

logger = logging.getLogger(__name__)


def project_config_path(root: Path) -> Path:
    return root / PROJECT_CONFIG_FILE


def default_global_config_path() -> Path:
    """Return the platform config-dir location of the global config."""
    path = Path(user_config_dir(APP_NAME, appauthor=False)) / GLOBAL_CONFIG_FILENAME
    if not path.is_absolute():
        raise ConfigError("Could not resolve a user config directory")
    return path


def legacy_global_config_path() -> Path:
    """Return ``~/.gptreerc``; raises ``ConfigError`` without a home directory."""
    try:
        home = Path.home()
    except RuntimeError as exc:
        raise ConfigError("Could not find home directory") from exc
    return home / LEGACY_GLOBAL_CONFIG_FILENAME


def global_config_path() -> Path:
    """Return the global config path to read and write.

    Prefers the platform location; the legacy file is used only when it
    exists and the platform file does not.
    """
    if GLOBAL_CONFIG_PATH is not None:
        return GLOBAL_CONFIG_PATH
    preferred = default_global_config_path()
    if preferred.exists():
        return preferred
    try:
        legacy = legacy_global_config_path()
    except ConfigError:
        return preferred
    return legacy if legacy.exists() else preferred


def config_path_for_scope(scope: ConfigScope, root: Path | None = None) -> Path:
    if scope is ConfigScope.GLOBAL:
        return global_config_path()
    if root is None:
        raise ConfigError("A project directory is required for the project config")
    return project_config_path(root)


def load_config_file(path: Path) -> Config:
    """Read and parse one config file without migrating it."""
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    return parse_config(text)


def save_config(path: Path, config: Config, scope: ConfigScope) -> Path:
    """Write ``config`` to ``path`` in canonical form, replacing the file."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigError(f"Could not create config directory {path.parent}: {exc}") from exc
    try:
        path.write_text(serialize_config(config, scope), encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to write config file {path}: {exc}") from exc
    return path


def load_or_create_project_config(root: Path) -> Config:
    """Load, migrate, and rewrite the project config, creating it if missing.

    The file is rewritten after every load so its layout stays canonical.
    """
    path = project_config_path(root)
    if not path.exists():
        config = Config()
        save_config(path, config, ConfigScope.PROJECT)
        return config

    migrated = migrate_config(load_config_file(path), ConfigScope.PROJECT)
    save_config(path, migrated, ConfigScope.PROJECT)
    return migrated


def load_or_create_global_config() -> Config:
    """Load and migrate the global config, creating it if missing.

    An existing file is written back only when migration changed a field.
    """
    path = global_config_path()
    if not path.exists():
        config = Config().for_scope(ConfigScope.GLOBAL)
        save_config(path, config, ConfigScope.GLOBAL)
        return config

    config = load_config_file(path)
    migrated = migrate_config(config, ConfigScope.GLOBAL)
    if migrated != config:
        logger.info("Saving migrated global config to %s", path)
        save_config(path, migrated, ConfigScope.GLOBAL)
    return migrated


def load_or_create_config(scope: ConfigScope, root: Path | None = None) -> Config:
    if scope is ConfigScope.GLOBAL:
        return load_or_create_global_config()
    if root is None:
        raise ConfigError("A project directory is required for the project config")
    return load_or_create_project_config(root)


def relative_selection(root: Path, selected_files: Iterable[str | Path]) -> tuple[str, ...]:
    """Convert selected paths to POSIX paths relative to ``root``.

    Paths outside ``root`` are dropped.
    """
    root = root.resolve()
    relative: list[str] = []
    for raw in selected_files:
        path = Path(raw)
        if not path.is_absolute():
            path = root / path
        if not path.is_relative_to(root):
            path = path.resolve()
        if not path.is_relative_to(root):
            logger.debug("Not storing selection outside project root: %s", path)
            continue
        relative.append(path.relative_to(root).as_posix())
    return tuple(relative)


def previous_file_paths(root: Path, config: Config) -> list[Path]:
    """Resolve stored relative selections back to existing files under ``root``."""
    root = root.resolve()
    paths: list[Path] = []
    for relative in config.previous_files:
        if not relative:
            continue
        path = root / relative
        if path.is_file():
            paths.append(path)
        else:
            logger.debug("Stored selection no longer exists: %s", path)
    return paths


def update_previous_files(root: Path, selected_files: Iterable[str | Path]) -> Config:
    """Store ``selected_files`` (relative to ``root``) in the project config."""
    root = root.resolve()
    config = load_or_create_project_config(root)
    updated = replace(config, previous_files=relative_selection(root, selected_files))
    save_config(project_config_path(root), updated, ConfigScope.PROJECT)
    return updated


def update_last_directory(directory: Path) -> Config:
    """Remember ``directory`` as the last opened project in the global config."""
    config = load_or_create_global_config()
    updated = replace(config, last_directory=str(directory.resolve()))
    if updated != config:
        save_config(global_config_path(), updated, ConfigScope.GLOBAL)
    return updated


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


def diagnose_config_file_access(path: Path) -> str:
    """Describe whether ``path`` and its directory can be read and written."""
    lines = [f"Config file: {path}"]
    exists = path.exists()
    lines.append(f"Exists: {_yes_no(exists)}")
    if exists:
        lines.append(f"Is file: {_yes_no(path.is_file())}")
        lines.append(f"Readable: {_yes_no(os.access(path, os.R_OK))}")
        lines.append(f"Writable: {_yes_no(os.access(path, os.W_OK))}")
        try:
            lines.append(f"Size: {path.stat().st_size} bytes")
            parse_config(path.read_text(encoding="utf-8"))
            lines.append("Parse: ok")
        except (OSError, UnicodeDecodeError) as exc:
            lines.append(f"Read error: {exc}")
    parent = path.parent
    parent_exists = parent.is_dir()
    lines.append(f"Directory: {parent}")
    lines.append(f"Directory exists: {_yes_no(parent_exists)}")
    if parent_exists:
        lines.append(f"Directory writable: {_yes_no(os.access(parent, os.W_OK))}")
    return "\n".join(lines)


__all__ = [
    "APP_NAME",
    "GLOBAL_CONFIG_FILENAME",
    "LEGACY_GLOBAL_CONFIG_FILENAME",
    "PROJECT_CONFIG_FILE",
    "config_path_for_scope",
    "default_global_config_path",
    "diagnose_config_file_access",
    "global_config_path",
    "legacy_global_config_path",
    "load_config_file",
    "load_or_create_config",
    "load_or_create_global_config",
    "load_or_create_project_config",
    "previous_file_paths",
    "project_config_path",
    "relative_selection",
    "save_config",
    "update_last_directory",
    "update_previous_files",
]
