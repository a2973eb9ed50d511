"""Caller-facing operations returning structured results.

Each command takes the project root and config mode explicitly, loads a fresh
config snapshot, and wraps expected failures in a ``CommandResult`` instead
of raising.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Generic, TypeVar

from .config import (
    Config,
    ConfigScope,
    config_path_for_scope,
    diagnose_config_file_access,
    load_or_create_global_config,
    load_or_create_project_config,
    save_config,
    update_previous_files,
)
from .errors import GPTreeError
from .output import OutputArtifact, combine_files_with_structure, save_output
from .tree_model import DirectoryNode, IgnorePolicy, build_directory_tree

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ConfigMode(str, Enum):
    """Which config the commands read and write."""

    GLOBAL = "global"
    LOCAL = "local"

    @classmethod
    def parse(cls, value: str) -> ConfigMode:
        return cls.LOCAL if value == cls.LOCAL.value else cls.GLOBAL

    @property
    def scope(self) -> ConfigScope:
        return ConfigScope.PROJECT if self is ConfigMode.LOCAL else ConfigScope.GLOBAL


@dataclass(frozen=True)
class CommandResult(Generic[T]):
    """Success flag plus payload, or a human-readable error message."""

    success: bool
    data: T | None = None
    error: str | None = None
    warnings: tuple[str, ...] = ()

    @classmethod
    def ok(cls, data: T, warnings: Iterable[str] = ()) -> CommandResult[T]:
        return cls(success=True, data=data, warnings=tuple(warnings))

    @classmethod
    def fail(cls, error: str) -> CommandResult[T]:
        return cls(success=False, error=error)


def load_active_config(root: Path | None, mode: ConfigMode) -> Config:
    """Return the config for ``mode``; may raise ``GPTreeError``."""
    if mode is ConfigMode.GLOBAL or root is None:
        return load_or_create_global_config()
    return load_or_create_project_config(root)


def _config_or_default(root: Path | None, mode: ConfigMode) -> Config:
    """Active config with the local -> global -> defaults fallback chain."""
    if mode is ConfigMode.LOCAL and root is not None:
        try:
            return load_or_create_project_config(root)
        except GPTreeError as exc:
            logger.warning("Falling back to global config: %s", exc)
    try:
        return load_or_create_global_config()
    except GPTreeError as exc:
        logger.warning("Falling back to default config: %s", exc)
        return Config()


def get_config(root: Path | None, mode: ConfigMode) -> CommandResult[Config]:
    return CommandResult.ok(_config_or_default(root, mode))


def get_configs(root: Path | None = None) -> CommandResult[dict[str, Config | None]]:
    """Return both scopes; a scope that fails to load is ``None``."""
    configs: dict[str, Config | None] = {"global": None, "local": None}
    try:
        configs["global"] = load_or_create_global_config()
    except GPTreeError as exc:
        logger.warning("Could not load global config: %s", exc)
    if root is not None:
        try:
            configs["local"] = load_or_create_project_config(root)
        except GPTreeError as exc:
            logger.warning("Could not load project config: %s", exc)
    return CommandResult.ok(configs)


def update_config(config: Config, root: Path | None, mode: ConfigMode) -> CommandResult[Path]:
    """Persist ``config`` into the scope selected by ``mode``."""
    try:
        path = config_path_for_scope(mode.scope, root)
        save_config(path, config.for_scope(mode.scope), mode.scope)
    except GPTreeError as exc:
        return CommandResult.fail(f"Failed to save config: {exc}")
    logger.info("Saved config to %s", path)
    return CommandResult.ok(path)


def load_directory(
    root: Path,
    mode: ConfigMode,
    excluded_dirs: Iterable[str] = (),
) -> CommandResult[DirectoryNode]:
    """Selectable tree for ``root`` using the active config's filters."""
    config = _config_or_default(root, mode)
    try:
        tree = build_directory_tree(root, IgnorePolicy.from_config(root, config, excluded_dirs))
    except GPTreeError as exc:
        return CommandResult.fail(f"Failed to get directory tree: {exc}")
    return CommandResult.ok(tree)


def generate_output(
    root: Path,
    selected_files: Iterable[str | Path],
    mode: ConfigMode,
    excluded_dirs: Iterable[str] = (),
    overrides: Mapping[str, object] | None = None,
) -> CommandResult[OutputArtifact]:
    """Assemble, remember the selection, and save the artifact.

    Failing to remember the selection or to save the file adds a warning but
    still returns the assembled artifact.
    """
    selected = list(selected_files)
    try:
        config = load_active_config(root, mode)
    except GPTreeError as exc:
        return CommandResult.fail(f"Failed to load active config: {exc}")
    if overrides:
        config = replace(config, **overrides)

    try:
        artifact = combine_files_with_structure(root, config, selected, excluded_dirs)
    except GPTreeError as exc:
        return CommandResult.fail(f"Failed to generate output: {exc}")

    warnings: list[str] = []
    if config.store_files_chosen:
        try:
            update_previous_files(root, selected)
        except GPTreeError as exc:
            message = f"Failed to update previous files in config: {exc}"
            logger.warning(message)
            warnings.append(message)

    try:
        artifact = replace(artifact, saved_path=save_output(artifact, config, root))
    except GPTreeError as exc:
        message = f"Failed to save output file: {exc}"
        logger.warning(message)
        warnings.append(message)

    return CommandResult.ok(artifact, warnings)


def diagnose_config_file(root: Path | None, mode: ConfigMode) -> CommandResult[str]:
    try:
        path = config_path_for_scope(mode.scope, root)
    except GPTreeError as exc:
        return CommandResult.fail(str(exc))
    return CommandResult.ok(diagnose_config_file_access(path))


__all__ = [
    "CommandResult",
    "ConfigMode",
    "diagnose_config_file",
    "generate_output",
    "get_config",
    "get_configs",
    "load_active_config",
    "load_directory",
    "update_config",
]
