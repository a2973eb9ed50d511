"""Versioned settings: model, text format, migration, and storage scopes."""

from __future__ import annotations

from .migration import MIGRATIONS, migrate_config
from .model import (
    CONFIG_KEYS,
    CONFIG_VERSION,
    DEFAULT_OUTPUT_FILE,
    Config,
    ConfigScope,
    parse_config,
    serialize_config,
)
from .store import (
    PROJECT_CONFIG_FILE,
    config_path_for_scope,
    diagnose_config_file_access,
    global_config_path,
    load_config_file,
    load_or_create_config,
    load_or_create_global_config,
    load_or_create_project_config,
    previous_file_paths,
    project_config_path,
    relative_selection,
    save_config,
    update_last_directory,
    update_previous_files,
)

__all__ = [
    "CONFIG_KEYS",
    "CONFIG_VERSION",
    "DEFAULT_OUTPUT_FILE",
    "MIGRATIONS",
    "PROJECT_CONFIG_FILE",
    "Config",
    "ConfigScope",
    "config_path_for_scope",
    "diagnose_config_file_access",
    "global_config_path",
    "load_config_file",
    "load_or_create_config",
    "load_or_create_global_config",
    "load_or_create_project_config",
    "migrate_config",
    "parse_config",
    "previous_file_paths",
    "project_config_path",
    "relative_selection",
    "save_config",
    "serialize_config",
    "update_last_directory",
    "update_previous_files",
]
