"""Ordered, idempotent config schema upgrades.

Each step upgrades from exactly one version to the next. Records already at
or above ``CONFIG_VERSION`` are returned unchanged.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

from .model import CONFIG_VERSION, Config, ConfigScope

MigrationStep = Callable[[Config, ConfigScope], Config]


def _v0_to_v1(config: Config, scope: ConfigScope) -> Config:
    if scope is ConfigScope.PROJECT:
        return replace(config, previous_files=())
    return config


def _v1_to_v2(config: Config, scope: ConfigScope) -> Config:
    return replace(config, show_ignored_in_tree=False, show_default_ignored_in_tree=False)


MIGRATIONS: tuple[tuple[int, MigrationStep], ...] = (
    (0, _v0_to_v1),
    (1, _v1_to_v2),
)


def migrate_config(config: Config, scope: ConfigScope) -> Config:
    """Apply every pending step in version order."""
    for from_version, step in MIGRATIONS:
        if config.version >= CONFIG_VERSION:
            break
        if config.version != from_version:
            continue
        config = replace(step(config, scope), version=from_version + 1)
    return config


__all__ = ["MIGRATIONS", "MigrationStep", "migrate_config"]
