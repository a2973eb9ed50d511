"""Exception types raised by the tree, config, and output layers.

Callers that need a structured result go through ``gptree.commands``, which
turns these into ``CommandResult`` failures carrying the message text.
"""

from __future__ import annotations


class GPTreeError(Exception):
    """Base class for expected, user-reportable failures."""


class FileAccessError(GPTreeError):
    """A required file or directory could not be read or written."""


class SafeModeError(GPTreeError):
    """Selection exceeds the safe-mode file-count or byte-size cap."""


class ConfigError(GPTreeError):
    """Config location could not be resolved, read, or written."""


class PathNotFoundError(GPTreeError):
    """A selected path no longer exists."""


__all__ = [
    "GPTreeError",
    "FileAccessError",
    "SafeModeError",
    "ConfigError",
    "PathNotFoundError",
]
