"""Output destination resolution and saving."""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_documents_dir

from ..config import Config
from ..errors import FileAccessError
from .assembler import OutputArtifact

logger = logging.getLogger(__name__)


def documents_dir() -> Path | None:
    """Return the user documents directory, or ``None`` when it does not exist."""
    try:
        path = Path(user_documents_dir())
    except Exception as exc:
        logger.debug("Could not resolve documents directory: %s", exc)
        return None
    return path if path.is_absolute() and path.is_dir() else None


def resolve_output_path(root: Path, config: Config) -> Path:
    """Return where the artifact should be written for ``config``.

    ``output_file_locally`` targets the project root; otherwise the documents
    directory, falling back to the project root when it is unavailable.
    """
    if config.output_file_locally:
        return root / config.output_file
    docs = documents_dir()
    if docs is None:
        logger.warning("Could not find Documents directory. Saving to project directory instead.")
        return root / config.output_file
    return docs / config.output_file


def save_output(artifact: OutputArtifact, config: Config, root: Path) -> Path | None:
    """Write ``artifact.combined_content`` verbatim; ``None`` when saving is off."""
    if not config.save_output_file:
        return None

    path = resolve_output_path(root.resolve(), config)
    logger.info("Saving output to %s", path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(artifact.combined_content, encoding="utf-8", newline="")
    except OSError as exc:
        raise FileAccessError(f"Failed to save output file {path}: {exc}") from exc
    return path


__all__ = ["documents_dir", "resolve_output_path", "save_output"]
