"""Command-line front door for gptree.

Parses CLI options, resolves the project root and file selection, then
dispatches into the command layer and prints the artifact or a summary.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .commands import (
    ConfigMode,
    diagnose_config_file,
    generate_output,
    get_config,
)
from .config import (
    PROJECT_CONFIG_FILE,
    Config,
    load_config_file,
    previous_file_paths,
    project_config_path,
    update_last_directory,
)
from .config.model import parse_list
from .errors import GPTreeError, PathNotFoundError
from .output import OutputArtifact
from .tree_model import IgnorePolicy, build_directory_tree, generate_tree_structure

LOG_FORMAT = "[gptree] %(levelname)s: %(message)s"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Combine a project's directory tree and selected files into one text file."
    )
    parser.add_argument("path", nargs="?", default=None, help="Project directory. Defaults to current directory.")
    parser.add_argument(
        "-f",
        "--file",
        dest="files",
        action="append",
        default=[],
        metavar="FILE",
        help="File to include (repeatable, relative to the project directory).",
    )
    parser.add_argument("--all", action="store_true", help="Include every visible file, ignoring stored selections.")
    scope = parser.add_mutually_exclusive_group()
    scope.add_argument("--global", dest="use_global", action="store_true", help="Use the global config.")
    scope.add_argument("--local", dest="use_global", action="store_false", help="Use the project config (default).")
    parser.set_defaults(use_global=False)
    parser.add_argument("--tree", action="store_true", help="Print the directory tree and exit.")
    parser.add_argument("--json", action="store_true", help="Print the selectable tree as JSON and exit.")
    parser.add_argument("-n", "--line-numbers", action="store_true", help="Prefix file lines with line numbers.")
    parser.add_argument("--include-file-types", default=None, help="Comma list of extensions to include, or '*'.")
    parser.add_argument("--exclude-file-types", default=None, help="Comma list of extensions to exclude.")
    parser.add_argument(
        "--exclude-dir",
        dest="excluded_dirs",
        action="append",
        default=[],
        metavar="DIR",
        help="Directory (relative to the project) to leave out (repeatable).",
    )
    parser.add_argument("--output-file", default=None, help="Output file name.")
    parser.add_argument("--output-to-documents", action="store_true", help="Save into the documents directory.")
    parser.add_argument("--no-save-output", action="store_true", help="Do not write the output file.")
    parser.add_argument("--disable-safe-mode", action="store_true", help="Allow large selections.")
    parser.add_argument("-s", "--save", action="store_true", help="Remember the selected files in the project config.")
    parser.add_argument("--stdout", action="store_true", help="Print the combined output instead of a summary.")
    parser.add_argument("--diagnose", action="store_true", help="Report config file access and exit.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def collect_overrides(args: argparse.Namespace) -> dict[str, object]:
    """Map CLI flags onto ``Config`` field overrides for this run."""
    overrides: dict[str, object] = {}
    if args.line_numbers:
        overrides["line_numbers"] = True
    if args.include_file_types is not None:
        overrides["include_file_types"] = args.include_file_types.strip()
    if args.exclude_file_types is not None:
        overrides["exclude_file_types"] = parse_list(args.exclude_file_types.strip())
    if args.output_file is not None:
        overrides["output_file"] = args.output_file
    if args.output_to_documents:
        overrides["output_file_locally"] = False
    if args.no_save_output:
        overrides["save_output_file"] = False
    if args.disable_safe_mode:
        overrides["safe_mode"] = False
    if args.save:
        overrides["store_files_chosen"] = True
    return overrides


def stored_selection(root: Path) -> list[Path]:
    """Previously stored selection from the project config, if any."""
    path = project_config_path(root)
    if not path.is_file():
        return []
    try:
        return previous_file_paths(root, load_config_file(path))
    except GPTreeError as exc:
        logger.warning("Could not read stored selection: %s", exc)
        return []


def resolve_selection(
    root: Path,
    config: Config,
    args: argparse.Namespace,
) -> list[Path]:
    """Explicit files, else the stored selection, else every visible file.

    Explicitly named files must exist; stored selections silently drop
    files that have since disappeared. The implicit "every file" selection leaves out the project config and the
    output file sitting in the root.
    """
    if args.files:
        explicit = [path if path.is_absolute() else root / path for path in map(Path, args.files)]
        missing = [str(path) for path in explicit if not path.is_file()]
        if missing:
            raise PathNotFoundError(f"File not found: {', '.join(missing)}")
        return explicit
    if config.store_files_chosen and not args.all:
        previous = stored_selection(root)
        if previous:
            return previous
    policy = IgnorePolicy.from_config(root, config, args.excluded_dirs)
    own_files = {PROJECT_CONFIG_FILE, config.output_file}
    return [
        path
        for path in generate_tree_structure(root, policy).file_list
        if path.parent != root or path.name not in own_files
    ]


def format_summary(artifact: OutputArtifact) -> str:
    lines = [f"{detail.tokens:>8}  {detail.path}" for detail in artifact.file_details]
    lines.append(f"{artifact.token_estimate:>8}  total (estimated tokens)")
    if artifact.saved_path is not None:
        lines.append(f"Saved to: {artifact.saved_path}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run one gptree action.

    Exits via ``SystemExit`` with a readable message on failure.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT)

    root = Path(args.path) if args.path else Path.cwd()
    if not root.is_dir():
        raise SystemExit(f"Directory not found: {root}")
    root = root.resolve()
    mode = ConfigMode.GLOBAL if args.use_global else ConfigMode.LOCAL

    if args.diagnose:
        result = diagnose_config_file(root, mode)
        if not result.success:
            raise SystemExit(result.error)
        sys.stdout.write(f"{result.data}\n")
        return

    overrides = collect_overrides(args)
    config = replace(get_config(root, mode).data or Config(), **overrides)

    try:
        if args.json:
            policy = IgnorePolicy.from_config(root, config, args.excluded_dirs)
            sys.stdout.write(json.dumps(build_directory_tree(root, policy).as_dict(), indent=2) + "\n")
            return
        if args.tree:
            policy = IgnorePolicy.from_config(root, config, args.excluded_dirs)
            sys.stdout.write(generate_tree_structure(root, policy).tree_text + "\n")
            return
        selected = resolve_selection(root, config, args)
    except GPTreeError as exc:
        raise SystemExit(str(exc)) from exc

    result = generate_output(root, selected, mode, args.excluded_dirs, overrides)
    if not result.success:
        raise SystemExit(result.error)
    for warning in result.warnings:
        sys.stderr.write(f"Warning: {warning}\n")

    artifact = result.data
    if args.stdout:
        sys.stdout.write(artifact.combined_content + "\n")
    else:
        sys.stdout.write(format_summary(artifact) + "\n")

    if mode is ConfigMode.GLOBAL:
        try:
            update_last_directory(root)
        except GPTreeError as exc:
            logger.warning("Could not remember last directory: %s", exc)


if __name__ == "__main__":
    main()
