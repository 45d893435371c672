"""File selection utilities for xml formatter."""

import os
from pathlib import Path
from typing import List, Optional, Sequence, Union
import pathspec
import logging

logger = logging.getLogger(__name__)

DEFAULT_INCLUDES = ["**/*.xml"]
DEFAULT_EXCLUDES = ["**/target/**"]


def build_pathspec(patterns: Sequence[str]) -> pathspec.PathSpec:
    """
    Build a PathSpec from glob patterns.

    Patterns without a slash, such as `*.xml`, only match in the base
    directory; use `**/*.xml` to match at any depth.

    Args:
        patterns: Patterns in gitignore (wildmatch) syntax, relative to the base directory.

    Returns:
        A PathSpec matching any of the patterns.
    """
    # Blank lines and comments would otherwise be parsed as patterns
    lines = [p.strip() for p in patterns if p and p.strip() and not p.strip().startswith('#')]
    return pathspec.PathSpec.from_lines('gitwildmatch', [anchor_pattern(line) for line in lines])


def anchor_pattern(pattern: str) -> str:
    """Anchor a slash-less pattern to the base directory."""
    negated = pattern.startswith('!')
    body = pattern[1:] if negated else pattern
    if '/' not in body:
        body = '/' + body
    return ('!' if negated else '') + body


def get_included_files(
    directory: Union[str, Path],
    includes: Optional[Sequence[str]] = DEFAULT_INCLUDES,
    excludes: Optional[Sequence[str]] = DEFAULT_EXCLUDES
) -> List[str]:
    """
    Scan a directory for files to format.

    A file is selected if it matches a pattern in `includes` and does not
    match any pattern in `excludes`.

    Args:
        directory: Base directory to scan from.
        includes: Patterns of files to format. None selects nothing.
        excludes: Patterns of files to leave alone. None excludes nothing.

    Returns:
        Sorted POSIX-style paths relative to `directory`.
    """
    if not isinstance(directory, Path):
        directory = Path(directory)

    if includes is None:
        logger.debug("No include patterns configured, nothing to scan")
        return []

    if not directory.is_dir():
        logger.warning(f"Provided directory '{directory}' is not valid. Cannot scan for files.")
        return []

    include_spec = build_pathspec(includes)
    exclude_spec = build_pathspec(excludes or [])

    files_to_format = []
    for root, dirs, files in os.walk(directory):
        current_root = Path(root)
        dirs.sort()

        for file in files:
            abs_path = current_root / file
            rel_path_posix = abs_path.relative_to(directory).as_posix()

            if not include_spec.match_file(rel_path_posix):
                continue
            if exclude_spec.match_file(rel_path_posix):
                logger.debug(f"file<{rel_path_posix}> is excluded")
                continue
            files_to_format.append(rel_path_posix)

    files_to_format.sort()
    return files_to_format
