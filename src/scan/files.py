"""Component file discovery."""

from __future__ import annotations

import logging
import os
from fnmatch import fnmatch
from pathlib import Path
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

logger = logging.getLogger(__name__)

DEFAULT_INCLUDE_PATTERN = "**/*.vue"


def _matches_any(candidates: tuple[str, ...], patterns: list[str]) -> bool:
    return any(fnmatch(candidate, pat) for candidate in candidates for pat in patterns)


def _should_include_file(
    path: Path,
    directory: Path,
    gitignore_matches: Callable[[str], bool] | None,
    exclude_patterns: list[str] | None,
    partials_dir: str | None,
) -> bool:
    """Check if a file should be included based on all filtering rules."""
    if not path.is_file() or path.is_symlink():
        return False

    if not _is_within_root(path, directory):
        return False

    try:
        rel_path = path.relative_to(directory)
    except ValueError:
        return False

    if partials_dir and partials_dir in rel_path.parts[:-1]:
        return False

    if gitignore_matches is not None and gitignore_matches(str(path)):
        return False

    # Absolute paths let `**/x/**` style globs match at the top level too.
    candidates = (rel_path.as_posix(), path.absolute().as_posix())
    return not (exclude_patterns and _matches_any(candidates, exclude_patterns))


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        root_resolved = root.resolve()
        path_resolved = path.resolve()
    except OSError:
        return False

    try:
        path_resolved.relative_to(root_resolved)
    except ValueError:
        return False

    return True


def _build_gitignore_matcher(root: Path) -> Callable[[str], bool] | None:
    gitignore_path = root / ".gitignore"
    if gitignore_path.is_file() and not gitignore_path.is_symlink():
        return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
    return None


def find_source_files(
    directory: Path,
    *,
    include_pattern: str = DEFAULT_INCLUDE_PATTERN,
    exclude_patterns: list[str] | None = None,
    include_partials: bool = True,
    partials_dir: str = "Partials",
    gitignore_root: Path | None = None,
) -> Iterator[Path]:
    """Find component files under ``directory``.

    Args:
        directory: Directory to search
        include_pattern: Glob relative to ``directory`` selecting files
        exclude_patterns: Optional list of fnmatch patterns; files matching
            any pattern are excluded
        include_partials: When False, files below a ``partials_dir``
            directory are skipped
        partials_dir: Path segment that marks a partials directory
        gitignore_root: When set, the ``.gitignore`` in this directory is
            honored

    Yields:
        Path objects for each file found, sorted lexicographically by
        relative path for deterministic ordering. A missing directory
        yields nothing.
    """
    if not directory.is_dir():
        logger.error(f"Pages directory does not exist (path={directory})")
        return

    gitignore_matches = (
        _build_gitignore_matcher(gitignore_root) if gitignore_root is not None else None
    )

    matched_files = [
        path
        for path in directory.glob(include_pattern)
        if _should_include_file(
            path,
            directory,
            gitignore_matches,
            exclude_patterns,
            None if include_partials else partials_dir,
        )
    ]

    matched_files.sort(key=lambda p: p.relative_to(directory).as_posix())

    yield from matched_files


def relative_path(file_path: str | Path, root: Path) -> str:
    """Display form of ``file_path`` relative to the project root."""
    return Path(os.path.relpath(Path(file_path).absolute(), root.absolute())).as_posix()


__all__ = ["_should_include_file", "find_source_files", "relative_path"]
