from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from catalog.normalize import parse_locale_source
from contract.models import CatalogEntry

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

logger = logging.getLogger(__name__)

INDEX_STEM = "index"
DEFAULT_LOCALE_EXTENSIONS = (".ts", ".js")


def flatten(tree: Mapping[str, Any], prefix: str = "", file: str = "") -> list[CatalogEntry]:
    """Flatten a nested locale tree into dotted-key entries.

    Only string leaves become entries; numbers, booleans, arrays and nulls
    are dropped.
    """
    entries: list[CatalogEntry] = []
    for key, value in tree.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            entries.extend(flatten(value, full_key, file))
        elif isinstance(value, str):
            entries.append(
                CatalogEntry(
                    key=full_key,
                    value=value,
                    file=file,
                    is_empty=value.strip() == "",
                )
            )
    return entries


def parse_locale_file(path: Path) -> list[CatalogEntry]:
    """Parse one locale module into entries namespaced by its file stem."""
    text = path.read_text(encoding="utf-8")
    tree = parse_locale_source(text, str(path))
    return flatten(tree, path.stem, str(path))


def _iter_locale_files(locales_dir: Path, extensions: Sequence[str]) -> list[Path]:
    files = [
        path
        for path in locales_dir.iterdir()
        if path.is_file() and path.suffix in extensions and path.stem != INDEX_STEM
    ]
    return sorted(files, key=lambda p: p.name)


def load_catalog(
    locales_dir: Path,
    *,
    extensions: Sequence[str] = DEFAULT_LOCALE_EXTENSIONS,
) -> list[CatalogEntry]:
    """Load every locale file in ``locales_dir``.

    Files are processed in name order. A file that cannot be read or parsed
    is skipped with a warning; an unreadable directory yields no entries.
    """
    try:
        files = _iter_locale_files(locales_dir, extensions)
    except OSError as exc:
        logger.error(f"Error reading locale directory (path={locales_dir} error={exc})")
        return []

    entries: list[CatalogEntry] = []
    for path in files:
        try:
            entries.extend(parse_locale_file(path))
        except Exception as exc:
            logger.warning(f"Failed to parse locale file (path={path} error={exc})")
    logger.debug(f"Loaded locale entries (path={locales_dir} entries={len(entries)})")
    return entries


def build_lookup(
    entries: Iterable[CatalogEntry],
    *,
    report_duplicates: bool = False,
) -> dict[str, CatalogEntry]:
    """Index entries by key; a later entry for the same key replaces the earlier."""
    lookup: dict[str, CatalogEntry] = {}
    for entry in entries:
        previous = lookup.get(entry.key)
        if report_duplicates and previous is not None:
            logger.warning(
                f"Duplicate translation key (key={entry.key} "
                f"first={previous.file} replaced_by={entry.file})"
            )
        lookup[entry.key] = entry
    return lookup


__all__ = [
    "DEFAULT_LOCALE_EXTENSIONS",
    "build_lookup",
    "flatten",
    "load_catalog",
    "parse_locale_file",
]
