"""Cross-check extracted call sites against the translation catalog."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

from contract.models import Issue
from scan.files import relative_path

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from contract.models import CallSite, CatalogEntry


@dataclass(frozen=True)
class IssueCounts:
    missing_translations: int = 0
    empty_values: int = 0
    dynamic_keys: int = 0
    hardcoded_strings: int = 0
    processing_errors: int = 0


def validate_call_sites(
    call_sites: Iterable[CallSite],
    lookup: Mapping[str, CatalogEntry],
    *,
    root: Path,
) -> list[Issue]:
    """Classify each call site against the catalog.

    Dynamic call sites are always reported for manual review. Static call
    sites produce an issue only when their key is missing or its value is
    empty.
    """
    issues: list[Issue] = []

    for site in call_sites:
        file = relative_path(site.file, root)

        if site.is_dynamic:
            issues.append(
                Issue(
                    type="dynamic_key",
                    severity="info",
                    file=file,
                    line=site.line,
                    key=site.raw_pattern,
                    message=(
                        f"Dynamic translation key detected: {site.raw_pattern}. "
                        "Manual review required."
                    ),
                )
            )
            continue

        entry = lookup.get(site.key)
        if entry is None:
            issues.append(
                Issue(
                    type="missing_translation",
                    severity="error",
                    file=file,
                    line=site.line,
                    key=site.key,
                    message=f"Translation key '{site.key}' not found in English locale",
                )
            )
        elif entry.is_empty:
            issues.append(
                Issue(
                    type="empty_value",
                    severity="warning",
                    file=file,
                    line=site.line,
                    key=site.key,
                    message=f"Translation key '{site.key}' has an empty value",
                )
            )

    return issues


def find_empty_catalog_values(
    entries: Iterable[CatalogEntry],
    *,
    root: Path,
) -> list[Issue]:
    """Report empty values from the catalog's side, regardless of usage.

    Locale parsing does not keep positions, so these issues carry line 0.
    """
    return [
        Issue(
            type="empty_value",
            severity="warning",
            file=relative_path(entry.file, root),
            line=0,
            key=entry.key,
            message=f"Translation key '{entry.key}' has an empty value in locale file",
        )
        for entry in entries
        if entry.is_empty
    ]


def count_issues_by_type(issues: Iterable[Issue]) -> IssueCounts:
    counts = Counter(issue.type for issue in issues)
    return IssueCounts(
        missing_translations=counts["missing_translation"],
        empty_values=counts["empty_value"],
        dynamic_keys=counts["dynamic_key"],
        hardcoded_strings=counts["hardcoded_text"],
        processing_errors=counts["processing_error"],
    )


__all__ = [
    "IssueCounts",
    "count_issues_by_type",
    "find_empty_catalog_values",
    "validate_call_sites",
]
