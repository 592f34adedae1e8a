from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from catalog.loader import build_lookup, load_catalog
from contract.models import AuditReport, AuditSummary, FileResult, Issue
from parse.sections import parse_file
from parse.translation_calls import extract_translation_keys, unique_keys
from rules.hardcoded import candidate_to_issue, detect_hardcoded_strings
from scan.files import find_source_files, relative_path
from verify.translations import (
    count_issues_by_type,
    find_empty_catalog_values,
    validate_call_sites,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from contract.models import CallSite, CatalogEntry, IssueType
    from rules.config import AuditConfig

logger = logging.getLogger(__name__)


def discover_files(config: AuditConfig, root: Path) -> list[Path]:
    return list(
        find_source_files(
            root / config.pages_dir,
            include_pattern=config.include_pattern,
            exclude_patterns=config.exclude,
            include_partials=config.include_partials,
            partials_dir=config.partials_dir,
            gitignore_root=root if config.respect_gitignore else None,
        )
    )


def coverage_percentage(unique_key_count: int, missing_key_count: int) -> float:
    """Share of unique static keys that resolve, to one decimal (half up)."""
    if unique_key_count == 0:
        return 100.0
    ratio = (unique_key_count - missing_key_count) / unique_key_count
    return math.floor(ratio * 1000 + 0.5) / 10


def _process_file(
    path: Path,
    *,
    config: AuditConfig,
    root: Path,
    lookup: Mapping[str, CatalogEntry],
) -> tuple[list[CallSite], list[Issue]]:
    document = parse_file(path)
    call_sites = extract_translation_keys(document)
    issues = validate_call_sites(call_sites, lookup, root=root)
    issues.extend(
        candidate_to_issue(candidate)
        for candidate in detect_hardcoded_strings(document, config.hardcoded, root=root)
    )
    return call_sites, issues


def run_audit(config: AuditConfig, *, root: Path) -> AuditReport:
    """Run the whole audit for the project at ``root``.

    A file that cannot be processed is reported as a ``processing_error``
    issue and the run continues with the next file.
    """
    timestamp = datetime.now(timezone.utc).isoformat()
    all_issues: list[Issue] = []
    all_call_sites: list[CallSite] = []
    file_results: list[FileResult] = []

    logger.debug(
        f"Starting audit (pages_dir={config.pages_dir} locales_dir={config.locales_dir})"
    )

    entries = load_catalog(root / config.locales_dir, extensions=config.locale_extensions)
    lookup = build_lookup(entries, report_duplicates=config.verbose)
    logger.debug(f"Loaded locale entries (count={len(entries)})")

    files = discover_files(config, root)
    logger.debug(f"Found component files (count={len(files)})")

    for path in files:
        rel_path = relative_path(path, root)
        logger.debug(f"Processing (path={rel_path})")

        try:
            call_sites, file_issues = _process_file(
                path, config=config, root=root, lookup=lookup
            )
        except Exception as exc:
            logger.error(f"Error processing file (path={rel_path} error={exc})")
            all_issues.append(
                Issue(
                    type="processing_error",
                    severity="error",
                    file=rel_path,
                    line=0,
                    message=f"Failed to process file: {exc}",
                )
            )
            file_results.append(
                FileResult(
                    file=rel_path,
                    status="issues_found",
                    keys_found=0,
                    issue_count=1,
                )
            )
            continue

        all_call_sites.extend(call_sites)
        all_issues.extend(file_issues)
        file_results.append(
            FileResult(
                file=rel_path,
                status="issues_found" if file_issues else "clean",
                keys_found=len(call_sites),
                issue_count=len(file_issues),
            )
        )

    if config.report_catalog_empty_values:
        all_issues.extend(find_empty_catalog_values(entries, root=root))

    keys = unique_keys(all_call_sites)
    missing_keys = [key for key in keys if key not in lookup]
    counts = count_issues_by_type(all_issues)

    summary = AuditSummary(
        files_scanned=len(files),
        total_keys_found=len(all_call_sites),
        unique_keys_found=len(keys),
        missing_translations=counts.missing_translations,
        hardcoded_strings=counts.hardcoded_strings,
        empty_values=counts.empty_values,
        dynamic_keys=counts.dynamic_keys,
        coverage_percentage=coverage_percentage(len(keys), len(missing_keys)),
    )

    logger.debug(
        f"Audit complete (files={summary.files_scanned} "
        f"unique_keys={summary.unique_keys_found} "
        f"missing={summary.missing_translations} "
        f"coverage={summary.coverage_percentage}%)"
    )

    return AuditReport(
        timestamp=timestamp,
        config=config,
        summary=summary,
        issues=tuple(all_issues),
        file_results=tuple(file_results),
    )


def collect_keys(config: AuditConfig, *, root: Path) -> list[CallSite]:
    """Extract call sites from every component without validating them."""
    call_sites: list[CallSite] = []
    for path in discover_files(config, root):
        call_sites.extend(extract_translation_keys(parse_file(path)))
    return call_sites


def issues_of_type(issues: Iterable[Issue], issue_type: IssueType) -> list[Issue]:
    return [issue for issue in issues if issue.type == issue_type]


def files_with_issues(file_results: Iterable[FileResult]) -> list[FileResult]:
    return [result for result in file_results if result.status == "issues_found"]


def clean_files(file_results: Iterable[FileResult]) -> list[FileResult]:
    return [result for result in file_results if result.status == "clean"]


def count_actionable_issues(report: AuditReport) -> int:
    """Issues that need action, i.e. everything except ``info``."""
    return sum(1 for issue in report.issues if issue.severity != "info")


__all__ = [
    "clean_files",
    "collect_keys",
    "count_actionable_issues",
    "coverage_percentage",
    "discover_files",
    "files_with_issues",
    "issues_of_type",
    "run_audit",
]
