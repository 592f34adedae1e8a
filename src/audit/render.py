"""Markdown, JSON and console renderings of an audit report."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Literal

import orjson
from rich.console import Console
from rich.table import Table

from audit.run import clean_files, files_with_issues, issues_of_type

if TYPE_CHECKING:
    from pathlib import Path

    from contract.models import AuditReport, Issue

ReportFormat = Literal["markdown", "json"]

CLEAN_FILES_SHOWN = 20

_CONFIDENCE_IN_MESSAGE = re.compile(r"confidence: (\w+)")


def _key_table(lines: list[str], title: str, column: str, issues: list[Issue]) -> None:
    if not issues:
        return
    lines.append(f"## {title}")
    lines.append("")
    lines.append(f"| File | Line | {column} |")
    lines.append("|------|------|" + "-" * (len(column) + 2) + "|")
    for issue in issues:
        lines.append(f"| {issue.file} | {issue.line} | {issue.key} |")
    lines.append("")


def render_markdown(report: AuditReport) -> str:
    summary = report.summary
    lines: list[str] = [
        "# i18n Translation Audit Report",
        "",
        f"**Generated**: {report.timestamp}",
        f"**Pages Directory**: {report.config.pages_dir}",
        f"**Locales Directory**: {report.config.locales_dir}",
        "",
        "## Summary",
        "",
        "| Metric | Count |",
        "|--------|-------|",
        f"| Files Scanned | {summary.files_scanned} |",
        f"| Total Keys Found | {summary.total_keys_found:,} |",
        f"| Unique Keys | {summary.unique_keys_found} |",
        f"| Missing Translations | {summary.missing_translations} |",
        f"| Hardcoded Strings | {summary.hardcoded_strings} |",
        f"| Empty Values | {summary.empty_values} |",
        f"| Dynamic Keys (manual review) | {summary.dynamic_keys} |",
        f"| **Coverage** | **{summary.coverage_percentage}%** |",
        "",
    ]

    _key_table(
        lines,
        "Missing Translations",
        "Key",
        issues_of_type(report.issues, "missing_translation"),
    )

    hardcoded = issues_of_type(report.issues, "hardcoded_text")
    if hardcoded:
        lines.append("## Hardcoded Strings")
        lines.append("")
        lines.append("| File | Line | Text | Confidence |")
        lines.append("|------|------|------|------------|")
        for issue in hardcoded:
            text = (issue.text or "").replace("|", "\\|")
            match = _CONFIDENCE_IN_MESSAGE.search(issue.message)
            confidence = match.group(1) if match else "unknown"
            lines.append(f'| {issue.file} | {issue.line} | "{text}" | {confidence} |')
        lines.append("")

    _key_table(
        lines,
        "Empty Translation Values",
        "Key",
        issues_of_type(report.issues, "empty_value"),
    )
    _key_table(
        lines,
        "Dynamic Keys (Manual Review Required)",
        "Pattern",
        issues_of_type(report.issues, "dynamic_key"),
    )

    errors = issues_of_type(report.issues, "processing_error")
    if errors:
        lines.append("## Processing Errors")
        lines.append("")
        lines.append("| File | Error |")
        lines.append("|------|-------|")
        for issue in errors:
            message = issue.message.replace("|", "\\|")
            lines.append(f"| {issue.file} | {message} |")
        lines.append("")

    flagged = files_with_issues(report.file_results)
    if flagged:
        lines.append("## Files with Issues")
        lines.append("")
        lines.append("| File | Issues |")
        lines.append("|------|--------|")
        for result in flagged:
            lines.append(f"| {result.file} | {result.issue_count} |")
        lines.append("")

    clean = clean_files(report.file_results)
    if clean:
        lines.append("## Clean Files")
        lines.append("")
        for result in clean[:CLEAN_FILES_SHOWN]:
            lines.append(f"- {result.file}")
        if len(clean) > CLEAN_FILES_SHOWN:
            lines.append(f"- ... ({len(clean) - CLEAN_FILES_SHOWN} more clean files)")
        lines.append("")

    return "\n".join(lines)


def render_json(report: AuditReport) -> bytes:
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    return orjson.dumps(report.model_dump(mode="json"), option=opts)


def write_report(report: AuditReport, path: Path, fmt: ReportFormat = "markdown") -> None:
    """Write the report, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "json":
        path.write_bytes(render_json(report))
    else:
        path.write_text(render_markdown(report), encoding="utf-8")


def print_summary(report: AuditReport, console: Console) -> None:
    summary = report.summary
    table = Table(title="i18n Audit Summary", show_header=True)
    table.add_column("Metric")
    table.add_column("Count", justify="right")
    for label, value in (
        ("Files Scanned", summary.files_scanned),
        ("Total Keys Found", summary.total_keys_found),
        ("Unique Keys", summary.unique_keys_found),
        ("Missing Translations", summary.missing_translations),
        ("Hardcoded Strings", summary.hardcoded_strings),
        ("Empty Values", summary.empty_values),
        ("Dynamic Keys", summary.dynamic_keys),
        ("Coverage", f"{summary.coverage_percentage}%"),
    ):
        table.add_row(label, str(value))
    console.print(table)


__all__ = [
    "print_summary",
    "render_json",
    "render_markdown",
    "write_report",
]
