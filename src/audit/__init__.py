"""Audit orchestration and reporting."""

from audit.render import print_summary, render_json, render_markdown, write_report
from audit.run import (
    collect_keys,
    count_actionable_issues,
    coverage_percentage,
    run_audit,
)

__all__ = [
    "collect_keys",
    "count_actionable_issues",
    "coverage_percentage",
    "print_summary",
    "render_json",
    "render_markdown",
    "run_audit",
    "write_report",
]
