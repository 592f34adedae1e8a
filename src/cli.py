"""Command-line interface for i18n-audit."""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path

import orjson
from rich.console import Console
from rich.logging import RichHandler

from audit.render import print_summary, write_report
from audit.run import collect_keys, count_actionable_issues, run_audit
from parse.translation_calls import static_call_sites, unique_keys
from rules.config import AuditConfig, ConfigError, apply_overrides, load_config
from scan.files import relative_path

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ISSUES_FOUND = 1
EXIT_INVALID_ARGS = 2
EXIT_FILE_ERROR = 3


def configure_logging(level: int = logging.INFO) -> None:
    """Route log records through a Rich handler on stderr.

    Args:
        level: Logging severity threshold.
    """
    root_logger = logging.getLogger()
    if not any(isinstance(handler, RichHandler) for handler in root_logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root (default: .)",
    )
    parser.add_argument(
        "-p",
        "--pages-dir",
        default=None,
        help="Components directory, relative to the root",
    )
    parser.add_argument(
        "--include-partials",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Audit components in partials directories",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Show detailed progress",
    )


def _add_locales_dir(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-l",
        "--locales-dir",
        default=None,
        help="Reference locale directory, relative to the root",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="i18n-audit",
        description="Audit Vue components for i18n translation completeness",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    audit_parser = subparsers.add_parser(
        "audit", help="Run the full audit and write a report"
    )
    _add_common_paths(audit_parser)
    _add_locales_dir(audit_parser)
    audit_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Report path (default: config output_file)",
    )
    audit_parser.add_argument(
        "--json",
        action="store_true",
        help="Write a JSON report instead of markdown",
    )

    check_parser = subparsers.add_parser(
        "check", help="Validate translations without writing a report"
    )
    _add_common_paths(check_parser)
    _add_locales_dir(check_parser)
    check_parser.add_argument(
        "--fail-on-missing",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Count missing translations towards the threshold",
    )
    check_parser.add_argument(
        "--fail-on-hardcoded",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Count hardcoded text towards the threshold",
    )
    check_parser.add_argument(
        "-t",
        "--threshold",
        type=int,
        default=0,
        help="Maximum number of issues allowed",
    )

    list_parser = subparsers.add_parser(
        "list-keys", help="List translation keys used in components"
    )
    _add_common_paths(list_parser)
    list_parser.add_argument(
        "-f",
        "--format",
        choices=("text", "json", "csv"),
        default="text",
        help="Output format",
    )
    list_parser.add_argument(
        "-u",
        "--unique",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Only show each key once",
    )

    return parser


def _resolve_config(root: Path, args: argparse.Namespace) -> AuditConfig:
    config = load_config(root)
    return apply_overrides(
        config,
        pages_dir=args.pages_dir,
        locales_dir=getattr(args, "locales_dir", None),
        include_partials=args.include_partials,
        output_file=getattr(args, "output", None),
        verbose=args.verbose,
    )


def _handle_audit(root: Path, config: AuditConfig, *, as_json: bool) -> int:
    console = Console()
    report = run_audit(config, root=root)

    output_path = root / config.output_file
    if as_json:
        if output_path.suffix == ".md":
            output_path = output_path.with_suffix(".json")
        write_report(report, output_path, "json")
        console.print(f"JSON report written to: {output_path}", highlight=False)
    else:
        write_report(report, output_path, "markdown")
        console.print(f"Markdown report written to: {output_path}", highlight=False)

    print_summary(report, console)

    if count_actionable_issues(report) > 0:
        return EXIT_ISSUES_FOUND
    return EXIT_SUCCESS


def _handle_check(
    root: Path,
    config: AuditConfig,
    *,
    fail_on_missing: bool,
    fail_on_hardcoded: bool,
    threshold: int,
) -> int:
    console = Console()
    report = run_audit(config, root=root)
    print_summary(report, console)

    issue_count = 0
    if fail_on_missing:
        issue_count += report.summary.missing_translations
    if fail_on_hardcoded:
        issue_count += report.summary.hardcoded_strings

    if issue_count > threshold:
        console.print(
            f"Check failed: {issue_count} issues found (threshold: {threshold})",
            highlight=False,
        )
        return EXIT_ISSUES_FOUND

    console.print(
        f"Check passed: {issue_count} issues within threshold ({threshold})",
        highlight=False,
    )
    return EXIT_SUCCESS


def _handle_list_keys(
    root: Path, config: AuditConfig, *, output_format: str, unique: bool
) -> int:
    call_sites = static_call_sites(collect_keys(config, root=root))
    out = sys.stdout

    if unique:
        keys = unique_keys(call_sites)
        if output_format == "json":
            out.write(orjson.dumps(keys, option=orjson.OPT_INDENT_2).decode("utf-8"))
            out.write("\n")
        elif output_format == "csv":
            writer = csv.writer(out, lineterminator="\n")
            writer.writerow(["key"])
            writer.writerows([key] for key in keys)
        else:
            for key in keys:
                out.write(f"{key}\n")
        return EXIT_SUCCESS

    rows = [
        {"key": site.key, "file": relative_path(site.file, root), "line": site.line}
        for site in call_sites
    ]
    if output_format == "json":
        out.write(orjson.dumps(rows, option=orjson.OPT_INDENT_2).decode("utf-8"))
        out.write("\n")
    elif output_format == "csv":
        writer = csv.DictWriter(out, fieldnames=["key", "file", "line"], lineterminator="\n")
        writer.writeheader()
        writer.writerows(rows)
    else:
        for row in rows:
            out.write(f"{row['key']} ({row['file']}:{row['line']})\n")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return int(exc.code or 0)

    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    root = Path(args.root).expanduser().resolve()

    try:
        config = _resolve_config(root, args)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return EXIT_INVALID_ARGS

    try:
        if args.command == "audit":
            return _handle_audit(root, config, as_json=args.json)

        if args.command == "check":
            return _handle_check(
                root,
                config,
                fail_on_missing=args.fail_on_missing,
                fail_on_hardcoded=args.fail_on_hardcoded,
                threshold=args.threshold,
            )

        return _handle_list_keys(
            root, config, output_format=args.format, unique=args.unique
        )
    except (OSError, UnicodeDecodeError) as exc:
        logger.error(f"Audit failed (command={args.command} error={exc})")
        sys.stderr.write(f"error: {exc}\n")
        return EXIT_FILE_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
