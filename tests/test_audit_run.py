from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from audit.run import (
    clean_files,
    collect_keys,
    count_actionable_issues,
    coverage_percentage,
    discover_files,
    files_with_issues,
    issues_of_type,
    run_audit,
)
from rules.config import AuditConfig

FIXTURE_APP = Path(__file__).parent / "fixtures" / "mini_app"


@pytest.fixture
def app_root(tmp_path: Path) -> Path:
    root = tmp_path / "app"
    shutil.copytree(FIXTURE_APP, root)
    return root


def test_full_audit_of_fixture_app(app_root: Path) -> None:
    report = run_audit(AuditConfig(), root=app_root)

    summary = report.summary
    assert summary.files_scanned == 3
    assert summary.total_keys_found == 7
    assert summary.unique_keys_found == 5
    assert summary.missing_translations == 1
    assert summary.hardcoded_strings == 1
    assert summary.empty_values == 1
    assert summary.dynamic_keys == 1
    assert summary.coverage_percentage == 80.0


def test_issue_details(app_root: Path) -> None:
    report = run_audit(AuditConfig(), root=app_root)

    (missing,) = issues_of_type(report.issues, "missing_translation")
    assert missing.key == "dashboard.missing"
    assert missing.file == "resources/js/Pages/Dashboard.vue"
    assert missing.line == 14
    assert missing.severity == "error"

    (hardcoded,) = issues_of_type(report.issues, "hardcoded_text")
    assert hardcoded.text == "Welcome to Dashboard"
    assert hardcoded.line == 4
    assert "confidence: high" in hardcoded.message

    (dynamic,) = issues_of_type(report.issues, "dynamic_key")
    assert dynamic.key == "`status.${state}`"
    assert dynamic.line == 6
    assert dynamic.severity == "info"

    (empty,) = issues_of_type(report.issues, "empty_value")
    assert empty.key == "common.empty"
    assert empty.file == "resources/js/Pages/Settings/Index.vue"
    assert empty.line == 3


def test_file_results_are_ordered_and_classified(app_root: Path) -> None:
    report = run_audit(AuditConfig(), root=app_root)

    assert [(r.file, r.status, r.keys_found, r.issue_count) for r in report.file_results] == [
        ("resources/js/Pages/Dashboard.vue", "issues_found", 5, 3),
        ("resources/js/Pages/Settings/Index.vue", "issues_found", 1, 1),
        ("resources/js/Pages/Settings/Partials/ProfileForm.vue", "clean", 1, 0),
    ]
    assert [r.file for r in files_with_issues(report.file_results)] == [
        "resources/js/Pages/Dashboard.vue",
        "resources/js/Pages/Settings/Index.vue",
    ]
    assert len(clean_files(report.file_results)) == 1


def test_info_issues_are_not_actionable(app_root: Path) -> None:
    report = run_audit(AuditConfig(), root=app_root)

    assert len(report.issues) == 4
    assert count_actionable_issues(report) == 3


def test_partials_can_be_left_out(app_root: Path) -> None:
    report = run_audit(AuditConfig(include_partials=False), root=app_root)

    assert report.summary.files_scanned == 2
    assert report.summary.total_keys_found == 6
    assert all("Partials" not in r.file for r in report.file_results)


def test_report_echoes_config_and_timestamp(app_root: Path) -> None:
    config = AuditConfig(verbose=True)

    report = run_audit(config, root=app_root)

    assert report.config == config
    assert report.schema_version == 1
    assert "T" in report.timestamp


def test_unreadable_file_becomes_processing_error(app_root: Path) -> None:
    broken = app_root / "resources" / "js" / "Pages" / "Broken.vue"
    broken.write_bytes(b"<template>\xff\xfe</template>\n")

    report = run_audit(AuditConfig(), root=app_root)

    (error,) = issues_of_type(report.issues, "processing_error")
    assert error.file == "resources/js/Pages/Broken.vue"
    assert error.severity == "error"
    assert error.line == 0
    result = next(r for r in report.file_results if r.file == error.file)
    assert result.status == "issues_found"
    assert result.issue_count == 1
    assert report.summary.files_scanned == 4
    assert report.summary.total_keys_found == 7


def test_missing_locales_directory_makes_every_key_missing(app_root: Path) -> None:
    shutil.rmtree(app_root / "resources" / "js" / "i18n")

    report = run_audit(AuditConfig(), root=app_root)

    assert report.summary.missing_translations == 6
    assert report.summary.empty_values == 0
    assert report.summary.coverage_percentage == 0.0


def test_no_components_means_full_coverage(tmp_path: Path) -> None:
    report = run_audit(AuditConfig(), root=tmp_path)

    assert report.summary.files_scanned == 0
    assert report.summary.coverage_percentage == 100.0
    assert report.issues == ()


def test_catalog_empty_values_are_opt_in(app_root: Path) -> None:
    report = run_audit(AuditConfig(report_catalog_empty_values=True), root=app_root)

    empty = issues_of_type(report.issues, "empty_value")
    assert [(i.file, i.line) for i in empty] == [
        ("resources/js/Pages/Settings/Index.vue", 3),
        ("resources/js/i18n/locales/en/common.ts", 0),
    ]


@pytest.mark.parametrize(
    "unique,missing,expected",
    [
        (0, 0, 100.0),
        (5, 1, 80.0),
        (3, 1, 66.7),
        (3, 2, 33.3),
        (8, 1, 87.5),
        (4, 4, 0.0),
    ],
)
def test_coverage_percentage(unique: int, missing: int, expected: float) -> None:
    assert coverage_percentage(unique, missing) == expected


def test_collect_keys_matches_discovered_files(app_root: Path) -> None:
    config = AuditConfig()

    files = discover_files(config, app_root)
    call_sites = collect_keys(config, root=app_root)

    assert len(files) == 3
    assert len(call_sites) == 7
    assert sum(site.is_dynamic for site in call_sites) == 1
