from __future__ import annotations

import shutil
from pathlib import Path

import orjson
import pytest

from cli import EXIT_FILE_ERROR, EXIT_INVALID_ARGS, main
from rules.config import CONFIG_FILENAME


def _copy_mini_app_fixture(root: Path) -> None:
    fixture_app = Path(__file__).parent / "fixtures" / "mini_app"
    shutil.copytree(fixture_app, root)


def test_cli_audit_writes_markdown_report(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    app_root = tmp_path / "app"
    _copy_mini_app_fixture(app_root)

    exit_code = main(["audit", str(app_root)])

    assert exit_code == 1
    report = app_root / "i18n-audit-report.md"
    assert report.exists()
    assert "dashboard.missing" in report.read_text(encoding="utf-8")
    out = capsys.readouterr().out
    assert "Markdown report written to:" in out
    assert "i18n Audit Summary" in out


def test_cli_audit_json_report(tmp_path: Path) -> None:
    app_root = tmp_path / "app"
    _copy_mini_app_fixture(app_root)

    exit_code = main(["audit", str(app_root), "--json", "-o", "out/report.md"])

    assert exit_code == 1
    data = orjson.loads((app_root / "out" / "report.json").read_bytes())
    assert data["summary"]["coverage_percentage"] == 80.0
    assert not (app_root / "out" / "report.md").exists()


def test_cli_audit_clean_project_exits_zero(tmp_path: Path) -> None:
    app_root = tmp_path / "app"
    _copy_mini_app_fixture(app_root)

    exit_code = main(["audit", str(app_root), "-p", "resources/js/Pages/Settings/Partials"])

    assert exit_code == 0


def test_cli_check_fails_on_missing_translation(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    app_root = tmp_path / "app"
    _copy_mini_app_fixture(app_root)

    exit_code = main(["check", str(app_root)])

    assert exit_code == 1
    assert "Check failed: 1 issues found (threshold: 0)" in capsys.readouterr().out
    assert not (app_root / "i18n-audit-report.md").exists()


def test_cli_check_threshold(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    app_root = tmp_path / "app"
    _copy_mini_app_fixture(app_root)

    assert main(["check", str(app_root), "-t", "1"]) == 0
    assert "Check passed: 1 issues within threshold (1)" in capsys.readouterr().out

    assert main(["check", str(app_root), "-t", "1", "--fail-on-hardcoded"]) == 1
    assert main(["check", str(app_root), "--no-fail-on-missing"]) == 0


def test_cli_list_keys_unique_text(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    app_root = tmp_path / "app"
    _copy_mini_app_fixture(app_root)

    exit_code = main(["list-keys", str(app_root)])

    assert exit_code == 0
    assert capsys.readouterr().out.splitlines() == [
        "common.cancel",
        "common.empty",
        "common.save",
        "dashboard.missing",
        "dashboard.title",
    ]


def test_cli_list_keys_all_occurrences(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    app_root = tmp_path / "app"
    _copy_mini_app_fixture(app_root)

    exit_code = main(["list-keys", str(app_root), "--no-unique", "--no-include-partials"])

    assert exit_code == 0
    assert capsys.readouterr().out.splitlines() == [
        "dashboard.title (resources/js/Pages/Dashboard.vue:3)",
        "common.save (resources/js/Pages/Dashboard.vue:5)",
        "common.save (resources/js/Pages/Dashboard.vue:5)",
        "dashboard.missing (resources/js/Pages/Dashboard.vue:14)",
        "common.empty (resources/js/Pages/Settings/Index.vue:3)",
    ]


def test_cli_list_keys_json_and_csv(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    app_root = tmp_path / "app"
    _copy_mini_app_fixture(app_root)

    assert main(["list-keys", str(app_root), "-f", "json"]) == 0
    assert orjson.loads(capsys.readouterr().out)[0] == "common.cancel"

    assert main(["list-keys", str(app_root), "-f", "csv", "--no-unique"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "key,file,line"
    assert lines[1] == "dashboard.title,resources/js/Pages/Dashboard.vue,3"


def test_cli_invalid_config_exits_two(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / CONFIG_FILENAME).write_text("bogus_key = true", encoding="utf-8")

    exit_code = main(["audit", str(tmp_path)])

    assert exit_code == EXIT_INVALID_ARGS
    assert "error:" in capsys.readouterr().err


def test_cli_unknown_command_exits_two() -> None:
    assert main(["translate"]) == EXIT_INVALID_ARGS


def test_cli_unwritable_report_exits_three(tmp_path: Path) -> None:
    app_root = tmp_path / "app"
    _copy_mini_app_fixture(app_root)
    (app_root / "blocked").write_text("not a directory", encoding="utf-8")

    exit_code = main(["audit", str(app_root), "-o", "blocked/report.md"])

    assert exit_code == EXIT_FILE_ERROR


def test_cli_config_file_is_honored(tmp_path: Path) -> None:
    app_root = tmp_path / "app"
    _copy_mini_app_fixture(app_root)
    (app_root / CONFIG_FILENAME).write_text(
        'output_file = "reports/i18n.md"\ninclude_partials = false\n', encoding="utf-8"
    )

    main(["audit", str(app_root)])

    text = (app_root / "reports" / "i18n.md").read_text(encoding="utf-8")
    assert "| Files Scanned | 2 |" in text


def test_cli_list_keys_short_unique_flag(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    app_root = tmp_path / "app"
    _copy_mini_app_fixture(app_root)

    exit_code = main(["list-keys", str(app_root), "--no-unique", "-u"])

    assert exit_code == 0
    assert capsys.readouterr().out.splitlines()[0] == "common.cancel"
