from __future__ import annotations

import os
from pathlib import Path

import pytest

from scan.files import _build_gitignore_matcher, find_source_files, relative_path


def _touch(root: Path, rel: str) -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("<template></template>\n", encoding="utf-8")


def _found(directory: Path, **kwargs: object) -> list[str]:
    return [
        path.relative_to(directory).as_posix()
        for path in find_source_files(directory, **kwargs)  # type: ignore[arg-type]
    ]


def test_results_are_sorted_and_filtered_by_pattern(tmp_path: Path) -> None:
    for rel in ["Zeta.vue", "Alpha.vue", "Users/Edit.vue", "notes.md"]:
        _touch(tmp_path, rel)

    assert _found(tmp_path) == ["Alpha.vue", "Users/Edit.vue", "Zeta.vue"]


def test_partials_can_be_excluded(tmp_path: Path) -> None:
    for rel in ["Settings/Index.vue", "Settings/Partials/Form.vue", "Partials.vue"]:
        _touch(tmp_path, rel)

    with_partials = _found(tmp_path)
    without_partials = _found(tmp_path, include_partials=False)

    assert "Settings/Partials/Form.vue" in with_partials
    assert without_partials == ["Partials.vue", "Settings/Index.vue"]


def test_custom_partials_dir(tmp_path: Path) -> None:
    _touch(tmp_path, "Settings/Components/Form.vue")
    _touch(tmp_path, "Settings/Index.vue")

    found = _found(tmp_path, include_partials=False, partials_dir="Components")

    assert found == ["Settings/Index.vue"]


def test_exclude_globs(tmp_path: Path) -> None:
    for rel in ["Page.vue", "Page.test.vue", "node_modules/pkg/Widget.vue"]:
        _touch(tmp_path, rel)

    found = _found(
        tmp_path, exclude_patterns=["**/node_modules/**", "**/*.test.vue"]
    )

    assert found == ["Page.vue"]


def test_missing_directory_yields_nothing(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    assert _found(tmp_path / "missing") == []
    assert "Pages directory does not exist" in caplog.text


def test_gitignore_is_honored_when_requested(tmp_path: Path) -> None:
    pages = tmp_path / "Pages"
    _touch(pages, "Kept.vue")
    _touch(pages, "generated/Built.vue")
    (tmp_path / ".gitignore").write_text("generated/\n", encoding="utf-8")

    assert _found(pages) == ["Kept.vue", "generated/Built.vue"]
    assert _found(pages, gitignore_root=tmp_path) == ["Kept.vue"]


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_find_source_files_skips_symlinked_dirs(tmp_path: Path) -> None:
    pages = tmp_path / "pages"
    _touch(pages, "Home.vue")

    external_root = tmp_path / "external"
    _touch(external_root, "Leak.vue")

    (pages / "linked").symlink_to(external_root, target_is_directory=True)

    results = _found(pages)

    assert "Home.vue" in results
    assert "linked/Leak.vue" not in results


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_symlinked_gitignore_is_ignored(tmp_path: Path) -> None:
    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "outside.gitignore").write_text("*.vue\n", encoding="utf-8")

    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    (repo_root / ".gitignore").symlink_to(external_root / "outside.gitignore")

    assert _build_gitignore_matcher(repo_root) is None


def test_relative_path_uses_forward_slashes(tmp_path: Path) -> None:
    path = tmp_path / "resources" / "js" / "Pages" / "Home.vue"

    assert relative_path(path, tmp_path) == "resources/js/Pages/Home.vue"
    assert relative_path(str(path), tmp_path) == "resources/js/Pages/Home.vue"
