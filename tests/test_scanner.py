from __future__ import annotations

from pathlib import Path

import pytest

from dotstow.stow.scanner import detect_packages, has_stow_content, select_packages


def test_detect_packages_finds_marked_directories_sorted(dotfiles: Path) -> None:
    assert detect_packages(dotfiles) == ["kitty", "scripts", "zshrc"]


def test_detect_packages_skips_hidden_and_plain_directories(dotfiles: Path, make_file) -> None:
    make_file(dotfiles / ".git" / "config")
    make_file(dotfiles / ".hidden-pkg" / ".rc")
    make_file(dotfiles / "plain" / "config.txt")

    packages = detect_packages(dotfiles)

    assert ".git" not in packages
    assert ".hidden-pkg" not in packages
    assert "plain" not in packages
    assert "docs" not in packages


def test_detect_packages_missing_repository_is_empty(tmp_path: Path) -> None:
    assert detect_packages(tmp_path / "nope") == []


@pytest.mark.parametrize(
    "relative",
    [
        ".config/app/app.conf",
        ".local/bin/tool",
        "bin/tool",
        ".bashrc",
        "vscode/extensions.txt",
    ],
)
def test_has_stow_content_markers(tmp_path: Path, make_file, relative: str) -> None:
    pkg = tmp_path / "pkg"
    make_file(pkg / relative)
    assert has_stow_content(pkg)


def test_vscode_settings_marker(tmp_path: Path, make_file) -> None:
    pkg = tmp_path / "vscode"
    make_file(pkg / ".config" / "vscode" / "settings.json", "{}")
    assert has_stow_content(pkg)


def test_directory_without_markers_is_not_a_package(tmp_path: Path, make_file) -> None:
    pkg = tmp_path / "notes"
    make_file(pkg / "todo.md")
    make_file(pkg / "sub" / "more.md")
    assert not has_stow_content(pkg)


def test_select_packages_without_filter_returns_all() -> None:
    assert select_packages(["a", "b"], None) == ["a", "b"]


def test_select_packages_restricts_to_one() -> None:
    assert select_packages(["a", "b"], "b") == ["b"]


def test_select_packages_unknown_name_raises() -> None:
    with pytest.raises(LookupError, match="Package 'c' not found"):
        select_packages(["a", "b"], "c")
