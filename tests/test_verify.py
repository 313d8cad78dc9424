from __future__ import annotations

import logging
from pathlib import Path

import pytest

from dotstow.runtime.verify import classify_path, verify_installation

ZSH_CHECK = ["zsh", "-ic", "echo $ZSH"]


@pytest.fixture()
def installed_home(fake_home: Path, make_file) -> Path:
    source = make_file(fake_home / "dotfiles" / "zshrc" / ".zshrc", "# zsh\n")
    (fake_home / ".zshrc").symlink_to(source)
    make_file(fake_home / ".config" / "starship.toml", "format = '$all'\n")
    return fake_home


def test_classify_path_states(installed_home: Path) -> None:
    assert classify_path(installed_home / ".zshrc").state == "symlink"
    assert classify_path(installed_home / ".config" / "starship.toml").state == "file"
    assert classify_path(installed_home / ".config" / "kitty").state == "missing"


def test_dangling_link_counts_as_symlink(fake_home: Path) -> None:
    (fake_home / ".bashrc").symlink_to(fake_home / "gone")

    assert classify_path(fake_home / ".bashrc").state == "symlink"


def test_verify_reports_each_path(installed_home: Path, fake_commands) -> None:
    states = verify_installation(installed_home, [".zshrc", ".config/starship.toml", ".config/kitty"], "JetBrains")

    assert [(item.path.relative_to(installed_home), item.state) for item in states] == [
        (Path(".zshrc"), "symlink"),
        (Path(".config/starship.toml"), "file"),
        (Path(".config/kitty"), "missing"),
    ]


def test_zsh_not_started_when_missing(installed_home: Path, fake_commands) -> None:
    verify_installation(installed_home, [".zshrc"], "JetBrains")

    assert ZSH_CHECK not in fake_commands.calls


@pytest.mark.parametrize("available_tools", [{"stow", "git", "zsh"}])
def test_zsh_integration_checked_when_available(
    installed_home: Path, fake_commands, caplog: pytest.LogCaptureFixture
) -> None:
    fake_commands.respond(ZSH_CHECK, stdout="/home/user/.oh-my-zsh\n")

    with caplog.at_level(logging.INFO):
        verify_installation(installed_home, [".zshrc"], "JetBrains")

    assert ZSH_CHECK in fake_commands.calls
    assert "Zsh and Oh My Zsh integration OK" in caplog.text


@pytest.mark.parametrize("available_tools", [{"stow", "git", "zsh"}])
def test_zsh_without_framework_warns(installed_home: Path, fake_commands, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO):
        verify_installation(installed_home, [".zshrc"], "JetBrains")

    assert "Zsh does not load Oh My Zsh yet" in caplog.text


def test_missing_font_warns(installed_home: Path, fake_commands, caplog: pytest.LogCaptureFixture) -> None:
    fake_commands.respond(["fc-list"], stdout="DejaVu Sans Mono:style=Book\n")

    with caplog.at_level(logging.INFO):
        verify_installation(installed_home, [], "JetBrains")

    assert ["fc-list"] in fake_commands.calls
    assert "JetBrains Mono Nerd Font not found" in caplog.text


def test_installed_font_reported(installed_home: Path, fake_commands, caplog: pytest.LogCaptureFixture) -> None:
    fake_commands.respond(["fc-list"], stdout="JetBrainsMono Nerd Font:style=Regular\n")

    with caplog.at_level(logging.INFO):
        verify_installation(installed_home, [], "JetBrainsMono Nerd")

    assert "JetBrains Mono Nerd Font is installed" in caplog.text
    assert "not found" not in caplog.text
