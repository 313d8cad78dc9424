from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from dotstow.core import process
from dotstow.core.logging_setup import close_logging
from dotstow.core.process import CommandResult

ENV_VARS = ("DOTFILES_DIR", "STOW_TARGET", "DOTFILES_BACKUP_DIR", "DOTSTOW_CONFIG", "ZSH_CUSTOM")


@pytest.fixture(autouse=True)
def not_root(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("dotstow.core.system.is_root", lambda: False)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    close_logging()


@pytest.fixture()
def fake_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / ".local" / "share"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return home


def write_file(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture()
def dotfiles(fake_home: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A configuration repository with three stow packages and a docs folder."""
    repo = fake_home / "dev" / "dotfiles"
    write_file(repo / "zshrc" / ".zshrc", "export ZSH=$HOME/.oh-my-zsh\n")
    write_file(repo / "kitty" / ".config" / "kitty" / "kitty.conf", "font_size 11\n")
    write_file(repo / "scripts" / "bin" / "hello", "#!/bin/sh\necho hi\n")
    write_file(repo / "docs" / "notes.md", "not a package\n")
    write_file(repo / "README.md", "# dotfiles\n")
    monkeypatch.setenv("DOTFILES_DIR", str(repo))
    return repo


@pytest.fixture()
def backup_root(fake_home: Path) -> Path:
    return fake_home / ".local" / "share" / "dotfiles-backups"


class FakeCommands:
    """Records commands and answers them from a lookup of canned results."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.responses: dict[tuple[str, ...], CommandResult] = {}

    def respond(self, prefix: list[str], *, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.responses[tuple(prefix)] = CommandResult(list(prefix), returncode, stdout, stderr)

    def __call__(self, args, *, cwd=None, capture=True, timeout=None) -> CommandResult:
        self.calls.append(list(args))
        for size in range(len(args), 0, -1):
            hit = self.responses.get(tuple(args[:size]))
            if hit is not None:
                return CommandResult(list(args), hit.returncode, hit.stdout, hit.stderr)
        return CommandResult(list(args), 0, "", "")

    def ran(self, *prefix: str) -> bool:
        return any(tuple(call[: len(prefix)]) == prefix for call in self.calls)


@pytest.fixture()
def available_tools() -> set[str]:
    return {"stow", "git"}


@pytest.fixture()
def fake_commands(monkeypatch: pytest.MonkeyPatch, available_tools: set[str]) -> FakeCommands:
    """Replace every external program with a recorder."""
    fake = FakeCommands()
    monkeypatch.setattr(process, "run_command", fake)
    monkeypatch.setattr(process, "command_exists", lambda name: name in available_tools)
    return fake


@pytest.fixture()
def skip_bootstrap(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep install runs away from git clones, fonts and the user's shell."""
    monkeypatch.setattr("dotstow.flows.install._run_bootstrap", lambda options, manager, report: None)
    monkeypatch.setattr("dotstow.flows.install.verify_installation", lambda *args, **kwargs: [])


@pytest.fixture()
def make_file() -> Callable[..., Path]:
    return write_file
