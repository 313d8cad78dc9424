from __future__ import annotations

from pathlib import Path

import pytest

from dotstow.core.config import RunOptions
from dotstow.core.errors import DotstowError
from dotstow.flows.install import run_install
from dotstow.flows.uninstall import package_paths_filter, run_uninstall

CONFLICT_OUTPUT = "WARNING! stowing zshrc would cause conflicts:\n  * existing target is neither a link nor a directory: .zshrc"


def _options(dotfiles: Path, home: Path, backup_root: Path, **flags) -> RunOptions:
    return RunOptions(dotfiles_dir=dotfiles, target=home, backup_root=backup_root, home=home, **flags)


def _yes(message: str) -> bool:
    return True


def test_install_stows_every_package(dotfiles: Path, fake_home: Path, backup_root: Path, fake_commands, skip_bootstrap) -> None:
    report = run_install(_options(dotfiles, fake_home, backup_root), _yes)

    assert report.packages == ["kitty", "scripts", "zshrc"]
    assert [o.status for o in report.outcomes] == ["stowed", "stowed", "stowed"]
    assert not report.failed
    for pkg in report.packages:
        assert ["stow", "-R", "-t", str(fake_home), "-d", str(dotfiles), pkg] in fake_commands.calls


def test_install_declined_changes_nothing(dotfiles: Path, fake_home: Path, backup_root: Path, fake_commands, skip_bootstrap) -> None:
    report = run_install(_options(dotfiles, fake_home, backup_root), lambda message: False)

    assert report.cancelled
    assert report.outcomes == []
    assert not fake_commands.ran("stow")


def test_install_single_package_skips_bootstrap(dotfiles: Path, fake_home: Path, backup_root: Path, fake_commands) -> None:
    report = run_install(_options(dotfiles, fake_home, backup_root, package="kitty"), _yes)

    assert report.packages == ["kitty"]
    assert report.bootstrap == {}
    assert not fake_commands.ran("git", "clone")


def test_install_unknown_package(dotfiles: Path, fake_home: Path, backup_root: Path, fake_commands) -> None:
    with pytest.raises(DotstowError, match="Package 'nvim' not found"):
        run_install(_options(dotfiles, fake_home, backup_root, package="nvim"), _yes)


def test_install_empty_repository(fake_home: Path, backup_root: Path, fake_commands) -> None:
    repo = fake_home / "empty"
    repo.mkdir()
    with pytest.raises(DotstowError, match="No packages detected"):
        run_install(_options(repo, fake_home, backup_root), _yes)


def test_install_records_backups(
    dotfiles: Path, fake_home: Path, backup_root: Path, fake_commands, skip_bootstrap, make_file
) -> None:
    make_file(fake_home / ".zshrc", "old")
    fake_commands.respond(["stow", "-n", "-R", "-t", str(fake_home), "-d", str(dotfiles), "zshrc"], returncode=1, stderr=CONFLICT_OUTPUT)

    report = run_install(_options(dotfiles, fake_home, backup_root, force=True), _yes)

    assert len(report.backups) == 1
    assert report.backup_dir is not None
    assert (report.backup_dir / ".zshrc").read_text(encoding="utf-8") == "old"


def test_install_continues_after_failed_package(
    dotfiles: Path, fake_home: Path, backup_root: Path, fake_commands, skip_bootstrap
) -> None:
    fake_commands.respond(["stow", "-R", "-t", str(fake_home), "-d", str(dotfiles), "kitty"], returncode=1, stderr="boom")

    report = run_install(_options(dotfiles, fake_home, backup_root), _yes)

    assert report.failed
    assert [o.status for o in report.outcomes] == ["failed", "stowed", "stowed"]


def test_install_dry_run_bootstrap_plans_only(dotfiles: Path, fake_home: Path, backup_root: Path, fake_commands) -> None:
    report = run_install(_options(dotfiles, fake_home, backup_root, dry_run=True), _yes)

    assert set(report.bootstrap) == {"shell", "font", "prompt"}
    assert not fake_commands.ran("git", "clone")
    assert not fake_commands.ran("stow", "-R")
    assert not (fake_home / ".oh-my-zsh").exists()


def test_install_handles_vscode_package(
    dotfiles: Path, fake_home: Path, backup_root: Path, fake_commands, skip_bootstrap, make_file
) -> None:
    make_file(dotfiles / "vscode" / ".config" / "vscode" / "settings.json", "{}")

    report = run_install(_options(dotfiles, fake_home, backup_root, package="vscode"), _yes)

    assert report.outcomes[0].status == "stowed"
    assert (fake_home / ".config" / "Code" / "User" / "settings.json").is_symlink()
    assert not fake_commands.ran("stow", "-R")


def test_uninstall_unstows_every_package(dotfiles: Path, fake_home: Path, backup_root: Path, fake_commands) -> None:
    report = run_uninstall(_options(dotfiles, fake_home, backup_root), _yes)

    assert [o.status for o in report.outcomes] == ["unstowed", "unstowed", "unstowed"]
    assert ["stow", "-D", "-t", str(fake_home), "-d", str(dotfiles), "zshrc"] in fake_commands.calls
    assert report.restored_from is None


def test_uninstall_restore_last(dotfiles: Path, fake_home: Path, backup_root: Path, fake_commands, make_file) -> None:
    make_file(backup_root / "20240101_000000" / ".zshrc", "older")
    make_file(backup_root / "20240601_000000" / ".zshrc", "newest")

    report = run_uninstall(_options(dotfiles, fake_home, backup_root, restore_last=True), _yes)

    assert report.restored_from == backup_root / "20240601_000000"
    assert (fake_home / ".zshrc").read_text(encoding="utf-8") == "newest"


def test_uninstall_restore_last_without_backups(dotfiles: Path, fake_home: Path, backup_root: Path, fake_commands) -> None:
    with pytest.raises(DotstowError, match="No backups found"):
        run_uninstall(_options(dotfiles, fake_home, backup_root, restore_last=True), _yes)


def test_uninstall_restore_declined(dotfiles: Path, fake_home: Path, backup_root: Path, fake_commands, make_file) -> None:
    make_file(backup_root / "20240101_000000" / ".zshrc", "older")
    answers = iter([True, False])

    report = run_uninstall(_options(dotfiles, fake_home, backup_root, restore_last=True), lambda m: next(answers))

    assert report.restored_from is None
    assert not (fake_home / ".zshrc").exists()


@pytest.mark.parametrize("available_tools", [{"git"}])
def test_uninstall_requires_stow(dotfiles: Path, fake_home: Path, backup_root: Path, fake_commands) -> None:
    with pytest.raises(DotstowError, match="Cannot uninstall"):
        run_uninstall(_options(dotfiles, fake_home, backup_root), _yes)


def test_uninstall_single_package_restores_only_its_files(
    dotfiles: Path, fake_home: Path, backup_root: Path, fake_commands, make_file
) -> None:
    kitty_conf = fake_home / ".config" / "kitty" / "kitty.conf"
    kitty_conf.parent.mkdir(parents=True)
    kitty_conf.symlink_to(dotfiles / "kitty" / ".config" / "kitty" / "kitty.conf")
    make_file(backup_root / "20240101_000000" / ".zshrc", "old zshrc")
    make_file(backup_root / "20240101_000000" / ".config" / "kitty" / "kitty.conf", "old kitty")

    report = run_uninstall(_options(dotfiles, fake_home, backup_root, package="zshrc", restore_last=True), _yes)

    assert report.restored == [Path(".zshrc")]
    assert (fake_home / ".zshrc").read_text(encoding="utf-8") == "old zshrc"
    assert kitty_conf.is_symlink()


def test_uninstall_vscode_package_restores_editor_settings(
    dotfiles: Path, fake_home: Path, backup_root: Path, fake_commands, make_file
) -> None:
    make_file(dotfiles / "vscode" / ".config" / "vscode" / "settings.json", "{}")
    make_file(backup_root / "20240101_000000" / ".config" / "Code" / "User" / "settings.json", '{"old": 1}')
    make_file(backup_root / "20240101_000000" / ".zshrc", "old zshrc")

    report = run_uninstall(_options(dotfiles, fake_home, backup_root, package="vscode", restore_last=True), _yes)

    assert report.restored == [Path(".config/Code/User/settings.json")]
    assert not (fake_home / ".zshrc").exists()


def test_package_paths_filter_follows_target(dotfiles: Path, fake_home: Path) -> None:
    owned_home = package_paths_filter(dotfiles / "kitty", fake_home, fake_home)
    assert owned_home(Path(".config/kitty/kitty.conf"))
    assert not owned_home(Path(".zshrc"))

    owned_config = package_paths_filter(dotfiles / "kitty", fake_home / ".config", fake_home)
    assert not owned_config(Path(".config/kitty/kitty.conf"))
    assert not owned_config(Path(".zshrc"))
