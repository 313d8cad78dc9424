"""The uninstall flow: unstow packages, optionally restore the last backup."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from dotstow.core.config import RunOptions
from dotstow.core.constants import VSCODE_PACKAGE
from dotstow.core.errors import DotstowError
from dotstow.core.logging_setup import SUCCESS
from dotstow.flows.install import RULE
from dotstow.runtime.preflight import run_preflight
from dotstow.stow.backup import latest_backup, list_backups, restore_backup
from dotstow.stow.linker import DELETE, StowOutcome, StowRunner
from dotstow.stow.scanner import detect_packages, select_packages
from dotstow.stow.vscode import SETTINGS_TARGET, unlink_vscode_settings

logger = logging.getLogger(__name__)


@dataclass
class UninstallReport:
    packages: list[str] = field(default_factory=list)
    outcomes: list[StowOutcome] = field(default_factory=list)
    restored_from: Path | None = None
    restored: list[Path] = field(default_factory=list)
    cancelled: bool = False


def log_backup_listing(backup_root: Path) -> None:
    """Log the newest backup runs, or that none exist."""
    if not backup_root.is_dir():
        logger.info("No backups directory found: %s", backup_root)
        return
    logger.info("Available backups:")
    for entry in list_backups(backup_root):
        logger.info("  %s (%d files)", entry.name, entry.file_count)


def package_paths_filter(package_dir: Path, target: Path, home: Path) -> Callable[[Path], bool]:
    """Accept home-relative paths that *package_dir* would occupy under *target*."""

    def owned(rel_path: Path) -> bool:
        try:
            inner = (home / rel_path).relative_to(target)
        except ValueError:
            return False
        source = package_dir / inner
        return source.exists() or source.is_symlink()

    return owned


def _restore_last(options: RunOptions, confirm: Callable[[str], bool], report: UninstallReport) -> None:
    logger.info("Attempting to restore last backup...")
    latest = latest_backup(options.backup_root)
    if latest is None:
        raise DotstowError(f"No backups found in {options.backup_root}")

    logger.info("Latest backup: %s", latest)
    if not confirm(f"Restore from {latest}?"):
        logger.info("Skipping backup restoration")
        return
    include = None
    if options.package:
        logger.info("Restoring only files of package '%s'", options.package)
        owned = package_paths_filter(options.dotfiles_dir / options.package, options.target, options.home)
        if options.package == VSCODE_PACKAGE:
            include = lambda rel: rel == SETTINGS_TARGET or owned(rel)
        else:
            include = owned
    report.restored_from = latest
    report.restored = restore_backup(latest, options.home, dry_run=options.dry_run, include=include)


def run_uninstall(options: RunOptions, confirm: Callable[[str], bool]) -> UninstallReport:
    """Run the uninstall flow.

    Raises:
        PreflightError: If the host is unfit (root, no repository, no stow).
        DotstowError: If ``--package`` names an unknown package or
            ``--restore-last`` finds no backup.
    """
    logger.info(RULE)
    logger.info("Dotfiles Uninstall - GNU Stow-based")
    logger.info(RULE)
    logger.info("Dotfiles directory: %s", options.dotfiles_dir)
    logger.info("Stow target: %s", options.target)
    if options.dry_run:
        logger.info("MODE: DRY-RUN (no changes will be made)")
    if options.restore_last:
        logger.info("MODE: Will restore last backup after unstowing")
    logger.info("")

    run_preflight(
        options.dotfiles_dir,
        manager_order=options.settings.package_managers,
        allow_stow_install=False,
        dry_run=options.dry_run,
    )

    report = UninstallReport()
    logger.info("Detecting packages to unstow...")
    packages = detect_packages(options.dotfiles_dir)
    if not packages:
        logger.warning("No packages detected to unstow")
        return report
    try:
        report.packages = select_packages(packages, options.package)
    except LookupError as exc:
        raise DotstowError(str(exc)) from exc

    runner = StowRunner(options.dotfiles_dir, options.target, dry_run=options.dry_run)

    logger.info("Packages to unstow: %s", " ".join(report.packages))
    logger.info("")
    logger.info("Planned unstow commands:")
    for pkg in report.packages:
        logger.info("  %s", runner.describe(pkg, DELETE))
    logger.info("")

    if not confirm("Proceed with uninstallation?"):
        logger.info("Uninstallation cancelled.")
        report.cancelled = True
        return report

    for pkg in report.packages:
        report.outcomes.append(runner.unstow_package(pkg))
        if pkg == VSCODE_PACKAGE:
            unlink_vscode_settings(options.dotfiles_dir / pkg, options.home, dry_run=options.dry_run)

    logger.info("")
    if options.restore_last:
        _restore_last(options, confirm, report)
    else:
        logger.info("To restore a backup later, use: dotstow uninstall --restore-last")
        log_backup_listing(options.backup_root)

    logger.info("")
    logger.info(RULE)
    if options.dry_run:
        logger.log(SUCCESS, "DRY-RUN completed successfully")
    else:
        logger.log(SUCCESS, "Uninstallation completed successfully")
    logger.info(RULE)
    logger.info("")
    logger.info("Post-uninstall steps:")
    logger.info("  1. Restart your shell: exec zsh")
    logger.info("  2. Review your config files (may need manual cleanup)")
    logger.info("  3. Check backups at: %s", options.backup_root)
    logger.info("")
    if options.log_file:
        logger.info("Full log available at: %s", options.log_file)
    return report


__all__ = ["UninstallReport", "log_backup_listing", "package_paths_filter", "run_uninstall"]
