"""The install flow: scan, confirm, back up, restow, bootstrap, verify."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from dotstow.core.config import RunOptions
from dotstow.core.constants import VSCODE_PACKAGE
from dotstow.core.errors import DotstowError
from dotstow.core.logging_setup import SUCCESS
from dotstow.runtime import bootstrap
from dotstow.runtime.preflight import run_preflight
from dotstow.runtime.verify import verify_installation
from dotstow.stow.backup import BackupArchive
from dotstow.stow.linker import RESTOW, StowOutcome, StowRunner
from dotstow.stow.scanner import detect_packages, select_packages
from dotstow.stow.vscode import handle_vscode_package

logger = logging.getLogger(__name__)

RULE = "==============================================="


@dataclass
class InstallReport:
    """Everything an install run did, for the summary and exit status."""

    packages: list[str] = field(default_factory=list)
    outcomes: list[StowOutcome] = field(default_factory=list)
    bootstrap: dict[str, bool] = field(default_factory=dict)
    backups: list[str] = field(default_factory=list)
    backup_dir: Path | None = None
    cancelled: bool = False

    @property
    def failed(self) -> bool:
        return any(o.failed for o in self.outcomes)


def _scan(options: RunOptions) -> list[str]:
    packages = detect_packages(options.dotfiles_dir)
    if not packages:
        raise DotstowError(f"No packages detected to stow in {options.dotfiles_dir}")
    try:
        return select_packages(packages, options.package)
    except LookupError as exc:
        raise DotstowError(str(exc)) from exc


def _run_bootstrap(options: RunOptions, manager: str | None, report: InstallReport) -> None:
    logger.info("")
    if options.package:
        logger.info("Skipping additional components (--package %s given)", options.package)
        return
    logger.info("Setting up additional components...")
    settings = options.settings.bootstrap
    report.bootstrap["shell"] = bootstrap.setup_shell_framework(settings, options.home, dry_run=options.dry_run)
    report.bootstrap["font"] = bootstrap.ensure_font(
        settings, manager, pkg_install=options.pkg_install, dry_run=options.dry_run
    )
    report.bootstrap["prompt"] = bootstrap.ensure_prompt(
        settings, manager, options.home, pkg_install=options.pkg_install, dry_run=options.dry_run
    )


def _summarize(options: RunOptions, report: InstallReport) -> None:
    logger.info("")
    logger.info(RULE)
    if report.failed:
        failed = ", ".join(o.package for o in report.outcomes if o.failed)
        logger.error("Installation finished with errors in: %s", failed)
    elif options.dry_run:
        logger.log(SUCCESS, "DRY-RUN completed successfully")
    else:
        logger.log(SUCCESS, "Installation completed successfully")
    logger.info(RULE)

    if report.backups:
        logger.info("Backups created:")
        for entry in report.backups:
            logger.info("  - %s", entry)
        logger.info("Backups stored in: %s", report.backup_dir)

    logger.info("")
    logger.info("Post-installation steps:")
    logger.info("  1. Restart your shell: exec zsh")
    logger.info("  2. Reload Hyprland: hyprctl reload - if using Hyprland")
    logger.info("  3. Restart Kitty or open a new window")
    logger.info("")
    logger.info("To uninstall, run: dotstow uninstall")
    if options.log_file:
        logger.info("Full log available at: %s", options.log_file)


def run_install(options: RunOptions, confirm: Callable[[str], bool]) -> InstallReport:
    """Run the install flow.

    Args:
        options: Resolved paths and flags.
        confirm: Asks the user a yes/no question.

    Raises:
        PreflightError: If the host is unfit (root, no repository, no stow).
        DotstowError: If no package (or not the requested one) is found.
    """
    logger.info(RULE)
    logger.info("Dotfiles Installation - GNU Stow-based")
    logger.info(RULE)
    logger.info("Dotfiles directory: %s", options.dotfiles_dir)
    logger.info("Stow target: %s", options.target)
    if options.dry_run:
        logger.info("MODE: DRY-RUN - no changes will be made")
    if options.force:
        logger.info("MODE: FORCE - backups and overwrite enabled")
    logger.info("")

    preflight = run_preflight(
        options.dotfiles_dir,
        manager_order=options.settings.package_managers,
        install_stow=options.pkg_install,
        dry_run=options.dry_run,
    )

    report = InstallReport(packages=_scan(options))
    archive = BackupArchive(options.backup_root, options.home, dry_run=options.dry_run)
    runner = StowRunner(
        options.dotfiles_dir,
        options.target,
        archive,
        dry_run=options.dry_run,
        force=options.force,
        confirm=confirm,
        stow_available=preflight.stow_available,
    )

    logger.info("Packages to stow: %s", " ".join(report.packages))
    logger.info("")
    logger.info("Planned stow commands:")
    for pkg in report.packages:
        logger.info("  %s", runner.describe(pkg, RESTOW))
    logger.info("")

    if not confirm("Proceed with installation?"):
        logger.info("Installation cancelled.")
        report.cancelled = True
        return report

    for pkg in report.packages:
        if pkg == VSCODE_PACKAGE:
            outcome = handle_vscode_package(
                options.dotfiles_dir / pkg,
                options.home,
                archive,
                dry_run=options.dry_run,
                pkg_install=options.pkg_install,
            )
        else:
            outcome = runner.stow_package(pkg)
        report.outcomes.append(outcome)

    report.backups = list(archive.made)
    report.backup_dir = archive.run_dir

    _run_bootstrap(options, preflight.package_manager, report)

    if not options.dry_run:
        logger.info("")
        verify_installation(options.home, options.settings.verify_paths, options.settings.bootstrap.font_query)

    _summarize(options, report)
    return report


__all__ = ["InstallReport", "run_install"]
