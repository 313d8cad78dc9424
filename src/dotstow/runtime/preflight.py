"""Checks that must pass before any link is touched."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from dotstow.core import package_manager, process, system
from dotstow.core.constants import STOW_BIN
from dotstow.core.errors import PackageManagerError, PreflightError
from dotstow.core.logging_setup import SUCCESS

logger = logging.getLogger(__name__)


@dataclass
class PreflightResult:
    """Facts gathered during preflight."""

    package_manager: str | None
    stow_available: bool


def _ensure_stow(manager: str | None, *, install: bool, dry_run: bool) -> bool:
    if process.command_exists(STOW_BIN):
        logger.log(SUCCESS, "stow is installed")
        return True

    logger.warning("GNU stow is not installed.")
    if not install:
        raise PreflightError("stow is required. Please install it or use --pkg-install yes")

    logger.info("Attempting to install stow...")
    try:
        installed = package_manager.install_package(manager, STOW_BIN, dry_run=dry_run)
    except PackageManagerError as exc:
        raise PreflightError(f"{exc}. Please install stow manually.") from exc

    if dry_run:
        return False
    if not installed or not process.command_exists(STOW_BIN):
        raise PreflightError("Failed to install stow")
    logger.log(SUCCESS, "stow installed")
    return True


def run_preflight(
    dotfiles_dir: Path,
    *,
    manager_order: list[str],
    install_stow: bool = False,
    allow_stow_install: bool = True,
    dry_run: bool = False,
) -> PreflightResult:
    """Verify the host can run a stow flow.

    Order: reject root, require the repository, detect the package manager,
    require stow (installing it when *install_stow* is set and
    *allow_stow_install* permits).

    Returns:
        PreflightResult. ``stow_available`` is False only in dry-run mode
        when stow would have been installed.

    Raises:
        PreflightError: If a required precondition fails.
    """
    logger.info("Running preflight checks...")

    if system.is_root():
        raise PreflightError("This command must not be run as root. Exiting.")
    logger.log(SUCCESS, "Not running as root")

    if not dotfiles_dir.is_dir():
        raise PreflightError(f"Dotfiles directory not found: {dotfiles_dir}")
    logger.log(SUCCESS, "Dotfiles directory found: %s", dotfiles_dir)

    manager = package_manager.detect_package_manager(manager_order)
    logger.log(SUCCESS, "Package manager: %s", manager or "none")

    if not allow_stow_install and not process.command_exists(STOW_BIN):
        raise PreflightError("GNU stow is not installed. Cannot uninstall.")
    stow_available = _ensure_stow(manager, install=install_stow, dry_run=dry_run)

    return PreflightResult(package_manager=manager, stow_available=stow_available)


__all__ = ["PreflightResult", "run_preflight"]
