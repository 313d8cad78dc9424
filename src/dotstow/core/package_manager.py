"""System package manager detection and package installation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from dotstow.core import process
from dotstow.core.constants import DEFAULT_PACKAGE_MANAGERS
from dotstow.core.errors import PackageManagerError

logger = logging.getLogger(__name__)

# Managers that only operate on the system and therefore need sudo.
SUDO_MANAGERS = frozenset({"pacman", "apt", "dnf"})
AUR_HELPERS = frozenset({"paru", "yay"})

PKGLIST_NAME = "pkglist.txt"
AURLIST_NAME = "aurlist.txt"


def detect_package_manager(order: Iterable[str] = DEFAULT_PACKAGE_MANAGERS) -> str | None:
    """Return the first available manager from *order*, or None."""
    candidates = list(order)
    for name in candidates:
        if process.command_exists(name):
            return name
    logger.warning("No supported package manager detected: %s", ", ".join(candidates))
    return None


def install_commands(manager: str | None, package: str) -> list[list[str]]:
    """Return the command sequence that installs *package* with *manager*."""
    if manager in AUR_HELPERS:
        return [[manager, "-S", "--noconfirm", package]]
    if manager == "pacman":
        return [["sudo", "pacman", "-S", "--noconfirm", package]]
    if manager == "apt":
        return [
            ["sudo", "apt-get", "update"],
            ["sudo", "apt-get", "install", "-y", package],
        ]
    if manager == "dnf":
        return [["sudo", "dnf", "install", "-y", package]]
    raise PackageManagerError(
        f"Cannot install {package} automatically with package manager: {manager or 'none'}"
    )


def install_package(manager: str | None, package: str, *, dry_run: bool = False) -> bool:
    """Install *package*, returning True when every command succeeded.

    Raises:
        PackageManagerError: If *manager* is missing or unsupported.
    """
    commands = install_commands(manager, package)
    if manager in SUDO_MANAGERS:
        logger.info("Installing %s via %s requires sudo...", package, manager)
    else:
        logger.info("Installing %s via %s...", package, manager)

    for args in commands:
        if dry_run:
            logger.info("  [DRY-RUN] %s", " ".join(args))
            continue
        result = process.run_command(args, capture=False)
        if not result.ok:
            logger.debug("%s exited with %s", " ".join(args), result.returncode)
            return False
    return True


def dump_package_lists(output_dir: Path) -> list[Path]:
    """Write native and foreign pacman package lists into *output_dir*.

    Returns the files written; an empty list when pacman is unavailable.
    """
    if not process.command_exists("pacman"):
        logger.warning("pacman not found; nothing to export")
        return []

    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for flags, name, label in (
        ("-Qqe", PKGLIST_NAME, "native"),
        ("-Qqem", AURLIST_NAME, "AUR"),
    ):
        result = process.run_command(["pacman", flags])
        # pacman exits 1 with no output when a query matches nothing
        if not result.ok and result.stderr:
            raise PackageManagerError(f"pacman {flags} failed: {result.stderr or result.returncode}")
        dest = output_dir / name
        dest.write_text(result.stdout + "\n" if result.stdout else "", encoding="utf-8")
        logger.info("Saved %s packages to %s", label, dest)
        written.append(dest)
    return written


__all__ = [
    "AURLIST_NAME",
    "PKGLIST_NAME",
    "detect_package_manager",
    "dump_package_lists",
    "install_commands",
    "install_package",
]
