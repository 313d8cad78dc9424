"""Discovery of stow packages in the configuration repository."""

from __future__ import annotations

import logging
from pathlib import Path

from dotstow.core.constants import PACKAGE_BIN_DIR

logger = logging.getLogger(__name__)

# Editor package layouts recognized even without other markers.
VSCODE_MARKERS: tuple[str, ...] = (
    ".config/vscode/settings.json",
    "vscode/extensions.txt",
)


def has_stow_content(pkg_dir: Path) -> bool:
    """Return True when *pkg_dir* looks like something stow should link.

    Markers: a hidden subdirectory (``.config``, ``.local``, ...), a ``bin``
    directory, a hidden regular file at the top level, or one of the
    editor package layouts.
    """
    try:
        entries = list(pkg_dir.iterdir())
    except OSError:
        return False

    for entry in entries:
        hidden = entry.name.startswith(".")
        if entry.is_dir() and (hidden or entry.name == PACKAGE_BIN_DIR):
            return True
        if hidden and entry.is_file():
            return True

    return any((pkg_dir / marker).is_file() for marker in VSCODE_MARKERS)


def detect_packages(dotfiles_dir: Path) -> list[str]:
    """Return the names of stow packages under *dotfiles_dir*, sorted."""
    logger.info("Detecting packages in %s...", dotfiles_dir)
    if not dotfiles_dir.is_dir():
        return []

    packages: list[str] = []
    for pkg_dir in sorted(dotfiles_dir.iterdir(), key=lambda p: p.name):
        if pkg_dir.name.startswith(".") or not pkg_dir.is_dir():
            continue
        if has_stow_content(pkg_dir):
            packages.append(pkg_dir.name)
            logger.info("Detected package: %s", pkg_dir.name)
    return packages


def select_packages(packages: list[str], only: str | None) -> list[str]:
    """Restrict *packages* to *only* when given.

    Raises:
        LookupError: If *only* is not among the detected packages.
    """
    if only is None:
        return list(packages)
    if only not in packages:
        available = ", ".join(packages) or "none"
        raise LookupError(f"Package '{only}' not found. Detected packages: {available}")
    return [only]


__all__ = ["VSCODE_MARKERS", "detect_packages", "has_stow_content", "select_packages"]
