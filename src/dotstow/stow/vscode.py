"""Special handling for the ``vscode`` package.

VS Code keeps its settings under ``~/.config/Code/User`` rather than a
path stow can mirror, so the package's ``settings.json`` is linked there
directly and the optional extension list is installed through the
``code`` CLI.
"""

from __future__ import annotations

import logging
from pathlib import Path

from dotstow.core import process
from dotstow.core.errors import BackupError
from dotstow.core.logging_setup import SUCCESS
from dotstow.stow.backup import BackupArchive
from dotstow.stow.linker import StowOutcome, same_file

logger = logging.getLogger(__name__)

SETTINGS_CANDIDATES: tuple[str, ...] = (
    ".config/vscode/settings.json",
    ".config/Code/User/settings.json",
)
EXTENSIONS_CANDIDATES: tuple[str, ...] = (
    "vscode/extensions.txt",
    "extensions.txt",
)
SETTINGS_TARGET = Path(".config/Code/User/settings.json")


def _first_file(pkg_dir: Path, candidates: tuple[str, ...]) -> Path | None:
    for candidate in candidates:
        path = pkg_dir / candidate
        if path.is_file():
            return path
    return None


def find_settings(pkg_dir: Path) -> Path | None:
    return _first_file(pkg_dir, SETTINGS_CANDIDATES)


def find_extensions(pkg_dir: Path) -> Path | None:
    return _first_file(pkg_dir, EXTENSIONS_CANDIDATES)


def read_extensions(path: Path) -> list[str]:
    """Parse an extensions list: one ID per line, ``#`` starts a comment."""
    extensions: list[str] = []
    for raw in path.read_text(encoding="utf-8").splitlines():
        ext = "".join(raw.split("#", 1)[0].split())
        if ext:
            extensions.append(ext)
    return extensions


def _link_settings(
    source: Path, target: Path, archive: BackupArchive, *, dry_run: bool, outcome: StowOutcome
) -> bool:
    if dry_run:
        logger.info("  [DRY-RUN] mkdir -p '%s'", target.parent)
    else:
        target.parent.mkdir(parents=True, exist_ok=True)

    if target.is_symlink() or target.exists():
        if same_file(target, source):
            logger.info("Existing settings.json already points to repository file.")
            return True
        try:
            copy = archive.backup(target)
        except BackupError as exc:
            logger.error("%s; leaving %s in place", exc, target)
            outcome.status = "failed"
            outcome.detail = str(exc)
            return False
        if copy is not None:
            outcome.backups.append(copy)
        if dry_run:
            logger.info("  [DRY-RUN] rm -f '%s'", target)
        else:
            try:
                target.unlink()
            except OSError as exc:
                logger.error("Could not remove '%s': %s", target, exc)
                outcome.status = "failed"
                outcome.detail = str(exc)
                return False

    if dry_run:
        logger.info("  [DRY-RUN] ln -sfn '%s' '%s'", source, target)
        return True
    try:
        target.symlink_to(source.absolute())
    except OSError as exc:
        logger.error("Could not link '%s': %s", target, exc)
        outcome.status = "failed"
        outcome.detail = str(exc)
        return False
    logger.log(SUCCESS, "Linked %s -> %s", target, source)
    return True


def _install_extensions(extensions_file: Path, *, dry_run: bool) -> None:
    if not process.command_exists("code"):
        logger.warning("VS Code 'code' CLI not found. Extensions cannot be installed automatically.")
        return
    for ext in read_extensions(extensions_file):
        if dry_run:
            logger.info("  [DRY-RUN] code --install-extension %s", ext)
            continue
        logger.info("Installing extension: %s", ext)
        result = process.run_command(["code", "--install-extension", ext, "--force"])
        if result.ok:
            logger.log(SUCCESS, "Installed %s", ext)
        else:
            logger.warning("Failed to install %s (continuing)", ext)


def handle_vscode_package(
    pkg_dir: Path,
    home: Path,
    archive: BackupArchive,
    *,
    dry_run: bool = False,
    pkg_install: bool = False,
) -> StowOutcome:
    """Link VS Code settings and optionally install listed extensions."""
    logger.info("Handling VS Code package...")
    outcome = StowOutcome(pkg_dir.name, "dry-run" if dry_run else "stowed")

    settings = find_settings(pkg_dir)
    if settings is not None:
        if not _link_settings(settings, home / SETTINGS_TARGET, archive, dry_run=dry_run, outcome=outcome):
            return outcome
    else:
        logger.warning("No settings.json found in package. Skipping settings link.")

    extensions_file = find_extensions(pkg_dir)
    if extensions_file is None:
        logger.info("No extensions.txt found for VS Code.")
    elif not pkg_install:
        logger.info("Extensions list found at %s", extensions_file)
        logger.info("Skipping extension install (use --pkg-install yes to enable).")
    else:
        logger.info("Extensions list found at %s", extensions_file)
        _install_extensions(extensions_file, dry_run=dry_run)

    return outcome


def unlink_vscode_settings(pkg_dir: Path, home: Path, *, dry_run: bool = False) -> bool:
    """Remove the settings link when it points at this package. Returns True if removed."""
    target = home / SETTINGS_TARGET
    settings = find_settings(pkg_dir)
    if settings is None or not target.is_symlink() or not same_file(target, settings):
        return False
    if dry_run:
        logger.info("  [DRY-RUN] rm '%s'", target)
        return True
    target.unlink()
    logger.log(SUCCESS, "Removed settings link %s", target)
    return True


__all__ = [
    "SETTINGS_TARGET",
    "find_extensions",
    "find_settings",
    "handle_vscode_package",
    "read_extensions",
    "unlink_vscode_settings",
]
