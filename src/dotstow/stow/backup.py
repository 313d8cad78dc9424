"""Timestamped backups of files about to be overwritten, and their restore.

Layout::

    <backup root>/
        20240131_142501/
            .zshrc
            .config/kitty/kitty.conf

Each run writes into one ``YYYYMMDD_HHMMSS`` directory and mirrors the
backed-up path relative to the home directory, so a restore copies files
straight back to where they came from. Backup runs are never pruned.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from dotstow.core.constants import BACKUP_NAME_PATTERN, BACKUP_TIMESTAMP_FORMAT
from dotstow.core.errors import BackupError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackupEntry:
    """One backup run directory."""

    name: str
    path: Path
    file_count: int


def new_timestamp() -> str:
    return datetime.now().strftime(BACKUP_TIMESTAMP_FORMAT)


def relative_backup_path(path: Path, home: Path) -> Path:
    """Return where *path* lives inside a backup run.

    Paths under *home* keep their home-relative form; anything else keeps
    its absolute path with the anchor stripped.
    """
    absolute = Path(os.path.abspath(path))
    try:
        return absolute.relative_to(Path(os.path.abspath(home)))
    except ValueError:
        return Path(*absolute.parts[1:])


def _copy_verbatim(src: Path, dst: Path) -> None:
    dst.parent.mkdir(parents=True, exist_ok=True)
    if src.is_symlink() or not src.is_dir():
        if dst.is_symlink() or dst.is_file():
            dst.unlink()
        shutil.copy2(src, dst, follow_symlinks=False)
    else:
        shutil.copytree(src, dst, symlinks=True, dirs_exist_ok=True)


class BackupArchive:
    """Copies files into the backup run directory before they are replaced."""

    def __init__(
        self,
        root: Path,
        home: Path,
        *,
        timestamp: str | None = None,
        dry_run: bool = False,
    ) -> None:
        self.root = root
        self.home = home
        self.timestamp = timestamp or new_timestamp()
        self.dry_run = dry_run
        self.made: list[str] = []
        self._seen: dict[Path, Path] = {}

    @property
    def run_dir(self) -> Path:
        return self.root / self.timestamp

    def backup(self, path: Path) -> Path | None:
        """Copy *path* into the run directory and return the copy's location.

        Returns None when *path* does not exist. Nothing is written in
        dry-run mode.

        Raises:
            BackupError: If the copy fails.
        """
        if not (path.exists() or path.is_symlink()):
            return None

        source = Path(os.path.abspath(path))
        if source in self._seen:
            return self._seen[source]

        dest = self.run_dir / relative_backup_path(source, self.home)
        if self.dry_run:
            logger.info("  [DRY-RUN] backup '%s' -> '%s'", source, dest)
            return dest

        logger.info("Backing up '%s' to '%s'", source, dest)
        try:
            _copy_verbatim(source, dest)
        except OSError as exc:
            raise BackupError(f"Failed to back up {source}: {exc}") from exc

        self._seen[source] = dest
        self.made.append(f"{source} -> {dest}")
        return dest


def _run_dirs(root: Path) -> list[Path]:
    if not root.is_dir():
        return []
    runs = [p for p in root.iterdir() if p.is_dir() and BACKUP_NAME_PATTERN.match(p.name)]
    return sorted(runs, key=lambda p: p.name, reverse=True)


def _backup_files(backup_path: Path) -> list[Path]:
    return sorted(p for p in backup_path.rglob("*") if p.is_file() or p.is_symlink())


def list_backups(root: Path, limit: int = 10) -> list[BackupEntry]:
    """Return the newest backup runs under *root*, newest first."""
    return [
        BackupEntry(name=run.name, path=run, file_count=len(_backup_files(run)))
        for run in _run_dirs(root)[:limit]
    ]


def latest_backup(root: Path) -> Path | None:
    """Return the most recent backup run directory, or None."""
    runs = _run_dirs(root)
    return runs[0] if runs else None


def restore_backup(
    backup_path: Path,
    home: Path,
    *,
    dry_run: bool = False,
    include: Callable[[Path], bool] | None = None,
) -> list[Path]:
    """Copy every file in *backup_path* back to the same place under *home*.

    Existing files and links at the destination are replaced. When
    *include* is given, only entries whose home-relative path it accepts are
    restored. Returns the restored paths relative to *home*.

    Raises:
        BackupError: If *backup_path* is missing or a copy fails.
    """
    if not backup_path.is_dir():
        raise BackupError(f"Backup directory not found: {backup_path}")

    logger.info("Restoring from backup: %s", backup_path)
    restored: list[Path] = []
    for item in _backup_files(backup_path):
        rel_path = item.relative_to(backup_path)
        if include is not None and not include(rel_path):
            logger.debug("Not restoring %s: outside the selected package", rel_path)
            continue
        dest = home / rel_path
        logger.info("Restoring %s...", rel_path)
        if dry_run:
            logger.info("  [DRY-RUN] restore %s -> %s", item, dest)
            restored.append(rel_path)
            continue
        if dest.is_dir() and not dest.is_symlink():
            logger.warning("Skipping %s: a directory is in the way", dest)
            continue
        try:
            _copy_verbatim(item, dest)
        except OSError as exc:
            raise BackupError(f"Failed to restore {rel_path}: {exc}") from exc
        restored.append(rel_path)
    return restored


__all__ = [
    "BackupArchive",
    "BackupEntry",
    "latest_backup",
    "list_backups",
    "new_timestamp",
    "relative_backup_path",
    "restore_backup",
]
