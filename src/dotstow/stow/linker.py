"""Conflict-aware GNU Stow invocation for one package at a time.

Each package goes through the same sequence:

1. ``stow -n -R`` simulation; any output mentioning "conflict" marks the
   package as conflicting.
2. On conflict, confirmation (skipped with ``--force``), then every real
   file stow named as a conflicting target is backed up and removed.
3. ``stow -R`` (restow) so repeated runs refresh links without duplicates.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from dotstow.core import process
from dotstow.core.constants import STOW_BIN
from dotstow.core.errors import BackupError, StowError
from dotstow.core.logging_setup import SUCCESS
from dotstow.stow.backup import BackupArchive

logger = logging.getLogger(__name__)

RESTOW = "-R"
DELETE = "-D"

# Conflict lines in stow 2.3 ("existing target is ...: PATH") and 2.4+
# ("cannot stow SRC over existing target PATH since ...").
_CONFLICT_PATTERNS = (
    re.compile(r"existing target is [^:]+: (?P<path>.+?)\s*$"),
    re.compile(r"over existing target (?P<path>.+?) since "),
)


@dataclass
class StowOutcome:
    """What happened to one package."""

    package: str
    status: str  # "stowed", "unstowed", "dry-run", "skipped", "failed"
    detail: str = ""
    backups: list[Path] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.status == "failed"


def conflict_paths(output: str) -> list[Path]:
    """Return the target-relative paths stow reported as conflicts, in order."""
    paths: list[Path] = []
    for line in output.splitlines():
        for pattern in _CONFLICT_PATTERNS:
            match = pattern.search(line)
            if match:
                path = Path(match.group("path").split(" => ", 1)[0])
                if path not in paths:
                    paths.append(path)
                break
    return paths


def _is_within(path: Path, parent: Path) -> bool:
    try:
        path.relative_to(parent)
    except ValueError:
        return False
    return True


class StowRunner:
    """Runs stow for packages of one configuration repository.

    *archive* is only needed when conflicting files may have to be cleared,
    so unstow-only callers can leave it out.
    """

    def __init__(
        self,
        dotfiles_dir: Path,
        target: Path,
        archive: BackupArchive | None = None,
        *,
        dry_run: bool = False,
        force: bool = False,
        confirm: Callable[[str], bool] | None = None,
        stow_available: bool = True,
    ) -> None:
        self.dotfiles_dir = dotfiles_dir
        self.target = target
        self.archive = archive
        self.dry_run = dry_run
        self.force = force
        self.confirm = confirm or (lambda _msg: False)
        self.stow_available = stow_available

    def planned_command(self, package: str, mode: str = RESTOW, *, simulate: bool = False) -> list[str]:
        args = [STOW_BIN]
        if simulate:
            args.append("-n")
        args += [mode, "-t", str(self.target), "-d", str(self.dotfiles_dir), package]
        return args

    def describe(self, package: str, mode: str = RESTOW) -> str:
        return f"stow {mode} -t '{self.target}' -d '{self.dotfiles_dir}' '{package}'"

    def _simulate_restow(self, package: str) -> str:
        return process.run_command(self.planned_command(package, RESTOW, simulate=True)).output

    def has_conflicts(self, package: str) -> bool:
        """Simulate a restow and report whether stow mentions a conflict."""
        return "conflict" in self._simulate_restow(package).lower()

    def conflicting_files(self, package: str, simulation: str | None = None) -> list[Path]:
        """Return the real files stow refuses to replace for *package*.

        Paths come from the ``stow -n -R`` output (*simulation*, or a fresh
        run), so stow's own ignore rules decide what counts. Symlinks are left
        alone, as are paths that resolve into the repository through a
        folded directory link.
        """
        if simulation is None:
            simulation = self._simulate_restow(package)
        repo_root = self.dotfiles_dir.resolve()
        conflicts: list[Path] = []
        for rel_path in conflict_paths(simulation):
            target_file = self.target / rel_path
            if target_file.is_symlink() or not target_file.is_file():
                continue
            if _is_within(target_file.resolve(), repo_root):
                continue
            conflicts.append(target_file)
        return conflicts

    def _print_simulation(self, args: list[str]) -> None:
        result = process.run_command(args)
        for line in result.output.splitlines():
            logger.info("    %s", line)

    def _clear_conflicts(self, package: str, simulation: str, outcome: StowOutcome) -> bool:
        conflicts = self.conflicting_files(package, simulation)
        if conflicts and self.archive is None:
            raise StowError(f"Cannot replace conflicting files of '{package}' without a backup archive")
        for target_file in conflicts:
            try:
                copy = self.archive.backup(target_file)
            except BackupError as exc:
                logger.error("%s; not stowing '%s'", exc, package)
                outcome.status = "failed"
                outcome.detail = str(exc)
                return False
            if copy is not None:
                outcome.backups.append(copy)
            if self.dry_run:
                logger.info("  [DRY-RUN] rm '%s'", target_file)
                continue
            try:
                target_file.unlink()
            except OSError as exc:
                logger.error("Could not remove '%s': %s", target_file, exc)
                outcome.status = "failed"
                outcome.detail = str(exc)
                return False
        return True

    def stow_package(self, package: str) -> StowOutcome:
        """Back up conflicts and restow *package* into the target.

        Raises:
            StowError: If stow reports conflicting files and no backup
                archive was given.
        """
        outcome = StowOutcome(package, "stowed")
        pkg_dir = self.dotfiles_dir / package
        if not pkg_dir.is_dir():
            logger.warning("Package directory not found: %s", pkg_dir)
            return StowOutcome(package, "failed", "package directory not found")

        logger.info("Stowing package '%s' to '%s'...", package, self.target)

        if not self.stow_available:
            logger.info("  [DRY-RUN] %s", self.describe(package))
            logger.warning("stow is not installed yet; skipping simulation for '%s'", package)
            return StowOutcome(package, "dry-run", "stow unavailable")

        simulation = self._simulate_restow(package)
        if "conflict" in simulation.lower():
            logger.warning("Potential conflicts detected for package '%s'", package)
            if not self.force and not self.confirm(
                f"Proceed with stowing '{package}' - may overwrite existing files?"
            ):
                logger.info("Skipping %s", package)
                return StowOutcome(package, "skipped", "conflicts not confirmed")
            if not self._clear_conflicts(package, simulation, outcome):
                return outcome

        if self.dry_run:
            logger.info("  [DRY-RUN] %s", self.describe(package))
            self._print_simulation(self.planned_command(package, RESTOW, simulate=True))
            outcome.status = "dry-run"
            return outcome

        result = process.run_command(self.planned_command(package, RESTOW))
        if not result.ok:
            logger.error("stow failed for '%s': %s", package, result.output or result.returncode)
            outcome.status = "failed"
            outcome.detail = result.output
            return outcome

        logger.log(SUCCESS, "Package '%s' stowed successfully", package)
        return outcome

    def unstow_package(self, package: str) -> StowOutcome:
        """Remove the links *package* placed in the target."""
        pkg_dir = self.dotfiles_dir / package
        if not pkg_dir.is_dir():
            logger.warning("Package directory not found: %s", pkg_dir)
            return StowOutcome(package, "failed", "package directory not found")

        logger.info("Unstowing package '%s' from '%s'...", package, self.target)
        if self.dry_run:
            logger.info("  [DRY-RUN] %s", self.describe(package, DELETE))
            self._print_simulation(self.planned_command(package, DELETE, simulate=True))
            return StowOutcome(package, "dry-run")

        result = process.run_command(self.planned_command(package, DELETE))
        if not result.ok:
            logger.warning(
                "stow unstow returned non-zero status (may be OK if symlinks already gone): %s",
                result.output or result.returncode,
            )
        logger.log(SUCCESS, "Package '%s' unstowed", package)
        return StowOutcome(package, "unstowed", result.output)


def same_file(a: Path, b: Path) -> bool:
    """Return True when *a* and *b* resolve to the same location."""
    return os.path.realpath(a) == os.path.realpath(b)


__all__ = ["DELETE", "RESTOW", "StowOutcome", "StowRunner", "conflict_paths", "same_file"]
